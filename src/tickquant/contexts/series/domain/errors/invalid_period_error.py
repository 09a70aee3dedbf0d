from __future__ import annotations

from tickquant.platform.errors import TickQuantError
from tickquant.shared_kernel.primitives import Period


class InvalidPeriodError(TickQuantError):
    """
    Raised when a series transform is asked for a non-coarsening period pair.

    Related:
      - src/tickquant/contexts/series/domain/services/series_transform.py
      - src/tickquant/shared_kernel/primitives/period.py
    """

    code = "invalid_period"

    def __init__(self, *, from_period: Period, to_period: Period, reason: str) -> None:
        """
        Build deterministic message and details for one rejected period pair.

        Args:
            from_period: Source period requested by caller.
            to_period: Target period requested by caller.
            reason: Short human-readable rejection reason.
        Returns:
            None.
        Assumptions:
            Periods are valid enum members.
        Raises:
            None.
        Side Effects:
            None.
        """
        self.from_period = from_period
        self.to_period = to_period
        super().__init__(
            f"cannot transform {from_period.code} -> {to_period.code}: {reason}",
            details={"from_period": from_period.code, "to_period": to_period.code},
        )
