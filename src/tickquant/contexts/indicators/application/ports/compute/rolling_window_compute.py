from __future__ import annotations

from typing import Protocol, Sequence


class RollingWindowCompute(Protocol):
    """
    Port for bulk rolling-window statistics over optional-valued sequences.

    Related:
      - src/tickquant/contexts/indicators/adapters/outbound/compute_numba/engine.py
      - src/tickquant/contexts/indicators/application/services/operations.py
    """

    def rolling_mean(
        self,
        values: Sequence[float | None],
        window: int,
    ) -> list[float | None]:
        """
        Compute trailing mean for every index.

        Args:
            values: Source values; `None` marks absence.
            window: Strictly positive window length.
        Returns:
            list[float | None]: Same-length result; absent where the window is incomplete or
                contains an absent value.
        Assumptions:
            Caller validated `window`.
        Raises:
            None.
        Side Effects:
            None.
        """
        ...

    def rolling_mean_pstdev(
        self,
        values: Sequence[float | None],
        window: int,
    ) -> tuple[list[float | None], list[float | None]]:
        """
        Compute trailing mean and population standard deviation in one pass.

        Args:
            values: Source values; `None` marks absence.
            window: Strictly positive window length.
        Returns:
            tuple[list[float | None], list[float | None]]: `(means, stddevs)` with the same
                absence rules as `rolling_mean`.
        Assumptions:
            Caller validated `window`.
        Raises:
            None.
        Side Effects:
            None.
        """
        ...
