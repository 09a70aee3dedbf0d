from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True, order=True)
class IndicatorId:
    """
    Stable dotted identifier of a catalog indicator (`group.name`, for example `ma.sma`).

    Related: .indicator_def, tickquant.contexts.indicators.application.services.indicator_catalog
    """

    value: str

    def __post_init__(self) -> None:
        """
        Normalize and validate the identifier.

        Args:
            None.
        Returns:
            None.
        Assumptions:
            The identifier is provided as text and is stable once created.
        Raises:
            ValueError: If the normalized identifier is empty or contains unsupported symbols.
        Side Effects:
            Normalizes `value` by stripping spaces and converting to lowercase.
        """
        normalized = self.value.strip().lower()
        object.__setattr__(self, "value", normalized)
        if not normalized:
            raise ValueError("IndicatorId must be non-empty")

        compact = normalized.replace("_", "").replace(".", "")
        if not compact.isalnum():
            raise ValueError("IndicatorId may contain only letters, digits, underscore, and dot")

    def __str__(self) -> str:
        return self.value
