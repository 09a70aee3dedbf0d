from __future__ import annotations

from tickquant.platform.errors import TickQuantError


class UnknownIndicatorError(TickQuantError):
    """
    Raised when an indicator id is not present in the catalog.

    Related: tickquant.contexts.indicators.application.services.indicator_catalog
    """

    code = "unknown_indicator"

    def __init__(self, *, indicator_id: str) -> None:
        self.indicator_id = indicator_id
        super().__init__(
            f"unknown indicator_id: {indicator_id}",
            details={"indicator_id": indicator_id},
        )
