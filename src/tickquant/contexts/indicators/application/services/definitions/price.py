"""
Price field indicators (`price.open`, ..., `price.volume`): window-1 simple indicators.
"""

from __future__ import annotations

from typing import Callable

from tickquant.contexts.indicators.application.services.indicators import SimpleIndicator
from tickquant.contexts.indicators.domain.entities import IndicatorDef, IndicatorId
from tickquant.contexts.indicators.domain.errors import InvalidParameterError
from tickquant.shared_kernel.primitives import Candle, CandleSeries

FIELDS = ("open", "high", "low", "close", "volume")


def defs() -> tuple[IndicatorDef, ...]:
    return tuple(
        IndicatorDef(
            indicator_id=IndicatorId(f"price.{name}"),
            title=f"Candle {name}",
            params=(),
            factory=_field_factory(name),
        )
        for name in FIELDS
    )


def field(series: CandleSeries, name: str) -> SimpleIndicator:
    """Tick source reading one raw candle field at every index."""
    if name not in FIELDS:
        raise InvalidParameterError(
            f"unknown candle field: {name!r}",
            details={"field": name, "known": list(FIELDS)},
        )

    def read(window: tuple[Candle, ...]) -> float:
        return float(getattr(window[-1], name))

    return SimpleIndicator(series, period_count=1, compute=read, name=f"price.{name}")


def _field_factory(name: str) -> Callable[[CandleSeries], SimpleIndicator]:
    def factory(series: CandleSeries) -> SimpleIndicator:
        return field(series, name)

    return factory
