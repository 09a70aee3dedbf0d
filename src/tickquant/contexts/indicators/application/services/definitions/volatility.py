"""
Volatility group: `volatility.true_range`, `volatility.atr`, `volatility.stddev`.
"""

from __future__ import annotations

import math
from typing import Sequence

from tickquant.contexts.indicators.application.services.indicators import (
    MovingAverageIndicator,
    SimpleIndicator,
)
from tickquant.contexts.indicators.domain.entities import IndicatorDef, IndicatorId
from tickquant.shared_kernel.primitives import Candle, CandleSeries, opt_pstdev

from ._params import window_param


def defs() -> tuple[IndicatorDef, ...]:
    return (
        IndicatorDef(
            indicator_id=IndicatorId("volatility.atr"),
            title="Average True Range (Wilder)",
            params=(window_param(default=14),),
            factory=atr,
        ),
        IndicatorDef(
            indicator_id=IndicatorId("volatility.stddev"),
            title="Population standard deviation of close",
            params=(window_param(default=20),),
            factory=stddev,
        ),
        IndicatorDef(
            indicator_id=IndicatorId("volatility.true_range"),
            title="True Range",
            params=(),
            factory=true_range,
        ),
    )


def true_range(series: CandleSeries) -> SimpleIndicator:
    return SimpleIndicator(
        series,
        period_count=2,
        compute=_true_range_of_pair,
        name="volatility.true_range",
    )


def atr(series: CandleSeries, window: int) -> MovingAverageIndicator:
    """
    Wilder ATR: RMA of true range seeded with the mean of the first `window` true ranges.

    True range starts at index 1, so the first ATR value is at index `window`.
    """
    candles = series.candles

    def tr(index: int) -> float:
        return _true_range_of_pair(candles[index - 1 : index + 1])

    return MovingAverageIndicator(
        series,
        seed_index=window,
        seed_value=lambda index: math.fsum(tr(j) for j in range(1, index + 1)) / window,
        raw_value=tr,
        alpha=1.0 / window,
        name="volatility.atr",
    )


def stddev(series: CandleSeries, window: int) -> SimpleIndicator:
    def population(candles: Sequence[Candle]) -> float | None:
        return opt_pstdev([candle.close for candle in candles])

    return SimpleIndicator(
        series,
        period_count=window,
        compute=population,
        name="volatility.stddev",
    )


def _true_range_of_pair(candles: Sequence[Candle]) -> float:
    previous_close = candles[0].close
    current = candles[1]
    return max(
        current.high - current.low,
        abs(current.high - previous_close),
        abs(current.low - previous_close),
    )
