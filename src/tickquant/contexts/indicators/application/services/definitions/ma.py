"""
Moving-average group: `ma.sma`, `ma.wma` (simple window), `ma.ema`, `ma.rma` (smoothing seeded
with the window SMA) and `ma.kama` (adaptive smoothing).

Related: tickquant.contexts.indicators.application.services.indicators
"""

from __future__ import annotations

import math
from typing import Sequence

from tickquant.contexts.indicators.application.services.indicators import (
    MovingAverageIndicator,
    SimpleIndicator,
)
from tickquant.contexts.indicators.domain.entities import IndicatorDef, IndicatorId
from tickquant.contexts.indicators.domain.errors import InvalidParameterError
from tickquant.shared_kernel.primitives import Candle, CandleSeries

from ._params import window_param


def defs() -> tuple[IndicatorDef, ...]:
    """
    Return moving-average definitions sorted by indicator id.

    Args:
        None.
    Returns:
        tuple[IndicatorDef, ...]: Immutable ordered definitions.
    Assumptions:
        Every moving average reads candle close.
    Raises:
        ValueError: If any definition violates domain invariants.
    Side Effects:
        None.
    """
    return (
        IndicatorDef(
            indicator_id=IndicatorId("ma.ema"),
            title="Exponential Moving Average",
            params=(window_param(default=20),),
            factory=ema,
        ),
        IndicatorDef(
            indicator_id=IndicatorId("ma.kama"),
            title="Kaufman Adaptive Moving Average",
            params=(
                window_param(default=10),
                window_param(name="fast", default=2),
                window_param(name="slow", default=30),
            ),
            factory=kama,
        ),
        IndicatorDef(
            indicator_id=IndicatorId("ma.rma"),
            title="Wilder Running Moving Average",
            params=(window_param(default=14),),
            factory=rma,
        ),
        IndicatorDef(
            indicator_id=IndicatorId("ma.sma"),
            title="Simple Moving Average",
            params=(window_param(default=20),),
            factory=sma,
        ),
        IndicatorDef(
            indicator_id=IndicatorId("ma.wma"),
            title="Weighted Moving Average",
            params=(window_param(default=20),),
            factory=wma,
        ),
    )


def sma(series: CandleSeries, window: int) -> SimpleIndicator:
    return SimpleIndicator(series, period_count=window, compute=_mean_close, name="ma.sma")


def wma(series: CandleSeries, window: int) -> SimpleIndicator:
    denominator = window * (window + 1) / 2.0

    def weighted(candles: Sequence[Candle]) -> float:
        total = math.fsum((weight + 1) * candle.close for weight, candle in enumerate(candles))
        return total / denominator

    return SimpleIndicator(series, period_count=window, compute=weighted, name="ma.wma")


def ema(series: CandleSeries, window: int) -> MovingAverageIndicator:
    return _smoothed_close(series, window=window, alpha=2.0 / (window + 1.0), name="ma.ema")


def rma(series: CandleSeries, window: int) -> MovingAverageIndicator:
    return _smoothed_close(series, window=window, alpha=1.0 / window, name="ma.rma")


def kama(series: CandleSeries, window: int, fast: int, slow: int) -> MovingAverageIndicator:
    """
    Kaufman adaptive moving average over close.

    Args:
        series: Bound input series.
        window: Efficiency-ratio lookback.
        fast: Fast EMA period bounding the smoothing constant.
        slow: Slow EMA period bounding the smoothing constant.
    Returns:
        MovingAverageIndicator: Seeded with close at index `window`.
    Assumptions:
        Zero path volatility gives efficiency ratio 0 (slowest smoothing).
    Raises:
        InvalidParameterError: If `fast >= slow`.
    Side Effects:
        None.
    """
    if fast >= slow:
        raise InvalidParameterError(
            f"ma.kama requires fast < slow, got fast={fast} slow={slow}",
            details={"fast": fast, "slow": slow},
        )
    fast_sc = 2.0 / (fast + 1.0)
    slow_sc = 2.0 / (slow + 1.0)
    candles = series.candles

    def smoothing(index: int) -> float | None:
        if index < window:
            return None
        change = abs(candles[index].close - candles[index - window].close)
        volatility = math.fsum(
            abs(candles[j].close - candles[j - 1].close)
            for j in range(index - window + 1, index + 1)
        )
        efficiency = change / volatility if volatility > 0 else 0.0
        return (efficiency * (fast_sc - slow_sc) + slow_sc) ** 2

    return MovingAverageIndicator(
        series,
        seed_index=window,
        seed_value=lambda index: candles[index].close,
        raw_value=lambda index: candles[index].close,
        alpha=smoothing,
        name="ma.kama",
    )


def _smoothed_close(
    series: CandleSeries,
    *,
    window: int,
    alpha: float,
    name: str,
) -> MovingAverageIndicator:
    candles = series.candles
    return MovingAverageIndicator(
        series,
        seed_index=window - 1,
        seed_value=lambda index: _mean_close(candles[index - window + 1 : index + 1]),
        raw_value=lambda index: candles[index].close,
        alpha=alpha,
        name=name,
    )


def _mean_close(candles: Sequence[Candle]) -> float:
    return math.fsum(candle.close for candle in candles) / len(candles)
