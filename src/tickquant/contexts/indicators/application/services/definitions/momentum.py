"""
Momentum group: `momentum.roc`, `momentum.rsi`, `momentum.macd`, `momentum.macd_signal`.

Related: tickquant.contexts.indicators.application.services.definitions.ma,
  tickquant.contexts.indicators.application.services.operations
"""

from __future__ import annotations

import math
from typing import Callable, Sequence

from tickquant.contexts.indicators.application.ports.sources import TickSource
from tickquant.contexts.indicators.application.services.indicators import (
    MovingAverageIndicator,
    SimpleIndicator,
)
from tickquant.contexts.indicators.application.services.operations import (
    DerivedSeries,
    combine,
)
from tickquant.contexts.indicators.domain.entities import IndicatorDef, IndicatorId
from tickquant.contexts.indicators.domain.errors import InvalidParameterError
from tickquant.shared_kernel.primitives import Candle, CandleSeries

from ._params import window_param
from .ma import ema


def defs() -> tuple[IndicatorDef, ...]:
    fast = window_param(name="fast", default=12)
    slow = window_param(name="slow", default=26)
    return (
        IndicatorDef(
            indicator_id=IndicatorId("momentum.macd"),
            title="MACD line",
            params=(fast, slow),
            factory=macd,
        ),
        IndicatorDef(
            indicator_id=IndicatorId("momentum.macd_signal"),
            title="MACD signal line",
            params=(fast, slow, window_param(name="signal", default=9)),
            factory=macd_signal,
        ),
        IndicatorDef(
            indicator_id=IndicatorId("momentum.roc"),
            title="Rate of Change (percent)",
            params=(window_param(default=9),),
            factory=roc,
        ),
        IndicatorDef(
            indicator_id=IndicatorId("momentum.rsi"),
            title="Relative Strength Index (Wilder)",
            params=(window_param(default=14),),
            factory=rsi,
        ),
    )


def roc(series: CandleSeries, window: int) -> SimpleIndicator:
    def rate(candles: Sequence[Candle]) -> float | None:
        base = candles[0].close
        if base == 0:
            return None
        return (candles[-1].close - base) / base * 100.0

    return SimpleIndicator(series, period_count=window + 1, compute=rate, name="momentum.roc")


def rsi(series: CandleSeries, window: int) -> DerivedSeries[float]:
    """
    Wilder RSI: `100 - 100 / (1 + avg_gain / avg_loss)` with RMA-smoothed gains and losses.

    Args:
        series: Bound input series.
        window: Smoothing window.
    Returns:
        DerivedSeries[float]: First value at index `window`; `100` when average loss is zero
            and average gain is positive, `50` when both are zero.
    Assumptions:
        Averages are seeded with the plain mean of the first `window` close changes.
    Raises:
        None.
    Side Effects:
        None.
    """
    candles = series.candles

    def change(index: int) -> float:
        return candles[index].close - candles[index - 1].close

    def gain(index: int) -> float:
        return max(change(index), 0.0)

    def loss(index: int) -> float:
        return max(-change(index), 0.0)

    def seeded(raw: Callable[[int], float]) -> MovingAverageIndicator:
        return MovingAverageIndicator(
            series,
            seed_index=window,
            seed_value=lambda index: math.fsum(raw(j) for j in range(1, index + 1)) / window,
            raw_value=raw,
            alpha=1.0 / window,
            name="momentum.rsi.avg",
        )

    def strength(avg_gain: float, avg_loss: float) -> float:
        if avg_loss == 0:
            return 50.0 if avg_gain == 0 else 100.0
        return 100.0 - 100.0 / (1.0 + avg_gain / avg_loss)

    return combine(strength, seeded(gain), seeded(loss))


def macd(series: CandleSeries, fast: int, slow: int) -> DerivedSeries[float]:
    _require_fast_below_slow(fast=fast, slow=slow)

    def spread(fast_value: float, slow_value: float) -> float:
        return fast_value - slow_value

    return combine(spread, ema(series, fast), ema(series, slow))


def macd_signal(
    series: CandleSeries,
    fast: int,
    slow: int,
    signal: int,
) -> MovingAverageIndicator:
    """
    EMA of the MACD line, seeded with the mean of its first `signal` values.

    Args:
        series: Bound input series.
        fast: Fast EMA window.
        slow: Slow EMA window.
        signal: Signal EMA window.
    Returns:
        MovingAverageIndicator: First value at index `slow - 1 + signal - 1`.
    Assumptions:
        MACD line is present from index `slow - 1` onwards.
    Raises:
        InvalidParameterError: If `fast >= slow`.
    Side Effects:
        None.
    """
    line: TickSource[float] = macd(series, fast, slow)
    seed_index = slow - 1 + signal - 1

    def seed_value(index: int) -> float | None:
        window_values = [line.value_at(j).value for j in range(index - signal + 1, index + 1)]
        if any(value is None for value in window_values):
            return None
        return math.fsum(window_values) / signal  # type: ignore[arg-type]

    return MovingAverageIndicator(
        series,
        seed_index=seed_index,
        seed_value=seed_value,
        raw_value=lambda index: line.value_at(index).value,
        alpha=2.0 / (signal + 1.0),
        name="momentum.macd_signal",
    )


def _require_fast_below_slow(*, fast: int, slow: int) -> None:
    if fast >= slow:
        raise InvalidParameterError(
            f"momentum.macd requires fast < slow, got fast={fast} slow={slow}",
            details={"fast": fast, "slow": slow},
        )
