"""
Volume group: `volume.obv` and `volume.vwap` (cumulative recurrences).
"""

from __future__ import annotations

from tickquant.contexts.indicators.application.services.indicators import CumulativeIndicator
from tickquant.contexts.indicators.application.services.operations import (
    DerivedSeries,
    combine,
)
from tickquant.contexts.indicators.domain.entities import IndicatorDef, IndicatorId
from tickquant.shared_kernel.primitives import CandleSeries, opt_add, opt_div


def defs() -> tuple[IndicatorDef, ...]:
    return (
        IndicatorDef(
            indicator_id=IndicatorId("volume.obv"),
            title="On-Balance Volume",
            params=(),
            factory=obv,
        ),
        IndicatorDef(
            indicator_id=IndicatorId("volume.vwap"),
            title="Cumulative Volume-Weighted Average Price",
            params=(),
            factory=vwap,
        ),
    )


def obv(series: CandleSeries) -> CumulativeIndicator:
    candles = series.candles

    def step(previous: float | None, index: int) -> float | None:
        close = candles[index].close
        prior_close = candles[index - 1].close
        if close > prior_close:
            return opt_add(previous, candles[index].volume)
        if close < prior_close:
            return opt_add(previous, -candles[index].volume)
        return previous

    return CumulativeIndicator(
        series,
        initial_index=0,
        seed=lambda index: 0.0,
        step=step,
        name="volume.obv",
    )


def vwap(series: CandleSeries) -> DerivedSeries[float]:
    """
    Session-less VWAP: cumulative `typical_price * volume` over cumulative volume.

    Absent while cumulative volume is zero.
    """
    candles = series.candles

    def typical_volume(index: int) -> float:
        candle = candles[index]
        return (candle.high + candle.low + candle.close) / 3.0 * candle.volume

    cumulative_pv = CumulativeIndicator(
        series,
        seed=typical_volume,
        step=lambda previous, index: opt_add(previous, typical_volume(index)),
        name="volume.vwap.pv",
    )
    cumulative_volume = CumulativeIndicator(
        series,
        seed=lambda index: candles[index].volume,
        step=lambda previous, index: opt_add(previous, candles[index].volume),
        name="volume.vwap.volume",
    )
    return combine(opt_div, cumulative_pv, cumulative_volume)
