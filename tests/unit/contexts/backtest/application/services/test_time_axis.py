from __future__ import annotations

from datetime import datetime, timedelta, timezone

from tickquant.contexts.backtest.application.services import build_time_axis
from tickquant.shared_kernel.primitives import Candle, CandleSeries, Period, UtcTimestamp

_START = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _series(symbol: str, period: Period, hours: list[int]) -> CandleSeries:
    return CandleSeries.of(
        symbol=symbol,
        period=period,
        candles=[
            Candle(
                timestamp=UtcTimestamp(_START + timedelta(hours=hour)),
                open=1.0,
                high=1.0,
                low=1.0,
                close=1.0,
                volume=0.0,
            )
            for hour in hours
        ],
    )


def test_time_axis_is_sorted_union_across_periods() -> None:
    hourly = _series("H", Period.HOUR, [0, 1, 2, 3, 5])
    two_hourly = _series("T", Period.HOUR_2, [0, 2, 4, 6])

    axis = build_time_axis([two_hourly, hourly])

    assert axis == tuple(UtcTimestamp(_START + timedelta(hours=h)) for h in range(7))


def test_time_axis_of_nothing_is_empty() -> None:
    assert build_time_axis([]) == ()
    assert build_time_axis([_series("E", Period.HOUR, [])]) == ()
