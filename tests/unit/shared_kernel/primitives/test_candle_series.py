from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from tickquant.shared_kernel.primitives import (
    Candle,
    CandleSeries,
    Period,
    Symbol,
    Tick,
    TimeRange,
    UtcTimestamp,
)

_START = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _candle(offset_days: int, close: float) -> Candle:
    return Candle(
        timestamp=UtcTimestamp(_START + timedelta(days=offset_days)),
        open=close,
        high=close + 1.0,
        low=close - 1.0,
        close=close,
        volume=10.0,
    )


def test_series_requires_strictly_increasing_timestamps() -> None:
    with pytest.raises(ValueError, match="strictly increasing"):
        CandleSeries.of(
            symbol="btcusdt",
            period=Period.DAY,
            candles=[_candle(1, 10.0), _candle(1, 11.0)],
        )


def test_series_indexing_and_lookup() -> None:
    series = CandleSeries.of(
        symbol=" btcusdt ",
        period=Period.DAY,
        candles=[_candle(0, 10.0), _candle(1, 11.0), _candle(3, 12.0)],
    )

    assert series.symbol == Symbol("BTCUSDT")
    assert len(series) == 3
    assert series[1].close == 11.0
    assert series.closes() == (10.0, 11.0, 12.0)
    assert series.index_of(UtcTimestamp(_START + timedelta(days=3))) == 2
    assert series.index_of(UtcTimestamp(_START + timedelta(days=2))) is None


def test_candle_rejects_broken_ohlc() -> None:
    with pytest.raises(ValueError, match="high"):
        Candle(
            timestamp=UtcTimestamp(_START),
            open=10.0,
            high=9.0,
            low=8.0,
            close=9.5,
            volume=1.0,
        )
    with pytest.raises(ValueError, match="volume"):
        Candle(
            timestamp=UtcTimestamp(_START),
            open=10.0,
            high=10.0,
            low=10.0,
            close=10.0,
            volume=-1.0,
        )


def test_utc_timestamp_rejects_naive_and_truncates_to_milliseconds() -> None:
    with pytest.raises(ValueError, match="timezone-aware"):
        UtcTimestamp(datetime(2024, 1, 1))

    ts = UtcTimestamp(datetime(2024, 1, 1, 0, 0, 0, 123456, tzinfo=timezone.utc))
    assert ts.value.microsecond == 123000
    assert UtcTimestamp.from_epoch_ms(ts.epoch_ms()) == ts


def test_time_range_is_half_open() -> None:
    start = UtcTimestamp(_START)
    end = UtcTimestamp(_START + timedelta(days=2))
    time_range = TimeRange(start=start, end=end)

    assert time_range.contains(start)
    assert not time_range.contains(end)
    assert time_range.duration() == timedelta(days=2)
    with pytest.raises(ValueError):
        TimeRange(start=end, end=start)


def test_tick_absence() -> None:
    ts = UtcTimestamp(_START)
    assert Tick(ts).is_absent
    assert not Tick(ts, 0.0).is_absent
