from __future__ import annotations

from typing import Sequence

from tickquant.contexts.series.domain.errors import InvalidPeriodError
from tickquant.shared_kernel.primitives import Candle, CandleSeries, Period, UtcTimestamp


def transform_series(
    series: CandleSeries,
    from_period: Period,
    to_period: Period,
) -> CandleSeries:
    """
    Aggregate finer-period candles into calendar-aligned buckets of a coarser period.

    Related:
      - src/tickquant/shared_kernel/primitives/period.py
      - src/tickquant/contexts/series/adapters/outbound/feeds/in_memory_series_feed.py

    Args:
        series: Source series, ordered and duplicate-free.
        from_period: Period the caller believes the source has; must equal `series.period`.
        to_period: Target period; must be strictly coarser than `from_period`.
    Returns:
        CandleSeries: New series in `to_period`; each candle timestamp is the bucket open.
    Assumptions:
        Buckets with no source candles are omitted instead of synthesized.
    Raises:
        InvalidPeriodError: If `to_period` does not coarsen `from_period` or `from_period`
            does not describe the series.
    Side Effects:
        None.
    """
    if from_period is not series.period:
        raise InvalidPeriodError(
            from_period=from_period,
            to_period=to_period,
            reason=f"series period is {series.period.code}",
        )
    if not to_period.is_coarser_than(from_period):
        raise InvalidPeriodError(
            from_period=from_period,
            to_period=to_period,
            reason="target period must be strictly coarser than source period",
        )

    rolled: list[Candle] = []
    bucket: list[Candle] = []
    bucket_open: UtcTimestamp | None = None
    for candle in series.candles:
        candle_bucket = to_period.bucket_open(candle.timestamp)
        if bucket_open is not None and candle_bucket != bucket_open:
            rolled.append(_aggregate_bucket(bucket_open=bucket_open, candles=bucket))
            bucket = []
        bucket_open = candle_bucket
        bucket.append(candle)

    if bucket_open is not None and bucket:
        rolled.append(_aggregate_bucket(bucket_open=bucket_open, candles=bucket))

    return CandleSeries(symbol=series.symbol, period=to_period, candles=tuple(rolled))


def _aggregate_bucket(*, bucket_open: UtcTimestamp, candles: Sequence[Candle]) -> Candle:
    """
    Fold one non-empty bucket into a single OHLCV candle.

    Args:
        bucket_open: Bucket start timestamp.
        candles: Ordered non-empty candles of the bucket.
    Returns:
        Candle: Aggregated candle.
    Assumptions:
        Source candles already satisfy OHLC invariants.
    Raises:
        None.
    Side Effects:
        None.
    """
    return Candle(
        timestamp=bucket_open,
        open=candles[0].open,
        high=max(candle.high for candle in candles),
        low=min(candle.low for candle in candles),
        close=candles[-1].close,
        volume=sum(candle.volume for candle in candles),
    )
