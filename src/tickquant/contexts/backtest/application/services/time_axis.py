from __future__ import annotations

from typing import Iterable

from tickquant.shared_kernel.primitives import CandleSeries, UtcTimestamp


def build_time_axis(series: Iterable[CandleSeries]) -> tuple[UtcTimestamp, ...]:
    """
    Build the unified ascending time axis of several series.

    Args:
        series: Portfolio series, any periods.
    Returns:
        tuple[UtcTimestamp, ...]: Sorted union of every candle timestamp, without duplicates.
    Assumptions:
        Each series is already strictly increasing.
    Raises:
        None.
    Side Effects:
        None.
    """
    timestamps: set[UtcTimestamp] = set()
    for item in series:
        timestamps.update(item.timestamps)
    return tuple(sorted(timestamps))
