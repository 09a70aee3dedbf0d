from __future__ import annotations

from typing import Protocol

from tickquant.shared_kernel.primitives import CandleSeries, Period, Symbol, TimeRange


class SeriesFeed(Protocol):
    """
    Port for loading one ordered candle series at a requested period.

    Related:
      - src/tickquant/contexts/series/adapters/outbound/feeds/in_memory_series_feed.py
      - src/tickquant/shared_kernel/primitives/candle_series.py
    """

    def load_series(
        self,
        symbol: Symbol,
        period: Period,
        time_range: TimeRange,
    ) -> CandleSeries:
        """
        Load candles of one symbol inside `[start, end)` at `period`.

        Args:
            symbol: Asset identifier.
            period: Requested series granularity.
            time_range: Requested half-open interval.
        Returns:
            CandleSeries: Ordered, duplicate-free series.
        Assumptions:
            Implementations do not retry; failures propagate to the caller.
        Raises:
            KeyError: If the feed does not know the symbol.
            InvalidPeriodError: If the requested period cannot be produced.
        Side Effects:
            Implementation-defined.
        """
        ...
