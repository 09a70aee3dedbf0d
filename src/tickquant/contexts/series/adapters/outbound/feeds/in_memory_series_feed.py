from __future__ import annotations

from typing import Iterable, Mapping

from tickquant.contexts.series.domain.errors import InvalidPeriodError
from tickquant.contexts.series.domain.services import transform_series
from tickquant.shared_kernel.primitives import CandleSeries, Period, Symbol, TimeRange


class InMemorySeriesFeed:
    """
    SeriesFeed adapter over preloaded series, keyed by symbol.

    Related:
      - src/tickquant/contexts/series/application/ports/series_feed.py
      - src/tickquant/contexts/series/domain/services/series_transform.py
    """

    def __init__(self, *, series: Iterable[CandleSeries]) -> None:
        """
        Index preloaded series by symbol.

        Args:
            series: Base series, at most one per symbol.
        Returns:
            None.
        Assumptions:
            Base series are the finest data available for their symbol.
        Raises:
            ValueError: If two series share one symbol.
        Side Effects:
            None.
        """
        by_symbol: dict[Symbol, CandleSeries] = {}
        for item in series:
            if item.symbol in by_symbol:
                raise ValueError(f"duplicate series for symbol: {item.symbol}")
            by_symbol[item.symbol] = item
        self._series: Mapping[Symbol, CandleSeries] = by_symbol

    def load_series(
        self,
        symbol: Symbol,
        period: Period,
        time_range: TimeRange,
    ) -> CandleSeries:
        base = self._series.get(symbol)
        if base is None:
            raise KeyError(f"unknown symbol: {symbol}")

        sliced = CandleSeries(
            symbol=base.symbol,
            period=base.period,
            candles=tuple(c for c in base.candles if time_range.contains(c.timestamp)),
        )
        if period is base.period:
            return sliced
        if period < base.period:
            raise InvalidPeriodError(
                from_period=base.period,
                to_period=period,
                reason="feed cannot refine stored series",
            )
        return transform_series(sliced, base.period, period)
