from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable

from tickquant.contexts.indicators.application.ports.sources import TickSource
from tickquant.shared_kernel.primitives import Candle, CandleSeries, UtcTimestamp

if TYPE_CHECKING:
    from .evaluation_context import EvaluationContext


class BarView:
    """
    Read-only view of one index of a context's series, handed to registered rules.
    """

    __slots__ = ("_series", "_index", "_context")

    def __init__(self, series: CandleSeries, index: int, context: EvaluationContext) -> None:
        self._series = series
        self._index = index
        self._context = context

    @property
    def series(self) -> CandleSeries:
        return self._series

    @property
    def index(self) -> int:
        return self._index

    @property
    def context(self) -> EvaluationContext:
        return self._context

    @property
    def candle(self) -> Candle:
        return self._series[self._index]

    @property
    def timestamp(self) -> UtcTimestamp:
        return self.candle.timestamp

    @property
    def open(self) -> float:
        return self.candle.open

    @property
    def high(self) -> float:
        return self.candle.high

    @property
    def low(self) -> float:
        return self.candle.low

    @property
    def close(self) -> float:
        return self.candle.close

    @property
    def volume(self) -> float:
        return self.candle.volume

    def value(self, source: TickSource[Any], offset: int = 0) -> Any:
        """Value of `source` at `index - offset`; `None` before the series start."""
        position = self._index - offset
        if position < 0:
            return None
        return source.value_at(position).value

    def indicator(self, kind: str | Callable[..., Any], *params: Any) -> Any:
        return self.value(self._context.get(kind, *params))

    def func(self, name: str, *params: Any) -> Any:
        return self.value(self._context.get_func(name, *params))

    def rule(self, name: str, *params: Any) -> bool:
        return self._context.get_rule(name, *params).evaluate_at(self._index)

    def __repr__(self) -> str:
        return f"BarView(symbol={self._series.symbol}, index={self._index})"
