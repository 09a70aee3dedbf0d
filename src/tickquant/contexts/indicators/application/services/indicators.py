"""
Indicator strategies: simple window, cumulative recurrence, exponential smoothing.

All three satisfy `TickSource` and memoize through `ForwardCache`; they differ only in how one
index is computed from raw candles and the previous output.

Related: tickquant.contexts.indicators.application.ports.sources.tick_source,
  tickquant.contexts.indicators.application.services.forward_cache
"""

from __future__ import annotations

from typing import Callable, Optional, Sequence

from tickquant.contexts.indicators.domain.errors import InvalidParameterError
from tickquant.shared_kernel.primitives import Candle, CandleSeries, Tick

from .forward_cache import ForwardCache

WindowFunction = Callable[[Sequence[Candle]], Optional[float]]
IndexFunction = Callable[[int], Optional[float]]
StepFunction = Callable[[Optional[float], int], Optional[float]]


class _SeriesIndicator:
    """Shared plumbing: series binding, forward cache and `TickSource` surface."""

    def __init__(self, series: CandleSeries, *, name: str) -> None:
        self._series = series
        self._name = name
        self._cache: ForwardCache[float] = ForwardCache(
            length=len(series),
            producer=self._produce,
        )

    @property
    def series(self) -> CandleSeries:
        return self._series

    @property
    def name(self) -> str:
        return self._name

    def __len__(self) -> int:
        return len(self._series)

    def value_at(self, index: int) -> Tick[float]:
        return self._cache.get(index)

    def values(self) -> list[float | None]:
        """Materialize every index and return plain optional values."""
        return [tick.value for tick in self._cache.materialize()]

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self._name!r}, symbol={self._series.symbol})"

    def _tick(self, index: int, value: float | None) -> Tick[float]:
        return Tick(timestamp=self._series[index].timestamp, value=value)

    def _produce(self, index: int, previous: Tick[float] | None) -> Tick[float]:
        raise NotImplementedError


class SimpleIndicator(_SeriesIndicator):
    """
    Stateless-window indicator: `value_at(i) = compute(candles[i - p + 1 .. i])`.

    Absent for `i < period_count - 1`; never reads its own previous output.
    """

    def __init__(
        self,
        series: CandleSeries,
        *,
        period_count: int,
        compute: WindowFunction,
        name: str = "simple",
    ) -> None:
        """
        Validate window and bind compute function.

        Args:
            series: Bound input series.
            period_count: Window length in candles.
            compute: Function of the ordered window (oldest first).
            name: Diagnostic name.
        Returns:
            None.
        Assumptions:
            `compute` returns `None` when the window cannot produce a value.
        Raises:
            InvalidParameterError: If `period_count` is not a positive integer.
        Side Effects:
            None.
        """
        _require_positive_int(period_count, name="period_count")
        self._period_count = period_count
        self._compute = compute
        super().__init__(series, name=name)

    @property
    def period_count(self) -> int:
        return self._period_count

    def _produce(self, index: int, previous: Tick[float] | None) -> Tick[float]:
        if index < self._period_count - 1:
            return self._tick(index, None)
        window = self._series.candles[index - self._period_count + 1 : index + 1]
        return self._tick(index, self._compute(window))


class CumulativeIndicator(_SeriesIndicator):
    """
    Cumulative recurrence: `seed(i0)` at `initial_index`, `step(prev, i)` afterwards.

    Before `initial_index` the value is `null_value(i)`, absent unless overridden. `seed`,
    `step` and `null_value` may be passed as callables or overridden in a subclass. `step`
    receives the previous output even when it is absent and decides how to handle it.
    """

    def __init__(
        self,
        series: CandleSeries,
        *,
        initial_index: int = 0,
        seed: IndexFunction | None = None,
        step: StepFunction | None = None,
        null_value: IndexFunction | None = None,
        name: str = "cumulative",
    ) -> None:
        _require_non_negative_int(initial_index, name="initial_index")
        self._initial_index = initial_index
        self._seed = seed
        self._step = step
        self._null_value = null_value
        super().__init__(series, name=name)

    @property
    def initial_index(self) -> int:
        return self._initial_index

    def seed(self, index: int) -> float | None:
        if self._seed is None:
            raise NotImplementedError(f"{type(self).__name__} requires seed")
        return self._seed(index)

    def step(self, previous: float | None, index: int) -> float | None:
        if self._step is None:
            raise NotImplementedError(f"{type(self).__name__} requires step")
        return self._step(previous, index)

    def null_value(self, index: int) -> float | None:
        if self._null_value is None:
            return None
        return self._null_value(index)

    def _produce(self, index: int, previous: Tick[float] | None) -> Tick[float]:
        if index < self._initial_index:
            return self._tick(index, self.null_value(index))
        if index == self._initial_index:
            return self._tick(index, self.seed(index))
        prev_value = previous.value if previous is not None else None
        return self._tick(index, self.step(prev_value, index))


class MovingAverageIndicator(_SeriesIndicator):
    """
    Exponential smoothing: `out[i] = alpha(i) * raw(i) + (1 - alpha(i)) * out[i - 1]`.

    `out[seed_index] = seed_value(seed_index)`, absent before it. Absence is strict: an absent
    raw value, previous output, or per-index alpha makes the output absent, and so does a
    per-index alpha outside `(0, 1]`.
    """

    def __init__(
        self,
        series: CandleSeries,
        *,
        seed_index: int,
        seed_value: IndexFunction,
        raw_value: IndexFunction,
        alpha: float | IndexFunction,
        name: str = "moving_average",
    ) -> None:
        """
        Validate seed and smoothing factor and bind callables.

        Args:
            series: Bound input series.
            seed_index: First index with a value.
            seed_value: Produces the value at `seed_index`.
            raw_value: Produces the smoothed input at each later index.
            alpha: Constant smoothing factor or per-index callable (adaptive smoothing).
            name: Diagnostic name.
        Returns:
            None.
        Assumptions:
            Arithmetic runs in native float precision.
        Raises:
            InvalidParameterError: If `seed_index` is negative or constant `alpha` is
                outside `(0, 1]`.
        Side Effects:
            None.
        """
        _require_non_negative_int(seed_index, name="seed_index")
        if not callable(alpha):
            if isinstance(alpha, bool) or not isinstance(alpha, int | float):
                raise InvalidParameterError(
                    f"alpha must be numeric or callable, got {type(alpha).__name__}",
                    details={"param": "alpha"},
                )
            if not 0.0 < float(alpha) <= 1.0:
                raise InvalidParameterError(
                    f"alpha must be in (0, 1], got {alpha!r}",
                    details={"param": "alpha", "value": float(alpha)},
                )
            alpha = float(alpha)
        self._seed_index = seed_index
        self._seed_value = seed_value
        self._raw_value = raw_value
        self._alpha = alpha
        super().__init__(series, name=name)

    @property
    def seed_index(self) -> int:
        return self._seed_index

    def alpha_at(self, index: int) -> float | None:
        alpha = self._alpha
        if callable(alpha):
            value = alpha(index)
            if value is None or not 0.0 < value <= 1.0:
                return None
            return value
        return alpha

    def _produce(self, index: int, previous: Tick[float] | None) -> Tick[float]:
        if index < self._seed_index:
            return self._tick(index, None)
        if index == self._seed_index:
            return self._tick(index, self._seed_value(index))

        prev_value = previous.value if previous is not None else None
        raw = self._raw_value(index)
        alpha = self.alpha_at(index)
        if prev_value is None or raw is None or alpha is None:
            return self._tick(index, None)
        return self._tick(index, alpha * raw + (1.0 - alpha) * prev_value)


def _require_positive_int(value: object, *, name: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise InvalidParameterError(
            f"{name} must be a positive integer, got {value!r}",
            details={"param": name},
        )


def _require_non_negative_int(value: object, *, name: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise InvalidParameterError(
            f"{name} must be a non-negative integer, got {value!r}",
            details={"param": name},
        )
