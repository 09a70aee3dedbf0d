"""
Operation layer: pure derived statistics over any `TickSource`.

Element-wise operations (`diff`, `relative_diff`, `combine`, `shift`) fill forward lazily through
`ForwardCache`. Rolling-window operations materialize their source once and delegate the window
arithmetic to a `RollingWindowCompute` port.

Related:
  - src/tickquant/contexts/indicators/application/ports/compute/rolling_window_compute.py
  - src/tickquant/contexts/indicators/adapters/outbound/compute_numba/engine.py
  - src/tickquant/contexts/evaluation/application/services/evaluation_context.py
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Generic, Mapping, TypeVar

from tickquant.contexts.indicators.application.ports.compute import RollingWindowCompute
from tickquant.contexts.indicators.application.ports.sources import TickSource
from tickquant.contexts.indicators.domain.errors import InvalidParameterError
from tickquant.shared_kernel.primitives import (
    Tick,
    UtcTimestamp,
    all_present,
    opt_div,
    opt_mul,
    opt_sub,
)

from .forward_cache import ForwardCache, TickProducer

T = TypeVar("T")


class DerivedSeries(Generic[T]):
    """Lazily filled `TickSource` defined by a per-index producer."""

    def __init__(self, *, length: int, producer: TickProducer[T], name: str) -> None:
        self._name = name
        self._cache: ForwardCache[T] = ForwardCache(length=length, producer=producer)

    @property
    def name(self) -> str:
        return self._name

    def __len__(self) -> int:
        return len(self._cache)

    def value_at(self, index: int) -> Tick[T]:
        return self._cache.get(index)

    def values(self) -> list[T | None]:
        return [tick.value for tick in self._cache.materialize()]

    def __repr__(self) -> str:
        return f"DerivedSeries(name={self._name!r}, length={len(self)})"


class MaterializedSeries:
    """
    `TickSource` whose values are computed for the whole source in one bulk call.

    The bulk call runs on first access, under a lock, exactly once.
    """

    def __init__(
        self,
        *,
        source: TickSource[Any],
        compute: Callable[[list[float | None]], list[float | None]],
        name: str,
    ) -> None:
        self._source = source
        self._compute = compute
        self._name = name
        self._ticks: tuple[Tick[float], ...] | None = None
        self._lock = threading.Lock()

    @property
    def name(self) -> str:
        return self._name

    def __len__(self) -> int:
        return len(self._source)

    def value_at(self, index: int) -> Tick[float]:
        if index < 0 or index >= len(self._source):
            raise IndexError(f"tick index out of range: {index} (length={len(self._source)})")
        ticks = self._ticks
        if ticks is None:
            ticks = self._materialize()
        return ticks[index]

    def values(self) -> list[float | None]:
        ticks = self._ticks if self._ticks is not None else self._materialize()
        return [tick.value for tick in ticks]

    def _materialize(self) -> tuple[Tick[float], ...]:
        with self._lock:
            if self._ticks is not None:
                return self._ticks
            source_ticks = [self._source.value_at(index) for index in range(len(self._source))]
            computed = self._compute([tick.value for tick in source_ticks])
            self._ticks = tuple(
                Tick(timestamp=tick.timestamp, value=value)
                for tick, value in zip(source_ticks, computed)
            )
            return self._ticks

    def __repr__(self) -> str:
        return f"MaterializedSeries(name={self._name!r}, length={len(self)})"


@dataclass(frozen=True, slots=True)
class BandValue:
    """Upper/middle/lower levels of one rolling band tick."""

    upper: float
    middle: float
    lower: float


class RollingBand:
    """
    `TickSource[BandValue]`: `mean +- k * pstdev` over a trailing window.

    `upper`, `middle` and `lower` expose each level as a plain float `TickSource`.
    """

    def __init__(
        self,
        *,
        source: TickSource[Any],
        window: int,
        k: float,
        compute: RollingWindowCompute,
    ) -> None:
        self._window = window
        self._k = k
        self._compute = compute
        self._lock = threading.Lock()
        self._source = source
        self._ticks: tuple[Tick[BandValue], ...] | None = None
        self.upper = _BandLevel(band=self, level="upper")
        self.middle = _BandLevel(band=self, level="middle")
        self.lower = _BandLevel(band=self, level="lower")

    @property
    def window(self) -> int:
        return self._window

    @property
    def k(self) -> float:
        return self._k

    def __len__(self) -> int:
        return len(self._source)

    def value_at(self, index: int) -> Tick[BandValue]:
        if index < 0 or index >= len(self._source):
            raise IndexError(f"tick index out of range: {index} (length={len(self._source)})")
        ticks = self._ticks
        if ticks is None:
            ticks = self._materialize()
        return ticks[index]

    def _materialize(self) -> tuple[Tick[BandValue], ...]:
        with self._lock:
            if self._ticks is not None:
                return self._ticks
            source_ticks = [self._source.value_at(index) for index in range(len(self._source))]
            means, stddevs = self._compute.rolling_mean_pstdev(
                [tick.value for tick in source_ticks],
                self._window,
            )
            band_ticks: list[Tick[BandValue]] = []
            for tick, mean, stddev in zip(source_ticks, means, stddevs):
                if mean is None or stddev is None:
                    band_ticks.append(Tick(timestamp=tick.timestamp, value=None))
                    continue
                width = self._k * stddev
                band_ticks.append(
                    Tick(
                        timestamp=tick.timestamp,
                        value=BandValue(upper=mean + width, middle=mean, lower=mean - width),
                    )
                )
            self._ticks = tuple(band_ticks)
            return self._ticks


class _BandLevel:
    """Projection of one `RollingBand` level."""

    def __init__(self, *, band: RollingBand, level: str) -> None:
        self._band = band
        self._level = level

    def __len__(self) -> int:
        return len(self._band)

    def value_at(self, index: int) -> Tick[float]:
        tick = self._band.value_at(index)
        if tick.value is None:
            return Tick(timestamp=tick.timestamp, value=None)
        return Tick(timestamp=tick.timestamp, value=getattr(tick.value, self._level))


def diff(source: TickSource[float]) -> DerivedSeries[float]:
    """`v[i] - v[i-1]`; absent at index 0 or when either operand is absent."""

    def produce(index: int, previous: Tick[float] | None) -> Tick[float]:
        current = source.value_at(index)
        if index == 0:
            return Tick(timestamp=current.timestamp, value=None)
        return Tick(
            timestamp=current.timestamp,
            value=opt_sub(current.value, source.value_at(index - 1).value),
        )

    return DerivedSeries(length=len(source), producer=produce, name="diff")


def relative_diff(source: TickSource[float]) -> DerivedSeries[float]:
    """`(v[i] - v[i-1]) / v[i-1] * 100`; absent when `v[i-1]` is absent or zero."""

    def produce(index: int, previous: Tick[float] | None) -> Tick[float]:
        current = source.value_at(index)
        if index == 0:
            return Tick(timestamp=current.timestamp, value=None)
        prior = source.value_at(index - 1).value
        change = opt_div(opt_sub(current.value, prior), prior)
        return Tick(timestamp=current.timestamp, value=opt_mul(change, 100.0))

    return DerivedSeries(length=len(source), producer=produce, name="relative_diff")


def combine(fn: Callable[..., float | None], *sources: TickSource[Any]) -> DerivedSeries[Any]:
    """
    Apply `fn` index-wise across equally long sources.

    Args:
        fn: Function of present values, one per source, in order.
        *sources: Input tick sources.
    Returns:
        DerivedSeries: Absent wherever any source is absent; timestamps of the first source.
    Assumptions:
        Sources are bound to the same series.
    Raises:
        InvalidParameterError: If no sources are given or lengths differ.
    Side Effects:
        None.
    """
    if not sources:
        raise InvalidParameterError("combine requires at least one source")
    length = len(sources[0])
    if any(len(source) != length for source in sources):
        raise InvalidParameterError(
            "combine requires sources of equal length",
            details={"lengths": [len(source) for source in sources]},
        )

    def produce(index: int, previous: Tick[Any] | None) -> Tick[Any]:
        ticks = [source.value_at(index) for source in sources]
        timestamp: UtcTimestamp = ticks[0].timestamp
        values = [tick.value for tick in ticks]
        if not all_present(values):
            return Tick(timestamp=timestamp, value=None)
        return Tick(timestamp=timestamp, value=fn(*values))

    name = getattr(fn, "__name__", "combine")
    return DerivedSeries(length=length, producer=produce, name=f"combine:{name}")


def shift(source: TickSource[T], periods: int) -> DerivedSeries[T]:
    """`v[i - periods]` with the timestamp of index `i`; absent for `i < periods`."""
    if isinstance(periods, bool) or not isinstance(periods, int) or periods < 0:
        raise InvalidParameterError(
            f"shift periods must be a non-negative integer, got {periods!r}",
            details={"param": "periods"},
        )

    def produce(index: int, previous: Tick[T] | None) -> Tick[T]:
        timestamp = source.value_at(index).timestamp
        if index < periods:
            return Tick(timestamp=timestamp, value=None)
        return Tick(timestamp=timestamp, value=source.value_at(index - periods).value)

    return DerivedSeries(length=len(source), producer=produce, name=f"shift:{periods}")


class OperationLayer:
    """
    Named entry point to every operation, bound to one rolling-window compute backend.

    Related:
      - src/tickquant/contexts/indicators/adapters/outbound/compute_numba/engine.py
      - src/tickquant/contexts/evaluation/application/services/evaluation_context.py
    """

    def __init__(self, *, compute: RollingWindowCompute) -> None:
        if compute is None:  # type: ignore[truthy-bool]
            raise ValueError("OperationLayer requires compute")
        self._compute = compute
        self._operations: Mapping[str, Callable[..., Any]] = MappingProxyType(
            {
                "combine": combine,
                "diff": diff,
                "relative_diff": relative_diff,
                "rolling_band": self.rolling_band,
                "rolling_mean": self.rolling_mean,
                "rolling_stddev": self.rolling_stddev,
                "shift": shift,
            }
        )

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(sorted(self._operations))

    def resolve(self, name: str) -> Callable[..., Any]:
        """
        Resolve operation by name.

        Args:
            name: Operation name (`diff`, `rolling_mean`, ...).
        Returns:
            Callable[..., Any]: Operation taking `(source, *params)`.
        Assumptions:
            Names are case-sensitive.
        Raises:
            InvalidParameterError: If name is unknown.
        Side Effects:
            None.
        """
        operation = self._operations.get(name)
        if operation is None:
            raise InvalidParameterError(
                f"unknown operation: {name}",
                details={"operation": name, "known": list(self.names)},
            )
        return operation

    def diff(self, source: TickSource[float]) -> DerivedSeries[float]:
        return diff(source)

    def relative_diff(self, source: TickSource[float]) -> DerivedSeries[float]:
        return relative_diff(source)

    def combine(
        self,
        fn: Callable[..., float | None],
        *sources: TickSource[Any],
    ) -> DerivedSeries[Any]:
        return combine(fn, *sources)

    def shift(self, source: TickSource[T], periods: int) -> DerivedSeries[T]:
        return shift(source, periods)

    def rolling_mean(self, source: TickSource[float], window: int) -> MaterializedSeries:
        """Trailing mean; absent if `i < window - 1` or any value in the window is absent."""
        _require_window(window)
        compute = self._compute
        return MaterializedSeries(
            source=source,
            compute=lambda values: compute.rolling_mean(values, window),
            name=f"rolling_mean:{window}",
        )

    def rolling_stddev(self, source: TickSource[float], window: int) -> MaterializedSeries:
        """Trailing population standard deviation; same absence rules as the mean."""
        _require_window(window)
        compute = self._compute
        return MaterializedSeries(
            source=source,
            compute=lambda values: compute.rolling_mean_pstdev(values, window)[1],
            name=f"rolling_stddev:{window}",
        )

    def rolling_band(self, source: TickSource[float], window: int, k: float) -> RollingBand:
        """`rolling_mean +- k * rolling_stddev`; `k` must be a non-negative number."""
        _require_window(window)
        if isinstance(k, bool) or not isinstance(k, int | float) or k < 0:
            raise InvalidParameterError(
                f"rolling_band k must be a non-negative number, got {k!r}",
                details={"param": "k"},
            )
        return RollingBand(source=source, window=window, k=float(k), compute=self._compute)


def _require_window(window: object) -> None:
    if isinstance(window, bool) or not isinstance(window, int) or window <= 0:
        raise InvalidParameterError(
            f"window must be a positive integer, got {window!r}",
            details={"param": "window"},
        )


def values_of(source: TickSource[T]) -> list[T | None]:
    """Read every value of any `TickSource` in index order."""
    return [source.value_at(index).value for index in range(len(source))]


__all__ = [
    "BandValue",
    "DerivedSeries",
    "MaterializedSeries",
    "OperationLayer",
    "RollingBand",
    "combine",
    "diff",
    "relative_diff",
    "shift",
    "values_of",
]
