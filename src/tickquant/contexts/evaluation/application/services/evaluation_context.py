"""
Per-run memoizing evaluation context bound to one series.

Related:
  - src/tickquant/contexts/indicators/application/services/indicator_catalog.py
  - src/tickquant/contexts/indicators/application/services/operations.py
  - src/tickquant/contexts/registry/application/services/registries.py
  - src/tickquant/contexts/rules/domain/entities/rule.py
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Any, Callable, Hashable, Iterator

from tickquant.contexts.evaluation.domain.value_objects import CacheKey
from tickquant.contexts.indicators.adapters.outbound.compute_numba import (
    NumbaRollingWindowCompute,
)
from tickquant.contexts.indicators.application.services import (
    DerivedSeries,
    IndicatorCatalog,
    OperationLayer,
    default_catalog,
)
from tickquant.contexts.indicators.domain.errors import InvalidParameterError
from tickquant.contexts.registry.application.services import Registries, default_registries
from tickquant.contexts.registry.domain.entities import RegistryEntry
from tickquant.shared_kernel.primitives import CandleSeries, Tick

from .bound_rule import BoundRule

log = logging.getLogger(__name__)


class EvaluationContext:
    """
    Cache of constructed indicators, derived operations and bound registry entries.

    At most one live instance exists per `(namespace, kind, params)` key. The cache map is
    guarded by a re-entrant lock so rule-executor workers may share one context. After
    `close()` every accessor raises `RuntimeError`.
    """

    def __init__(
        self,
        series: CandleSeries,
        *,
        registries: Registries | None = None,
        catalog: IndicatorCatalog | None = None,
        operations: OperationLayer | None = None,
    ) -> None:
        """
        Bind context to one series and its collaborators.

        Args:
            series: Series every cached indicator is bound to.
            registries: Funcs/rules handle; process default when omitted.
            catalog: Indicator catalog; built-in catalog when omitted.
            operations: Operation layer; numba-backed layer when omitted.
        Returns:
            None.
        Assumptions:
            The context is used for one run and then closed.
        Raises:
            ValueError: If series is missing.
        Side Effects:
            Logs context open at DEBUG.
        """
        if series is None:  # type: ignore[truthy-bool]
            raise ValueError("EvaluationContext requires series")
        self._series = series
        self._registries = registries if registries is not None else default_registries()
        self._catalog = catalog if catalog is not None else default_catalog()
        self._operations = (
            operations
            if operations is not None
            else OperationLayer(compute=NumbaRollingWindowCompute())
        )
        self._cache: dict[CacheKey, Any] = {}
        self._lock = threading.RLock()
        self._closed = False
        log.debug(
            "evaluation context opened",
            extra={"symbol": str(series.symbol), "period": series.period.code, "size": len(series)},
        )

    @property
    def series(self) -> CandleSeries:
        return self._series

    @property
    def registries(self) -> Registries:
        return self._registries

    @property
    def operations(self) -> OperationLayer:
        return self._operations

    @property
    def closed(self) -> bool:
        return self._closed

    def __len__(self) -> int:
        return len(self._series)

    def cache_size(self) -> int:
        with self._lock:
            return len(self._cache)

    def get(self, kind: str | Callable[..., Any], *params: Any) -> Any:
        """
        Return cached indicator for `(kind, params)`, constructing it on first request.

        Args:
            kind: Catalog id (`"ma.sma"`) or factory callable `factory(series, *params)`.
            *params: Positional indicator parameters.
        Returns:
            Any: `TickSource` bound to this context's series.
        Assumptions:
            Catalog defaults are filled before keying, so omitted and explicit defaults share
            one instance.
        Raises:
            RuntimeError: If the context is closed.
            UnknownIndicatorError: If catalog id is unknown.
            InvalidParameterError: If params are invalid or unhashable.
        Side Effects:
            Populates cache on miss.
        """
        if isinstance(kind, str):
            definition = self._catalog.get_def(kind)
            resolved = definition.resolve_params(params)
            key = CacheKey(
                namespace="indicator",
                kind=definition.indicator_id.value,
                params=resolved,
            )
            return self._get_or_create(key, lambda: definition.factory(self._series, *resolved))

        if callable(kind):
            key = CacheKey(namespace="indicator", kind=kind, params=_hashable_params(params))
            return self._get_or_create(key, lambda: kind(self._series, *params))

        raise InvalidParameterError(
            f"indicator kind must be a catalog id or factory callable, got {type(kind).__name__}"
        )

    def derive(self, operation: str | Callable[..., Any], source: Any, *params: Any) -> Any:
        """
        Return cached operation result for `(operation, source, params)`.

        Args:
            operation: Operation name (`"diff"`, `"rolling_mean"`, ...) or callable.
            source: First positional argument (a `TickSource`, or `fn` for `combine`).
            *params: Remaining positional arguments.
        Returns:
            Any: Derived `TickSource`.
        Assumptions:
            Sources are keyed by identity; cached sources from this context are stable.
        Raises:
            RuntimeError: If the context is closed.
            InvalidParameterError: If operation is unknown or params are invalid.
        Side Effects:
            Populates cache on miss.
        """
        if isinstance(operation, str):
            function = self._operations.resolve(operation)
            kind: Hashable = operation
        elif callable(operation):
            function = operation
            kind = operation
        else:
            raise InvalidParameterError(
                f"operation must be a name or callable, got {type(operation).__name__}"
            )
        key = CacheKey(
            namespace="derive",
            kind=kind,
            params=(_identity_key(source),) + _hashable_params(params),
        )
        return self._get_or_create(key, lambda: function(source, *params))

    def get_func(self, name: str, *params: Any) -> DerivedSeries[Any]:
        """
        Resolve registered value-function and bind params into a cached `TickSource`.

        Args:
            name: Func registry name.
            *params: Positional params passed to the func as a tuple.
        Returns:
            DerivedSeries[Any]: Lazily evaluated `fn(series, index, params, context)` values.
        Assumptions:
            Funcs may call back into this context.
        Raises:
            RuntimeError: If the context is closed.
            UnknownNameError: If name is not registered.
            InvalidParameterError: If param count differs from declared arity.
        Side Effects:
            Populates cache on miss.
        """
        entry, bound = self._registries.funcs.resolve_bound(name, params)
        key = CacheKey(namespace="func", kind=entry.name, params=_hashable_params(bound))
        return self._get_or_create(key, lambda: self._bind_func(entry, bound))

    def get_rule(self, name: str, *params: Any) -> BoundRule:
        """
        Resolve registered rule and bind params.

        Args:
            name: Rule registry name.
            *params: Positional params passed to the rule as a tuple.
        Returns:
            BoundRule: Rule callable bound to this context.
        Assumptions:
            Rule results are not memoized per index.
        Raises:
            RuntimeError: If the context is closed.
            UnknownNameError: If name is not registered.
            InvalidParameterError: If param count differs from declared arity.
        Side Effects:
            Populates cache on miss.
        """
        entry, bound = self._registries.rules.resolve_bound(name, params)
        key = CacheKey(namespace="rule", kind=entry.name, params=_hashable_params(bound))
        return self._get_or_create(
            key,
            lambda: BoundRule(entry=entry, params=bound, context=self),
        )

    def close(self) -> None:
        """Drop every cached instance; further use raises `RuntimeError`."""
        with self._lock:
            if self._closed:
                return
            dropped = len(self._cache)
            self._cache.clear()
            self._closed = True
        log.debug(
            "evaluation context closed",
            extra={"symbol": str(self._series.symbol), "dropped_entries": dropped},
        )

    def __enter__(self) -> EvaluationContext:
        self._ensure_open()
        return self

    def __exit__(self, exc_type: object, exc: object, traceback: object) -> None:
        self.close()

    def _get_or_create(self, key: CacheKey, factory: Callable[[], Any]) -> Any:
        with self._lock:
            self._ensure_open()
            cached = self._cache.get(key)
            if cached is not None:
                return cached
            created = factory()
            self._cache[key] = created
            return created

    def _ensure_open(self) -> None:
        if self._closed:
            raise RuntimeError("EvaluationContext is closed")

    def _bind_func(
        self,
        entry: RegistryEntry,
        params: tuple[object, ...],
    ) -> DerivedSeries[Any]:
        series = self._series
        function = entry.function

        def produce(index: int, previous: Tick[Any] | None) -> Tick[Any]:
            return Tick(
                timestamp=series[index].timestamp,
                value=function(series, index, params, self),
            )

        return DerivedSeries(length=len(series), producer=produce, name=f"func:{entry.name}")


@contextmanager
def evaluation_scope(
    series: CandleSeries,
    *,
    registries: Registries | None = None,
    catalog: IndicatorCatalog | None = None,
    operations: OperationLayer | None = None,
) -> Iterator[EvaluationContext]:
    """
    Open a context for one run and release its cache on exit, success or failure.

    Args:
        series: Series bound to the context.
        registries: Optional registries handle.
        catalog: Optional indicator catalog.
        operations: Optional operation layer.
    Returns:
        Iterator[EvaluationContext]: Generator yielding the open context.
    Assumptions:
        Callers do not keep the context beyond the `with` block.
    Raises:
        Exceptions from the block propagate after the cache is released.
    Side Effects:
        Closes the context on exit.
    """
    context = EvaluationContext(
        series,
        registries=registries,
        catalog=catalog,
        operations=operations,
    )
    try:
        yield context
    finally:
        context.close()


def _hashable_params(params: tuple[Any, ...]) -> tuple[Hashable, ...]:
    try:
        hash(params)
    except TypeError as error:
        raise InvalidParameterError(
            "evaluation parameters must be hashable",
            details={"params": [repr(param) for param in params]},
        ) from error
    # `1`, `1.0` and `True` hash equal but may build different series.
    return tuple((type(param), param) for param in params)


def _identity_key(source: Any) -> Hashable:
    try:
        hash(source)
    except TypeError:
        return ("id", id(source))
    return source
