from __future__ import annotations

from typing import TYPE_CHECKING

from tickquant.contexts.registry.domain.entities import RegistryEntry

from .bar_view import BarView

if TYPE_CHECKING:
    from .evaluation_context import EvaluationContext


class BoundRule:
    """
    Registered rule bound to positional params and one evaluation context.

    `evaluate_at(i)` calls `fn(BarView(series, i, context), params)`; `None` becomes `False`.
    """

    __slots__ = ("_entry", "_params", "_context")

    def __init__(
        self,
        *,
        entry: RegistryEntry,
        params: tuple[object, ...],
        context: EvaluationContext,
    ) -> None:
        self._entry = entry
        self._params = params
        self._context = context

    @property
    def name(self) -> str:
        return self._entry.name

    @property
    def params(self) -> tuple[object, ...]:
        return self._params

    def evaluate_at(self, index: int) -> bool:
        result = self._entry.function(
            BarView(self._context.series, index, self._context),
            self._params,
        )
        return result is not None and bool(result)

    def __call__(self, index: int) -> bool:
        return self.evaluate_at(index)

    def __repr__(self) -> str:
        return f"BoundRule(name={self._entry.name!r}, params={self._params!r})"
