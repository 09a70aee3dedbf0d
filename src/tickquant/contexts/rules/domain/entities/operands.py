"""
Operands of built-in comparison predicates: constants and context-resolved references.

Related: tickquant.contexts.rules.domain.services.predicates
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Union

if TYPE_CHECKING:
    from tickquant.contexts.evaluation.application.services import EvaluationContext


class Operand:
    """Produces an optional number for `(context, index)`."""

    __slots__ = ()

    def value(self, context: EvaluationContext, index: int) -> Any:
        raise NotImplementedError


class Reference(Operand):
    """Operand backed by a `TickSource` resolved (and cached) through the context."""

    __slots__ = ()

    def source(self, context: EvaluationContext) -> Any:
        raise NotImplementedError

    def value(self, context: EvaluationContext, index: int) -> Any:
        if index < 0:
            return None
        return self.source(context).value_at(index).value


@dataclass(frozen=True, slots=True)
class Constant(Operand):
    number: float

    def value(self, context: EvaluationContext, index: int) -> Any:
        return self.number


@dataclass(frozen=True, slots=True)
class IndicatorRef(Reference):
    kind: Union[str, Callable[..., Any]]
    params: tuple[Any, ...] = ()

    def source(self, context: EvaluationContext) -> Any:
        return context.get(self.kind, *self.params)


@dataclass(frozen=True, slots=True)
class FuncRef(Reference):
    name: str
    params: tuple[Any, ...] = ()

    def source(self, context: EvaluationContext) -> Any:
        return context.get_func(self.name, *self.params)


@dataclass(frozen=True, slots=True)
class DerivedRef(Reference):
    """
    Operation applied to another reference; `level` picks `upper`/`middle`/`lower` of a band.
    """

    operation: Union[str, Callable[..., Any]]
    base: Reference
    params: tuple[Any, ...] = ()
    level: str | None = None

    def source(self, context: EvaluationContext) -> Any:
        derived = context.derive(self.operation, self.base.source(context), *self.params)
        if self.level is None:
            return derived
        return getattr(derived, self.level)


def constant(number: float) -> Constant:
    return Constant(number=float(number))


def indicator(kind: Union[str, Callable[..., Any]], *params: Any) -> IndicatorRef:
    return IndicatorRef(kind=kind, params=params)


def func(name: str, *params: Any) -> FuncRef:
    return FuncRef(name=name, params=params)


def derived(
    operation: Union[str, Callable[..., Any]],
    base: Reference,
    *params: Any,
    level: str | None = None,
) -> DerivedRef:
    if level is not None and level not in ("upper", "middle", "lower"):
        raise ValueError(f"band level must be upper, middle or lower, got {level!r}")
    return DerivedRef(operation=operation, base=base, params=params, level=level)


def as_operand(value: Union[Operand, str, float, int]) -> Operand:
    """Numbers become constants, strings become catalog indicator references."""
    if isinstance(value, Operand):
        return value
    if isinstance(value, str):
        return indicator(value)
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise TypeError(f"unsupported operand: {value!r}")
    return constant(value)
