"""
Immutable boolean rule trees evaluated per `(series, index, context)`.

Related:
  - src/tickquant/contexts/rules/domain/services/predicates.py
  - src/tickquant/contexts/rules/application/services/rule_executor.py
  - src/tickquant/contexts/evaluation/application/services/evaluation_context.py
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Optional

from tickquant.shared_kernel.primitives import CandleSeries

if TYPE_CHECKING:
    from tickquant.contexts.evaluation.application.services import EvaluationContext

Predicate = Callable[[CandleSeries, int, "EvaluationContext"], Optional[bool]]


class Rule:
    """
    Base of every rule node; `&` / `|` build short-circuiting combinators.
    """

    __slots__ = ()

    def evaluate(self, series: CandleSeries, index: int, context: EvaluationContext) -> bool:
        raise NotImplementedError

    def and_(self, other: Rule) -> AndRule:
        return AndRule(left=self, right=_require_rule(other))

    def or_(self, other: Rule) -> OrRule:
        return OrRule(left=self, right=_require_rule(other))

    def __and__(self, other: Rule) -> AndRule:
        return self.and_(other)

    def __or__(self, other: Rule) -> OrRule:
        return self.or_(other)


@dataclass(frozen=True, slots=True)
class PredicateRule(Rule):
    """Leaf around an inline predicate; a `None` result (absent data) is `False`."""

    predicate: Predicate
    name: str = "predicate"

    def __post_init__(self) -> None:
        if not callable(self.predicate):
            raise ValueError("PredicateRule requires callable predicate")

    def evaluate(self, series: CandleSeries, index: int, context: EvaluationContext) -> bool:
        result = self.predicate(series, index, context)
        return result is not None and bool(result)


@dataclass(frozen=True, slots=True)
class NamedRule(Rule):
    """Leaf resolved through the context's rule registry with bound positional params."""

    name: str
    params: tuple[object, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "params", tuple(self.params))
        if not self.name.strip():
            raise ValueError("NamedRule requires non-empty name")

    def evaluate(self, series: CandleSeries, index: int, context: EvaluationContext) -> bool:
        return context.get_rule(self.name, *self.params).evaluate_at(index)


@dataclass(frozen=True, slots=True)
class AndRule(Rule):
    """`left AND right`; right is evaluated only when left holds."""

    left: Rule
    right: Rule

    def evaluate(self, series: CandleSeries, index: int, context: EvaluationContext) -> bool:
        if not self.left.evaluate(series, index, context):
            return False
        return self.right.evaluate(series, index, context)


@dataclass(frozen=True, slots=True)
class OrRule(Rule):
    """`left OR right`; right is evaluated only when left fails."""

    left: Rule
    right: Rule

    def evaluate(self, series: CandleSeries, index: int, context: EvaluationContext) -> bool:
        if self.left.evaluate(series, index, context):
            return True
        return self.right.evaluate(series, index, context)


def named_rule(name: str, *params: object) -> NamedRule:
    return NamedRule(name=name, params=params)


def _require_rule(other: object) -> Rule:
    if not isinstance(other, Rule):
        raise TypeError(f"rules combine only with rules, got {type(other).__name__}")
    return other
