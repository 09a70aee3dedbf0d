"""
Built-in comparison predicates over operands.

Every predicate is `False` whenever an operand it needs is absent.

Related: tickquant.contexts.rules.domain.entities.operands,
  tickquant.contexts.rules.domain.entities.rule
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Union

from tickquant.contexts.rules.domain.entities import Operand, PredicateRule, as_operand
from tickquant.shared_kernel.primitives import CandleSeries, opt_compare

if TYPE_CHECKING:
    from tickquant.contexts.evaluation.application.services import EvaluationContext

OperandLike = Union[Operand, str, float, int]


def above(left: OperandLike, right: OperandLike) -> PredicateRule:
    return _comparison(left, right, operator=">", name="above")


def below(left: OperandLike, right: OperandLike) -> PredicateRule:
    return _comparison(left, right, operator="<", name="below")


def crosses_above(left: OperandLike, right: OperandLike) -> PredicateRule:
    """`left[i-1] <= right[i-1]` and `left[i] > right[i]`."""
    return _crossing(left, right, upward=True, name="crosses_above")


def crosses_below(left: OperandLike, right: OperandLike) -> PredicateRule:
    """`left[i-1] >= right[i-1]` and `left[i] < right[i]`."""
    return _crossing(left, right, upward=False, name="crosses_below")


def _comparison(
    left: OperandLike,
    right: OperandLike,
    *,
    operator: str,
    name: str,
) -> PredicateRule:
    left_operand = as_operand(left)
    right_operand = as_operand(right)

    def predicate(series: CandleSeries, index: int, context: EvaluationContext) -> bool:
        return opt_compare(
            left_operand.value(context, index),
            right_operand.value(context, index),
            operator,
        )

    return PredicateRule(predicate=predicate, name=name)


def _crossing(
    left: OperandLike,
    right: OperandLike,
    *,
    upward: bool,
    name: str,
) -> PredicateRule:
    left_operand = as_operand(left)
    right_operand = as_operand(right)
    before, after = ("<=", ">") if upward else (">=", "<")

    def predicate(series: CandleSeries, index: int, context: EvaluationContext) -> bool:
        if index == 0:
            return False
        previous_holds = opt_compare(
            left_operand.value(context, index - 1),
            right_operand.value(context, index - 1),
            before,
        )
        if not previous_holds:
            return False
        return opt_compare(
            left_operand.value(context, index),
            right_operand.value(context, index),
            after,
        )

    return PredicateRule(predicate=predicate, name=name)
