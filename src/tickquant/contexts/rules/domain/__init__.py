from .entities import (
    AndRule,
    Constant,
    DerivedRef,
    FuncRef,
    IndicatorRef,
    NamedRule,
    Operand,
    OrRule,
    PredicateRule,
    Reference,
    Rule,
    as_operand,
    constant,
    derived,
    func,
    indicator,
    named_rule,
)
from .services import above, below, crosses_above, crosses_below

__all__ = [
    "AndRule",
    "Constant",
    "DerivedRef",
    "FuncRef",
    "IndicatorRef",
    "NamedRule",
    "Operand",
    "OrRule",
    "PredicateRule",
    "Reference",
    "Rule",
    "above",
    "as_operand",
    "below",
    "constant",
    "crosses_above",
    "crosses_below",
    "derived",
    "func",
    "indicator",
    "named_rule",
]
