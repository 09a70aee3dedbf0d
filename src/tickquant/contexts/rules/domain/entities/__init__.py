from .operands import (
    Constant,
    DerivedRef,
    FuncRef,
    IndicatorRef,
    Operand,
    Reference,
    as_operand,
    constant,
    derived,
    func,
    indicator,
)
from .rule import AndRule, NamedRule, OrRule, PredicateRule, Rule, named_rule

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
    "as_operand",
    "constant",
    "derived",
    "func",
    "indicator",
    "named_rule",
]
