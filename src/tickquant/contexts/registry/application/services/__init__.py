from .expression_compiler import (
    CompiledExpression,
    ExpressionCompiler,
    register_func_expression,
    register_rule_expression,
)
from .name_registry import NameRegistry
from .registries import Registries, default_registries, reset_default_registries

__all__ = [
    "CompiledExpression",
    "ExpressionCompiler",
    "NameRegistry",
    "Registries",
    "default_registries",
    "register_func_expression",
    "register_rule_expression",
    "reset_default_registries",
]
