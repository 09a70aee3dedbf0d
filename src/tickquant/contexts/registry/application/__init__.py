from .services import (
    CompiledExpression,
    ExpressionCompiler,
    NameRegistry,
    Registries,
    default_registries,
    register_func_expression,
    register_rule_expression,
    reset_default_registries,
)

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
