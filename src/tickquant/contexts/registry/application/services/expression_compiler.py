"""
Compiler from small Python-syntax expressions to registry callables.

Supported subset: numeric and boolean literals, candle fields `open/high/low/close/volume`,
positional parameters `p0..pN`, `+ - * /`, unary `-`/`+`, comparisons (chains allowed),
`and`/`or`/`not`, and calls `ind("id", ...)`, `func("name", ...)`, `rule("name", ...)`,
`abs(x)`, `min(...)`, `max(...)`. Absent operands make arithmetic absent and comparisons false.

Related:
  - src/tickquant/contexts/registry/application/services/registries.py
  - src/tickquant/contexts/evaluation/application/services/evaluation_context.py
"""

from __future__ import annotations

import ast
import re
from dataclasses import dataclass
from typing import Any, Callable, NamedTuple, Sequence

from tickquant.contexts.indicators.domain.errors import InvalidParameterError
from tickquant.contexts.registry.domain.entities import RegistryEntry
from tickquant.shared_kernel.primitives import (
    CandleSeries,
    opt_add,
    opt_compare,
    opt_div,
    opt_mul,
    opt_sub,
)

from .registries import Registries

_CANDLE_FIELDS = ("open", "high", "low", "close", "volume")
_PARAM_NAME = re.compile(r"^p(0|[1-9][0-9]*)$")
_COMPARE_OPS: dict[type[ast.cmpop], str] = {
    ast.Gt: ">",
    ast.GtE: ">=",
    ast.Lt: "<",
    ast.LtE: "<=",
    ast.Eq: "==",
    ast.NotEq: "!=",
}
_BINARY_OPS: dict[type[ast.operator], Callable[[Any, Any], Any]] = {
    ast.Add: opt_add,
    ast.Sub: opt_sub,
    ast.Mult: opt_mul,
    ast.Div: opt_div,
}
_REFERENCE_CALLS = ("ind", "func", "rule")
_MATH_CALLS = ("abs", "min", "max")


class _Frame(NamedTuple):
    series: CandleSeries
    index: int
    params: tuple[object, ...]
    context: Any


_Node = Callable[[_Frame], Any]


@dataclass(frozen=True, slots=True)
class CompiledExpression:
    """
    Compiled expression with inferred arity (`max pN index + 1`).

    `evaluate(series, index, params, context)` returns a number, a bool or `None`.
    """

    source: str
    arity: int
    evaluate: Callable[[CandleSeries, int, tuple[object, ...], Any], Any]

    def as_func(self) -> Callable[[CandleSeries, int, Sequence[object], Any], Any]:
        evaluate = self.evaluate

        def compiled_func(
            series: CandleSeries,
            index: int,
            params: Sequence[object],
            context: Any,
        ) -> Any:
            return evaluate(series, index, tuple(params), context)

        compiled_func.__name__ = "compiled_func"
        return compiled_func

    def as_rule(self) -> Callable[[Any, Sequence[object]], bool]:
        evaluate = self.evaluate

        def compiled_rule(bar_view: Any, params: Sequence[object]) -> bool:
            result = evaluate(bar_view.series, bar_view.index, tuple(params), bar_view.context)
            return _truthy(result)

        compiled_rule.__name__ = "compiled_rule"
        return compiled_rule


class ExpressionCompiler:
    """
    Stateless compiler; one instance may be shared across threads.
    """

    def compile(self, text: str) -> CompiledExpression:
        """
        Parse and compile one expression.

        Args:
            text: Expression source.
        Returns:
            CompiledExpression: Closure tree plus inferred arity.
        Assumptions:
            Only the documented subset is accepted; nothing is passed to `eval`.
        Raises:
            InvalidParameterError: On syntax errors or unsupported constructs.
        Side Effects:
            None.
        """
        source = text.strip()
        if not source:
            raise InvalidParameterError("expression must be non-empty")
        try:
            tree = ast.parse(source, mode="eval")
        except SyntaxError as error:
            raise InvalidParameterError(
                f"invalid expression syntax: {error.msg}",
                details={"expression": source, "offset": error.offset},
            ) from error

        builder = _Builder(source=source)
        root = builder.build(tree.body)

        def evaluate(
            series: CandleSeries,
            index: int,
            params: tuple[object, ...],
            context: Any,
        ) -> Any:
            return root(_Frame(series=series, index=index, params=params, context=context))

        return CompiledExpression(source=source, arity=builder.arity, evaluate=evaluate)


class _Builder:
    def __init__(self, *, source: str) -> None:
        self._source = source
        self.arity = 0

    def build(self, node: ast.AST) -> _Node:
        if isinstance(node, ast.Constant):
            return self._constant(node)
        if isinstance(node, ast.Name):
            return self._name(node)
        if isinstance(node, ast.BinOp):
            return self._binary(node)
        if isinstance(node, ast.UnaryOp):
            return self._unary(node)
        if isinstance(node, ast.BoolOp):
            return self._boolean(node)
        if isinstance(node, ast.Compare):
            return self._compare(node)
        if isinstance(node, ast.Call):
            return self._call(node)
        raise self._unsupported(type(node).__name__)

    def _constant(self, node: ast.Constant) -> _Node:
        value = node.value
        if isinstance(value, int | float):
            return lambda frame: value
        raise self._unsupported(f"literal {value!r}")

    def _name(self, node: ast.Name) -> _Node:
        name = node.id
        if name in _CANDLE_FIELDS:
            return lambda frame: getattr(frame.series[frame.index], name)
        match = _PARAM_NAME.match(name)
        if match is None:
            raise self._unsupported(f"name {name!r}")
        position = int(match.group(1))
        self.arity = max(self.arity, position + 1)
        return lambda frame: frame.params[position]

    def _binary(self, node: ast.BinOp) -> _Node:
        operation = _BINARY_OPS.get(type(node.op))
        if operation is None:
            raise self._unsupported(f"operator {type(node.op).__name__}")
        left = self.build(node.left)
        right = self.build(node.right)
        return lambda frame: operation(_number(left(frame)), _number(right(frame)))

    def _unary(self, node: ast.UnaryOp) -> _Node:
        operand = self.build(node.operand)
        if isinstance(node.op, ast.Not):
            return lambda frame: not _truthy(operand(frame))
        if isinstance(node.op, ast.USub):
            return lambda frame: opt_mul(_number(operand(frame)), -1.0)
        if isinstance(node.op, ast.UAdd):
            return lambda frame: _number(operand(frame))
        raise self._unsupported(f"operator {type(node.op).__name__}")

    def _boolean(self, node: ast.BoolOp) -> _Node:
        operands = [self.build(value) for value in node.values]
        if isinstance(node.op, ast.And):
            return lambda frame: all(_truthy(operand(frame)) for operand in operands)
        return lambda frame: any(_truthy(operand(frame)) for operand in operands)

    def _compare(self, node: ast.Compare) -> _Node:
        symbols: list[str] = []
        for op in node.ops:
            symbol = _COMPARE_OPS.get(type(op))
            if symbol is None:
                raise self._unsupported(f"comparison {type(op).__name__}")
            symbols.append(symbol)
        terms = [self.build(node.left)] + [self.build(item) for item in node.comparators]

        def compare(frame: _Frame) -> bool:
            left = _number(terms[0](frame))
            for symbol, term in zip(symbols, terms[1:]):
                right = _number(term(frame))
                if not opt_compare(left, right, symbol):
                    return False
                left = right
            return True

        return compare

    def _call(self, node: ast.Call) -> _Node:
        if not isinstance(node.func, ast.Name) or node.keywords:
            raise self._unsupported("call form")
        callee = node.func.id
        if callee in _REFERENCE_CALLS:
            return self._reference_call(callee, node.args)
        if callee in _MATH_CALLS:
            return self._math_call(callee, node.args)
        raise self._unsupported(f"function {callee!r}")

    def _reference_call(self, callee: str, args: Sequence[ast.expr]) -> _Node:
        if not args or not isinstance(args[0], ast.Constant) or not isinstance(
            args[0].value, str
        ):
            raise self._unsupported(f"{callee}() requires a string name as first argument")
        target = args[0].value
        params = [self.build(arg) for arg in args[1:]]

        def bound_params(frame: _Frame) -> tuple[Any, ...] | None:
            values = tuple(param(frame) for param in params)
            if any(value is None for value in values):
                return None
            return values

        if callee == "ind":

            def indicator_value(frame: _Frame) -> Any:
                values = bound_params(frame)
                if values is None:
                    return None
                return frame.context.get(target, *values).value_at(frame.index).value

            return indicator_value

        if callee == "func":

            def func_value(frame: _Frame) -> Any:
                values = bound_params(frame)
                if values is None:
                    return None
                return frame.context.get_func(target, *values).value_at(frame.index).value

            return func_value

        def rule_value(frame: _Frame) -> bool:
            values = bound_params(frame)
            if values is None:
                return False
            return frame.context.get_rule(target, *values).evaluate_at(frame.index)

        return rule_value

    def _math_call(self, callee: str, args: Sequence[ast.expr]) -> _Node:
        operands = [self.build(arg) for arg in args]
        if callee == "abs":
            if len(operands) != 1:
                raise self._unsupported("abs() takes exactly one argument")
            operand = operands[0]

            def absolute(frame: _Frame) -> float | None:
                value = _number(operand(frame))
                return None if value is None else abs(value)

            return absolute

        if not operands:
            raise self._unsupported(f"{callee}() requires arguments")
        reducer = min if callee == "min" else max

        def reduce(frame: _Frame) -> float | None:
            values = [_number(operand(frame)) for operand in operands]
            if any(value is None for value in values):
                return None
            return reducer(values)  # type: ignore[type-var]

        return reduce

    def _unsupported(self, what: str) -> InvalidParameterError:
        return InvalidParameterError(
            f"unsupported expression construct: {what}",
            details={"expression": self._source},
        )


def register_func_expression(
    registries: Registries,
    name: str,
    text: str,
    *,
    compiler: ExpressionCompiler | None = None,
    replace: bool = False,
) -> RegistryEntry:
    """
    Compile expression and register it as a value-function.

    Args:
        registries: Target registries handle.
        name: Func name.
        text: Expression source.
        compiler: Optional compiler instance.
        replace: Overwrite an existing entry for this call.
    Returns:
        RegistryEntry: Stored entry with inferred arity.
    Assumptions:
        Registration goes through the normal collision policy.
    Raises:
        InvalidParameterError: If expression cannot be compiled.
        DuplicateNameError: If name collides under the reject policy.
    Side Effects:
        Mutates `registries.funcs`.
    """
    compiled = (compiler or ExpressionCompiler()).compile(text)
    return registries.register_func(name, compiled.as_func(), compiled.arity, replace=replace)


def register_rule_expression(
    registries: Registries,
    name: str,
    text: str,
    *,
    compiler: ExpressionCompiler | None = None,
    replace: bool = False,
) -> RegistryEntry:
    """Compile expression and register it as a rule (result normalized to bool)."""
    compiled = (compiler or ExpressionCompiler()).compile(text)
    return registries.register_rule(name, compiled.as_rule(), compiled.arity, replace=replace)


def _truthy(value: Any) -> bool:
    return value is not None and bool(value)


def _number(value: Any) -> Any:
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    return value
