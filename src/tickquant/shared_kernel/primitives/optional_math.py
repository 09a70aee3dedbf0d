"""
Arithmetic on optional numbers where `None` means absent.

Every helper returns `None` when any operand is absent; division also returns `None` for a zero
divisor. Indicator, operation and rule code share these instead of sentinel values.
"""

from __future__ import annotations

import math
from typing import Iterable, Sequence

OptionalFloat = float | None


def opt_add(left: OptionalFloat, right: OptionalFloat) -> OptionalFloat:
    if left is None or right is None:
        return None
    return left + right


def opt_sub(left: OptionalFloat, right: OptionalFloat) -> OptionalFloat:
    if left is None or right is None:
        return None
    return left - right


def opt_mul(left: OptionalFloat, right: OptionalFloat) -> OptionalFloat:
    if left is None or right is None:
        return None
    return left * right


def opt_div(left: OptionalFloat, right: OptionalFloat) -> OptionalFloat:
    if left is None or right is None or right == 0:
        return None
    return left / right


def opt_mean(values: Sequence[OptionalFloat]) -> OptionalFloat:
    """Arithmetic mean; absent when empty or when any item is absent."""
    if len(values) == 0 or any(value is None for value in values):
        return None
    return math.fsum(values) / len(values)  # type: ignore[arg-type]


def opt_pstdev(values: Sequence[OptionalFloat]) -> OptionalFloat:
    """Population standard deviation; absent under the same rules as `opt_mean`."""
    mean = opt_mean(values)
    if mean is None:
        return None
    variance = math.fsum((value - mean) ** 2 for value in values) / len(values)  # type: ignore[operator]
    return math.sqrt(variance)


def opt_compare(left: OptionalFloat, right: OptionalFloat, operator: str) -> bool:
    """
    Compare two optional numbers; absence on either side never holds.

    Supported operators: `>`, `>=`, `<`, `<=`, `==`, `!=`.
    """
    if left is None or right is None:
        return False
    if operator == ">":
        return left > right
    if operator == ">=":
        return left >= right
    if operator == "<":
        return left < right
    if operator == "<=":
        return left <= right
    if operator == "==":
        return left == right
    if operator == "!=":
        return left != right
    raise ValueError(f"unsupported comparison operator: {operator!r}")


def all_present(values: Iterable[OptionalFloat]) -> bool:
    return all(value is not None for value in values)
