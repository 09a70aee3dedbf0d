from __future__ import annotations

import pytest

from tickquant.shared_kernel.primitives import (
    all_present,
    opt_add,
    opt_compare,
    opt_div,
    opt_mean,
    opt_mul,
    opt_pstdev,
    opt_sub,
)


def test_arithmetic_propagates_absence() -> None:
    assert opt_add(1.0, None) is None
    assert opt_sub(None, 1.0) is None
    assert opt_mul(None, None) is None
    assert opt_div(1.0, None) is None
    assert opt_add(1.5, 2.0) == 3.5
    assert opt_sub(1.5, 2.0) == -0.5
    assert opt_mul(1.5, 2.0) == 3.0


def test_division_by_zero_is_absent() -> None:
    assert opt_div(1.0, 0.0) is None
    assert opt_div(3.0, 2.0) == 1.5


def test_mean_and_pstdev() -> None:
    assert opt_mean([]) is None
    assert opt_mean([1.0, None]) is None
    assert opt_mean([1.0, 2.0, 3.0]) == 2.0
    assert opt_pstdev([2.0, 4.0, 4.0, 4.0, 5.0, 5.0, 7.0, 9.0]) == pytest.approx(2.0)
    assert opt_pstdev([1.0, None]) is None


@pytest.mark.parametrize(
    ("left", "right", "operator", "expected"),
    [
        (2.0, 1.0, ">", True),
        (1.0, 1.0, ">=", True),
        (1.0, 2.0, "<", True),
        (2.0, 2.0, "<=", True),
        (2.0, 2.0, "==", True),
        (2.0, 3.0, "!=", True),
        (None, 1.0, ">", False),
        (1.0, None, "!=", False),
    ],
)
def test_compare_is_false_on_absence(
    left: float | None,
    right: float | None,
    operator: str,
    expected: bool,
) -> None:
    assert opt_compare(left, right, operator) is expected


def test_compare_rejects_unknown_operator() -> None:
    with pytest.raises(ValueError):
        opt_compare(1.0, 2.0, "<>")


def test_all_present() -> None:
    assert all_present([1.0, 0.0])
    assert not all_present([1.0, None])
