from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Iterator

import pytest

from tickquant.contexts.evaluation.application.services import EvaluationContext
from tickquant.contexts.registry.application.services import Registries
from tickquant.contexts.rules.domain import (
    PredicateRule,
    Rule,
    above,
    below,
    constant,
    crosses_above,
    crosses_below,
    derived,
    indicator,
    named_rule,
)
from tickquant.shared_kernel.primitives import Candle, CandleSeries, Period, UtcTimestamp

_START = datetime(2024, 1, 1, tzinfo=timezone.utc)
_CLOSES = [5.0, 4.0, 6.0, 7.0, 3.0, 8.0, 8.0, 2.0]


@pytest.fixture(name="series")
def series_fixture() -> CandleSeries:
    return CandleSeries.of(
        symbol="RULES",
        period=Period.DAY,
        candles=[
            Candle(
                timestamp=UtcTimestamp(_START + timedelta(days=offset)),
                open=close,
                high=close,
                low=close,
                close=close,
                volume=1.0,
            )
            for offset, close in enumerate(_CLOSES)
        ],
    )


@pytest.fixture(name="context")
def context_fixture(series: CandleSeries) -> Iterator[EvaluationContext]:
    registries = Registries()
    registries.register_rule("close_above", lambda bar, params: bar.close > params[0], 1)
    with EvaluationContext(series, registries=registries) as context:
        yield context


def _mask(rule: Rule, context: EvaluationContext) -> list[bool]:
    return [rule.evaluate(context.series, index, context) for index in range(len(context))]


def test_comparisons_against_constants(context: EvaluationContext) -> None:
    assert _mask(above("price.close", 5), context) == [
        False,
        False,
        True,
        True,
        False,
        True,
        True,
        False,
    ]
    assert _mask(below(indicator("price.close"), constant(4)), context) == [
        False,
        False,
        False,
        False,
        True,
        False,
        False,
        True,
    ]


def test_absent_operand_never_holds(context: EvaluationContext) -> None:
    warmup_gated = above(indicator("ma.sma", 3), 0)

    assert _mask(warmup_gated, context)[:2] == [False, False]
    assert all(_mask(warmup_gated, context)[2:])
    assert _mask(below(indicator("ma.sma", 3), 1_000), context)[:2] == [False, False]


def test_crossings_require_prior_relation(context: EvaluationContext) -> None:
    """
    Verify crossing predicates compare the previous and current index pair.

    Args:
        context: Open evaluation context fixture.
    Returns:
        None.
    Assumptions:
        Closes are `5 4 6 7 3 8 8 2` against a threshold of 5.
    Raises:
        AssertionError: If crossing detection differs from the prior/current definition.
    Side Effects:
        None.
    """
    assert _mask(crosses_above("price.close", 5), context) == [
        False,
        False,
        True,
        False,
        False,
        True,
        False,
        False,
    ]
    assert _mask(crosses_below("price.close", 5), context) == [
        False,
        True,
        False,
        False,
        True,
        False,
        False,
        True,
    ]


def test_and_or_are_commutative(context: EvaluationContext) -> None:
    left = above("price.close", 4)
    right = below("price.close", 8)

    assert _mask(left & right, context) == _mask(right & left, context)
    assert _mask(left | right, context) == _mask(right | left, context)
    assert _mask(left & right, context) == [
        True,
        False,
        True,
        True,
        False,
        False,
        False,
        False,
    ]


def test_combinators_short_circuit(context: EvaluationContext) -> None:
    calls: list[int] = []

    def counting(series: CandleSeries, index: int, ctx: EvaluationContext) -> bool:
        calls.append(index)
        return True

    never = PredicateRule(predicate=lambda series, index, ctx: False)
    always = PredicateRule(predicate=lambda series, index, ctx: True)
    probe = PredicateRule(predicate=counting, name="probe")

    assert not (never & probe).evaluate(context.series, 0, context)
    assert (always | probe).evaluate(context.series, 0, context)
    assert calls == []
    assert (always & probe).evaluate(context.series, 1, context)
    assert calls == [1]


def test_predicate_none_is_false(context: EvaluationContext) -> None:
    absent = PredicateRule(predicate=lambda series, index, ctx: None)

    assert absent.evaluate(context.series, 0, context) is False


def test_named_rule_resolves_through_context(context: EvaluationContext) -> None:
    assert _mask(named_rule("close_above", 6.5), context) == [
        False,
        False,
        False,
        True,
        False,
        True,
        True,
        False,
    ]


def test_derived_band_levels(context: EvaluationContext) -> None:
    close = indicator("price.close")
    upper = derived("rolling_band", close, 2, 1.0, level="upper")
    lower = derived("rolling_band", close, 2, 1.0, level="lower")

    assert upper.value(context, 0) is None
    assert upper.value(context, 1) == pytest.approx(5.0)
    assert lower.value(context, 1) == pytest.approx(4.0)
    assert _mask(above(close, upper), context)[1:] == [False] * (len(_CLOSES) - 1)


def test_rule_validation() -> None:
    with pytest.raises(ValueError):
        named_rule("  ")
    with pytest.raises(ValueError):
        derived("rolling_band", indicator("price.close"), 2, 1.0, level="top")
    with pytest.raises(TypeError):
        above("price.close", 5) & True  # type: ignore[operator]
    with pytest.raises(TypeError):
        above(True, 5)
