from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Sequence

import pytest

from tickquant.contexts.indicators.application.services import (
    CumulativeIndicator,
    MovingAverageIndicator,
    SimpleIndicator,
)
from tickquant.contexts.indicators.domain.errors import InvalidParameterError
from tickquant.shared_kernel.primitives import Candle, CandleSeries, Period, UtcTimestamp

_START = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _series(closes: Sequence[float]) -> CandleSeries:
    return CandleSeries.of(
        symbol="TEST",
        period=Period.MINUTE,
        candles=[
            Candle(
                timestamp=UtcTimestamp(_START + timedelta(minutes=offset)),
                open=close,
                high=close + 1.0,
                low=close - 1.0,
                close=close,
                volume=1.0,
            )
            for offset, close in enumerate(closes)
        ],
    )


def _mean_close(window: Sequence[Candle]) -> float:
    return sum(candle.close for candle in window) / len(window)


def test_simple_indicator_three_period_mean() -> None:
    indicator = SimpleIndicator(_series([1, 2, 3, 4, 5]), period_count=3, compute=_mean_close)

    assert indicator.values() == [None, None, 2.0, 3.0, 4.0]
    assert indicator.value_at(2).timestamp == UtcTimestamp(_START + timedelta(minutes=2))


@pytest.mark.parametrize("period_count", [1, 2, 4, 7, 12])
def test_simple_indicator_is_absent_before_full_window(period_count: int) -> None:
    indicator = SimpleIndicator(
        _series([float(value) for value in range(10)]),
        period_count=period_count,
        compute=_mean_close,
    )

    values = indicator.values()
    for index, value in enumerate(values):
        if index < period_count - 1:
            assert value is None
        else:
            assert value is not None


@pytest.mark.parametrize("period_count", [0, -3, 2.0, True])
def test_simple_indicator_rejects_invalid_window(period_count: object) -> None:
    with pytest.raises(InvalidParameterError):
        SimpleIndicator(_series([1.0]), period_count=period_count, compute=_mean_close)  # type: ignore[arg-type]


def test_simple_indicator_does_not_evaluate_beyond_request() -> None:
    seen: list[int] = []

    def compute(window: Sequence[Candle]) -> float:
        seen.append(len(window))
        return window[-1].close

    indicator = SimpleIndicator(_series([1, 2, 3, 4, 5]), period_count=2, compute=compute)
    indicator.value_at(2)

    assert seen == [2, 2]


def test_cumulative_indicator_with_callables_and_null_value() -> None:
    series = _series([1, 2, 3, 4])
    closes = series.closes()
    running = CumulativeIndicator(
        series,
        initial_index=1,
        seed=lambda index: closes[index],
        step=lambda previous, index: None if previous is None else previous + closes[index],
        null_value=lambda index: -1.0,
    )

    assert running.values() == [-1.0, 2.0, 5.0, 9.0]


def test_cumulative_indicator_subclass_overrides() -> None:
    class Counter(CumulativeIndicator):
        def seed(self, index: int) -> float | None:
            return 10.0

        def step(self, previous: float | None, index: int) -> float | None:
            return None if previous is None else previous + 1.0

    assert Counter(_series([1, 1, 1])).values() == [10.0, 11.0, 12.0]


def test_cumulative_indicator_without_seed_fails_on_access() -> None:
    indicator = CumulativeIndicator(_series([1.0]))
    with pytest.raises(NotImplementedError):
        indicator.value_at(0)


def test_moving_average_recurrence() -> None:
    series = _series([1, 2, 3, 4, 5])
    closes = series.closes()
    indicator = MovingAverageIndicator(
        series,
        seed_index=2,
        seed_value=lambda index: 2.0,
        raw_value=lambda index: closes[index],
        alpha=0.5,
    )

    assert indicator.values() == [None, None, 2.0, 3.0, 4.0]


def test_moving_average_absence_is_strict() -> None:
    series = _series([1, 2, 3, 4, 5, 6])
    closes = series.closes()
    indicator = MovingAverageIndicator(
        series,
        seed_index=0,
        seed_value=lambda index: closes[index],
        raw_value=lambda index: None if index == 2 else closes[index],
        alpha=lambda index: 2.0 if index == 4 else 0.5,
    )

    values = indicator.values()
    assert values[1] == 1.5
    assert values[2] is None
    assert values[3] is None
    assert values[5] is None
    assert indicator.alpha_at(4) is None
    assert indicator.alpha_at(5) == 0.5


@pytest.mark.parametrize("alpha", [0.0, -0.1, 1.5])
def test_moving_average_rejects_constant_alpha_out_of_range(alpha: float) -> None:
    with pytest.raises(InvalidParameterError):
        MovingAverageIndicator(
            _series([1.0]),
            seed_index=0,
            seed_value=lambda index: 1.0,
            raw_value=lambda index: 1.0,
            alpha=alpha,
        )
