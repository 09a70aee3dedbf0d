from __future__ import annotations

import math
from datetime import datetime, timedelta, timezone

import pytest

from tickquant.contexts.evaluation.application.services import EvaluationContext
from tickquant.contexts.rules.application.services import RuleExecutor
from tickquant.contexts.rules.domain import above, crosses_above, indicator
from tickquant.platform.config import RulesRuntimeConfig, TickQuantRuntimeConfig
from tickquant.shared_kernel.primitives import Candle, CandleSeries, Period, UtcTimestamp

_START = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _wave_series(size: int) -> CandleSeries:
    closes = [100.0 + 10.0 * math.sin(offset / 7.0) for offset in range(size)]
    return CandleSeries.of(
        symbol="WAVE",
        period=Period.HOUR,
        candles=[
            Candle(
                timestamp=UtcTimestamp(_START + timedelta(hours=offset)),
                open=close,
                high=close + 0.5,
                low=close - 0.5,
                close=close,
                volume=1.0,
            )
            for offset, close in enumerate(closes)
        ],
    )


def test_parallel_and_serial_masks_match() -> None:
    """
    Verify chunked thread-pool evaluation returns exactly the serial mask.

    Args:
        None.
    Returns:
        None.
    Assumptions:
        `parallel_min_indices=8` forces the pool path for a 300-candle series.
    Raises:
        AssertionError: If chunking reorders or drops indices.
    Side Effects:
        None.
    """
    series = _wave_series(300)
    rule = crosses_above("price.close", indicator("ma.sma", 10)) | above("price.close", 109)

    with EvaluationContext(series) as serial_context:
        serial = RuleExecutor(max_workers=1).evaluate_mask(serial_context, rule)
    with EvaluationContext(series) as parallel_context:
        parallel = RuleExecutor(max_workers=4, parallel_min_indices=8).evaluate_mask(
            parallel_context,
            rule,
        )

    assert len(serial) == len(series)
    assert parallel == serial
    assert any(serial)


def test_execute_returns_ascending_indices_and_candles() -> None:
    series = _wave_series(60)
    rule = above("price.close", 105)
    executor = RuleExecutor(max_workers=3, parallel_min_indices=4)

    with EvaluationContext(series) as context:
        mask = executor.evaluate_mask(context, rule)
        indices = executor.execute(context, rule)
        candles = executor.execute_candles(context, rule)

    assert indices == [index for index, hit in enumerate(mask) if hit]
    assert indices == sorted(indices)
    assert [candle.timestamp for candle in candles] == [series[i].timestamp for i in indices]
    assert all(candle.close > 105 for candle in candles)


def test_empty_series_yields_empty_mask() -> None:
    series = CandleSeries.of(symbol="EMPTY", period=Period.HOUR, candles=[])

    with EvaluationContext(series) as context:
        assert RuleExecutor(max_workers=2, parallel_min_indices=1).evaluate_mask(
            context,
            above("price.close", 0),
        ) == []


def test_executor_settings_validation_and_config() -> None:
    with pytest.raises(ValueError):
        RuleExecutor(max_workers=0)
    with pytest.raises(ValueError):
        RuleExecutor(parallel_min_indices=0)

    config = TickQuantRuntimeConfig(
        rules=RulesRuntimeConfig(executor_max_workers=3, parallel_min_indices=16),
    )
    executor = RuleExecutor.from_runtime_config(config=config)
    series = _wave_series(40)
    with EvaluationContext(series) as context:
        assert executor.evaluate_mask(context, above("price.close", 100)) == [
            candle.close > 100 for candle in series
        ]
