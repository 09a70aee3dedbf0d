from __future__ import annotations

import math
import time
from datetime import datetime, timedelta, timezone

from tickquant.contexts.backtest.application.services import BacktestBuilder
from tickquant.contexts.backtest.domain import AllocationPolicy
from tickquant.contexts.rules.application.services import RuleExecutor
from tickquant.contexts.rules.domain import crosses_above, crosses_below, indicator
from tickquant.shared_kernel.primitives import Candle, CandleSeries, Period, UtcTimestamp

_CATASTROPHIC_UPPER_BOUND_SECONDS = 60.0
_START = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _synthetic_series(symbol: str, *, size: int, phase: float) -> CandleSeries:
    candles = []
    for offset in range(size):
        close = 100.0 + 15.0 * math.sin(offset / 40.0 + phase) + 3.0 * math.sin(offset / 7.0)
        candles.append(
            Candle(
                timestamp=UtcTimestamp(_START + timedelta(minutes=offset)),
                open=close,
                high=close + 0.25,
                low=close - 0.25,
                close=close,
                volume=10.0 + offset % 5,
            )
        )
    return CandleSeries.of(symbol=symbol, period=Period.MINUTE, candles=candles)


def test_portfolio_backtest_perf_smoke() -> None:
    """
    Run a three-asset moving-average crossover backtest on synthetic minute candles.

    Args:
        None.
    Returns:
        None.
    Assumptions:
        Perf-smoke guards against catastrophic regressions only.
    Raises:
        AssertionError: If the run produces no trades or exceeds the coarse time bound.
    Side Effects:
        Triggers Numba JIT compilation on first kernel use.
    """
    fast = indicator("ma.sma", 10)
    slow = indicator("ma.sma", 50)
    builder = (
        BacktestBuilder(
            max_workers=3,
            rule_executor=RuleExecutor(max_workers=2, parallel_min_indices=1_024),
        )
        .buy_rule(crosses_above(fast, slow))
        .sell_rule(crosses_below(fast, slow))
        .allocation_policy(AllocationPolicy.FIXED_WEIGHT)
        .fee_rate(0.001)
        .premium(0.01)
    )
    for position, symbol in enumerate(("AAA", "BBB", "CCC")):
        builder.add_asset(
            _synthetic_series(symbol, size=5_000, phase=float(position)),
            target_weight=1.0 / 3.0,
        )

    started = time.perf_counter()
    result = builder.build().run(100_000.0)
    elapsed = time.perf_counter() - started

    assert len(result.equity_curve) == 5_000
    assert len(result.transactions) > 0
    assert elapsed < _CATASTROPHIC_UPPER_BOUND_SECONDS
