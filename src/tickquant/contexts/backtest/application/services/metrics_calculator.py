from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from tickquant.contexts.backtest.domain.entities import BacktestResult, Transaction
from tickquant.contexts.backtest.domain.value_objects import TradeSide
from tickquant.shared_kernel.primitives import Symbol


@dataclass(frozen=True, slots=True)
class RoundTrip:
    """One closed buy/sell pair with its net profit (fees on both legs included)."""

    buy: Transaction
    sell: Transaction

    @property
    def profit(self) -> float:
        return self.sell.cash_delta + self.buy.cash_delta


@dataclass(frozen=True, slots=True)
class BacktestMetrics:
    round_trips: int
    winning_round_trips: int
    win_rate_pct: float | None
    total_fees: float
    total_return_pct: float
    max_drawdown_pct: float | None


class BacktestMetricsCalculator:
    """
    Summary metrics of one `BacktestResult`.

    Related:
      - src/tickquant/contexts/backtest/domain/entities/ledger.py
      - src/tickquant/contexts/backtest/application/services/backtest_runner.py
    """

    def calculate(self, result: BacktestResult) -> BacktestMetrics:
        """
        Calculate round-trip, fee, return and drawdown figures.

        Args:
            result: Finished backtest result.
        Returns:
            BacktestMetrics: Deterministic summary.
        Assumptions:
            Ledger alternates buy/sell per symbol; a trailing buy is an open position.
        Raises:
            None.
        Side Effects:
            None.
        """
        trips = round_trips(result.transactions)
        winners = sum(1 for trip in trips if trip.profit > 0.0)
        win_rate_pct = None
        if trips:
            win_rate_pct = winners / len(trips) * 100.0
        return BacktestMetrics(
            round_trips=len(trips),
            winning_round_trips=winners,
            win_rate_pct=win_rate_pct,
            total_fees=result.total_fees,
            total_return_pct=result.corrected_profit_loss * 100.0,
            max_drawdown_pct=_max_drawdown_pct(
                equity=[point.equity for point in result.equity_curve]
            ),
        )


def round_trips(transactions: tuple[Transaction, ...]) -> list[RoundTrip]:
    """Pair each sell with the preceding buy of the same symbol, in ledger order."""
    open_buys: dict[Symbol, Transaction] = {}
    trips: list[RoundTrip] = []
    for transaction in transactions:
        if transaction.side is TradeSide.BUY:
            open_buys[transaction.symbol] = transaction
            continue
        buy = open_buys.pop(transaction.symbol, None)
        if buy is not None:
            trips.append(RoundTrip(buy=buy, sell=transaction))
    return trips


def _max_drawdown_pct(*, equity: list[float]) -> float | None:
    if not equity:
        return None
    values = np.asarray(equity, dtype=np.float64)
    peaks = np.maximum.accumulate(values)
    if np.any(peaks <= 0.0):
        return None
    drawdown = 1.0 - np.divide(values, peaks)
    if not np.all(np.isfinite(drawdown)):
        return None
    return float(np.max(drawdown)) * 100.0
