from __future__ import annotations

import math
from dataclasses import dataclass

from tickquant.contexts.backtest.domain.value_objects import TradeSide
from tickquant.shared_kernel.primitives import Symbol, UtcTimestamp


@dataclass(frozen=True, slots=True)
class Position:
    """
    Position — one held lot of one asset, opened by a single buy.

    Related:
      - src/tickquant/contexts/backtest/application/services/backtest_runner.py
      - src/tickquant/contexts/backtest/domain/entities/ledger.py
    """

    symbol: Symbol
    quantity: float
    entry_price: float
    entry_timestamp: UtcTimestamp
    entry_fee: float

    def __post_init__(self) -> None:
        """
        Validate position invariants.

        Raises:
            ValueError: If quantity/price are non-positive or fee is negative.
        """
        if not math.isfinite(self.quantity) or self.quantity <= 0.0:
            raise ValueError("Position.quantity must be > 0")
        if not math.isfinite(self.entry_price) or self.entry_price <= 0.0:
            raise ValueError("Position.entry_price must be > 0")
        if not math.isfinite(self.entry_fee) or self.entry_fee < 0.0:
            raise ValueError("Position.entry_fee must be >= 0")

    @property
    def cost(self) -> float:
        """Cash spent to open the position, fee included."""
        return self.quantity * self.entry_price + self.entry_fee


@dataclass(frozen=True, slots=True)
class Transaction:
    """One fill recorded in the ledger."""

    timestamp: UtcTimestamp
    symbol: Symbol
    side: TradeSide
    quantity: float
    price: float
    fee: float

    def __post_init__(self) -> None:
        if not isinstance(self.side, TradeSide):
            object.__setattr__(self, "side", TradeSide(self.side))
        if not math.isfinite(self.quantity) or self.quantity <= 0.0:
            raise ValueError("Transaction.quantity must be > 0")
        if not math.isfinite(self.price):
            raise ValueError("Transaction.price must be finite")
        if not math.isfinite(self.fee) or self.fee < 0.0:
            raise ValueError("Transaction.fee must be >= 0")

    @property
    def notional(self) -> float:
        return self.quantity * self.price

    @property
    def cash_delta(self) -> float:
        """Signed cash movement of the fill: negative for buys, positive for sells."""
        if self.side is TradeSide.BUY:
            return -(self.notional + self.fee)
        return self.notional - self.fee


@dataclass(frozen=True, slots=True)
class OpenPosition:
    """A position still held at the end of a run, marked at its last known close."""

    position: Position
    mark_price: float

    @property
    def symbol(self) -> Symbol:
        return self.position.symbol

    @property
    def mark_value(self) -> float:
        return self.position.quantity * self.mark_price


@dataclass(frozen=True, slots=True)
class EquityPoint:
    timestamp: UtcTimestamp
    equity: float


@dataclass(frozen=True, slots=True)
class BacktestResult:
    """
    BacktestResult — ledger and summary figures of one `Backtest.run`.

    Invariants:
    - `transactions` ordered by (timestamp, asset registration order)
    - `corrected_balance == final_balance`
    - `corrected_profit_loss == (corrected_balance - principal) / principal`
    """

    transactions: tuple[Transaction, ...]
    principal: float
    final_balance: float
    corrected_balance: float
    corrected_profit_loss: float
    open_positions: tuple[OpenPosition, ...]
    equity_curve: tuple[EquityPoint, ...]
    cash: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "transactions", tuple(self.transactions))
        object.__setattr__(self, "open_positions", tuple(self.open_positions))
        object.__setattr__(self, "equity_curve", tuple(self.equity_curve))
        if not math.isfinite(self.principal) or self.principal <= 0.0:
            raise ValueError("BacktestResult.principal must be > 0")

    @property
    def total_fees(self) -> float:
        return sum(transaction.fee for transaction in self.transactions)
