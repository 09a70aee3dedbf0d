from __future__ import annotations

from datetime import datetime, timezone

import pytest

from tickquant.contexts.backtest.domain import (
    BacktestResult,
    OpenPosition,
    Position,
    TradeSide,
    Transaction,
)
from tickquant.shared_kernel.primitives import Symbol, UtcTimestamp

_TS = UtcTimestamp(datetime(2024, 1, 1, tzinfo=timezone.utc))


def test_transaction_cash_delta_by_side() -> None:
    buy = Transaction(
        timestamp=_TS, symbol=Symbol("abc"), side=TradeSide.BUY, quantity=2.0, price=5.0, fee=0.1
    )
    sell = Transaction(
        timestamp=_TS, symbol=Symbol("abc"), side="sell", quantity=2.0, price=6.0, fee=0.1
    )

    assert buy.notional == 10.0
    assert buy.cash_delta == pytest.approx(-10.1)
    assert sell.side is TradeSide.SELL
    assert sell.cash_delta == pytest.approx(11.9)


@pytest.mark.parametrize(
    ("quantity", "price", "fee"),
    [(0.0, 1.0, 0.0), (1.0, float("nan"), 0.0), (1.0, 1.0, -0.1)],
)
def test_transaction_rejects_invalid_fill(quantity: float, price: float, fee: float) -> None:
    with pytest.raises(ValueError):
        Transaction(
            timestamp=_TS,
            symbol=Symbol("abc"),
            side=TradeSide.BUY,
            quantity=quantity,
            price=price,
            fee=fee,
        )


def test_position_cost_and_open_mark() -> None:
    position = Position(
        symbol=Symbol("abc"),
        quantity=3.0,
        entry_price=10.0,
        entry_timestamp=_TS,
        entry_fee=0.3,
    )
    marked = OpenPosition(position=position, mark_price=12.0)

    assert position.cost == pytest.approx(30.3)
    assert marked.symbol == Symbol("ABC")
    assert marked.mark_value == pytest.approx(36.0)
    with pytest.raises(ValueError):
        Position(
            symbol=Symbol("abc"),
            quantity=1.0,
            entry_price=0.0,
            entry_timestamp=_TS,
            entry_fee=0.0,
        )


def test_result_requires_positive_principal() -> None:
    with pytest.raises(ValueError):
        BacktestResult(
            transactions=(),
            principal=0.0,
            final_balance=0.0,
            corrected_balance=0.0,
            corrected_profit_loss=0.0,
            open_positions=(),
            equity_curve=(),
            cash=0.0,
        )
