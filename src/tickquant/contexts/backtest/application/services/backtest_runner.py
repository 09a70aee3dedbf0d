from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

from tickquant.contexts.backtest.domain.entities import (
    BacktestResult,
    EquityPoint,
    OpenPosition,
    Position,
    Transaction,
)
from tickquant.contexts.backtest.domain.errors import InvalidConfigurationError
from tickquant.contexts.backtest.domain.value_objects import (
    AllocationPolicy,
    BacktestConfig,
    PortfolioAsset,
    TradeSide,
)
from tickquant.contexts.evaluation.application.services import EvaluationContext
from tickquant.contexts.indicators.application.services import IndicatorCatalog
from tickquant.contexts.registry.application.services import Registries
from tickquant.contexts.rules.application.services import RuleExecutor
from tickquant.shared_kernel.primitives import UtcTimestamp

from .time_axis import build_time_axis

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class _AssetSignals:
    """
    Precomputed buy/sell truth of one asset, indexed like its series.

    Related:
      - src/tickquant/contexts/backtest/application/services/backtest_runner.py
      - src/tickquant/contexts/rules/application/services/rule_executor.py
    """

    buy: tuple[bool, ...]
    sell: tuple[bool, ...]


class _RunState:
    """
    Mutable cash/position book of one run; never shared between runs.

    `step_cash` is the free cash at the start of the current step, the base of the
    `USE_ALL_AVAILABLE_CASH` weight cap.
    """

    def __init__(self, *, cash: float, asset_count: int) -> None:
        self.cash = cash
        self.step_cash = cash
        self.positions: list[Position | None] = [None] * asset_count
        self.last_closes: list[float | None] = [None] * asset_count
        self.transactions: list[Transaction] = []
        self.equity_curve: list[EquityPoint] = []

    def equity(self) -> float:
        total = self.cash
        for position, last_close in zip(self.positions, self.last_closes):
            if position is not None and last_close is not None:
                total += position.quantity * last_close
        return total


class BacktestRunner:
    """
    Simulate a validated portfolio configuration over its unified time axis.

    Rule evaluation per asset may run concurrently (one evaluation context per asset), the
    cash/position pass is strictly sequential: ascending timestamp, then asset registration
    order. Results are therefore identical for any `max_workers`.

    Related:
      - src/tickquant/contexts/backtest/application/services/backtest_builder.py
      - src/tickquant/contexts/backtest/domain/entities/ledger.py
      - src/tickquant/contexts/rules/application/services/rule_executor.py
    """

    def __init__(
        self,
        *,
        max_workers: int = 1,
        rule_executor: RuleExecutor | None = None,
        registries: Registries | None = None,
        catalog: IndicatorCatalog | None = None,
    ) -> None:
        if max_workers <= 0:
            raise ValueError(f"max_workers must be > 0, got {max_workers}")
        self._max_workers = max_workers
        self._rule_executor = rule_executor if rule_executor is not None else RuleExecutor()
        self._registries = registries
        self._catalog = catalog

    def run(self, *, config: BacktestConfig, initial_cash: float) -> BacktestResult:
        """
        Run one backtest.

        Args:
            config: Validated portfolio configuration.
            initial_cash: Starting cash, becomes `principal`.
        Returns:
            BacktestResult: Ordered ledger, open positions, equity curve and balances.
        Assumptions:
            Absent indicator data makes rules false, never raises.
        Raises:
            InvalidConfigurationError: If `initial_cash` is not a positive number.
        Side Effects:
            Emits DEBUG fill logs and one INFO run summary.
        """
        if not initial_cash > 0.0:
            raise InvalidConfigurationError(
                "initial_cash must be > 0",
                errors=[
                    {
                        "path": "initial_cash",
                        "code": "non_positive",
                        "message": f"initial_cash must be > 0, got {initial_cash}",
                    }
                ],
            )
        principal = float(initial_cash)
        signals = self._precompute_signals(config=config)
        state = _RunState(cash=principal, asset_count=len(config.assets))

        axis = build_time_axis(asset.series for asset in config.assets)
        cursors = [0] * len(config.assets)
        for timestamp in axis:
            state.step_cash = state.cash
            present: list[tuple[int, int]] = []
            for asset_index, asset in enumerate(config.assets):
                cursor = cursors[asset_index]
                if cursor < len(asset.series) and asset.series[cursor].timestamp == timestamp:
                    present.append((asset_index, cursor))
                    state.last_closes[asset_index] = asset.series[cursor].close
                    cursors[asset_index] = cursor + 1

            for asset_index, series_index in present:
                self._step_asset(
                    config=config,
                    state=state,
                    asset_index=asset_index,
                    series_index=series_index,
                    timestamp=timestamp,
                    asset_signals=signals[asset_index],
                )
            state.equity_curve.append(EquityPoint(timestamp=timestamp, equity=state.equity()))

        open_positions: list[OpenPosition] = []
        open_value = 0.0
        for position, last_close in zip(state.positions, state.last_closes):
            if position is None or last_close is None:
                continue
            open_position = OpenPosition(position=position, mark_price=last_close)
            open_positions.append(open_position)
            open_value += open_position.mark_value

        final_balance = state.cash + open_value
        result = BacktestResult(
            transactions=tuple(state.transactions),
            principal=principal,
            final_balance=final_balance,
            corrected_balance=final_balance,
            corrected_profit_loss=(final_balance - principal) / principal,
            open_positions=tuple(open_positions),
            equity_curve=tuple(state.equity_curve),
            cash=state.cash,
        )
        log.info(
            "backtest run complete",
            extra={
                "assets": len(config.assets),
                "steps": len(axis),
                "transactions": len(result.transactions),
                "open_positions": len(result.open_positions),
                "principal": principal,
                "final_balance": final_balance,
                "corrected_profit_loss": result.corrected_profit_loss,
            },
        )
        return result

    def _precompute_signals(self, *, config: BacktestConfig) -> list[_AssetSignals]:
        if self._max_workers == 1 or len(config.assets) == 1:
            return [self._asset_signals(asset=asset, config=config) for asset in config.assets]
        with ThreadPoolExecutor(max_workers=self._max_workers) as pool:
            futures = [
                pool.submit(self._asset_signals, asset=asset, config=config)
                for asset in config.assets
            ]
            return [future.result() for future in futures]

    def _asset_signals(self, *, asset: PortfolioAsset, config: BacktestConfig) -> _AssetSignals:
        with EvaluationContext(
            asset.series,
            registries=self._registries,
            catalog=self._catalog,
        ) as context:
            buy = self._rule_executor.evaluate_mask(context, config.buy_rule)
            sell = self._rule_executor.evaluate_mask(context, config.sell_rule)
        return _AssetSignals(buy=tuple(buy), sell=tuple(sell))

    def _step_asset(
        self,
        *,
        config: BacktestConfig,
        state: _RunState,
        asset_index: int,
        series_index: int,
        timestamp: UtcTimestamp,
        asset_signals: _AssetSignals,
    ) -> None:
        asset = config.assets[asset_index]
        close = asset.series[series_index].close
        position = state.positions[asset_index]

        if position is None:
            if asset_signals.buy[series_index]:
                self._buy(
                    config=config,
                    state=state,
                    asset_index=asset_index,
                    close=close,
                    timestamp=timestamp,
                )
            return

        if asset_signals.sell[series_index]:
            price = close - config.premium
            notional = position.quantity * price
            fee = abs(notional) * config.fee_rate
            state.cash += notional - fee
            state.positions[asset_index] = None
            self._record(
                state=state,
                transaction=Transaction(
                    timestamp=timestamp,
                    symbol=asset.symbol,
                    side=TradeSide.SELL,
                    quantity=position.quantity,
                    price=price,
                    fee=fee,
                ),
            )

    def _buy(
        self,
        *,
        config: BacktestConfig,
        state: _RunState,
        asset_index: int,
        close: float,
        timestamp: UtcTimestamp,
    ) -> None:
        asset = config.assets[asset_index]
        if config.allocation_policy is AllocationPolicy.FIXED_WEIGHT:
            budget = min(state.cash, asset.target_weight * state.equity())
        else:
            budget = min(state.cash, asset.target_weight * state.step_cash)

        price = close + config.premium
        quantity = 0.0
        if budget > 0.0 and price > 0.0:
            quantity = budget / (price * (1.0 + config.fee_rate))
        if quantity <= 0.0:
            log.debug(
                "backtest buy skipped",
                extra={
                    "symbol": str(asset.symbol),
                    "timestamp": str(timestamp),
                    "budget": budget,
                    "price": price,
                },
            )
            return

        notional = quantity * price
        fee = notional * config.fee_rate
        state.cash -= notional + fee
        state.positions[asset_index] = Position(
            symbol=asset.symbol,
            quantity=quantity,
            entry_price=price,
            entry_timestamp=timestamp,
            entry_fee=fee,
        )
        self._record(
            state=state,
            transaction=Transaction(
                timestamp=timestamp,
                symbol=asset.symbol,
                side=TradeSide.BUY,
                quantity=quantity,
                price=price,
                fee=fee,
            ),
        )

    @staticmethod
    def _record(*, state: _RunState, transaction: Transaction) -> None:
        state.transactions.append(transaction)
        log.debug(
            "backtest fill",
            extra={
                "symbol": str(transaction.symbol),
                "timestamp": str(transaction.timestamp),
                "side": transaction.side.value,
                "quantity": transaction.quantity,
                "price": transaction.price,
                "fee": transaction.fee,
                "cash": state.cash,
            },
        )
