from __future__ import annotations

import math
from typing import Any, cast

from tickquant.contexts.backtest.domain.entities import BacktestResult
from tickquant.contexts.backtest.domain.errors import InvalidConfigurationError
from tickquant.contexts.backtest.domain.value_objects import (
    AllocationPolicy,
    BacktestConfig,
    PortfolioAsset,
)
from tickquant.contexts.indicators.application.services import IndicatorCatalog
from tickquant.contexts.registry.application.services import Registries
from tickquant.contexts.rules.application.services import RuleExecutor
from tickquant.contexts.rules.domain.entities import Rule
from tickquant.platform.config import TickQuantRuntimeConfig
from tickquant.shared_kernel.primitives import CandleSeries

from .backtest_runner import BacktestRunner

_FEE_RATE_DEFAULT = 0.0
_PREMIUM_DEFAULT = 0.0


class Backtest:
    """
    Built, immutable backtest: validated configuration plus the runner that executes it.

    Related:
      - src/tickquant/contexts/backtest/application/services/backtest_builder.py
      - src/tickquant/contexts/backtest/application/services/backtest_runner.py
    """

    def __init__(
        self,
        *,
        config: BacktestConfig,
        runner: BacktestRunner,
        initial_cash_default: float | None = None,
    ) -> None:
        self._config = config
        self._runner = runner
        self._initial_cash_default = initial_cash_default

    @property
    def config(self) -> BacktestConfig:
        return self._config

    def run(self, initial_cash: float | None = None) -> BacktestResult:
        """
        Run the backtest from `initial_cash` (or the configured default).

        Raises:
            InvalidConfigurationError: If no cash is given and no default is configured,
                or the cash is not positive.
        """
        cash = initial_cash if initial_cash is not None else self._initial_cash_default
        if cash is None:
            raise InvalidConfigurationError(
                "initial_cash is required",
                errors=[
                    {
                        "path": "initial_cash",
                        "code": "required",
                        "message": "initial_cash is required when no default is configured",
                    }
                ],
            )
        return self._runner.run(config=self._config, initial_cash=float(cash))


class BacktestBuilder:
    """
    Accumulate a portfolio configuration and validate it in `build()`.

    Setters return the builder, so configuration reads as one chained expression.

    Related:
      - src/tickquant/contexts/backtest/domain/value_objects/portfolio.py
      - src/tickquant/contexts/backtest/domain/errors/backtest_errors.py
      - src/tickquant/platform/config/runtime_config.py
    """

    def __init__(
        self,
        *,
        max_workers: int = 1,
        rule_executor: RuleExecutor | None = None,
        registries: Registries | None = None,
        catalog: IndicatorCatalog | None = None,
        initial_cash_default: float | None = None,
    ) -> None:
        self._assets: list[tuple[CandleSeries, Any]] = []
        self._buy_rule: Any = None
        self._sell_rule: Any = None
        self._allocation_policy: Any = AllocationPolicy.USE_ALL_AVAILABLE_CASH
        self._fee_rate: Any = _FEE_RATE_DEFAULT
        self._premium: Any = _PREMIUM_DEFAULT
        self._max_workers = max_workers
        self._rule_executor = rule_executor
        self._registries = registries
        self._catalog = catalog
        self._initial_cash_default = initial_cash_default

    @classmethod
    def from_runtime_config(
        cls,
        *,
        config: TickQuantRuntimeConfig,
        registries: Registries | None = None,
        catalog: IndicatorCatalog | None = None,
    ) -> BacktestBuilder:
        """
        Build a builder preloaded with `backtest` section defaults.

        Args:
            config: Loaded runtime config.
            registries: Optional registries for named rules/funcs.
            catalog: Optional indicator catalog.
        Returns:
            BacktestBuilder: Builder with fee, premium, policy, cash and workers from config.
        Assumptions:
            Rule executor parallelism comes from the `rules` section.
        Raises:
            None.
        Side Effects:
            None.
        """
        builder = cls(
            max_workers=config.backtest.max_workers,
            rule_executor=RuleExecutor.from_runtime_config(config=config),
            registries=registries,
            catalog=catalog,
            initial_cash_default=config.backtest.initial_cash_default,
        )
        return (
            builder.fee_rate(config.backtest.fee_rate_default)
            .premium(config.backtest.premium_default)
            .allocation_policy(config.backtest.allocation_policy_default)
        )

    def add_asset(self, series: CandleSeries, target_weight: float = 1.0) -> BacktestBuilder:
        self._assets.append((series, target_weight))
        return self

    def buy_rule(self, rule: Rule) -> BacktestBuilder:
        self._buy_rule = rule
        return self

    def sell_rule(self, rule: Rule) -> BacktestBuilder:
        self._sell_rule = rule
        return self

    def allocation_policy(self, policy: AllocationPolicy | str) -> BacktestBuilder:
        self._allocation_policy = policy
        return self

    def fee_rate(self, rate: float) -> BacktestBuilder:
        self._fee_rate = rate
        return self

    def premium(self, amount: float) -> BacktestBuilder:
        self._premium = amount
        return self

    def build(self) -> Backtest:
        """
        Validate accumulated settings and freeze them into a `Backtest`.

        Args:
            None.
        Returns:
            Backtest: Runnable backtest bound to an immutable `BacktestConfig`.
        Assumptions:
            Every violation is collected before raising, in a fixed order.
        Raises:
            InvalidConfigurationError: With one `{path, code, message}` item per violation.
        Side Effects:
            None.
        """
        errors: list[dict[str, str]] = []

        if not self._assets:
            errors.append(
                {"path": "assets", "code": "required", "message": "at least one asset is required"}
            )
        seen_symbols: set[str] = set()
        for position, (series, weight) in enumerate(self._assets):
            path = f"assets[{position}]"
            if not isinstance(series, CandleSeries):
                errors.append(
                    {
                        "path": f"{path}.series",
                        "code": "invalid_type",
                        "message": "series must be a CandleSeries",
                    }
                )
                continue
            symbol = str(series.symbol)
            if symbol in seen_symbols:
                errors.append(
                    {
                        "path": f"{path}.series",
                        "code": "duplicate_symbol",
                        "message": f"asset symbol {symbol} is registered more than once",
                    }
                )
            seen_symbols.add(symbol)
            if not _is_real(weight) or weight < 0.0:
                errors.append(
                    {
                        "path": f"{path}.target_weight",
                        "code": "out_of_range",
                        "message": f"target_weight must be a finite number >= 0, got {weight!r}",
                    }
                )

        if not isinstance(self._buy_rule, Rule):
            errors.append(
                {"path": "buy_rule", "code": "required", "message": "buy rule is required"}
            )
        if not isinstance(self._sell_rule, Rule):
            errors.append(
                {"path": "sell_rule", "code": "required", "message": "sell rule is required"}
            )

        policy = _normalize_policy(self._allocation_policy)
        if policy is None:
            errors.append(
                {
                    "path": "allocation_policy",
                    "code": "unknown_value",
                    "message": f"unknown allocation policy {self._allocation_policy!r}",
                }
            )

        if not _is_real(self._fee_rate) or not 0.0 <= self._fee_rate < 1.0:
            errors.append(
                {
                    "path": "fee_rate",
                    "code": "out_of_range",
                    "message": f"fee_rate must be in [0, 1), got {self._fee_rate!r}",
                }
            )
        if not _is_real(self._premium) or self._premium < 0.0:
            errors.append(
                {
                    "path": "premium",
                    "code": "out_of_range",
                    "message": f"premium must be >= 0, got {self._premium!r}",
                }
            )

        if errors:
            raise InvalidConfigurationError("invalid backtest configuration", errors=errors)

        config = BacktestConfig(
            assets=tuple(
                PortfolioAsset(series=series, target_weight=float(weight))
                for series, weight in self._assets
            ),
            buy_rule=self._buy_rule,
            sell_rule=self._sell_rule,
            allocation_policy=cast(AllocationPolicy, policy),
            fee_rate=float(self._fee_rate),
            premium=float(self._premium),
        )
        runner = BacktestRunner(
            max_workers=self._max_workers,
            rule_executor=self._rule_executor,
            registries=self._registries,
            catalog=self._catalog,
        )
        return Backtest(
            config=config,
            runner=runner,
            initial_cash_default=self._initial_cash_default,
        )


def _is_real(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def _normalize_policy(value: Any) -> AllocationPolicy | None:
    if isinstance(value, AllocationPolicy):
        return value
    if isinstance(value, str):
        try:
            return AllocationPolicy(value.strip().lower())
        except ValueError:
            return None
    return None
