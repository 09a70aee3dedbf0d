from __future__ import annotations

import math
from dataclasses import dataclass

from tickquant.contexts.rules.domain.entities import Rule
from tickquant.shared_kernel.primitives import CandleSeries, Symbol

from .allocation_policy import AllocationPolicy


@dataclass(frozen=True, slots=True)
class PortfolioAsset:
    """One registered asset: its series and target weight."""

    series: CandleSeries
    target_weight: float

    @property
    def symbol(self) -> Symbol:
        return self.series.symbol


@dataclass(frozen=True, slots=True)
class BacktestConfig:
    """
    Validated portfolio configuration produced by `BacktestBuilder.build()`.

    Related:
      - src/tickquant/contexts/backtest/application/services/backtest_builder.py
      - src/tickquant/contexts/backtest/application/services/backtest_runner.py
    """

    assets: tuple[PortfolioAsset, ...]
    buy_rule: Rule
    sell_rule: Rule
    allocation_policy: AllocationPolicy
    fee_rate: float
    premium: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "assets", tuple(self.assets))
        if not math.isfinite(self.fee_rate) or not math.isfinite(self.premium):
            raise ValueError("BacktestConfig fee_rate and premium must be finite")

    @property
    def symbols(self) -> tuple[Symbol, ...]:
        return tuple(asset.symbol for asset in self.assets)
