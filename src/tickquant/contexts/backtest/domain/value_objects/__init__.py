from .allocation_policy import AllocationPolicy
from .portfolio import BacktestConfig, PortfolioAsset
from .trade_side import TradeSide

__all__ = ["AllocationPolicy", "BacktestConfig", "PortfolioAsset", "TradeSide"]
