from .entities import BacktestResult, EquityPoint, OpenPosition, Position, Transaction
from .errors import InvalidConfigurationError
from .value_objects import AllocationPolicy, BacktestConfig, PortfolioAsset, TradeSide

__all__ = [
    "AllocationPolicy",
    "BacktestConfig",
    "BacktestResult",
    "EquityPoint",
    "InvalidConfigurationError",
    "OpenPosition",
    "PortfolioAsset",
    "Position",
    "TradeSide",
    "Transaction",
]
