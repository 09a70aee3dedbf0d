from .backtest_errors import InvalidConfigurationError

__all__ = ["InvalidConfigurationError"]
