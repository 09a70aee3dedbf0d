from .backtest_builder import Backtest, BacktestBuilder
from .backtest_runner import BacktestRunner
from .metrics_calculator import (
    BacktestMetrics,
    BacktestMetricsCalculator,
    RoundTrip,
    round_trips,
)
from .time_axis import build_time_axis

__all__ = [
    "Backtest",
    "BacktestBuilder",
    "BacktestMetrics",
    "BacktestMetricsCalculator",
    "BacktestRunner",
    "RoundTrip",
    "build_time_axis",
    "round_trips",
]
