from .services import (
    Backtest,
    BacktestBuilder,
    BacktestMetrics,
    BacktestMetricsCalculator,
    BacktestRunner,
    RoundTrip,
    build_time_axis,
    round_trips,
)

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
