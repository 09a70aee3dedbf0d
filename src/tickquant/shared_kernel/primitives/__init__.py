"""
Shared Kernel primitives.

This package re-exports the minimal set of domain primitives so that other
modules can import them from one place:

    from tickquant.shared_kernel.primitives import Candle, CandleSeries, Period, Tick
"""

from .candle import Candle
from .candle_series import CandleSeries
from .optional_math import (
    OptionalFloat,
    all_present,
    opt_add,
    opt_compare,
    opt_div,
    opt_mean,
    opt_mul,
    opt_pstdev,
    opt_sub,
)
from .period import Period
from .symbol import Symbol
from .tick import Tick
from .time_range import TimeRange
from .utc_timestamp import UtcTimestamp

__all__ = [
    "Candle",
    "CandleSeries",
    "OptionalFloat",
    "Period",
    "Symbol",
    "Tick",
    "TimeRange",
    "UtcTimestamp",
    "all_present",
    "opt_add",
    "opt_compare",
    "opt_div",
    "opt_mean",
    "opt_mul",
    "opt_pstdev",
    "opt_sub",
]
