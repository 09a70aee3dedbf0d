from .definitions import all_defs
from .forward_cache import ForwardCache
from .indicator_catalog import IndicatorCatalog, default_catalog
from .indicators import CumulativeIndicator, MovingAverageIndicator, SimpleIndicator
from .operations import (
    BandValue,
    DerivedSeries,
    MaterializedSeries,
    OperationLayer,
    RollingBand,
    combine,
    diff,
    relative_diff,
    shift,
    values_of,
)

__all__ = [
    "BandValue",
    "CumulativeIndicator",
    "DerivedSeries",
    "ForwardCache",
    "IndicatorCatalog",
    "MaterializedSeries",
    "MovingAverageIndicator",
    "OperationLayer",
    "RollingBand",
    "SimpleIndicator",
    "all_defs",
    "combine",
    "default_catalog",
    "diff",
    "relative_diff",
    "shift",
    "values_of",
]
