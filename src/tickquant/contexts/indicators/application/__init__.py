from .ports import RollingWindowCompute, TickSource
from .services import (
    BandValue,
    CumulativeIndicator,
    DerivedSeries,
    ForwardCache,
    IndicatorCatalog,
    MaterializedSeries,
    MovingAverageIndicator,
    OperationLayer,
    RollingBand,
    SimpleIndicator,
    all_defs,
    combine,
    default_catalog,
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
    "RollingWindowCompute",
    "SimpleIndicator",
    "TickSource",
    "all_defs",
    "combine",
    "default_catalog",
    "diff",
    "relative_diff",
    "shift",
    "values_of",
]
