from ._common import (
    is_nan,
    rolling_mean_grid_f64,
    rolling_pstdev_grid_f64,
    rolling_sum_grid_f64,
)

__all__ = [
    "is_nan",
    "rolling_mean_grid_f64",
    "rolling_pstdev_grid_f64",
    "rolling_sum_grid_f64",
]
