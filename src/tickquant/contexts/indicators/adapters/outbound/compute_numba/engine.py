"""
Numba-backed implementation of the rolling-window compute port.

Related: tickquant.contexts.indicators.application.ports.compute.rolling_window_compute,
  tickquant.contexts.indicators.adapters.outbound.compute_numba.kernels._common
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from tickquant.contexts.indicators.application.ports.compute import RollingWindowCompute

from .kernels import rolling_mean_grid_f64, rolling_pstdev_grid_f64


class NumbaRollingWindowCompute(RollingWindowCompute):
    """
    Rolling mean / population stddev over optional values via float64 NaN-aware kernels.
    """

    def rolling_mean(
        self,
        values: Sequence[float | None],
        window: int,
    ) -> list[float | None]:
        source = to_nan_array(values)
        if source.shape[0] == 0:
            return []
        windows = np.array([window], dtype=np.int64)
        return from_nan_array(rolling_mean_grid_f64(source, windows)[:, 0])

    def rolling_mean_pstdev(
        self,
        values: Sequence[float | None],
        window: int,
    ) -> tuple[list[float | None], list[float | None]]:
        source = to_nan_array(values)
        if source.shape[0] == 0:
            return [], []
        windows = np.array([window], dtype=np.int64)
        means = rolling_mean_grid_f64(source, windows)
        stddevs = rolling_pstdev_grid_f64(source, windows, means)
        return from_nan_array(means[:, 0]), from_nan_array(stddevs[:, 0])


def to_nan_array(values: Sequence[float | None]) -> np.ndarray:
    """
    Convert optional values into contiguous float64 array with NaN for absence.

    Args:
        values: Source values; `None` marks absence.
    Returns:
        np.ndarray: One-dimensional float64 array.
    Assumptions:
        Present values are floats; infinities only affect the windows that contain them.
    Raises:
        None.
    Side Effects:
        None.
    """
    return np.ascontiguousarray(
        np.fromiter(
            (np.nan if value is None else float(value) for value in values),
            dtype=np.float64,
            count=len(values),
        )
    )


def from_nan_array(values: np.ndarray) -> list[float | None]:
    """Convert float64 array back into optional values (`NaN -> None`)."""
    return [None if np.isnan(value) else float(value) for value in values]


__all__ = ["NumbaRollingWindowCompute", "from_nan_array", "to_nan_array"]
