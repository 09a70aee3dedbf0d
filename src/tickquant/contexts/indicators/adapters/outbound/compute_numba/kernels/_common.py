"""
Common Numba kernels for rolling-window operations.

NaN is the internal absence marker; conversion to and from `None` happens in the engine.

Related: tickquant.contexts.indicators.adapters.outbound.compute_numba.engine,
  tickquant.contexts.indicators.adapters.outbound.compute_numba.warmup
"""

from __future__ import annotations

import math

import numba as nb
import numpy as np


@nb.njit(cache=True)
def is_nan(value: float) -> bool:
    """
    Return whether the provided scalar is NaN.

    Args:
        value: Floating-point scalar.
    Returns:
        bool: True when value is NaN.
    Assumptions:
        The caller passes numeric values compatible with `math.isnan`.
    Raises:
        None.
    Side Effects:
        None.
    """
    return math.isnan(value)


@nb.njit(parallel=True, cache=True)
def rolling_sum_grid_f64(source: np.ndarray, windows: np.ndarray) -> np.ndarray:
    """
    Compute rolling sums for multiple integer windows using float64 accumulators.

    Args:
        source: One-dimensional float64 source series.
        windows: One-dimensional integer windows.
    Returns:
        np.ndarray: Matrix of shape `(T, W)` in float64.
    Assumptions:
        `windows` contains strictly positive integers. Each window is summed directly,
        so a large or infinite value only affects the windows that contain it.
    Raises:
        None.
    Side Effects:
        None.
    """
    t_size = source.shape[0]
    w_size = windows.shape[0]
    out = np.empty((t_size, w_size), dtype=np.float64)

    for window_index in nb.prange(w_size):
        window = windows[window_index]
        for time_index in range(t_size):
            if time_index + 1 < window:
                out[time_index, window_index] = np.nan
                continue
            total = 0.0
            for offset in range(window):
                value = float(source[time_index - offset])
                if is_nan(value):
                    total = np.nan
                    break
                total += value
            out[time_index, window_index] = total
    return out


@nb.njit(parallel=True, cache=True)
def rolling_mean_grid_f64(source: np.ndarray, windows: np.ndarray) -> np.ndarray:
    """
    Compute rolling means for multiple integer windows.

    Args:
        source: One-dimensional float64 source series.
        windows: One-dimensional integer windows.
    Returns:
        np.ndarray: Matrix of shape `(T, W)` in float64.
    Assumptions:
        `windows` contains strictly positive integers.
    Raises:
        None.
    Side Effects:
        None.
    """
    rolling_sum = rolling_sum_grid_f64(source, windows)
    t_size = rolling_sum.shape[0]
    w_size = rolling_sum.shape[1]
    out = np.empty((t_size, w_size), dtype=np.float64)
    for window_index in nb.prange(w_size):
        window = windows[window_index]
        for time_index in range(t_size):
            value = float(rolling_sum[time_index, window_index])
            if is_nan(value):
                out[time_index, window_index] = np.nan
            else:
                out[time_index, window_index] = value / window
    return out


@nb.njit(parallel=True, cache=True)
def rolling_pstdev_grid_f64(
    source: np.ndarray,
    windows: np.ndarray,
    means: np.ndarray,
) -> np.ndarray:
    """
    Compute rolling population standard deviation from precomputed rolling means.

    Args:
        source: One-dimensional float64 source series.
        windows: One-dimensional integer windows.
        means: Output of `rolling_mean_grid_f64(source, windows)`.
    Returns:
        np.ndarray: Matrix of shape `(T, W)` in float64; NaN wherever the mean is NaN.
    Assumptions:
        Two-pass variance over each window; no running sum of squares.
    Raises:
        None.
    Side Effects:
        None.
    """
    t_size = source.shape[0]
    w_size = windows.shape[0]
    out = np.empty((t_size, w_size), dtype=np.float64)
    for window_index in nb.prange(w_size):
        window = windows[window_index]
        for time_index in range(t_size):
            mean = float(means[time_index, window_index])
            if is_nan(mean):
                out[time_index, window_index] = np.nan
                continue
            squared = 0.0
            for offset in range(window):
                delta = float(source[time_index - offset]) - mean
                squared += delta * delta
            out[time_index, window_index] = math.sqrt(squared / window)
    return out


__all__ = [
    "is_nan",
    "rolling_mean_grid_f64",
    "rolling_pstdev_grid_f64",
    "rolling_sum_grid_f64",
]
