from __future__ import annotations

import time
from pathlib import Path

import numpy as np

from tickquant.contexts.indicators.adapters.outbound.compute_numba import (
    ComputeNumbaWarmupRunner,
    NumbaRollingWindowCompute,
)
from tickquant.contexts.indicators.adapters.outbound.compute_numba.kernels import (
    rolling_mean_grid_f64,
    rolling_pstdev_grid_f64,
)
from tickquant.platform.config import ComputeNumbaConfig


def test_rolling_window_kernels_perf_smoke(tmp_path: Path) -> None:
    """
    Run lightweight perf-smoke for rolling mean/stddev kernels after warmup.

    Args:
        tmp_path: pytest temporary path fixture.
    Returns:
        None.
    Assumptions:
        Perf-smoke verifies runtime viability only, not strict latency SLA.
    Raises:
        AssertionError: If output shape is wrong or execution time is non-positive.
    Side Effects:
        Triggers Numba warmup and JIT compilation.
    """
    config = ComputeNumbaConfig(
        numba_num_threads=1,
        numba_cache_dir=tmp_path / "numba-cache",
    )
    ComputeNumbaWarmupRunner(config=config).warmup()

    source = np.linspace(1.0, 100.0, 8_192, dtype=np.float64)
    source[::97] = np.nan
    windows = np.array([5, 10, 20, 50, 100], dtype=np.int64)

    started = time.perf_counter()
    means = rolling_mean_grid_f64(source, windows)
    stddevs = rolling_pstdev_grid_f64(source, windows, means)
    elapsed = time.perf_counter() - started

    assert means.shape == (8_192, 5)
    assert stddevs.shape == (8_192, 5)
    assert elapsed > 0.0


def test_rolling_window_adapter_perf_smoke() -> None:
    compute = NumbaRollingWindowCompute()
    values: list[float | None] = [float(index % 113) for index in range(20_000)]

    started = time.perf_counter()
    means = compute.rolling_mean(values, 50)
    elapsed = time.perf_counter() - started

    assert len(means) == len(values)
    assert means[48] is None
    assert means[-1] is not None
    assert elapsed > 0.0
