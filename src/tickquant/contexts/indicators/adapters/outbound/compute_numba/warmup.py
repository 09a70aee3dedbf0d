"""
Numba runtime configuration and warmup runner for rolling-window kernels.

Related: tickquant.contexts.indicators.adapters.outbound.compute_numba.kernels._common,
  tickquant.platform.config.compute_numba
"""

from __future__ import annotations

import logging
import os
import time
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Any, cast

import numba
import numpy as np

from tickquant.platform.config import ComputeNumbaConfig

from .kernels import rolling_mean_grid_f64, rolling_pstdev_grid_f64, rolling_sum_grid_f64

log = logging.getLogger(__name__)

_WARMUP_KERNELS = (
    "rolling_sum_grid_f64",
    "rolling_mean_grid_f64",
    "rolling_pstdev_grid_f64",
)


def apply_numba_runtime_config(*, config: ComputeNumbaConfig) -> int:
    """
    Apply numba threads/cache settings and validate cache directory writability.

    Args:
        config: Validated numba runtime config.
    Returns:
        int: Effective numba thread count after applying configuration.
    Assumptions:
        Numba runtime is available in current interpreter.
    Raises:
        ValueError: If cache directory is not writable.
    Side Effects:
        Mutates process env (`NUMBA_CACHE_DIR`) and numba runtime state.
    """
    os.environ["NUMBA_CACHE_DIR"] = str(config.numba_cache_dir)

    cache_dir = ensure_numba_cache_dir_writable(path=config.numba_cache_dir)
    numba_config = cast(Any, numba.config)
    setattr(numba_config, "CACHE_DIR", str(cache_dir))
    numba.set_num_threads(min(config.numba_num_threads, numba.config.NUMBA_NUM_THREADS))
    return int(numba.get_num_threads())


def ensure_numba_cache_dir_writable(*, path: Path) -> Path:
    """
    Ensure provided cache directory exists and supports write operations.

    Args:
        path: Candidate Numba cache directory.
    Returns:
        Path: Normalized cache directory path.
    Assumptions:
        Caller passes path resolved from runtime config.
    Raises:
        ValueError: If path cannot be created or written.
    Side Effects:
        Creates directory tree when missing and touches a short-lived probe file.
    """
    normalized = Path(path)
    try:
        normalized.mkdir(parents=True, exist_ok=True)
    except OSError as error:
        raise ValueError(f"NUMBA_CACHE_DIR is not writable: {normalized}") from error

    try:
        with NamedTemporaryFile(
            mode="w",
            prefix=".numba_write_probe_",
            dir=normalized,
            delete=True,
            encoding="utf-8",
        ) as probe:
            probe.write("ok")
            probe.flush()
    except OSError as error:
        raise ValueError(f"NUMBA_CACHE_DIR is not writable: {normalized}") from error
    return normalized


class ComputeNumbaWarmupRunner:
    """
    Idempotent warmup runner for rolling-window Numba kernels.

    Related: tickquant.contexts.indicators.adapters.outbound.compute_numba.engine
    """

    def __init__(self, *, config: ComputeNumbaConfig) -> None:
        self._config = config
        self._is_warm = False

    @property
    def is_warm(self) -> bool:
        return self._is_warm

    def warmup(self) -> None:
        """
        Apply runtime config and eagerly compile rolling-window kernels.

        Args:
            None.
        Returns:
            None.
        Assumptions:
            Warmup inputs are deterministic and side-effect free for business logic.
        Raises:
            ValueError: If runtime config cannot be applied.
        Side Effects:
            JIT-compiles Numba kernels and emits one structured log message.
        """
        if self._is_warm:
            return

        warmup_started = time.perf_counter()
        effective_threads = apply_numba_runtime_config(config=self._config)
        self._run_kernel_warmup()
        elapsed_seconds = time.perf_counter() - warmup_started
        log.info(
            "compute_numba warmup complete",
            extra={
                "warmup_done": True,
                "warmup_seconds": round(elapsed_seconds, 6),
                "numba_num_threads_effective": effective_threads,
                "numba_cache_dir": str(self._config.numba_cache_dir),
                "kernels": list(_WARMUP_KERNELS),
            },
        )
        self._is_warm = True

    def _run_kernel_warmup(self) -> None:
        t_size = 512
        windows = np.array([5, 20], dtype=np.int64)
        source = np.linspace(1.0, 2.0, t_size, dtype=np.float64)
        source[7] = np.nan

        _ = rolling_sum_grid_f64(source, windows)
        means = rolling_mean_grid_f64(source, windows)
        _ = rolling_pstdev_grid_f64(source, windows, means)


__all__ = [
    "ComputeNumbaWarmupRunner",
    "apply_numba_runtime_config",
    "ensure_numba_cache_dir_writable",
]
