from .engine import NumbaRollingWindowCompute
from .warmup import (
    ComputeNumbaWarmupRunner,
    apply_numba_runtime_config,
    ensure_numba_cache_dir_writable,
)

__all__ = [
    "ComputeNumbaWarmupRunner",
    "NumbaRollingWindowCompute",
    "apply_numba_runtime_config",
    "ensure_numba_cache_dir_writable",
]
