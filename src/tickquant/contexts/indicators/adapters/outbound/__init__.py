from .compute_numba import (
    ComputeNumbaWarmupRunner,
    NumbaRollingWindowCompute,
    apply_numba_runtime_config,
)

__all__ = [
    "ComputeNumbaWarmupRunner",
    "NumbaRollingWindowCompute",
    "apply_numba_runtime_config",
]
