from .compute_numba import ComputeNumbaConfig, resolve_compute_numba_config
from .runtime_config import (
    ALLOCATION_POLICIES,
    COLLISION_POLICIES,
    BacktestRuntimeConfig,
    RegistryRuntimeConfig,
    RulesRuntimeConfig,
    TickQuantRuntimeConfig,
    build_tickquant_runtime_config_hash,
    load_tickquant_runtime_config,
    load_tickquant_runtime_config_from_env,
    resolve_tickquant_config_path,
)

__all__ = [
    "ALLOCATION_POLICIES",
    "BacktestRuntimeConfig",
    "COLLISION_POLICIES",
    "ComputeNumbaConfig",
    "RegistryRuntimeConfig",
    "RulesRuntimeConfig",
    "TickQuantRuntimeConfig",
    "build_tickquant_runtime_config_hash",
    "load_tickquant_runtime_config",
    "load_tickquant_runtime_config_from_env",
    "resolve_compute_numba_config",
    "resolve_tickquant_config_path",
]
