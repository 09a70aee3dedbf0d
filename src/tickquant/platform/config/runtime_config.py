"""
Runtime YAML configuration loader for the analysis core.

Related:
  - configs/dev/tickquant.yaml
  - src/tickquant/platform/config/compute_numba.py
  - src/tickquant/contexts/rules/application/services/rule_executor.py
  - src/tickquant/contexts/backtest/application/services/backtest_builder.py
"""

from __future__ import annotations

import hashlib
import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

import yaml

from .compute_numba import ComputeNumbaConfig, resolve_compute_numba_config

_ENV_NAME_KEY = "TICKQUANT_ENV"
_CONFIG_PATH_KEY = "TICKQUANT_CONFIG"
_ALLOWED_ENVS = ("dev", "prod", "test")

COLLISION_POLICIES = ("reject", "overwrite")
ALLOCATION_POLICIES = ("use_all_available_cash", "fixed_weight")

_COLLISION_POLICY_DEFAULT = "reject"
_EXECUTOR_MAX_WORKERS_DEFAULT = max(1, min(os.cpu_count() or 1, 8))
_PARALLEL_MIN_INDICES_DEFAULT = 4096
_INITIAL_CASH_DEFAULT = 10000.0
_FEE_RATE_DEFAULT = 0.001
_PREMIUM_DEFAULT = 0.0
_ALLOCATION_POLICY_DEFAULT = "use_all_available_cash"
_BACKTEST_MAX_WORKERS_DEFAULT = max(1, min(os.cpu_count() or 1, 8))


@dataclass(frozen=True, slots=True)
class RegistryRuntimeConfig:
    """
    Registry defaults loaded from `registry` section.

    Related:
      - src/tickquant/contexts/registry/application/services/registries.py
    """

    collision_policy: str = _COLLISION_POLICY_DEFAULT

    def __post_init__(self) -> None:
        normalized = self.collision_policy.strip().lower()
        if normalized not in COLLISION_POLICIES:
            raise ValueError(
                f"registry.collision_policy must be one of {COLLISION_POLICIES}, "
                f"got {self.collision_policy!r}"
            )
        object.__setattr__(self, "collision_policy", normalized)


@dataclass(frozen=True, slots=True)
class RulesRuntimeConfig:
    """
    Rule executor parallelism settings loaded from `rules` section.

    Related:
      - src/tickquant/contexts/rules/application/services/rule_executor.py
    """

    executor_max_workers: int = _EXECUTOR_MAX_WORKERS_DEFAULT
    parallel_min_indices: int = _PARALLEL_MIN_INDICES_DEFAULT

    def __post_init__(self) -> None:
        if self.executor_max_workers <= 0:
            raise ValueError("rules.executor_max_workers must be > 0")
        if self.parallel_min_indices <= 0:
            raise ValueError("rules.parallel_min_indices must be > 0")


@dataclass(frozen=True, slots=True)
class BacktestRuntimeConfig:
    """
    Backtest defaults loaded from `backtest` section.

    Related:
      - src/tickquant/contexts/backtest/application/services/backtest_builder.py
      - src/tickquant/contexts/backtest/application/services/backtest_runner.py
    """

    initial_cash_default: float = _INITIAL_CASH_DEFAULT
    fee_rate_default: float = _FEE_RATE_DEFAULT
    premium_default: float = _PREMIUM_DEFAULT
    allocation_policy_default: str = _ALLOCATION_POLICY_DEFAULT
    max_workers: int = _BACKTEST_MAX_WORKERS_DEFAULT

    def __post_init__(self) -> None:
        """
        Validate backtest defaults with fail-fast startup semantics.

        Args:
            None.
        Returns:
            None.
        Assumptions:
            `fee_rate_default` is a fraction of notional (`0.001 == 0.1%`).
        Raises:
            ValueError: If one scalar value is out of range.
        Side Effects:
            Normalizes allocation policy literal to lowercase.
        """
        if self.initial_cash_default <= 0.0:
            raise ValueError("backtest.initial_cash_default must be > 0")
        if self.fee_rate_default < 0.0 or self.fee_rate_default >= 1.0:
            raise ValueError("backtest.fee_rate_default must be in [0, 1)")
        if self.premium_default < 0.0:
            raise ValueError("backtest.premium_default must be >= 0")
        if self.max_workers <= 0:
            raise ValueError("backtest.max_workers must be > 0")
        normalized_policy = self.allocation_policy_default.strip().lower()
        if normalized_policy not in ALLOCATION_POLICIES:
            raise ValueError(
                f"backtest.allocation_policy_default must be one of {ALLOCATION_POLICIES}, "
                f"got {self.allocation_policy_default!r}"
            )
        object.__setattr__(self, "allocation_policy_default", normalized_policy)


@dataclass(frozen=True, slots=True)
class TickQuantRuntimeConfig:
    """
    Aggregate runtime config of the analysis core (`tickquant.yaml`).

    Related:
      - configs/dev/tickquant.yaml
      - configs/test/tickquant.yaml
      - configs/prod/tickquant.yaml
    """

    version: int = 1
    compute_numba: ComputeNumbaConfig = field(default_factory=ComputeNumbaConfig)
    registry: RegistryRuntimeConfig = field(default_factory=RegistryRuntimeConfig)
    rules: RulesRuntimeConfig = field(default_factory=RulesRuntimeConfig)
    backtest: BacktestRuntimeConfig = field(default_factory=BacktestRuntimeConfig)

    def __post_init__(self) -> None:
        if self.version <= 0:
            raise ValueError("version must be > 0")


def resolve_tickquant_config_path(*, environ: Mapping[str, str]) -> Path:
    """
    Resolve runtime config path using env override precedence contract.

    Args:
        environ: Runtime environment mapping.
    Returns:
        Path: Resolved `tickquant.yaml` path.
    Assumptions:
        Precedence is `TICKQUANT_CONFIG` > `configs/<TICKQUANT_ENV>/tickquant.yaml`.
    Raises:
        ValueError: If `TICKQUANT_ENV` value is unsupported.
    Side Effects:
        None.
    """
    override_path = environ.get(_CONFIG_PATH_KEY, "").strip()
    if override_path:
        return Path(override_path)

    env_name = _resolve_env_name(environ=environ)
    return Path("configs") / env_name / "tickquant.yaml"


def load_tickquant_runtime_config(
    path: str | Path,
    *,
    environ: Mapping[str, str] | None = None,
) -> TickQuantRuntimeConfig:
    """
    Load and validate runtime YAML configuration.

    Args:
        path: Path to `tickquant.yaml`.
        environ: Optional environment mapping for numba overrides; empty when omitted.
    Returns:
        TickQuantRuntimeConfig: Parsed validated config object.
    Assumptions:
        Every section is optional; missing keys fall back to documented defaults.
    Raises:
        FileNotFoundError: If path does not exist.
        ValueError: If YAML shape or values are invalid.
    Side Effects:
        Reads one UTF-8 YAML file from filesystem.
    """
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"tickquant config not found: {config_path}")

    payload = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    if payload is None:
        payload = {}
    if not isinstance(payload, Mapping):
        raise ValueError("tickquant config must be mapping at top-level")

    version = _get_int_with_default(payload, "version", default=1, path="version")
    compute_map = _get_mapping(payload, "compute", path="compute")
    numba_map = _get_mapping(compute_map, "numba", path="compute.numba")
    registry_map = _get_mapping(payload, "registry", path="registry")
    rules_map = _get_mapping(payload, "rules", path="rules")
    backtest_map = _get_mapping(payload, "backtest", path="backtest")

    return TickQuantRuntimeConfig(
        version=version,
        compute_numba=resolve_compute_numba_config(
            environ=environ if environ is not None else {},
            payload=numba_map,
        ),
        registry=RegistryRuntimeConfig(
            collision_policy=_get_str_with_default(
                registry_map,
                "collision_policy",
                default=_COLLISION_POLICY_DEFAULT,
                path="registry.collision_policy",
            ),
        ),
        rules=RulesRuntimeConfig(
            executor_max_workers=_get_int_with_default(
                rules_map,
                "executor_max_workers",
                default=_EXECUTOR_MAX_WORKERS_DEFAULT,
                path="rules.executor_max_workers",
            ),
            parallel_min_indices=_get_int_with_default(
                rules_map,
                "parallel_min_indices",
                default=_PARALLEL_MIN_INDICES_DEFAULT,
                path="rules.parallel_min_indices",
            ),
        ),
        backtest=BacktestRuntimeConfig(
            initial_cash_default=_get_float_with_default(
                backtest_map,
                "initial_cash_default",
                default=_INITIAL_CASH_DEFAULT,
                path="backtest.initial_cash_default",
            ),
            fee_rate_default=_get_float_with_default(
                backtest_map,
                "fee_rate_default",
                default=_FEE_RATE_DEFAULT,
                path="backtest.fee_rate_default",
            ),
            premium_default=_get_float_with_default(
                backtest_map,
                "premium_default",
                default=_PREMIUM_DEFAULT,
                path="backtest.premium_default",
            ),
            allocation_policy_default=_get_str_with_default(
                backtest_map,
                "allocation_policy_default",
                default=_ALLOCATION_POLICY_DEFAULT,
                path="backtest.allocation_policy_default",
            ),
            max_workers=_get_int_with_default(
                backtest_map,
                "max_workers",
                default=_BACKTEST_MAX_WORKERS_DEFAULT,
                path="backtest.max_workers",
            ),
        ),
    )


def load_tickquant_runtime_config_from_env(
    *,
    environ: Mapping[str, str],
) -> TickQuantRuntimeConfig:
    """
    Resolve config path from environment and load it with numba env overrides applied.

    Args:
        environ: Runtime environment mapping.
    Returns:
        TickQuantRuntimeConfig: Parsed validated config object.
    Assumptions:
        Relative config paths are resolved against the current working directory.
    Raises:
        FileNotFoundError: If resolved path does not exist.
        ValueError: If env or YAML values are invalid.
    Side Effects:
        Reads one UTF-8 YAML file from filesystem.
    """
    return load_tickquant_runtime_config(
        resolve_tickquant_config_path(environ=environ),
        environ=environ,
    )


def build_tickquant_runtime_config_hash(*, config: TickQuantRuntimeConfig) -> str:
    """
    Build deterministic hash from result-affecting runtime settings only.

    Args:
        config: Parsed runtime config object.
    Returns:
        str: Canonical SHA-256 hash string.
    Assumptions:
        Thread counts and cache paths do not change results and are excluded.
    Raises:
        None.
    Side Effects:
        None.
    """
    payload = {
        "version": config.version,
        "registry": {"collision_policy": config.registry.collision_policy},
        "backtest": {
            "initial_cash_default": config.backtest.initial_cash_default,
            "fee_rate_default": config.backtest.fee_rate_default,
            "premium_default": config.backtest.premium_default,
            "allocation_policy_default": config.backtest.allocation_policy_default,
        },
    }
    canonical_json = json.dumps(
        payload,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=True,
    )
    return hashlib.sha256(canonical_json.encode("utf-8")).hexdigest()


def _resolve_env_name(*, environ: Mapping[str, str]) -> str:
    raw_env_name = environ.get(_ENV_NAME_KEY, "dev").strip().lower()
    if raw_env_name not in _ALLOWED_ENVS:
        raise ValueError(
            f"{_ENV_NAME_KEY} must be one of {_ALLOWED_ENVS}, got {raw_env_name!r}"
        )
    return raw_env_name


def _get_mapping(data: Mapping[str, Any], key: str, *, path: str) -> Mapping[str, Any]:
    """
    Read optional nested mapping from YAML payload.

    Args:
        data: Source mapping.
        key: Mapping key.
        path: Dotted key path for diagnostics.
    Returns:
        Mapping[str, Any]: Nested mapping or empty mapping.
    Assumptions:
        Missing sections are represented as empty mapping.
    Raises:
        ValueError: If value is present but not a mapping.
    Side Effects:
        None.
    """
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ValueError(f"expected mapping at key '{path}', got {type(value).__name__}")
    return value


def _get_int_with_default(
    data: Mapping[str, Any],
    key: str,
    *,
    default: int,
    path: str,
) -> int:
    if key not in data:
        return default
    value = data.get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"expected int at key '{path}', got {type(value).__name__}")
    return value


def _get_float_with_default(
    data: Mapping[str, Any],
    key: str,
    *,
    default: float,
    path: str,
) -> float:
    """
    Read optional numeric value with explicit fallback default.

    Args:
        data: Source mapping.
        key: Numeric key name.
        default: Fallback value for absent key.
        path: Dotted key path for diagnostics.
    Returns:
        float: Parsed floating-point value.
    Assumptions:
        Integer values are accepted and converted to float.
    Raises:
        ValueError: If provided value type is invalid.
    Side Effects:
        None.
    """
    if key not in data:
        return default
    value = data.get(key)
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise ValueError(f"expected float at key '{path}', got {type(value).__name__}")
    return float(value)


def _get_str_with_default(
    data: Mapping[str, Any],
    key: str,
    *,
    default: str,
    path: str,
) -> str:
    if key not in data:
        return default
    value = data.get(key)
    if not isinstance(value, str):
        raise ValueError(f"expected str at key '{path}', got {type(value).__name__}")
    return value


__all__ = [
    "ALLOCATION_POLICIES",
    "BacktestRuntimeConfig",
    "COLLISION_POLICIES",
    "RegistryRuntimeConfig",
    "RulesRuntimeConfig",
    "TickQuantRuntimeConfig",
    "build_tickquant_runtime_config_hash",
    "load_tickquant_runtime_config",
    "load_tickquant_runtime_config_from_env",
    "resolve_tickquant_config_path",
]
