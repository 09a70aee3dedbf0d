"""
Numba runtime settings for the rolling-window kernels.

Related: tickquant.contexts.indicators.adapters.outbound.compute_numba.warmup,
  tickquant.platform.config.runtime_config
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

_THREADS_ENV_KEYS = ("TICKQUANT_NUMBA_NUM_THREADS", "NUMBA_NUM_THREADS")
_CACHE_DIR_ENV_KEYS = ("TICKQUANT_NUMBA_CACHE_DIR", "NUMBA_CACHE_DIR")

DEFAULT_NUMBA_NUM_THREADS = max(1, min(os.cpu_count() or 1, 16))
DEFAULT_NUMBA_CACHE_DIR = Path(".cache/numba")


@dataclass(frozen=True, slots=True)
class ComputeNumbaConfig:
    """
    Immutable runtime config for numba kernels (`compute.numba` section).

    Related: tickquant.contexts.indicators.adapters.outbound.compute_numba.warmup
    """

    numba_num_threads: int = DEFAULT_NUMBA_NUM_THREADS
    numba_cache_dir: Path = DEFAULT_NUMBA_CACHE_DIR

    def __post_init__(self) -> None:
        """
        Validate numba runtime config invariants.

        Args:
            None.
        Returns:
            None.
        Assumptions:
            Thread count is a positive integer.
        Raises:
            ValueError: If any value violates required bounds.
        Side Effects:
            Normalizes cache directory path to `Path`.
        """
        if self.numba_num_threads <= 0:
            raise ValueError(
                "compute.numba.numba_num_threads must be > 0, "
                f"got {self.numba_num_threads}"
            )
        if not str(self.numba_cache_dir).strip():
            raise ValueError("compute.numba.numba_cache_dir must be a non-empty path")
        object.__setattr__(self, "numba_cache_dir", Path(self.numba_cache_dir))


def resolve_compute_numba_config(
    *,
    environ: Mapping[str, str],
    payload: Mapping[str, Any],
) -> ComputeNumbaConfig:
    """
    Resolve numba settings with env -> YAML payload -> default precedence.

    Args:
        environ: Environment mapping used for overrides.
        payload: Parsed `compute.numba` mapping (may be empty).
    Returns:
        ComputeNumbaConfig: Validated runtime settings.
    Assumptions:
        `TICKQUANT_*` variables win over plain `NUMBA_*` ones.
    Raises:
        ValueError: If env or payload values are invalid.
    Side Effects:
        None.
    """
    return ComputeNumbaConfig(
        numba_num_threads=_resolve_int_setting(
            environ=environ,
            env_keys=_THREADS_ENV_KEYS,
            payload=payload,
            payload_key="numba_num_threads",
            default=DEFAULT_NUMBA_NUM_THREADS,
        ),
        numba_cache_dir=_resolve_path_setting(
            environ=environ,
            env_keys=_CACHE_DIR_ENV_KEYS,
            payload=payload,
            payload_key="numba_cache_dir",
            default=DEFAULT_NUMBA_CACHE_DIR,
        ),
    )


def _resolve_int_setting(
    *,
    environ: Mapping[str, str],
    env_keys: tuple[str, ...],
    payload: Mapping[str, Any],
    payload_key: str,
    default: int,
) -> int:
    for env_key in env_keys:
        raw = environ.get(env_key, "").strip()
        if raw:
            return _parse_positive_int(raw, key=env_key)

    payload_value = payload.get(payload_key)
    if payload_value is None:
        return default

    if isinstance(payload_value, bool) or not isinstance(payload_value, int):
        raise ValueError(
            f"expected int for compute.numba.{payload_key}, "
            f"got {type(payload_value).__name__}"
        )
    if payload_value <= 0:
        raise ValueError(f"compute.numba.{payload_key} must be > 0, got {payload_value}")
    return payload_value


def _resolve_path_setting(
    *,
    environ: Mapping[str, str],
    env_keys: tuple[str, ...],
    payload: Mapping[str, Any],
    payload_key: str,
    default: Path,
) -> Path:
    for env_key in env_keys:
        raw = environ.get(env_key, "").strip()
        if raw:
            return Path(raw)

    payload_value = payload.get(payload_key)
    if payload_value is None:
        return default
    if not isinstance(payload_value, str):
        raise ValueError(
            f"expected string for compute.numba.{payload_key}, "
            f"got {type(payload_value).__name__}"
        )
    normalized = payload_value.strip()
    if not normalized:
        raise ValueError(f"compute.numba.{payload_key} must be non-empty")
    return Path(normalized)


def _parse_positive_int(raw: str, *, key: str) -> int:
    """
    Parse positive integer from environment string.

    Args:
        raw: Raw env string.
        key: Env key name for diagnostics.
    Returns:
        int: Parsed positive integer.
    Assumptions:
        Input value is stripped before parsing.
    Raises:
        ValueError: If value is not a positive integer.
    Side Effects:
        None.
    """
    try:
        parsed = int(raw, 10)
    except ValueError as error:
        raise ValueError(f"{key} must be int, got {raw!r}") from error
    if parsed <= 0:
        raise ValueError(f"{key} must be > 0, got {parsed}")
    return parsed


__all__ = [
    "ComputeNumbaConfig",
    "DEFAULT_NUMBA_CACHE_DIR",
    "DEFAULT_NUMBA_NUM_THREADS",
    "resolve_compute_numba_config",
]
