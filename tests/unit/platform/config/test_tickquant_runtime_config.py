from __future__ import annotations

from pathlib import Path

import pytest

from tickquant.platform.config import (
    ComputeNumbaConfig,
    build_tickquant_runtime_config_hash,
    load_tickquant_runtime_config,
    load_tickquant_runtime_config_from_env,
    resolve_compute_numba_config,
    resolve_tickquant_config_path,
)

_REPO_ROOT = Path(__file__).resolve().parents[4]


def _write_config(tmp_path: Path, *, body: str) -> Path:
    """
    Write temporary runtime YAML used by loader tests.

    Args:
        tmp_path: pytest temporary path fixture.
        body: Full YAML content.
    Returns:
        Path: Written config path.
    Assumptions:
        Input text is valid UTF-8.
    Raises:
        OSError: If write fails.
    Side Effects:
        Creates one temp file.
    """
    config_path = tmp_path / "tickquant.yaml"
    config_path.write_text(body, encoding="utf-8")
    return config_path


def test_load_reads_every_section(tmp_path: Path) -> None:
    """
    Verify loader parses all runtime sections from one YAML document.

    Args:
        tmp_path: pytest temporary path fixture.
    Returns:
        None.
    Assumptions:
        Explicit YAML values win over defaults.
    Raises:
        AssertionError: If parsed fields mismatch YAML payload.
    Side Effects:
        None.
    """
    config_path = _write_config(
        tmp_path,
        body="""
version: 1
compute:
  numba:
    numba_num_threads: 3
    numba_cache_dir: ".cache/test-numba"
registry:
  collision_policy: OVERWRITE
rules:
  executor_max_workers: 4
  parallel_min_indices: 128
backtest:
  initial_cash_default: 5000
  fee_rate_default: 0.002
  premium_default: 0.5
  allocation_policy_default: fixed_weight
  max_workers: 2
""".strip(),
    )

    config = load_tickquant_runtime_config(config_path)

    assert config.version == 1
    assert config.compute_numba == ComputeNumbaConfig(
        numba_num_threads=3,
        numba_cache_dir=Path(".cache/test-numba"),
    )
    assert config.registry.collision_policy == "overwrite"
    assert config.rules.executor_max_workers == 4
    assert config.rules.parallel_min_indices == 128
    assert config.backtest.initial_cash_default == 5000.0
    assert config.backtest.fee_rate_default == 0.002
    assert config.backtest.premium_default == 0.5
    assert config.backtest.allocation_policy_default == "fixed_weight"
    assert config.backtest.max_workers == 2


def test_missing_sections_fall_back_to_defaults(tmp_path: Path) -> None:
    config = load_tickquant_runtime_config(_write_config(tmp_path, body="version: 1"))

    assert config.registry.collision_policy == "reject"
    assert config.rules.parallel_min_indices == 4096
    assert config.backtest.fee_rate_default == 0.001
    assert config.backtest.allocation_policy_default == "use_all_available_cash"


@pytest.mark.parametrize(
    ("body", "message"),
    [
        ("- 1\n- 2", "mapping at top-level"),
        ("rules: 3", "expected mapping at key 'rules'"),
        ("rules:\n  executor_max_workers: two", "expected int at key 'rules.executor_max_workers'"),
        ("backtest:\n  fee_rate_default: 1.0", "fee_rate_default must be in"),
        ("backtest:\n  allocation_policy_default: martingale", "allocation_policy_default"),
        ("registry:\n  collision_policy: merge", "collision_policy"),
        ("compute:\n  numba:\n    numba_num_threads: 0", "must be > 0"),
    ],
)
def test_invalid_payloads_raise_value_error(tmp_path: Path, body: str, message: str) -> None:
    with pytest.raises(ValueError, match=message):
        load_tickquant_runtime_config(_write_config(tmp_path, body=body))


def test_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_tickquant_runtime_config(tmp_path / "absent.yaml")


def test_numba_env_overrides_win_over_yaml() -> None:
    payload = {"numba_num_threads": 2, "numba_cache_dir": "from-yaml"}

    resolved = resolve_compute_numba_config(
        environ={
            "NUMBA_NUM_THREADS": "5",
            "TICKQUANT_NUMBA_NUM_THREADS": "7",
            "NUMBA_CACHE_DIR": "/tmp/plain",
        },
        payload=payload,
    )
    assert resolved.numba_num_threads == 7
    assert resolved.numba_cache_dir == Path("/tmp/plain")

    assert resolve_compute_numba_config(environ={}, payload=payload).numba_num_threads == 2
    with pytest.raises(ValueError):
        resolve_compute_numba_config(environ={"NUMBA_NUM_THREADS": "zero"}, payload={})


def test_config_path_resolution(tmp_path: Path) -> None:
    explicit = tmp_path / "custom.yaml"

    assert resolve_tickquant_config_path(environ={"TICKQUANT_CONFIG": str(explicit)}) == explicit
    assert resolve_tickquant_config_path(environ={}) == Path("configs/dev/tickquant.yaml")
    assert resolve_tickquant_config_path(environ={"TICKQUANT_ENV": "PROD"}) == Path(
        "configs/prod/tickquant.yaml"
    )
    with pytest.raises(ValueError, match="TICKQUANT_ENV"):
        resolve_tickquant_config_path(environ={"TICKQUANT_ENV": "staging"})


@pytest.mark.parametrize("env_name", ["dev", "test", "prod"])
def test_shipped_configs_load(env_name: str) -> None:
    config = load_tickquant_runtime_config(
        _REPO_ROOT / "configs" / env_name / "tickquant.yaml",
    )
    assert config.version == 1


def test_from_env_applies_numba_overrides(tmp_path: Path) -> None:
    config_path = _write_config(tmp_path, body="version: 1")

    config = load_tickquant_runtime_config_from_env(
        environ={"TICKQUANT_CONFIG": str(config_path), "TICKQUANT_NUMBA_NUM_THREADS": "2"},
    )

    assert config.compute_numba.numba_num_threads == 2


def test_hash_ignores_thread_counts_and_cache_paths(tmp_path: Path) -> None:
    base = load_tickquant_runtime_config(
        _write_config(tmp_path, body="compute:\n  numba:\n    numba_num_threads: 1"),
    )
    tuned = load_tickquant_runtime_config(
        _write_config(
            tmp_path,
            body="compute:\n  numba:\n    numba_num_threads: 8\nrules:\n  executor_max_workers: 3",
        ),
    )
    priced = load_tickquant_runtime_config(
        _write_config(tmp_path, body="backtest:\n  fee_rate_default: 0.01"),
    )

    base_hash = build_tickquant_runtime_config_hash(config=base)
    assert len(base_hash) == 64
    assert base_hash == build_tickquant_runtime_config_hash(config=tuned)
    assert base_hash != build_tickquant_runtime_config_hash(config=priced)
