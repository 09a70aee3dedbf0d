from __future__ import annotations

import logging

import pytest

from tickquant.contexts.indicators.domain.errors import InvalidParameterError
from tickquant.contexts.registry.application.services import (
    NameRegistry,
    Registries,
    default_registries,
    reset_default_registries,
)
from tickquant.contexts.registry.domain import (
    CollisionPolicy,
    DuplicateNameError,
    UnknownNameError,
)
from tickquant.platform.config import RegistryRuntimeConfig, TickQuantRuntimeConfig


def _noop(*args: object) -> None:
    return None


def _other(*args: object) -> bool:
    return True


def test_register_and_resolve() -> None:
    registry = NameRegistry(kind="funcs")

    entry = registry.register(" spread ", _noop, 2)

    assert entry.name == "spread"
    assert registry.resolve("spread") is entry
    assert "spread" in registry
    assert len(registry) == 1
    assert registry.names() == ("spread",)
    assert dict(registry.snapshot()) == {"spread": entry}


def test_collision_rejected_by_default() -> None:
    """
    Verify duplicate names are rejected unless replacement is explicit.

    Args:
        None.
    Returns:
        None.
    Assumptions:
        Default collision policy is REJECT.
    Raises:
        AssertionError: If silent overwrite happens.
    Side Effects:
        None.
    """
    registry = NameRegistry(kind="rules")
    registry.register("breakout", _noop)

    with pytest.raises(DuplicateNameError) as exc_info:
        registry.register("breakout", _other)

    assert exc_info.value.code == "duplicate_name"
    assert exc_info.value.details == {"name": "breakout", "registry": "rules"}
    assert registry.resolve("breakout").function is _noop


def test_explicit_replace_and_overwrite_policy_log_warning(
    caplog: pytest.LogCaptureFixture,
) -> None:
    registry = NameRegistry(kind="rules")
    registry.register("breakout", _noop)

    with caplog.at_level(logging.WARNING):
        registry.register("breakout", _other, replace=True)

    assert registry.resolve("breakout").function is _other
    assert [record.getMessage() for record in caplog.records] == ["registry entry overwritten"]

    permissive = NameRegistry(kind="funcs", collision_policy=CollisionPolicy.OVERWRITE)
    permissive.register("x", _noop)
    permissive.register("x", _other)
    assert permissive.resolve("x").function is _other


def test_unknown_names_raise() -> None:
    registry = NameRegistry(kind="funcs")

    with pytest.raises(UnknownNameError) as exc_info:
        registry.resolve("missing")
    assert exc_info.value.to_payload()["error"]["code"] == "unknown_name"

    with pytest.raises(UnknownNameError):
        registry.unregister("missing")


def test_resolve_bound_checks_arity() -> None:
    registry = NameRegistry(kind="funcs")
    registry.register("pair", _noop, 2)
    registry.register("any", _noop)

    entry, params = registry.resolve_bound("pair", (1, 2))
    assert params == (1, 2)
    assert registry.resolve_bound("any", (1, 2, 3))[1] == (1, 2, 3)
    with pytest.raises(InvalidParameterError):
        registry.resolve_bound("pair", (1,))


def test_invalid_entries_rejected() -> None:
    registry = NameRegistry(kind="funcs")

    with pytest.raises(ValueError):
        registry.register("   ", _noop)
    with pytest.raises(ValueError):
        registry.register("x", "not callable")  # type: ignore[arg-type]
    with pytest.raises(ValueError):
        registry.register("x", _noop, -1)


def test_unregister_and_clear() -> None:
    registries = Registries()
    registries.register_func("f", _noop)
    registries.register_rule("r", _other)

    registries.funcs.unregister("f")
    assert "f" not in registries.funcs
    registries.clear()
    assert len(registries.rules) == 0


def test_registries_from_runtime_config() -> None:
    config = TickQuantRuntimeConfig(
        registry=RegistryRuntimeConfig(collision_policy="overwrite"),
    )

    registries = Registries.from_runtime_config(config=config)

    assert registries.collision_policy is CollisionPolicy.OVERWRITE
    assert registries.funcs.collision_policy is CollisionPolicy.OVERWRITE


def test_default_registries_lifecycle() -> None:
    original = default_registries()
    try:
        assert default_registries() is original
        isolated = Registries()
        assert reset_default_registries(isolated) is isolated
        assert default_registries() is isolated
        fresh = reset_default_registries()
        assert fresh is not isolated
        assert len(fresh.funcs) == 0
    finally:
        reset_default_registries(original)
