"""
Registries handle (funcs + rules) and the explicitly managed process default.

Related:
  - src/tickquant/contexts/registry/application/services/name_registry.py
  - src/tickquant/contexts/evaluation/application/services/evaluation_context.py
  - src/tickquant/platform/config/runtime_config.py
"""

from __future__ import annotations

import threading
from typing import Any, Callable

from tickquant.contexts.registry.domain.entities import CollisionPolicy, RegistryEntry
from tickquant.platform.config import TickQuantRuntimeConfig

from .name_registry import NameRegistry

FUNCS_REGISTRY = "funcs"
RULES_REGISTRY = "rules"


class Registries:
    """
    Pair of name tables passed explicitly to evaluation contexts.

    Funcs are called as `fn(series, index, params, context) -> value | None`.
    Rules are called as `fn(bar_view, params) -> bool | None`.
    """

    def __init__(self, *, collision_policy: CollisionPolicy = CollisionPolicy.REJECT) -> None:
        self._collision_policy = CollisionPolicy(collision_policy)
        self.funcs = NameRegistry(kind=FUNCS_REGISTRY, collision_policy=self._collision_policy)
        self.rules = NameRegistry(kind=RULES_REGISTRY, collision_policy=self._collision_policy)

    @classmethod
    def from_runtime_config(cls, *, config: TickQuantRuntimeConfig) -> Registries:
        return cls(collision_policy=CollisionPolicy(config.registry.collision_policy))

    @property
    def collision_policy(self) -> CollisionPolicy:
        return self._collision_policy

    def register_func(
        self,
        name: str,
        function: Callable[..., Any],
        arity: int | None = None,
        *,
        replace: bool = False,
    ) -> RegistryEntry:
        return self.funcs.register(name, function, arity, replace=replace)

    def register_rule(
        self,
        name: str,
        function: Callable[..., Any],
        arity: int | None = None,
        *,
        replace: bool = False,
    ) -> RegistryEntry:
        return self.rules.register(name, function, arity, replace=replace)

    def clear(self) -> None:
        self.funcs.clear()
        self.rules.clear()


_default_lock = threading.Lock()
_default: Registries | None = None


def default_registries() -> Registries:
    """
    Return the process-wide registries, creating them on first use.

    Args:
        None.
    Returns:
        Registries: Shared handle with the reject collision policy.
    Assumptions:
        Callers that need isolation construct their own `Registries`.
    Raises:
        None.
    Side Effects:
        Creates the process default on first call.
    """
    global _default
    with _default_lock:
        if _default is None:
            _default = Registries()
        return _default


def reset_default_registries(registries: Registries | None = None) -> Registries:
    """
    Replace the process default with `registries` or a fresh empty handle.

    Returns:
        Registries: New process default.
    """
    global _default
    with _default_lock:
        _default = registries if registries is not None else Registries()
        return _default
