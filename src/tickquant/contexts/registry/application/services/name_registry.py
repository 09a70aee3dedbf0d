from __future__ import annotations

import logging
import threading
from types import MappingProxyType
from typing import Any, Callable, Mapping

from tickquant.contexts.registry.domain.entities import CollisionPolicy, RegistryEntry
from tickquant.contexts.registry.domain.errors import DuplicateNameError, UnknownNameError

log = logging.getLogger(__name__)


class NameRegistry:
    """
    Thread-safe name -> `RegistryEntry` table with an explicit collision policy.

    Related:
      - src/tickquant/contexts/registry/application/services/registries.py
      - src/tickquant/contexts/registry/domain/entities/registry_entry.py
    """

    def __init__(
        self,
        *,
        kind: str,
        collision_policy: CollisionPolicy = CollisionPolicy.REJECT,
    ) -> None:
        """
        Create empty registry.

        Args:
            kind: Registry label used in errors and logs (`funcs`, `rules`).
            collision_policy: Default behaviour on name collision.
        Returns:
            None.
        Assumptions:
            Per-call `replace=True` overrides the reject policy for one registration.
        Raises:
            ValueError: If kind is blank.
        Side Effects:
            None.
        """
        normalized_kind = kind.strip()
        if not normalized_kind:
            raise ValueError("NameRegistry kind must be non-empty")
        self._kind = normalized_kind
        self._collision_policy = CollisionPolicy(collision_policy)
        self._entries: dict[str, RegistryEntry] = {}
        self._lock = threading.Lock()

    @property
    def kind(self) -> str:
        return self._kind

    @property
    def collision_policy(self) -> CollisionPolicy:
        return self._collision_policy

    def register(
        self,
        name: str,
        function: Callable[..., Any],
        arity: int | None = None,
        *,
        replace: bool = False,
    ) -> RegistryEntry:
        """
        Register callable under name.

        Args:
            name: Registry name.
            function: Callable following this registry's call contract.
            arity: Exact positional parameter count, or `None` for any.
            replace: Overwrite an existing entry for this call only.
        Returns:
            RegistryEntry: Stored entry.
        Assumptions:
            Names are case-sensitive after stripping.
        Raises:
            DuplicateNameError: If name exists, policy is REJECT and `replace` is False.
            ValueError: If entry is invalid.
        Side Effects:
            Mutates registry; logs a warning on overwrite.
        """
        entry = RegistryEntry(name=name, function=function, arity=arity)
        with self._lock:
            existing = self._entries.get(entry.name)
            if existing is not None:
                if not replace and self._collision_policy is CollisionPolicy.REJECT:
                    raise DuplicateNameError(registry=self._kind, name=entry.name)
                log.warning(
                    "registry entry overwritten",
                    extra={
                        "registry": self._kind,
                        "name": entry.name,
                        "previous_arity": existing.arity,
                        "arity": entry.arity,
                    },
                )
            self._entries[entry.name] = entry
        return entry

    def unregister(self, name: str) -> None:
        with self._lock:
            if self._entries.pop(name.strip(), None) is None:
                raise UnknownNameError(registry=self._kind, name=name.strip())

    def resolve(self, name: str) -> RegistryEntry:
        """
        Resolve entry by name.

        Args:
            name: Registry name.
        Returns:
            RegistryEntry: Stored entry.
        Assumptions:
            None.
        Raises:
            UnknownNameError: If name is not registered.
        Side Effects:
            None.
        """
        normalized = name.strip()
        entry = self._entries.get(normalized)
        if entry is None:
            raise UnknownNameError(registry=self._kind, name=normalized)
        return entry

    def resolve_bound(
        self,
        name: str,
        params: tuple[object, ...],
    ) -> tuple[RegistryEntry, tuple[object, ...]]:
        """Resolve entry and validate parameter count in one step."""
        entry = self.resolve(name)
        return entry, entry.check_params(params)

    def names(self) -> tuple[str, ...]:
        with self._lock:
            return tuple(sorted(self._entries))

    def snapshot(self) -> Mapping[str, RegistryEntry]:
        with self._lock:
            return MappingProxyType(dict(self._entries))

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.strip() in self._entries

    def __len__(self) -> int:
        return len(self._entries)
