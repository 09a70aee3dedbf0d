from __future__ import annotations

from tickquant.platform.errors import TickQuantError


class DuplicateNameError(TickQuantError):
    """
    Raised when registering a name that already exists under the reject collision policy.

    Related: tickquant.contexts.registry.application.services.name_registry
    """

    code = "duplicate_name"

    def __init__(self, *, registry: str, name: str) -> None:
        self.registry = registry
        self.name = name
        super().__init__(
            f"{registry} registry already contains name: {name}",
            details={"registry": registry, "name": name},
        )


class UnknownNameError(TickQuantError):
    """
    Raised when resolving a name that was never registered.

    Related: tickquant.contexts.registry.application.services.name_registry
    """

    code = "unknown_name"

    def __init__(self, *, registry: str, name: str) -> None:
        self.registry = registry
        self.name = name
        super().__init__(
            f"{registry} registry has no entry named: {name}",
            details={"registry": registry, "name": name},
        )
