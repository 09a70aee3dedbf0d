from __future__ import annotations

from dataclasses import dataclass
from typing import Hashable


@dataclass(frozen=True, slots=True)
class CacheKey:
    """
    Evaluation-context cache key: `(namespace, kind, ordered params)`.

    `namespace` is one of `indicator`, `derive`, `func`, `rule`; `kind` is a catalog id, a
    registry name, an operation name, or the factory callable itself.
    Catalog params are already normalized; other params are paired with their type.
    """

    namespace: str
    kind: Hashable
    params: tuple[Hashable, ...]
