from __future__ import annotations

from typing import Protocol, TypeVar, runtime_checkable

from tickquant.shared_kernel.primitives import Tick

T_co = TypeVar("T_co", covariant=True)


@runtime_checkable
class TickSource(Protocol[T_co]):
    """
    Capability shared by indicators and derived operations: indexable timestamped values.

    Index `i` is aligned 1:1 with the bound series. `value_at(i).value is None` means absent.
    User extensions satisfy this protocol structurally; no subclassing is required.

    Related:
      - src/tickquant/contexts/indicators/application/services/indicators.py
      - src/tickquant/contexts/indicators/application/services/operations.py
    """

    def value_at(self, index: int) -> Tick[T_co]:
        ...

    def __len__(self) -> int:
        ...
