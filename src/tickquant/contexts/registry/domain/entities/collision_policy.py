from __future__ import annotations

from enum import Enum


class CollisionPolicy(str, Enum):
    """
    Behaviour of `register` when the name is already taken.

    REJECT raises `DuplicateNameError`; OVERWRITE replaces the entry and logs a warning.
    """

    REJECT = "reject"
    OVERWRITE = "overwrite"
