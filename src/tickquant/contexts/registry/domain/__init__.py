from .entities import CollisionPolicy, RegistryEntry
from .errors import DuplicateNameError, UnknownNameError

__all__ = ["CollisionPolicy", "DuplicateNameError", "RegistryEntry", "UnknownNameError"]
