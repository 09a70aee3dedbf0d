from .collision_policy import CollisionPolicy
from .registry_entry import RegistryEntry

__all__ = ["CollisionPolicy", "RegistryEntry"]
