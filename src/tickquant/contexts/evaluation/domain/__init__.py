from .value_objects import CacheKey

__all__ = ["CacheKey"]
