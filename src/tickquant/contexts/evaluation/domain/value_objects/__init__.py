from .cache_key import CacheKey

__all__ = ["CacheKey"]
