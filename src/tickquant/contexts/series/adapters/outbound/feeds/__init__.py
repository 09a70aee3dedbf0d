from .in_memory_series_feed import InMemorySeriesFeed

__all__ = ["InMemorySeriesFeed"]
