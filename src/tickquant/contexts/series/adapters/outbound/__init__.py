from .feeds import InMemorySeriesFeed

__all__ = ["InMemorySeriesFeed"]
