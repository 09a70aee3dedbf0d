from .outbound.feeds import InMemorySeriesFeed

__all__ = ["InMemorySeriesFeed"]
