from .series_feed import SeriesFeed

__all__ = ["SeriesFeed"]
