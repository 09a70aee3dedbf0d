from .ports import SeriesFeed

__all__ = ["SeriesFeed"]
