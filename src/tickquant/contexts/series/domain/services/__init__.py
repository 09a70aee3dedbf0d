from .series_transform import transform_series

__all__ = ["transform_series"]
