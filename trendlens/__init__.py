"""TrendLens: keyword trend aggregation and analytics."""

__version__ = "0.1.0"
