"""Derived statistics for measure time series."""

from .stats import average, difference, percentage_difference, to_numpy  # noqa: F401

__all__ = [
    "average",
    "difference",
    "percentage_difference",
    "to_numpy",
]
