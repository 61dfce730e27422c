"""Summary statistics over chronologically ordered measure values.

Every function accepts values already sorted by year and returns a plain
``float``. Empty or degenerate inputs yield ``0.0`` instead of raising.
"""

from collections.abc import Iterable
from typing import TypeAlias, cast

import numpy as np
import numpy.typing as npt

FloatArray: TypeAlias = npt.NDArray[np.float64]
NumericInput: TypeAlias = npt.ArrayLike | Iterable[float]


def to_numpy(values: NumericInput) -> FloatArray:
    """Coerce the input sequence into a 1D NumPy float array."""
    arr = cast(FloatArray, np.asarray(list(values), dtype=float))
    if arr.ndim != 1:
        raise ValueError("Values must be a 1D sequence.")
    return arr


def average(values: NumericInput) -> float:
    """Arithmetic mean of the values, or 0.0 when there are none."""
    arr = to_numpy(values)
    if arr.size == 0:
        return 0.0
    return float(arr.mean())


def difference(values: NumericInput) -> float:
    """Last value minus first value, or 0.0 with fewer than two values."""
    arr = to_numpy(values)
    if arr.size < 2:
        return 0.0
    return float(arr[-1] - arr[0])


def percentage_difference(values: NumericInput) -> float:
    """Change from the first to the last value as a percentage of the first.

    Returns 0.0 when the change is zero and also when the first value is
    zero, where the ratio is undefined.
    """
    arr = to_numpy(values)
    change = difference(arr)
    if change == 0 or arr[0] == 0:
        return 0.0
    return float(change / arr[0] * 100)


__all__ = ["FloatArray", "average", "difference", "percentage_difference", "to_numpy"]
