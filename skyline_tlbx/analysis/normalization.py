"""Immutable value ranges and the min-max normalization shared by the analyzers."""

import math
from dataclasses import dataclass

import numpy as np
import pandas as pd


def percentage(value: float, lo: float, hi: float, fallback: float = 0.0) -> float:
    r"""Min-max normalize ``value`` into :math:`(value - lo) / (hi - lo)`.

    A collapsed range (``hi == lo``) cannot be normalized and yields ``fallback``
    instead of dividing by zero.
    """
    if hi == lo:
        return fallback
    return (value - lo) / (hi - lo)


@dataclass(frozen=True)
class ValueRange:
    """Minimum and maximum of a set of values."""

    min: float
    max: float

    @classmethod
    def of(cls, values: pd.Series | np.ndarray) -> "ValueRange":
        """Build the range of ``values`` ignoring missing entries (NaN range if none)."""
        arr = np.asarray(values, dtype=float)
        arr = arr[~np.isnan(arr)]
        if arr.size == 0:
            return cls(min=math.nan, max=math.nan)
        return cls(min=float(arr.min()), max=float(arr.max()))

    @property
    def is_degenerate(self) -> bool:
        """Whether the range collapses to a single value."""
        return self.min == self.max

    def percentage(self, value: float, fallback: float = 0.0) -> float:
        """Normalize ``value`` into this range, see :func:`percentage`."""
        return percentage(value, self.min, self.max, fallback=fallback)

    def __str__(self) -> str:
        return f"{self.min:g} ~ {self.max:g}"
