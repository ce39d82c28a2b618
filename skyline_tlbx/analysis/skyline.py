"""Skyline (Pareto-optimal set) computation under the fixed dominance rule."""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Self

import numpy as np
import pandas as pd

from skyline_tlbx.data.views import DatasetView
from skyline_tlbx.utils.analysis_config import DEFAULT_ANALYSIS_CFG, AnalysisConfig

from .base_analyser import BaseAnalyser
from .normalization import ValueRange


logger = logging.getLogger(__name__)


def dominates(a: Sequence[float] | np.ndarray, b: Sequence[float] | np.ndarray) -> bool:
    """Check whether record ``a`` dominates record ``b``.

    ``a`` dominates ``b`` iff it is at least as large on every attribute and strictly
    larger on at least one. With no attributes nothing dominates.
    """
    a_arr = np.asarray(a, dtype=float)
    b_arr = np.asarray(b, dtype=float)
    return bool(np.all(a_arr >= b_arr) and np.any(a_arr > b_arr))


def dominance_matrix(values: np.ndarray | pd.DataFrame) -> np.ndarray:
    """Pairwise dominance between all rows of ``values``.

    Vectorizes the O(n²·d) comparison by broadcasting every row against every other.
    The diagonal is always ``False`` because a row is never strictly larger than itself.

    Args:
        values: Array of shape ``(n, d)`` without missing values.

    Returns:
        Boolean array ``D`` with ``D[i, j]`` true iff row ``i`` dominates row ``j``.
    """
    x = np.asarray(values, dtype=float)
    if x.ndim != 2:
        raise ValueError(f"Expected a 2-D array of attribute values, got shape {x.shape}.")
    ge = (x[:, None, :] >= x[None, :, :]).all(axis=2)
    gt = (x[:, None, :] > x[None, :, :]).any(axis=2)
    return ge & gt


def strict_dominance_matrix(values: np.ndarray | pd.DataFrame) -> np.ndarray:
    """Pairwise strict dominance: row ``i`` is larger than row ``j`` on *every* attribute.

    Over zero attributes the condition holds vacuously, so every row dominates every
    other row (never itself).
    """
    x = np.asarray(values, dtype=float)
    if x.ndim != 2:
        raise ValueError(f"Expected a 2-D array of attribute values, got shape {x.shape}.")
    strict = (x[:, None, :] > x[None, :, :]).all(axis=2)
    np.fill_diagonal(strict, False)
    return strict


def skyline_mask(values: np.ndarray | pd.DataFrame) -> np.ndarray:
    """Boolean mask of the rows not dominated by any other row."""
    return ~dominance_matrix(values).any(axis=0)


@dataclass(frozen=True)
class SkylineResult:
    """Partition of a dataset into skyline and dominated records.

    Attributes:
        attributes: Attribute set the dominance was evaluated on.
        is_skyline: Boolean Series indexed by record key in dataset order.
        skyline: Records on the skyline (dataset order).
        dominated: Records dominated by at least one other record (dataset order).
        attribute_ranges: Per attribute min/max over the skyline records (missing ignored).
        attribute_leaders: Per attribute the skyline keys no other skyline record beats
            on that single attribute.
    """

    attributes: tuple[str, ...]
    is_skyline: pd.Series
    skyline: pd.DataFrame
    dominated: pd.DataFrame
    attribute_ranges: dict[str, ValueRange]
    attribute_leaders: dict[str, list]

    @property
    def skyline_keys(self) -> list:
        """Keys of the skyline records in dataset order."""
        return self.skyline.index.to_list()

    @property
    def dominated_keys(self) -> list:
        """Keys of the dominated records in dataset order."""
        return self.dominated.index.to_list()

    @property
    def n_skyline(self) -> int:
        return len(self.skyline)


class SkylineAnalyzer(BaseAnalyser):
    """Compute the skyline of a dataset view.

    Record ``a`` dominates ``b`` over attribute set ``S`` iff ``a >= b`` on every
    attribute in ``S`` and ``a > b`` on at least one. A record is on the skyline iff
    no other record dominates it; everything else is dominated. Missing numeric values
    are replaced by ``config.missing_value`` (``-inf`` by default) before comparing.

    Example:
        >>> from skyline_tlbx.data import TabularDataset
        >>> ds = TabularDataset.from_csv()
        >>> sky = ds.make_skyline_analyzer().fit().result()
        >>> sky.skyline_keys, sky.attribute_ranges["mpg"]
    """

    def __init__(
        self,
        view: DatasetView,
        attributes: Iterable[str] | None = None,
        config: AnalysisConfig | None = None,
    ) -> None:
        """Initialize the skyline analyzer.

        Args:
            view: Immutable dataset view to analyze
            attributes: Attribute subset to evaluate dominance on (defaults to all
                numeric columns of the view)
            config: Analysis configuration (missing-value sentinel)
        """
        self._view = view
        self._config = config or DEFAULT_ANALYSIS_CFG
        self.attributes = tuple(view.numeric_cols if attributes is None else attributes)
        unknown = [a for a in self.attributes if a not in view.numeric_cols]
        if unknown:
            raise KeyError(f"Attributes are not numeric columns of the view: {unknown}")
        self._mask: np.ndarray | None = None

    def fit(self) -> Self:
        """Partition the records into skyline and dominated ones."""
        values = self._view.attribute_values(self._config.missing_value).loc[:, list(self.attributes)]
        self._mask = skyline_mask(values.to_numpy())

        n_sky = int(self._mask.sum())
        logger.info(
            "Calculated %d skyline points and %d dominated points.",
            n_sky,
            len(self._mask) - n_sky,
        )
        return self

    def result(self) -> SkylineResult:
        """Return the skyline partition.

        Raises:
            ValueError: If fit() has not been called yet.
        """
        if self._mask is None:
            raise ValueError("Must call fit() before result()")

        df = self._view.df
        is_skyline = pd.Series(self._mask, index=df.index, name="is_skyline")
        skyline = df.loc[self._mask]

        sentinel_values = self._view.attribute_values(self._config.missing_value).loc[self._mask]
        leaders = {
            col: sentinel_values.index[sentinel_values[col] == sentinel_values[col].max()].to_list()
            for col in self.attributes
        }

        return SkylineResult(
            attributes=self.attributes,
            is_skyline=is_skyline,
            skyline=skyline,
            dominated=df.loc[~self._mask],
            attribute_ranges={col: ValueRange.of(skyline[col]) for col in self.attributes},
            attribute_leaders=leaders,
        )
