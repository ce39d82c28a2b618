"""Pairwise normalized deviation ("divergence") profiles between records."""

import logging
from collections.abc import Hashable, Iterable
from dataclasses import dataclass
from typing import Self

import numpy as np
import pandas as pd
from sklearn.preprocessing import StandardScaler

from skyline_tlbx.data.views import DatasetView
from skyline_tlbx.utils.analysis_config import DEFAULT_ANALYSIS_CFG, AnalysisConfig

from .base_analyser import BaseAnalyser


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DivergenceProfile:
    """Deviation of every record from one reference record, ordered by one attribute.

    Attributes:
        attribute: Attribute that determines the comparator order.
        reference: Key of the record used as the zero reference.
        reference_position: Position of the reference record within the order.
        entries: DataFrame with columns ``position``, ``comparator``, ``deviation``; one
            row per record (the reference included, with deviation 0), ascending by the
            comparator's value of ``attribute``.
    """

    attribute: str
    reference: Hashable
    reference_position: int
    entries: pd.DataFrame

    @property
    def n_below(self) -> int:
        """Number of comparators ordered before the reference record."""
        return self.reference_position

    @property
    def n_above(self) -> int:
        """Number of comparators ordered after the reference record."""
        return len(self.entries) - self.reference_position - 1


@dataclass(frozen=True)
class DivergenceResult:
    r"""Divergence data for all records.

    The deviation of comparator :math:`r'` from reference :math:`r` is
    :math:`\sum_{c} (x_{r'c} - x_{rc}) / \sigma_c` over all numeric attributes; it does
    not depend on the attribute a profile is ordered by.

    Attributes:
        attributes: Numeric attributes in view order.
        sigma: Population standard deviation per attribute.
        matrix: Square DataFrame of deviations; rows are references, columns comparators.
        orders: Attribute -> record keys sorted ascending by that attribute (stable).
    """

    attributes: tuple[str, ...]
    sigma: pd.Series
    matrix: pd.DataFrame
    orders: dict[str, list]

    def _order(self, attribute: str) -> list:
        if attribute not in self.orders:
            raise KeyError(f"Unknown attribute '{attribute}'.")
        return self.orders[attribute]

    def reference_position(self, attribute: str, key: Hashable) -> int:
        """Position of record ``key`` in the order of ``attribute``."""
        order = self._order(attribute)
        if key not in self.matrix.index:
            raise KeyError(f"Unknown record '{key}'.")
        return order.index(key)

    def profile(self, attribute: str, key: Hashable) -> DivergenceProfile:
        """Build the divergence profile of record ``key`` ordered by ``attribute``."""
        order = self._order(attribute)
        position = self.reference_position(attribute, key)
        entries = pd.DataFrame(
            {
                "position": np.arange(len(order)),
                "comparator": order,
                "deviation": self.matrix.loc[key, order].to_numpy(dtype=float),
            },
        )
        return DivergenceProfile(
            attribute=attribute,
            reference=key,
            reference_position=position,
            entries=entries,
        )

    def profiles(self, attribute: str) -> dict[Hashable, DivergenceProfile]:
        """Profiles of all records ordered by ``attribute``."""
        return {key: self.profile(attribute, key) for key in self.matrix.index}

    def long_table(self, attributes: Iterable[str] | None = None) -> pd.DataFrame:
        """All profiles in long format.

        Returns:
            DataFrame with columns ``attribute``, ``reference``, ``reference_position``,
            ``position``, ``comparator``, ``deviation``.
        """
        frames = [
            profile.entries.assign(
                attribute=attribute,
                reference=key,
                reference_position=profile.reference_position,
            )
            for attribute in (attributes or self.attributes)
            for key, profile in self.profiles(attribute).items()
        ]
        columns = ["attribute", "reference", "reference_position", "position", "comparator", "deviation"]
        if not frames:
            return pd.DataFrame(columns=columns)
        return pd.concat(frames, ignore_index=True).loc[:, columns]


class DivergenceAnalyzer(BaseAnalyser):
    r"""Compute normalized signed deviations between every pair of records.

    Each attribute is scaled by its population standard deviation :math:`\sigma_c`
    (``ddof=0``) as estimated by :class:`sklearn.preprocessing.StandardScaler`, which
    ignores missing values. Policies for degenerate inputs:

    - An attribute with :math:`\sigma_c = 0` (constant column) contributes nothing.
    - A pair where either record misses attribute :math:`c` (or holds an infinite value)
      gets no contribution from it.

    Example:
        >>> from skyline_tlbx.data import TabularDataset
        >>> ds = TabularDataset.from_csv()
        >>> res = ds.make_divergence_analyzer().fit().result()
        >>> prof = res.profile("mpg", ds.df.index[0])
        >>> prof.reference_position, prof.entries.head()
    """

    def __init__(self, view: DatasetView, config: AnalysisConfig | None = None) -> None:
        """Initialize the divergence analyzer.

        Args:
            view: Immutable dataset view to analyze
            config: Analysis configuration (missing-value sentinel used for ordering)
        """
        self._view = view
        self._config = config or DEFAULT_ANALYSIS_CFG
        self.attributes = tuple(view.numeric_cols)
        self._sigma: pd.Series | None = None
        self._matrix: pd.DataFrame | None = None

    def get_sigma(self) -> pd.Series:
        """Population standard deviation per attribute (0 where undefined)."""
        features = self._view.features.astype(float).replace([np.inf, -np.inf], np.nan)
        sigma = pd.Series(0.0, index=list(self.attributes), name="sigma")
        if features.empty:
            return sigma

        scaler = StandardScaler().fit(features.to_numpy())
        sigma[:] = np.nan_to_num(np.sqrt(scaler.var_), nan=0.0)
        degenerate = sigma.index[sigma == 0].to_list()
        if degenerate:
            logger.debug("Attributes without spread are excluded from divergence: %s", degenerate)
        return sigma

    def get_deviation_matrix(self) -> pd.DataFrame:
        """Summed normalized deviations for every (reference, comparator) pair."""
        if self._sigma is None:
            self._sigma = self.get_sigma()

        index = self._view.df.index
        x = self._view.features.astype(float).to_numpy()
        sigma = self._sigma.to_numpy()
        active = sigma > 0

        z = np.divide(x, sigma, out=np.zeros_like(x), where=active)
        valid = np.isfinite(x) & active
        z = np.where(valid, z, 0.0)

        if valid[:, active].all():
            # Without missing values the pairwise sum is a difference of row sums
            totals = z.sum(axis=1)
            deviations = totals[None, :] - totals[:, None]
        else:
            pair_valid = valid[:, None, :] & valid[None, :, :]
            deviations = np.where(pair_valid, z[None, :, :] - z[:, None, :], 0.0).sum(axis=2)

        return pd.DataFrame(deviations, index=index, columns=index)

    def get_orders(self) -> dict[str, list]:
        """Record keys ordered ascending (stable) by each attribute, missing values first."""
        values = self._view.attribute_values(self._config.missing_value)
        return {
            col: values.index[np.argsort(values[col].to_numpy(), kind="stable")].to_list()
            for col in self.attributes
        }

    def fit(self) -> Self:
        """Compute standard deviations and the deviation matrix."""
        self._sigma = self.get_sigma()
        self._matrix = self.get_deviation_matrix()
        logger.info("Calculated diverging data for %d records.", len(self._matrix))
        return self

    def result(self) -> DivergenceResult:
        """Return the divergence data.

        Raises:
            ValueError: If fit() has not been called yet.
        """
        if self._sigma is None or self._matrix is None:
            raise ValueError("Must call fit() before result()")

        return DivergenceResult(
            attributes=self.attributes,
            sigma=self._sigma,
            matrix=self._matrix,
            orders=self.get_orders(),
        )
