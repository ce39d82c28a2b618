"""Domination scores and relative attribute rankings of skyline points."""

import logging
from collections.abc import Hashable, Iterable
from dataclasses import dataclass
from typing import Self

import numpy as np
import pandas as pd

from skyline_tlbx.data.views import DatasetView
from skyline_tlbx.utils.analysis_config import DEFAULT_ANALYSIS_CFG, AnalysisConfig

from .base_analyser import BaseAnalyser
from .normalization import ValueRange, percentage
from .skyline import SkylineResult, dominance_matrix


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoringResult:
    """Comparative metrics of the skyline points.

    Attributes:
        scores: Domination score per skyline key: the number of dataset records (skyline
            or dominated) the point dominates over the full attribute set.
        score_range: Min/max of ``scores``.
        score_percentages: ``scores`` min-max normalized; the degenerate fallback when
            every skyline point has the same score.
        dominated_points: Skyline key -> keys of the records it dominates (dataset order).
        relative_rankings: DataFrame indexed by skyline key with one column per
            attribute; the 0-based position of the point in the skyline stably sorted
            ascending by that attribute, divided by the skyline size.
    """

    scores: pd.Series
    score_range: ValueRange
    score_percentages: pd.Series
    dominated_points: dict[Hashable, list]
    relative_rankings: pd.DataFrame

    def score_percentage(self, key: Hashable) -> float:
        """Normalized domination score of one skyline point."""
        return float(self.score_percentages.loc[key])

    def exclusive_scores(self, keys: Iterable[Hashable]) -> pd.Series:
        """Count, per selected skyline point, the records no other selected point dominates.

        Args:
            keys: Selection of skyline keys to compare against each other.

        Returns:
            Series indexed by the selected keys (selection order).
        """
        selected = list(keys)
        unknown = [key for key in selected if key not in self.dominated_points]
        if unknown:
            raise KeyError(f"Not skyline points: {unknown}")

        counts = {}
        for key in selected:
            others = set().union(*(self.dominated_points[o] for o in selected if o != key))
            counts[key] = sum(1 for point in self.dominated_points[key] if point not in others)
        return pd.Series(counts, index=selected, dtype=int, name="exclusive_score")


class DominationScorer(BaseAnalyser):
    """Score skyline points by domination strength and rank them per attribute.

    Example:
        >>> from skyline_tlbx.data import TabularDataset
        >>> ds = TabularDataset.from_csv()
        >>> sky = ds.make_skyline_analyzer().fit().result()
        >>> res = ds.make_domination_scorer(sky).fit().result()
        >>> res.scores, res.score_range, res.relative_rankings
    """

    def __init__(
        self,
        view: DatasetView,
        skyline: SkylineResult,
        config: AnalysisConfig | None = None,
    ) -> None:
        """Initialize the scorer.

        Args:
            view: Immutable dataset view the skyline was computed on
            skyline: Skyline partition of ``view``
            config: Analysis configuration (missing-value sentinel, degenerate fallback)
        """
        self._view = view
        self._skyline = skyline
        self._config = config or DEFAULT_ANALYSIS_CFG
        self.attributes = skyline.attributes
        self._scores: pd.Series | None = None
        self._dominated_points: dict[Hashable, list] = {}
        self._rankings: pd.DataFrame | None = None

    def get_domination_scores(self) -> pd.Series:
        """Count, per skyline point, the records it dominates over the full attribute set."""
        values = self._view.attribute_values(self._config.missing_value).loc[:, list(self.attributes)]
        dominance = pd.DataFrame(
            dominance_matrix(values.to_numpy()),
            index=values.index,
            columns=values.index,
        ).loc[self._skyline.skyline_keys]

        self._dominated_points = {key: dominance.columns[row.to_numpy()].to_list() for key, row in dominance.iterrows()}
        return dominance.sum(axis=1).astype(int).rename("domination_score")

    def get_relative_rankings(self) -> pd.DataFrame:
        """Rank the skyline points per attribute.

        Sorting is stable, so points tied on an attribute keep their dataset order and
        receive distinct ranks ``0, 1/n, ..., (n-1)/n``.
        """
        values = self._view.attribute_values(self._config.missing_value).loc[
            self._skyline.skyline_keys,
            list(self.attributes),
        ]
        n = len(values)
        rankings = {}
        for col in self.attributes:
            order = np.argsort(values[col].to_numpy(), kind="stable")
            positions = np.empty(n, dtype=float)
            positions[order] = np.arange(n)
            rankings[col] = positions / n if n else positions
        return pd.DataFrame(rankings, index=values.index, columns=list(self.attributes))

    def fit(self) -> Self:
        """Compute domination scores and relative rankings."""
        self._scores = self.get_domination_scores()
        self._rankings = self.get_relative_rankings()
        return self

    def result(self) -> ScoringResult:
        """Return the skyline point metrics.

        Raises:
            ValueError: If fit() has not been called yet.
        """
        if self._scores is None or self._rankings is None:
            raise ValueError("Must call fit() before result()")

        score_range = ValueRange.of(self._scores.to_numpy())
        if score_range.is_degenerate:
            logger.debug("All skyline points share the domination score %s.", score_range.min)

        return ScoringResult(
            scores=self._scores,
            score_range=score_range,
            score_percentages=self._scores.map(
                lambda s: percentage(s, score_range.min, score_range.max, fallback=self._config.degenerate_fallback),
            )
            .astype(float)
            .rename("domination_percentage"),
            dominated_points=self._dominated_points,
            relative_rankings=self._rankings,
        )
