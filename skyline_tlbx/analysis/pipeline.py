"""End-to-end skyline analysis pass over one dataset."""

import logging
from dataclasses import dataclass

from skyline_tlbx.data.base_dataset import BaseDataset
from skyline_tlbx.utils.analysis_config import AnalysisConfig

from .attribute_classifier import AttributeClassification
from .divergence import DivergenceResult
from .scoring import ScoringResult
from .skyline import SkylineResult
from .subspace_miner import DecisiveSubspaceResult


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SkylineReport:
    """Everything a presentation layer consumes for one dataset.

    Attributes:
        key_col: Unique key column of the dataset.
        attributes: Numeric attribute set all results were computed on.
        classification: Column classification when the dataset was classified on load.
        skyline: Skyline / dominated partition.
        subspaces: Decisive subspaces per skyline point.
        scoring: Domination scores and relative rankings.
        divergence: Pairwise deviation data.
    """

    key_col: str
    attributes: tuple[str, ...]
    classification: AttributeClassification | None
    skyline: SkylineResult
    subspaces: DecisiveSubspaceResult
    scoring: ScoringResult
    divergence: DivergenceResult


def run_skyline_pipeline(dataset: BaseDataset, config: AnalysisConfig | None = None) -> SkylineReport:
    """Run skyline, decisive subspace, scoring and divergence analysis in order.

    Without ``config`` the configuration attached to ``dataset`` is used. Every call
    recomputes all results from the dataset; nothing is reused between calls.

    Example:
        >>> from skyline_tlbx.data import TabularDataset
        >>> report = run_skyline_pipeline(TabularDataset.from_csv())
        >>> report.scoring.scores.sort_values(ascending=False).head()
    """
    config = config or dataset.config
    classification = getattr(dataset, "classification", None)

    skyline = dataset.make_skyline_analyzer(config=config).fit().result()
    subspaces = dataset.make_subspace_miner(skyline, config=config).fit().result()
    scoring = dataset.make_domination_scorer(skyline, config=config).fit().result()
    divergence = dataset.make_divergence_analyzer(config=config).fit().result()
    logger.info(
        "Analyzed %d records over %d attributes (%d skyline points).",
        len(skyline.is_skyline),
        len(skyline.attributes),
        skyline.n_skyline,
    )

    return SkylineReport(
        key_col=dataset.key_col,
        attributes=skyline.attributes,
        classification=classification,
        skyline=skyline,
        subspaces=subspaces,
        scoring=scoring,
        divergence=divergence,
    )
