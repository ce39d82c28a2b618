"""Analysis modules for skyline computation and skyline point metrics."""

from .attribute_classifier import AttributeClassification, AttributeClassifier
from .divergence import DivergenceAnalyzer, DivergenceProfile, DivergenceResult
from .normalization import ValueRange, percentage
from .pipeline import SkylineReport, run_skyline_pipeline
from .scoring import DominationScorer, ScoringResult
from .skyline import (
    SkylineAnalyzer,
    SkylineResult,
    dominance_matrix,
    dominates,
    skyline_mask,
    strict_dominance_matrix,
)
from .subspace_miner import DecisiveSubspaceMap, DecisiveSubspaceMiner, DecisiveSubspaceResult


__all__ = [
    "AttributeClassification",
    "AttributeClassifier",
    "DecisiveSubspaceMap",
    "DecisiveSubspaceMiner",
    "DecisiveSubspaceResult",
    "DivergenceAnalyzer",
    "DivergenceProfile",
    "DivergenceResult",
    "DominationScorer",
    "ScoringResult",
    "SkylineAnalyzer",
    "SkylineReport",
    "SkylineResult",
    "ValueRange",
    "dominance_matrix",
    "dominates",
    "percentage",
    "run_skyline_pipeline",
    "skyline_mask",
    "strict_dominance_matrix",
]
