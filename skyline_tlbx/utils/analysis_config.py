"""Shared analysis configuration (sentinels, mining relation, fallbacks)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal


MiningRelation = Literal["strict", "pareto"]


@dataclass(frozen=True)
class AnalysisConfig:
    """Reusable settings passed explicitly through the skyline pipeline.

    Attributes:
        missing_value: Sentinel substituted for missing numeric values before any
            dominance comparison or ranking. ``-inf`` means a missing value never
            beats a present one and two missing values tie.
        mining_relation: Dominance relation used while mining decisive subspaces.
            ``"strict"`` requires a strictly greater value on every attribute of the
            subspace; ``"pareto"`` reuses the skyline rule (>= everywhere, > somewhere).
        memoize_subspaces: Expand each subspace lattice state only once while mining.
        degenerate_fallback: Value returned by normalizations whose range collapses
            (``max == min``).
    """

    missing_value: float = float("-inf")
    mining_relation: MiningRelation = "strict"
    memoize_subspaces: bool = True
    degenerate_fallback: float = 0.0

    def __post_init__(self) -> None:
        if self.mining_relation not in ("strict", "pareto"):
            raise ValueError(
                f"Invalid mining_relation='{self.mining_relation}'. Use 'strict' or 'pareto'.",
            )


# Default configuration used across analyzers
DEFAULT_ANALYSIS_CFG = AnalysisConfig()


__all__ = ["DEFAULT_ANALYSIS_CFG", "AnalysisConfig", "MiningRelation"]
