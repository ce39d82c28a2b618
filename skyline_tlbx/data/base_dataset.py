"""Base dataset class for all dataset implementations."""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING

import pandas as pd


if TYPE_CHECKING:
    from skyline_tlbx.analysis.divergence import DivergenceAnalyzer
    from skyline_tlbx.analysis.pipeline import SkylineReport
    from skyline_tlbx.analysis.scoring import DominationScorer
    from skyline_tlbx.analysis.skyline import SkylineAnalyzer, SkylineResult
    from skyline_tlbx.analysis.subspace_miner import DecisiveSubspaceMiner
    from skyline_tlbx.utils.analysis_config import AnalysisConfig

from .base_columns import ColumnMetadata
from .views import DatasetView


class BaseDataset(ABC):
    """Abstract base class for dataset handlers used throughout the skyline toolbox.

    The wrapped DataFrame is indexed by the unique record key. Numeric attributes
    hold floats (missing values as ``NaN``); nominal columns hold raw strings.
    """

    def __init__(self, df: pd.DataFrame | None = None, config: "AnalysisConfig | None" = None) -> None:
        """Initialize the base dataset.

        Args:
            df: Pre-loaded and classified DataFrame indexed by the unique key (optional)
            config: Analysis configuration used by the ``make_*`` factories and
                :meth:`analyze` when they are not given one
        """
        self._df: pd.DataFrame | None = df
        self._config = config

    @classmethod
    @abstractmethod
    def from_csv(cls, csv_path: str | Path, **kwargs: object) -> "BaseDataset":
        """Load dataset from CSV file.

        Args:
            csv_path: Path to the CSV file
            **kwargs: Additional loading parameters

        Returns:
            Dataset instance with loaded data
        """
        ...

    @property
    def df(self) -> pd.DataFrame:
        """Get the classified DataFrame.

        Raises:
            ValueError: If dataset not loaded
        """
        if self._df is None:
            raise ValueError("Dataset not loaded. Use from_csv() to load data.")
        return self._df

    @property
    def config(self) -> "AnalysisConfig":
        """Analysis configuration attached to this dataset (the package default if none)."""
        if self._config is None:
            from skyline_tlbx.utils.analysis_config import DEFAULT_ANALYSIS_CFG

            return DEFAULT_ANALYSIS_CFG
        return self._config

    @property
    def key_col(self) -> str:
        """Name of the unique key column (the index name of :attr:`df`)."""
        return str(self.df.index.name)

    @property
    def numeric_cols(self) -> list[str]:
        """Get numeric attribute names.

        Default implementation filters columns by numeric dtypes.
        Subclasses can override for custom behavior.
        """
        return self.df.select_dtypes(include=["number"]).columns.to_list()

    @property
    def nominal_cols(self) -> list[str]:
        """Get nominal column names (key column excluded)."""
        numeric = set(self.numeric_cols)
        return [col for col in self.df.columns if col not in numeric]

    def get_pretty_name(self, column_name: str) -> str:
        """Convert column name to pretty name for presentation layers."""
        return ColumnMetadata.prettify(column_name)

    def view(self, columns: Iterable[str] | None = None) -> DatasetView:
        """Build an immutable dataset view for analyzers.

        Args:
            columns: Columns to include in the view (defaults to all). Only numeric
                columns among them form the attribute set.

        Returns:
            DatasetView containing selected data and metadata
        """
        selected_cols = list(columns) if columns is not None else self.df.columns.to_list()
        missing = [col for col in selected_cols if col not in self.df.columns]
        if missing:
            raise KeyError(f"Columns not found in data: {missing}")

        numeric = set(self.numeric_cols)
        return DatasetView(
            df=self.df.loc[:, selected_cols],
            pretty_by_col={col: self.get_pretty_name(col) for col in selected_cols},
            numeric_cols=[col for col in selected_cols if col in numeric],
            key_col=self.key_col,
            nominal_cols=[col for col in selected_cols if col not in numeric],
        )

    def make_skyline_analyzer(
        self,
        columns: Iterable[str] | None = None,
        config: "AnalysisConfig | None" = None,
    ) -> "SkylineAnalyzer":
        """Instantiate a skyline analyzer over the numeric attributes of this dataset."""
        from skyline_tlbx.analysis.skyline import SkylineAnalyzer

        return SkylineAnalyzer(self.view(columns=columns), config=config or self.config)

    def make_subspace_miner(
        self,
        skyline: "SkylineResult",
        columns: Iterable[str] | None = None,
        config: "AnalysisConfig | None" = None,
    ) -> "DecisiveSubspaceMiner":
        """Instantiate a decisive subspace miner for an already computed skyline."""
        from skyline_tlbx.analysis.subspace_miner import DecisiveSubspaceMiner

        return DecisiveSubspaceMiner(self.view(columns=columns), skyline, config=config or self.config)

    def make_domination_scorer(
        self,
        skyline: "SkylineResult",
        columns: Iterable[str] | None = None,
        config: "AnalysisConfig | None" = None,
    ) -> "DominationScorer":
        """Instantiate a domination scorer for an already computed skyline."""
        from skyline_tlbx.analysis.scoring import DominationScorer

        return DominationScorer(self.view(columns=columns), skyline, config=config or self.config)

    def make_divergence_analyzer(
        self,
        columns: Iterable[str] | None = None,
        config: "AnalysisConfig | None" = None,
    ) -> "DivergenceAnalyzer":
        """Instantiate a divergence analyzer over the numeric attributes of this dataset."""
        from skyline_tlbx.analysis.divergence import DivergenceAnalyzer

        return DivergenceAnalyzer(self.view(columns=columns), config=config or self.config)

    def analyze(self, config: "AnalysisConfig | None" = None) -> "SkylineReport":
        """Run the full skyline pipeline on this dataset.

        Example:
            >>> from skyline_tlbx.data import TabularDataset
            >>> report = TabularDataset.from_csv().analyze()
            >>> report.skyline.skyline_keys, report.subspaces.max_subspaces
        """
        from skyline_tlbx.analysis.pipeline import run_skyline_pipeline

        return run_skyline_pipeline(self, config=config or self.config)
