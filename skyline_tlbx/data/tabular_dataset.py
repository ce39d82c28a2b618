"""Generic dataset loading: ingestion, key validation and attribute classification."""

import logging
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import TYPE_CHECKING

import pandas as pd

from skyline_tlbx.utils.paths import get_dataset_path

from .base_columns import ColumnKind, ColumnMetadata
from .base_dataset import BaseDataset


if TYPE_CHECKING:
    from skyline_tlbx.analysis.attribute_classifier import AttributeClassification
    from skyline_tlbx.utils.analysis_config import AnalysisConfig


logger = logging.getLogger(__name__)


class MalformedRecordError(ValueError):
    """Raised at ingestion for records with a missing or duplicate unique key."""

    def __init__(self, message: str, keys: Sequence[object] = ()) -> None:
        super().__init__(message)
        self.keys = list(keys)


class TabularDataset(BaseDataset):
    """Arbitrary tabular dataset whose first column (by convention) is the unique key.

    Loading keeps every cell as a raw string, validates the key column, classifies
    the remaining columns with :class:`AttributeClassifier` and converts numeric
    attributes to floats. Empty cells become ``NaN`` in numeric columns and stay
    empty strings in nominal ones.

    **Example workflow**:
    >>> from skyline_tlbx.data import TabularDataset
    >>> ds = TabularDataset.from_csv()
    >>> sky = ds.make_skyline_analyzer().fit().result()
    >>> subs = ds.make_subspace_miner(sky).fit().result()
    >>> scores = ds.make_domination_scorer(sky).fit().result()
    >>> div = ds.make_divergence_analyzer().fit().result()
    >>> sky.skyline_keys, subs.subspaces, scores.scores, div.profile("mpg", sky.skyline_keys[0])
    """

    def __init__(
        self,
        df: pd.DataFrame | None = None,
        classification: "AttributeClassification | None" = None,
        config: "AnalysisConfig | None" = None,
    ) -> None:
        """Initialize the dataset.

        Args:
            df: Classified DataFrame indexed by the unique key (optional)
            classification: Column classification matching ``df``; inferred from the
                dtypes of ``df`` when omitted.
            config: Analysis configuration used by ``analyze()`` and the analyzer
                factories when they are not given one
        """
        super().__init__(df=df, config=config)
        self._classification = classification

    @classmethod
    def from_csv(
        cls,
        csv_path: str | Path | None = None,
        *,
        key_col: str | None = None,
        config: "AnalysisConfig | None" = None,
    ) -> "TabularDataset":
        """Load and classify a dataset from a CSV file.

        Args:
            csv_path: Path to the CSV file (defaults to the bundled cars sample)
            key_col: Unique key column (defaults to the first column)
            config: Analysis configuration to attach to the dataset

        Returns:
            TabularDataset instance with validated and classified data
        """
        csv_path = get_dataset_path("cars") if csv_path is None else Path(csv_path)
        raw = pd.read_csv(csv_path, dtype=str, keep_default_na=False)
        logger.info("Successfully loaded %d records from %s.", len(raw), csv_path)
        return cls.from_frame(raw, key_col=key_col, config=config)

    @classmethod
    def from_records(
        cls,
        records: Sequence[Mapping[str, object]],
        *,
        key_col: str | None = None,
        config: "AnalysisConfig | None" = None,
    ) -> "TabularDataset":
        """Build a dataset from a sequence of mappings sharing the same columns.

        Values are converted to raw strings first, so ``from_records`` classifies the
        same way as :meth:`from_csv`.
        """
        raw = pd.DataFrame.from_records(list(records))
        return cls.from_frame(raw, key_col=key_col, config=config)

    @classmethod
    def from_frame(
        cls,
        raw: pd.DataFrame,
        *,
        key_col: str | None = None,
        config: "AnalysisConfig | None" = None,
    ) -> "TabularDataset":
        """Validate, classify and convert a raw DataFrame with the key as a column."""
        from skyline_tlbx.analysis.attribute_classifier import AttributeClassifier

        raw = cls._to_raw_strings(raw)
        classification = AttributeClassifier(raw, key_col=key_col).fit().result()
        cls._validate_keys(raw, classification.key_col)

        df = (
            raw.assign(
                **{col: pd.to_numeric(raw[col].str.strip(), errors="coerce") for col in classification.numeric_cols},
            )
            .astype({col: float for col in classification.numeric_cols})
            .set_index(classification.key_col)
        )
        return cls(df=df, classification=classification, config=config)

    @staticmethod
    def _to_raw_strings(raw: pd.DataFrame) -> pd.DataFrame:
        """Render every cell as a string; missing cells become empty strings."""
        raw = raw.set_axis([str(c) for c in raw.columns], axis=1)
        return raw.astype(object).where(raw.notna(), "").astype(str)

    @staticmethod
    def _validate_keys(raw: pd.DataFrame, key_col: str) -> None:
        """Reject rows with an empty or duplicated unique key.

        Raises:
            MalformedRecordError: If any key is empty or appears more than once.
        """
        keys = raw[key_col].str.strip()
        empty_rows = keys.index[keys == ""].to_list()
        if empty_rows:
            raise MalformedRecordError(
                f"Rows {empty_rows} have no value for key column '{key_col}'.",
                keys=empty_rows,
            )
        duplicated = keys[keys.duplicated()].unique().tolist()
        if duplicated:
            raise MalformedRecordError(
                f"Duplicate values in key column '{key_col}': {duplicated}",
                keys=duplicated,
            )

    @property
    def classification(self) -> "AttributeClassification":
        """Column classification of the loaded data."""
        if self._classification is None:
            from skyline_tlbx.analysis.attribute_classifier import AttributeClassification

            # Pre-converted frame: trust its dtypes
            df = self.df
            numeric = tuple(df.select_dtypes(include=["number"]).columns)
            kinds = {self.key_col: ColumnKind.NOMINAL} | {
                col: ColumnKind.NUMERIC if col in numeric else ColumnKind.NOMINAL for col in df.columns
            }
            self._classification = AttributeClassification(
                key_col=self.key_col,
                numeric_cols=numeric,
                nominal_cols=tuple(c for c in df.columns if c not in numeric),
                demoted_cols=(),
                metadata={
                    col: ColumnMetadata(
                        name=col,
                        kind=kind,
                        pretty_name=ColumnMetadata.prettify(col),
                        is_key=col == self.key_col,
                    )
                    for col, kind in kinds.items()
                },
            )
        return self._classification

    @property
    def numeric_cols(self) -> list[str]:
        """Numeric attribute set in column order."""
        return list(self.classification.numeric_cols)

    @property
    def label_col(self) -> str:
        """Column holding a human-readable label per record.

        This is the key column when the first record's key is not a number, else the
        second column of the original header.
        """
        df = self.df
        if df.empty or df.columns.empty:
            return self.key_col
        first_key = str(df.index[0]).strip()
        if pd.isna(pd.to_numeric(first_key, errors="coerce")):
            return self.key_col
        return str(df.columns[0])

    def labels(self) -> pd.Series:
        """Record labels indexed by the unique key."""
        if self.label_col == self.key_col:
            return pd.Series(self.df.index.astype(str), index=self.df.index, name=self.key_col)
        return self.df[self.label_col].astype(str)
