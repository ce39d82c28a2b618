"""Numeric/nominal classification of dataset columns."""

import logging
from dataclasses import dataclass
from typing import Self

import pandas as pd

from skyline_tlbx.data.base_columns import ColumnKind, ColumnMetadata

from .base_analyser import BaseAnalyser


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AttributeClassification:
    """Column classification of a raw dataset.

    Attributes:
        key_col: Name of the unique key column (never an attribute).
        numeric_cols: Ordered numeric attribute names (the attribute set).
        nominal_cols: Ordered nominal column names, key column excluded.
        demoted_cols: Columns holding at least one numeric value that were demoted
            to nominal because another non-empty value does not parse.
        metadata: Column metadata for every column, key column included.
    """

    key_col: str
    numeric_cols: tuple[str, ...]
    nominal_cols: tuple[str, ...]
    demoted_cols: tuple[str, ...]
    metadata: dict[str, ColumnMetadata]

    def kind_of(self, column: str) -> ColumnKind:
        """Return the kind of ``column``."""
        if column not in self.metadata:
            raise KeyError(f"Unknown column '{column}'.")
        return self.metadata[column].kind


def _present_values(values: pd.Series) -> pd.Series:
    """Return the non-empty raw values of a column as stripped strings."""
    raw = values.where(values.notna(), "").astype(str).str.strip()
    return raw[raw != ""]


class AttributeClassifier(BaseAnalyser):
    """Classify every non-key column as numeric or nominal.

    A column is numeric iff *every* non-empty value parses as a number. The decision
    is global per column: a single value that does not parse demotes the whole
    column to nominal. Columns without any non-empty value are nominal, and the key
    column is nominal regardless of its content.

    Example:
        >>> raw = pd.DataFrame({"id": ["a", "b"], "speed": ["5", "3"], "tag": ["x", "7"]})
        >>> res = AttributeClassifier(raw, key_col="id").fit().result()
        >>> res.numeric_cols, res.nominal_cols
        (('speed',), ('tag',))
    """

    def __init__(self, df: pd.DataFrame, key_col: str | None = None) -> None:
        """Initialize the classifier.

        Args:
            df: Raw dataset with the key as a regular column.
            key_col: Unique key column (defaults to the first column).
        """
        if key_col is None:
            if df.columns.empty:
                raise ValueError("Cannot classify a dataset without columns.")
            key_col = str(df.columns[0])
        if key_col not in df.columns:
            raise KeyError(f"Key column '{key_col}' not found in data")
        self._df = df
        self.key_col = key_col
        self._kinds: dict[str, ColumnKind] = {}
        self._demoted: list[str] = []
        self._fitted = False

    @staticmethod
    def is_numeric_column(values: pd.Series) -> tuple[bool, bool]:
        """Check whether all non-empty values of a column parse as numbers.

        Returns:
            Tuple ``(is_numeric, has_numeric_values)``; the second flag tells whether
            at least one value parsed, which identifies demoted columns.
        """
        present = _present_values(values)
        if present.empty:
            return False, False
        parsed = pd.to_numeric(present, errors="coerce")
        return bool(parsed.notna().all()), bool(parsed.notna().any())

    def fit(self) -> Self:
        """Classify all columns of the dataset."""
        self._kinds = {self.key_col: ColumnKind.NOMINAL}
        self._demoted = []
        for column in self._df.columns:
            if column == self.key_col:
                continue
            is_numeric, any_numeric = self.is_numeric_column(self._df[column])
            self._kinds[column] = ColumnKind.NUMERIC if is_numeric else ColumnKind.NOMINAL
            if not is_numeric and any_numeric:
                self._demoted.append(column)

        if self._demoted:
            logger.info("Demoted mixed columns to nominal: %s", ", ".join(self._demoted))
        self._fitted = True
        return self

    def result(self) -> AttributeClassification:
        """Return the classification.

        Raises:
            ValueError: If fit() has not been called yet.
        """
        if not self._fitted:
            raise ValueError("Must call fit() before result()")

        columns = [c for c in self._df.columns if c != self.key_col]
        return AttributeClassification(
            key_col=self.key_col,
            numeric_cols=tuple(c for c in columns if self._kinds[c].is_numeric),
            nominal_cols=tuple(c for c in columns if not self._kinds[c].is_numeric),
            demoted_cols=tuple(self._demoted),
            metadata={
                col: ColumnMetadata(
                    name=col,
                    kind=kind,
                    pretty_name=ColumnMetadata.prettify(col),
                    is_key=col == self.key_col,
                )
                for col, kind in self._kinds.items()
            },
        )
