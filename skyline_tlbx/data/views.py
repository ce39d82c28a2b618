"""Task-specific views over dataset content."""

from collections.abc import Mapping
from dataclasses import dataclass, field

import pandas as pd


@dataclass(frozen=True)
class DatasetView:
    """Immutable snapshot of dataset data and related metadata.

    Attributes:
        df: Dataframe slice indexed by the unique record key.
        pretty_by_col: Mapping from column names to display-friendly labels.
        numeric_cols: Ordered list of numeric attribute names present in ``df``.
        key_col: Name of the unique key column (the index name of ``df``).
        nominal_cols: Ordered list of nominal columns present in ``df``.
    """

    df: pd.DataFrame
    """Dataframe slice indexed by the unique record key."""
    pretty_by_col: Mapping[str, str]
    """Mapping from column names to display-friendly labels."""
    numeric_cols: list[str]
    key_col: str | None = None
    nominal_cols: list[str] = field(default_factory=list)

    @property
    def features(self) -> pd.DataFrame:
        """Return view over numeric attribute columns (may have zero columns)."""
        return self.df.loc[:, list(self.numeric_cols)]

    @property
    def keys(self) -> list:
        """Record keys in dataset order."""
        return self.df.index.to_list()

    def attribute_values(self, missing_value: float = float("-inf")) -> pd.DataFrame:
        """Return numeric attributes as floats with missing values replaced by a sentinel."""
        return self.features.astype(float).fillna(missing_value)
