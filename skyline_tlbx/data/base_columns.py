"""Base column definitions and metadata structures."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class ColumnKind(StrEnum):
    """Kind of a dataset column, decided once when the dataset is classified.

    Numeric columns carry parsed floats on every record and take part in
    dominance; nominal columns keep their raw strings.
    """

    NUMERIC = "numeric"
    NOMINAL = "nominal"

    @property
    def is_numeric(self) -> bool:
        """Whether values of this kind take part in dominance comparisons."""
        return self is ColumnKind.NUMERIC


@dataclass(frozen=True)
class ColumnMetadata:
    """Metadata for a dataset column.

    Attributes:
        name: Column name as it appears in the header row.
        kind: Numeric or nominal classification of the column.
        pretty_name: Human-readable name for reports and presentation layers.
        is_key: Whether the column holds the unique record key.
    """

    name: str
    kind: ColumnKind
    pretty_name: str
    is_key: bool = False

    @staticmethod
    def prettify(name: str) -> str:
        """Derive a display label from a raw column name."""
        return name.replace("_", " ").strip().title()
