"""Text queries that select records, e.g. ``maker=okapi``, ``mpg>40`` or ``city``."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Literal

import pandas as pd


Operator = Literal["=", ">", "<", "contains"]


@dataclass(frozen=True)
class RecordFilter:
    """Parsed record query.

    Supported forms:
        - ``column=value``: case-insensitive equality (numeric equality on numeric columns)
        - ``column>number`` / ``column<number``: numeric comparison
        - ``term``: case-insensitive substring match on nominal columns (key included)

    Column names are matched case-insensitively. A record matches when any of its
    fields matches.
    """

    operator: Operator
    operand: str
    column: str | None = None

    @classmethod
    def parse(cls, text: str) -> RecordFilter:
        """Parse a query string.

        An operator counts only after at least one character, so ``"=x"`` is a plain
        substring search for ``=x``.
        """
        for op in ("=", ">", "<"):
            if text.find(op) > 0:
                column, _, operand = text.partition(op)
                return cls(operator=op, operand=operand.strip(), column=column.strip().lower())
        return cls(operator="contains", operand=text.strip().lower())

    def column_mask(self, column: str, values: pd.Series, *, numeric: bool) -> pd.Series:
        """Evaluate the filter on one column; returns a boolean Series aligned to ``values``."""
        if self.operator == "contains":
            if numeric:
                return pd.Series(False, index=values.index)
            return values.astype(str).str.lower().str.contains(self.operand, regex=False)

        if column.lower() != self.column or not self.operand:
            return pd.Series(False, index=values.index)

        if self.operator == "=" and not numeric:
            return values.astype(str).str.strip().str.lower() == self.operand.lower()

        number = pd.to_numeric(pd.Series([self.operand]), errors="coerce").iloc[0]
        if pd.isna(number):
            return pd.Series(False, index=values.index)
        parsed = pd.to_numeric(values, errors="coerce")
        if self.operator == ">":
            return parsed.gt(number)
        if self.operator == "<":
            return parsed.lt(number)
        return parsed.eq(number)

    def mask(self, df: pd.DataFrame, numeric_cols: Iterable[str] = ()) -> pd.Series:
        """Boolean Series indexed like ``df``: whether any field of the record matches.

        The index (the unique key) is searched like a nominal column.
        """
        numeric = set(numeric_cols)
        frame = df.reset_index()
        matched = pd.Series(False, index=frame.index)
        for column in frame.columns:
            matched |= self.column_mask(str(column), frame[column], numeric=column in numeric).fillna(False)
        return pd.Series(matched.to_numpy(dtype=bool), index=df.index)


def filter_records(df: pd.DataFrame, text: str, numeric_cols: Iterable[str] = ()) -> list:
    """Return the keys of the records matching the query ``text`` (dataset order)."""
    mask = RecordFilter.parse(text).mask(df, numeric_cols=numeric_cols)
    return df.index[mask.to_numpy()].to_list()
