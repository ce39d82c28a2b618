"""Data module for dataset classes."""

from .base_columns import ColumnKind, ColumnMetadata
from .record_filter import RecordFilter, filter_records
from .tabular_dataset import MalformedRecordError, TabularDataset


__all__ = ["ColumnKind", "ColumnMetadata", "MalformedRecordError", "RecordFilter", "TabularDataset", "filter_records"]
