from .data import TabularDataset


__all__ = ["TabularDataset"]
