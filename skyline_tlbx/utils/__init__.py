from .analysis_config import DEFAULT_ANALYSIS_CFG, AnalysisConfig
from .paths import available_datasets, get_data_dir, get_dataset_path


__all__ = [
    "DEFAULT_ANALYSIS_CFG",
    "AnalysisConfig",
    "available_datasets",
    "get_data_dir",
    "get_dataset_path",
]
