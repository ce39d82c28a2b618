"""Tests for TabularDataset."""

from pathlib import Path

import numpy as np
import pandas as pd
import pytest

from skyline_tlbx.data import MalformedRecordError, TabularDataset
from skyline_tlbx.data.views import DatasetView
from skyline_tlbx.utils import DEFAULT_ANALYSIS_CFG, AnalysisConfig


class TestTabularDataset:
    """Test TabularDataset loading and views."""

    @pytest.fixture
    def sample_df(self) -> pd.DataFrame:
        """Create a sample DataFrame for testing."""
        return pd.DataFrame(
            {
                "name": ["Bulbasaur", "Charmander", "Squirtle"],
                "type": ["Grass", "Fire", "Water"],
                "attack": ["49", "52", "48"],
                "defense": ["49", "", "65"],
                "legendary": ["False", "False", "False"],
            },
        )

    @pytest.fixture
    def sample_dataset(self, sample_df: pd.DataFrame, tmp_path: Path) -> TabularDataset:
        """Create a sample dataset from CSV."""
        csv_path = tmp_path / "test_data.csv"
        sample_df.to_csv(csv_path, index=False)
        return TabularDataset.from_csv(csv_path)

    def test_from_csv_creates_dataset(self, sample_dataset: TabularDataset) -> None:
        """Test that from_csv creates a dataset indexed by the first column."""
        assert isinstance(sample_dataset, TabularDataset)
        assert sample_dataset.key_col == "name"
        assert sample_dataset.df.index.to_list() == ["Bulbasaur", "Charmander", "Squirtle"]

    def test_numeric_columns_are_converted(self, sample_dataset: TabularDataset) -> None:
        """Numeric attributes hold floats, missing cells become NaN."""
        df = sample_dataset.df
        assert sample_dataset.numeric_cols == ["attack", "defense"]
        assert pd.api.types.is_float_dtype(df["attack"])
        assert np.isnan(df.loc["Charmander", "defense"])

    def test_nominal_columns_keep_raw_strings(self, sample_dataset: TabularDataset) -> None:
        """Nominal values are not converted."""
        assert sample_dataset.nominal_cols == ["type", "legendary"]
        assert sample_dataset.df.loc["Squirtle", "legendary"] == "False"

    def test_view(self, sample_dataset: TabularDataset) -> None:
        """Views carry the attribute set and key column."""
        view = sample_dataset.view()
        assert isinstance(view, DatasetView)
        assert view.numeric_cols == ["attack", "defense"]
        assert view.nominal_cols == ["type", "legendary"]
        assert view.key_col == "name"
        assert view.pretty_by_col["attack"] == "Attack"

    def test_view_column_subset(self, sample_dataset: TabularDataset) -> None:
        """A column subset restricts the attribute set."""
        view = sample_dataset.view(columns=["attack", "type"])
        assert view.numeric_cols == ["attack"]
        assert list(view.df.columns) == ["attack", "type"]

    def test_view_unknown_column(self, sample_dataset: TabularDataset) -> None:
        """Unknown columns are rejected."""
        with pytest.raises(KeyError, match=r"not found"):
            sample_dataset.view(columns=["speed"])

    def test_from_records_matches_csv(self, sample_df: pd.DataFrame, sample_dataset: TabularDataset) -> None:
        """from_records classifies like from_csv."""
        ds = TabularDataset.from_records(sample_df.to_dict(orient="records"))
        pd.testing.assert_frame_equal(ds.df, sample_dataset.df)

    def test_duplicate_keys_are_rejected(self) -> None:
        """A duplicated unique key is a malformed record."""
        records = [{"id": "a", "x": 1}, {"id": "b", "x": 2}, {"id": "a", "x": 3}]
        with pytest.raises(MalformedRecordError, match=r"Duplicate") as excinfo:
            TabularDataset.from_records(records)
        assert excinfo.value.keys == ["a"]

    def test_missing_keys_are_rejected(self) -> None:
        """A row without a key is a malformed record."""
        records = [{"id": "a", "x": 1}, {"id": None, "x": 2}]
        with pytest.raises(MalformedRecordError, match=r"no value"):
            TabularDataset.from_records(records)

    def test_malformed_record_is_value_error(self) -> None:
        """Callers catching ValueError also catch malformed records."""
        assert issubclass(MalformedRecordError, ValueError)

    def test_label_col_nominal_key(self, sample_dataset: TabularDataset) -> None:
        """A textual key labels the records itself."""
        assert sample_dataset.label_col == "name"
        assert sample_dataset.labels().loc["Squirtle"] == "Squirtle"

    def test_label_col_numeric_key(self, speed_power_dataset: TabularDataset) -> None:
        """A numeric key hands labelling to the second column."""
        assert speed_power_dataset.label_col == "speed"

    def test_empty_dataset(self, tmp_path: Path) -> None:
        """A header-only CSV is a valid, empty dataset."""
        csv_path = tmp_path / "empty.csv"
        csv_path.write_text("id,speed,power\n")
        ds = TabularDataset.from_csv(csv_path)
        assert ds.df.empty
        assert ds.numeric_cols == []

    def test_preclassified_frame(self) -> None:
        """A dataset built from a converted frame derives its classification from dtypes."""
        df = pd.DataFrame({"x": [1.0, 2.0], "tag": ["a", "b"]}, index=pd.Index(["p", "q"], name="id"))
        ds = TabularDataset(df)
        assert ds.numeric_cols == ["x"]
        assert ds.classification.nominal_cols == ("tag",)

    def test_unloaded_dataset(self) -> None:
        """Accessing data before loading fails loudly."""
        with pytest.raises(ValueError, match=r"not loaded"):
            _ = TabularDataset().df

    def test_bundled_cars(self, cars_dataset: TabularDataset) -> None:
        """The bundled sample loads with one demoted-free classification."""
        assert cars_dataset.key_col == "model"
        assert cars_dataset.numeric_cols == ["horsepower", "mpg", "acceleration", "seats", "price"]
        assert cars_dataset.nominal_cols == ["maker"]
        assert cars_dataset.classification.demoted_cols == ()

    def test_config_is_attached_on_load(self, sample_df: pd.DataFrame, tmp_path: Path) -> None:
        """A configuration given at load time becomes the default of every analysis."""
        config = AnalysisConfig(mining_relation="pareto", degenerate_fallback=1.0)
        csv_path = tmp_path / "test_data.csv"
        sample_df.to_csv(csv_path, index=False)

        from_csv = TabularDataset.from_csv(csv_path, config=config)
        from_records = TabularDataset.from_records(sample_df.to_dict(orient="records"), config=config)

        assert from_csv.config is config
        assert from_records.config is config

    def test_default_config(self, sample_dataset: TabularDataset) -> None:
        """Without a configuration the package default applies."""
        assert sample_dataset.config is DEFAULT_ANALYSIS_CFG
