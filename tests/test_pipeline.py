"""Tests for the end-to-end skyline pipeline."""

import logging

import pytest

from skyline_tlbx.analysis import SkylineReport, run_skyline_pipeline
from skyline_tlbx.data import TabularDataset
from skyline_tlbx.utils import AnalysisConfig


class TestSkylinePipeline:
    """Test run_skyline_pipeline and BaseDataset.analyze."""

    def test_report_on_cars(self, cars_dataset: TabularDataset) -> None:
        report = cars_dataset.analyze()
        assert isinstance(report, SkylineReport)
        assert report.key_col == "model"
        assert report.attributes == tuple(cars_dataset.numeric_cols)
        assert report.classification is cars_dataset.classification
        assert list(report.subspaces.subspaces) == report.skyline.skyline_keys
        assert list(report.scoring.scores.index) == report.skyline.skyline_keys
        assert report.divergence.matrix.shape == (len(cars_dataset.df), len(cars_dataset.df))

    def test_config_reaches_every_stage(self, speed_power_dataset: TabularDataset) -> None:
        config = AnalysisConfig(mining_relation="pareto", degenerate_fallback=1.0)
        report = run_skyline_pipeline(speed_power_dataset, config=config)
        assert report.subspaces.for_key("1") == (("speed", "power"),)
        assert report.scoring.score_percentage("1") == 1.0

    def test_logs_progress(self, speed_power_dataset: TabularDataset, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.INFO, logger="skyline_tlbx"):
            speed_power_dataset.analyze()
        assert "Calculated 3 skyline points and 1 dominated points." in caplog.text
        assert "Calculated diverging data for 4 records." in caplog.text

    def test_nominal_only_dataset(self) -> None:
        """A dataset without numeric attributes still produces a complete report."""
        ds = TabularDataset.from_records([{"id": "a", "tag": "x"}, {"id": "b", "tag": "y"}])
        report = ds.analyze()
        assert report.skyline.skyline_keys == ["a", "b"]
        assert report.scoring.scores.tolist() == [0, 0]
        assert report.subspaces.max_subspaces == 0

    def test_dataset_config_is_the_default(self) -> None:
        """analyze() without arguments uses the configuration attached at load time."""
        records = [
            {"id": "1", "speed": 5, "power": 5},
            {"id": "2", "speed": 3, "power": 8},
            {"id": "3", "speed": 2, "power": 2},
            {"id": "4", "speed": 5, "power": 5},
        ]
        config = AnalysisConfig(mining_relation="pareto", degenerate_fallback=1.0)
        report = TabularDataset.from_records(records, config=config).analyze()
        assert report.subspaces.for_key("1") == (("speed", "power"),)
        assert report.scoring.score_percentage("1") == 1.0

        overridden = TabularDataset.from_records(records, config=config).analyze(AnalysisConfig())
        assert overridden.subspaces.for_key("1") == (("speed",),)
