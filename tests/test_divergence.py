"""Tests for DivergenceAnalyzer."""

import numpy as np
import pytest

from skyline_tlbx.analysis import DivergenceAnalyzer, DivergenceResult
from skyline_tlbx.data import TabularDataset


def _diverge(dataset: TabularDataset) -> DivergenceResult:
    return dataset.make_divergence_analyzer().fit().result()


class TestDivergenceAnalyzer:
    """Test deviation matrices and profiles."""

    @pytest.fixture
    def pair_dataset(self) -> TabularDataset:
        """Two records; x has sigma 1, y has sigma 2, z is constant."""
        return TabularDataset.from_records(
            [
                {"id": "a", "x": 0, "y": 0, "z": 7},
                {"id": "b", "x": 2, "y": 4, "z": 7},
            ],
        )

    @pytest.fixture
    def sparse_dataset(self) -> TabularDataset:
        """Three records, b misses y."""
        return TabularDataset.from_records(
            [
                {"id": "a", "x": 0, "y": 0},
                {"id": "b", "x": 1, "y": ""},
                {"id": "c", "x": 2, "y": 2},
            ],
        )

    def test_population_sigma(self, pair_dataset: TabularDataset) -> None:
        """Sigma uses ddof=0; constant attributes get 0."""
        res = _diverge(pair_dataset)
        assert res.sigma.to_dict() == pytest.approx({"x": 1.0, "y": 2.0, "z": 0.0})

    def test_deviation_is_sum_of_normalized_differences(self, pair_dataset: TabularDataset) -> None:
        """(2 - 0) / 1 + (4 - 0) / 2, the constant attribute adds nothing."""
        res = _diverge(pair_dataset)
        assert res.matrix.loc["a", "b"] == pytest.approx(4.0)
        assert res.matrix.loc["b", "a"] == pytest.approx(-4.0)

    def test_matrix_is_antisymmetric(self, cars_dataset: TabularDataset) -> None:
        """Swapping reference and comparator flips the sign; self-deviation is 0."""
        matrix = _diverge(cars_dataset).matrix.to_numpy()
        np.testing.assert_allclose(matrix, -matrix.T)
        np.testing.assert_allclose(np.diag(matrix), 0.0)
        assert np.isfinite(matrix).all()

    def test_missing_values_contribute_nothing(self, sparse_dataset: TabularDataset) -> None:
        """A pair where one side misses an attribute skips that attribute."""
        res = _diverge(sparse_dataset)
        sigma_x = np.sqrt(2 / 3)
        assert res.sigma["y"] == pytest.approx(1.0)
        assert res.matrix.loc["a", "b"] == pytest.approx(1 / sigma_x)
        assert res.matrix.loc["a", "c"] == pytest.approx(2 / sigma_x + 2.0)

    def test_orders_put_missing_first(self, sparse_dataset: TabularDataset) -> None:
        res = _diverge(sparse_dataset)
        assert res.orders == {"x": ["a", "b", "c"], "y": ["b", "a", "c"]}

    def test_profile(self, sparse_dataset: TabularDataset) -> None:
        """A profile lists every record in attribute order with the reference at 0."""
        res = _diverge(sparse_dataset)
        profile = res.profile("y", "a")
        assert profile.reference_position == 1
        assert profile.n_below == 1
        assert profile.n_above == 1
        assert profile.entries["comparator"].tolist() == ["b", "a", "c"]
        assert profile.entries["position"].tolist() == [0, 1, 2]
        assert profile.entries.loc[1, "deviation"] == 0.0
        assert res.reference_position("x", "c") == 2

    def test_profile_deviation_independent_of_order(self, sparse_dataset: TabularDataset) -> None:
        """Ordering by another attribute only permutes the comparators."""
        res = _diverge(sparse_dataset)
        by_x = res.profile("x", "a").entries.set_index("comparator")["deviation"]
        by_y = res.profile("y", "a").entries.set_index("comparator")["deviation"]
        assert by_x.to_dict() == pytest.approx(by_y.to_dict())

    def test_long_table(self, cars_dataset: TabularDataset) -> None:
        res = _diverge(cars_dataset)
        table = res.long_table()
        n = len(cars_dataset.df)
        assert len(table) == len(res.attributes) * n * n
        assert table.columns.to_list() == [
            "attribute",
            "reference",
            "reference_position",
            "position",
            "comparator",
            "deviation",
        ]
        assert len(res.long_table(["mpg"])) == n * n

    def test_no_numeric_attributes(self) -> None:
        """Without attributes every deviation is 0 and there are no profiles."""
        ds = TabularDataset.from_records([{"id": "a", "tag": "x"}, {"id": "b", "tag": "y"}])
        res = _diverge(ds)
        assert (res.matrix.to_numpy() == 0).all()
        assert res.long_table().empty

    def test_unknown_attribute_and_record(self, sparse_dataset: TabularDataset) -> None:
        res = _diverge(sparse_dataset)
        with pytest.raises(KeyError, match=r"Unknown attribute"):
            res.profile("speed", "a")
        with pytest.raises(KeyError, match=r"Unknown record"):
            res.profile("x", "zz")

    def test_result_before_fit(self, sparse_dataset: TabularDataset) -> None:
        with pytest.raises(ValueError, match=r"Must call fit\(\)"):
            DivergenceAnalyzer(sparse_dataset.view()).result()
