"""Test configuration for the skyline toolbox."""

from pathlib import Path
import sys

import pytest


# Ensure the local package is importable when the repo isn't installed.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


@pytest.fixture(scope="session")
def cars_dataset():
    """Load the bundled cars sample once per test session."""
    from skyline_tlbx.data import TabularDataset

    return TabularDataset.from_csv()


@pytest.fixture
def speed_power_dataset():
    """Four records over two attributes; records 1 and 4 are identical."""
    from skyline_tlbx.data import TabularDataset

    return TabularDataset.from_records(
        [
            {"id": "1", "speed": 5, "power": 5},
            {"id": "2", "speed": 3, "power": 8},
            {"id": "3", "speed": 2, "power": 2},
            {"id": "4", "speed": 5, "power": 5},
        ],
    )
