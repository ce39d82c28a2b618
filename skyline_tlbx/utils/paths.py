"""Locations of the sample datasets shipped inside the package."""

from pathlib import Path
from typing import Literal


__all__ = ["available_datasets", "get_data_dir", "get_dataset_path"]


# Short name -> file in ``skyline_tlbx/_data``
_BUNDLED: dict[str, str] = {
    "cars": "cars.csv",
}


def get_data_dir() -> Path:
    """Directory holding the bundled CSV samples."""
    data_dir = (Path(__file__).parents[1] / "_data").resolve()
    assert data_dir.is_dir(), f"Bundled data directory missing at {data_dir}"
    return data_dir


def available_datasets() -> list[str]:
    """Short names accepted by :func:`get_dataset_path`."""
    return sorted(_BUNDLED)


def get_dataset_path(name: Literal["cars"] | str) -> Path:  # noqa: PYI051
    """Resolve a bundled dataset by short name or file name.

    Args:
        name: Short name (see :func:`available_datasets`) or a file name inside the
            data directory

    Raises:
        FileNotFoundError: If no such file is bundled.
    """
    path = get_data_dir() / _BUNDLED.get(name, name)
    if not path.is_file():
        raise FileNotFoundError(f"No bundled dataset '{name}' (known: {available_datasets()}).")
    return path
