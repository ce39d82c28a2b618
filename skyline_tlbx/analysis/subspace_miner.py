"""Decisive subspace mining for skyline points.

The search follows J. Pei, W. Jin, M. Ester and Y. Tao, *Catching the best views of
skyline: A semantic approach based on decisive subspaces*, VLDB 2005: starting from
the full attribute set, attributes are removed one at a time; whenever a skyline
point drops out of the subspace skyline, the subspace one level up is decisive for it.
"""

import logging
from collections.abc import Hashable, Iterable, Iterator
from dataclasses import dataclass
from typing import Self

import numpy as np
import pandas as pd

from skyline_tlbx.data.views import DatasetView
from skyline_tlbx.utils.analysis_config import DEFAULT_ANALYSIS_CFG, AnalysisConfig

from .base_analyser import BaseAnalyser
from .skyline import SkylineResult, dominance_matrix, strict_dominance_matrix


logger = logging.getLogger(__name__)

Subspace = frozenset[str]


class DecisiveSubspaceMap:
    """Per-key accumulator of decisive subspaces that keeps every entry minimal.

    No recorded subspace of a key is ever a superset of another recorded subspace of
    the same key. :meth:`add` is the only mutation and performs the whole
    read-modify-write of one key's entry, so a parallel traversal has to guard just
    this method (or merge per-branch maps with :meth:`merge`).
    """

    def __init__(self) -> None:
        self._entries: dict[Hashable, set[Subspace]] = {}

    def add(self, key: Hashable, subspace: Iterable[str]) -> bool:
        """Propose ``subspace`` as decisive for ``key``.

        The proposal is dropped when an already recorded subspace is a subset of it
        (or equal to it). Otherwise every recorded superset of the proposal is removed
        and the proposal is inserted.

        Returns:
            Whether the proposal was recorded.
        """
        proposal = frozenset(subspace)
        recorded = self._entries.setdefault(key, set())
        if any(existing <= proposal for existing in recorded):
            return False
        recorded -= {existing for existing in recorded if proposal < existing}
        recorded.add(proposal)
        return True

    def merge(self, other: "DecisiveSubspaceMap") -> Self:
        """Fold all entries of ``other`` into this map using :meth:`add`."""
        for key, subspaces in other.items():
            for subspace in subspaces:
                self.add(key, subspace)
        return self

    def get(self, key: Hashable) -> frozenset[Subspace]:
        """Recorded subspaces of ``key`` (empty if none)."""
        return frozenset(self._entries.get(key, ()))

    def items(self) -> Iterator[tuple[Hashable, frozenset[Subspace]]]:
        for key, subspaces in self._entries.items():
            yield key, frozenset(subspaces)

    def is_minimal(self) -> bool:
        """Check that no recorded subspace is a strict superset of another of the same key."""
        return all(not (a < b) for subspaces in self._entries.values() for a in subspaces for b in subspaces)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)


@dataclass(frozen=True)
class DecisiveSubspaceResult:
    """Decisive subspaces of every skyline point.

    Attributes:
        attributes: Attribute set the lattice was built from.
        subspaces: Skyline key -> decisive subspaces, each a tuple of attribute names in
            attribute-set order; sorted by size, then attribute order. Skyline points
            that were never decided map to an empty tuple.
        table: Long DataFrame with columns ``key``, ``row``, ``subspace``, ``size``.
        n_states: Number of distinct lattice states expanded during mining.
    """

    attributes: tuple[str, ...]
    subspaces: dict[Hashable, tuple[tuple[str, ...], ...]]
    table: pd.DataFrame
    n_states: int = 0

    @property
    def max_subspaces(self) -> int:
        """Largest number of decisive subspaces recorded for a single skyline point."""
        return max((len(subs) for subs in self.subspaces.values()), default=0)

    def for_key(self, key: Hashable) -> tuple[tuple[str, ...], ...]:
        """Decisive subspaces of the skyline point ``key``."""
        if key not in self.subspaces:
            raise KeyError(f"'{key}' is not a skyline point.")
        return self.subspaces[key]

    def display_rows(self, key: Hashable) -> dict[str, list[int]]:
        """Row layout for a detail matrix: attribute -> rows whose subspace contains it.

        Row ``i`` is the ``i``-th decisive subspace of ``key`` (smallest first).
        """
        rows: dict[str, list[int]] = {}
        for row, subspace in enumerate(self.for_key(key)):
            for attribute in subspace:
                rows.setdefault(attribute, []).append(row)
        return rows

    def is_minimal(self) -> bool:
        """Check that no decisive subspace of a point contains another one of the same point."""
        return all(
            not set(a) < set(b) for subs in self.subspaces.values() for a in subs for b in subs
        )


class DecisiveSubspaceMiner(BaseAnalyser):
    """Mine the decisive subspaces of every skyline point.

    Subspaces are encoded as bitmasks over the attribute positions. Each recursive call
    receives the current subspace, its parent subspace and a candidate set:

    1. The subspace skyline (computed over the global skyline and cached per bitmask)
       is intersected with the candidates.
    2. Candidates that dropped out are decided by the parent subspace and proposed to
       the :class:`DecisiveSubspaceMap`.
    3. The call recurses once per attribute of the subspace, with that attribute
       removed, passing the surviving candidates and the current subspace as parent.
    4. The empty subspace performs its bookkeeping and ends the branch.

    The ``DecisiveSubspaceMap`` is created per :meth:`fit` and handed down every call.

    Different removal orders reach the same subspace repeatedly. Everything below a
    node depends only on ``(subspace, surviving candidates)``, so with
    ``config.memoize_subspaces`` each such state is expanded once while the
    bookkeeping of every incoming edge still runs; the output equals the plain
    traversal.

    The dominance relation used inside the lattice is ``config.mining_relation``:
    ``"strict"`` (default) compares with ``>`` on every attribute of the subspace,
    ``"pareto"`` reuses the skyline rule.

    Example:
        >>> from skyline_tlbx.data import TabularDataset
        >>> ds = TabularDataset.from_csv()
        >>> sky = ds.make_skyline_analyzer().fit().result()
        >>> res = ds.make_subspace_miner(sky).fit().result()
        >>> res.subspaces, res.display_rows(sky.skyline_keys[0])
    """

    def __init__(
        self,
        view: DatasetView,
        skyline: SkylineResult,
        config: AnalysisConfig | None = None,
    ) -> None:
        """Initialize the miner.

        Args:
            view: Immutable dataset view the skyline was computed on
            skyline: Skyline partition of ``view``
            config: Analysis configuration (relation, memoization, missing-value sentinel)
        """
        self._view = view
        self._skyline = skyline
        self._config = config or DEFAULT_ANALYSIS_CFG
        self.attributes = skyline.attributes
        self._keys: list[Hashable] = skyline.skyline_keys
        self._values: np.ndarray = (
            view.attribute_values(self._config.missing_value)
            .loc[self._keys, list(self.attributes)]
            .to_numpy(dtype=float)
        )
        self._subspace_skylines: dict[int, frozenset[int]] = {}
        self._expanded: set[tuple[int, frozenset[int]]] = set()
        self._map: DecisiveSubspaceMap | None = None

    def _attributes_of(self, mask: int) -> tuple[str, ...]:
        return tuple(attr for pos, attr in enumerate(self.attributes) if mask >> pos & 1)

    def subspace_skyline(self, mask: int) -> frozenset[int]:
        """Skyline positions (into the global skyline) for the subspace ``mask``."""
        if mask not in self._subspace_skylines:
            columns = [pos for pos in range(len(self.attributes)) if mask >> pos & 1]
            values = self._values[:, columns]
            if self._config.mining_relation == "strict":
                dominated = strict_dominance_matrix(values).any(axis=0)
            else:
                dominated = dominance_matrix(values).any(axis=0)
            self._subspace_skylines[mask] = frozenset(np.flatnonzero(~dominated).tolist())
        return self._subspace_skylines[mask]

    def _mine(
        self,
        decisive: DecisiveSubspaceMap,
        candidates: frozenset[int],
        mask: int,
        parent_mask: int,
    ) -> None:
        surviving = self.subspace_skyline(mask) & candidates

        # An empty parent only occurs at the root of an empty attribute set
        if parent_mask and surviving != candidates:
            decided_by = self._attributes_of(parent_mask)
            for pos in sorted(candidates - surviving):
                decisive.add(self._keys[pos], decided_by)

        if not mask:
            return
        if self._config.memoize_subspaces:
            state = (mask, surviving)
            if state in self._expanded:
                return
            self._expanded.add(state)

        for pos in range(len(self.attributes)):
            bit = 1 << pos
            if mask & bit:
                self._mine(decisive, surviving, mask & ~bit, mask)

    def fit(self) -> Self:
        """Traverse the attribute lattice and collect decisive subspaces."""
        logger.info("Determining decisive subspaces...")
        decisive = DecisiveSubspaceMap()
        self._expanded = set()
        full = (1 << len(self.attributes)) - 1
        self._mine(decisive, frozenset(range(len(self._keys))), full, full)
        self._map = decisive
        logger.debug(
            "Expanded %d lattice states, cached %d subspace skylines.",
            len(self._expanded),
            len(self._subspace_skylines),
        )
        logger.info("Determined decisive subspaces for %d skyline points.", len(self._map))
        return self

    def decisive_map(self) -> DecisiveSubspaceMap:
        """Return the raw accumulator of the last :meth:`fit`."""
        if self._map is None:
            raise ValueError("Must call fit() before decisive_map()")
        return self._map

    def result(self) -> DecisiveSubspaceResult:
        """Return the decisive subspaces per skyline point.

        Raises:
            ValueError: If fit() has not been called yet.
        """
        decisive = self.decisive_map()
        order = {attr: pos for pos, attr in enumerate(self.attributes)}

        def sort_key(subspace: tuple[str, ...]) -> tuple[int, list[int]]:
            return len(subspace), [order[a] for a in subspace]

        subspaces = {
            key: tuple(
                sorted(
                    (tuple(sorted(s, key=order.__getitem__)) for s in decisive.get(key)),
                    key=sort_key,
                ),
            )
            for key in self._keys
        }
        table = pd.DataFrame(
            [
                {"key": key, "row": row, "subspace": subspace, "size": len(subspace)}
                for key, subs in subspaces.items()
                for row, subspace in enumerate(subs)
            ],
            columns=["key", "row", "subspace", "size"],
        )
        return DecisiveSubspaceResult(
            attributes=self.attributes,
            subspaces=subspaces,
            table=table,
            n_states=len(self._expanded),
        )
