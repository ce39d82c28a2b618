"""Shared life cycle of the skyline analyzers."""

from abc import ABC, abstractmethod
from typing import Any


class BaseAnalyser(ABC):
    """Common interface of every analysis step in the skyline pipeline.

    An analyzer is built from an immutable :class:`~skyline_tlbx.data.views.DatasetView`
    and, for steps downstream of the skyline, the :class:`SkylineResult` it refines.
    Work happens in :meth:`fit`; :meth:`result` only packages what ``fit`` computed.

    Contract:
        - ``fit()`` returns ``self``, so ``Analyzer(view).fit().result()`` chains.
        - ``result()`` returns a frozen dataclass and raises ``ValueError`` before
          ``fit()``.
        - The view and upstream results are read, never modified.

    A new step usually needs three pieces: the analyzer with its frozen result type,
    a ``make_*`` factory on :class:`~skyline_tlbx.data.base_dataset.BaseDataset` that
    builds the view, and a field on ``SkylineReport`` if presentation layers should
    receive it from :func:`~skyline_tlbx.analysis.pipeline.run_skyline_pipeline`.
    """

    @abstractmethod
    def fit(self) -> "BaseAnalyser":
        """Run the analysis.

        Returns:
            Self for method chaining.
        """
        ...

    @abstractmethod
    def result(self) -> Any:
        """Package the fitted state.

        Raises:
            ValueError: If fit() has not been called yet.
        """
        ...
