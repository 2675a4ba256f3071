"""Derive the page-sized list of displayed documents from search results."""

import logging
from collections.abc import Callable, Iterable, Sequence

from ..constants import DEFAULT_PAGE_SIZE
from ..documents import Document

logger = logging.getLogger(__name__)

WindowListener = Callable[[tuple[Document, ...]], None]


class DisplayWindow:
    """Keeps a stable, growing prefix of matching documents on screen.

    The window does not wait for a search to finish. While the executor is
    still running, documents beyond the evaluation frontier are unknown, so
    the window only tops itself up from the evaluated part of the list.
    Documents that were already displayed stay displayed until the executor
    actually excludes them; this keeps the list from flickering when the
    document list changes underneath it.
    """

    def __init__(self, page_size: int = DEFAULT_PAGE_SIZE) -> None:
        self.page_size = max(1, page_size)
        self.count = self.page_size
        self._documents: tuple[Document, ...] = ()
        self._excluded: frozenset[Document] = frozenset()
        self._progress = 1.0
        self._displayed: tuple[Document, ...] = ()
        self._listeners: list[WindowListener] = []

    @property
    def displayed(self) -> tuple[Document, ...]:
        return self._displayed

    @property
    def documents(self) -> tuple[Document, ...]:
        return self._documents

    @property
    def frontier(self) -> int:
        """Number of leading documents the executor has evaluated."""
        return round(self._progress * len(self._documents))

    def subscribe(self, listener: WindowListener) -> Callable[[], None]:
        """Register a callback invoked with the displayed list after each change.

        Returns:
            A function that unregisters the callback.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def set_documents(self, documents: Iterable[Document], reordered: bool = False) -> None:
        """Replace the sorted document list.

        Args:
            documents: The new sorted list.
            reordered: True when the list only changed order (a new sort).
                The anchor is dropped and the first `count` non-excluded
                documents in the new order are displayed.
        """
        self._documents = tuple(documents)
        if reordered:
            self._displayed = self._first_unexcluded(self._documents, self.count)
            self._publish()
        else:
            self._recompute()

    def set_results(self, excluded: frozenset[Document], progress: float) -> None:
        """Apply the executor's latest excluded set and progress."""
        self._excluded = excluded
        self._progress = min(max(progress, 0.0), 1.0)
        self._recompute()

    def load_more(self) -> None:
        """Grow the window by one page."""
        self.count += self.page_size
        logger.debug("Display window grown to %d", self.count)
        self._recompute()

    def reset(self) -> None:
        """Shrink back to a single page and forget the anchor."""
        self.count = self.page_size
        self._displayed = ()
        self._recompute()

    @staticmethod
    def should_load_more(position: int, total: int, threshold: int) -> bool:
        """Return True when a cursor at `position` is near the end of `total` rows.

        Examples:
            >>> DisplayWindow.should_load_more(45, 50, 10)
            True
            >>> DisplayWindow.should_load_more(10, 50, 10)
            False
        """
        if total <= 0:
            return False
        return position >= total - 1 - threshold

    def _anchor_rank(self) -> int:
        """Rank of the last displayed document still present, or -1."""
        if not self._displayed:
            return -1
        ranks = {doc.path: i for i, doc in enumerate(self._documents)}
        for doc in reversed(self._displayed):
            rank = ranks.get(doc.path)
            if rank is not None:
                return rank
        return -1

    def _first_unexcluded(self, documents: Sequence[Document], limit: int) -> tuple[Document, ...]:
        result: list[Document] = []
        for doc in documents:
            if len(result) >= limit:
                break
            if doc not in self._excluded:
                result.append(doc)
        return tuple(result)

    def _recompute(self) -> None:
        anchor = self._anchor_rank()
        head = [doc for doc in self._documents[: anchor + 1] if doc not in self._excluded]

        if len(head) >= self.count:
            displayed = head[: self.count]
        else:
            displayed = head
            frontier = self.frontier
            if anchor + 1 < frontier:
                displayed.extend(
                    self._first_unexcluded(
                        self._documents[anchor + 1 : frontier],
                        self.count - len(head),
                    )
                )

        self._displayed = tuple(displayed)
        self._publish()

    def _publish(self) -> None:
        for listener in list(self._listeners):
            listener(self._displayed)
