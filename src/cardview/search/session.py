"""Wires query, sorting, executor and display window into one pipeline."""

import logging
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from ..config import CardViewConfig
from ..documents import Document, DocumentSource
from ..preview import is_empty_note
from ..query import EvaluationContext, Predicate, build_predicate
from .cache import ResultCache
from .executor import SearchExecutor, SearchState
from .sorting import DEFAULT_SORT, SortOrder, sort_documents
from .window import DisplayWindow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionView:
    """What a front end needs to render the current search.

    Attributes:
        displayed: Documents currently in the display window.
        total: Number of documents in the sorted list.
        matched_so_far: Non-excluded documents within the evaluated prefix.
        progress: Fraction of the list evaluated.
        generation: Executor generation the view belongs to.
    """

    displayed: tuple[Document, ...]
    total: int
    matched_so_far: int
    progress: float
    generation: int


ViewListener = Callable[[SessionView], None]


def _has_body(ctx: EvaluationContext) -> bool:
    return ctx.content is not None and not is_empty_note(ctx.content)


def _parse_sort(value: str) -> SortOrder:
    try:
        return SortOrder.parse(value)
    except ValueError as e:
        logger.warning("%s; using %s", e, DEFAULT_SORT.value)
        return DEFAULT_SORT


class SearchSession:
    """Owns the search state for one view of a document collection."""

    def __init__(
        self,
        source: DocumentSource,
        config: CardViewConfig | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the session.

        Args:
            source: Reads document contents for the executor.
            config: User settings (defaults when None).
            clock: Monotonic clock passed to the executor.
        """
        self.config = config if config is not None else CardViewConfig()
        self.cache = ResultCache(self.config.cache_size)
        self.executor = SearchExecutor(
            source,
            cache=self.cache,
            flush_interval=self.config.flush_interval,
            clock=clock,
        )
        self.window = DisplayWindow(self.config.page_size)

        self.query = ""
        self.sort = _parse_sort(self.config.sort)
        self.case_sensitive = self.config.case_sensitive
        self.pinned = tuple(self.config.pinned_files)
        self._unsorted: tuple[Document, ...] = ()
        self._documents: tuple[Document, ...] = ()
        self._predicate = self._build_predicate()
        self._listeners: list[ViewListener] = []

        self.executor.subscribe(self._on_state)
        self.window.subscribe(self._on_displayed)

    @property
    def documents(self) -> tuple[Document, ...]:
        """The sorted document list."""
        return self._documents

    @property
    def displayed(self) -> tuple[Document, ...]:
        return self.window.displayed

    @property
    def view(self) -> SessionView:
        state = self.executor.state
        frontier = round(state.progress * len(self._documents))
        matched = sum(1 for doc in self._documents[:frontier] if doc not in state.excluded)
        return SessionView(
            displayed=self.window.displayed,
            total=len(self._documents),
            matched_so_far=matched,
            progress=state.progress,
            generation=state.generation,
        )

    def subscribe(self, listener: ViewListener) -> Callable[[], None]:
        """Register a callback invoked with a SessionView after every change.

        Returns:
            A function that unregisters the callback.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _build_predicate(self) -> Predicate | None:
        query_predicate = build_predicate(self.query)
        if self.config.show_empty_notes:
            return query_predicate
        if query_predicate is None:
            return _has_body
        return lambda ctx: _has_body(ctx) and query_predicate(ctx)

    def _on_state(self, state: SearchState) -> None:
        self.window.set_results(state.excluded, state.progress)

    def _on_displayed(self, displayed: tuple[Document, ...]) -> None:
        if not self._listeners:
            return
        view = self.view
        for listener in list(self._listeners):
            listener(view)

    def _restart(self) -> int:
        return self.executor.update(self._predicate, self._documents, self.case_sensitive)

    def set_query(self, query: str) -> int:
        """Replace the query text.

        Returns:
            The new executor generation.
        """
        if query != self.query:
            self.query = query
            self._predicate = self._build_predicate()
            logger.debug("Query set to %r", query)
        return self._restart()

    def set_case_sensitive(self, case_sensitive: bool) -> int:
        """Change the ambient case sensitivity."""
        self.case_sensitive = case_sensitive
        return self._restart()

    def set_documents(self, documents: Iterable[Document]) -> int:
        """Replace the (unsorted) document list after a vault change."""
        self._unsorted = tuple(documents)
        self._documents = tuple(sort_documents(self._unsorted, self.sort, self.pinned))
        generation = self._restart()
        self.window.set_documents(self._documents)
        return generation

    def set_sort(self, order: SortOrder) -> int:
        """Reorder the document list, keeping the window length."""
        self.sort = order
        self._documents = tuple(sort_documents(self._unsorted, order, self.pinned))
        generation = self._restart()
        self.window.set_documents(self._documents, reordered=True)
        return generation

    def load_more(self) -> None:
        self.window.load_more()

    async def evaluate(self, generation: int | None = None) -> bool:
        """Run a generation (the current one by default) to completion.

        Returns:
            True if it completed, False if a newer generation superseded it.
        """
        if generation is None:
            generation = self.executor.generation
        return await self.executor.run(generation)

    def matching_documents(self) -> list[Document]:
        """Return the non-excluded documents within the evaluated prefix."""
        state = self.executor.state
        frontier = round(state.progress * len(self._documents))
        return [doc for doc in self._documents[:frontier] if doc not in state.excluded]
