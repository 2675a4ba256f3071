"""Incremental, cancelable evaluation of a predicate across many documents.

A search pass walks the sorted document list in order, answering each
document from the result cache when it can and reading it through the
DocumentSource when it cannot. Non-matching documents are collected into
batches that are merged into the published excluded set at most once per
flush interval (and once at the end), so observers see results stream in
without being notified for every single document.

Every call to SearchExecutor.update() starts a new generation. A pass checks
its generation before each document, after each read, and before each
commit; once a newer generation exists the pass stops without committing
anything, so stale results can never overwrite newer ones.
"""

import asyncio
import logging
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from ..constants import DEFAULT_FLUSH_INTERVAL
from ..documents import Document, DocumentReadError, DocumentSource
from ..query import EvaluationContext, Predicate
from .cache import ResultCache

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SearchState:
    """Snapshot of the executor's observable state.

    Attributes:
        generation: The generation this state belongs to.
        excluded: Documents known not to match, as of the last commit.
        progress: Fraction of the document list evaluated so far (1.0 when
            complete or when there is nothing to evaluate).
    """

    generation: int
    excluded: frozenset[Document]
    progress: float

    @property
    def is_complete(self) -> bool:
        return self.progress >= 1.0


StateListener = Callable[[SearchState], None]


class SearchExecutor:
    """Evaluates a predicate over a document list in time-sliced batches."""

    def __init__(
        self,
        source: DocumentSource,
        cache: ResultCache | None = None,
        flush_interval: float = DEFAULT_FLUSH_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the executor.

        Args:
            source: Reads document contents (the only suspension point).
            cache: Result cache to consult and populate.
            flush_interval: Minimum seconds between two batch commits.
            clock: Monotonic clock used to time flushes.
        """
        self._source = source
        self.cache = cache if cache is not None else ResultCache()
        self.flush_interval = flush_interval
        self._clock = clock

        self._generation = 0
        self._predicate: Predicate | None = None
        self._documents: tuple[Document, ...] = ()
        self._case_sensitive = False
        self._excluded: set[Document] = set()
        self._progress = 1.0
        self._listeners: list[StateListener] = []

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def progress(self) -> float:
        return self._progress

    @property
    def excluded(self) -> frozenset[Document]:
        return frozenset(self._excluded)

    @property
    def state(self) -> SearchState:
        return SearchState(
            generation=self._generation,
            excluded=frozenset(self._excluded),
            progress=self._progress,
        )

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a callback invoked with the new state after every change.

        Returns:
            A function that unregisters the callback.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _publish(self) -> None:
        state = self.state
        for listener in list(self._listeners):
            listener(state)

    def update(
        self,
        predicate: Predicate | None,
        documents: Iterable[Document],
        case_sensitive: bool = False,
    ) -> int:
        """Start a new generation for a predicate and document snapshot.

        Any pass still running for an older generation stops at its next
        check. When the predicate or case sensitivity changed, cached outcomes
        and the excluded set are discarded. When only the documents changed,
        previously excluded documents that are still present (same path and
        mtime) and whose outcome is cached stay excluded. Documents excluded
        because they could not be read are evaluated again.

        Args:
            predicate: The compiled query, or None if everything matches.
            documents: The sorted document list to evaluate.
            case_sensitive: Ambient case sensitivity for the predicate.

        Returns:
            The new generation number, to be passed to run().
        """
        documents = tuple(documents)
        predicate_changed = (
            predicate is not self._predicate or case_sensitive != self._case_sensitive
        )

        self._generation += 1
        self._predicate = predicate
        self._documents = documents
        self._case_sensitive = case_sensitive

        if predicate is None:
            self._excluded = set()
        elif predicate_changed:
            self.cache.clear()
            self._excluded = set()
        else:
            present = set(documents)
            self._excluded = {
                doc
                for doc in self._excluded
                if doc in present and doc.cache_key in self.cache
            }

        self._progress = 1.0 if predicate is None or not documents else 0.0
        logger.debug(
            "Search generation %d: %d documents, predicate %s",
            self._generation,
            len(documents),
            "changed" if predicate_changed else "unchanged",
        )
        self._publish()
        return self._generation

    async def run(self, generation: int) -> bool:
        """Evaluate the snapshot of the given generation.

        Args:
            generation: The value returned by the matching update() call.

        Returns:
            True if the pass completed, False if a newer generation
            superseded it (nothing further is committed in that case).
        """
        if generation != self._generation:
            return False

        predicate = self._predicate
        documents = self._documents
        case_sensitive = self._case_sensitive
        if predicate is None or not documents:
            return True

        total = len(documents)
        batch: list[Document] = []
        last_flush = self._clock()

        for processed, document in enumerate(documents, start=1):
            if generation != self._generation:
                return self._abandon(generation, processed - 1, total)

            matched = await self._evaluate(document, predicate, case_sensitive, generation)
            if matched is None:
                return self._abandon(generation, processed - 1, total)
            if not matched:
                batch.append(document)

            if processed < total and self._clock() - last_flush >= self.flush_interval:
                if not self._commit(generation, batch, processed / total):
                    return self._abandon(generation, processed, total)
                batch = []
                # Let observers (and newer queries) run between batches
                await asyncio.sleep(0)
                last_flush = self._clock()

        if not self._commit(generation, batch, 1.0):
            return self._abandon(generation, total, total)

        logger.debug(
            "Search generation %d complete: %d/%d excluded (cache hits=%d misses=%d)",
            generation,
            len(self._excluded),
            total,
            self.cache.hits,
            self.cache.misses,
        )
        return True

    async def search(
        self,
        predicate: Predicate | None,
        documents: Iterable[Document],
        case_sensitive: bool = False,
    ) -> bool:
        """Start a new generation and evaluate it to completion."""
        generation = self.update(predicate, documents, case_sensitive)
        return await self.run(generation)

    async def _evaluate(
        self,
        document: Document,
        predicate: Predicate,
        case_sensitive: bool,
        generation: int,
    ) -> bool | None:
        """Return whether a document matches, or None if superseded meanwhile."""
        key = document.cache_key
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        try:
            contents = await self._source.read(document)
        except (DocumentReadError, OSError) as e:
            if generation != self._generation:
                return None
            # Unreadable documents do not match in this pass, but may next time
            logger.warning("Treating %s as a non-match: %s", document.path, e)
            return False

        if generation != self._generation:
            return None

        matched = predicate(
            EvaluationContext(
                document=document,
                content=contents.content,
                tags=contents.tags,
                frontmatter=contents.frontmatter,
                case_sensitive=case_sensitive,
            )
        )
        self.cache.put(key, matched)
        return matched

    def _commit(self, generation: int, batch: list[Document], progress: float) -> bool:
        """Merge a batch into the excluded set if the generation is current."""
        if generation != self._generation:
            return False
        self._excluded.update(batch)
        self._progress = progress
        self._publish()
        return True

    def _abandon(self, generation: int, processed: int, total: int) -> bool:
        logger.debug(
            "Search generation %d superseded by %d after %d/%d documents",
            generation,
            self._generation,
            processed,
            total,
        )
        return False
