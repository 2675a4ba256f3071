"""Tests for the incremental search executor."""

import itertools
import logging

import pytest
from cardview.query import build_predicate
from cardview.search import ResultCache, SearchExecutor, SearchState


def _ticking_clock() -> "itertools.count[int]":
    return itertools.count()


async def test_run_excludes_non_matching(make_document, memory_source) -> None:
    """Test that a completed pass excludes exactly the non-matching documents."""
    docs = [make_document.create("a.md"), make_document.create("b.md")]
    memory_source.add("a.md", "lorem ipsum")
    memory_source.add("b.md", "dolor")
    executor = SearchExecutor(memory_source)

    assert await executor.search(build_predicate("lorem"), docs) is True
    assert executor.excluded == frozenset({docs[1]})
    assert executor.progress == 1.0


async def test_null_predicate_is_complete_without_reading(
    make_document, memory_source
) -> None:
    """Test that a blank query completes immediately and reads nothing."""
    docs = make_document.many(5)
    executor = SearchExecutor(memory_source)

    generation = executor.update(None, docs)
    assert executor.progress == 1.0
    assert await executor.run(generation) is True
    assert executor.excluded == frozenset()
    assert memory_source.reads == []


async def test_update_publishes_reset_state(make_document, memory_source) -> None:
    """Test that update() publishes progress 0 for a new predicate."""
    states: list[SearchState] = []
    executor = SearchExecutor(memory_source)
    executor.subscribe(states.append)

    generation = executor.update(build_predicate("x"), make_document.many(3))
    assert states[-1] == SearchState(generation=generation, excluded=frozenset(), progress=0.0)


async def test_cache_serves_repeated_evaluation(make_document, memory_source) -> None:
    """Test idempotence: a second pass over unchanged documents reads nothing."""
    docs = make_document.many(4)
    for doc in docs:
        memory_source.add(doc.path, "lorem" if doc.path.endswith("1.md") else "")
    executor = SearchExecutor(memory_source)
    predicate = build_predicate("lorem")

    await executor.search(predicate, docs)
    first_excluded = executor.excluded
    reads_after_first = len(memory_source.reads)

    await executor.search(predicate, docs)
    assert executor.excluded == first_excluded
    assert len(memory_source.reads) == reads_after_first
    assert executor.cache.hits == len(docs)


async def test_predicate_change_clears_cache(make_document, memory_source) -> None:
    """Test that a new predicate discards cached outcomes and exclusions."""
    docs = make_document.many(3)
    executor = SearchExecutor(memory_source)
    await executor.search(build_predicate("lorem"), docs)
    assert len(executor.cache) == 3
    assert len(executor.excluded) == 3

    executor.update(build_predicate("ipsum"), docs)
    assert len(executor.cache) == 0
    assert executor.excluded == frozenset()


async def test_case_change_clears_cache(make_document, memory_source) -> None:
    """Test that toggling case sensitivity re-evaluates everything."""
    doc = make_document.create("a.md")
    memory_source.add("a.md", "Lorem")
    executor = SearchExecutor(memory_source)
    predicate = build_predicate("lorem")

    await executor.search(predicate, [doc])
    assert executor.excluded == frozenset()

    await executor.search(predicate, [doc], case_sensitive=True)
    assert executor.excluded == frozenset({doc})


async def test_document_change_keeps_still_present_exclusions(
    make_document, memory_source
) -> None:
    """Test that only the documents change, known exclusions are seeded."""
    a, b = make_document.create("a.md"), make_document.create("b.md")
    memory_source.add("a.md", "lorem")
    memory_source.add("b.md", "ipsum")
    executor = SearchExecutor(memory_source)
    predicate = build_predicate("lorem")
    await executor.search(predicate, [a, b])

    c = make_document.create("c.md")
    executor.update(predicate, [a, b, c])
    assert executor.excluded == frozenset({b})
    assert executor.progress == 0.0

    # A saved document is a new value and is not carried over
    b2 = make_document.create("b.md", mtime=2000.0)
    executor.update(predicate, [a, b2, c])
    assert executor.excluded == frozenset()


async def test_superseded_pass_commits_nothing(make_document, memory_source) -> None:
    """Test that a pass stops once a newer generation exists."""
    docs = make_document.many(6)
    executor = SearchExecutor(memory_source, flush_interval=0)
    old_predicate = build_predicate("lorem")
    new_predicate = build_predicate("ipsum")

    def supersede(document) -> None:
        if document == docs[3]:
            executor.update(new_predicate, docs)

    memory_source.on_read = supersede
    states: list[SearchState] = []
    executor.subscribe(states.append)

    old_generation = executor.update(old_predicate, docs)
    assert await executor.run(old_generation) is False

    # Nothing from the old generation after the switch
    new_generation = executor.generation
    assert new_generation == old_generation + 1
    switch = next(i for i, s in enumerate(states) if s.generation == new_generation)
    assert all(s.generation == new_generation for s in states[switch:])
    assert executor.excluded == frozenset()
    # The outcome computed for the stale generation was not cached
    assert docs[3].cache_key not in executor.cache

    memory_source.on_read = None
    assert await executor.run(new_generation) is True
    assert executor.excluded == frozenset(docs)


async def test_stale_run_call_is_rejected(make_document, memory_source) -> None:
    """Test that running an old generation does nothing."""
    executor = SearchExecutor(memory_source)
    old = executor.update(build_predicate("x"), make_document.many(2))
    executor.update(build_predicate("y"), make_document.many(2))
    assert await executor.run(old) is False
    assert memory_source.reads == []


async def test_read_failure_is_non_match_and_not_cached(
    make_document, memory_source, caplog: pytest.LogCaptureFixture
) -> None:
    """Test that unreadable documents are excluded for the pass only."""
    docs = [make_document.create("a.md"), make_document.create("b.md")]
    memory_source.add("a.md", "lorem")
    memory_source.add("b.md", "lorem")
    memory_source.failing.add("b.md")
    executor = SearchExecutor(memory_source)
    predicate = build_predicate("lorem")

    with caplog.at_level(logging.WARNING, logger="cardview.search.executor"):
        assert await executor.search(predicate, docs) is True
    assert executor.excluded == frozenset({docs[1]})
    assert docs[1].cache_key not in executor.cache
    assert "b.md" in caplog.text

    # Once readable again, the document is retried rather than kept excluded
    memory_source.failing.clear()
    generation = executor.update(predicate, docs)
    assert executor.excluded == frozenset()
    await executor.run(generation)
    assert executor.excluded == frozenset()


async def test_flushes_on_interval_and_at_end(make_document, memory_source) -> None:
    """Test that batches are committed per flush interval and at the end."""
    ticks = _ticking_clock()
    docs = make_document.many(10)
    executor = SearchExecutor(
        memory_source, flush_interval=2.5, clock=lambda: float(next(ticks))
    )
    states: list[SearchState] = []
    generation = executor.update(build_predicate("lorem"), docs)
    executor.subscribe(states.append)

    assert await executor.run(generation) is True
    assert [s.progress for s in states] == [0.3, 0.6, 0.9, 1.0]
    assert [len(s.excluded) for s in states] == [3, 6, 9, 10]
    for earlier, later in zip(states, states[1:]):
        assert earlier.excluded <= later.excluded


async def test_unsubscribe_stops_notifications(make_document, memory_source) -> None:
    """Test that an unsubscribed listener is no longer called."""
    states: list[SearchState] = []
    executor = SearchExecutor(memory_source, cache=ResultCache(max_entries=5))
    unsubscribe = executor.subscribe(states.append)
    executor.update(None, make_document.many(1))
    unsubscribe()
    executor.update(None, make_document.many(2))
    assert len(states) == 1
