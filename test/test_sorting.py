"""Tests for document sorting."""

import pytest
from cardview.search import DEFAULT_SORT, SortOrder, sort_documents


def _paths(documents) -> list[str]:
    return [doc.path for doc in documents]


def test_default_sort_is_most_recently_modified_first(make_document) -> None:
    """Test modified-desc ordering."""
    docs = [
        make_document.create("old.md", mtime=1.0),
        make_document.create("new.md", mtime=3.0),
        make_document.create("mid.md", mtime=2.0),
    ]
    assert DEFAULT_SORT == SortOrder.MODIFIED_DESC
    assert _paths(sort_documents(docs)) == ["new.md", "mid.md", "old.md"]


def test_sort_by_name_is_case_insensitive(make_document) -> None:
    """Test name-asc and name-desc on basenames."""
    docs = [
        make_document.create("b/Zeta.md"),
        make_document.create("a/beta.md"),
        make_document.create("Alpha.md"),
    ]
    assert _paths(sort_documents(docs, SortOrder.NAME_ASC)) == [
        "Alpha.md",
        "a/beta.md",
        "b/Zeta.md",
    ]
    assert _paths(sort_documents(docs, SortOrder.NAME_DESC)) == [
        "b/Zeta.md",
        "a/beta.md",
        "Alpha.md",
    ]


def test_sort_by_created(make_document) -> None:
    """Test created-asc ordering uses ctime rather than mtime."""
    docs = [
        make_document.create("a.md", mtime=1.0, ctime=20.0),
        make_document.create("b.md", mtime=2.0, ctime=10.0),
    ]
    assert _paths(sort_documents(docs, SortOrder.CREATED_ASC)) == ["b.md", "a.md"]
    assert _paths(sort_documents(docs, SortOrder.CREATED_DESC)) == ["a.md", "b.md"]


def test_pinned_documents_come_first(make_document) -> None:
    """Test that pinned paths precede everything else, each group sorted."""
    docs = [
        make_document.create("a.md", mtime=4.0),
        make_document.create("pinned-old.md", mtime=1.0),
        make_document.create("b.md", mtime=3.0),
        make_document.create("pinned-new.md", mtime=2.0),
    ]
    result = sort_documents(docs, pinned=["pinned-old.md", "pinned-new.md"])
    assert _paths(result) == ["pinned-new.md", "pinned-old.md", "a.md", "b.md"]


def test_excalidraw_drawings_are_dropped(make_document) -> None:
    """Test that .excalidraw.md files never appear in the list."""
    docs = [
        make_document.create("drawing.excalidraw.md"),
        make_document.create("note.md"),
    ]
    assert _paths(sort_documents(docs)) == ["note.md"]


def test_sort_order_next_cycles() -> None:
    """Test that next() visits every order and wraps around."""
    order = SortOrder.NAME_ASC
    seen = []
    for _ in range(len(SortOrder)):
        seen.append(order)
        order = order.next()
    assert order == SortOrder.NAME_ASC
    assert set(seen) == set(SortOrder)


def test_sort_order_parse() -> None:
    """Test parsing sort orders from config and CLI values."""
    assert SortOrder.parse("Name-Asc") == SortOrder.NAME_ASC
    with pytest.raises(ValueError, match="Unknown sort order"):
        SortOrder.parse("size-desc")


def test_sort_order_label() -> None:
    """Test the short label shown in the TUI."""
    assert SortOrder.MODIFIED_DESC.label == "modified ↓"
    assert SortOrder.NAME_ASC.label == "name ↑"
