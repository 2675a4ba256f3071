"""Pytest configuration for cardview tests."""

from collections.abc import Callable

import pytest
from cardview.documents import Document, DocumentContents, DocumentReadError


@pytest.fixture
def make_document() -> "type[_DocumentFactory]":  # Return a callable factory class
    """Fixture that provides a factory for creating Document objects for testing."""
    return _DocumentFactory


class _DocumentFactory:
    """Factory class for creating Document objects in tests."""

    @staticmethod
    def create(
        path: str = "note.md",
        mtime: float = 1000.0,
        ctime: float | None = None,
        size: int = 0,
    ) -> Document:
        """Create a Document for testing."""
        return Document(
            path=path,
            mtime=mtime,
            ctime=mtime if ctime is None else ctime,
            size=size,
        )

    @staticmethod
    def many(count: int, prefix: str = "note") -> list[Document]:
        """Create documents note000.md, note001.md, ... with increasing mtimes."""
        return [
            Document(path=f"{prefix}{i:03d}.md", mtime=1000.0 + i, ctime=1000.0 + i)
            for i in range(count)
        ]


class _MemorySource:
    """DocumentSource backed by a dict of path -> DocumentContents."""

    def __init__(self) -> None:
        self.contents: dict[str, DocumentContents] = {}
        self.failing: set[str] = set()
        self.reads: list[str] = []
        self.on_read: Callable[[Document], None] | None = None

    def add(
        self,
        path: str,
        content: str = "",
        tags: frozenset[str] = frozenset(),
        frontmatter: dict | None = None,
    ) -> None:
        """Register the contents returned for a path."""
        self.contents[path] = DocumentContents(
            content=content, tags=tags, frontmatter=frontmatter or {}
        )

    async def read(self, document: Document) -> DocumentContents:
        self.reads.append(document.path)
        if self.on_read is not None:
            self.on_read(document)
        if document.path in self.failing:
            raise DocumentReadError(document.path, "permission denied")
        return self.contents.get(document.path, DocumentContents())


@pytest.fixture
def memory_source() -> _MemorySource:
    """Fixture that provides an in-memory DocumentSource."""
    return _MemorySource()
