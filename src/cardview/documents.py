"""Document handles and the interface used to read their contents."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import Any, Protocol


@dataclass(frozen=True)
class Document:
    """A handle to a note managed by the host.

    A document is a value: saving a note produces a new Document with a newer
    mtime, so stale handles never compare equal to fresh ones.

    Attributes:
        path: Unique, vault-relative path using "/" separators.
        mtime: Modification stamp (seconds since the epoch).
        ctime: Creation stamp (seconds since the epoch).
        size: Size in bytes.
    """

    path: str
    mtime: float = 0.0
    ctime: float = 0.0
    size: int = 0

    @property
    def name(self) -> str:
        """File name including extension (e.g. "ideas.md")."""
        return PurePosixPath(self.path).name

    @property
    def basename(self) -> str:
        """File name without its extension (e.g. "ideas")."""
        return PurePosixPath(self.path).stem

    @property
    def cache_key(self) -> tuple[str, float]:
        """Key identifying this version of the document."""
        return (self.path, self.mtime)


@dataclass(frozen=True)
class DocumentContents:
    """What a predicate needs to know about a document beyond its handle.

    Attributes:
        content: Full text of the note.
        tags: Tags without their leading "#".
        frontmatter: Parsed frontmatter properties.
    """

    content: str = ""
    tags: frozenset[str] = frozenset()
    frontmatter: Mapping[str, Any] = field(default_factory=dict)


class DocumentReadError(Exception):
    """Raised when a document's contents cannot be read."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot read {path}: {reason}")


class DocumentSource(Protocol):
    """Host interface for reading document contents."""

    async def read(self, document: Document) -> DocumentContents:
        """Return the content, tags and frontmatter of a document.

        Raises:
            DocumentReadError: If the document cannot be read.
        """
        ...
