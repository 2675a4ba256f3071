"""A directory of markdown notes on the local filesystem."""

import asyncio
import logging
import os
import re
from collections import Counter
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]

from .constants import DEFAULT_EXTENSIONS
from .documents import Document, DocumentContents, DocumentReadError

logger = logging.getLogger(__name__)

_INLINE_TAG = re.compile(r"(?<![^\s(\[,])#([\w/-]+)")
_TAG_SEPARATORS = re.compile(r"[,\s]+")
_FENCE = re.compile(r"^\s*(```|~~~)")


class VaultError(Exception):
    """Raised when the vault root cannot be scanned."""


def split_frontmatter(content: str) -> tuple[dict[str, Any], str]:
    """Split a note into its parsed frontmatter and its body.

    Invalid YAML, or frontmatter that is not a mapping, yields an empty dict;
    the block is still removed from the body.

    Returns:
        Tuple of (frontmatter, body)
    """
    if not content.startswith("---"):
        return {}, content
    first_newline = content.find("\n")
    if first_newline == -1 or content[:first_newline].strip() != "---":
        return {}, content
    end = content.find("\n---", first_newline)
    if end == -1:
        return {}, content

    block = content[first_newline + 1 : end]
    body_start = content.find("\n", end + 4)
    body = "" if body_start == -1 else content[body_start + 1 :]

    try:
        data = yaml.safe_load(block)
    except yaml.YAMLError as e:
        logger.debug("Ignoring invalid frontmatter: %s", e)
        return {}, body
    if data is None:
        return {}, body
    if not isinstance(data, dict):
        logger.debug("Ignoring frontmatter that is not a mapping")
        return {}, body
    return {str(key): value for key, value in data.items()}, body


def _normalize_tag(tag: str) -> str:
    return tag.strip().lstrip("#")


def frontmatter_tags(frontmatter: Mapping[str, Any]) -> set[str]:
    """Collect tags from the "tags" and "tag" frontmatter properties."""
    tags: set[str] = set()
    for key in ("tags", "tag"):
        value = frontmatter.get(key)
        if value is None:
            continue
        if isinstance(value, str):
            items: Iterable[Any] = _TAG_SEPARATORS.split(value)
        elif isinstance(value, (list, tuple)):
            items = value
        else:
            items = [value]
        for item in items:
            if item is None:
                continue
            tag = _normalize_tag(str(item))
            if tag:
                tags.add(tag)
    return tags


def inline_tags(body: str) -> set[str]:
    """Collect "#tag" tokens from a note body, ignoring fenced code blocks."""
    tags: set[str] = set()
    in_fence = False
    for line in body.splitlines():
        if _FENCE.match(line):
            in_fence = not in_fence
            continue
        if in_fence:
            continue
        for match in _INLINE_TAG.finditer(line):
            tag = match.group(1).rstrip("/")
            # Obsidian does not treat purely numeric tokens like "#123" as tags
            if tag and not tag.isdigit():
                tags.add(tag)
    return tags


def rank_tags(tag_sets: Iterable[Iterable[str]]) -> list[tuple[str, int]]:
    """Count tags across documents.

    Returns:
        (tag, count) pairs by descending count, ties broken by tag name.
    """
    counts: Counter[str] = Counter()
    for tags in tag_sets:
        counts.update(set(tags))
    return sorted(counts.items(), key=lambda item: (-item[1], item[0]))


class Vault:
    """A DocumentSource backed by a directory tree."""

    def __init__(self, root: str | Path, extensions: Iterable[str] = DEFAULT_EXTENSIONS) -> None:
        self.root = Path(root).expanduser()
        self.extensions = tuple(ext.lower() for ext in extensions)

    def scan(self) -> list[Document]:
        """List every note under the root, skipping hidden directories.

        Raises:
            VaultError: If the root is not a readable directory.
        """
        if not self.root.is_dir():
            raise VaultError(f"Not a directory: {self.root}")

        documents: list[Document] = []
        for dirpath, dirnames, filenames in os.walk(self.root):
            dirnames[:] = sorted(d for d in dirnames if not d.startswith("."))
            for filename in sorted(filenames):
                if not filename.lower().endswith(self.extensions):
                    continue
                full_path = Path(dirpath) / filename
                try:
                    stat = full_path.stat()
                except OSError as e:
                    logger.debug("Skipping %s: %s", full_path, e)
                    continue
                documents.append(
                    Document(
                        path=full_path.relative_to(self.root).as_posix(),
                        mtime=stat.st_mtime,
                        ctime=getattr(stat, "st_birthtime", stat.st_ctime),
                        size=stat.st_size,
                    )
                )

        logger.debug("Scanned %d documents under %s", len(documents), self.root)
        return documents

    def read_sync(self, document: Document) -> DocumentContents:
        """Read and parse a document on the calling thread.

        Raises:
            DocumentReadError: If the file is missing or not valid UTF-8.
        """
        try:
            content = (self.root / document.path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise DocumentReadError(document.path, str(e)) from e

        frontmatter, body = split_frontmatter(content)
        tags = frontmatter_tags(frontmatter) | inline_tags(body)
        return DocumentContents(
            content=content,
            tags=frozenset(tags),
            frontmatter=frontmatter,
        )

    async def read(self, document: Document) -> DocumentContents:
        """Read and parse a document without blocking the event loop."""
        return await asyncio.to_thread(self.read_sync, document)
