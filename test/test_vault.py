"""Tests for the filesystem vault."""

import logging
from pathlib import Path

import pytest
from cardview.documents import DocumentReadError
from cardview.vault import (
    Vault,
    VaultError,
    frontmatter_tags,
    inline_tags,
    rank_tags,
    split_frontmatter,
)


def _write(root: Path, relative: str, content: str) -> Path:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


# --- Scanning ---


def test_scan_finds_markdown_and_skips_hidden_dirs(tmp_path: Path) -> None:
    """Test that scan lists notes recursively, ignoring dot-directories."""
    _write(tmp_path, "a.md", "a")
    _write(tmp_path, "sub/b.MD", "b")
    _write(tmp_path, "image.png", "")
    _write(tmp_path, ".obsidian/workspace.md", "")
    _write(tmp_path, ".trash/old.md", "")

    documents = Vault(tmp_path).scan()
    assert sorted(doc.path for doc in documents) == ["a.md", "sub/b.MD"]


def test_scan_records_stat_stamps(tmp_path: Path) -> None:
    """Test that documents carry the file's mtime and size."""
    path = _write(tmp_path, "a.md", "hello")
    (document,) = Vault(tmp_path).scan()
    assert document.mtime == path.stat().st_mtime
    assert document.size == 5
    assert document.name == "a.md"
    assert document.basename == "a"


def test_scan_custom_extensions(tmp_path: Path) -> None:
    """Test scanning with a different set of extensions."""
    _write(tmp_path, "a.md", "")
    _write(tmp_path, "b.txt", "")
    documents = Vault(tmp_path, extensions=[".txt"]).scan()
    assert [doc.path for doc in documents] == ["b.txt"]


def test_scan_missing_root_raises(tmp_path: Path) -> None:
    """Test that a missing root is reported as a VaultError."""
    with pytest.raises(VaultError):
        Vault(tmp_path / "missing").scan()


# --- Reading ---


async def test_read_parses_frontmatter_and_tags(tmp_path: Path) -> None:
    """Test that read returns content, frontmatter and all tags."""
    _write(
        tmp_path,
        "a.md",
        "---\ntitle: Ideas\ntags: [idea, '#project']\n---\nBody with #inline tag.\n",
    )
    vault = Vault(tmp_path)
    (document,) = vault.scan()

    contents = await vault.read(document)
    assert contents.content.startswith("---\ntitle: Ideas")
    assert contents.frontmatter == {"title": "Ideas", "tags": ["idea", "#project"]}
    assert contents.tags == frozenset({"idea", "project", "inline"})


async def test_read_missing_file_raises(tmp_path: Path, make_document) -> None:
    """Test that an unreadable document raises DocumentReadError."""
    vault = Vault(tmp_path)
    with pytest.raises(DocumentReadError):
        await vault.read(make_document.create("gone.md"))


async def test_read_non_utf8_raises(tmp_path: Path) -> None:
    """Test that undecodable files raise DocumentReadError."""
    (tmp_path / "bad.md").write_bytes(b"\xff\xfe\xfa")
    vault = Vault(tmp_path)
    (document,) = vault.scan()
    with pytest.raises(DocumentReadError):
        await vault.read(document)


# --- Frontmatter and tags ---


def test_split_frontmatter_without_block() -> None:
    """Test that notes without frontmatter are returned unchanged."""
    assert split_frontmatter("# Title\n") == ({}, "# Title\n")


def test_split_frontmatter_invalid_yaml(caplog: pytest.LogCaptureFixture) -> None:
    """Test that invalid YAML yields no properties but still strips the block."""
    with caplog.at_level(logging.DEBUG, logger="cardview.vault"):
        frontmatter, body = split_frontmatter("---\nkey: [unclosed\n---\nbody\n")
    assert frontmatter == {}
    assert body == "body\n"
    assert "invalid frontmatter" in caplog.text


def test_split_frontmatter_non_mapping() -> None:
    """Test that a YAML list is not treated as properties."""
    assert split_frontmatter("---\n- a\n- b\n---\nbody")[0] == {}


def test_frontmatter_tags_string_forms() -> None:
    """Test comma- and space-separated tag strings."""
    assert frontmatter_tags({"tags": "a, b c"}) == {"a", "b", "c"}
    assert frontmatter_tags({"tag": "#solo"}) == {"solo"}
    assert frontmatter_tags({"tags": None}) == set()


def test_inline_tags_ignore_code_and_headings() -> None:
    """Test inline tag extraction."""
    body = (
        "# Heading\n"
        "Text #one and#not (#two)\n"
        "```\n"
        "#inside code\n"
        "```\n"
        "Issue #123 and #nested/tag\n"
    )
    assert inline_tags(body) == {"one", "two", "nested/tag"}


def test_rank_tags_by_frequency_then_name() -> None:
    """Test tag ranking."""
    ranked = rank_tags([{"b", "a"}, {"a"}, {"c", "b"}, {"a"}])
    assert ranked == [("a", 3), ("b", 2), ("c", 1)]
