"""Tests for converting query expressions back to query strings."""

import pytest
from cardview.query import (
    AndExpr,
    NotExpr,
    PhraseMatch,
    PropertyMatch,
    WordMatch,
    parse_query,
    to_canonical_string,
)


def test_canonical_normalizes_whitespace_and_or() -> None:
    """Test that spacing and the OR keyword are normalized."""
    assert to_canonical_string(parse_query("a   b or  c")) == "a b OR c"


def test_canonical_operators_are_lowercase() -> None:
    """Test that operator prefixes are written in lowercase."""
    assert to_canonical_string(parse_query("FILE:.jpg")) == "file:.jpg"


def test_canonical_tag_has_hash() -> None:
    """Test that tags are written with a leading #."""
    assert to_canonical_string(parse_query("tag:idea")) == "tag:#idea"


def test_canonical_negated_group() -> None:
    """Test negated disjunctions keep their parentheses."""
    assert to_canonical_string(parse_query("-(a OR b)")) == "-(a OR b)"


def test_canonical_property_filters() -> None:
    """Test property filters with and without values."""
    assert to_canonical_string(parse_query("[status]")) == "[status]"
    assert to_canonical_string(parse_query("[status:done or wip]")) == "[status:done OR wip]"
    assert to_canonical_string(parse_query('["due date"]')) == '["due date"]'


def test_canonical_quotes_ambiguous_words() -> None:
    """Test that words that would read back differently are quoted."""
    assert to_canonical_string(AndExpr((WordMatch("OR"),))) == '"OR"'
    assert to_canonical_string(AndExpr((WordMatch("-x"),))) == '"-x"'
    assert to_canonical_string(AndExpr((WordMatch("file:x"),))) == '"file:x"'
    assert to_canonical_string(AndExpr((WordMatch("status:done"),))) == "status:done"


def test_canonical_escapes_phrases() -> None:
    """Test that quotes and backslashes in phrases are escaped."""
    expr = AndExpr((PhraseMatch('say "hi" \\'),))
    assert to_canonical_string(expr) == r'"say \"hi\" \\"'


def test_canonical_double_negation() -> None:
    """Test that a double negation is written without extra parentheses."""
    assert to_canonical_string(NotExpr(NotExpr(WordMatch("a")))) == "--a"


def test_canonical_property_without_value() -> None:
    """Test a bare PropertyMatch."""
    assert to_canonical_string(PropertyMatch("status")) == "[status]"


@pytest.mark.parametrize(
    "query",
    [
        "lorem",
        "lorem ipsum",
        "lorem OR ipsum",
        "a b OR c d",
        "(a b) c",
        "a (b OR c)",
        "(a OR b) OR c",
        "-(a OR b) c",
        "--a",
        "-file:x",
        '"lorem ipsum" /lo+rem/',
        '"a \\"b\\""',
        "/a b/",
        "file:(a OR b)",
        "line:(lorem ipsum)",
        "match-case:Lorem ignore-case:ipsum",
        "content:-x",
        "tag:",
        "tag:#idea",
        'tag:"my idea"',
        "[status]",
        "[a b]",
        "[",
        '["my prop":"x y" z OR /r/]',
        "status:done path:notes/",
        "a ) b ]",
        "-",
    ],
)
def test_canonical_round_trip(query: str) -> None:
    """Test that parsing the canonical string yields the same expression."""
    expr = parse_query(query)
    assert parse_query(to_canonical_string(expr)) == expr
