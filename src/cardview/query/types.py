"""AST types for the query language."""

from __future__ import annotations

import re
from dataclasses import dataclass

# Operator names recognized before a ":" (lowercase)
OPERATOR_NAMES = frozenset(
    {"file", "path", "content", "tag", "line", "match-case", "ignore-case"}
)


@dataclass(frozen=True)
class WordMatch:
    """A bare word, matched as a substring of the content or document name.

    Attributes:
        text: The word to look for.
    """

    text: str


@dataclass(frozen=True)
class PhraseMatch:
    """A quoted phrase, matched as an exact substring.

    Attributes:
        text: The interior of the quotes, taken literally.
    """

    text: str


@dataclass(frozen=True)
class RegexMatch:
    """A /regex/ term.

    Attributes:
        pattern: The regular expression between the slashes.
    """

    pattern: str


@dataclass(frozen=True)
class FileMatch:
    """file: operator - restricts matching to the document name."""

    operand: QueryExpr


@dataclass(frozen=True)
class PathMatch:
    """path: operator - restricts matching to the full document path."""

    operand: QueryExpr


@dataclass(frozen=True)
class ContentMatch:
    """content: operator - restricts matching to the document content."""

    operand: QueryExpr


@dataclass(frozen=True)
class MatchCase:
    """match-case: operator - forces case-sensitive comparison."""

    operand: QueryExpr


@dataclass(frozen=True)
class IgnoreCase:
    """ignore-case: operator - forces case-insensitive comparison."""

    operand: QueryExpr


@dataclass(frozen=True)
class TagMatch:
    """tag: operator.

    Attributes:
        name: The tag name without its leading "#".
    """

    name: str


@dataclass(frozen=True)
class LineMatch:
    """line: operator - the operand must match within a single line."""

    operand: QueryExpr


@dataclass(frozen=True)
class PropertyMatch:
    """[name] / [name:value] frontmatter filter.

    Attributes:
        name: Substring looked up in frontmatter keys.
        value: Expression evaluated against the value of each matching key,
            or None to only require the key to be present.
    """

    name: str
    value: QueryExpr | None = None


@dataclass(frozen=True)
class NotExpr:
    """Negation expression.

    Attributes:
        operand: The expression to negate.
    """

    operand: QueryExpr


@dataclass(frozen=True)
class AndExpr:
    """AND expression (conjunction). Empty means "match everything".

    Attributes:
        operands: Expressions that must all match.
    """

    operands: tuple[QueryExpr, ...] = ()


@dataclass(frozen=True)
class OrExpr:
    """OR expression (disjunction).

    Attributes:
        operands: Expressions where at least one must match.
    """

    operands: tuple[QueryExpr, ...] = ()


# Union of all expression types
QueryExpr = (
    WordMatch
    | PhraseMatch
    | RegexMatch
    | FileMatch
    | PathMatch
    | ContentMatch
    | MatchCase
    | IgnoreCase
    | TagMatch
    | LineMatch
    | PropertyMatch
    | NotExpr
    | AndExpr
    | OrExpr
)

# Operator node class -> operator name (tag: is rendered separately)
_OPERATOR_PREFIXES: dict[type, str] = {
    FileMatch: "file",
    PathMatch: "path",
    ContentMatch: "content",
    MatchCase: "match-case",
    IgnoreCase: "ignore-case",
    LineMatch: "line",
}

# Words that read back as the same word outside of brackets
_BARE_WORD_RE = re.compile(r'[^\s()\[\]"]+')
# Property names and values that read back unquoted inside brackets
_BARE_NAME_RE = re.compile(r'[^\s:\]"]+')
_BARE_VALUE_RE = re.compile(r'[^\s\]"]+')


def _quote(value: str) -> str:
    """Wrap a value in double quotes, escaping backslashes and quotes."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _word_string(text: str) -> str:
    """Render a word, quoting it if it would be read back differently."""
    if (
        not _BARE_WORD_RE.fullmatch(text)
        or text.upper() == "OR"
        or text[0] in "-/"
        or (":" in text and text.partition(":")[0].lower() in OPERATOR_NAMES)
    ):
        return _quote(text)
    return text


def _value_string(expr: QueryExpr) -> str:
    """Render a property value expression."""
    if isinstance(expr, OrExpr):
        return " OR ".join(_value_string(op) for op in expr.operands)
    if isinstance(expr, AndExpr):
        return " ".join(_value_string(op) for op in expr.operands)
    if isinstance(expr, WordMatch):
        text = expr.text
        if _BARE_VALUE_RE.fullmatch(text) and text.upper() != "OR" and text[0] != "/":
            return text
        return _quote(text)
    return to_canonical_string(expr)


def _operand_string(expr: QueryExpr) -> str:
    """Render the argument of a field operator."""
    if isinstance(expr, (AndExpr, OrExpr, NotExpr)):
        return f"({to_canonical_string(expr)})"
    return to_canonical_string(expr)


def to_canonical_string(expr: QueryExpr) -> str:
    """Convert a query expression to its canonical string representation.

    This produces a normalized form with:
    - Uppercase OR keywords
    - Single spaces between conjoined terms
    - Parentheses around nested conjunctions and disjunctions

    For any expression returned by ``parse_query``, parsing the canonical
    string yields an equal expression.

    Args:
        expr: The query expression to convert.

    Returns:
        The canonical string representation.

    Examples:
        >>> to_canonical_string(AndExpr((WordMatch("a"), PhraseMatch("b c"))))
        'a "b c"'
        >>> to_canonical_string(NotExpr(OrExpr((WordMatch("a"), WordMatch("b")))))
        '-((a) OR (b))'
    """
    if isinstance(expr, WordMatch):
        return _word_string(expr.text)

    if isinstance(expr, PhraseMatch):
        return _quote(expr.text)

    if isinstance(expr, RegexMatch):
        return f"/{expr.pattern}/"

    if isinstance(expr, TagMatch):
        return f"tag:{_word_string('#' + expr.name)}"

    if isinstance(expr, PropertyMatch):
        name = expr.name
        if name and not _BARE_NAME_RE.fullmatch(name):
            name = _quote(name)
        if expr.value is None:
            return f"[{name}]"
        return f"[{name}:{_value_string(expr.value)}]"

    prefix = _OPERATOR_PREFIXES.get(type(expr))
    if prefix is not None:
        return f"{prefix}:{_operand_string(expr.operand)}"  # type: ignore[union-attr]

    if isinstance(expr, NotExpr):
        if isinstance(expr.operand, NotExpr):
            return f"-{to_canonical_string(expr.operand)}"
        return f"-{_operand_string(expr.operand)}"

    if isinstance(expr, AndExpr):
        parts = []
        for op in expr.operands:
            # Wrap nested AND/OR expressions in parens to preserve structure
            if isinstance(op, (AndExpr, OrExpr)):
                parts.append(f"({to_canonical_string(op)})")
            else:
                parts.append(to_canonical_string(op))
        return " ".join(parts)

    if isinstance(expr, OrExpr):
        parts = []
        for op in expr.operands:
            # Conjunctions are the natural operands of OR; anything else is grouped
            if isinstance(op, AndExpr) and op.operands:
                parts.append(to_canonical_string(op))
            else:
                parts.append(f"({to_canonical_string(op)})")
        return " OR ".join(parts)

    # Should never reach here with proper typing
    raise TypeError(f"Unknown expression type: {type(expr)}")
