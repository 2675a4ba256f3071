"""Compile query expressions into predicates over documents."""

import logging
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, replace
from typing import Any

from ..documents import Document
from .parser import parse_query
from .types import (
    AndExpr,
    ContentMatch,
    FileMatch,
    IgnoreCase,
    LineMatch,
    MatchCase,
    NotExpr,
    OrExpr,
    PathMatch,
    PhraseMatch,
    PropertyMatch,
    QueryExpr,
    RegexMatch,
    TagMatch,
    WordMatch,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EvaluationContext:
    """Everything a predicate may look at for one document.

    Any of the document, content, tags or frontmatter may be missing; leaves
    that need a missing piece simply do not match.

    Attributes:
        document: The document being evaluated (its name is searched by
            plain terms).
        content: The text searched by plain terms.
        tags: The document's tags without the leading "#".
        frontmatter: The document's frontmatter properties.
        case_sensitive: Whether text comparisons respect case.
        ignore_case_scope: True inside an ignore-case: operator, where regex
            terms are matched case-insensitively too.
    """

    document: Document | None = None
    content: str | None = None
    tags: frozenset[str] | None = None
    frontmatter: Mapping[str, Any] | None = None
    case_sensitive: bool = False
    ignore_case_scope: bool = False


Predicate = Callable[[EvaluationContext], bool]


def _always_true(ctx: EvaluationContext) -> bool:
    return True


def _always_false(ctx: EvaluationContext) -> bool:
    return False


def _contains(haystack: str, needle: str, case_sensitive: bool) -> bool:
    if case_sensitive:
        return needle in haystack
    return needle.lower() in haystack.lower()


def _compile_text(text: str) -> Predicate:
    """Word and phrase terms: substring of the content or the document name."""

    def predicate(ctx: EvaluationContext) -> bool:
        if ctx.content and _contains(ctx.content, text, ctx.case_sensitive):
            return True
        return bool(
            ctx.document is not None
            and ctx.document.name
            and _contains(ctx.document.name, text, ctx.case_sensitive)
        )

    return predicate


def _compile_regex(pattern: str) -> Predicate:
    """Regex terms: unanchored search in the content or the document name.

    Patterns keep their own case rules except inside ignore-case:.
    """
    try:
        exact = re.compile(pattern)
        folded = re.compile(pattern, re.IGNORECASE)
    except re.error as e:
        logger.warning("Ignoring invalid regex /%s/: %s", pattern, e)
        return _always_false

    def predicate(ctx: EvaluationContext) -> bool:
        regex = folded if ctx.ignore_case_scope else exact
        if ctx.content and regex.search(ctx.content):
            return True
        return bool(
            ctx.document is not None
            and ctx.document.name
            and regex.search(ctx.document.name)
        )

    return predicate


def _compile_surface(operand: Predicate, surface: Callable[[Document], str]) -> Predicate:
    """Evaluate the operand against a single attribute of the document."""

    def predicate(ctx: EvaluationContext) -> bool:
        if ctx.document is None:
            return False
        text = surface(ctx.document)
        if not text:
            return False
        return operand(replace(ctx, document=None, content=text))

    return predicate


def _compile_content(operand: Predicate) -> Predicate:
    def predicate(ctx: EvaluationContext) -> bool:
        if not ctx.content:
            return False
        return operand(replace(ctx, document=None))

    return predicate


def _compile_case(operand: Predicate, case_sensitive: bool) -> Predicate:
    def predicate(ctx: EvaluationContext) -> bool:
        return operand(
            replace(
                ctx,
                case_sensitive=case_sensitive,
                ignore_case_scope=not case_sensitive,
            )
        )

    return predicate


def _compile_tag(name: str) -> Predicate:
    lowered = name.lower()

    def predicate(ctx: EvaluationContext) -> bool:
        if not ctx.tags:
            return False
        if ctx.case_sensitive:
            return name in ctx.tags
        return any(tag.lower() == lowered for tag in ctx.tags)

    return predicate


def _compile_line(operand: Predicate) -> Predicate:
    def predicate(ctx: EvaluationContext) -> bool:
        if not ctx.content:
            return False
        return any(
            operand(replace(ctx, document=None, content=line))
            for line in ctx.content.splitlines()
        )

    return predicate


def _property_value_texts(value: Any) -> list[str]:
    """Flatten a frontmatter value into the strings a value filter sees."""
    if isinstance(value, (list, tuple)):
        texts: list[str] = []
        for item in value:
            texts.extend(_property_value_texts(item))
        return texts
    if value is None:
        return [""]
    if isinstance(value, bool):
        return ["true" if value else "false"]
    return [str(value)]


def _compile_property(name: str, value: Predicate | None) -> Predicate:
    lowered = name.lower()

    def predicate(ctx: EvaluationContext) -> bool:
        if not ctx.frontmatter:
            return False

        if ctx.case_sensitive:
            keys = [k for k in ctx.frontmatter if name in str(k)]
        else:
            keys = [k for k in ctx.frontmatter if lowered in str(k).lower()]

        if not keys:
            return False
        if value is None:
            return True

        for key in keys:
            for text in _property_value_texts(ctx.frontmatter[key]):
                value_ctx = EvaluationContext(
                    content=text,
                    case_sensitive=ctx.case_sensitive,
                    ignore_case_scope=ctx.ignore_case_scope,
                )
                if value(value_ctx):
                    return True
        return False

    return predicate


def compile_query(expr: QueryExpr) -> Predicate:
    """Compile a query expression into a predicate.

    Compilation walks the tree once; the returned predicate is pure and may be
    called concurrently for different documents.

    Args:
        expr: The parsed query expression.

    Returns:
        A function from an EvaluationContext to whether it matches.

    Raises:
        TypeError: If the expression type is unknown.
    """
    if isinstance(expr, AndExpr):
        operands = [compile_query(op) for op in expr.operands]
        if not operands:
            return _always_true
        return lambda ctx: all(op(ctx) for op in operands)

    if isinstance(expr, OrExpr):
        operands = [compile_query(op) for op in expr.operands]
        if not operands:
            return _always_true
        return lambda ctx: any(op(ctx) for op in operands)

    if isinstance(expr, NotExpr):
        operand = compile_query(expr.operand)
        return lambda ctx: not operand(ctx)

    if isinstance(expr, (WordMatch, PhraseMatch)):
        return _compile_text(expr.text)

    if isinstance(expr, RegexMatch):
        return _compile_regex(expr.pattern)

    if isinstance(expr, FileMatch):
        return _compile_surface(compile_query(expr.operand), lambda doc: doc.name)

    if isinstance(expr, PathMatch):
        return _compile_surface(compile_query(expr.operand), lambda doc: doc.path)

    if isinstance(expr, ContentMatch):
        return _compile_content(compile_query(expr.operand))

    if isinstance(expr, MatchCase):
        return _compile_case(compile_query(expr.operand), case_sensitive=True)

    if isinstance(expr, IgnoreCase):
        return _compile_case(compile_query(expr.operand), case_sensitive=False)

    if isinstance(expr, TagMatch):
        return _compile_tag(expr.name)

    if isinstance(expr, LineMatch):
        return _compile_line(compile_query(expr.operand))

    if isinstance(expr, PropertyMatch):
        value = compile_query(expr.value) if expr.value is not None else None
        return _compile_property(expr.name, value)

    raise TypeError(f"Unknown expression type: {type(expr)}")


def build_predicate(query: str) -> Predicate | None:
    """Parse and compile a query string.

    Args:
        query: The raw query text.

    Returns:
        The compiled predicate, or None if the query filters nothing (so
        every document matches without being read).
    """
    expr = parse_query(query)
    if expr == AndExpr(()):
        return None
    return compile_query(expr)


def evaluate_query(expr: QueryExpr, ctx: EvaluationContext) -> bool:
    """Evaluate a query expression against a single evaluation context.

    Examples:
        >>> evaluate_query(parse_query("lorem"), EvaluationContext(content="Lorem"))
        True
    """
    return compile_query(expr)(ctx)
