"""Query language for filtering notes.

Query Language Examples:
    lorem                      - Case-insensitive match in content or file name
    "lorem ipsum"              - Exact phrase
    /lo+rem/                   - Regular expression
    -draft                     - NOT containing "draft"
    lorem ipsum                - Contains both (implicit AND)
    lorem OR ipsum             - Contains either
    -(a OR b) c                - Grouped expression

Field Operators:
    file:.jpg                  - Match against the file name only
    path:projects/             - Match against the full path only
    content:lorem              - Match against the content only
    tag:idea, tag:#idea        - Note has the tag
    match-case:Lorem           - Case-sensitive match
    ignore-case:Lorem          - Case-insensitive match
    line:(lorem ipsum)         - Both words on the same line

Property Filters:
    [status]                   - Frontmatter has a key containing "status"
    [status:done]              - ... whose value contains "done"
    [status:done OR wip]       - ... whose value contains "done" or "wip"

Precedence (tightest to loosest):
    1. - (NOT)
    2. AND (implicit via juxtaposition)
    3. OR
    Parentheses override precedence.
"""

from .compiler import (
    EvaluationContext,
    Predicate,
    build_predicate,
    compile_query,
    evaluate_query,
)
from .parser import is_blank_query, parse_query
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
    to_canonical_string,
)

__all__ = [
    # Parser
    "parse_query",
    "is_blank_query",
    # Compiler
    "compile_query",
    "build_predicate",
    "evaluate_query",
    "EvaluationContext",
    "Predicate",
    # Types
    "QueryExpr",
    "AndExpr",
    "OrExpr",
    "NotExpr",
    "WordMatch",
    "PhraseMatch",
    "RegexMatch",
    "FileMatch",
    "PathMatch",
    "ContentMatch",
    "MatchCase",
    "IgnoreCase",
    "TagMatch",
    "LineMatch",
    "PropertyMatch",
    # Utilities
    "to_canonical_string",
]
