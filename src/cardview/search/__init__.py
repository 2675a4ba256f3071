"""Incremental search over a document collection.

The pieces, in pipeline order:
    sort_documents     - Orders the document list (pinned paths first)
    SearchExecutor     - Evaluates a predicate across the list in batches
    ResultCache        - Memoizes outcomes per (path, mtime)
    DisplayWindow      - Derives the page-sized displayed list
    SearchSession      - Wires all of the above together
"""

from .cache import ResultCache
from .executor import SearchExecutor, SearchState
from .session import SearchSession, SessionView
from .sorting import DEFAULT_SORT, SortOrder, sort_documents
from .window import DisplayWindow

__all__ = [
    # Pipeline
    "SearchSession",
    "SessionView",
    # Executor
    "SearchExecutor",
    "SearchState",
    "ResultCache",
    # Window
    "DisplayWindow",
    # Sorting
    "SortOrder",
    "DEFAULT_SORT",
    "sort_documents",
]
