"""Widgets for the cardview TUI."""

from .document_list import DocumentList
from .document_preview import DocumentPreview
from .search_info_panel import SearchInfoPanel

__all__ = [
    "DocumentList",
    "DocumentPreview",
    "SearchInfoPanel",
]
