"""Document list widget for the cardview TUI."""

from datetime import datetime
from typing import Any

from rich.text import Text
from textual.message import Message
from textual.widgets import OptionList
from textual.widgets.option_list import Option

from ...documents import Document


def _format_age(mtime: float, now: float) -> str:
    """Format a modification time as a short relative age (e.g. "3d")."""
    seconds = max(0, int(now - mtime))
    if seconds < 60:
        return f"{seconds}s"
    if seconds < 3600:
        return f"{seconds // 60}m"
    if seconds < 86400:
        return f"{seconds // 3600}h"
    return f"{seconds // 86400}d"


class DocumentList(OptionList):
    """Left panel listing the documents in the display window."""

    class SelectionChanged(Message):
        """Message sent when the highlighted document changes."""

        def __init__(self, index: int) -> None:
            self.index = index
            super().__init__()

    def __init__(self, **kwargs: Any) -> None:
        """Initialize the document list."""
        super().__init__(**kwargs)
        self._documents: tuple[Document, ...] = ()

    @property
    def documents(self) -> tuple[Document, ...]:
        return self._documents

    def update_documents(self, documents: tuple[Document, ...]) -> None:
        """Replace the listed documents, keeping the highlighted one if present.

        Args:
            documents: Documents to display, in order
        """
        if documents == self._documents:
            return

        highlighted_path: str | None = None
        if self.highlighted is not None and self.highlighted < len(self._documents):
            highlighted_path = self._documents[self.highlighted].path

        self._documents = documents
        now = datetime.now().timestamp()
        self.clear_options()
        self.add_options([self._format_document_option(doc, now) for doc in documents])

        if not documents:
            return
        new_idx = 0
        if highlighted_path is not None:
            for idx, doc in enumerate(documents):
                if doc.path == highlighted_path:
                    new_idx = idx
                    break
        self.highlighted = new_idx

    def _format_document_option(self, document: Document, now: float) -> Option:
        """Format a document as an option for display.

        Args:
            document: The document to format
            now: Current time, for the relative age column

        Returns:
            An Option for the OptionList
        """
        text = Text()
        text.append(f"{_format_age(document.mtime, now):>4} ", style="dim")
        text.append(document.basename, style="#00D7AF")
        parent = document.path.rpartition("/")[0]
        if parent:
            text.append(f"  {parent}/", style="#5FD7FF dim")
        return Option(text, id=document.path)

    def on_option_list_option_highlighted(
        self, event: OptionList.OptionHighlighted
    ) -> None:
        """Handle option highlight (keyboard navigation)."""
        if event.option_index is not None:
            self.post_message(self.SelectionChanged(event.option_index))
