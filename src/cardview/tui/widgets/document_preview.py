"""Preview widget for the highlighted document."""

from datetime import datetime
from typing import Any

from rich.text import Text
from textual.widgets import Static

from ...documents import Document


class DocumentPreview(Static):
    """Right panel showing the start of the highlighted note."""

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.document: Document | None = None

    def show_document(
        self, document: Document, preview: str, tags: frozenset[str] = frozenset()
    ) -> None:
        """Display a document's header, tags and preview text.

        Args:
            document: The document being previewed
            preview: Preview text (already truncated)
            tags: The document's tags, without "#"
        """
        self.document = document
        text = Text()
        text.append(document.basename, style="bold #00D7AF")
        text.append("\n")
        text.append(document.path, style="#5FD7FF dim")
        modified = datetime.fromtimestamp(document.mtime).strftime("%Y-%m-%d %H:%M")
        text.append(f"  modified {modified}", style="dim")
        if tags:
            text.append("\n")
            text.append(" ".join(f"#{tag}" for tag in sorted(tags)), style="#87D700")
        text.append("\n\n")
        text.append(preview if preview else "(empty note)", style="" if preview else "dim italic")
        self.update(text)

    def show_error(self, document: Document, message: str) -> None:
        """Display a read failure for a document."""
        self.document = document
        text = Text()
        text.append(document.path, style="bold")
        text.append("\n\n")
        text.append(message, style="#FF5F5F")
        self.update(text)

    def show_empty(self) -> None:
        """Display the placeholder shown when nothing matches."""
        self.document = None
        self.update(Text("No matching notes", style="dim italic"))
