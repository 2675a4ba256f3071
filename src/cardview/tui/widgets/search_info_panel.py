"""Search info panel showing match counts and evaluation progress."""

from typing import Any

from rich.text import Text
from textual.widgets import Static

from ...search import SessionView, SortOrder


class SearchInfoPanel(Static):
    """Panel showing how many notes are shown and matched so far."""

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._shown: int = 0
        self._matched: int = 0
        self._total: int = 0
        self._progress: float = 1.0
        self._sort: SortOrder | None = None
        self._case_sensitive: bool = False

    def update_view(self, view: SessionView) -> None:
        """Update the counts and progress from a session view."""
        self._shown = len(view.displayed)
        self._matched = view.matched_so_far
        self._total = view.total
        self._progress = view.progress
        self._refresh_content()

    def update_options(self, sort: SortOrder, case_sensitive: bool) -> None:
        """Update the sort order and case flag shown in the panel."""
        self._sort = sort
        self._case_sensitive = case_sensitive
        self._refresh_content()

    def render_text(self) -> Text:
        """Build the panel content."""
        text = Text()
        text.append(f"{self._shown}", style="bold #00D7AF")
        text.append(" shown / ", style="dim")
        text.append(f"{self._matched}", style="bold #00D7AF")
        text.append(" matched", style="dim")
        text.append(f" of {self._total}", style="dim")

        if self._progress < 1.0:
            text.append(f"   searching {int(self._progress * 100)}%", style="#FFAF00")

        if self._sort is not None:
            text.append("   sort: ", style="dim")
            text.append(self._sort.label, style="#87AFFF")
        text.append("   ")
        text.append(
            "Aa" if self._case_sensitive else "aa",
            style="bold #FF5F5F" if self._case_sensitive else "dim",
        )
        return text

    def _refresh_content(self) -> None:
        """Refresh the panel content."""
        self.update(self.render_text())
