"""Main Textual App for the cardview TUI."""

import logging

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.timer import Timer
from textual.widgets import Footer, Header, Input

from ..config import CardViewConfig
from ..documents import Document, DocumentReadError
from ..preview import extract_preview
from ..search import DisplayWindow, SearchSession, SessionView
from ..vault import Vault, VaultError
from .widgets import DocumentList, DocumentPreview, SearchInfoPanel

logger = logging.getLogger(__name__)


class CardViewApp(App[None]):
    """TUI application for browsing and filtering notes."""

    TITLE = "cardview"
    CSS_PATH = "styles.tcss"

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("s", "cycle_sort", "Sort"),
        Binding("c", "toggle_case", "Case"),
        Binding("y", "refresh", "Refresh"),
        Binding("slash", "focus_search", "Search", key_display="/"),
        Binding("escape", "focus_list", "List", show=False),
    ]

    def __init__(
        self,
        vault: Vault,
        config: CardViewConfig | None = None,
        query: str = "",
    ) -> None:
        """Initialize the cardview TUI app.

        Args:
            vault: The notes directory to browse
            config: User settings (defaults when None)
            query: Initial query string
        """
        super().__init__()
        self.vault = vault
        self.config = config if config is not None else CardViewConfig()
        self.session = SearchSession(vault, self.config)
        self.initial_query = query
        self.refresh_interval = self.config.refresh_interval
        self._refresh_timer: Timer | None = None
        self._scanned: frozenset[Document] = frozenset()
        self._preview_target: Document | None = None

    def compose(self) -> ComposeResult:
        """Compose the app layout."""
        yield Header()
        yield Input(
            value=self.initial_query,
            placeholder="Search notes (e.g. lorem -draft tag:idea)",
            id="search-input",
        )
        with Horizontal(id="main-container"):
            with Vertical(id="list-container"):
                yield SearchInfoPanel(id="info-panel")
                yield DocumentList(id="list-panel")
            yield DocumentPreview(id="preview-panel")
        yield Footer()

    def on_mount(self) -> None:
        """Set up the app on mount."""
        self.session.subscribe(self._on_view)
        self._update_options()
        self.session.set_query(self.initial_query)
        self._rescan(force=True)
        self.query_one("#list-panel", DocumentList).focus()

        if self.refresh_interval > 0:
            self._refresh_timer = self.set_interval(
                self.refresh_interval, self._on_auto_refresh, name="auto-refresh"
            )

    # --- Search ---

    def _start_search(self, generation: int) -> None:
        """Evaluate a generation in the background, replacing any running pass."""
        self.run_worker(
            self.session.evaluate(generation),
            name=f"search-{generation}",
            group="search",
            exclusive=True,
        )

    def on_input_changed(self, event: Input.Changed) -> None:
        """Re-run the search as the query is typed."""
        if event.input.id != "search-input":
            return
        if event.value == self.session.query:
            return
        self._start_search(self.session.set_query(event.value))

    def on_input_submitted(self, event: Input.Submitted) -> None:
        """Move focus to the results when Enter is pressed."""
        if event.input.id == "search-input":
            self.action_focus_list()

    def _rescan(self, force: bool = False) -> bool:
        """Rescan the vault and restart the search if the listing changed.

        Returns:
            True if the document list was replaced.
        """
        try:
            documents = self.vault.scan()
        except VaultError as e:
            self.notify(f"Error scanning vault: {e}", severity="error")
            return False

        scanned = frozenset(documents)
        if not force and scanned == self._scanned:
            return False
        self._scanned = scanned
        logger.debug("Vault listing changed: %d documents", len(documents))
        self._start_search(self.session.set_documents(documents))
        return True

    def _on_auto_refresh(self) -> None:
        """Auto-refresh handler called by timer."""
        self._rescan()

    # --- Display ---

    def _on_view(self, view: SessionView) -> None:
        """Push a new session view into the widgets."""
        list_widget = self.query_one("#list-panel", DocumentList)
        info_panel = self.query_one("#info-panel", SearchInfoPanel)

        list_widget.update_documents(view.displayed)
        info_panel.update_view(view)
        self._sync_preview()

    def _update_options(self) -> None:
        info_panel = self.query_one("#info-panel", SearchInfoPanel)
        info_panel.update_options(self.session.sort, self.session.case_sensitive)

    def _highlighted_document(self) -> Document | None:
        list_widget = self.query_one("#list-panel", DocumentList)
        idx = list_widget.highlighted
        if idx is None or idx >= len(list_widget.documents):
            return None
        return list_widget.documents[idx]

    def _sync_preview(self) -> None:
        """Show the highlighted document in the preview panel."""
        preview_panel = self.query_one("#preview-panel", DocumentPreview)
        document = self._highlighted_document()
        if document is None:
            self._preview_target = None
            preview_panel.show_empty()
            return
        if document in (preview_panel.document, self._preview_target):
            return
        self._preview_target = document
        self.run_worker(
            self._load_preview(document),
            name="preview",
            group="preview",
            exclusive=True,
        )

    async def _load_preview(self, document: Document) -> None:
        preview_panel = self.query_one("#preview-panel", DocumentPreview)
        try:
            contents = await self.vault.read(document)
        except DocumentReadError as e:
            preview_panel.show_error(document, str(e))
            return
        preview_panel.show_document(
            document, extract_preview(contents.content), contents.tags
        )

    def on_document_list_selection_changed(
        self, event: DocumentList.SelectionChanged
    ) -> None:
        """Update the preview and page in more documents near the end."""
        total = len(self.session.displayed)
        window_full = total >= self.session.window.count
        if window_full and DisplayWindow.should_load_more(
            event.index, total, self.config.load_more_threshold
        ):
            self.session.load_more()
        self._sync_preview()

    # --- Actions ---

    def action_focus_search(self) -> None:
        """Focus the search input."""
        self.query_one("#search-input", Input).focus()

    def action_focus_list(self) -> None:
        """Focus the document list."""
        self.query_one("#list-panel", DocumentList).focus()

    def action_cycle_sort(self) -> None:
        """Switch to the next sort order."""
        self._start_search(self.session.set_sort(self.session.sort.next()))
        self._update_options()

    def action_toggle_case(self) -> None:
        """Toggle case-sensitive matching of plain terms."""
        self._start_search(
            self.session.set_case_sensitive(not self.session.case_sensitive)
        )
        self._update_options()

    def action_refresh(self) -> None:
        """Rescan the vault now."""
        if self._rescan():
            self.notify("Notes reloaded")
        else:
            self.notify("No changes")
