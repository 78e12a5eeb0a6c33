"""
ToolTrackApp - Main Textual application for the ToolTrack TUI.
"""

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.css.query import NoMatches
from textual.widgets import Footer, Header, TabbedContent, TabPane

from tooltrack.application.admin import AdminGate
from tooltrack.application.catalog import ProductCatalog
from tooltrack.application.form import FormRecord
from tooltrack.application.ledger import EntryLedger
from tooltrack.domain.events import EntrySaved, FocusRequested
from tooltrack.logger import get_logger
from tooltrack.presentation.widgets import AdminPanel, EntryForm, LookupPanel

logger = get_logger("tooltrack_tui")

FOCUS_ATTEMPTS = 3


class ToolTrackApp(App):
    """
    The main ToolTrack TUI application.

    Layout:
    ┌──────────────────────────────────────────────┐
    │                   Header                     │
    ├──────────────────────────────────────────────┤
    │  Parts Entry │ Look Up │ Admin               │
    ├──────────────────────────────────────────────┤
    │                                              │
    │   EntryForm / LookupPanel / AdminPanel       │
    │                                              │
    ├──────────────────────────────────────────────┤
    │                   Footer                     │
    └──────────────────────────────────────────────┘
    """

    TITLE = "ToolTrack"
    SUB_TITLE = "Bike Spare Parts Ledger"

    BINDINGS = [
        Binding("ctrl+q", "quit", "Quit", priority=True),
        Binding("ctrl+c", "quit", "Quit", priority=True, show=False),
        Binding("f1", "show_tab('tab-entry')", "Entry"),
        Binding("f2", "show_tab('tab-lookup')", "Look Up"),
        Binding("f3", "show_tab('tab-admin')", "Admin"),
    ]

    def __init__(
        self,
        form: FormRecord,
        catalog: ProductCatalog,
        ledger: EntryLedger,
        gate: AdminGate,
    ):
        """
        Initialize the ToolTrack TUI application.

        Args:
            form: FormRecord backing the entry tab; its event bus is shared
                with the TUI for focus requests and dropdown redraws
            catalog: Product catalog (admin tab and part search)
            ledger: Entry ledger (entry saving, lookup and statistics)
            gate: Admin credential gate
        """
        super().__init__()
        self.form = form
        self.catalog = catalog
        self.ledger = ledger
        self.gate = gate
        self.event_bus = form.event_bus

        self.event_bus.subscribe(FocusRequested, self._on_focus_requested)
        self.event_bus.subscribe(EntrySaved, self._on_entry_saved)

    def compose(self) -> ComposeResult:
        """Create the UI layout."""
        yield Header()
        with TabbedContent(initial="tab-entry", id="tabs"):
            with TabPane("Parts Entry", id="tab-entry"):
                yield EntryForm(self.form, self.ledger, id="entry-form")
            with TabPane("Look Up", id="tab-lookup"):
                yield LookupPanel(self.ledger, id="lookup-panel")
            with TabPane("Admin", id="tab-admin"):
                yield AdminPanel(self.gate, self.catalog, self.ledger, id="admin-panel")
        yield Footer()

    def on_mount(self) -> None:
        logger.info("ToolTrack TUI mounted and ready")
        self.call_after_refresh(self._focus_widget, "mechanic-name")

    def on_unmount(self) -> None:
        self.event_bus.unsubscribe(FocusRequested, self._on_focus_requested)
        self.event_bus.unsubscribe(EntrySaved, self._on_entry_saved)

    def action_show_tab(self, tab_id: str) -> None:
        self.query_one("#tabs", TabbedContent).active = tab_id

    def _on_focus_requested(self, event: FocusRequested) -> None:
        # Newly added rows are mounted asynchronously; focus after the next refresh
        self.call_after_refresh(self._focus_widget, event.widget_id)

    def _focus_widget(self, widget_id: str, attempts: int = FOCUS_ATTEMPTS) -> None:
        try:
            widget = self.query_one(f"#{widget_id}")
        except NoMatches:
            if attempts > 1:
                self.call_after_refresh(self._focus_widget, widget_id, attempts - 1)
            else:
                logger.warning(f"Could not focus #{widget_id}: widget not found")
            return
        widget.focus()

    def _on_entry_saved(self, event: EntrySaved) -> None:
        logger.info(f"Entry {event.entry.id} saved; refreshing admin statistics")
        admin = self.query_one("#admin-panel", AdminPanel)
        self.call_later(admin.refresh_statistics)
