"""
LookupPanel - search saved entries by number plate, part or mechanic.
"""

from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.widgets import Button, DataTable, Input, RadioButton, RadioSet, Static

from tooltrack.application.ledger import EntryLedger, LookupField
from tooltrack.domain.errors import ToolTrackError
from tooltrack.domain.models import Entry
from tooltrack.logger import get_logger
from tooltrack.utils import format_timestamp

logger = get_logger("lookup_panel")

LOOKUP_FIELDS = (LookupField.PLATE, LookupField.PART, LookupField.MECHANIC)

PLACEHOLDERS = {
    LookupField.PLATE: "Enter vehicle number plate (e.g., KA01AB1234)",
    LookupField.PART: "Enter part name or number",
    LookupField.MECHANIC: "Enter mechanic name",
}


def format_parts(entry: Entry) -> str:
    return ", ".join(f"{part.name} (Qty: {part.quantity})" for part in entry.spare_parts)


class LookupPanel(Vertical):
    """Look up records: pick a search type, type a query, see matching entries."""

    DEFAULT_CSS = """
    LookupPanel {
        padding: 1 2;
    }

    LookupPanel .title {
        text-style: bold;
    }

    LookupPanel .subtitle {
        color: $text-muted;
        margin-bottom: 1;
    }

    LookupPanel #lookup-field {
        height: auto;
        layout: horizontal;
    }

    LookupPanel #lookup-bar {
        height: auto;
        margin-top: 1;
    }

    LookupPanel #lookup-query {
        width: 1fr;
    }

    LookupPanel #lookup-status {
        margin: 1 0;
        height: auto;
    }

    LookupPanel DataTable {
        height: 1fr;
    }
    """

    def __init__(self, ledger: EntryLedger, **kwargs):
        super().__init__(**kwargs)
        self.ledger = ledger

    def compose(self) -> ComposeResult:
        yield Static("Look Up Records", classes="title")
        yield Static("Search for existing spare parts entries", classes="subtitle")
        with RadioSet(id="lookup-field"):
            for index, field in enumerate(LOOKUP_FIELDS):
                yield RadioButton(f"Search by {field.label}", value=index == 0)
        with Horizontal(id="lookup-bar"):
            yield Input(placeholder=PLACEHOLDERS[LookupField.PLATE], id="lookup-query")
            yield Button("Search", id="lookup-search", variant="primary")
            yield Button("Reset", id="lookup-reset")
        yield Static("", id="lookup-status")
        yield DataTable(id="lookup-results", zebra_stripes=True, cursor_type="row")

    def on_mount(self) -> None:
        table = self.query_one("#lookup-results", DataTable)
        table.add_columns("Date", "Mechanic", "Contact", "Vehicle", "Complaint", "Parts")

    @property
    def selected_field(self) -> LookupField:
        index = self.query_one("#lookup-field", RadioSet).pressed_index
        return LOOKUP_FIELDS[index] if 0 <= index < len(LOOKUP_FIELDS) else LookupField.PLATE

    def on_radio_set_changed(self, event: RadioSet.Changed) -> None:
        self.query_one("#lookup-query", Input).placeholder = PLACEHOLDERS[self.selected_field]

    async def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id == "lookup-query":
            event.stop()
            await self.run_lookup()

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "lookup-search":
            await self.run_lookup()
        elif event.button.id == "lookup-reset":
            self.reset()

    async def run_lookup(self) -> list[Entry]:
        """Run the lookup for the current query and show the results."""
        query = self.query_one("#lookup-query", Input).value
        if not query.strip():
            return []

        status = self.query_one("#lookup-status", Static)
        status.update("Searching...")
        try:
            results = await self.ledger.search(self.selected_field, query)
        except ToolTrackError as e:
            logger.error(f"Lookup failed: {e}")
            self._fill_table([])
            status.update(f"[bold red]Error:[/] {e}")
            return []

        self._fill_table(results)
        if results:
            status.update(f"Found {len(results)} result{'s' if len(results) != 1 else ''}")
        else:
            status.update(f'No entries found for "{query.strip()}". Try a different search term.')
        return results

    def reset(self) -> None:
        self.query_one("#lookup-query", Input).value = ""
        self.query_one("#lookup-status", Static).update("")
        self._fill_table([])

    def _fill_table(self, entries: list[Entry]) -> None:
        table = self.query_one("#lookup-results", DataTable)
        table.clear()
        for entry in entries:
            table.add_row(
                format_timestamp(entry.created_at),
                entry.mechanic_name,
                entry.contact_number,
                entry.vehicle_number,
                entry.complaint_type,
                format_parts(entry),
                key=entry.id,
            )
