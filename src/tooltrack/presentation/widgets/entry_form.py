"""
EntryForm - the "New Parts Entry" tab.

The widget is a thin view over a FormRecord: input events are forwarded to
the record, and the record's SuggestionsChanged / SuggestionConfirmed
events are turned back into dropdown redraws and input updates.
"""

from textual import events
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.css.query import NoMatches
from textual.widgets import Button, Input, Label, Static

from tooltrack.application.form import FormRecord
from tooltrack.application.ledger import EntryLedger
from tooltrack.domain.errors import FormValidationError, ToolTrackError
from tooltrack.domain.events import SuggestionConfirmed, SuggestionsChanged
from tooltrack.logger import get_logger
from tooltrack.presentation.widgets.part_row import PartRow, RemovePartRequested, part_row_id

logger = get_logger("entry_form")

# Header input id -> FormRecord attribute
HEADER_FIELDS = {
    "mechanic-name": "mechanic_name",
    "contact-number": "contact_number",
    "vehicle-number": "vehicle_number",
    "complaint-type": "complaint_type",
}

ERROR_FIELDS = ("mechanic_name", "contact_number", "vehicle_number", "complaint_type", "spare_parts")


class EntryForm(VerticalScroll):
    """Parts entry form: mechanic and vehicle details plus part lines."""

    DEFAULT_CSS = """
    EntryForm {
        padding: 1 2;
    }

    EntryForm .title {
        text-style: bold;
    }

    EntryForm .subtitle {
        color: $text-muted;
        margin-bottom: 1;
    }

    EntryForm Label {
        margin-top: 1;
    }

    EntryForm .field-error {
        color: $error;
        height: auto;
    }

    EntryForm #part-rows {
        height: auto;
        margin-top: 1;
    }

    EntryForm #entry-actions {
        height: auto;
        margin-top: 1;
    }

    EntryForm #entry-actions Button {
        margin-right: 2;
    }
    """

    BINDINGS = [
        Binding("ctrl+n", "add_part", "Add Part"),
        Binding("ctrl+s", "save_entry", "Save Entry"),
    ]

    def __init__(self, form: FormRecord, ledger: EntryLedger, **kwargs):
        """
        Initialize the entry form.

        Args:
            form: FormRecord holding the form state and suggestion sessions
            ledger: Ledger the entry is saved to
        """
        super().__init__(**kwargs)
        self.form = form
        self.ledger = ledger
        self._saving = False

    def compose(self) -> ComposeResult:
        yield Static("New Parts Entry", classes="title")
        yield Static("Record spare parts taken by mechanics", classes="subtitle")

        yield Label("Mechanic Name *")
        yield Input(placeholder="Enter mechanic name", id="mechanic-name")
        yield Static("", id="error-mechanic_name", classes="field-error")

        yield Label("Contact Number *")
        yield Input(placeholder="Enter 10-digit number", id="contact-number")
        yield Static("", id="error-contact_number", classes="field-error")

        yield Label("Vehicle Number Plate *")
        yield Input(placeholder="KA01AB1234", id="vehicle-number")
        yield Static("", id="error-vehicle_number", classes="field-error")

        yield Label("Complaint Type *")
        yield Input(placeholder="e.g., Brake Issues, Engine Oil Change", id="complaint-type")
        yield Static("", id="error-complaint_type", classes="field-error")

        yield Label("Spare Parts *  (part name or number, quantity)")
        yield Static("", id="error-spare_parts", classes="field-error")
        with Vertical(id="part-rows"):
            for row in self.form.rows:
                yield PartRow(self.form, row.row_id)

        with Horizontal(id="entry-actions"):
            yield Button("+ Add Part", id="add-part")
            yield Button("Save Entry", id="save-entry", variant="primary")

    def on_mount(self) -> None:
        self.form.event_bus.subscribe(SuggestionsChanged, self._on_suggestions_changed)
        self.form.event_bus.subscribe(SuggestionConfirmed, self._on_suggestion_confirmed)

    def on_unmount(self) -> None:
        self.form.event_bus.unsubscribe(SuggestionsChanged, self._on_suggestions_changed)
        self.form.event_bus.unsubscribe(SuggestionConfirmed, self._on_suggestion_confirmed)

    # ------------------------------------------------------------------
    # Event bus handlers
    # ------------------------------------------------------------------

    def _on_suggestions_changed(self, event: SuggestionsChanged) -> None:
        row = self._part_row(event.row_id)
        if row is not None:
            row.refresh_suggestions()

    def _on_suggestion_confirmed(self, event: SuggestionConfirmed) -> None:
        row = self._part_row(event.row_id)
        if row is not None:
            row.show_part_name(event.candidate.display_name)

    def _part_row(self, row_id: str) -> PartRow | None:
        try:
            return self.query_one(f"#{part_row_id(row_id)}", PartRow)
        except NoMatches:
            logger.debug(f"No widget for part row {row_id}")
            return None

    # ------------------------------------------------------------------
    # Widget events
    # ------------------------------------------------------------------

    def on_input_changed(self, event: Input.Changed) -> None:
        attribute = HEADER_FIELDS.get(event.input.id or "")
        if attribute is None:
            return
        if attribute == "vehicle_number":
            upper = self.form.set_vehicle_number(event.value)
            if upper != event.value:
                event.input.value = upper
            return
        setattr(self.form, attribute, event.value)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        # Enter moves to the next field; saving is explicit
        event.stop()
        self.screen.focus_next()

    def on_mouse_down(self, event: events.MouseDown) -> None:
        dismissed = self.form.on_pointer_down(event.screen_x, event.screen_y)
        if dismissed:
            logger.debug(f"Pointer down at ({event.screen_x}, {event.screen_y}) dismissed {dismissed}")

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "add-part":
            await self.action_add_part()
        elif event.button.id == "save-entry":
            await self.action_save_entry()

    async def on_remove_part_requested(self, message: RemovePartRequested) -> None:
        if not self.form.remove_row(message.row_id):
            self.notify("At least one part line is required", severity="warning")
            return
        row = self._part_row(message.row_id)
        if row is not None:
            await row.remove()

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    async def action_add_part(self) -> None:
        row = self.form.add_row()
        await self.query_one("#part-rows", Vertical).mount(PartRow(self.form, row.row_id))

    async def action_save_entry(self) -> None:
        if self._saving:
            return
        self._saving = True
        try:
            entry = await self.form.submit(self.ledger)
        except FormValidationError as e:
            self.show_errors(e.errors)
            self.notify("Please fix the highlighted fields", severity="error")
            return
        except ToolTrackError as e:
            logger.error(f"Saving entry failed: {e}")
            self.notify(str(e), title="Save failed", severity="error")
            return
        finally:
            self._saving = False

        self.show_errors({})
        await self._rebuild()
        self.notify(
            f"{entry.vehicle_number}: {len(entry.spare_parts)} part line(s) recorded",
            title="Entry Saved Successfully!",
        )

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def show_errors(self, errors: dict[str, str]) -> None:
        """Show validation messages under their fields (empty dict clears them)."""
        for field in ERROR_FIELDS:
            self.query_one(f"#error-{field}", Static).update(errors.get(field, ""))

    async def _rebuild(self) -> None:
        """Sync the widgets with a freshly reset FormRecord."""
        for input_id in HEADER_FIELDS:
            self.query_one(f"#{input_id}", Input).value = ""
        container = self.query_one("#part-rows", Vertical)
        await container.remove_children()
        await container.mount_all([PartRow(self.form, row.row_id) for row in self.form.rows])
        self.query_one("#mechanic-name", Input).focus()
