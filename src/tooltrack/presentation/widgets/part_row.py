"""
PartRow - one part line of the entry form.

A row is the part-name input with its suggestion dropdown, the quantity
input and a remove button. Keys pressed in the name input go through the
FormRecord first; whatever the keyboard router does not consume falls back
to the normal Input behaviour.
"""

from textual import events
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.message import Message
from textual.widgets import Button, Input, OptionList
from textual_autocomplete import DropdownItem

from tooltrack.application.form import FormRecord, name_field_id, quantity_field_id
from tooltrack.logger import get_logger

logger = get_logger("part_row")


def part_row_id(row_id: str) -> str:
    return f"part-row-{row_id}"


def suggestions_id(row_id: str) -> str:
    return f"suggestions-{row_id}"


class RemovePartRequested(Message):
    """Posted when the remove button of a row is pressed."""

    def __init__(self, row_id: str) -> None:
        super().__init__()
        self.row_id = row_id


class PartNameInput(Input):
    """Part-name input whose navigation keys drive the row's suggestion session."""

    def __init__(self, form: FormRecord, row_id: str, **kwargs):
        super().__init__(placeholder="Search part name...", id=name_field_id(row_id), **kwargs)
        self.form = form
        self.row_id = row_id

    async def _on_key(self, event: events.Key) -> None:
        disposition = self.form.handle_key(self.row_id, event.key)
        if disposition.handled:
            event.prevent_default()
            event.stop()
            if disposition.scroll_to is not None:
                self.reveal_suggestion(disposition.scroll_to)
            return
        await super()._on_key(event)

    def reveal_suggestion(self, index: int) -> None:
        """Scroll the row's dropdown so candidate ``index`` is visible."""
        dropdown = self.screen.query_one(f"#{suggestions_id(self.row_id)}", SuggestionDropdown)
        if index < dropdown.option_count:
            dropdown.highlighted = index
            dropdown.call_after_refresh(dropdown.scroll_to_highlight)

    def on_focus(self, event: events.Focus) -> None:
        self.form.on_name_focus(self.row_id)


class SuggestionDropdown(OptionList):
    """Candidate list shown under a part-name input.

    The dropdown never takes focus; the highlight mirrors the session. Until
    the keyboard takes over, the first candidate is drawn in a muted
    "passive" style: Enter already confirms it.
    """

    DEFAULT_CSS = """
    SuggestionDropdown {
        display: none;
        height: auto;
        max-height: 8;
        margin: 0 0 0 0;
        border: round $accent;
        background: $panel;
    }

    SuggestionDropdown.open {
        display: block;
    }

    SuggestionDropdown.passive > .option-list--option-highlighted {
        background: $boost;
        text-style: none;
    }
    """

    can_focus = False


class PartRow(Vertical):
    """Widgets for a single FormRow."""

    DEFAULT_CSS = """
    PartRow {
        height: auto;
        margin-bottom: 1;
    }

    PartRow > Horizontal {
        height: auto;
    }

    PartRow PartNameInput {
        width: 1fr;
    }

    PartRow .quantity {
        width: 12;
    }

    PartRow .remove {
        min-width: 5;
        width: 5;
    }
    """

    def __init__(self, form: FormRecord, row_id: str, **kwargs):
        super().__init__(id=part_row_id(row_id), **kwargs)
        self.form = form
        self.row_id = row_id

    def compose(self) -> ComposeResult:
        with Horizontal():
            yield PartNameInput(self.form, self.row_id)
            yield Input(
                placeholder="Qty",
                type="integer",
                id=quantity_field_id(self.row_id),
                classes="quantity",
            )
            yield Button("✕", variant="error", classes="remove")
        yield SuggestionDropdown(id=suggestions_id(self.row_id))

    def on_mount(self) -> None:
        self.form.register_region(self.row_id, self.contains_point)

    def on_unmount(self) -> None:
        self.form.unregister_region(self.row_id)

    @property
    def name_input(self) -> PartNameInput:
        return self.query_one(PartNameInput)

    @property
    def quantity_input(self) -> Input:
        return self.query_one(f"#{quantity_field_id(self.row_id)}", Input)

    @property
    def dropdown(self) -> SuggestionDropdown:
        return self.query_one(SuggestionDropdown)

    def contains_point(self, x: int, y: int) -> bool:
        """Whether a screen point lies on the name input or the open dropdown."""
        if self.name_input.region.contains(x, y):
            return True
        dropdown = self.dropdown
        return dropdown.has_class("open") and dropdown.region.contains(x, y)

    def refresh_suggestions(self) -> None:
        """Redraw the dropdown from the row's session."""
        session = self.form.session(self.row_id)
        dropdown = self.dropdown
        dropdown.clear_options()
        if session.is_open:
            dropdown.add_options([DropdownItem(main=candidate.label(), prefix="🔧") for candidate in session.candidates])
            dropdown.highlighted = session.highlighted_index
        dropdown.set_class(session.is_open and not session.is_navigating, "passive")
        dropdown.set_class(session.is_open, "open")

    def show_part_name(self, value: str) -> None:
        """Put a confirmed part name into the input."""
        name_input = self.name_input
        name_input.value = value
        name_input.cursor_position = len(value)

    def on_input_changed(self, event: Input.Changed) -> None:
        event.stop()
        if event.input.id == name_field_id(self.row_id):
            self.form.on_name_typed(self.row_id, event.value)
        elif event.input.id == quantity_field_id(self.row_id):
            self.form.set_quantity(self.row_id, event.value)

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        event.stop()
        self.form.confirm(self.row_id, event.option_index)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        self.post_message(RemovePartRequested(self.row_id))
