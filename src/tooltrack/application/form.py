"""
FormRecord - the parts entry form with one autocomplete session per part row.

The form owns:
- the header fields (mechanic, contact, vehicle, complaint)
- an ordered list of FormRow part lines
- one SuggestionSession per row, keyed by row id
- one DebounceScheduler shared by all rows (timers are keyed by row id)
- the pointer regions used for outside-click dismissal

UI side effects (focus moves, dropdown redraws) are published on the
EventBus; the form never touches widgets.
"""

from dataclasses import dataclass
from typing import Callable

from pydantic import ValidationError

from tooltrack.application.autocomplete import (
    DEFAULT_DELAY,
    DebounceScheduler,
    KeyboardRouter,
    KeyDisposition,
    SuggestionSession,
)
from tooltrack.application.ledger import EntryLedger
from tooltrack.domain.errors import FormValidationError
from tooltrack.domain.events import (
    EntrySaved,
    EventBus,
    FocusRequested,
    SuggestionConfirmed,
    SuggestionsChanged,
)
from tooltrack.domain.models import Candidate, Entry, EntryDraft, SparePart, field_errors
from tooltrack.domain.protocols import SearchGateway
from tooltrack.logger import get_logger
from tooltrack.utils import new_record_id

logger = get_logger("form_record")

# (screen_x, screen_y) -> whether the point lies inside a row's input + dropdown
RegionTest = Callable[[int, int], bool]


def name_field_id(row_id: str) -> str:
    return f"part-name-{row_id}"


def quantity_field_id(row_id: str) -> str:
    return f"quantity-{row_id}"


def parse_quantity(value: int | str) -> int:
    """Quantity as typed: blank or garbage counts as 0, negatives clamp to 0."""
    if isinstance(value, int):
        return max(value, 0)
    try:
        return max(int(value.strip()), 0)
    except ValueError:
        return 0


@dataclass
class FormRow:
    """One part line of the entry form."""

    row_id: str
    part_name: str = ""
    quantity: int = 0

    def to_spare_part(self) -> SparePart:
        return SparePart(id=self.row_id, name=self.part_name, quantity=self.quantity)


class FormRecord:
    """State and behaviour of the parts entry form."""

    def __init__(
        self,
        gateway: SearchGateway,
        event_bus: EventBus | None = None,
        debounce_delay: float = DEFAULT_DELAY,
        router: KeyboardRouter | None = None,
    ):
        """
        Initialize the form with one empty part row.

        Args:
            gateway: Search collaborator for part-name suggestions
            event_bus: Bus for focus and redraw notifications
            debounce_delay: Quiet period before a part search is dispatched
            router: Key router (a default one is created if omitted)
        """
        self._gateway = gateway
        self.event_bus = event_bus or EventBus()
        self._router = router or KeyboardRouter()
        self._scheduler = DebounceScheduler(self._dispatch_fetch, delay=debounce_delay)

        self.mechanic_name = ""
        self.contact_number = ""
        self.vehicle_number = ""
        self.complaint_type = ""

        self.rows: list[FormRow] = []
        self._sessions: dict[str, SuggestionSession] = {}
        self._regions: dict[str, RegionTest] = {}

        self.add_row(focus=False)

    # ------------------------------------------------------------------
    # Rows and sessions
    # ------------------------------------------------------------------

    def add_row(self, focus: bool = True) -> FormRow:
        """Append an empty part row with a fresh session."""
        row = FormRow(row_id=new_record_id()[:12])
        self.rows.append(row)
        self._sessions[row.row_id] = SuggestionSession(
            field_id=row.row_id,
            gateway=self._gateway,
            scheduler=self._scheduler,
            on_confirmed=lambda candidate, row_id=row.row_id: self._merge_candidate(row_id, candidate),
            on_change=lambda session: self.event_bus.publish(SuggestionsChanged(row_id=session.field_id)),
        )
        logger.debug(f"Added part row {row.row_id} ({len(self.rows)} row(s))")
        if focus:
            self.event_bus.publish(FocusRequested(widget_id=name_field_id(row.row_id)))
        return row

    def remove_row(self, row_id: str) -> bool:
        """
        Remove a part row and discard its session and pending timer.

        Returns:
            False if the row is unknown or is the last remaining row
        """
        if len(self.rows) <= 1 or row_id not in self._sessions:
            return False
        self.rows = [row for row in self.rows if row.row_id != row_id]
        self._sessions.pop(row_id).close()
        self._regions.pop(row_id, None)
        logger.debug(f"Removed part row {row_id} ({len(self.rows)} row(s))")
        return True

    def row(self, row_id: str) -> FormRow:
        for row in self.rows:
            if row.row_id == row_id:
                return row
        raise KeyError(row_id)

    def session(self, row_id: str) -> SuggestionSession:
        return self._sessions[row_id]

    @property
    def sessions(self) -> dict[str, SuggestionSession]:
        return dict(self._sessions)

    @property
    def scheduler(self) -> DebounceScheduler:
        return self._scheduler

    # ------------------------------------------------------------------
    # Input events
    # ------------------------------------------------------------------

    def set_vehicle_number(self, value: str) -> str:
        """Store the plate upper-cased and return what the input should show."""
        self.vehicle_number = value.upper()
        return self.vehicle_number

    def on_name_typed(self, row_id: str, text: str) -> None:
        """Typed input in a part-name field."""
        row = self.row(row_id)
        if text == row.part_name:
            # Echo of a value the form already holds (confirm, reset)
            return
        row.part_name = text
        self._sessions[row_id].on_text_changed(text)

    def set_quantity(self, row_id: str, value: int | str) -> int:
        row = self.row(row_id)
        row.quantity = parse_quantity(value)
        return row.quantity

    def on_name_focus(self, row_id: str) -> None:
        self._sessions[row_id].on_focus_gained()

    def handle_key(self, row_id: str, key: str) -> KeyDisposition:
        return self._router.route(key, self._sessions[row_id])

    def confirm(self, row_id: str, index: int) -> Candidate | None:
        """Confirm a candidate (e.g. clicked in the dropdown)."""
        return self._sessions[row_id].on_confirm(index)

    def dismiss(self, row_id: str) -> None:
        self._sessions[row_id].on_dismiss()

    # ------------------------------------------------------------------
    # Outside-click dismissal
    # ------------------------------------------------------------------

    def register_region(self, row_id: str, contains: RegionTest) -> None:
        """Register the hit test for a row's input and dropdown."""
        self._regions[row_id] = contains

    def unregister_region(self, row_id: str) -> None:
        self._regions.pop(row_id, None)

    def on_pointer_down(self, x: int, y: int) -> list[str]:
        """
        Dismiss every open dropdown whose region does not contain the point.

        Returns:
            Row ids whose sessions were dismissed
        """
        dismissed = []
        for row_id, session in self._sessions.items():
            if not session.is_open:
                continue
            contains = self._regions.get(row_id)
            if contains is not None and contains(x, y):
                continue
            session.on_dismiss()
            dismissed.append(row_id)
        return dismissed

    # ------------------------------------------------------------------
    # Validation and submission
    # ------------------------------------------------------------------

    def build_draft(self) -> EntryDraft:
        """
        Validate the form.

        Raises:
            FormValidationError: With field -> message for every invalid field
        """
        try:
            return EntryDraft(
                mechanic_name=self.mechanic_name,
                contact_number=self.contact_number,
                vehicle_number=self.vehicle_number,
                complaint_type=self.complaint_type,
                spare_parts=[row.to_spare_part() for row in self.rows],
            )
        except ValidationError as e:
            raise FormValidationError(field_errors(e)) from e

    def validate(self) -> dict[str, str]:
        """Field -> message for every invalid field (empty when valid)."""
        try:
            self.build_draft()
        except FormValidationError as e:
            return e.errors
        return {}

    async def submit(self, ledger: EntryLedger) -> Entry:
        """
        Validate, save and reset the form.

        Raises:
            FormValidationError: If the form is invalid (nothing is saved)
            RecordStoreError: If the ledger cannot save (the form is kept)
        """
        draft = self.build_draft()
        entry = await ledger.save_entry(draft)
        self.event_bus.publish(EntrySaved(entry=entry))
        self.reset()
        return entry

    def reset(self) -> None:
        """Clear every field and start over with a single empty row."""
        for session in self._sessions.values():
            session.close()
        self._sessions.clear()
        self._regions.clear()
        self.rows = []
        self.mechanic_name = ""
        self.contact_number = ""
        self.vehicle_number = ""
        self.complaint_type = ""
        self.add_row(focus=False)
        logger.debug("Form reset")

    async def aclose(self) -> None:
        """Close all sessions and cancel outstanding timers and fetches."""
        for session in self._sessions.values():
            session.close()
        await self._scheduler.shutdown()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _dispatch_fetch(self, row_id: str, query_text: str) -> None:
        session = self._sessions.get(row_id)
        if session is None:
            logger.debug(f"Dropping fetch for removed row {row_id}")
            return
        await session.fetch(query_text)

    def _merge_candidate(self, row_id: str, candidate: Candidate) -> None:
        row = self.row(row_id)
        row.part_name = candidate.display_name
        self.event_bus.publish(SuggestionConfirmed(row_id=row_id, candidate=candidate))
        self.event_bus.publish(FocusRequested(widget_id=quantity_field_id(row_id)))
