"""Event types for the event bus system."""

import time
from dataclasses import dataclass, field

from tooltrack.domain.models import Candidate, Entry


@dataclass
class Event:
    """Base class for all events.

    The timestamp field is automatically set when the event is created.
    """

    timestamp: float = field(default_factory=time.time, init=False)


@dataclass
class FocusRequested(Event):
    """Ask the UI to move input focus to a widget.

    Attributes:
        widget_id: DOM id of the widget, e.g. "part-name-<row_id>"
    """

    widget_id: str


@dataclass
class SuggestionsChanged(Event):
    """A row's suggestion session changed what the dropdown should show.

    Published on fetch resolution or failure, highlight moves, dismissal and
    confirmation. The UI redraws the dropdown for ``row_id``.
    """

    row_id: str


@dataclass
class SuggestionConfirmed(Event):
    """A candidate was confirmed and merged into a form row."""

    row_id: str
    candidate: Candidate


@dataclass
class EntrySaved(Event):
    """A parts entry was written to the ledger."""

    entry: Entry
