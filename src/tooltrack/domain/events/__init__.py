"""Event system for decoupled component communication.

The application layer publishes events and the TUI subscribes to them.

Example:
    ```python
    from tooltrack.domain.events import EventBus, FocusRequested

    event_bus = EventBus()
    event_bus.subscribe(FocusRequested, lambda event: print(event.widget_id))
    event_bus.publish(FocusRequested(widget_id="part-name-1"))
    ```
"""

from .bus import EventBus
from .types import (
    EntrySaved,
    Event,
    FocusRequested,
    SuggestionConfirmed,
    SuggestionsChanged,
)

__all__ = [
    "EventBus",
    "Event",
    "FocusRequested",
    "SuggestionsChanged",
    "SuggestionConfirmed",
    "EntrySaved",
]
