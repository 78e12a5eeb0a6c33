"""Autocomplete interaction for the part-name inputs.

- DebounceScheduler: one delayed dispatch per field
- SuggestionSession: per-field dropdown state machine
- KeyboardRouter: key presses -> session transitions
"""

from tooltrack.application.autocomplete.debounce import DEFAULT_DELAY, DebounceScheduler
from tooltrack.application.autocomplete.keyboard import (
    CONSUMED,
    PASS_THROUGH,
    KeyboardRouter,
    KeyDisposition,
)
from tooltrack.application.autocomplete.session import SessionState, SuggestionSession

__all__ = [
    "DEFAULT_DELAY",
    "DebounceScheduler",
    "SuggestionSession",
    "SessionState",
    "KeyboardRouter",
    "KeyDisposition",
    "CONSUMED",
    "PASS_THROUGH",
]
