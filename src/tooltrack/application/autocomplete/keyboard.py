"""
KeyboardRouter - maps key presses in a part-name input to session transitions.

The router is stateless; everything it needs is read from the session.
Keys use Textual's names ("down", "up", "home", "end", "enter", "escape",
"tab"); browser-style names such as "ArrowDown" are accepted as aliases.
"""

from dataclasses import dataclass

from tooltrack.application.autocomplete.session import SuggestionSession
from tooltrack.logger import get_logger

logger = get_logger("keyboard_router")

KEY_ALIASES = {
    "arrowdown": "down",
    "arrowup": "up",
    "return": "enter",
    "esc": "escape",
}


@dataclass(frozen=True)
class KeyDisposition:
    """What the widget should do with the key event after routing.

    Attributes:
        handled: Stop the event (the router consumed it). When False the
            widget lets the key through to its default behaviour.
        scroll_to: Dropdown index to scroll into view, if any
    """

    handled: bool
    scroll_to: int | None = None


PASS_THROUGH = KeyDisposition(handled=False)
CONSUMED = KeyDisposition(handled=True)


def normalize_key(key: str) -> str:
    lowered = key.lower()
    return KEY_ALIASES.get(lowered, lowered)


class KeyboardRouter:
    """Routes navigation and confirmation keys onto a SuggestionSession."""

    def route(self, key: str, session: SuggestionSession) -> KeyDisposition:
        """
        Apply ``key`` to ``session``.

        Args:
            key: Key name as reported by the UI toolkit
            session: The session backing the focused input

        Returns:
            KeyDisposition telling the caller whether to stop the event
        """
        name = normalize_key(key)

        if not session.is_open:
            return self._route_closed(name, session)

        if name == "down":
            return KeyDisposition(handled=True, scroll_to=session.move_highlight(1))
        if name == "up":
            return KeyDisposition(handled=True, scroll_to=session.move_highlight(-1))
        if name == "home":
            return KeyDisposition(handled=True, scroll_to=session.highlight_first())
        if name == "end":
            return KeyDisposition(handled=True, scroll_to=session.highlight_last())
        if name == "enter":
            if session.highlighted_index is not None:
                session.on_confirm(session.highlighted_index)
            return CONSUMED
        if name == "escape":
            session.on_dismiss()
            return CONSUMED
        if name == "tab":
            session.on_dismiss()
            return PASS_THROUGH

        return PASS_THROUGH

    def _route_closed(self, name: str, session: SuggestionSession) -> KeyDisposition:
        if name == "down" and session.has_query():
            logger.debug(f"[{session.field_id}] reopening dropdown from keyboard")
            session.reopen()
            return KeyDisposition(handled=True, scroll_to=session.highlighted_index if session.is_open else None)
        return PASS_THROUGH
