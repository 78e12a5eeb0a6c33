"""
SuggestionSession - per-field autocomplete state machine.

A session backs one part-name input. It owns the query text, the candidates
returned by the most recent completed fetch, the highlighted index and the
dropdown visibility.

States:
    IDLE      query empty or dropdown closed, nothing in flight
    FETCHING  a search request for the current query is in flight
    OPEN      candidates from the most recent completed fetch are shown

Confirming a candidate is a transient step that merges the candidate into
the owning form row and returns the session to IDLE.

Invariants:
    - ``is_open`` implies ``candidates`` came from the most recent completed
      fetch and is non-empty
    - ``highlighted_index`` is None or a valid index into ``candidates``
"""

from enum import Enum
from typing import Callable, Sequence

from tooltrack.application.autocomplete.debounce import DEFAULT_DELAY, DebounceScheduler
from tooltrack.domain.models import Candidate
from tooltrack.domain.protocols import SearchGateway
from tooltrack.logger import get_logger
from tooltrack.utils import truncate

logger = get_logger("suggestion_session")


class SessionState(str, Enum):
    IDLE = "idle"
    FETCHING = "fetching"
    OPEN = "open"


class SuggestionSession:
    """
    Autocomplete state for one input field.

    Text changes are debounced through a DebounceScheduler; the scheduler
    calls back into ``fetch()``, which queries the SearchGateway and applies
    the result only if it is still fresh. Search failures never propagate:
    they close the dropdown and are logged.
    """

    def __init__(
        self,
        field_id: str,
        gateway: SearchGateway,
        scheduler: DebounceScheduler | None = None,
        on_confirmed: Callable[[Candidate], None] | None = None,
        on_change: Callable[["SuggestionSession"], None] | None = None,
        debounce_delay: float = DEFAULT_DELAY,
    ):
        """
        Initialize the session.

        Args:
            field_id: Key of the field this session backs (the form row id)
            gateway: Search collaborator returning candidates for a query
            scheduler: Shared scheduler whose dispatch routes back to
                ``fetch()``. If None, the session creates a private one.
            on_confirmed: Called with the candidate merged on confirm
            on_change: Called whenever the visible state changes
            debounce_delay: Delay for the private scheduler
        """
        self.field_id = field_id
        self._gateway = gateway
        self._scheduler = scheduler or DebounceScheduler(
            lambda _field_id, text: self.fetch(text), delay=debounce_delay
        )
        self._on_confirmed = on_confirmed
        self._on_change = on_change

        self.query_text = ""
        self.candidates: tuple[Candidate, ...] = ()
        self.highlighted_index: int | None = None
        self.is_open = False

        self._request_seq = 0
        self._inflight_request: int | None = None
        self._navigating = False
        self._dismissed = False
        self._closed = False

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        if self._inflight_request is not None:
            return SessionState.FETCHING
        if self.is_open:
            return SessionState.OPEN
        return SessionState.IDLE

    @property
    def highlighted(self) -> Candidate | None:
        if self.highlighted_index is None:
            return None
        return self.candidates[self.highlighted_index]

    @property
    def is_navigating(self) -> bool:
        """True once the keyboard has taken over the highlight."""
        return self._navigating

    @property
    def is_closed(self) -> bool:
        """True after ``close()``; a closed session ignores everything."""
        return self._closed

    def has_query(self) -> bool:
        return bool(self.query_text.strip())

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def on_text_changed(self, text: str) -> None:
        """Record typed text; an empty query resets, anything else is debounced."""
        if self._closed:
            return

        self.query_text = text
        self._dismissed = False

        if not text.strip():
            self._scheduler.cancel(self.field_id)
            self._inflight_request = None
            self._clear_candidates()
            logger.debug(f"[{self.field_id}] query cleared -> idle")
            self._notify()
            return

        self._scheduler.schedule(self.field_id, text)

    async def fetch(self, query_text: str) -> None:
        """
        Query the gateway and apply the outcome if it is still fresh.

        Called by the scheduler once the field is quiet; also usable
        directly (bypassing the debounce).
        """
        if self._closed:
            return

        self._request_seq += 1
        request_id = self._request_seq
        self._inflight_request = request_id
        logger.debug(f"[{self.field_id}] fetch #{request_id} for '{truncate(query_text)}'")

        try:
            candidates = await self._gateway.query(query_text)
        except Exception as error:
            self.on_fetch_failed(query_text, error, request_id=request_id)
            return

        self.on_fetch_resolved(query_text, candidates, request_id=request_id)

    def on_fetch_resolved(
        self,
        query_text: str,
        candidates: Sequence[Candidate],
        request_id: int | None = None,
    ) -> bool:
        """
        Apply fetched candidates.

        Args:
            query_text: Query the fetch was issued for
            candidates: Candidates returned by the gateway
            request_id: Sequence number of the fetch; None means "latest"

        Returns:
            True if applied, False if discarded as stale
        """
        if not self._is_fresh(query_text, request_id):
            logger.debug(
                f"[{self.field_id}] discarded stale response for '{truncate(query_text)}' "
                f"(current query '{truncate(self.query_text)}')"
            )
            self._drop_inflight(request_id)
            return False

        self._inflight_request = None
        self.candidates = tuple(candidates)
        self._navigating = False
        if self.candidates:
            self.highlighted_index = 0
            self.is_open = not self._dismissed
        else:
            self.highlighted_index = None
            self.is_open = False

        logger.debug(
            f"[{self.field_id}] {len(self.candidates)} candidate(s) for '{truncate(query_text)}', "
            f"open={self.is_open}"
        )
        self._notify()
        return True

    def on_fetch_failed(self, query_text: str, error: BaseException, request_id: int | None = None) -> bool:
        """
        Degrade to an empty, closed dropdown after a search error.

        Returns:
            True if applied, False if the failure belonged to a stale request
        """
        if not self._is_fresh(query_text, request_id):
            logger.debug(f"[{self.field_id}] ignoring failure of stale request: {error}")
            self._drop_inflight(request_id)
            return False

        self._inflight_request = None
        self._clear_candidates()
        logger.warning(f"[{self.field_id}] product search failed for '{truncate(query_text)}': {error}")
        self._notify()
        return True

    def on_focus_gained(self) -> None:
        """Re-issue the search when a field with a query is revisited."""
        if self._closed or not self.has_query():
            return
        self._dismissed = False
        self._scheduler.schedule(self.field_id, self.query_text)

    def on_dismiss(self) -> None:
        """Close the dropdown, keeping the query and candidates for a cheap reopen."""
        if self._closed:
            return
        self._scheduler.cancel(self.field_id)
        self._dismissed = True
        self._navigating = False
        if self.is_open:
            self.is_open = False
            logger.debug(f"[{self.field_id}] dropdown dismissed")
            self._notify()

    def on_confirm(self, index: int) -> Candidate | None:
        """
        Confirm the candidate at ``index``.

        Returns:
            The confirmed candidate, or None if ``index`` is out of range
        """
        if self._closed or not 0 <= index < len(self.candidates):
            logger.debug(f"[{self.field_id}] ignoring confirm of invalid index {index}")
            return None

        candidate = self.candidates[index]
        self._scheduler.cancel(self.field_id)
        self.query_text = ""
        self._inflight_request = None
        self._dismissed = False
        self._clear_candidates()
        logger.info(f"[{self.field_id}] confirmed '{candidate.display_name}'")

        if self._on_confirmed is not None:
            self._on_confirmed(candidate)
        self._notify()
        return candidate

    def reopen(self) -> None:
        """
        Reopen a closed dropdown from the keyboard.

        Shows the last candidates immediately (if any) and re-fetches so the
        list catches up with the current query.
        """
        if self._closed or not self.has_query():
            return
        self._dismissed = False
        self._navigating = False
        if self.candidates:
            self.is_open = True
            self.highlighted_index = 0
            self._notify()
        self._scheduler.schedule(self.field_id, self.query_text)

    def move_highlight(self, step: int) -> int | None:
        """
        Move the highlight cyclically by ``step``.

        The highlight placed by a fetch is passive: the first move after the
        dropdown opens activates keyboard navigation on the first candidate
        (moving down) or the last one (moving up). Later moves wrap around.

        Returns:
            The new highlighted index, or None if nothing is shown
        """
        if not self.is_open or not self.candidates:
            return None

        count = len(self.candidates)
        if not self._navigating or self.highlighted_index is None:
            self._navigating = True
            self.highlighted_index = 0 if step > 0 else count - 1
        else:
            self.highlighted_index = (self.highlighted_index + step) % count
        self._notify()
        return self.highlighted_index

    def highlight_first(self) -> int | None:
        return self._highlight_at(0)

    def highlight_last(self) -> int | None:
        return self._highlight_at(len(self.candidates) - 1)

    def close(self) -> None:
        """Destroy the session: cancel its timer and ignore late responses."""
        self._scheduler.cancel(self.field_id)
        self._closed = True
        self._inflight_request = None
        self.is_open = False
        logger.debug(f"[{self.field_id}] session closed")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _highlight_at(self, index: int) -> int | None:
        if not self.is_open or not self.candidates:
            return None
        self._navigating = True
        self.highlighted_index = index
        self._notify()
        return index

    def _is_fresh(self, query_text: str, request_id: int | None) -> bool:
        if self._closed or query_text != self.query_text:
            return False
        return request_id is None or request_id == self._request_seq

    def _drop_inflight(self, request_id: int | None) -> None:
        # A stale response can still be the last fetch that went out
        if request_id is not None and request_id == self._inflight_request:
            self._inflight_request = None

    def _clear_candidates(self) -> None:
        self.candidates = ()
        self.highlighted_index = None
        self.is_open = False
        self._navigating = False

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change(self)
