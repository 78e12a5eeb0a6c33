"""Search gateway protocol consumed by the autocomplete sessions."""

from typing import Protocol

from tooltrack.domain.models import Candidate

__all__ = ["SearchGateway"]


class SearchGateway(Protocol):
    """Returns candidates matching a text query.

    Implementations must return an empty list (not raise) when nothing
    matches, and must tolerate concurrent calls for different fields.
    Any exception raised is treated by the caller as a fetch failure.
    """

    async def query(self, text: str) -> list[Candidate]:
        """Return a bounded, ordered list of candidates for ``text``."""
        ...
