"""Shared fixtures and fakes for ToolTrack tests."""

import asyncio
from typing import Optional

import pytest

from tooltrack.domain.models import Candidate

# Debounce delay used by the tests (seconds)
DELAY = 0.02


def make_candidate(identifier: str, name: str, part_number: Optional[str] = None) -> Candidate:
    return Candidate(identifier=identifier, display_name=name, secondary_label=part_number)


class FakeGateway:
    """Controllable SearchGateway.

    Matches candidates by case-insensitive substring on name or part
    number, records every query, and can either fail or hold responses
    until the test releases them.
    """

    def __init__(self, candidates: Optional[list[Candidate]] = None):
        self.candidates = list(candidates or [])
        self.queries: list[str] = []
        self.error: Optional[Exception] = None
        self.hold = False
        self._held: dict[str, list[asyncio.Future]] = {}

    def match(self, text: str) -> list[Candidate]:
        needle = text.strip().casefold()
        return [
            candidate
            for candidate in self.candidates
            if needle in candidate.display_name.casefold()
            or needle in (candidate.secondary_label or "").casefold()
        ]

    async def query(self, text: str) -> list[Candidate]:
        self.queries.append(text)
        if self.hold:
            future = asyncio.get_running_loop().create_future()
            self._held.setdefault(text, []).append(future)
            return await future
        if self.error is not None:
            raise self.error
        return self.match(text)

    def pending(self, text: str) -> int:
        return len(self._held.get(text, []))

    async def release(
        self,
        text: str,
        candidates: Optional[list[Candidate]] = None,
        error: Optional[Exception] = None,
    ) -> None:
        """Resolve the oldest held query for ``text`` and let the caller run."""
        future = self._held[text].pop(0)
        if error is not None:
            future.set_exception(error)
        else:
            future.set_result(self.match(text) if candidates is None else candidates)
        await asyncio.sleep(0)
        await asyncio.sleep(0)


@pytest.fixture
def parts() -> list[Candidate]:
    return [
        make_candidate("p1", "Brake Pad Set", "BP-1001"),
        make_candidate("p2", "Brake Cable", "BC-2040"),
        make_candidate("p3", "Chain Lubricant", "CL-0310"),
        make_candidate("p4", "Engine Oil", "EO-1040"),
    ]


@pytest.fixture
def gateway(parts) -> FakeGateway:
    return FakeGateway(parts)


@pytest.fixture
def delay() -> float:
    return DELAY


@pytest.fixture
def settle():
    """Coroutine that waits long enough for a timer armed now to fire and finish."""

    async def _settle(wait: float = DELAY) -> None:
        await asyncio.sleep(wait * 4)

    return _settle
