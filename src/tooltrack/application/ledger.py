"""
EntryLedger - saving parts entries and looking them up.
"""

from datetime import datetime
from enum import Enum

from tooltrack.domain.models import Entry, EntryDraft, Statistics
from tooltrack.domain.protocols import RecordStore
from tooltrack.logger import get_logger
from tooltrack.utils import truncate

logger = get_logger("ledger")

ENTRIES_TABLE = "entries"


class LookupField(str, Enum):
    """What a lookup query is matched against."""

    PLATE = "plate"
    PART = "part"
    MECHANIC = "mechanic"

    @property
    def label(self) -> str:
        return {
            LookupField.PLATE: "Number Plate",
            LookupField.PART: "Part",
            LookupField.MECHANIC: "Mechanic",
        }[self]


class EntryLedger:
    """Parts entries stored in the ``entries`` table. Lookups are newest first."""

    def __init__(self, store: RecordStore):
        self._store = store

    async def save_entry(self, draft: EntryDraft, created_at: datetime | None = None) -> Entry:
        """
        Persist a validated entry.

        Args:
            draft: Validated entry draft
            created_at: Override the creation time (used when seeding)

        Raises:
            RecordStoreError: If the store rejects the write
        """
        record = draft.to_record()
        if created_at is not None:
            record["created_at"] = created_at.isoformat()
        row = await self._store.insert(ENTRIES_TABLE, record)
        entry = Entry.from_record(row)
        logger.info(
            f"Saved entry {entry.id}: {entry.vehicle_number} by {entry.mechanic_name}, "
            f"{len(entry.spare_parts)} part line(s)"
        )
        return entry

    async def search_by_plate(self, plate: str) -> list[Entry]:
        return await self._select(ilike={"vehicle_number": plate.strip().upper()})

    async def search_by_mechanic(self, mechanic_name: str) -> list[Entry]:
        return await self._select(ilike={"mechanic_name": mechanic_name.strip()})

    async def search_by_part(self, part_name: str) -> list[Entry]:
        """Entries with at least one part line whose name contains ``part_name``."""
        needle = part_name.strip().casefold()
        entries = await self.all_entries()
        return [
            entry
            for entry in entries
            if any(needle in part.name.casefold() for part in entry.spare_parts)
        ]

    async def search(self, field: LookupField, query: str) -> list[Entry]:
        """Dispatch a lookup; a blank query returns nothing."""
        if not query.strip():
            return []

        if field is LookupField.PLATE:
            results = await self.search_by_plate(query)
        elif field is LookupField.PART:
            results = await self.search_by_part(query)
        else:
            results = await self.search_by_mechanic(query)

        logger.info(f"Lookup by {field.value} '{truncate(query)}' -> {len(results)} entr(ies)")
        return results

    async def all_entries(self) -> list[Entry]:
        return await self._select()

    async def statistics(self) -> Statistics:
        entries = await self.all_entries()
        return Statistics(
            total_entries=len(entries),
            unique_mechanics=len({entry.mechanic_name for entry in entries}),
            total_parts=sum(entry.total_quantity for entry in entries),
        )

    async def _select(self, ilike: dict[str, str] | None = None) -> list[Entry]:
        rows = await self._store.select_where(
            ENTRIES_TABLE,
            ilike=ilike,
            order_by="created_at",
            descending=True,
        )
        return [Entry.from_record(row) for row in rows]
