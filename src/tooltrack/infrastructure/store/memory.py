"""In-memory record store implementation.

This module provides a simple in-memory record store for testing and
``--memory`` runs. Rows are stored in dictionaries and are lost when the
application exits.
"""

import copy
from typing import Any

from tooltrack.domain.errors import RecordStoreError
from tooltrack.infrastructure.store.query import order_rows, row_matches
from tooltrack.logger import get_logger
from tooltrack.utils import new_record_id, utc_now_iso

logger = get_logger("store.memory")


class InMemoryRecordStore:
    """In-memory record store for tests and throwaway sessions.

    Rows are deep-copied on the way in and out so callers never share
    mutable state with the store.

    Example:
        >>> store = InMemoryRecordStore()
        >>> row = await store.insert("products", {"name": "Chain"})
        >>> await store.delete("products", row["id"])
        >>> assert await store.select_where("products") == []
    """

    def __init__(self) -> None:
        self._tables: dict[str, dict[str, dict[str, Any]]] = {}
        logger.debug("InMemoryRecordStore initialized (records will not persist)")

    async def insert(self, table: str, record: dict[str, Any]) -> dict[str, Any]:
        rows = self._tables.setdefault(table, {})
        now = utc_now_iso()
        row = copy.deepcopy(record)
        row.setdefault("id", new_record_id())
        row.setdefault("created_at", now)
        row["updated_at"] = now
        if row["id"] in rows:
            raise RecordStoreError(f"Duplicate id '{row['id']}' in table '{table}'")
        rows[row["id"]] = row
        logger.debug(f"Inserted row: table='{table}', id='{row['id']}'")
        return copy.deepcopy(row)

    async def select_where(
        self,
        table: str,
        *,
        ilike: dict[str, str] | None = None,
        equals: dict[str, Any] | None = None,
        any_ilike: dict[str, str] | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        rows = self._tables.get(table, {}).values()
        matching = [row for row in rows if row_matches(row, ilike, equals, any_ilike)]
        result = order_rows(matching, order_by, descending, limit)
        logger.debug(f"Selected rows: table='{table}', count={len(result)}")
        return copy.deepcopy(result)

    async def update(self, table: str, record_id: str, patch: dict[str, Any]) -> dict[str, Any]:
        rows = self._tables.get(table, {})
        if record_id not in rows:
            raise RecordStoreError(f"No row with id '{record_id}' in table '{table}'")
        row = rows[record_id]
        row.update(copy.deepcopy({k: v for k, v in patch.items() if k != "id"}))
        row["updated_at"] = utc_now_iso()
        logger.debug(f"Updated row: table='{table}', id='{record_id}', fields={sorted(patch)}")
        return copy.deepcopy(row)

    async def delete(self, table: str, record_id: str) -> None:
        rows = self._tables.get(table, {})
        if rows.pop(record_id, None) is not None:
            logger.debug(f"Deleted row: table='{table}', id='{record_id}'")
        else:
            logger.debug(f"Delete called on non-existent row: table='{table}', id='{record_id}' (no-op)")

    def clear_all(self) -> None:
        """Drop every table. Utility for test cleanup."""
        count = sum(len(rows) for rows in self._tables.values())
        self._tables.clear()
        logger.debug(f"Cleared all tables: {count} rows removed")

    def __len__(self) -> int:
        """Total number of rows across tables."""
        return sum(len(rows) for rows in self._tables.values())
