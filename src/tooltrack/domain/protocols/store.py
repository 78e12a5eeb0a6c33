"""Record store protocol for persisting products, entries and credentials.

The store is a small table-oriented backend: each table holds JSON-like
rows identified by an ``id`` column. It covers exactly what the ledger,
the catalog and the admin gate need: insert, filtered select, update and
delete, with case-insensitive substring matching for lookups.
"""

from typing import Any, Protocol

__all__ = ["RecordStore"]


class RecordStore(Protocol):
    """Protocol for record persistence backends.

    Implementations:
    - InMemoryRecordStore: dict-based storage for tests and ``--memory`` runs
    - JsonFileRecordStore: one JSON file per table on the local filesystem

    All failures surface as ``RecordStoreError`` with a descriptive message.

    Example:
        >>> store = JsonFileRecordStore("~/.tooltrack/data")
        >>> row = await store.insert("products", {"name": "Brake Cable", "part_number": "BC-01"})
        >>> await store.select_where("products", ilike={"name": "brake"})
        [{'id': '...', 'name': 'Brake Cable', ...}]
    """

    async def insert(self, table: str, record: dict[str, Any]) -> dict[str, Any]:
        """Insert a row and return it as stored.

        The store assigns ``id`` (unless supplied), ``created_at`` and
        ``updated_at``.

        Args:
            table: Table name (e.g. "entries")
            record: JSON-serializable row data

        Raises:
            RecordStoreError: If the row cannot be written
        """
        ...

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
        """Select rows matching every filter.

        Args:
            table: Table name
            ilike: Column -> substring; every column must contain its
                substring, case-insensitively
            equals: Column -> value; exact equality on every column
            any_ilike: Column -> substring; at least one column must match
            order_by: Column to sort on
            descending: Reverse the sort order
            limit: Maximum number of rows returned (after sorting)

        Returns:
            Copies of the matching rows; an unknown table yields an empty list
        """
        ...

    async def update(self, table: str, record_id: str, patch: dict[str, Any]) -> dict[str, Any]:
        """Apply a partial update and return the updated row.

        Raises:
            RecordStoreError: If no row has ``record_id``
        """
        ...

    async def delete(self, table: str, record_id: str) -> None:
        """Delete a row. Silently succeeds if the row doesn't exist."""
        ...
