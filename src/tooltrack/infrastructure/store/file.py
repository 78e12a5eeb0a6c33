"""File-based record store implementation.

Persists each table as a JSON file (a list of rows) in a data directory.
"""

import copy
import json
from pathlib import Path
from typing import Any

from tooltrack.domain.errors import RecordStoreError
from tooltrack.infrastructure.store.query import order_rows, row_matches
from tooltrack.logger import get_logger
from tooltrack.utils import new_record_id, utc_now_iso

logger = get_logger("store.file")


class JsonFileRecordStore:
    """File-based record store for local persistence.

    Each table lives in ``<base_dir>/<table>.json``. Tables are loaded
    lazily and cached; every write rewrites the whole table file using an
    atomic write (write to temp, then rename).

    Example:
        >>> store = JsonFileRecordStore(base_dir="~/.tooltrack/data")
        >>> await store.insert("products", {"name": "Brake Cable"})
        >>> # Creates: ~/.tooltrack/data/products.json
    """

    def __init__(self, base_dir: str | Path = "~/.tooltrack/data"):
        """Initialize the store.

        Args:
            base_dir: Directory holding the table files. Supports ~ expansion
                and relative paths. Created if it doesn't exist.
        """
        self.base_dir = Path(base_dir).expanduser().resolve()
        self._tables: dict[str, list[dict[str, Any]]] = {}
        self._ensure_directory_exists()
        logger.info(f"JsonFileRecordStore initialized: base_dir={self.base_dir}")

    def _ensure_directory_exists(self) -> None:
        try:
            self.base_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(f"Failed to create directory {self.base_dir}: {e}")
            raise RecordStoreError(f"Cannot create data directory: {e}") from e

    def table_path(self, table: str) -> Path:
        """Path of the JSON file backing ``table``."""
        safe_name = table.replace("/", "_").replace(":", "_")
        return self.base_dir / f"{safe_name}.json"

    def _load(self, table: str) -> list[dict[str, Any]]:
        if table in self._tables:
            return self._tables[table]

        path = self.table_path(table)
        if not path.exists():
            self._tables[table] = []
            return self._tables[table]

        try:
            with open(path, "r", encoding="utf-8") as f:
                rows = json.load(f)
        except json.JSONDecodeError as e:
            logger.error(f"Corrupted JSON in table file '{path}': {e}")
            raise RecordStoreError(f"Corrupted table file {path.name}: {e}") from e
        except OSError as e:
            logger.error(f"Failed to read table file '{path}': {e}")
            raise RecordStoreError(f"Cannot read table file {path.name}: {e}") from e

        if not isinstance(rows, list):
            raise RecordStoreError(f"Corrupted table file {path.name}: expected a list of rows")

        self._tables[table] = rows
        logger.debug(f"Loaded table '{table}' from {path} ({len(rows)} rows)")
        return rows

    def _flush(self, table: str) -> None:
        path = self.table_path(table)
        temp_path = path.with_suffix(".json.tmp")
        try:
            with open(temp_path, "w", encoding="utf-8") as f:
                json.dump(self._tables[table], f, indent=2, ensure_ascii=False)
            temp_path.replace(path)
        except (TypeError, ValueError) as e:
            logger.error(f"Rows not JSON-serializable for table '{table}': {e}")
            if temp_path.exists():
                temp_path.unlink()
            raise RecordStoreError(f"Cannot serialize rows: {e}") from e
        except OSError as e:
            logger.error(f"Failed to write table file '{path}': {e}")
            if temp_path.exists():
                temp_path.unlink()
            raise RecordStoreError(f"Cannot write table file {path.name}: {e}") from e

    def _find(self, rows: list[dict[str, Any]], record_id: str) -> int | None:
        for index, row in enumerate(rows):
            if row.get("id") == record_id:
                return index
        return None

    async def insert(self, table: str, record: dict[str, Any]) -> dict[str, Any]:
        rows = self._load(table)
        now = utc_now_iso()
        row = copy.deepcopy(record)
        row.setdefault("id", new_record_id())
        row.setdefault("created_at", now)
        row["updated_at"] = now
        if self._find(rows, row["id"]) is not None:
            raise RecordStoreError(f"Duplicate id '{row['id']}' in table '{table}'")

        rows.append(row)
        try:
            self._flush(table)
        except RecordStoreError:
            rows.pop()
            raise
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
        rows = self._load(table)
        matching = [row for row in rows if row_matches(row, ilike, equals, any_ilike)]
        return copy.deepcopy(order_rows(matching, order_by, descending, limit))

    async def update(self, table: str, record_id: str, patch: dict[str, Any]) -> dict[str, Any]:
        rows = self._load(table)
        index = self._find(rows, record_id)
        if index is None:
            raise RecordStoreError(f"No row with id '{record_id}' in table '{table}'")

        previous = rows[index]
        updated = {**previous, **copy.deepcopy({k: v for k, v in patch.items() if k != "id"})}
        updated["updated_at"] = utc_now_iso()
        rows[index] = updated
        try:
            self._flush(table)
        except RecordStoreError:
            rows[index] = previous
            raise
        logger.debug(f"Updated row: table='{table}', id='{record_id}', fields={sorted(patch)}")
        return copy.deepcopy(updated)

    async def delete(self, table: str, record_id: str) -> None:
        rows = self._load(table)
        index = self._find(rows, record_id)
        if index is None:
            logger.debug(f"Delete called on non-existent row: table='{table}', id='{record_id}' (no-op)")
            return

        removed = rows.pop(index)
        try:
            self._flush(table)
        except RecordStoreError:
            rows.insert(index, removed)
            raise
        logger.debug(f"Deleted row: table='{table}', id='{record_id}'")
