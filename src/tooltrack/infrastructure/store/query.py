"""Row filtering and ordering shared by the record store implementations."""

from typing import Any, Iterable


def _contains(value: Any, needle: str) -> bool:
    if value is None:
        return False
    return needle.casefold() in str(value).casefold()


def row_matches(
    row: dict[str, Any],
    ilike: dict[str, str] | None = None,
    equals: dict[str, Any] | None = None,
    any_ilike: dict[str, str] | None = None,
) -> bool:
    """Check one row against the select_where filters."""
    if ilike and not all(_contains(row.get(column), needle) for column, needle in ilike.items()):
        return False
    if equals and not all(row.get(column) == value for column, value in equals.items()):
        return False
    if any_ilike and not any(_contains(row.get(column), needle) for column, needle in any_ilike.items()):
        return False
    return True


def order_rows(
    rows: Iterable[dict[str, Any]],
    order_by: str | None = None,
    descending: bool = False,
    limit: int | None = None,
) -> list[dict[str, Any]]:
    """Sort rows on a column (rows missing the column sort last) and cap the count."""
    result = list(rows)
    if order_by is not None:
        present = [row for row in result if row.get(order_by) is not None]
        missing = [row for row in result if row.get(order_by) is None]

        def sort_key(row: dict[str, Any]) -> Any:
            value = row[order_by]
            return value.casefold() if isinstance(value, str) else value

        present.sort(key=sort_key, reverse=descending)
        result = present + missing
    if limit is not None:
        result = result[: max(limit, 0)]
    return result
