"""
db/query_builder.py
-------------------
Builds MySQL statements from table / field / filter / sort / paging input.

Identifiers coming from the caller (table and column names) are always
backtick quoted. Values are never inlined: INSERT and UPDATE emit ``?``
placeholders and return the bind values alongside the SQL text.

Filter and WHERE clauses are appended verbatim, so callers must write them
with placeholders (``id = ?`` or ``id = :id``) rather than literal values.
"""

import re
from typing import Any, Iterable, Mapping, NamedTuple, Optional

from db.errors import InvalidQueryError

_SORT_COLUMN = re.compile(r"^[A-Za-z_][A-Za-z0-9_$]*(\.[A-Za-z_][A-Za-z0-9_$]*)?$")
_SORT_DIRECTIONS = ("asc", "desc")

_VALUE_ESCAPES = {
    "\0": "\\0",
    "\n": "\\n",
    "\r": "\\r",
    "\\": "\\\\",
    "'": "\\'",
    '"': '\\"',
    "\x1a": "\\Z",
}


class Statement(NamedTuple):
    """A SQL template and its ordered bind values."""
    sql: str
    params: Any = ()  # tuple for '?', mapping for ':name'


def _blank(value: Optional[str]) -> bool:
    return value is None or str(value).strip() == ""


def quote_identifier(name: str) -> str:
    """
    Backtick-quote a MySQL identifier.

    Embedded backticks are doubled and dotted names (``db.table``) are
    quoted part by part.
    """
    parts = str(name).strip().split(".")
    return ".".join("`" + p.strip().replace("`", "``") + "`" for p in parts)


def quote_tables(table_names: str) -> str:
    """Quote a single table name or a comma separated list of them."""
    tables = [t for t in str(table_names).split(",") if t.strip()]
    return ", ".join(quote_identifier(t) for t in tables)


def quote_value(value: Any) -> str:
    """
    Render a value as a MySQL string literal.

    Only meant for human-readable output (see ``interpolate_query``);
    executed statements always go through bind parameters.
    """
    if value is None:
        return "NULL"
    if isinstance(value, bool):
        value = "1" if value else "0"
    elif isinstance(value, (bytes, bytearray)):
        value = bytes(value).decode("utf-8", errors="replace")
    text = "".join(_VALUE_ESCAPES.get(ch, ch) for ch in str(value))
    return f"'{text}'"


def _order_by(sort_by: Mapping[str, str]) -> str:
    terms = []
    for column, direction in sort_by.items():
        column = str(column).strip()
        direction = "asc" if _blank(direction) else str(direction).strip().lower()
        if not _SORT_COLUMN.match(column):
            raise InvalidQueryError(f"Invalid sort column: {column!r}")
        if direction not in _SORT_DIRECTIONS:
            raise InvalidQueryError(f"Invalid sort direction for {column}: {direction!r}")
        terms.append(f"{column} {direction}")
    return ", ".join(terms)


def build_select(
    table_name: str,
    fields: str = "*",
    filter_clause: str = "",
    sort_by: Optional[Mapping[str, str]] = None,
    offset: int = -1,
    limit: int = 10,
) -> Optional[str]:
    """
    Build a SELECT statement.

    Args:
        table_name: A table name or a comma separated list of tables.
        fields: Comma separated field list. Blank means ``*``.
        filter_clause: WHERE clause body, written with placeholders.
        sort_by: Ordered mapping of column -> 'asc' / 'desc'.
        offset: Row offset. A negative offset disables paging entirely.
        limit: Page size, coerced to at least 1 when paging.

    Returns:
        The SQL text, or None when the table name is blank.

    Raises:
        InvalidQueryError: On a malformed sort column or direction.
    """
    if _blank(table_name):
        return None

    fields = "" if fields is None else str(fields).strip()
    if fields == "":
        fields = "*"

    sql = f"select {fields} from {quote_tables(table_name)}"

    if not _blank(filter_clause):
        sql += f" where {filter_clause.strip()}"

    if sort_by:
        sql += f" order by {_order_by(sort_by)}"

    offset = int(offset)
    if offset >= 0:
        limit = max(int(limit), 1)
        sql += f" limit {offset},{limit}"

    return sql


def build_insert(table_name: str, data: Optional[Mapping[str, Any]]) -> Optional[Statement]:
    """Build an INSERT with every value bound. None on blank table or no data."""
    if _blank(table_name) or not data:
        return None
    columns = ", ".join(quote_identifier(k) for k in data)
    placeholders = ", ".join("?" for _ in data)
    sql = f"insert into {quote_identifier(table_name)} ({columns}) values ({placeholders})"
    return Statement(sql, tuple(data.values()))


def build_update(
    table_name: str,
    data: Optional[Mapping[str, Any]],
    where_clause: str,
    where_bind: Iterable[Any] = (),
) -> Optional[Statement]:
    """
    Build an UPDATE statement.

    The SET values come first in the bind list, followed by ``where_bind``
    (a mapping contributes its values in insertion order), so
    ``where_clause`` must use positional ``?`` placeholders.
    None when the table, the data or the WHERE clause is empty.
    """
    if _blank(table_name) or not data or _blank(where_clause):
        return None
    assignments = ", ".join(f"{quote_identifier(k)} = ?" for k in data)
    sql = f"update {quote_identifier(table_name)} set {assignments} where {where_clause.strip()}"
    if isinstance(where_bind, Mapping):
        where_bind = where_bind.values()
    return Statement(sql, tuple(data.values()) + tuple(where_bind or ()))


def build_delete(table_name: str, where_clause: str, where_bind: Any = ()) -> Optional[Statement]:
    """Build a DELETE. A WHERE clause is mandatory; None without one."""
    if _blank(table_name) or _blank(where_clause):
        return None
    sql = f"delete from {quote_identifier(table_name)} where {where_clause.strip()}"
    if isinstance(where_bind, Mapping):
        return Statement(sql, where_bind)
    return Statement(sql, tuple(where_bind or ()))


def build_truncate(table_name: str) -> Optional[Statement]:
    if _blank(table_name):
        return None
    return Statement(f"truncate {quote_identifier(table_name)}")
