"""
db/placeholders.py
------------------
Placeholder handling for SQL written with ``?`` (positional) or
``:name`` (named) parameters.

mysql.connector expects ``%(name)s`` style markers, so statements are
rewritten before execution and the bind values are passed as a dict.
Placeholders inside string literals, quoted identifiers and comments
are left alone.
"""

from typing import Any, Iterator, Mapping, Optional, Sequence, Tuple

from db.errors import InvalidQueryError
from db.query_builder import quote_value

SQL, POSITIONAL, NAMED = "sql", "positional", "named"

_MISSING = object()


def _is_name_start(ch: str) -> bool:
    return ch.isalpha() or ch == "_"


def _is_name_char(ch: str) -> bool:
    return ch.isalnum() or ch == "_"


def _skip_quoted(sql: str, i: int, quote: str) -> int:
    """Return the index just past the literal starting at ``sql[i]``."""
    n = len(sql)
    i += 1
    while i < n:
        ch = sql[i]
        if ch == "\\" and quote != "`":
            i += 2
            continue
        if ch == quote:
            # doubled quote is an escaped quote
            if i + 1 < n and sql[i + 1] == quote:
                i += 2
                continue
            return i + 1
        i += 1
    return n


def scan(sql: str) -> Iterator[Tuple[str, str]]:
    """
    Split a statement into plain SQL chunks and placeholders.

    Yields:
        ``(SQL, text)``, ``(POSITIONAL, "?")`` or ``(NAMED, name)`` tuples.
    """
    n = len(sql)
    start = i = 0
    while i < n:
        ch = sql[i]
        if ch in ("'", '"', "`"):
            i = _skip_quoted(sql, i, ch)
        elif ch == "#" or (ch == "-" and sql.startswith("-- ", i)):
            end = sql.find("\n", i)
            i = n if end == -1 else end
        elif ch == "/" and sql.startswith("/*", i):
            end = sql.find("*/", i + 2)
            i = n if end == -1 else end + 2
        elif ch == "?":
            if start < i:
                yield SQL, sql[start:i]
            yield POSITIONAL, "?"
            i += 1
            start = i
        elif (
            ch == ":"
            and i + 1 < n
            and _is_name_start(sql[i + 1])
            and (i == 0 or sql[i - 1] != ":")
        ):
            j = i + 1
            while j < n and _is_name_char(sql[j]):
                j += 1
            if start < i:
                yield SQL, sql[start:i]
            yield NAMED, sql[i + 1:j]
            i = start = j
        else:
            i += 1
    if start < n:
        yield SQL, sql[start:]


def _named_value(params: Mapping[str, Any], name: str) -> Any:
    if name in params:
        return params[name]
    if ":" + name in params:
        return params[":" + name]
    raise InvalidQueryError(f"No value bound for placeholder :{name}")


def _driver_key(index: int) -> str:
    return f"p{index}"


def to_driver_format(sql: str, params: Any = None) -> Tuple[str, Optional[dict]]:
    """
    Rewrite ``?`` / ``:name`` placeholders to ``%(pN)s`` and collect the values.

    The driver only substitutes ``%(key)s`` markers when it receives a
    dict, so ``%`` characters elsewhere in the text (``like '%s%'``,
    ``date_format(d, '%H:%i:%s')``, ``a % 2``) reach the server unchanged.

    Args:
        sql: Statement text using PDO style placeholders.
        params: A sequence for ``?`` placeholders or a mapping for
            ``:name`` placeholders (keys with or without the colon).

    Returns:
        ``(sql, values)`` where ``values`` maps ``p0``, ``p1``... to the
        bound values, or is None when nothing is bound.

    Raises:
        InvalidQueryError: On mixed styles, a missing named value or a
            positional count mismatch.
    """
    chunks = []
    values = []
    styles = set()
    positional = list(params) if params and not isinstance(params, Mapping) else []

    for kind, text in scan(sql):
        if kind == SQL:
            chunks.append(text)
            continue
        styles.add(kind)
        chunks.append(f"%({_driver_key(len(values))})s")
        if kind == NAMED:
            if not isinstance(params, Mapping):
                raise InvalidQueryError(f"Named placeholder :{text} needs a mapping of values")
            values.append(_named_value(params, text))
        else:
            values.append(None)

    if len(styles) > 1:
        raise InvalidQueryError("Cannot mix positional and named placeholders")

    if POSITIONAL in styles:
        if len(positional) != len(values):
            raise InvalidQueryError(
                f"Statement has {len(values)} positional placeholders "
                f"but {len(positional)} values were bound"
            )
        values = positional

    if not styles:
        if params and not isinstance(params, Mapping):
            raise InvalidQueryError(f"{len(positional)} values bound to a statement without placeholders")
        return sql, None

    return "".join(chunks), {_driver_key(i): v for i, v in enumerate(values)}


def interpolate_query(query: str, params: Any) -> str:
    """
    Substitute quoted values into a statement for logging or debugging.

    Each ``?`` takes the next positional value. Each named parameter
    replaces only the first ``:name`` bound under exactly that name, so
    ``:area`` never matches inside ``:area2``; later repeats and
    placeholders with no value are left as they are.
    The result is NOT safe to execute.
    """
    if not params:
        return query

    out = []
    used = set()
    positional = iter(params) if not isinstance(params, Mapping) else iter(())
    for kind, text in scan(query):
        if kind == SQL:
            out.append(text)
        elif kind == POSITIONAL:
            value = next(positional, _MISSING)
            out.append("?" if value is _MISSING else quote_value(value))
        else:
            value = _MISSING
            if isinstance(params, Mapping) and text not in used:
                value = params.get(text, params.get(":" + text, _MISSING))
            if value is _MISSING:
                out.append(":" + text)
            else:
                used.add(text)
                out.append(quote_value(value))
    return "".join(out)


def normalize_params(params: Any) -> Any:
    """Treat None as 'no parameters' and materialise one-shot iterables."""
    if params is None:
        return ()
    if isinstance(params, (Mapping, Sequence)) and not isinstance(params, (str, bytes)):
        return params
    return tuple(params)
