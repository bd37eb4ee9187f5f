"""
db/rows.py
----------
Result shaping: fetch modes for array rows and mapping rows onto objects.
"""

import dataclasses
from types import SimpleNamespace
from typing import Any, Optional, Sequence

FETCH_ASSOC = "assoc"
FETCH_NUM = "num"
FETCH_BOTH = "both"

FETCH_MODES = (FETCH_ASSOC, FETCH_NUM, FETCH_BOTH)


def normalize_fetch_mode(mode: Optional[str]) -> str:
    """Unknown or empty modes fall back to 'assoc'."""
    mode = (mode or "").strip().lower()
    return mode if mode in FETCH_MODES else FETCH_ASSOC


def shape_row(columns: Sequence[str], row: Sequence[Any], mode: str) -> Any:
    """
    Shape one driver row according to a fetch mode.

    Args:
        columns: Column names as reported by the cursor.
        row: The row tuple.
        mode: 'assoc' -> dict by name, 'num' -> list by position,
              'both' -> dict keyed by name and by position.
    """
    if mode == FETCH_NUM:
        return list(row)
    if mode == FETCH_BOTH:
        both = {}
        for index, (name, value) in enumerate(zip(columns, row)):
            both[name] = value
            both[index] = value
        return both
    return dict(zip(columns, row))


def map_object(cls: type, record: dict) -> Any:
    """
    Build an object of ``cls`` from a column -> value dict.

    Dataclasses get their declared fields through the constructor and any
    remaining columns as plain attributes. Other classes are called with
    every column as a keyword argument. If the object defines
    ``__post_load__()`` it is invoked once all columns are set.
    """
    if cls is SimpleNamespace:
        obj = SimpleNamespace(**record)
    elif dataclasses.is_dataclass(cls):
        init_names = {f.name for f in dataclasses.fields(cls) if f.init}
        obj = cls(**{k: v for k, v in record.items() if k in init_names})
        for key, value in record.items():
            if key not in init_names:
                setattr(obj, key, value)
    else:
        obj = cls(**record)

    post_load = getattr(obj, "__post_load__", None)
    if callable(post_load):
        post_load()
    return obj
