"""
models/navigation.py
--------------------
Navigation menu entries built from the NavMain / NavList procedures.
"""

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class NavMenuEntry:
    """
    One top-level menu entry and its sub entries.

    Attributes:
        callname: Key used to look the sub entries up through NavList.
        title: Display text, if the procedure returns one.
        row: The NavMain row exactly as returned.
        children: NavList rows for this entry, as returned.
    """
    callname: str
    row: dict[str, Any]
    title: Optional[str] = None
    children: list[dict[str, Any]] = field(default_factory=list)

    def has_children(self) -> bool:
        return bool(self.children)

    def __str__(self) -> str:
        return f"{self.title or self.callname} ({len(self.children)})"
