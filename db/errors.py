"""
db/errors.py
------------
Exceptions raised by the database layer.

Blank or empty required arguments are NOT errors: the helpers return
their documented sentinel (``None``, ``False`` or an empty result) instead.
"""

from typing import Optional


class InvalidQueryError(ValueError):
    """Raised when a query cannot be built from the given arguments."""


class DatabaseError(Exception):
    """
    A failure reported by the MySQL driver.

    Attributes:
        msg: The driver's message.
        errno: MySQL error number, if known.
        sqlstate: Five character SQLSTATE code, if known.
        sql: The statement that was being executed.
    """

    def __init__(
        self,
        msg: str,
        errno: Optional[int] = None,
        sqlstate: Optional[str] = None,
        sql: Optional[str] = None,
    ):
        super().__init__(msg)
        self.msg = msg
        self.errno = errno
        self.sqlstate = sqlstate
        self.sql = sql

    @classmethod
    def from_driver(cls, exc: Exception, sql: Optional[str] = None) -> "DatabaseError":
        """Build from a ``mysql.connector.Error`` (or any driver exception)."""
        return cls(
            getattr(exc, "msg", None) or str(exc),
            errno=getattr(exc, "errno", None),
            sqlstate=getattr(exc, "sqlstate", None),
            sql=sql,
        )

    def __str__(self) -> str:
        parts = []
        if self.errno is not None:
            parts.append(str(self.errno))
        if self.sqlstate:
            parts.append(f"({self.sqlstate})")
        parts.append(self.msg)
        return " ".join(parts)
