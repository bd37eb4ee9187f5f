"""
db/connection.py
----------------
Creates MySqlDatabase instances.

``get_instance()`` returns a process-wide instance, connected from
``config`` on first use and reused until ``close_instance()``. It is
shared, unsynchronised state: code that can receive a MySqlDatabase
explicitly should prefer that, and short-lived work should use
``connection_scope()`` which always closes its connection.
"""

from contextlib import contextmanager
from typing import Iterator, Optional

from db.mysql_database import MySqlDatabase
from utils.logger import get_logger

logger = get_logger(__name__)

_instance: Optional[MySqlDatabase] = None


def create_new_instance() -> MySqlDatabase:
    """Return a fresh, unconnected MySqlDatabase."""
    return MySqlDatabase()


def init_instance(db: Optional[MySqlDatabase] = None) -> MySqlDatabase:
    """
    Initialize the shared instance.

    Args:
        db: An already connected instance to share. When omitted a new
            one is connected from the ``config`` values.

    Raises:
        DatabaseError: If the database is unreachable.
    """
    global _instance
    if _instance is not None:
        return _instance
    _instance = db if db is not None else MySqlDatabase.from_config()
    logger.info("Shared MySQL instance initialized.")
    return _instance


def get_instance() -> MySqlDatabase:
    """Return the shared instance, creating it on first access."""
    if _instance is None:
        return init_instance()
    return _instance


def close_instance() -> None:
    """Close and forget the shared instance."""
    global _instance
    if _instance is not None:
        _instance.close()
        _instance = None
        logger.info("Shared MySQL instance closed.")


@contextmanager
def connection_scope() -> Iterator[MySqlDatabase]:
    """
    Yield a dedicated connection that is closed on every exit path.

    Usage:
        with connection_scope() as db:
            db.get_rows("select 1")
    """
    db = MySqlDatabase.from_config()
    try:
        yield db
    finally:
        db.close()
