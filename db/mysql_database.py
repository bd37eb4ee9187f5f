"""
db/mysql_database.py
--------------------
A wrapper around a single mysql.connector connection.

SQL is written with ``?`` or ``:name`` placeholders and every value goes
through the driver as a bind parameter. Results come back shaped by a
fetch mode ('assoc', 'num', 'both'), as a scalar, a single column,
key/value pairs or mapped objects.

Blank table / column names and empty data sets never reach the database:
the helpers return their sentinel (``None``, ``False`` or an empty result).
"""

import re
from contextlib import contextmanager
from types import SimpleNamespace
from typing import Any, Iterator, Mapping, Optional

import mysql.connector

from config import (
    DB_CHARSET,
    DB_CONNECT_TIMEOUT,
    DB_FETCH_MODE,
    DB_HOST,
    DB_INIT_COMMAND,
    DB_NAME,
    DB_PASS,
    DB_PORT,
    DB_USER,
)
from db.errors import DatabaseError, InvalidQueryError
from db.placeholders import interpolate_query, normalize_params, to_driver_format
from db.query_builder import (
    build_delete,
    build_insert,
    build_select,
    build_truncate,
    build_update,
    quote_identifier,
)
from db.rows import FETCH_ASSOC, FETCH_NUM, map_object, normalize_fetch_mode, shape_row
from utils.logger import get_logger

logger = get_logger(__name__)

ERRMODE_EXCEPTION = "exception"
ERRMODE_SILENT = "silent"

_PROCEDURE_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_$]*(\.[A-Za-z_][A-Za-z0-9_$]*)?$")


def _blank(value: Optional[str]) -> bool:
    return value is None or str(value).strip() == ""


def _to_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")
    return str(value)


class MySqlDatabase:
    """
    Query helper bound to one MySQL connection.

    Usage:
        with MySqlDatabase() as db:
            db.connect("shop", "shop_user", "secret")
            rows = db.get_rows("select * from product where id = ?", [7])

    The default fetch mode set through ``set_array_fetch_mode`` applies to
    every array returning call; each of those calls also accepts an
    explicit ``fetch_mode`` that wins for that call only.
    """

    def __init__(self, connection=None, database_name: Optional[str] = None,
                 fetch_mode: str = FETCH_ASSOC):
        self._connection = connection
        self._database_name = database_name
        self._fetch_mode = normalize_fetch_mode(fetch_mode)
        self._error_mode = ERRMODE_EXCEPTION
        self._last_statement = None

    # ── CONNECTION ────────────────────────────────────────

    def connect(
        self,
        database: str = "",
        user: str = "root",
        password: str = "",
        host: str = "localhost",
        port: int = 3306,
        options: Optional[Mapping[str, Any]] = None,
    ) -> None:
        """
        Open the connection.

        Args:
            database: Default schema for the session.
            user: MySQL user.
            password: MySQL password.
            host: Server host name.
            port: Server port.
            options: Extra ``mysql.connector.connect`` keyword arguments.
                ``init_command`` is run right after connecting
                (default: ``SET NAMES 'UTF8'``).

        Raises:
            DatabaseError: If the server cannot be reached or refuses the login.
        """
        kwargs = {
            "charset": DB_CHARSET,
            "autocommit": True,
            "connection_timeout": DB_CONNECT_TIMEOUT,
        }
        kwargs.update(options or {})
        init_command = kwargs.pop("init_command", DB_INIT_COMMAND)

        conn = None
        try:
            conn = mysql.connector.connect(
                host=host, port=int(port), user=user, password=password,
                database=database or None, **kwargs,
            )
            if init_command:
                cursor = conn.cursor()
                try:
                    cursor.execute(init_command)
                finally:
                    cursor.close()
        except mysql.connector.Error as e:
            if conn is not None:
                conn.close()
            logger.error(f"Failed to connect to MySQL {user}@{host}:{port}/{database}: {e}")
            raise DatabaseError.from_driver(e) from e

        self._connection = conn
        self._database_name = database
        self.set_array_fetch_mode(FETCH_ASSOC)
        self.set_error_mode(ERRMODE_EXCEPTION)
        logger.info(f"Connected to MySQL database '{database}' on {host}:{port}")

    @classmethod
    def from_config(cls) -> "MySqlDatabase":
        """Create and connect an instance from the values in ``config``."""
        db = cls()
        db.connect(DB_NAME, DB_USER, DB_PASS, DB_HOST, DB_PORT)
        db.set_array_fetch_mode(DB_FETCH_MODE)
        return db

    def get_connection(self):
        """Return the underlying mysql.connector connection (or None)."""
        return self._connection

    def set_connection(self, connection, database_name: Optional[str] = None) -> None:
        """Adopt an already open connection."""
        self._connection = connection
        if database_name is not None:
            self._database_name = database_name

    @property
    def database_name(self) -> Optional[str]:
        return self._database_name

    def close(self) -> None:
        """Close the connection. Safe to call more than once."""
        if self._connection is not None:
            try:
                self._connection.close()
            finally:
                self._connection = None
                self._last_statement = None
                logger.info("MySQL connection closed.")

    def __enter__(self) -> "MySqlDatabase":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @contextmanager
    def transaction(self) -> Iterator["MySqlDatabase"]:
        """
        Run the enclosed calls in one driver transaction.

        Commits on normal exit, rolls back and re-raises on any exception.
        """
        conn = self._require_connection()
        conn.start_transaction()
        try:
            yield self
        except Exception:
            conn.rollback()
            logger.warning("Transaction rolled back.")
            raise
        conn.commit()

    # ── MODES ─────────────────────────────────────────────

    @property
    def fetch_mode(self) -> str:
        return self._fetch_mode

    def set_array_fetch_mode(self, mode: str = FETCH_ASSOC) -> None:
        """Set the default row shape: 'assoc', 'num' or 'both'. Unknown -> 'assoc'."""
        self._fetch_mode = normalize_fetch_mode(mode)

    @property
    def error_mode(self) -> str:
        return self._error_mode

    def set_error_mode(self, mode: str = ERRMODE_SILENT) -> None:
        """
        'exception' raises DatabaseError on driver failures. 'silent' logs
        them and returns the call's failure sentinel instead.
        """
        self._error_mode = ERRMODE_SILENT if mode == ERRMODE_SILENT else ERRMODE_EXCEPTION

    def get_last_statement(self):
        """The cursor used by the most recent call."""
        return self._last_statement

    # ── EXECUTION ─────────────────────────────────────────

    def _require_connection(self):
        if self._connection is None:
            raise RuntimeError("MySQL connection not open. Call connect() first.")
        return self._connection

    def _fail(self, error: Exception, sql: str) -> None:
        logger.error(f"Query failed: {error} | SQL: {sql}")
        if self._error_mode == ERRMODE_EXCEPTION:
            raise DatabaseError.from_driver(error, sql) from error

    def _execute(self, sql: str, bind: Any = ()):
        """Run a statement and return its cursor, or None on a silent failure."""
        driver_sql, values = to_driver_format(sql, normalize_params(bind))
        cursor = self._require_connection().cursor(buffered=True)
        self._last_statement = cursor
        logger.debug(f"SQL: {sql} | params: {values}")
        try:
            cursor.execute(driver_sql, values)
        except mysql.connector.Error as e:
            cursor.close()
            self._fail(e, sql)
            return None
        return cursor

    def _fetch_all(self, sql: str, bind: Any = ()):
        """Return ``(columns, rows)`` or None on a silent failure."""
        cursor = self._execute(sql, bind)
        if cursor is None:
            return None
        try:
            columns = [d[0] for d in cursor.description or ()]
            rows = cursor.fetchall() if columns else []
        except mysql.connector.Error as e:
            self._fail(e, sql)
            return None
        finally:
            cursor.close()
        return columns, rows

    def execute_non_query(self, sql: str, bind: Any = ()):
        """
        Execute an INSERT / UPDATE / DELETE or DDL statement.

        Returns:
            The affected row count, or False if execution failed in
            silent error mode.
        """
        cursor = self._execute(sql, bind)
        if cursor is None:
            return False
        count = cursor.rowcount
        cursor.close()
        return count

    def execute_direct(self, sql: str):
        """
        Execute raw SQL with no bind parameters at all.

        The text is sent as is: only use it with trusted, already escaped
        input. Returns the affected row count or False (silent mode).
        """
        cursor = self._require_connection().cursor(buffered=True)
        self._last_statement = cursor
        logger.debug(f"SQL (direct): {sql}")
        try:
            cursor.execute(sql)
            return cursor.rowcount
        except mysql.connector.Error as e:
            self._fail(e, sql)
            return False
        finally:
            cursor.close()

    def query(self, sql: str, bind: Any = ()):
        """Execute a statement and hand back the open cursor (None in silent mode on failure)."""
        return self._execute(sql, bind)

    def call_procedure(self, name: str, params: Any = (), fetch_mode: Optional[str] = None) -> list:
        """
        Call a stored procedure and return the rows of its first result set.

        Args:
            name: Procedure name (optionally schema qualified).
            params: Positional arguments, or a mapping whose values are
                passed in insertion order.
            fetch_mode: Row shape override for this call.
        """
        if _blank(name):
            return []
        name = name.strip()
        if not _PROCEDURE_NAME.match(name):
            raise InvalidQueryError(f"Invalid procedure name: {name!r}")

        params = normalize_params(params)
        args = list(params.values()) if isinstance(params, Mapping) else list(params)
        mode = normalize_fetch_mode(fetch_mode) if fetch_mode else self._fetch_mode

        cursor = self._require_connection().cursor(buffered=True)
        self._last_statement = cursor
        logger.debug(f"CALL {name} | params: {args}")
        try:
            cursor.callproc(name, args)
            for result in cursor.stored_results():
                columns = [d[0] for d in result.description or ()]
                return [shape_row(columns, row, mode) for row in result.fetchall()]
            return []
        except mysql.connector.Error as e:
            self._fail(e, f"CALL {name}")
            return []
        finally:
            cursor.close()

    # ── ARRAYS ────────────────────────────────────────────

    def get_rows(self, sql: str, bind: Any = (), fetch_mode: Optional[str] = None) -> list:
        """
        Fetch every row of a SELECT.

        Args:
            sql: The statement.
            bind: Positional or named bind values.
            fetch_mode: Row shape override; defaults to the connection's mode.

        Returns:
            List of rows (dicts, lists or dual-keyed dicts).
        """
        mode = normalize_fetch_mode(fetch_mode) if fetch_mode else self._fetch_mode
        result = self._fetch_all(sql, bind)
        if result is None:
            return []
        columns, rows = result
        return [shape_row(columns, row, mode) for row in rows]

    def get_first_row(self, sql: str, bind: Any = (), fetch_mode: Optional[str] = None):
        """The first row of ``get_rows``; an empty dict (empty list in 'num' mode) if none."""
        rows = self.get_rows(sql, bind, fetch_mode)
        if rows:
            return rows[0]
        mode = normalize_fetch_mode(fetch_mode) if fetch_mode else self._fetch_mode
        return [] if mode == FETCH_NUM else {}

    # ── OBJECTS ───────────────────────────────────────────

    def get_object_list(self, sql: str, bind: Any = (), cls: type = SimpleNamespace) -> list:
        """Fetch every row mapped onto ``cls`` (see ``db.rows.map_object``)."""
        return [map_object(cls, row) for row in self.get_rows(sql, bind, FETCH_ASSOC)]

    def get_first_object(self, sql: str, bind: Any = (), cls: type = SimpleNamespace):
        """The first mapped object, or None when the query returns no rows."""
        objects = self.get_object_list(sql, bind, cls)
        return objects[0] if objects else None

    # ── SCALARS & COLUMNS ─────────────────────────────────

    def get_scalar(self, sql: str, bind: Any = ()) -> Optional[str]:
        """
        Return the first column of the first row as a string.

        None when there are no rows or the value is SQL NULL. The
        connection's default fetch mode is not touched.
        """
        result = self._fetch_all(sql, bind)
        if not result or not result[1]:
            return None
        return _to_text(result[1][0][0])

    def get_column(self, sql: str, bind: Any = (), col_index: int = 0) -> list:
        """Values of one column (by index, default 0) across all rows."""
        col_index = max(int(col_index), 0)
        result = self._fetch_all(sql, bind)
        if result is None:
            return []
        columns, rows = result
        if rows and col_index >= len(columns):
            raise InvalidQueryError(
                f"Column index {col_index} out of range for {len(columns)} column(s)"
            )
        return [row[col_index] for row in rows]

    def get_key_value_pairs(self, sql: str, bind: Any = ()) -> dict:
        """
        Map the first projected column to the second.

        The statement must select exactly two columns. When a key repeats,
        the value from the last row wins.
        """
        result = self._fetch_all(sql, bind)
        if result is None:
            return {}
        columns, rows = result
        if len(columns) != 2:
            raise InvalidQueryError(
                f"Key/value fetch needs exactly 2 columns, got {len(columns)}"
            )
        return {key: value for key, value in rows}

    # ── AGGREGATES ────────────────────────────────────────

    def _aggregate(self, func: str, table: str, column: str):
        if _blank(table) or _blank(column):
            logger.debug(f"Skipped {func}(): blank table or column")
            return False
        sql = f"select {func}({quote_identifier(column)}) from {quote_identifier(table)}"
        return self.get_scalar(sql)

    def get_avg_column_value(self, table: str, column: str):
        return self._aggregate("avg", table, column)

    def get_max_column_value(self, table: str, column: str):
        return self._aggregate("max", table, column)

    def get_min_column_value(self, table: str, column: str):
        return self._aggregate("min", table, column)

    def get_total_column_value(self, table: str, column: str):
        return self._aggregate("sum", table, column)

    def does_value_exist(self, table: str, column: str, value: Any) -> Optional[bool]:
        """
        True if at least one row has ``column = value``.

        Returns None when the table or column name is blank.
        """
        if _blank(table) or _blank(column):
            return None
        sql = (
            f"select count(*) from {quote_identifier(table)} "
            f"where {quote_identifier(column)} = ?"
        )
        count = self.get_scalar(sql, (value,))
        return int(count or 0) > 0

    def get_last_insert_id(self) -> Optional[str]:
        """The AUTO_INCREMENT id generated by the last insert on this connection."""
        return self.get_scalar("select last_insert_id()")

    # ── TABLE HELPERS ─────────────────────────────────────

    def insert_data(self, table: str, data: Optional[Mapping[str, Any]]):
        """
        Insert one row from a column -> value mapping.

        Returns:
            The affected row count, or False on a blank table / empty data.
        """
        stmt = build_insert(table, data)
        if stmt is None:
            logger.debug(f"Skipped insert: blank table or no data ({table!r})")
            return False
        return self.execute_non_query(stmt.sql, stmt.params)

    def update_data(self, table: str, data: Optional[Mapping[str, Any]],
                    where_clause: str = "", where_bind: Any = ()):
        """
        Update rows matching ``where_clause`` (positional ``?`` placeholders).

        Returns:
            The affected row count, or None on a blank table, empty data
            or blank WHERE clause.
        """
        stmt = build_update(table, data, where_clause, where_bind)
        if stmt is None:
            logger.debug(f"Skipped update: blank table, data or where clause ({table!r})")
            return None
        return self.execute_non_query(stmt.sql, stmt.params)

    def delete_data(self, table: str, where_clause: str = "", where_bind: Any = ()):
        """Delete rows matching ``where_clause``. None without a table or WHERE clause."""
        stmt = build_delete(table, where_clause, where_bind)
        if stmt is None:
            logger.debug(f"Skipped delete: blank table or where clause ({table!r})")
            return None
        return self.execute_non_query(stmt.sql, stmt.params)

    def truncate_table(self, table: str):
        stmt = build_truncate(table)
        if stmt is None:
            return False
        return self.execute_non_query(stmt.sql)

    def disable_foreign_key_check(self, disabled: bool = True):
        return self.execute_non_query(f"SET FOREIGN_KEY_CHECKS = {0 if disabled else 1}")

    def select_rows_from_table(
        self,
        table: str,
        fields: str = "*",
        filter_clause: str = "",
        filter_bind: Any = (),
        sort_by: Optional[Mapping[str, str]] = None,
        offset: int = -1,
        limit: int = 10,
        fetch_mode: Optional[str] = None,
    ) -> list:
        """Build a SELECT with ``build_select`` and return its rows ([] on a blank table)."""
        sql = build_select(table, fields, filter_clause, sort_by, offset, limit)
        if sql is None:
            return []
        return self.get_rows(sql, filter_bind, fetch_mode)

    def select_objects_from_table(
        self,
        table: str,
        fields: str = "*",
        filter_clause: str = "",
        filter_bind: Any = (),
        sort_by: Optional[Mapping[str, str]] = None,
        offset: int = -1,
        limit: int = 10,
        cls: type = SimpleNamespace,
    ) -> list:
        """Like ``select_rows_from_table`` but maps each row onto ``cls``."""
        sql = build_select(table, fields, filter_clause, sort_by, offset, limit)
        if sql is None:
            return []
        return self.get_object_list(sql, filter_bind, cls)

    # ── DEBUG ─────────────────────────────────────────────

    @staticmethod
    def interpolate_query(query: str, params: Any) -> str:
        """Inline quoted values into ``query`` for logging. Never execute the result."""
        return interpolate_query(query, params)
