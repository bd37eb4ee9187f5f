"""
db/schema.py
------------
Table and column introspection through MySQL's information_schema.
"""

from typing import Optional

from db.mysql_database import MySqlDatabase
from db.rows import FETCH_ASSOC


class SchemaInspector:
    """Reads table and column metadata for the schema a MySqlDatabase is bound to."""

    def __init__(self, db: MySqlDatabase):
        self.db = db

    def _schema(self, database: Optional[str]) -> Optional[str]:
        database = (database or "").strip()
        return database or self.db.database_name

    def get_table_names(self, database: Optional[str] = None) -> list[str]:
        """
        List the base tables of a schema, sorted by name.

        Args:
            database: Schema name. Blank means the connection's database.
        """
        schema = self._schema(database)
        if not schema:
            return []
        sql = (
            "select TABLE_NAME from information_schema.TABLES "
            "where TABLE_SCHEMA = ? and TABLE_TYPE = 'BASE TABLE' "
            "order by TABLE_NAME"
        )
        return self.db.get_column(sql, (schema,), 0)

    def get_column_names(
        self, table: str, database: Optional[str] = None, sort_by: str = "position"
    ) -> list[str]:
        """
        List the columns of a table.

        Args:
            table: Table name. Blank returns [].
            database: Schema name. Blank means the connection's database.
            sort_by: 'name' for alphabetical order, anything else for the
                declared (ordinal) order.
        """
        table = (table or "").strip()
        schema = self._schema(database)
        if not table or not schema:
            return []
        order = "COLUMN_NAME" if sort_by == "name" else "ORDINAL_POSITION"
        sql = (
            "select COLUMN_NAME from information_schema.COLUMNS "
            f"where TABLE_SCHEMA = ? and TABLE_NAME = ? order by {order}"
        )
        return self.db.get_column(sql, (schema, table), 0)

    def get_column_details(self, table: str, database: Optional[str] = None) -> list[dict]:
        """Full information_schema.COLUMNS rows for a table, in ordinal order."""
        table = (table or "").strip()
        schema = self._schema(database)
        if not table or not schema:
            return []
        sql = (
            "select * from information_schema.COLUMNS "
            "where TABLE_SCHEMA = ? and TABLE_NAME = ? order by ORDINAL_POSITION"
        )
        return self.db.get_rows(sql, (schema, table), FETCH_ASSOC)
