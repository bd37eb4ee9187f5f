"""
repositories/product_repo.py
-----------------------------
Data access layer for product navigation.
Calls the NavMain / NavList stored procedures and returns their rows verbatim.
"""

from typing import Optional

from db.connection import get_instance
from db.mysql_database import MySqlDatabase
from utils.logger import get_logger

logger = get_logger(__name__)


class ProductRepository:
    """Repository for product navigation lookups."""

    def __init__(self, db: Optional[MySqlDatabase] = None):
        self.db = db if db is not None else get_instance()

    def get_main_products(self, area: str) -> list[dict]:
        """
        Top-level product entries for a site area.

        Args:
            area: Site area the menu belongs to.

        Returns:
            Rows of ``NavMain(:Area)``.
        """
        return self.db.call_procedure("NavMain", {"Area": area})

    def get_sub_products(self, area: str, callname: str) -> list[dict]:
        """
        Entries listed under one top-level product.

        Args:
            area: Site area the menu belongs to.
            callname: The parent entry's call name.

        Returns:
            Rows of ``NavList(:Area, :Callname)``.
        """
        return self.db.call_procedure("NavList", {"Area": area, "Callname": callname})
