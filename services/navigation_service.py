"""
services/navigation_service.py
------------------------------
Builds the product navigation menu for a site area.
"""

from typing import Optional

from models.navigation import NavMenuEntry
from repositories.product_repo import ProductRepository
from utils.logger import get_logger

logger = get_logger(__name__)


class NavigationService:
    """
    Combines NavMain and NavList results into a two-level menu.

    Args:
        repo: Product repository to read from.
        callname_column: NavMain column holding the key passed to NavList.
        title_column: NavMain column holding the display text.
    """

    def __init__(
        self,
        repo: Optional[ProductRepository] = None,
        callname_column: str = "Callname",
        title_column: str = "Name",
    ):
        self.repo = repo if repo is not None else ProductRepository()
        self.callname_column = callname_column
        self.title_column = title_column

    def _column(self, row: dict, column: str):
        if column in row:
            return row[column]
        lowered = column.lower()
        for key, value in row.items():
            if str(key).lower() == lowered:
                return value
        return None

    def build_menu(self, area: str) -> list[NavMenuEntry]:
        """
        Build the menu for ``area``.

        Entries without a call name are kept but get no sub entries.
        """
        entries = []
        for row in self.repo.get_main_products(area):
            callname = self._column(row, self.callname_column)
            title = self._column(row, self.title_column)
            entry = NavMenuEntry(
                callname="" if callname is None else str(callname),
                row=row,
                title=None if title is None else str(title),
            )
            if entry.callname:
                entry.children = self.repo.get_sub_products(area, entry.callname)
            entries.append(entry)
        logger.info(f"Built navigation menu for '{area}' with {len(entries)} entries")
        return entries
