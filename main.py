"""
main.py
-------
Entry point for the Beaver Online data layer.

Responsibilities:
    - Open the shared MySQL connection from the .env settings.
    - Log a short schema summary (tables and their columns).
    - Build and log the product navigation menu for NAV_AREA.
"""

from config import NAV_AREA
from db.connection import close_instance, init_instance
from db.schema import SchemaInspector
from services.navigation_service import NavigationService
from utils.logger import get_logger

logger = get_logger(__name__)


def log_schema_summary(inspector: SchemaInspector) -> None:
    """Log every base table with its columns in declared order."""
    tables = inspector.get_table_names()
    logger.info(f"{len(tables)} table(s) in '{inspector.db.database_name}'")
    for table in tables:
        columns = inspector.get_column_names(table)
        logger.info(f"  {table}: {', '.join(columns)}")


def log_navigation(service: NavigationService, area: str) -> None:
    """Log the navigation menu of one site area."""
    for entry in service.build_menu(area):
        logger.info(f"  {entry}")
        for child in entry.children:
            logger.info(f"    - {child}")


def main() -> None:
    """Connect, report, and always release the connection."""
    db = init_instance()
    try:
        log_schema_summary(SchemaInspector(db))
        log_navigation(NavigationService(), NAV_AREA)
    finally:
        close_instance()


if __name__ == "__main__":
    main()
