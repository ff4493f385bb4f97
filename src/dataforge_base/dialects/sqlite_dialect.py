"""
SQLite Dialect - SQLite-specific SQL operations
"""

from typing import Any, Dict

from ..constants import CONNECTION_TIMEOUT_S
from ..data_types import DatabaseType, DataType
from ..exceptions import UnsupportedFeatureError
from .base import DatabaseDialect

import logging
logger = logging.getLogger(__name__)


class SQLiteDialect(DatabaseDialect):
    """Dialect for SQLite databases."""

    @property
    def database_type(self) -> DatabaseType:
        return DatabaseType.SQLITE

    @property
    def driver_module(self) -> str:
        return "sqlite3"

    @property
    def paramstyle(self) -> str:
        return "qmark"

    @property
    def auto_increment_keyword(self) -> str:
        return "AUTOINCREMENT"

    def escape_string(self, text: str) -> str:
        return text.replace("'", "''")

    def _check_column(self, column, data_type: DataType) -> None:
        # SQLite only allows AUTOINCREMENT on an INTEGER PRIMARY KEY (rowid alias)
        if column.auto_increment and not (column.primary_key and data_type is DataType.INTEGER):
            raise UnsupportedFeatureError(
                f"AUTOINCREMENT on column '{column.name}' that is not an INTEGER PRIMARY KEY",
                self.database_type,
            )

    def _size_suffix(self, column, data_type: DataType) -> str:
        # The rowid alias must be declared exactly "INTEGER PRIMARY KEY"
        if column.auto_increment and column.primary_key:
            if column.size is not None:
                logger.debug(f"Dropping size of rowid alias column '{column.name}'")
            return ""
        return super()._size_suffix(column, data_type)

    def connect_kwargs(self, settings, username: str, password: str) -> Dict[str, Any]:
        """SQLite ignores credentials; the database setting is the file path."""
        kwargs = {
            "database": settings.database,
            "timeout": CONNECTION_TIMEOUT_S,
            "isolation_level": None,  # autocommit
        }
        kwargs.update(settings.options)
        return kwargs

    def on_connect(self, raw_connection: Any) -> None:
        raw_connection.execute("PRAGMA foreign_keys = ON")

    def ping(self, raw_connection: Any, timeout: float) -> bool:
        driver = self.load_driver()
        try:
            raw_connection.execute("SELECT 1")
            return True
        except driver.Error as e:
            logger.warning(f"{self.database_type} liveness check failed: {e}")
            return False

    def list_tables_query(self) -> str:
        return "SELECT name FROM sqlite_master WHERE type = 'table' AND name LIKE ?"
