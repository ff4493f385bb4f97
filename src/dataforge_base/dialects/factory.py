"""
Dialect Factory - Create appropriate dialect based on database type
"""

from typing import Dict, List, Type, Union

from ..data_types import DatabaseType
from .base import DatabaseDialect

import logging
logger = logging.getLogger(__name__)


class DialectFactory:
    """
    Factory for database dialects.

    Dialects hold no state, so one instance per database type is shared.

    Usage:
        dialect = DialectFactory.create("mariadb")
        sql = dialect.create_table_statement(users)
    """

    # Registry of supported database types
    _dialects: Dict[DatabaseType, Type[DatabaseDialect]] = {}
    _instances: Dict[DatabaseType, DatabaseDialect] = {}

    @classmethod
    def create(cls, db_type: Union[DatabaseType, str]) -> DatabaseDialect:
        """
        Get the dialect for a database type.

        Args:
            db_type: DatabaseType or name (mysql, mariadb, sqlite, ...)

        Raises:
            ValueError: No dialect registered for the type
        """
        database_type = DatabaseType.parse(db_type)

        dialect = cls._instances.get(database_type)
        if dialect is not None:
            return dialect

        dialect_class = cls._dialects.get(database_type)
        if dialect_class is None:
            logger.warning(f"No dialect for database type: {db_type}")
            raise ValueError(f"No dialect registered for {database_type}")

        dialect = dialect_class()
        cls._instances[database_type] = dialect
        return dialect

    @classmethod
    def is_supported(cls, db_type: Union[DatabaseType, str]) -> bool:
        """Check if a database type has a dialect."""
        try:
            return DatabaseType.parse(db_type) in cls._dialects
        except ValueError:
            return False

    @classmethod
    def supported_types(cls) -> List[DatabaseType]:
        return list(cls._dialects.keys())

    @classmethod
    def register(cls, db_type: Union[DatabaseType, str], dialect_class: Type[DatabaseDialect]):
        """
        Register (or replace) the dialect class of a database type.

        Args:
            db_type: Database type
            dialect_class: DatabaseDialect subclass
        """
        database_type = DatabaseType.parse(db_type)
        cls._dialects[database_type] = dialect_class
        cls._instances.pop(database_type, None)
        logger.debug(f"Registered dialect for: {database_type}")


def _register_default_dialects():
    """Register built-in dialects. Called on module import."""
    from .mysql_dialect import MariaDBDialect, MySQLDialect
    from .sqlite_dialect import SQLiteDialect

    DialectFactory.register(DatabaseType.MYSQL, MySQLDialect)
    DialectFactory.register(DatabaseType.MARIADB, MariaDBDialect)
    DialectFactory.register(DatabaseType.SQLITE, SQLiteDialect)


# Register on module import
_register_default_dialects()
