"""
Database Dialects - Database-specific SQL syntax and driver handling

Usage:
    from dataforge_base.dialects import DialectFactory

    dialect = DialectFactory.create("sqlite")
    ddl = dialect.create_table_statement(users)
"""

from .base import DatabaseDialect
from .factory import DialectFactory

from .mysql_dialect import MariaDBDialect, MySQLDialect
from .sqlite_dialect import SQLiteDialect

__all__ = [
    # Base classes
    "DatabaseDialect",

    # Factory
    "DialectFactory",

    # Implementations
    "MySQLDialect",
    "MariaDBDialect",
    "SQLiteDialect",
]
