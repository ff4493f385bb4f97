"""
Canonical data types and their resolution per database type.

A column is declared once with a canonical DataType. At DDL time the type is
resolved against the target database: a type that the database supports
natively is kept, otherwise a fixed per-database fallback is used (for
example VARCHAR becomes TEXT on SQLite). Types with neither are rejected.
"""
from enum import Enum
from typing import Dict, FrozenSet, Union

from .exceptions import UnsupportedDatabaseTypeError, UnsupportedDataTypeError

import logging
logger = logging.getLogger(__name__)


class DatabaseType(Enum):
    """Database backends handled by this library."""
    MYSQL = "mysql"
    MARIADB = "mariadb"
    SQLITE = "sqlite"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    def __str__(self) -> str:
        return self.display_name

    @classmethod
    def parse(cls, value: Union["DatabaseType", str]) -> "DatabaseType":
        """
        Convert a name such as "MySQL", "mariadb" or "sqlite3" to a DatabaseType.

        Raises:
            ValueError: If the name is not a known database type
        """
        if isinstance(value, DatabaseType):
            return value
        key = str(value).strip().lower()
        key = _ALIASES.get(key, key)
        try:
            return cls(key)
        except ValueError:
            raise ValueError(f"Unknown database type: {value!r}") from None


_DISPLAY_NAMES = {
    DatabaseType.MYSQL: "MySQL",
    DatabaseType.MARIADB: "MariaDB",
    DatabaseType.SQLITE: "SQLite",
}

_ALIASES = {
    "sqlite3": "sqlite",
    "maria": "mariadb",
}

_ALL = frozenset(DatabaseType)
_SERVERS = frozenset({DatabaseType.MYSQL, DatabaseType.MARIADB})


class DataType(Enum):
    """
    Canonical column types.

    Each member carries the database types it is native on and whether a
    declared size/precision such as VARCHAR(20) or DECIMAL(10,2) carries over
    when the type stands in as a fallback.
    """
    NULL = ("NULL", _ALL, False)
    INTEGER = ("INTEGER", _ALL, True)
    TINYINT = ("TINYINT", _SERVERS, True)
    SMALLINT = ("SMALLINT", _SERVERS, True)
    BIGINT = ("BIGINT", _SERVERS, True)
    BOOLEAN = ("BOOLEAN", _SERVERS, False)
    # Single precision on MySQL/MariaDB, 8-byte REAL on SQLite
    FLOAT = ("FLOAT", _ALL, False)
    DOUBLE = ("DOUBLE", _SERVERS, False)
    REAL = ("REAL", frozenset({DatabaseType.SQLITE}), False)
    DECIMAL = ("DECIMAL", _SERVERS, True)
    NUMERIC = ("NUMERIC", _ALL, True)
    CHAR = ("CHAR", _SERVERS, True)
    VARCHAR = ("VARCHAR", _SERVERS, True)
    TEXT = ("TEXT", _ALL, False)
    MEDIUMTEXT = ("MEDIUMTEXT", _SERVERS, False)
    LONGTEXT = ("LONGTEXT", _SERVERS, False)
    BLOB = ("BLOB", _ALL, False)
    DATE = ("DATE", _SERVERS, False)
    TIME = ("TIME", _SERVERS, True)
    DATETIME = ("DATETIME", _SERVERS, True)
    TIMESTAMP = ("TIMESTAMP", _SERVERS, True)
    JSON = ("JSON", _SERVERS, False)
    UUID = ("UUID", frozenset({DatabaseType.MARIADB}), False)
    GEOMETRY = ("GEOMETRY", _SERVERS, False)

    def __init__(self, sql_name: str, native_types: FrozenSet[DatabaseType], sized: bool):
        self.sql_name = sql_name
        self.native_types = native_types
        self.sized = sized

    def __str__(self) -> str:
        return self.sql_name

    def supports_database_type(self, database_type: DatabaseType) -> bool:
        """Whether this type can be used as-is on the database type."""
        return database_type in self.native_types

    @classmethod
    def parse(cls, value: Union["DataType", str]) -> "DataType":
        """
        Convert a type name such as "varchar" to a DataType.

        Raises:
            UnsupportedDataTypeError: If the value is not a canonical type
        """
        if isinstance(value, DataType):
            return value
        if isinstance(value, str):
            member = cls.__members__.get(value.strip().upper())
            if member is not None:
                return member
        raise UnsupportedDataTypeError(value)


# Per-database replacements for types that are not native there
_FALLBACKS: Dict[DatabaseType, Dict[DataType, DataType]] = {
    DatabaseType.MYSQL: {
        DataType.REAL: DataType.DOUBLE,
        DataType.UUID: DataType.TEXT,
    },
    DatabaseType.MARIADB: {
        DataType.REAL: DataType.DOUBLE,
    },
    DatabaseType.SQLITE: {
        DataType.TINYINT: DataType.INTEGER,
        DataType.SMALLINT: DataType.INTEGER,
        DataType.BIGINT: DataType.INTEGER,
        DataType.BOOLEAN: DataType.INTEGER,
        DataType.DOUBLE: DataType.REAL,
        DataType.DECIMAL: DataType.NUMERIC,
        DataType.CHAR: DataType.TEXT,
        DataType.VARCHAR: DataType.TEXT,
        DataType.MEDIUMTEXT: DataType.TEXT,
        DataType.LONGTEXT: DataType.TEXT,
        DataType.DATE: DataType.TEXT,
        DataType.TIME: DataType.TEXT,
        DataType.DATETIME: DataType.TEXT,
        DataType.TIMESTAMP: DataType.TEXT,
        DataType.JSON: DataType.TEXT,
        DataType.UUID: DataType.TEXT,
    },
}


def fallback_for(data_type: DataType, database_type: DatabaseType):
    """Return the fallback type registered for a database type, or None."""
    return _FALLBACKS.get(database_type, {}).get(data_type)


def resolve_data_type(data_type: Union[DataType, str],
                      database_type: Union[DatabaseType, str]) -> DataType:
    """
    Resolve a canonical type to one the database type can store.

    Args:
        data_type: Canonical type (or its name)
        database_type: Target database type (or its name)

    Returns:
        data_type itself when native, otherwise its fallback

    Raises:
        UnsupportedDataTypeError: data_type is not a canonical type
        UnsupportedDatabaseTypeError: no native type and no fallback
    """
    data_type = DataType.parse(data_type)
    database_type = DatabaseType.parse(database_type)

    if data_type.supports_database_type(database_type):
        return data_type

    fallback = fallback_for(data_type, database_type)
    if fallback is None:
        raise UnsupportedDatabaseTypeError(data_type, database_type)

    logger.debug(f"{data_type} is not native on {database_type}, using {fallback}")
    return fallback
