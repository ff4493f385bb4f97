"""
DataForge Base - Schema description and SQL generation for MySQL, MariaDB and SQLite
"""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("dataforge-base")
except PackageNotFoundError:
    # Package not installed
    __version__ = "0.1.0"

from .data_types import DatabaseType, DataType, resolve_data_type
from .schema import ColumnBuilder, ColumnSchema, ForeignReference, TableSchema
from .models import DatabaseRecord, DatabaseResult, DatabaseValue, transient
from .connection import Connection, ConnectionHandle, DbApiConnection, PreparedStatement, Rowset
from .config import ConnectionSettings, load_connection_settings
from .database import Database
from .exceptions import (
    ConnectionFailedError,
    DataForgeError,
    MappingError,
    MissingDriverError,
    NotConnectedError,
    StatementError,
    UnsupportedDatabaseTypeError,
    UnsupportedDataTypeError,
    UnsupportedFeatureError,
)

__all__ = [
    "__version__",
    "Database",
    "DatabaseType",
    "DataType",
    "resolve_data_type",
    "ColumnBuilder",
    "ColumnSchema",
    "ForeignReference",
    "TableSchema",
    "DatabaseRecord",
    "DatabaseResult",
    "DatabaseValue",
    "transient",
    "Connection",
    "ConnectionHandle",
    "DbApiConnection",
    "PreparedStatement",
    "Rowset",
    "ConnectionSettings",
    "load_connection_settings",
    "ConnectionFailedError",
    "DataForgeError",
    "MappingError",
    "MissingDriverError",
    "NotConnectedError",
    "StatementError",
    "UnsupportedDatabaseTypeError",
    "UnsupportedDataTypeError",
    "UnsupportedFeatureError",
]
