"""
Base Database Dialect - Abstract base class for database-specific SQL

Dialects handle database-specific differences such as:
- Auto-increment and unique key keywords (AUTO_INCREMENT vs AUTOINCREMENT)
- CREATE OR REPLACE support
- Type fallbacks (VARCHAR vs TEXT)
- Driver loading, connect arguments and parameter style
- Catalog queries (information_schema vs sqlite_master)
"""

import importlib
from abc import ABC, abstractmethod
from decimal import Decimal
from types import ModuleType
from typing import TYPE_CHECKING, Any, Dict

from ..data_types import DatabaseType, DataType, resolve_data_type
from ..exceptions import ConnectionFailedError, MissingDriverError, UnsupportedFeatureError
from ..constants import foreign_key_name
from ..utils.connection_error_handler import parse_connection_error

if TYPE_CHECKING:
    from ..config import ConnectionSettings
    from ..schema import ColumnSchema, TableSchema

import logging
logger = logging.getLogger(__name__)


class DatabaseDialect(ABC):
    """
    Abstract base class for database dialects.

    Each dialect knows how to:
    1. Compile schema objects to DDL for its database type
    2. Load its driver and open a DB-API connection
    3. Render literals for statement logs

    Usage:
        dialect = DialectFactory.create("sqlite")
        sql = dialect.create_table_statement(users)
    """

    # ==================== Identity ====================

    @property
    @abstractmethod
    def database_type(self) -> DatabaseType:
        """Database type handled by this dialect."""
        pass

    @property
    @abstractmethod
    def driver_module(self) -> str:
        """Import name of the DB-API driver module."""
        pass

    @property
    @abstractmethod
    def paramstyle(self) -> str:
        """DB-API parameter style the driver expects ("qmark" or "format")."""
        pass

    # ==================== Syntax ====================

    @property
    @abstractmethod
    def auto_increment_keyword(self) -> str:
        pass

    @property
    def unique_key_keyword(self) -> str:
        return "UNIQUE"

    @property
    def supports_or_replace(self) -> bool:
        """Whether CREATE OR REPLACE TABLE is available."""
        return False

    @abstractmethod
    def escape_string(self, text: str) -> str:
        """Escape text for use between single quotes."""
        pass

    def format_literal(self, value: Any) -> str:
        """
        Render a value as an SQL literal.

        Only used to display statements (logs, error messages); execution
        always binds values as parameters.
        """
        if value is None:
            return "NULL"
        if isinstance(value, bool):
            return "1" if value else "0"
        if isinstance(value, (int, float, Decimal)):
            return str(value)
        if isinstance(value, (bytes, bytearray, memoryview)):
            return f"X'{bytes(value).hex()}'"
        return f"'{self.escape_string(str(value))}'"

    # ==================== DDL ====================

    def resolve_type(self, data_type: DataType) -> DataType:
        return resolve_data_type(data_type, self.database_type)

    def format_default(self, value: Any) -> str:
        """
        Render a DEFAULT value.

        Numbers are emitted as-is, everything else is single-quoted without
        escaping, so defaults must not contain quotes.
        """
        if isinstance(value, bool):
            return "1" if value else "0"
        if isinstance(value, (int, float, Decimal)):
            return str(value)
        return f"'{value}'"

    def _check_column(self, column: "ColumnSchema", data_type: DataType) -> None:
        """Hook for database-specific column restrictions."""

    def _size_suffix(self, column: "ColumnSchema", data_type: DataType) -> str:
        """
        Render the "(size)" suffix of a column.

        The size is kept on every native type, sized or not (TEXT(100),
        FLOAT(7,4)). It is only dropped when a fallback replaced the declared
        type with one that takes no size, such as VARCHAR(20) becoming TEXT.
        """
        if column.size is None:
            return ""
        if data_type is not column.data_type and not data_type.sized:
            logger.debug(
                f"Dropping size of column '{column.name}': fallback {data_type} takes none"
            )
            return ""
        return f"({column.size})"

    def column_definition(self, column: "ColumnSchema") -> str:
        """
        Compile a column definition for CREATE TABLE.

        Raises:
            UnsupportedDataTypeError: Unknown column type
            UnsupportedDatabaseTypeError: Type has no mapping on this database
            UnsupportedFeatureError: Constraint combination not expressible
        """
        data_type = self.resolve_type(column.data_type)
        column.validate()
        self._check_column(column, data_type)

        sql = f"{column.name} {data_type.sql_name}{self._size_suffix(column, data_type)}"

        if column.not_null:
            sql += " NOT NULL"
        if column.primary_key:
            sql += " PRIMARY KEY"
        elif column.unique_key:
            sql += f" {self.unique_key_keyword}"
        if column.auto_increment:
            sql += f" {self.auto_increment_keyword}"
        if column.default is not None:
            sql += f" DEFAULT {self.format_default(column.default)}"

        return sql

    def foreign_key_constraint(self, table: "TableSchema", column: "ColumnSchema") -> str:
        """Compile the named FOREIGN KEY constraint for a referencing column."""
        reference = column.foreign_key
        name = foreign_key_name(table.name, reference.table.name, column.name)
        return (
            f"CONSTRAINT {name} FOREIGN KEY ({column.name}) "
            f"REFERENCES {reference.table.name}({reference.column.name})"
        )

    def create_table_statement(self, table: "TableSchema") -> str:
        """
        Compile a CREATE TABLE statement.

        Raises:
            UnsupportedFeatureError: OR REPLACE on a database without it, a table
                without columns, or clashing foreign key names
        """
        if table.or_replace and not self.supports_or_replace:
            raise UnsupportedFeatureError("CREATE TABLE OR REPLACE", self.database_type)
        if len(table) == 0:
            raise UnsupportedFeatureError(f"CREATE TABLE '{table.name}' without columns")

        if table.if_not_exists:
            sql = "CREATE TABLE IF NOT EXISTS "
        elif table.or_replace:
            sql = "CREATE OR REPLACE TABLE "
        else:
            sql = "CREATE TABLE "

        definitions = [self.column_definition(column) for column in table]

        constraint_names = set()
        for column in table.foreign_key_columns():
            name = foreign_key_name(table.name, column.foreign_key.table.name, column.name)
            if name in constraint_names:
                raise UnsupportedFeatureError(f"Duplicate foreign key constraint name '{name}'")
            constraint_names.add(name)
            definitions.append(self.foreign_key_constraint(table, column))

        sql += f"{table.name} ( {', '.join(definitions)} );"
        logger.debug(f"Compiled {self.database_type} DDL: {sql}")
        return sql

    def drop_table_statement(self, table: "TableSchema") -> str:
        return f"DROP TABLE {table.name}"

    # ==================== Driver / Connection ====================

    def load_driver(self) -> ModuleType:
        """
        Import the driver module.

        Raises:
            MissingDriverError: The driver is not installed
        """
        try:
            return importlib.import_module(self.driver_module)
        except ImportError:
            logger.error(f"Driver '{self.driver_module}' not available for {self.database_type}")
            raise MissingDriverError(self.database_type, self.driver_module) from None

    @abstractmethod
    def connect_kwargs(self, settings: "ConnectionSettings",
                       username: str, password: str) -> Dict[str, Any]:
        """Keyword arguments for driver.connect()."""
        pass

    def on_connect(self, raw_connection: Any) -> None:
        """Hook run on every freshly opened driver connection."""

    def open_connection(self, settings: "ConnectionSettings",
                        username: str = "", password: str = "") -> Any:
        """
        Open a DB-API connection.

        Raises:
            MissingDriverError: The driver is not installed
            ConnectionFailedError: The driver rejected the connection
        """
        driver = self.load_driver()
        kwargs = self.connect_kwargs(settings, username, password)
        try:
            raw_connection = driver.connect(**kwargs)
            self.on_connect(raw_connection)
        except driver.Error as e:
            info = parse_connection_error(e, self.database_type.value)
            logger.error(f"Connection to {self.database_type} failed: {info.format_short()}")
            raise ConnectionFailedError(info.format_short(), info) from e
        return raw_connection

    @abstractmethod
    def ping(self, raw_connection: Any, timeout: float) -> bool:
        """Check that a driver connection is still usable."""
        pass

    @abstractmethod
    def list_tables_query(self) -> str:
        """Query returning table names (first column) matching one LIKE pattern bound to ``?``."""
        pass
