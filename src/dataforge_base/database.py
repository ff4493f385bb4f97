"""
Database - execute schema and data operations against one database.

Usage:
    db = Database(DatabaseType.SQLITE, "shop.db").connect()
    db.create_table(users)
    db.insert(users, DatabaseValue("name", "Bob"))
    result = db.select(users, "name = ?", "Bob")
    db.disconnect()
"""
from pathlib import Path
from typing import Any, Dict, List, Optional, Type, TypeVar, Union

from .config import ConnectionSettings, load_connection_settings
from .connection import Connection, ConnectionHandle, PreparedStatement, Rowset
from .constants import DEFAULT_HOST, DEFAULT_SELECT_LIMIT
from .data_types import DatabaseType
from .dialects import DatabaseDialect
from .exceptions import MappingError, NotConnectedError
from .models.record import DatabaseRecord
from .models.result import DatabaseResult
from .models.value import DatabaseValue
from .schema import TableSchema
from .statements import (Statement, build_delete, build_delete_record, build_insert,
                         build_insert_record, build_select, build_update, build_update_record)

import logging
logger = logging.getLogger(__name__)

R = TypeVar("R")


class Database:
    """
    One database reached through one connection.

    Every operation except connect() raises NotConnectedError when the
    connection is missing or no longer answers a liveness probe.
    """

    def __init__(self, database_type: Union[DatabaseType, str], database: str,
                 host: str = DEFAULT_HOST, port: Optional[int] = None,
                 credential_id: Optional[str] = None,
                 options: Optional[Dict[str, Any]] = None):
        """
        Args:
            database_type: mysql, mariadb or sqlite
            database: Database name, or file path for SQLite
            host: Server host (ignored by SQLite)
            port: Server port, None for the driver default
            credential_id: Keyring entry holding the login
            options: Extra driver keyword arguments
        """
        settings = ConnectionSettings(
            database_type=database_type,
            database=database,
            host=host,
            port=port,
            credential_id=credential_id,
            options=dict(options or {}),
        )
        self._handle = ConnectionHandle(settings)

    @classmethod
    def from_settings(cls, settings: Union[ConnectionSettings, str, Path],
                      name: Optional[str] = None, **handle_kwargs) -> "Database":
        """
        Build a Database from ConnectionSettings or a YAML settings file.

        Args:
            settings: ConnectionSettings, or path of a YAML file
            name: Connection entry to pick from the file
            handle_kwargs: Passed to ConnectionHandle (connection_factory, ttl, clock, ...)
        """
        if not isinstance(settings, ConnectionSettings):
            settings = load_connection_settings(settings, name)
        db = cls.__new__(cls)
        db._handle = ConnectionHandle(settings, **handle_kwargs)
        return db

    # ==================== State ====================

    @property
    def settings(self) -> ConnectionSettings:
        return self._handle.settings

    @property
    def database_type(self) -> DatabaseType:
        return self._handle.settings.database_type

    @property
    def dialect(self) -> DatabaseDialect:
        return self._handle.dialect

    @property
    def handle(self) -> ConnectionHandle:
        return self._handle

    def connect(self, username: Optional[str] = None,
                password: Optional[str] = None) -> "Database":
        """
        Connect; a no-op when already connected. SQLite ignores credentials.

        Raises:
            MissingDriverError: The driver is not installed
            ConnectionFailedError: The database rejected the connection
        """
        self._handle.connect(username, password)
        return self

    def disconnect(self) -> None:
        self._handle.disconnect()

    def is_connected(self) -> bool:
        return self._handle.is_connected()

    def _connection(self) -> Connection:
        if not self._handle.is_connected():
            raise NotConnectedError()
        return self._handle.require_connection()

    def __enter__(self) -> "Database":
        return self.connect()

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.disconnect()
        return False

    # ==================== Execution ====================

    def _execute(self, statement: Statement) -> int:
        connection = self._connection()
        logger.debug(f"Executing: {statement.render(self.dialect)}")
        return connection.execute(statement.sql, statement.params)

    def _query(self, statement: Statement) -> DatabaseResult:
        connection = self._connection()
        logger.debug(f"Querying: {statement.render(self.dialect)}")
        return DatabaseResult.from_rowset(connection.execute_query(statement.sql, statement.params))

    @staticmethod
    def _record_table(record: Any, table: Optional[TableSchema]) -> TableSchema:
        if table is not None:
            return table
        if isinstance(record, DatabaseRecord):
            return record.table_schema()
        raise MappingError(
            f"{type(record).__name__} is not a DatabaseRecord; pass the table explicitly"
        )

    # ==================== Schema ====================

    def does_table_exist(self, table: TableSchema) -> bool:
        """Ask the catalog whether a table of this name exists (ignoring case)."""
        names = self._connection().list_tables(table.name)
        return any(name.lower() == table.name.lower() for name in names)

    def create_table(self, table: TableSchema, replace: bool = False) -> None:
        """
        Create a table.

        Args:
            table: Table to create
            replace: Drop an existing table of the same name first

        Raises:
            UnsupportedDatabaseTypeError: A column type has no mapping here
            UnsupportedFeatureError: The table uses a feature this database lacks
            StatementError: The database rejected the statement
        """
        if replace and self.does_table_exist(table):
            self.drop_table(table)
        sql = self.dialect.create_table_statement(table)
        self._execute(Statement(sql))
        logger.info(f"Created table '{table.name}'")

    def drop_table(self, table: TableSchema) -> None:
        self._execute(Statement(self.dialect.drop_table_statement(table)))
        logger.info(f"Dropped table '{table.name}'")

    # ==================== Insert ====================

    def insert(self, table: TableSchema, *values: DatabaseValue) -> int:
        """
        Insert one row.

        Raises:
            MappingError: Unknown column or non-scalar value
        """
        return self._execute(build_insert(table, values))

    def insert_record(self, record: Any, table: Optional[TableSchema] = None) -> int:
        """Insert a record; auto-increment primary keys are left to the database."""
        table = self._record_table(record, table)
        return self._execute(build_insert_record(table, record))

    # ==================== Select ====================

    def select(self, table: TableSchema, where: str = "", *args: Any,
               limit: int = DEFAULT_SELECT_LIMIT) -> DatabaseResult:
        """
        Select rows of table.

        Args:
            table: Table to read; its columns form the select list
            where: Condition using ``?`` placeholders, "" for all rows
            args: One argument per placeholder
            limit: Maximum row count, negative for no limit

        Raises:
            StatementError: Placeholder and argument counts differ, or the query failed
        """
        return self._query(build_select(table, where, args, limit))

    def select_all(self, table: TableSchema, limit: int = DEFAULT_SELECT_LIMIT) -> DatabaseResult:
        return self.select(table, limit=limit)

    def select_records(self, table: TableSchema, record_type: Type[R], where: str = "",
                       *args: Any, limit: int = DEFAULT_SELECT_LIMIT) -> List[R]:
        return self.select(table, where, *args, limit=limit).to_records(table, record_type)

    def select_all_records(self, table: TableSchema, record_type: Type[R],
                           limit: int = DEFAULT_SELECT_LIMIT) -> List[R]:
        return self.select_records(table, record_type, limit=limit)

    # ==================== Update ====================

    def update(self, table: TableSchema, *set_values: DatabaseValue,
               where: str = "", args: Any = ()) -> int:
        """
        Update rows of table.

        Args:
            set_values: New column values
            where: Condition using ``?`` placeholders, "" for all rows
            args: One argument per placeholder in where
        """
        return self._execute(build_update(table, set_values, where, tuple(args)))

    def update_record(self, record: Any, table: Optional[TableSchema] = None) -> int:
        """
        Write a record back to its row, located by primary key.

        Raises:
            MappingError: The record has no field mapped to a primary key
        """
        table = self._record_table(record, table)
        return self._execute(build_update_record(table, record))

    # ==================== Delete ====================

    def delete(self, table: TableSchema, where: str = "", *args: Any) -> int:
        """Delete rows matching where; every row when where is empty."""
        return self._execute(build_delete(table, where, args))

    def delete_record(self, record: Any, table: Optional[TableSchema] = None) -> int:
        """Delete the rows whose columns equal every mapped field of the record."""
        table = self._record_table(record, table)
        return self._execute(build_delete_record(table, record))

    # ==================== Raw SQL ====================

    def raw_execute(self, sql: str) -> bool:
        """Run any statement; True when it produced a result set."""
        logger.debug(f"Raw execute: {sql}")
        return isinstance(self._connection().execute_prepared(sql, ()), Rowset)

    def raw_query(self, sql: str) -> Rowset:
        logger.debug(f"Raw query: {sql}")
        return self._connection().execute_query(sql, ())

    def raw_update(self, sql: str) -> int:
        logger.debug(f"Raw update: {sql}")
        return self._connection().execute(sql, ())

    def raw_prepare(self, sql: str) -> PreparedStatement:
        return self._connection().prepare(sql)

    def __repr__(self) -> str:
        return f"Database({self.database_type}, {self.settings.database!r})"
