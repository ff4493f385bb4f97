"""
Table Schema - ordered column collection plus table options.

Column order is significant: it is the order of CREATE TABLE definitions,
of SELECT column lists and of positional row values.
"""
from typing import Iterator, List, Optional, Union

from ..data_types import DatabaseType
from .column import ColumnSchema

import logging
logger = logging.getLogger(__name__)


class TableSchema:
    """
    Schema of a table.

    Usage:
        users = TableSchema(
            "users",
            ColumnSchema("id", DataType.INTEGER, primary_key=True, auto_increment=True),
            ColumnSchema("name", DataType.VARCHAR, size=20),
        )
        sql = users.to_sql(DatabaseType.MYSQL)
    """

    def __init__(self, name: str, *columns: ColumnSchema,
                 if_not_exists: bool = False, or_replace: bool = False):
        """
        Args:
            name: Table name
            columns: Columns in declaration order
            if_not_exists: Emit CREATE TABLE IF NOT EXISTS (takes priority over or_replace)
            or_replace: Emit CREATE OR REPLACE TABLE (MariaDB only)
        """
        if not name or not name.strip():
            raise ValueError("Table name must not be empty")
        self.name = name
        self.if_not_exists = if_not_exists
        self.or_replace = or_replace
        self._columns: List[ColumnSchema] = []
        for column in columns:
            self.add_column(column)

    # ==================== Columns ====================

    @property
    def columns(self) -> List[ColumnSchema]:
        """Copy of the column list, in declaration order."""
        return list(self._columns)

    def column_names(self) -> List[str]:
        return [column.name for column in self._columns]

    def add_column(self, column: ColumnSchema) -> "TableSchema":
        """
        Append a column.

        Raises:
            ValueError: A column with the same name (ignoring case) exists
        """
        if self.get_column_ignore_case(column.name) is not None:
            raise ValueError(f"Table '{self.name}' already has a column named '{column.name}'")
        self._columns.append(column)
        return self

    def remove_column(self, column: Union[ColumnSchema, str]) -> "TableSchema":
        """Remove a column, given the column or its exact name. Missing columns are ignored."""
        name = column if isinstance(column, str) else column.name
        self._columns = [c for c in self._columns if c.name != name]
        return self

    def replace_column(self, column: ColumnSchema) -> "TableSchema":
        """
        Swap in a new version of the column with the same name (ignoring case).

        Raises:
            KeyError: No such column
        """
        for index, existing in enumerate(self._columns):
            if existing.name.lower() == column.name.lower():
                self._columns[index] = column
                return self
        raise KeyError(f"Table '{self.name}' has no column named '{column.name}'")

    def get_column(self, name: str) -> Optional[ColumnSchema]:
        """Fetch a column by its exact name, or None."""
        for column in self._columns:
            if column.name == name:
                return column
        return None

    def get_column_ignore_case(self, name: str) -> Optional[ColumnSchema]:
        """Fetch a column by name ignoring case, or None."""
        lowered = name.lower()
        for column in self._columns:
            if column.name.lower() == lowered:
                return column
        return None

    @property
    def primary_key(self) -> Optional[ColumnSchema]:
        """The first primary key column, or None."""
        for column in self._columns:
            if column.primary_key:
                return column
        return None

    def foreign_key_columns(self) -> List[ColumnSchema]:
        return [column for column in self._columns if column.has_foreign_key]

    # ==================== Copies / DDL ====================

    def clone(self) -> "TableSchema":
        """
        Copy the table with its own column list.

        Adding or removing columns on the copy leaves this table untouched;
        the ColumnSchema objects themselves are shared.
        """
        copy = TableSchema(self.name, if_not_exists=self.if_not_exists, or_replace=self.or_replace)
        copy._columns = list(self._columns)
        return copy

    def to_sql(self, database_type: Union[DatabaseType, str]) -> str:
        """Compile this table to a CREATE TABLE statement for a database type."""
        from ..dialects import DialectFactory
        return DialectFactory.create(database_type).create_table_statement(self)

    # ==================== Protocols ====================

    def __iter__(self) -> Iterator[ColumnSchema]:
        return iter(list(self._columns))

    def __len__(self) -> int:
        return len(self._columns)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.get_column(name) is not None

    def __repr__(self) -> str:
        return f"TableSchema({self.name!r}, columns={self.column_names()})"
