"""
Column Schema - one column of a table definition.

ColumnSchema is immutable. Build one directly, or fluently with
ColumnSchema.builder(), and derive modified copies with replace().
"""
from dataclasses import dataclass, replace as dataclass_replace
from typing import TYPE_CHECKING, Any, Optional, Union

from ..data_types import DatabaseType, DataType, resolve_data_type
from ..exceptions import (
    UnsupportedDatabaseTypeError,
    UnsupportedDataTypeError,
    UnsupportedFeatureError,
)

if TYPE_CHECKING:
    from .table import TableSchema

import logging
logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ForeignReference:
    """Points a column at a column of another table (reference only, not owned)."""
    table: "TableSchema"
    column: "ColumnSchema"


@dataclass(frozen=True)
class ColumnSchema:
    """
    Schema of a single column.

    Attributes:
        name: Column name, case preserved
        data_type: Canonical type, resolved per database type at DDL time
        size: Optional length/precision, e.g. 20 or "10,2"
        default: Optional default value
        primary_key: PRIMARY KEY constraint
        unique_key: Unique key constraint
        auto_increment: Auto-increment keyword of the database type
        not_null: NOT NULL constraint
        foreign_key: Optional reference to a column of another table
    """
    name: str
    data_type: DataType
    size: Optional[Union[int, str]] = None
    default: Any = None
    primary_key: bool = False
    unique_key: bool = False
    auto_increment: bool = False
    not_null: bool = False
    foreign_key: Optional[ForeignReference] = None

    def __post_init__(self):
        if not self.name or not self.name.strip():
            raise ValueError("Column name must not be empty")
        object.__setattr__(self, "data_type", DataType.parse(self.data_type))

    @classmethod
    def builder(cls, name: str, data_type: Union[DataType, str]) -> "ColumnBuilder":
        """Start a fluent builder for a column."""
        return ColumnBuilder(name, data_type)

    @property
    def has_foreign_key(self) -> bool:
        return self.foreign_key is not None

    @property
    def is_generated_key(self) -> bool:
        """True for auto-increment primary keys, whose values the database assigns."""
        return self.primary_key and self.auto_increment

    def validate(self) -> None:
        """
        Check that the constraints can be combined.

        Raises:
            UnsupportedFeatureError: A foreign key is combined with a primary key,
                unique key or auto-increment
        """
        if not self.has_foreign_key:
            return
        for flag, label in ((self.primary_key, "PRIMARY KEY"),
                            (self.unique_key, "UNIQUE KEY"),
                            (self.auto_increment, "AUTO INCREMENT")):
            if flag:
                raise UnsupportedFeatureError(
                    f"FOREIGN KEY combined with {label} on column '{self.name}'"
                )

    def supports_database_type(self, database_type: Union[DatabaseType, str]) -> bool:
        """Whether the column type resolves (natively or by fallback) on a database type."""
        try:
            resolve_data_type(self.data_type, database_type)
        except (UnsupportedDataTypeError, UnsupportedDatabaseTypeError):
            return False
        return True

    def replace(self, **changes) -> "ColumnSchema":
        """Return a copy with some attributes changed."""
        return dataclass_replace(self, **changes)

    def to_sql(self, database_type: Union[DatabaseType, str]) -> str:
        """Compile this column to its definition inside CREATE TABLE."""
        from ..dialects import DialectFactory
        return DialectFactory.create(database_type).column_definition(self)

    def __repr__(self) -> str:
        return f"ColumnSchema({self.name!r}, {self.data_type})"


class ColumnBuilder:
    """
    Fluent builder for ColumnSchema.

    Usage:
        column = (ColumnSchema.builder("customer_id", DataType.INTEGER)
                  .not_null()
                  .foreign_key(customers, "id")
                  .build())
    """

    def __init__(self, name: str, data_type: Union[DataType, str]):
        self._name = name
        self._data_type = DataType.parse(data_type)
        self._options = {}

    def size(self, size: Union[int, str]) -> "ColumnBuilder":
        self._options["size"] = size
        return self

    def default(self, value: Any) -> "ColumnBuilder":
        self._options["default"] = value
        return self

    def primary_key(self, enabled: bool = True) -> "ColumnBuilder":
        self._options["primary_key"] = enabled
        return self

    def unique_key(self, enabled: bool = True) -> "ColumnBuilder":
        self._options["unique_key"] = enabled
        return self

    def auto_increment(self, enabled: bool = True) -> "ColumnBuilder":
        self._options["auto_increment"] = enabled
        return self

    def not_null(self, enabled: bool = True) -> "ColumnBuilder":
        self._options["not_null"] = enabled
        return self

    def foreign_key(self, table: "TableSchema",
                    column: Union["ColumnSchema", str]) -> "ColumnBuilder":
        """
        Reference a column of another table.

        Args:
            table: Referenced table
            column: Referenced column, or its name in table
        """
        if isinstance(column, str):
            target = table.get_column(column)
            if target is None:
                raise ValueError(f"Table '{table.name}' has no column '{column}'")
            column = target
        self._options["foreign_key"] = ForeignReference(table, column)
        return self

    def build(self) -> ColumnSchema:
        """
        Create the column.

        Raises:
            UnsupportedFeatureError: The constraint combination is invalid
        """
        column = ColumnSchema(self._name, self._data_type, **self._options)
        column.validate()
        return column
