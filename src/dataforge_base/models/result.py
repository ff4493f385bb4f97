"""
DatabaseResult model - a query result as a flat, row-major value list.
"""
from typing import TYPE_CHECKING, Iterator, List, Optional, Sequence, Tuple, Type, TypeVar

from ..schema import TableSchema
from .record import new_record, to_record
from .value import DatabaseValue

if TYPE_CHECKING:
    from ..connection import Rowset

import logging
logger = logging.getLogger(__name__)

R = TypeVar("R")


class DatabaseResult:
    """
    Values of a result set stored row after row.

    Row numbers are 1-based.

    Usage:
        result = db.select(users, "name LIKE ?", "B%")
        for row in result.rows():
            print([value.data for value in row])
    """

    def __init__(self, column_count: int, values: Sequence[DatabaseValue] = (),
                 column_names: Optional[Sequence[str]] = None):
        """
        Args:
            column_count: Number of columns per row
            values: Row-major values; their count must be a multiple of column_count
            column_names: Column labels, kept even when there are no rows

        Raises:
            ValueError: Values do not fill whole rows
        """
        values = tuple(values)
        if column_count < 0:
            raise ValueError(f"Invalid column count: {column_count}")
        if column_count == 0 and values:
            raise ValueError("Values given for a result without columns")
        if column_count and len(values) % column_count != 0:
            raise ValueError(
                f"{len(values)} values do not fill rows of {column_count} columns"
            )
        self._column_count = column_count
        self._values = values
        self._column_names = list(column_names) if column_names is not None else None

    @classmethod
    def from_rowset(cls, rowset: "Rowset") -> "DatabaseResult":
        names = list(rowset.column_names)
        values = [
            DatabaseValue(name, data)
            for row in rowset.rows
            for name, data in zip(names, row)
        ]
        return cls(len(names), values, names)

    # ==================== Accessors ====================

    @property
    def values(self) -> Tuple[DatabaseValue, ...]:
        return self._values

    @property
    def column_count(self) -> int:
        return self._column_count

    @property
    def row_count(self) -> int:
        if self._column_count == 0:
            return 0
        return len(self._values) // self._column_count

    @property
    def column_names(self) -> List[str]:
        if self._column_names is not None:
            return list(self._column_names)
        return [value.column_name for value in self._values[:self._column_count]]

    def get_values_for_row(self, row: int) -> List[DatabaseValue]:
        """
        Values of one row.

        Args:
            row: Row number, starting at 1

        Raises:
            IndexError: Row outside 1..row_count
        """
        if row < 1 or row > self.row_count:
            raise IndexError(f"Row {row} out of range (1..{self.row_count})")
        start = (row - 1) * self._column_count
        return list(self._values[start:start + self._column_count])

    def get_values_for_column(self, column_name: str) -> List[DatabaseValue]:
        """Values of one column across all rows (exact name)."""
        return [value for value in self._values if value.column_name == column_name]

    def rows(self) -> Iterator[List[DatabaseValue]]:
        for row in range(1, self.row_count + 1):
            yield self.get_values_for_row(row)

    def to_records(self, table: TableSchema, record_type: Type[R]) -> List[R]:
        """
        Map each row onto a new instance of record_type.

        Raises:
            MappingError: record_type needs constructor arguments, or a value
                does not fit its field
        """
        return [to_record(table, row, new_record(record_type)) for row in self.rows()]

    def __len__(self) -> int:
        return self.row_count

    def __repr__(self) -> str:
        return f"DatabaseResult(columns={self._column_count}, rows={self.row_count})"
