"""
Statement builders - parameterized DML for tables and records.

Every builder returns a Statement whose SQL uses ``?`` placeholders and
whose values travel separately as parameters. Caller-supplied WHERE
clauses use ``?`` too; their placeholder count must match the arguments.
"""
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, List, Sequence, Tuple

from .constants import NO_LIMIT
from .exceptions import MappingError, StatementError
from .models.record import mapped_columns, to_values
from .models.value import DatabaseValue
from .schema import TableSchema
from .utils.sql_tokens import count_placeholders, inline_placeholders

if TYPE_CHECKING:
    from .dialects import DatabaseDialect

import logging
logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Statement:
    """SQL text with ``?`` placeholders plus the values bound to them."""
    sql: str
    params: Tuple[Any, ...] = ()

    def render(self, dialect: "DatabaseDialect") -> str:
        """Inline the parameters as literals, for display only."""
        if not self.params:
            return self.sql
        literals = [dialect.format_literal(param) for param in self.params]
        return inline_placeholders(self.sql, literals)


def check_placeholders(sql: str, args: Sequence[Any]) -> None:
    """
    Raises:
        StatementError: The number of ``?`` placeholders differs from len(args)
    """
    expected = count_placeholders(sql)
    if expected != len(args):
        raise StatementError(
            f"Statement has {expected} placeholder(s) but {len(args)} argument(s) were given.",
            sql, args,
        )


def _where_clause(where: str) -> str:
    where = where.strip() if where else ""
    return f" WHERE {where}" if where else ""


def _checked_values(table: TableSchema, values: Sequence[DatabaseValue]) -> List[DatabaseValue]:
    """Make sure every value names a column of table and holds a scalar."""
    for value in values:
        if table.get_column(value.column_name) is None:
            raise MappingError(f"Column '{value.column_name}' is not part of table '{table.name}'")
        if value.is_array:
            raise MappingError(
                f"Cannot store {type(value.data).__name__} in column '{value.column_name}'"
            )
    return list(values)


def build_insert(table: TableSchema, values: Sequence[DatabaseValue]) -> Statement:
    """
    INSERT INTO t (c1, c2) VALUES (?, ?)

    Raises:
        MappingError: No values, unknown column or non-scalar value
    """
    values = _checked_values(table, values)
    if not values:
        raise MappingError(f"No values to insert into '{table.name}'")
    columns = ", ".join(value.column_name for value in values)
    placeholders = ", ".join("?" for _ in values)
    sql = f"INSERT INTO {table.name} ({columns}) VALUES ({placeholders})"
    return Statement(sql, tuple(value.data for value in values))


def build_select(table: TableSchema, where: str = "", args: Sequence[Any] = (),
                 limit: int = NO_LIMIT) -> Statement:
    """
    SELECT c1, c2 FROM t [WHERE ...] [LIMIT n]

    The column list is the table's column order. A negative limit means
    no LIMIT clause.
    """
    columns = ", ".join(table.column_names()) or "*"
    sql = f"SELECT {columns} FROM {table.name}{_where_clause(where)}"
    if limit is not None and limit >= 0:
        sql += f" LIMIT {int(limit)}"
    check_placeholders(sql, args)
    return Statement(sql, tuple(args))


def build_update(table: TableSchema, set_values: Sequence[DatabaseValue],
                 where: str = "", args: Sequence[Any] = ()) -> Statement:
    """
    UPDATE t SET c1 = ?, c2 = ? [WHERE ...]

    SET parameters come first, then the WHERE arguments.

    Raises:
        MappingError: Nothing to set, unknown column or non-scalar value
    """
    set_values = _checked_values(table, set_values)
    if not set_values:
        raise MappingError(f"No values to update in '{table.name}'")
    assignments = ", ".join(f"{value.column_name} = ?" for value in set_values)
    where_sql = _where_clause(where)
    check_placeholders(where_sql, args)
    sql = f"UPDATE {table.name} SET {assignments}{where_sql}"
    return Statement(sql, tuple(value.data for value in set_values) + tuple(args))


def build_delete(table: TableSchema, where: str = "", args: Sequence[Any] = ()) -> Statement:
    """DELETE FROM t [WHERE ...]"""
    sql = f"DELETE FROM {table.name}{_where_clause(where)}"
    check_placeholders(sql, args)
    return Statement(sql, tuple(args))


def build_insert_record(table: TableSchema, record: Any) -> Statement:
    return build_insert(table, to_values(table, record))


def build_update_record(table: TableSchema, record: Any) -> Statement:
    """
    Update the row of record, located by its primary key.

    Raises:
        MappingError: No persisted field maps to a primary key column
    """
    set_values = []
    key_conditions = []
    key_args = []
    for field, column in mapped_columns(table, type(record)):
        data = getattr(record, field.name)
        if column.primary_key:
            key_conditions.append(f"{column.name} = ?")
            key_args.append(data)
        else:
            set_values.append(DatabaseValue(column.name, data))

    if not key_conditions:
        raise MappingError(
            f"{type(record).__name__} has no field mapped to a primary key of '{table.name}'"
        )
    return build_update(table, set_values, " AND ".join(key_conditions), key_args)


def build_delete_record(table: TableSchema, record: Any) -> Statement:
    """
    Delete the rows matching every persisted field of record.

    None fields are matched with IS NULL.

    Raises:
        MappingError: No persisted field maps to a column
    """
    conditions = []
    args = []
    for field, column in mapped_columns(table, type(record)):
        data = getattr(record, field.name)
        if data is None:
            conditions.append(f"{column.name} IS NULL")
        else:
            conditions.append(f"{column.name} = ?")
            args.append(data)

    if not conditions:
        raise MappingError(f"{type(record).__name__} has no field mapped to '{table.name}'")
    return build_delete(table, " AND ".join(conditions), args)
