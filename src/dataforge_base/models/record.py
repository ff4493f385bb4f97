"""
Record mapping - convert between dataclass records and DatabaseValue lists.

A record is a dataclass whose fields are matched to table columns by name,
ignoring case. Fields created with transient() are never persisted.

Usage:
    @dataclass
    class User(DatabaseRecord):
        __table_schema__ = users

        id: Optional[int] = None
        name: str = ""
        cache: dict = transient(default_factory=dict)

    values = User(name="Bob").to_values()
"""
import dataclasses
from decimal import Decimal
from functools import lru_cache
from types import UnionType
from typing import (Any, ClassVar, List, NamedTuple, Optional, Sequence, Tuple,
                    Type, TypeVar, Union, get_args, get_origin, get_type_hints)

from ..exceptions import MappingError
from ..schema import ColumnSchema, TableSchema
from .value import DatabaseValue

import logging
logger = logging.getLogger(__name__)

TRANSIENT = "transient"

R = TypeVar("R")


def transient(**kwargs) -> Any:
    """dataclasses.field() for an attribute that is never read from or written to the database."""
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[TRANSIENT] = True
    return dataclasses.field(metadata=metadata, **kwargs)


class PersistedField(NamedTuple):
    name: str
    field_type: Any


def _normalize_type(annotation: Any) -> Any:
    """Reduce an annotation to something isinstance() understands, or Any."""
    if annotation is Any or annotation is None:
        return Any
    origin = get_origin(annotation)
    if origin is Union or origin is UnionType:
        members = [arg for arg in get_args(annotation) if arg is not type(None)]
        if len(members) == 1:
            return _normalize_type(members[0])
        return tuple(_normalize_type(member) for member in members)
    if origin is not None:
        return origin if isinstance(origin, type) else Any
    return annotation if isinstance(annotation, type) else Any


@lru_cache(maxsize=None)
def persisted_fields(record_type: type) -> Tuple[PersistedField, ...]:
    """
    Persisted fields of a record class, in declaration order.

    Computed once per class.

    Raises:
        MappingError: record_type is not a dataclass
    """
    if not (isinstance(record_type, type) and dataclasses.is_dataclass(record_type)):
        raise MappingError(f"{record_type!r} is not a dataclass record")

    try:
        hints = get_type_hints(record_type)
    except (NameError, TypeError) as e:
        logger.debug(f"Could not resolve annotations of {record_type.__name__}: {e}")
        hints = {}

    result = []
    for field in dataclasses.fields(record_type):
        if field.metadata.get(TRANSIENT):
            continue
        annotation = hints.get(field.name, field.type)
        if isinstance(annotation, str):
            annotation = Any
        result.append(PersistedField(field.name, _normalize_type(annotation)))
    return tuple(result)


def mapped_columns(table: TableSchema,
                   record_type: type) -> List[Tuple[PersistedField, ColumnSchema]]:
    """Pairs of (field, column) for every persisted field that names a column of table."""
    pairs = []
    for field in persisted_fields(record_type):
        column = table.get_column_ignore_case(field.name)
        if column is None:
            logger.debug(f"{record_type.__name__}.{field.name} has no column in '{table.name}'")
            continue
        pairs.append((field, column))
    return pairs


def coerce_value(value: Any, field_type: Any, field_name: str) -> Any:
    """
    Convert a database value for assignment to a field.

    Conversions: integer to bool, any real number to float, and integral
    Decimal to int. None is always accepted.

    Raises:
        MappingError: value cannot be assigned to the field type
    """
    if value is None or field_type is Any:
        return value

    if isinstance(field_type, tuple):
        if Any in field_type or isinstance(value, tuple(t for t in field_type if t is not Any)):
            return value
        for member in field_type:
            try:
                return coerce_value(value, member, field_name)
            except MappingError:
                continue
        raise MappingError(
            f"Field '{field_name}' cannot hold {type(value).__name__} value {value!r}"
        )

    if field_type is bool:
        if isinstance(value, int):
            return bool(value)
    elif field_type is float:
        if isinstance(value, (int, float, Decimal)) and not isinstance(value, bool):
            return float(value)
    elif field_type is int:
        if isinstance(value, int):
            return value
        if isinstance(value, Decimal) and value == value.to_integral_value():
            return int(value)
    elif isinstance(value, field_type):
        return value

    raise MappingError(
        f"Field '{field_name}' of type {field_type.__name__} "
        f"cannot hold {type(value).__name__} value {value!r}"
    )


def new_record(record_type: Type[R]) -> R:
    """
    Instantiate a blank record.

    Raises:
        MappingError: record_type needs constructor arguments
    """
    try:
        return record_type()
    except TypeError as e:
        raise MappingError(
            f"{record_type.__name__} must be constructible without arguments: {e}"
        ) from e


def to_values(table: TableSchema, record: Any) -> List[DatabaseValue]:
    """
    Read a record into values for table.

    Fields with no matching column are skipped, and so are auto-increment
    primary key columns since the database generates them.
    """
    values = []
    for field, column in mapped_columns(table, type(record)):
        if column.is_generated_key:
            continue
        values.append(DatabaseValue(column.name, getattr(record, field.name)))
    return values


def to_record(table: TableSchema, values: Sequence[DatabaseValue], target: R) -> R:
    """
    Write values into the fields of target.

    Every value must name a column of table (exact name) and that column
    must match a persisted field of target (ignoring case).

    Raises:
        MappingError: unknown column, no matching field, or incompatible value
    """
    fields = {field.name.lower(): field for field in persisted_fields(type(target))}
    for value in values:
        column = table.get_column(value.column_name)
        if column is None:
            raise MappingError(f"Column '{value.column_name}' is not part of table '{table.name}'")
        field = fields.get(column.name.lower())
        if field is None:
            raise MappingError(
                f"{type(target).__name__} has no field for column '{column.name}'"
            )
        data = coerce_value(value.data, field.field_type, field.name)
        try:
            setattr(target, field.name, data)
        except dataclasses.FrozenInstanceError as e:
            raise MappingError(f"{type(target).__name__} is frozen") from e
    return target


class DatabaseRecord:
    """
    Optional base class for dataclass records bound to a table.

    Subclasses set __table_schema__ so the Database record operations can
    find their table.
    """

    __table_schema__: ClassVar[Optional[TableSchema]] = None

    @classmethod
    def table_schema(cls) -> TableSchema:
        schema = cls.__table_schema__
        if schema is None:
            raise MappingError(f"{cls.__name__} does not define __table_schema__")
        return schema

    def to_values(self) -> List[DatabaseValue]:
        return to_values(self.table_schema(), self)

    @classmethod
    def from_values(cls, values: Sequence[DatabaseValue]):
        return to_record(cls.table_schema(), values, new_record(cls))
