"""
Schema objects - declarative table and column definitions.

Usage:
    from dataforge_base.schema import ColumnSchema, TableSchema
"""

from .column import ColumnBuilder, ColumnSchema, ForeignReference
from .table import TableSchema

__all__ = [
    "ColumnBuilder",
    "ColumnSchema",
    "ForeignReference",
    "TableSchema",
]
