"""
Data models - values, results and record mapping
"""

from .value import DatabaseValue
from .record import DatabaseRecord, persisted_fields, to_record, to_values, transient
from .result import DatabaseResult

__all__ = [
    "DatabaseValue",
    "DatabaseRecord",
    "DatabaseResult",
    "persisted_fields",
    "to_record",
    "to_values",
    "transient",
]
