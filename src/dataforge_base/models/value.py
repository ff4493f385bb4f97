"""
DatabaseValue model - one cell: a column name and its raw value
"""
from dataclasses import dataclass
from typing import Any

# Payloads that cannot be stored in a single cell
ARRAY_TYPES = (list, tuple, set, frozenset, dict)


@dataclass(frozen=True)
class DatabaseValue:
    """A raw value (None, int, float, str, bool, bytes, ...) tied to a column name."""
    column_name: str
    data: Any = None

    @property
    def is_null(self) -> bool:
        return self.data is None

    @property
    def is_array(self) -> bool:
        """True when the payload is a collection rather than a scalar."""
        return isinstance(self.data, ARRAY_TYPES)
