"""
Exceptions raised by DataForge Base.

Every failure surfaced to callers derives from DataForgeError so that
applications can catch the whole family in one place.
"""
from typing import Any, Optional, Sequence


class DataForgeError(Exception):
    """Base class for all DataForge Base errors."""


class MissingDriverError(DataForgeError):
    """The driver module for a database type could not be imported."""

    def __init__(self, database_type: Any, driver: str):
        self.database_type = database_type
        self.driver = driver
        super().__init__(
            f"Missing driver for {database_type}: could not import '{driver}'. "
            f"Install it with: pip install {driver}"
        )


class ConnectionFailedError(DataForgeError):
    """The driver rejected a connection attempt."""

    def __init__(self, message: str, info: Optional[Any] = None):
        self.info = info
        super().__init__(message)


class NotConnectedError(DataForgeError):
    """An operation needed an open connection but there is none."""

    def __init__(self, message: str = "Not connected to a database. Call connect() first."):
        super().__init__(message)


class UnsupportedDataTypeError(DataForgeError):
    """A value is not one of the canonical data types."""

    def __init__(self, data_type: Any):
        self.data_type = data_type
        super().__init__(f"Unsupported data type: {data_type!r}")


class UnsupportedDatabaseTypeError(DataForgeError):
    """A data type has neither a native nor a fallback mapping on a database type."""

    def __init__(self, data_type: Any, database_type: Any):
        self.data_type = data_type
        self.database_type = database_type
        super().__init__(f"{data_type} is not supported by {database_type} and has no fallback type")


class UnsupportedFeatureError(DataForgeError):
    """A requested feature cannot be expressed, either at all or on one database type."""

    def __init__(self, feature: str, database_type: Optional[Any] = None):
        self.feature = feature
        self.database_type = database_type
        if database_type is None:
            super().__init__(f"Unsupported feature! {feature}")
        else:
            super().__init__(f"{database_type} does not support the following feature: {feature}")


class MappingError(DataForgeError):
    """Values and record fields could not be matched or converted."""


class StatementError(DataForgeError):
    """
    Execution of a generated statement failed.

    Keeps the exact SQL text and parameters that were sent to the driver;
    the driver's own exception is chained as __cause__.
    """

    def __init__(self, message: str, sql: str, params: Sequence[Any] = ()):
        self.sql = sql
        self.params = tuple(params)
        super().__init__(f"{message} SQL Statement Created: {sql}")
