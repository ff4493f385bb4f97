"""
Connection layer - a small DB-API wrapper and the connection handle.

Connection is the protocol the rest of the library talks to. DbApiConnection
implements it on top of a driver connection (pymysql or sqlite3), taking
``?`` placeholders everywhere and rewriting them for the driver.

ConnectionHandle owns at most one Connection and caches its liveness.
"""
import threading
import time
from dataclasses import dataclass, field
from typing import (Any, Callable, List, Optional, Protocol, Sequence, Tuple, Union,
                    runtime_checkable)

from cachetools import TTLCache

from .config import ConnectionSettings
from .constants import LIVENESS_PROBE_TIMEOUT_S, LIVENESS_TTL_S
from .dialects import DatabaseDialect, DialectFactory
from .exceptions import DataForgeError, NotConnectedError, StatementError
from .utils.sql_tokens import translate_placeholders

import logging
logger = logging.getLogger(__name__)


@dataclass
class Rowset:
    """Column labels and row tuples returned by a query."""
    column_names: List[str] = field(default_factory=list)
    rows: List[Tuple[Any, ...]] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.rows)


@runtime_checkable
class Connection(Protocol):
    """What the library needs from an open database connection."""

    def execute(self, sql: str, params: Sequence[Any] = ()) -> int:
        """Run a statement and return the affected row count."""
        ...

    def execute_query(self, sql: str, params: Sequence[Any] = ()) -> Rowset:
        ...

    def execute_prepared(self, sql: str, params: Sequence[Any] = ()) -> Union[Rowset, int]:
        """Run any statement; a Rowset if it produced rows, else the affected row count."""
        ...

    def prepare(self, sql: str) -> "PreparedStatement":
        ...

    def is_valid(self, timeout: float) -> bool:
        ...

    def list_tables(self, pattern: str = "%") -> List[str]:
        ...

    def close(self) -> None:
        ...


class PreparedStatement:
    """
    SQL text bound to a connection, executed with fresh arguments each time.

    Usage:
        insert = db.raw_prepare("INSERT INTO users (name) VALUES (?)")
        for name in names:
            insert.execute(name)
    """

    def __init__(self, connection: Connection, sql: str):
        self.connection = connection
        self.sql = sql

    def execute(self, *args) -> int:
        return self.connection.execute(self.sql, args)

    def query(self, *args) -> Rowset:
        return self.connection.execute_query(self.sql, args)

    def __repr__(self) -> str:
        return f"PreparedStatement({self.sql!r})"


class DbApiConnection:
    """
    Connection over a DB-API 2.0 driver connection.

    Driver errors are raised as StatementError carrying the SQL and
    parameters; the driver exception is chained.
    """

    def __init__(self, raw: Any, dialect: DatabaseDialect):
        self.raw = raw
        self.dialect = dialect
        self._driver = dialect.load_driver()

    def _run(self, sql: str, params: Sequence[Any], fetch: Optional[bool]) -> Union[Rowset, int]:
        """
        Execute sql on a fresh cursor.

        fetch=True always returns a Rowset, fetch=False the row count,
        fetch=None whichever the statement produced.
        """
        params = tuple(params)
        cursor = self.raw.cursor()
        try:
            if params:
                cursor.execute(translate_placeholders(sql, self.dialect.paramstyle), params)
            else:
                cursor.execute(sql)

            if fetch is False or (fetch is None and cursor.description is None):
                return cursor.rowcount
            names = [column[0] for column in cursor.description or ()]
            return Rowset(names, [tuple(row) for row in cursor.fetchall()])
        except self._driver.Error as e:
            logger.error(f"{self.dialect.database_type} statement failed: {e}")
            raise StatementError(f"{type(e).__name__}: {e}.", sql, params) from e
        finally:
            cursor.close()

    def execute(self, sql: str, params: Sequence[Any] = ()) -> int:
        return self._run(sql, params, fetch=False)

    def execute_query(self, sql: str, params: Sequence[Any] = ()) -> Rowset:
        return self._run(sql, params, fetch=True)

    def execute_prepared(self, sql: str, params: Sequence[Any] = ()) -> Union[Rowset, int]:
        return self._run(sql, params, fetch=None)

    def prepare(self, sql: str) -> PreparedStatement:
        return PreparedStatement(self, sql)

    def is_valid(self, timeout: float) -> bool:
        return self.dialect.ping(self.raw, timeout)

    def list_tables(self, pattern: str = "%") -> List[str]:
        rowset = self.execute_query(self.dialect.list_tables_query(), (pattern,))
        return [row[0] for row in rowset.rows]

    def close(self) -> None:
        self.raw.close()


class ConnectionHandle:
    """
    Holds the connection of one database and answers "is it alive?".

    Liveness answers are cached for LIVENESS_TTL_S seconds; past that a
    probe is sent. A failed probe closes the connection. The cache is
    lock-protected, but statements sent through the connection are not
    synchronized: share a handle between threads only with external locking.

    Usage:
        handle = ConnectionHandle(settings)
        handle.connect()
        if handle.is_connected():
            handle.require_connection().execute("DELETE FROM logs")
    """

    _LIVENESS_KEY = "alive"

    def __init__(self, settings: ConnectionSettings,
                 connection_factory: Optional[Callable[[ConnectionSettings, str, str], Connection]] = None,
                 ttl: float = LIVENESS_TTL_S,
                 probe_timeout: float = LIVENESS_PROBE_TIMEOUT_S,
                 clock: Callable[[], float] = time.monotonic):
        """
        Args:
            settings: Where and how to connect
            connection_factory: Builds a Connection from (settings, username, password);
                defaults to a DbApiConnection opened through the dialect
            ttl: Seconds a liveness answer stays valid
            probe_timeout: Seconds granted to a liveness probe
            clock: Monotonic time source
        """
        self.settings = settings
        self.dialect = DialectFactory.create(settings.database_type)
        self.probe_timeout = probe_timeout
        self._connection_factory = connection_factory or self._open_dbapi
        self._connection: Optional[Connection] = None
        self._liveness = TTLCache(maxsize=1, ttl=ttl, timer=clock)
        self._lock = threading.Lock()

    def _open_dbapi(self, settings: ConnectionSettings, username: str, password: str) -> Connection:
        raw = self.dialect.open_connection(settings, username, password)
        return DbApiConnection(raw, self.dialect)

    @property
    def connection(self) -> Optional[Connection]:
        return self._connection

    def connect(self, username: Optional[str] = None,
                password: Optional[str] = None) -> "ConnectionHandle":
        """
        Open the connection unless a live one exists.

        Raises:
            MissingDriverError: The driver is not installed
            ConnectionFailedError: The database rejected the connection
        """
        if self._connection is not None and self.is_connected():
            logger.debug(f"Already connected to {self.settings.database}")
            return self

        user, pwd = self.settings.resolve_credentials(username, password)
        connection = self._connection_factory(self.settings, user, pwd)
        self.attach(connection)
        logger.info(f"Connected to {self.dialect.database_type} database '{self.settings.database}'")
        return self

    def attach(self, connection: Connection) -> "ConnectionHandle":
        """Adopt an already open connection, closing any previous one."""
        with self._lock:
            if self._connection is not None and self._connection is not connection:
                self._close_quietly(self._connection)
            self._connection = connection
            self._liveness.clear()
        return self

    def disconnect(self) -> None:
        """Close the connection. No-op when not connected."""
        with self._lock:
            connection, self._connection = self._connection, None
            self._liveness.clear()
        if connection is not None:
            connection.close()
            logger.info(f"Disconnected from '{self.settings.database}'")

    def is_connected(self) -> bool:
        """
        True when a connection exists and answered a probe within the last TTL.

        A probe that fails or errors closes the connection.
        """
        with self._lock:
            if self._connection is None:
                return False
            alive = self._liveness.get(self._LIVENESS_KEY)
            if alive is not None:
                return alive

            alive = self._probe(self._connection)
            self._liveness[self._LIVENESS_KEY] = alive
            if not alive:
                logger.warning(f"Connection to '{self.settings.database}' is no longer valid")
                self._close_quietly(self._connection)
                self._connection = None
            return alive

    def _probe(self, connection: Connection) -> bool:
        try:
            return bool(connection.is_valid(self.probe_timeout))
        except DataForgeError as e:
            logger.warning(f"Liveness probe failed: {e}")
            return False

    @staticmethod
    def _close_quietly(connection: Connection) -> None:
        try:
            connection.close()
        except Exception as e:
            logger.debug(f"Ignoring error while closing stale connection: {e}")

    def require_connection(self) -> Connection:
        """
        Raises:
            NotConnectedError: connect() was never called or the connection was closed
        """
        connection = self._connection
        if connection is None:
            raise NotConnectedError()
        return connection

    def __repr__(self) -> str:
        state = "connected" if self._connection is not None else "disconnected"
        return f"ConnectionHandle({self.dialect.database_type}, {self.settings.database!r}, {state})"
