"""
Pytest configuration and fixtures for DataForge Base tests.
"""
from dataclasses import dataclass
from typing import Optional

import pytest

from dataforge_base import (
    ColumnSchema,
    ConnectionSettings,
    Database,
    DatabaseRecord,
    DatabaseType,
    DataType,
    Rowset,
    TableSchema,
    transient,
)
from dataforge_base.connection import PreparedStatement


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 100.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


class FakeConnection:
    """In-memory Connection that records statements instead of running them."""

    def __init__(self, tables=(), rowset: Optional[Rowset] = None, rowcount: int = 1):
        self.valid = True
        self.closed = False
        self.probes = 0
        self.tables = list(tables)
        self.rowset = rowset or Rowset()
        self.rowcount = rowcount
        self.executed = []

    def execute(self, sql, params=()):
        self.executed.append((sql, tuple(params)))
        return self.rowcount

    def execute_query(self, sql, params=()):
        self.executed.append((sql, tuple(params)))
        return self.rowset

    def execute_prepared(self, sql, params=()):
        self.executed.append((sql, tuple(params)))
        return self.rowset if sql.lstrip().upper().startswith("SELECT") else self.rowcount

    def prepare(self, sql):
        return PreparedStatement(self, sql)

    def is_valid(self, timeout):
        self.probes += 1
        return self.valid

    def list_tables(self, pattern="%"):
        return [name for name in self.tables if name.lower() == pattern.lower()]

    def close(self):
        self.closed = True


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def fake_connection():
    return FakeConnection()


@pytest.fixture
def scenario_table():
    """T(id INTEGER PK AUTO, name VARCHAR(20), flag TINYINT)."""
    return TableSchema(
        "T",
        ColumnSchema("id", DataType.INTEGER, primary_key=True, auto_increment=True),
        ColumnSchema("name", DataType.VARCHAR, size=20),
        ColumnSchema("flag", DataType.TINYINT),
    )


@dataclass
class Item(DatabaseRecord):
    """Record mapped onto the scenario table."""
    id: Optional[int] = None
    name: Optional[str] = None
    flag: bool = False
    transient_counter: int = 0


@dataclass
class Note(DatabaseRecord):
    """Record with a transient attribute, mapped onto notes_table."""
    id: Optional[int] = None
    title: str = ""
    score: float = 0.0
    cache: dict = transient(default_factory=dict)


@pytest.fixture
def item_type(scenario_table):
    Item.__table_schema__ = scenario_table
    yield Item
    Item.__table_schema__ = None


@pytest.fixture
def notes_table():
    table = TableSchema(
        "notes",
        ColumnSchema("id", DataType.INTEGER, primary_key=True, auto_increment=True),
        ColumnSchema("title", DataType.VARCHAR, size=100, not_null=True),
        ColumnSchema("score", DataType.DOUBLE),
    )
    Note.__table_schema__ = table
    yield table
    Note.__table_schema__ = None


@pytest.fixture
def note_type(notes_table):
    return Note


@pytest.fixture
def make_connection():
    """Factory for FakeConnection instances."""
    return FakeConnection


@pytest.fixture
def make_fake_db():
    """Factory for a connected Database wired to a FakeConnection."""
    def make(database_type, connection, **handle_kwargs) -> Database:
        settings = ConnectionSettings(database_type=database_type, database="testdb")
        db = Database.from_settings(
            settings,
            connection_factory=lambda s, user, password: connection,
            **handle_kwargs,
        )
        return db.connect()
    return make


@pytest.fixture
def mysql_db(fake_connection, make_fake_db):
    db = make_fake_db(DatabaseType.MYSQL, fake_connection)
    yield db
    db.disconnect()


@pytest.fixture
def sqlite_db(tmp_path):
    """Connected Database on a temporary SQLite file."""
    db = Database(DatabaseType.SQLITE, str(tmp_path / "test.db")).connect()
    yield db
    db.disconnect()
