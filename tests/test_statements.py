"""
Unit tests for statement building and rendering.
"""
from dataclasses import dataclass

import pytest

from dataforge_base import DatabaseValue
from dataforge_base.dialects import DialectFactory
from dataforge_base.exceptions import MappingError, StatementError
from dataforge_base.statements import (
    Statement,
    build_delete,
    build_delete_record,
    build_insert,
    build_insert_record,
    build_select,
    build_update,
    build_update_record,
)


class TestInsert:
    """Test INSERT building."""

    def test_shape(self, scenario_table):
        statement = build_insert(scenario_table, [DatabaseValue("name", "Bob"), DatabaseValue("flag", 1)])
        assert statement.sql == "INSERT INTO T (name, flag) VALUES (?, ?)"
        assert statement.params == ("Bob", 1)

    def test_obrien_rendering(self, scenario_table):
        statement = build_insert(scenario_table, [DatabaseValue("name", "O'Brien")])
        assert statement.params == ("O'Brien",)
        assert statement.render(DialectFactory.create("mysql")) == (
            "INSERT INTO T (name) VALUES ('O\\'Brien')"
        )
        assert statement.render(DialectFactory.create("sqlite")) == (
            "INSERT INTO T (name) VALUES ('O''Brien')"
        )

    def test_unknown_column(self, scenario_table):
        with pytest.raises(MappingError):
            build_insert(scenario_table, [DatabaseValue("missing", 1)])

    def test_column_name_is_exact(self, scenario_table):
        with pytest.raises(MappingError):
            build_insert(scenario_table, [DatabaseValue("NAME", "x")])

    @pytest.mark.parametrize("payload", [[1, 2], (1,), {"a": 1}, {1}])
    def test_array_payload_rejected(self, scenario_table, payload):
        with pytest.raises(MappingError):
            build_insert(scenario_table, [DatabaseValue("name", payload)])

    def test_nothing_to_insert(self, scenario_table):
        with pytest.raises(MappingError):
            build_insert(scenario_table, [])

    def test_record(self, scenario_table, item_type):
        statement = build_insert_record(scenario_table, item_type(id=5, name="x", flag=True))
        assert statement.sql == "INSERT INTO T (name, flag) VALUES (?, ?)"
        assert statement.params == ("x", True)


class TestSelect:
    """Test SELECT building."""

    def test_select_all_with_limit(self, scenario_table):
        statement = build_select(scenario_table, limit=100)
        assert statement.sql == "SELECT id, name, flag FROM T LIMIT 100"
        assert statement.params == ()

    def test_scenario_where_without_limit(self, scenario_table):
        statement = build_select(scenario_table, "id = ?", ["3"], limit=-1)
        assert statement.sql == "SELECT id, name, flag FROM T WHERE id = ?"
        assert statement.params == ("3",)
        assert statement.render(DialectFactory.create("mysql")) == (
            "SELECT id, name, flag FROM T WHERE id = '3'"
        )

    def test_placeholder_mismatch(self, scenario_table):
        with pytest.raises(StatementError) as exc_info:
            build_select(scenario_table, "id = ? AND name = ?", ["3"])
        assert exc_info.value.params == ("3",)
        assert "SQL Statement Created: SELECT" in str(exc_info.value)

    def test_quoted_question_mark_is_not_a_placeholder(self, scenario_table):
        statement = build_select(scenario_table, "name = '?'", [], limit=-1)
        assert statement.sql.endswith("WHERE name = '?'")


class TestUpdate:
    """Test UPDATE building."""

    def test_set_then_where_params(self, scenario_table):
        statement = build_update(scenario_table, [DatabaseValue("name", "new")], "id = ?", [3])
        assert statement.sql == "UPDATE T SET name = ? WHERE id = ?"
        assert statement.params == ("new", 3)

    def test_no_where(self, scenario_table):
        statement = build_update(scenario_table, [DatabaseValue("flag", 0)])
        assert statement.sql == "UPDATE T SET flag = ?"

    def test_where_argument_mismatch(self, scenario_table):
        with pytest.raises(StatementError):
            build_update(scenario_table, [DatabaseValue("flag", 0)], "id = ?", [])

    def test_nothing_to_set(self, scenario_table):
        with pytest.raises(MappingError):
            build_update(scenario_table, [], "id = ?", [1])

    def test_record_by_primary_key(self, scenario_table, item_type):
        statement = build_update_record(scenario_table, item_type(id=4, name="n", flag=False))
        assert statement.sql == "UPDATE T SET name = ?, flag = ? WHERE id = ?"
        assert statement.params == ("n", False, 4)

    def test_record_without_primary_key(self, scenario_table):
        @dataclass
        class NameOnly:
            name: str = ""

        with pytest.raises(MappingError):
            build_update_record(scenario_table, NameOnly("x"))


class TestDelete:
    """Test DELETE building."""

    def test_all_rows(self, scenario_table):
        assert build_delete(scenario_table).sql == "DELETE FROM T"

    def test_where(self, scenario_table):
        statement = build_delete(scenario_table, "flag = ?", [1])
        assert statement.sql == "DELETE FROM T WHERE flag = ?"
        assert statement.params == (1,)

    def test_record_matches_every_field(self, scenario_table, item_type):
        statement = build_delete_record(scenario_table, item_type(id=2, name=None, flag=True))
        assert statement.sql == "DELETE FROM T WHERE id = ? AND name IS NULL AND flag = ?"
        assert statement.params == (2, True)


class TestStatement:
    """Test Statement rendering."""

    def test_render_without_params(self):
        statement = Statement("DELETE FROM T")
        assert statement.render(DialectFactory.create("sqlite")) == "DELETE FROM T"

    def test_render_literals(self):
        statement = Statement("UPDATE T SET a = ?, b = ?, c = ?", (None, True, 2.5))
        assert statement.render(DialectFactory.create("mariadb")) == "UPDATE T SET a = NULL, b = 1, c = 2.5"
