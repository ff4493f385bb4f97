"""
Unit tests for values, record field discovery and record mapping.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional, Union

import pytest

from dataforge_base import DatabaseValue, transient
from dataforge_base.exceptions import MappingError
from dataforge_base.models import persisted_fields, to_record, to_values
from dataforge_base.models.record import coerce_value, new_record


class TestDatabaseValue:
    """Test DatabaseValue."""

    def test_is_frozen(self):
        value = DatabaseValue("a", 1)
        with pytest.raises(AttributeError):
            value.data = 2

    def test_flags(self):
        assert DatabaseValue("a").is_null
        assert DatabaseValue("a", [1, 2]).is_array
        assert not DatabaseValue("a", "text").is_array


class TestPersistedFields:
    """Test persisted field discovery."""

    def test_transient_excluded(self, note_type):
        names = [field.name for field in persisted_fields(note_type)]
        assert names == ["id", "title", "score"]

    def test_optional_unwrapped(self, note_type):
        types = {field.name: field.field_type for field in persisted_fields(note_type)}
        assert types["id"] is int
        assert types["score"] is float

    def test_cached_per_class(self, note_type):
        assert persisted_fields(note_type) is persisted_fields(note_type)

    def test_not_a_dataclass(self):
        class Plain:
            pass

        with pytest.raises(MappingError):
            persisted_fields(Plain)

    def test_metadata_transient(self):
        @dataclass
        class Sample:
            a: int = 0
            b: int = transient(default=0, metadata={"doc": "scratch"})

        assert [field.name for field in persisted_fields(Sample)] == ["a"]


class TestToValues:
    """Test record to values conversion."""

    def test_scenario_skips_generated_key_and_unmatched_field(self, scenario_table, item_type):
        item = item_type(id=9, name="Bob", flag=True, transient_counter=3)
        values = to_values(scenario_table, item)
        assert values == [DatabaseValue("name", "Bob"), DatabaseValue("flag", True)]

    def test_uses_column_name_case(self, scenario_table):
        @dataclass
        class Loud:
            NAME: str = "x"

        assert to_values(scenario_table, Loud()) == [DatabaseValue("name", "x")]

    def test_record_method(self, note_type):
        values = note_type(title="hello", score=1.5).to_values()
        assert [value.column_name for value in values] == ["title", "score"]


class TestToRecord:
    """Test values to record conversion."""

    def test_round_trip(self, notes_table, note_type):
        note = note_type(title="hello", score=2.0)
        copy = to_record(notes_table, to_values(notes_table, note), note_type())
        assert copy.title == "hello"
        assert copy.score == 2.0

    def test_coercions(self, scenario_table, item_type):
        values = [
            DatabaseValue("id", Decimal("4")),
            DatabaseValue("name", None),
            DatabaseValue("flag", 1),
        ]
        item = to_record(scenario_table, values, item_type())
        assert item.id == 4 and isinstance(item.id, int)
        assert item.name is None
        assert item.flag is True

    def test_unknown_column(self, scenario_table, item_type):
        with pytest.raises(MappingError):
            to_record(scenario_table, [DatabaseValue("missing", 1)], item_type())

    def test_column_name_is_exact(self, scenario_table, item_type):
        with pytest.raises(MappingError):
            to_record(scenario_table, [DatabaseValue("NAME", "x")], item_type())

    def test_column_without_field(self, scenario_table):
        @dataclass
        class OnlyName:
            name: str = ""

        with pytest.raises(MappingError):
            to_record(scenario_table, [DatabaseValue("flag", 1)], OnlyName())

    def test_incompatible_value(self, scenario_table, item_type):
        with pytest.raises(MappingError):
            to_record(scenario_table, [DatabaseValue("name", 12)], item_type())

    def test_frozen_record(self, scenario_table):
        @dataclass(frozen=True)
        class Frozen:
            name: str = ""

        with pytest.raises(MappingError):
            to_record(scenario_table, [DatabaseValue("name", "x")], Frozen())

    def test_from_values(self, note_type):
        note = note_type.from_values([DatabaseValue("title", "t"), DatabaseValue("score", 3)])
        assert note.title == "t"
        assert note.score == 3.0 and isinstance(note.score, float)


class TestCoerceValue:
    """Test the coercion table."""

    @pytest.mark.parametrize("value,field_type,expected", [
        (0, bool, False),
        (5, bool, True),
        (Decimal("1.5"), float, 1.5),
        (3, float, 3.0),
        (Decimal("7"), int, 7),
        ("x", Any, "x"),
        ("x", (int, str), "x"),
        (2, (bool, str), True),
        (None, int, None),
    ])
    def test_accepted(self, value, field_type, expected):
        assert coerce_value(value, field_type, "f") == expected

    @pytest.mark.parametrize("value,field_type", [
        ("1", int),
        (Decimal("1.5"), int),
        (True, float),
        (1.0, str),
    ])
    def test_rejected(self, value, field_type):
        with pytest.raises(MappingError):
            coerce_value(value, field_type, "f")

    def test_union_annotation(self):
        @dataclass
        class Mixed:
            value: Union[int, str, None] = None

        (field,) = persisted_fields(Mixed)
        assert field.field_type == (int, str)


class TestNewRecord:
    """Test blank record creation."""

    def test_requires_no_arguments(self):
        @dataclass
        class Needy:
            name: str

        with pytest.raises(MappingError):
            new_record(Needy)

    def test_optional_defaults(self):
        @dataclass
        class Easy:
            name: Optional[str] = None

        assert new_record(Easy).name is None
