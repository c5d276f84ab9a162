"""Tests for result and style models."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from sqlgrid.core.models import (
    NO_COLUMN_NAME,
    BlockError,
    Column,
    ResultBatch,
    ResultSet,
    StyleDef,
    is_number,
    merge_styles,
    value_to_text,
)
from sqlgrid.core.sql_types import type_category


@pytest.mark.unit
class TestValueToText:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("text", "text"),
            (42, "42"),
            (1.5, "1.5"),
            (Decimal("10.50"), "10.50"),
            (True, "true"),
            (False, "false"),
            (b"\x00\xab", "0x00AB"),
            (date(2024, 3, 1), "2024-03-01"),
            (datetime(2024, 3, 1, 12, 30), "2024-03-01T12:30:00"),
        ],
    )
    def test_text_forms(self, value, expected):
        assert value_to_text(value) == expected

    def test_is_number_excludes_bool(self):
        assert is_number(3)
        assert is_number(Decimal("1"))
        assert not is_number(True)
        assert not is_number("3")


@pytest.mark.unit
class TestColumn:
    def test_display_name_defaults_to_key(self):
        assert Column(key="id").display_name == "id"

    def test_unnamed_column(self):
        assert Column(key="").display_name == NO_COLUMN_NAME

    def test_explicit_display_name(self):
        assert Column(key="n", display_name="Count").display_name == "Count"


@pytest.mark.unit
class TestResultSet:
    def test_driver_column_list(self):
        rs = ResultSet(
            columns=[{"name": "b", "type": "int", "index": 1}, {"name": "a", "index": 0}]
        )
        assert [c.key for c in rs.ordered_columns()] == ["a", "b"]
        assert rs.ordered_columns()[1].sql_type == "int"

    def test_column_mapping(self):
        rs = ResultSet(columns={"total": {"index": 0, "type": "decimal"}})
        assert rs.columns[0] == Column(key="total", ordinal_index=0, sql_type="decimal")

    def test_plain_names(self):
        rs = ResultSet(columns=["x", "y"])
        assert [(c.key, c.ordinal_index) for c in rs.ordered_columns()] == [("x", 0), ("y", 1)]

    def test_missing_ordinals_follow_declared_order(self):
        rs = ResultSet(columns=[{"key": "b"}, {"key": "a"}])
        assert [c.key for c in rs.ordered_columns()] == ["b", "a"]

    def test_columns_inferred_in_first_seen_order(self):
        rs = ResultSet(rows=[{"b": 1}, {"a": 2, "b": 3}])
        assert [c.key for c in rs.ordered_columns()] == ["b", "a"]

    def test_row_count(self, people):
        assert people.row_count == 2

    def test_block_error(self):
        rs = ResultSet(block_error={"message": "boom", "sql": "SELECT 1"})
        assert rs.block_error == BlockError(message="boom", sql="SELECT 1")


@pytest.mark.unit
class TestResultBatch:
    def test_bare_list(self):
        batch = ResultBatch.model_validate([{"rows": []}])
        assert len(batch) == 1

    def test_single_rows_affected(self):
        assert ResultBatch(rows_affected=3).rows_affected == [3]

    def test_defaults(self):
        batch = ResultBatch()
        assert batch.result_sets == []
        assert batch.rows_affected == []
        assert batch.total_execution_time_ms is None


@pytest.mark.unit
class TestStyleDef:
    def test_properties_skip_unset_and_preset(self):
        style = StyleDef(bold=True, preset="money")
        assert style.properties() == {"bold": True}

    def test_empty(self):
        assert StyleDef().is_empty()
        assert StyleDef(preset="money").is_empty()
        assert not StyleDef(italic=False).is_empty()

    def test_cache_key_is_order_independent(self):
        assert StyleDef(bold=True, font_color="#FF0000").cache_key() == (
            StyleDef(font_color="#FF0000", bold=True).cache_key()
        )
        assert StyleDef(bold=True).cache_key() != StyleDef(bold=False).cache_key()

    def test_unknown_property_rejected(self):
        with pytest.raises(ValueError):
            StyleDef(colour="red")

    def test_merge_later_wins(self):
        merged = merge_styles(
            StyleDef(bold=True, font_color="#000000"),
            None,
            StyleDef(font_color="#FF0000"),
        )
        assert merged == StyleDef(bold=True, font_color="#FF0000")


@pytest.mark.unit
@pytest.mark.parametrize(
    ("sql_type", "category"),
    [
        ("int", "integer"),
        ("BIGINT", "integer"),
        ("DECIMAL(10,2)", "decimal"),
        ("money", "money"),
        ("timestamptz", "datetime"),
        ("date", "date"),
        ("bool", "boolean"),
        ("varchar(50)", None),
        (None, None),
    ],
)
def test_type_category(sql_type, category):
    assert type_category(sql_type) == category
