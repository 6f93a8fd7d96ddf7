"""Tests for text helpers."""
import pytest

from record_editor.utils.text import (
    format_datetime_for_input,
    humanize_label,
    is_numeric,
    to_dashed,
    to_text,
)


class TestToText:
    """Test value rendering."""

    def test_values(self):
        assert to_text(None) == ""
        assert to_text(True) == "true"
        assert to_text(False) == "false"
        assert to_text(42) == "42"
        assert to_text("x") == "x"


class TestLabels:
    """Test label building."""

    @pytest.mark.parametrize(
        "key,label",
        [
            ("itemName", "Name"),
            ("item_name", "Name"),
            ("server_type", "Server Type"),
            ("os", "Os"),
            ("modifiedBy", "Modified By"),
            ("id", "Id"),
        ],
    )
    def test_humanize_label(self, key, label):
        assert humanize_label(key) == label

    def test_to_dashed(self):
        assert to_dashed("itemModifiedBy") == "item-modified-by"
        assert to_dashed("") == ""


class TestNumbers:
    """Test numeric detection."""

    def test_is_numeric(self):
        assert is_numeric("10")
        assert is_numeric("-2.5")
        assert not is_numeric("ten")
        assert not is_numeric("")
        assert not is_numeric(None)

    @pytest.mark.parametrize("value", ["nan", "inf", "Infinity", "1_000", "\u0661\u0662", "1e", "."])
    def test_float_only_literals_rejected(self, value):
        """Test literals outside plain decimal notation are not numbers"""
        assert not is_numeric(value)

    def test_plain_decimal_forms(self):
        assert is_numeric(" 3 ")
        assert is_numeric("+.5")
        assert is_numeric("1e3")
        assert is_numeric("2.")


class TestDatetime:
    """Test datetime formatting for the detail form."""

    def test_utc_timestamp(self):
        assert format_datetime_for_input("2024-01-01T08:30:00Z") == "2024-01-01T08:30"

    def test_offset_converted_to_utc(self):
        assert format_datetime_for_input("2024-01-01T10:30:00+02:00") == "2024-01-01T08:30"

    def test_unparseable(self):
        assert format_datetime_for_input("yesterday") == ""
        assert format_datetime_for_input("") == ""
