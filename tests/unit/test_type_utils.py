"""Tests for type tag normalization."""

import pytest

from recordkit.utils.type_utils import TYPE_MAPPING, normalize_type, zero_value


class TestNormalizeType:
    """Test type tag normalization."""

    def test_canonical_types(self):
        for tag in ["string", "integer", "float", "boolean", "date", "datetime", "array"]:
            assert normalize_type(tag) == tag

    def test_aliases_are_case_insensitive(self):
        assert normalize_type("TEXT") == "string"
        assert normalize_type("Int") == "integer"
        assert normalize_type(" double ") == "float"
        assert normalize_type("bool") == "boolean"
        assert normalize_type("timestamp") == "datetime"
        assert normalize_type("list") == "array"

    def test_python_types(self):
        assert normalize_type(int) == "integer"
        assert normalize_type(str) == "string"
        assert normalize_type(list) == "array"

    def test_invalid(self):
        with pytest.raises(ValueError) as exc_info:
            normalize_type("blob")
        message = str(exc_info.value)
        assert "Invalid type: 'blob'" in message
        assert "datetime" in message

        with pytest.raises(ValueError):
            normalize_type("")

    def test_every_alias_maps_to_a_canonical_type(self):
        canonical = {"string", "integer", "float", "boolean", "date", "datetime", "array"}
        assert set(TYPE_MAPPING.values()) == canonical


class TestZeroValue:
    """Test zero values of omitted attributes."""

    def test_zero_values(self):
        assert zero_value("string") == ""
        assert zero_value("integer") == 0
        assert zero_value("float") == 0.0
        assert zero_value("boolean") is False
        assert zero_value("date") is None
        assert zero_value("datetime") is None
        assert zero_value("array") == []
