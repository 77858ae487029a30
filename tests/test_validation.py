"""Tests for type-pairing checks and light-touch value acceptance."""

import pytest

from jira_field_formatter.kernel.field_types import FieldType
from jira_field_formatter.kernel.validation import (
    is_already_formatted,
    is_empty,
    is_jira_key,
    parse_number,
    sanitize_string,
    validate_field_types,
    validate_value_for_field_type,
)


class TestValidateFieldTypes:

    def test_plain_type(self):
        check = validate_field_types("string")
        assert check.is_valid and check.error is None

    def test_array_with_item_type(self):
        assert validate_field_types("array", "version").is_valid
        assert validate_field_types(FieldType.ARRAY, FieldType.CHECKLIST_ITEM).is_valid

    def test_unknown_type(self):
        check = validate_field_types("bogus")
        assert not check.is_valid
        assert check.error == "Invalid field type: bogus"

    @pytest.mark.parametrize("item", [None, ""])
    def test_array_without_item_type(self, item):
        check = validate_field_types("array", item)
        assert check.error == 'Array field type is required when fieldType is "array"'

    def test_array_with_invalid_item_type(self):
        assert validate_field_types("array", "bogus").error == "Invalid array field type: bogus"
        assert validate_field_types("array", "array").error == "Invalid array field type: array"

    def test_item_type_on_non_array(self):
        check = validate_field_types("string", "string")
        assert not check.is_valid
        assert check.error == 'Array field type string is only allowed when fieldType is "array" (got string)'


class TestValueAcceptance:

    @pytest.mark.parametrize("value", [None, "", "  "])
    def test_empty_is_acceptable(self, value):
        assert validate_value_for_field_type(value, "number").is_valid

    def test_any_accepts_anything(self):
        assert validate_value_for_field_type({"weird": 1}, "any").is_valid
        assert validate_value_for_field_type([1, 2], "any").is_valid

    def test_preformatted_mapping(self):
        assert validate_value_for_field_type({"name": "Bug"}, "issuetype").is_valid
        assert validate_value_for_field_type({"key": "PROJ"}, "project").is_valid

    def test_misshapen_mapping(self):
        check = validate_value_for_field_type({"key": "PROJ"}, "issuetype")
        assert not check.is_valid
        assert "issuetype" in check.error

    def test_mapping_for_string_rejected(self):
        assert not validate_value_for_field_type({"text": "x"}, "string").is_valid

    def test_list_only_for_arrays(self):
        assert validate_value_for_field_type(["a", "b"], "array").is_valid
        check = validate_value_for_field_type(["a"], "string")
        assert not check.is_valid
        assert "only accepted for array fields" in check.error

    def test_scalars_accepted(self):
        assert validate_value_for_field_type("abc", "number").is_valid
        assert validate_value_for_field_type(12, "string").is_valid


class TestIsAlreadyFormatted:

    @pytest.mark.parametrize("value,field_type", [
        ({"value": "Hardware"}, "option-with-child"),
        ({"id": "10001"}, "priority"),
        ({"key": "PROJ-1"}, "issuelink"),
        (["a"], "array"),
        ("2023-12-25", "date"),
        ("2023-12-25T10:00:00", "datetime"),
        ({"remainingEstimate": "1h"}, "timetracking"),
        ({"watchers": []}, "watches"),
        ("text", "string"),
        (3.5, "number"),
        ("anything", "any"),
    ])
    def test_formatted(self, value, field_type):
        assert is_already_formatted(value, field_type)

    @pytest.mark.parametrize("value,field_type", [
        ("Bug", "issuetype"),
        ({"name": "x"}, "project"),
        ("12/25/2023", "date"),
        ("2023-12-25", "datetime"),
        (True, "number"),
        ("3", "number"),
        (None, "string"),
        ("  ", "any"),
    ])
    def test_not_formatted(self, value, field_type):
        assert not is_already_formatted(value, field_type)


class TestHelpers:

    @pytest.mark.parametrize("value,expected", [
        ("42", 42.0),
        (" 12.5kg ", 12.5),
        ("-3", -3.0),
        ("1e3", 1000.0),
        (".5", 0.5),
        (7, 7.0),
        ("abc", None),
        (True, None),
        (float("nan"), None),
        (float("inf"), None),
        ("inf", None),
    ])
    def test_parse_number(self, value, expected):
        assert parse_number(value) == expected

    def test_is_empty(self):
        assert is_empty(None) and is_empty("") and is_empty(" \t")
        assert not is_empty(0)
        assert not is_empty([])

    def test_sanitize_string(self):
        assert sanitize_string("  hi  ") == "hi"
        assert sanitize_string(12) == "12"

    def test_is_jira_key(self):
        assert is_jira_key("PROJ-123")
        assert not is_jira_key("proj-123")
        assert not is_jira_key("PROJ")
        assert not is_jira_key(None)
