"""Tests for field-level validators."""

import re

from src.validation.fields import (
    is_number,
    validate_iso_timestamp,
    validate_numeric_field,
    validate_string_field,
    validate_url,
)


class TestIsNumber:
    def test_numbers(self):
        assert is_number(0)
        assert is_number(1.5)

    def test_rejects_bool_nan_and_strings(self):
        assert not is_number(True)
        assert not is_number(float("nan"))
        assert not is_number("5")
        assert not is_number(None)


class TestValidateStringField:
    def test_valid(self):
        assert validate_string_field("Sprint 1", "Sprint name", required=True) is None

    def test_required(self):
        assert validate_string_field("", "Name", required=True) == "Name is required"
        assert validate_string_field("   ", "Name", required=True) == "Name is required"
        assert validate_string_field(None, "Name", required=True) == "Name is required"

    def test_optional_empty_is_valid(self):
        assert validate_string_field("", "Notes", min_length=3) is None

    def test_min_length(self):
        assert (
            validate_string_field("ab", "Name", min_length=3)
            == "Name must be at least 3 characters long"
        )

    def test_max_length(self):
        assert (
            validate_string_field("x" * 101, "Sprint name", max_length=100)
            == "Sprint name must be no more than 100 characters long"
        )
        assert validate_string_field("x" * 100, "Sprint name", max_length=100) is None

    def test_length_uses_trimmed_text(self):
        assert validate_string_field("  abc  ", "Name", max_length=3) is None

    def test_pattern_with_custom_message(self):
        digits = re.compile(r"^\d+$")
        assert (
            validate_string_field("abc", "Code", pattern=digits, pattern_message="Digits only")
            == "Digits only"
        )
        assert validate_string_field("abc", "Code", pattern=digits) == "Code format is invalid"

    def test_rule_order_required_first(self):
        assert validate_string_field("", "Name", required=True, min_length=3) == "Name is required"

    def test_non_text(self):
        assert validate_string_field(42, "Name", required=True) == "Name must be text"


class TestValidateNumericField:
    def test_valid(self):
        assert validate_numeric_field(5, "Points", required=True, min_value=0, max_value=10) is None

    def test_required(self):
        assert validate_numeric_field(None, "Points", required=True) == "Points is required"
        assert validate_numeric_field(float("nan"), "Points", required=True) == "Points is required"

    def test_optional_missing_is_valid(self):
        assert validate_numeric_field(None, "Points") is None

    def test_no_coercion(self):
        assert validate_numeric_field("5", "Points", required=True) == "Points must be a number"
        assert validate_numeric_field(True, "Points", required=True) == "Points must be a number"

    def test_zero_not_allowed(self):
        assert (
            validate_numeric_field(0, "Business days", required=True, allow_zero=False, min_value=1)
            == "Business days must be greater than 0"
        )

    def test_zero_allowed_by_default(self):
        assert validate_numeric_field(0, "Points", required=True, min_value=0) is None

    def test_bounds(self):
        assert validate_numeric_field(-1, "Hours", min_value=0) == "Hours must be at least 0"
        assert validate_numeric_field(201, "Hours", max_value=200) == "Hours must be no more than 200"

    def test_integer(self):
        assert (
            validate_numeric_field(2.5, "Business days", integer=True)
            == "Business days must be a whole number"
        )
        assert validate_numeric_field(2.0, "Business days", integer=True) is None


class TestValidateUrl:
    def test_optional_empty(self):
        assert validate_url(None, "Link") is None
        assert validate_url("", "Link") is None

    def test_required(self):
        assert validate_url("", "Link", required=True) == "Link is required"

    def test_scheme(self):
        assert validate_url("https://example.com", "Link") is None
        assert validate_url("http://example.com/x", "Link") is None
        assert validate_url("ftp://example.com", "Link") == (
            "Link must be a valid URL starting with http:// or https://"
        )


class TestValidateIsoTimestamp:
    def test_valid(self):
        assert validate_iso_timestamp("2024-01-01T09:00:00.000Z", "Created date") is None
        assert validate_iso_timestamp("2024-01-01T09:00:00+00:00", "Created date") is None

    def test_invalid(self):
        assert validate_iso_timestamp("yesterday", "Created date") == "Created date is invalid"
        assert validate_iso_timestamp(None, "Created date") == "Created date is invalid"
