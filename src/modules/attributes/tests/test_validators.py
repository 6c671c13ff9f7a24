"""Tests for attribute definition validators."""

from __future__ import annotations

import pytest

from src.exceptions import ValidationException
from src.modules.attributes.validators import (
    validate_attribute_definition,
    validate_default_value,
    validate_rules_schema,
    validate_unique_options,
)


def _options(*values: str) -> list[dict]:
    return [{"value": v, "label": v.title()} for v in values]


class TestValidateUniqueOptions:
    def test_distinct_values_pass(self) -> None:
        validate_unique_options(_options("S", "M", "L"))

    def test_empty_list_passes(self) -> None:
        validate_unique_options([])

    def test_duplicate_value_rejected(self) -> None:
        with pytest.raises(ValidationException, match="unique") as exc_info:
            validate_unique_options(_options("S", "M", "S"))
        assert exc_info.value.details == [
            {"field": "options", "message": "Duplicate option value 'S'"}
        ]

    def test_same_label_different_value_allowed(self) -> None:
        validate_unique_options([{"value": "s", "label": "Small"}, {"value": "sm", "label": "Small"}])


class TestValidateDefaultValue:
    def test_none_always_allowed(self) -> None:
        for attribute_type in ("text", "select", "number", "boolean", "color"):
            validate_default_value(attribute_type, None, [])

    def test_boolean_requires_bool(self) -> None:
        validate_default_value("boolean", False, [])
        with pytest.raises(ValidationException):
            validate_default_value("boolean", "false", [])

    def test_number_accepts_int_and_float(self) -> None:
        validate_default_value("number", 3, [])
        validate_default_value("number", 2.5, [])

    def test_number_rejects_bool_and_str(self) -> None:
        with pytest.raises(ValidationException):
            validate_default_value("number", True, [])
        with pytest.raises(ValidationException):
            validate_default_value("number", "3", [])

    def test_text_requires_str(self) -> None:
        validate_default_value("text", "cotton", [])
        with pytest.raises(ValidationException):
            validate_default_value("text", 7, [])

    def test_select_default_must_be_an_option(self) -> None:
        validate_default_value("select", "M", ["S", "M"])
        with pytest.raises(ValidationException, match="not one of the attribute options"):
            validate_default_value("select", "XL", ["S", "M"])

    def test_select_without_options_accepts_any_string(self) -> None:
        validate_default_value("select", "XL", [])

    def test_color_default_must_be_an_option(self) -> None:
        with pytest.raises(ValidationException):
            validate_default_value("color", "#000000", ["#ffffff"])

    def test_unknown_type_rejected(self) -> None:
        with pytest.raises(ValueError):
            validate_default_value("date", "2024-01-01", [])


class TestValidateRulesSchema:
    def test_empty_rules_pass(self) -> None:
        validate_rules_schema({})
        validate_rules_schema(None)

    def test_valid_schema_fragment_passes(self) -> None:
        validate_rules_schema({"type": "number", "minimum": 0, "maximum": 100})
        validate_rules_schema({"type": "string", "pattern": "^[A-Z]{3}$", "maxLength": 3})

    def test_invalid_schema_rejected_with_field_path(self) -> None:
        with pytest.raises(ValidationException, match="not a valid JSON Schema") as exc_info:
            validate_rules_schema({"type": "number", "minimum": "zero"})
        assert exc_info.value.details[0]["field"].startswith("validation_rules.")


class TestValidateAttributeDefinition:
    def test_consistent_definition_passes(self) -> None:
        validate_attribute_definition("select", _options("S", "M"), "S", {"type": "string"})

    def test_each_check_applies(self) -> None:
        with pytest.raises(ValidationException, match="unique"):
            validate_attribute_definition("select", _options("S", "S"), None, {})
        with pytest.raises(ValidationException, match="Default value"):
            validate_attribute_definition("select", _options("S"), "M", {})
        with pytest.raises(ValidationException, match="JSON Schema"):
            validate_attribute_definition("text", [], None, {"type": 12})
