"""Attribute validators — option uniqueness, typed defaults and validation rule schemas."""

from __future__ import annotations

from typing import Any

from jsonschema import Draft7Validator
from jsonschema.exceptions import SchemaError

from src.exceptions import ValidationException
from src.models.enums import AttributeType


def validate_unique_options(options: list[dict]) -> None:
    """Reject an options list that repeats a ``value``."""
    seen: set[str] = set()
    duplicates = []
    for option in options:
        if option["value"] in seen:
            duplicates.append({"field": "options", "message": f"Duplicate option value '{option['value']}'"})
        seen.add(option["value"])
    if duplicates:
        raise ValidationException("Option values must be unique within an attribute", details=duplicates)


def validate_default_value(attribute_type: str, default_value: Any, option_values: list[str]) -> None:
    """Check that *default_value* is a value of *attribute_type*.

    ``None`` is always accepted. For option-backed types with a non-empty
    option list the default must be one of the option values.
    """
    if default_value is None:
        return

    kind = AttributeType(attribute_type)
    if kind is AttributeType.BOOLEAN:
        valid = isinstance(default_value, bool)
    elif kind is AttributeType.NUMBER:
        valid = isinstance(default_value, (int, float)) and not isinstance(default_value, bool)
    else:
        valid = isinstance(default_value, str)

    if not valid:
        raise ValidationException(
            f"Default value {default_value!r} is not a valid {kind.value} value",
            details=[{"field": "default_value", "message": f"Expected a {kind.value} value"}],
        )

    if kind.uses_options and option_values and default_value not in option_values:
        raise ValidationException(
            f"Default value '{default_value}' is not one of the attribute options",
            details=[{"field": "default_value", "message": "Must match an option value"}],
        )


def validate_rules_schema(validation_rules: dict | None) -> None:
    """Validation rules, when present, must be a Draft 7 JSON Schema fragment."""
    if not validation_rules:
        return
    try:
        Draft7Validator.check_schema(validation_rules)
    except SchemaError as exc:
        field_path = ".".join(str(p) for p in exc.absolute_path) or "(root)"
        raise ValidationException(
            message="Validation rules are not a valid JSON Schema",
            details=[{"field": f"validation_rules.{field_path}", "message": exc.message}],
        ) from exc


def validate_attribute_definition(
    attribute_type: str,
    options: list[dict],
    default_value: Any,
    validation_rules: dict | None,
) -> None:
    validate_unique_options(options)
    validate_default_value(attribute_type, default_value, [option["value"] for option in options])
    validate_rules_schema(validation_rules)
