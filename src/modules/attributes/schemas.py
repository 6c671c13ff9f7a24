"""Pydantic request/response schemas for the attributes module."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.models.enums import AttributeType
from src.modules.attributes.constants import (
    ATTRIBUTE_KEY_MAX_LENGTH,
    ATTRIBUTE_KEY_PATTERN,
    MAX_OPTIONS_PER_ATTRIBUTE,
)

# Scalar JSON values a variant attribute or default may hold
AttributeValue = str | int | float | bool


# ---------------------------------------------------------------------------
# Options
# ---------------------------------------------------------------------------

class AttributeOption(BaseModel):
    value: str = Field(..., min_length=1, max_length=255)
    label: str = Field(..., min_length=1, max_length=255)


# ---------------------------------------------------------------------------
# Attribute schemas
# ---------------------------------------------------------------------------

class AttributeCreateBody(BaseModel):
    """Attribute fields as posted under a product route."""

    attribute_key: str = Field(..., pattern=ATTRIBUTE_KEY_PATTERN, max_length=ATTRIBUTE_KEY_MAX_LENGTH)
    attribute_label: str = Field(..., min_length=1, max_length=255)
    attribute_type: AttributeType
    options: list[AttributeOption] = Field(default_factory=list, max_length=MAX_OPTIONS_PER_ATTRIBUTE)
    default_value: AttributeValue | None = None
    is_required: bool = False
    is_variant_defining: bool = True
    validation_rules: dict[str, Any] = Field(default_factory=dict)
    help_text: str | None = Field(None, max_length=2000)
    sort_order: int = 0


class AttributeCreate(AttributeCreateBody):
    product_id: int


class AttributeUpdate(BaseModel):
    """Partial update; only fields explicitly set are written."""

    product_id: int | None = None
    attribute_key: str | None = Field(None, pattern=ATTRIBUTE_KEY_PATTERN, max_length=ATTRIBUTE_KEY_MAX_LENGTH)
    attribute_label: str | None = Field(None, min_length=1, max_length=255)
    attribute_type: AttributeType | None = None
    options: list[AttributeOption] | None = Field(None, max_length=MAX_OPTIONS_PER_ATTRIBUTE)
    default_value: AttributeValue | None = None
    is_required: bool | None = None
    is_variant_defining: bool | None = None
    validation_rules: dict[str, Any] | None = None
    help_text: str | None = Field(None, max_length=2000)
    sort_order: int | None = None


class AttributeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    product_id: int
    attribute_key: str
    attribute_label: str
    attribute_type: str
    options: list[AttributeOption] = []
    default_value: Any | None = None
    is_required: bool
    is_variant_defining: bool
    validation_rules: dict[str, Any] = {}
    help_text: str | None = None
    sort_order: int
    created_at: datetime
    updated_at: datetime

    @field_validator("options", mode="before")
    @classmethod
    def _null_options(cls, value: Any) -> Any:
        return value or []

    @field_validator("validation_rules", mode="before")
    @classmethod
    def _null_rules(cls, value: Any) -> Any:
        return value or {}


# ---------------------------------------------------------------------------
# Ordering
# ---------------------------------------------------------------------------

class AttributeOrderItem(BaseModel):
    id: int
    sort_order: int


class AttributeReorderRequest(BaseModel):
    items: list[AttributeOrderItem] = Field(..., min_length=1)


# ---------------------------------------------------------------------------
# Combinations & value validation
# ---------------------------------------------------------------------------

class CombinationRequest(BaseModel):
    attributes: dict[str, list[str]] = Field(default_factory=dict)


class CombinationResponse(BaseModel):
    total: int
    combinations: list[dict[str, str]]


class AttributeValuesValidateRequest(BaseModel):
    values: dict[str, Any] = Field(default_factory=dict)


class AttributeValuesValidationResponse(BaseModel):
    valid: bool
