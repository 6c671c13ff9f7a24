"""Attribute schema service — CRUD, usage-guarded option edits, ordering, combinations.

Mutating operations never raise: each runs inside ``_guarded`` which rolls the
session back on failure and reports the outcome as an ``ActionResult``.
Read operations degrade to empty values and log the failure.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable
from typing import Any, TypeVar

from sqlalchemy import Boolean, ColumnElement, bindparam, func, select, type_coerce
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.database.base import JSONType
from src.exceptions import (
    AppException,
    ConflictException,
    NotFoundException,
    StoreFailureException,
    ValidationException,
)
from src.models.enums import AttributeType
from src.models.product_attribute_schema import ProductAttributeSchema
from src.models.product_variant import ProductVariant
from src.modules.attributes.combinations import generate_variant_combinations
from src.modules.attributes.constants import (
    ATTRIBUTE_IN_USE,
    DUPLICATE_ATTRIBUTE_KEY,
    DUPLICATE_OPTION_VALUE,
    MAX_OPTIONS_PER_ATTRIBUTE,
    OPTION_IN_USE,
    OPTION_NOT_FOUND,
    REORDER_FAILED,
    UNKNOWN_ERROR,
)
from src.modules.attributes.schemas import (
    AttributeCreate,
    AttributeOption,
    AttributeOrderItem,
    AttributeResponse,
    AttributeUpdate,
    AttributeValuesValidationResponse,
)
from src.modules.attributes.validators import validate_attribute_definition
from src.modules.tenancy.auth import AuthenticatedUser
from src.modules.tenancy.ownership import (
    load_owned_attribute,
    load_owned_attributes,
    require_product_owner,
)
from src.schemas.responses import ActionResult

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Columns an update may not set to null
_NON_NULLABLE_FIELDS = frozenset({
    "product_id",
    "attribute_key",
    "attribute_label",
    "attribute_type",
    "options",
    "is_required",
    "is_variant_defining",
    "validation_rules",
    "sort_order",
})


def variant_attribute_condition(
    dialect_name: str, attribute_key: str, value: str | None = None
) -> ColumnElement[bool]:
    """Match variants whose attribute map holds *attribute_key*, set to *value* when given.

    On PostgreSQL this uses the JSONB ``?`` and ``@>`` operators, which the
    GIN index on ``product_variants.attributes`` serves.
    """
    if dialect_name == "postgresql":
        attributes = type_coerce(ProductVariant.attributes, JSONB)
        if value is None:
            return attributes.has_key(attribute_key)
        return attributes.contains({attribute_key: value})

    extracted = ProductVariant.attributes[attribute_key].as_string()
    if value is None:
        return extracted.is_not(None)
    return extracted == value


class AttributeSchemaService:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    async def create_attribute(
        self, data: AttributeCreate, user: AuthenticatedUser | None
    ) -> ActionResult[AttributeResponse]:
        return await self._guarded("create_attribute", self._create(data, user))

    async def update_attribute(
        self, attribute_id: int, data: AttributeUpdate, user: AuthenticatedUser | None
    ) -> ActionResult[AttributeResponse]:
        return await self._guarded("update_attribute", self._update(attribute_id, data, user))

    async def delete_attribute(
        self, attribute_id: int, user: AuthenticatedUser | None
    ) -> ActionResult[None]:
        return await self._guarded("delete_attribute", self._delete(attribute_id, user))

    async def list_attributes(self, product_id: int) -> list[AttributeResponse]:
        """Attributes of a product ordered by sort_order, then creation.

        Returns an empty list when the product has none *or* the lookup fails.
        """
        try:
            attributes = await self._fetch_attributes(product_id)
            return [AttributeResponse.model_validate(attribute) for attribute in attributes]
        except Exception:
            logger.exception("Error fetching attributes for product %s", product_id)
            await self._rollback()
            return []

    async def get_attribute(self, attribute_id: int) -> AttributeResponse | None:
        try:
            attribute = await self._session.get(ProductAttributeSchema, attribute_id)
            if attribute is None:
                return None
            return AttributeResponse.model_validate(attribute)
        except Exception:
            logger.exception("Error fetching attribute %s", attribute_id)
            await self._rollback()
            return None

    # ------------------------------------------------------------------
    # Ordering & options
    # ------------------------------------------------------------------

    async def reorder_attributes(
        self,
        items: list[AttributeOrderItem],
        user: AuthenticatedUser | None,
        product_id: int | None = None,
    ) -> ActionResult[None]:
        """Apply all sort_order changes or none of them.

        When *product_id* is given every attribute must belong to that product.
        """
        return await self._guarded("reorder_attributes", self._reorder(items, user, product_id))

    async def add_option(
        self, attribute_id: int, option: AttributeOption, user: AuthenticatedUser | None
    ) -> ActionResult[AttributeResponse]:
        return await self._guarded("add_option", self._add_option(attribute_id, option, user))

    async def remove_option(
        self, attribute_id: int, value: str, user: AuthenticatedUser | None
    ) -> ActionResult[AttributeResponse]:
        return await self._guarded("remove_option", self._remove_option(attribute_id, value, user))

    # ------------------------------------------------------------------
    # Combinations
    # ------------------------------------------------------------------

    async def get_combinable_options(
        self, product_id: int, variant_defining_only: bool = False
    ) -> dict[str, list[str]]:
        """Map each attribute key to its option values, in list order.

        Empty on failure, like :meth:`list_attributes`.
        """
        try:
            attributes = await self._fetch_attributes(product_id)
        except Exception:
            logger.exception("Error fetching combinable options for product %s", product_id)
            await self._rollback()
            return {}
        return {
            attribute.attribute_key: attribute.option_values
            for attribute in attributes
            if attribute.is_variant_defining or not variant_defining_only
        }

    async def generate_product_combinations(self, product_id: int) -> list[dict[str, str]]:
        """Every combination of the product's option-backed, variant-defining attributes."""
        try:
            attributes = await self._fetch_attributes(product_id)
        except Exception:
            logger.exception("Error fetching attributes for combinations of product %s", product_id)
            await self._rollback()
            return []
        options = {
            attribute.attribute_key: attribute.option_values
            for attribute in attributes
            if attribute.is_variant_defining and AttributeType(attribute.attribute_type).uses_options
        }
        return generate_variant_combinations(options)

    # ------------------------------------------------------------------
    # Store functions
    # ------------------------------------------------------------------

    async def get_attribute_schema_document(self, product_id: int) -> dict[str, Any]:
        """JSON schema document built by the store's ``get_product_attribute_schema``."""
        try:
            result = await self._session.execute(
                select(func.get_product_attribute_schema(product_id, type_=JSONType))
            )
            return result.scalar() or {}
        except Exception:
            logger.exception("Error fetching attribute schema for product %s", product_id)
            await self._rollback()
            return {}

    async def validate_attribute_values(
        self, product_id: int, values: dict[str, Any]
    ) -> ActionResult[AttributeValuesValidationResponse]:
        return await self._guarded(
            "validate_attribute_values", self._validate_values(product_id, values)
        )

    # ------------------------------------------------------------------
    # Operation bodies
    # ------------------------------------------------------------------

    async def _create(
        self, data: AttributeCreate, user: AuthenticatedUser | None
    ) -> AttributeResponse:
        await require_product_owner(self._session, data.product_id, user)
        await self._ensure_key_available(data.product_id, data.attribute_key)

        options = [option.model_dump() for option in data.options]
        validate_attribute_definition(
            data.attribute_type.value, options, data.default_value, data.validation_rules
        )

        attribute = ProductAttributeSchema(
            product_id=data.product_id,
            attribute_key=data.attribute_key,
            attribute_label=data.attribute_label,
            attribute_type=data.attribute_type.value,
            options=options,
            default_value=data.default_value,
            is_required=data.is_required,
            is_variant_defining=data.is_variant_defining,
            validation_rules=data.validation_rules,
            help_text=data.help_text,
            sort_order=data.sort_order,
        )
        self._session.add(attribute)
        await self._session.flush()
        await self._session.refresh(attribute)

        logger.info(
            "Created attribute %s '%s' for product %s",
            attribute.id, attribute.attribute_key, attribute.product_id,
        )
        return AttributeResponse.model_validate(attribute)

    async def _update(
        self, attribute_id: int, data: AttributeUpdate, user: AuthenticatedUser | None
    ) -> AttributeResponse:
        attribute = await load_owned_attribute(self._session, attribute_id, user)
        update_data = data.model_dump(exclude_unset=True, mode="json")

        nulled = sorted(field for field, value in update_data.items()
                        if value is None and field in _NON_NULLABLE_FIELDS)
        if nulled:
            raise ValidationException(
                "Fields cannot be null: " + ", ".join(nulled),
                details=[{"field": field, "message": "Cannot be null"} for field in nulled],
            )

        target_product_id = update_data.get("product_id", attribute.product_id)
        target_key = update_data.get("attribute_key", attribute.attribute_key)
        if target_product_id != attribute.product_id:
            await require_product_owner(self._session, target_product_id, user)
        if target_key != attribute.attribute_key or target_product_id != attribute.product_id:
            await self._ensure_key_available(target_product_id, target_key, exclude_id=attribute.id)

        current_options = list(attribute.options or [])
        merged_options = update_data.get("options", current_options)
        validate_attribute_definition(
            update_data.get("attribute_type", attribute.attribute_type),
            merged_options,
            update_data.get("default_value", attribute.default_value),
            update_data.get("validation_rules", attribute.validation_rules),
        )

        if "options" in update_data:
            kept = {option["value"] for option in merged_options}
            for option in current_options:
                if option["value"] not in kept and await self._option_in_use(
                    attribute.product_id, attribute.attribute_key, option["value"]
                ):
                    raise ConflictException(OPTION_IN_USE)

        for field, value in update_data.items():
            setattr(attribute, field, value)
        await self._session.flush()
        await self._session.refresh(attribute)

        logger.info("Updated attribute %s fields=%s", attribute.id, sorted(update_data))
        return AttributeResponse.model_validate(attribute)

    async def _delete(self, attribute_id: int, user: AuthenticatedUser | None) -> None:
        attribute = await load_owned_attribute(self._session, attribute_id, user)
        product_id = attribute.product_id

        if await self._key_in_use(product_id, attribute.attribute_key):
            raise ConflictException(ATTRIBUTE_IN_USE)

        await self._session.delete(attribute)
        await self._session.flush()
        logger.info("Deleted attribute %s from product %s", attribute_id, product_id)

    async def _reorder(
        self, items: list[AttributeOrderItem], user: AuthenticatedUser | None, product_id: int | None
    ) -> None:
        ids = [item.id for item in items]
        if len(set(ids)) != len(ids):
            raise ValidationException(f"{REORDER_FAILED}: duplicate attribute ids")

        attributes = await load_owned_attributes(self._session, ids, user)
        if product_id is not None:
            foreign = sorted(a.id for a in attributes.values() if a.product_id != product_id)
            if foreign:
                raise ValidationException(
                    f"{REORDER_FAILED}: attributes {foreign} do not belong to product {product_id}"
                )
        for item in items:
            attributes[item.id].sort_order = item.sort_order
        await self._session.flush()
        logger.info("Reordered %d attributes", len(items))

    async def _add_option(
        self, attribute_id: int, option: AttributeOption, user: AuthenticatedUser | None
    ) -> AttributeResponse:
        attribute = await load_owned_attribute(self._session, attribute_id, user)
        options = list(attribute.options or [])

        if any(existing["value"] == option.value for existing in options):
            raise ConflictException(DUPLICATE_OPTION_VALUE)
        if len(options) >= MAX_OPTIONS_PER_ATTRIBUTE:
            raise ValidationException(
                f"Attribute already has the maximum of {MAX_OPTIONS_PER_ATTRIBUTE} options"
            )

        # Assign a new list so the JSON column is marked dirty
        attribute.options = [*options, option.model_dump()]
        await self._session.flush()
        await self._session.refresh(attribute)
        return AttributeResponse.model_validate(attribute)

    async def _remove_option(
        self, attribute_id: int, value: str, user: AuthenticatedUser | None
    ) -> AttributeResponse:
        attribute = await load_owned_attribute(self._session, attribute_id, user)
        options = list(attribute.options or [])
        remaining = [option for option in options if option["value"] != value]

        if len(remaining) == len(options):
            raise NotFoundException(OPTION_NOT_FOUND)
        if await self._option_in_use(attribute.product_id, attribute.attribute_key, value):
            raise ConflictException(OPTION_IN_USE)

        attribute.options = remaining
        await self._session.flush()
        await self._session.refresh(attribute)
        return AttributeResponse.model_validate(attribute)

    async def _validate_values(
        self, product_id: int, values: dict[str, Any]
    ) -> AttributeValuesValidationResponse:
        stmt = select(
            func.validate_attribute_values(
                product_id,
                bindparam("attribute_values", values, type_=JSONType),
                type_=Boolean,
            )
        )
        result = await self._session.execute(stmt)
        return AttributeValuesValidationResponse(valid=bool(result.scalar()))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _fetch_attributes(self, product_id: int) -> list[ProductAttributeSchema]:
        stmt = (
            select(ProductAttributeSchema)
            .where(ProductAttributeSchema.product_id == product_id)
            .order_by(
                ProductAttributeSchema.sort_order,
                ProductAttributeSchema.created_at,
                ProductAttributeSchema.id,
            )
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def _ensure_key_available(
        self, product_id: int, attribute_key: str, exclude_id: int | None = None
    ) -> None:
        stmt = select(ProductAttributeSchema.id).where(
            ProductAttributeSchema.product_id == product_id,
            ProductAttributeSchema.attribute_key == attribute_key,
        )
        if exclude_id is not None:
            stmt = stmt.where(ProductAttributeSchema.id != exclude_id)
        result = await self._session.execute(stmt.limit(1))
        if result.scalar_one_or_none() is not None:
            raise ConflictException(DUPLICATE_ATTRIBUTE_KEY)

    async def _variant_in_use(
        self, product_id: int, attribute_key: str, value: str | None = None
    ) -> bool:
        condition = variant_attribute_condition(
            self._session.get_bind().dialect.name, attribute_key, value
        )
        result = await self._session.execute(
            select(ProductVariant.id)
            .where(ProductVariant.product_id == product_id, condition)
            .limit(1)
        )
        return result.scalar_one_or_none() is not None

    async def _key_in_use(self, product_id: int, attribute_key: str) -> bool:
        return await self._variant_in_use(product_id, attribute_key)

    async def _option_in_use(self, product_id: int, attribute_key: str, value: str) -> bool:
        return await self._variant_in_use(product_id, attribute_key, value)

    async def _guarded(self, action: str, operation: Awaitable[T]) -> ActionResult[T]:
        try:
            data = await operation
        except AppException as exc:
            await self._rollback()
            logger.warning(
                "Error in %s: %s (%s)", action, exc.message, getattr(exc, "reason", None) or exc.code
            )
            return ActionResult.fail(exc)
        except SQLAlchemyError as exc:
            await self._rollback()
            logger.exception("Store failure in %s", action)
            return ActionResult.fail(StoreFailureException(str(getattr(exc, "orig", None) or exc)))
        except Exception:
            await self._rollback()
            logger.exception("Unexpected error in %s", action)
            return ActionResult.fail(AppException(UNKNOWN_ERROR))
        return ActionResult.ok(data)

    async def _rollback(self) -> None:
        if self._session.in_transaction():
            await self._session.rollback()
