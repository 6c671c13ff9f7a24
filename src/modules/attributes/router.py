"""Attributes module API router — attribute schemas, options and variant combinations."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from src.config import settings
from src.database.session import get_db
from src.exceptions import NotFoundException, ValidationException
from src.middleware.rate_limit import limiter
from src.modules.attributes.combinations import count_variant_combinations, generate_variant_combinations
from src.modules.attributes.schemas import (
    AttributeCreate,
    AttributeCreateBody,
    AttributeOption,
    AttributeReorderRequest,
    AttributeUpdate,
    AttributeValuesValidateRequest,
    CombinationRequest,
    CombinationResponse,
)
from src.modules.attributes.service import AttributeSchemaService
from src.modules.tenancy.auth import AuthenticatedUser, get_current_user
from src.schemas.responses import ActionResult, ErrorResponse

_AUTH_RESPONSES = {401: {"model": ErrorResponse}, 429: {"model": ErrorResponse}}


def _envelope(result: ActionResult) -> JSONResponse:
    return JSONResponse(status_code=result.status_code, content=result.to_body())


# ====================================================================
# Product-scoped attribute routes
# ====================================================================

product_attribute_router = APIRouter(
    prefix="/products/{product_id}/attributes", tags=["attributes"], responses=_AUTH_RESPONSES,
)


@product_attribute_router.post("", status_code=201)
@limiter.limit("30/minute")
async def create_attribute(
    request: Request,
    product_id: int,
    data: AttributeCreateBody,
    db: AsyncSession = Depends(get_db),
    user: AuthenticatedUser = Depends(get_current_user),
) -> JSONResponse:
    svc = AttributeSchemaService(db)
    payload = AttributeCreate(product_id=product_id, **data.model_dump())
    result = await svc.create_attribute(payload, user)
    if result.success:
        result.status_code = 201
    return _envelope(result)


@product_attribute_router.get("")
@limiter.limit("60/minute")
async def list_attributes(
    request: Request,
    product_id: int,
    db: AsyncSession = Depends(get_db),
    user: AuthenticatedUser = Depends(get_current_user),
) -> JSONResponse:
    svc = AttributeSchemaService(db)
    return _envelope(ActionResult.ok(await svc.list_attributes(product_id)))


@product_attribute_router.get("/options")
@limiter.limit("60/minute")
async def get_combinable_options(
    request: Request,
    product_id: int,
    variant_defining_only: bool = False,
    db: AsyncSession = Depends(get_db),
    user: AuthenticatedUser = Depends(get_current_user),
) -> JSONResponse:
    svc = AttributeSchemaService(db)
    options = await svc.get_combinable_options(product_id, variant_defining_only=variant_defining_only)
    return _envelope(ActionResult.ok(options))


@product_attribute_router.get("/combinations")
@limiter.limit("30/minute")
async def get_product_combinations(
    request: Request,
    product_id: int,
    db: AsyncSession = Depends(get_db),
    user: AuthenticatedUser = Depends(get_current_user),
) -> JSONResponse:
    svc = AttributeSchemaService(db)
    combinations = await svc.generate_product_combinations(product_id)
    return _envelope(ActionResult.ok(
        CombinationResponse(total=len(combinations), combinations=combinations)
    ))


@product_attribute_router.get("/schema")
@limiter.limit("60/minute")
async def get_attribute_schema_document(
    request: Request,
    product_id: int,
    db: AsyncSession = Depends(get_db),
    user: AuthenticatedUser = Depends(get_current_user),
) -> JSONResponse:
    svc = AttributeSchemaService(db)
    return _envelope(ActionResult.ok(await svc.get_attribute_schema_document(product_id)))


@product_attribute_router.post("/validate")
@limiter.limit("60/minute")
async def validate_attribute_values(
    request: Request,
    product_id: int,
    data: AttributeValuesValidateRequest,
    db: AsyncSession = Depends(get_db),
    user: AuthenticatedUser = Depends(get_current_user),
) -> JSONResponse:
    svc = AttributeSchemaService(db)
    return _envelope(await svc.validate_attribute_values(product_id, data.values))


@product_attribute_router.put("/order")
@limiter.limit("30/minute")
async def reorder_attributes(
    request: Request,
    product_id: int,
    data: AttributeReorderRequest,
    db: AsyncSession = Depends(get_db),
    user: AuthenticatedUser = Depends(get_current_user),
) -> JSONResponse:
    svc = AttributeSchemaService(db)
    return _envelope(await svc.reorder_attributes(data.items, user, product_id=product_id))


# ====================================================================
# Attribute routes
# ====================================================================

attribute_router = APIRouter(prefix="/attributes", tags=["attributes"], responses=_AUTH_RESPONSES)


@attribute_router.get("/{attribute_id}")
@limiter.limit("60/minute")
async def get_attribute(
    request: Request,
    attribute_id: int,
    db: AsyncSession = Depends(get_db),
    user: AuthenticatedUser = Depends(get_current_user),
) -> JSONResponse:
    svc = AttributeSchemaService(db)
    attribute = await svc.get_attribute(attribute_id)
    if attribute is None:
        return _envelope(ActionResult.fail(NotFoundException("Attribute not found")))
    return _envelope(ActionResult.ok(attribute))


@attribute_router.patch("/{attribute_id}")
@limiter.limit("30/minute")
async def update_attribute(
    request: Request,
    attribute_id: int,
    data: AttributeUpdate,
    db: AsyncSession = Depends(get_db),
    user: AuthenticatedUser = Depends(get_current_user),
) -> JSONResponse:
    svc = AttributeSchemaService(db)
    return _envelope(await svc.update_attribute(attribute_id, data, user))


@attribute_router.delete("/{attribute_id}")
@limiter.limit("30/minute")
async def delete_attribute(
    request: Request,
    attribute_id: int,
    db: AsyncSession = Depends(get_db),
    user: AuthenticatedUser = Depends(get_current_user),
) -> JSONResponse:
    svc = AttributeSchemaService(db)
    return _envelope(await svc.delete_attribute(attribute_id, user))


@attribute_router.post("/{attribute_id}/options")
@limiter.limit("30/minute")
async def add_option(
    request: Request,
    attribute_id: int,
    data: AttributeOption,
    db: AsyncSession = Depends(get_db),
    user: AuthenticatedUser = Depends(get_current_user),
) -> JSONResponse:
    svc = AttributeSchemaService(db)
    return _envelope(await svc.add_option(attribute_id, data, user))


@attribute_router.delete("/{attribute_id}/options/{value:path}")
@limiter.limit("30/minute")
async def remove_option(
    request: Request,
    attribute_id: int,
    value: str,
    db: AsyncSession = Depends(get_db),
    user: AuthenticatedUser = Depends(get_current_user),
) -> JSONResponse:
    svc = AttributeSchemaService(db)
    return _envelope(await svc.remove_option(attribute_id, value, user))


# ====================================================================
# Combination Router
# ====================================================================

combination_router = APIRouter(prefix="/combinations", tags=["combinations"], responses=_AUTH_RESPONSES)


@combination_router.post("")
@limiter.limit("30/minute")
async def generate_combinations(
    request: Request,
    data: CombinationRequest,
    user: AuthenticatedUser = Depends(get_current_user),
) -> JSONResponse:
    total = count_variant_combinations(data.attributes)
    if total > settings.max_variant_combinations:
        return _envelope(ActionResult.fail(ValidationException(
            f"Too many combinations ({total}); the limit is {settings.max_variant_combinations}"
        )))
    combinations = generate_variant_combinations(data.attributes)
    return _envelope(ActionResult.ok(CombinationResponse(total=total, combinations=combinations)))
