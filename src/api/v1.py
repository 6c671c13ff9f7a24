"""Centralized v1 API router — all module routers are included here."""

from fastapi import APIRouter

from src.modules.attributes.router import attribute_router, combination_router, product_attribute_router

v1_router = APIRouter(prefix="/api/v1")
v1_router.include_router(product_attribute_router)
v1_router.include_router(attribute_router)
v1_router.include_router(combination_router)
