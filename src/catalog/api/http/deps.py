"""FastAPI dependency implementations."""

from __future__ import annotations

from fastapi import HTTPException, Query, Request

from src.catalog.api.http.app_data import ApplicationDependencies
from src.catalog.core.services import DbSessionService, ProductService
from src.catalog.entities.service.product import PaginationParams
from src.catalog.runtime.config.config_data import ConfigData


def get_app_config(request: Request) -> ConfigData:
    """Get the configuration the application was built with."""
    return request.app.state.config


def get_app_dependencies(request: Request) -> ApplicationDependencies:
    return request.app.state.app_dependencies


def get_database_service(request: Request) -> DbSessionService:
    """Get the database service instance."""
    return get_app_dependencies(request).database_service


def get_product_service(request: Request) -> ProductService:
    """Get the product service instance."""
    return get_app_dependencies(request).product_service


def get_pagination(
    request: Request,
    limit: int | None = Query(default=None, gt=0, description="Page size"),
    page: int = Query(default=1, ge=1, description="1-indexed page number"),
) -> PaginationParams:
    """Build pagination from query parameters, applying configured limits."""
    products_config = get_app_config(request).products
    if limit is None:
        limit = products_config.default_limit
    if limit > products_config.max_limit:
        raise HTTPException(
            status_code=422,
            detail=f"limit must not exceed {products_config.max_limit}",
        )
    return PaginationParams(limit=limit, page=page)
