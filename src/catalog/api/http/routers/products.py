"""Product API router with CRUD operations."""

from fastapi import APIRouter, Depends

from src.catalog.api.http.deps import get_pagination, get_product_service
from src.catalog.core.services import ProductService
from src.catalog.entities.service.product import (
    PaginationParams,
    Product,
    ProductCreate,
    ProductPage,
    ProductUpdate,
)

router = APIRouter(prefix="/products", tags=["products"])


@router.post("", response_model=Product, status_code=201)
async def create_product(
    product: ProductCreate,
    service: ProductService = Depends(get_product_service),
) -> Product:
    """Create a new product."""
    return await service.create(product)


@router.get("", response_model=ProductPage)
async def list_products(
    pagination: PaginationParams = Depends(get_pagination),
    service: ProductService = Depends(get_product_service),
) -> ProductPage:
    """List one page of products."""
    return await service.find_all(pagination)


@router.get("/{product_id}", response_model=Product)
async def get_product(
    product_id: int,
    service: ProductService = Depends(get_product_service),
) -> Product:
    """Get a product by ID."""
    return await service.find_one(product_id)


@router.patch("/{product_id}", response_model=Product)
async def update_product(
    product_id: int,
    changes: ProductUpdate,
    service: ProductService = Depends(get_product_service),
) -> Product:
    """Overwrite the given fields of a product. A body ``id`` is ignored."""
    return await service.update(product_id, changes)


@router.delete("/{product_id}", response_model=Product)
async def delete_product(
    product_id: int,
    service: ProductService = Depends(get_product_service),
) -> Product:
    """Delete a product and return its last state."""
    return await service.remove(product_id)
