"""Entities module with entity-centric structure.

Each entity has its own package containing:
- entity.py: Domain model returned to callers
- table.py: Database persistence model
- schemas.py: Input and page models validated at the boundary
"""

from .service.product import (
    PageMeta,
    PaginationParams,
    Product,
    ProductCreate,
    ProductPage,
    ProductTable,
    ProductUpdate,
)

__all__ = [
    "PageMeta",
    "PaginationParams",
    "Product",
    "ProductCreate",
    "ProductPage",
    "ProductTable",
    "ProductUpdate",
]
