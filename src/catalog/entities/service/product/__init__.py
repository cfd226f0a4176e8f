"""Entity package: Product."""

from .entity import Product
from .schemas import PageMeta, PaginationParams, ProductCreate, ProductPage, ProductUpdate
from .table import ProductTable

__all__ = [
    "PageMeta",
    "PaginationParams",
    "Product",
    "ProductCreate",
    "ProductPage",
    "ProductTable",
    "ProductUpdate",
]
