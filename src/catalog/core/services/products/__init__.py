from .errors import ProductInternalError, ProductNotFoundError
from .product_service import ProductService

__all__ = ["ProductInternalError", "ProductNotFoundError", "ProductService"]
