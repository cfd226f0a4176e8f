"""Core services exports."""

# Database Services
from .database.db_manage import DbManageService
from .database.db_session import DbSessionService
from .database.store_client import (
    ProductDelegate,
    StoreClient,
    StoreErrorCode,
    StoreRequestError,
)

# Product Services
from .products import ProductInternalError, ProductNotFoundError, ProductService

__all__ = [
    # Database Services
    "DbManageService",
    "DbSessionService",
    "ProductDelegate",
    "StoreClient",
    "StoreErrorCode",
    "StoreRequestError",
    # Product Services
    "ProductInternalError",
    "ProductNotFoundError",
    "ProductService",
]
