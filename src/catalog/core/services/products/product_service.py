"""Product CRUD on top of the store client."""

import asyncio
from collections.abc import Mapping
from typing import Any, NoReturn

from loguru import logger

from src.catalog.core.services.database.store_client import (
    StoreClient,
    StoreErrorCode,
    StoreRequestError,
)
from src.catalog.core.services.products.errors import (
    ProductInternalError,
    ProductNotFoundError,
)
from src.catalog.entities.service.product import (
    PageMeta,
    PaginationParams,
    Product,
    ProductCreate,
    ProductPage,
    ProductUpdate,
)
from src.catalog.runtime.config.config_data import ProductsConfig
from src.catalog.runtime.context import get_config


class ProductService:
    """Create, list, read, update and delete products.

    ``update`` and ``remove`` translate store failures into
    ``ProductNotFoundError`` or ``ProductInternalError``. ``find_one`` reports
    every lookup failure as not found. ``create`` and ``find_all`` let store
    errors propagate unless ``products.translate_all_errors`` is enabled.
    """

    def __init__(self, store: StoreClient, config: ProductsConfig | None = None) -> None:
        self._store = store
        self._config = config or get_config().products

    async def connect(self) -> None:
        """Establish the store connection. Called once at startup."""
        await self._store.connect()

    async def create(self, product: ProductCreate | Mapping[str, Any]) -> Product:
        data = product.model_dump() if isinstance(product, ProductCreate) else dict(product)
        try:
            created = await self._store.product.create(data)
        except StoreRequestError as error:
            if not self._config.translate_all_errors:
                raise
            self._handle_exception(error)

        logger.info("Created product {}", created.id)
        return created

    async def find_all(self, pagination: PaginationParams | Mapping[str, Any]) -> ProductPage:
        """Return one page of products plus totals.

        The count and the page are fetched concurrently and are not read in a
        single transaction, so ``meta.total`` can disagree with ``data`` when
        writes land in between.

        If either query fails the other is cancelled, and the first failure is
        raised. A mapping without ``limit`` gets ``products.default_limit``.
        """
        if not isinstance(pagination, PaginationParams):
            pagination = PaginationParams.model_validate(
                {"limit": self._config.default_limit, **pagination}
            )

        try:
            async with asyncio.TaskGroup() as tasks:
                count_task = tasks.create_task(self._store.product.count())
                page_task = tasks.create_task(
                    self._store.product.find_many(
                        skip=pagination.offset, take=pagination.limit
                    )
                )
        except ExceptionGroup as group:
            error = group.exceptions[0]
            if len(group.exceptions) > 1:
                logger.warning(
                    "Listing products failed in both queries: {}", group.exceptions
                )
            if not isinstance(error, StoreRequestError) or not self._config.translate_all_errors:
                raise error
            self._handle_exception(error)

        return ProductPage(
            data=page_task.result(),
            meta=PageMeta.build(pagination, count_task.result()),
        )

    async def find_one(self, product_id: int) -> Product:
        try:
            return await self._store.product.find_unique_or_throw(product_id)
        except StoreRequestError as error:
            if error.code != StoreErrorCode.RECORD_NOT_FOUND:
                logger.opt(exception=error).warning(
                    "Lookup of product {} failed with {}", product_id, error.code
                )
            raise ProductNotFoundError() from error

    async def update(
        self, product_id: int, changes: ProductUpdate | Mapping[str, Any]
    ) -> Product:
        if isinstance(changes, ProductUpdate):
            data = changes.changes()
        else:
            data = {key: value for key, value in changes.items() if key != "id"}

        try:
            updated = await self._store.product.update(product_id, data)
        except StoreRequestError as error:
            self._handle_exception(error)

        logger.info("Updated product {} fields {}", product_id, sorted(data))
        return updated

    async def remove(self, product_id: int) -> Product:
        try:
            removed = await self._store.product.delete(product_id)
        except StoreRequestError as error:
            self._handle_exception(error)

        logger.info("Removed product {}", product_id)
        return removed

    def _handle_exception(self, error: StoreRequestError) -> NoReturn:
        if error.code == StoreErrorCode.RECORD_NOT_FOUND:
            raise ProductNotFoundError() from error

        logger.opt(exception=error).error(
            "Product store request failed with {}: {}", error.code, error.message
        )
        raise ProductInternalError() from error
