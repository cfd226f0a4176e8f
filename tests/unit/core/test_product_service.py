"""Unit tests for ProductService with a faked store client."""

import asyncio
from unittest.mock import Mock

import pytest
from pydantic import ValidationError

from src.catalog.core.services import (
    ProductInternalError,
    ProductNotFoundError,
    ProductService,
    StoreErrorCode,
    StoreRequestError,
)
from src.catalog.entities.service.product import (
    PaginationParams,
    Product,
    ProductCreate,
    ProductUpdate,
)
from src.catalog.runtime.config.config_data import ProductsConfig


def make_product(product_id: int, **fields) -> Product:
    defaults = {"name": f"product-{product_id}", "price": 9.5, "available": True}
    defaults.update(fields)
    return Product(id=product_id, **defaults)


def not_found() -> StoreRequestError:
    return StoreRequestError(StoreErrorCode.RECORD_NOT_FOUND, "missing")


def broken() -> StoreRequestError:
    return StoreRequestError(StoreErrorCode.CONNECTION_FAILED, "database is down")


class TestConnect:
    @pytest.mark.asyncio
    async def test_connect_delegates_to_store(self, fake_product_service, fake_store):
        await fake_product_service.connect()

        fake_store.connect.assert_awaited_once()


class TestCreate:
    @pytest.mark.asyncio
    async def test_create_passes_validated_fields(self, fake_product_service, fake_store):
        fake_store.product.create.return_value = make_product(1, name="Mug", price=4.0)

        created = await fake_product_service.create(ProductCreate(name="Mug", price=4.0))

        assert created.id == 1
        fake_store.product.create.assert_awaited_once_with(
            {"name": "Mug", "price": 4.0, "available": True}
        )

    @pytest.mark.asyncio
    async def test_create_accepts_mapping(self, fake_product_service, fake_store):
        fake_store.product.create.return_value = make_product(2, name="Pen")

        await fake_product_service.create({"name": "Pen", "price": 9.5})

        fake_store.product.create.assert_awaited_once_with({"name": "Pen", "price": 9.5})

    @pytest.mark.asyncio
    async def test_create_propagates_store_errors_unchanged(
        self, fake_product_service, fake_store
    ):
        error = broken()
        fake_store.product.create.side_effect = error

        with pytest.raises(StoreRequestError) as exc_info:
            await fake_product_service.create(ProductCreate(name="Mug", price=4.0))

        assert exc_info.value is error

    @pytest.mark.asyncio
    async def test_create_translates_when_configured(self, fake_store):
        service = ProductService(fake_store, ProductsConfig(translate_all_errors=True))
        fake_store.product.create.side_effect = broken()

        with pytest.raises(ProductInternalError) as exc_info:
            await service.create(ProductCreate(name="Mug", price=4.0))

        assert exc_info.value.status_code == 500
        assert exc_info.value.detail == "Something went wrong"


class TestFindAll:
    @pytest.mark.asyncio
    async def test_offset_and_meta(self, fake_product_service, fake_store):
        fake_store.product.count.return_value = 25
        fake_store.product.find_many.return_value = [
            make_product(i) for i in range(21, 26)
        ]

        page = await fake_product_service.find_all(PaginationParams(limit=10, page=3))

        fake_store.product.find_many.assert_awaited_once_with(skip=20, take=10)
        assert [p.id for p in page.data] == [21, 22, 23, 24, 25]
        assert page.meta.model_dump() == {
            "page": 3,
            "limit": 10,
            "total": 25,
            "last_page": 3,
        }

    @pytest.mark.asyncio
    async def test_empty_store_has_zero_last_page(self, fake_product_service, fake_store):
        fake_store.product.count.return_value = 0
        fake_store.product.find_many.return_value = []

        page = await fake_product_service.find_all(PaginationParams(limit=5, page=1))

        assert page.data == []
        assert page.meta.total == 0
        assert page.meta.last_page == 0

    @pytest.mark.asyncio
    async def test_count_and_page_run_concurrently(self, fake_product_service, fake_store):
        count_started = asyncio.Event()
        page_started = asyncio.Event()

        async def count():
            count_started.set()
            await asyncio.wait_for(page_started.wait(), timeout=1)
            return 1

        async def find_many(skip, take):
            page_started.set()
            await asyncio.wait_for(count_started.wait(), timeout=1)
            return [make_product(1)]

        fake_store.product.count.side_effect = count
        fake_store.product.find_many.side_effect = find_many

        page = await fake_product_service.find_all(PaginationParams(limit=10, page=1))

        assert page.meta.total == 1
        assert len(page.data) == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("limit", [0, -1])
    async def test_rejects_non_positive_limit(self, fake_product_service, fake_store, limit):
        with pytest.raises(ValidationError):
            await fake_product_service.find_all({"limit": limit, "page": 1})

        fake_store.product.count.assert_not_awaited()
        fake_store.product.find_many.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_rejects_page_zero(self, fake_product_service):
        with pytest.raises(ValidationError):
            await fake_product_service.find_all({"limit": 10, "page": 0})

    @pytest.mark.asyncio
    async def test_store_errors_propagate(self, fake_product_service, fake_store):
        fake_store.product.count.side_effect = broken()
        fake_store.product.find_many.return_value = []

        with pytest.raises(StoreRequestError):
            await fake_product_service.find_all(PaginationParams())

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("error", "expected"),
        [(broken(), ProductInternalError), (not_found(), ProductNotFoundError)],
    )
    async def test_translates_when_configured(self, fake_store, error, expected):
        service = ProductService(fake_store, ProductsConfig(translate_all_errors=True))
        fake_store.product.count.return_value = 3
        fake_store.product.find_many.side_effect = error

        with pytest.raises(expected) as exc_info:
            await service.find_all(PaginationParams())

        assert exc_info.value.__cause__ is error

    @pytest.mark.asyncio
    async def test_failed_count_cancels_page_query(self, fake_product_service, fake_store):
        error = broken()
        page_cancelled = asyncio.Event()

        async def count():
            await asyncio.sleep(0)
            raise error

        async def find_many(skip, take):
            try:
                await asyncio.sleep(10)
            except asyncio.CancelledError:
                page_cancelled.set()
                raise
            return []

        fake_store.product.count.side_effect = count
        fake_store.product.find_many.side_effect = find_many

        with pytest.raises(StoreRequestError) as exc_info:
            await fake_product_service.find_all(PaginationParams())

        assert exc_info.value is error
        assert page_cancelled.is_set()

    @pytest.mark.asyncio
    async def test_both_queries_failing_raises_one_store_error(
        self, fake_product_service, fake_store
    ):
        fake_store.product.count.side_effect = broken()
        fake_store.product.find_many.side_effect = not_found()

        with pytest.raises(StoreRequestError):
            await fake_product_service.find_all(PaginationParams())

    @pytest.mark.asyncio
    async def test_mapping_without_limit_uses_configured_default(self, fake_store):
        service = ProductService(fake_store, ProductsConfig(default_limit=7))
        fake_store.product.count.return_value = 0
        fake_store.product.find_many.return_value = []

        page = await service.find_all({"page": 2})

        fake_store.product.find_many.assert_awaited_once_with(skip=7, take=7)
        assert page.meta.limit == 7


class TestFindOne:
    @pytest.mark.asyncio
    async def test_returns_product(self, fake_product_service, fake_store):
        fake_store.product.find_unique_or_throw.return_value = make_product(7)

        product = await fake_product_service.find_one(7)

        assert product.id == 7
        fake_store.product.find_unique_or_throw.assert_awaited_once_with(7)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error", [not_found(), broken()])
    async def test_every_lookup_failure_is_not_found(
        self, fake_product_service, fake_store, error
    ):
        fake_store.product.find_unique_or_throw.side_effect = error

        with pytest.raises(ProductNotFoundError) as exc_info:
            await fake_product_service.find_one(7)

        assert exc_info.value.status_code == 404
        assert exc_info.value.detail == "Product not found"


class TestUpdate:
    @pytest.mark.asyncio
    async def test_strips_id_and_unset_fields(self, fake_product_service, fake_store):
        fake_store.product.update.return_value = make_product(5, price=3.0)

        await fake_product_service.update(5, ProductUpdate(id=99, price=3.0))

        fake_store.product.update.assert_awaited_once_with(5, {"price": 3.0})

    @pytest.mark.asyncio
    async def test_strips_id_from_mapping(self, fake_product_service, fake_store):
        fake_store.product.update.return_value = make_product(5, name="Renamed")

        await fake_product_service.update(5, {"id": 42, "name": "Renamed"})

        fake_store.product.update.assert_awaited_once_with(5, {"name": "Renamed"})

    @pytest.mark.asyncio
    async def test_record_not_found_becomes_not_found(self, fake_product_service, fake_store):
        fake_store.product.update.side_effect = not_found()

        with pytest.raises(ProductNotFoundError):
            await fake_product_service.update(5, ProductUpdate(price=3.0))

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "code",
        [
            StoreErrorCode.CONNECTION_FAILED,
            StoreErrorCode.CONSTRAINT_VIOLATION,
            StoreErrorCode.INVALID_FIELD,
            StoreErrorCode.UNKNOWN,
        ],
    )
    async def test_other_errors_become_internal(self, fake_product_service, fake_store, code):
        cause = StoreRequestError(code, "secret detail")
        fake_store.product.update.side_effect = cause

        with pytest.raises(ProductInternalError) as exc_info:
            await fake_product_service.update(5, ProductUpdate(price=3.0))

        assert exc_info.value.detail == "Something went wrong"
        assert "secret detail" not in exc_info.value.detail
        assert exc_info.value.__cause__ is cause


class TestRemove:
    @pytest.mark.asyncio
    async def test_returns_deleted_product(self, fake_product_service, fake_store):
        fake_store.product.delete.return_value = make_product(3)

        removed = await fake_product_service.remove(3)

        assert removed.id == 3
        fake_store.product.delete.assert_awaited_once_with(3)

    @pytest.mark.asyncio
    async def test_record_not_found_becomes_not_found(self, fake_product_service, fake_store):
        fake_store.product.delete.side_effect = not_found()

        with pytest.raises(ProductNotFoundError):
            await fake_product_service.remove(3)

    @pytest.mark.asyncio
    async def test_other_errors_become_internal(self, fake_product_service, fake_store):
        fake_store.product.delete.side_effect = broken()

        with pytest.raises(ProductInternalError):
            await fake_product_service.remove(3)


def test_service_defaults_to_loaded_products_config():
    store = Mock()
    service = ProductService(store)

    assert isinstance(service._config, ProductsConfig)
