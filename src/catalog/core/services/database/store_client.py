"""Store client: the narrow data-access surface the product service is built on.

Every call runs in its own session from the shared session factory, so calls
can be awaited concurrently. SQLAlchemy failures are re-raised as
``StoreRequestError`` carrying a ``StoreErrorCode``; the original exception is
kept as ``__cause__``.
"""

from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from enum import StrEnum
from typing import Any

from loguru import logger
from sqlalchemy import func, text
from sqlalchemy.exc import (
    DisconnectionError,
    IntegrityError,
    InterfaceError,
    NoResultFound,
    OperationalError,
    SQLAlchemyError,
)
from sqlmodel import select

from src.catalog.core.services.database.db_session import DbSessionService
from src.catalog.entities._base import utcnow
from src.catalog.entities.service.product import Product, ProductTable


class StoreErrorCode(StrEnum):
    RECORD_NOT_FOUND = "record_not_found"
    UNIQUE_CONSTRAINT = "unique_constraint"
    CONSTRAINT_VIOLATION = "constraint_violation"
    INVALID_FIELD = "invalid_field"
    CONNECTION_FAILED = "connection_failed"
    UNKNOWN = "unknown"


class StoreRequestError(Exception):
    """A store request failed with a known error code."""

    def __init__(self, code: StoreErrorCode, message: str):
        super().__init__(message)
        self.code = code
        self.message = message

    def __repr__(self) -> str:
        return f"StoreRequestError(code={self.code.value!r}, message={self.message!r})"


@contextmanager
def store_errors(operation: str) -> Iterator[None]:
    """Re-raise SQLAlchemy and driver failures as ``StoreRequestError``."""
    try:
        yield
    except StoreRequestError:
        raise
    except NoResultFound as e:
        raise StoreRequestError(
            StoreErrorCode.RECORD_NOT_FOUND, f"{operation}: record not found"
        ) from e
    except IntegrityError as e:
        code = (
            StoreErrorCode.UNIQUE_CONSTRAINT
            if "unique" in str(e.orig).lower()
            else StoreErrorCode.CONSTRAINT_VIOLATION
        )
        raise StoreRequestError(code, f"{operation}: {e.orig}") from e
    except (OperationalError, InterfaceError, DisconnectionError, OSError) as e:
        raise StoreRequestError(
            StoreErrorCode.CONNECTION_FAILED, f"{operation}: {e}"
        ) from e
    except SQLAlchemyError as e:
        raise StoreRequestError(StoreErrorCode.UNKNOWN, f"{operation}: {e}") from e


def _record_not_found(operation: str, product_id: int) -> StoreRequestError:
    return StoreRequestError(
        StoreErrorCode.RECORD_NOT_FOUND,
        f"{operation}: no product with id {product_id}",
    )


class ProductDelegate:
    """CRUD operations on the product table."""

    _writable_fields = frozenset({"name", "price", "available"})

    def __init__(self, db: DbSessionService) -> None:
        self._db = db

    async def create(self, data: Mapping[str, Any]) -> Product:
        with store_errors("product.create"):
            async with self._db.session_scope() as session:
                row = ProductTable(**data)
                session.add(row)
                await session.flush()
                await session.refresh(row)
                return Product.model_validate(row)

    async def count(self) -> int:
        with store_errors("product.count"):
            async with self._db.session_scope() as session:
                result = await session.exec(
                    select(func.count()).select_from(ProductTable)
                )
                return result.one()

    async def find_many(self, skip: int, take: int) -> list[Product]:
        with store_errors("product.find_many"):
            async with self._db.session_scope() as session:
                statement = (
                    select(ProductTable)
                    .order_by(ProductTable.id)
                    .offset(skip)
                    .limit(take)
                )
                result = await session.exec(statement)
                return [Product.model_validate(row) for row in result.all()]

    async def find_unique_or_throw(self, product_id: int) -> Product:
        with store_errors("product.find_unique_or_throw"):
            async with self._db.session_scope() as session:
                row = await session.get(ProductTable, product_id)
                product = Product.model_validate(row) if row is not None else None

        if product is None:
            raise _record_not_found("product.find_unique_or_throw", product_id)
        return product

    async def update(self, product_id: int, data: Mapping[str, Any]) -> Product:
        unknown = set(data) - self._writable_fields
        if unknown:
            raise StoreRequestError(
                StoreErrorCode.INVALID_FIELD,
                f"product.update: unknown or read-only fields {sorted(unknown)}",
            )

        with store_errors("product.update"):
            async with self._db.session_scope() as session:
                row = await session.get(ProductTable, product_id)
                product = None
                if row is not None:
                    for field, value in data.items():
                        setattr(row, field, value)
                    row.updated_at = utcnow()
                    session.add(row)
                    await session.flush()
                    await session.refresh(row)
                    product = Product.model_validate(row)

        if product is None:
            raise _record_not_found("product.update", product_id)
        return product

    async def delete(self, product_id: int) -> Product:
        with store_errors("product.delete"):
            async with self._db.session_scope() as session:
                row = await session.get(ProductTable, product_id)
                product = None
                if row is not None:
                    product = Product.model_validate(row)
                    await session.delete(row)

        if product is None:
            raise _record_not_found("product.delete", product_id)
        return product


class StoreClient:
    """Connection lifecycle plus per-model delegates."""

    def __init__(self, db: DbSessionService) -> None:
        self._db = db
        self.product = ProductDelegate(db)

    async def connect(self) -> None:
        """Open a connection and verify the store answers."""
        with store_errors("connect"):
            async with self._db.engine.connect() as connection:
                await connection.execute(text("SELECT 1"))
        logger.info("Connected to the product store")

    async def disconnect(self) -> None:
        await self._db.dispose()
