"""Input and output models for the product resource."""

from __future__ import annotations

import math

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .entity import Product


class ProductCreate(BaseModel):
    """Fields accepted when creating a product."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1, description="Product name")
    price: float = Field(ge=0, description="Unit price")
    available: bool = Field(default=True, description="Whether the product is on sale")


class ProductUpdate(BaseModel):
    """Partial update payload. Only fields the client sent are applied.

    ``id`` is accepted so clients can echo the full resource back, but it is
    never written.
    """

    model_config = ConfigDict(extra="forbid")

    id: int | None = None
    name: str | None = Field(default=None, min_length=1)
    price: float | None = Field(default=None, ge=0)
    available: bool | None = None

    @field_validator("name", "price", "available")
    @classmethod
    def _reject_null(cls, value):
        if value is None:
            raise ValueError("may be omitted but not null")
        return value

    def changes(self) -> dict:
        """Return the explicitly set fields, without ``id``."""
        data = self.model_dump(exclude_unset=True)
        data.pop("id", None)
        return data


class PaginationParams(BaseModel):
    """Page request. Pages are 1-indexed.

    The ``limit`` default here is a fallback for direct construction; callers
    holding a ``ProductsConfig`` fill in ``default_limit`` themselves.
    """

    limit: int = Field(default=10, gt=0, description="Page size")
    page: int = Field(default=1, ge=1, description="1-indexed page number")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


class PageMeta(BaseModel):
    page: int
    limit: int
    total: int
    last_page: int

    @classmethod
    def build(cls, pagination: PaginationParams, total: int) -> PageMeta:
        return cls(
            page=pagination.page,
            limit=pagination.limit,
            total=total,
            last_page=math.ceil(total / pagination.limit),
        )


class ProductPage(BaseModel):
    data: list[Product]
    meta: PageMeta
