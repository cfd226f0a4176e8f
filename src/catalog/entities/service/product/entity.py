"""Entity: Product."""

from typing import Any

from pydantic import ConfigDict, Field

from src.catalog.entities._base import Entity


class Product(Entity):
    """Product entity as persisted in the store.

    Instances are snapshots: the store owns the record and nothing here is
    written back implicitly.
    """

    model_config = ConfigDict(from_attributes=True)

    name: str = Field(description="Product name")
    price: float = Field(description="Unit price")
    available: bool = Field(default=True, description="Whether the product is on sale")

    def __eq__(self, other: Any) -> bool:
        """Compare products by business attributes, ignoring timestamps."""
        if not isinstance(other, Product):
            return False

        return (
            self.id == other.id
            and self.name == other.name
            and self.price == other.price
            and self.available == other.available
        )

    def __hash__(self) -> int:
        """Hash based on business attributes, ignoring timestamps."""
        return hash((
            self.id,
            self.name,
            self.price,
            self.available,
        ))
