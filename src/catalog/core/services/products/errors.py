"""Error categories raised by the product service."""

from fastapi import HTTPException

PRODUCT_NOT_FOUND = "Product not found"
SOMETHING_WENT_WRONG = "Something went wrong"


class ProductNotFoundError(HTTPException):
    """The requested or targeted product does not exist."""

    def __init__(self, detail: str = PRODUCT_NOT_FOUND) -> None:
        super().__init__(status_code=404, detail=detail)


class ProductInternalError(HTTPException):
    """Any other store failure. The cause is logged, never rendered."""

    def __init__(self, detail: str = SOMETHING_WENT_WRONG) -> None:
        super().__init__(status_code=500, detail=detail)
