"""Domain errors surfaced to API callers as ``{success: false, message}``."""


class StoreError(Exception):
    """Base exception for all storefront errors."""

    status_code = 500
    kind = "StoreError"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(StoreError):
    """Raised for malformed client input. Nothing has been written."""

    status_code = 400
    kind = "ValidationError"


class Forbidden(StoreError):
    """Raised when the caller may not see or change a resource."""

    status_code = 403
    kind = "Forbidden"


class NotFound(StoreError):
    """Raised when a referenced order, product or notification doesn't exist."""

    status_code = 404
    kind = "NotFound"


class ProductUnavailable(StoreError):
    """Raised when an ordered product is not published."""

    status_code = 409
    kind = "ProductUnavailable"

    def __init__(self, product_name: str):
        self.product_name = product_name
        super().__init__(f'Product "{product_name}" is not available')


class OutOfStock(StoreError):
    """Raised when stock on hand is below the requested quantity."""

    status_code = 409
    kind = "OutOfStock"

    def __init__(self, product_name: str, available: int, requested: int):
        self.product_name = product_name
        self.available = available
        self.requested = requested
        super().__init__(
            f'Insufficient stock for "{product_name}". '
            f"Available: {available}, Requested: {requested}"
        )


class InvalidTransition(StoreError):
    """Raised when an order status change is not allowed."""

    status_code = 409
    kind = "InvalidTransition"
