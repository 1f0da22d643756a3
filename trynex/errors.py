"""
Common Error Constants and Exceptions

Centralized error messages to avoid string duplication.
"""

# Product errors
ERROR_PRODUCT_NAME_REQUIRED = "Product name is required"
ERROR_PRODUCT_PRICE_INVALID = "Product price must be a non-negative number"

# Cart errors
ERROR_CART_EMPTY = "Cart is empty"
ERROR_CART_STORAGE_UNAVAILABLE = "Cart storage unavailable"
ERROR_IMAGE_UPLOAD_NOT_ALLOWED = "Image uploads can only be attached when adding an item"
ERROR_QUANTITY_INVALID = "Quantity must be an integer"

# Image errors
ERROR_IMAGE_EMPTY = "Image file is empty"
ERROR_IMAGE_TOO_LARGE = "Image file is too large"
ERROR_IMAGE_UNREADABLE = "Image file could not be read"

# Order errors
ERROR_ORDER_FAILED = "Order could not be placed"
ERROR_ORDER_NO_TRACKING_ID = "Order response has no tracking id"


class CartError(Exception):
    """Base class for cart and checkout errors."""


class ImageConversionError(CartError):
    """An attached image could not be turned into a data URL."""


class EmptyCartError(CartError):
    """Checkout was attempted with nothing in the cart."""

    def __init__(self, message: str = ERROR_CART_EMPTY):
        super().__init__(message)


class OrderSubmissionError(CartError):
    """The storefront API rejected or failed to accept an order."""

    def __init__(self, message: str = ERROR_ORDER_FAILED, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
