"""Orders package: checkout details, order payload, API client."""
from .client import OrderClient
from .models import CheckoutDetails, OrderResult
from .payload import build_order_payload
from .service import place_order

__all__ = [
    "CheckoutDetails",
    "OrderClient",
    "OrderResult",
    "build_order_payload",
    "place_order",
]
