"""Checkout: turn the current cart into a placed order."""
from typing import Any, Optional

from trynex.cart.store import CartStore
from trynex.errors import EmptyCartError
from .client import OrderClient
from .models import CheckoutDetails, OrderResult
from .payload import build_order_payload


async def place_order(
    store: CartStore,
    details: Any,
    client: Optional[OrderClient] = None,
) -> OrderResult:
    """
    Submit the cart as an order and drop the submitted lines once the
    storefront accepts. Lines added while the request was in flight stay.

    The cart is left untouched if submission fails, so the shopper can retry.

    Raises:
        EmptyCartError: nothing to order
        pydantic.ValidationError: bad checkout details
        OrderSubmissionError: the API rejected or never received the order
    """
    if not isinstance(details, CheckoutDetails):
        details = CheckoutDetails.model_validate(details)

    items = store.items
    if not items:
        raise EmptyCartError()

    summary = store.summary()
    payload = build_order_payload(details, summary, items)

    owns_client = client is None
    client = client or OrderClient()
    try:
        result = await client.create_order(payload)
    finally:
        if owns_client:
            await client.aclose()

    store.remove_items(item.id for item in items)
    return result
