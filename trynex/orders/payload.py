"""Build the JSON body for POST /api/orders from the cart."""
from typing import List, Sequence

from trynex.cart.models import CartLineItem
from trynex.cart.pricing import CheckoutSummary
from trynex.money import to_float
from .models import CheckoutDetails


def serialize_line(item: CartLineItem) -> dict:
    """One order line. Keeps the customization (image data included) so the workshop sees it."""
    return {
        "id": item.id,
        "product_id": item.product_id,
        "name": item.name,
        "price": to_float(item.unit_price),
        "quantity": item.quantity,
        "image_url": item.image_url,
        "customization": (
            item.customization.model_dump(mode="json", exclude_none=True)
            if item.customization is not None
            else None
        ),
        "line_total": to_float(item.line_total),
    }


def build_order_payload(
    details: CheckoutDetails,
    summary: CheckoutSummary,
    items: Sequence[CartLineItem],
) -> dict:
    lines: List[dict] = [serialize_line(item) for item in items]
    return {
        "customer_name": details.customer_name,
        "phone": details.phone,
        "email": details.email,
        "district": details.district,
        "thana": details.thana,
        "address": details.address,
        "notes": details.notes,
        "status": "pending",
        "items": lines,
        "total": str(summary.grand_total),
        "payment_info": {
            "method": details.payment_method,
            "amount": to_float(summary.grand_total),
            "subtotal": to_float(summary.subtotal),
            "delivery_fee": to_float(summary.delivery_fee),
        },
    }
