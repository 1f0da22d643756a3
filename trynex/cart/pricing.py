"""Checkout arithmetic: delivery fee, grand total, free-delivery nudge."""
from dataclasses import dataclass
from decimal import Decimal

from trynex.money import Numeric, add, round_money, subtract, to_decimal, to_float

FREE_DELIVERY_THRESHOLD = Decimal("500")
DELIVERY_FEE = Decimal("60")


def calculate_delivery_fee(subtotal: Numeric) -> Decimal:
    """Flat 60 below the threshold, free at or above it."""
    if to_decimal(subtotal) >= FREE_DELIVERY_THRESHOLD:
        return Decimal("0")
    return DELIVERY_FEE


def calculate_grand_total(subtotal: Numeric) -> Decimal:
    return round_money(add(subtotal, calculate_delivery_fee(subtotal)))


def free_delivery_remaining(subtotal: Numeric) -> Decimal:
    """How much more the shopper has to buy to get free delivery."""
    remaining = subtract(FREE_DELIVERY_THRESHOLD, subtotal)
    if remaining <= 0:
        return Decimal("0")
    return round_money(remaining)


@dataclass(frozen=True)
class CheckoutSummary:
    total_items: int
    subtotal: Decimal
    delivery_fee: Decimal
    grand_total: Decimal
    free_delivery_remaining: Decimal

    @classmethod
    def from_totals(cls, total_items: int, subtotal: Numeric) -> "CheckoutSummary":
        subtotal = round_money(subtotal)
        return cls(
            total_items=total_items,
            subtotal=subtotal,
            delivery_fee=calculate_delivery_fee(subtotal),
            grand_total=calculate_grand_total(subtotal),
            free_delivery_remaining=free_delivery_remaining(subtotal),
        )

    @property
    def is_empty(self) -> bool:
        return self.total_items == 0

    def to_dict(self) -> dict:
        return {
            "is_empty": self.is_empty,
            "total_items": self.total_items,
            "subtotal": to_float(self.subtotal),
            "delivery_fee": to_float(self.delivery_fee),
            "grand_total": to_float(self.grand_total),
            "free_delivery_remaining": to_float(self.free_delivery_remaining),
        }
