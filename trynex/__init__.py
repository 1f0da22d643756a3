"""
Trynex Core Module

Shopper-side building blocks for the Trynex Lifestyle storefront:
- cart: write-through cart store with subscribers
- orders: checkout payload and storefront API client
- money: Decimal helpers for taka amounts
- logging: centralized logging setup
"""

__all__ = [
    "get_cart_store",
    "CartStore",
]


def __getattr__(name):
    """Lazy attribute access so importing trynex stays cheap."""
    if name == "get_cart_store":
        from trynex.cart import get_cart_store
        return get_cart_store
    if name == "CartStore":
        from trynex.cart import CartStore
        return CartStore
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
