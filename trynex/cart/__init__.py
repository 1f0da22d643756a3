"""Cart package: models, customizations, storage, pricing and the store."""
from .customization import (
    EngravedCustomization,
    ImageCustomization,
    ImageUploadCustomization,
    PlainCustomization,
)
from .models import CartLineItem, ProductRef
from .pricing import CheckoutSummary, calculate_delivery_fee, calculate_grand_total
from .storage import CART_STORAGE_KEY, FileStorage, MemoryStorage, RedisStorage
from .store import CartStore, get_cart_store, set_cart_store

__all__ = [
    "CART_STORAGE_KEY",
    "CartLineItem",
    "CartStore",
    "CheckoutSummary",
    "EngravedCustomization",
    "FileStorage",
    "ImageCustomization",
    "ImageUploadCustomization",
    "MemoryStorage",
    "PlainCustomization",
    "ProductRef",
    "RedisStorage",
    "calculate_delivery_fee",
    "calculate_grand_total",
    "get_cart_store",
    "set_cart_store",
]
