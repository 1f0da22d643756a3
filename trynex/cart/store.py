"""
Cart Store - write-through cart with subscribers.

One ordered list of line items, mirrored to durable storage after every
mutation and broadcast to every subscriber. Listeners get the full list;
they never need to share anything but the store itself.

Ordering: synchronous mutations run to completion without yielding.
add_item may await an image conversion; concurrent add_item calls are
serialized so their lines land in call order, but a remove/update issued
while an add is converting applies immediately and the pending line is
appended to whatever the list looks like when conversion finishes.
"""
import asyncio
import json
import uuid
from decimal import Decimal
from typing import Any, Callable, List, Optional

from pydantic import ValidationError

from trynex.errors import (
    ERROR_CART_STORAGE_UNAVAILABLE,
    ERROR_IMAGE_UPLOAD_NOT_ALLOWED,
    ERROR_QUANTITY_INVALID,
    ImageConversionError,
)
from trynex.logging import get_logger, sanitize_id_for_logging, sanitize_string_for_logging
from trynex.money import add, to_decimal
from .customization import ImageUploadCustomization, parse_customization, strip_image
from .images import convert_upload
from .models import CartLineItem, ProductRef
from .pricing import CheckoutSummary
from .storage import CART_STORAGE_KEY, KeyValueStorage, get_default_storage

logger = get_logger(__name__)

CartListener = Callable[[List[CartLineItem]], None]


class CartStore:
    """
    Owns the cart list, its durable copy, and its listeners.

    Features:
    - Lazy load from storage; corrupt data resets to an empty cart
    - Write-through persistence before listeners hear about a change
    - Immediate snapshot for new subscribers
    """

    def __init__(
        self,
        storage: Optional[KeyValueStorage] = None,
        storage_key: str = CART_STORAGE_KEY,
        id_factory: Callable[[], str] = lambda: uuid.uuid4().hex,
    ):
        self._storage = storage if storage is not None else get_default_storage()
        self.storage_key = storage_key
        self._id_factory = id_factory
        self._items: Optional[List[CartLineItem]] = None  # Lazy initialization
        self._listeners: List[CartListener] = []
        self._add_lock: Optional[asyncio.Lock] = None

    # ==================== STATE ====================

    @property
    def _state(self) -> List[CartLineItem]:
        if self._items is None:
            self._items = self._load()
        return self._items

    @property
    def items(self) -> List[CartLineItem]:
        """Snapshot of the current lines, in insertion order."""
        return list(self._state)

    def __len__(self) -> int:
        return len(self._state)

    def get_item(self, item_id: str) -> Optional[CartLineItem]:
        return next((item for item in self._state if item.id == item_id), None)

    def _load(self) -> List[CartLineItem]:
        try:
            raw = self._storage.get(self.storage_key)
        except Exception as e:
            logger.error(f"Failed to read cart from storage ({ERROR_CART_STORAGE_UNAVAILABLE}): {e}")
            return []

        if not raw:
            return []

        try:
            data = json.loads(raw)
            if not isinstance(data, list):
                raise TypeError(f"expected a list, got {type(data).__name__}")
            items = [CartLineItem.from_dict(entry) for entry in data]
            if len({item.id for item in items}) != len(items):
                raise ValueError("duplicate line ids")
            return items
        except (json.JSONDecodeError, KeyError, TypeError, ValueError, RecursionError) as e:
            logger.warning(f"Corrupted cart data under {self.storage_key!r}, resetting: {e}")
            self._forget_stored()
            return []

    def _forget_stored(self) -> None:
        try:
            self._storage.remove(self.storage_key)
        except Exception as e:
            logger.error(f"Failed to remove corrupted cart from storage: {e}")

    def _persist(self) -> None:
        payload = json.dumps([item.to_dict() for item in self._state], ensure_ascii=False)
        try:
            self._storage.set(self.storage_key, payload)
        except Exception as e:
            # The session keeps working from memory until the next good write
            logger.error(f"Failed to save cart to storage ({ERROR_CART_STORAGE_UNAVAILABLE}): {e}")

    def _notify(self) -> None:
        snapshot = self.items
        for listener in list(self._listeners):
            try:
                listener(list(snapshot))
            except Exception:
                logger.exception("Cart listener failed")

    def _commit(self, items: List[CartLineItem]) -> None:
        self._items = items
        self._persist()
        self._notify()

    # ==================== MUTATIONS ====================

    async def add_item(self, product: Any, customization: Any = None) -> CartLineItem:
        """
        Append a new line for the product.

        Every call allocates a new line, even for a product already in the
        cart. An image upload is converted to a data URL first; if that fails
        the line is still added without the image.

        Raises:
            ValueError: product has no name or an invalid price
            pydantic.ValidationError: malformed customization
        """
        ref = ProductRef.coerce(product)
        parsed = parse_customization(customization)

        if self._add_lock is None:
            self._add_lock = asyncio.Lock()

        async with self._add_lock:
            if isinstance(parsed, ImageUploadCustomization):
                try:
                    parsed = await convert_upload(parsed)
                except (ImageConversionError, ValidationError) as e:
                    logger.warning(
                        f"Image {sanitize_string_for_logging(parsed.filename)} dropped from "
                        f"{sanitize_string_for_logging(ref.name)}: {e}"
                    )
                    parsed = strip_image(parsed)

            item = CartLineItem(
                id=self._id_factory(),
                name=ref.name,
                unit_price=ref.price,
                quantity=parsed.quantity if parsed is not None else 1,
                image_url=ref.image_url,
                customization=parsed,
                product_id=ref.product_id,
            )
            self._commit(self._state + [item])

        logger.info(f"Added {sanitize_string_for_logging(ref.name)} x{item.quantity} as {sanitize_id_for_logging(item.id)}")
        return item

    def update_quantity(self, item_id: str, new_quantity: int) -> None:
        """
        Set a line's quantity; zero or less removes the line.

        Raises:
            ValueError: quantity is not an integer
        """
        if isinstance(new_quantity, bool) or not isinstance(new_quantity, int):
            raise ValueError(f"{ERROR_QUANTITY_INVALID}: {new_quantity!r}")
        if new_quantity <= 0:
            self.remove_item(item_id)
            return

        self._commit([
            item.with_quantity(new_quantity) if item.id == item_id else item
            for item in self._state
        ])

    def update_customization(self, item_id: str, customization: Any) -> None:
        """
        Replace a line's customization.

        Raises:
            ValueError: for an image upload (conversion only happens on add)
        """
        parsed = parse_customization(customization)
        if isinstance(parsed, ImageUploadCustomization):
            raise ValueError(ERROR_IMAGE_UPLOAD_NOT_ALLOWED)

        self._commit([
            item.with_customization(parsed) if item.id == item_id else item
            for item in self._state
        ])

    def remove_item(self, item_id: str) -> None:
        """Drop a line. Absent ids are a no-op."""
        self._commit([item for item in self._state if item.id != item_id])

    def remove_items(self, item_ids) -> None:
        """Drop several lines in one commit. Absent ids are ignored."""
        drop = set(item_ids)
        self._commit([item for item in self._state if item.id not in drop])

    def clear(self) -> None:
        self._commit([])

    def reload(self) -> None:
        """Re-read durable storage and tell listeners."""
        self._items = self._load()
        self._notify()

    # ==================== SUBSCRIPTIONS ====================

    def subscribe(self, listener: CartListener) -> Callable[[], None]:
        """
        Register a listener; it is called right away with the current lines
        and again after every mutation.

        Returns:
            Function that removes the listener (safe to call twice)
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        try:
            listener(self.items)
        except Exception:
            logger.exception("Cart listener failed on subscribe")
        return unsubscribe

    # ==================== DERIVED VIEWS ====================

    def total_items(self) -> int:
        return sum(item.quantity for item in self._state)

    def total_price(self) -> Decimal:
        total = to_decimal(0)
        for item in self._state:
            total = add(total, item.unit_price * item.quantity)
        return total

    def summary(self) -> CheckoutSummary:
        return CheckoutSummary.from_totals(self.total_items(), self.total_price())


# Singleton instance
_cart_store: Optional[CartStore] = None


def get_cart_store() -> CartStore:
    """Get CartStore singleton backed by the configured storage."""
    global _cart_store
    if _cart_store is None:
        _cart_store = CartStore()
    return _cart_store


def set_cart_store(store: Optional[CartStore]) -> None:
    """Replace (or with None, drop) the process-wide store."""
    global _cart_store
    _cart_store = store
