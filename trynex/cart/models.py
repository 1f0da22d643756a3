"""Cart models with Decimal-based pricing."""
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Mapping, Optional, Union

from trynex.errors import ERROR_PRODUCT_NAME_REQUIRED, ERROR_PRODUCT_PRICE_INVALID
from trynex.money import multiply, parse_price, round_money, to_decimal
from .customization import (
    EngravedCustomization,
    ImageCustomization,
    PlainCustomization,
    load_stored_customization,
)

StoredCustomization = Union[PlainCustomization, EngravedCustomization, ImageCustomization]


@dataclass(frozen=True)
class ProductRef:
    """The bits of a catalog product a cart line copies at add-time."""
    name: str
    price: Decimal
    image_url: Optional[str] = None
    product_id: Optional[str] = None

    @classmethod
    def coerce(cls, product: Any) -> "ProductRef":
        """
        Build from a ProductRef, a mapping, or any object with name/price attributes.

        Raises:
            ValueError: missing name or a price that is not a non-negative number
        """
        if isinstance(product, ProductRef):
            return product

        if isinstance(product, Mapping):
            get = product.get
        else:
            def get(key, default=None):
                return getattr(product, key, default)

        name = get("name")
        if not name or not isinstance(name, str) or not name.strip():
            raise ValueError(ERROR_PRODUCT_NAME_REQUIRED)

        try:
            price = parse_price(get("price"))
        except ValueError as e:
            raise ValueError(f"{ERROR_PRODUCT_PRICE_INVALID}: {e}") from e

        product_id = get("product_id") or get("id")
        return cls(
            name=name,
            price=price,
            image_url=get("image_url") or get("image"),
            product_id=str(product_id) if product_id is not None else None,
        )


@dataclass(frozen=True)
class CartLineItem:
    """Single line in the cart. Not unique per product: customizations split lines."""
    id: str
    name: str
    unit_price: Decimal
    quantity: int
    image_url: Optional[str] = None
    customization: Optional[StoredCustomization] = None
    product_id: Optional[str] = None
    added_at: str = field(default="")

    def __post_init__(self):
        if not self.added_at:
            object.__setattr__(self, "added_at", datetime.now(timezone.utc).isoformat())
        object.__setattr__(self, "unit_price", to_decimal(self.unit_price))
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int):
            raise TypeError(f"quantity must be an integer, got {self.quantity!r}")
        if self.quantity < 1:
            raise ValueError("quantity must be at least 1")

    @property
    def line_total(self) -> Decimal:
        """Total price for all units."""
        return round_money(multiply(self.unit_price, self.quantity))

    def with_quantity(self, quantity: int) -> "CartLineItem":
        return replace(self, quantity=quantity)

    def with_customization(self, customization: Optional[StoredCustomization]) -> "CartLineItem":
        return replace(self, customization=customization)

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        return {
            "id": self.id,
            "name": self.name,
            "unit_price": str(self.unit_price),
            "quantity": self.quantity,
            "image_url": self.image_url,
            "customization": (
                self.customization.model_dump(mode="json") if self.customization is not None else None
            ),
            "product_id": self.product_id,
            "added_at": self.added_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CartLineItem":
        """
        Create from dictionary.

        Raises KeyError/TypeError/ValueError (pydantic ValidationError is a
        ValueError) on malformed data.
        """
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            unit_price=parse_price(data["unit_price"]),
            quantity=data["quantity"],
            image_url=data.get("image_url"),
            customization=load_stored_customization(data.get("customization")),
            product_id=data.get("product_id"),
            added_at=data.get("added_at", ""),
        )
