"""
Tests for cart models and customizations
"""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from trynex.cart import (
    CartLineItem,
    EngravedCustomization,
    ImageCustomization,
    ImageUploadCustomization,
    PlainCustomization,
    ProductRef,
)
from trynex.cart.customization import parse_customization, strip_image


class TestProductRef:
    """Tests for coercing catalog products."""

    def test_from_mapping(self, sample_product):
        ref = ProductRef.coerce(sample_product)

        assert ref.name == "কাস্টম মগ"
        assert ref.price == Decimal("550.00")
        assert ref.image_url == "https://cdn.test/mug.jpg"
        assert ref.product_id == "prod-mug-01"

    def test_from_object(self):
        class Product:
            name = "Pen"
            price = 20
            image_url = None

        ref = ProductRef.coerce(Product())
        assert ref.name == "Pen"
        assert ref.price == Decimal("20")
        assert ref.product_id is None

    def test_float_price_keeps_precision(self):
        ref = ProductRef.coerce({"name": "Keychain", "price": 0.1})
        assert ref.price == Decimal("0.1")

    @pytest.mark.parametrize("product", [
        {"price": 10},
        {"name": "", "price": 10},
        {"name": "   ", "price": 10},
    ])
    def test_missing_name_rejected(self, product):
        with pytest.raises(ValueError):
            ProductRef.coerce(product)

    @pytest.mark.parametrize("price", [None, "abc", -5, True, float("nan"), [10]])
    def test_bad_price_rejected(self, price):
        with pytest.raises(ValueError):
            ProductRef.coerce({"name": "Mug", "price": price})


class TestCartLineItem:
    """Tests for CartLineItem dataclass."""

    def test_create_line(self):
        item = CartLineItem(id="line-1", name="Mug", unit_price=Decimal("150"), quantity=2)

        assert item.added_at != ""
        assert item.line_total == Decimal("300.00")

    def test_quantity_below_one_rejected(self):
        with pytest.raises(ValueError):
            CartLineItem(id="line-1", name="Mug", unit_price=Decimal("150"), quantity=0)

    @pytest.mark.parametrize("quantity", [2.5, True])
    def test_non_integer_quantity_rejected(self, quantity):
        with pytest.raises(TypeError):
            CartLineItem(id="line-1", name="Mug", unit_price=Decimal("150"), quantity=quantity)

    def test_with_quantity_returns_new_line(self):
        item = CartLineItem(id="line-1", name="Mug", unit_price=Decimal("150"), quantity=1)
        updated = item.with_quantity(4)

        assert item.quantity == 1
        assert updated.quantity == 4
        assert updated.id == item.id
        assert updated.added_at == item.added_at

    def test_to_dict_stores_price_as_string(self):
        item = CartLineItem(
            id="line-1",
            name="Mug",
            unit_price=Decimal("149.50"),
            quantity=1,
            customization=EngravedCustomization(text="Happy Birthday", font="serif"),
        )
        data = item.to_dict()

        assert data["unit_price"] == "149.50"
        assert data["customization"]["kind"] == "engraved"
        assert data["customization"]["text"] == "Happy Birthday"

    def test_from_dict(self):
        item = CartLineItem.from_dict({
            "id": "line-9",
            "name": "T-Shirt",
            "unit_price": "450",
            "quantity": 3,
            "image_url": None,
            "customization": {"kind": "plain", "size": "XL", "quantity": 3},
            "added_at": "2025-01-01T00:00:00+00:00",
        })

        assert item.unit_price == Decimal("450")
        assert item.customization == PlainCustomization(size="XL", quantity=3)
        assert item.added_at == "2025-01-01T00:00:00+00:00"

    @pytest.mark.parametrize("data", [
        {"id": "x", "name": "Mug", "unit_price": "10"},
        {"id": "x", "name": "Mug", "unit_price": "10", "quantity": "2"},
        {"id": "x", "name": "Mug", "unit_price": "10", "quantity": 0},
        {"id": "x", "name": "Mug", "unit_price": "10", "quantity": 2.5},
        {"id": "x", "name": "Mug", "unit_price": "10", "quantity": True},
        {"id": "x", "name": "Mug", "unit_price": "-1", "quantity": 1},
        {"id": "x", "name": "Mug", "unit_price": "10", "quantity": 1,
         "customization": {"kind": "image_upload", "content": "", "filename": "a.png"}},
    ])
    def test_from_dict_rejects_malformed(self, data):
        with pytest.raises((KeyError, TypeError, ValueError)):
            CartLineItem.from_dict(data)


class TestCustomization:
    """Tests for the tagged customization variants."""

    def test_mapping_without_kind_is_plain(self):
        parsed = parse_customization({"quantity": 2, "color": "red"})

        assert isinstance(parsed, PlainCustomization)
        assert parsed.quantity == 2
        assert parsed.color == "red"

    def test_kind_selects_variant(self):
        parsed = parse_customization({"kind": "engraved", "text": "Rafi"})
        assert isinstance(parsed, EngravedCustomization)

    def test_none_passes_through(self):
        assert parse_customization(None) is None

    def test_unknown_field_rejected(self):
        with pytest.raises(ValidationError):
            parse_customization({"kind": "plain", "glitter": True})

    def test_blank_engraving_rejected(self):
        with pytest.raises(ValidationError):
            EngravedCustomization(text="   ")

    def test_zero_quantity_rejected(self):
        with pytest.raises(ValidationError):
            PlainCustomization(quantity=0)

    def test_image_requires_data_url(self):
        with pytest.raises(ValidationError):
            ImageCustomization(image_data="https://cdn.test/a.png", image_name="a.png")

    def test_strip_image_keeps_shared_fields(self, png_bytes):
        upload = ImageUploadCustomization(
            content=png_bytes, filename="a.png", quantity=3, color="blue", instructions="center it"
        )
        stripped = strip_image(upload)

        assert stripped == PlainCustomization(quantity=3, color="blue", instructions="center it")

    def test_strip_image_keeps_text_as_engraving(self, png_bytes):
        upload = ImageUploadCustomization(content=png_bytes, filename="a.png", text="Love you Ma")
        stripped = strip_image(upload)

        assert isinstance(stripped, EngravedCustomization)
        assert stripped.text == "Love you Ma"
