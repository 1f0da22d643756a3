"""
Checkout Pydantic Models

Shopper details collected on the checkout form and the order API's reply.
"""
import re
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

PaymentMethod = Literal["cash_on_delivery", "bkash", "nagad"]

# 01XXXXXXXXX with an optional +88 / 88 country prefix
_BD_PHONE_RE = re.compile(r"^(?:\+?88)?(01[3-9]\d{8})$")


def normalize_bd_phone(value: str) -> str:
    """Strip spaces/dashes and the country prefix; return the 11-digit local form."""
    compact = re.sub(r"[\s-]", "", value or "")
    match = _BD_PHONE_RE.match(compact)
    if not match:
        raise ValueError("phone must be a Bangladeshi mobile number like 01XXXXXXXXX")
    return match.group(1)


class CheckoutDetails(BaseModel):
    """What the checkout form asks for."""
    model_config = ConfigDict(str_strip_whitespace=True)

    customer_name: str = Field(min_length=1)
    phone: str
    district: str = Field(min_length=1)
    thana: str = Field(min_length=1)
    address: Optional[str] = None
    email: Optional[str] = None
    notes: Optional[str] = None
    payment_method: PaymentMethod = "cash_on_delivery"

    @field_validator("phone")
    @classmethod
    def valid_phone(cls, v: str) -> str:
        return normalize_bd_phone(v)


class OrderResult(BaseModel):
    model_config = ConfigDict(extra="ignore")

    tracking_id: str
    order_id: Optional[str] = None
    status: str = "pending"
    total: Optional[str] = None
