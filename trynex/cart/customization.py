"""
Customization variants attached to a cart line.

Each kind has its own validated shape; `kind` is the discriminator both in
memory and in the stored JSON.
"""
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator


class CustomizationBase(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    quantity: int = Field(default=1, ge=1)
    color: Optional[str] = None
    size: Optional[str] = None
    instructions: Optional[str] = None

    def shared_fields(self) -> dict:
        """Fields every kind carries; used when downgrading to plain."""
        return {
            "quantity": self.quantity,
            "color": self.color,
            "size": self.size,
            "instructions": self.instructions,
        }


class PlainCustomization(CustomizationBase):
    kind: Literal["plain"] = "plain"


class EngravedCustomization(CustomizationBase):
    kind: Literal["engraved"] = "engraved"
    text: str
    font: Optional[str] = None

    @field_validator("text")
    @classmethod
    def text_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("engraving text must not be empty")
        return v


class ImageCustomization(CustomizationBase):
    """Image already converted to a self-contained data URL."""
    kind: Literal["image"] = "image"
    image_data: str
    image_name: str
    text: Optional[str] = None

    @field_validator("image_data")
    @classmethod
    def must_be_data_url(cls, v: str) -> str:
        if not v.startswith("data:") or ";base64," not in v:
            raise ValueError("image_data must be a base64 data URL")
        return v


class ImageUploadCustomization(CustomizationBase):
    """Raw image file as the shopper picked it. Converted on add, never stored."""
    kind: Literal["image_upload"] = "image_upload"
    content: bytes = Field(repr=False)
    filename: str
    content_type: Optional[str] = None
    text: Optional[str] = None


Customization = Annotated[
    Union[PlainCustomization, EngravedCustomization, ImageCustomization, ImageUploadCustomization],
    Field(discriminator="kind"),
]

# What a stored line may carry: uploads never reach storage
StoredCustomization = Annotated[
    Union[PlainCustomization, EngravedCustomization, ImageCustomization],
    Field(discriminator="kind"),
]

_customization_adapter: TypeAdapter = TypeAdapter(Customization)
_stored_adapter: TypeAdapter = TypeAdapter(StoredCustomization)


def parse_customization(value: Any):
    """
    Accept a customization model or a plain mapping.

    A mapping without `kind` is read as plain, matching the loose objects
    the storefront forms send.
    """
    if value is None or isinstance(value, CustomizationBase):
        return value
    if isinstance(value, dict) and "kind" not in value:
        value = {**value, "kind": "plain"}
    return _customization_adapter.validate_python(value)


def load_stored_customization(data: Optional[dict]):
    """Rebuild a customization read back from storage."""
    if data is None:
        return None
    return _stored_adapter.validate_python(data)


def strip_image(customization: CustomizationBase) -> Union[PlainCustomization, EngravedCustomization]:
    """
    Drop the image from a customization, keeping everything else.

    Text that rode along with the image survives as an engraving.
    """
    text = getattr(customization, "text", None)
    if text and text.strip():
        return EngravedCustomization(text=text, **customization.shared_fields())
    return PlainCustomization(**customization.shared_fields())
