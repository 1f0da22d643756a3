"""Turn an uploaded image file into a data URL that can live inside the stored cart."""
import asyncio
import base64
import mimetypes
import os

from trynex.errors import (
    ERROR_IMAGE_EMPTY,
    ERROR_IMAGE_TOO_LARGE,
    ERROR_IMAGE_UNREADABLE,
    ImageConversionError,
)
from .customization import ImageCustomization, ImageUploadCustomization

MAX_IMAGE_BYTES = int(os.environ.get("MAX_IMAGE_BYTES", str(5 * 1024 * 1024)))

DEFAULT_CONTENT_TYPE = "application/octet-stream"


def _guess_content_type(filename: str, declared: str | None) -> str:
    if declared:
        return declared
    guessed, _ = mimetypes.guess_type(filename)
    return guessed or DEFAULT_CONTENT_TYPE


def _encode(content: bytes, content_type: str) -> str:
    try:
        encoded = base64.b64encode(content).decode("ascii")
    except (TypeError, ValueError) as e:
        raise ImageConversionError(f"{ERROR_IMAGE_UNREADABLE}: {e}") from e
    return f"data:{content_type};base64,{encoded}"


async def encode_image(
    content: bytes,
    filename: str,
    content_type: str | None = None,
    max_bytes: int = MAX_IMAGE_BYTES,
) -> str:
    """
    Encode raw image bytes as a base64 data URL.

    Encoding runs in a worker thread; large photos take long enough to
    stall the event loop otherwise.

    Raises:
        ImageConversionError: empty, oversized, or unencodable content
    """
    if not content:
        raise ImageConversionError(ERROR_IMAGE_EMPTY)
    if len(content) > max_bytes:
        raise ImageConversionError(f"{ERROR_IMAGE_TOO_LARGE}: {len(content)} > {max_bytes} bytes")

    mime = _guess_content_type(filename, content_type)
    return await asyncio.to_thread(_encode, content, mime)


async def convert_upload(upload: ImageUploadCustomization, max_bytes: int = MAX_IMAGE_BYTES) -> ImageCustomization:
    """Replace the raw upload with its encoded form plus the original file name."""
    data_url = await encode_image(upload.content, upload.filename, upload.content_type, max_bytes)
    return ImageCustomization(
        image_data=data_url,
        image_name=upload.filename,
        text=upload.text,
        **upload.shared_fields(),
    )
