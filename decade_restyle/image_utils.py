"""
Image utility functions for Decade Restyle
Handles conversion between data URLs, base64 payloads, and raw image bytes
"""

import base64
import binascii
import io
import re
from typing import Tuple, Union

from PIL import Image

from .errors import InvalidInputFormat
from .models import ImagePayload

DATA_URL_PATTERN = re.compile(r"data:(image/[\w.+-]+);base64,(.+)")


def parse_image_data_url(image_data_url: str) -> ImagePayload:
    """
    Split a data URL into its MIME type and base64 payload

    The payload is checked for valid base64 but kept in its encoded form.

    Args:
        image_data_url: String of the form data:image/<type>;base64,<payload>

    Returns:
        ImagePayload with the captured MIME type and base64 text

    Raises:
        InvalidInputFormat: If the string is not an image data URL
    """
    if not isinstance(image_data_url, str):
        raise InvalidInputFormat("Invalid image data format.")

    match = DATA_URL_PATTERN.fullmatch(image_data_url)
    if not match:
        raise InvalidInputFormat("Invalid image data format.")

    mime_type, data = match.groups()

    try:
        raw = base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError):
        raise InvalidInputFormat("Invalid image data format: payload is not valid base64.")

    return ImagePayload(mime_type=mime_type, data=data, raw=raw)


def decode_payload(image: ImagePayload) -> bytes:
    """Raw bytes of a payload, as the SDK expects them for inline data"""
    return image.raw or base64.b64decode(image.data)


def build_image_data_url(mime_type: str, data: Union[bytes, str]) -> str:
    """
    Build a data URL from a MIME type and image data

    Args:
        mime_type: Image MIME type (image/png, image/jpeg, ...)
        data: Raw image bytes, or text that is already base64

    Returns:
        data:<mime_type>;base64,<data>
    """
    if isinstance(data, bytes):
        data = base64.b64encode(data).decode("ascii")
    return f"data:{mime_type};base64,{data}"


def detect_image_mime_type(image_bytes: bytes) -> str:
    """Detect image MIME type from magic bytes, defaulting to PNG"""
    if image_bytes[:8] == b'\x89PNG\r\n\x1a\n':
        return "image/png"
    elif image_bytes[:2] == b'\xff\xd8':
        return "image/jpeg"
    elif image_bytes[:6] in (b'GIF87a', b'GIF89a'):
        return "image/gif"
    elif image_bytes[:4] == b'RIFF' and image_bytes[8:12] == b'WEBP':
        return "image/webp"
    else:
        return "image/png"


def get_image_dimensions(image_bytes: bytes) -> str:
    """Get image dimensions as a string, for logging"""
    # Any decoder failure, including DecompressionBombError, only loses the log detail
    try:
        with Image.open(io.BytesIO(image_bytes)) as img:
            width, height = img.size
        return f"{width}x{height}"
    except Exception:
        return "Unknown"


def describe_payload(image: ImagePayload) -> Tuple[str, int]:
    """Return (dimensions, decoded size in bytes) for an input payload"""
    image_bytes = decode_payload(image)
    return get_image_dimensions(image_bytes), len(image_bytes)
