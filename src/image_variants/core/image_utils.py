"""Image decoding and resizing utilities for the image variants worker."""

import io
from typing import Any, Dict

from PIL import Image, UnidentifiedImageError

from .exceptions import DecodeError, ResizeError


def decode_image(data: bytes) -> Image.Image:
    """
    Decode raw image bytes into a fully loaded PIL Image.

    The pixel data is loaded eagerly so the returned image no longer depends
    on the byte stream it was read from.

    Args:
        data: Encoded image bytes (PNG, JPEG, GIF, ...)

    Returns:
        Loaded PIL Image

    Raises:
        DecodeError: If the bytes are empty or not a readable image
    """
    if not data:
        raise DecodeError("Source image is empty")

    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except (UnidentifiedImageError, OSError, SyntaxError, Image.DecompressionBombError) as exc:
        # SyntaxError can happen with malformed image files.
        raise DecodeError(f"Cannot decode source image: {exc}") from exc
    return image


def resize_image(image: Image.Image, width: int, height: int) -> Image.Image:
    """
    Scale an image to exactly width x height.

    No cropping or letterboxing is applied. The source image is left
    untouched so it can be shared between variants.

    Raises:
        ResizeError: If Pillow cannot resample the image
    """
    try:
        # Palette and bilevel images are resampled with NEAREST by Pillow
        return image.resize((width, height), resample=Image.Resampling.LANCZOS)
    except (ValueError, OSError, MemoryError) as exc:
        raise ResizeError(f"Cannot resize image to {width}x{height}: {exc}") from exc


def describe_image(image: Image.Image) -> Dict[str, Any]:
    """Basic image information used in log metadata."""
    return {
        "width": image.width,
        "height": image.height,
        "format": image.format or "unknown",
        "mode": image.mode,
    }
