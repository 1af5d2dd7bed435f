"""Encoder selection by source file extension."""

import io
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from PIL import Image

from .exceptions import EncodeError, UnsupportedFormatError
from .models import EncodedImage

# Pixel modes each output format can store as-is
_SAVEABLE_MODES = {
    "JPEG": ("RGB", "L", "CMYK"),
    "PNG": ("RGB", "RGBA", "L", "LA", "P", "1", "I", "I;16"),
    "GIF": ("P", "L"),
}


@dataclass(frozen=True)
class Encoder:
    """Serializes a PIL image into one output format."""

    name: str
    pil_format: str
    content_type: str
    save_options: Dict[str, Any] = field(default_factory=dict)

    def _prepare(self, image: Image.Image) -> Image.Image:
        if image.mode in _SAVEABLE_MODES[self.pil_format]:
            return image
        if self.pil_format == "JPEG":
            return image.convert("RGB")
        if self.pil_format == "GIF":
            return image.convert("RGB").convert("P", palette=Image.Palette.ADAPTIVE)
        return image.convert("RGBA")

    def encode(self, image: Image.Image) -> EncodedImage:
        """Encode the image, raising EncodeError on failure."""
        output = io.BytesIO()
        try:
            self._prepare(image).save(output, format=self.pil_format, **self.save_options)
        except (OSError, ValueError, KeyError) as exc:
            raise EncodeError(f"{self.name} encoding failed: {exc}") from exc

        return EncodedImage(
            data=output.getvalue(),
            encoder_name=self.name,
            content_type=self.content_type,
            width=image.width,
            height=image.height,
        )


def jpeg_encoder(quality: int = 95) -> Encoder:
    return Encoder("jpeg", "JPEG", "image/jpeg", {"quality": quality})


PNG_ENCODER = Encoder("png", "PNG", "image/png")
GIF_ENCODER = Encoder("gif", "GIF", "image/gif")
JPEG_ENCODER = jpeg_encoder()


def normalize_extension(extension: Optional[str]) -> str:
    """Lower-case an extension and drop a single leading dot; nothing else is trimmed."""
    if not isinstance(extension, str):
        return ""
    if extension.startswith("."):
        extension = extension[1:]
    return extension.lower()


def resolve_encoder(extension: Optional[str], jpeg_quality: int = 95) -> Optional[Encoder]:
    """
    Map a source file extension to its output encoder.

    Only gif, png, jpg and jpeg are recognized, case-insensitively and with
    or without a leading dot. Anything else returns None (unsupported).
    """
    ext = normalize_extension(extension)
    if ext in ("jpg", "jpeg"):
        return JPEG_ENCODER if jpeg_quality == 95 else jpeg_encoder(jpeg_quality)
    if ext == "png":
        return PNG_ENCODER
    if ext == "gif":
        return GIF_ENCODER
    return None


def require_encoder(extension: Optional[str], jpeg_quality: int = 95) -> Encoder:
    """Like resolve_encoder, but raise UnsupportedFormatError instead of returning None."""
    encoder = resolve_encoder(extension, jpeg_quality)
    if encoder is None:
        raise UnsupportedFormatError(f"No encoder support for extension {extension!r}")
    return encoder
