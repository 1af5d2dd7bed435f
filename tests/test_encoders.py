"""Tests for encoder selection and encoding."""

import io
from unittest.mock import Mock

import pytest
from PIL import Image

from image_variants.core.encoders import (
    GIF_ENCODER,
    JPEG_ENCODER,
    PNG_ENCODER,
    normalize_extension,
    require_encoder,
    resolve_encoder,
)
from image_variants.core.exceptions import EncodeError, UnsupportedFormatError


class TestResolveEncoder:
    """Tests for resolve_encoder."""

    @pytest.mark.parametrize(
        "extension",
        ["gif", "png", "jpg", "jpeg", ".gif", ".PNG", "JPG", ".Jpeg", "GiF"],
    )
    def test_supported_extensions(self, extension):
        """Supported extensions resolve in any case, with or without a dot."""
        assert resolve_encoder(extension) is not None

    @pytest.mark.parametrize(
        "extension",
        [
            "",
            ".",
            "bmp",
            ".bmp",
            "TIFF",
            "webp",
            "jpgx",
            "j.pg",
            "png.",
            "image/png",
            " .png ",
            "..png",
            "png ",
            None,
        ],
    )
    def test_unsupported_extensions(self, extension):
        """Anything else is unsupported."""
        assert resolve_encoder(extension) is None

    def test_extension_to_format(self):
        """Each extension maps to its own output format."""
        assert resolve_encoder("png") is PNG_ENCODER
        assert resolve_encoder("gif") is GIF_ENCODER
        assert resolve_encoder("jpg") is JPEG_ENCODER
        assert resolve_encoder("jpeg") is JPEG_ENCODER

    def test_content_types(self):
        assert resolve_encoder("png").content_type == "image/png"
        assert resolve_encoder("gif").content_type == "image/gif"
        assert resolve_encoder(".JPEG").content_type == "image/jpeg"

    def test_resolution_is_deterministic(self):
        assert resolve_encoder(".jpg") == resolve_encoder(".jpg")

    def test_custom_jpeg_quality(self):
        encoder = resolve_encoder("jpg", jpeg_quality=70)
        assert encoder.pil_format == "JPEG"
        assert encoder.save_options == {"quality": 70}

    def test_require_encoder_raises(self):
        with pytest.raises(UnsupportedFormatError):
            require_encoder(".bmp")
        assert require_encoder(".png") is PNG_ENCODER

    def test_normalize_extension(self):
        assert normalize_extension(".JPG") == "jpg"
        assert normalize_extension(None) == ""
        assert normalize_extension("..png") == ".png"
        assert normalize_extension(" .png ") == " .png "


class TestEncoder:
    """Tests for Encoder.encode."""

    def test_jpeg_converts_alpha(self):
        """RGBA images are flattened to RGB for JPEG output."""
        image = Image.new("RGBA", (40, 30), (255, 0, 0, 128))

        encoded = JPEG_ENCODER.encode(image)

        decoded = Image.open(io.BytesIO(encoded.data))
        assert decoded.format == "JPEG"
        assert decoded.size == (40, 30)
        assert encoded.content_type == "image/jpeg"
        assert encoded.encoder_name == "jpeg"
        assert (encoded.width, encoded.height) == (40, 30)

    def test_png_keeps_alpha(self):
        image = Image.new("RGBA", (10, 10), (0, 255, 0, 10))

        decoded = Image.open(io.BytesIO(PNG_ENCODER.encode(image).data))

        assert decoded.format == "PNG"
        assert decoded.mode == "RGBA"

    def test_gif_from_rgb(self):
        image = Image.new("RGB", (16, 8), "blue")

        decoded = Image.open(io.BytesIO(GIF_ENCODER.encode(image).data))

        assert decoded.format == "GIF"
        assert decoded.size == (16, 8)

    def test_encode_failure(self):
        """Pillow save errors surface as EncodeError."""
        image = Mock()
        image.mode = "RGB"
        image.save.side_effect = OSError("encoder broke")

        with pytest.raises(EncodeError, match="encoder broke"):
            JPEG_ENCODER.encode(image)
