"""Loading of the conversion configuration from the process environment."""

import os
from typing import Mapping, Optional

from .exceptions import ConfigurationError
from .models import CANONICAL_VARIANT_NAMES, ConversionConfig, VariantSettings

PROCESSOR_CHOICES = ("serial", "multithread")


def _int_setting(environ: Mapping[str, str], key: str, default: int, minimum: int) -> int:
    raw = environ.get(key)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ConfigurationError(f"{key} must be an integer, got {raw!r}")
    if value < minimum:
        raise ConfigurationError(f"{key} must be >= {minimum}, got {value}")
    return value


def variant_names(environ: Mapping[str, str]) -> list:
    """Declared variant names, in order, from VARIANT_NAMES or the canonical five."""
    raw = environ.get("VARIANT_NAMES", "")
    names = [name.strip().upper() for name in raw.split(",") if name.strip()]
    return names or list(CANONICAL_VARIANT_NAMES)


def load_config(environ: Optional[Mapping[str, str]] = None) -> ConversionConfig:
    """
    Build the conversion configuration once for the process.

    Environment Variables:
        VARIANT_NAMES: Comma separated variant names, in processing order
        <NAME>_WIDTH: Target width of a variant
        <NAME>_CONTAINER_NAME: Destination bucket of a variant
        CONVERSION_PROCESSOR: "serial" (default) or "multithread"
        CONVERSION_MAX_WORKERS: Thread pool size for "multithread" (default 4)
        CONVERSION_MIN_REMAINING_MS: Time left below which remaining variants are abandoned
        JPEG_QUALITY: Quality used for JPEG output (default 95)

    Missing or malformed per-variant values are kept as they are and only
    fail their own variant. Malformed process-wide values raise
    ConfigurationError.
    """
    if environ is None:
        environ = os.environ

    variants = [
        VariantSettings(
            name=name,
            width=environ.get(f"{name}_WIDTH"),
            container=environ.get(f"{name}_CONTAINER_NAME"),
        )
        for name in variant_names(environ)
    ]

    processor = environ.get("CONVERSION_PROCESSOR", "serial").strip().lower() or "serial"
    if processor not in PROCESSOR_CHOICES:
        raise ConfigurationError(
            f"CONVERSION_PROCESSOR must be one of {', '.join(PROCESSOR_CHOICES)}, got {processor!r}"
        )

    jpeg_quality = _int_setting(environ, "JPEG_QUALITY", 95, 1)
    if jpeg_quality > 100:
        raise ConfigurationError(f"JPEG_QUALITY must be <= 100, got {jpeg_quality}")

    return ConversionConfig(
        variants=variants,
        processor=processor,
        max_workers=_int_setting(environ, "CONVERSION_MAX_WORKERS", 4, 1),
        min_remaining_ms=_int_setting(environ, "CONVERSION_MIN_REMAINING_MS", 3000, 0),
        jpeg_quality=jpeg_quality,
    )
