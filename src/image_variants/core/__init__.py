"""Core utilities and shared components for the image variants worker."""

from .logging_config import get_logger, set_debug_logging, setup_logger
from .exceptions import (
    ImageVariantsError,
    UnsupportedFormatError,
    InvalidDimensionError,
    InvalidReferenceError,
    DecodeError,
    ResizeError,
    EncodeError,
    StorageError,
    StorageReadError,
    StorageWriteError,
    ConfigurationError,
    MalformedEventError,
)
from .models import (
    CANONICAL_VARIANT_NAMES,
    ConversionConfig,
    ConversionOutcome,
    ConversionReport,
    EncodedImage,
    OutcomeStatus,
    ReportStatus,
    SourceCreatedNotification,
    SourceImageReference,
    VariantDefinition,
    VariantSettings,
)
from .encoders import Encoder, resolve_encoder, require_encoder
from .sizing import plan_height, plan_size
from .naming import ObjectLocation, name_for, object_url, parse_object_url
from .events import parse_notifications
from .config import load_config
from .services import ConversionOrchestrator, SourceLoader, VariantConversionExecutor

__all__ = [
    "setup_logger",
    "get_logger",
    "set_debug_logging",
    "ImageVariantsError",
    "UnsupportedFormatError",
    "InvalidDimensionError",
    "InvalidReferenceError",
    "DecodeError",
    "ResizeError",
    "EncodeError",
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
    "ConfigurationError",
    "MalformedEventError",
    "CANONICAL_VARIANT_NAMES",
    "ConversionConfig",
    "ConversionOutcome",
    "ConversionReport",
    "EncodedImage",
    "OutcomeStatus",
    "ReportStatus",
    "SourceCreatedNotification",
    "SourceImageReference",
    "VariantDefinition",
    "VariantSettings",
    "Encoder",
    "resolve_encoder",
    "require_encoder",
    "plan_height",
    "plan_size",
    "ObjectLocation",
    "name_for",
    "object_url",
    "parse_object_url",
    "parse_notifications",
    "load_config",
    "ConversionOrchestrator",
    "SourceLoader",
    "VariantConversionExecutor",
]
