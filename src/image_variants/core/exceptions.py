"""Custom exceptions for the image variants worker."""


class ImageVariantsError(Exception):
    """Base exception for all image variants errors."""


class UnsupportedFormatError(ImageVariantsError):
    """Raised when no encoder exists for a source file extension."""


class InvalidDimensionError(ImageVariantsError):
    """Raised for non-physical widths or heights during size planning."""


class InvalidReferenceError(ImageVariantsError):
    """Raised when an object URL cannot be parsed into a storage identity."""


class DecodeError(ImageVariantsError):
    """Raised when the source bytes cannot be decoded into an image."""


class EncodeError(ImageVariantsError):
    """Raised when a resized image cannot be serialized."""


class StorageError(ImageVariantsError):
    """Error raised for object storage failures."""


class StorageReadError(StorageError):
    """Raised when the source object cannot be read."""


class StorageWriteError(StorageError):
    """Raised when a variant cannot be written to its destination."""


class ConfigurationError(ImageVariantsError):
    """Error raised for invalid configuration options."""


class MalformedEventError(ImageVariantsError):
    """Raised when a notification payload cannot be interpreted at all."""


class ResizeError(ImageVariantsError):
    """Raised when a decoded image cannot be scaled to its planned size."""
