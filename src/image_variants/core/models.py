"""Shared data models for the image variants worker."""

import threading
from enum import Enum
from typing import Any, List, Optional, Union

from PIL import Image
from pydantic import BaseModel, Field, PrivateAttr, ValidationError

from .exceptions import ConfigurationError, DecodeError
from .image_utils import decode_image

CANONICAL_VARIANT_NAMES = (
    "THUMBNAIL_128",
    "THUMBNAIL_256",
    "THUMBNAIL_512",
    "NORMAL",
    "FULL",
)


class VariantDefinition(BaseModel):
    """A validated output size and destination for one variant."""

    name: str
    width: int = Field(gt=0)
    container: str = Field(min_length=1)


class VariantSettings(BaseModel):
    """
    Configuration entry for one variant as it was supplied.

    Values are kept unvalidated so that a malformed entry only fails its
    own variant when it runs.
    """

    name: str
    width: Optional[Union[int, str]] = None
    container: Optional[str] = None

    def to_definition(self) -> VariantDefinition:
        """Validate the entry, raising ConfigurationError when it is unusable."""
        if self.width is None or (isinstance(self.width, str) and not self.width.strip()):
            raise ConfigurationError(f"Variant {self.name} has no width configured")
        if not self.container or not self.container.strip():
            raise ConfigurationError(f"Variant {self.name} has no container configured")

        width = self.width.strip() if isinstance(self.width, str) else self.width
        try:
            return VariantDefinition(
                name=self.name, width=width, container=self.container.strip()
            )
        except ValidationError as exc:
            raise ConfigurationError(
                f"Variant {self.name} has invalid settings: width={self.width!r}"
            ) from exc


class ConversionConfig(BaseModel):
    """Configuration for converting one source image into its variants."""

    variants: List[VariantSettings] = Field(default_factory=list)
    processor: str = "serial"
    max_workers: int = 4
    min_remaining_ms: int = 3000
    jpeg_quality: int = 95

    @classmethod
    def from_definitions(cls, *definitions: VariantDefinition, **kwargs) -> "ConversionConfig":
        """Build a config from already validated variant definitions."""
        variants = [
            VariantSettings(name=d.name, width=d.width, container=d.container)
            for d in definitions
        ]
        return cls(variants=variants, **kwargs)


class SourceCreatedNotification(BaseModel):
    """A single "object created" notification."""

    url: str
    event_id: Optional[str] = None
    event_time: Optional[str] = None


class SourceImageReference(BaseModel):
    """
    The uploaded object for one event.

    The raw bytes are decoded at most once; every variant shares the decoded
    image and must not mutate it.
    """

    url: str
    extension: str
    data: bytes

    _lock: Any = PrivateAttr(default_factory=threading.Lock)
    _image: Optional[Image.Image] = PrivateAttr(default=None)
    _decode_error: Optional[DecodeError] = PrivateAttr(default=None)

    def decoded(self) -> Image.Image:
        """Return the decoded source image, decoding it on first use."""
        with self._lock:
            if self._image is None and self._decode_error is None:
                try:
                    self._image = decode_image(self.data)
                except DecodeError as exc:
                    self._decode_error = exc
            if self._decode_error is not None:
                raise self._decode_error
            return self._image


class EncodedImage(BaseModel):
    """A resized image serialized by an encoder."""

    data: bytes
    encoder_name: str
    content_type: str
    width: int
    height: int


class OutcomeStatus(str, Enum):
    """Result states of a single variant conversion."""

    SUCCEEDED = "succeeded"
    FAILED = "failed"
    ABANDONED = "abandoned"


class ConversionOutcome(BaseModel):
    """Result of converting a single variant."""

    variant: str
    status: OutcomeStatus = OutcomeStatus.FAILED
    destination: str = ""
    error_type: str = ""
    error: str = ""
    width: int = 0
    height: int = 0
    processing_time: float = 0.0

    @property
    def success(self) -> bool:
        return self.status == OutcomeStatus.SUCCEEDED

    @classmethod
    def failure(cls, variant: str, error: BaseException, **kwargs) -> "ConversionOutcome":
        return cls(
            variant=variant,
            status=OutcomeStatus.FAILED,
            error_type=type(error).__name__,
            error=str(error),
            **kwargs,
        )

    @classmethod
    def abandoned(cls, variant: str) -> "ConversionOutcome":
        return cls(
            variant=variant,
            status=OutcomeStatus.ABANDONED,
            error="Not attempted: remaining time below threshold",
        )


class ReportStatus(str, Enum):
    """How an event was handled as a whole."""

    COMPLETED = "completed"
    UNSUPPORTED = "unsupported"
    SKIPPED = "skipped"


class ConversionReport(BaseModel):
    """Summary of handling one notification."""

    url: str
    status: ReportStatus = ReportStatus.COMPLETED
    outcomes: List[ConversionOutcome] = Field(default_factory=list)
    processing_time: float = 0.0

    @property
    def succeeded_count(self) -> int:
        return sum(1 for o in self.outcomes if o.status == OutcomeStatus.SUCCEEDED)

    @property
    def failed_count(self) -> int:
        return sum(1 for o in self.outcomes if o.status == OutcomeStatus.FAILED)

    @property
    def abandoned_count(self) -> int:
        return sum(1 for o in self.outcomes if o.status == OutcomeStatus.ABANDONED)

    def summary(self) -> dict:
        """JSON-serializable summary for the trigger host."""
        return {
            "url": self.url,
            "status": self.status.value,
            "succeeded": self.succeeded_count,
            "failed": self.failed_count,
            "abandoned": self.abandoned_count,
            "variants": {o.variant: o.status.value for o in self.outcomes},
        }
