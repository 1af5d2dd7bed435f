"""Protocol definitions for dependency injection and testability."""

from typing import Any, Callable, Dict, List, Protocol

from .models import ConversionOutcome, VariantSettings


class S3ClientProtocol(Protocol):
    """Protocol for the S3 client operations the worker uses."""

    def get_object(self, Bucket: str, Key: str) -> Dict[str, Any]:
        """Get object from S3."""
        ...

    def put_object(
        self, Bucket: str, Key: str, Body: bytes, ContentType: str
    ) -> Dict[str, Any]:
        """Put object to S3."""
        ...


class LoggerProtocol(Protocol):
    """Protocol for logging operations."""

    def debug(self, message: str, context: Any = None, **kwargs: Any) -> None:
        """Log debug message."""
        ...

    def info(self, message: str, context: Any = None, **kwargs: Any) -> None:
        """Log info message."""
        ...

    def warning(self, message: str, context: Any = None, **kwargs: Any) -> None:
        """Log warning message."""
        ...

    def error(self, message: str, context: Any = None, **kwargs: Any) -> None:
        """Log error message."""
        ...


ConvertFunction = Callable[[VariantSettings], ConversionOutcome]
StopCondition = Callable[[], bool]


class VariantProcessor(Protocol):
    """Runs a convert function over variants, returning outcomes in declared order."""

    def __call__(
        self,
        variants: List[VariantSettings],
        convert: ConvertFunction,
        should_stop: StopCondition,
        max_workers: int = ...,
    ) -> List[ConversionOutcome]:
        ...
