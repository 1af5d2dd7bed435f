"""AWS Lambda entry point for "object created" notifications."""

from typing import Any, Dict, Optional

from .core import MalformedEventError, get_logger
from .core.factories import ConversionPipelineFactory
from .core.services import ConversionOrchestrator

_pipeline: Optional[ConversionOrchestrator] = None


def get_pipeline() -> ConversionOrchestrator:
    """Build the pipeline on first use; config and S3 client live for the whole process."""
    global _pipeline
    if _pipeline is None:
        _pipeline = ConversionPipelineFactory.create_pipeline()
    return _pipeline


def reset_pipeline() -> None:
    global _pipeline
    _pipeline = None


def handler(event: Any, context: Any = None) -> Dict[str, Any]:
    """
    Convert every image referenced by ``event`` into its variants.

    Per-variant failures are reported in the returned summary only. A
    payload that cannot be parsed raises MalformedEventError so the trigger
    host can apply its retry policy.
    """
    time_remaining = getattr(context, "get_remaining_time_in_millis", None)

    try:
        reports = get_pipeline().handle_event(event, time_remaining)
    except MalformedEventError as e:
        get_logger("image-variants.handler").error(f"Malformed notification: {e}")
        raise

    return {"reports": [report.summary() for report in reports]}
