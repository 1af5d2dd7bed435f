"""Variant processors with different concurrency strategies."""

from .serial import process_variants as serial_process_variants
from .multithread import process_variants as multithread_process_variants

from ..core.exceptions import ConfigurationError

PROCESSORS = {
    "serial": serial_process_variants,
    "multithread": multithread_process_variants,
}


def get_processor(name: str):
    """Look up a variant processor by its configured name."""
    try:
        return PROCESSORS[name]
    except KeyError:
        raise ConfigurationError(
            f"Unknown processor {name!r}; expected one of {', '.join(PROCESSORS)}"
        ) from None


__all__ = [
    "PROCESSORS",
    "get_processor",
    "serial_process_variants",
    "multithread_process_variants",
]
