"""Aspect-ratio preserving size planning."""

from fractions import Fraction
from typing import Tuple

from .exceptions import InvalidDimensionError


def plan_height(source_width: int, source_height: int, target_width: int) -> int:
    """
    Compute the output height for a width-driven resize.

    The ratio is evaluated exactly as ``source_height * target_width /
    source_width`` and rounded half-to-even, so 1024x768 at width 256 gives
    192 and a same-width target keeps the source height.

    Args:
        source_width: Decoded source width in pixels
        source_height: Decoded source height in pixels
        target_width: Requested output width in pixels

    Returns:
        Output height, never less than 1

    Raises:
        InvalidDimensionError: If any dimension is zero or negative
    """
    if source_width <= 0:
        raise InvalidDimensionError(f"Source width must be positive, got {source_width}")
    if source_height <= 0:
        raise InvalidDimensionError(f"Source height must be positive, got {source_height}")
    if target_width <= 0:
        raise InvalidDimensionError(f"Target width must be positive, got {target_width}")

    height = round(Fraction(source_height * target_width, source_width))
    return max(1, height)


def plan_size(source_size: Tuple[int, int], target_width: int) -> Tuple[int, int]:
    """Return the (width, height) a source of ``source_size`` is resized to."""
    source_width, source_height = source_size
    return target_width, plan_height(source_width, source_height, target_width)
