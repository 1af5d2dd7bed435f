"""Serial processor implementation - converts variants one by one."""

from typing import List

from ..core.models import ConversionOutcome, VariantSettings
from ..core.protocols import ConvertFunction, StopCondition


def process_variants(
    variants: List[VariantSettings],
    convert: ConvertFunction,
    should_stop: StopCondition,
    max_workers: int = 1,
) -> List[ConversionOutcome]:
    """
    Converts variants serially, in declared order, in the current thread.

    Once ``should_stop`` reports true, the variant about to start and every
    later one are recorded as abandoned instead of attempted.

    Args:
        variants: Variant settings in declared order.
        convert: Converts one variant; never raises.
        should_stop: Checked before each variant starts.
        max_workers: Unused, accepted for a uniform processor signature.

    Returns:
        One `ConversionOutcome` per variant, in declared order.
    """
    results = []
    stopped = False

    for variant in variants:
        if stopped or should_stop():
            stopped = True
            results.append(ConversionOutcome.abandoned(variant.name))
            continue
        results.append(convert(variant))

    return results
