"""Multithreaded processor implementation - converts variants on a thread pool."""

from typing import List
from concurrent.futures import ThreadPoolExecutor

from ..core.models import ConversionOutcome, VariantSettings
from ..core.protocols import ConvertFunction, StopCondition


def process_variants(
    variants: List[VariantSettings],
    convert: ConvertFunction,
    should_stop: StopCondition,
    max_workers: int = 4,
) -> List[ConversionOutcome]:
    """
    Convert variants concurrently using a thread pool.

    Variants share only the read-only decoded source image and write to
    distinct destinations, so completion order does not matter; outcomes
    are still returned in declared order.

    Args:
        variants: Variant settings in declared order
        convert: Converts one variant; never raises
        should_stop: Checked when a task starts running
        max_workers: Upper bound on pool size

    Returns:
        One `ConversionOutcome` per variant, in declared order
    """
    if not variants:
        return []

    def _run(variant: VariantSettings) -> ConversionOutcome:
        if should_stop():
            return ConversionOutcome.abandoned(variant.name)
        return convert(variant)

    results: List[ConversionOutcome] = []
    with ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(variants)))) as executor:
        futures = [(variant, executor.submit(_run, variant)) for variant in variants]

        for variant, future in futures:
            try:
                results.append(future.result())
            except Exception as e:
                # convert() reports its own failures; this only covers crashes in the pool
                results.append(ConversionOutcome.failure(variant.name, e))

    return results
