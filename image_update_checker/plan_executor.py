"""Plan executor - checks every image of a prepared plan."""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed

from .config import DEFAULT_MAX_WORKERS
from .exceptions import CurrentTagMismatch, PatternSyntaxError, UpdateCheckerError
from .io_layer import IOLayer
from .models import CheckPlan, CheckReport, ImageCheckResult, ImageReference
from .tag_classification import classify_updates
from .version_pattern import compile_pattern

logger = logging.getLogger(__name__)


def execute_plan(plan: CheckPlan, io_layer: IOLayer, max_workers: int = DEFAULT_MAX_WORKERS) -> CheckReport:
    """
    Execute a prepared plan.

    Every image is checked in its own task on a bounded thread pool. A
    failing image is recorded in its result and never affects the others.
    Results keep the order of the plan.
    """
    report = CheckReport(
        path=plan.path,
        kind=plan.kind,
        plan_failures=list(plan.failures),
        skipped_count=len(plan.skipped),
    )

    if not plan.has_checks():
        logger.info("No images to check.")
        return report

    results = [None] * len(plan.references)
    workers = max(1, min(max_workers, len(plan.references)))

    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = {
            executor.submit(check_image, reference, io_layer): index
            for index, reference in enumerate(plan.references)
        }
        for future in as_completed(futures):
            results[futures[future]] = future.result()

    report.results = results
    return report


def check_image(reference: ImageReference, io_layer: IOLayer) -> ImageCheckResult:
    """
    Check a single image reference against the registry.

    Args:
        reference: Image reference with its pattern
        io_layer: IO layer used to list tags

    Returns:
        ImageCheckResult holding either the updates or the error
    """
    try:
        if reference.pattern_error:
            raise PatternSyntaxError(reference.pattern_error)
        pattern = compile_pattern(reference.pattern)

        # The reference point must be known before asking the registry
        if pattern.match(reference.tag) is None:
            raise CurrentTagMismatch(reference.tag, str(pattern))

        tags = io_layer.fetch_tags(reference.name)
        updates = classify_updates(pattern, reference.tag, tags)
    except UpdateCheckerError as e:
        logger.warning(f"Failed to check {reference} ({reference.source}): {e}")
        return ImageCheckResult(reference=reference, error=str(e), error_kind=type(e).__name__)

    logger.info(
        f"{reference}: {len(updates.breaking)} breaking and "
        f"{len(updates.compatible)} compatible updates"
    )
    return ImageCheckResult(reference=reference, updates=updates)
