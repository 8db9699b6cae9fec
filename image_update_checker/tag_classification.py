"""
Tag Classification Module

Pure functions for classifying registry tags as updates of a current tag.
This module contains no side effects - only tag analysis logic.
"""

import logging
from typing import Dict, Iterable, List, Tuple

from .exceptions import CurrentTagMismatch
from .models import UpdateSet
from .version_comparison import Classification, compare_versions
from .version_pattern import ExtractedVersion, VersionPattern

logger = logging.getLogger(__name__)


def classify_updates(
    pattern: VersionPattern,
    current_tag: str,
    candidate_tags: Iterable[str]
) -> UpdateSet:
    """
    Classify candidate tags relative to the current tag.

    Pure function: candidates that do not match the pattern are counted and
    dropped, lower or equal versions are dropped, and the remaining ones are
    split into breaking and compatible updates. Tags extracting the same
    version are collapsed onto the first one seen.

    Args:
        pattern: Compiled pattern of the image
        current_tag: Tag currently in use
        candidate_tags: Tags published in the registry

    Returns:
        UpdateSet with both buckets sorted by version, highest first

    Raises:
        CurrentTagMismatch: If current_tag does not match the pattern
    """
    current = pattern.match(current_tag)
    if current is None:
        raise CurrentTagMismatch(current_tag, str(pattern))

    buckets: Dict[Classification, List[Tuple[ExtractedVersion, str]]] = {
        Classification.BREAKING: [],
        Classification.COMPATIBLE: [],
    }
    seen = set()
    unmatched = 0

    for tag in candidate_tags:
        version = pattern.match(tag)
        if version is None:
            unmatched += 1
            continue
        if version in seen:
            continue
        seen.add(version)

        classification = compare_versions(current, version, pattern.breaking_flags)
        if classification == Classification.NO_CHANGE:
            continue
        buckets[classification].append((version, tag))

    logger.debug(
        f"{current_tag} ({pattern}): {len(buckets[Classification.BREAKING])} breaking, "
        f"{len(buckets[Classification.COMPATIBLE])} compatible, {unmatched} unmatched"
    )

    return UpdateSet(
        breaking=_sorted_tags(buckets[Classification.BREAKING]),
        compatible=_sorted_tags(buckets[Classification.COMPATIBLE]),
        unmatched_count=unmatched,
    )


def _sorted_tags(entries: List[Tuple[ExtractedVersion, str]]) -> List[str]:
    """Order tags by version, most significant slot first, highest first."""
    return [tag for _, tag in sorted(entries, key=lambda entry: entry[0], reverse=True)]
