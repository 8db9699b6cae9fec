"""
Version Comparison Module

Pure function for comparing two versions extracted with the same pattern.
"""

from enum import Enum
from typing import Sequence


class Classification(Enum):
    """How a candidate version relates to the current one."""
    NO_CHANGE = "no_change"
    COMPATIBLE = "compatible"
    BREAKING = "breaking"


def compare_versions(
    reference: Sequence[int],
    candidate: Sequence[int],
    breaking_flags: Sequence[bool]
) -> Classification:
    """
    Classify a candidate version relative to a reference version.

    Slots are compared left to right, the leftmost slot being the most
    significant. Only the first differing slot decides the outcome: a
    change in an earlier non-breaking slot is compatible even if a later
    breaking slot changed too. Lower candidates are never updates.

    Args:
        reference: Version extracted from the current tag
        candidate: Version extracted from a candidate tag
        breaking_flags: Breaking flag of every slot of the pattern

    Returns:
        Classification of the candidate

    Raises:
        ValueError: If the sequences have different lengths
    """
    if not len(reference) == len(candidate) == len(breaking_flags):
        raise ValueError(
            f"Cannot compare versions of different arity: "
            f"{len(reference)}, {len(candidate)} and {len(breaking_flags)} slots"
        )

    for current, new, breaking in zip(reference, candidate, breaking_flags):
        if new == current:
            continue
        if new < current:
            return Classification.NO_CHANGE
        return Classification.BREAKING if breaking else Classification.COMPATIBLE

    return Classification.NO_CHANGE
