"""
Report Generation Module

Pure functions for rendering check reports as text or JSON-ready data.
This module contains no side effects - only text formatting logic.
"""

from collections import Counter
from typing import List, Dict, Optional, Any, Tuple

from .models import CheckReport, ImageCheckResult, ManifestKind, UpdateLevel
from .version_pattern import VersionPattern

REPORT_TITLES = {
    ManifestKind.DOCKERFILE: "Dockerfile",
    ManifestKind.COMPOSE: "Docker Compose file",
}


def generate_report_header(report: CheckReport, display_path: str) -> str:
    """Generate the first line of a text report."""
    return f"Report for {REPORT_TITLES[report.kind]} at `{display_path}`:"


def _describe(result: ImageCheckResult) -> str:
    if result.reference.source:
        return f"{result.reference} ({result.reference.source})"
    return str(result.reference)


def generate_failures_text(report: CheckReport) -> str:
    """
    Generate the failures section of a text report.

    Args:
        report: The executed check report

    Returns:
        Failures section, or an empty string if nothing failed
    """
    lines = []
    for failure in report.plan_failures:
        subject = f"{failure.subject} ({failure.source})" if failure.source else failure.subject
        lines.append(f"  - {subject}: {failure.error}")
    for result in report.image_failures:
        lines.append(f"  - {_describe(result)}: {result.error}")

    if not lines:
        return ""
    return "\n".join(["Failed to check:"] + lines)


def _update_lines(results: List[ImageCheckResult], breaking: bool) -> List[str]:
    lines = []
    for result in results:
        tags = result.updates.breaking if breaking else result.updates.compatible
        lines.append(f"  - {_describe(result)} -> {', '.join(tags)}")
    return lines


def generate_successes_text(report: CheckReport) -> str:
    """
    Generate the update sections of a text report.

    Breaking updates come first, then compatible updates, then images that
    are up to date. An image with both kinds of update is listed in both
    update sections.

    Args:
        report: The executed check report

    Returns:
        Text with one section per non-empty category
    """
    succeeded = [r for r in report.results if not r.failed]
    with_breaking = [r for r in succeeded if r.updates.breaking]
    with_compatible = [r for r in succeeded if r.updates.compatible]

    sections = []
    if with_breaking:
        sections.append("\n".join(["Breaking updates:"] + _update_lines(with_breaking, breaking=True)))
    if with_compatible:
        sections.append("\n".join(["Compatible updates:"] + _update_lines(with_compatible, breaking=False)))
    if report.no_updates:
        sections.append("\n".join(["No updates:"] + [f"  - {_describe(r)}" for r in report.no_updates]))

    if not sections and not report.image_failures and not report.plan_failures:
        sections.append("No images with a version pattern were found.")
    if report.skipped_count:
        sections.append(f"Skipped {report.skipped_count} image reference(s) without a version pattern.")

    return "\n\n".join(sections)


def generate_json_report(report: CheckReport, display_path: str) -> Dict[str, Any]:
    """
    Generate a JSON-serializable report.

    Args:
        report: The executed check report
        display_path: Path shown in the report

    Returns:
        Dictionary with path, failures, no_updates, compatible_updates and
        breaking_updates keys
    """
    keys = _json_keys(
        [(failure.subject, failure.source) for failure in report.plan_failures]
        + [(str(r.reference), r.reference.source) for r in report.results]
    )
    failure_keys = keys[:len(report.plan_failures)]
    keyed = list(zip(keys[len(report.plan_failures):], report.results))

    failures = {key: failure.error for key, failure in zip(failure_keys, report.plan_failures)}
    failures.update({key: r.error for key, r in keyed if r.failed})

    return {
        "path": display_path,
        "failures": failures,
        "no_updates": [key for key, r in keyed if r.update_level == UpdateLevel.NO_UPDATES],
        "compatible_updates": {
            key: r.updates.compatible for key, r in keyed if not r.failed and r.updates.compatible
        },
        "breaking_updates": {
            key: r.updates.breaking for key, r in keyed if not r.failed and r.updates.breaking
        },
    }


def _json_keys(entries: List[Tuple[str, str]]) -> List[str]:
    """Object keys for (name, source) pairs; repeated names get their source appended."""
    counts = Counter(name for name, _ in entries)
    keys = []
    taken = set()
    for name, source in entries:
        key = f"{name} ({source})" if counts[name] > 1 and source else name
        base, n = key, 2
        while key in taken:
            key = f"{base} #{n}"
            n += 1
        taken.add(key)
        keys.append(key)
    return keys


def generate_fetch_text(tags: List[str], fetched: int, pattern: Optional[VersionPattern] = None) -> str:
    """
    Generate the output of the fetch command.

    Args:
        tags: Tags to list (already filtered when a pattern is given)
        fetched: Number of tags fetched from the registry
        pattern: Pattern the tags were filtered with, if any

    Returns:
        Summary line followed by one tag per line
    """
    if pattern is not None:
        header = f"Fetched {fetched} tags. Found {len(tags)} matching `{pattern}`:"
    else:
        header = f"Fetched {fetched} tags:"
    return "\n".join([header] + tags)
