"""Plan builder - creates a check plan from a manifest."""

import logging
from pathlib import Path
from typing import Optional

from .config import DIRECTIVE_MARKER
from .exceptions import ImageReferenceError
from .io_layer import IOLayer
from .manifest_parsing import parse_compose, parse_dockerfile, parse_image_reference
from .models import CheckPlan, ManifestKind, PlanFailure

logger = logging.getLogger(__name__)


def prepare_plan(
    kind: ManifestKind,
    path: str,
    io_layer: IOLayer,
    default_pattern: Optional[str] = None,
    marker: str = DIRECTIVE_MARKER
) -> CheckPlan:
    """
    Prepare a complete check plan.

    This function reads the manifest and collects every image reference
    that carries a pattern, but doesn't contact the registry.

    Args:
        kind: Whether path is a Dockerfile or a compose file
        path: Path to the manifest
        io_layer: IO layer for file operations
        default_pattern: Pattern for references without a directive
        marker: Directive marker word

    Raises:
        ManifestError: If the manifest cannot be read or parsed
    """
    plan = CheckPlan(path=path, kind=kind)
    content = io_layer.read_manifest(path)

    if kind == ManifestKind.DOCKERFILE:
        _add_dockerfile(plan, content, path, default_pattern, marker)
    else:
        _add_compose(plan, content, path, io_layer, default_pattern, marker)

    logger.info(
        f"Planned {len(plan.references)} image checks for {path} "
        f"({len(plan.skipped)} without pattern, {len(plan.failures)} failures)"
    )
    return plan


def _add_reference(
    plan: CheckPlan,
    raw_image: str,
    source: str,
    pattern: Optional[str],
    pattern_error: Optional[str],
    default_pattern: Optional[str]
) -> None:
    """Resolve the pattern of one reference and add it to the plan."""
    # A directive always wins over the command line pattern
    if pattern is None and pattern_error is None:
        pattern = default_pattern
    wanted = pattern is not None or pattern_error is not None

    try:
        reference = parse_image_reference(raw_image, source=source)
    except ImageReferenceError as e:
        if wanted:
            plan.failures.append(PlanFailure(subject=raw_image, error=str(e), source=source))
        else:
            logger.debug(f"{source}: ignoring `{raw_image}`: {e}")
        return

    reference.pattern = pattern
    reference.pattern_error = pattern_error

    if wanted:
        plan.references.append(reference)
    else:
        logger.debug(f"{source}: no pattern for {reference}, skipping")
        plan.skipped.append(reference)


def _add_dockerfile(
    plan: CheckPlan,
    content: str,
    path: str,
    default_pattern: Optional[str],
    marker: str,
    source_prefix: str = ""
) -> None:
    for entry in parse_dockerfile(content, marker):
        _add_reference(
            plan,
            raw_image=entry.image,
            source=f"{source_prefix}{path}:{entry.line}",
            pattern=entry.pattern,
            pattern_error=entry.pattern_error,
            default_pattern=default_pattern,
        )


def _add_compose(
    plan: CheckPlan,
    content: str,
    path: str,
    io_layer: IOLayer,
    default_pattern: Optional[str],
    marker: str
) -> None:
    compose_dir = Path(path).parent

    for service in parse_compose(content, marker):
        if service.error:
            plan.failures.append(PlanFailure(subject=service.name, error=service.error))
            continue

        if service.image:
            _add_reference(
                plan,
                raw_image=service.image,
                source=f"service {service.name}",
                pattern=service.pattern,
                pattern_error=service.pattern_error,
                default_pattern=default_pattern,
            )
            continue

        dockerfile_path = str(compose_dir / service.build.context / service.build.dockerfile)
        try:
            dockerfile = io_layer.read_file(dockerfile_path)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Failed to read {dockerfile_path}: {e}")
            dockerfile = None

        if dockerfile is None:
            plan.failures.append(PlanFailure(
                subject=service.name,
                error=f"Failed to read file `{dockerfile_path}`",
            ))
            continue

        _add_dockerfile(
            plan, dockerfile, dockerfile_path, default_pattern, marker,
            source_prefix=f"service {service.name} ",
        )
