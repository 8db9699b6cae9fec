"""Data models for planning and execution separation."""

from dataclasses import dataclass, field
from typing import List, Optional
from enum import Enum

from .config import DEFAULT_NAMESPACE


class ManifestKind(Enum):
    """Kind of file being checked."""
    DOCKERFILE = "dockerfile"
    COMPOSE = "compose"


class UpdateLevel(Enum):
    """Overall outcome of a check, ordered by severity."""
    NO_UPDATES = 0
    COMPATIBLE_UPDATE = 1
    BREAKING_UPDATE = 2
    FAILURE = 3


@dataclass(frozen=True)
class ImageName:
    """Docker Hub image name."""
    repository: str
    namespace: Optional[str] = None

    @property
    def registry_path(self) -> str:
        """Path used by the registry API, e.g. 'library/ubuntu'."""
        return f"{self.namespace or DEFAULT_NAMESPACE}/{self.repository}"

    def __str__(self) -> str:
        if self.namespace:
            return f"{self.namespace}/{self.repository}"
        return self.repository


@dataclass
class ImageReference:
    """An image reference found in a manifest, with its pattern directive."""
    name: ImageName
    tag: str
    pattern: Optional[str] = None
    pattern_error: Optional[str] = None  # Set when the directive itself is malformed
    source: str = ""  # e.g. 'Dockerfile:3' or 'service web'

    def __str__(self) -> str:
        return f"{self.name}:{self.tag}"


@dataclass
class UpdateSet:
    """Updates available for one image."""
    breaking: List[str] = field(default_factory=list)
    compatible: List[str] = field(default_factory=list)
    unmatched_count: int = 0

    def has_updates(self) -> bool:
        return bool(self.breaking or self.compatible)


@dataclass
class ImageCheckResult:
    """Outcome of checking a single image reference."""
    reference: ImageReference
    updates: Optional[UpdateSet] = None
    error: Optional[str] = None
    error_kind: Optional[str] = None  # Exception class name

    @property
    def failed(self) -> bool:
        return self.error is not None

    @property
    def update_level(self) -> UpdateLevel:
        if self.failed:
            return UpdateLevel.FAILURE
        if self.updates.breaking:
            return UpdateLevel.BREAKING_UPDATE
        if self.updates.compatible:
            return UpdateLevel.COMPATIBLE_UPDATE
        return UpdateLevel.NO_UPDATES


@dataclass
class PlanFailure:
    """Something in the manifest that could not be turned into an image check.

    The subject is a compose service name or a raw image reference.
    """
    subject: str
    error: str
    source: str = ""


@dataclass
class CheckPlan:
    """Everything that needs to be checked for one manifest."""
    path: str
    kind: ManifestKind
    references: List[ImageReference] = field(default_factory=list)
    failures: List[PlanFailure] = field(default_factory=list)
    skipped: List[ImageReference] = field(default_factory=list)

    def has_checks(self) -> bool:
        return bool(self.references)


@dataclass
class CheckReport:
    """Result of executing a check plan."""
    path: str
    kind: ManifestKind
    results: List[ImageCheckResult] = field(default_factory=list)
    plan_failures: List[PlanFailure] = field(default_factory=list)
    skipped_count: int = 0  # References without a pattern

    @property
    def image_failures(self) -> List[ImageCheckResult]:
        return [r for r in self.results if r.failed]

    @property
    def breaking_updates(self) -> List[ImageCheckResult]:
        return [r for r in self.results if r.update_level == UpdateLevel.BREAKING_UPDATE]

    @property
    def compatible_updates(self) -> List[ImageCheckResult]:
        return [r for r in self.results if r.update_level == UpdateLevel.COMPATIBLE_UPDATE]

    @property
    def no_updates(self) -> List[ImageCheckResult]:
        return [r for r in self.results if r.update_level == UpdateLevel.NO_UPDATES]

    @property
    def update_level(self) -> UpdateLevel:
        """The most severe level over all images and manifest entries."""
        if self.plan_failures:
            return UpdateLevel.FAILURE
        levels = [r.update_level for r in self.results]
        return max(levels, key=lambda level: level.value, default=UpdateLevel.NO_UPDATES)
