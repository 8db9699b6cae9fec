"""
Manifest Parsing Module

Pure functions that locate image references and their pattern directives in
Dockerfiles and Docker Compose files. File access happens in the I/O layer;
everything here works on strings.

A pattern directive is a comment on the line directly above the reference:

    # image-update-checker --pattern "<!>.<>.<>"
    FROM node:14.17.0
"""

import re
import shlex
import logging
from dataclasses import dataclass
from typing import List, Dict, Optional, Tuple, Any

import yaml
import dpath

from .config import DEFAULT_TAG, DIRECTIVE_MARKER, DOCKER_HUB_HOSTS
from .exceptions import ImageReferenceError, ManifestError
from .models import ImageName, ImageReference

logger = logging.getLogger(__name__)

FROM_LINE = re.compile(
    r"^\s*FROM\s+(?:--\S+\s+)*(?P<image>\S+)(?:\s+AS\s+(?P<stage>\S+))?\s*$",
    re.IGNORECASE,
)
IMAGE_LINE = re.compile(r"^\s*(?:-\s+)?image\s*:\s*(?P<value>.+?)\s*$")
MAPPING_KEY = re.compile(r"^\s*(?P<key>[^\s#:][^:]*?)\s*:(?:\s|$)")
NAME_COMPONENT = re.compile(r"^[A-Za-z0-9_][A-Za-z0-9_.-]*$")
TAG = re.compile(r"^[A-Za-z0-9_][A-Za-z0-9_.-]{0,127}$")

# (pattern, error) as read from a directive comment
Directive = Tuple[Optional[str], Optional[str]]


@dataclass
class DockerfileEntry:
    """A FROM instruction together with its directive."""
    image: str
    line: int
    pattern: Optional[str] = None
    pattern_error: Optional[str] = None


@dataclass
class BuildContext:
    """Build context of a compose service."""
    context: str
    dockerfile: str = "Dockerfile"


@dataclass
class ComposeService:
    """A compose service: either an image or a build context, or an error."""
    name: str
    image: Optional[str] = None
    build: Optional[BuildContext] = None
    pattern: Optional[str] = None
    pattern_error: Optional[str] = None
    error: Optional[str] = None


# -----------------------------------------------------------------------------
# Image references
# -----------------------------------------------------------------------------


def parse_image_reference(text: str, source: str = "") -> ImageReference:
    """
    Parse an image reference such as 'node:14', 'grafana/grafana:8.1.2'
    or 'docker.io/library/redis:6.2@sha256:...'.

    Args:
        text: The raw image reference
        source: Human-readable origin of the reference

    Returns:
        ImageReference without a pattern; the tag defaults to 'latest'

    Raises:
        ImageReferenceError: If the reference is invalid or points to a
            registry other than Docker Hub
    """
    raw = text.strip()
    name_part = raw.split("@", 1)[0]

    tag = DEFAULT_TAG
    last_colon = name_part.rfind(":")
    if last_colon > name_part.rfind("/"):
        name_part, tag = name_part[:last_colon], name_part[last_colon + 1:]

    components = name_part.split("/")
    if len(components) > 1 and _is_registry_host(components[0]):
        if components[0] not in DOCKER_HUB_HOSTS:
            raise ImageReferenceError(
                f"The image `{raw}` is not hosted on Docker Hub, which is the only supported registry"
            )
        components = components[1:]

    if not 1 <= len(components) <= 2 or not all(NAME_COMPONENT.match(c) for c in components):
        raise ImageReferenceError(f"The image definition `{raw}` is invalid")
    if not TAG.match(tag):
        raise ImageReferenceError(f"The tag `{tag}` of image `{raw}` is invalid")

    if len(components) == 2:
        name = ImageName(repository=components[1], namespace=components[0])
    else:
        name = ImageName(repository=components[0])

    return ImageReference(name=name, tag=tag, source=source)


def _is_registry_host(component: str) -> bool:
    return "." in component or ":" in component or component == "localhost"


# -----------------------------------------------------------------------------
# Directives
# -----------------------------------------------------------------------------


def parse_directive(line: str, marker: str = DIRECTIVE_MARKER) -> Optional[Directive]:
    """
    Parse a pattern directive comment.

    Args:
        line: A single line of a manifest
        marker: The word that marks a directive

    Returns:
        None if the line is not a directive at all, otherwise a
        (pattern, error) tuple where exactly one element is set
    """
    stripped = line.strip()
    if not stripped.startswith("#"):
        return None

    body = stripped[1:].strip()
    if body.split(" ", 1)[0] != marker:
        return None

    usage = f'expected `# {marker} --pattern "<pattern>"`'
    try:
        tokens = shlex.split(body)
    except ValueError as e:
        return None, f"Invalid directive `{stripped}`: {e}"

    args = tokens[1:]
    if len(args) == 1 and args[0].startswith("--pattern="):
        return args[0][len("--pattern="):], None
    if len(args) == 2 and args[0] == "--pattern":
        return args[1], None
    return None, f"Invalid directive `{stripped}`: {usage}"


def _directive_above(lines: List[str], index: int, marker: str) -> Directive:
    if index == 0:
        return None, None
    return parse_directive(lines[index - 1], marker) or (None, None)


# -----------------------------------------------------------------------------
# Dockerfile
# -----------------------------------------------------------------------------


def parse_dockerfile(content: str, marker: str = DIRECTIVE_MARKER) -> List[DockerfileEntry]:
    """
    Find every FROM instruction that refers to an image.

    Stages declared with 'AS' earlier in the file and the special 'scratch'
    image are not images and are skipped.

    Args:
        content: Dockerfile contents
        marker: Directive marker word

    Returns:
        Entries in file order, with line numbers starting at 1
    """
    entries = []
    stages = set()
    lines = content.splitlines()

    for index, line in enumerate(lines):
        match = FROM_LINE.match(line)
        if not match:
            continue

        image = match.group("image")
        is_stage = image.lower() in stages
        if match.group("stage"):
            stages.add(match.group("stage").lower())

        if image.lower() == "scratch" or is_stage:
            logger.debug(f"Line {index + 1}: `{image}` is not an image, skipping")
            continue

        pattern, error = _directive_above(lines, index, marker)
        entries.append(DockerfileEntry(
            image=image,
            line=index + 1,
            pattern=pattern,
            pattern_error=error,
        ))

    return entries


# -----------------------------------------------------------------------------
# Docker Compose
# -----------------------------------------------------------------------------


def _lookup(node: Dict[str, Any], path: str, default: Any = None) -> Any:
    """Read a nested key with dotted syntax, e.g. 'build.context'."""
    try:
        return dpath.get(node, path, separator=".")
    except KeyError:
        return default


def _mapping_key(line: str) -> Optional[str]:
    match = MAPPING_KEY.match(line)
    return match.group("key").strip("'\"") if match else None


def _compose_directives(content: str, marker: str) -> Dict[str, Directive]:
    """
    Map service names to the directive directly above their 'image:' line.

    The YAML is scanned as text because comments do not survive parsing.
    Service keys are the first indentation level below the top-level
    'services:' key.
    """
    directives = {}
    lines = content.splitlines()
    in_services = False
    service_indent = None
    service = None

    for index, line in enumerate(lines):
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue

        indent = len(line) - len(line.lstrip())
        if indent == 0:
            in_services = _mapping_key(line) == "services"
            service_indent = None
            service = None
            continue
        if not in_services:
            continue

        if service_indent is None:
            service_indent = indent
        if indent <= service_indent:
            service = _mapping_key(line)
            continue

        if service is not None and IMAGE_LINE.match(line):
            directive = _directive_above(lines, index, marker)
            if directive != (None, None):
                directives[service] = directive

    return directives


def parse_compose(content: str, marker: str = DIRECTIVE_MARKER) -> List[ComposeService]:
    """
    Parse the services of a Docker Compose file.

    Args:
        content: Compose file contents
        marker: Directive marker word

    Returns:
        Services in file order

    Raises:
        ManifestError: If the file is not valid YAML or has no services mapping
    """
    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ManifestError(f"Failed to parse Docker Compose file: {e}") from e

    if not isinstance(data, dict):
        raise ManifestError("The Docker Compose file seems to be invalid")

    services = _lookup(data, "services")
    if services is None:
        if "services" in data:
            raise ManifestError("The Docker Compose file seems to be invalid")
        raise ManifestError("Failed to find `services`")
    if not isinstance(services, dict):
        raise ManifestError("The Docker Compose file seems to be invalid")

    directives = _compose_directives(content, marker)
    result = []

    for name, service in services.items():
        name = str(name)
        if not isinstance(service, dict):
            result.append(ComposeService(name=name, error=f"The definition of service `{name}` is invalid"))
            continue

        build = _lookup(service, "build")
        image = _lookup(service, "image")

        if isinstance(build, str):
            result.append(ComposeService(name=name, build=BuildContext(context=build)))
        elif isinstance(build, dict) and isinstance(_lookup(service, "build.context"), str):
            result.append(ComposeService(name=name, build=BuildContext(
                context=_lookup(service, "build.context"),
                dockerfile=_lookup(service, "build.dockerfile", "Dockerfile"),
            )))
        elif isinstance(image, str):
            pattern, error = directives.get(name, (None, None))
            result.append(ComposeService(name=name, image=image, pattern=pattern, pattern_error=error))
        else:
            result.append(ComposeService(
                name=name,
                error=(
                    f"No build context was found for service `{name}` "
                    "(Only the `build` and `image` fields containing strings are supported)"
                ),
            ))

    return result
