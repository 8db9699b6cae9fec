"""
Version Pattern Module

Pure functions for compiling version patterns and matching tags against them.
This module contains no side effects - only string scanning logic.

A pattern is plain text with two markers:
    <>   a non-breaking numeric slot
    <!>  a breaking numeric slot

Every other character must appear literally in the tag. For example
``<!>.<>.<>`` matches ``1.4.12`` and extracts ``(1, 4, 12)``.
"""

from dataclasses import dataclass
from typing import Iterable, Iterator, Optional, Tuple, Union

from .exceptions import PatternSyntaxError

SLOT_MARKER = "<>"
BREAKING_SLOT_MARKER = "<!>"

ExtractedVersion = Tuple[int, ...]


@dataclass(frozen=True)
class Literal:
    """Text that must appear verbatim in the tag."""
    text: str


@dataclass(frozen=True)
class Slot:
    """A run of decimal digits captured as an integer."""
    breaking: bool = False


Segment = Union[Literal, Slot]


@dataclass(frozen=True)
class VersionPattern:
    """A compiled version pattern."""
    source: str
    segments: Tuple[Segment, ...]

    @property
    def slots(self) -> Tuple[Slot, ...]:
        return tuple(s for s in self.segments if isinstance(s, Slot))

    @property
    def slot_count(self) -> int:
        return len(self.slots)

    @property
    def breaking_flags(self) -> Tuple[bool, ...]:
        return tuple(slot.breaking for slot in self.slots)

    def match(self, tag: str) -> Optional[ExtractedVersion]:
        """Extract the version from a tag, or None if it does not match."""
        return match_tag(self, tag)

    def filter(self, tags: Iterable[str]) -> Iterator[str]:
        """Yield the tags that match this pattern, preserving order."""
        for tag in tags:
            if self.match(tag) is not None:
                yield tag

    def __str__(self) -> str:
        return self.source


def compile_pattern(text: str) -> VersionPattern:
    """
    Compile a pattern string into a VersionPattern.

    Pure function that scans the pattern once from left to right.

    Args:
        text: Pattern string, e.g. "<!>.<>.<>" or "debian-<>-beta"

    Returns:
        The compiled VersionPattern

    Raises:
        PatternSyntaxError: If a '<' does not start a valid marker or the
            pattern contains no numeric slots
    """
    segments = []
    literal = []
    i = 0

    while i < len(text):
        if text[i] != "<":
            literal.append(text[i])
            i += 1
            continue

        if text.startswith(BREAKING_SLOT_MARKER, i):
            slot, width = Slot(breaking=True), len(BREAKING_SLOT_MARKER)
        elif text.startswith(SLOT_MARKER, i):
            slot, width = Slot(breaking=False), len(SLOT_MARKER)
        else:
            raise PatternSyntaxError(
                f"Invalid marker at column {i + 1} of pattern `{text}` "
                f"(expected `{SLOT_MARKER}` or `{BREAKING_SLOT_MARKER}`)",
                pattern=text,
                position=i,
            )

        if literal:
            segments.append(Literal("".join(literal)))
            literal = []
        segments.append(slot)
        i += width

    if literal:
        segments.append(Literal("".join(literal)))

    pattern = VersionPattern(source=text, segments=tuple(segments))
    if pattern.slot_count == 0:
        raise PatternSyntaxError(
            f"Pattern `{text}` contains no `{SLOT_MARKER}` or `{BREAKING_SLOT_MARKER}` slot "
            "and can never detect an update",
            pattern=text,
        )
    return pattern


def _digit_run_end(tag: str, start: int) -> int:
    end = start
    while end < len(tag) and "0" <= tag[end] <= "9":
        end += 1
    return end


def match_tag(pattern: VersionPattern, tag: str) -> Optional[ExtractedVersion]:
    """
    Apply a compiled pattern to a tag.

    Slots consume digits greedily, so two adjacent slots never match: the
    first one takes every digit and leaves none for the second.

    Args:
        pattern: The compiled pattern
        tag: The tag to match, e.g. "2.13.3"

    Returns:
        Tuple of extracted integers in slot order, or None if the tag does
        not match the pattern
    """
    cursor = 0
    version = []

    for segment in pattern.segments:
        if isinstance(segment, Literal):
            if not tag.startswith(segment.text, cursor):
                return None
            cursor += len(segment.text)
        else:
            end = _digit_run_end(tag, cursor)
            if end == cursor:
                return None
            version.append(int(tag[cursor:end]))
            cursor = end

    # Trailing characters are not allowed
    if cursor != len(tag):
        return None

    return tuple(version)
