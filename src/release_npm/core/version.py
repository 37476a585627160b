"""Semantic version model.

Versions are plain ``MAJOR.MINOR.PATCH`` triples of non-negative integers.
Pre-release and build metadata are not supported: npm packages released by
this tool are always stable versions.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum, IntEnum

from release_npm.exceptions import InvalidVersionFormat

_VERSION_RE = re.compile(r"^(\d+)\.(\d+)\.(\d+)$", re.ASCII)


class BumpKind(str, Enum):
    """Kind of version increment."""

    PATCH = "patch"
    MINOR = "minor"
    MAJOR = "major"

    def __str__(self) -> str:
        return self.value


class Ordering(IntEnum):
    """Result of comparing two versions."""

    LESS = -1
    EQUAL = 0
    GREATER = 1


@dataclass(frozen=True, order=True, slots=True)
class SemanticVersion:
    """An immutable MAJOR.MINOR.PATCH version.

    Field order drives the generated comparison methods, so versions sort
    by major, then minor, then patch.

    Example:
        >>> v = SemanticVersion.parse("1.2.3")
        >>> v.bump(BumpKind.MINOR)
        SemanticVersion(major=1, minor=3, patch=0)
    """

    major: int
    minor: int
    patch: int

    def __post_init__(self) -> None:
        for name in ("major", "minor", "patch"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                raise InvalidVersionFormat(f"{self.major}.{self.minor}.{self.patch}")

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"

    @classmethod
    def parse(cls, text: str) -> SemanticVersion:
        """Parse a version string.

        Args:
            text: Version such as ``"1.4.2"``

        Returns:
            Parsed SemanticVersion

        Raises:
            InvalidVersionFormat: If text is not exactly three dot-separated
                non-negative integers
        """
        match = _VERSION_RE.match(text.strip()) if isinstance(text, str) else None
        if match is None:
            raise InvalidVersionFormat(str(text))
        return cls(int(match.group(1)), int(match.group(2)), int(match.group(3)))

    def bump(self, kind: BumpKind) -> SemanticVersion:
        """Return the next version for the given bump kind."""
        kind = BumpKind(kind)
        if kind is BumpKind.MAJOR:
            return SemanticVersion(self.major + 1, 0, 0)
        if kind is BumpKind.MINOR:
            return SemanticVersion(self.major, self.minor + 1, 0)
        if kind is BumpKind.PATCH:
            return SemanticVersion(self.major, self.minor, self.patch + 1)
        raise ValueError(f"Unknown bump kind: {kind!r}")


def parse_version(text: str) -> SemanticVersion:
    """Parse a version string into a SemanticVersion."""
    return SemanticVersion.parse(text)


def compare(a: SemanticVersion, b: SemanticVersion) -> Ordering:
    """Compare two versions."""
    if a < b:
        return Ordering.LESS
    if a > b:
        return Ordering.GREATER
    return Ordering.EQUAL


def bump(version: SemanticVersion, kind: BumpKind) -> SemanticVersion:
    """Return ``version`` incremented by ``kind``."""
    return version.bump(BumpKind(kind))
