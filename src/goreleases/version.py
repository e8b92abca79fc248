"""
Go Version Model

This module parses go release versions ("go1.16", "go1.16rc1", "1.15.3") into
comparable values. Versions map onto semantic versions so that the constraint
engine can evaluate ranges against them:

    go1            -> 1.0.0
    go1.16rc1      -> 1.16.0-rc1
    go1.15.3       -> 1.15.3
"""

import re
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

import semantic_version

from goreleases.exceptions import InvalidVersionError

GO_PREFIX = "go"

VERSION_RX = re.compile(
    r"go(\d+)(?:\.(\d+))?(?:\.(\d+))?([A-Za-z0-9]+)?",
    re.ASCII,
)


@dataclass(frozen=True)
class Version:
    """A single go version."""

    major: int
    minor: int = 0
    patch: int = 0
    prerelease: str = ""
    original: str = field(default="", compare=False)
    """The string the version was parsed from, kept for display only."""

    @classmethod
    def parse(cls, raw: str) -> "Version":
        """
        Parse a go version string.

        A leading "go" is optional. Missing minor and patch numbers are stored as 0
        and any alphanumeric suffix directly after the last number becomes the
        prerelease tag.

        Raises:
            InvalidVersionError: If `raw` is not a go version.
        """
        if not isinstance(raw, str):
            raise InvalidVersionError("invalid go version", value=repr(raw))
        candidate = raw if raw.startswith(GO_PREFIX) else GO_PREFIX + raw
        match = VERSION_RX.fullmatch(candidate)
        if not match:
            raise InvalidVersionError("invalid go version", value=raw, details=raw)

        major, minor, patch, prerelease = match.groups()
        version = cls(
            major=int(major),
            minor=int(minor or 0),
            patch=int(patch or 0),
            prerelease=prerelease or "",
            original=raw,
        )
        # Reject what semver would reject (leading zeros and the like)
        try:
            semantic_version.Version(_semver_string(major, minor, patch, prerelease))
        except ValueError as exc:
            raise InvalidVersionError(
                "invalid go version", value=raw, details=str(exc)
            ) from exc
        return version

    def _key(self) -> Tuple[int, int, int, bool, str]:
        # A stable version sorts after any prerelease of the same number
        return (
            self.major,
            self.minor,
            self.patch,
            self.prerelease == "",
            self.prerelease,
        )

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._key() < other._key()

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._key() <= other._key()

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._key() > other._key()

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._key() >= other._key()

    def less_than(self, other: "Version") -> bool:
        """Return True if this version sorts before `other`."""
        return self < other

    def greater_than(self, other: "Version") -> bool:
        """Return True if this version sorts after `other`."""
        return self > other

    def equal(self, other: "Version") -> bool:
        """Return True if both versions have the same numbers and prerelease."""
        return self == other

    def is_stable(self) -> bool:
        """Return True if the version has no prerelease tag."""
        return self.prerelease == ""

    def to_semver(self) -> semantic_version.Version:
        """Return the semantic version equivalent used for range checks."""
        return semantic_version.Version(
            major=self.major,
            minor=self.minor,
            patch=self.patch,
            prerelease=(self.prerelease,) if self.prerelease else (),
        )

    def __str__(self) -> str:
        if self.patch != 0:
            return f"go{self.major}.{self.minor}.{self.patch}{self.prerelease}"
        if self.minor != 0:
            return f"go{self.major}.{self.minor}{self.prerelease}"
        return f"go{self.major}{self.prerelease}"


def _semver_string(
    major: str, minor: Optional[str], patch: Optional[str], prerelease: Optional[str]
) -> str:
    result = f"{major}.{minor or 0}.{patch or 0}"
    if prerelease:
        result += f"-{prerelease}"
    return result


def parse_version(raw: str) -> Version:
    """Parse `raw` into a Version, raising InvalidVersionError when it is not one."""
    return Version.parse(raw)


def try_parse_version(raw: Optional[str]) -> Optional[Version]:
    """
    Parse `raw` into a Version, returning None when it is not a go version.

    Intended for callers that have explicitly chosen to skip invalid input.
    """
    if raw is None:
        return None
    try:
        return Version.parse(raw)
    except InvalidVersionError:
        return None


def sort_versions(versions: Iterable[Version], reverse: bool = False) -> List[Version]:
    """Return `versions` sorted oldest first, or newest first when `reverse` is set."""
    return sorted(versions, reverse=reverse)


def compare_version_strings(a: str, b: str) -> int:
    """
    Compare two version strings.

    Strings that are not go versions sort before every valid version and compare
    equal to each other.

    Returns:
        int: -1 if `a` sorts before `b`, 1 if after, 0 otherwise.
    """
    ver_a = try_parse_version(a)
    ver_b = try_parse_version(b)
    if ver_a is None and ver_b is None:
        return 0
    if ver_a is None:
        return -1
    if ver_b is None:
        return 1
    if ver_a < ver_b:
        return -1
    if ver_a > ver_b:
        return 1
    return 0
