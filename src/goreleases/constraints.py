"""
Go Version Constraints

Translates go flavored version ranges ("1.15", "^1.2beta1", ">= 1.13 < 1.16",
"1.x") into npm style semver ranges and evaluates go versions against them.

Translation rules for each term:
- absent minor/patch numbers default to 0 until a wildcard (x, X or *) appears;
  components after a wildcard stay unconstrained, so "1.x" matches every go1
  release while "1" only matches go1 itself;
- an alphabetic suffix becomes a semver prerelease ("1.2beta1" -> "1.2.0-beta1").

Each term is checked on its own. A term without a prerelease tag rejects every
prerelease version, so ">=1.16beta1 <1.17" does not match go1.16rc1 while
">=1.16beta1" matches go1.17rc1.
"""

import re
from dataclasses import replace
from typing import Iterable, List, Optional, Set, Tuple

import semantic_version

from goreleases.exceptions import InvalidConstraintError
from goreleases.log_utils import logger
from goreleases.version import Version

WILDCARDS = "xX*"

# Only the first letter of a suffix is consumed; the rest of the tag is left in place
CONSTRAINT_TERM_RX = re.compile(
    r"(\A|[\s|])"  # start of input or a term separator
    r"([><=~^][ ><=~^]*)?"  # optional comparator
    r"(x|X|\*|\d+)"  # major
    r"(?:\.(x|X|\*|\d+))?"  # minor
    r"(?:\.(x|X|\*|\d+))?"  # patch
    r"([A-Za-z])?",  # start of a prerelease suffix
    re.ASCII,
)

PRERELEASE_TARGET_RX = re.compile(r"(\d+)\.(\d+)\.(\d+)-", re.ASCII)

HYPHEN_RANGE_SEPARATOR = " - "


def _is_wildcard(part: str) -> bool:
    return any(char in WILDCARDS for char in part)


def _translate_term(match: "re.Match[str]") -> str:
    separator, operator, major, minor, patch, suffix = match.groups()
    operator = (operator or "").replace(" ", "")
    minor = minor or ""
    patch = patch or ""

    stop_zeros = _is_wildcard(major)
    if not stop_zeros:
        minor = minor or "0"
        stop_zeros = _is_wildcard(minor)
    if not stop_zeros:
        patch = patch or "0"

    result = separator + operator + major
    if minor:
        result += "." + minor
    if patch:
        result += "." + patch
    if suffix:
        result += "-" + suffix
    return result


def go_range_to_semver(go_range: str) -> str:
    """
    Rewrite a go version range as a semver range.

    Text that does not look like a version term is left as is so that the
    semver parser can reject it.

    Example:
        >>> go_range_to_semver("1.2beta1")
        '1.2.0-beta1'
    """
    translated = CONSTRAINT_TERM_RX.sub(_translate_term, go_range)
    # The npm range grammar splits comparators on single spaces
    return " ".join(translated.split())


class _Term:
    """A single comparator of a translated range."""

    def __init__(self, text: str):
        self.text = text
        self.spec = semantic_version.NpmSpec(text)
        self.prerelease_targets: Set[Tuple[int, int, int]] = {
            (int(major), int(minor), int(patch))
            for major, minor, patch in PRERELEASE_TARGET_RX.findall(text)
        }

    def match(self, version: Version) -> bool:
        if not version.prerelease:
            return self.spec.match(version.to_semver())
        if not self.prerelease_targets:
            return False
        if (version.major, version.minor, version.patch) in self.prerelease_targets:
            return self.spec.match(version.to_semver())
        # npm only admits prereleases of the target's own release; for any other
        # release the tag cannot move it across the bound
        return self.spec.match(replace(version, prerelease="").to_semver())


def _split_range(semver_range: str) -> List[List[_Term]]:
    """Split a semver range into OR groups of AND-combined terms."""
    groups = []
    for group in semver_range.split("||"):
        group = group.strip()
        if HYPHEN_RANGE_SEPARATOR in group:
            texts = [group]
        else:
            texts = group.split() or ["*"]
        groups.append([_Term(text) for text in texts])
    return groups


class Constraints:
    """One or more AND-combined constraints a go version can be checked against."""

    def __init__(self, expression: str, semver_range: str, groups: List[List[_Term]]):
        self.expression = expression
        self.semver_range = semver_range
        self._groups = groups

    @classmethod
    def parse(cls, expression: str) -> "Constraints":
        """
        Parse a go version constraint expression.

        Raises:
            InvalidConstraintError: If the expression contains no valid terms.
        """
        if not isinstance(expression, str) or not expression.strip():
            raise InvalidConstraintError("invalid go constraint", value=expression)
        semver_range = go_range_to_semver(expression)
        try:
            semantic_version.NpmSpec(semver_range)
            groups = _split_range(semver_range)
        except ValueError as exc:
            raise InvalidConstraintError(
                "invalid go constraint", value=expression, details=str(exc)
            ) from exc
        logger.debug(f"Constraint {expression!r} translated to {semver_range!r}")
        return cls(expression, semver_range, groups)

    def check(self, version: Version) -> bool:
        """
        Return True if `version` satisfies every term of the constraint.

        A prerelease version only satisfies terms that carry a prerelease tag
        themselves.
        """
        return any(
            all(term.match(version) for term in group) for group in self._groups
        )

    def __contains__(self, version: Version) -> bool:
        return self.check(version)

    def filter_versions(self, versions: Iterable[Version]) -> List[Version]:
        """Return the versions that satisfy the constraint, in their original order."""
        return [version for version in versions if self.check(version)]

    def select(self, versions: Iterable[Version], max_results: int = 0) -> List[Version]:
        """
        Return satisfying versions newest first.

        Parameters:
            versions: Candidate versions.
            max_results (int): Maximum number of versions to return; 0 means no limit.
        """
        candidates = sorted(self.filter_versions(versions), reverse=True)
        if 0 < max_results < len(candidates):
            candidates = candidates[:max_results]
        return candidates

    def best_match(self, versions: Iterable[Version]) -> Optional[Version]:
        """Return the greatest version satisfying the constraint, or None."""
        result: Optional[Version] = None
        for version in versions:
            if not self.check(version):
                continue
            if result is None or version > result:
                result = version
        return result

    def __str__(self) -> str:
        return self.semver_range

    def __repr__(self) -> str:
        return f"Constraints({self.expression!r})"


def parse_constraints(expression: str) -> Constraints:
    """Parse `expression` into Constraints, raising InvalidConstraintError on failure."""
    return Constraints.parse(expression)
