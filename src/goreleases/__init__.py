"""goreleases - a complete, comparable catalog of go releases."""

from goreleases.constraints import Constraints, parse_constraints
from goreleases.version import Version, parse_version, try_parse_version

__all__ = [
    "Constraints",
    "Version",
    "parse_constraints",
    "parse_version",
    "try_parse_version",
]
