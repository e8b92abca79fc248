"""
Release filename classification.

Storage object names encode the version, platform and kind of a release file:

    go1.16rc1.darwin-amd64.pkg          installer
    go1.4.3.darwin-amd64-osx10.8.pkg    installer (with an OS version infix)
    go1.15.linux-arm64.tar.gz           archive
    go1.15.src.tar.gz                   source
"""

import re
from dataclasses import dataclass
from typing import Pattern, Tuple

from goreleases.constants import (
    IGNORABLE_OBJECT_PATTERNS,
    KIND_ARCHIVE,
    KIND_INSTALLER,
    KIND_SOURCE,
)
from goreleases.exceptions import ClassificationError

_VERSION = r"go(\d+(?:\.\d+)?(?:\.\d+)?(?:\w[A-Za-z0-9]*)?)"
_PLATFORM = r"\.([A-Za-z0-9]+)-([A-Za-z0-9]+)(?:-osx10\.\d)?"

INSTALLER_FILE_RX = re.compile(
    _VERSION + _PLATFORM + r"((?:\..+)?(?:\.msi|\.pkg))", re.ASCII
)
ARCHIVE_FILE_RX = re.compile(_VERSION + _PLATFORM + r"(\..+)", re.ASCII)
SOURCE_FILE_RX = re.compile(_VERSION + r"(\.src\.tar\.gz.*)", re.ASCII)

# Tried in order; the first full match wins
FILENAME_PATTERNS: Tuple[Tuple[str, Pattern[str]], ...] = (
    (KIND_INSTALLER, INSTALLER_FILE_RX),
    (KIND_ARCHIVE, ARCHIVE_FILE_RX),
    (KIND_SOURCE, SOURCE_FILE_RX),
)

IGNORABLE_OBJECT_RXS = tuple(re.compile(pattern) for pattern in IGNORABLE_OBJECT_PATTERNS)


@dataclass(frozen=True)
class FilenameInfo:
    """Fields extracted from a release filename."""

    name: str
    version: str
    """Version without the leading "go"."""
    kind: str
    os: str = ""
    arch: str = ""
    suffix: str = ""


def is_ignorable(name: str) -> bool:
    """Return True for signatures, checksum sidecars and bootstrap toolchains."""
    return any(rx.search(name) for rx in IGNORABLE_OBJECT_RXS)


def classify_filename(name: str) -> FilenameInfo:
    """
    Classify a release filename as installer, archive or source.

    Raises:
        ClassificationError: If the name matches none of the known patterns.
    """
    for kind, pattern in FILENAME_PATTERNS:
        match = pattern.fullmatch(name)
        if not match:
            continue
        if kind == KIND_SOURCE:
            version, suffix = match.groups()
            return FilenameInfo(name=name, version=version, kind=kind, suffix=suffix)
        version, os_name, arch, suffix = match.groups()
        return FilenameInfo(
            name=name,
            version=version,
            kind=kind,
            os=os_name,
            arch=arch,
            suffix=suffix,
        )
    raise ClassificationError(f"no match for {name!r}", filename=name)
