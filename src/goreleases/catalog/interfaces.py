"""
Core data structures for the release catalog.

Release and ReleaseFile mirror the public JSON shape of the catalog:

    [{"version": "go1.16", "stable": true, "files": [
        {"filename": ..., "os": ..., "arch": ..., "version": ...,
         "sha256": ..., "size": ..., "kind": ...}]}]
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Tuple, Union

from goreleases.constants import CATALOG_JSON_INDENT

Pathish = Union[str, Path]


@dataclass(frozen=True)
class ReleaseFile:
    """A single downloadable file of a go release."""

    filename: str
    os: str = ""
    arch: str = ""
    version: str = ""
    sha256: str = ""
    size: int = 0
    kind: str = ""
    """One of "installer", "archive" or "source"."""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "filename": self.filename,
            "os": self.os,
            "arch": self.arch,
            "version": self.version,
            "sha256": self.sha256,
            "size": self.size,
            "kind": self.kind,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ReleaseFile":
        """
        Build a ReleaseFile from a decoded JSON object.

        Missing keys take their empty defaults, matching how the upstream feed
        omits sizes and checksums for some files.
        """
        return cls(
            filename=str(data.get("filename") or ""),
            os=str(data.get("os") or ""),
            arch=str(data.get("arch") or ""),
            version=str(data.get("version") or ""),
            sha256=str(data.get("sha256") or ""),
            size=int(data.get("size") or 0),
            kind=str(data.get("kind") or ""),
        )


@dataclass(frozen=True)
class Release:
    """A go release and its files. `files` is always stored as a tuple."""

    version: str
    stable: bool = False
    files: Tuple[ReleaseFile, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "files", tuple(self.files))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "stable": self.stable,
            "files": [release_file.to_dict() for release_file in self.files],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Release":
        files = data.get("files") or []
        if not isinstance(files, list):
            raise ValueError(f"release {data.get('version')!r} has invalid files")
        return cls(
            version=str(data.get("version") or ""),
            stable=bool(data.get("stable", False)),
            files=tuple(ReleaseFile.from_dict(item) for item in files),
        )


@dataclass(frozen=True)
class StorageObject:
    """An object listed in the storage bucket."""

    name: str
    size: int = 0
    etag: str = ""
    time_created: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StorageObject":
        """Build a StorageObject from a listing item; unparsable sizes become 0."""
        try:
            size = int(data.get("size") or 0)
        except (TypeError, ValueError):
            size = 0
        return cls(
            name=str(data.get("name") or ""),
            size=size,
            etag=str(data.get("etag") or ""),
            time_created=str(data.get("timeCreated") or ""),
        )


def releases_from_data(data: Any) -> List[Release]:
    """
    Convert decoded catalog JSON into Release objects.

    Raises:
        ValueError: If the data is not a list of release objects.
    """
    if not isinstance(data, list):
        raise ValueError(f"expected a list of releases, got {type(data).__name__}")
    releases: List[Release] = []
    for item in data:
        if not isinstance(item, dict):
            raise ValueError(f"expected a release object, got {type(item).__name__}")
        releases.append(Release.from_dict(item))
    return releases


def releases_to_json(releases: List[Release]) -> str:
    """Encode a catalog in its published JSON layout."""
    return json.dumps(
        [release.to_dict() for release in releases], indent=CATALOG_JSON_INDENT
    )


def releases_from_json(text: str) -> List[Release]:
    """Decode a catalog from JSON text."""
    return releases_from_data(json.loads(text))


def load_releases(path: Pathish) -> List[Release]:
    """Read a catalog JSON file."""
    with open(path, "r", encoding="utf-8") as f:
        return releases_from_json(f.read())
