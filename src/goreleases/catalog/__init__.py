"""
goreleases Catalog Subsystem

Builds the go release catalog from its two upstream sources and compares
catalog snapshots.

Core Components:
- interfaces: Release, ReleaseFile and StorageObject data structures
- upstream: storage bucket and go.dev feed clients
- filenames: release filename classification
- assembler: grouping and sorting of release files
- checksums: checksum resolution with a bounded worker pool
- conflicts: merge conflict detection between catalogs
- fetch: end-to-end catalog assembly
"""

from .assembler import assemble, build_release_files, sort_release_files, sort_releases
from .checksums import ChecksumFetcher, checksums_from_feed, fill_checksums
from .conflicts import find_conflicts
from .fetch import FetchReleasesOptions, fetch_releases
from .filenames import FilenameInfo, classify_filename, is_ignorable
from .interfaces import (
    Release,
    ReleaseFile,
    StorageObject,
    load_releases,
    releases_from_json,
    releases_to_json,
)
from .upstream import GoDevClient, StorageClient

__all__ = [
    # Interfaces
    "Release",
    "ReleaseFile",
    "StorageObject",
    "load_releases",
    "releases_from_json",
    "releases_to_json",
    # Upstream sources
    "StorageClient",
    "GoDevClient",
    # Assembly
    "FilenameInfo",
    "classify_filename",
    "is_ignorable",
    "assemble",
    "build_release_files",
    "sort_release_files",
    "sort_releases",
    "ChecksumFetcher",
    "checksums_from_feed",
    "fill_checksums",
    "FetchReleasesOptions",
    "fetch_releases",
    # Comparison
    "find_conflicts",
]
