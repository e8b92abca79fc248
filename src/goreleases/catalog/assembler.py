"""
Release assembly: turns storage objects into sorted, grouped releases.
"""

import functools
from typing import Callable, Collection, Dict, Iterable, List

from goreleases.log_utils import logger
from goreleases.version import GO_PREFIX, compare_version_strings, try_parse_version

from .filenames import classify_filename, is_ignorable
from .interfaces import Release, ReleaseFile, StorageObject


def _compare_strings(a: str, b: str) -> int:
    return (a > b) - (a < b)


def _compare_release_files(a: ReleaseFile, b: ReleaseFile) -> int:
    return (
        compare_version_strings(a.version, b.version)
        or _compare_strings(a.filename, b.filename)
        or _compare_strings(a.version, b.version)
    )


def _compare_releases(a: Release, b: Release) -> int:
    # Equivalent spellings ("go1.2", "go1.2.0") fall back to plain string order
    return compare_version_strings(a.version, b.version) or _compare_strings(
        a.version, b.version
    )


release_file_sort_key: Callable[[ReleaseFile], object] = functools.cmp_to_key(
    _compare_release_files
)
release_sort_key: Callable[[Release], object] = functools.cmp_to_key(_compare_releases)


def sort_release_files(
    files: Iterable[ReleaseFile], reverse: bool = False
) -> List[ReleaseFile]:
    """Sort files by version, then filename."""
    return sorted(files, key=release_file_sort_key, reverse=reverse)


def sort_releases(releases: Iterable[Release], reverse: bool = False) -> List[Release]:
    """Sort releases by version."""
    return sorted(releases, key=release_sort_key, reverse=reverse)


def is_stable(version: str) -> bool:
    """Return True if `version` is a go version without a prerelease tag."""
    parsed = try_parse_version(version)
    return parsed is not None and parsed.is_stable()


def build_release_files(
    objects: Iterable[StorageObject], skip_versions: Collection[str] = ()
) -> List[ReleaseFile]:
    """
    Convert storage objects into release files without checksums.

    Signatures, checksum sidecars and bootstrap toolchains are dropped, as are
    files whose version appears in `skip_versions`.

    Returns:
        List[ReleaseFile]: Files sorted newest version first.

    Raises:
        ClassificationError: If an object name is not a recognizable release file.
    """
    skips = frozenset(skip_versions)
    result: List[ReleaseFile] = []
    ignored = 0
    skipped = 0
    for obj in objects:
        if is_ignorable(obj.name):
            ignored += 1
            continue
        info = classify_filename(obj.name)
        version = GO_PREFIX + info.version
        if version in skips:
            skipped += 1
            continue
        result.append(
            ReleaseFile(
                filename=info.name,
                os=info.os,
                arch=info.arch,
                version=version,
                size=obj.size,
                kind=info.kind,
            )
        )
    logger.debug(
        f"Built {len(result)} release files ({ignored} ignored, {skipped} skipped)"
    )
    return sort_release_files(result, reverse=True)


def assemble(
    files: Iterable[ReleaseFile], skip_versions: Collection[str] = ()
) -> List[Release]:
    """
    Group release files into releases.

    Files of skipped versions are dropped. Each release lists its files by
    filename descending, and releases are ordered newest version first, so the
    output does not depend on the order of `files`.
    """
    skips = frozenset(skip_versions)
    grouped: Dict[str, List[ReleaseFile]] = {}
    for release_file in files:
        if release_file.version in skips:
            continue
        grouped.setdefault(release_file.version, []).append(release_file)

    releases = [
        Release(
            version=version,
            stable=is_stable(version),
            files=sort_release_files(version_files, reverse=True),
        )
        for version, version_files in grouped.items()
    ]
    return sort_releases(releases, reverse=True)
