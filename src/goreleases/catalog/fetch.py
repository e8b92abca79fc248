"""
Release catalog assembly from the storage bucket and the go.dev feed.
"""

from dataclasses import dataclass
from typing import FrozenSet, List, Optional

import requests  # type: ignore[import-untyped]

from goreleases.constants import (
    DEFAULT_REQUEST_TIMEOUT,
    GO_DEV_RELEASES_URL,
    MAX_CHECKSUM_WORKERS,
    STORAGE_API_BASE,
    STORAGE_BUCKET,
    STORAGE_PREFIX,
)
from goreleases.exceptions import ChecksumFetchError, ClassificationError, UpstreamError
from goreleases.log_utils import logger
from goreleases.utils import create_session

from .assembler import assemble, build_release_files
from .checksums import fill_checksums
from .interfaces import Release
from .upstream import GoDevClient, StorageClient


@dataclass
class FetchReleasesOptions:
    """Options for fetch_releases."""

    session: Optional[requests.Session] = None
    """Session used for every request; a plain session without retries if omitted."""

    skip_versions: FrozenSet[str] = frozenset()
    """Go versions to leave out (like go1.7.2, which was retracted)."""

    storage_base_url: str = STORAGE_API_BASE
    bucket: str = STORAGE_BUCKET
    prefix: str = STORAGE_PREFIX
    go_dev_url: str = GO_DEV_RELEASES_URL
    max_workers: int = MAX_CHECKSUM_WORKERS
    timeout: float = DEFAULT_REQUEST_TIMEOUT


def fetch_releases(options: Optional[FetchReleasesOptions] = None) -> List[Release]:
    """
    Build the full go release catalog.

    Every file in the storage bucket becomes part of a release, including
    prereleases that go.dev no longer lists. Checksums come from the go.dev feed
    where available and from storage sidecars otherwise.

    Returns:
        List[Release]: Releases newest first, each with its files sorted.

    Raises:
        UpstreamError: If either upstream cannot be read.
        ClassificationError: If the bucket holds a file with an unknown name.
        ChecksumFetchError: If a checksum sidecar cannot be fetched.
    """
    if options is None:
        options = FetchReleasesOptions()
    session = options.session if options.session is not None else create_session()

    storage_client = StorageClient(
        session=session,
        base_url=options.storage_base_url,
        bucket=options.bucket,
        prefix=options.prefix,
        timeout=options.timeout,
    )
    go_dev_client = GoDevClient(
        session=session, url=options.go_dev_url, timeout=options.timeout
    )

    try:
        objects = storage_client.fetch_storage_objects()
    except UpstreamError as exc:
        raise UpstreamError(
            "error retrieving storage objects",
            url=exc.url,
            status_code=exc.status_code,
            details=str(exc),
        ) from exc

    try:
        files = build_release_files(objects, options.skip_versions)
    except ClassificationError as exc:
        raise ClassificationError(
            "error building release files", filename=exc.filename, details=str(exc)
        ) from exc

    try:
        files = fill_checksums(
            files, go_dev_client, storage_client, max_workers=options.max_workers
        )
    except ChecksumFetchError as exc:
        raise ChecksumFetchError(
            "error getting shas",
            filename=exc.filename,
            url=exc.url,
            status_code=exc.status_code,
            details=str(exc),
        ) from exc
    except UpstreamError as exc:
        raise UpstreamError(
            "error getting shas",
            url=exc.url,
            status_code=exc.status_code,
            details=str(exc),
        ) from exc

    releases = assemble(files)
    logger.info(
        f"Assembled {len(releases)} releases from {len(files)} files "
        f"({sum(1 for release in releases if release.stable)} stable)"
    )
    return releases
