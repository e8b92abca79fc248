"""
Checksum resolution for release files.

Checksums come from two places, in order:

1. the go.dev release feed, which already lists sha256 values for most files;
2. the "<filename>.sha256" sidecar objects in the storage bucket, fetched
   concurrently for whatever the feed did not cover.

A 404 for a sidecar means the file has no published checksum and resolves to an
empty string. Any other failure aborts the whole operation.
"""

import threading
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from dataclasses import replace
from typing import Dict, Iterable, List, Optional, Sequence

import requests  # type: ignore[import-untyped]

from goreleases.constants import (
    CHECKSUM_SUFFIX,
    HTTP_STATUS_NOT_FOUND,
    HTTP_STATUS_OK,
    MAX_CHECKSUM_WORKERS,
)
from goreleases.exceptions import ChecksumFetchError
from goreleases.log_utils import logger

from .interfaces import Release, ReleaseFile
from .upstream import GoDevClient, StorageClient


def checksums_from_feed(releases: Iterable[Release]) -> Dict[str, str]:
    """Build a filename -> sha256 table from feed releases, skipping empty checksums."""
    table: Dict[str, str] = {}
    for release in releases:
        for release_file in release.files:
            if not release_file.sha256:
                continue
            table[release_file.filename] = release_file.sha256
    return table


def apply_feed_checksums(
    files: Sequence[ReleaseFile], table: Dict[str, str]
) -> List[ReleaseFile]:
    """Return `files` with missing checksums filled in from `table` where possible."""
    result: List[ReleaseFile] = []
    for release_file in files:
        if not release_file.sha256 and release_file.filename in table:
            release_file = replace(release_file, sha256=table[release_file.filename])
        result.append(release_file)
    return result


class ChecksumFetcher:
    """
    Fetches checksum sidecars from storage with a fixed number of workers.

    On the first hard failure no further requests are started. Requests already
    in flight are allowed to finish, then the failure is raised.
    """

    def __init__(
        self, storage_client: StorageClient, max_workers: int = MAX_CHECKSUM_WORKERS
    ):
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self.storage_client = storage_client
        self.max_workers = max_workers

    def fetch_checksum(self, filename: str) -> str:
        """
        Fetch the published checksum for one release file.

        Returns:
            str: The hex digest, or "" when storage has no sidecar for the file.

        Raises:
            ChecksumFetchError: On transport errors or unexpected status codes.
        """
        object_name = filename + CHECKSUM_SUFFIX
        url = self.storage_client.object_url(object_name)
        try:
            response = self.storage_client.get_object_content(object_name)
        except requests.RequestException as exc:
            raise ChecksumFetchError(
                f"could not fetch checksum for {filename}",
                filename=filename,
                url=url,
                details=str(exc),
            ) from exc
        try:
            if response.status_code == HTTP_STATUS_NOT_FOUND:
                logger.debug(f"No checksum published for {filename}")
                return ""
            if response.status_code != HTTP_STATUS_OK:
                raise ChecksumFetchError(
                    f"could not fetch checksum for {filename}",
                    filename=filename,
                    url=url,
                    status_code=response.status_code,
                    details=f"not OK: HTTP {response.status_code}",
                )
            return response.text.strip()
        finally:
            response.close()

    def _fetch_unless_cancelled(
        self, filename: str, cancelled: threading.Event
    ) -> Optional[str]:
        if cancelled.is_set():
            return None
        return self.fetch_checksum(filename)

    def fetch_missing(self, files: Sequence[ReleaseFile]) -> List[ReleaseFile]:
        """
        Fill in checksums for every file that does not have one yet.

        Files that already carry a checksum are never requested. The returned list
        keeps the order of `files`.

        Raises:
            ChecksumFetchError: The first failure reported by any worker. Any other
                exception raised by a worker is re-raised the same way.
        """
        missing = [index for index, item in enumerate(files) if not item.sha256]
        if not missing:
            return list(files)

        workers = min(self.max_workers, len(missing))
        logger.debug(
            f"Fetching {len(missing)} checksums from storage using {workers} worker(s)"
        )

        cancelled = threading.Event()
        first_error: Optional[Exception] = None
        results: Dict[int, str] = {}

        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures: Dict[Future, int] = {
                executor.submit(
                    self._fetch_unless_cancelled, files[index].filename, cancelled
                ): index
                for index in missing
            }
            for future in as_completed(futures):
                if future.cancelled():
                    continue
                try:
                    checksum = future.result()
                except Exception as exc:
                    if first_error is None:
                        first_error = exc
                        cancelled.set()
                        for pending in futures:
                            pending.cancel()
                        logger.debug(f"Cancelling checksum fetches after: {exc}")
                    continue
                if checksum is not None:
                    results[futures[future]] = checksum

        if first_error is not None:
            raise first_error

        resolved = list(files)
        for index, checksum in results.items():
            resolved[index] = replace(resolved[index], sha256=checksum)
        return resolved


def fill_checksums(
    files: Sequence[ReleaseFile],
    go_dev_client: GoDevClient,
    storage_client: StorageClient,
    max_workers: int = MAX_CHECKSUM_WORKERS,
) -> List[ReleaseFile]:
    """
    Resolve checksums from the go.dev feed first, then from storage sidecars.

    Raises:
        UpstreamError: If the feed cannot be fetched.
        ChecksumFetchError: If a sidecar fetch fails.
    """
    table = checksums_from_feed(go_dev_client.fetch_releases())
    with_feed = apply_feed_checksums(files, table)
    from_feed = sum(
        1 for before, after in zip(files, with_feed) if before.sha256 != after.sha256
    )
    logger.debug(f"Resolved {from_feed} checksums from the release feed")
    return ChecksumFetcher(storage_client, max_workers=max_workers).fetch_missing(
        with_feed
    )
