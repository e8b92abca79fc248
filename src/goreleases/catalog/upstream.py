"""
Upstream Release Sources

Read-only clients for the two places go release data comes from:

- StorageClient: the storage bucket holding every file ever published,
  including prereleases that go.dev no longer lists.
- GoDevClient: the go.dev download feed, used as a table of trusted checksums.

Neither client retries. Retry policy, if any, is configured on the session by
the caller (see goreleases.utils.create_session).
"""

from typing import Any, Dict, List, Optional

import requests  # type: ignore[import-untyped]

from goreleases.constants import (
    DEFAULT_REQUEST_TIMEOUT,
    GO_DEV_RELEASES_URL,
    HTTP_STATUS_OK,
    STORAGE_API_BASE,
    STORAGE_BUCKET,
    STORAGE_PREFIX,
)
from goreleases.exceptions import UpstreamError
from goreleases.log_utils import logger
from goreleases.utils import create_session, http_get

from .interfaces import Release, StorageObject, releases_from_data


def _get_json(
    session: requests.Session,
    url: str,
    params: Optional[Dict[str, Any]],
    timeout: float,
) -> Any:
    """
    GET `url` and decode the JSON body.

    Raises:
        UpstreamError: On transport errors, non-200 responses and invalid JSON.
    """
    try:
        response = http_get(session, url, params=params, timeout=timeout)
    except requests.RequestException as exc:
        raise UpstreamError(
            f"request to {url} failed", url=url, details=str(exc)
        ) from exc
    try:
        if response.status_code != HTTP_STATUS_OK:
            raise UpstreamError(
                f"request to {url} was not OK",
                url=url,
                status_code=response.status_code,
                details=f"HTTP {response.status_code}",
            )
        try:
            return response.json()
        except ValueError as exc:
            raise UpstreamError(
                f"invalid JSON from {url}", url=url, details=str(exc)
            ) from exc
    finally:
        response.close()


class StorageClient:
    """
    Client for the storage bucket that holds go release files.

    Parameters:
        session: Session used for all requests; a new one is created if omitted.
        base_url: Storage API base URL.
        bucket: Bucket name.
        prefix: Object name prefix to list.
        timeout: Per-request timeout in seconds.
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        base_url: str = STORAGE_API_BASE,
        bucket: str = STORAGE_BUCKET,
        prefix: str = STORAGE_PREFIX,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
    ):
        self.session = session if session is not None else create_session()
        self.base_url = base_url.rstrip("/")
        self.bucket = bucket
        self.prefix = prefix
        self.timeout = timeout

    @property
    def listing_url(self) -> str:
        return f"{self.base_url}/storage/v1/b/{self.bucket}/o"

    def object_url(self, object_name: str) -> str:
        return f"{self.base_url}/{self.bucket}/{object_name}"

    def fetch_storage_objects(self) -> List[StorageObject]:
        """
        List every object under the configured prefix.

        Pages are requested until the listing stops returning a nextPageToken.
        Objects are returned in the order the listing produced them.

        Raises:
            UpstreamError: If any page cannot be fetched or decoded.
        """
        objects: List[StorageObject] = []
        token = ""
        pages = 0
        while True:
            page = _get_json(
                self.session,
                self.listing_url,
                {"prefix": self.prefix, "pageToken": token},
                self.timeout,
            )
            if not isinstance(page, dict):
                raise UpstreamError(
                    "unexpected storage listing page",
                    url=self.listing_url,
                    details=f"expected an object, got {type(page).__name__}",
                )
            pages += 1
            items = page.get("items") or []
            objects.extend(
                StorageObject.from_dict(item) for item in items if isinstance(item, dict)
            )
            token = page.get("nextPageToken") or ""
            if not token:
                break
        logger.debug(f"Listed {len(objects)} storage objects in {pages} page(s)")
        return objects

    def get_object_content(self, object_name: str) -> requests.Response:
        """
        GET the raw content of a single object.

        The response is returned as is so callers can interpret the status code.

        Raises:
            requests.RequestException: For network or request errors.
        """
        return http_get(self.session, self.object_url(object_name), timeout=self.timeout)


class GoDevClient:
    """Client for the go.dev release feed."""

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        url: str = GO_DEV_RELEASES_URL,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
    ):
        self.session = session if session is not None else create_session()
        self.url = url
        self.timeout = timeout

    def fetch_releases(self) -> List[Release]:
        """
        Fetch the published release list, checksums included.

        Raises:
            UpstreamError: If the feed cannot be fetched or is not a release list.
        """
        data = _get_json(self.session, self.url, None, self.timeout)
        try:
            releases = releases_from_data(data)
        except (TypeError, ValueError) as exc:
            raise UpstreamError(
                "unexpected release feed content", url=self.url, details=str(exc)
            ) from exc
        logger.debug(f"Fetched {len(releases)} releases from {self.url}")
        return releases
