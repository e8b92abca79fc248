"""
HTTP helpers shared by the upstream clients.
"""

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as package_version
from typing import Any, Dict, Optional

import requests  # type: ignore[import-untyped]
from requests.adapters import HTTPAdapter  # type: ignore[import-untyped]
from urllib3.util.retry import Retry  # type: ignore[import-untyped]

from goreleases.constants import (
    APP_NAME,
    DEFAULT_BACKOFF_FACTOR,
    DEFAULT_CONNECT_RETRIES,
    DEFAULT_REQUEST_TIMEOUT,
    RETRY_STATUS_FORCELIST,
)
from goreleases.log_utils import logger

_USER_AGENT_CACHE: Optional[str] = None


def get_user_agent() -> str:
    """
    Return the User-Agent string sent with every request.

    The value is "goreleases/<version>", falling back to "goreleases/unknown" when
    the package metadata is not available (for example when running from a checkout).
    """
    global _USER_AGENT_CACHE
    if _USER_AGENT_CACHE is None:
        try:
            app_version = package_version(APP_NAME)
        except PackageNotFoundError:
            app_version = "unknown"
        _USER_AGENT_CACHE = f"{APP_NAME}/{app_version}"
    return _USER_AGENT_CACHE


def create_session(connect_retries: int = DEFAULT_CONNECT_RETRIES) -> requests.Session:
    """
    Create a requests Session for talking to the upstream sources.

    The core never retries on its own. A caller that wants retries passes a
    positive `connect_retries`, which mounts a urllib3 Retry policy on the session.

    Parameters:
        connect_retries (int): Number of retries for connection errors and
            transient statuses; 0 disables retries.
    """
    session = requests.Session()
    session.headers.update({"User-Agent": get_user_agent()})
    if connect_retries > 0:
        retry_strategy = Retry(
            total=connect_retries,
            connect=connect_retries,
            read=connect_retries,
            status=connect_retries,
            backoff_factor=DEFAULT_BACKOFF_FACTOR,
            status_forcelist=list(RETRY_STATUS_FORCELIST),
            allowed_methods=frozenset({"GET", "HEAD"}),
            raise_on_status=False,
            respect_retry_after_header=True,
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        session.mount("https://", adapter)
        session.mount("http://", adapter)
        logger.debug(f"HTTP session created with {connect_retries} retries")
    return session


def http_get(
    session: requests.Session,
    url: str,
    params: Optional[Dict[str, Any]] = None,
    timeout: Optional[float] = None,
) -> requests.Response:
    """
    Perform a GET request and log the outcome at DEBUG level.

    Raises:
        requests.RequestException: For network or request errors.
    """
    logger.debug(f"GET {url} params={params}")
    response = session.get(
        url,
        params=params,
        timeout=timeout if timeout is not None else DEFAULT_REQUEST_TIMEOUT,
    )
    logger.debug(f"Received HTTP response status code: {response.status_code} for URL: {url}")
    return response
