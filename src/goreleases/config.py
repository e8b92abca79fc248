"""
Configuration loading for goreleases.

Configuration lives in a YAML file (goreleases.yaml) in the platform config
directory, or in the file named by the GORELEASES_CONFIG environment variable.
Keys are uppercase, as in:

    SKIP_VERSIONS:
      - go1.7.2
    MAX_CHECKSUM_WORKERS: 160
    REQUEST_TIMEOUT: 30
    CONNECT_RETRIES: 0
"""

import os
from typing import Any, Dict, List, Optional

import platformdirs
import yaml

from goreleases.catalog.fetch import FetchReleasesOptions
from goreleases.constants import (
    APP_NAME,
    CONFIG_ENV_VAR,
    CONFIG_FILE_NAME,
    DEFAULT_CONNECT_RETRIES,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_SKIP_VERSIONS,
    GO_DEV_RELEASES_URL,
    MAX_CHECKSUM_WORKERS,
    STORAGE_API_BASE,
    STORAGE_BUCKET,
    STORAGE_PREFIX,
)
from goreleases.exceptions import ConfigurationError
from goreleases.log_utils import logger
from goreleases.utils import create_session

CONFIG_DIR = platformdirs.user_config_dir(APP_NAME)
CONFIG_FILE = os.path.join(CONFIG_DIR, CONFIG_FILE_NAME)

DEFAULT_CONFIG: Dict[str, Any] = {
    "SKIP_VERSIONS": list(DEFAULT_SKIP_VERSIONS),
    "MAX_CHECKSUM_WORKERS": MAX_CHECKSUM_WORKERS,
    "REQUEST_TIMEOUT": DEFAULT_REQUEST_TIMEOUT,
    "CONNECT_RETRIES": DEFAULT_CONNECT_RETRIES,
    "STORAGE_BASE_URL": STORAGE_API_BASE,
    "STORAGE_BUCKET": STORAGE_BUCKET,
    "STORAGE_PREFIX": STORAGE_PREFIX,
    "GO_DEV_URL": GO_DEV_RELEASES_URL,
    "LOG_LEVEL": None,
}


def get_config_path(path: Optional[str] = None) -> str:
    """Return the config file to use: `path`, then $GORELEASES_CONFIG, then CONFIG_FILE."""
    if path:
        return path
    return os.environ.get(CONFIG_ENV_VAR) or CONFIG_FILE


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load the configuration, filling in defaults for missing keys.

    A missing file is not an error; the defaults are returned.

    Raises:
        ConfigurationError: If the file cannot be read or is not a YAML mapping.
    """
    config = dict(DEFAULT_CONFIG)
    config_path = get_config_path(path)
    if not os.path.exists(config_path):
        logger.debug(f"No configuration file at {config_path}; using defaults")
        return config

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            loaded = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigurationError(
            f"Failed to load configuration from {config_path}", details=str(exc)
        ) from exc

    if loaded is None:
        return config
    if not isinstance(loaded, dict):
        raise ConfigurationError(
            f"Configuration in {config_path} must be a mapping",
            details=f"got {type(loaded).__name__}",
        )
    config.update(loaded)
    logger.debug(f"Loaded configuration from {config_path}")
    return config


def _get_string_list(config: Dict[str, Any], key: str) -> List[str]:
    """
    Extract a list of strings from the given configuration key.

    Returns an empty list for missing or falsy values, each item stringified for
    lists, and a single-element list otherwise.
    """
    value = config.get(key)
    if not value:
        return []
    if isinstance(value, list):
        return [str(item) for item in value]
    return [str(value)]


def _get_int(config: Dict[str, Any], key: str, minimum: int = 0) -> int:
    value = config.get(key, DEFAULT_CONFIG.get(key))
    try:
        result = int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(
            f"Invalid value for {key}", details=f"{value!r} is not an integer"
        ) from exc
    if result < minimum:
        raise ConfigurationError(
            f"Invalid value for {key}", details=f"must be at least {minimum}"
        )
    return result


def fetch_options_from_config(config: Dict[str, Any]) -> FetchReleasesOptions:
    """
    Build FetchReleasesOptions from a loaded configuration.

    Raises:
        ConfigurationError: If a numeric setting is not a valid integer.
    """
    return FetchReleasesOptions(
        session=create_session(_get_int(config, "CONNECT_RETRIES")),
        skip_versions=frozenset(_get_string_list(config, "SKIP_VERSIONS")),
        storage_base_url=str(config.get("STORAGE_BASE_URL") or STORAGE_API_BASE),
        bucket=str(config.get("STORAGE_BUCKET") or STORAGE_BUCKET),
        prefix=str(config.get("STORAGE_PREFIX") or STORAGE_PREFIX),
        go_dev_url=str(config.get("GO_DEV_URL") or GO_DEV_RELEASES_URL),
        max_workers=_get_int(config, "MAX_CHECKSUM_WORKERS", minimum=1),
        timeout=_get_int(config, "REQUEST_TIMEOUT", minimum=1),
    )
