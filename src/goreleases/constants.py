"""
Constants and configuration values for goreleases.

This module contains all hardcoded values, URLs, timeouts, and other constants
used throughout the application.
"""

# Upstream endpoints
STORAGE_API_BASE = "https://storage.googleapis.com"
STORAGE_BUCKET = "golang"
STORAGE_PREFIX = "go1"
GO_DEV_RELEASES_URL = "https://go.dev/dl/?mode=json&include=all"

# Network timeouts (in seconds)
DEFAULT_REQUEST_TIMEOUT = 30

# Retry policy belongs to the caller; the core performs no retries by default
DEFAULT_CONNECT_RETRIES = 0
DEFAULT_BACKOFF_FACTOR = 0.3
RETRY_STATUS_FORCELIST = (408, 429, 500, 502, 503, 504)

# Concurrent operations limits
MAX_CHECKSUM_WORKERS = 160

# HTTP status codes with special meaning
HTTP_STATUS_OK = 200
HTTP_STATUS_NOT_FOUND = 404

# Release file kinds
KIND_INSTALLER = "installer"
KIND_ARCHIVE = "archive"
KIND_SOURCE = "source"

# Storage objects that are never release files
IGNORABLE_OBJECT_PATTERNS = (
    r"\.asc\Z",  # signatures
    r"\.sha256\Z",  # checksum sidecars
    r"-bootstrap-",  # bootstrap toolchains
)

CHECKSUM_SUFFIX = ".sha256"

# go1.7.2 was retracted after publication
DEFAULT_SKIP_VERSIONS = ("go1.7.2",)

# Catalog JSON is written with a single-space indent
CATALOG_JSON_INDENT = 1

# Logging configuration
LOGGER_NAME = "goreleases"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
INFO_LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"
DEBUG_LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s: %(message)s"
LOG_FILE_NAME = "goreleases.log"
LOG_FILE_MAX_BYTES = 10 * 1024 * 1024  # 10 MB
LOG_FILE_BACKUP_COUNT = 5

# Environment variable names
LOG_LEVEL_ENV_VAR = "GORELEASES_LOG_LEVEL"
CONFIG_ENV_VAR = "GORELEASES_CONFIG"

# Configuration file names
APP_NAME = "goreleases"
CONFIG_FILE_NAME = "goreleases.yaml"
