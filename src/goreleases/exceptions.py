"""
Custom exceptions for goreleases.

This module defines domain-specific exceptions that provide better error
categorization and more informative error messages for users and developers.
"""


class GoReleasesError(Exception):
    """
    Base exception for all goreleases errors.

    All custom exceptions in goreleases should inherit from this class
    to allow for easy catching of all application-specific errors.
    """

    def __init__(self, message: str, details: str | None = None) -> None:
        """
        Initialize the exception.

        Args:
            message: The primary error message.
            details: Optional additional context about the error.
        """
        self.message = message
        self.details = details
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - {self.details}"
        return self.message


# =============================================================================
# Parse Errors
# =============================================================================


class ParseError(GoReleasesError):
    """
    Exception raised when a version or constraint string is malformed.

    Attributes:
        value: The string that failed to parse.
    """

    def __init__(
        self,
        message: str,
        value: str | None = None,
        details: str | None = None,
    ) -> None:
        super().__init__(message, details)
        self.value = value


class InvalidVersionError(ParseError):
    """Exception raised for a string that is not a go version."""

    pass


class InvalidConstraintError(ParseError):
    """Exception raised for a string that is not a go version constraint."""

    pass


# =============================================================================
# Upstream Errors
# =============================================================================


class UpstreamError(GoReleasesError):
    """
    Exception raised when an upstream source cannot be read.

    This includes:
    - Connection failures and timeouts
    - Non-200 responses
    - Response bodies that are not the expected JSON

    Attributes:
        url: The URL that was being requested.
        status_code: HTTP status code of the response, if one was received.
    """

    def __init__(
        self,
        message: str,
        url: str | None = None,
        status_code: int | None = None,
        details: str | None = None,
    ) -> None:
        super().__init__(message, details)
        self.url = url
        self.status_code = status_code


class ChecksumFetchError(UpstreamError):
    """
    Exception raised for the first hard failure while fetching checksum sidecars.

    Attributes:
        filename: The release file whose checksum could not be fetched.
    """

    def __init__(
        self,
        message: str,
        filename: str | None = None,
        url: str | None = None,
        status_code: int | None = None,
        details: str | None = None,
    ) -> None:
        super().__init__(message, url=url, status_code=status_code, details=details)
        self.filename = filename


# =============================================================================
# Catalog Errors
# =============================================================================


class ClassificationError(GoReleasesError):
    """
    Exception raised when a storage object name matches no release file pattern.

    An unrecognized artifact usually means the upstream naming scheme changed,
    so the whole fetch fails instead of dropping the file.
    """

    def __init__(
        self,
        message: str,
        filename: str | None = None,
        details: str | None = None,
    ) -> None:
        super().__init__(message, details)
        self.filename = filename


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(GoReleasesError):
    """
    Exception raised when configuration is invalid or cannot be read.

    This includes:
    - Configuration file parsing errors
    - Values of the wrong type
    """

    pass
