"""
Custom exceptions for the Snapmatic converter.

This module defines the exceptions raised while discovering, reading,
extracting and writing Snapmatic pictures.
"""

from typing import Any, Optional


class SnapmaticException(Exception):
    """Base exception for all converter errors."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None) -> None:
        """
        Initialize the exception.

        Args:
            message: Error message
            details: Optional dictionary with additional error details
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


# =============================================================================
# Input Exceptions
# =============================================================================


class InvalidInputError(SnapmaticException):
    """Argument has the wrong type or is empty."""

    pass


# =============================================================================
# Lookup Exceptions
# =============================================================================


class NotFoundError(SnapmaticException):
    """Base exception for missing directories and files."""

    pass


class SourceDirectoryNotFoundError(NotFoundError):
    """Source directory does not exist."""

    def __init__(self, path: str) -> None:
        """Initialize with the missing path."""
        message = f"Source directory does not exist: {path}"
        super().__init__(message, {"path": path})


class ContainerNotFoundError(NotFoundError):
    """No Snapmatic picture matches the requested name."""

    def __init__(self, filename: str, src_path: str) -> None:
        """Initialize with the requested name."""
        message = f"No Snapmatic picture named '{filename}' found in {src_path}"
        super().__init__(message, {"filename": filename, "src_path": src_path})


# =============================================================================
# Conversion Exceptions
# =============================================================================


class ConversionIOError(SnapmaticException):
    """Reading, writing or creating a directory failed."""

    pass


class MarkerNotFoundError(SnapmaticException):
    """Buffer does not contain a JPEG Start-Of-Image marker."""

    def __init__(self, size: int) -> None:
        """Initialize with the size of the searched buffer."""
        message = f"JPEG start marker not found in {size} byte buffer"
        super().__init__(message, {"size": size})


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigurationError(SnapmaticException):
    """Configuration error."""

    pass
