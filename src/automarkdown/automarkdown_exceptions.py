"""Custom exceptions for markdown shortcut configuration."""

from typing import Any


class AutoMarkdownError(Exception):
    """Base exception for auto-markdown operations."""

    def __init__(self, message: str, error_details: dict[str, Any] | None = None):
        """
        Initialize the exception.

        Args:
            message: Error message
            error_details: Optional dictionary with detailed error information
        """
        super().__init__(message)
        self.error_details = error_details


class ShortcutConfigError(AutoMarkdownError):
    """Raised when a shortcut table entry or settings file is invalid."""
