"""Custom exceptions for rich-text documents."""

from typing import Any


class RichTextError(Exception):
    """Base exception for rich-text document operations."""

    def __init__(self, message: str, error_details: dict[str, Any] | None = None):
        """
        Initialize the exception.

        Args:
            message: Error message
            error_details: Optional dictionary with detailed error information
        """
        super().__init__(message)
        self.error_details = error_details


class RichTextPathError(RichTextError):
    """Raised when a path or offset does not address an existing position."""
