"""
Custom exception hierarchy for the notebook console.

This module provides a structured exception hierarchy for consistent
error handling across the application.
"""


class NotebookException(Exception):
    """Base exception for all notebook errors."""

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        self.message = message
        self.code = code

    def __str__(self) -> str:
        if self.code:
            return f"[{self.code}] {self.message}"
        return self.message


class AuthenticationError(NotebookException):
    """Authentication-related errors (login failures, invalid credentials)."""

    pass


class ConnectionClosedError(NotebookException):
    """Input stream reached EOF (terminal closed or client disconnected)."""

    pass


class StorageError(NotebookException):
    """Database/repository errors (query failures, constraint violations)."""

    pass


class ConfigurationError(NotebookException):
    """Configuration validation errors (invalid settings, missing values)."""

    pass


class EmptySelectionError(NotebookException):
    """Cursor movement or selection attempted on an empty list."""

    pass
