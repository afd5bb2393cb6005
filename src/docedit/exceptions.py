"""Custom exceptions for docedit."""

from __future__ import annotations


class DocEditError(Exception):
    """Base exception for all docedit errors."""

    pass


class TransportError(DocEditError):
    """Base exception for transport errors."""

    pass


class AuthenticationError(TransportError):
    """Raised when authentication fails (401/403)."""

    pass


class NotFoundError(TransportError):
    """Raised when a document is not found (404)."""

    pass


class APIError(TransportError):
    """Raised when the API returns an error."""

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


class OperationError(DocEditError):
    """Raised when a logical edit operation cannot be turned into requests."""

    pass


class ResolutionError(DocEditError):
    """Raised when a table, cell or section cannot be located in a document."""

    pass
