"""Mock Google Docs API package for testing."""

from docedit.mock.api import MockGoogleDocsAPI
from docedit.mock.documents import make_document, paragraph, table
from docedit.mock.exceptions import MockAPIError, ValidationError
from docedit.mock.transport import MockTransport

__all__ = [
    "MockAPIError",
    "MockGoogleDocsAPI",
    "MockTransport",
    "ValidationError",
    "make_document",
    "paragraph",
    "table",
]
