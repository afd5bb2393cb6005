"""Transport adapter over MockGoogleDocsAPI."""

from __future__ import annotations

from typing import Any

from docedit.exceptions import APIError, NotFoundError
from docedit.mock.api import MockGoogleDocsAPI
from docedit.mock.exceptions import MockAPIError
from docedit.transport import DocumentData, Transport


class MockTransport(Transport):
    """Transport that wraps MockGoogleDocsAPI.

    Every call is recorded so tests can count reads and writes. Mock API
    errors surface as APIError, the same way HTTP errors do for the real
    transport.

    Args:
        initial_document: Initial document state for the mock API
        fail_updates: 1-based numbers of batch_update calls that should fail
    """

    def __init__(
        self,
        initial_document: dict[str, Any],
        fail_updates: set[int] | None = None,
    ) -> None:
        self.mock_api = MockGoogleDocsAPI(initial_document)
        self.document_id = self.mock_api.document_id
        self.fail_updates = fail_updates or set()
        self.get_count = 0
        self.sent: list[list[dict[str, Any]]] = []

    def _check_document(self, document_id: str) -> None:
        if document_id != self.document_id:
            raise NotFoundError(f"Document not found: {document_id}")

    async def get_document(self, document_id: str) -> DocumentData:
        self._check_document(document_id)
        self.get_count += 1
        response = self.mock_api.get()
        return DocumentData(
            document_id=document_id,
            title=response.get("title", ""),
            raw=response,
        )

    async def batch_update(
        self, document_id: str, requests: list[dict[str, Any]]
    ) -> dict[str, Any]:
        self._check_document(document_id)
        self.sent.append(requests)
        if len(self.sent) in self.fail_updates:
            raise APIError("API error (500): Internal error encountered.", 500)
        try:
            return self.mock_api.batch_update(requests)
        except MockAPIError as e:
            raise APIError(f"API error ({e.status_code}): {e}", e.status_code) from e

    async def close(self) -> None:
        pass
