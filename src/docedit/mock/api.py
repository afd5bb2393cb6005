"""Main MockGoogleDocsAPI class that dispatches to handler modules."""

from __future__ import annotations

import copy
from collections.abc import Callable
from typing import Any

from docedit.mock import segment_ops, table_ops, text_ops
from docedit.mock.exceptions import ValidationError
from docedit.mock.reindex import reindex_and_normalize

_Handler = Callable[[dict[str, Any], dict[str, Any]], dict[str, Any]]

HANDLERS: dict[str, _Handler] = {
    "insertText": text_ops.handle_insert_text,
    "deleteContentRange": text_ops.handle_delete_content_range,
    "updateTextStyle": text_ops.handle_update_text_style,
    "insertPageBreak": text_ops.handle_insert_page_break,
    "insertInlineImage": text_ops.handle_insert_inline_image,
    "replaceAllText": text_ops.handle_replace_all_text,
    "createParagraphBullets": text_ops.handle_create_paragraph_bullets,
    "insertTable": table_ops.handle_insert_table,
    "updateTableCellStyle": table_ops.handle_update_table_cell_style,
    "createHeader": segment_ops.handle_create_header,
    "createFooter": segment_ops.handle_create_footer,
    "updateDocumentStyle": segment_ops.handle_update_document_style,
}


class MockGoogleDocsAPI:
    """In-memory stand-in for the Google Docs API.

    This class simulates:
    - Document state management
    - batchUpdate request processing with per-request validation
    - UTF-16 index handling for body, headers, footers and table cells

    After each request, a centralized normalize + reindex pass fixes all
    indices. A batch is atomic: if any request fails, the document is rolled
    back to its state before the batch.
    """

    def __init__(self, document: dict[str, Any]) -> None:
        self._document = copy.deepcopy(document)
        self._revision_id = document.get("revisionId", "mock_revision_1")
        self._revision_counter = 1
        reindex_and_normalize(self._document)

    @property
    def document_id(self) -> str:
        document_id: str = self._document.get("documentId", "")
        return document_id

    def get(self) -> dict[str, Any]:
        """Return a copy of the current document state."""
        result = copy.deepcopy(self._document)
        result["revisionId"] = self._revision_id
        return result

    def batch_update(self, requests: list[dict[str, Any]]) -> dict[str, Any]:
        """Apply a list of raw request dicts and return a raw response dict.

        Raises:
            ValidationError: If any request is invalid; no request is applied
        """
        if not requests:
            raise ValidationError("requests must not be empty")

        replies: list[dict[str, Any]] = []
        backup_document = copy.deepcopy(self._document)

        try:
            for i, request in enumerate(requests):
                try:
                    replies.append(self._process_request(request))
                except ValidationError as e:
                    raise ValidationError(
                        f"Invalid requests[{i}]: {e}", status_code=e.status_code
                    ) from e
                reindex_and_normalize(self._document)
        except Exception:
            self._document = backup_document
            raise

        self._revision_counter += 1
        self._revision_id = f"mock_revision_{self._revision_counter}"

        return {
            "replies": replies,
            "documentId": self.document_id,
            "writeControl": {"requiredRevisionId": self._revision_id},
        }

    def _process_request(self, request: dict[str, Any]) -> dict[str, Any]:
        request_types = list(request)
        if len(request_types) != 1:
            raise ValidationError(
                f"Request must have exactly one operation, got: {request_types}"
            )

        request_type = request_types[0]
        handler = HANDLERS.get(request_type)
        if not handler:
            raise ValidationError(f"Unsupported request type: {request_type}")

        return handler(self._document, request[request_type])
