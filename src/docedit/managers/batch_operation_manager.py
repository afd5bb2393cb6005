"""Batch operation manager.

Turns an ordered list of logical edit operations into one atomic
batchUpdate call. Every operation is validated and expanded before anything
is sent, so a bad operation anywhere in the list means zero writes.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from docedit.api_types import Request
from docedit.exceptions import DocEditError, OperationError
from docedit.logging import logger
from docedit.managers.validation_manager import REQUIRED_FIELDS, ValidationManager
from docedit.requests import build_operation_requests, serialize_requests
from docedit.transport import Transport
from docedit.types import OperationResult

SUMMARY_LIMIT = 5
MESSAGE_LIMIT = 3

_OPERATION_DOCS: dict[str, dict[str, Any]] = {
    "insert_text": {
        "description": "Insert text at a specific index",
        "optional": [],
        "example": {"type": "insert_text", "index": 1, "text": "Hello World"},
    },
    "delete_text": {
        "description": "Delete text in the range [start_index, end_index)",
        "optional": [],
        "example": {"type": "delete_text", "start_index": 1, "end_index": 10},
    },
    "replace_text": {
        "description": "Replace the text in a range with new text",
        "optional": [],
        "example": {
            "type": "replace_text",
            "start_index": 1,
            "end_index": 10,
            "text": "New text",
        },
    },
    "format_text": {
        "description": "Apply character formatting to a range",
        "optional": ["bold", "italic", "underline", "font_size", "font_family"],
        "example": {
            "type": "format_text",
            "start_index": 1,
            "end_index": 10,
            "bold": True,
            "font_size": 14,
        },
    },
    "insert_table": {
        "description": "Insert an empty table at a specific index",
        "optional": [],
        "example": {"type": "insert_table", "index": 20, "rows": 3, "columns": 4},
    },
    "insert_page_break": {
        "description": "Insert a page break at a specific index",
        "optional": [],
        "example": {"type": "insert_page_break", "index": 100},
    },
    "find_replace": {
        "description": "Replace every occurrence of some text",
        "optional": ["match_case"],
        "example": {
            "type": "find_replace",
            "find_text": "old",
            "replace_text": "new",
            "match_case": False,
        },
    },
}


class BatchOperationManager:
    """Executes validated operation lists as a single batchUpdate."""

    def __init__(
        self,
        transport: Transport,
        validation_manager: ValidationManager | None = None,
    ) -> None:
        self.transport = transport
        self.validation_manager = validation_manager or ValidationManager()

    async def execute_batch_operations(
        self, document_id: str, operations: list[Mapping[str, Any]]
    ) -> OperationResult:
        """Validate, expand and submit operations in one atomic call.

        Args:
            document_id: Target document
            operations: Ordered operation mappings, each with a ``type`` key

        Returns:
            OperationResult; on failure nothing was written
        """
        logger.info(f"Executing batch of {len(operations or [])} operations")

        is_valid, message = self.validation_manager.validate_batch_operations(operations)
        if not is_valid:
            return OperationResult.failure(message)

        try:
            requests, descriptions = self._validate_and_build_requests(operations)
        except OperationError as e:
            logger.warning(f"Batch rejected before submission: {e}")
            return OperationResult.failure(str(e))

        if not requests:
            return OperationResult.failure("No valid requests could be built")

        try:
            response = await self.transport.batch_update(
                document_id, serialize_requests(requests)
            )
        except DocEditError as e:
            logger.error(f"Batch update failed: {e}")
            return OperationResult.failure(f"Batch operation failed: {e}")

        replies = response.get("replies", [])
        metadata = self._build_operation_summary(descriptions)
        metadata.update(
            operations_count=len(operations),
            requests_count=len(requests),
            replies_count=len(replies),
        )

        summary = ", ".join(descriptions[:MESSAGE_LIMIT])
        remaining = len(descriptions) - MESSAGE_LIMIT
        if remaining > 0:
            summary += f" and {remaining} more operation(s)"

        logger.info(f"Batch applied: {len(requests)} requests")
        return OperationResult(
            success=True,
            message=f"Successfully executed {len(operations)} operations ({summary})",
            metadata=metadata,
        )

    def _validate_and_build_requests(
        self, operations: list[Mapping[str, Any]]
    ) -> tuple[list[Request], list[str]]:
        """Expand every operation, in order, or raise on the first bad one.

        Raises:
            OperationError: Naming the 1-based operation number
        """
        requests: list[Request] = []
        descriptions: list[str] = []

        for i, op in enumerate(operations, start=1):
            is_valid, message = self.validation_manager.validate_operation(op)
            if not is_valid:
                raise OperationError(f"Operation {i}: {message}")

            try:
                op_requests, description = build_operation_requests(op)
            except OperationError as e:
                raise OperationError(f"Operation {i} ({op['type']}) failed: {e}") from e

            requests.extend(op_requests)
            descriptions.append(description)

        return requests, descriptions

    def _build_operation_summary(self, descriptions: list[str]) -> dict[str, Any]:
        summary: dict[str, Any] = {"operation_summary": descriptions[:SUMMARY_LIMIT]}
        if len(descriptions) > SUMMARY_LIMIT:
            summary["truncated"] = (
                f"... and {len(descriptions) - SUMMARY_LIMIT} more operations"
            )
        return summary

    def get_supported_operations(self) -> dict[str, Any]:
        """Describe each operation type with its fields and an example."""
        return {
            "supported_operations": {
                op_type: {
                    "description": doc["description"],
                    "required": list(REQUIRED_FIELDS[op_type]),
                    "optional": doc["optional"],
                    "example": doc["example"],
                }
                for op_type, doc in _OPERATION_DOCS.items()
            },
            "example_operations": [
                _OPERATION_DOCS["insert_text"]["example"],
                _OPERATION_DOCS["format_text"]["example"],
                _OPERATION_DOCS["find_replace"]["example"],
            ],
        }
