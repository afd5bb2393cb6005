"""Tests for BatchOperationManager."""

from __future__ import annotations

import pytest

from docedit.managers import BatchOperationManager
from docedit.mock import MockTransport, make_document
from docedit.structure import parse_document_structure


async def _body_text(transport: MockTransport) -> str:
    document = await transport.get_document(transport.document_id)
    structure = parse_document_structure(document.raw)
    return "".join(e.text for e in structure.body if e.type == "paragraph")


@pytest.mark.asyncio
async def test_batch_applies_operations_in_one_call() -> None:
    """Test a valid batch is submitted as a single ordered batchUpdate."""
    transport = MockTransport(make_document(["Hello world"]))
    manager = BatchOperationManager(transport)

    result = await manager.execute_batch_operations(
        transport.document_id,
        [
            {"type": "insert_text", "index": 1, "text": "Title: "},
            {"type": "format_text", "start_index": 1, "end_index": 6, "bold": True},
            {"type": "find_replace", "find_text": "world", "replace_text": "there"},
        ],
    )

    assert result.success, result.message
    assert len(transport.sent) == 1
    assert [next(iter(r)) for r in transport.sent[0]] == [
        "insertText",
        "updateTextStyle",
        "replaceAllText",
    ]
    assert await _body_text(transport) == "Title: Hello there\n"

    assert result.metadata["operations_count"] == 3
    assert result.metadata["requests_count"] == 3
    assert result.metadata["replies_count"] == 3
    assert result.metadata["operation_summary"] == [
        "insert text at 1",
        "format text 1-6 (bold: True)",
        "find/replace 'world' -> 'there'",
    ]
    assert "truncated" not in result.metadata
    assert result.message.startswith("Successfully executed 3 operations (insert text at 1")


@pytest.mark.asyncio
async def test_invalid_operation_means_zero_writes() -> None:
    """Test one bad operation rejects the whole batch before submission."""
    transport = MockTransport(make_document(["Hello world"]))
    manager = BatchOperationManager(transport)

    result = await manager.execute_batch_operations(
        transport.document_id,
        [
            {"type": "insert_text", "index": 1, "text": "A"},
            {"type": "delete_text", "start_index": 10, "end_index": 5},
            {"type": "insert_text", "index": 1, "text": "B"},
        ],
    )

    assert not result.success
    assert result.message.startswith("Operation 2 (delete_text) failed:")
    assert transport.sent == []


@pytest.mark.asyncio
async def test_missing_field_names_operation() -> None:
    """Test a missing required field is reported with the operation number."""
    transport = MockTransport(make_document())
    manager = BatchOperationManager(transport)

    result = await manager.execute_batch_operations(
        transport.document_id,
        [{"type": "insert_text", "index": 1, "text": "A"}, {"type": "insert_text"}],
    )

    assert not result.success
    assert result.message == "Operation 2: Missing required field: index"
    assert transport.sent == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("extra", "message"),
    [
        ({"find_text": 123}, "find_text must be a non-empty string"),
        ({"find_text": ""}, "find_text must be a non-empty string"),
        (
            {"find_text": "Hello", "match_case": "false"},
            "match_case must be a boolean, got str",
        ),
    ],
)
async def test_invalid_find_replace_means_zero_writes(
    extra: dict, message: str
) -> None:
    """Test bad find_replace parameters fail locally before submission."""
    transport = MockTransport(make_document(["Hello world"]))
    manager = BatchOperationManager(transport)

    result = await manager.execute_batch_operations(
        transport.document_id,
        [{"type": "find_replace", "replace_text": "x", **extra}],
    )

    assert not result.success
    assert result.message == f"Operation 1 (find_replace) failed: {message}"
    assert transport.sent == []


@pytest.mark.asyncio
async def test_empty_operation_list() -> None:
    """Test an empty list is rejected."""
    transport = MockTransport(make_document())
    result = await BatchOperationManager(transport).execute_batch_operations(
        transport.document_id, []
    )

    assert not result.success
    assert result.message == "Operations list cannot be empty"


@pytest.mark.asyncio
async def test_summary_truncation() -> None:
    """Test the summary keeps five descriptions and the message three."""
    transport = MockTransport(make_document(["Hello"]))
    manager = BatchOperationManager(transport)
    operations = [{"type": "insert_text", "index": 1, "text": str(i)} for i in range(7)]

    result = await manager.execute_batch_operations(transport.document_id, operations)

    assert result.success
    assert len(result.metadata["operation_summary"]) == 5
    assert result.metadata["truncated"] == "... and 2 more operations"
    assert result.message.endswith("and 4 more operation(s))")


@pytest.mark.asyncio
async def test_service_rejection_is_atomic() -> None:
    """Test a batch the service rejects leaves the document untouched."""
    transport = MockTransport(make_document(["Hello"]))
    manager = BatchOperationManager(transport)

    result = await manager.execute_batch_operations(
        transport.document_id,
        [
            {"type": "insert_text", "index": 1, "text": "A"},
            {"type": "delete_text", "start_index": 1, "end_index": 50},
        ],
    )

    assert not result.success
    assert result.message.startswith("Batch operation failed:")
    assert await _body_text(transport) == "Hello\n"


@pytest.mark.asyncio
async def test_transport_failure() -> None:
    """Test transport errors become a failed result."""
    transport = MockTransport(make_document(["Hello"]), fail_updates={1})
    manager = BatchOperationManager(transport)

    result = await manager.execute_batch_operations(
        transport.document_id, [{"type": "insert_text", "index": 1, "text": "A"}]
    )

    assert not result.success
    assert "Internal error encountered" in result.message


def test_supported_operations() -> None:
    """Test every operation type is described with its required fields."""
    manager = BatchOperationManager(MockTransport(make_document()))
    info = manager.get_supported_operations()

    operations = info["supported_operations"]
    assert set(operations) == {
        "insert_text",
        "delete_text",
        "replace_text",
        "format_text",
        "insert_table",
        "insert_page_break",
        "find_replace",
    }
    assert operations["replace_text"]["required"] == ["start_index", "end_index", "text"]
    assert operations["find_replace"]["optional"] == ["match_case"]
    assert len(info["example_operations"]) == 3
