"""Tests for TableOperationManager."""

from __future__ import annotations

from typing import Any

import pytest

from docedit.managers import TableOperationManager
from docedit.managers.table_operation_manager import locate_new_table
from docedit.mock import MockTransport, make_document
from docedit.structure import TableInfo, find_tables
from docedit.tables import TableStyleOptions, extract_table_as_data


async def _tables(transport: MockTransport) -> list[TableInfo]:
    document = await transport.get_document(transport.document_id)
    return find_tables(document.raw)


def _run_styles(table: TableInfo, row: int, column: int) -> list[dict[str, Any]]:
    cell = table.cells[row][column]
    return [
        pe["textRun"].get("textStyle", {})
        for element in cell.content_elements
        for pe in element["paragraph"]["elements"]
        if pe["textRun"]["content"].strip()
    ]


def _table(index: int, start: int) -> TableInfo:
    return TableInfo(
        index=index, start_index=start, end_index=start + 6, rows=1, columns=1, cells=[]
    )


def test_locate_new_table() -> None:
    """Test the new table is the first at or after the insertion index."""
    tables = [_table(0, 2), _table(1, 20), _table(2, 40)]
    assert locate_new_table(tables, 15) is tables[1]
    assert locate_new_table(tables, 20) is tables[1]
    assert locate_new_table(tables, 99) is tables[2]
    assert locate_new_table([], 5) is None


@pytest.mark.asyncio
async def test_create_and_populate_table() -> None:
    """Test one insertTable followed by one verified write per cell."""
    transport = MockTransport(make_document(["Introduction text"]))
    manager = TableOperationManager(transport)

    result = await manager.create_and_populate_table(
        transport.document_id, [["H1", "H2"], ["a", "b"]], 10, bold_headers=True
    )

    assert result.success, result.message
    assert result.metadata == {
        "rows": 2,
        "columns": 2,
        "populated_cells": 4,
        "failed_cells": 0,
        "table_index": 0,
    }
    assert result.message == "Created 2x2 table at index 11 and populated 4 of 4 cells"

    assert transport.sent[0] == [
        {"insertTable": {"location": {"index": 10}, "rows": 2, "columns": 2}}
    ]
    assert transport.sent[1] == [
        {"insertText": {"location": {"index": 14}, "text": "H1"}},
        {
            "updateTextStyle": {
                "range": {"startIndex": 14, "endIndex": 16},
                "textStyle": {"bold": True},
                "fields": "bold",
            }
        },
    ]
    assert transport.sent[2][0] == {"insertText": {"location": {"index": 18}, "text": "H2"}}
    assert transport.sent[3] == [{"insertText": {"location": {"index": 23}, "text": "a"}}]
    assert transport.sent[4] == [{"insertText": {"location": {"index": 26}, "text": "b"}}]
    assert len(transport.sent) == 5
    # One fetch to locate the table, then one per cell
    assert transport.get_count == 5

    table = (await _tables(transport))[0]
    assert extract_table_as_data(table) == [["H1", "H2"], ["a", "b"]]
    assert _run_styles(table, 0, 0) == [{"bold": True}]
    assert _run_styles(table, 0, 1) == [{"bold": True}]
    assert _run_styles(table, 1, 0) == [{}]


@pytest.mark.asyncio
async def test_create_table_without_bold_headers() -> None:
    """Test header rows are left unstyled when bold_headers is off."""
    transport = MockTransport(make_document(["Introduction text"]))
    manager = TableOperationManager(transport)

    result = await manager.create_and_populate_table(
        transport.document_id, [["H1"], ["a"]], 5, bold_headers=False
    )

    assert result.success
    assert all("updateTextStyle" not in r for batch in transport.sent for r in batch)


@pytest.mark.asyncio
async def test_create_table_skips_empty_cells() -> None:
    """Test empty strings are counted out and never written."""
    transport = MockTransport(make_document(["Introduction text"]))
    manager = TableOperationManager(transport)

    result = await manager.create_and_populate_table(
        transport.document_id, [["H1", ""], ["", "b"]], 10
    )

    assert result.success
    assert result.metadata["populated_cells"] == 2
    assert len(transport.sent) == 3
    assert result.message.endswith("populated 2 of 2 cells")


@pytest.mark.asyncio
async def test_create_table_with_style() -> None:
    """Test styling is applied between creation and population."""
    transport = MockTransport(make_document(["Introduction text"]))
    manager = TableOperationManager(transport)

    result = await manager.create_and_populate_table(
        transport.document_id,
        [["H1"], ["a"]],
        10,
        style=TableStyleOptions(header_background=(0.9, 0.9, 0.9)),
    )

    assert result.success
    style_batch = transport.sent[1]
    assert list(style_batch[0]) == ["updateTableCellStyle"]
    assert style_batch[0]["updateTableCellStyle"]["tableRange"]["tableCellLocation"][
        "tableStartLocation"
    ] == {"index": 11}


@pytest.mark.asyncio
async def test_invalid_table_data_means_no_io() -> None:
    """Test invalid data is rejected before any read or write."""
    transport = MockTransport(make_document(["Introduction text"]))
    manager = TableOperationManager(transport)

    result = await manager.create_and_populate_table(
        transport.document_id, [["a", "b"], ["c"]], 10
    )

    assert not result.success
    assert result.message.startswith("Invalid table data: All rows must have the same")
    assert transport.sent == []
    assert transport.get_count == 0


@pytest.mark.asyncio
async def test_negative_index_rejected() -> None:
    """Test a negative index is rejected."""
    transport = MockTransport(make_document(["Introduction text"]))
    result = await TableOperationManager(transport).create_and_populate_table(
        transport.document_id, [["a"]], -1
    )

    assert not result.success
    assert "Table index -1 is negative" in result.message
    assert transport.sent == []


@pytest.mark.asyncio
async def test_cell_failures_are_counted() -> None:
    """Test a failing cell write does not stop the remaining cells."""
    transport = MockTransport(make_document(["Introduction text"]), fail_updates={2})
    manager = TableOperationManager(transport)

    result = await manager.create_and_populate_table(
        transport.document_id, [["H1", "H2"], ["a", "b"]], 10
    )

    assert result.success
    assert result.metadata["populated_cells"] == 3
    assert result.metadata["failed_cells"] == 1
    assert result.message.endswith("populated 3 of 4 cells")

    table = (await _tables(transport))[0]
    assert extract_table_as_data(table) == [["", "H2"], ["a", "b"]]


@pytest.mark.asyncio
async def test_table_creation_failure() -> None:
    """Test a rejected insertTable fails the whole operation."""
    transport = MockTransport(make_document(["Introduction text"]), fail_updates={1})
    result = await TableOperationManager(transport).create_and_populate_table(
        transport.document_id, [["a"]], 10
    )

    assert not result.success
    assert result.message.startswith("Table creation failed:")


# ========================================================================
# Existing tables
# ========================================================================


@pytest.mark.asyncio
async def test_populate_existing_table_appends(table_transport: MockTransport) -> None:
    """Test text is appended to cells that already hold text."""
    manager = TableOperationManager(table_transport)

    result = await manager.populate_existing_table(
        table_transport.document_id, 0, [["1", ""], ["", "2"]]
    )

    assert result.success, result.message
    assert result.message == "Table 0: populated 2 of 2 cells"
    table = (await _tables(table_transport))[0]
    assert extract_table_as_data(table) == [["A1", "B"], ["C", "D2"]]


@pytest.mark.asyncio
async def test_populate_existing_table_clear(table_transport: MockTransport) -> None:
    """Test clear_existing replaces the cell text."""
    manager = TableOperationManager(table_transport)

    result = await manager.populate_existing_table(
        table_transport.document_id, 0, [["X", "Y"]], clear_existing=True
    )

    assert result.success, result.message
    assert table_transport.sent[0] == [
        {"deleteContentRange": {"range": {"startIndex": 10, "endIndex": 11}}},
        {"insertText": {"location": {"index": 10}, "text": "X"}},
    ]
    table = (await _tables(table_transport))[0]
    assert extract_table_as_data(table) == [["X", "Y"], ["C", "D"]]


@pytest.mark.asyncio
async def test_populate_missing_table(table_transport: MockTransport) -> None:
    """Test an unknown table index is reported with the table count."""
    result = await TableOperationManager(table_transport).populate_existing_table(
        table_transport.document_id, 3, [["x"]]
    )

    assert not result.success
    assert result.message == "Table index 3 not found. Document has 1 tables"
    assert table_transport.sent == []


@pytest.mark.asyncio
async def test_populate_data_too_large(table_transport: MockTransport) -> None:
    """Test data larger than the table is rejected."""
    result = await TableOperationManager(table_transport).populate_existing_table(
        table_transport.document_id, 0, [["a", "b", "c"]]
    )

    assert not result.success
    assert result.message == "Data (1x3) exceeds table dimensions (2x2)"
    assert table_transport.sent == []


@pytest.mark.asyncio
async def test_debug_table_structure(table_transport: MockTransport) -> None:
    """Test the per-cell debug report."""
    result = await TableOperationManager(table_transport).debug_table_structure(
        table_transport.document_id, 0
    )

    assert result.success
    assert result.metadata["dimensions"] == "2x2"
    assert result.metadata["range"] == "7-23"
    assert result.metadata["cells"][0] == {
        "position": "(0,0)",
        "range": "9-12",
        "insertion_index": 10,
        "current_content": "A\n",
        "content_length": 2,
    }
    assert len(result.metadata["cells"]) == 4


@pytest.mark.asyncio
async def test_debug_missing_table(table_transport: MockTransport) -> None:
    """Test debugging a missing table fails cleanly."""
    result = await TableOperationManager(table_transport).debug_table_structure(
        table_transport.document_id, 1
    )

    assert not result.success
    assert result.message == "Table index 1 not found. Document has 1 tables"


@pytest.mark.asyncio
@pytest.mark.parametrize("table_index", ["0", -1, None, True])
async def test_invalid_table_index_means_no_io(
    table_transport: MockTransport, table_index: object
) -> None:
    """Test a non-integer or negative table index fails before any read."""
    manager = TableOperationManager(table_transport)

    populated = await manager.populate_existing_table(
        table_transport.document_id, table_index, [["x"]]
    )
    debugged = await manager.debug_table_structure(
        table_transport.document_id, table_index
    )

    assert not populated.success
    assert not debugged.success
    assert populated.message.startswith("Table index")
    assert debugged.message == populated.message
    assert table_transport.get_count == 0
    assert table_transport.sent == []
