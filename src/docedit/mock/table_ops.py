"""Table operations for the mock Google Docs API.

These handlers modify table structure. All index fixing is done by the
centralized reindex pass after each request.
"""

from __future__ import annotations

import copy
from typing import Any

from docedit.mock.exceptions import ValidationError
from docedit.mock.navigation import find_table, get_segment
from docedit.mock.reindex import split_paragraph
from docedit.mock.text_ops import insert_elements, resolve_location


def make_empty_cell() -> dict[str, Any]:
    """Create an empty table cell holding one empty paragraph."""
    return {
        "content": [
            {
                "paragraph": {
                    "elements": [{"textRun": {"content": "\n", "textStyle": {}}}],
                    "paragraphStyle": {},
                }
            }
        ],
        "tableCellStyle": {},
    }


def build_table_element(rows: int, columns: int) -> dict[str, Any]:
    """Build an empty rows x columns table element (indices fixed by reindex)."""
    return {
        "table": {
            "rows": rows,
            "columns": columns,
            "tableRows": [
                {"tableCells": [make_empty_cell() for _ in range(columns)]}
                for _ in range(rows)
            ],
            "tableStyle": {},
        }
    }


def handle_insert_table(
    document: dict[str, Any], request: dict[str, Any]
) -> dict[str, Any]:
    """Handle InsertTableRequest.

    A newline is inserted at the location to split the paragraph, and the
    table is placed right after the first half, so it starts at index + 1.
    """
    rows = request.get("rows")
    columns = request.get("columns")
    if not rows or rows < 1:
        raise ValidationError("rows must be at least 1")
    if not columns or columns < 1:
        raise ValidationError("columns must be at least 1")

    content, is_body, index = resolve_location(document, request)
    if is_body and index < 1:
        raise ValidationError("index must be at least 1")

    container, pos = insert_elements(content, index, [{"textRun": {"content": "\n"}}])
    split_paragraph(container, pos)
    container.insert(pos + 1, build_table_element(rows, columns))
    return {}


def _table_start(request: dict[str, Any]) -> int | None:
    location = request.get("tableStartLocation")
    if location is None:
        cell_location = (request.get("tableRange") or {}).get("tableCellLocation") or {}
        location = cell_location.get("tableStartLocation")
    if not location:
        return None
    index: int | None = location.get("index")
    return index


def handle_update_table_cell_style(
    document: dict[str, Any], request: dict[str, Any]
) -> dict[str, Any]:
    """Handle UpdateTableCellStyleRequest for a whole table or a cell range."""
    start_index = _table_start(request)
    if start_index is None:
        raise ValidationError("tableStartLocation or tableRange is required")

    fields = [f.strip() for f in (request.get("fields") or "").split(",") if f.strip()]
    if not fields:
        raise ValidationError("fields is required")

    body, _ = get_segment(document, None)
    element = find_table(body.get("content", []), start_index)
    if element is None:
        raise ValidationError(f"No table found at index {start_index}")

    rows = element["table"].get("tableRows", [])
    table_range = request.get("tableRange")
    if table_range:
        cell_location = table_range.get("tableCellLocation") or {}
        row_start = cell_location.get("rowIndex", 0)
        col_start = cell_location.get("columnIndex", 0)
        row_end = row_start + table_range.get("rowSpan", 1)
        col_end = col_start + table_range.get("columnSpan", 1)
    else:
        row_start, col_start = 0, 0
        row_end = len(rows)
        col_end = max((len(r.get("tableCells", [])) for r in rows), default=0)

    cell_style = request.get("tableCellStyle") or {}
    for row in rows[row_start:row_end]:
        for cell in row.get("tableCells", [])[col_start:col_end]:
            style = cell.setdefault("tableCellStyle", {})
            for field_name in fields:
                if field_name in cell_style:
                    style[field_name] = copy.deepcopy(cell_style[field_name])
                else:
                    style.pop(field_name, None)
    return {}
