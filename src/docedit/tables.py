"""Table helpers for Google Docs batchUpdate.

Generates requests for table operations including:
- Table creation from raw data (normalisation + insertTable)
- Cell population (insert text, optional bold header styling)
- Table cell styling (borders, background, header background)

and a few read helpers over parsed table snapshots.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from docedit.api_types import Request, TableCellBorder, TableCellStyle
from docedit.logging import logger
from docedit.requests import (
    create_format_text_request,
    create_insert_table_request,
    create_insert_text_request,
    create_update_table_cell_style_request,
    optional_color,
    pt_dimension,
)
from docedit.structure import TableCell, TableInfo, utf16_len

# Header background spans at most this many columns (the service clamps it)
HEADER_COLUMN_SPAN = 20


@dataclass
class TableStyleOptions:
    """Optional styling for a whole table. Colors are (red, green, blue) in [0, 1]."""

    border_width: float | None = None
    border_color: tuple[float, float, float] | None = None
    background_color: tuple[float, float, float] | None = None
    header_background: tuple[float, float, float] | None = None


def format_table_data(raw_data: str | list[Any]) -> list[list[str]]:
    """Normalise loosely shaped input into a 2D list of strings.

    Strings are split into lines, then on tabs, commas or whitespace (in that
    order of preference). A flat list becomes a single column.
    """
    if isinstance(raw_data, str):
        lines = raw_data.strip().split("\n")
        if "\t" in raw_data:
            return [line.split("\t") for line in lines]
        if "," in raw_data:
            return [line.split(",") for line in lines]
        return [[cell for cell in line.split(" ") if cell.strip()] for line in lines]

    if isinstance(raw_data, list):
        if not raw_data:
            return [[]]
        if isinstance(raw_data[0], list):
            return [[str(cell) if cell else "" for cell in row] for row in raw_data]
        return [[str(cell) if cell else ""] for cell in raw_data]

    return [[str(raw_data)]]


def create_table_with_data(
    index: int,
    data: list[list[str]],
    headers: list[str] | None = None,
) -> tuple[list[Request], list[list[str]]]:
    """Build the insertTable request for a table sized to ``data``.

    Short rows are padded with empty strings to the width of the first row.

    Returns:
        Tuple of (requests, normalised data including the header row)

    Raises:
        ValueError: If the data is empty
    """
    full_data: list[Any] = [headers, *data] if headers else list(data)
    normalized = format_table_data(full_data)

    if not normalized or not normalized[0]:
        raise ValueError("Cannot create table with empty data")

    rows = len(normalized)
    cols = len(normalized[0])
    normalized = [row + [""] * (cols - len(row)) for row in normalized]

    return [create_insert_table_request(index, rows, cols)], normalized


def build_cell_population_requests(
    cell: TableCell, text: str, bold: bool = False
) -> list[Request]:
    """Requests that write ``text`` into one cell.

    Empty cells get the text at their insertion index; cells that already
    hold text get it appended before the cell's closing newline.
    """
    if cell.content.rstrip("\n"):
        index = cell.end_index - 1
    else:
        index = cell.insertion_index or cell.start_index + 1

    requests = [create_insert_text_request(index, text)]
    if bold:
        style_request = create_format_text_request(index, index + utf16_len(text), bold=True)
        if style_request is not None:
            requests.append(style_request)
    return requests


def build_table_population_requests(
    table_info: TableInfo, data: list[list[str]], bold_headers: bool = True
) -> list[Request]:
    """Requests that populate every non-empty cell from one table snapshot.

    The requests are emitted in reverse document order so that each write
    leaves the indices of the remaining (earlier) cells untouched, which
    makes the list safe to submit as a single batch.
    """
    cells = table_info.cells
    if not cells:
        logger.warning("No cell information found in table snapshot")
        return []

    planned: list[tuple[int, list[Request]]] = []
    for row_idx, row in enumerate(data):
        if row_idx >= len(cells):
            logger.warning(f"Data has more rows ({len(data)}) than table ({len(cells)})")
            break
        for col_idx, text in enumerate(row):
            if col_idx >= len(cells[row_idx]):
                logger.warning(
                    f"Data has more columns ({len(row)}) than table row {row_idx} "
                    f"({len(cells[row_idx])})"
                )
                break
            if not text:
                continue
            cell = cells[row_idx][col_idx]
            planned.append(
                (
                    cell.start_index,
                    build_cell_population_requests(cell, text, bold_headers and row_idx == 0),
                )
            )

    planned.sort(key=lambda item: item[0], reverse=True)
    return [request for _, requests in planned for request in requests]


def build_table_style_requests(
    table_start_index: int, style: TableStyleOptions
) -> list[Request]:
    """Build updateTableCellStyle requests for a table."""
    requests: list[Request] = []

    cell_style = TableCellStyle()
    fields: list[str] = []

    if style.border_width is not None:
        color = optional_color(style.border_color) if style.border_color else None
        for side in ("border_top", "border_bottom", "border_left", "border_right"):
            setattr(
                cell_style,
                side,
                TableCellBorder(width=pt_dimension(style.border_width), color=color, dash_style="SOLID"),
            )
        fields.extend(["borderTop", "borderBottom", "borderLeft", "borderRight"])

    if style.background_color is not None:
        cell_style.background_color = optional_color(style.background_color)
        fields.append("backgroundColor")

    if fields:
        requests.append(
            create_update_table_cell_style_request(table_start_index, cell_style, fields)
        )

    if style.header_background is not None:
        requests.append(
            create_update_table_cell_style_request(
                table_start_index,
                TableCellStyle(background_color=optional_color(style.header_background)),
                ["backgroundColor"],
                row_index=0,
                column_index=0,
                row_span=1,
                column_span=HEADER_COLUMN_SPAN,
            )
        )

    return requests


def extract_table_as_data(table_info: TableInfo) -> list[list[str]]:
    """Read a table snapshot back into a 2D list of stripped strings."""
    return [[cell.content.strip() for cell in row] for row in table_info.cells]


def find_table_by_content(
    tables: list[TableInfo], search_text: str, case_sensitive: bool = False
) -> int | None:
    """Index of the first table with a cell containing ``search_text``."""
    needle = search_text if case_sensitive else search_text.lower()
    for table in tables:
        for row in table.cells:
            for cell in row:
                haystack = cell.content if case_sensitive else cell.content.lower()
                if needle in haystack:
                    return table.index
    return None
