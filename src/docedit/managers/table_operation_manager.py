"""Table operation manager.

High-level table operations that orchestrate several document reads and
writes. Cell indices move after every write, so each cell is resolved
against a fresh fetch immediately before it is written. Population is
best-effort: a failing cell is logged and counted, and the rest carry on.
"""

from __future__ import annotations

from typing import Any

from docedit.api_types import Request
from docedit.exceptions import DocEditError, ResolutionError
from docedit.logging import logger
from docedit.managers.validation_manager import ValidationManager
from docedit.requests import (
    create_delete_range_request,
    create_insert_text_request,
    serialize_requests,
)
from docedit.structure import TableCell, TableInfo, find_tables, parse_document_structure
from docedit.tables import (
    TableStyleOptions,
    build_cell_population_requests,
    build_table_style_requests,
    create_table_with_data,
)
from docedit.transport import Transport
from docedit.types import OperationResult


def locate_new_table(tables: list[TableInfo], index: int) -> TableInfo | None:
    """The table created by an insert at ``index``.

    That is the first table starting at or after the insertion index, else
    the last table in the document.
    """
    for table in tables:
        if table.start_index >= index:
            return table
    return tables[-1] if tables else None


def _count_non_empty(table_data: list[list[str]]) -> int:
    return sum(1 for row in table_data for text in row if text)


class TableOperationManager:
    """Creates, fills and inspects tables one verified cell at a time."""

    def __init__(
        self,
        transport: Transport,
        validation_manager: ValidationManager | None = None,
    ) -> None:
        self.transport = transport
        self.validation_manager = validation_manager or ValidationManager()

    async def _get_tables(self, document_id: str) -> list[TableInfo]:
        document = await self.transport.get_document(document_id)
        return find_tables(parse_document_structure(document.raw))

    async def create_and_populate_table(
        self,
        document_id: str,
        table_data: list[list[str]],
        index: int,
        bold_headers: bool = True,
        style: TableStyleOptions | None = None,
    ) -> OperationResult:
        """Insert an empty table sized to ``table_data`` and fill it cell by cell.

        Args:
            document_id: Target document
            table_data: Rectangular 2D list of strings; row 0 is the header row
            index: Insertion index (from inspecting the document structure)
            bold_headers: Bold the text of row 0
            style: Optional borders and background colors

        Returns:
            OperationResult with rows, columns, populated_cells, failed_cells
            and table_index metadata
        """
        rows = len(table_data) if isinstance(table_data, list) else 0
        cols = len(table_data[0]) if rows and isinstance(table_data[0], list) else 0
        logger.debug(f"Creating table at index {index}, dimensions: {rows}x{cols}")

        is_valid, message = self.validation_manager.validate_table_data(table_data)
        if not is_valid:
            return OperationResult.failure(f"Invalid table data: {message}")
        is_valid, message = self.validation_manager.validate_index(index, "Table index")
        if not is_valid:
            return OperationResult.failure(message)

        try:
            requests, normalized = create_table_with_data(index, table_data)
            await self.transport.batch_update(document_id, serialize_requests(requests))

            table = locate_new_table(await self._get_tables(document_id), index)
            if table is None:
                return OperationResult.failure("Could not find table after creation")

            if style is not None:
                style_requests = build_table_style_requests(table.start_index, style)
                if style_requests:
                    await self.transport.batch_update(
                        document_id, serialize_requests(style_requests)
                    )

            populated, failed = await self._populate_cells(
                document_id, table.index, normalized, bold_headers=bold_headers
            )
        except DocEditError as e:
            logger.error(f"Failed to create and populate table: {e}")
            return OperationResult.failure(f"Table creation failed: {e}")

        total = _count_non_empty(normalized)
        return OperationResult(
            success=True,
            message=(
                f"Created {rows}x{cols} table at index {table.start_index} "
                f"and populated {populated} of {total} cells"
            ),
            metadata={
                "rows": rows,
                "columns": cols,
                "populated_cells": populated,
                "failed_cells": failed,
                "table_index": table.index,
            },
        )

    async def populate_existing_table(
        self,
        document_id: str,
        table_index: int,
        table_data: list[list[str]],
        clear_existing: bool = False,
    ) -> OperationResult:
        """Write ``table_data`` into an existing table.

        With ``clear_existing`` a cell's current text is replaced; otherwise
        new text is appended after it.
        """
        is_valid, message = self.validation_manager.validate_index(
            table_index, "Table index"
        )
        if not is_valid:
            return OperationResult.failure(message)

        is_valid, message = self.validation_manager.validate_table_data(table_data)
        if not is_valid:
            return OperationResult.failure(f"Invalid table data: {message}")

        try:
            tables = await self._get_tables(document_id)
            if not 0 <= table_index < len(tables):
                return OperationResult.failure(
                    f"Table index {table_index} not found. "
                    f"Document has {len(tables)} tables"
                )

            table = tables[table_index]
            data_rows = len(table_data)
            data_cols = len(table_data[0])
            if data_rows > table.rows or data_cols > table.columns:
                return OperationResult.failure(
                    f"Data ({data_rows}x{data_cols}) exceeds table dimensions "
                    f"({table.rows}x{table.columns})"
                )

            populated, failed = await self._populate_cells(
                document_id, table_index, table_data, clear_existing=clear_existing
            )
        except DocEditError as e:
            logger.error(f"Failed to populate existing table: {e}")
            return OperationResult.failure(f"Failed to populate existing table: {e}")

        total = _count_non_empty(table_data)
        return OperationResult(
            success=True,
            message=f"Table {table_index}: populated {populated} of {total} cells",
            metadata={
                "rows": table.rows,
                "columns": table.columns,
                "populated_cells": populated,
                "failed_cells": failed,
                "table_index": table_index,
            },
        )

    async def _populate_cells(
        self,
        document_id: str,
        table_index: int,
        table_data: list[list[str]],
        bold_headers: bool = False,
        clear_existing: bool = False,
    ) -> tuple[int, int]:
        """Fill non-empty cells in row-major order.

        Returns:
            Tuple of (populated, failed) cell counts
        """
        populated = 0
        failed = 0

        for row_idx, row in enumerate(table_data):
            logger.debug(f"Processing row {row_idx}: {len(row)} cells")
            for col_idx, text in enumerate(row):
                if not text:
                    continue
                try:
                    await self._populate_single_cell(
                        document_id,
                        table_index,
                        row_idx,
                        col_idx,
                        text,
                        bold=bold_headers and row_idx == 0,
                        clear_existing=clear_existing,
                    )
                except DocEditError as e:
                    failed += 1
                    logger.warning(f"Failed to populate cell ({row_idx},{col_idx}): {e}")
                    continue
                populated += 1
                logger.debug(f"Populated cell ({row_idx},{col_idx})")

        return populated, failed

    async def _populate_single_cell(
        self,
        document_id: str,
        table_index: int,
        row_idx: int,
        col_idx: int,
        text: str,
        bold: bool = False,
        clear_existing: bool = False,
    ) -> None:
        cell = await self._resolve_cell(document_id, table_index, row_idx, col_idx)

        requests: list[Request]
        if clear_existing and cell.content.rstrip("\n"):
            requests = [
                create_delete_range_request(cell.insertion_index, cell.end_index - 1),
                create_insert_text_request(cell.insertion_index, text),
            ]
        else:
            requests = build_cell_population_requests(cell, text, bold)

        await self.transport.batch_update(document_id, serialize_requests(requests))

    async def _resolve_cell(
        self, document_id: str, table_index: int, row_idx: int, col_idx: int
    ) -> TableCell:
        """Fetch the document and return the current snapshot of one cell."""
        tables = await self._get_tables(document_id)
        if table_index >= len(tables):
            raise ResolutionError(f"Table {table_index} no longer exists")

        cells = tables[table_index].cells
        if row_idx >= len(cells) or col_idx >= len(cells[row_idx]):
            raise ResolutionError(f"Cell ({row_idx},{col_idx}) out of bounds")
        return cells[row_idx][col_idx]

    async def debug_table_structure(
        self, document_id: str, table_index: int = 0
    ) -> OperationResult:
        """Report every cell's position, bounds, insertion index and content."""
        is_valid, message = self.validation_manager.validate_index(
            table_index, "Table index"
        )
        if not is_valid:
            return OperationResult.failure(message)

        try:
            tables = await self._get_tables(document_id)
        except DocEditError as e:
            return OperationResult.failure(f"Failed to read table structure: {e}")

        if not 0 <= table_index < len(tables):
            return OperationResult.failure(
                f"Table index {table_index} not found. Document has {len(tables)} tables"
            )

        table = tables[table_index]
        cells: list[dict[str, Any]] = [
            {
                "position": f"({cell.row},{cell.column})",
                "range": f"{cell.start_index}-{cell.end_index}",
                "insertion_index": cell.insertion_index,
                "current_content": cell.content,
                "content_length": len(cell.content),
            }
            for row in table.cells
            for cell in row
        ]
        return OperationResult(
            success=True,
            message=(
                f"Table {table_index}: {table.rows}x{table.columns} "
                f"at {table.start_index}-{table.end_index}"
            ),
            metadata={
                "table_index": table_index,
                "dimensions": f"{table.rows}x{table.columns}",
                "range": f"{table.start_index}-{table.end_index}",
                "cells": cells,
            },
        )
