"""Validation manager.

Centralized, stateless validation for document edit operations. Every check
returns ``(is_valid, message)`` so callers can fail fast before any request
reaches the document service. Limits mirror the service's own constraints.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import asdict, dataclass
from typing import Any

ValidationResult = tuple[bool, str]

TABLE_DATA_FORMAT = "[['col1', 'col2'], ['row1col1', 'row1col2']]"

# Required fields for each batch operation type
REQUIRED_FIELDS: dict[str, tuple[str, ...]] = {
    "insert_text": ("index", "text"),
    "delete_text": ("start_index", "end_index"),
    "replace_text": ("start_index", "end_index", "text"),
    "format_text": ("start_index", "end_index"),
    "insert_table": ("index", "rows", "columns"),
    "insert_page_break": ("index",),
    "find_replace": ("find_text", "replace_text"),
}


@dataclass(frozen=True)
class ValidationRules:
    """Policy constants enforced client-side."""

    table_max_rows: int = 1000
    table_max_columns: int = 20
    document_id_pattern: str = r"^[a-zA-Z0-9_-]+$"
    document_id_min_length: int = 20
    max_text_length: int = 1_000_000
    font_size_range: tuple[int, int] = (1, 400)
    valid_header_footer_types: tuple[str, ...] = ("DEFAULT", "FIRST_PAGE_ONLY", "EVEN_PAGE")
    valid_section_types: tuple[str, ...] = ("header", "footer")
    valid_list_types: tuple[str, ...] = ("UNORDERED", "ORDERED")
    valid_element_types: tuple[str, ...] = ("table", "list", "page_break")


def _is_int(value: Any) -> bool:
    """True for real integers; bool is rejected."""
    return isinstance(value, int) and not isinstance(value, bool)


def _type_name(value: Any) -> str:
    return type(value).__name__


class ValidationManager:
    """Stateless rule checks for indices, tables, formatting and operations."""

    def __init__(self, rules: ValidationRules | None = None) -> None:
        self.rules = rules or ValidationRules()

    def validate_document_id(self, document_id: Any) -> ValidationResult:
        if not document_id:
            return False, "Document ID cannot be empty"
        if not isinstance(document_id, str):
            return False, f"Document ID must be a string, got {_type_name(document_id)}"
        if len(document_id) < self.rules.document_id_min_length:
            return False, "Document ID appears too short to be valid"
        if not re.match(self.rules.document_id_pattern, document_id):
            return False, "Document ID contains invalid characters"
        return True, ""

    def validate_table_data(self, table_data: Any) -> ValidationResult:
        """Check that table data is a non-empty rectangular grid of strings."""
        if not isinstance(table_data, list):
            if not table_data:
                return False, f"Table data cannot be empty. Required format: {TABLE_DATA_FORMAT}"
            return False, (
                f"Table data must be a list, got {_type_name(table_data)}. "
                f"Required format: {TABLE_DATA_FORMAT}"
            )
        if not table_data:
            return False, f"Table data cannot be empty. Required format: {TABLE_DATA_FORMAT}"

        non_list_rows = [i for i, row in enumerate(table_data) if not isinstance(row, list)]
        if non_list_rows:
            return False, f"All rows must be lists. Rows {non_list_rows} are not lists"

        empty_rows = [i for i, row in enumerate(table_data) if not row]
        if empty_rows:
            return False, f"Rows cannot be empty. Empty rows found at indices: {empty_rows}"

        col_counts = [len(row) for row in table_data]
        if len(set(col_counts)) > 1:
            return False, (
                "All rows must have the same number of columns. "
                f"Found column counts: {col_counts}"
            )

        rows = len(table_data)
        cols = col_counts[0]

        if rows > self.rules.table_max_rows:
            return False, f"Too many rows ({rows}). Maximum allowed: {self.rules.table_max_rows}"
        if cols > self.rules.table_max_columns:
            return False, (
                f"Too many columns ({cols}). Maximum allowed: {self.rules.table_max_columns}"
            )

        for row_idx, row in enumerate(table_data):
            for col_idx, cell in enumerate(row):
                if cell is None:
                    return False, (
                        f"Cell ({row_idx},{col_idx}) is None. All cells must be strings, "
                        "use empty string '' for empty cells."
                    )
                if not isinstance(cell, str):
                    return False, (
                        f"Cell ({row_idx},{col_idx}) is {_type_name(cell)}, not string. "
                        f"All cells must be strings. Value: {cell!r}"
                    )

        return True, f"Valid table data: {rows}x{cols} table format"

    def validate_text_formatting_params(
        self,
        bold: Any = None,
        italic: Any = None,
        underline: Any = None,
        font_size: Any = None,
        font_family: Any = None,
    ) -> ValidationResult:
        if all(p is None for p in (bold, italic, underline, font_size, font_family)):
            return False, "At least one formatting parameter must be provided"

        for value, name in ((bold, "bold"), (italic, "italic"), (underline, "underline")):
            if value is not None and not isinstance(value, bool):
                return False, (
                    f"{name} parameter must be boolean (True/False), got {_type_name(value)}"
                )

        if font_size is not None:
            if not _is_int(font_size):
                return False, f"font_size must be an integer, got {_type_name(font_size)}"
            min_size, max_size = self.rules.font_size_range
            if not min_size <= font_size <= max_size:
                return False, (
                    f"font_size must be between {min_size} and {max_size} points, "
                    f"got {font_size}"
                )

        if font_family is not None:
            if not isinstance(font_family, str):
                return False, f"font_family must be a string, got {_type_name(font_family)}"
            if not font_family.strip():
                return False, "font_family cannot be empty"

        return True, ""

    def validate_index(self, index: Any, context: str = "Index") -> ValidationResult:
        if not _is_int(index):
            return False, f"{context} must be an integer, got {_type_name(index)}"
        if index < 0:
            return False, (
                f"{context} {index} is negative. You MUST inspect the document "
                "structure first to get the proper insertion index."
            )
        return True, ""

    def validate_index_range(
        self,
        start_index: Any,
        end_index: Any = None,
        document_length: int | None = None,
    ) -> ValidationResult:
        if not _is_int(start_index):
            return False, f"start_index must be an integer, got {_type_name(start_index)}"
        if start_index < 0:
            return False, f"start_index cannot be negative, got {start_index}"

        if end_index is not None:
            if not _is_int(end_index):
                return False, f"end_index must be an integer, got {_type_name(end_index)}"
            if end_index <= start_index:
                return False, (
                    f"end_index ({end_index}) must be greater than start_index ({start_index})"
                )

        if document_length is not None:
            if start_index > document_length:
                return False, (
                    f"start_index ({start_index}) exceeds document length ({document_length})"
                )
            if end_index is not None and end_index > document_length:
                return False, (
                    f"end_index ({end_index}) exceeds document length ({document_length})"
                )

        return True, ""

    def validate_element_insertion_params(
        self,
        element_type: str,
        index: Any,
        additional_params: Mapping[str, Any] | None = None,
    ) -> ValidationResult:
        params = additional_params or {}
        if element_type not in self.rules.valid_element_types:
            valid_types = ", ".join(self.rules.valid_element_types)
            return False, f"Invalid element_type '{element_type}'. Must be one of: {valid_types}"

        if not _is_int(index) or index < 0:
            return False, f"index must be a non-negative integer, got {index}"

        if element_type == "table":
            rows = params.get("rows")
            columns = params.get("columns")
            if rows is None or columns is None:
                return False, "Table insertion requires 'rows' and 'columns' parameters"
            if not _is_int(rows) or not _is_int(columns):
                return False, "Table rows and columns must be integers"
            if rows <= 0 or columns <= 0:
                return False, "Table rows and columns must be positive integers"
            if rows > self.rules.table_max_rows:
                return False, f"Too many rows ({rows}). Maximum: {self.rules.table_max_rows}"
            if columns > self.rules.table_max_columns:
                return False, (
                    f"Too many columns ({columns}). Maximum: {self.rules.table_max_columns}"
                )

        if element_type == "list":
            list_type = params.get("list_type", "UNORDERED")
            if list_type not in self.rules.valid_list_types:
                valid_types = ", ".join(self.rules.valid_list_types)
                return False, f"list_type must be one of: {valid_types}, got '{list_type}'"

        return True, ""

    def validate_header_footer_params(
        self, section_type: str, header_footer_type: str
    ) -> ValidationResult:
        if section_type not in self.rules.valid_section_types:
            valid_types = ", ".join(self.rules.valid_section_types)
            return False, f"section_type must be one of: {valid_types}, got '{section_type}'"

        if header_footer_type not in self.rules.valid_header_footer_types:
            valid_types = ", ".join(self.rules.valid_header_footer_types)
            return False, (
                f"header_footer_type must be one of: {valid_types}, got '{header_footer_type}'"
            )

        return True, ""

    def validate_batch_operations(self, operations: Any) -> ValidationResult:
        if not operations:
            return False, "Operations list cannot be empty"
        if not isinstance(operations, list):
            return False, f"Operations must be a list, got {_type_name(operations)}"

        for i, op in enumerate(operations, start=1):
            if not isinstance(op, Mapping):
                return False, f"Operation {i} must be a dictionary, got {_type_name(op)}"
            if not op.get("type"):
                return False, f"Operation {i} missing required 'type' field"

        return True, ""

    def validate_operation(self, operation: Mapping[str, Any]) -> ValidationResult:
        """Check an operation against the required-field schedule."""
        op_type = operation.get("type")
        if not op_type:
            return False, "Missing 'type' field"
        if op_type not in REQUIRED_FIELDS:
            return False, f"Unsupported operation type: {op_type}"
        for field_name in REQUIRED_FIELDS[op_type]:
            if field_name not in operation:
                return False, f"Missing required field: {field_name}"
        return True, ""

    def validate_text_content(
        self, text: Any, max_length: int | None = None
    ) -> ValidationResult:
        if not isinstance(text, str):
            return False, f"Text must be a string, got {_type_name(text)}"
        max_len = max_length or self.rules.max_text_length
        if len(text) > max_len:
            return False, f"Text too long ({len(text)} characters). Maximum: {max_len}"
        return True, ""

    def get_validation_summary(self) -> dict[str, Any]:
        return {
            "constraints": asdict(self.rules),
            "supported_operations": {
                "table_operations": ["create_table", "populate_table"],
                "text_operations": ["insert_text", "format_text", "find_replace"],
                "element_operations": ["insert_table", "insert_list", "insert_page_break"],
                "header_footer_operations": ["update_header", "update_footer"],
            },
            "data_formats": {
                "table_data": f"2D list of strings: {TABLE_DATA_FORMAT}",
                "text_formatting": "Optional boolean/integer parameters for styling",
                "document_indices": "Non-negative integers for position specification",
            },
        }
