"""DocsEditClient - main interface for structural edits to Google Docs.

Each public method is one named operation: it validates its inputs, then
delegates to a manager or builds the requests itself, and always returns an
OperationResult. Validation failures never reach the network.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

from docedit.exceptions import DocEditError
from docedit.logging import clear_document_context, logger, set_document_context
from docedit.managers import (
    BatchOperationManager,
    HeaderFooterManager,
    TableOperationManager,
    ValidationManager,
)
from docedit.requests import (
    create_bullet_list_request,
    create_delete_range_request,
    create_find_replace_request,
    create_format_text_request,
    create_insert_image_request,
    create_insert_page_break_request,
    create_insert_table_request,
    create_insert_text_request,
    serialize_requests,
)
from docedit.structure import (
    analyze_document_complexity,
    get_next_paragraph_index,
    parse_document_structure,
    utf16_len,
)
from docedit.transport import GoogleDocsTransport
from docedit.types import OperationResult

if TYPE_CHECKING:
    from docedit.api_types import Request
    from docedit.config import Settings
    from docedit.structure import DocumentElement, DocumentStructure
    from docedit.tables import TableStyleOptions
    from docedit.transport import Transport

PREVIEW_LENGTH = 50


@contextmanager
def _operation_context(document_id: str, operation: str) -> Iterator[None]:
    set_document_context(document_id, operation)
    try:
        yield
    finally:
        clear_document_context()


class DocsEditClient:
    """Main client for structure-aware Google Docs edits."""

    def __init__(self, transport: Transport) -> None:
        self._transport = transport
        self.validation = ValidationManager()
        self.batch_manager = BatchOperationManager(transport, self.validation)
        self.table_manager = TableOperationManager(transport, self.validation)
        self.header_footer_manager = HeaderFooterManager(transport, self.validation)

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> DocsEditClient:
        """Build a client on the Google Docs API from DOCEDIT_* settings."""
        return cls(GoogleDocsTransport.from_settings(settings))

    async def close(self) -> None:
        await self._transport.close()

    def _check_document_id(self, document_id: str) -> OperationResult | None:
        is_valid, message = self.validation.validate_document_id(document_id)
        if not is_valid:
            return OperationResult.failure(message)
        return None

    async def _submit(
        self, document_id: str, requests: list[Request]
    ) -> dict[str, Any]:
        return await self._transport.batch_update(document_id, serialize_requests(requests))

    async def _get_structure(self, document_id: str) -> DocumentStructure:
        document = await self._transport.get_document(document_id)
        return parse_document_structure(document.raw)

    # ------------------------------------------------------------------
    # Manager-backed operations
    # ------------------------------------------------------------------

    async def create_table_with_data(
        self,
        document_id: str,
        table_data: list[list[str]],
        index: int,
        bold_headers: bool = True,
        style: TableStyleOptions | None = None,
    ) -> OperationResult:
        """Create a table at ``index`` and fill it with ``table_data``."""
        with _operation_context(document_id, "create_table_with_data"):
            if failure := self._check_document_id(document_id):
                return failure
            return await self.table_manager.create_and_populate_table(
                document_id, table_data, index, bold_headers=bold_headers, style=style
            )

    async def populate_existing_table(
        self,
        document_id: str,
        table_index: int,
        table_data: list[list[str]],
        clear_existing: bool = False,
    ) -> OperationResult:
        with _operation_context(document_id, "populate_existing_table"):
            if failure := self._check_document_id(document_id):
                return failure
            return await self.table_manager.populate_existing_table(
                document_id, table_index, table_data, clear_existing=clear_existing
            )

    async def debug_table_structure(
        self, document_id: str, table_index: int = 0
    ) -> OperationResult:
        with _operation_context(document_id, "debug_table_structure"):
            if failure := self._check_document_id(document_id):
                return failure
            return await self.table_manager.debug_table_structure(document_id, table_index)

    async def batch_update_doc(
        self, document_id: str, operations: list[Mapping[str, Any]]
    ) -> OperationResult:
        """Apply several operations atomically in one batchUpdate."""
        with _operation_context(document_id, "batch_update_doc"):
            if failure := self._check_document_id(document_id):
                return failure
            return await self.batch_manager.execute_batch_operations(
                document_id, operations
            )

    async def update_doc_headers_footers(
        self,
        document_id: str,
        section_type: str,
        content: str,
        header_footer_type: str = "DEFAULT",
    ) -> OperationResult:
        with _operation_context(document_id, "update_doc_headers_footers"):
            if failure := self._check_document_id(document_id):
                return failure
            return await self.header_footer_manager.update_header_footer_content(
                document_id, section_type, content, header_footer_type
            )

    async def create_header_footer(
        self,
        document_id: str,
        section_type: str,
        header_footer_type: str = "DEFAULT",
    ) -> OperationResult:
        with _operation_context(document_id, "create_header_footer"):
            if failure := self._check_document_id(document_id):
                return failure
            return await self.header_footer_manager.create_header_footer(
                document_id, section_type, header_footer_type
            )

    async def get_header_footer_info(self, document_id: str) -> OperationResult:
        with _operation_context(document_id, "get_header_footer_info"):
            if failure := self._check_document_id(document_id):
                return failure
            return await self.header_footer_manager.get_header_footer_info(document_id)

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------

    async def inspect_doc_structure(
        self, document_id: str, detailed: bool = False
    ) -> OperationResult:
        """Summarise a document, or list every element when ``detailed``.

        The summary includes ``safe_insertion_index``, the start of the first
        paragraph after the opening section break.
        """
        with _operation_context(document_id, "inspect_doc_structure"):
            if failure := self._check_document_id(document_id):
                return failure
            try:
                structure = await self._get_structure(document_id)
            except DocEditError as e:
                logger.error(f"Failed to inspect document: {e}")
                return OperationResult.failure(f"Failed to inspect document: {e}")

            metadata: dict[str, Any] = {"title": structure.title}
            metadata.update(analyze_document_complexity(structure).to_dict())
            metadata["safe_insertion_index"] = get_next_paragraph_index(structure, 0)

            if detailed:
                metadata["elements"] = [_describe_element(e) for e in structure.body]
                metadata["tables"] = [
                    {
                        "index": i,
                        "position": [t.start_index, t.end_index],
                        "dimensions": f"{t.rows}x{t.columns}",
                        "first_row": [cell.content.strip() for cell in t.cells[0]]
                        if t.cells
                        else [],
                    }
                    for i, t in enumerate(structure.tables)
                ]
                metadata["headers"] = list(structure.headers)
                metadata["footers"] = list(structure.footers)

            return OperationResult(
                success=True,
                message=(
                    f"Document '{structure.title}': {len(structure.body)} elements, "
                    f"{len(structure.tables)} table(s), length {structure.total_length}"
                ),
                metadata=metadata,
            )

    # ------------------------------------------------------------------
    # Single-shot edits
    # ------------------------------------------------------------------

    async def modify_doc_text(
        self,
        document_id: str,
        start_index: int,
        end_index: int | None = None,
        text: str | None = None,
        bold: bool | None = None,
        italic: bool | None = None,
        underline: bool | None = None,
        font_size: int | None = None,
        font_family: str | None = None,
    ) -> OperationResult:
        """Insert or replace text, then optionally format it.

        With ``text`` and ``end_index`` the range is replaced; with ``text``
        alone it is inserted at ``start_index``. Formatting applies to the new
        text, or to ``[start_index, end_index)`` when no text is given.
        """
        with _operation_context(document_id, "modify_doc_text"):
            if failure := self._check_document_id(document_id):
                return failure

            style = {
                "bold": bold,
                "italic": italic,
                "underline": underline,
                "font_size": font_size,
                "font_family": font_family,
            }
            has_formatting = any(v is not None for v in style.values())
            if text is None and not has_formatting:
                return OperationResult.failure(
                    "Must provide either 'text' to insert/replace, "
                    "or formatting parameters (bold, italic, underline, "
                    "font_size, font_family)"
                )

            is_valid, message = self.validation.validate_index_range(start_index, end_index)
            if not is_valid:
                return OperationResult.failure(message)
            if text is not None:
                is_valid, message = self.validation.validate_text_content(text)
                if not is_valid:
                    return OperationResult.failure(message)
            if has_formatting:
                is_valid, message = self.validation.validate_text_formatting_params(**style)
                if not is_valid:
                    return OperationResult.failure(message)

            requests: list[Request] = []
            changes: list[str] = []

            if text is not None:
                if end_index is not None:
                    requests.append(create_delete_range_request(start_index, end_index))
                    changes.append(f"replaced text {start_index}-{end_index}")
                else:
                    changes.append(f"inserted text at {start_index}")
                requests.append(create_insert_text_request(start_index, text))

            if has_formatting:
                if text is not None:
                    format_end = start_index + utf16_len(text)
                elif end_index is not None:
                    format_end = end_index
                else:
                    return OperationResult.failure(
                        "end_index is required when formatting existing text"
                    )
                format_request = create_format_text_request(
                    start_index, format_end, **style
                )
                if format_request is not None:
                    requests.append(format_request)
                    changes.append(f"formatted {start_index}-{format_end}")

            try:
                await self._submit(document_id, requests)
            except DocEditError as e:
                logger.error(f"Failed to modify text: {e}")
                return OperationResult.failure(f"Failed to modify text: {e}")

            return OperationResult(
                success=True,
                message=f"Modified document {document_id}: {', '.join(changes)}",
                metadata={"requests_count": len(requests)},
            )

    async def find_and_replace_doc(
        self,
        document_id: str,
        find_text: str,
        replace_text: str,
        match_case: bool = False,
    ) -> OperationResult:
        with _operation_context(document_id, "find_and_replace_doc"):
            if failure := self._check_document_id(document_id):
                return failure
            if not find_text:
                return OperationResult.failure("find_text cannot be empty")
            is_valid, message = self.validation.validate_text_content(replace_text)
            if not is_valid:
                return OperationResult.failure(message)

            try:
                response = await self._submit(
                    document_id,
                    [create_find_replace_request(find_text, replace_text, match_case)],
                )
            except DocEditError as e:
                logger.error(f"Failed to find and replace: {e}")
                return OperationResult.failure(f"Failed to find and replace: {e}")

            replies = response.get("replies") or [{}]
            occurrences = replies[0].get("replaceAllText", {}).get("occurrencesChanged", 0)
            return OperationResult(
                success=True,
                message=(
                    f"Replaced {occurrences} occurrence(s) of '{find_text}' "
                    f"with '{replace_text}'"
                ),
                metadata={"occurrences_changed": occurrences},
            )

    async def insert_doc_elements(
        self,
        document_id: str,
        element_type: str,
        index: int,
        rows: int | None = None,
        columns: int | None = None,
        list_type: str = "UNORDERED",
        text: str | None = None,
    ) -> OperationResult:
        """Insert a table, a list or a page break at ``index``.

        A list with ``text`` inserts that text as a new paragraph and bullets
        it; without text the paragraph at ``index`` is bulleted.
        """
        with _operation_context(document_id, "insert_doc_elements"):
            if failure := self._check_document_id(document_id):
                return failure

            is_valid, message = self.validation.validate_element_insertion_params(
                element_type,
                index,
                {"rows": rows, "columns": columns, "list_type": list_type},
            )
            if not is_valid:
                return OperationResult.failure(message)

            requests: list[Request] = []
            if element_type == "table":
                if rows is None or columns is None:
                    return OperationResult.failure(
                        "Table insertion requires 'rows' and 'columns' parameters"
                    )
                requests.append(create_insert_table_request(index, rows, columns))
                description = f"{rows}x{columns} table"
            elif element_type == "list":
                if text:
                    requests.append(create_insert_text_request(index, f"{text}\n"))
                    end = index + utf16_len(text)
                else:
                    end = index + 1
                requests.append(create_bullet_list_request(index, end, list_type))
                description = f"{list_type.lower()} list"
            else:
                requests.append(create_insert_page_break_request(index))
                description = "page break"

            try:
                await self._submit(document_id, requests)
            except DocEditError as e:
                logger.error(f"Failed to insert {element_type}: {e}")
                return OperationResult.failure(f"Failed to insert {element_type}: {e}")

            return OperationResult(
                success=True,
                message=f"Inserted {description} at index {index}",
                metadata={"element_type": element_type, "index": index},
            )

    async def insert_doc_image(
        self,
        document_id: str,
        image_uri: str,
        index: int,
        width: float | None = None,
        height: float | None = None,
    ) -> OperationResult:
        """Insert an image from a public URL, optionally sized in points."""
        with _operation_context(document_id, "insert_doc_image"):
            if failure := self._check_document_id(document_id):
                return failure
            if not image_uri or not image_uri.startswith(("http://", "https://")):
                return OperationResult.failure("image_uri must be a public http(s) URL")
            is_valid, message = self.validation.validate_index(index)
            if not is_valid:
                return OperationResult.failure(message)
            for name, value in (("width", width), ("height", height)):
                if value is not None and value <= 0:
                    return OperationResult.failure(f"{name} must be positive, got {value}")

            try:
                response = await self._submit(
                    document_id,
                    [create_insert_image_request(index, image_uri, width, height)],
                )
            except DocEditError as e:
                logger.error(f"Failed to insert image: {e}")
                return OperationResult.failure(f"Failed to insert image: {e}")

            replies = response.get("replies") or [{}]
            object_id = replies[0].get("insertInlineImage", {}).get("objectId")
            return OperationResult(
                success=True,
                message=f"Inserted image at index {index}",
                metadata={"object_id": object_id, "index": index},
            )


def _describe_element(element: DocumentElement) -> dict[str, Any]:
    info: dict[str, Any] = {
        "type": element.type,
        "start_index": element.start_index,
        "end_index": element.end_index,
    }
    if element.type == "paragraph":
        info["text"] = element.text[:PREVIEW_LENGTH]
    elif element.type == "table":
        info["rows"] = element.rows
        info["columns"] = element.columns
    return info
