"""Header/footer manager.

Finds the header or footer section a caller means and rewrites its first
paragraph. Every request carries the section's segment ID, since header and
footer indices live in their own index space.
"""

from __future__ import annotations

from typing import Any

from docedit.api_types import DocumentStyle, Request
from docedit.exceptions import DocEditError
from docedit.logging import logger
from docedit.managers.validation_manager import ValidationManager
from docedit.requests import (
    create_delete_range_request,
    create_footer_request,
    create_header_request,
    create_insert_text_request,
    create_update_document_style_request,
    serialize_requests,
)
from docedit.structure import SegmentInfo, parse_document_structure
from docedit.transport import Transport
from docedit.types import OperationResult

# Section ID substrings tried, in order, when no exact type match exists
TARGET_PATTERNS: dict[str, tuple[str, ...]] = {
    "DEFAULT": ("default", "kix"),
    "FIRST_PAGE": ("first", "firstpage"),
    "FIRST_PAGE_ONLY": ("first", "firstpage"),
    "EVEN_PAGE": ("even", "evenpage"),
}

# Caller-facing variant -> API header/footer type
API_TYPES = {
    "DEFAULT": "DEFAULT",
    "FIRST_PAGE": "FIRST_PAGE",
    "FIRST_PAGE_ONLY": "FIRST_PAGE",
    "EVEN_PAGE": "EVEN_PAGE",
}

# Document style flag that makes a non-default variant show up
VARIANT_FLAGS = {
    "FIRST_PAGE": "use_first_page_header_footer",
    "EVEN_PAGE": "use_even_page_header_footer",
}

_STYLE_ID_PREFIX = {"DEFAULT": "default", "FIRST_PAGE": "firstPage", "EVEN_PAGE": "evenPage"}


def _style_id_key(section_type: str, header_footer_type: str) -> str | None:
    """Document style key naming the section of a variant, e.g. ``defaultHeaderId``."""
    prefix = _STYLE_ID_PREFIX.get(API_TYPES.get(header_footer_type, ""))
    if prefix is None:
        return None
    return f"{prefix}{section_type.capitalize()}Id"


class HeaderFooterManager:
    """Reads, creates and rewrites document headers and footers."""

    def __init__(
        self,
        transport: Transport,
        validation_manager: ValidationManager | None = None,
    ) -> None:
        self.transport = transport
        self.validation_manager = validation_manager or ValidationManager()

    async def update_header_footer_content(
        self,
        document_id: str,
        section_type: str,
        content: str,
        header_footer_type: str = "DEFAULT",
    ) -> OperationResult:
        """Replace the text of a header or footer.

        Args:
            document_id: Target document
            section_type: "header" or "footer"
            content: New text for the section's first paragraph
            header_footer_type: "DEFAULT", "FIRST_PAGE_ONLY" or "EVEN_PAGE"

        Returns:
            OperationResult; fails without writing when no section exists
        """
        logger.info(f"Updating {section_type} in document {document_id}")

        is_valid, message = self.validation_manager.validate_header_footer_params(
            section_type, header_footer_type
        )
        if not is_valid:
            return OperationResult.failure(message)
        is_valid, message = self.validation_manager.validate_text_content(content)
        if not is_valid:
            return OperationResult.failure(message)

        try:
            document = await self.transport.get_document(document_id)
            structure = parse_document_structure(document.raw)
            sections = structure.headers if section_type == "header" else structure.footers
            target = self._find_target_section(
                sections, structure.document_style, section_type, header_footer_type
            )
            if target is None:
                return OperationResult.failure(
                    f"No {section_type} found in document. "
                    f"Please create a {section_type} first."
                )

            requests = self._build_replacement_requests(target, content)
            if not requests:
                return OperationResult.failure(
                    f"Could not find content structure in {section_type} to update"
                )

            await self.transport.batch_update(document_id, serialize_requests(requests))
        except DocEditError as e:
            logger.error(f"Failed to update {section_type}: {e}")
            return OperationResult.failure(f"Failed to update {section_type}: {e}")

        return OperationResult(
            success=True,
            message=f"Updated {section_type} content in document {document_id}",
            metadata={"section_id": target.section_id, "section_type": section_type},
        )

    def _find_target_section(
        self,
        sections: dict[str, SegmentInfo],
        document_style: dict[str, Any],
        section_type: str,
        header_footer_type: str,
    ) -> SegmentInfo | None:
        """Resolve the section for a variant.

        Order: exact type match (the section's own type, then the document
        style's ID for that variant), then ID substring patterns, then the
        first section of the kind.
        """
        if not sections:
            return None

        for section in sections.values():
            if section.type == header_footer_type:
                return section

        style_key = _style_id_key(section_type, header_footer_type)
        style_id = document_style.get(style_key) if style_key else None
        if style_id in sections:
            return sections[style_id]

        for pattern in TARGET_PATTERNS.get(header_footer_type, ()):
            for section_id, section in sections.items():
                if pattern in section_id.lower():
                    return section

        return next(iter(sections.values()))

    def _build_replacement_requests(
        self, section: SegmentInfo, new_content: str
    ) -> list[Request]:
        first_para = next((e for e in section.content if "paragraph" in e), None)
        if first_para is None:
            return []

        start_index = first_para.get("startIndex", 0) or 0
        end_index = first_para.get("endIndex", 0) or 0
        segment_id = section.section_id

        requests: list[Request] = []
        # Keep the paragraph's trailing newline
        if end_index - 1 > start_index:
            requests.append(
                create_delete_range_request(start_index, end_index - 1, segment_id)
            )
        requests.append(create_insert_text_request(start_index, new_content, segment_id))
        return requests

    async def get_header_footer_info(self, document_id: str) -> OperationResult:
        """Summarise every header and footer of a document."""
        try:
            document = await self.transport.get_document(document_id)
        except DocEditError as e:
            logger.error(f"Failed to get header/footer info: {e}")
            return OperationResult.failure(f"Failed to get header/footer info: {e}")

        structure = parse_document_structure(document.raw)

        def describe(section: SegmentInfo) -> dict[str, Any]:
            return {
                "content_preview": section.content_preview,
                "element_count": section.element_count,
                "start_index": section.start_index,
                "end_index": section.end_index,
            }

        return OperationResult(
            success=True,
            message=(
                f"Document has {len(structure.headers)} header(s) "
                f"and {len(structure.footers)} footer(s)"
            ),
            metadata={
                "headers": {k: describe(v) for k, v in structure.headers.items()},
                "footers": {k: describe(v) for k, v in structure.footers.items()},
                "has_headers": bool(structure.headers),
                "has_footers": bool(structure.footers),
            },
        )

    async def create_header_footer(
        self,
        document_id: str,
        section_type: str,
        header_footer_type: str = "DEFAULT",
    ) -> OperationResult:
        """Create a header or footer of the given variant.

        FIRST_PAGE_ONLY is sent as FIRST_PAGE. Non-default variants also switch
        on their document style flag in the same batch. The new section ID is
        returned in the metadata.
        """
        if section_type not in self.validation_manager.rules.valid_section_types:
            return OperationResult.failure("section_type must be 'header' or 'footer'")

        api_type = API_TYPES.get(header_footer_type)
        if api_type is None:
            return OperationResult.failure(
                "header_footer_type must be 'DEFAULT', 'FIRST_PAGE', or 'EVEN_PAGE'"
            )

        if section_type == "header":
            request = create_header_request(api_type)
        else:
            request = create_footer_request(api_type)
        requests = [request]

        flag = VARIANT_FLAGS.get(api_type)
        if flag:
            field_mask = DocumentStyle.model_fields[flag].alias
            requests.append(
                create_update_document_style_request(
                    DocumentStyle(**{flag: True}), [field_mask]
                )
            )

        try:
            response = await self.transport.batch_update(
                document_id, serialize_requests(requests)
            )
        except DocEditError as e:
            if "already exists" in str(e).lower():
                return OperationResult.failure(
                    f"A {section_type} of type {api_type} already exists in the document"
                )
            logger.error(f"Failed to create {section_type}: {e}")
            return OperationResult.failure(f"Failed to create {section_type}: {e}")

        replies = response.get("replies") or [{}]
        reply = replies[0].get(request.request_type, {})
        section_id = reply.get(f"{section_type}Id")

        return OperationResult(
            success=True,
            message=f"Created {section_type} with type {api_type}",
            metadata={"section_id": section_id, "type": api_type},
        )
