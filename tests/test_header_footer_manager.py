"""Tests for HeaderFooterManager."""

from __future__ import annotations

import pytest

from docedit.managers import HeaderFooterManager
from docedit.mock import MockTransport, make_document
from docedit.structure import SegmentInfo, parse_document_structure


def _section(section_id: str, section_type: str | None = None) -> SegmentInfo:
    return SegmentInfo(
        section_id=section_id,
        start_index=0,
        end_index=1,
        content_preview="(empty)",
        element_count=1,
        type=section_type,
    )


async def _header_text(transport: MockTransport, header_id: str) -> str:
    document = await transport.get_document(transport.document_id)
    structure = parse_document_structure(document.raw)
    section = structure.headers[header_id]
    return section.content_preview


@pytest.mark.asyncio
async def test_update_header_content() -> None:
    """Test the first paragraph is replaced within the header's segment."""
    transport = MockTransport(make_document(["Body"], headers={"kix.hdr1": "Old title"}))
    manager = HeaderFooterManager(transport)

    result = await manager.update_header_footer_content(
        transport.document_id, "header", "New Title"
    )

    assert result.success, result.message
    assert result.metadata == {"section_id": "kix.hdr1", "section_type": "header"}
    assert transport.sent == [
        [
            {
                "deleteContentRange": {
                    "range": {"startIndex": 0, "endIndex": 9, "segmentId": "kix.hdr1"}
                }
            },
            {
                "insertText": {
                    "location": {"index": 0, "segmentId": "kix.hdr1"},
                    "text": "New Title",
                }
            },
        ]
    ]
    assert await _header_text(transport, "kix.hdr1") == "New Title\n"


@pytest.mark.asyncio
async def test_update_empty_footer_skips_delete() -> None:
    """Test an empty section only gets an insert."""
    transport = MockTransport(make_document(["Body"], footers={"kix.ftr1": ""}))
    manager = HeaderFooterManager(transport)

    result = await manager.update_header_footer_content(
        transport.document_id, "footer", "Page footer"
    )

    assert result.success, result.message
    assert len(transport.sent[0]) == 1
    assert "insertText" in transport.sent[0][0]


@pytest.mark.asyncio
async def test_update_without_header_fails() -> None:
    """Test a missing header is reported without any write."""
    transport = MockTransport(make_document(["Body"]))
    manager = HeaderFooterManager(transport)

    result = await manager.update_header_footer_content(
        transport.document_id, "header", "Title"
    )

    assert not result.success
    assert result.message == (
        "No header found in document. Please create a header first."
    )
    assert transport.sent == []


@pytest.mark.asyncio
async def test_update_invalid_section_type() -> None:
    """Test invalid section types are rejected before reading."""
    transport = MockTransport(make_document(["Body"]))
    result = await HeaderFooterManager(transport).update_header_footer_content(
        transport.document_id, "sidebar", "x"
    )

    assert not result.success
    assert "section_type must be one of" in result.message
    assert transport.get_count == 0


def test_find_target_section_order() -> None:
    """Test section resolution: own type, style ID, ID pattern, then first."""
    manager = HeaderFooterManager(MockTransport(make_document()))
    find = manager._find_target_section

    typed = {"kix.a": _section("kix.a"), "kix.b": _section("kix.b", "EVEN_PAGE")}
    assert find(typed, {}, "header", "EVEN_PAGE").section_id == "kix.b"

    styled = {"kix.a": _section("kix.a"), "kix.b": _section("kix.b")}
    style = {"firstPageHeaderId": "kix.b"}
    assert find(styled, style, "header", "FIRST_PAGE_ONLY").section_id == "kix.b"

    named = {"h.1": _section("h.1"), "h.even": _section("h.even")}
    assert find(named, {}, "header", "EVEN_PAGE").section_id == "h.even"

    assert find(named, {}, "header", "FIRST_PAGE_ONLY").section_id == "h.1"
    assert find({}, {}, "header", "DEFAULT") is None


@pytest.mark.asyncio
async def test_create_header_then_update() -> None:
    """Test creating a header returns its ID and the header can be filled."""
    transport = MockTransport(make_document(["Body"]))
    manager = HeaderFooterManager(transport)

    created = await manager.create_header_footer(transport.document_id, "header")
    assert created.success, created.message
    header_id = created.metadata["section_id"]
    assert header_id.startswith("kix.")
    assert created.metadata["type"] == "DEFAULT"

    updated = await manager.update_header_footer_content(
        transport.document_id, "header", "Quarterly report"
    )
    assert updated.success, updated.message
    assert updated.metadata["section_id"] == header_id
    assert await _header_text(transport, header_id) == "Quarterly report\n"


@pytest.mark.asyncio
async def test_create_duplicate_header() -> None:
    """Test creating a second default header fails with a clear message."""
    transport = MockTransport(make_document(["Body"], headers={"kix.hdr1": "Title"}))
    result = await HeaderFooterManager(transport).create_header_footer(
        transport.document_id, "header", "DEFAULT"
    )

    assert not result.success
    assert result.message == "A header of type DEFAULT already exists in the document"


@pytest.mark.asyncio
async def test_create_first_page_only_footer() -> None:
    """Test FIRST_PAGE_ONLY is sent as FIRST_PAGE with its style flag."""
    transport = MockTransport(make_document(["Body"]))
    result = await HeaderFooterManager(transport).create_header_footer(
        transport.document_id, "footer", "FIRST_PAGE_ONLY"
    )

    assert result.success, result.message
    assert transport.sent[0] == [
        {"createFooter": {"type": "FIRST_PAGE"}},
        {
            "updateDocumentStyle": {
                "documentStyle": {"useFirstPageHeaderFooter": True},
                "fields": "useFirstPageHeaderFooter",
            }
        },
    ]
    assert result.metadata["type"] == "FIRST_PAGE"

    document = await transport.get_document(transport.document_id)
    style = document.raw["documentStyle"]
    assert style["firstPageFooterId"] == result.metadata["section_id"]
    assert style["useFirstPageHeaderFooter"] is True


@pytest.mark.asyncio
async def test_create_invalid_arguments() -> None:
    """Test invalid section types and variants are rejected without writes."""
    transport = MockTransport(make_document(["Body"]))
    manager = HeaderFooterManager(transport)

    bad_section = await manager.create_header_footer(transport.document_id, "sidebar")
    bad_type = await manager.create_header_footer(
        transport.document_id, "header", "ODD_PAGE"
    )

    assert bad_section.message == "section_type must be 'header' or 'footer'"
    assert bad_type.message == (
        "header_footer_type must be 'DEFAULT', 'FIRST_PAGE', or 'EVEN_PAGE'"
    )
    assert transport.sent == []


@pytest.mark.asyncio
async def test_get_header_footer_info() -> None:
    """Test the header and footer summary."""
    transport = MockTransport(
        make_document(["Body"], headers={"kix.hdr1": "Title"}, footers={})
    )
    result = await HeaderFooterManager(transport).get_header_footer_info(
        transport.document_id
    )

    assert result.success
    assert result.metadata["has_headers"] is True
    assert result.metadata["has_footers"] is False
    assert result.metadata["headers"]["kix.hdr1"] == {
        "content_preview": "Title\n",
        "element_count": 1,
        "start_index": 0,
        "end_index": 6,
    }
    assert result.message == "Document has 1 header(s) and 0 footer(s)"
