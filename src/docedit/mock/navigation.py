"""Navigation helpers for finding elements in a raw document dict."""

from __future__ import annotations

from typing import Any

from docedit.mock.exceptions import ValidationError

Content = list[dict[str, Any]]


def get_root(document: dict[str, Any]) -> dict[str, Any]:
    """Return the dict that holds body, headers and footers.

    Documents fetched with tabs keep them under the first tab's documentTab.
    """
    if "body" in document:
        return document
    tabs = document.get("tabs") or []
    if tabs:
        document_tab: dict[str, Any] = tabs[0].setdefault("documentTab", {})
        return document_tab
    raise ValidationError("Document has no body")


def get_segment(
    document: dict[str, Any], segment_id: str | None
) -> tuple[dict[str, Any], bool]:
    """Get a segment by ID.

    Returns:
        Tuple of (segment, is_body)

    Raises:
        ValidationError: If the segment does not exist
    """
    root = get_root(document)
    if segment_id is None:
        body = root.get("body")
        if not body:
            raise ValidationError("Document has no body")
        return body, True

    for key in ("headers", "footers", "footnotes"):
        segments = root.get(key) or {}
        if segment_id in segments:
            segment: dict[str, Any] = segments[segment_id]
            return segment, False

    raise ValidationError(f"Segment not found: {segment_id}")


def iter_segments(document: dict[str, Any]) -> list[tuple[dict[str, Any], bool]]:
    """All segments of the document as (segment, is_body) pairs."""
    root = get_root(document)
    segments: list[tuple[dict[str, Any], bool]] = []
    if root.get("body"):
        segments.append((root["body"], True))
    for key in ("headers", "footers", "footnotes"):
        segments.extend((segment, False) for segment in (root.get(key) or {}).values())
    return segments


def find_paragraph(content: Content, index: int) -> tuple[Content, int] | None:
    """Find the paragraph whose range contains ``index``.

    Descends into table cells.

    Returns:
        Tuple of (containing content list, position in it), or None when the
        index falls on a structural marker or outside the content
    """
    for pos, element in enumerate(content):
        start = element.get("startIndex", 0)
        end = element.get("endIndex", 0)
        if not start <= index < end:
            continue
        if "paragraph" in element:
            return content, pos
        if "table" in element:
            for row in element["table"].get("tableRows", []):
                for cell in row.get("tableCells", []):
                    found = find_paragraph(cell.get("content", []), index)
                    if found is not None:
                        return found
        return None
    return None


def find_table(content: Content, start_index: int) -> dict[str, Any] | None:
    """Find the table element that starts at ``start_index``."""
    for element in content:
        if "table" not in element:
            continue
        if element.get("startIndex") == start_index:
            return element
        for row in element["table"].get("tableRows", []):
            for cell in row.get("tableCells", []):
                nested = find_table(cell.get("content", []), start_index)
                if nested is not None:
                    return nested
    return None


def iter_paragraphs(content: Content) -> list[dict[str, Any]]:
    """All paragraph elements in a content list, table cells included."""
    paragraphs: list[dict[str, Any]] = []
    for element in content:
        if "paragraph" in element:
            paragraphs.append(element)
        elif "table" in element:
            for row in element["table"].get("tableRows", []):
                for cell in row.get("tableCells", []):
                    paragraphs.extend(iter_paragraphs(cell.get("content", [])))
    return paragraphs
