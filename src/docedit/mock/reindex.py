"""Centralized reindex and normalize passes for document segments.

After each request handler modifies document content, these functions are
called to fix all indices and normalize paragraphs. Handlers only modify
content and never shift indices themselves.
"""

from __future__ import annotations

import copy
from typing import Any

from docedit.mock.exceptions import ValidationError
from docedit.mock.navigation import Content, iter_segments
from docedit.structure import utf16_len


def element_size(paragraph_element: dict[str, Any]) -> int:
    """UTF-16 size of a paragraph element; non-text elements occupy one unit."""
    if "textRun" in paragraph_element:
        return utf16_len(paragraph_element["textRun"].get("content", ""))
    return 1


def _ends_with_newline(paragraph: dict[str, Any]) -> bool:
    elements = paragraph.get("elements", [])
    if not elements or "textRun" not in elements[-1]:
        return False
    content: str = elements[-1]["textRun"].get("content", "")
    return content.endswith("\n")


def _split_keep_newlines(text: str) -> list[str]:
    parts: list[str] = []
    current = ""
    for ch in text:
        current += ch
        if ch == "\n":
            parts.append(current)
            current = ""
    if current:
        parts.append(current)
    return parts


def split_paragraph(content: Content, pos: int) -> int:
    """Split the paragraph at ``pos`` so that every newline ends a paragraph.

    New paragraphs copy the paragraph style and bullet of the original.

    Returns:
        Number of paragraphs the original became
    """
    element = content[pos]
    paragraph = element["paragraph"]

    groups: list[list[dict[str, Any]]] = [[]]
    for pe in paragraph.get("elements", []):
        if "textRun" not in pe:
            groups[-1].append(pe)
            continue
        style = pe["textRun"].get("textStyle", {})
        for part in _split_keep_newlines(pe["textRun"].get("content", "")):
            groups[-1].append(
                {"textRun": {"content": part, "textStyle": copy.deepcopy(style)}}
            )
            if part.endswith("\n"):
                groups.append([])
    if not groups[-1]:
        groups.pop()

    if len(groups) <= 1:
        paragraph["elements"] = groups[0] if groups else []
        return 1

    replacements = []
    for group in groups:
        new_paragraph: dict[str, Any] = {
            "elements": group,
            "paragraphStyle": copy.deepcopy(paragraph.get("paragraphStyle", {})),
        }
        if "bullet" in paragraph:
            new_paragraph["bullet"] = copy.deepcopy(paragraph["bullet"])
        replacements.append({"paragraph": new_paragraph})
    content[pos : pos + 1] = replacements
    return len(replacements)


def normalize_content(content: Content) -> None:
    """Normalize paragraphs in a content list, table cells included.

    1. Drop empty text runs and paragraphs left with no elements
    2. Merge a paragraph that lost its trailing newline into the next one
    3. Split paragraphs at every newline
    """
    for element in content:
        if "paragraph" in element:
            paragraph = element["paragraph"]
            paragraph["elements"] = [
                pe
                for pe in paragraph.get("elements", [])
                if "textRun" not in pe or pe["textRun"].get("content")
            ]
        elif "table" in element:
            for row in element["table"].get("tableRows", []):
                for cell in row.get("tableCells", []):
                    normalize_content(cell.setdefault("content", []))

    content[:] = [
        e for e in content if "paragraph" not in e or e["paragraph"].get("elements")
    ]

    pos = 0
    while pos < len(content):
        element = content[pos]
        if "paragraph" in element and not _ends_with_newline(element["paragraph"]):
            following = content[pos + 1] if pos + 1 < len(content) else None
            if following is None or "paragraph" not in following:
                raise ValidationError(
                    "Invalid deletion range. Cannot delete the newline "
                    "that ends a segment, table cell or the paragraph before a table"
                )
            element["paragraph"]["elements"].extend(following["paragraph"]["elements"])
            del content[pos + 1]
            continue
        pos += 1

    pos = 0
    while pos < len(content):
        if "paragraph" in content[pos]:
            pos += split_paragraph(content, pos)
        else:
            pos += 1


def reindex_content(content: Content, current_idx: int) -> int:
    """Assign indices to a content list starting at ``current_idx``.

    Returns:
        The index after the last element
    """
    for element in content:
        if "sectionBreak" in element:
            element["startIndex"] = current_idx
            current_idx += 1
            element["endIndex"] = current_idx
        elif "paragraph" in element:
            element["startIndex"] = current_idx
            for pe in element["paragraph"].get("elements", []):
                size = element_size(pe)
                pe["startIndex"] = current_idx
                pe["endIndex"] = current_idx + size
                current_idx += size
            element["endIndex"] = current_idx
        elif "table" in element:
            element["startIndex"] = current_idx
            current_idx = _reindex_table(element["table"], current_idx)
            current_idx += 1  # table end marker
            element["endIndex"] = current_idx
        else:
            size = element.get("endIndex", 0) - element.get("startIndex", 0)
            if size <= 0:
                size = 1
            element["startIndex"] = current_idx
            element["endIndex"] = current_idx + size
            current_idx += size
    return current_idx


def _reindex_table(table: dict[str, Any], table_start: int) -> int:
    """Reindex a table's rows and cells.

    Returns:
        The current index after the last row (before the table end marker)
    """
    current_idx = table_start + 1  # table start marker
    rows = table.get("tableRows", [])

    for row in rows:
        row["startIndex"] = current_idx
        current_idx += 1  # row marker

        for cell in row.get("tableCells", []):
            cell["startIndex"] = current_idx
            current_idx += 1  # cell marker
            current_idx = reindex_content(cell.get("content", []), current_idx)
            cell["endIndex"] = current_idx

        row["endIndex"] = current_idx

    table["rows"] = len(rows)
    table["columns"] = len(rows[0].get("tableCells", [])) if rows else 0
    return current_idx


def reindex_segment(segment: dict[str, Any], *, is_body: bool = True) -> None:
    """Walk all content in a segment and assign correct indices.

    Body content starts at 0 when it opens with a sectionBreak, otherwise at 1.
    Header, footer and footnote content starts at 0.
    """
    content = segment.get("content", [])
    if not content:
        return
    start = (0 if "sectionBreak" in content[0] else 1) if is_body else 0
    reindex_content(content, start)


def reindex_and_normalize(document: dict[str, Any]) -> None:
    """Normalize then reindex every segment. Called after each request."""
    for segment, is_body in iter_segments(document):
        normalize_content(segment.setdefault("content", []))
        reindex_segment(segment, is_body=is_body)
