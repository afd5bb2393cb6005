"""Text and inline operations for the mock Google Docs API.

Handlers edit paragraph elements in place. The centralized normalize and
reindex pass splits paragraphs at new newlines and fixes every index.
"""

from __future__ import annotations

import copy
import re
import uuid
from collections.abc import Callable
from typing import Any

from docedit.mock.exceptions import ValidationError
from docedit.mock.navigation import (
    Content,
    find_paragraph,
    get_root,
    get_segment,
    iter_paragraphs,
    iter_segments,
)
from docedit.mock.reindex import element_size


def _utf16_split(text: str, offset: int) -> tuple[str, str]:
    acc = 0
    for i, ch in enumerate(text):
        if acc >= offset:
            return text[:i], text[i:]
        acc += 2 if ord(ch) > 0xFFFF else 1
    return text, ""


def split_at(elements: list[dict[str, Any]], offset: int) -> int:
    """Split paragraph elements so that a boundary falls at ``offset``.

    Returns:
        Position in ``elements`` of the first element at or after ``offset``
    """
    acc = 0
    for i, pe in enumerate(elements):
        if acc >= offset:
            return i
        size = element_size(pe)
        if acc < offset < acc + size:
            run = pe["textRun"]
            head, tail = _utf16_split(run.get("content", ""), offset - acc)
            style = run.get("textStyle", {})
            elements[i : i + 1] = [
                {"textRun": {"content": head, "textStyle": copy.deepcopy(style)}},
                {"textRun": {"content": tail, "textStyle": copy.deepcopy(style)}},
            ]
            return i + 1
        acc += size
    return len(elements)


def _inherited_style(elements: list[dict[str, Any]], pos: int) -> dict[str, Any]:
    """Inserted text takes the style of the preceding run, else the following one."""
    neighbours = elements[max(pos - 1, 0) : pos] + elements[pos : pos + 1]
    for candidate in neighbours:
        if "textRun" in candidate:
            return copy.deepcopy(candidate["textRun"].get("textStyle", {}))
    return {}


def resolve_location(
    document: dict[str, Any], request: dict[str, Any]
) -> tuple[Content, bool, int]:
    """Resolve ``location`` or ``endOfSegmentLocation`` to (content, is_body, index)."""
    location = request.get("location")
    end_of_segment = request.get("endOfSegmentLocation")

    if location is None and end_of_segment is None:
        raise ValidationError("Must specify either location or endOfSegmentLocation")
    if location is not None and end_of_segment is not None:
        raise ValidationError("Cannot specify both location and endOfSegmentLocation")

    if location is not None:
        if location.get("index") is None:
            raise ValidationError("location.index is required")
        segment, is_body = get_segment(document, location.get("segmentId"))
        return segment.setdefault("content", []), is_body, location["index"]

    segment, is_body = get_segment(document, end_of_segment.get("segmentId"))
    content = segment.setdefault("content", [])
    index = content[-1].get("endIndex", 1) - 1 if content else 0
    return content, is_body, index


def _paragraph_at(content: Content, index: int) -> tuple[Content, int]:
    found = find_paragraph(content, index)
    if found is None:
        raise ValidationError(
            f"Index {index} must be inside the bounds of an existing paragraph."
        )
    return found


def insert_elements(
    content: Content, index: int, new_elements: list[dict[str, Any]]
) -> tuple[Content, int]:
    """Insert paragraph elements at ``index``.

    Text runs without a textStyle inherit the style of their neighbour.

    Returns:
        Tuple of (containing content list, paragraph position)
    """
    container, pos = _paragraph_at(content, index)
    element = container[pos]
    elements = element["paragraph"].setdefault("elements", [])
    at = split_at(elements, index - element["startIndex"])
    style = _inherited_style(elements, at)
    for new in new_elements:
        if "textRun" in new and "textStyle" not in new["textRun"]:
            new["textRun"]["textStyle"] = copy.deepcopy(style)
    elements[at:at] = new_elements
    return container, pos


def handle_insert_text(
    document: dict[str, Any], request: dict[str, Any]
) -> dict[str, Any]:
    """Handle InsertTextRequest."""
    text = request.get("text")
    if not text:
        raise ValidationError("text is required")

    content, is_body, index = resolve_location(document, request)
    if is_body and index < 1:
        raise ValidationError("index must be at least 1")

    insert_elements(content, index, [{"textRun": {"content": text}}])
    return {}


def _delete_in_content(content: Content, start: int, end: int) -> None:
    for element in list(content):
        el_start = element.get("startIndex", 0)
        el_end = element.get("endIndex", 0)
        if el_end <= start or el_start >= end:
            continue

        if "paragraph" in element:
            elements = element["paragraph"].setdefault("elements", [])
            lo = split_at(elements, max(start, el_start) - el_start)
            hi = split_at(elements, min(end, el_end) - el_start)
            del elements[lo:hi]
        elif "table" in element:
            if start <= el_start and el_end <= end:
                content.remove(element)
                continue
            cell = _cell_spanning(element["table"], start, end)
            if cell is None:
                raise ValidationError(
                    f"Invalid deletion range {start}-{end}: it partially covers a table"
                )
            if end >= cell["endIndex"]:
                raise ValidationError(
                    "Invalid deletion range. Cannot delete the final newline of a table cell"
                )
            _delete_in_content(cell.get("content", []), start, end)
        else:
            raise ValidationError(f"Cannot delete structural element at {el_start}")


def _cell_spanning(table: dict[str, Any], start: int, end: int) -> dict[str, Any] | None:
    for row in table.get("tableRows", []):
        for cell in row.get("tableCells", []):
            if cell.get("startIndex", 0) < start and end <= cell.get("endIndex", 0):
                found: dict[str, Any] = cell
                return found
    return None


def handle_delete_content_range(
    document: dict[str, Any], request: dict[str, Any]
) -> dict[str, Any]:
    """Handle DeleteContentRangeRequest."""
    range_obj = request.get("range") or {}
    start = range_obj.get("startIndex")
    end = range_obj.get("endIndex")
    if start is None or end is None:
        raise ValidationError("range.startIndex and range.endIndex are required")
    if start >= end:
        raise ValidationError(
            f"Invalid range: startIndex ({start}) must be less than endIndex ({end})"
        )

    segment, is_body = get_segment(document, range_obj.get("segmentId"))
    content = segment.get("content", [])
    segment_end = content[-1].get("endIndex", 0) if content else 0
    if is_body and start < 1:
        raise ValidationError("Invalid deletion range: cannot delete the section break at 0")
    if end >= segment_end:
        raise ValidationError(
            "Invalid deletion range. Cannot delete the final newline of a segment"
        )

    _delete_in_content(content, start, end)
    return {}


def _for_paragraphs_in_range(
    content: Content,
    start: int,
    end: int,
    apply: Callable[[dict[str, Any], int, int], None],
) -> None:
    """Call ``apply(paragraph_element, lo, hi)`` for paragraphs overlapping the range."""
    for element in content:
        el_start = element.get("startIndex", 0)
        el_end = element.get("endIndex", 0)
        if el_end <= start or el_start >= end:
            continue
        if "paragraph" in element:
            apply(element, max(start, el_start) - el_start, min(end, el_end) - el_start)
        elif "table" in element:
            for row in element["table"].get("tableRows", []):
                for cell in row.get("tableCells", []):
                    _for_paragraphs_in_range(cell.get("content", []), start, end, apply)


def handle_update_text_style(
    document: dict[str, Any], request: dict[str, Any]
) -> dict[str, Any]:
    """Handle UpdateTextStyleRequest."""
    range_obj = request.get("range") or {}
    start = range_obj.get("startIndex")
    end = range_obj.get("endIndex")
    if start is None or end is None or start >= end:
        raise ValidationError(f"Invalid range for updateTextStyle: {start}-{end}")

    fields = [f.strip() for f in (request.get("fields") or "").split(",") if f.strip()]
    if not fields:
        raise ValidationError("fields is required")
    text_style = request.get("textStyle") or {}

    def apply(element: dict[str, Any], lo: int, hi: int) -> None:
        elements = element["paragraph"].setdefault("elements", [])
        first = split_at(elements, lo)
        last = split_at(elements, hi)
        for pe in elements[first:last]:
            if "textRun" not in pe:
                continue
            style = pe["textRun"].setdefault("textStyle", {})
            for field_name in fields:
                if field_name == "*":
                    style.clear()
                    style.update(copy.deepcopy(text_style))
                elif field_name in text_style:
                    style[field_name] = copy.deepcopy(text_style[field_name])
                else:
                    style.pop(field_name, None)

    segment, _ = get_segment(document, range_obj.get("segmentId"))
    _for_paragraphs_in_range(segment.get("content", []), start, end, apply)
    return {}


def handle_insert_page_break(
    document: dict[str, Any], request: dict[str, Any]
) -> dict[str, Any]:
    """Handle InsertPageBreakRequest: a page break followed by a newline."""
    content, is_body, index = resolve_location(document, request)
    if not is_body:
        raise ValidationError("Page breaks can only be inserted in the body")
    if index < 1:
        raise ValidationError("index must be at least 1")

    container, _ = _paragraph_at(content, index)
    if container is not content:
        raise ValidationError("Page breaks cannot be inserted inside a table")

    insert_elements(
        content,
        index,
        [{"pageBreak": {"textStyle": {}}}, {"textRun": {"content": "\n"}}],
    )
    return {}


def handle_insert_inline_image(
    document: dict[str, Any], request: dict[str, Any]
) -> dict[str, Any]:
    """Handle InsertInlineImageRequest."""
    uri = request.get("uri")
    if not uri:
        raise ValidationError("uri is required")

    content, is_body, index = resolve_location(document, request)
    if is_body and index < 1:
        raise ValidationError("index must be at least 1")

    object_id = f"kix.{uuid.uuid4().hex[:12]}"
    embedded: dict[str, Any] = {"imageProperties": {"sourceUri": uri}}
    if request.get("objectSize"):
        embedded["size"] = copy.deepcopy(request["objectSize"])

    insert_elements(
        content,
        index,
        [{"inlineObjectElement": {"inlineObjectId": object_id, "textStyle": {}}}],
    )
    get_root(document).setdefault("inlineObjects", {})[object_id] = {
        "objectId": object_id,
        "inlineObjectProperties": {"embeddedObject": embedded},
    }
    return {"insertInlineImage": {"objectId": object_id}}


def handle_replace_all_text(
    document: dict[str, Any], request: dict[str, Any]
) -> dict[str, Any]:
    """Handle ReplaceAllTextRequest.

    Matches are found within single text runs.
    """
    criteria = request.get("containsText") or {}
    search = criteria.get("text")
    if not search:
        raise ValidationError("containsText.text is required")
    replacement = request.get("replaceText") or ""
    flags = 0 if criteria.get("matchCase") else re.IGNORECASE
    pattern = re.compile(re.escape(search), flags)

    occurrences = 0
    for segment, _ in iter_segments(document):
        for element in iter_paragraphs(segment.get("content", [])):
            for pe in element["paragraph"].get("elements", []):
                if "textRun" not in pe:
                    continue
                run = pe["textRun"]
                run["content"], count = pattern.subn(
                    lambda _match: replacement, run.get("content", "")
                )
                occurrences += count

    return {"replaceAllText": {"occurrencesChanged": occurrences}}


def handle_create_paragraph_bullets(
    document: dict[str, Any], request: dict[str, Any]
) -> dict[str, Any]:
    """Handle CreateParagraphBulletsRequest."""
    range_obj = request.get("range") or {}
    start = range_obj.get("startIndex")
    end = range_obj.get("endIndex")
    if start is None or end is None or start >= end:
        raise ValidationError(f"Invalid range for createParagraphBullets: {start}-{end}")
    preset = request.get("bulletPreset")
    if not preset:
        raise ValidationError("bulletPreset is required")

    list_id = f"kix.list.{uuid.uuid4().hex[:8]}"
    get_root(document).setdefault("lists", {})[list_id] = {
        "listProperties": {"nestingLevels": [{"bulletPreset": preset}]}
    }

    def apply(element: dict[str, Any], _lo: int, _hi: int) -> None:
        element["paragraph"]["bullet"] = {"listId": list_id, "textStyle": {}}

    segment, _ = get_segment(document, range_obj.get("segmentId"))
    _for_paragraphs_in_range(segment.get("content", []), start, end, apply)
    return {}
