"""Segment-level operations: headers, footers and document style."""

from __future__ import annotations

import copy
import uuid
from typing import Any

from docedit.mock.exceptions import ValidationError
from docedit.mock.navigation import get_root

_SEGMENT_TYPES = ("DEFAULT", "FIRST_PAGE", "EVEN_PAGE")

# Document style ID key per kind and type. The use*HeaderFooter flags are
# left alone; callers enable them with updateDocumentStyle.
_STYLE_KEYS: dict[str, dict[str, str]] = {
    "header": {
        "DEFAULT": "defaultHeaderId",
        "FIRST_PAGE": "firstPageHeaderId",
        "EVEN_PAGE": "evenPageHeaderId",
    },
    "footer": {
        "DEFAULT": "defaultFooterId",
        "FIRST_PAGE": "firstPageFooterId",
        "EVEN_PAGE": "evenPageFooterId",
    },
}


def _empty_segment() -> list[dict[str, Any]]:
    return [
        {
            "paragraph": {
                "elements": [{"textRun": {"content": "\n", "textStyle": {}}}],
                "paragraphStyle": {},
            }
        }
    ]


def _create_segment(
    document: dict[str, Any], request: dict[str, Any], kind: str
) -> dict[str, Any]:
    segment_type = request.get("type")
    if not segment_type:
        raise ValidationError("type is required")
    if segment_type not in _SEGMENT_TYPES:
        raise ValidationError(
            f"Invalid {kind} type {segment_type}. Must be one of: {', '.join(_SEGMENT_TYPES)}"
        )

    root = get_root(document)
    segments = root.setdefault(f"{kind}s", {})
    document_style = root.setdefault("documentStyle", {})
    id_key = _STYLE_KEYS[kind][segment_type]

    if document_style.get(id_key) in segments:
        raise ValidationError(
            f"A {kind} of type {segment_type} already exists. "
            "Only one of each type (DEFAULT, FIRST_PAGE, EVEN_PAGE) is allowed."
        )

    segment_id = f"kix.{uuid.uuid4().hex[:12]}"
    segments[segment_id] = {f"{kind}Id": segment_id, "content": _empty_segment()}
    document_style[id_key] = segment_id

    return {f"create{kind.capitalize()}": {f"{kind}Id": segment_id}}


def handle_create_header(
    document: dict[str, Any], request: dict[str, Any]
) -> dict[str, Any]:
    """Handle CreateHeaderRequest."""
    return _create_segment(document, request, "header")


def handle_create_footer(
    document: dict[str, Any], request: dict[str, Any]
) -> dict[str, Any]:
    """Handle CreateFooterRequest."""
    return _create_segment(document, request, "footer")


def handle_update_document_style(
    document: dict[str, Any], request: dict[str, Any]
) -> dict[str, Any]:
    """Handle UpdateDocumentStyleRequest."""
    fields = [f.strip() for f in (request.get("fields") or "").split(",") if f.strip()]
    if not fields:
        raise ValidationError("fields is required")

    new_style = request.get("documentStyle") or {}
    document_style = get_root(document).setdefault("documentStyle", {})
    for field_name in fields:
        if field_name in new_style:
            document_style[field_name] = copy.deepcopy(new_style[field_name])
        else:
            document_style.pop(field_name, None)
    return {}
