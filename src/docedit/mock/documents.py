"""Builders for raw document dicts used with the mock API.

Indices are left out; MockGoogleDocsAPI reindexes on construction.
"""

from __future__ import annotations

from typing import Any

from docedit.mock.table_ops import make_empty_cell

DEFAULT_DOCUMENT_ID = "1mockDocumentId_abcdefghijklmnopqrstuv"


def paragraph(text: str = "", text_style: dict[str, Any] | None = None) -> dict[str, Any]:
    """A paragraph element holding ``text`` plus its trailing newline."""
    return {
        "paragraph": {
            "elements": [
                {"textRun": {"content": f"{text}\n", "textStyle": text_style or {}}}
            ],
            "paragraphStyle": {"namedStyleType": "NORMAL_TEXT"},
        }
    }


def table(rows: list[list[str]]) -> dict[str, Any]:
    """A table element with one paragraph per cell."""
    table_rows = []
    for row in rows:
        cells = []
        for text in row:
            cell = make_empty_cell()
            cell["content"] = [paragraph(text)]
            cells.append(cell)
        table_rows.append({"tableCells": cells})
    return {
        "table": {
            "rows": len(rows),
            "columns": len(rows[0]) if rows else 0,
            "tableRows": table_rows,
            "tableStyle": {},
        }
    }


def make_document(
    content: list[str | dict[str, Any]] | None = None,
    document_id: str = DEFAULT_DOCUMENT_ID,
    title: str = "Untitled document",
    headers: dict[str, str] | None = None,
    footers: dict[str, str] | None = None,
) -> dict[str, Any]:
    """Build a raw document.

    Args:
        content: Body elements; strings become paragraphs. Defaults to one
            empty paragraph.
        document_id: Document ID
        title: Document title
        headers: Header ID -> text; the first one becomes the default header
        footers: Footer ID -> text; the first one becomes the default footer

    Returns:
        Raw document dict in the documents.get shape
    """
    body_content: list[dict[str, Any]] = [{"sectionBreak": {"sectionStyle": {}}}]
    for item in content or [""]:
        body_content.append(paragraph(item) if isinstance(item, str) else item)

    document_style: dict[str, Any] = {}
    if headers:
        document_style["defaultHeaderId"] = next(iter(headers))
    if footers:
        document_style["defaultFooterId"] = next(iter(footers))

    return {
        "documentId": document_id,
        "title": title,
        "body": {"content": body_content},
        "headers": {
            header_id: {"headerId": header_id, "content": [paragraph(text)]}
            for header_id, text in (headers or {}).items()
        },
        "footers": {
            footer_id: {"footerId": footer_id, "content": [paragraph(text)]}
            for footer_id, text in (footers or {}).items()
        },
        "documentStyle": document_style,
    }
