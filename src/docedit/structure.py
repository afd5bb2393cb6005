"""Document structure parsing and analysis.

Turns a raw Google Docs payload into a flat, index-addressed snapshot:

- Body elements (paragraph, table, section_break, table_of_contents) with
  their start/end indices
- Tables with a 2D grid of cells and a safe insertion index per cell
- Header/footer segments with bounds and a short content preview

Snapshots are rebuilt from a fresh payload for every read and never patched
in place. Missing fields default to empty values; parsing does not raise.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Literal

from docedit.logging import logger

ElementType = Literal["paragraph", "table", "section_break", "table_of_contents"]

PREVIEW_LENGTH = 100


def utf16_len(text: str) -> int:
    """Calculate the length of a string in UTF-16 code units.

    Google Docs indexes count UTF-16 code units, so characters outside the
    BMP consume two positions.
    """
    length = 0
    for char in text:
        if ord(char) > 0xFFFF:
            length += 2
        else:
            length += 1
    return length


@dataclass(frozen=True)
class TableCell:
    """A cell of a table snapshot."""

    row: int
    column: int
    start_index: int
    end_index: int
    insertion_index: int
    content: str
    content_elements: list[dict[str, Any]] = field(default_factory=list)


@dataclass(frozen=True)
class DocumentElement:
    """A top-level body element, discriminated by ``type``.

    Only the fields relevant to the element type are populated.
    """

    type: ElementType
    start_index: int
    end_index: int
    text: str = ""
    style: dict[str, Any] = field(default_factory=dict)
    rows: int = 0
    columns: int = 0
    cells: list[list[TableCell]] = field(default_factory=list)
    table_style: dict[str, Any] = field(default_factory=dict)
    section_style: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class SegmentInfo:
    """A header or footer segment."""

    section_id: str
    start_index: int
    end_index: int
    content_preview: str
    element_count: int
    type: str | None = None
    content: list[dict[str, Any]] = field(default_factory=list)


@dataclass(frozen=True)
class DocumentStructure:
    """Parsed view of a document."""

    title: str
    body: list[DocumentElement]
    tables: list[DocumentElement]
    headers: dict[str, SegmentInfo]
    footers: dict[str, SegmentInfo]
    total_length: int
    document_style: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class TableInfo:
    """A table together with its position in the document's table list."""

    index: int
    start_index: int
    end_index: int
    rows: int
    columns: int
    cells: list[list[TableCell]]


@dataclass(frozen=True)
class ContainingCell:
    """The table cell that contains a given index."""

    row: int
    column: int
    cell_start: int
    cell_end: int


@dataclass(frozen=True)
class ElementMatch:
    """Result of find_element_at_index."""

    element: DocumentElement
    containing_cell: ContainingCell | None = None


@dataclass
class DocumentStats:
    """Aggregate counts describing a document's shape."""

    total_elements: int
    tables: int
    paragraphs: int
    section_breaks: int
    total_length: int
    has_headers: bool
    has_footers: bool
    total_table_cells: int | None = None
    largest_table: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {k: v for k, v in asdict(self).items() if v is not None}


DocumentSource = dict[str, Any] | DocumentStructure


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def parse_document_structure(doc_data: dict[str, Any]) -> DocumentStructure:
    """Parse a raw document payload into a DocumentStructure.

    When the payload carries tabs and no top-level body, the first tab's
    content is used.

    Args:
        doc_data: Raw documents.get response

    Returns:
        DocumentStructure snapshot
    """
    root = _document_root(doc_data)

    body: list[DocumentElement] = []
    for element in (root.get("body") or {}).get("content") or []:
        info = _parse_element(element)
        if info is not None:
            body.append(info)

    tables = [e for e in body if e.type == "table"]
    total_length = body[-1].end_index if body else 0

    headers = {
        header_id: _parse_segment(header_id, header_data)
        for header_id, header_data in (root.get("headers") or {}).items()
    }
    footers = {
        footer_id: _parse_segment(footer_id, footer_data)
        for footer_id, footer_data in (root.get("footers") or {}).items()
    }

    return DocumentStructure(
        title=doc_data.get("title", "") or "",
        body=body,
        tables=tables,
        headers=headers,
        footers=footers,
        total_length=total_length,
        document_style=root.get("documentStyle") or {},
    )


def _document_root(doc_data: dict[str, Any]) -> dict[str, Any]:
    """Return the dict holding body/headers/footers."""
    if "body" in doc_data:
        return doc_data
    tabs = doc_data.get("tabs") or []
    if tabs:
        document_tab: dict[str, Any] = tabs[0].get("documentTab") or {}
        return document_tab
    return doc_data


def _parse_element(element: dict[str, Any]) -> DocumentElement | None:
    start_index = element.get("startIndex", 0) or 0
    end_index = element.get("endIndex", 0) or 0

    if "paragraph" in element:
        paragraph = element["paragraph"] or {}
        return DocumentElement(
            type="paragraph",
            start_index=start_index,
            end_index=end_index,
            text=extract_paragraph_text(paragraph),
            style=paragraph.get("paragraphStyle") or {},
        )
    if "table" in element:
        table = element["table"] or {}
        table_rows = table.get("tableRows") or []
        columns = len(table_rows[0].get("tableCells") or []) if table_rows else 0
        return DocumentElement(
            type="table",
            start_index=start_index,
            end_index=end_index,
            rows=len(table_rows),
            columns=columns,
            cells=_parse_table_cells(table),
            table_style=table.get("tableStyle") or {},
        )
    if "sectionBreak" in element:
        section_break = element["sectionBreak"] or {}
        return DocumentElement(
            type="section_break",
            start_index=start_index,
            end_index=end_index,
            section_style=section_break.get("sectionStyle") or {},
        )
    if "tableOfContents" in element:
        return DocumentElement(
            type="table_of_contents",
            start_index=start_index,
            end_index=end_index,
        )
    return None


def _parse_table_cells(table: dict[str, Any]) -> list[list[TableCell]]:
    cells: list[list[TableCell]] = []
    for row_idx, row in enumerate(table.get("tableRows") or []):
        row_cells: list[TableCell] = []
        for col_idx, cell in enumerate(row.get("tableCells") or []):
            cell_start = cell.get("startIndex", 0) or 0
            content_elements = cell.get("content") or []
            first_run = _first_paragraph_element(content_elements)
            if first_run is not None:
                insertion_index = first_run["startIndex"]
            else:
                insertion_index = cell_start + 1

            row_cells.append(
                TableCell(
                    row=row_idx,
                    column=col_idx,
                    start_index=cell_start,
                    end_index=cell.get("endIndex", 0) or 0,
                    insertion_index=insertion_index,
                    content=extract_cell_text(cell),
                    content_elements=content_elements,
                )
            )
        cells.append(row_cells)
    return cells


def _first_paragraph_element(
    content_elements: list[dict[str, Any]],
) -> dict[str, Any] | None:
    """First paragraph element with a start index, across the cell's paragraphs."""
    for element in content_elements:
        paragraph = element.get("paragraph")
        if not paragraph:
            continue
        para_elements = paragraph.get("elements") or []
        if para_elements and para_elements[0].get("startIndex") is not None:
            first: dict[str, Any] = para_elements[0]
            return first
    return None


def _parse_segment(section_id: str, segment_data: dict[str, Any]) -> SegmentInfo:
    content = segment_data.get("content") or []
    text_content = "".join(
        extract_paragraph_text(element["paragraph"])
        for element in content
        if element.get("paragraph")
    )
    return SegmentInfo(
        section_id=section_id,
        start_index=(content[0].get("startIndex", 0) or 0) if content else 0,
        end_index=(content[-1].get("endIndex", 0) or 0) if content else 0,
        content_preview=text_content[:PREVIEW_LENGTH] or "(empty)",
        element_count=len(content),
        type=segment_data.get("type"),
        content=content,
    )


def extract_paragraph_text(paragraph: dict[str, Any]) -> str:
    """Concatenate the text runs of a paragraph."""
    return "".join(
        (element["textRun"].get("content") or "")
        for element in paragraph.get("elements") or []
        if element.get("textRun")
    )


def extract_cell_text(cell: dict[str, Any]) -> str:
    """Concatenate the paragraph text of a table cell."""
    return "".join(
        extract_paragraph_text(element["paragraph"])
        for element in cell.get("content") or []
        if element.get("paragraph")
    )


def ensure_structure(doc: DocumentSource) -> DocumentStructure:
    """Accept either a raw payload or an already parsed structure."""
    if isinstance(doc, DocumentStructure):
        return doc
    return parse_document_structure(doc)


# ---------------------------------------------------------------------------
# Derived queries
# ---------------------------------------------------------------------------


def find_tables(doc: DocumentSource) -> list[TableInfo]:
    """List the document's tables with their ordinal index."""
    structure = ensure_structure(doc)
    return [
        TableInfo(
            index=idx,
            start_index=table.start_index,
            end_index=table.end_index,
            rows=table.rows,
            columns=table.columns,
            cells=table.cells,
        )
        for idx, table in enumerate(structure.tables)
    ]


def get_table_cell_indices(
    doc: DocumentSource, table_index: int = 0
) -> list[list[tuple[int, int]]] | None:
    """Get the (start, end) text range of each cell of a table.

    The range is that of the first text run in the cell when one exists,
    otherwise the cell's inner bounds.

    Returns:
        Per-row lists of (start, end) pairs, or None if the table is missing
    """
    tables = find_tables(doc)
    if table_index < 0 or table_index >= len(tables):
        logger.warning(
            f"Table index {table_index} not found. Document has {len(tables)} tables."
        )
        return None

    cell_indices: list[list[tuple[int, int]]] = []
    for row in tables[table_index].cells:
        row_indices: list[tuple[int, int]] = []
        for cell in row:
            start_idx = cell.start_index + 1
            end_idx = cell.end_index - 1
            first_run = _first_paragraph_element(cell.content_elements)
            if first_run is not None:
                start_idx = first_run["startIndex"]
                end_idx = first_run.get("endIndex") or start_idx + 1
            row_indices.append((start_idx, end_idx))
        cell_indices.append(row_indices)
    return cell_indices


def find_element_at_index(doc: DocumentSource, index: int) -> ElementMatch | None:
    """Find the body element whose range contains ``index``.

    For tables, the containing cell is resolved as well.
    """
    structure = ensure_structure(doc)
    for element in structure.body:
        if not (element.start_index <= index < element.end_index):
            continue
        containing_cell = None
        if element.type == "table":
            containing_cell = _find_cell(element, index)
        return ElementMatch(element=element, containing_cell=containing_cell)
    return None


def _find_cell(table: DocumentElement, index: int) -> ContainingCell | None:
    for row in table.cells:
        for cell in row:
            if cell.start_index <= index < cell.end_index:
                return ContainingCell(
                    row=cell.row,
                    column=cell.column,
                    cell_start=cell.start_index,
                    cell_end=cell.end_index,
                )
    return None


def get_next_paragraph_index(doc: DocumentSource, after_index: int = 0) -> int:
    """Start of the first paragraph strictly after ``after_index``.

    Falls back to the last safe position in the body.
    """
    structure = ensure_structure(doc)
    for element in structure.body:
        if element.type == "paragraph" and element.start_index > after_index:
            return element.start_index
    return max(structure.total_length - 1, 1)


def analyze_document_complexity(doc: DocumentSource) -> DocumentStats:
    """Count elements, tables and table cells of a document."""
    structure = ensure_structure(doc)

    stats = DocumentStats(
        total_elements=len(structure.body),
        tables=len(structure.tables),
        paragraphs=sum(1 for e in structure.body if e.type == "paragraph"),
        section_breaks=sum(1 for e in structure.body if e.type == "section_break"),
        total_length=structure.total_length,
        has_headers=bool(structure.headers),
        has_footers=bool(structure.footers),
    )

    if structure.tables:
        sizes = [t.rows * t.columns for t in structure.tables]
        stats.total_table_cells = sum(sizes)
        stats.largest_table = max(sizes)

    return stats
