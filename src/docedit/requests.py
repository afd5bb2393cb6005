"""Request building for Google Docs batchUpdate.

Two layers:
- ``create_*_request`` helpers build a single typed Request
- ``build_operation_requests`` expands one logical batch operation into an
  ordered list of Requests plus a short description for summaries

Ordering matters: a replace is emitted as delete-range followed by
insert-text, because the delete range is computed against the document
before the insert shifts it.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from docedit.api_types import (
    Color,
    CreateFooterRequest,
    CreateHeaderRequest,
    CreateParagraphBulletsRequest,
    DeleteContentRangeRequest,
    Dimension,
    DocumentStyle,
    InsertInlineImageRequest,
    InsertPageBreakRequest,
    InsertTableRequest,
    InsertTextRequest,
    Location,
    OptionalColor,
    Range,
    ReplaceAllTextRequest,
    Request,
    RgbColor,
    Size,
    SubstringMatchCriteria,
    TableCellStyle,
    TableCellLocation,
    TableRange,
    TextStyle,
    UpdateDocumentStyleRequest,
    UpdateTableCellStyleRequest,
    UpdateTextStyleRequest,
    WeightedFontFamily,
)
from docedit.exceptions import OperationError
from docedit.managers.validation_manager import ValidationManager

SUPPORTED_OPERATION_TYPES: tuple[str, ...] = (
    "insert_text",
    "delete_text",
    "replace_text",
    "format_text",
    "insert_table",
    "insert_page_break",
    "find_replace",
)

BULLET_PRESETS = {
    "UNORDERED": "BULLET_DISC_CIRCLE_SQUARE",
    "ORDERED": "NUMBERED_DECIMAL_ALPHA_ROMAN",
}

# (operation key, description label) for format_text summaries
_FORMAT_LABELS = (
    ("bold", "bold"),
    ("italic", "italic"),
    ("underline", "underline"),
    ("font_size", "font size"),
    ("font_family", "font family"),
)

_validator = ValidationManager()


def _location(index: int, segment_id: str | None = None) -> Location:
    return Location(index=index, segment_id=segment_id)


def _range(start_index: int, end_index: int, segment_id: str | None = None) -> Range:
    return Range(start_index=start_index, end_index=end_index, segment_id=segment_id)


def pt_dimension(magnitude: float) -> Dimension:
    return Dimension(magnitude=magnitude, unit="PT")


def optional_color(rgb: tuple[float, float, float]) -> OptionalColor:
    red, green, blue = rgb
    return OptionalColor(color=Color(rgb_color=RgbColor(red=red, green=green, blue=blue)))


# ---------------------------------------------------------------------------
# Single request helpers
# ---------------------------------------------------------------------------


def build_text_style(
    bold: bool | None = None,
    italic: bool | None = None,
    underline: bool | None = None,
    font_size: int | None = None,
    font_family: str | None = None,
) -> tuple[TextStyle, list[str]]:
    """Build a TextStyle and the field mask naming exactly the supplied keys."""
    style = TextStyle()
    fields: list[str] = []

    if bold is not None:
        style.bold = bold
        fields.append("bold")
    if italic is not None:
        style.italic = italic
        fields.append("italic")
    if underline is not None:
        style.underline = underline
        fields.append("underline")
    if font_size is not None:
        style.font_size = pt_dimension(font_size)
        fields.append("fontSize")
    if font_family is not None:
        style.weighted_font_family = WeightedFontFamily(font_family=font_family)
        fields.append("weightedFontFamily")

    return style, fields


def create_insert_text_request(
    index: int, text: str, segment_id: str | None = None
) -> Request:
    return Request(
        insert_text=InsertTextRequest(location=_location(index, segment_id), text=text)
    )


def create_delete_range_request(
    start_index: int, end_index: int, segment_id: str | None = None
) -> Request:
    return Request(
        delete_content_range=DeleteContentRangeRequest(
            range=_range(start_index, end_index, segment_id)
        )
    )


def create_format_text_request(
    start_index: int,
    end_index: int,
    bold: bool | None = None,
    italic: bool | None = None,
    underline: bool | None = None,
    font_size: int | None = None,
    font_family: str | None = None,
    segment_id: str | None = None,
) -> Request | None:
    """Build an updateTextStyle request, or None when no style is supplied."""
    style, fields = build_text_style(bold, italic, underline, font_size, font_family)
    if not fields:
        return None
    return Request(
        update_text_style=UpdateTextStyleRequest(
            range=_range(start_index, end_index, segment_id),
            text_style=style,
            fields=",".join(fields),
        )
    )


def create_find_replace_request(
    find_text: str, replace_text: str, match_case: bool = False
) -> Request:
    return Request(
        replace_all_text=ReplaceAllTextRequest(
            contains_text=SubstringMatchCriteria(text=find_text, match_case=match_case),
            replace_text=replace_text,
        )
    )


def create_insert_table_request(
    index: int, rows: int, columns: int, segment_id: str | None = None
) -> Request:
    return Request(
        insert_table=InsertTableRequest(
            location=_location(index, segment_id), rows=rows, columns=columns
        )
    )


def create_insert_page_break_request(index: int) -> Request:
    return Request(insert_page_break=InsertPageBreakRequest(location=_location(index)))


def create_insert_image_request(
    index: int,
    image_uri: str,
    width: float | None = None,
    height: float | None = None,
) -> Request:
    """Build an insertInlineImage request; size is only sent when given."""
    object_size = None
    if width is not None or height is not None:
        object_size = Size(
            width=pt_dimension(width) if width is not None else None,
            height=pt_dimension(height) if height is not None else None,
        )
    return Request(
        insert_inline_image=InsertInlineImageRequest(
            location=_location(index), uri=image_uri, object_size=object_size
        )
    )


def create_bullet_list_request(
    start_index: int, end_index: int, list_type: str = "UNORDERED"
) -> Request:
    preset = BULLET_PRESETS.get(list_type, BULLET_PRESETS["ORDERED"])
    return Request(
        create_paragraph_bullets=CreateParagraphBulletsRequest(
            range=_range(start_index, end_index), bullet_preset=preset
        )
    )


def create_header_request(
    header_type: str = "DEFAULT", section_break_index: int | None = None
) -> Request:
    location = _location(section_break_index) if section_break_index is not None else None
    return Request(
        create_header=CreateHeaderRequest(type=header_type, section_break_location=location)
    )


def create_footer_request(
    footer_type: str = "DEFAULT", section_break_index: int | None = None
) -> Request:
    location = _location(section_break_index) if section_break_index is not None else None
    return Request(
        create_footer=CreateFooterRequest(type=footer_type, section_break_location=location)
    )


def create_update_table_cell_style_request(
    table_start_index: int,
    cell_style: TableCellStyle,
    fields: list[str],
    row_index: int | None = None,
    column_index: int | None = None,
    row_span: int = 1,
    column_span: int = 1,
) -> Request:
    """Build an updateTableCellStyle request.

    Without a row/column the style applies to the whole table; with one it
    applies to the span starting at that cell.
    """
    if row_index is None or column_index is None:
        body = UpdateTableCellStyleRequest(
            table_start_location=_location(table_start_index),
            table_cell_style=cell_style,
            fields=",".join(fields),
        )
    else:
        body = UpdateTableCellStyleRequest(
            table_range=TableRange(
                table_cell_location=TableCellLocation(
                    table_start_location=_location(table_start_index),
                    row_index=row_index,
                    column_index=column_index,
                ),
                row_span=row_span,
                column_span=column_span,
            ),
            table_cell_style=cell_style,
            fields=",".join(fields),
        )
    return Request(update_table_cell_style=body)


def create_update_document_style_request(
    document_style: DocumentStyle, fields: list[str]
) -> Request:
    return Request(
        update_document_style=UpdateDocumentStyleRequest(
            document_style=document_style, fields=",".join(fields)
        )
    )


def serialize_requests(requests: list[Request]) -> list[dict[str, Any]]:
    """Turn typed requests into the dicts sent to Transport.batch_update."""
    return [r.to_api() for r in requests]


# ---------------------------------------------------------------------------
# Logical operation expansion
# ---------------------------------------------------------------------------


def _check(result: tuple[bool, str]) -> None:
    is_valid, message = result
    if not is_valid:
        raise OperationError(message)


def _truncate(text: str, limit: int = 20) -> str:
    return f"{text[:limit]}..." if len(text) > limit else text


def build_operation_requests(op: Mapping[str, Any]) -> tuple[list[Request], str]:
    """Expand one batch operation into ordered Requests.

    Args:
        op: Operation mapping with a ``type`` key and snake_case parameters

    Returns:
        Tuple of (requests, human-readable description)

    Raises:
        OperationError: If the type is unsupported or parameters are invalid
    """
    op_type = op.get("type")

    if op_type == "insert_text":
        _check(_validator.validate_index(op["index"]))
        _check(_validator.validate_text_content(op["text"]))
        return (
            [create_insert_text_request(op["index"], op["text"])],
            f"insert text at {op['index']}",
        )

    if op_type == "delete_text":
        _check(_validator.validate_index_range(op["start_index"], op["end_index"]))
        return (
            [create_delete_range_request(op["start_index"], op["end_index"])],
            f"delete text {op['start_index']}-{op['end_index']}",
        )

    if op_type == "replace_text":
        _check(_validator.validate_index_range(op["start_index"], op["end_index"]))
        _check(_validator.validate_text_content(op["text"]))
        return (
            [
                create_delete_range_request(op["start_index"], op["end_index"]),
                create_insert_text_request(op["start_index"], op["text"]),
            ],
            f"replace text {op['start_index']}-{op['end_index']} "
            f"with '{_truncate(op['text'])}'",
        )

    if op_type == "format_text":
        _check(_validator.validate_index_range(op["start_index"], op["end_index"]))
        style_args = {key: op.get(key) for key, _ in _FORMAT_LABELS}
        if all(value is None for value in style_args.values()):
            raise OperationError("No formatting options provided")
        _check(_validator.validate_text_formatting_params(**style_args))
        request = create_format_text_request(
            op["start_index"], op["end_index"], **style_args
        )
        if request is None:
            raise OperationError("No formatting options provided")

        changes = []
        for key, label in _FORMAT_LABELS:
            value = op.get(key)
            if value is not None:
                changes.append(f"{label}: {value}pt" if key == "font_size" else f"{label}: {value}")
        return (
            [request],
            f"format text {op['start_index']}-{op['end_index']} ({', '.join(changes)})",
        )

    if op_type == "insert_table":
        _check(
            _validator.validate_element_insertion_params(
                "table", op["index"], {"rows": op["rows"], "columns": op["columns"]}
            )
        )
        return (
            [create_insert_table_request(op["index"], op["rows"], op["columns"])],
            f"insert {op['rows']}x{op['columns']} table at {op['index']}",
        )

    if op_type == "insert_page_break":
        _check(_validator.validate_index(op["index"]))
        return (
            [create_insert_page_break_request(op["index"])],
            f"insert page break at {op['index']}",
        )

    if op_type == "find_replace":
        find_text = op["find_text"]
        if not isinstance(find_text, str) or not find_text:
            raise OperationError("find_text must be a non-empty string")
        _check(_validator.validate_text_content(op["replace_text"]))
        match_case = op.get("match_case", False)
        if not isinstance(match_case, bool):
            raise OperationError(
                f"match_case must be a boolean, got {type(match_case).__name__}"
            )
        return (
            [create_find_replace_request(op["find_text"], op["replace_text"], match_case)],
            f"find/replace '{op['find_text']}' -> '{op['replace_text']}'",
        )

    raise OperationError(
        f"Unsupported operation type '{op_type}'. "
        f"Supported: {', '.join(SUPPORTED_OPERATION_TYPES)}"
    )
