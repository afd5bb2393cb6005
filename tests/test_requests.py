"""Tests for request building."""

from __future__ import annotations

import pytest

from docedit.exceptions import OperationError
from docedit.requests import (
    build_operation_requests,
    build_text_style,
    create_bullet_list_request,
    create_delete_range_request,
    create_format_text_request,
    create_header_request,
    create_insert_image_request,
    create_insert_text_request,
    serialize_requests,
)


def test_insert_text_request_wire_shape() -> None:
    """Test camelCase serialization without unset fields."""
    request = create_insert_text_request(5, "Hello")
    assert request.to_api() == {
        "insertText": {"location": {"index": 5}, "text": "Hello"}
    }
    assert request.request_type == "insertText"


def test_segment_id_is_serialized() -> None:
    """Test header/footer requests carry their segment ID."""
    request = create_delete_range_request(0, 4, segment_id="kix.hdr1")
    assert request.to_api() == {
        "deleteContentRange": {
            "range": {"startIndex": 0, "endIndex": 4, "segmentId": "kix.hdr1"}
        }
    }


def test_build_text_style_field_mask() -> None:
    """Test the field mask names exactly the supplied keys."""
    _, fields = build_text_style(bold=True)
    assert fields == ["bold"]

    style, fields = build_text_style(italic=False, font_size=14, font_family="Arial")
    assert fields == ["italic", "fontSize", "weightedFontFamily"]
    assert style.italic is False
    assert style.bold is None


def test_format_text_request() -> None:
    """Test updateTextStyle serialization with a font size."""
    request = create_format_text_request(1, 6, bold=True, font_size=14)
    assert request is not None
    assert request.to_api() == {
        "updateTextStyle": {
            "range": {"startIndex": 1, "endIndex": 6},
            "textStyle": {"bold": True, "fontSize": {"magnitude": 14, "unit": "PT"}},
            "fields": "bold,fontSize",
        }
    }


def test_format_text_request_without_style() -> None:
    """Test that no style means no request."""
    assert create_format_text_request(1, 6) is None


def test_insert_image_request_size() -> None:
    """Test objectSize is only sent when a dimension is given."""
    plain = create_insert_image_request(3, "https://example.com/a.png")
    assert "objectSize" not in plain.to_api()["insertInlineImage"]

    sized = create_insert_image_request(3, "https://example.com/a.png", width=100)
    assert sized.to_api()["insertInlineImage"]["objectSize"] == {
        "width": {"magnitude": 100, "unit": "PT"}
    }


def test_bullet_list_presets() -> None:
    """Test list types map onto bullet presets."""
    unordered = create_bullet_list_request(1, 5, "UNORDERED").to_api()
    ordered = create_bullet_list_request(1, 5, "ORDERED").to_api()
    assert unordered["createParagraphBullets"]["bulletPreset"] == "BULLET_DISC_CIRCLE_SQUARE"
    assert ordered["createParagraphBullets"]["bulletPreset"] == "NUMBERED_DECIMAL_ALPHA_ROMAN"


def test_create_header_request() -> None:
    """Test createHeader with and without a section break location."""
    assert create_header_request("DEFAULT").to_api() == {"createHeader": {"type": "DEFAULT"}}
    assert create_header_request("EVEN_PAGE", 0).to_api() == {
        "createHeader": {"type": "EVEN_PAGE", "sectionBreakLocation": {"index": 0}}
    }


# ========================================================================
# Logical operations
# ========================================================================


def test_replace_text_is_delete_then_insert() -> None:
    """Test replace expands to a delete followed by an insert at the start."""
    requests, description = build_operation_requests(
        {"type": "replace_text", "start_index": 5, "end_index": 10, "text": "new"}
    )
    assert serialize_requests(requests) == [
        {"deleteContentRange": {"range": {"startIndex": 5, "endIndex": 10}}},
        {"insertText": {"location": {"index": 5}, "text": "new"}},
    ]
    assert description == "replace text 5-10 with 'new'"


def test_format_text_without_options() -> None:
    """Test format_text with no style keys is rejected."""
    with pytest.raises(OperationError, match="No formatting options provided"):
        build_operation_requests({"type": "format_text", "start_index": 1, "end_index": 5})


def test_format_text_single_field() -> None:
    """Test a single style key produces exactly that field mask."""
    requests, description = build_operation_requests(
        {"type": "format_text", "start_index": 1, "end_index": 5, "italic": True}
    )
    body = requests[0].to_api()["updateTextStyle"]
    assert body["fields"] == "italic"
    assert body["textStyle"] == {"italic": True}
    assert description == "format text 1-5 (italic: True)"


def test_format_text_description_units() -> None:
    """Test the description spells out font sizes in points."""
    _, description = build_operation_requests(
        {"type": "format_text", "start_index": 1, "end_index": 5, "font_size": 12}
    )
    assert description == "format text 1-5 (font size: 12pt)"


def test_format_text_invalid_value() -> None:
    """Test invalid style values are rejected before building."""
    with pytest.raises(OperationError, match="font_size must be between"):
        build_operation_requests(
            {"type": "format_text", "start_index": 1, "end_index": 5, "font_size": 0}
        )


def test_delete_text_invalid_range() -> None:
    """Test delete ranges must be non-empty."""
    with pytest.raises(OperationError, match="must be greater than start_index"):
        build_operation_requests({"type": "delete_text", "start_index": 5, "end_index": 5})


def test_insert_table_operation() -> None:
    """Test insert_table expands to a single insertTable."""
    requests, description = build_operation_requests(
        {"type": "insert_table", "index": 10, "rows": 2, "columns": 3}
    )
    assert serialize_requests(requests) == [
        {"insertTable": {"location": {"index": 10}, "rows": 2, "columns": 3}}
    ]
    assert description == "insert 2x3 table at 10"


def test_find_replace_defaults_to_case_insensitive() -> None:
    """Test match_case defaults to False."""
    requests, description = build_operation_requests(
        {"type": "find_replace", "find_text": "old", "replace_text": "new"}
    )
    assert requests[0].to_api() == {
        "replaceAllText": {
            "containsText": {"text": "old", "matchCase": False},
            "replaceText": "new",
        }
    }
    assert description == "find/replace 'old' -> 'new'"


@pytest.mark.parametrize(
    ("op", "message"),
    [
        (
            {"find_text": 123, "replace_text": "x"},
            "find_text must be a non-empty string",
        ),
        (
            {"find_text": "", "replace_text": "x"},
            "find_text must be a non-empty string",
        ),
        (
            {"find_text": "old", "replace_text": None},
            "Text must be a string, got NoneType",
        ),
        (
            {"find_text": "old", "replace_text": "new", "match_case": "false"},
            "match_case must be a boolean, got str",
        ),
    ],
)
def test_find_replace_invalid_parameters(op: dict, message: str) -> None:
    """Test find_replace rejects bad search, replacement and match_case values."""
    with pytest.raises(OperationError) as exc_info:
        build_operation_requests({"type": "find_replace", **op})
    assert str(exc_info.value) == message


def test_page_break_operation() -> None:
    """Test insert_page_break."""
    requests, _ = build_operation_requests({"type": "insert_page_break", "index": 4})
    assert requests[0].to_api() == {"insertPageBreak": {"location": {"index": 4}}}


def test_unsupported_operation_type() -> None:
    """Test unknown types list the supported ones."""
    with pytest.raises(OperationError) as exc_info:
        build_operation_requests({"type": "insert_chart"})
    message = str(exc_info.value)
    assert "Unsupported operation type 'insert_chart'" in message
    assert "find_replace" in message
