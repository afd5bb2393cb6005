"""Google Docs batchUpdate request types.

Pydantic models for the subset of the Docs API request union that docedit
emits. Field names are snake_case with camelCase aliases so that
``model_dump(by_alias=True, exclude_none=True)`` yields the wire shape.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Location(BaseModel):
    """A particular location in the document."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    index: int | None = Field(None)
    segment_id: str | None = Field(None, alias="segmentId")


class EndOfSegmentLocation(BaseModel):
    """Location at the end of a body, header, footer or footnote."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    segment_id: str | None = Field(None, alias="segmentId")


class Range(BaseModel):
    """Specifies a contiguous range of text."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    end_index: int | None = Field(None, alias="endIndex")
    segment_id: str | None = Field(None, alias="segmentId")
    start_index: int | None = Field(None, alias="startIndex")


class Dimension(BaseModel):
    """A magnitude in a single direction in the specified units."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    magnitude: float | None = Field(None)
    unit: str | None = Field(None)


class RgbColor(BaseModel):
    """An RGB color, each channel in [0, 1]."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    blue: float | None = Field(None)
    green: float | None = Field(None)
    red: float | None = Field(None)


class Color(BaseModel):
    """A solid color."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    rgb_color: RgbColor | None = Field(None, alias="rgbColor")


class OptionalColor(BaseModel):
    """A color that can either be fully opaque or fully transparent."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    color: Color | None = Field(None)


class WeightedFontFamily(BaseModel):
    """Represents a font family and weight of text."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    font_family: str | None = Field(None, alias="fontFamily")
    weight: int | None = Field(None)


class TextStyle(BaseModel):
    """Represents the styling that can be applied to text."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    bold: bool | None = Field(None)
    font_size: Dimension | None = Field(None, alias="fontSize")
    italic: bool | None = Field(None)
    underline: bool | None = Field(None)
    weighted_font_family: WeightedFontFamily | None = Field(
        None, alias="weightedFontFamily"
    )


class Size(BaseModel):
    """A width and height."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    height: Dimension | None = Field(None)
    width: Dimension | None = Field(None)


class SubstringMatchCriteria(BaseModel):
    """A criteria that matches a specific string of text in the document."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    match_case: bool | None = Field(None, alias="matchCase")
    text: str | None = Field(None)


class TableCellBorder(BaseModel):
    """A border around a table cell."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    color: OptionalColor | None = Field(None)
    dash_style: str | None = Field(None, alias="dashStyle")
    width: Dimension | None = Field(None)


class TableCellStyle(BaseModel):
    """The style of a TableCell."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    background_color: OptionalColor | None = Field(None, alias="backgroundColor")
    border_bottom: TableCellBorder | None = Field(None, alias="borderBottom")
    border_left: TableCellBorder | None = Field(None, alias="borderLeft")
    border_right: TableCellBorder | None = Field(None, alias="borderRight")
    border_top: TableCellBorder | None = Field(None, alias="borderTop")


class TableCellLocation(BaseModel):
    """Location of a single cell within a table."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    column_index: int | None = Field(None, alias="columnIndex")
    row_index: int | None = Field(None, alias="rowIndex")
    table_start_location: Location | None = Field(None, alias="tableStartLocation")


class TableRange(BaseModel):
    """A table range represents a reference to a subset of a table."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    column_span: int | None = Field(None, alias="columnSpan")
    row_span: int | None = Field(None, alias="rowSpan")
    table_cell_location: TableCellLocation | None = Field(
        None, alias="tableCellLocation"
    )


class DocumentStyle(BaseModel):
    """The style of the document (only the header/footer ids are modelled)."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    default_footer_id: str | None = Field(None, alias="defaultFooterId")
    default_header_id: str | None = Field(None, alias="defaultHeaderId")
    even_page_footer_id: str | None = Field(None, alias="evenPageFooterId")
    even_page_header_id: str | None = Field(None, alias="evenPageHeaderId")
    first_page_footer_id: str | None = Field(None, alias="firstPageFooterId")
    first_page_header_id: str | None = Field(None, alias="firstPageHeaderId")
    use_even_page_header_footer: bool | None = Field(
        None, alias="useEvenPageHeaderFooter"
    )
    use_first_page_header_footer: bool | None = Field(
        None, alias="useFirstPageHeaderFooter"
    )


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class InsertTextRequest(BaseModel):
    """Inserts text at the specified location."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    end_of_segment_location: EndOfSegmentLocation | None = Field(
        None, alias="endOfSegmentLocation"
    )
    location: Location | None = Field(None)
    text: str | None = Field(None)


class DeleteContentRangeRequest(BaseModel):
    """Deletes content from the document."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    range: Range | None = Field(None)


class UpdateTextStyleRequest(BaseModel):
    """Update the styling of text."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    fields: str | None = Field(None)
    range: Range | None = Field(None)
    text_style: TextStyle | None = Field(None, alias="textStyle")


class InsertTableRequest(BaseModel):
    """Inserts a table at the specified location."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    columns: int | None = Field(None)
    end_of_segment_location: EndOfSegmentLocation | None = Field(
        None, alias="endOfSegmentLocation"
    )
    location: Location | None = Field(None)
    rows: int | None = Field(None)


class InsertPageBreakRequest(BaseModel):
    """Inserts a page break followed by a newline at the specified location."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    end_of_segment_location: EndOfSegmentLocation | None = Field(
        None, alias="endOfSegmentLocation"
    )
    location: Location | None = Field(None)


class CreateParagraphBulletsRequest(BaseModel):
    """Creates bullets for all of the paragraphs that overlap with the range."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    bullet_preset: str | None = Field(None, alias="bulletPreset")
    range: Range | None = Field(None)


class ReplaceAllTextRequest(BaseModel):
    """Replaces all instances of text matching a criteria with replace text."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    contains_text: SubstringMatchCriteria | None = Field(None, alias="containsText")
    replace_text: str | None = Field(None, alias="replaceText")


class InsertInlineImageRequest(BaseModel):
    """Inserts an InlineObject containing an image at the given location."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    location: Location | None = Field(None)
    object_size: Size | None = Field(None, alias="objectSize")
    uri: str | None = Field(None)


class UpdateTableCellStyleRequest(BaseModel):
    """Updates the style of a range of table cells."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    fields: str | None = Field(None)
    table_cell_style: TableCellStyle | None = Field(None, alias="tableCellStyle")
    table_range: TableRange | None = Field(None, alias="tableRange")
    table_start_location: Location | None = Field(None, alias="tableStartLocation")


class CreateHeaderRequest(BaseModel):
    """Creates a Header."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    section_break_location: Location | None = Field(
        None, alias="sectionBreakLocation"
    )
    type: str | None = Field(None)


class CreateFooterRequest(BaseModel):
    """Creates a Footer."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    section_break_location: Location | None = Field(
        None, alias="sectionBreakLocation"
    )
    type: str | None = Field(None)


class UpdateDocumentStyleRequest(BaseModel):
    """Updates the DocumentStyle."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    document_style: DocumentStyle | None = Field(None, alias="documentStyle")
    fields: str | None = Field(None)


class Request(BaseModel):
    """A single update to apply to a document.

    Exactly one field is set on a well-formed request.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    create_footer: CreateFooterRequest | None = Field(None, alias="createFooter")
    create_header: CreateHeaderRequest | None = Field(None, alias="createHeader")
    create_paragraph_bullets: CreateParagraphBulletsRequest | None = Field(
        None, alias="createParagraphBullets"
    )
    delete_content_range: DeleteContentRangeRequest | None = Field(
        None, alias="deleteContentRange"
    )
    insert_inline_image: InsertInlineImageRequest | None = Field(
        None, alias="insertInlineImage"
    )
    insert_page_break: InsertPageBreakRequest | None = Field(
        None, alias="insertPageBreak"
    )
    insert_table: InsertTableRequest | None = Field(None, alias="insertTable")
    insert_text: InsertTextRequest | None = Field(None, alias="insertText")
    replace_all_text: ReplaceAllTextRequest | None = Field(None, alias="replaceAllText")
    update_document_style: UpdateDocumentStyleRequest | None = Field(
        None, alias="updateDocumentStyle"
    )
    update_table_cell_style: UpdateTableCellStyleRequest | None = Field(
        None, alias="updateTableCellStyle"
    )
    update_text_style: UpdateTextStyleRequest | None = Field(
        None, alias="updateTextStyle"
    )

    @property
    def request_type(self) -> str:
        """The wire name of the populated request kind, e.g. ``insertText``."""
        keys = list(self.to_api().keys())
        return keys[0] if keys else ""

    def to_api(self) -> dict[str, Any]:
        """Serialize to the dict shape accepted by documents.batchUpdate."""
        return self.model_dump(by_alias=True, exclude_none=True)

