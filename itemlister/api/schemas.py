"""Request bodies. Wire keys are camelCase to match the review UI."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ApiModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class OcrRequest(ApiModel):
    filename: str = Field(min_length=1)


class NormalizeRequest(ApiModel):
    raw_ocr_text: str = Field(alias="rawOcrText")


class TitleDescriptionRequest(ApiModel):
    normalized: dict[str, Any]


class ProcessRequestBody(ApiModel):
    filename: str = Field(min_length=1)
    source_image_id: str = Field(default="", alias="sourceImageId")
    url: str = ""


class RecordCreateRequest(ApiModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    source_image: dict[str, Any] | None = Field(default=None, alias="sourceImage")
    raw_ocr_text: str = Field(default="", alias="rawOcrText")
    normalized: dict[str, Any] | None = None
    confidence_by_field: dict[str, Any] | None = Field(default=None, alias="confidenceByField")
    auto_title: str = Field(default="", alias="autoTitle")
    auto_description: str = Field(default="", alias="autoDescription")


class RecordUpdateRequest(ApiModel):
    normalized: dict[str, Any] | None = None
    auto_title: str | None = Field(default=None, alias="autoTitle")
    auto_description: str | None = Field(default=None, alias="autoDescription")


class CardExportRequest(ApiModel):
    card_id: str = Field(alias="cardId", min_length=1)
    spreadsheet_id: str | None = Field(default=None, alias="spreadsheetId")
    sheet_name: str | None = Field(default=None, alias="sheetName")


class BookExportRequest(ApiModel):
    book_id: str = Field(alias="bookId", min_length=1)
    spreadsheet_id: str | None = Field(default=None, alias="spreadsheetId")
    sheet_name: str | None = Field(default=None, alias="sheetName")


class CompactRequest(ApiModel):
    spreadsheet_id: str | None = Field(default=None, alias="spreadsheetId")
    sheet_name: str | None = Field(default=None, alias="sheetName")
