from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from itemlister.ocr.models import OcrBlock


class RecordKind(str, Enum):
    CARD = "card"
    BOOK = "book"


class ProcessingStatus(str, Enum):
    """Pipeline stage of a record. Only `ready_for_review` is written today; failures land in `errors`."""

    UPLOADED = "uploaded"
    OCR_COMPLETE = "ocr_complete"
    AI_NORMALIZED = "ai_normalized"
    READY_FOR_REVIEW = "ready_for_review"
    EXPORTED = "exported"
    ERROR = "error"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class SourceImage:
    id: str = ""
    url: str = ""
    filename: str = ""

    def to_dict(self) -> dict[str, str]:
        return {"id": self.id, "url": self.url, "filename": self.filename}


@dataclass(frozen=True)
class ProcessingError:
    step: str
    message: str
    timestamp: datetime = field(default_factory=utc_now)

    def to_dict(self) -> dict[str, str]:
        return {"step": self.step, "message": self.message, "timestamp": self.timestamp.isoformat()}


@dataclass
class Record:
    """One photographed item and everything extracted from it.

    `id`, `raw_ocr_text` and `ocr_blocks` never change after creation.
    `version` is bumped by the store on every mutation.
    """

    kind: RecordKind
    id: str
    source_image: SourceImage = field(default_factory=SourceImage)
    raw_ocr_text: str = ""
    ocr_blocks: list[OcrBlock] = field(default_factory=list)
    normalized_fields: dict[str, str] = field(default_factory=dict)
    confidence_by_field: dict[str, float] = field(default_factory=dict)
    auto_title: str = ""
    auto_description: str = ""
    processing_status: ProcessingStatus = ProcessingStatus.READY_FOR_REVIEW
    errors: list[ProcessingError] = field(default_factory=list)
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)
    version: int = 0

    def to_dict(self) -> dict[str, object]:
        """Serialize with the camelCase keys used on the wire."""
        return {
            "id": self.id,
            "kind": self.kind.value,
            "sourceImage": self.source_image.to_dict(),
            "rawOcrText": self.raw_ocr_text,
            "ocrBlocks": [block.to_dict() for block in self.ocr_blocks],
            "normalized": dict(self.normalized_fields),
            "confidenceByField": dict(self.confidence_by_field),
            "autoTitle": self.auto_title,
            "autoDescription": self.auto_description,
            "processingStatus": self.processing_status.value,
            "errors": [error.to_dict() for error in self.errors],
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
            "version": self.version,
        }
