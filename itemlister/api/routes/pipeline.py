"""OCR, normalization and full processing endpoints."""

from fastapi import APIRouter, Depends

from itemlister.api.dependencies import get_services
from itemlister.api.schemas import (
    NormalizeRequest,
    OcrRequest,
    ProcessRequestBody,
    TitleDescriptionRequest,
)
from itemlister.api.services import Services
from itemlister.processor.models import ProcessOutcome, ProcessRequest
from itemlister.processor.processor import IngestionProcessor
from itemlister.processor.step_errors import OCR_STEP, TITLE_GENERATION_STEP, step_error

router = APIRouter(prefix="/api", tags=["pipeline"])


@router.post("/ocr")
def run_ocr(body: OcrRequest, services: Services = Depends(get_services)) -> dict:
    try:
        result = services.cards.processor.extract_text(body.filename)
    except Exception as exc:
        raise step_error(OCR_STEP, exc) from exc
    return {
        "rawOcrText": result.full_text,
        "ocrBlocks": [block.to_dict() for block in result.blocks],
    }


@router.post("/normalize")
def normalize(body: NormalizeRequest, services: Services = Depends(get_services)) -> dict:
    outcome = services.cards.processor.normalize_only(body.raw_ocr_text)
    return {
        "normalized": outcome.normalization.fields,
        "confidenceByField": outcome.normalization.confidence_by_field,
        "autoTitle": outcome.listing.title,
        "autoDescription": outcome.listing.description,
    }


@router.post("/normalize/title-description")
def title_description(body: TitleDescriptionRequest, services: Services = Depends(get_services)) -> dict:
    fields = {name: "" if value is None else str(value) for name, value in body.normalized.items()}
    try:
        result = services.cards.listing_generator.generate(fields)
    except Exception as exc:
        raise step_error(TITLE_GENERATION_STEP, exc) from exc
    return {"autoTitle": result.title, "autoDescription": result.description}


@router.post("/process")
def process_card(body: ProcessRequestBody, services: Services = Depends(get_services)) -> dict:
    outcome = _process(services.cards.processor, body)
    return {"cardId": outcome.record.id, "card": outcome.record.to_dict(), "timings": outcome.timings}


@router.post("/process-book")
def process_book(body: ProcessRequestBody, services: Services = Depends(get_services)) -> dict:
    outcome = _process(services.books.processor, body)
    return {"bookId": outcome.record.id, "book": outcome.record.to_dict(), "timings": outcome.timings}


def _process(processor: IngestionProcessor, body: ProcessRequestBody) -> ProcessOutcome:
    return processor.process(
        ProcessRequest(filename=body.filename, source_image_id=body.source_image_id, url=body.url)
    )
