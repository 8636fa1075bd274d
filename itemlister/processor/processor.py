import time
from collections.abc import Callable
from typing import TypeVar

from itemlister.listing.generator import ListingGenerator
from itemlister.logging.logger import Log
from itemlister.normalization.base import BaseNormalizer
from itemlister.ocr.base import BaseOcrClient
from itemlister.ocr.models import OcrResult
from itemlister.processor.background import BackgroundCompletionUpdater
from itemlister.processor.exceptions import EmptyOcrTextError, ProcessingStepError
from itemlister.processor.file_loader import FileLoader
from itemlister.processor.models import NormalizeOutcome, ProcessOutcome, ProcessRequest
from itemlister.processor.step_errors import (
    NORMALIZATION_STEP,
    OCR_STEP,
    TITLE_GENERATION_STEP,
    step_error,
)
from itemlister.records.models import ProcessingStatus, Record, SourceImage
from itemlister.records.store import RecordStore

T = TypeVar("T")


class IngestionProcessor:
    """Runs the photo-to-record pipeline for one record kind.

    Pipeline: load -> OCR -> empty-text check -> normalize -> create record
    -> dispatch background title/description generation.
    Every failure surfaces as a ProcessingStepError tagged with its step.
    """

    def __init__(
        self,
        *,
        file_loader: FileLoader,
        ocr_client: BaseOcrClient,
        normalizer: BaseNormalizer,
        listing_generator: ListingGenerator,
        store: RecordStore,
        updater: BackgroundCompletionUpdater,
    ) -> None:
        self._file_loader = file_loader
        self._ocr_client = ocr_client
        self._normalizer = normalizer
        self._listing_generator = listing_generator
        self._store = store
        self._updater = updater

    @property
    def kind(self) -> str:
        return self._store.kind.value

    def process(self, request: ProcessRequest) -> ProcessOutcome:
        Log.info(f"Starting {self.kind} processing pipeline for {request.filename}")
        timings: dict[str, float] = {}
        started = time.perf_counter()

        # Step 1: OCR
        ocr_result = self._timed(timings, "ocr", OCR_STEP, lambda: self.extract_text(request.filename))
        if ocr_result.is_empty:
            Log.warning(f"OCR returned no readable text for {request.filename}")
            raise step_error(OCR_STEP, EmptyOcrTextError("OCR returned empty text"))

        # Step 2: Normalize
        normalization = self._timed(
            timings,
            "normalization",
            NORMALIZATION_STEP,
            lambda: self._normalizer.normalize(ocr_result.full_text),
        )

        # Step 3: Create record, title/description still empty
        record_id = self._store.new_id()
        record = self._store.create(
            Record(
                kind=self._store.kind,
                id=record_id,
                source_image=SourceImage(
                    id=request.source_image_id or record_id,
                    url=request.url or f"/uploads/{request.filename}",
                    filename=request.filename,
                ),
                raw_ocr_text=ocr_result.full_text,
                ocr_blocks=list(ocr_result.blocks),
                normalized_fields=dict(normalization.fields),
                confidence_by_field=dict(normalization.confidence_by_field),
                processing_status=ProcessingStatus.READY_FOR_REVIEW,
            )
        )

        # Step 4: Title/description in the background
        completion = self._updater.dispatch(record)

        timings["total"] = round(time.perf_counter() - started, 1)
        Log.info(f"{self.kind.capitalize()} {record.id} created in {timings['total']}s")
        return ProcessOutcome(record=record, timings=timings, completion=completion)

    def extract_text(self, filename: str) -> OcrResult:
        image_bytes = self._file_loader.load(filename)
        Log.info(f"Loaded {len(image_bytes)} bytes from {filename}")
        return self._ocr_client.detect_text(image_bytes)

    def normalize_only(self, raw_text: str) -> NormalizeOutcome:
        """Normalize text and generate the listing synchronously, storing nothing."""
        if not any(ch.isalnum() for ch in raw_text):
            raise step_error(NORMALIZATION_STEP, EmptyOcrTextError("No text to normalize"))
        normalization = self._guard(
            NORMALIZATION_STEP, lambda: self._normalizer.normalize(raw_text)
        )
        listing = self._guard(
            TITLE_GENERATION_STEP,
            lambda: self._listing_generator.generate(dict(normalization.fields)),
        )
        return NormalizeOutcome(normalization=normalization, listing=listing)

    def _timed(self, timings: dict[str, float], name: str, step: str, action: Callable[[], T]) -> T:
        started = time.perf_counter()
        result = self._guard(step, action)
        timings[name] = round(time.perf_counter() - started, 1)
        Log.info(f"{name} took {timings[name]}s")
        return result

    @staticmethod
    def _guard(step: str, action: Callable[[], T]) -> T:
        try:
            return action()
        except ProcessingStepError:
            raise
        except Exception as exc:
            error = step_error(step, exc)
            Log.error(f"{step} step failed ({error.status_code}): {exc}")
            raise error from exc
