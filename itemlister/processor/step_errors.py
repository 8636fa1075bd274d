"""Maps pipeline failures to step-tagged errors with remediation text."""

from itemlister.generation.exceptions import (
    USER_MESSAGES,
    CandidatesExhaustedError,
    ErrorKind,
    ProviderError,
)
from itemlister.ocr.exceptions import OcrError
from itemlister.processor.exceptions import (
    EmptyOcrTextError,
    ImageNotFoundError,
    InvalidImagePathError,
    ProcessingStepError,
)

OCR_STEP = "ocr"
NORMALIZATION_STEP = "normalization"
TITLE_GENERATION_STEP = "title_generation"

_KIND_STATUS: dict[ErrorKind, int] = {
    ErrorKind.MODEL_MISSING: 503,
    ErrorKind.TRANSIENT: 503,
    ErrorKind.ACCESS_DENIED: 403,
    ErrorKind.AUTHENTICATION: 401,
    ErrorKind.FATAL: 500,
}

_KIND_ERROR: dict[ErrorKind, str] = {
    ErrorKind.MODEL_MISSING: "AI service unavailable",
    ErrorKind.TRANSIENT: "AI service temporarily unavailable",
    ErrorKind.ACCESS_DENIED: "AI service access denied",
    ErrorKind.AUTHENTICATION: "AI service authentication failed",
}

_STEP_FAILURE: dict[str, str] = {
    NORMALIZATION_STEP: "AI normalization failed",
    TITLE_GENERATION_STEP: "Title generation failed",
}

EMPTY_TEXT_MESSAGE = (
    "Unable to extract any text from this image. Please ensure:\n"
    "- The image is clear and in focus\n"
    "- The text is visible and readable\n"
    "- Try uploading a higher quality image"
)


def step_error(step: str, exc: Exception) -> ProcessingStepError:
    """Classify `exc` raised during `step` into a ProcessingStepError."""
    details = str(exc)
    if isinstance(exc, ProcessingStepError):
        return exc
    if isinstance(exc, ImageNotFoundError):
        return ProcessingStepError(
            step=step,
            status_code=404,
            error="Image file not found",
            message="The uploaded image file could not be found. Please try uploading again.",
            details=details,
        )
    if isinstance(exc, InvalidImagePathError):
        return ProcessingStepError(
            step=step,
            status_code=400,
            error="Invalid image filename",
            message="The image filename is not valid. Please upload the image again.",
            details=details,
        )
    if isinstance(exc, EmptyOcrTextError):
        return ProcessingStepError(
            step=step,
            status_code=400,
            error="No text found in image",
            message=EMPTY_TEXT_MESSAGE,
            details=details,
        )
    if isinstance(exc, OcrError):
        if exc.status_code in (401, 403):
            return ProcessingStepError(
                step=step,
                status_code=exc.status_code,
                error="OCR service access denied",
                message="Unable to access the text detection service. Check the OCR API key and permissions.",
                details=details,
            )
        return ProcessingStepError(
            step=step,
            status_code=500,
            error="OCR processing failed",
            message=(
                "Unable to extract text from the image. Please ensure the image is clear "
                "and contains readable text, then try again."
            ),
            details=details,
        )

    kind = _generation_kind(exc)
    if kind is not None and kind is not ErrorKind.FATAL:
        return ProcessingStepError(
            step=step,
            status_code=_KIND_STATUS[kind],
            error=_KIND_ERROR[kind],
            message=USER_MESSAGES[kind],
            details=details,
        )
    return ProcessingStepError(
        step=step,
        status_code=500,
        error=_STEP_FAILURE.get(step, "Processing failed"),
        message=details or "Unable to process the extracted text. Please try again.",
        details=details,
    )


def _generation_kind(exc: Exception) -> ErrorKind | None:
    if isinstance(exc, ProviderError):
        return exc.kind
    if isinstance(exc, CandidatesExhaustedError):
        return exc.last_kind
    return None
