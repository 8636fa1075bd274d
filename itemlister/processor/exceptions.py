class ProcessorError(Exception):
    """Base exception for ingestion pipeline errors."""


class ImageNotFoundError(ProcessorError):
    """Raised when an uploaded image cannot be found under the upload directory."""


class InvalidImagePathError(ProcessorError):
    """Raised when a filename would resolve outside the upload directory."""


class EmptyOcrTextError(ProcessorError):
    """Raised when OCR succeeded but found no readable characters."""


class ProcessingStepError(ProcessorError):
    """A pipeline failure tagged with the step it happened in.

    Carries everything the HTTP layer needs to render a step-specific
    error body. `details` holds the raw upstream message.
    """

    def __init__(
        self,
        *,
        step: str,
        status_code: int,
        error: str,
        message: str,
        details: str = "",
    ) -> None:
        super().__init__(f"[{step}] {error}: {details or message}")
        self.step = step
        self.status_code = status_code
        self.error = error
        self.message = message
        self.details = details
