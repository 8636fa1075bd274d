class NormalizationError(Exception):
    """Raised when OCR text cannot be normalized into structured fields."""


class PromptTemplateError(NormalizationError):
    """Raised when a bundled prompt template cannot be loaded."""
