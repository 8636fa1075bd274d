from abc import ABC, abstractmethod

from itemlister.normalization.models import NormalizationResult


class BaseNormalizer(ABC):
    """Contract for all field normalizers."""

    @abstractmethod
    def normalize(self, text: str) -> NormalizationResult:
        """Transform raw OCR text into the record kind's field set.

        Args:
            text: Full OCR text blob; callers reject empty text first.

        Returns:
            NormalizationResult with every schema field present.

        Raises:
            NormalizationError: when the model output is unusable.
            GenerationError: when no model could be reached.
        """
