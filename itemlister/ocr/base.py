from abc import ABC, abstractmethod

from itemlister.ocr.models import OcrResult


class BaseOcrClient(ABC):
    """Image bytes in, detected text out.

    An image without text is a valid result with empty `full_text`;
    only provider or transport failures raise OcrError.
    """

    @abstractmethod
    def detect_text(self, image_bytes: bytes) -> OcrResult:
        raise NotImplementedError

    @property
    def is_configured(self) -> bool:
        return True
