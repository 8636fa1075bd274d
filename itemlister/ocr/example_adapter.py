"""Offline OCR adapter returning a fixed text, for local development and tests."""

from itemlister.ocr.base import BaseOcrClient
from itemlister.ocr.models import OcrBlock, OcrResult, Vertex


class ExampleOcrAdapter(BaseOcrClient):
    DEFAULT_TEXT = "1972 TOPPS #595 NOLAN RYAN PSA NM-MT 8"

    def __init__(self, text: str | None = None) -> None:
        self._text = self.DEFAULT_TEXT if text is None else text
        self.calls = 0

    def detect_text(self, image_bytes: bytes) -> OcrResult:
        _ = image_bytes
        self.calls += 1
        blocks = [
            OcrBlock(
                text=word,
                bounding_box=(
                    Vertex(x=i * 10, y=0),
                    Vertex(x=i * 10 + 9, y=0),
                    Vertex(x=i * 10 + 9, y=10),
                    Vertex(x=i * 10, y=10),
                ),
            )
            for i, word in enumerate(self._text.split())
        ]
        return OcrResult(full_text=self._text, blocks=blocks)
