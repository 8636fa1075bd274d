from typing import ClassVar

from itemlister.config.settings import Settings
from itemlister.ocr.base import BaseOcrClient
from itemlister.ocr.example_adapter import ExampleOcrAdapter
from itemlister.ocr.google_vision_adapter import GoogleVisionOcrAdapter


class OcrClientFactory:
    PROVIDERS: ClassVar[tuple[str, ...]] = ("google_vision", "example")

    @classmethod
    def create(cls, settings: Settings) -> BaseOcrClient:
        provider = settings.ocr_provider.lower()
        if provider == "google_vision":
            return GoogleVisionOcrAdapter(
                api_key=settings.google_vision_api_key,
                timeout_seconds=settings.ocr_timeout_seconds,
                base_url=settings.google_vision_base_url,
            )
        if provider == "example":
            return ExampleOcrAdapter()
        raise ValueError(
            f"Unknown OCR provider '{provider}'. Choose from: {list(cls.PROVIDERS)}"
        )
