from pathlib import Path

import pytest

from itemlister.generation.example_client_adapter import ExampleClientAdapter
from itemlister.generation.factory import GenerationClientFactory
from itemlister.generation.gemini_client_adapter import GeminiClientAdapter
from itemlister.generation.models import GenerationConfig
from itemlister.generation.openai_client_adapter import OpenAIClientAdapter
from itemlister.ocr.example_adapter import ExampleOcrAdapter
from itemlister.ocr.factory import OcrClientFactory
from itemlister.ocr.google_vision_adapter import GoogleVisionOcrAdapter
from tests.factories import settings_for_tests


class TestGenerationClientFactory:
    def test_creates_gemini_client(self, tmp_path: Path) -> None:
        settings = settings_for_tests(tmp_path, generation_provider="gemini", gemini_api_key="k")
        assert isinstance(GenerationClientFactory.create_client(settings), GeminiClientAdapter)

    def test_creates_openai_client(self, tmp_path: Path) -> None:
        settings = settings_for_tests(tmp_path, generation_provider="openai", openai_api_key="k")
        assert isinstance(GenerationClientFactory.create_client(settings), OpenAIClientAdapter)

    def test_creates_example_client(self, tmp_path: Path) -> None:
        settings = settings_for_tests(tmp_path, generation_provider="EXAMPLE")
        assert isinstance(GenerationClientFactory.create_client(settings), ExampleClientAdapter)

    def test_unknown_provider_raises(self, tmp_path: Path) -> None:
        settings = settings_for_tests(tmp_path, generation_provider="bogus")
        with pytest.raises(ValueError, match="Unknown generation provider 'bogus'"):
            GenerationClientFactory.create_client(settings)

    def test_orchestrator_uses_example_models_as_fallback(self, tmp_path: Path) -> None:
        client = ExampleClientAdapter(default_response='{"ok": 1}')
        orchestrator = GenerationClientFactory.create_orchestrator(
            settings_for_tests(tmp_path), client=client, sleep=lambda _: None
        )
        assert orchestrator.generate("ping", GenerationConfig()) == '{"ok": 1}'
        assert orchestrator.selector.cached_model == "example-flash"

    def test_orchestrator_prefers_configured_fallbacks(self, tmp_path: Path) -> None:
        settings = settings_for_tests(tmp_path, generation_fallback_models=["example-pro"])
        orchestrator = GenerationClientFactory.create_orchestrator(
            settings, client=ExampleClientAdapter(), sleep=lambda _: None
        )
        assert orchestrator.selector.cached_model == "example-pro"

    def test_gemini_fallbacks_come_from_adapter(self, tmp_path: Path) -> None:
        settings = settings_for_tests(tmp_path, generation_provider="gemini", gemini_api_key="k")
        orchestrator = GenerationClientFactory.create_orchestrator(settings, sleep=lambda _: None)
        assert orchestrator.selector.cached_model == "gemini-1.5-flash"


class TestOcrClientFactory:
    def test_creates_google_vision_adapter(self, tmp_path: Path) -> None:
        settings = settings_for_tests(tmp_path, ocr_provider="google_vision")
        assert isinstance(OcrClientFactory.create(settings), GoogleVisionOcrAdapter)

    def test_creates_example_adapter(self, tmp_path: Path) -> None:
        assert isinstance(OcrClientFactory.create(settings_for_tests(tmp_path)), ExampleOcrAdapter)

    def test_unknown_provider_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError, match="Unknown OCR provider"):
            OcrClientFactory.create(settings_for_tests(tmp_path, ocr_provider="tesseract"))
