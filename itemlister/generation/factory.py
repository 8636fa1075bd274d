import time
from collections.abc import Callable
from typing import ClassVar

from itemlister.config.settings import Settings
from itemlister.generation.attempt_runner import AttemptRunner
from itemlister.generation.client_base import BaseGenerationClient
from itemlister.generation.example_client_adapter import ExampleClientAdapter
from itemlister.generation.gemini_client_adapter import GeminiClientAdapter
from itemlister.generation.model_directory import ModelDirectory
from itemlister.generation.model_selector import ModelSelector
from itemlister.generation.openai_client_adapter import OpenAIClientAdapter
from itemlister.generation.orchestrator import GenerationOrchestrator
from itemlister.generation.retry import BackoffRetrier


class GenerationClientFactory:
    """Creates the configured generation client and the orchestration around it."""

    PROVIDERS: ClassVar[tuple[str, ...]] = ("gemini", "openai", "example")

    @classmethod
    def create_client(cls, settings: Settings) -> BaseGenerationClient:
        provider = settings.generation_provider.lower()
        if provider == "gemini":
            return GeminiClientAdapter(
                api_key=settings.gemini_api_key,
                timeout_seconds=settings.gemini_timeout_seconds,
                base_url=settings.gemini_base_url,
            )
        if provider == "openai":
            return OpenAIClientAdapter(
                api_key=settings.openai_api_key,
                timeout_seconds=settings.openai_timeout_seconds,
                base_url=settings.openai_base_url,
            )
        if provider == "example":
            return ExampleClientAdapter()
        raise ValueError(
            f"Unknown generation provider '{provider}'. Choose from: {list(cls.PROVIDERS)}"
        )

    @classmethod
    def create_orchestrator(
        cls,
        settings: Settings,
        client: BaseGenerationClient | None = None,
        sleep: Callable[[float], None] | None = None,
    ) -> GenerationOrchestrator:
        """Wire directory, selector, retrier and runner around one client."""
        client = client or cls.create_client(settings)
        fallback = list(settings.generation_fallback_models) or client.default_models()
        selector = ModelSelector(ModelDirectory(client), fallback_models=fallback)
        retrier = BackoffRetrier(
            max_attempts=settings.generation_max_attempts,
            base_delay_ms=settings.generation_base_delay_ms,
            sleep=sleep or time.sleep,
        )
        return GenerationOrchestrator(selector, AttemptRunner(client, retrier))
