from typing import ClassVar

import httpx
import openai

from itemlister.generation.client_base import BaseGenerationClient
from itemlister.generation.exceptions import ErrorKind, ProviderError, classify_provider_failure
from itemlister.generation.models import GenerationConfig


class OpenAIClientAdapter(BaseGenerationClient):
    """Generative-model client built on the OpenAI-compatible chat API."""

    DEFAULT_MODELS: ClassVar[tuple[str, ...]] = ("gpt-4o-mini", "gpt-4o")
    CHAT_PREFIXES: ClassVar[tuple[str, ...]] = ("gpt-", "chatgpt-")
    # Listed under gpt-* but not served by chat completions.
    NON_CHAT_MARKERS: ClassVar[tuple[str, ...]] = (
        "audio",
        "realtime",
        "transcribe",
        "tts",
        "image",
        "instruct",
        "search",
        "embedding",
    )

    def __init__(
        self,
        *,
        api_key: str,
        timeout_seconds: int,
        base_url: str | None = None,
        http_client: httpx.Client | None = None,
    ) -> None:
        self._client = openai.OpenAI(
            api_key=api_key,
            timeout=timeout_seconds,
            base_url=base_url,
            http_client=http_client,
        )

    def list_models(self) -> list[str]:
        try:
            ids = [model.id for model in self._client.models.list()]
        except openai.APIError as exc:
            raise self._translate(exc) from exc
        return [model_id for model_id in ids if self.is_chat_model(model_id)]

    @classmethod
    def is_chat_model(cls, model_id: str) -> bool:
        lowered = model_id.lower()
        if not lowered.startswith(cls.CHAT_PREFIXES):
            return False
        return not any(marker in lowered for marker in cls.NON_CHAT_MARKERS)

    def generate(self, *, model: str, prompt: str, config: GenerationConfig) -> str:
        kwargs: dict[str, object] = {}
        if config.json_output:
            kwargs["response_format"] = {"type": "json_object"}
        try:
            response = self._client.chat.completions.create(
                model=model,
                temperature=config.temperature,
                max_tokens=config.max_output_tokens,
                messages=[{"role": "user", "content": prompt}],
                **kwargs,
            )
        except (httpx.ConnectError, httpx.TimeoutException) as exc:
            raise ProviderError(
                f"AI provider network error: {exc}", kind=ErrorKind.TRANSIENT
            ) from exc
        except openai.APIError as exc:
            raise self._translate(exc) from exc

        if not response.choices:
            raise ProviderError("AI returned no choices")
        content = response.choices[0].message.content
        if content is None or not content.strip():
            raise ProviderError("AI returned empty response")
        return content

    @staticmethod
    def _translate(exc: openai.APIError) -> ProviderError:
        if isinstance(exc, (openai.APIConnectionError, openai.APITimeoutError)):
            return ProviderError(f"AI provider network error: {exc}", kind=ErrorKind.TRANSIENT)
        status = exc.status_code if isinstance(exc, openai.APIStatusError) else None
        return ProviderError(
            f"AI provider API error: {exc}",
            kind=classify_provider_failure(status, str(exc)),
            status_code=status,
        )
