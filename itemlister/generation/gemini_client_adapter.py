"""Generative-model client for the Gemini REST API."""

from typing import Any, ClassVar

import httpx

from itemlister.generation.client_base import BaseGenerationClient
from itemlister.generation.exceptions import ErrorKind, ProviderError, classify_provider_failure
from itemlister.generation.models import GenerationConfig
from itemlister.logging.logger import Log


class GeminiClientAdapter(BaseGenerationClient):
    """Talks to `generativelanguage.googleapis.com` over plain HTTP."""

    DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
    DEFAULT_MODELS: ClassVar[tuple[str, ...]] = (
        "gemini-1.5-flash",
        "gemini-flash-latest",
        "gemini-2.5-flash",
        "gemini-1.5-pro",
    )

    def __init__(
        self,
        *,
        api_key: str,
        timeout_seconds: float,
        base_url: str | None = None,
        http_client: httpx.Client | None = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = (base_url or self.DEFAULT_BASE_URL).rstrip("/")
        self._http = http_client or httpx.Client(
            timeout=httpx.Timeout(timeout_seconds, connect=min(timeout_seconds, 10.0))
        )

    def list_models(self) -> list[str]:
        data = self._request("GET", f"{self._base_url}/models")
        names: list[str] = []
        for entry in data.get("models", []) or []:
            name = str(entry.get("name") or "").removeprefix("models/")
            if name and "gemini" in name:
                names.append(name)
        return names

    def generate(self, *, model: str, prompt: str, config: GenerationConfig) -> str:
        model_path = model if model.startswith("models/") else f"models/{model}"
        generation_config: dict[str, Any] = {
            "temperature": config.temperature,
            "maxOutputTokens": config.max_output_tokens,
        }
        if config.json_output:
            generation_config["responseMimeType"] = "application/json"
        payload = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": generation_config,
        }
        data = self._request(
            "POST", f"{self._base_url}/{model_path}:generateContent", json=payload
        )
        return self._extract_text(data, model)

    def _request(self, method: str, url: str, **kwargs: Any) -> dict[str, Any]:
        if not self._api_key:
            raise ProviderError(
                "Gemini API key is not configured. Set GEMINI_API_KEY.",
                kind=ErrorKind.AUTHENTICATION,
            )
        try:
            response = self._http.request(
                method, url, params={"key": self._api_key}, **kwargs
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            body = exc.response.text[:500]
            raise ProviderError(
                f"Gemini HTTP {status}: {body}",
                kind=classify_provider_failure(status, body),
                status_code=status,
            ) from exc
        except (httpx.TimeoutException, httpx.TransportError) as exc:
            raise ProviderError(
                f"Gemini network error: {exc}", kind=ErrorKind.TRANSIENT
            ) from exc

        try:
            data = response.json()
        except ValueError as exc:
            raise ProviderError(f"Gemini returned non-JSON body: {exc}") from exc
        if not isinstance(data, dict):
            raise ProviderError("Gemini returned an unexpected response shape")
        return data

    @staticmethod
    def _extract_text(data: dict[str, Any], model: str) -> str:
        flattened = data.get("text")
        if isinstance(flattened, str) and flattened.strip():
            return flattened

        candidates = data.get("candidates") or []
        if not candidates:
            feedback = data.get("promptFeedback") or {}
            raise ProviderError(
                f"Gemini returned no candidates (blockReason={feedback.get('blockReason')})"
            )
        candidate = candidates[0]
        if candidate.get("finishReason") == "MAX_TOKENS":
            Log.warning(f"Model {model} stopped at the output token limit; response may be truncated")
        parts = (candidate.get("content") or {}).get("parts") or []
        text = parts[0].get("text", "") if parts else ""
        if not text or not text.strip():
            raise ProviderError("No response content from Gemini - response was empty")
        return text
