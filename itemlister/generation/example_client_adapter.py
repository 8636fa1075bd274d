"""Example generation client adapter.

Use this module as a reference when implementing new provider adapters.
Implement BaseGenerationClient and register the provider in
GenerationClientFactory.
"""

import json
from typing import ClassVar

from itemlister.generation.client_base import BaseGenerationClient
from itemlister.generation.models import GenerationConfig


class ExampleClientAdapter(BaseGenerationClient):
    """Offline adapter that answers every prompt with canned JSON.

    Responses are chosen by the first marker found in the prompt; prompts
    matching no marker get `default_response`.
    """

    DEFAULT_MODELS: ClassVar[tuple[str, ...]] = ("example-flash",)

    DEFAULT_RESPONSES: ClassVar[dict[str, str]] = {
        "Extract and normalize sports card information": json.dumps(
            {"normalized": {}, "confidenceByField": {}}
        ),
        "Extract bibliographic information": json.dumps(
            {"normalized": {}, "confidenceByField": {}}
        ),
        "Generate a title and description": json.dumps(
            {"autoTitle": "", "autoDescription": ""}
        ),
    }

    def __init__(
        self,
        responses: dict[str, str] | None = None,
        default_response: str = "{}",
    ) -> None:
        self._responses = dict(self.DEFAULT_RESPONSES)
        if responses:
            self._responses.update(responses)
        self._default_response = default_response
        self.prompts: list[str] = []

    def list_models(self) -> list[str]:
        return list(self.DEFAULT_MODELS)

    def generate(self, *, model: str, prompt: str, config: GenerationConfig) -> str:
        _ = model, config
        self.prompts.append(prompt)
        for marker, response in self._responses.items():
            if marker in prompt:
                return response
        return self._default_response
