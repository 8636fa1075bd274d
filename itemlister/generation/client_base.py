from abc import ABC, abstractmethod
from typing import ClassVar

from itemlister.generation.models import GenerationConfig


class BaseGenerationClient(ABC):
    """Contract for provider-specific generative-model clients.

    Implementations raise ProviderError with a classified ErrorKind and
    never let transport-library exceptions escape.
    """

    DEFAULT_MODELS: ClassVar[tuple[str, ...]] = ()

    @abstractmethod
    def list_models(self) -> list[str]:
        """Return model identifiers currently offered by the provider."""

    @abstractmethod
    def generate(self, *, model: str, prompt: str, config: GenerationConfig) -> str:
        """Return the raw text produced by `model` for `prompt`."""

    def default_models(self) -> list[str]:
        """Models to try when nothing is configured and discovery fails."""
        return list(self.DEFAULT_MODELS)
