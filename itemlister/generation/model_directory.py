from itemlister.generation.client_base import BaseGenerationClient
from itemlister.generation.exceptions import GenerationError
from itemlister.logging.logger import Log


class ModelDirectory:
    """Lists the provider's models; an unreachable listing yields []."""

    def __init__(self, client: BaseGenerationClient) -> None:
        self._client = client

    def list_available_models(self) -> list[str]:
        # Re-queried on every call; ModelSelector decides when to ask.
        try:
            models = self._client.list_models()
        except GenerationError as exc:
            Log.warning(f"Could not list models: {exc}")
            return []
        Log.debug(f"Provider offers {len(models)} model(s): {', '.join(models)}")
        return models
