import threading
from collections.abc import Iterable, Sequence

from itemlister.generation.model_directory import ModelDirectory
from itemlister.logging.logger import Log

PREFERRED_TAG = "flash"
EXCLUDED_TAGS = ("preview", "exp", "thinking", "reasoning")


def _dedupe(models: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    ordered: list[str] = []
    for model in models:
        if model and model not in seen:
            seen.add(model)
            ordered.append(model)
    return ordered


def rank_models(discovered: Iterable[str]) -> list[str]:
    """Drop unstable variants and put latency-optimized ones first."""
    stable = [m for m in discovered if not any(tag in m.lower() for tag in EXCLUDED_TAGS)]
    flash = [m for m in stable if PREFERRED_TAG in m.lower()]
    others = [m for m in stable if PREFERRED_TAG not in m.lower()]
    return _dedupe(flash + others)


def select_candidates(
    cached_model: str | None,
    discovered: Iterable[str],
    fallback_models: Sequence[str],
) -> list[str]:
    """Ordered, duplicate-free models to try for one request, cached model first."""
    head = [cached_model] if cached_model else []
    return _dedupe([*head, *rank_models(discovered), *fallback_models])


class ModelSelector:
    """Owns the "last known good" model and the discovery-done flag.

    One instance lives for the process (or a test). Discovery runs until it
    yields something usable or a model succeeds; after that the cached
    model leads and only the fixed fallback list follows it.
    """

    def __init__(
        self,
        directory: ModelDirectory,
        fallback_models: Sequence[str],
        default_model: str | None = None,
    ) -> None:
        if not fallback_models and not default_model:
            raise ValueError("ModelSelector needs at least one fallback model")
        self._directory = directory
        self._fallback_models = list(fallback_models)
        self._default_model = default_model or self._fallback_models[0]
        self._lock = threading.Lock()
        self._cached_model = self._default_model
        self._discovery_done = False

    @property
    def directory(self) -> ModelDirectory:
        return self._directory

    @property
    def cached_model(self) -> str:
        return self._cached_model

    @property
    def discovery_done(self) -> bool:
        return self._discovery_done

    def get_candidates(self) -> list[str]:
        with self._lock:
            cached = self._cached_model
            needs_discovery = not self._discovery_done

        discovered: list[str] = []
        if needs_discovery:
            discovered = self._directory.list_available_models()
            if rank_models(discovered):
                with self._lock:
                    self._discovery_done = True
            else:
                Log.warning("Model discovery yielded nothing usable, using fallback list")

        candidates = select_candidates(cached, discovered, self._fallback_models)
        Log.debug(f"Candidate models: {', '.join(candidates)}")
        return candidates

    def record_success(self, model: str) -> None:
        with self._lock:
            if model != self._cached_model:
                Log.info(f"Switched working model to {model}")
            self._cached_model = model
            self._discovery_done = True

    def reset(self) -> None:
        with self._lock:
            self._cached_model = self._default_model
            self._discovery_done = False
