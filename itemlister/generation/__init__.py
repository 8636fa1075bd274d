from itemlister.generation.exceptions import (
    CandidatesExhaustedError,
    ErrorKind,
    GenerationError,
    ProviderError,
)
from itemlister.generation.factory import GenerationClientFactory
from itemlister.generation.models import GenerationConfig
from itemlister.generation.orchestrator import GenerationOrchestrator

__all__ = [
    "CandidatesExhaustedError",
    "ErrorKind",
    "GenerationClientFactory",
    "GenerationConfig",
    "GenerationError",
    "GenerationOrchestrator",
    "ProviderError",
]
