from dataclasses import dataclass
from enum import Enum

from itemlister.generation.exceptions import ProviderError


@dataclass(frozen=True)
class GenerationConfig:
    """Sampling parameters for one generation request."""

    temperature: float = 0.2
    max_output_tokens: int = 1000
    json_output: bool = True


class Verdict(str, Enum):
    SUCCEED = "succeed"
    RETRY_ELSEWHERE = "retry_elsewhere"
    ABORT = "abort"


@dataclass(frozen=True)
class AttemptResult:
    """Outcome of running one prompt against one candidate model."""

    model: str
    verdict: Verdict
    content: str = ""
    error: ProviderError | None = None

    @property
    def succeeded(self) -> bool:
        return self.verdict is Verdict.SUCCEED
