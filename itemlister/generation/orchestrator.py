from itemlister.generation.attempt_runner import AttemptRunner
from itemlister.generation.exceptions import (
    USER_MESSAGES,
    CandidatesExhaustedError,
    ErrorKind,
    ProviderError,
)
from itemlister.generation.model_selector import ModelSelector
from itemlister.generation.models import GenerationConfig, Verdict
from itemlister.logging.logger import Log


class GenerationOrchestrator:
    """Walks the candidate models until one produces output.

    Raises:
        ProviderError: on the first fatal (access, auth, unknown) failure.
        CandidatesExhaustedError: when every candidate was missing or overloaded.
    """

    def __init__(self, selector: ModelSelector, runner: AttemptRunner) -> None:
        self._selector = selector
        self._runner = runner

    @property
    def selector(self) -> ModelSelector:
        return self._selector

    def generate(self, prompt: str, config: GenerationConfig) -> str:
        candidates = self._selector.get_candidates()
        last_error: ProviderError | None = None
        attempts = 0
        for model in candidates:
            attempts += 1
            result = self._runner.attempt(model, prompt, config)
            if result.verdict is Verdict.SUCCEED:
                self._selector.record_success(model)
                Log.debug(f"Model {model} returned {len(result.content)} chars")
                return result.content
            last_error = result.error
            if result.verdict is Verdict.ABORT and last_error is not None:
                raise last_error

        last_kind = last_error.kind if last_error is not None else ErrorKind.MODEL_MISSING
        Log.error(f"All {attempts} candidate model(s) failed, last error: {last_error}")
        raise CandidatesExhaustedError(
            USER_MESSAGES.get(last_kind, USER_MESSAGES[ErrorKind.FATAL]),
            last_kind=last_kind,
            attempts=attempts,
        ) from last_error
