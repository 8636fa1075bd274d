from itemlister.generation.client_base import BaseGenerationClient
from itemlister.generation.exceptions import ErrorKind, ProviderError
from itemlister.generation.models import AttemptResult, GenerationConfig, Verdict
from itemlister.generation.retry import BackoffRetrier
from itemlister.logging.logger import Log


class AttemptRunner:
    """Runs one prompt against one model and turns the outcome into a verdict.

    Transient failures are retried on the same model by the retrier first;
    a missing model moves on immediately; access and authentication
    failures abort the whole candidate walk.
    """

    def __init__(self, client: BaseGenerationClient, retrier: BackoffRetrier) -> None:
        self._client = client
        self._retrier = retrier

    def attempt(self, model: str, prompt: str, config: GenerationConfig) -> AttemptResult:
        Log.info(f"Trying model: {model}")
        try:
            content = self._retrier.retry(
                lambda: self._client.generate(model=model, prompt=prompt, config=config)
            )
        except ProviderError as exc:
            return AttemptResult(model=model, verdict=self._verdict_for(exc), error=exc)
        return AttemptResult(model=model, verdict=Verdict.SUCCEED, content=content)

    @staticmethod
    def _verdict_for(exc: ProviderError) -> Verdict:
        if exc.kind is ErrorKind.MODEL_MISSING:
            Log.warning(f"Model not found, trying next: {exc}")
            return Verdict.RETRY_ELSEWHERE
        if exc.kind is ErrorKind.TRANSIENT:
            Log.warning(f"Model overloaded after retries, trying alternative: {exc}")
            return Verdict.RETRY_ELSEWHERE
        Log.error(f"Aborting generation ({exc.kind.value}): {exc}")
        return Verdict.ABORT
