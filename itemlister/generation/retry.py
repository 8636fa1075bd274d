import time
from collections.abc import Callable
from typing import TypeVar

from itemlister.generation.exceptions import ProviderError
from itemlister.logging.logger import Log

T = TypeVar("T")


class BackoffRetrier:
    """Bounded exponential-backoff retry for transient provider failures.

    Only ProviderError with a transient kind is retried; every other
    exception, and the last transient one once attempts run out, is
    re-raised unchanged. Delay before retry `i` (0-based) is
    `base_delay_ms * 2**i`.
    """

    def __init__(
        self,
        *,
        max_attempts: int = 3,
        base_delay_ms: int = 500,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self._max_attempts = max_attempts
        self._base_delay_ms = base_delay_ms
        self._sleep = sleep

    def retry(self, operation: Callable[[], T]) -> T:
        for attempt in range(self._max_attempts):
            try:
                return operation()
            except ProviderError as exc:
                if not exc.is_transient or attempt >= self._max_attempts - 1:
                    raise
                delay_ms = self._base_delay_ms * 2**attempt
                Log.warning(
                    f"Attempt {attempt + 1} failed ({exc}), retrying in {delay_ms}ms"
                )
                self._sleep(delay_ms / 1000)
        raise AssertionError("unreachable")
