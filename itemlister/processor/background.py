import threading
import time
from concurrent.futures import Executor, Future, wait

from itemlister.listing.generator import ListingGenerator
from itemlister.listing.heuristics import build_book_description, build_book_title
from itemlister.listing.models import ListingHints, ListingResult
from itemlister.logging.logger import Log
from itemlister.processor.step_errors import TITLE_GENERATION_STEP
from itemlister.records.exceptions import RecordNotFoundError
from itemlister.records.models import ProcessingError, Record, RecordKind
from itemlister.records.store import RecordStore

ESTIMATED_PRICE_CONFIDENCE = 0.8


def isbn_hint(fields: dict[str, str]) -> str:
    return (fields.get("printISBN") or fields.get("eISBN") or "").strip()


def merge_completion(
    record: Record,
    result: ListingResult,
    *,
    dispatched_version: int,
    isbn: str,
) -> None:
    """Write generated title/description (and book price) into `record`.

    If the record changed since dispatch, only owned fields that are
    still empty are filled, so concurrent user edits survive.
    """
    changed = record.version != dispatched_version
    fields = record.normalized_fields

    title = result.title.strip()
    description = result.description.strip()
    if record.kind is RecordKind.BOOK:
        if not title:
            title = build_book_title(fields)
        if not description:
            description = build_book_description(title, fields)
    else:
        title = title or fields.get("title", "")

    if not changed or not record.auto_title.strip():
        record.auto_title = title
    if not changed or not record.auto_description.strip():
        record.auto_description = description

    price = result.retail_price.strip()
    if record.kind is RecordKind.BOOK and isbn and price and not fields.get("retailPrice", "").strip():
        fields["retailPrice"] = price
        record.confidence_by_field.setdefault("retailPrice", ESTIMATED_PRICE_CONFIDENCE)
        Log.info(f"Applied AI-estimated retailPrice {price} to book {record.id}")


class BackgroundCompletionUpdater:
    """Generates listing text off the request path and merges it into the store.

    Failures are logged and appended to the record's error log; they never
    reach the caller that created the record.
    """

    def __init__(
        self,
        *,
        store: RecordStore,
        generator: ListingGenerator,
        executor: Executor,
    ) -> None:
        self._store = store
        self._generator = generator
        self._executor = executor
        self._pending: set[Future] = set()
        self._pending_lock = threading.Lock()

    @property
    def pending(self) -> int:
        with self._pending_lock:
            return len(self._pending)

    def wait_idle(self, timeout: float | None = None) -> bool:
        """Block until every dispatched completion has finished."""
        with self._pending_lock:
            pending = list(self._pending)
        _, not_done = wait(pending, timeout=timeout)
        return not not_done

    def dispatch(self, record: Record) -> Future:
        """Schedule completion for a freshly created record.

        The returned future resolves once the merge (or failure handling)
        has finished.
        """
        fields = dict(record.normalized_fields)
        hints = ListingHints(isbn=isbn_hint(fields) if record.kind is RecordKind.BOOK else "")
        Log.info(f"Dispatching background title generation for {record.kind.value} {record.id}")
        future = self._executor.submit(self._complete, record.id, record.version, fields, hints)
        with self._pending_lock:
            self._pending.add(future)
        future.add_done_callback(self._forget)
        return future

    def _forget(self, future: Future) -> None:
        with self._pending_lock:
            self._pending.discard(future)

    def _complete(
        self,
        record_id: str,
        dispatched_version: int,
        fields: dict[str, str],
        hints: ListingHints,
    ) -> Record | None:
        started = time.perf_counter()
        try:
            result = self._generator.generate(fields, hints)
        except Exception as exc:
            self._handle_failure(record_id, exc)
            return None

        try:
            merged = self._store.apply(
                record_id,
                lambda record: merge_completion(
                    record, result, dispatched_version=dispatched_version, isbn=hints.isbn
                ),
            )
        except RecordNotFoundError:
            Log.error(f"Record {record_id} vanished before title/description could be stored")
            return None

        elapsed = round(time.perf_counter() - started, 1)
        Log.info(
            f"Record {record_id} updated with title ({len(merged.auto_title)} chars) "
            f"and description ({len(merged.auto_description)} chars) in {elapsed}s"
        )
        return merged

    def _handle_failure(self, record_id: str, exc: Exception) -> None:
        Log.error(f"Title/description generation failed for record {record_id}: {exc}")
        error = ProcessingError(step=TITLE_GENERATION_STEP, message=str(exc))
        try:
            self._store.apply(record_id, lambda record: record.errors.append(error))
        except RecordNotFoundError:
            Log.warning(f"Record {record_id} not found while logging generation failure")
