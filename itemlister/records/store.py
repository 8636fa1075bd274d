import copy
import threading
import uuid
from collections.abc import Callable
from datetime import timedelta

from itemlister.logging.logger import Log
from itemlister.records.exceptions import RecordNotFoundError
from itemlister.records.models import Record, RecordKind, utc_now

_TICK = timedelta(microseconds=1)


class RecordStore:
    """In-memory record map for one record kind.

    Every mutation runs under one lock, bumps `version` and moves
    `updated_at` strictly forward. Readers always get a copy.
    """

    def __init__(self, kind: RecordKind) -> None:
        self._kind = kind
        self._records: dict[str, Record] = {}
        self._lock = threading.Lock()

    @property
    def kind(self) -> RecordKind:
        return self._kind

    @staticmethod
    def new_id() -> str:
        return str(uuid.uuid4())

    def create(self, record: Record) -> Record:
        if record.kind is not self._kind:
            raise ValueError(f"Cannot store a {record.kind.value} record in the {self._kind.value} store")
        with self._lock:
            if record.id in self._records:
                raise ValueError(f"Duplicate record id: {record.id}")
            stored = copy.deepcopy(record)
            stored.version = 1
            self._records[stored.id] = stored
            Log.info(f"Created {self._kind.value} record {stored.id}")
            return copy.deepcopy(stored)

    def get(self, record_id: str) -> Record:
        with self._lock:
            return copy.deepcopy(self._require(record_id))

    def exists(self, record_id: str) -> bool:
        with self._lock:
            return record_id in self._records

    def update(
        self,
        record_id: str,
        *,
        normalized_fields: dict[str, str] | None = None,
        auto_title: str | None = None,
        auto_description: str | None = None,
    ) -> Record:
        """Merge user edits; fields not passed are left untouched."""

        def merge(record: Record) -> None:
            if normalized_fields:
                record.normalized_fields.update(normalized_fields)
            if auto_title is not None:
                record.auto_title = auto_title
            if auto_description is not None:
                record.auto_description = auto_description

        return self.apply(record_id, merge)

    def apply(self, record_id: str, mutator: Callable[[Record], None]) -> Record:
        """Run `mutator` on the live record atomically and return a snapshot."""
        with self._lock:
            record = self._require(record_id)
            mutator(record)
            record.version += 1
            now = utc_now()
            record.updated_at = now if now > record.updated_at else record.updated_at + _TICK
            return copy.deepcopy(record)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def _require(self, record_id: str) -> Record:
        record = self._records.get(record_id)
        if record is None:
            raise RecordNotFoundError(self._kind.value, record_id)
        return record
