class RecordError(Exception):
    """Base exception for record store errors."""


class RecordNotFoundError(RecordError):
    """Raised when no record exists for the requested id."""

    def __init__(self, kind: str, record_id: str) -> None:
        super().__init__(f"{kind.capitalize()} not found: {record_id}")
        self.kind = kind
        self.record_id = record_id
