class OcrError(Exception):
    """Raised when text detection fails (transport, auth or provider error)."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
