class ExportError(Exception):
    """Base exception for export failures."""

    status_code = 500


class ExportConfigurationError(ExportError):
    """Raised when credentials or a target spreadsheet are not configured."""

    def __init__(self, message: str, *, status_code: int = 500) -> None:
        super().__init__(message)
        self.status_code = status_code


class SpreadsheetNotFoundError(ExportError):
    status_code = 404


class SheetsAccessDeniedError(ExportError):
    """The service account cannot open or edit the spreadsheet."""

    status_code = 403

    def __init__(self, message: str, *, service_account_email: str = "") -> None:
        super().__init__(message)
        self.service_account_email = service_account_email
