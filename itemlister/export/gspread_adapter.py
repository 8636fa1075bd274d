"""Google Sheets access through gspread with service-account credentials."""

import json
import threading
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar

import gspread
from gspread.exceptions import APIError, SpreadsheetNotFound

from itemlister.export.exceptions import (
    ExportConfigurationError,
    ExportError,
    SheetsAccessDeniedError,
    SpreadsheetNotFoundError,
)
from itemlister.export.sheets_base import BaseSheetsClient
from itemlister.logging.logger import Log

T = TypeVar("T")

NEW_SHEET_ROWS = 1000
NEW_SHEET_COLS = 30


def load_service_account_info(credentials_json: str, credentials_file: str) -> dict[str, Any]:
    """Inline JSON wins over the key file. Escaped newlines in the key are repaired."""
    if credentials_json.strip():
        try:
            info = json.loads(credentials_json)
        except ValueError as exc:
            raise ExportConfigurationError(f"SHEETS_CREDENTIALS_JSON is not valid JSON: {exc}") from exc
    else:
        path = Path(credentials_file) if credentials_file else None
        if path is None or not path.is_file():
            raise ExportConfigurationError(
                "Google Sheets service account credentials not found. "
                "Set SHEETS_CREDENTIALS_JSON or SHEETS_CREDENTIALS_FILE."
            )
        try:
            info = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise ExportConfigurationError(f"Cannot read credentials file {path}: {exc}") from exc
    if not isinstance(info, dict):
        raise ExportConfigurationError("Service account credentials must be a JSON object")
    if isinstance(info.get("private_key"), str):
        info["private_key"] = info["private_key"].replace("\\n", "\n")
    return info


class GspreadSheetsAdapter(BaseSheetsClient):
    """BaseSheetsClient over gspread; the client is authorized on first use."""

    def __init__(self, *, credentials_json: str = "", credentials_file: str = "") -> None:
        self._credentials_json = credentials_json
        self._credentials_file = credentials_file
        self._client: gspread.Client | None = None
        self._email = ""
        self._lock = threading.Lock()

    @property
    def service_account_email(self) -> str:
        return self._email

    def sheet_titles(self, spreadsheet_id: str) -> list[str]:
        spreadsheet = self._open(spreadsheet_id)
        return [worksheet.title for worksheet in self._call(spreadsheet.worksheets)]

    def add_sheet(self, spreadsheet_id: str, title: str) -> None:
        spreadsheet = self._open(spreadsheet_id)
        self._call(lambda: spreadsheet.add_worksheet(title=title, rows=NEW_SHEET_ROWS, cols=NEW_SHEET_COLS))
        Log.info(f"Created sheet '{title}' in spreadsheet {spreadsheet_id}")

    def get_values(self, spreadsheet_id: str, range_: str) -> list[list[str]]:
        spreadsheet = self._open(spreadsheet_id)
        response = self._call(lambda: spreadsheet.values_get(range_))
        return [[str(cell) for cell in row] for row in response.get("values", [])]

    def update_values(self, spreadsheet_id: str, range_: str, rows: list[list[str]]) -> None:
        spreadsheet = self._open(spreadsheet_id)
        self._call(
            lambda: spreadsheet.values_update(
                range_, params={"valueInputOption": "RAW"}, body={"values": rows}
            )
        )

    def delete_rows(self, spreadsheet_id: str, sheet_title: str, start_row: int, end_row: int) -> None:
        spreadsheet = self._open(spreadsheet_id)
        worksheet = self._call(lambda: spreadsheet.worksheet(sheet_title))
        self._call(lambda: worksheet.delete_rows(start_row, end_row))

    def _authorized(self) -> gspread.Client:
        with self._lock:
            if self._client is None:
                info = load_service_account_info(self._credentials_json, self._credentials_file)
                self._email = str(info.get("client_email") or "")
                self._client = gspread.service_account_from_dict(info)
                Log.info(f"Authorized Google Sheets client as {self._email or 'unknown'}")
            return self._client

    def _open(self, spreadsheet_id: str) -> gspread.Spreadsheet:
        client = self._authorized()
        try:
            return self._call(lambda: client.open_by_key(spreadsheet_id))
        except SpreadsheetNotFound as exc:
            raise SpreadsheetNotFoundError(
                f"Spreadsheet not found. Please check the spreadsheet ID: {spreadsheet_id}"
            ) from exc

    def _call(self, action: Callable[[], T]) -> T:
        try:
            return action()
        except APIError as exc:
            status = exc.response.status_code
            if status == 403:
                raise SheetsAccessDeniedError(
                    "Permission denied. Please share the Google Sheet with the service "
                    f"account email: {self._email or 'unknown'}",
                    service_account_email=self._email,
                ) from exc
            if status == 404:
                raise SpreadsheetNotFoundError(f"Spreadsheet or sheet not found: {exc}") from exc
            raise ExportError(f"Google Sheets API error ({status}): {exc}") from exc
