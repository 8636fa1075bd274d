from abc import ABC, abstractmethod


class BaseSheetsClient(ABC):
    """Minimal spreadsheet surface the exporter needs.

    Ranges use A1 notation. Row numbers are 1-based and inclusive.
    """

    @abstractmethod
    def sheet_titles(self, spreadsheet_id: str) -> list[str]:
        """Titles of the worksheets in the spreadsheet."""

    @abstractmethod
    def add_sheet(self, spreadsheet_id: str, title: str) -> None:
        """Create an empty worksheet."""

    @abstractmethod
    def get_values(self, spreadsheet_id: str, range_: str) -> list[list[str]]:
        """Rows in the range; trailing empty rows and cells are omitted."""

    @abstractmethod
    def update_values(self, spreadsheet_id: str, range_: str, rows: list[list[str]]) -> None:
        """Overwrite the range with `rows` as raw values."""

    @abstractmethod
    def delete_rows(self, spreadsheet_id: str, sheet_title: str, start_row: int, end_row: int) -> None:
        """Remove rows `start_row`..`end_row` and shift the rest up."""

    @property
    def service_account_email(self) -> str:
        return ""
