from dataclasses import dataclass

from itemlister.export.csv_exporter import render_csv
from itemlister.export.exceptions import ExportConfigurationError
from itemlister.export.schema import ExportSchema
from itemlister.export.sheets_base import BaseSheetsClient
from itemlister.listing.heuristics import correct_swapped
from itemlister.logging.logger import Log
from itemlister.records.models import Record
from itemlister.records.store import RecordStore

SPREADSHEET_URL = "https://docs.google.com/spreadsheets/d/{spreadsheet_id}"


@dataclass(frozen=True)
class SheetWriteResult:
    spreadsheet_id: str
    sheet_name: str
    sheet_url: str
    row: int
    header_written: bool = False

    def to_dict(self) -> dict[str, object]:
        return {
            "spreadsheetId": self.spreadsheet_id,
            "sheetName": self.sheet_name,
            "sheetUrl": self.sheet_url,
            "row": self.row,
            "headerWritten": self.header_written,
        }


def quote_sheet_name(name: str) -> str:
    return "'" + name.replace("'", "''") + "'"


class SheetExporter:
    """Writes fixed-width rows into a named worksheet, keeping the header in sync."""

    def __init__(self, client: BaseSheetsClient) -> None:
        self._client = client

    def append_row(
        self,
        spreadsheet_id: str,
        sheet_name: str,
        schema: ExportSchema,
        row: list[str],
    ) -> SheetWriteResult:
        if len(row) != schema.width:
            raise ValueError(f"Row has {len(row)} cells, {schema.name} schema expects {schema.width}")

        if sheet_name not in self._client.sheet_titles(spreadsheet_id):
            self._client.add_sheet(spreadsheet_id, sheet_name)

        sheet = quote_sheet_name(sheet_name)
        last = schema.last_column
        existing = self._client.get_values(spreadsheet_id, f"{sheet}!A:{last}")

        header_written = False
        if not existing or existing[0] != schema.headers:
            Log.info(
                f"{'Writing' if not existing else 'Rewriting'} {schema.name} header row "
                f"({schema.width} columns) in '{sheet_name}'"
            )
            self._client.update_values(spreadsheet_id, f"{sheet}!A1:{last}1", [schema.headers])
            header_written = True
        next_row = max(len(existing), 1) + 1

        self._client.update_values(
            spreadsheet_id, f"{sheet}!A{next_row}:{last}{next_row}", [row]
        )
        Log.info(f"Wrote {schema.name} row {next_row} to '{sheet_name}' in {spreadsheet_id}")
        return SheetWriteResult(
            spreadsheet_id=spreadsheet_id,
            sheet_name=sheet_name,
            sheet_url=SPREADSHEET_URL.format(spreadsheet_id=spreadsheet_id),
            row=next_row,
            header_written=header_written,
        )

    def compact(self, spreadsheet_id: str, sheet_name: str, schema: ExportSchema) -> int:
        """Delete fully blank rows between data rows; returns how many were removed."""
        sheet = quote_sheet_name(sheet_name)
        values = self._client.get_values(spreadsheet_id, f"{sheet}!A:{schema.last_column}")
        blank_rows = [
            index
            for index, row in enumerate(values, start=1)
            if not any(str(cell).strip() for cell in row)
        ]
        # Bottom-up so earlier row numbers stay valid.
        for start, end in reversed(_runs(blank_rows)):
            self._client.delete_rows(spreadsheet_id, sheet_name, start, end)
        if blank_rows:
            Log.info(f"Removed {len(blank_rows)} blank row(s) from '{sheet_name}'")
        return len(blank_rows)


def _runs(rows: list[int]) -> list[tuple[int, int]]:
    runs: list[tuple[int, int]] = []
    for row in rows:
        if runs and runs[-1][1] == row - 1:
            runs[-1] = (runs[-1][0], row)
        else:
            runs.append((row, row))
    return runs


class RecordExporter:
    """Exports one record kind to CSV or a spreadsheet."""

    def __init__(
        self,
        *,
        store: RecordStore,
        schema: ExportSchema,
        sheet_exporter: SheetExporter,
        default_spreadsheet_id: str = "",
        default_sheet_name: str = "",
    ) -> None:
        self._store = store
        self._schema = schema
        self._sheet_exporter = sheet_exporter
        self._default_spreadsheet_id = default_spreadsheet_id
        self._default_sheet_name = default_sheet_name

    @property
    def schema(self) -> ExportSchema:
        return self._schema

    def prepare(self, record_id: str) -> Record:
        """Fix a reversed title/description in the store, then return the record."""
        record = self._store.get(record_id)
        _, _, swapped = correct_swapped(record.auto_title, record.auto_description)
        if not swapped:
            return record
        Log.warning(
            f"{record.kind.value.capitalize()} {record_id}: title ({len(record.auto_title)} chars) "
            f"looks like a description ({len(record.auto_description)} chars), swapping"
        )
        return self._store.apply(record_id, _swap_listing_text)

    def build_row(self, record: Record) -> list[str]:
        return self._schema.build_row(record.to_dict())

    def to_csv(self, record_id: str) -> tuple[str, str]:
        """Return (download filename, CSV text)."""
        record = self.prepare(record_id)
        Log.info(f"CSV export for {record.kind.value} {record_id}")
        return f"{record.kind.value}-{record_id}.csv", render_csv(self._schema, [self.build_row(record)])

    def to_sheet(
        self,
        record_id: str,
        spreadsheet_id: str | None = None,
        sheet_name: str | None = None,
    ) -> SheetWriteResult:
        target_id = spreadsheet_id or self._default_spreadsheet_id
        target_sheet = sheet_name or self._default_sheet_name
        if not target_id:
            raise ExportConfigurationError(
                f"Spreadsheet ID is required for {self._schema.name} export. "
                "Configure it or pass spreadsheetId in the request.",
                status_code=400,
            )
        record = self.prepare(record_id)
        return self._sheet_exporter.append_row(
            target_id, target_sheet, self._schema, self.build_row(record)
        )

    def compact(self, spreadsheet_id: str | None = None, sheet_name: str | None = None) -> int:
        target_id = spreadsheet_id or self._default_spreadsheet_id
        if not target_id:
            raise ExportConfigurationError("Spreadsheet ID is required", status_code=400)
        return self._sheet_exporter.compact(
            target_id, sheet_name or self._default_sheet_name, self._schema
        )


def _swap_listing_text(record: Record) -> None:
    title, description, swapped = correct_swapped(record.auto_title, record.auto_description)
    if swapped:
        record.auto_title, record.auto_description = title, description
