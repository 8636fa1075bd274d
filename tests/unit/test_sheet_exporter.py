from unittest.mock import MagicMock

import pytest

from itemlister.export.exceptions import ExportConfigurationError
from itemlister.export.exporter import RecordExporter, SheetExporter, quote_sheet_name
from itemlister.export.schema import CARD_EXPORT_SCHEMA, ColumnSpec, ExportSchema
from itemlister.export.sheets_base import BaseSheetsClient
from itemlister.records.models import Record, RecordKind
from itemlister.records.store import RecordStore

TWELVE = ExportSchema(name="twelve", columns=tuple(ColumnSpec(f"h{i}", (f"v{i}",)) for i in range(1, 13)))


def _client(titles: list[str], values: list[list[str]]) -> MagicMock:
    client = MagicMock(spec=BaseSheetsClient)
    client.sheet_titles.return_value = titles
    client.get_values.return_value = values
    return client


class TestSheetExporter:
    def test_empty_sheet_gets_header_then_row_two(self) -> None:
        client = _client(["Sheet1"], [])
        result = SheetExporter(client).append_row("sid", "Sheet1", TWELVE, ["x"] * 12)

        assert result.row == 2
        assert result.header_written
        assert client.update_values.call_args_list[0].args == ("sid", "'Sheet1'!A1:L1", [TWELVE.headers])
        assert client.update_values.call_args_list[1].args == ("sid", "'Sheet1'!A2:L2", [["x"] * 12])

    def test_outdated_header_is_rewritten_in_place(self) -> None:
        old_header = TWELVE.headers[:11]
        client = _client(["Sheet1"], [old_header, ["a"] * 11, ["b"] * 11])
        result = SheetExporter(client).append_row("sid", "Sheet1", TWELVE, ["y"] * 12)

        assert result.header_written
        assert result.row == 4
        header_call, row_call = client.update_values.call_args_list
        assert header_call.args[1] == "'Sheet1'!A1:L1"
        assert header_call.args[2] == [TWELVE.headers]
        assert row_call.args[1] == "'Sheet1'!A4:L4"

    def test_matching_header_is_left_alone(self) -> None:
        client = _client(["Sheet1"], [TWELVE.headers, ["a"] * 12])
        result = SheetExporter(client).append_row("sid", "Sheet1", TWELVE, ["z"] * 12)

        assert not result.header_written
        assert result.row == 3
        assert client.update_values.call_count == 1
        assert result.sheet_url == "https://docs.google.com/spreadsheets/d/sid"

    def test_missing_sheet_is_created(self) -> None:
        client = _client(["Other"], [])
        SheetExporter(client).append_row("sid", "Books", TWELVE, [""] * 12)
        client.add_sheet.assert_called_once_with("sid", "Books")

    def test_row_width_must_match_schema(self) -> None:
        with pytest.raises(ValueError, match="expects 12"):
            SheetExporter(_client(["S"], [])).append_row("sid", "S", TWELVE, ["x"] * 11)

    def test_compact_deletes_blank_runs_bottom_up(self) -> None:
        values = [TWELVE.headers, ["a"], [], [""], ["b"], ["  "], ["c"]]
        client = _client(["S"], values)

        removed = SheetExporter(client).compact("sid", "S", TWELVE)

        assert removed == 3
        assert [c.args for c in client.delete_rows.call_args_list] == [
            ("sid", "S", 6, 6),
            ("sid", "S", 3, 4),
        ]

    def test_quote_sheet_name(self) -> None:
        assert quote_sheet_name("Bob's Cards") == "'Bob''s Cards'"


class TestRecordExporter:
    def _exporter(self, store: RecordStore, client: MagicMock, spreadsheet_id: str = "") -> RecordExporter:
        return RecordExporter(
            store=store,
            schema=CARD_EXPORT_SCHEMA,
            sheet_exporter=SheetExporter(client),
            default_spreadsheet_id=spreadsheet_id,
            default_sheet_name="Cards",
        )

    def test_swapped_text_is_corrected_in_csv_and_store(self) -> None:
        store = RecordStore(RecordKind.CARD)
        long_text, short_text = "d" * 250, "t" * 40
        store.create(Record(kind=RecordKind.CARD, id="c1", auto_title=long_text, auto_description=short_text))

        filename, text = self._exporter(store, _client([], [])).to_csv("c1")

        assert filename == "card-c1.csv"
        header, row = text.splitlines()
        assert header.startswith("Year,Set,Card Number")
        cells = row.split(",")
        assert cells[10] == short_text
        assert cells[11] == long_text
        stored = store.get("c1")
        assert (stored.auto_title, stored.auto_description) == (short_text, long_text)

    def test_to_sheet_uses_default_target(self) -> None:
        store = RecordStore(RecordKind.CARD)
        store.create(Record(kind=RecordKind.CARD, id="c1", auto_title="T", auto_description="D"))
        client = _client(["Cards"], [CARD_EXPORT_SCHEMA.headers])

        result = self._exporter(store, client, spreadsheet_id="default-sid").to_sheet("c1")

        assert (result.spreadsheet_id, result.sheet_name, result.row) == ("default-sid", "Cards", 2)
        assert store.get("c1").version == 1

    def test_to_sheet_without_spreadsheet_id(self) -> None:
        store = RecordStore(RecordKind.CARD)
        store.create(Record(kind=RecordKind.CARD, id="c1"))
        with pytest.raises(ExportConfigurationError) as excinfo:
            self._exporter(store, _client([], [])).to_sheet("c1")
        assert excinfo.value.status_code == 400
