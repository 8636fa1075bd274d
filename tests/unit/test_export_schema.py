import csv
import io

import pytest

from itemlister.export.csv_exporter import render_csv
from itemlister.export.schema import (
    BOOK_EXPORT_SCHEMA,
    CARD_EXPORT_SCHEMA,
    ColumnSpec,
    ExportSchema,
    column_letter,
)

CARD_DATA = {
    "id": "c1",
    "normalized": {
        "year": "1972",
        "set": "Topps",
        "cardNumber": "#595",
        "playerFirstName": "Nolan",
        "playerLastName": "Ryan",
        "gradingCompany": "PSA",
        "grade": "NM-MT 8",
    },
    "autoTitle": "1972 Topps Nolan Ryan #595 PSA NM-MT 8",
    "autoDescription": "The strikeout king, in high grade.",
}


class TestColumnLetter:
    @pytest.mark.parametrize(("index", "letters"), [(1, "A"), (13, "M"), (26, "Z"), (27, "AA"), (30, "AD"), (52, "AZ")])
    def test_letters(self, index: int, letters: str) -> None:
        assert column_letter(index) == letters

    def test_rejects_zero(self) -> None:
        with pytest.raises(ValueError):
            column_letter(0)


class TestCardExportSchema:
    def test_column_order(self) -> None:
        assert CARD_EXPORT_SCHEMA.headers == [
            "Year",
            "Set",
            "Card Number",
            "Title",
            "Player First Name",
            "Player Last Name",
            "Grading Company",
            "Grade",
            "Cert",
            "Caption",
            "Auto Title",
            "Auto Description",
            "SKU",
        ]
        assert CARD_EXPORT_SCHEMA.last_column == "M"

    def test_row_values(self) -> None:
        row = CARD_EXPORT_SCHEMA.build_row(CARD_DATA)
        assert row[:3] == ["1972", "Topps", "#595"]
        assert row[3] == ""
        assert row[10] == CARD_DATA["autoTitle"]
        assert row[12] == ""


class TestBookExportSchema:
    def test_thirty_columns(self) -> None:
        assert BOOK_EXPORT_SCHEMA.width == 30
        assert BOOK_EXPORT_SCHEMA.last_column == "AD"
        assert BOOK_EXPORT_SCHEMA.headers[0] == "listingid"
        assert BOOK_EXPORT_SCHEMA.headers[-1] == "language"

    def test_defaults_and_fallbacks(self) -> None:
        data = {
            "id": "0123456789abcdef",
            "normalized": {"coverDesigner": "Jack Gaughan", "genre": "Science Fiction", "eISBN": "978"},
            "autoTitle": "Dune",
            "autoDescription": "Desert planet epic.",
            "sourceImage": {"url": "/uploads/dune.jpg"},
        }
        row = dict(zip(BOOK_EXPORT_SCHEMA.headers, BOOK_EXPORT_SCHEMA.build_row(data)))
        assert row["listingid"] == "bk-01234567"
        assert row["title"] == "Dune"
        assert row["illustrator"] == "Jack Gaughan"
        assert row["description"] == "Desert planet epic."
        assert row["isbn"] == "978"
        assert row["abecategory"] == "Science Fiction"
        assert row["keywords"] == "Science Fiction"
        assert row["quantity"] == "1"
        assert row["bindingtext"] == "Hardcover"
        assert row["signedtext"] == "not signed"
        assert row["imgurl"] == "/uploads/dune.jpg"
        assert row["sellercatalog1"] == ""


class TestRenderCsv:
    def test_quotes_commas_and_newlines(self) -> None:
        schema = ExportSchema(name="t", columns=(ColumnSpec("a", ("a",)), ColumnSpec("b", ("b",))))
        text = render_csv(schema, [schema.build_row({"a": 'say "hi", friend', "b": "two\nlines"})])
        assert text.startswith("a,b\n")
        assert list(csv.reader(io.StringIO(text))) == [["a", "b"], ['say "hi", friend', "two\nlines"]]
