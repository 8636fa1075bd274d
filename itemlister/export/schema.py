"""Declarative column tables for the tabular export targets.

Column order is a positional contract with the destination sheet, so
these tables are append-only.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ColumnSpec:
    """One output column.

    `sources` are dotted paths into the serialized record, tried in order;
    the first non-empty value wins, otherwise `default` is used.
    """

    header: str
    sources: tuple[str, ...] = ()
    default: str = ""
    transform: Callable[[str], str] | None = None

    def value(self, data: Mapping[str, Any]) -> str:
        for source in self.sources:
            value = _lookup(data, source)
            if value:
                return self.transform(value) if self.transform else value
        return self.default


@dataclass(frozen=True)
class ExportSchema:
    name: str
    columns: tuple[ColumnSpec, ...]

    @property
    def headers(self) -> list[str]:
        return [column.header for column in self.columns]

    @property
    def width(self) -> int:
        return len(self.columns)

    @property
    def last_column(self) -> str:
        return column_letter(self.width)

    def build_row(self, data: Mapping[str, Any]) -> list[str]:
        return [column.value(data) for column in self.columns]


def column_letter(index: int) -> str:
    """1-based column index to A1 letters (1 -> A, 27 -> AA)."""
    if index < 1:
        raise ValueError(f"Column index must be positive, got {index}")
    letters = ""
    while index:
        index, remainder = divmod(index - 1, 26)
        letters = chr(ord("A") + remainder) + letters
    return letters


def _lookup(data: Mapping[str, Any], path: str) -> str:
    current: Any = data
    for part in path.split("."):
        if not isinstance(current, Mapping):
            return ""
        current = current.get(part)
    if current is None:
        return ""
    return str(current).strip()


def _listing_id(record_id: str) -> str:
    return f"bk-{record_id[:8]}"


CARD_EXPORT_SCHEMA = ExportSchema(
    name="card",
    columns=(
        ColumnSpec("Year", ("normalized.year",)),
        ColumnSpec("Set", ("normalized.set",)),
        ColumnSpec("Card Number", ("normalized.cardNumber",)),
        ColumnSpec("Title", ("normalized.title",)),
        ColumnSpec("Player First Name", ("normalized.playerFirstName",)),
        ColumnSpec("Player Last Name", ("normalized.playerLastName",)),
        ColumnSpec("Grading Company", ("normalized.gradingCompany",)),
        ColumnSpec("Grade", ("normalized.grade",)),
        ColumnSpec("Cert", ("normalized.cert",)),
        ColumnSpec("Caption", ("normalized.caption",)),
        ColumnSpec("Auto Title", ("autoTitle",)),
        ColumnSpec("Auto Description", ("autoDescription",)),
        ColumnSpec("SKU", ("normalized.sku",)),
    ),
)

BOOK_EXPORT_SCHEMA = ExportSchema(
    name="book",
    columns=(
        ColumnSpec("listingid", ("id",), transform=_listing_id),
        ColumnSpec("title", ("normalized.title", "autoTitle")),
        ColumnSpec("author", ("normalized.author",)),
        ColumnSpec("illustrator", ("normalized.illustrator", "normalized.coverDesigner")),
        ColumnSpec("price", ("normalized.retailPrice",)),
        ColumnSpec("quantity", ("normalized.quantity",), "1"),
        ColumnSpec("producttype", ("normalized.productType",), "book"),
        ColumnSpec("description", ("autoDescription", "normalized.description")),
        ColumnSpec("bindingtext", ("normalized.format",), "Hardcover"),
        ColumnSpec("bookcondition", ("normalized.condition",), "Acceptable"),
        ColumnSpec("publishername", ("normalized.publisherName",)),
        ColumnSpec("placepublished", ("normalized.placePublished",)),
        ColumnSpec("yearpublished", ("normalized.yearPublished",)),
        ColumnSpec("isbn", ("normalized.printISBN", "normalized.eISBN")),
        ColumnSpec("sellercatalog1"),
        ColumnSpec("sellercatalog2"),
        ColumnSpec("sellercatalog3"),
        ColumnSpec("abecategory", ("normalized.category", "normalized.genre")),
        ColumnSpec("keywords", ("normalized.genre", "normalized.category")),
        ColumnSpec("jacketcondition", ("normalized.jacketCondition",), "dust jacket included"),
        ColumnSpec("editiontext", ("normalized.editionText",)),
        ColumnSpec("printingtext", ("normalized.printingText",)),
        ColumnSpec("signedtext", ("normalized.signedText",), "not signed"),
        ColumnSpec("volume", ("normalized.volume",)),
        ColumnSpec("size"),
        ColumnSpec("imgurl", ("sourceImage.url",)),
        ColumnSpec("weight"),
        ColumnSpec("weightunit"),
        ColumnSpec("shippingtemplateid"),
        ColumnSpec("language", ("normalized.language",), "English"),
    ),
)

EXPORT_SCHEMAS: dict[str, ExportSchema] = {
    CARD_EXPORT_SCHEMA.name: CARD_EXPORT_SCHEMA,
    BOOK_EXPORT_SCHEMA.name: BOOK_EXPORT_SCHEMA,
}
