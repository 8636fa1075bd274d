"""Field sets for the two record kinds.

Field names are the wire-level keys shared with the review UI and the
export column tables, so they stay camelCase.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType


@dataclass(frozen=True)
class FieldSchema:
    """Named fields one record kind carries in `normalized_fields`."""

    kind: str
    extracted: tuple[str, ...]
    enhanced: tuple[str, ...] = ()
    defaults: Mapping[str, str] = field(default_factory=dict)
    extra: tuple[str, ...] = ()

    @property
    def model_fields(self) -> tuple[str, ...]:
        """Fields the model is asked to fill."""
        return self.extracted + self.enhanced + tuple(self.defaults)

    @property
    def all_fields(self) -> tuple[str, ...]:
        return self.model_fields + self.extra

    def empty_fields(self) -> dict[str, str]:
        fields = {name: "" for name in self.all_fields}
        fields.update(self.defaults)
        return fields

    def apply_defaults(self, fields: dict[str, str]) -> dict[str, str]:
        merged = dict(fields)
        for name, default in self.defaults.items():
            if not str(merged.get(name) or "").strip():
                merged[name] = default
        return merged


CARD_SCHEMA = FieldSchema(
    kind="card",
    extracted=(
        "year",
        "set",
        "cardNumber",
        "title",
        "playerFirstName",
        "playerLastName",
        "gradingCompany",
        "grade",
        "cert",
        "caption",
    ),
    extra=("sku",),
)

BOOK_SCHEMA = FieldSchema(
    kind="book",
    extracted=(
        "title",
        "author",
        "illustrator",
        "publisherName",
        "placePublished",
        "yearPublished",
        "printISBN",
        "eISBN",
        "editionText",
        "printingText",
        "printRunNumbers",
        "volume",
        "copyrightInfo",
        "libraryOfCongress",
        "coverDesigner",
        "originalPublicationDetails",
    ),
    enhanced=(
        "completePublisherInfo",
        "description",
        "genre",
        "category",
        "retailPrice",
    ),
    defaults=MappingProxyType(
        {
            "format": "Hardcover",
            "condition": "Acceptable",
            "quantity": "1",
            "productType": "book",
            "language": "English",
            "jacketCondition": "dust jacket included",
            "signedText": "not signed",
        }
    ),
)

SCHEMAS: dict[str, FieldSchema] = {CARD_SCHEMA.kind: CARD_SCHEMA, BOOK_SCHEMA.kind: BOOK_SCHEMA}
