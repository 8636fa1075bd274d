from dataclasses import dataclass


@dataclass(frozen=True)
class ListingHints:
    """Optional extra context for title/description generation."""

    isbn: str = ""


@dataclass(frozen=True)
class ListingResult:
    """Generated listing text for one record.

    `title` and `description` are never empty. `retail_price` is only set
    by the book generator and only when an ISBN was supplied.
    """

    title: str
    description: str
    retail_price: str = ""
    repaired: bool = False
    fallback_used: bool = False
