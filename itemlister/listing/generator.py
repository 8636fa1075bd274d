"""Title/description generators for card and book listings."""

import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, ClassVar

from itemlister.generation.models import GenerationConfig
from itemlister.generation.orchestrator import GenerationOrchestrator
from itemlister.listing import heuristics
from itemlister.listing.models import ListingHints, ListingResult
from itemlister.logging.logger import Log
from itemlister.normalization.prompt_loader import load_prompt_template
from itemlister.parsing.exceptions import MalformedOutputError
from itemlister.parsing.json_repair import extract_string_field, parse_json_object

LISTING_PROMPT_DIR = Path(__file__).parent / "prompts"


def parse_listing_response(
    raw: str,
    *,
    fallback_title: str,
    describe: Any,
) -> ListingResult:
    """Turn raw model output into a ListingResult without ever raising.

    Order: strict/repaired JSON, then regex title extraction, then the
    field-derived fallbacks. `describe(title)` synthesizes a description.
    """
    repaired = False
    fallback_used = False
    try:
        outcome = parse_json_object(raw)
        data = outcome.value
        repaired = outcome.repaired
    except MalformedOutputError as exc:
        Log.warning(f"Listing JSON unrecoverable ({exc}), extracting title only")
        data = {"autoTitle": extract_string_field(raw, "autoTitle") or ""}
        fallback_used = True

    title = _text(data.get("autoTitle") or data.get("title"))
    description = _text(data.get("autoDescription") or data.get("description"))
    retail_price = _text(data.get("retailPrice"))

    title, split_description = heuristics.split_concatenated_title(title, description)
    if split_description != description:
        Log.info("Split concatenated title into title and description")
        description = split_description

    if not title:
        title = fallback_title
        fallback_used = True
    if not description:
        description = describe(title)
        fallback_used = True
    return ListingResult(
        title=title,
        description=description,
        retail_price=retail_price,
        repaired=repaired,
        fallback_used=fallback_used,
    )


class ListingGenerator(ABC):
    """Base for the card and book generators; subclasses supply the prompt."""

    KIND: ClassVar[str]
    PROMPT_FILE: ClassVar[str]

    def __init__(
        self,
        *,
        orchestrator: GenerationOrchestrator,
        temperature: float = 0.2,
        max_output_tokens: int = 1000,
        prompt_template_path: Path | None = None,
    ) -> None:
        self._orchestrator = orchestrator
        self._config = GenerationConfig(
            temperature=temperature,
            max_output_tokens=max_output_tokens,
            json_output=True,
        )
        self._prompt_template = load_prompt_template(
            str(prompt_template_path) if prompt_template_path else self.PROMPT_FILE,
            prompt_dir=LISTING_PROMPT_DIR,
        )

    def generate(self, fields: dict[str, str], hints: ListingHints | None = None) -> ListingResult:
        hints = hints or ListingHints()
        Log.info(f"Generating {self.KIND} title and description")
        prompt = self.build_prompt(fields, hints)
        Log.debug(f"Listing prompt:\n{prompt}")

        raw_response = self._orchestrator.generate(prompt, self._config)
        Log.debug(f"AI raw response:\n{raw_response}")

        result = parse_listing_response(
            raw_response,
            fallback_title=self.fallback_title(fields),
            describe=lambda title: self.fallback_description(title, fields),
        )
        result = self._post_process(result, hints)
        if result.fallback_used:
            Log.warning(f"Filled {self.KIND} listing from extracted fields, model output was incomplete")
        elif result.repaired:
            Log.info(f"Repaired malformed {self.KIND} listing JSON")
        Log.info(
            f"Generated {self.KIND} title ({len(result.title)} chars) and "
            f"description ({len(result.description)} chars)"
        )
        return result

    @abstractmethod
    def build_prompt(self, fields: dict[str, str], hints: ListingHints) -> str:
        """Fill the prompt template from extracted fields."""

    @abstractmethod
    def fallback_title(self, fields: dict[str, str]) -> str:
        """Title built from fields alone when the model gives none."""

    @abstractmethod
    def fallback_description(self, title: str, fields: dict[str, str]) -> str:
        """Description built from fields alone when the model gives none."""

    def _post_process(self, result: ListingResult, hints: ListingHints) -> ListingResult:
        return result


class CardListingGenerator(ListingGenerator):
    KIND = "card"
    PROMPT_FILE = "card_listing_prompt.txt"

    def build_prompt(self, fields: dict[str, str], hints: ListingHints) -> str:
        card_title = fields.get("title", "")
        if heuristics.title_mentions_player(fields):
            title_instructions = (
                f'The card title "{card_title}" already contains the player\'s last name '
                f'"{fields.get("playerLastName", "")}".\n'
                "Format: [year] [set] [card title as-is] #[cardNumber] [gradingCompany] [grade]\n"
                "DO NOT include the player's name separately since it's already in the card title."
            )
        else:
            title_instructions = (
                "Format: [year] [set] [playerFirstName] [playerLastName] "
                "[card title/event if different] #[cardNumber] [gradingCompany] [grade]\n"
                "Include special designations like: rookie, logo patch, jersey patch, signed, etc."
            )
        return self._prompt_template.format(
            year=fields.get("year", ""),
            set=fields.get("set", ""),
            card_number=fields.get("cardNumber", ""),
            player=heuristics.player_name(fields),
            grading_company=fields.get("gradingCompany", ""),
            grade=fields.get("grade", ""),
            card_title=card_title or "None",
            title_instructions=title_instructions,
        )

    def fallback_title(self, fields: dict[str, str]) -> str:
        return heuristics.build_card_title(fields) or fields.get("title", "") or "Sports Card"

    def fallback_description(self, title: str, fields: dict[str, str]) -> str:
        return heuristics.build_card_description(title, fields)

    def _post_process(self, result: ListingResult, hints: ListingHints) -> ListingResult:
        if result.retail_price:
            return ListingResult(
                title=result.title,
                description=result.description,
                repaired=result.repaired,
                fallback_used=result.fallback_used,
            )
        return result


class BookListingGenerator(ListingGenerator):
    """Book variant; also asks for a retail price estimate when an ISBN is known."""

    KIND = "book"
    PROMPT_FILE = "book_listing_prompt.txt"

    def build_prompt(self, fields: dict[str, str], hints: ListingHints) -> str:
        title = fields.get("title", "")
        author = fields.get("author", "")
        author_last = author.split()[-1].lower() if author.split() else ""
        if author_last and author_last in title.lower():
            title_instructions = (
                f'The book title already contains the author\'s name "{author}".\n'
                "Format: [title as-is], [publisher] [year], [edition] [printing], [format]"
            )
        else:
            title_instructions = (
                "Format: [title] by [author], [publisher] [year], [edition] [printing], [format]"
            )

        shape: dict[str, str] = {"autoTitle": "", "autoDescription": ""}
        if hints.isbn:
            shape["retailPrice"] = ""
            price_instructions = (
                f"retailPrice: estimate the original publisher's list price for ISBN {hints.isbn} "
                'as a plain number such as "24.95". Leave it empty if you do not know it.'
            )
        else:
            price_instructions = "Do not estimate a price."

        return self._prompt_template.format(
            title=title,
            author=author,
            illustrator=fields.get("illustrator", ""),
            publisher=fields.get("publisherName", ""),
            place_published=fields.get("placePublished", ""),
            year_published=fields.get("yearPublished", ""),
            edition=fields.get("editionText", ""),
            printing=fields.get("printingText", ""),
            format=fields.get("format", ""),
            genre=fields.get("genre", ""),
            summary=fields.get("description", ""),
            isbn=hints.isbn or "unknown",
            title_instructions=title_instructions,
            price_instructions=price_instructions,
            response_shape=json.dumps(shape),
        )

    def fallback_title(self, fields: dict[str, str]) -> str:
        return heuristics.build_book_title(fields)

    def fallback_description(self, title: str, fields: dict[str, str]) -> str:
        return heuristics.build_book_description(title, fields)

    def _post_process(self, result: ListingResult, hints: ListingHints) -> ListingResult:
        if result.retail_price and not hints.isbn:
            Log.warning("Discarding retail price returned without an ISBN")
            return ListingResult(
                title=result.title,
                description=result.description,
                repaired=result.repaired,
                fallback_used=result.fallback_used,
            )
        return result


def _text(value: Any) -> str:
    if value is None or isinstance(value, (dict, list)):
        return ""
    return str(value).strip()
