import json
from pathlib import Path
from unittest.mock import patch

import pytest

from itemlister.generation.example_client_adapter import ExampleClientAdapter
from itemlister.listing.generator import (
    BookListingGenerator,
    CardListingGenerator,
    ListingGenerator,
    parse_listing_response,
)
from itemlister.listing.models import ListingHints
from tests.factories import RYAN_TITLE, make_orchestrator, ryan_client

LISTING_MARKER = "Generate a title and description"

RYAN_FIELDS = {
    "year": "1972",
    "set": "Topps",
    "cardNumber": "#595",
    "title": "",
    "playerFirstName": "Nolan",
    "playerLastName": "Ryan",
    "gradingCompany": "PSA",
    "grade": "NM-MT 8",
}

DUNE_FIELDS = {
    "title": "Dune",
    "author": "Frank Herbert",
    "publisherName": "Chilton Books",
    "yearPublished": "1965",
    "format": "Hardcover",
}


def _describe(title: str) -> str:
    return f"About {title}."


def _client(response: str) -> ExampleClientAdapter:
    return ExampleClientAdapter(responses={LISTING_MARKER: response})


class TestParseListingResponse:
    def test_clean_json(self) -> None:
        result = parse_listing_response(
            '{"autoTitle": "T", "autoDescription": "D"}', fallback_title="F", describe=_describe
        )
        assert (result.title, result.description) == ("T", "D")
        assert not result.repaired
        assert not result.fallback_used

    def test_accepts_plain_key_names(self) -> None:
        result = parse_listing_response(
            '{"title": "T", "description": "D"}', fallback_title="F", describe=_describe
        )
        assert (result.title, result.description) == ("T", "D")

    def test_truncated_description_is_repaired(self) -> None:
        raw = '{"autoTitle": "1972 Topps Nolan Ryan", "autoDescription": "The strikeout king and'
        result = parse_listing_response(raw, fallback_title="F", describe=_describe)
        assert result.title == "1972 Topps Nolan Ryan"
        assert result.description == "The strikeout king"
        assert result.repaired

    def test_unparseable_output_keeps_extractable_title(self) -> None:
        raw = 'Sure! "autoTitle": "1972 Topps Nolan Ryan" and that is all'
        result = parse_listing_response(raw, fallback_title="F", describe=_describe)
        assert result.title == "1972 Topps Nolan Ryan"
        assert result.description == "About 1972 Topps Nolan Ryan."
        assert result.fallback_used

    def test_garbage_falls_back_completely(self) -> None:
        result = parse_listing_response("no json at all", fallback_title="F", describe=_describe)
        assert (result.title, result.description) == ("F", "About F.")
        assert result.fallback_used

    def test_concatenated_title_is_split(self) -> None:
        head = "1955 Topps Sandy Koufax Rookie #123 PSA VG-EX 4"
        tail = "A landmark rookie card of the left-handed ace who dominated the sixties " * 2
        raw = json.dumps({"autoTitle": f"{head}, {tail.strip()}", "autoDescription": ""})
        result = parse_listing_response(raw, fallback_title="F", describe=_describe)
        assert result.title == head
        assert result.description == tail.strip()
        assert not result.fallback_used


class TestCardListingGenerator:
    def test_nolan_ryan_title(self, tmp_path: Path) -> None:
        generator = CardListingGenerator(orchestrator=make_orchestrator(ryan_client(), tmp_path))
        result = generator.generate(RYAN_FIELDS)
        assert result.title == RYAN_TITLE
        assert result.description.startswith(RYAN_TITLE)

    def test_prompt_lists_player_when_title_lacks_name(self, tmp_path: Path) -> None:
        client = ryan_client()
        CardListingGenerator(orchestrator=make_orchestrator(client, tmp_path)).generate(RYAN_FIELDS)
        prompt = client.prompts[-1]
        assert "- Player: Nolan Ryan" in prompt
        assert "[playerFirstName] [playerLastName]" in prompt
        assert "- Card Title/Event: None" in prompt

    def test_prompt_skips_player_when_title_has_name(self, tmp_path: Path) -> None:
        client = ryan_client()
        fields = {**RYAN_FIELDS, "title": "Ryan Record Breaker"}
        CardListingGenerator(orchestrator=make_orchestrator(client, tmp_path)).generate(fields)
        assert "DO NOT include the player's name separately" in client.prompts[-1]

    def test_empty_model_output_uses_field_fallbacks(self, tmp_path: Path) -> None:
        client = _client('{"autoTitle": "", "autoDescription": ""}')
        result = CardListingGenerator(orchestrator=make_orchestrator(client, tmp_path)).generate(RYAN_FIELDS)
        assert result.title == RYAN_TITLE
        assert "Professionally graded PSA NM-MT 8" in result.description
        assert result.fallback_used

    def test_no_fields_yields_generic_title(self, tmp_path: Path) -> None:
        client = _client("{}")
        result = CardListingGenerator(orchestrator=make_orchestrator(client, tmp_path)).generate({})
        assert result.title == "Sports Card"
        assert result.description

    def test_card_never_carries_price(self, tmp_path: Path) -> None:
        client = _client('{"autoTitle": "T", "autoDescription": "D", "retailPrice": "9.99"}')
        result = CardListingGenerator(orchestrator=make_orchestrator(client, tmp_path)).generate(RYAN_FIELDS)
        assert result.retail_price == ""


class TestBookListingGenerator:
    def test_price_requested_only_with_isbn(self, tmp_path: Path) -> None:
        client = _client('{"autoTitle": "T", "autoDescription": "D"}')
        generator = BookListingGenerator(orchestrator=make_orchestrator(client, tmp_path))
        generator.generate(DUNE_FIELDS, ListingHints(isbn="9780441172719"))
        generator.generate(DUNE_FIELDS)
        with_isbn, without_isbn = client.prompts
        assert '"retailPrice"' in with_isbn
        assert "9780441172719" in with_isbn
        assert '"retailPrice"' not in without_isbn
        assert "Do not estimate a price." in without_isbn

    def test_price_kept_with_isbn(self, tmp_path: Path) -> None:
        client = _client('{"autoTitle": "T", "autoDescription": "D", "retailPrice": "5.95"}')
        generator = BookListingGenerator(orchestrator=make_orchestrator(client, tmp_path))
        assert generator.generate(DUNE_FIELDS, ListingHints(isbn="9780441172719")).retail_price == "5.95"

    def test_price_discarded_without_isbn(self, tmp_path: Path) -> None:
        client = _client('{"autoTitle": "T", "autoDescription": "D", "retailPrice": "5.95"}')
        generator = BookListingGenerator(orchestrator=make_orchestrator(client, tmp_path))
        assert generator.generate(DUNE_FIELDS).retail_price == ""

    def test_title_with_author_name_is_kept_as_is(self, tmp_path: Path) -> None:
        client = _client("{}")
        fields = {**DUNE_FIELDS, "title": "Herbert's Dune Omnibus"}
        BookListingGenerator(orchestrator=make_orchestrator(client, tmp_path)).generate(fields)
        assert "already contains the author's name" in client.prompts[-1]

    def test_fallbacks_from_fields(self, tmp_path: Path) -> None:
        client = _client("not json")
        result = BookListingGenerator(orchestrator=make_orchestrator(client, tmp_path)).generate(DUNE_FIELDS)
        assert result.title == "Dune"
        assert result.description.startswith("Dune. by Frank Herbert. Published by Chilton Books. (1965).")


class TestListingGeneratorBase:
    def test_base_cannot_be_instantiated(self, tmp_path: Path) -> None:
        with pytest.raises(TypeError):
            ListingGenerator(orchestrator=make_orchestrator(ryan_client(), tmp_path))  # type: ignore[abstract]

    def test_subclass_must_supply_fallbacks(self, tmp_path: Path) -> None:
        class PromptOnly(ListingGenerator):
            KIND = "card"
            PROMPT_FILE = "card_listing_prompt.txt"

            def build_prompt(self, fields: dict[str, str], hints: ListingHints) -> str:
                return "prompt"

        with pytest.raises(TypeError):
            PromptOnly(orchestrator=make_orchestrator(ryan_client(), tmp_path))  # type: ignore[abstract]

    def test_logs_field_fallback(self, tmp_path: Path) -> None:
        client = _client('{"autoTitle": "", "autoDescription": ""}')
        generator = CardListingGenerator(orchestrator=make_orchestrator(client, tmp_path))
        with patch("itemlister.listing.generator.Log") as log:
            generator.generate(RYAN_FIELDS)
        warnings = [call.args[0] for call in log.warning.call_args_list]
        assert any("Filled card listing from extracted fields" in message for message in warnings)

    def test_logs_repaired_output(self, tmp_path: Path) -> None:
        client = _client('{"autoTitle": "1972 Topps Nolan Ryan", "autoDescription": "The strikeout king and')
        generator = CardListingGenerator(orchestrator=make_orchestrator(client, tmp_path))
        with patch("itemlister.listing.generator.Log") as log:
            result = generator.generate(RYAN_FIELDS)
        assert result.repaired and not result.fallback_used
        infos = [call.args[0] for call in log.info.call_args_list]
        assert "Repaired malformed card listing JSON" in infos
        log.warning.assert_not_called()
