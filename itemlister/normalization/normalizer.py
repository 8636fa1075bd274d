"""AI-powered field normalizers for cards and books."""

import json
from pathlib import Path
from typing import Any, ClassVar

from itemlister.generation.models import GenerationConfig
from itemlister.generation.orchestrator import GenerationOrchestrator
from itemlister.logging.logger import Log
from itemlister.normalization.base import BaseNormalizer
from itemlister.normalization.exceptions import NormalizationError
from itemlister.normalization.models import NormalizationResult
from itemlister.normalization.prompt_loader import load_prompt_template
from itemlister.normalization.schema import BOOK_SCHEMA, CARD_SCHEMA, FieldSchema
from itemlister.parsing.exceptions import MalformedOutputError
from itemlister.parsing.json_repair import parse_json_object

_MAX_TEMPERATURE = 0.3


class FieldNormalizer(BaseNormalizer):
    """Prompts the model with the OCR text and the kind's field schema."""

    SCHEMA: ClassVar[FieldSchema]
    PROMPT_FILE: ClassVar[str]

    def __init__(
        self,
        *,
        orchestrator: GenerationOrchestrator,
        temperature: float = 0.2,
        max_output_tokens: int = 2000,
        prompt_template_path: Path | None = None,
    ) -> None:
        self._orchestrator = orchestrator
        self._config = GenerationConfig(
            temperature=max(0.0, min(_MAX_TEMPERATURE, temperature)),
            max_output_tokens=max_output_tokens,
            json_output=True,
        )
        self._prompt_template = load_prompt_template(
            str(prompt_template_path) if prompt_template_path else self.PROMPT_FILE
        )

    @property
    def schema(self) -> FieldSchema:
        return self.SCHEMA

    def normalize(self, text: str) -> NormalizationResult:
        Log.info(f"Starting {self.SCHEMA.kind} normalization ({len(text)} chars of OCR text)")
        prompt = self._build_prompt(text)
        Log.debug(f"Normalization prompt:\n{prompt}")

        raw_response = self._orchestrator.generate(prompt, self._config)
        Log.debug(f"AI raw response:\n{raw_response}")

        try:
            outcome = parse_json_object(raw_response)
        except MalformedOutputError as exc:
            raise NormalizationError(f"AI normalization failed: {exc}") from exc

        result = self._build_result(outcome.value, repaired=outcome.repaired)
        populated = sum(1 for value in result.fields.values() if value)
        Log.info(f"{self.SCHEMA.kind.capitalize()} normalization complete: {populated} fields populated")
        return result

    def _build_prompt(self, text: str) -> str:
        return self._prompt_template.format(
            ocr_text=text,
            response_shape=json.dumps(self._response_shape(), indent=2),
        )

    def _response_shape(self) -> dict[str, dict[str, object]]:
        names = self.SCHEMA.model_fields
        return {
            "normalized": {name: "" for name in names},
            "confidenceByField": {name: 0.0 for name in names},
        }

    def _build_result(self, data: dict[str, Any], *, repaired: bool) -> NormalizationResult:
        raw_fields = data.get("normalized", data)
        if not isinstance(raw_fields, dict):
            raise NormalizationError("'normalized' must be an object")
        raw_confidence = data.get("confidenceByField") or {}
        if not isinstance(raw_confidence, dict):
            raw_confidence = {}

        fields = {name: "" for name in self.SCHEMA.all_fields}
        for name in self.SCHEMA.model_fields:
            fields[name] = _as_text(raw_fields.get(name))
        fields = self._post_process(fields)

        confidence: dict[str, float] = {}
        for name, score in raw_confidence.items():
            if name in fields and not isinstance(score, bool) and isinstance(score, (int, float)):
                confidence[name] = max(0.0, min(1.0, float(score)))
        return NormalizationResult(fields=fields, confidence_by_field=confidence, repaired=repaired)

    def _post_process(self, fields: dict[str, str]) -> dict[str, str]:
        return fields


class CardNormalizer(FieldNormalizer):
    SCHEMA = CARD_SCHEMA
    PROMPT_FILE = "card_normalization_prompt.txt"

    def _post_process(self, fields: dict[str, str]) -> dict[str, str]:
        number = fields.get("cardNumber", "")
        if number and not number.startswith("#"):
            fields["cardNumber"] = f"#{number}"
        return fields


class BookNormalizer(FieldNormalizer):
    """Book variant; tier-3 fields fall back to listing defaults."""

    SCHEMA = BOOK_SCHEMA
    PROMPT_FILE = "book_normalization_prompt.txt"

    def _post_process(self, fields: dict[str, str]) -> dict[str, str]:
        for isbn_field in ("printISBN", "eISBN"):
            fields[isbn_field] = fields[isbn_field].replace("-", "").replace(" ", "")
        return self.SCHEMA.apply_defaults(fields)


def _as_text(value: object) -> str:
    if value is None or isinstance(value, (dict, list)):
        return ""
    return str(value).strip()
