from dataclasses import dataclass, field


@dataclass(frozen=True)
class NormalizationResult:
    """Structured fields extracted from OCR text, with advisory confidences.

    Confidence scores are reported by the model itself: 0.5-0.7 means
    uncertain, 0.8-1.0 confident. Keys are a subset of `fields`.
    """

    fields: dict[str, str]
    confidence_by_field: dict[str, float] = field(default_factory=dict)
    repaired: bool = False
