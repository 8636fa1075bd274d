from dataclasses import dataclass, field


@dataclass(frozen=True)
class Vertex:
    x: int = 0
    y: int = 0


@dataclass(frozen=True)
class OcrBlock:
    """One detected text region; confidence is 1.0 for providers that report none."""

    text: str
    confidence: float = 1.0
    bounding_box: tuple[Vertex, ...] = ()

    def to_dict(self) -> dict[str, object]:
        return {
            "text": self.text,
            "confidence": self.confidence,
            "boundingBox": {"vertices": [{"x": v.x, "y": v.y} for v in self.bounding_box]},
        }


@dataclass(frozen=True)
class OcrResult:
    """Full detected text plus the individual regions, in provider order."""

    full_text: str = ""
    blocks: list[OcrBlock] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not any(ch.isalnum() for ch in self.full_text)
