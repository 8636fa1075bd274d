from concurrent.futures import Future
from dataclasses import dataclass, field

from itemlister.listing.models import ListingResult
from itemlister.normalization.models import NormalizationResult
from itemlister.records.models import Record


@dataclass(frozen=True)
class ProcessRequest:
    filename: str
    source_image_id: str = ""
    url: str = ""


@dataclass
class ProcessOutcome:
    """Created record plus per-step durations in seconds."""

    record: Record
    timings: dict[str, float] = field(default_factory=dict)
    completion: Future | None = None


@dataclass(frozen=True)
class NormalizeOutcome:
    normalization: NormalizationResult
    listing: ListingResult
