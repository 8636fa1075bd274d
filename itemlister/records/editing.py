"""User-driven record creation and edits."""

from typing import Any

from itemlister.logging.logger import Log
from itemlister.normalization.schema import SCHEMAS
from itemlister.records.models import ProcessingStatus, Record, RecordKind, SourceImage
from itemlister.records.store import RecordStore


def schema_fields(kind: RecordKind, fields: dict[str, Any] | None) -> dict[str, str]:
    """Keep only keys the kind's schema knows, coerced to strings."""
    allowed = set(SCHEMAS[kind.value].all_fields)
    kept: dict[str, str] = {}
    for name, value in (fields or {}).items():
        if name not in allowed:
            Log.debug(f"Ignoring unknown {kind.value} field '{name}'")
            continue
        kept[name] = "" if value is None else str(value)
    return kept


def create_from_partial(store: RecordStore, payload: dict[str, Any]) -> Record:
    """Create a record from whatever the client assembled; the rest is defaulted."""
    kind = store.kind
    record_id = store.new_id()
    fields = SCHEMAS[kind.value].empty_fields()
    fields.update(schema_fields(kind, payload.get("normalized")))
    image = payload.get("sourceImage") or {}
    confidence = {
        name: max(0.0, min(1.0, float(score)))
        for name, score in (payload.get("confidenceByField") or {}).items()
        if name in fields and isinstance(score, (int, float)) and not isinstance(score, bool)
    }
    return store.create(
        Record(
            kind=kind,
            id=record_id,
            source_image=SourceImage(
                id=str(image.get("id") or record_id),
                url=str(image.get("url") or ""),
                filename=str(image.get("filename") or ""),
            ),
            raw_ocr_text=str(payload.get("rawOcrText") or ""),
            normalized_fields=fields,
            confidence_by_field=confidence,
            auto_title=str(payload.get("autoTitle") or ""),
            auto_description=str(payload.get("autoDescription") or ""),
            processing_status=ProcessingStatus.READY_FOR_REVIEW,
        )
    )


def apply_user_edit(
    store: RecordStore,
    record_id: str,
    *,
    normalized: dict[str, Any] | None = None,
    auto_title: str | None = None,
    auto_description: str | None = None,
) -> Record:
    """Merge a review-screen edit. Confidence scores are left as extracted."""
    updated = store.update(
        record_id,
        normalized_fields=schema_fields(store.kind, normalized),
        auto_title=auto_title,
        auto_description=auto_description,
    )
    Log.info(f"Updated {store.kind.value} {record_id} (version {updated.version})")
    return updated
