from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from itemlister.api.dependencies import get_services
from itemlister.api.services import Services

router = APIRouter(tags=["health"])


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("/health")
def health() -> dict:
    return {"status": "ok", "timestamp": _now()}


@router.get("/api/health")
def api_health(services: Services = Depends(get_services)) -> dict:
    """Reports whether model discovery and OCR are usable."""
    selector = services.orchestrator.selector
    models_ok = bool(selector.directory.list_available_models())
    ocr_ok = services.ocr_client.is_configured
    return {
        "status": "healthy" if models_ok and ocr_ok else "degraded",
        "services": {
            "ocr": "connected" if ocr_ok else "disconnected",
            "generation": "connected" if models_ok else "disconnected",
        },
        "cachedModel": selector.cached_model,
        "timestamp": _now(),
    }
