"""Text detection through the Google Cloud Vision REST API."""

import base64
from typing import Any

import httpx

from itemlister.logging.logger import Log
from itemlister.ocr.base import BaseOcrClient
from itemlister.ocr.exceptions import OcrError
from itemlister.ocr.models import OcrBlock, OcrResult, Vertex


class GoogleVisionOcrAdapter(BaseOcrClient):
    DEFAULT_BASE_URL = "https://vision.googleapis.com/v1"

    def __init__(
        self,
        *,
        api_key: str,
        timeout_seconds: float,
        base_url: str | None = None,
        http_client: httpx.Client | None = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = (base_url or self.DEFAULT_BASE_URL).rstrip("/")
        self._http = http_client or httpx.Client(timeout=timeout_seconds)

    @property
    def is_configured(self) -> bool:
        return bool(self._api_key)

    def detect_text(self, image_bytes: bytes) -> OcrResult:
        if not self._api_key:
            raise OcrError("Google Vision API key is not configured. Set GOOGLE_VISION_API_KEY.", status_code=401)
        payload = {
            "requests": [
                {
                    "image": {"content": base64.b64encode(image_bytes).decode("ascii")},
                    "features": [{"type": "TEXT_DETECTION"}],
                }
            ]
        }
        Log.info(f"Calling Google Vision text detection ({len(image_bytes)} bytes)")
        try:
            response = self._http.post(
                f"{self._base_url}/images:annotate",
                params={"key": self._api_key},
                json=payload,
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            raise OcrError(
                f"OCR processing failed: HTTP {status}: {exc.response.text[:300]}",
                status_code=status,
            ) from exc
        except httpx.HTTPError as exc:
            raise OcrError(f"OCR processing failed: {exc}") from exc
        except ValueError as exc:
            raise OcrError(f"OCR processing failed: non-JSON response ({exc})") from exc

        return self._parse(data)

    @staticmethod
    def _parse(data: dict[str, Any]) -> OcrResult:
        responses = data.get("responses") or [{}]
        first = responses[0] or {}
        if first.get("error"):
            raise OcrError(f"OCR processing failed: {first['error'].get('message', 'unknown error')}")

        annotations = first.get("textAnnotations") or []
        if not annotations:
            Log.info("OCR found no text")
            return OcrResult()

        # First annotation is the whole text; the rest are individual words.
        full_text = annotations[0].get("description", "") or ""
        blocks = [
            OcrBlock(
                text=annotation.get("description", "") or "",
                confidence=1.0,
                bounding_box=_vertices(annotation),
            )
            for annotation in annotations[1:]
        ]
        Log.info(f"OCR extracted {len(full_text)} chars in {len(blocks)} blocks")
        return OcrResult(full_text=full_text, blocks=blocks)


def _vertices(annotation: dict[str, Any]) -> tuple[Vertex, ...]:
    raw = (annotation.get("boundingPoly") or {}).get("vertices") or []
    vertices = [Vertex(x=int(v.get("x", 0) or 0), y=int(v.get("y", 0) or 0)) for v in raw[:4]]
    while len(vertices) < 4:
        vertices.append(Vertex())
    return tuple(vertices)
