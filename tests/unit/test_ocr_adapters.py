import base64
import json

import httpx
import pytest

from itemlister.ocr.example_adapter import ExampleOcrAdapter
from itemlister.ocr.exceptions import OcrError
from itemlister.ocr.factory import OcrClientFactory
from itemlister.ocr.google_vision_adapter import GoogleVisionOcrAdapter
from itemlister.ocr.models import OcrResult
from tests.factories import settings_for_tests


def _vision(handler, api_key: str = "vision-key") -> GoogleVisionOcrAdapter:
    return GoogleVisionOcrAdapter(
        api_key=api_key,
        timeout_seconds=5,
        http_client=httpx.Client(transport=httpx.MockTransport(handler)),
    )


ANNOTATIONS = {
    "responses": [
        {
            "textAnnotations": [
                {"description": "1972 TOPPS\nNOLAN RYAN"},
                {
                    "description": "1972",
                    "boundingPoly": {"vertices": [{"x": 1, "y": 2}, {"x": 30, "y": 2}, {"x": 30}, {"y": 20}]},
                },
                {"description": "TOPPS", "boundingPoly": {"vertices": [{"x": 40, "y": 2}]}},
            ]
        }
    ]
}


class TestGoogleVisionOcrAdapter:
    def test_sends_base64_image_and_parses_blocks(self) -> None:
        seen: dict[str, object] = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json=ANNOTATIONS)

        result = _vision(handler).detect_text(b"\xff\xd8image")

        assert "/images:annotate" in str(seen["url"])
        assert "key=vision-key" in str(seen["url"])
        request = seen["body"]["requests"][0]
        assert base64.b64decode(request["image"]["content"]) == b"\xff\xd8image"
        assert request["features"] == [{"type": "TEXT_DETECTION"}]

        assert result.full_text == "1972 TOPPS\nNOLAN RYAN"
        assert [block.text for block in result.blocks] == ["1972", "TOPPS"]
        first = result.blocks[0].to_dict()
        assert first["boundingBox"]["vertices"] == [
            {"x": 1, "y": 2},
            {"x": 30, "y": 2},
            {"x": 30, "y": 0},
            {"x": 0, "y": 20},
        ]
        assert len(result.blocks[1].bounding_box) == 4

    def test_no_annotations_is_empty_result(self) -> None:
        result = _vision(lambda request: httpx.Response(200, json={"responses": [{}]})).detect_text(b"x")
        assert result == OcrResult()
        assert result.is_empty

    def test_missing_key_is_unauthorized(self) -> None:
        adapter = _vision(lambda request: httpx.Response(200, json=ANNOTATIONS), api_key="")
        assert not adapter.is_configured
        with pytest.raises(OcrError) as excinfo:
            adapter.detect_text(b"x")
        assert excinfo.value.status_code == 401

    def test_http_error_keeps_status(self) -> None:
        adapter = _vision(lambda request: httpx.Response(403, json={"error": {"message": "denied"}}))
        with pytest.raises(OcrError) as excinfo:
            adapter.detect_text(b"x")
        assert excinfo.value.status_code == 403

    def test_per_image_error_raises(self) -> None:
        body = {"responses": [{"error": {"message": "Bad image data."}}]}
        adapter = _vision(lambda request: httpx.Response(200, json=body))
        with pytest.raises(OcrError, match="Bad image data"):
            adapter.detect_text(b"x")


class TestExampleOcrAdapter:
    def test_returns_fixed_text_with_word_blocks(self) -> None:
        adapter = ExampleOcrAdapter()
        result = adapter.detect_text(b"")
        assert result.full_text == ExampleOcrAdapter.DEFAULT_TEXT
        assert len(result.blocks) == len(ExampleOcrAdapter.DEFAULT_TEXT.split())
        assert adapter.calls == 1

    def test_blank_text_is_empty(self) -> None:
        assert ExampleOcrAdapter(text=" ... ").detect_text(b"").is_empty


class TestOcrClientFactory:
    def test_creates_configured_providers(self, tmp_path) -> None:
        assert isinstance(OcrClientFactory.create(settings_for_tests(tmp_path)), ExampleOcrAdapter)
        vision = OcrClientFactory.create(settings_for_tests(tmp_path, ocr_provider="google_vision"))
        assert isinstance(vision, GoogleVisionOcrAdapter)

    def test_unknown_provider(self, tmp_path) -> None:
        with pytest.raises(ValueError, match="Unknown OCR provider"):
            OcrClientFactory.create(settings_for_tests(tmp_path, ocr_provider="tesseract"))
