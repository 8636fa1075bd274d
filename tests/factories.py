"""Shared builders for unit and integration tests."""

import json
from collections.abc import Callable
from concurrent.futures import Executor, Future
from pathlib import Path

from itemlister.config.settings import Settings
from itemlister.generation.example_client_adapter import ExampleClientAdapter
from itemlister.generation.factory import GenerationClientFactory
from itemlister.generation.orchestrator import GenerationOrchestrator

RYAN_OCR_TEXT = "1972 TOPPS #595 NOLAN RYAN PSA NM-MT 8"
RYAN_TITLE = "1972 Topps Nolan Ryan #595 PSA NM-MT 8"

RYAN_NORMALIZATION = json.dumps(
    {
        "normalized": {
            "year": "1972",
            "set": "Topps",
            "cardNumber": "595",
            "title": "",
            "playerFirstName": "Nolan",
            "playerLastName": "Ryan",
            "gradingCompany": "PSA",
            "grade": "NM-MT 8",
            "cert": "",
            "caption": "",
        },
        "confidenceByField": {
            "year": 0.95,
            "set": 0.9,
            "cardNumber": 0.9,
            "playerFirstName": 0.95,
            "playerLastName": 0.95,
            "gradingCompany": 0.98,
            "grade": 0.85,
        },
    }
)

RYAN_LISTING = json.dumps(
    {
        "autoTitle": RYAN_TITLE,
        "autoDescription": (
            f"{RYAN_TITLE}, Nolan Ryan. The all-time strikeout leader. "
            "A high-grade example of an iconic 1970s card."
        ),
    }
)


def settings_for_tests(tmp_path: Path, **overrides: object) -> Settings:
    values: dict[str, object] = {
        "generation_provider": "example",
        "ocr_provider": "example",
        "upload_dir": str(tmp_path / "uploads"),
        "sheets_credentials_file": "",
        "background_workers": 2,
    }
    values.update(overrides)
    return Settings(**values)


def make_orchestrator(client: ExampleClientAdapter, tmp_path: Path) -> GenerationOrchestrator:
    return GenerationClientFactory.create_orchestrator(
        settings_for_tests(tmp_path), client=client, sleep=lambda _: None
    )


def ryan_client() -> ExampleClientAdapter:
    return ExampleClientAdapter(
        responses={
            "Extract and normalize sports card information": RYAN_NORMALIZATION,
            "Generate a title and description": RYAN_LISTING,
        }
    )


class SynchronousExecutor(Executor):
    """Runs submitted work inline so completion is observable right after dispatch."""

    def submit(self, fn, /, *args, **kwargs):  # type: ignore[no-untyped-def]
        future: Future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as exc:
            future.set_exception(exc)
        return future


class DeferredExecutor(Executor):
    """Holds submitted work until `run_all` so tests can interleave edits."""

    def __init__(self) -> None:
        self._queued: list[tuple[Future, Callable[[], object]]] = []

    def submit(self, fn, /, *args, **kwargs):  # type: ignore[no-untyped-def]
        future: Future = Future()
        self._queued.append((future, lambda: fn(*args, **kwargs)))
        return future

    def run_all(self) -> None:
        queued, self._queued = self._queued, []
        for future, call in queued:
            try:
                future.set_result(call())
            except Exception as exc:
                future.set_exception(exc)
