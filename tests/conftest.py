from collections.abc import Generator

import pytest

from itemlister.generation.example_client_adapter import ExampleClientAdapter
from tests.factories import ryan_client


@pytest.fixture()
def ryan_example_client() -> ExampleClientAdapter:
    return ryan_client()


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    for name in ("APP_ENV", "GENERATION_PROVIDER", "OCR_PROVIDER", "UPLOAD_DIR"):
        monkeypatch.delenv(name, raising=False)
    yield
