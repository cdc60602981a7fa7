import sys
from pathlib import Path

import pytest
import requests

# Ensure the project root is on sys.path for direct pytest runs without an install
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


class DummyResponse:
    def __init__(self, json_data=None, status_code=200, text=None):
        self._json = json_data
        self.status_code = status_code
        self.text = text

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Server Error", response=self)

    def json(self):
        if self.text is not None:
            raise ValueError(f"Expecting value: {self.text[:20]!r}")
        return self._json


@pytest.fixture
def dummy_response():
    return DummyResponse


@pytest.fixture(autouse=True)
def clean_nominatim_env(monkeypatch):
    for name in ("NOMINATIM_BASE_URL", "NOMINATIM_USER_AGENT", "NOMINATIM_REFERER", "NOMINATIM_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)
