import pytest

from decade_restyle.config_loader import Settings
from decade_restyle.gemini_client import GeminiClient
from decade_restyle.restyler import DecadeRestyler

from fakes import RecordingSleep


@pytest.fixture
def api_key(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "test-key-1")
    monkeypatch.delenv("API_KEY", raising=False)
    return "test-key-1"


@pytest.fixture
def no_api_key(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("API_KEY", raising=False)


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def sleep():
    return RecordingSleep()


@pytest.fixture
def make_restyler(settings, sleep):
    def _make(factory):
        client = GeminiClient(settings=settings, client_factory=factory)
        return DecadeRestyler(client=client, sleep=sleep)
    return _make
