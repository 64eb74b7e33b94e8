"""Settings loading and start-up failure when AGENT_URL is missing."""

import pytest

from langdock_agent import server
from langdock_agent.settings import load_settings


@pytest.fixture(autouse=True)
def no_dotenv(monkeypatch):
    """Keep a developer's local .env out of these tests."""
    monkeypatch.setattr("langdock_agent.settings.load_dotenv", lambda: False)
    for name in ("AGENT_URL", "AGENT_VARIANT", "DEBUG"):
        monkeypatch.delenv(name, raising=False)


def test_missing_agent_url_fails_fast():
    with pytest.raises(RuntimeError, match="AGENT_URL environment variable is required"):
        load_settings()


def test_empty_agent_url_fails_fast(monkeypatch):
    monkeypatch.setenv("AGENT_URL", "")
    with pytest.raises(RuntimeError):
        load_settings()


def test_defaults(monkeypatch):
    monkeypatch.setenv("AGENT_URL", "https://agent.example.com/")

    settings = load_settings()

    assert settings.agent_url == "https://agent.example.com/"
    assert settings.variant == "langdock"
    assert settings.debug is False
    assert settings.agent_card_url == "https://agent.example.com/.well-known/agent-card.json"


def test_variant_and_debug(monkeypatch):
    monkeypatch.setenv("AGENT_URL", "https://agent.example.com")
    monkeypatch.setenv("AGENT_VARIANT", "canned")
    monkeypatch.setenv("DEBUG", "1")

    settings = load_settings()

    assert settings.variant == "canned"
    assert settings.debug is True


@pytest.mark.parametrize("value", ["0", "false", "no", "off", ""])
def test_falsy_debug_values_keep_info_logging(monkeypatch, value):
    monkeypatch.setenv("AGENT_URL", "https://agent.example.com")
    monkeypatch.setenv("DEBUG", value)

    assert load_settings().debug is False


@pytest.mark.parametrize("value", ["true", "YES", "on"])
def test_truthy_debug_values_enable_debug(monkeypatch, value):
    monkeypatch.setenv("AGENT_URL", "https://agent.example.com")
    monkeypatch.setenv("DEBUG", value)

    assert load_settings().debug is True


def test_main_aborts_before_serving(monkeypatch):
    calls = []
    monkeypatch.setattr(server.uvicorn, "run", lambda *args, **kwargs: calls.append(kwargs))

    with pytest.raises(RuntimeError):
        server.main()

    assert calls == []


def test_main_serves_on_fixed_port(monkeypatch):
    calls = []
    monkeypatch.setattr(server.uvicorn, "run", lambda app, **kwargs: calls.append(kwargs))
    monkeypatch.setenv("AGENT_URL", "https://agent.example.com")

    server.main()

    assert calls == [{"host": "0.0.0.0", "port": 3333}]
