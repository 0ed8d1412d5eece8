from __future__ import annotations

import base64

import pytest

from optigraph.config import DEFAULT_GATEWAY_URL, GraphConfig, Settings, get_graph_config, get_settings
from optigraph.exceptions import ConfigurationError

SECRET = base64.b64encode(bytes(16)).decode("ascii")


def test_defaults_gateway_url_and_admin_disabled():
    settings = Settings(environment="test")
    assert settings.graph_gateway_url == DEFAULT_GATEWAY_URL
    assert settings.is_test
    assert not settings.admin_configured


def test_override_returns_fresh_settings():
    settings = get_settings({"environment": "test", "graph_app_key": "ak1", "graph_secret": SECRET})
    config = get_graph_config(settings)
    assert config == GraphConfig(gateway_base_url=DEFAULT_GATEWAY_URL, app_key="ak1", secret=SECRET)
    assert config.secret_bytes() == bytes(16)


@pytest.mark.parametrize(
    ("app_key", "secret"),
    [(None, SECRET), ("ak1", None), ("", ""), (None, None)],
)
def test_missing_credentials_are_fatal(app_key, secret):
    settings = Settings(environment="test", graph_app_key=app_key, graph_secret=secret)
    with pytest.raises(ConfigurationError):
        GraphConfig.from_settings(settings)


def test_malformed_secret_is_fatal():
    with pytest.raises(ConfigurationError, match="base64"):
        GraphConfig(gateway_base_url="https://cg.example.com", app_key="ak1", secret="abc$")


def test_settings_read_from_environment(monkeypatch):
    monkeypatch.setenv("OPTIGRAPH_GRAPH_APP_KEY", "env-key")
    monkeypatch.setenv("OPTIGRAPH_GRAPH_GATEWAY_URL", "https://cg.example.com")
    monkeypatch.setenv("OPTIGRAPH_ADMIN_USERNAME", "admin")
    monkeypatch.setenv("OPTIGRAPH_ADMIN_PASSWORD", "pw")
    settings = Settings()
    assert settings.graph_app_key == "env-key"
    assert settings.graph_gateway_url == "https://cg.example.com"
    assert settings.admin_configured
