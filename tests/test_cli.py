from __future__ import annotations

import base64
import json
from pathlib import Path

import httpx
import pytest

from optigraph.admin.cli import main
from optigraph.config import GraphConfig
from optigraph.graph import GraphClient

SECRET = base64.b64encode(bytes(16)).decode("ascii")


def _client(handler, captured: list[httpx.Request]) -> GraphClient:
    def record(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return handler(request)

    config = GraphConfig(gateway_base_url="https://cg.example.com", app_key="ak1", secret=SECRET)
    return GraphClient(config, transport=httpx.MockTransport(record))


def test_locale_command_prints_backend_form_and_chain(capsys):
    assert main(["locale", "fr-ca"]) == 0
    output = json.loads(capsys.readouterr().out)
    assert output == {"input": "fr-ca", "locale": "fr_CA", "fallbackChain": []}

    assert main(["locale", "fr-CA"]) == 0
    assert json.loads(capsys.readouterr().out)["fallbackChain"] == ["fr", "en"]


def test_locale_command_to_url(capsys):
    assert main(["locale", "nb_NO", "--to", "url"]) == 0
    assert json.loads(capsys.readouterr().out)["locale"] == "nb-NO"


def test_synonyms_command_uploads_file(tmp_path: Path, capsys):
    source = tmp_path / "synonyms.txt"
    source.write_text("laptop, computer, pc\n", encoding="utf-8")
    captured: list[httpx.Request] = []
    client = _client(lambda request: httpx.Response(200), captured)

    code = main(["synonyms", str(source), "--slot", "2", "--language-routing", "en"], client=client)

    assert code == 0
    assert json.loads(capsys.readouterr().out)["success"] is True
    assert captured[0].content == b"laptop, computer, pc\n"
    assert captured[0].url.params["synonym_slot"] == "2"


def test_search_command_reports_errors(capsys):
    captured: list[httpx.Request] = []
    client = _client(lambda request: httpx.Response(200, json={"errors": [{"message": "nope"}]}), captured)

    assert main(["search", "bikes"], client=client) == 1
    assert "GraphQL errors: nope" in capsys.readouterr().err


def test_recent_command_rejects_bad_content_type(capsys):
    captured: list[httpx.Request] = []
    client = _client(lambda request: httpx.Response(200), captured)

    assert main(["recent", "--content-type", "a b"], client=client) == 2
    assert not captured


def test_missing_credentials_exit_with_configuration_error(monkeypatch, capsys):
    monkeypatch.delenv("OPTIGRAPH_GRAPH_APP_KEY", raising=False)
    monkeypatch.delenv("OPTIGRAPH_GRAPH_SECRET", raising=False)
    from optigraph import config

    config._cached_settings.cache_clear()
    try:
        assert main(["search", "bikes"]) == 2
    finally:
        config._cached_settings.cache_clear()
    assert "Configuration error" in capsys.readouterr().err


def test_unknown_slot_is_an_argument_error():
    with pytest.raises(SystemExit):
        main(["synonyms", "-", "--slot", "3"])
