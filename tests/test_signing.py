from __future__ import annotations

import base64
import hashlib
import hmac
import re

import pytest

from optigraph.config import GraphConfig
from optigraph.exceptions import ConfigurationError
from optigraph.graph.signing import SignedRequest, body_digest, compute_auth_header, sign, signature_input

SECRET = base64.b64encode(bytes(16)).decode("ascii")
CONFIG = GraphConfig(gateway_base_url="https://cg.example.com", app_key="ak1", secret=SECRET)
HEADER = re.compile(
    r"^epi-hmac (?P<app_key>[^:]+):(?P<timestamp>\d+):(?P<nonce>[0-9a-f]{32}):(?P<signature>[A-Za-z0-9+/]+={0,2})$"
)


def _reference_signature(secret: str, app_key: str, method: str, path: str, timestamp: str, nonce: str, body: bytes) -> str:
    digest = base64.b64encode(hashlib.md5(body).digest()).decode("ascii")
    message = f"{app_key}{method}{path}{timestamp}{nonce}{digest}".encode("utf-8")
    mac = hmac.new(base64.b64decode(secret), message, hashlib.sha256)
    return base64.b64encode(mac.digest()).decode("ascii")


def test_header_matches_grammar_and_reference_algorithm():
    header = compute_auth_header(CONFIG, "POST", "/content/v2?cache=false", '{"query": "{ a }"}')
    match = HEADER.match(header)
    assert match, header
    assert match["app_key"] == "ak1"
    expected = _reference_signature(
        SECRET,
        "ak1",
        "POST",
        "/content/v2?cache=false",
        match["timestamp"],
        match["nonce"],
        b'{"query": "{ a }"}',
    )
    assert match["signature"] == expected


def test_fixed_timestamp_and_nonce_are_deterministic():
    nonce = "0" * 32
    first = compute_auth_header(CONFIG, "PUT", "/resources/synonyms", "a, b", timestamp=1700000000000, nonce=nonce)
    second = compute_auth_header(CONFIG, "PUT", "/resources/synonyms", "a, b", timestamp=1700000000000, nonce=nonce)
    assert first == second
    assert first.startswith("epi-hmac ak1:1700000000000:" + nonce + ":")


def test_single_byte_body_change_changes_signature():
    request = SignedRequest.create("PUT", "/resources/synonyms", "laptop, computer", timestamp=1, nonce="a" * 32)
    mutated = SignedRequest.create("PUT", "/resources/synonyms", "laptop, computes", timestamp=1, nonce="a" * 32)
    assert sign(CONFIG, request) != sign(CONFIG, mutated)


def test_fresh_calls_use_new_nonces():
    first = HEADER.match(compute_auth_header(CONFIG, "GET", "/api/pinned/collections"))
    second = HEADER.match(compute_auth_header(CONFIG, "GET", "/api/pinned/collections"))
    assert first and second
    assert first["nonce"] != second["nonce"]


def test_method_is_uppercased_before_signing():
    lower = compute_auth_header(CONFIG, "get", "/x", timestamp=5, nonce="b" * 32)
    upper = compute_auth_header(CONFIG, "GET", "/x", timestamp=5, nonce="b" * 32)
    assert lower == upper


def test_signature_input_is_unseparated_concatenation():
    request = SignedRequest.create("DELETE", "/api/pinned/collections/c1", "", timestamp=42, nonce="c" * 32)
    assert signature_input("ak1", request) == "ak1DELETE/api/pinned/collections/c142" + "c" * 32 + body_digest("")
    assert body_digest("") == "1B2M2Y8AsgTpgAmY7PhCfg=="


def test_unsupported_method_is_rejected():
    with pytest.raises(ValueError):
        compute_auth_header(CONFIG, "PATCH", "/x")


def test_invalid_base64_secret_is_fatal():
    with pytest.raises(ConfigurationError):
        GraphConfig(gateway_base_url="https://cg.example.com", app_key="ak1", secret="not base64!!")
