"""HMAC request signing for the content graph gateway.

The gateway verifies each request by recomputing an ``epi-hmac`` signature
over a canonical string::

    app_key + METHOD + path_with_query + timestamp + nonce + base64(md5(body))

signed with HMAC-SHA256 using the base64-decoded shared secret. Every byte of
that string must match what the gateway computes, so the digest algorithms and
encodings below are part of the wire contract.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import secrets
import time
from dataclasses import dataclass
from typing import Literal

from optigraph.config import GraphConfig

AUTH_SCHEME = "epi-hmac"
NONCE_BYTES = 16

HttpMethod = Literal["GET", "POST", "PUT", "DELETE"]
ALLOWED_METHODS: frozenset[str] = frozenset({"GET", "POST", "PUT", "DELETE"})


def _to_bytes(body: str | bytes) -> bytes:
    return body if isinstance(body, bytes) else body.encode("utf-8")


def new_timestamp() -> int:
    return time.time_ns() // 1_000_000


def new_nonce() -> str:
    return secrets.token_bytes(NONCE_BYTES).hex()


@dataclass(frozen=True)
class SignedRequest:
    """One outgoing call as seen by the signer. Never reused across calls."""

    method: str
    path_with_query: str
    body: bytes
    timestamp: int
    nonce: str

    @classmethod
    def create(
        cls,
        method: str,
        path_with_query: str,
        body: str | bytes = "",
        *,
        timestamp: int | None = None,
        nonce: str | None = None,
    ) -> "SignedRequest":
        normalized = method.upper()
        if normalized not in ALLOWED_METHODS:
            raise ValueError(f"Unsupported HTTP method for signing: {method}")
        return cls(
            method=normalized,
            path_with_query=path_with_query,
            body=_to_bytes(body),
            timestamp=new_timestamp() if timestamp is None else timestamp,
            nonce=new_nonce() if nonce is None else nonce,
        )


def body_digest(body: str | bytes) -> str:
    # Content fingerprint recomputed by the gateway; algorithm and encoding are fixed.
    return base64.b64encode(hashlib.md5(_to_bytes(body), usedforsecurity=False).digest()).decode("ascii")


def signature_input(app_key: str, request: SignedRequest) -> str:
    return (
        f"{app_key}{request.method}{request.path_with_query}"
        f"{request.timestamp}{request.nonce}{body_digest(request.body)}"
    )


def sign(config: GraphConfig, request: SignedRequest) -> str:
    """Return the base64 HMAC-SHA256 signature for ``request``."""

    mac = hmac.new(
        config.secret_bytes(),
        signature_input(config.app_key, request).encode("utf-8"),
        hashlib.sha256,
    )
    return base64.b64encode(mac.digest()).decode("ascii")


def format_auth_header(config: GraphConfig, request: SignedRequest, signature: str) -> str:
    return f"{AUTH_SCHEME} {config.app_key}:{request.timestamp}:{request.nonce}:{signature}"


def compute_auth_header(
    config: GraphConfig,
    method: str,
    path_with_query: str,
    body: str | bytes = "",
    *,
    timestamp: int | None = None,
    nonce: str | None = None,
) -> str:
    """Build the ``epi-hmac`` authorization header value for one request.

    ``timestamp`` and ``nonce`` are generated fresh unless given explicitly,
    which is only meant for reproducing a known signature.

    Raises:
        ConfigurationError: if the configured secret is not valid base64.
        ValueError: if ``method`` is not one of GET, POST, PUT, DELETE.
    """

    request = SignedRequest.create(method, path_with_query, body, timestamp=timestamp, nonce=nonce)
    return format_auth_header(config, request, sign(config, request))
