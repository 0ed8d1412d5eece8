"""Runtime configuration for optigraph."""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass
from functools import lru_cache
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from optigraph.exceptions import ConfigurationError

DEFAULT_GATEWAY_URL = "https://cg.optimizely.com"


class Settings(BaseSettings):
    """Environment-backed configuration model."""

    model_config = SettingsConfigDict(env_prefix="optigraph_", env_file=".env", case_sensitive=False)

    environment: Literal["dev", "test", "prod"] = "dev"

    # Content graph gateway
    graph_gateway_url: str = DEFAULT_GATEWAY_URL
    graph_app_key: str | None = None
    graph_secret: str | None = None  # base64 encoded HMAC key
    graph_timeout_seconds: float = 30.0

    # Admin dashboard; both must be set or the admin API answers 404
    admin_username: str | None = None
    admin_password: str | None = None

    # JSON override for the i18n table (locales, defaultLocale, routing, fallback)
    i18n_config_json: str | None = None

    log_level: str = "INFO"

    @property
    def is_test(self) -> bool:
        return self.environment == "test"

    @property
    def admin_configured(self) -> bool:
        return bool(self.admin_username and self.admin_password)


@dataclass(frozen=True)
class GraphConfig:
    """Credentials and endpoint for the content graph backend.

    Built once per process. ``secret`` stays base64 encoded; use
    :meth:`secret_bytes` to obtain the HMAC key.
    """

    gateway_base_url: str
    app_key: str
    secret: str

    def __post_init__(self) -> None:
        if not self.app_key or not self.secret:
            raise ConfigurationError(
                "Missing required graph credentials: OPTIGRAPH_GRAPH_APP_KEY and OPTIGRAPH_GRAPH_SECRET",
            )
        if not self.gateway_base_url:
            raise ConfigurationError("Graph gateway URL must not be empty")
        # Fail at construction rather than on the first signed request.
        self.secret_bytes()

    def secret_bytes(self) -> bytes:
        try:
            return base64.b64decode(self.secret, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise ConfigurationError("Graph secret is not valid base64") from exc

    @classmethod
    def from_settings(cls, settings: Settings) -> "GraphConfig":
        return cls(
            gateway_base_url=settings.graph_gateway_url or DEFAULT_GATEWAY_URL,
            app_key=settings.graph_app_key or "",
            secret=settings.graph_secret or "",
        )


@lru_cache(maxsize=1)
def _cached_settings() -> Settings:
    return Settings()


def get_settings(override: Optional[dict[str, object]] = None) -> Settings:
    """Return settings, optionally overriding values without mutating cache."""

    if override:
        return Settings(**override)
    return _cached_settings()


def get_graph_config(settings: Settings | None = None) -> GraphConfig:
    """Build the graph configuration, raising :class:`ConfigurationError` if incomplete."""

    return GraphConfig.from_settings(settings or get_settings())
