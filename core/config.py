"""Runtime configuration loaded once at startup."""

from __future__ import annotations

import os

from pydantic import BaseModel, ConfigDict

from core.errors import ConfigError

API_BASE_URL = "https://api.poly.pizza/v1.1"
AUTH_TOKEN_ENV = "POLYPIZZA_AUTH_TOKEN"

SERVER_NAME = "polypizza-mcp"
SERVER_VERSION = "1.0.0"


class Settings(BaseModel):
    """Immutable process settings. The token never changes after construction."""

    model_config = ConfigDict(frozen=True)

    auth_token: str
    base_url: str = API_BASE_URL
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> Settings:
        env = os.environ if environ is None else environ
        token = (env.get(AUTH_TOKEN_ENV) or "").strip()
        if not token:
            raise ConfigError(f"{AUTH_TOKEN_ENV} environment variable is required but not set")
        return cls(auth_token=token, log_level=env.get("LOG_LEVEL", "INFO"))
