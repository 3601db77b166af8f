from __future__ import annotations

from functools import lru_cache

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Runtime settings loaded from environment / .env file.

    Responsibility scope:
      - Secrets that must NOT appear in config files (GEMINI_API_KEY)
      - Transport settings shared by every model client (timeout, hosts)
      - HTTP surface toggles (inspect endpoint, CORS origins)

    Which model client runs, and with which model id, is owned by the
    Hydra configs under conf/model/*.yaml, not here.
    """

    # ------------------------------------------------------------------
    # Google Generative Language API credentials.
    # SecretStr prevents the key from appearing in logs or repr().
    # ------------------------------------------------------------------
    gemini_api_key: SecretStr | None = Field(
        default=None,
        alias="GEMINI_API_KEY",
    )

    # ------------------------------------------------------------------
    # Model transport
    # ------------------------------------------------------------------
    request_timeout_s: float = Field(
        default=30.0,
        alias="FIELD_VALIDATION_TIMEOUT",
        gt=0,
    )
    gemini_base_url: str = Field(
        default="https://generativelanguage.googleapis.com",
        alias="GEMINI_BASE_URL",
    )
    ollama_host: str = Field(
        default="http://localhost:11434",
        alias="OLLAMA_HOST",
    )

    # ------------------------------------------------------------------
    # HTTP surface
    # ------------------------------------------------------------------
    inspect_mode: bool = Field(
        default=False,
        alias="FIELD_VALIDATION_INSPECT_MODE",
    )
    cors_origins: list[str] = Field(
        default_factory=lambda: ["*"],
        alias="FIELD_VALIDATION_CORS_ORIGINS",
    )

    model_config = {
        "env_file": ".env",
        "populate_by_name": True,
        "extra": "ignore",
    }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
