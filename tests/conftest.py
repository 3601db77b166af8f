from __future__ import annotations

"""
conftest.py: shared fixtures for the entire test suite.

Isolation strategy
──────────────────
Settings are read from os.environ and an optional .env file. Every test
runs with the service's variables removed from the environment and the
get_settings() cache cleared, so nothing leaks in from the developer's
shell. Tests that need a Settings instance build it through the
`make_settings` fixture, which passes `_env_file=None` so pydantic-settings
never reads a .env from disk.

Model clients are never real: `make_client` returns a mock TextModelClient
whose complete() is an AsyncMock.
"""

from typing import Any, Callable
from unittest.mock import AsyncMock, MagicMock

import pytest

from field_validation.config import Settings, get_settings
from field_validation.core import TextModelClient
from field_validation.models import ValidationRequest

_SERVICE_ENV_VARS = (
    "GEMINI_API_KEY",
    "GEMINI_BASE_URL",
    "OLLAMA_HOST",
    "FIELD_VALIDATION_TIMEOUT",
    "FIELD_VALIDATION_INSPECT_MODE",
    "FIELD_VALIDATION_CORS_ORIGINS",
)


@pytest.fixture(autouse=True)
def isolate_settings_env(monkeypatch: pytest.MonkeyPatch):
    for name in _SERVICE_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def make_settings() -> Callable[..., Settings]:
    """The single correct way to build Settings in tests."""

    def _factory(**kwargs: Any) -> Settings:
        return Settings(_env_file=None, **kwargs)

    return _factory


@pytest.fixture
def make_client() -> Callable[..., TextModelClient]:
    """Mock model client answering `answer`, or raising `error`."""

    def _factory(
            answer: str | None = "TOOLTIP: Looks good\nEXAMPLE: user@example.com",
            error: Exception | None = None,
            name: str = "stub:model",
    ) -> TextModelClient:
        client = MagicMock(spec=TextModelClient)
        client.name = name
        if error is not None:
            client.complete = AsyncMock(side_effect=error)
        else:
            client.complete = AsyncMock(return_value=answer)
        return client

    return _factory


# ---------------------------------------------------------------------------
# Standard request fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def email_request() -> ValidationRequest:
    return ValidationRequest(field_name="Email", user_input="jane@example")


@pytest.fixture
def phone_request() -> ValidationRequest:
    return ValidationRequest(field_name="Phone Number (Kenyan)", user_input="0712345678")


@pytest.fixture
def empty_phone_request() -> ValidationRequest:
    return ValidationRequest(field_name="Phone Number (Kenyan)")
