from __future__ import annotations

import logging
from typing import Any

import httpx

from field_validation.config import Settings, get_settings
from field_validation.core.base import TextModelClient
from field_validation.core.exceptions import (
    ModelInvocationError,
    ModelResponseError,
    ResourceLoadError,
)

logger = logging.getLogger(__name__)

DEFAULT_GEMINI_MODEL = "gemini-2.5-flash"


class GeminiClient(TextModelClient):
    """
    Google Generative Language API (generateContent), one call per prompt.

    The API key is read from settings (GEMINI_API_KEY) unless passed
    explicitly. A missing key raises ResourceLoadError at construction so
    the service refuses to start instead of failing every request.

    `transport` is injectable; tests pass an httpx.MockTransport.
    """

    _NAME = "gemini"

    def __init__(
            self,
            model_id: str = DEFAULT_GEMINI_MODEL,
            api_key: str | None = None,
            base_url: str | None = None,
            timeout_s: float | None = None,
            temperature: float | None = None,
            settings: Settings | None = None,
            transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        settings = settings if settings is not None else get_settings()
        if api_key is None and settings.gemini_api_key is not None:
            api_key = settings.gemini_api_key.get_secret_value()
        if not api_key:
            raise ResourceLoadError(
                "GEMINI_API_KEY is required for the Gemini model client "
                "but was not found in environment or .env file."
            )

        self._model_id = model_id
        self._api_key = api_key
        self._base_url = (base_url or settings.gemini_base_url).rstrip("/")
        self._timeout_s = timeout_s or settings.request_timeout_s
        self._temperature = temperature
        self._transport = transport

        logger.info(
            "GeminiClient configured — model=%s timeout=%.1fs",
            self._model_id,
            self._timeout_s,
        )

    @property
    def name(self) -> str:
        return f"{self._NAME}:{self._model_id}"

    async def complete(self, prompt: str) -> str:
        path = f"/v1beta/models/{self._model_id}:generateContent"
        payload: dict[str, Any] = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
        }
        if self._temperature is not None:
            payload["generationConfig"] = {"temperature": self._temperature}

        try:
            async with httpx.AsyncClient(
                    base_url=self._base_url,
                    timeout=self._timeout_s,
                    transport=self._transport,
            ) as client:
                logger.debug("POST %s%s", self._base_url, path)
                resp = await client.post(
                    path,
                    json=payload,
                    headers={"x-goog-api-key": self._api_key},
                )
                resp.raise_for_status()
        except httpx.HTTPError as exc:
            raise ModelInvocationError(self.name, exc) from exc

        try:
            data = resp.json()
        except ValueError as exc:
            raise ModelResponseError(self.name, exc) from exc

        text = self._extract_text(data)
        if text is None:
            logger.error("Unexpected Gemini response: %s", data)
            raise ModelResponseError(
                self.name,
                ValueError("Missing 'candidates[0].content.parts' in Gemini response"),
            )

        logger.debug("Received %d characters from Gemini", len(text))
        return text

    @staticmethod
    def _extract_text(data: Any) -> str | None:
        """
        generateContent returns:
            {"candidates": [{"content": {"parts": [{"text": "..."}, ...]}}]}
        Text parts of the first candidate are concatenated. A candidate
        with no parts at all (e.g. blocked by safety filters) yields None.
        """
        if not isinstance(data, dict):
            return None
        candidates = data.get("candidates")
        if not isinstance(candidates, list) or not candidates:
            return None
        content = candidates[0].get("content") if isinstance(candidates[0], dict) else None
        parts = content.get("parts") if isinstance(content, dict) else None
        if not isinstance(parts, list) or not parts:
            return None
        return "".join(
            part["text"] for part in parts
            if isinstance(part, dict) and isinstance(part.get("text"), str)
        )
