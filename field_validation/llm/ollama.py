from __future__ import annotations

import logging
from typing import Any

import httpx

from field_validation.config import Settings, get_settings
from field_validation.core.base import TextModelClient
from field_validation.core.exceptions import ModelInvocationError, ModelResponseError

logger = logging.getLogger(__name__)


class OllamaClient(TextModelClient):
    """Local Ollama server via /api/chat, non-streaming. For offline development."""

    _NAME = "ollama"

    def __init__(
            self,
            model_id: str,
            host: str | None = None,
            timeout_s: float | None = None,
            temperature: float | None = None,
            num_predict: int | None = None,
            settings: Settings | None = None,
            transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        settings = settings if settings is not None else get_settings()
        self._model_id = model_id
        self._host = (host or settings.ollama_host).rstrip("/")
        self._timeout_s = timeout_s or settings.request_timeout_s
        self._options = {
            k: v
            for k, v in {"temperature": temperature, "num_predict": num_predict}.items()
            if v is not None
        }
        self._transport = transport

        logger.info("OllamaClient configured — host=%s model=%s", self._host, self._model_id)

    @property
    def name(self) -> str:
        return f"{self._NAME}:{self._model_id}"

    async def complete(self, prompt: str) -> str:
        payload: dict[str, Any] = {
            "model": self._model_id,
            "messages": [{"role": "user", "content": prompt}],
            "stream": False,
        }
        if self._options:
            payload["options"] = self._options
            logger.debug("Using Ollama generation options: %s", self._options)

        try:
            async with httpx.AsyncClient(
                    base_url=self._host,
                    timeout=self._timeout_s,
                    transport=self._transport,
            ) as client:
                logger.debug("POST %s/api/chat", self._host)
                resp = await client.post("/api/chat", json=payload)
                resp.raise_for_status()
        except httpx.HTTPError as exc:
            raise ModelInvocationError(self.name, exc) from exc

        try:
            data = resp.json()
        except ValueError as exc:
            raise ModelResponseError(self.name, exc) from exc

        message = data.get("message") if isinstance(data, dict) else None
        content = message.get("content") if isinstance(message, dict) else None
        if not isinstance(content, str):
            logger.error("Unexpected Ollama response: %s", data)
            raise ModelResponseError(
                self.name, ValueError("Missing 'message.content' in Ollama response")
            )

        logger.debug("Received %d characters from Ollama", len(content))
        return content
