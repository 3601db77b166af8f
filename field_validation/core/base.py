from __future__ import annotations

from abc import ABC, abstractmethod


class TextModelClient(ABC):
    """
    Abstract base for every generative model backend.

    Contract:
    - complete() sends one prompt and returns the completion text. No retry,
      no streaming: a single request/response exchange.
    - Failures raise ModelInvocationError (or ModelResponseError when the
      service answered without text). The pipeline wraps anything else.
    - Clients hold configuration only; they keep no per-request state.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Stable identifier used in logs, errors and /health."""

    @abstractmethod
    async def complete(self, prompt: str) -> str:
        """
        Return the model's raw text answer for `prompt`.

        Raises:
            ModelInvocationError: on transport or service failure.
        """
