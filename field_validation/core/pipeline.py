from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable

from field_validation.core.base import TextModelClient
from field_validation.core.decoder import ResponseDecoder
from field_validation.core.exceptions import ModelInvocationError
from field_validation.core.prompt_builder import BuiltPrompt, PromptBuilder
from field_validation.models import ValidationRequest, ValidationResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PipelineEvent:
    """
    Structured observability record. `name` is one of:
    request_received, prompt_built, model_responded, model_failed,
    result_decoded.
    """

    name: str
    payload: dict[str, Any] = field(default_factory=dict)


Observer = Callable[[PipelineEvent], None]


def log_event(event: PipelineEvent) -> None:
    """Default observer: every event at DEBUG, payload included."""
    logger.debug("pipeline event %s: %s", event.name, event.payload)


@dataclass(frozen=True)
class PipelineTrace:
    """
    Full execution record returned by validate_with_trace().

    Intentionally NOT a Pydantic model. The HTTP layer translates it into
    InspectResponse before serialization.
    """

    prompt: BuiltPrompt
    raw_response: str
    result: ValidationResult
    model_duration_ms: float
    total_duration_ms: float


class FieldValidationPipeline:
    """
    Prompt builder → one model call → response decoder.

    Execution rules:
    1. The prompt is rendered fresh for every request; nothing is cached.
    2. The model is called exactly once. No retry, no timeout of its own;
       the client's transport decides how long to wait.
    3. Any model failure is raised as ModelInvocationError. No partial
       tooltip/example is fabricated in that case.
    4. Decoding never fails: whatever text comes back, the result has a
       non-empty tooltip and a non-empty example.

    Two public entry points:
      - validate()            → ValidationResult (production path)
      - validate_with_trace() → PipelineTrace (inspect/debug path)
    """

    def __init__(
            self,
            client: TextModelClient,
            prompt_builder: PromptBuilder | None = None,
            decoder: ResponseDecoder | None = None,
            observer: Observer | None = None,
    ) -> None:
        self._client = client
        self._prompt_builder = prompt_builder or PromptBuilder()
        self._decoder = decoder or ResponseDecoder()
        self._observer: Observer = observer or log_event

    @property
    def model_name(self) -> str:
        return self._client.name

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def validate(self, request: ValidationRequest) -> ValidationResult:
        trace = await self.validate_with_trace(request)
        return trace.result

    async def validate_with_trace(self, request: ValidationRequest) -> PipelineTrace:
        t_start = time.perf_counter()
        self._emit(
            "request_received",
            field_name=request.field_name,
            user_input=request.user_input,
            field_type=request.field_type.value if request.field_type else None,
        )

        prompt = self._prompt_builder.build(request)
        self._emit("prompt_built", is_phone_field=prompt.is_phone_field, prompt=prompt.text)

        t_model = time.perf_counter()
        raw_text = await self._invoke_model(prompt.text)
        model_ms = round((time.perf_counter() - t_model) * 1000, 3)
        self._emit(
            "model_responded",
            model=self._client.name,
            raw_response=raw_text,
            length=len(raw_text),
            duration_ms=model_ms,
        )

        result = self._decoder.decode(raw_text, prompt.is_phone_field)
        self._emit("result_decoded", tooltip=result.tooltip, example=result.example)

        total_ms = round((time.perf_counter() - t_start) * 1000, 3)
        return PipelineTrace(
            prompt=prompt,
            raw_response=raw_text,
            result=result,
            model_duration_ms=model_ms,
            total_duration_ms=total_ms,
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _invoke_model(self, prompt_text: str) -> str:
        try:
            raw_text = await self._client.complete(prompt_text)
        except ModelInvocationError as exc:
            self._emit("model_failed", model=self._client.name, error=str(exc))
            raise
        except Exception as exc:
            wrapped = ModelInvocationError(self._client.name, exc)
            self._emit("model_failed", model=self._client.name, error=str(wrapped))
            raise wrapped from exc
        # A client returning None is treated as an empty completion.
        return raw_text or ""

    def _emit(self, name: str, **payload: Any) -> None:
        try:
            self._observer(PipelineEvent(name=name, payload=payload))
        except Exception:  # noqa: BLE001
            logger.exception("Observer failed on event '%s'.", name)
