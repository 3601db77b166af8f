from __future__ import annotations

"""
/v1/inspect: pipeline execution trace endpoint.

Only registered when FIELD_VALIDATION_INSPECT_MODE=true. The response
carries the rendered prompt and the raw model answer; keep it off in
deployments that see real user data.

Translates the internal PipelineTrace (core/pipeline.py dataclass) into
the public InspectResponse (models/response.py Pydantic model).
"""

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from field_validation.api.router import INTERNAL_ERROR_MESSAGE, error_response
from field_validation.core import ModelInvocationError, PipelineTrace
from field_validation.models import ErrorResponse, InspectResponse, ValidationRequest

logger = logging.getLogger(__name__)

inspect_router = APIRouter()


def _trace_to_response(trace: PipelineTrace, model: str) -> InspectResponse:
    return InspectResponse(
        result=trace.result,
        is_phone_field=trace.prompt.is_phone_field,
        prompt=trace.prompt.text,
        raw_response=trace.raw_response,
        model=model,
        model_duration_ms=trace.model_duration_ms,
        total_duration_ms=trace.total_duration_ms,
    )


@inspect_router.post(
    "/v1/inspect",
    response_model=InspectResponse,
    responses={500: {"model": ErrorResponse}},
    summary="Validate a field and return the prompt, raw answer and timings",
    description=(
            "Same result as /api/validation plus the prompt sent to the model, "
            "the unparsed completion and per-step timings. "
            "Only available when FIELD_VALIDATION_INSPECT_MODE=true."
    ),
)
async def inspect(request: Request, body: ValidationRequest) -> JSONResponse:
    pipeline = request.app.state.validation_pipeline
    correlation_id = getattr(request.state, "correlation_id", "unknown")

    logger.info("Inspect request — correlation_id=%s field=%r", correlation_id, body.field_name)

    try:
        trace: PipelineTrace = await pipeline.validate_with_trace(body)
    except ModelInvocationError as exc:
        logger.error("Model call failed — correlation_id=%s error=%s", correlation_id, exc)
        return error_response(500, str(exc))
    # Answered here, inside the middleware stack, so CORS and correlation headers apply.
    except Exception:  # noqa: BLE001
        logger.exception("Error handling request — correlation_id=%s", correlation_id)
        return error_response(500, INTERNAL_ERROR_MESSAGE)

    response = _trace_to_response(trace, pipeline.model_name)

    logger.info(
        "Inspect complete — correlation_id=%s model_ms=%.1f total_ms=%.1f",
        correlation_id,
        response.model_duration_ms,
        response.total_duration_ms,
    )

    return JSONResponse(
        status_code=200,
        content=response.model_dump(mode="json"),
    )
