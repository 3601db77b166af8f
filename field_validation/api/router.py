from __future__ import annotations

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from field_validation.core import ModelInvocationError
from field_validation.models import ErrorResponse, ValidationRequest, ValidationResult

logger = logging.getLogger(__name__)

router = APIRouter()

INTERNAL_ERROR_MESSAGE = "Internal server error"


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump(exclude_none=True),
    )


@router.post(
    "/api/validation",
    response_model=ValidationResult,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    summary="Get a tooltip and an example for a form field",
    description=(
            "Asks the generative model to judge the current value of an email or "
            "Kenyan phone number field. Always returns a non-empty `tooltip` and "
            "`example` on success; 500 only when the model could not be reached."
    ),
)
async def validate_field(request: Request, body: ValidationRequest) -> JSONResponse:
    pipeline = request.app.state.validation_pipeline
    correlation_id = getattr(request.state, "correlation_id", "unknown")

    logger.info(
        "Validating field — correlation_id=%s field=%r has_input=%s",
        correlation_id,
        body.field_name,
        bool(body.user_input and body.user_input.strip()),
    )

    try:
        result: ValidationResult = await pipeline.validate(body)
    except ModelInvocationError as exc:
        logger.error("Model call failed — correlation_id=%s error=%s", correlation_id, exc)
        return error_response(500, str(exc))
    # Answered here, inside the middleware stack, so CORS and correlation headers apply.
    except Exception:  # noqa: BLE001
        logger.exception("Error handling request — correlation_id=%s", correlation_id)
        return error_response(500, INTERNAL_ERROR_MESSAGE)

    logger.info("Validation complete — correlation_id=%s", correlation_id)

    return JSONResponse(
        status_code=200,
        content=result.model_dump(mode="json"),
    )


@router.get(
    "/health",
    summary="Health check",
    description=(
            "Returns 200 if the service is running and the pipeline is loaded, "
            "with the active model client and whether inspect mode is enabled."
    ),
)
async def health(request: Request) -> JSONResponse:
    pipeline = getattr(request.app.state, "validation_pipeline", None)
    if pipeline is None:
        return JSONResponse(status_code=503, content={"status": "unavailable"})

    return JSONResponse(
        status_code=200,
        content={
            "status": "ok",
            "model": pipeline.model_name,
            "inspect_mode": request.app.state.settings.inspect_mode,
        },
    )
