from __future__ import annotations

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Public result of the validation pipeline
# ---------------------------------------------------------------------------

class ValidationResult(BaseModel):
    """Decoded model answer. `tooltip` is never empty; the pipeline always fills `example`."""

    model_config = {"frozen": True}

    tooltip: str = Field(..., min_length=1)
    example: str | None = None


class ErrorResponse(BaseModel):
    """Body of every non-2xx answer from the HTTP layer."""

    error: str
    details: list[dict] | None = None


# ---------------------------------------------------------------------------
# Inspect endpoint response: HTTP adapter over PipelineTrace
#
# Kept apart from PipelineTrace (internal dataclass in core/pipeline.py) so
# the pipeline can change its internal record without breaking consumers.
# The translation happens in api/inspect_router.py.
# ---------------------------------------------------------------------------

class InspectResponse(BaseModel):
    """Result plus the prompt sent and the raw completion received."""

    result: ValidationResult
    is_phone_field: bool
    prompt: str
    raw_response: str
    model: str
    model_duration_ms: float = Field(ge=0.0)
    total_duration_ms: float = Field(ge=0.0)
