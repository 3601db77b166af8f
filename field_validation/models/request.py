from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from .enums import FieldKind


class ValidationRequest(BaseModel):
    """
    Field descriptor sent by the form: which field, and what the user typed.
    Immutable, lives for exactly one request.
    """

    model_config = {"frozen": True, "populate_by_name": True}

    field_name: str = Field(..., alias="fieldName", min_length=1)
    # Absent or blank means the field has not been filled yet.
    user_input: str | None = Field(default=None, alias="userInput")
    # Explicit classification; when omitted the label is sniffed for keywords.
    field_type: FieldKind | None = Field(default=None, alias="fieldType")

    @field_validator("field_name")
    @classmethod
    def strip_and_validate(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("fieldName cannot be empty or whitespace only")
        return stripped
