from .enums import DEFAULT_EXAMPLE, DEFAULT_TOOLTIP, PHONE_KEYWORDS, FieldKind
from .request import ValidationRequest
from .response import ErrorResponse, InspectResponse, ValidationResult

__all__ = [
    "DEFAULT_EXAMPLE",
    "DEFAULT_TOOLTIP",
    "PHONE_KEYWORDS",
    "ErrorResponse",
    "FieldKind",
    "InspectResponse",
    "ValidationRequest",
    "ValidationResult",
]
