from enum import Enum


class FieldKind(str, Enum):
    PHONE = "phone"
    EMAIL = "email"


# Substrings of a field label that mark it as a Kenyan phone field when the
# caller does not send an explicit FieldKind.
PHONE_KEYWORDS: tuple[str, ...] = ("kenyan", "phone")

DEFAULT_TOOLTIP = "Check your input."

DEFAULT_EXAMPLE: dict[FieldKind, str] = {
    FieldKind.PHONE: "0712345678",
    FieldKind.EMAIL: "user@example.com",
}
