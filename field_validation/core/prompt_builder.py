from __future__ import annotations

import logging
import textwrap
from dataclasses import dataclass

from field_validation.models import PHONE_KEYWORDS, FieldKind, ValidationRequest

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PromptContext:
    """Per-request classification. Derived fresh every time, never cached."""

    field_name: str
    user_input: str | None
    is_phone_field: bool
    is_empty: bool


@dataclass(frozen=True)
class BuiltPrompt:
    text: str
    # Threaded through to the decoder to pick the default example.
    is_phone_field: bool


# ---------------------------------------------------------------------------
# Templates
# ---------------------------------------------------------------------------

_EMPTY_INPUT_LABEL = "(empty - field is not filled)"

_EMPTY_INSTRUCTIONS = (
    "- The field is currently empty. Explain what format to use and why the "
    "field is required."
)

_PHONE_FILLED_INSTRUCTIONS = (
    "- If the input is valid, provide a confirmation tooltip\n"
    "- If the input is invalid or incomplete, explain what is wrong and how to fix it\n"
    "- Check that it is a valid Kenyan mobile number for Safaricom, Airtel or Telkom"
)

_EMAIL_FILLED_INSTRUCTIONS = (
    "- If the input is valid, provide a confirmation tooltip\n"
    "- If the input is invalid or incomplete, explain what is wrong and how to fix it\n"
    "- Check that it follows the email format user@domain.com"
)

_PHONE_TEMPLATE = textwrap.dedent(
    """
    You are validating a Kenyan phone number field.

    Field Name: {field_name}
    User's Current Input: {user_input}

    Accepted Kenyan mobile number shapes:
    - 0712345678 (10 digits starting with 0)
    - 712345678 (9 digits without the leading 0)
    - +254712345678 (international format with country code)
    Prefixes must belong to a Kenyan mobile operator (Safaricom, Airtel or Telkom).

    VALIDATE the user's input:
    {instructions}

    IMPORTANT: Always provide BOTH a TOOLTIP and an EXAMPLE in the exact format below.

    TOOLTIP: [a brief, helpful tooltip - validate the input, explain the correct format, or indicate if empty]
    EXAMPLE: [a valid Kenyan phone number in the format: 0712345678]

    Keep the tooltip concise but informative. Always include an example.
    """
)

_EMAIL_TEMPLATE = textwrap.dedent(
    """
    You are validating an email field.

    Field Name: {field_name}
    User's Current Input: {user_input}

    VALIDATE the user's input:
    {instructions}

    IMPORTANT: Always provide BOTH a TOOLTIP and an EXAMPLE in the exact format below.

    TOOLTIP: [a brief, helpful tooltip - validate the input, explain the correct format, or indicate if empty]
    EXAMPLE: [a valid email address like: user@example.com]

    Keep the tooltip concise but informative. Always include an example.
    """
)


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------

def is_phone_field(field_name: str, field_type: FieldKind | None = None) -> bool:
    """
    An explicit FieldKind always wins. Without one, fall back to sniffing the
    label: any of PHONE_KEYWORDS, case-insensitively. The fallback is a
    heuristic ("Telephone" matches, "Mobile" does not).
    """
    if field_type is not None:
        return field_type is FieldKind.PHONE
    folded = field_name.casefold()
    return any(keyword in folded for keyword in PHONE_KEYWORDS)


def is_empty_input(user_input: str | None) -> bool:
    return user_input is None or not user_input.strip()


def build_context(request: ValidationRequest) -> PromptContext:
    return PromptContext(
        field_name=request.field_name,
        user_input=request.user_input,
        is_phone_field=is_phone_field(request.field_name, request.field_type),
        is_empty=is_empty_input(request.user_input),
    )


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------

def render_prompt(context: PromptContext) -> str:
    if context.is_phone_field:
        template = _PHONE_TEMPLATE
        filled_instructions = _PHONE_FILLED_INSTRUCTIONS
    else:
        template = _EMAIL_TEMPLATE
        filled_instructions = _EMAIL_FILLED_INSTRUCTIONS

    instructions = _EMPTY_INSTRUCTIONS if context.is_empty else filled_instructions
    # user_input is interpolated as-is; the model sees exactly what was typed.
    return template.format(
        field_name=context.field_name,
        user_input=_EMPTY_INPUT_LABEL if context.is_empty else context.user_input,
        instructions=instructions,
    )


def build_prompt(request: ValidationRequest) -> BuiltPrompt:
    """Pure: classify the request and render the matching template."""
    context = build_context(request)
    text = render_prompt(context)
    logger.debug(
        "Built %s prompt for field '%s' (empty=%s, length=%d)",
        "phone" if context.is_phone_field else "email",
        context.field_name,
        context.is_empty,
        len(text),
    )
    return BuiltPrompt(text=text, is_phone_field=context.is_phone_field)


class PromptBuilder:
    """Object seam over build_prompt() so the pipeline can take a substitute."""

    def build(self, request: ValidationRequest) -> BuiltPrompt:
        return build_prompt(request)
