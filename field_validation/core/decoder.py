from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum

from field_validation.models import (
    DEFAULT_EXAMPLE,
    DEFAULT_TOOLTIP,
    FieldKind,
    ValidationResult,
)

logger = logging.getLogger(__name__)

_TOOLTIP = "TOOLTIP"
_EXAMPLE = "EXAMPLE"

_MARKER_RE = re.compile(r"(TOOLTIP|EXAMPLE):", re.IGNORECASE)
_TOOLTIP_MARKER_RE = re.compile(r"TOOLTIP:", re.IGNORECASE)
_EXAMPLE_MARKER_RE = re.compile(r"EXAMPLE:", re.IGNORECASE)

# Markdown residue the model likes to add around values.
_MARKDOWN_TOKENS: tuple[str, ...] = ("**", "`")


class _State(Enum):
    SCANNING = "scanning"
    AWAIT_TOOLTIP = "await_tooltip"
    AWAIT_EXAMPLE = "await_example"
    DONE = "done"


@dataclass
class _Slots:
    tooltip: str | None = None
    example: str | None = None
    # A TOOLTIP: marker was present, even if nothing usable followed it.
    tooltip_marker_seen: bool = False

    @property
    def complete(self) -> bool:
        return self.tooltip is not None and self.example is not None


class ResponseDecoder:
    """
    Turns the model's free text into a ValidationResult.

    The model is asked for two lines, `TOOLTIP: ...` and `EXAMPLE: ...`, but
    nothing forces it to comply. decode() walks the text line by line:

      SCANNING       a line carrying a marker fills the matching slot with
                     the rest of the line (a tooltip stops at an EXAMPLE:
                     marker on the same line)
      AWAIT_TOOLTIP  a marker with nothing after it; the next non-blank,
      AWAIT_EXAMPLE  marker-free line becomes the value
      DONE           both slots filled, remaining lines are ignored

    Unfilled slots then go through the fallbacks:
      tooltip  empty if a TOOLTIP: marker appeared; otherwise the text
               before the first EXAMPLE:, else the whole answer
      example  empty
    and finally the fixed defaults. decode() never raises.
    """

    def decode(self, raw_text: str, is_phone_field: bool) -> ValidationResult:
        raw_text = raw_text or ""
        slots = self._scan(raw_text)

        if slots.tooltip is not None:
            tooltip = slots.tooltip
        elif slots.tooltip_marker_seen:
            # Marker with an empty body: the default applies, never the raw answer.
            tooltip = ""
        else:
            tooltip = self._tooltip_fallback(raw_text)
        example = slots.example or ""

        tooltip = self._sanitize(tooltip)
        example = self._sanitize(example)

        if not tooltip:
            logger.debug("No tooltip recovered from model answer — using default.")
            tooltip = DEFAULT_TOOLTIP
        if not example:
            logger.debug("No example recovered from model answer — using default.")
            example = default_example(is_phone_field)

        return ValidationResult(tooltip=tooltip, example=example)

    # ------------------------------------------------------------------
    # State machine
    # ------------------------------------------------------------------

    def _scan(self, raw_text: str) -> _Slots:
        slots = _Slots()
        state = _State.SCANNING

        for line in raw_text.splitlines():
            if state in (_State.AWAIT_TOOLTIP, _State.AWAIT_EXAMPLE):
                if not line.strip():
                    continue
                if _MARKER_RE.search(line) is None:
                    value = line.strip()
                    if state is _State.AWAIT_TOOLTIP:
                        slots.tooltip = value
                    else:
                        slots.example = value
                    if slots.complete:
                        break
                    state = _State.SCANNING
                    continue
                # A new marker line abandons the pending slot.
                state = _State.SCANNING

            state = self._scan_line(line, slots)
            if state is _State.DONE:
                break

        return slots

    @staticmethod
    def _scan_line(line: str, slots: _Slots) -> _State:
        markers: dict[str, int] = {}
        for match in _MARKER_RE.finditer(line):
            markers.setdefault(match.group(1).upper(), match.start())

        pending: _State | None = None

        if _TOOLTIP in markers:
            slots.tooltip_marker_seen = True
        if _TOOLTIP in markers and slots.tooltip is None:
            start = markers[_TOOLTIP] + len(_TOOLTIP) + 1
            example_at = markers.get(_EXAMPLE, -1)
            end = example_at if example_at > markers[_TOOLTIP] else len(line)
            body = line[start:end].strip()
            if body:
                slots.tooltip = body
            elif end == len(line):
                pending = _State.AWAIT_TOOLTIP

        if _EXAMPLE in markers and slots.example is None:
            body = line[markers[_EXAMPLE] + len(_EXAMPLE) + 1:].strip()
            if body:
                slots.example = body
            elif pending is None:
                pending = _State.AWAIT_EXAMPLE

        if slots.complete:
            return _State.DONE
        return pending or _State.SCANNING

    # ------------------------------------------------------------------
    # Fallbacks and cleanup
    # ------------------------------------------------------------------

    @staticmethod
    def _tooltip_fallback(raw_text: str) -> str:
        head = _EXAMPLE_MARKER_RE.split(raw_text, maxsplit=1)[0]
        head = _TOOLTIP_MARKER_RE.sub("", head, count=1).strip()
        return head or raw_text.strip()

    @staticmethod
    def _sanitize(value: str) -> str:
        value = value.strip()
        for token in _MARKDOWN_TOKENS:
            value = value.replace(token, "")
        return value.strip()


def default_example(is_phone_field: bool) -> str:
    return DEFAULT_EXAMPLE[FieldKind.PHONE if is_phone_field else FieldKind.EMAIL]


_DEFAULT_DECODER = ResponseDecoder()


def decode(raw_text: str, is_phone_field: bool) -> ValidationResult:
    return _DEFAULT_DECODER.decode(raw_text, is_phone_field)
