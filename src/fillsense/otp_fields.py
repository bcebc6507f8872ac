# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Structural OTP input detection (single-digit boxes, one-time-code inputs).

Complements the field classifier, which only reads text attributes: these
helpers use ``max_length``, ``input_mode`` and ``pattern`` hints to spot
passcode boxes that carry no useful label at all, and score how strongly a
page step asks for a passcode from its visible text.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from .types import FieldDescriptor

_OTP_TEXT_RE = re.compile(r"otp|code|verify|token|pin|2fa|mfa", re.IGNORECASE)
_DIGIT_PATTERN_RE = re.compile(r"^\^?\\?d")
_BOX_KINDS = frozenset({"text", "tel", "number"})

MIN_GROUP_SIZE = 4
MAX_GROUP_SIZE = 8


def _hint_text(field: FieldDescriptor) -> str:
    return " ".join(p for p in (field.name, field.id, field.placeholder) if p).lower()


def is_likely_otp_field(field: FieldDescriptor) -> bool:
    """Cheap yes/no check used to pre-filter candidate inputs."""
    if field.max_length == 1:
        return True
    if field.max_length is not None and 4 <= field.max_length <= 8 and field.input_mode.lower() == "numeric":
        return True
    if field.autocomplete.strip().lower() == "one-time-code":
        return True
    if field.pattern and _DIGIT_PATTERN_RE.match(field.pattern):
        return True
    return bool(_OTP_TEXT_RE.search(_hint_text(field)))


def otp_field_confidence(field: FieldDescriptor) -> float:
    """Additive structural score for an OTP input, clamped to 1.0."""
    points = 0
    if field.max_length == 1:
        points += 95
    if field.max_length is not None and 4 <= field.max_length <= 8:
        points += 20
    if field.input_mode.lower() == "numeric":
        points += 20
    if field.autocomplete.strip().lower() == "one-time-code":
        points += 40
    if field.declared_type.lower() in ("tel", "number"):
        points += 10

    text = _hint_text(field)
    if "otp" in text:
        points += 30
    if "code" in text:
        points += 20
    if "verify" in text:
        points += 10
    return min(points, 100) / 100


def find_otp_input_group(fields: Iterable[FieldDescriptor]) -> tuple[FieldDescriptor, ...]:
    """Single-character boxes forming a split passcode input, in document order.

    Returns an empty tuple unless 4–8 such boxes are present.
    """
    boxes = tuple(
        f for f in fields if f.max_length == 1 and (f.declared_type or "text").lower() in _BOX_KINDS
    )
    if MIN_GROUP_SIZE <= len(boxes) <= MAX_GROUP_SIZE:
        return boxes
    return ()


def outranks_classification(field: FieldDescriptor, top_confidence: float) -> bool:
    """True when structure alone says OTP more strongly than the text signals.

    *top_confidence* is the field classifier's best raw confidence for the
    field, whether or not it cleared the threshold.
    """
    return is_likely_otp_field(field) and otp_field_confidence(field) > top_confidence


# ---------------------------------------------------------------------------
# Page context
# ---------------------------------------------------------------------------

OTP_PAGE_KEYWORDS: tuple[str, ...] = (
    "verification code",
    "verify code",
    "enter code",
    "otp",
    "one-time password",
    "one time password",
    "authentication code",
    "security code",
    "confirmation code",
    "sms code",
    "2fa",
    "two-factor",
    "two factor",
    "verify your",
    "verification",
)

# Points per independent detection method, on top of a base of 40.
_METHOD_BASE = 40
_METHOD_POINTS = 20
_CONTEXT_ONLY_POINTS = 30


def page_has_otp_context(text: str) -> bool:
    """Case-insensitive substring check against :data:`OTP_PAGE_KEYWORDS`."""
    lowered = text.lower()
    return any(keyword in lowered for keyword in OTP_PAGE_KEYWORDS)


def otp_detection_confidence(methods: int, has_context: bool = False) -> float:
    """Confidence that a page step asks for a passcode.

    *methods* counts the independent ways OTP inputs were found (form
    purpose, field classification, structure): 0.4 + 0.2 per method, capped
    at 1.0.  With no inputs found, text context alone gives 0.3.
    """
    if methods > 0:
        return min(_METHOD_BASE + _METHOD_POINTS * methods, 100) / 100
    return _CONTEXT_ONLY_POINTS / 100 if has_context else 0.0
