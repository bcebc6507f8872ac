# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Value types shared by the classifiers and the OTP extractor.

Descriptors are immutable snapshots of page elements built by an external
DOM scanner.  No live element handle ever crosses into this package, so
every classifier can be exercised with plain data fixtures.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar

from .errors import DescriptorError

# ---------------------------------------------------------------------------
# Closed enumerations (declaration order == tie-break order)
# ---------------------------------------------------------------------------


class SemanticFieldType(str, Enum):
    EMAIL = "email"
    PASSWORD = "password"
    CONFIRM_PASSWORD = "confirm-password"
    OTP = "otp"
    USERNAME = "username"
    NAME = "name"
    FIRST_NAME = "first-name"
    LAST_NAME = "last-name"
    MIDDLE_NAME = "middle-name"
    PHONE = "phone"
    ADDRESS = "address"
    CITY = "city"
    ZIP = "zip"
    COUNTRY = "country"
    CREDIT_CARD = "credit-card"
    CVV = "cvv"
    EXPIRY = "expiry"
    UNKNOWN = "unknown"


class SemanticFormType(str, Enum):
    LOGIN = "login"
    SIGNUP = "signup"
    PASSWORD_RESET = "password-reset"
    TWO_FACTOR = "two-factor"
    NEWSLETTER = "newsletter"
    CONTACT = "contact"
    CHECKOUT = "checkout"
    PROFILE = "profile"
    UNKNOWN = "unknown"


class OTPFormat(str, Enum):
    NUMERIC = "numeric"
    ALPHANUMERIC = "alphanumeric"
    MIXED = "mixed"


class TextSource(str, Enum):
    """Where an OTP text came from.  Carried through, never interpreted."""

    EMAIL = "email"
    SMS = "sms"
    MANUAL = "manual"


# ---------------------------------------------------------------------------
# Descriptors
# ---------------------------------------------------------------------------

_CAMEL_RE = re.compile(r"(?<!^)(?=[A-Z])")

# Keys accepted from scanners that emit the DOM attribute name directly.
_FIELD_ALIASES: dict[str, str] = {
    "type": "declared_type",
    "maxlength": "max_length",
    "inputmode": "input_mode",
    "auto_complete": "autocomplete",
}

_FALSE_STRINGS = frozenset({"", "false", "0", "no", "off"})


def _snake(key: str) -> str:
    return _CAMEL_RE.sub("_", key).lower()


def _parse_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() not in _FALSE_STRINGS
    return bool(value)


def _parse_max_length(value: Any) -> int | None:
    if value in (None, ""):
        return None
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise DescriptorError(f"max_length must be an integer, got {value!r}") from e


def _normalize_keys(kind: str, data: Any, aliases: Mapping[str, str]) -> dict[str, Any]:
    if not isinstance(data, Mapping):
        raise DescriptorError(f"{kind} must be an object, got {type(data).__name__}")
    out: dict[str, Any] = {}
    for key, value in data.items():
        snake = _snake(key)
        out[aliases.get(key.lower(), aliases.get(snake, snake))] = value
    return out


def _require_selector(kind: str, selector: object) -> None:
    if not isinstance(selector, str) or not selector.strip():
        raise DescriptorError(f"{kind} requires a non-empty selector, got {selector!r}")


@dataclass(frozen=True, slots=True)
class FieldDescriptor:
    """Structural snapshot of one input element."""

    selector: str
    declared_type: str = "text"
    name: str = ""
    id: str = ""
    label: str = ""
    placeholder: str = ""
    autocomplete: str = ""
    required: bool = False
    # Hints for OTP box detection only; the classifier ignores them.
    max_length: int | None = None
    input_mode: str = ""
    pattern: str = ""

    def __post_init__(self) -> None:
        _require_selector("FieldDescriptor", self.selector)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> FieldDescriptor:
        """Build from a scanner payload (camelCase or snake_case keys).

        Unknown keys are ignored; ``None`` string attributes become ``""``.
        Raises :class:`DescriptorError` for a non-object payload or a
        non-integer ``max_length``.
        """
        values = _normalize_keys("field descriptor", data, _FIELD_ALIASES)
        kwargs: dict[str, Any] = {"selector": values.get("selector")}
        for name in cls.__dataclass_fields__:
            if name == "selector" or name not in values:
                continue
            value = values[name]
            if name == "required":
                kwargs[name] = _parse_bool(value)
            elif name == "max_length":
                kwargs[name] = _parse_max_length(value)
            else:
                kwargs[name] = "" if value is None else str(value)
        if not kwargs.get("declared_type"):
            kwargs.pop("declared_type", None)
        return cls(**kwargs)

    def signal_text(self) -> str:
        """Lower-cased union of the attributes the classifier reads."""
        return " ".join(p for p in (self.name, self.id, self.label, self.placeholder) if p).lower()


@dataclass(frozen=True, slots=True)
class FormDescriptor:
    """A form with its page-level context and ordered fields."""

    selector: str
    action_url: str = ""
    page_title: str = ""
    button_text: str = ""
    fields: tuple[FieldDescriptor, ...] = ()

    def __post_init__(self) -> None:
        _require_selector("FormDescriptor", self.selector)
        if not isinstance(self.fields, tuple):
            object.__setattr__(self, "fields", tuple(self.fields))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> FormDescriptor:
        values = _normalize_keys("form descriptor", data, {"action": "action_url", "title": "page_title"})
        raw_fields = values.get("fields") or ()
        if not isinstance(raw_fields, (list, tuple)):
            raise DescriptorError(f"form fields must be a list, got {type(raw_fields).__name__}")
        return cls(
            selector=values.get("selector"),  # type: ignore[arg-type]
            action_url=values.get("action_url") or "",
            page_title=values.get("page_title") or "",
            button_text=values.get("button_text") or "",
            fields=tuple(f if isinstance(f, FieldDescriptor) else FieldDescriptor.from_dict(f) for f in raw_fields),
        )

    def context_texts(self) -> tuple[str, str, str]:
        return (self.action_url, self.page_title, self.button_text)


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

T = TypeVar("T", SemanticFieldType, SemanticFormType)


@dataclass(frozen=True, slots=True)
class ClassificationResult(Generic[T]):
    """Winning type plus every other scored candidate, best first."""

    type: T
    confidence: float  # 0.0–1.0
    alternatives: tuple[tuple[T, float], ...] = ()

    @property
    def is_unknown(self) -> bool:
        return self.type.value == "unknown"

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "confidence": self.confidence,
            "alternatives": [{"type": t.value, "confidence": c} for t, c in self.alternatives],
        }


@dataclass(frozen=True, slots=True)
class PatternMatch:
    """A passcode candidate located in a source text."""

    pattern_name: str
    extracted_value: str
    start_index: int
    end_index: int
    confidence: float
    source: TextSource | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "pattern": self.pattern_name,
            "value": self.extracted_value,
            "start": self.start_index,
            "end": self.end_index,
            "confidence": self.confidence,
            "source": self.source.value if self.source else None,
        }


@dataclass(frozen=True, slots=True)
class FormAnalysis:
    """Per-field and form-level results for one form."""

    form: ClassificationResult[SemanticFormType]
    fields: tuple[tuple[FieldDescriptor, ClassificationResult[SemanticFieldType]], ...] = ()
    otp_selectors: tuple[str, ...] = ()
    # How sure the form is an OTP entry step (0 when nothing points to one).
    otp_confidence: float = 0.0

    def selectors_of(self, field_type: SemanticFieldType) -> tuple[str, ...]:
        return tuple(d.selector for d, r in self.fields if r.type is field_type)

    def to_dict(self) -> dict[str, Any]:
        return {
            "form": self.form.to_dict(),
            "fields": [{"selector": d.selector, **r.to_dict()} for d, r in self.fields],
            "otp_selectors": list(self.otp_selectors),
            "otp_confidence": self.otp_confidence,
        }
