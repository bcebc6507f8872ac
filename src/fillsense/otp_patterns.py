# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""OTP precedence chain, false-positive blacklist and confidence table.

The pattern list is the canonical precedence chain: lower ``priority`` is
tried first.  Each pattern's confidence comes from :data:`OTP_CONFIDENCE`,
which must never increase as priority decreases; :func:`validate_tables`
enforces that (and unique priorities) at import time.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType

from .errors import PatternTableError
from .types import OTPFormat

# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class OTPPattern:
    """One link of the precedence chain.  Group 1 holds the passcode."""

    regex: re.Pattern[str]
    name: str
    format: OTPFormat
    context_required: bool
    priority: int
    context_patterns: tuple[re.Pattern[str], ...] = ()


@dataclass(frozen=True, slots=True)
class BlacklistRule:
    """Text shape that looks like a passcode but is something else."""

    name: str
    regex: re.Pattern[str]


# ---------------------------------------------------------------------------
# Precedence chain
# ---------------------------------------------------------------------------

_I = re.IGNORECASE


def _rx(src: str, flags: int = 0) -> re.Pattern[str]:
    try:
        return re.compile(src, flags)
    except re.error as e:
        raise PatternTableError(f"cannot compile {src!r}: {e}") from e


OTP_PATTERNS: tuple[OTPPattern, ...] = (
    # "verification code: 123456"
    OTPPattern(
        regex=_rx(r"verification\s+code[:\s]*\b(\d{4,10})\b", _I),
        name="explicit-context-prefix",
        format=OTPFormat.NUMERIC,
        context_required=False,
        priority=1,
    ),
    # keyword followed by digits: "OTP: 4829", "code 123456"
    OTPPattern(
        regex=_rx(r"(?:code|otp|pin|verification|confirm|token|password|key)[:\s]*(\d{4,10})", _I),
        name="standard-with-context",
        format=OTPFormat.NUMERIC,
        context_required=False,
        priority=2,
    ),
    # "your code is 123456"
    OTPPattern(
        regex=_rx(
            r"(?:your\s+(?:verification\s+|activation\s+|single-use\s+)?(?:code|otp|pin|password|key)\s+is\s*)"
            r"(\d{4,10})",
            _I,
        ),
        name="natural-language",
        format=OTPFormat.NUMERIC,
        context_required=False,
        priority=3,
    ),
    # "123456 is your code"
    OTPPattern(
        regex=_rx(r"(\d{4,10})\s*(?:is\s+your|code|verification)", _I),
        name="code-suffix",
        format=OTPFormat.NUMERIC,
        context_required=False,
        priority=4,
    ),
    # "1 2 3 4 5 6", "123-456"
    OTPPattern(
        regex=_rx(r"\b(\d[\s-]?\d[\s-]?\d[\s-]?\d[\s-]?\d[\s-]?\d[\s-]?\d?)\b"),
        name="spaced-digits",
        format=OTPFormat.NUMERIC,
        context_required=True,
        priority=5,
        context_patterns=tuple(_rx(p, _I) for p in (r"code", r"otp", r"verify", r"confirm", r"token")),
    ),
    # Upper-case letter/digit tokens; case-sensitive on purpose so ordinary words never match.
    OTPPattern(
        regex=_rx(r"\b([A-Z0-9]{6,20})\b"),
        name="alphanumeric",
        format=OTPFormat.ALPHANUMERIC,
        context_required=True,
        priority=6,
        context_patterns=tuple(_rx(p, _I) for p in (r"code", r"token", r"verify", r"password", r"key")),
    ),
    # 5-8 bare digits; 4 is too common (years, times, counts)
    OTPPattern(
        regex=_rx(r"\b(\d{5,8})\b"),
        name="standalone-digits",
        format=OTPFormat.NUMERIC,
        context_required=True,
        priority=7,
        context_patterns=tuple(
            _rx(p, _I) for p in (r"code", r"otp", r"pin", r"verify", r"confirm", r"token", r"security")
        ),
    ),
)

OTP_CONFIDENCE: Mapping[str, float] = MappingProxyType(
    {
        "explicit-context-prefix": 0.95,
        "standard-with-context": 0.95,
        "natural-language": 0.90,
        "code-suffix": 0.85,
        "spaced-digits": 0.75,
        "alphanumeric": 0.60,
        "standalone-digits": 0.50,
    }
)

# ---------------------------------------------------------------------------
# False-positive blacklist
# ---------------------------------------------------------------------------

OTP_BLACKLIST: tuple[BlacklistRule, ...] = tuple(
    BlacklistRule(name, _rx(src, flags))
    for name, src, flags in (
        ("valid-for", r"valid\s+for\s+(\d+)", _I),  # "valid for 9762 seconds"
        ("expires-in", r"expires?\s+in\s+(\d+)", _I),  # "expires in 300"
        ("duration", r"(\d+)\s*(?:seconds?|minutes?|hours?|days?)", _I),
        ("time-of-day", r"(?:at|@)\s*(\d{4})\b", _I),  # "at 1430"
        ("iso-date", r"(\d{4})-(\d{2})-(\d{2})", 0),
        ("us-date", r"(\d{2})/(\d{2})/(\d{4})", 0),
        ("price-prefix", r"\$\s*(\d+)", 0),
        ("price-suffix", r"(\d+)\s*\$", 0),
        ("version-word", r"version\s+(\d+)", _I),
        ("version-v", r"v(\d+)", _I),
    )
)


# ---------------------------------------------------------------------------
# Validation (runs once at import)
# ---------------------------------------------------------------------------


def validate_tables(
    patterns: Sequence[OTPPattern],
    confidence: Mapping[str, float],
    blacklist: Sequence[BlacklistRule],
) -> tuple[OTPPattern, ...]:
    """Check the tables and return *patterns* sorted by priority.

    Raises:
        PatternTableError: duplicate name/priority, missing capture group,
            context-required pattern without context, missing or
            out-of-range confidence, or confidence rising with priority.
    """
    ordered = tuple(sorted(patterns, key=lambda p: p.priority))
    seen_names: set[str] = set()
    seen_priorities: set[int] = set()
    previous: float | None = None
    for p in ordered:
        if p.name in seen_names:
            raise PatternTableError(f"duplicate pattern name {p.name!r}", pattern_name=p.name)
        if p.priority in seen_priorities:
            raise PatternTableError(f"duplicate priority {p.priority} at {p.name!r}", pattern_name=p.name)
        seen_names.add(p.name)
        seen_priorities.add(p.priority)
        if p.regex.groups < 1:
            raise PatternTableError(f"{p.name!r} has no capture group", pattern_name=p.name)
        if p.context_required and not p.context_patterns:
            raise PatternTableError(f"{p.name!r} requires context but lists none", pattern_name=p.name)
        if p.name not in confidence:
            raise PatternTableError(f"no confidence for {p.name!r}", pattern_name=p.name)
        value = confidence[p.name]
        if not 0.0 <= value <= 1.0:
            raise PatternTableError(f"confidence {value} for {p.name!r} outside [0, 1]", pattern_name=p.name)
        if previous is not None and value > previous:
            raise PatternTableError(
                f"confidence for {p.name!r} ({value}) exceeds a higher-priority pattern ({previous})",
                pattern_name=p.name,
            )
        previous = value
    for rule in blacklist:
        if not isinstance(rule.regex, re.Pattern):
            raise PatternTableError(f"blacklist rule {rule.name!r} is not a compiled pattern")
    return ordered


OTP_PATTERNS = validate_tables(OTP_PATTERNS, OTP_CONFIDENCE, OTP_BLACKLIST)
