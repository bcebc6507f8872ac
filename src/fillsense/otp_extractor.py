# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""One-time passcode extraction from free email/SMS text.

Walks the precedence chain in ``otp_patterns`` and returns the first
candidate that survives three filters, in this order:

  1. context  – context-required patterns need a context word anywhere
  2. format   – numeric candidates are digits only (spaces/hyphens
                allowed between them); alphanumeric candidates need at
                least one letter and one digit
  3. blacklist – the candidate span must not overlap any blacklist match
                (dates, durations, prices, versions, clock times)

A rejected candidate is simply dropped; scanning continues with the next
match of the same pattern, then the next pattern.  The winner is then
gated by ``otp_extraction_threshold``.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator, Mapping, Sequence

from .config import DEFAULT_CONFIG, EngineConfig
from .otp_patterns import OTP_BLACKLIST, OTP_CONFIDENCE, OTP_PATTERNS, BlacklistRule, OTPPattern
from .scoring import gate
from .types import OTPFormat, PatternMatch, TextSource

logger = logging.getLogger(__name__)

_EDGE_SEPARATOR_RE = re.compile(r"^[\s-]*(.*?)[\s-]*$", re.DOTALL)
_SEPARATOR_RE = re.compile(r"[\s-]+")
_NUMERIC_OTP_RE = re.compile(r"^\d{4,8}$")
_ALNUM_OTP_RE = re.compile(r"^[A-Z0-9]{4,10}$", re.IGNORECASE)

Span = tuple[int, int]


def is_valid_otp(code: str) -> bool:
    """4–8 digits or 4–10 letters/digits."""
    if not code:
        return False
    return bool(_NUMERIC_OTP_RE.match(code) or _ALNUM_OTP_RE.match(code))


def _format_ok(value: str, fmt: OTPFormat) -> bool:
    if not value:
        return False
    if fmt is OTPFormat.NUMERIC:
        return value.isdigit() and value.isascii()
    if fmt is OTPFormat.ALPHANUMERIC:
        return value.isalnum() and any(c.isalpha() for c in value) and any(c.isdigit() for c in value)
    return True


def _overlaps(span: Span, others: Sequence[Span]) -> bool:
    start, end = span
    return any(start < o_end and o_start < end for o_start, o_end in others)


def _coerce_source(source: TextSource | str | None) -> TextSource | None:
    if source is None or isinstance(source, TextSource):
        return source
    return TextSource(source)


class OTPExtractor:
    """Pick at most one passcode out of a text.  Stateless after construction."""

    def __init__(
        self,
        config: EngineConfig = DEFAULT_CONFIG,
        patterns: Sequence[OTPPattern] = OTP_PATTERNS,
        blacklist: Sequence[BlacklistRule] = OTP_BLACKLIST,
        confidence: Mapping[str, float] = OTP_CONFIDENCE,
    ) -> None:
        self.config = config
        self.patterns = tuple(sorted(patterns, key=lambda p: p.priority))
        self.blacklist = tuple(blacklist)
        self.confidence = confidence

    def blacklisted_spans(self, text: str) -> list[Span]:
        return [m.span() for rule in self.blacklist for m in rule.regex.finditer(text)]

    def candidates(self, text: str, source: TextSource | str | None = None) -> Iterator[PatternMatch]:
        """Every surviving candidate in precedence order (ungated)."""
        if not text:
            return
        src = _coerce_source(source)
        blocked = self.blacklisted_spans(text)

        for pattern in self.patterns:
            if pattern.context_required and not any(c.search(text) for c in pattern.context_patterns):
                continue
            for m in pattern.regex.finditer(text):
                raw = m.group(1)
                if raw is None:
                    continue
                # Trim separators the spaced-digit form can capture at its edges.
                edge = _EDGE_SEPARATOR_RE.match(raw)
                trimmed = edge.group(1)
                start = m.start(1) + edge.start(1)
                end = start + len(trimmed)
                value = _SEPARATOR_RE.sub("", trimmed) if pattern.format is OTPFormat.NUMERIC else trimmed

                if not _format_ok(value, pattern.format):
                    continue
                if _overlaps((start, end), blocked):
                    logger.debug("otp candidate %r from %s blacklisted", value, pattern.name)
                    continue
                yield PatternMatch(
                    pattern_name=pattern.name,
                    extracted_value=value,
                    start_index=start,
                    end_index=end,
                    confidence=self.confidence[pattern.name],
                    source=src,
                )

    def extract(self, text: str, source: TextSource | str | None = None) -> PatternMatch | None:
        """Best passcode in *text*, or ``None`` when nothing confident survives."""
        best = next(self.candidates(text, source), None)
        if best is None:
            return None
        if not gate(best.confidence, self.config.otp_extraction_threshold):
            logger.debug("otp %s below threshold (%.2f)", best.pattern_name, best.confidence)
            return None
        logger.debug("otp extracted via %s (%.2f)", best.pattern_name, best.confidence)
        return best


def extract_otp(
    text: str,
    source: TextSource | str | None = None,
    config: EngineConfig = DEFAULT_CONFIG,
) -> PatternMatch | None:
    """One-shot convenience wrapper around :meth:`OTPExtractor.extract`."""
    return OTPExtractor(config).extract(text, source)
