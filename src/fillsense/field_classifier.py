# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Weighted-signal field classifier.

Every candidate field type is scored against one descriptor with four
independent signals, each worth a fixed number of points:

  1. Pattern       – first regex hit in name/id/label/placeholder   (45)
  2. Keyword       – case-insensitive substring hit               (25)
  3. Input kind    – declared ``type`` is accepted by the field     (20)
  4. Autocomplete  – ``autocomplete`` token is accepted             (10)

The highest score wins, exact ties go to the type declared first in
:class:`SemanticFieldType`, and anything below the configured threshold is
reported as ``unknown`` (alternatives kept).

Because of that tie rule a fully-signalled "Confirm password" input scores
the same as ``password`` and is reported as ``password``; callers that need
the distinction should look for ``confirm-password`` at equal confidence in
``alternatives``.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from .config import DEFAULT_CONFIG, EngineConfig
from .heuristics import FIELD_HEURISTICS, FieldHeuristics
from .scoring import (
    AUTOCOMPLETE_POINTS,
    FULL_SCORE,
    INPUT_KIND_POINTS,
    KEYWORD_POINTS,
    PATTERN_POINTS,
    decide,
)
from .types import ClassificationResult, FieldDescriptor, SemanticFieldType

logger = logging.getLogger(__name__)

FIELD_ORDER: tuple[SemanticFieldType, ...] = tuple(SemanticFieldType)
CANDIDATE_FIELD_TYPES: tuple[SemanticFieldType, ...] = tuple(
    t for t in FIELD_ORDER if t is not SemanticFieldType.UNKNOWN
)


def _autocomplete_hit(token: str, accepted: frozenset[str]) -> bool:
    """Whole attribute value or any of its space-separated tokens is accepted."""
    if not token:
        return False
    return token in accepted or any(part in accepted for part in token.split())


def score_signals(field: FieldDescriptor, heuristics: FieldHeuristics, text: str | None = None) -> int:
    """Points earned by *field* against one type's heuristics, clamped to FULL_SCORE."""
    if text is None:
        text = field.signal_text()
    points = 0
    if text:
        if any(p.search(text) for p in heuristics.patterns):
            points += PATTERN_POINTS
        if any(k in text for k in heuristics.keywords):
            points += KEYWORD_POINTS
    if (field.declared_type or "").strip().lower() in heuristics.types:
        points += INPUT_KIND_POINTS
    if _autocomplete_hit((field.autocomplete or "").strip().lower(), heuristics.autocomplete):
        points += AUTOCOMPLETE_POINTS
    return min(points, FULL_SCORE)


class FieldClassifier:
    """Classify field descriptors into :class:`SemanticFieldType` values.

    Instances hold only an immutable config and a reference to the
    read-only registry, so one instance can be shared across threads.
    """

    def __init__(
        self,
        config: EngineConfig = DEFAULT_CONFIG,
        registry: Mapping[SemanticFieldType, FieldHeuristics] = FIELD_HEURISTICS,
    ) -> None:
        self.config = config
        self.registry = registry

    def scores(self, field: FieldDescriptor) -> dict[SemanticFieldType, int]:
        """Raw points for every candidate type (zero scores included)."""
        text = field.signal_text()
        return {t: score_signals(field, self.registry[t], text) for t in CANDIDATE_FIELD_TYPES}

    def classify(self, field: FieldDescriptor) -> ClassificationResult[SemanticFieldType]:
        result = decide(
            self.scores(field),
            FIELD_ORDER,
            SemanticFieldType.UNKNOWN,
            self.config.field_classification_threshold,
        )
        logger.debug(
            "field %s -> %s (%.2f)",
            field.selector,
            result.type.value,
            result.confidence,
        )
        return result


def classify_field(
    field: FieldDescriptor, config: EngineConfig = DEFAULT_CONFIG
) -> ClassificationResult[SemanticFieldType]:
    """One-shot convenience wrapper around :meth:`FieldClassifier.classify`."""
    return FieldClassifier(config).classify(field)
