# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Form purpose classifier built on top of field classification.

Per candidate form type:

  base  = |required field types present| / |required field types|
          (0 when the type requires no fields, so ``profile`` can only win
          through its patterns)
  bonus = +0.3 when any indicator pattern matches the action URL, page
          title or button text

Ranking uses the unclamped sum, so ``signup`` (1.0 + 0.3) beats ``login``
(1.0) on a registration form even though both report confidence 1.0.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from fractions import Fraction

from .config import DEFAULT_CONFIG, EngineConfig
from .field_classifier import FieldClassifier
from .heuristics import FORM_INDICATORS, FormIndicator
from .scoring import FORM_PATTERN_BONUS, FULL_SCORE, decide
from .types import (
    ClassificationResult,
    FormDescriptor,
    SemanticFieldType,
    SemanticFormType,
)

logger = logging.getLogger(__name__)

FORM_ORDER: tuple[SemanticFormType, ...] = tuple(SemanticFormType)
CANDIDATE_FORM_TYPES: tuple[SemanticFormType, ...] = tuple(t for t in FORM_ORDER if t is not SemanticFormType.UNKNOWN)


def base_points(indicator: FormIndicator, present: set[SemanticFieldType]) -> Fraction:
    required = indicator.required_fields
    if not required:
        return Fraction(0)
    hits = sum(1 for f in required if f in present)
    return Fraction(hits * FULL_SCORE, len(required))


def pattern_hit(indicator: FormIndicator, texts: Sequence[str]) -> bool:
    return any(p.search(t) for t in texts if t for p in indicator.patterns)


class FormClassifier:
    """Infer a form's purpose from its classified fields and page context."""

    def __init__(
        self,
        config: EngineConfig = DEFAULT_CONFIG,
        field_classifier: FieldClassifier | None = None,
        registry: Mapping[SemanticFormType, FormIndicator] = FORM_INDICATORS,
    ) -> None:
        self.config = config
        self.field_classifier = field_classifier or FieldClassifier(config)
        self.registry = registry

    def field_results(self, form: FormDescriptor) -> list[ClassificationResult[SemanticFieldType]]:
        return [self.field_classifier.classify(f) for f in form.fields]

    def scores(
        self,
        form: FormDescriptor,
        field_results: Sequence[ClassificationResult[SemanticFieldType]] | None = None,
    ) -> dict[SemanticFormType, Fraction]:
        """Unclamped points per candidate form type."""
        if field_results is None:
            field_results = self.field_results(form)
        present = {r.type for r in field_results if r.type is not SemanticFieldType.UNKNOWN}
        texts = form.context_texts()

        scores: dict[SemanticFormType, Fraction] = {}
        for ftype in CANDIDATE_FORM_TYPES:
            indicator = self.registry[ftype]
            points = base_points(indicator, present)
            if pattern_hit(indicator, texts):
                points += FORM_PATTERN_BONUS
            scores[ftype] = points
        return scores

    def classify(
        self,
        form: FormDescriptor,
        field_results: Sequence[ClassificationResult[SemanticFieldType]] | None = None,
    ) -> ClassificationResult[SemanticFormType]:
        """Classify *form*; pass *field_results* to reuse an earlier field pass."""
        if field_results is not None and len(field_results) != len(form.fields):
            raise ValueError(f"expected {len(form.fields)} field results, got {len(field_results)}")
        result = decide(
            self.scores(form, field_results),
            FORM_ORDER,
            SemanticFormType.UNKNOWN,
            self.config.form_classification_threshold,
        )
        logger.debug("form %s -> %s (%.2f)", form.selector, result.type.value, result.confidence)
        return result


def classify_form(form: FormDescriptor, config: EngineConfig = DEFAULT_CONFIG) -> ClassificationResult[SemanticFormType]:
    """One-shot convenience wrapper around :meth:`FormClassifier.classify`."""
    return FormClassifier(config).classify(form)
