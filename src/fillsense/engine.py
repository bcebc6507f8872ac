# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Facade bundling the three classifiers under one :class:`EngineConfig`."""

from __future__ import annotations

import logging

from .config import DEFAULT_CONFIG, EngineConfig
from .field_classifier import FieldClassifier
from .form_classifier import FormClassifier
from .otp_extractor import OTPExtractor
from .otp_fields import (
    find_otp_input_group,
    otp_detection_confidence,
    outranks_classification,
    page_has_otp_context,
)
from .types import (
    ClassificationResult,
    FieldDescriptor,
    FormAnalysis,
    FormDescriptor,
    PatternMatch,
    SemanticFieldType,
    SemanticFormType,
    TextSource,
)

logger = logging.getLogger(__name__)


def _top_confidence(result: ClassificationResult[SemanticFieldType]) -> float:
    """Best raw confidence, read from the alternatives when gated to unknown."""
    if not result.is_unknown:
        return result.confidence
    return result.alternatives[0][1] if result.alternatives else 0.0


class HeuristicEngine:
    def __init__(self, config: EngineConfig = DEFAULT_CONFIG) -> None:
        self.config = config
        self.fields = FieldClassifier(config)
        self.forms = FormClassifier(config, field_classifier=self.fields)
        self.otp = OTPExtractor(config)

    def with_thresholds(
        self,
        *,
        field: float | None = None,
        form: float | None = None,
        otp: float | None = None,
    ) -> HeuristicEngine:
        """New engine with some thresholds replaced (validated)."""
        return HeuristicEngine(
            self.config.with_overrides(
                field_classification_threshold=field,
                form_classification_threshold=form,
                otp_extraction_threshold=otp,
            )
        )

    def classify_field(self, field: FieldDescriptor) -> ClassificationResult[SemanticFieldType]:
        return self.fields.classify(field)

    def classify_form(self, form: FormDescriptor) -> ClassificationResult[SemanticFormType]:
        return self.forms.classify(form)

    def analyze_form(self, form: FormDescriptor, page_text: str = "") -> FormAnalysis:
        """Classify every field once, then the form, and collect OTP inputs.

        OTP selectors, in document order, are the fields classified as
        ``otp``, those whose structure outranks their best text score (an
        unlabelled ``one-time-code`` input, say) and any split single-digit
        box group.

        ``otp_confidence`` counts the independent methods that found OTP
        inputs; with none found, OTP wording in *page_text* or the form's
        own texts still yields a low confidence.
        """
        field_results = self.forms.field_results(form)
        form_result = self.forms.classify(form, field_results)

        classified: list[str] = []
        structural: list[str] = []
        for descriptor, result in zip(form.fields, field_results):
            if result.type is SemanticFieldType.OTP:
                classified.append(descriptor.selector)
            elif outranks_classification(descriptor, _top_confidence(result)):
                structural.append(descriptor.selector)
        structural.extend(b.selector for b in find_otp_input_group(form.fields) if b.selector not in structural)

        otp_selectors = [f.selector for f in form.fields if f.selector in classified or f.selector in structural]

        if otp_selectors:
            methods = sum(
                (
                    form_result.type is SemanticFormType.TWO_FACTOR,
                    bool(classified),
                    any(s not in classified for s in structural),
                )
            )
            otp_confidence = otp_detection_confidence(methods)
        else:
            texts = (page_text, *form.context_texts(), *(f.signal_text() for f in form.fields))
            otp_confidence = otp_detection_confidence(0, page_has_otp_context(" ".join(texts)))

        logger.debug(
            "analyzed form %s: %s, %d fields, %d otp inputs (%.2f)",
            form.selector,
            form_result.type.value,
            len(form.fields),
            len(otp_selectors),
            otp_confidence,
        )
        return FormAnalysis(
            form=form_result,
            fields=tuple(zip(form.fields, field_results)),
            otp_selectors=tuple(dict.fromkeys(otp_selectors)),
            otp_confidence=otp_confidence,
        )

    def extract_otp(self, text: str, source: TextSource | str | None = None) -> PatternMatch | None:
        return self.otp.extract(text, source)
