# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""FillSense: heuristic form-field classification and OTP extraction.

Pure core: callers pass immutable descriptors and text in, and get typed
results back.  No DOM, network or storage access happens here.
"""

from __future__ import annotations

from .config import DEFAULT_CONFIG, EngineConfig
from .engine import HeuristicEngine
from .errors import (
    ConfigError,
    DescriptorError,
    FillSenseError,
    HeuristicTableError,
    PatternTableError,
)
from .field_classifier import FieldClassifier, classify_field
from .form_classifier import FormClassifier, classify_form
from .heuristics import FIELD_HEURISTICS, FORM_INDICATORS, FieldHeuristics, FormIndicator, lookup
from .otp_extractor import OTPExtractor, extract_otp, is_valid_otp
from .otp_fields import (
    OTP_PAGE_KEYWORDS,
    find_otp_input_group,
    is_likely_otp_field,
    otp_detection_confidence,
    otp_field_confidence,
    outranks_classification,
    page_has_otp_context,
)
from .otp_patterns import OTP_BLACKLIST, OTP_CONFIDENCE, OTP_PATTERNS, OTPPattern
from .types import (
    ClassificationResult,
    FieldDescriptor,
    FormAnalysis,
    FormDescriptor,
    OTPFormat,
    PatternMatch,
    SemanticFieldType,
    SemanticFormType,
    TextSource,
)

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_CONFIG",
    "FIELD_HEURISTICS",
    "FORM_INDICATORS",
    "OTP_BLACKLIST",
    "OTP_CONFIDENCE",
    "OTP_PAGE_KEYWORDS",
    "OTP_PATTERNS",
    "ClassificationResult",
    "ConfigError",
    "DescriptorError",
    "EngineConfig",
    "FieldClassifier",
    "FieldDescriptor",
    "FieldHeuristics",
    "FillSenseError",
    "FormAnalysis",
    "FormClassifier",
    "FormDescriptor",
    "FormIndicator",
    "HeuristicEngine",
    "HeuristicTableError",
    "OTPExtractor",
    "OTPFormat",
    "OTPPattern",
    "PatternMatch",
    "PatternTableError",
    "SemanticFieldType",
    "SemanticFormType",
    "TextSource",
    "classify_field",
    "classify_form",
    "extract_otp",
    "find_otp_input_group",
    "is_likely_otp_field",
    "is_valid_otp",
    "lookup",
    "otp_detection_confidence",
    "otp_field_confidence",
    "outranks_classification",
    "page_has_otp_context",
]
