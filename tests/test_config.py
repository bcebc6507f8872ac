# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Tests for EngineConfig threshold validation."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from fillsense.config import DEFAULT_CONFIG, EngineConfig
from fillsense.errors import ConfigError, FillSenseError


class TestDefaults:
    def test_default_thresholds(self):
        assert DEFAULT_CONFIG.field_classification_threshold == 0.6
        assert DEFAULT_CONFIG.form_classification_threshold == 0.7
        assert DEFAULT_CONFIG.otp_extraction_threshold == 0.5

    def test_frozen(self):
        with pytest.raises(ValidationError):
            DEFAULT_CONFIG.field_classification_threshold = 0.1  # type: ignore[misc]


class TestCreate:
    @pytest.mark.parametrize(
        "values",
        [
            {"field_classification_threshold": 1.5},
            {"form_classification_threshold": -0.1},
            {"otp_extraction_threshold": "high"},
            {"unknown_threshold": 0.5},
        ],
    )
    def test_invalid_values(self, values):
        with pytest.raises(ConfigError):
            EngineConfig.create(**values)

    def test_config_error_is_fillsense_error(self):
        with pytest.raises(FillSenseError):
            EngineConfig.create(field_classification_threshold=2)

    @pytest.mark.parametrize("value", [0.0, 1.0])
    def test_bounds_inclusive(self, value):
        assert EngineConfig.create(otp_extraction_threshold=value).otp_extraction_threshold == value


class TestWithOverrides:
    def test_none_ignored(self):
        config = DEFAULT_CONFIG.with_overrides(field_classification_threshold=None, otp_extraction_threshold=0.8)
        assert config.field_classification_threshold == 0.6
        assert config.otp_extraction_threshold == 0.8

    def test_original_unchanged(self):
        DEFAULT_CONFIG.with_overrides(form_classification_threshold=0.1)
        assert DEFAULT_CONFIG.form_classification_threshold == 0.7

    def test_validated(self):
        with pytest.raises(ConfigError):
            DEFAULT_CONFIG.with_overrides(form_classification_threshold=7)
