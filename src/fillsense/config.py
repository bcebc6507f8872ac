# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Threshold configuration injected into the classifiers.

The core never reads environment or global state for its thresholds;
callers build an :class:`EngineConfig` (or use :data:`DEFAULT_CONFIG`) and
hand it to a classifier at construction time.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import ConfigError


class EngineConfig(BaseModel):
    """Acceptance thresholds for the three classifiers."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    field_classification_threshold: float = Field(0.6, ge=0.0, le=1.0)
    form_classification_threshold: float = Field(0.7, ge=0.0, le=1.0)
    otp_extraction_threshold: float = Field(0.5, ge=0.0, le=1.0)

    @classmethod
    def create(cls, **values: Any) -> EngineConfig:
        """Validate *values*, raising :class:`ConfigError` instead of pydantic's error."""
        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigError(str(e)) from e

    def with_overrides(self, **overrides: Any) -> EngineConfig:
        """Return a validated copy; ``None`` overrides are ignored."""
        values = self.model_dump()
        values.update({k: v for k, v in overrides.items() if v is not None})
        return self.create(**values)


DEFAULT_CONFIG = EngineConfig()
