# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""FillSense exception hierarchy.

Only programmer errors are raised: malformed static tables, descriptors
missing structurally required attributes, or out-of-range thresholds.
"No confident match" is never an exception; it is an ``unknown`` result
or ``None``.
"""

from __future__ import annotations


class FillSenseError(Exception):
    """Base exception for all FillSense errors."""


class HeuristicTableError(FillSenseError):
    """Field/form heuristic table is incomplete or has an uncompilable pattern."""

    def __init__(self, message: str, *, entry: str = "") -> None:
        super().__init__(message)
        self.entry = entry


class PatternTableError(FillSenseError):
    """OTP pattern, blacklist or confidence table is malformed."""

    def __init__(self, message: str, *, pattern_name: str = "") -> None:
        super().__init__(message)
        self.pattern_name = pattern_name


class DescriptorError(FillSenseError):
    """Field or form descriptor is missing a structurally required attribute."""


class ConfigError(FillSenseError):
    """Threshold configuration is out of range or malformed."""
