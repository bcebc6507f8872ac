# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Shared test configuration and fixtures."""

try:
    import fillsense  # noqa: F401
except ImportError:
    raise ImportError("fillsense is not installed. Run: pip install -e '.[dev]'") from None

import logging

import pytest
import structlog

from fillsense.engine import HeuristicEngine
from fillsense.types import FieldDescriptor, FormDescriptor


@pytest.fixture(autouse=True)
def _restore_logging():
    """The CLI reconfigures the root logger; put it back after every test."""
    root = logging.getLogger()
    old_handlers = root.handlers[:]
    old_level = root.level
    yield
    root.handlers = old_handlers
    root.setLevel(old_level)
    structlog.reset_defaults()


@pytest.fixture
def engine() -> HeuristicEngine:
    return HeuristicEngine()


@pytest.fixture
def email_field() -> FieldDescriptor:
    return FieldDescriptor(selector="#email", declared_type="email", name="email", autocomplete="email")


@pytest.fixture
def password_field() -> FieldDescriptor:
    return FieldDescriptor(
        selector="#password", declared_type="password", name="password", autocomplete="current-password"
    )


@pytest.fixture
def register_form(email_field, password_field) -> FormDescriptor:
    return FormDescriptor(
        selector="form#register",
        action_url="https://example.com/register",
        fields=(email_field, password_field),
    )


@pytest.fixture
def otp_boxes() -> tuple[FieldDescriptor, ...]:
    return tuple(FieldDescriptor(selector=f"#digit-{i}", declared_type="tel", max_length=1) for i in range(6))
