# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Tests for the form purpose classifier."""

from __future__ import annotations

from fractions import Fraction

import pytest

from fillsense.config import EngineConfig
from fillsense.form_classifier import FormClassifier, base_points, classify_form, pattern_hit
from fillsense.heuristics import lookup_form
from fillsense.types import ClassificationResult, FieldDescriptor, FormDescriptor
from fillsense.types import SemanticFieldType as F
from fillsense.types import SemanticFormType as FT


def _results(*types: F) -> list[ClassificationResult[F]]:
    return [ClassificationResult(type=t, confidence=1.0) for t in types]


def _form(n_fields: int = 0, **kwargs) -> FormDescriptor:
    fields = tuple(FieldDescriptor(selector=f"#f{i}") for i in range(n_fields))
    return FormDescriptor(selector="form", fields=fields, **kwargs)


class TestBasePoints:
    def test_fraction_of_required_present(self):
        assert base_points(lookup_form(FT.SIGNUP), {F.EMAIL}) == Fraction(50)
        assert base_points(lookup_form(FT.SIGNUP), {F.EMAIL, F.PASSWORD}) == Fraction(100)

    def test_no_required_fields_scores_zero(self):
        assert base_points(lookup_form(FT.PROFILE), {F.EMAIL, F.PASSWORD}) == 0

    def test_pattern_hit_ignores_empty_texts(self):
        assert not pattern_hit(lookup_form(FT.LOGIN), ("", "", ""))
        assert pattern_hit(lookup_form(FT.LOGIN), ("", "Sign-in", ""))


class TestReferenceCases:
    def test_register_form_is_signup(self, register_form):
        result = classify_form(register_form)
        assert result.type is FT.SIGNUP
        assert result.confidence == 1.0
        alt_types = [t for t, _ in result.alternatives]
        assert alt_types == [FT.LOGIN, FT.PASSWORD_RESET, FT.NEWSLETTER, FT.CONTACT]
        assert all(c == 1.0 for _, c in result.alternatives)

    def test_login_form(self, email_field, password_field):
        form = FormDescriptor(
            selector="form#login",
            action_url="/session",
            button_text="Log in",
            fields=(email_field, password_field),
            page_title="Sign-in",
        )
        result = classify_form(form)
        assert result.type is FT.LOGIN
        assert result.confidence == 1.0

    def test_two_factor_form(self):
        otp = FieldDescriptor(selector="#otp", name="otp", autocomplete="one-time-code")
        form = FormDescriptor(selector="form", page_title="Verify your identity", fields=(otp,))
        result = classify_form(form)
        assert result.type is FT.TWO_FACTOR
        assert result.confidence == 1.0

    def test_checkout_form(self):
        card = FieldDescriptor(selector="#cc", declared_type="tel", name="card-number", autocomplete="cc-number")
        form = FormDescriptor(selector="form", button_text="Pay now", fields=(card,))
        assert classify_form(form).type is FT.CHECKOUT

    def test_profile_only_through_patterns(self):
        form = _form(page_title="Account settings")
        result = classify_form(form)
        assert result.type is FT.UNKNOWN
        assert result.alternatives == ((FT.PROFILE, pytest.approx(0.3)),)

        relaxed = FormClassifier(EngineConfig(form_classification_threshold=0.3)).classify(form)
        assert relaxed.type is FT.PROFILE
        assert relaxed.confidence == pytest.approx(0.3)

    def test_empty_form_is_unknown(self):
        result = classify_form(_form())
        assert result.type is FT.UNKNOWN
        assert result.confidence == 0.0
        assert result.alternatives == ()


class TestPrecomputedFieldResults:
    def test_uses_given_results(self):
        form = _form(2, action_url="/signup")
        result = FormClassifier().classify(form, _results(F.EMAIL, F.PASSWORD))
        assert result.type is FT.SIGNUP

    def test_unknown_fields_do_not_count(self):
        form = _form(1)
        scores = FormClassifier().scores(form, _results(F.UNKNOWN))
        assert all(points == 0 for points in scores.values())

    def test_length_mismatch(self):
        with pytest.raises(ValueError, match="expected 2 field results"):
            FormClassifier().classify(_form(2), _results(F.EMAIL))

    def test_scores_are_unclamped(self, register_form):
        scores = FormClassifier().scores(register_form)
        assert scores[FT.SIGNUP] == 130
        assert scores[FT.LOGIN] == 100
        assert FT.UNKNOWN not in scores

    def test_bonus_does_not_reorder_alternatives_tied_at_full_confidence(self):
        form = _form(3, action_url="/register", button_text="Verify")
        result = FormClassifier().classify(form, _results(F.EMAIL, F.PASSWORD, F.OTP))
        assert result.type is FT.SIGNUP
        assert result.alternatives == (
            (FT.LOGIN, 1.0),
            (FT.PASSWORD_RESET, 1.0),
            (FT.TWO_FACTOR, 1.0),
            (FT.NEWSLETTER, 1.0),
            (FT.CONTACT, 1.0),
        )
