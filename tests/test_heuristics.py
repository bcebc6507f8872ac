# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Tests for the compiled field/form heuristic registries."""

from __future__ import annotations

import pytest

from fillsense.errors import HeuristicTableError
from fillsense.heuristics import (
    FIELD_HEURISTICS,
    FORM_INDICATORS,
    FieldHeuristics,
    FormIndicator,
    build_field_registry,
    build_form_registry,
    lookup,
    lookup_field,
    lookup_form,
)
from fillsense.types import SemanticFieldType, SemanticFormType


def _minimal_field_table() -> dict:
    return {t: {} for t in SemanticFieldType}


def _minimal_form_table() -> dict:
    return {t: ((), ()) for t in SemanticFormType}


class TestRegistryCompleteness:
    @pytest.mark.parametrize("field_type", list(SemanticFieldType), ids=lambda t: t.value)
    def test_every_field_type_has_entry(self, field_type):
        assert isinstance(lookup(field_type), FieldHeuristics)

    @pytest.mark.parametrize("form_type", list(SemanticFormType), ids=lambda t: t.value)
    def test_every_form_type_has_entry(self, form_type):
        assert isinstance(lookup(form_type), FormIndicator)

    def test_unknown_entries_are_empty(self):
        assert lookup_field(SemanticFieldType.UNKNOWN) == FieldHeuristics()
        assert lookup_form(SemanticFormType.UNKNOWN) == FormIndicator()

    @pytest.mark.parametrize(
        "field_type",
        [t for t in SemanticFieldType if t is not SemanticFieldType.UNKNOWN],
        ids=lambda t: t.value,
    )
    def test_known_field_types_have_signals(self, field_type):
        h = FIELD_HEURISTICS[field_type]
        assert h.patterns and h.keywords and h.types and h.autocomplete

    def test_patterns_are_case_insensitive(self):
        email = lookup_field(SemanticFieldType.EMAIL)
        assert any(p.search("USER_EMAIL") for p in email.patterns)

    def test_multilingual_entries(self):
        password = lookup_field(SemanticFieldType.PASSWORD)
        assert any(p.search("mot de passe") for p in password.patterns)
        assert any(p.search("パスワード") for p in password.patterns)

    def test_profile_requires_no_fields(self):
        assert FORM_INDICATORS[SemanticFormType.PROFILE].required_fields == ()
        assert FORM_INDICATORS[SemanticFormType.PROFILE].patterns

    def test_signup_requires_email_and_password(self):
        required = FORM_INDICATORS[SemanticFormType.SIGNUP].required_fields
        assert set(required) == {SemanticFieldType.EMAIL, SemanticFieldType.PASSWORD}


class TestRegistryImmutability:
    def test_field_registry_is_read_only(self):
        with pytest.raises(TypeError):
            FIELD_HEURISTICS[SemanticFieldType.EMAIL] = FieldHeuristics()  # type: ignore[index]

    def test_form_registry_is_read_only(self):
        with pytest.raises(TypeError):
            FORM_INDICATORS[SemanticFormType.LOGIN] = FormIndicator()  # type: ignore[index]

    def test_entries_are_frozen(self):
        with pytest.raises(AttributeError):
            lookup_field(SemanticFieldType.EMAIL).keywords = ()  # type: ignore[misc]


class TestRegistryValidation:
    def test_minimal_tables_build(self):
        fields = build_field_registry(_minimal_field_table())
        forms = build_form_registry(_minimal_form_table())
        assert len(fields) == len(SemanticFieldType)
        assert len(forms) == len(SemanticFormType)

    def test_missing_field_entry(self):
        table = _minimal_field_table()
        del table[SemanticFieldType.CVV]
        with pytest.raises(HeuristicTableError, match="cvv") as exc_info:
            build_field_registry(table)
        assert exc_info.value.entry == "cvv"

    def test_missing_form_entry(self):
        table = _minimal_form_table()
        del table[SemanticFormType.CHECKOUT]
        with pytest.raises(HeuristicTableError, match="checkout"):
            build_form_registry(table)

    def test_uncompilable_pattern(self):
        table = _minimal_field_table()
        table[SemanticFieldType.EMAIL] = {"patterns": ("mail(",)}
        with pytest.raises(HeuristicTableError) as exc_info:
            build_field_registry(table)
        assert exc_info.value.entry == "email"

    def test_unknown_with_signals_rejected(self):
        table = _minimal_field_table()
        table[SemanticFieldType.UNKNOWN] = {"keywords": ("anything",)}
        with pytest.raises(HeuristicTableError, match="unknown"):
            build_field_registry(table)

    def test_unknown_as_required_field_rejected(self):
        table = _minimal_form_table()
        table[SemanticFormType.LOGIN] = ((), (SemanticFieldType.UNKNOWN,))
        with pytest.raises(HeuristicTableError, match="login"):
            build_form_registry(table)

    def test_keywords_lowercased(self):
        table = _minimal_field_table()
        table[SemanticFieldType.CITY] = {"keywords": ("Town",), "types": ("TEXT",)}
        registry = build_field_registry(table)
        assert registry[SemanticFieldType.CITY].keywords == ("town",)
        assert registry[SemanticFieldType.CITY].types == frozenset({"text"})
