# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Tests for descriptor construction and result serialization."""

from __future__ import annotations

import pytest

from fillsense.errors import DescriptorError
from fillsense.types import (
    ClassificationResult,
    FieldDescriptor,
    FormDescriptor,
    PatternMatch,
    SemanticFieldType,
    SemanticFormType,
    TextSource,
)


class TestFieldDescriptorFromDict:
    def test_dom_attribute_names(self):
        field = FieldDescriptor.from_dict(
            {"selector": "#otp", "type": "tel", "maxlength": "6", "inputmode": "numeric", "autocomplete": "one-time-code"}
        )
        assert field.declared_type == "tel"
        assert field.max_length == 6
        assert field.input_mode == "numeric"
        assert field.autocomplete == "one-time-code"

    def test_camel_case_keys(self):
        field = FieldDescriptor.from_dict({"selector": "#n", "declaredType": "text", "maxLength": 1, "inputMode": "tel"})
        assert field.declared_type == "text"
        assert field.max_length == 1
        assert field.input_mode == "tel"

    def test_defaults_and_nulls(self):
        field = FieldDescriptor.from_dict({"selector": "#x", "type": "", "label": None, "extra": "ignored"})
        assert field.declared_type == "text"
        assert field.label == ""
        assert field.required is False
        assert field.max_length is None

    def test_missing_selector(self):
        with pytest.raises(DescriptorError):
            FieldDescriptor.from_dict({"name": "email"})

    def test_signal_text(self):
        field = FieldDescriptor(selector="#x", name="User_Email", label="E-mail", placeholder="")
        assert field.signal_text() == "user_email e-mail"

    def test_auto_complete_spelling(self):
        assert FieldDescriptor.from_dict({"selector": "#e", "autoComplete": "email"}).autocomplete == "email"
        assert FieldDescriptor.from_dict({"selector": "#e", "auto_complete": "email"}).autocomplete == "email"

    @pytest.mark.parametrize(
        "raw, expected",
        [("false", False), ("0", False), ("", False), ("Off", False), ("true", True), ("required", True), (1, True)],
    )
    def test_required_strings(self, raw, expected):
        assert FieldDescriptor.from_dict({"selector": "#x", "required": raw}).required is expected

    def test_bad_max_length(self):
        with pytest.raises(DescriptorError, match="max_length"):
            FieldDescriptor.from_dict({"selector": "#x", "maxlength": "six"})

    @pytest.mark.parametrize("payload", ["#email", 3, None, ["#email"]])
    def test_not_an_object(self, payload):
        with pytest.raises(DescriptorError, match="must be an object"):
            FieldDescriptor.from_dict(payload)


class TestFormDescriptor:
    def test_from_dict_with_nested_fields(self):
        form = FormDescriptor.from_dict(
            {
                "selector": "form#signup",
                "action": "/register",
                "title": "Create account",
                "buttonText": "Sign up",
                "fields": [{"selector": "#email", "type": "email"}, {"selector": "#pw", "type": "password"}],
            }
        )
        assert form.action_url == "/register"
        assert form.page_title == "Create account"
        assert form.button_text == "Sign up"
        assert [f.selector for f in form.fields] == ["#email", "#pw"]

    def test_list_fields_coerced_to_tuple(self):
        form = FormDescriptor(selector="form", fields=[FieldDescriptor(selector="#a")])  # type: ignore[arg-type]
        assert isinstance(form.fields, tuple)

    def test_blank_selector(self):
        with pytest.raises(DescriptorError):
            FormDescriptor(selector="")

    def test_non_object_field_entry(self):
        with pytest.raises(DescriptorError, match="field descriptor must be an object"):
            FormDescriptor.from_dict({"selector": "form", "fields": ["oops"]})

    def test_fields_not_a_list(self):
        with pytest.raises(DescriptorError, match="form fields must be a list"):
            FormDescriptor.from_dict({"selector": "form", "fields": {"selector": "#a"}})


class TestSerialization:
    def test_classification_result_to_dict(self):
        result = ClassificationResult(
            type=SemanticFieldType.EMAIL,
            confidence=1.0,
            alternatives=((SemanticFieldType.USERNAME, 0.45),),
        )
        assert result.to_dict() == {
            "type": "email",
            "confidence": 1.0,
            "alternatives": [{"type": "username", "confidence": 0.45}],
        }

    def test_unknown_form_result(self):
        assert ClassificationResult(type=SemanticFormType.UNKNOWN, confidence=0.0).is_unknown

    def test_pattern_match_to_dict(self):
        match = PatternMatch("natural-language", "482913", 26, 32, 0.9, TextSource.EMAIL)
        assert match.to_dict() == {
            "pattern": "natural-language",
            "value": "482913",
            "start": 26,
            "end": 32,
            "confidence": 0.9,
            "source": "email",
        }

    def test_enum_values_are_strings(self):
        assert SemanticFieldType.CONFIRM_PASSWORD == "confirm-password"
        assert SemanticFormType.TWO_FACTOR.value == "two-factor"
