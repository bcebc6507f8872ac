# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Heuristic registry: detection signals per field type and form type.

Raw tables are declared as plain strings (multilingual: en, es, fr, de, it,
pt, ru, zh, ja, ko, ar, vi) and compiled exactly once at import.  A missing
enum entry or an uncompilable pattern raises :class:`HeuristicTableError`
immediately, so a broken table can never reach a classifier.

The compiled registries are read-only mappings; ``lookup`` is total over
both enumerations and ``unknown`` maps to empty heuristics.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import overload

from .errors import HeuristicTableError
from .types import SemanticFieldType, SemanticFormType

F = SemanticFieldType
FT = SemanticFormType

# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class FieldHeuristics:
    """Detection signals for one semantic field type."""

    patterns: tuple[re.Pattern[str], ...] = ()
    keywords: tuple[str, ...] = ()
    types: frozenset[str] = frozenset()
    autocomplete: frozenset[str] = frozenset()


@dataclass(frozen=True, slots=True)
class FormIndicator:
    """URL/title/button patterns and required field types for one form type."""

    patterns: tuple[re.Pattern[str], ...] = ()
    required_fields: tuple[SemanticFieldType, ...] = ()


# ---------------------------------------------------------------------------
# Raw field table
# ---------------------------------------------------------------------------

_RAW_FIELDS: dict[SemanticFieldType, dict[str, tuple[str, ...]]] = {
    F.EMAIL: {
        "patterns": (
            r"email", r"e-mail", r"e_mail", r"mail", r"@",
            r"correo",  # es
            r"courriel",  # fr
            r"邮箱", r"メール", r"이메일", r"البريد",
            r"login", r"signin", r"user.*id", r"account", r"identifier",
        ),
        "keywords": (
            "email", "e-mail", "mail", "correo", "address", "login", "userid", "account",
            "user", "id", "identifier", "courriel", "signin",
        ),
        "types": ("email", "text"),
        "autocomplete": ("email", "username", "section-login email", "webauthn", "work email", "home email"),
    },
    F.PASSWORD: {
        "patterns": (
            r"password", r"passwd", r"pwd", r"pass", r"passcode",
            r"contraseña", r"clave", r"mot.?de.?passe", r"kennwort", r"passwort",
            r"密码", r"パスワード", r"비밀번호",
            r"secret", r"credential",
        ),
        "keywords": ("password", "pass", "pwd", "contraseña", "clave", "secret", "credential", "kennwort", "passwort"),
        "types": ("password",),
        "autocomplete": ("current-password", "new-password", "password"),
    },
    F.CONFIRM_PASSWORD: {
        "patterns": (
            r"confirm", r"repeat", r"retype", r"verificar?", r"valid", r"match", r"again", r"re.?enter", r"retry",
        ),
        "keywords": (
            "confirm", "repeat", "retype", "verify", "again", "validation", "match", "reenter",
            "confirm_password", "confirmpassword", "password2",
        ),
        "types": ("password",),
        "autocomplete": ("new-password",),
    },
    F.OTP: {
        "patterns": (
            r"otp", r"code", r"verify", r"token", r"pin", r"mpin",
            r"2fa", r"mfa", r"totp",
            r"security", r"access", r"passcode", r"activation",
            r"verification", r"authenticate", r"challenge",
            r"#", r"digit", r"one.?time",
            r"验证码", r"認証",
        ),
        "keywords": (
            "otp", "code", "verification", "token", "pin", "2fa", "mfa", "security", "access",
            "passcode", "digit", "sms", "authenticator", "challenge", "onetime",
        ),
        "types": ("text", "number", "tel", "password"),
        "autocomplete": ("one-time-code", "otp"),
    },
    F.USERNAME: {
        "patterns": (
            r"username", r"user.?name", r"user.?id", r"login.?id", r"login.?name",
            r"usuario", r"handle", r"nickname", r"screen.?name", r"alias",
            r"account.?name", r"account.?id", r"member.?id",
            r"用户名", r"ユーザー名", r"사용자명",
            r"^uid$", r"^uname$",
        ),
        "keywords": (
            "username", "user", "login", "userid", "uid", "uname", "handle", "nickname", "alias",
            "screenname", "accountname", "memberid", "loginname", "loginid",
        ),
        "types": ("text",),
        "autocomplete": ("username", "nickname"),
    },
    F.NAME: {
        "patterns": (
            r"^name$", r"full.?name", r"your.?name", r"complete.?name", r"display.?name",
            r"real.?name", r"legal.?name", r"actual.?name", r"^the.?name$",
            r"nombre.?completo", r"nom.?complet", r"nome.?completo", r"vollständiger.?name",
            r"tên.?đầy.?đủ", r"姓名", r"フルネーム", r"성명", r"الاسم.?الكامل",
        ),
        "keywords": (
            "fullname", "full_name", "completename", "complete_name", "yourname", "displayname",
            "realname", "real_name", "legalname", "legal_name", "wholename", "name",
        ),
        "types": ("text",),
        "autocomplete": ("name",),
    },
    F.FIRST_NAME: {
        "patterns": (
            r"first.?name", r"given.?name", r"forename",
            r"^fname$", r"^f_name$", r"^f-name$", r"^first$",
            r"christian.?name", r"personal.?name",
            r"prénom", r"prenom", r"vorname", r"primer.?nombre", r"nome.?proprio", r"primeiro.?nome",
            r"имя", r"名(?!字)", r"ファーストネーム", r"이름", r"الاسم.?الأول",
        ),
        "keywords": (
            "fname", "f_name", "firstname", "first_name", "first-name", "givenname", "given_name",
            "given-name", "given", "forename", "prenom", "vorname", "christianname", "personalname",
            "primernombre",
        ),
        "types": ("text",),
        "autocomplete": ("given-name", "first-name"),
    },
    F.LAST_NAME: {
        "patterns": (
            r"last.?name", r"sur.?name", r"family.?name",
            r"^lname$", r"^l_name$", r"^l-name$", r"^last$", r"^surname$", r"^sname$",
            r"nachname", r"familienname", r"apellido", r"segundo.?nombre", r"nom.?de.?famille",
            r"cognome", r"sobrenome", r"apelido", r"фамилия",
            r"姓(?!名)", r"ラストネーム", r"苗字", r"성",
            r"اسم.?العائلة", r"اللقب",
        ),
        "keywords": (
            "lname", "l_name", "lastname", "last_name", "last-name", "surname", "sname", "s_name",
            "familyname", "family_name", "family-name", "apellido", "nachname", "cognome", "sobrenome",
        ),
        "types": ("text",),
        "autocomplete": ("family-name", "last-name"),
    },
    F.MIDDLE_NAME: {
        "patterns": (
            r"middle.?name", r"mid.?name",
            r"^mname$", r"^m_name$", r"^m-name$", r"^middle$",
            r"second.?name", r"additional.?name",
            r"segundo.?nombre", r"nombre.?medio",
            r"deuxième.?prénom", r"second.?prénom",
            r"zweiter.?vorname", r"mittelname",
            r"patronym", r"отчество",
            r"middle.?initial",
        ),
        "keywords": (
            "mname", "m_name", "middlename", "middle_name", "middle-name", "midname", "secondname",
            "second_name", "additionalname", "middleinitial", "mi", "patronymic",
        ),
        "types": ("text",),
        "autocomplete": ("additional-name", "middle-name"),
    },
    F.PHONE: {
        "patterns": (
            r"phone", r"tel", r"mobile", r"cell", r"contact", r"numero",
            r"fone", r"callback", r"sms", r"whatsapp",
            r"电话", r"電話", r"電話番号",
        ),
        "keywords": (
            "phone", "telephone", "mobile", "cell", "sms", "tel", "fone", "numero", "contact",
            "whatsapp", "landline", "callback",
        ),
        "types": ("tel", "text", "number"),
        "autocomplete": ("tel", "tel-national", "tel-local", "mobile"),
    },
    F.ADDRESS: {
        "patterns": (
            r"address", r"street", r"direccion", r"location", r"adresse", r"住所", r"地址",
            r"domicile", r"residence",
        ),
        "keywords": (
            "address", "street", "direccion", "shipping", "billing", "adresse", "domicile",
            "residence", "addr", "address1", "address2",
        ),
        "types": ("text",),
        "autocomplete": ("street-address", "address-line1", "address-line2"),
    },
    F.CITY: {
        "patterns": (r"city", r"ciudad", r"town", r"locality", r"ville", r"stadt", r"市", r"città"),
        "keywords": ("city", "ciudad", "town", "locality", "ville", "stadt", "municipality"),
        "types": ("text",),
        "autocomplete": ("address-level2",),
    },
    F.ZIP: {
        "patterns": (
            r"zip", r"postal", r"postcode", r"pincode", r"plz", r"cep", r"郵便番号", r"邮编", r"code.?postal",
        ),
        "keywords": ("zip", "postal", "postcode", "pincode", "plz", "zipcode", "postalcode", "cep"),
        "types": ("text", "number"),
        "autocomplete": ("postal-code",),
    },
    F.COUNTRY: {
        "patterns": (r"country", r"pais", r"region", r"pays", r"land", r"国", r"país", r"nation", r"国家"),
        "keywords": ("country", "pais", "nation", "region", "pays", "land", "nationality"),
        "types": ("text", "select-one"),
        "autocomplete": ("country", "country-name"),
    },
    F.CREDIT_CARD: {
        "patterns": (
            r"card", r"cc", r"credit", r"pan", r"card.?number", r"卡号", r"クレジット", r"tarjeta", r"carte",
        ),
        "keywords": (
            "card", "credit", "cc", "mastercard", "visa", "amex", "debit", "ccnumber", "cardnumber", "pan",
        ),
        "types": ("text", "tel", "number"),
        "autocomplete": ("cc-number", "card-number"),
    },
    F.CVV: {
        "patterns": (r"cvv", r"cvc", r"security.?code", r"card.?code", r"ccv", r"cv2"),
        "keywords": ("cvv", "cvc", "security", "verification", "cardcode", "securitycode", "ccv", "cv2"),
        "types": ("text", "password", "tel", "number"),
        "autocomplete": ("cc-csc",),
    },
    F.EXPIRY: {
        "patterns": (
            r"expir", r"validity", r"mm", r"yy", r"date", r"valid.?until", r"valid.?thru", r"vencimiento",
        ),
        "keywords": (
            "expiry", "expiration", "validity", "month", "year", "validthru", "vencimiento", "mmyy", "expdate",
        ),
        "types": ("text", "tel", "number", "month"),
        "autocomplete": ("cc-exp", "cc-exp-month", "cc-exp-year"),
    },
    F.UNKNOWN: {},
}

# ---------------------------------------------------------------------------
# Raw form table
# ---------------------------------------------------------------------------

_RAW_FORMS: dict[SemanticFormType, tuple[tuple[str, ...], tuple[SemanticFieldType, ...]]] = {
    FT.LOGIN: ((r"login", r"signin", r"sign-in", r"log-in", r"auth", r"entrar"), (F.PASSWORD,)),
    FT.SIGNUP: (
        (r"signup", r"sign-up", r"register", r"create", r"join", r"enroll", r"registrar"),
        (F.EMAIL, F.PASSWORD),
    ),
    FT.PASSWORD_RESET: ((r"reset", r"forgot", r"recover", r"lost"), (F.EMAIL,)),
    FT.TWO_FACTOR: ((r"2fa", r"otp", r"verify", r"two-factor", r"mfa", r"security", r"challenge"), (F.OTP,)),
    FT.NEWSLETTER: ((r"newsletter", r"subscribe", r"updates", r"mailing"), (F.EMAIL,)),
    FT.CONTACT: ((r"contact", r"message", r"inquiry", r"support", r"help"), (F.EMAIL,)),
    FT.CHECKOUT: ((r"checkout", r"payment", r"order", r"pay", r"purchase", r"cart"), (F.CREDIT_CARD,)),
    FT.PROFILE: ((r"profile", r"account", r"settings", r"my-account", r"preferences"), ()),
    FT.UNKNOWN: ((), ()),
}


# ---------------------------------------------------------------------------
# Compilation (runs once at import)
# ---------------------------------------------------------------------------


def _compile_all(entry: str, sources: Iterable[str]) -> tuple[re.Pattern[str], ...]:
    compiled: list[re.Pattern[str]] = []
    for src in sources:
        try:
            compiled.append(re.compile(src, re.IGNORECASE))
        except re.error as e:
            raise HeuristicTableError(f"{entry}: cannot compile {src!r}: {e}", entry=entry) from e
    return tuple(compiled)


def build_field_registry(
    raw: Mapping[SemanticFieldType, Mapping[str, Iterable[str]]],
) -> Mapping[SemanticFieldType, FieldHeuristics]:
    """Compile a raw field table; every enum member must have an entry."""
    missing = [t.value for t in SemanticFieldType if t not in raw]
    if missing:
        raise HeuristicTableError(f"field table missing entries: {', '.join(missing)}", entry=missing[0])
    registry: dict[SemanticFieldType, FieldHeuristics] = {}
    for ftype in SemanticFieldType:
        entry = raw[ftype]
        registry[ftype] = FieldHeuristics(
            patterns=_compile_all(ftype.value, entry.get("patterns", ())),
            keywords=tuple(k.lower() for k in entry.get("keywords", ())),
            types=frozenset(t.lower() for t in entry.get("types", ())),
            autocomplete=frozenset(a.lower() for a in entry.get("autocomplete", ())),
        )
    if registry[SemanticFieldType.UNKNOWN] != FieldHeuristics():
        raise HeuristicTableError("unknown field type must have empty heuristics", entry="unknown")
    return MappingProxyType(registry)


def build_form_registry(
    raw: Mapping[SemanticFormType, tuple[Iterable[str], Iterable[SemanticFieldType]]],
) -> Mapping[SemanticFormType, FormIndicator]:
    """Compile a raw form table; every enum member must have an entry."""
    missing = [t.value for t in SemanticFormType if t not in raw]
    if missing:
        raise HeuristicTableError(f"form table missing entries: {', '.join(missing)}", entry=missing[0])
    registry: dict[SemanticFormType, FormIndicator] = {}
    for ftype in SemanticFormType:
        patterns, required = raw[ftype]
        required = tuple(required)
        if SemanticFieldType.UNKNOWN in required:
            raise HeuristicTableError(f"{ftype.value}: 'unknown' cannot be a required field", entry=ftype.value)
        registry[ftype] = FormIndicator(patterns=_compile_all(ftype.value, patterns), required_fields=required)
    if registry[SemanticFormType.UNKNOWN] != FormIndicator():
        raise HeuristicTableError("unknown form type must have empty indicators", entry="unknown")
    return MappingProxyType(registry)


FIELD_HEURISTICS: Mapping[SemanticFieldType, FieldHeuristics] = build_field_registry(_RAW_FIELDS)
FORM_INDICATORS: Mapping[SemanticFormType, FormIndicator] = build_form_registry(_RAW_FORMS)


# ---------------------------------------------------------------------------
# Lookup
# ---------------------------------------------------------------------------


def lookup_field(field_type: SemanticFieldType) -> FieldHeuristics:
    return FIELD_HEURISTICS[field_type]


def lookup_form(form_type: SemanticFormType) -> FormIndicator:
    return FORM_INDICATORS[form_type]


@overload
def lookup(kind: SemanticFieldType) -> FieldHeuristics: ...
@overload
def lookup(kind: SemanticFormType) -> FormIndicator: ...
def lookup(kind: SemanticFieldType | SemanticFormType) -> FieldHeuristics | FormIndicator:
    """Registry entry for either a field type or a form type."""
    if isinstance(kind, SemanticFieldType):
        return FIELD_HEURISTICS[kind]
    return FORM_INDICATORS[kind]
