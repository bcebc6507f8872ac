# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Shared scoring utilities: the confidence gate and deterministic ranking.

Scores are kept in integer (or exact rational) points out of
:data:`FULL_SCORE` so that equal signal sets always compare equal; floats
only appear when a score is turned into a reported confidence.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from fractions import Fraction
from typing import TypeVar

from .types import ClassificationResult, SemanticFieldType, SemanticFormType

FULL_SCORE = 100

# FieldClassifier signal weights (points).  Pattern strongest, autocomplete weakest.
PATTERN_POINTS = 45
KEYWORD_POINTS = 25
INPUT_KIND_POINTS = 20
AUTOCOMPLETE_POINTS = 10

# FormClassifier bonus when action URL / title / button text matches.
FORM_PATTERN_BONUS = 30

T = TypeVar("T", SemanticFieldType, SemanticFormType)
Points = int | Fraction


def gate(confidence: float, threshold: float) -> bool:
    """Accept iff ``confidence >= threshold``."""
    return confidence >= threshold


def to_confidence(points: Points) -> float:
    """Clamp *points* to [0, FULL_SCORE] and scale into [0.0, 1.0]."""
    clamped = max(0, min(points, FULL_SCORE))
    return float(Fraction(clamped) / FULL_SCORE)


def rank(scores: Mapping[T, Points], order: Sequence[T]) -> list[tuple[T, Points]]:
    """Positive-scoring candidates, best first; exact ties follow *order*."""
    position = {t: i for i, t in enumerate(order)}
    return sorted(
        ((t, p) for t, p in scores.items() if p > 0),
        key=lambda item: (-item[1], position[item[0]]),
    )


def decide(
    scores: Mapping[T, Points],
    order: Sequence[T],
    unknown: T,
    threshold: float,
) -> ClassificationResult[T]:
    """Pick the winner from raw *scores* and apply the confidence gate.

    The winner is the highest unclamped score.  ``alternatives`` are listed
    by reported (clamped) confidence, ties in *order*, so two candidates
    that both report 1.0 always appear in declaration order.

    Below the threshold the result becomes *unknown* with confidence 0, yet
    every scored candidate (the raw top scorer included) stays in
    ``alternatives`` so callers can run fallback heuristics.
    """
    ranked = rank(scores, order)
    if not ranked:
        return ClassificationResult(type=unknown, confidence=0.0, alternatives=())

    position = {t: i for i, t in enumerate(order)}
    winner, confidence = ranked[0][0], to_confidence(ranked[0][1])
    by_confidence = sorted(
        ((t, to_confidence(p)) for t, p in ranked),
        key=lambda item: (-item[1], position[item[0]]),
    )
    if not gate(confidence, threshold):
        return ClassificationResult(type=unknown, confidence=0.0, alternatives=tuple(by_confidence))
    return ClassificationResult(
        type=winner,
        confidence=confidence,
        alternatives=tuple(item for item in by_confidence if item[0] != winner),
    )
