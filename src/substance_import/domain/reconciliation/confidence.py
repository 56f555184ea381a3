"""Confidence scoring and verification tiers for merged substances.

The score is a tunable, monotonic function: every additional resolved source
adds points, agreement on identity adds a bonus, and conflicting primary
classifications subtract a penalty. Results are clamped to ``0..100``.
"""

from __future__ import annotations

from dataclasses import dataclass

from substance_import.domain.model import VerificationStatus

MAX_CONFIDENCE = 100


@dataclass(frozen=True, slots=True)
class ConfidenceWeights:
    per_source: int = 40
    identity_agreement: int = 20
    description: int = 5
    chemistry: int = 5
    classification_conflict: int = 15


@dataclass(frozen=True, slots=True, kw_only=True)
class Corroboration:
    """What the resolved sources for one candidate have in common."""

    resolved_sources: int
    identity_agreement: bool = False
    has_description: bool = False
    has_chemistry: bool = False
    classification_conflict: bool = False


def score_confidence(
    corroboration: Corroboration,
    weights: ConfidenceWeights | None = None,
) -> int:
    if corroboration.resolved_sources <= 0:
        return 0
    weights = weights or ConfidenceWeights()
    score = corroboration.resolved_sources * weights.per_source
    if corroboration.identity_agreement and corroboration.resolved_sources >= 2:
        score += weights.identity_agreement
    if corroboration.has_description:
        score += weights.description
    if corroboration.has_chemistry:
        score += weights.chemistry
    if corroboration.classification_conflict:
        score -= weights.classification_conflict
    return max(0, min(MAX_CONFIDENCE, score))


def verification_status(corroboration: Corroboration) -> VerificationStatus:
    if corroboration.resolved_sources <= 0:
        return VerificationStatus.UNVERIFIED
    if corroboration.resolved_sources >= 2 and corroboration.identity_agreement:
        return VerificationStatus.VERIFIED
    return VerificationStatus.PARTIAL
