"""Reconciliation pipeline: merge, plan, commit and read-only passes."""

from __future__ import annotations

from .commit import CommitEngine, CommitOptions, CommitResult, CommitSummary, ItemResult
from .confidence import ConfidenceWeights, Corroboration, score_confidence, verification_status
from .merge import MergeLimits, MergeOptions, identities_agree, merge
from .plan import MAX_BATCH_SIZE, PlannedAction, decide_action, ensure_batch_size, plan
from .preview import (
    DryRunItem,
    DryRunResult,
    DryRunSummary,
    PreviewItem,
    PreviewOptions,
    classify_previews,
    preview_batch,
)
from .resolve import Resolution, SourceError, SourceSet, gather_bounded, resolve_candidate

__all__ = [
    "MAX_BATCH_SIZE",
    "CommitEngine",
    "CommitOptions",
    "CommitResult",
    "CommitSummary",
    "ConfidenceWeights",
    "Corroboration",
    "DryRunItem",
    "DryRunResult",
    "DryRunSummary",
    "ItemResult",
    "MergeLimits",
    "MergeOptions",
    "PlannedAction",
    "PreviewItem",
    "PreviewOptions",
    "Resolution",
    "SourceError",
    "SourceSet",
    "classify_previews",
    "decide_action",
    "ensure_batch_size",
    "gather_bounded",
    "identities_agree",
    "merge",
    "plan",
    "preview_batch",
    "resolve_candidate",
    "score_confidence",
    "verification_status",
]
