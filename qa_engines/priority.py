"""
qa_engines.priority -- Priority scoring for work queue items.

Responsibility:
    Rank heterogeneous work queue items on one numeric scale and derive the
    high / medium / low level from the score.

Architecture position:
    Engines -- pure calculation layer, zero I/O, no hidden state.

Scoring:
    score = base weight for the item type
          + urgency addend from days until due
          + 20 for a missing document on an Approved entity
    then the total is multiplied by 1.2 for sensitive categories and
    rounded half-up to an integer.

    ===================  =========
    days_until_due       addend
    ===================  =========
    < 0 (overdue)        +50
    0 .. 7               +30
    8 .. 14              +15
    > 14 or absent       +0
    ===================  =========

    Levels: score >= 100 is high, >= 50 is medium, otherwise low.  These
    thresholds are fixed.

Invariants enforced:
    - Deterministic: identical inputs give an identical PriorityScore.
    - Monotone: the score never decreases as days_until_due decreases.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from types import MappingProxyType
from typing import Mapping

from qa_kernel.domain.work_queue import PriorityScore, WorkQueueItemType, WorkQueuePriority

BASE_WEIGHTS: Mapping[WorkQueueItemType, int] = MappingProxyType({
    WorkQueueItemType.MATERIAL_ISSUE_CRITICAL: 100,
    WorkQueueItemType.MATERIAL_ISSUE_IMPORTANT: 50,
    WorkQueueItemType.SUPPLIER_ISSUE: 80,
    WorkQueueItemType.DOCUMENT_EXPIRY: 75,
    WorkQueueItemType.MISSING_DOCUMENT: 70,
    WorkQueueItemType.CONDITIONAL_EXPIRY: 60,
    WorkQueueItemType.OVERRIDE_REQUEST: 80,
    WorkQueueItemType.OVERRIDE_FOLLOWUP: 70,
    WorkQueueItemType.STALE_DRAFT: 25,
    WorkQueueItemType.SUPPLIER_REVIEW: 40,
})
DEFAULT_BASE_WEIGHT = 30

OVERDUE_ADDEND = 50
WITHIN_WEEK_ADDEND = 30
WITHIN_TWO_WEEKS_ADDEND = 15
APPROVED_MISSING_DOCUMENT_ADDEND = 20

# Food-contact categories carry the multiplier.
SENSITIVE_CATEGORIES = frozenset({"Ingredients", "Direct Sale"})
SENSITIVE_MULTIPLIER = Decimal("1.2")

HIGH_THRESHOLD = 100
MEDIUM_THRESHOLD = 50


def urgency_addend(days_until_due: int | None) -> int:
    """Time-urgency component of the score."""
    if days_until_due is None:
        return 0
    if days_until_due < 0:
        return OVERDUE_ADDEND
    if days_until_due <= 7:
        return WITHIN_WEEK_ADDEND
    if days_until_due <= 14:
        return WITHIN_TWO_WEEKS_ADDEND
    return 0


def priority_level(score: int) -> WorkQueuePriority:
    if score >= HIGH_THRESHOLD:
        return WorkQueuePriority.HIGH
    if score >= MEDIUM_THRESHOLD:
        return WorkQueuePriority.MEDIUM
    return WorkQueuePriority.LOW


def score_item(
    item_type: WorkQueueItemType | str,
    days_until_due: int | None = None,
    category: str | None = None,
    entity_approval_status: str | None = None,
) -> PriorityScore:
    """Score one work queue item.

    Args:
        item_type: Item type (enum or its string value).  Unknown strings
            use the default base weight.
        days_until_due: Days until the item is due; negative when overdue.
        category: Entity category, for the sensitive-category multiplier.
        entity_approval_status: Approval status of the owning entity; only
            read for missing-document items.

    Returns:
        PriorityScore with the integer score and its level.
    """
    try:
        kind = WorkQueueItemType(item_type)
    except ValueError:
        kind = None

    score = BASE_WEIGHTS.get(kind, DEFAULT_BASE_WEIGHT) if kind else DEFAULT_BASE_WEIGHT
    score += urgency_addend(days_until_due)

    if kind is WorkQueueItemType.MISSING_DOCUMENT and entity_approval_status == "Approved":
        score += APPROVED_MISSING_DOCUMENT_ADDEND

    if category in SENSITIVE_CATEGORIES:
        score = int(
            (Decimal(score) * SENSITIVE_MULTIPLIER).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
        )

    return PriorityScore(score=score, level=priority_level(score))
