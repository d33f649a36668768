"""
QA Work Queue Engine (``qa_engines.work_queue``).

Responsibility
--------------
Normalize raw signals from each work queue source into ``WorkQueueItem``,
then de-duplicate, rank, filter and summarize the combined list.

Architecture position
---------------------
**Engines layer** -- pure functional core.  ZERO I/O, ZERO clock reads.
"Today" is always passed in by the caller.

Invariants enforced
-------------------
* Item ids are ``<prefix>-<source record id>`` and therefore deterministic.
  De-duplication keeps the first occurrence of an id.
* Ranking is a stable sort by ``priority_score`` descending: equal scores
  keep their source-enumeration order.
* Filters are conjunctive.  An empty filter set keeps every item.
* Missing documents yield one item per (entity, requirement) pair.
* Day counts compare calendar dates, never times of day.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date

from qa_kernel.domain.context import DocumentRequirement
from qa_kernel.domain.signals import (
    ComplianceSubject,
    ConditionalApprovalSignal,
    DocumentExpirySignal,
    OverrideSignal,
    StaleDraftSignal,
    SupplierReviewSignal,
)
from qa_kernel.domain.work_queue import (
    WorkQueueFilters,
    WorkQueueItem,
    WorkQueueItemType,
    WorkQueueSummary,
)
from qa_kernel.utils.dates import days_between, parse_date_value
from qa_engines.priority import score_item
from qa_engines.tracer import traced_engine

CRITICAL_WINDOW_DAYS = 7

MATERIAL_KIND = "materials"

_KIND_PREFIX = {MATERIAL_KIND: "mat", "suppliers": "sup"}


def _prefix(entity_kind: str) -> str:
    return _KIND_PREFIX.get(entity_kind, entity_kind)


def _make_item(
    item_id: str,
    item_type: WorkQueueItemType,
    *,
    entity_type: str,
    entity_id: str,
    entity_name: str,
    issue_description: str,
    days_until_due: int | None = None,
    score_days: int | None = None,
    due_date: date | None = None,
    is_overdue: bool = False,
    entity_code: str | None = None,
    category: str | None = None,
    entity_approval_status: str | None = None,
) -> WorkQueueItem:
    """Score and build one item.  ``score_days`` overrides the days used for scoring."""
    priority = score_item(
        item_type,
        days_until_due if score_days is None else score_days,
        category,
        entity_approval_status,
    )
    return WorkQueueItem(
        item_id=item_id,
        item_type=item_type,
        priority=priority.level,
        priority_score=priority.score,
        entity_type=entity_type,
        entity_id=entity_id,
        entity_name=entity_name,
        issue_description=issue_description,
        is_overdue=is_overdue,
        entity_code=entity_code,
        due_date=due_date,
        days_until_due=days_until_due,
        category=category,
    )


# ---------------------------------------------------------------------------
# Source normalizers
# ---------------------------------------------------------------------------


def pending_override_items(
    signals: Iterable[OverrideSignal],
    today: date,
) -> list[WorkQueueItem]:
    """Pending override requests.  Older requests score as more overdue."""
    items = []
    for signal in signals:
        elapsed = days_between(signal.requested_at.date(), today)
        items.append(_make_item(
            f"override-{signal.request_id}",
            WorkQueueItemType.OVERRIDE_REQUEST,
            entity_type=signal.related_table_name,
            entity_id=signal.related_record_id,
            entity_name="Override Request",
            issue_description="Pending approval",
            days_until_due=0,
            score_days=-elapsed,
        ))
    return items


def override_followup_items(
    signals: Iterable[OverrideSignal],
    today: date,
) -> list[WorkQueueItem]:
    """Approved overrides whose follow-up date has been reached."""
    items = []
    for signal in signals:
        if signal.follow_up_date is None or signal.follow_up_date > today:
            continue
        days_overdue = days_between(signal.follow_up_date, today)
        items.append(_make_item(
            f"followup-{signal.request_id}",
            WorkQueueItemType.OVERRIDE_FOLLOWUP,
            entity_type=signal.related_table_name,
            entity_id=signal.related_record_id,
            entity_name="Override Follow-up",
            issue_description="Follow-up date passed",
            days_until_due=-days_overdue,
            due_date=signal.follow_up_date,
            is_overdue=True,
        ))
    return items


def document_expiry_items(
    signals: Iterable[DocumentExpirySignal],
    today: date,
) -> list[WorkQueueItem]:
    items = []
    for signal in signals:
        days = days_between(today, signal.expiry_date)
        overdue = days < 0
        label = "EXPIRED" if overdue else "Expiring"
        items.append(_make_item(
            f"doc-{_prefix(signal.entity_kind)}-{signal.document_id}",
            WorkQueueItemType.DOCUMENT_EXPIRY,
            entity_type=signal.entity_kind,
            entity_id=signal.entity_id,
            entity_name=signal.entity_name,
            entity_code=signal.entity_code,
            issue_description=f"{label}: {signal.document_name}",
            days_until_due=days,
            due_date=signal.expiry_date,
            is_overdue=overdue,
            category=signal.category,
        ))
    return items


def missing_document_items(
    subjects: Iterable[ComplianceSubject],
    requirements: Sequence[DocumentRequirement],
) -> list[WorkQueueItem]:
    """One item per (subject, requirement) pair with no linked upload.

    Only an upload that references the requirement id satisfies it here.
    Material requirements must also cover the material category; supplier
    requirements are scoped by entity kind alone.
    """
    items = []
    for subject in subjects:
        for requirement in requirements:
            if subject.entity_kind == MATERIAL_KIND and not requirement.covers(subject.category):
                continue
            if requirement.requirement_id in subject.linked_requirement_ids:
                continue
            items.append(_make_item(
                f"missing-{_prefix(subject.entity_kind)}-"
                f"{subject.entity_id}-{requirement.requirement_id}",
                WorkQueueItemType.MISSING_DOCUMENT,
                entity_type=subject.entity_kind,
                entity_id=subject.entity_id,
                entity_name=subject.entity_name,
                entity_code=subject.entity_code,
                issue_description=f"Missing required document: {requirement.document_name}",
                category=subject.category,
                entity_approval_status=subject.approval_status,
            ))
    return items


def conditional_expiry_items(
    signals: Iterable[ConditionalApprovalSignal],
    today: date,
) -> list[WorkQueueItem]:
    items = []
    for signal in signals:
        expiry = parse_date_value(signal.expires_at)
        if expiry is None:
            continue
        days = days_between(today, expiry)
        overdue = days < 0
        items.append(_make_item(
            f"cond-mat-{signal.material_id}",
            WorkQueueItemType.CONDITIONAL_EXPIRY,
            entity_type="materials",
            entity_id=signal.material_id,
            entity_name=signal.name,
            entity_code=signal.code,
            issue_description="Conditional approval expired" if overdue else "Expires soon",
            days_until_due=days,
            due_date=expiry,
            is_overdue=overdue,
            category=signal.category,
        ))
    return items


def stale_draft_items(
    signals: Iterable[StaleDraftSignal],
    today: date,
) -> list[WorkQueueItem]:
    items = []
    for signal in signals:
        inactive = days_between(signal.updated_at.date(), today)
        items.append(_make_item(
            f"stale-{signal.material_id}",
            WorkQueueItemType.STALE_DRAFT,
            entity_type="materials",
            entity_id=signal.material_id,
            entity_name=signal.name,
            entity_code=signal.code,
            issue_description=f"{inactive} days inactive",
            category=signal.category,
        ))
    return items


def supplier_review_items(
    signals: Iterable[SupplierReviewSignal],
    today: date,
) -> list[WorkQueueItem]:
    items = []
    for signal in signals:
        days = days_between(today, signal.next_review_date)
        overdue = days < 0
        items.append(_make_item(
            f"supreview-{signal.supplier_id}",
            WorkQueueItemType.SUPPLIER_REVIEW,
            entity_type="suppliers",
            entity_id=signal.supplier_id,
            entity_name=signal.name,
            entity_code=signal.code,
            issue_description="Review overdue" if overdue else "Review due soon",
            days_until_due=days,
            due_date=signal.next_review_date,
            is_overdue=overdue,
        ))
    return items


# ---------------------------------------------------------------------------
# Post-processing
# ---------------------------------------------------------------------------


def dedupe_items(items: Iterable[WorkQueueItem]) -> list[WorkQueueItem]:
    """Drop repeated ids, keeping the first occurrence."""
    seen: set[str] = set()
    unique = []
    for item in items:
        if item.item_id in seen:
            continue
        seen.add(item.item_id)
        unique.append(item)
    return unique


def rank_items(items: Iterable[WorkQueueItem]) -> list[WorkQueueItem]:
    """Stable sort by priority score, highest first."""
    return sorted(items, key=lambda item: -item.priority_score)


def apply_filters(
    items: Iterable[WorkQueueItem],
    filters: WorkQueueFilters | None,
) -> list[WorkQueueItem]:
    items = list(items)
    if filters is None or filters.is_empty:
        return items
    if filters.types:
        items = [i for i in items if i.item_type in filters.types]
    if filters.priorities:
        items = [i for i in items if i.priority in filters.priorities]
    if filters.categories:
        items = [i for i in items if i.category and i.category in filters.categories]
    if filters.search:
        items = [i for i in items if i.matches_search(filters.search)]
    return items


@traced_engine("qa_work_queue", "1.0", fingerprint_fields=("filters",))
def assemble_queue(
    items: Iterable[WorkQueueItem],
    filters: WorkQueueFilters | None = None,
) -> list[WorkQueueItem]:
    """De-duplicate, rank, then filter the concatenated source items."""
    return apply_filters(rank_items(dedupe_items(items)), filters)


def summarize_queue(
    items: Iterable[WorkQueueItem],
    lookahead_days: int = 45,
) -> WorkQueueSummary:
    """Recompute counts from a materialized item list.

    ``critical`` counts items due in 0..7 days; ``soon`` counts items due
    after that and within the lookahead window.
    """
    items = list(items)
    by_type: dict[WorkQueueItemType, int] = {}
    overdue = critical = soon = docs_expiring = reviews_due = 0

    for item in items:
        by_type[item.item_type] = by_type.get(item.item_type, 0) + 1
        if item.is_overdue:
            overdue += 1
        days = item.days_until_due
        if days is not None and 0 <= days <= CRITICAL_WINDOW_DAYS:
            critical += 1
        elif days is not None and CRITICAL_WINDOW_DAYS < days <= lookahead_days:
            soon += 1
        if item.item_type == WorkQueueItemType.DOCUMENT_EXPIRY:
            docs_expiring += 1
        elif item.item_type == WorkQueueItemType.SUPPLIER_REVIEW:
            reviews_due += 1

    return WorkQueueSummary(
        total=len(items),
        overdue=overdue,
        critical=critical,
        soon=soon,
        docs_expiring=docs_expiring,
        reviews_due=reviews_due,
        by_type=by_type,
    )
