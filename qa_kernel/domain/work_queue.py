"""
Work queue domain types (``qa_kernel.domain.work_queue``).

Responsibility
--------------
Normalized shape for outstanding compliance work drawn from independent
signal sources, plus the filter, summary and per-source outcome types used
by the aggregator.

Architecture position
---------------------
**Kernel domain layer** -- pure value objects.  ZERO I/O.

Invariants enforced
-------------------
* ``WorkQueueItem.item_id`` is ``<source prefix>-<source record id>`` so the
  same record always yields the same id and duplicates can be dropped.
* ``priority`` is always the level derived from ``priority_score``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum


class WorkQueueItemType(str, Enum):
    """Kinds of outstanding compliance work."""

    MATERIAL_ISSUE_CRITICAL = "material_issue_critical"
    MATERIAL_ISSUE_IMPORTANT = "material_issue_important"
    SUPPLIER_ISSUE = "supplier_issue"
    DOCUMENT_EXPIRY = "document_expiry"
    MISSING_DOCUMENT = "missing_document"
    CONDITIONAL_EXPIRY = "conditional_expiry"
    OVERRIDE_REQUEST = "override_request"
    OVERRIDE_FOLLOWUP = "override_followup"
    STALE_DRAFT = "stale_draft"
    SUPPLIER_REVIEW = "supplier_review"


class WorkQueuePriority(str, Enum):
    """Priority level derived from the numeric score."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class PriorityScore:
    """Result of the priority scoring function."""

    score: int
    level: WorkQueuePriority


@dataclass(frozen=True)
class WorkQueueItem:
    """One normalized unit of outstanding compliance work."""

    item_id: str
    item_type: WorkQueueItemType
    priority: WorkQueuePriority
    priority_score: int
    entity_type: str
    entity_id: str
    entity_name: str
    issue_description: str
    is_overdue: bool = False
    entity_code: str | None = None
    due_date: date | None = None
    days_until_due: int | None = None
    category: str | None = None

    def matches_search(self, needle: str) -> bool:
        """Case-insensitive substring match over name, code and description."""
        needle = needle.lower()
        if needle in self.entity_name.lower():
            return True
        if self.entity_code and needle in self.entity_code.lower():
            return True
        return needle in self.issue_description.lower()


@dataclass(frozen=True)
class WorkQueueFilters:
    """Conjunctive filters over a ranked queue.  Empty means "no filter"."""

    types: frozenset[WorkQueueItemType] = frozenset()
    priorities: frozenset[WorkQueuePriority] = frozenset()
    categories: frozenset[str] = frozenset()
    search: str | None = None

    @property
    def is_empty(self) -> bool:
        return not (self.types or self.priorities or self.categories or self.search)


@dataclass(frozen=True)
class WorkQueueSummary:
    """Counts recomputed from a materialized item list."""

    total: int = 0
    overdue: int = 0
    critical: int = 0
    soon: int = 0
    docs_expiring: int = 0
    reviews_due: int = 0
    by_type: dict[WorkQueueItemType, int] = field(default_factory=dict)


@dataclass(frozen=True)
class SourceOutcome:
    """What one signal source contributed to a queue build.

    ``error`` is set when the source failed; ``items`` is then empty.
    """

    source: str
    items: tuple[WorkQueueItem, ...] = ()
    error: str | None = None

    @property
    def failed(self) -> bool:
        return self.error is not None
