"""
Work queue signal DTOs (``qa_kernel.domain.signals``).

Raw, source-native rows returned by ``WorkQueueSelector``.  Each signal
source has its own shape; the work queue engine normalizes them into
``WorkQueueItem``.  Frozen, no behaviour beyond trivial accessors.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime


@dataclass(frozen=True)
class OverrideSignal:
    """A QA override request (pending, or approved awaiting follow-up)."""

    request_id: str
    related_record_id: str
    related_table_name: str
    status: str
    requested_at: datetime
    follow_up_date: date | None = None


@dataclass(frozen=True)
class DocumentExpirySignal:
    """A non-archived document whose expiry falls inside the lookahead."""

    document_id: str
    entity_kind: str
    entity_id: str
    entity_name: str
    document_name: str
    expiry_date: date
    entity_code: str | None = None
    category: str | None = None


@dataclass(frozen=True)
class ComplianceSubject:
    """An entity that must hold its required documents.

    ``linked_requirement_ids`` are the requirement ids referenced by the
    entity's non-archived uploaded documents.
    """

    entity_kind: str
    entity_id: str
    entity_name: str
    approval_status: str
    linked_requirement_ids: frozenset[str] = frozenset()
    entity_code: str | None = None
    category: str | None = None


@dataclass(frozen=True)
class ConditionalApprovalSignal:
    """A material on conditional approval with a known expiry."""

    material_id: str
    name: str
    expires_at: datetime
    code: str | None = None
    category: str | None = None


@dataclass(frozen=True)
class StaleDraftSignal:
    """A draft material not touched since before the stale threshold."""

    material_id: str
    name: str
    updated_at: datetime
    code: str | None = None
    category: str | None = None


@dataclass(frozen=True)
class SupplierReviewSignal:
    """A supplier whose scheduled review falls inside the lookahead."""

    supplier_id: str
    name: str
    next_review_date: date
    code: str | None = None
