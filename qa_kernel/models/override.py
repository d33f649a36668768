"""
Module: qa_kernel.models.override
Responsibility: ORM persistence for QA override requests -- a request to
    approve an entity despite failing checks, with a follow-up date by which
    the underlying issue must be resolved.

Lifecycle:
    pending -> approved | denied.  An approved override stays open until
    ``resolved_at`` is set; once ``follow_up_date`` has passed it surfaces
    in the work queue as an overdue follow-up.
"""

from __future__ import annotations

from datetime import date, datetime
from uuid import UUID

from sqlalchemy import JSON, CheckConstraint, Date, DateTime, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from qa_kernel.db.base import TrackedBase, UUIDString


class QAOverrideRequestModel(TrackedBase):
    """Persistent override request."""

    __tablename__ = "qa_override_requests"

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'approved', 'denied')",
            name="ck_qa_override_requests_valid_status",
        ),
        Index("ix_qa_override_requests_status", "status", "follow_up_date"),
    )

    related_record_id: Mapped[UUID] = mapped_column(UUIDString(), nullable=False)
    related_table_name: Mapped[str] = mapped_column(String(50), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")
    requested_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    follow_up_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    resolved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    override_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    blocked_checks: Mapped[list | None] = mapped_column(JSON, nullable=True)
