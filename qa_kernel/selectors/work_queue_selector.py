"""
Module: qa_kernel.selectors.work_queue_selector
Responsibility: One read method per work queue signal source.  Each method
    applies the source's status/date predicates in SQL and returns frozen
    signal DTOs; normalization into WorkQueueItem happens in the engine.

Architecture position: Kernel > Selectors.  Read-only.

Failure modes:
    - Database errors propagate.  The work queue service isolates each
      source call, so one failing query only empties that source.
"""

from datetime import date, datetime
from typing import Iterable

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from qa_kernel.domain.context import DocumentRequirement
from qa_kernel.domain.signals import (
    ComplianceSubject,
    ConditionalApprovalSignal,
    DocumentExpirySignal,
    OverrideSignal,
    StaleDraftSignal,
    SupplierReviewSignal,
)
from qa_kernel.models.document import DocumentRequirementModel
from qa_kernel.models.material import MaterialDocumentModel, MaterialModel
from qa_kernel.models.override import QAOverrideRequestModel
from qa_kernel.models.supplier import SupplierDocumentModel, SupplierModel
from qa_kernel.selectors.base import BaseSelector

COMPLIANCE_STATUSES = ("Approved", "Draft", "Conditional")


class WorkQueueSelector(BaseSelector):
    """Signal source queries for the QA work queue."""

    # -- Overrides ---------------------------------------------------------

    def pending_overrides(self) -> tuple[OverrideSignal, ...]:
        rows = self.session.execute(
            select(QAOverrideRequestModel)
            .where(QAOverrideRequestModel.status == "pending")
            .order_by(QAOverrideRequestModel.requested_at)
        ).scalars().all()
        return tuple(_override_signal(row) for row in rows)

    def due_override_followups(self, today: date) -> tuple[OverrideSignal, ...]:
        """Approved, unresolved overrides whose follow-up date is today or earlier."""
        rows = self.session.execute(
            select(QAOverrideRequestModel)
            .where(
                QAOverrideRequestModel.status == "approved",
                QAOverrideRequestModel.resolved_at.is_(None),
                QAOverrideRequestModel.follow_up_date.is_not(None),
                QAOverrideRequestModel.follow_up_date <= today,
            )
            .order_by(QAOverrideRequestModel.follow_up_date)
        ).scalars().all()
        return tuple(_override_signal(row) for row in rows)

    # -- Document expiry ---------------------------------------------------

    def material_document_expiries(self, horizon: date) -> tuple[DocumentExpirySignal, ...]:
        rows = self.session.execute(
            select(MaterialDocumentModel, MaterialModel)
            .join(MaterialModel, MaterialDocumentModel.material_id == MaterialModel.id)
            .where(
                MaterialDocumentModel.is_archived == False,  # noqa: E712
                MaterialDocumentModel.expiry_date.is_not(None),
                MaterialDocumentModel.expiry_date <= horizon,
            )
            .order_by(MaterialDocumentModel.expiry_date)
        ).all()
        return tuple(
            DocumentExpirySignal(
                document_id=str(doc.id),
                entity_kind="materials",
                entity_id=str(material.id),
                entity_name=material.name,
                document_name=doc.document_name,
                expiry_date=doc.expiry_date,
                entity_code=material.code,
                category=material.category,
            )
            for doc, material in rows
        )

    def supplier_document_expiries(self, horizon: date) -> tuple[DocumentExpirySignal, ...]:
        rows = self.session.execute(
            select(SupplierDocumentModel, SupplierModel)
            .join(SupplierModel, SupplierDocumentModel.supplier_id == SupplierModel.id)
            .where(
                SupplierDocumentModel.is_archived == False,  # noqa: E712
                SupplierDocumentModel.expiry_date.is_not(None),
                SupplierDocumentModel.expiry_date <= horizon,
            )
            .order_by(SupplierDocumentModel.expiry_date)
        ).all()
        return tuple(
            DocumentExpirySignal(
                document_id=str(doc.id),
                entity_kind="suppliers",
                entity_id=str(supplier.id),
                entity_name=supplier.name,
                document_name=doc.document_name,
                expiry_date=doc.expiry_date,
                entity_code=supplier.code,
            )
            for doc, supplier in rows
        )

    # -- Missing documents -------------------------------------------------

    def required_documents(self, entity_type: str) -> tuple[DocumentRequirement, ...]:
        """Active, required document requirements for an entity kind."""
        rows = self.session.execute(
            select(DocumentRequirementModel)
            .where(
                DocumentRequirementModel.entity_type == entity_type,
                DocumentRequirementModel.is_active == True,  # noqa: E712
                DocumentRequirementModel.is_required == True,  # noqa: E712
            )
            .order_by(DocumentRequirementModel.document_name, DocumentRequirementModel.id)
        ).scalars().all()
        return tuple(row.to_dto() for row in rows)

    def material_compliance_subjects(
        self,
        statuses: Iterable[str] = COMPLIANCE_STATUSES,
    ) -> tuple[ComplianceSubject, ...]:
        rows = self.session.execute(
            select(MaterialModel)
            .where(MaterialModel.approval_status.in_(tuple(statuses)))
            .options(selectinload(MaterialModel.documents))
            .order_by(MaterialModel.name, MaterialModel.id)
        ).scalars().all()
        return tuple(
            ComplianceSubject(
                entity_kind="materials",
                entity_id=str(material.id),
                entity_name=material.name,
                approval_status=material.approval_status,
                linked_requirement_ids=_linked_requirements(material.documents),
                entity_code=material.code,
                category=material.category,
            )
            for material in rows
        )

    def supplier_compliance_subjects(
        self,
        statuses: Iterable[str] = COMPLIANCE_STATUSES,
    ) -> tuple[ComplianceSubject, ...]:
        rows = self.session.execute(
            select(SupplierModel)
            .where(SupplierModel.approval_status.in_(tuple(statuses)))
            .options(selectinload(SupplierModel.documents))
            .order_by(SupplierModel.name, SupplierModel.id)
        ).scalars().all()
        return tuple(
            ComplianceSubject(
                entity_kind="suppliers",
                entity_id=str(supplier.id),
                entity_name=supplier.name,
                approval_status=supplier.approval_status,
                linked_requirement_ids=_linked_requirements(supplier.documents),
                entity_code=supplier.code,
            )
            for supplier in rows
        )

    # -- Materials ---------------------------------------------------------

    def conditional_approvals(self, horizon: datetime) -> tuple[ConditionalApprovalSignal, ...]:
        """Conditional materials whose approval expires at or before ``horizon``."""
        rows = self.session.execute(
            select(MaterialModel)
            .where(
                MaterialModel.approval_status == "Conditional",
                MaterialModel.conditional_approval_expires_at.is_not(None),
                MaterialModel.conditional_approval_expires_at <= horizon,
            )
            .order_by(MaterialModel.conditional_approval_expires_at)
        ).scalars().all()
        return tuple(
            ConditionalApprovalSignal(
                material_id=str(row.id),
                name=row.name,
                expires_at=row.conditional_approval_expires_at,
                code=row.code,
                category=row.category,
            )
            for row in rows
        )

    def stale_drafts(self, cutoff: datetime) -> tuple[StaleDraftSignal, ...]:
        """Draft materials last updated at or before ``cutoff``."""
        rows = self.session.execute(
            select(MaterialModel)
            .where(
                MaterialModel.approval_status == "Draft",
                MaterialModel.updated_at <= cutoff,
            )
            .order_by(MaterialModel.updated_at)
        ).scalars().all()
        return tuple(
            StaleDraftSignal(
                material_id=str(row.id),
                name=row.name,
                updated_at=row.updated_at,
                code=row.code,
                category=row.category,
            )
            for row in rows
        )

    # -- Suppliers ---------------------------------------------------------

    def supplier_reviews(self, horizon: date) -> tuple[SupplierReviewSignal, ...]:
        rows = self.session.execute(
            select(SupplierModel)
            .where(
                SupplierModel.next_review_date.is_not(None),
                SupplierModel.next_review_date <= horizon,
            )
            .order_by(SupplierModel.next_review_date)
        ).scalars().all()
        return tuple(
            SupplierReviewSignal(
                supplier_id=str(row.id),
                name=row.name,
                next_review_date=row.next_review_date,
                code=row.code,
            )
            for row in rows
        )


def _override_signal(row: QAOverrideRequestModel) -> OverrideSignal:
    return OverrideSignal(
        request_id=str(row.id),
        related_record_id=str(row.related_record_id),
        related_table_name=row.related_table_name,
        status=row.status,
        requested_at=row.requested_at,
        follow_up_date=row.follow_up_date,
    )


def _linked_requirements(documents) -> frozenset[str]:
    return frozenset(
        str(doc.requirement_id)
        for doc in documents
        if not doc.is_archived and doc.requirement_id is not None
    )
