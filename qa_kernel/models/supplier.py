"""
Module: qa_kernel.models.supplier
Responsibility: ORM persistence for suppliers and their uploaded compliance
    documents.  Read by the context assembler (supplier approval status) and
    by the work queue (scheduled reviews, document expiry, missing documents).

Architecture position: Kernel > Models.  May import from db/base.py only.
"""

from __future__ import annotations

from datetime import date
from uuid import UUID

from sqlalchemy import Boolean, Date, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from qa_kernel.db.base import TrackedBase, UUIDString

SUPPLIER_STATUSES = (
    "Draft",
    "Pending_QA",
    "Conditional",
    "Approved",
    "Probation",
    "Rejected",
    "Archived",
)


class SupplierModel(TrackedBase):
    """A supplier or manufacturer."""

    __tablename__ = "suppliers"

    __table_args__ = (
        Index("ix_suppliers_next_review_date", "next_review_date"),
    )

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    code: Mapped[str | None] = mapped_column(String(50), nullable=True)
    approval_status: Mapped[str] = mapped_column(String(20), nullable=False, default="Draft")
    next_review_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    documents: Mapped[list["SupplierDocumentModel"]] = relationship(
        "SupplierDocumentModel", back_populates="supplier",
    )


class SupplierDocumentModel(TrackedBase):
    """An uploaded compliance document attached to a supplier."""

    __tablename__ = "supplier_documents"

    __table_args__ = (
        Index("ix_supplier_documents_expiry", "is_archived", "expiry_date"),
    )

    supplier_id: Mapped[UUID] = mapped_column(
        UUIDString(), ForeignKey("suppliers.id"), nullable=False,
    )
    document_name: Mapped[str] = mapped_column(String(200), nullable=False)
    document_type: Mapped[str | None] = mapped_column(String(100), nullable=True)
    requirement_id: Mapped[UUID | None] = mapped_column(
        UUIDString(), ForeignKey("document_requirements.id"), nullable=True,
    )
    expiry_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    is_archived: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    supplier: Mapped[SupplierModel] = relationship(
        "SupplierModel", back_populates="documents",
    )
