"""
Module: qa_kernel.models.material
Responsibility: ORM persistence for materials and the material-owned records
    that QA checks read: supplier links, purchase units, COA limits and
    uploaded compliance documents.

Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - approval_status is constrained to the material lifecycle values.
    - conditional_approval_expires_at is only meaningful while
      approval_status = 'Conditional'; the work queue ignores it otherwise.

Notes:
    These tables belong to the wider manufacturing system.  The compliance
    core only reads them; the columns here are the read contract it needs.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Numeric,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from qa_kernel.db.base import TrackedBase, UUIDString

MATERIAL_STATUSES = (
    "Draft",
    "Pending_QA",
    "Conditional",
    "Approved",
    "Rejected",
    "Archived",
)


class MaterialModel(TrackedBase):
    """A purchasable material (ingredient, packaging, chemical, ...)."""

    __tablename__ = "materials"

    __table_args__ = (
        CheckConstraint(
            "approval_status IN ('Draft', 'Pending_QA', 'Conditional', "
            "'Approved', 'Rejected', 'Archived')",
            name="ck_materials_valid_approval_status",
        ),
        Index("ix_materials_approval_status", "approval_status"),
    )

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    code: Mapped[str | None] = mapped_column(String(50), nullable=True)
    category: Mapped[str | None] = mapped_column(String(100), nullable=True)
    approval_status: Mapped[str] = mapped_column(String(20), nullable=False, default="Draft")
    conditional_approval_expires_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    coa_required: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    gl_account_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    country_of_origin: Mapped[str | None] = mapped_column(String(100), nullable=True)
    fraud_vulnerability_score: Mapped[str | None] = mapped_column(String(50), nullable=True)
    haccp_kill_step_applied: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    haccp_rte_or_kill_step: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    haccp_new_allergen: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    storage_temperature_min: Mapped[Decimal | None] = mapped_column(Numeric(8, 2), nullable=True)
    storage_temperature_max: Mapped[Decimal | None] = mapped_column(Numeric(8, 2), nullable=True)

    supplier_links: Mapped[list["MaterialSupplierModel"]] = relationship(
        "MaterialSupplierModel", back_populates="material",
    )
    purchase_units: Mapped[list["MaterialPurchaseUnitModel"]] = relationship(
        "MaterialPurchaseUnitModel", back_populates="material",
    )
    coa_limits: Mapped[list["MaterialCoaLimitModel"]] = relationship(
        "MaterialCoaLimitModel", back_populates="material",
    )
    documents: Mapped[list["MaterialDocumentModel"]] = relationship(
        "MaterialDocumentModel", back_populates="material",
    )


class MaterialSupplierModel(TrackedBase):
    """Link between a material and one of its suppliers."""

    __tablename__ = "material_suppliers"

    material_id: Mapped[UUID] = mapped_column(
        UUIDString(), ForeignKey("materials.id"), nullable=False,
    )
    supplier_id: Mapped[UUID | None] = mapped_column(
        UUIDString(), ForeignKey("suppliers.id"), nullable=True,
    )
    is_manufacturer: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    cost_per_unit: Mapped[Decimal | None] = mapped_column(Numeric(18, 6), nullable=True)

    material: Mapped[MaterialModel] = relationship(
        "MaterialModel", back_populates="supplier_links",
    )
    supplier: Mapped["SupplierModel"] = relationship("SupplierModel")  # noqa: F821


class MaterialPurchaseUnitModel(TrackedBase):
    """A unit a material can be purchased in (case, pallet, drum, ...)."""

    __tablename__ = "material_purchase_units"

    material_id: Mapped[UUID] = mapped_column(
        UUIDString(), ForeignKey("materials.id"), nullable=False,
    )
    unit_name: Mapped[str] = mapped_column(String(50), nullable=False)
    conversion_factor: Mapped[Decimal | None] = mapped_column(Numeric(18, 6), nullable=True)

    material: Mapped[MaterialModel] = relationship(
        "MaterialModel", back_populates="purchase_units",
    )


class MaterialCoaLimitModel(TrackedBase):
    """A certificate-of-analysis acceptance limit for one parameter."""

    __tablename__ = "material_coa_limits"

    material_id: Mapped[UUID] = mapped_column(
        UUIDString(), ForeignKey("materials.id"), nullable=False,
    )
    parameter_name: Mapped[str] = mapped_column(String(100), nullable=False)
    min_value: Mapped[Decimal | None] = mapped_column(Numeric(18, 6), nullable=True)
    max_value: Mapped[Decimal | None] = mapped_column(Numeric(18, 6), nullable=True)

    material: Mapped[MaterialModel] = relationship(
        "MaterialModel", back_populates="coa_limits",
    )


class MaterialDocumentModel(TrackedBase):
    """An uploaded compliance document attached to a material."""

    __tablename__ = "material_documents"

    __table_args__ = (
        Index("ix_material_documents_expiry", "is_archived", "expiry_date"),
    )

    material_id: Mapped[UUID] = mapped_column(
        UUIDString(), ForeignKey("materials.id"), nullable=False,
    )
    document_name: Mapped[str] = mapped_column(String(200), nullable=False)
    document_type: Mapped[str | None] = mapped_column(String(100), nullable=True)
    requirement_id: Mapped[UUID | None] = mapped_column(
        UUIDString(), ForeignKey("document_requirements.id"), nullable=True,
    )
    expiry_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    is_archived: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    material: Mapped[MaterialModel] = relationship(
        "MaterialModel", back_populates="documents",
    )
