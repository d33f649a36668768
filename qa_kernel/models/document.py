"""
Module: qa_kernel.models.document
Responsibility: ORM persistence for document requirements -- the documents
    the compliance programme expects each material category or supplier to
    hold.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import JSON, Boolean, CheckConstraint, String
from sqlalchemy.orm import Mapped, mapped_column

from qa_kernel.db.base import TrackedBase

if TYPE_CHECKING:
    from qa_kernel.domain.context import DocumentRequirement


class DocumentRequirementModel(TrackedBase):
    """A required document for an entity kind, optionally per category."""

    __tablename__ = "document_requirements"

    __table_args__ = (
        CheckConstraint(
            "entity_type IN ('material', 'supplier')",
            name="ck_document_requirements_entity_type",
        ),
    )

    document_name: Mapped[str] = mapped_column(String(200), nullable=False)
    entity_type: Mapped[str] = mapped_column(String(20), nullable=False, default="material")
    areas: Mapped[list | None] = mapped_column(JSON, nullable=True)
    is_required: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    def to_dto(self) -> DocumentRequirement:
        from qa_kernel.domain.context import DocumentRequirement

        return DocumentRequirement(
            requirement_id=str(self.id),
            document_name=self.document_name,
            entity_type=self.entity_type,
            areas=frozenset(self.areas or ()),
            is_required=self.is_required,
            is_active=self.is_active,
        )
