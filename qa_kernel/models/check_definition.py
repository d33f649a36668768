"""
Module: qa_kernel.models.check_definition
Responsibility: ORM persistence for declarative QA check definitions.

Architecture position: Kernel > Models.  May import from db/base.py and
    domain/checks.py only.

Invariants enforced:
    - check_key is UNIQUE; it is the dispatch key into the rule registry.
    - tier is constrained to critical / important / recommended.
    - Definitions are never deleted.  ``is_active`` is the only way to
      retire one (see QAAdminService.deactivate_definition).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import JSON, Boolean, CheckConstraint, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from qa_kernel.db.base import TrackedBase

if TYPE_CHECKING:
    from qa_kernel.domain.checks import CheckDefinition


class QACheckDefinitionModel(TrackedBase):
    """Persistent check definition."""

    __tablename__ = "qa_check_definitions"

    __table_args__ = (
        CheckConstraint(
            "tier IN ('critical', 'important', 'recommended')",
            name="ck_qa_check_definitions_valid_tier",
        ),
        Index("ix_qa_check_definitions_entity_active", "entity_type", "is_active"),
    )

    check_key: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    check_name: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    tier: Mapped[str] = mapped_column(String(20), nullable=False)
    entity_type: Mapped[str] = mapped_column(String(50), nullable=False, default="material")
    applicable_categories: Mapped[list | None] = mapped_column(JSON, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    def to_dto(self) -> CheckDefinition:
        from qa_kernel.domain.checks import CheckDefinition, CheckTier

        return CheckDefinition(
            check_key=self.check_key,
            tier=CheckTier(self.tier),
            entity_type=self.entity_type,
            check_name=self.check_name,
            description=self.description,
            applicable_categories=frozenset(self.applicable_categories or ()),
            is_active=self.is_active,
            sort_order=self.sort_order,
        )

    def apply_dto(self, definition: CheckDefinition) -> None:
        """Copy editable fields from a domain definition."""
        self.check_name = definition.check_name
        self.description = definition.description
        self.tier = definition.tier.value
        self.entity_type = definition.entity_type
        self.applicable_categories = sorted(definition.applicable_categories)
        self.is_active = definition.is_active
        self.sort_order = definition.sort_order
