"""
Module: qa_kernel.selectors.context_selector
Responsibility: The Entity Check Context Assembler.  Gathers every fact the
    material checks read (material row, supplier links with supplier status,
    uploaded documents, active document requirements, COA limits, purchase
    units) into one immutable ``EntityCheckContext``.

Architecture position: Kernel > Selectors.  Read-only.

Failure modes:
    - EntityNotFoundError if the material id does not exist.  Missing related
      records are not errors: they produce empty tuples / None fields.
"""

from datetime import date
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from qa_kernel.domain.context import (
    CoaLimit,
    DocumentRef,
    DocumentRequirement,
    EntityCheckContext,
    MaterialRecord,
    PurchaseUnit,
    SupplierLink,
    SupplierRef,
)
from qa_kernel.exceptions import EntityNotFoundError
from qa_kernel.models.document import DocumentRequirementModel
from qa_kernel.models.material import MaterialModel, MaterialSupplierModel
from qa_kernel.selectors.base import BaseSelector


class MaterialContextSelector(BaseSelector):
    """Builds check contexts for materials."""

    def get_context(
        self,
        material_id: UUID | str,
        as_of_date: date,
        warning_days: int = 30,
    ) -> EntityCheckContext:
        """Assemble the check context for one material.

        Args:
            material_id: Material primary key.
            as_of_date: "Today" for date-relative checks.
            warning_days: Resolved document expiry warning threshold.

        Raises:
            EntityNotFoundError: if no such material exists.
        """
        try:
            key = material_id if isinstance(material_id, UUID) else UUID(str(material_id))
        except ValueError:
            raise EntityNotFoundError("material", str(material_id)) from None
        material = self.session.execute(
            select(MaterialModel)
            .where(MaterialModel.id == key)
            .options(
                selectinload(MaterialModel.supplier_links).selectinload(
                    MaterialSupplierModel.supplier,
                ),
                selectinload(MaterialModel.documents),
                selectinload(MaterialModel.coa_limits),
                selectinload(MaterialModel.purchase_units),
            )
        ).scalar_one_or_none()
        if material is None:
            raise EntityNotFoundError("material", str(material_id))

        return EntityCheckContext(
            material=_material_record(material),
            as_of_date=as_of_date,
            suppliers=tuple(_supplier_link(link) for link in material.supplier_links),
            documents=tuple(
                DocumentRef(
                    document_id=str(doc.id),
                    document_name=doc.document_name,
                    document_type=doc.document_type,
                    requirement_id=str(doc.requirement_id) if doc.requirement_id else None,
                    expiry_date=doc.expiry_date,
                    is_archived=doc.is_archived,
                )
                for doc in material.documents
            ),
            document_requirements=self.list_requirements("material"),
            coa_limits=tuple(
                CoaLimit(
                    parameter_name=limit.parameter_name,
                    min_value=limit.min_value,
                    max_value=limit.max_value,
                )
                for limit in material.coa_limits
            ),
            purchase_units=tuple(
                PurchaseUnit(unit_name=unit.unit_name, conversion_factor=unit.conversion_factor)
                for unit in material.purchase_units
            ),
            warning_days=warning_days,
        )

    def list_requirements(self, entity_type: str) -> tuple[DocumentRequirement, ...]:
        """Active document requirements for an entity kind."""
        rows = self.session.execute(
            select(DocumentRequirementModel)
            .where(
                DocumentRequirementModel.entity_type == entity_type,
                DocumentRequirementModel.is_active == True,  # noqa: E712
            )
            .order_by(DocumentRequirementModel.document_name)
        ).scalars().all()
        return tuple(row.to_dto() for row in rows)


def _material_record(material: MaterialModel) -> MaterialRecord:
    return MaterialRecord(
        material_id=str(material.id),
        name=material.name,
        code=material.code,
        category=material.category,
        approval_status=material.approval_status,
        coa_required=material.coa_required,
        gl_account_id=material.gl_account_id,
        country_of_origin=material.country_of_origin,
        fraud_vulnerability_score=material.fraud_vulnerability_score,
        haccp_kill_step_applied=material.haccp_kill_step_applied,
        haccp_rte_or_kill_step=material.haccp_rte_or_kill_step,
        haccp_new_allergen=material.haccp_new_allergen,
        storage_temperature_min=material.storage_temperature_min,
        storage_temperature_max=material.storage_temperature_max,
    )


def _supplier_link(link: MaterialSupplierModel) -> SupplierLink:
    supplier = link.supplier
    return SupplierLink(
        supplier=(
            SupplierRef(
                supplier_id=str(supplier.id),
                name=supplier.name,
                approval_status=supplier.approval_status,
            )
            if supplier is not None
            else None
        ),
        is_manufacturer=link.is_manufacturer,
        cost_per_unit=link.cost_per_unit,
    )
