"""
Entity check context types (``qa_kernel.domain.context``).

Responsibility
--------------
Immutable evaluation input for one entity: the entity record, its supplier
links, its documents, the document requirements for its kind, COA limits,
purchase units, the resolved warning-day threshold and the evaluation date.

Architecture position
---------------------
**Kernel domain layer** -- pure value objects.  Populated by
``MaterialContextSelector`` (or by any caller with its own store) and
consumed by the pure rule engine.

Notes
-----
``DocumentRef.expiry_date`` accepts a ``date``, an ISO string or ``None``.
Contexts may be built from stores that keep free-text dates, so the engine
parses on read and treats an unparseable value as absent.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal


@dataclass(frozen=True)
class MaterialRecord:
    """The fields of a material that checks read."""

    material_id: str
    name: str
    code: str | None = None
    category: str | None = None
    approval_status: str = "Draft"
    coa_required: bool = False
    gl_account_id: str | None = None
    country_of_origin: str | None = None
    fraud_vulnerability_score: str | None = None
    haccp_kill_step_applied: bool | None = None
    haccp_rte_or_kill_step: bool | None = None
    haccp_new_allergen: bool | None = None
    storage_temperature_min: Decimal | None = None
    storage_temperature_max: Decimal | None = None


@dataclass(frozen=True)
class SupplierRef:
    """A supplier as seen from a material link."""

    supplier_id: str
    name: str
    approval_status: str | None = None


@dataclass(frozen=True)
class SupplierLink:
    """Material-to-supplier link; ``supplier`` may be missing."""

    supplier: SupplierRef | None
    is_manufacturer: bool = False
    cost_per_unit: Decimal | None = None

    @property
    def approval_status(self) -> str | None:
        return self.supplier.approval_status if self.supplier else None

    @property
    def supplier_name(self) -> str | None:
        return self.supplier.name if self.supplier else None


@dataclass(frozen=True)
class DocumentRef:
    """An uploaded compliance document attached to the entity."""

    document_id: str
    document_name: str
    document_type: str | None = None
    requirement_id: str | None = None
    expiry_date: date | str | None = None
    is_archived: bool = False


@dataclass(frozen=True)
class DocumentRequirement:
    """A document the compliance programme expects for an entity kind.

    ``areas`` lists the categories the requirement covers. A requirement
    with no areas covers no category.
    """

    requirement_id: str
    document_name: str
    entity_type: str = "material"
    areas: frozenset[str] = frozenset()
    is_required: bool = True
    is_active: bool = True

    def covers(self, category: str | None) -> bool:
        return bool(category) and category in self.areas


@dataclass(frozen=True)
class CoaLimit:
    """A certificate-of-analysis limit; both bounds may be null."""

    parameter_name: str
    min_value: Decimal | None = None
    max_value: Decimal | None = None

    @property
    def is_defined(self) -> bool:
        return self.min_value is not None or self.max_value is not None


@dataclass(frozen=True)
class PurchaseUnit:
    """A configured purchase unit for the material."""

    unit_name: str
    conversion_factor: Decimal | None = None


@dataclass(frozen=True)
class EntityCheckContext:
    """Complete input for evaluating checks against one material.

    Constructed fresh per evaluation; never persisted.
    """

    material: MaterialRecord
    as_of_date: date
    suppliers: tuple[SupplierLink, ...] = ()
    documents: tuple[DocumentRef, ...] = ()
    document_requirements: tuple[DocumentRequirement, ...] = ()
    coa_limits: tuple[CoaLimit, ...] = ()
    purchase_units: tuple[PurchaseUnit, ...] = ()
    warning_days: int = 30

    @property
    def category(self) -> str | None:
        return self.material.category or None

    @property
    def active_documents(self) -> tuple[DocumentRef, ...]:
        return tuple(d for d in self.documents if not d.is_archived)

    @property
    def manufacturer(self) -> SupplierLink | None:
        """First link flagged as manufacturer, in input order."""
        for link in self.suppliers:
            if link.is_manufacturer:
                return link
        return None
