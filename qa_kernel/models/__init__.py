"""ORM models for the compliance core's read contract."""

from qa_kernel.models.check_definition import QACheckDefinitionModel
from qa_kernel.models.document import DocumentRequirementModel
from qa_kernel.models.material import (
    MaterialCoaLimitModel,
    MaterialDocumentModel,
    MaterialModel,
    MaterialPurchaseUnitModel,
    MaterialSupplierModel,
)
from qa_kernel.models.override import QAOverrideRequestModel
from qa_kernel.models.settings import QASettingModel
from qa_kernel.models.supplier import SupplierDocumentModel, SupplierModel

__all__ = [
    "DocumentRequirementModel",
    "MaterialCoaLimitModel",
    "MaterialDocumentModel",
    "MaterialModel",
    "MaterialPurchaseUnitModel",
    "MaterialSupplierModel",
    "QACheckDefinitionModel",
    "QAOverrideRequestModel",
    "QASettingModel",
    "SupplierDocumentModel",
    "SupplierModel",
]
