"""Pure domain value objects for the QA kernel (zero I/O)."""

from qa_kernel.domain.checks import (
    ApprovalEligibility,
    CheckDefinition,
    CheckOutcome,
    CheckResult,
    CheckSummary,
    CheckTier,
)
from qa_kernel.domain.clock import Clock, DeterministicClock, SystemClock
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
from qa_kernel.domain.settings import QASettings
from qa_kernel.domain.work_queue import (
    PriorityScore,
    SourceOutcome,
    WorkQueueFilters,
    WorkQueueItem,
    WorkQueueItemType,
    WorkQueuePriority,
    WorkQueueSummary,
)

__all__ = [
    "ApprovalEligibility",
    "CheckDefinition",
    "CheckOutcome",
    "CheckResult",
    "CheckSummary",
    "CheckTier",
    "Clock",
    "CoaLimit",
    "DeterministicClock",
    "DocumentRef",
    "DocumentRequirement",
    "EntityCheckContext",
    "MaterialRecord",
    "PriorityScore",
    "PurchaseUnit",
    "QASettings",
    "SourceOutcome",
    "SupplierLink",
    "SupplierRef",
    "SystemClock",
    "WorkQueueFilters",
    "WorkQueueItem",
    "WorkQueueItemType",
    "WorkQueuePriority",
    "WorkQueueSummary",
]
