"""Read-only selectors returning frozen DTOs."""

from qa_kernel.selectors.base import BaseSelector
from qa_kernel.selectors.check_definition_selector import CheckDefinitionSelector
from qa_kernel.selectors.context_selector import MaterialContextSelector
from qa_kernel.selectors.settings_selector import SettingsSelector
from qa_kernel.selectors.work_queue_selector import COMPLIANCE_STATUSES, WorkQueueSelector

__all__ = [
    "BaseSelector",
    "COMPLIANCE_STATUSES",
    "CheckDefinitionSelector",
    "MaterialContextSelector",
    "SettingsSelector",
    "WorkQueueSelector",
]
