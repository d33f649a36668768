"""
qa_services -- Package init and public API.

Responsibility:
    Services that compose the pure QA engines with database sessions and
    the clock.  This is the only layer that holds sessions or reads time.

Architecture position:
    Services -- imperative shell over engines + kernel.

    Dependency direction:
        qa_services/ -> qa_engines/, qa_kernel/, qa_config/  (allowed)
        qa_engines/  -> qa_services/                          (FORBIDDEN)
        qa_kernel/   -> qa_services/                          (FORBIDDEN)
"""

from qa_services.admin_service import QAAdminService, SeedResult
from qa_services.qa_check_service import QACheckService
from qa_services.work_queue_service import SOURCE_ORDER, WorkQueueService

__all__ = [
    "QAAdminService",
    "QACheckService",
    "SOURCE_ORDER",
    "SeedResult",
    "WorkQueueService",
]
