"""
Module: qa_engines
Responsibility:
    Package entrypoint re-exporting the pure QA calculation engines: rule
    evaluation, the approval gate, priority scoring and the work queue
    normalizers.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import qa_kernel.domain, qa_kernel.utils and sibling engines.
    MUST NOT import qa_services, selectors or models.

Invariants enforced:
    - Purity: engines never call ``datetime.now()`` or ``date.today()``.
      "Today" is passed in by the services layer.
    - Determinism: identical inputs always produce identical outputs.

Usage:
    from qa_engines import evaluate_checks, summarize_results
    from qa_engines import score_item, assemble_queue, summarize_queue
"""

from qa_engines.approval_gate import conditional_approval_expiry, summarize_results
from qa_engines.checks import (
    CHECK_REGISTRY,
    NOT_IMPLEMENTED_MESSAGE,
    applicable_definitions,
    evaluate_check,
    evaluate_checks,
    register_check,
    registered_check_keys,
)
from qa_engines.priority import BASE_WEIGHTS, SENSITIVE_CATEGORIES, priority_level, score_item
from qa_engines.tracer import traced_engine
from qa_engines.work_queue import (
    apply_filters,
    assemble_queue,
    conditional_expiry_items,
    dedupe_items,
    document_expiry_items,
    missing_document_items,
    override_followup_items,
    pending_override_items,
    rank_items,
    stale_draft_items,
    summarize_queue,
    supplier_review_items,
)

__all__ = [
    "BASE_WEIGHTS",
    "CHECK_REGISTRY",
    "NOT_IMPLEMENTED_MESSAGE",
    "SENSITIVE_CATEGORIES",
    "applicable_definitions",
    "apply_filters",
    "assemble_queue",
    "conditional_approval_expiry",
    "conditional_expiry_items",
    "dedupe_items",
    "document_expiry_items",
    "evaluate_check",
    "evaluate_checks",
    "missing_document_items",
    "override_followup_items",
    "pending_override_items",
    "priority_level",
    "rank_items",
    "register_check",
    "registered_check_keys",
    "score_item",
    "stale_draft_items",
    "summarize_queue",
    "summarize_results",
    "supplier_review_items",
    "traced_engine",
]
