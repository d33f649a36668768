"""
qa_engines.approval_gate -- Approval eligibility from check results.

Responsibility:
    Partition evaluated check results by tier and derive the approval
    permission they grant: blocked, conditional only, or full.  Also
    computes the expiry of a conditional approval for callers granting one.

Architecture position:
    Engines -- pure calculation layer, zero I/O, no history.

Invariants enforced:
    - critical / important / recommended failures and passed checks are
      disjoint and together cover every result exactly once.
    - Any critical failure blocks both approval paths.  Important failures
      block full approval only.  Recommended failures are advisory.

Failure modes:
    - None.  An empty result set is fully approvable.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timedelta

from qa_kernel.domain.checks import CheckResult, CheckSummary, CheckTier
from qa_kernel.domain.settings import QASettings
from qa_engines.tracer import traced_engine


@traced_engine("qa_approval_gate", "1.0", fingerprint_fields=("results",))
def summarize_results(results: Iterable[CheckResult]) -> CheckSummary:
    """Build the approval-gate summary for one entity's results."""
    results = tuple(results)
    critical: list[CheckResult] = []
    important: list[CheckResult] = []
    recommended: list[CheckResult] = []
    passed: list[CheckResult] = []

    for result in results:
        if result.passed:
            passed.append(result)
        elif result.tier == CheckTier.CRITICAL:
            critical.append(result)
        elif result.tier == CheckTier.IMPORTANT:
            important.append(result)
        else:
            recommended.append(result)

    return CheckSummary(
        results=results,
        critical_failures=tuple(critical),
        important_failures=tuple(important),
        recommended_failures=tuple(recommended),
        passed_checks=tuple(passed),
    )


def conditional_approval_expiry(
    granted_at: datetime,
    settings: QASettings,
    entity_kind: str,
    category: str | None = None,
) -> datetime:
    """When a conditional approval granted at ``granted_at`` lapses.

    The duration comes from the per-category (materials) or per-entity-kind
    settings, 30 days when unmapped.
    """
    days = settings.conditional_duration_days(entity_kind, category)
    return granted_at + timedelta(days=days)
