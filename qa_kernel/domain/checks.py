"""
QA check domain types (``qa_kernel.domain.checks``).

Responsibility
--------------
Pure value objects for tiered compliance checks: the declarative check
definition, the per-definition evaluation result, and the per-entity
summary that the approval gate derives from those results.

Architecture position
---------------------
**Kernel domain layer** -- pure value objects.  ZERO I/O.  No imports
from ``db/``, ``models/``, ``selectors/`` or outer layers.

Invariants enforced
-------------------
* Tier is one of ``critical``, ``important``, ``recommended``.
* ``CheckSummary`` partitions are disjoint and exhaustive over the
  evaluated results: every result is either passed or a failure of
  exactly one tier.
* ``is_blocked`` iff any critical failure; ``can_conditional_approve`` is
  its negation; ``can_full_approve`` additionally requires zero important
  failures.  Recommended failures never affect eligibility.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class CheckTier(str, Enum):
    """Severity class of a compliance check."""

    CRITICAL = "critical"
    IMPORTANT = "important"
    RECOMMENDED = "recommended"


class ApprovalEligibility(str, Enum):
    """Permission granted by the approval gate (not the lifecycle state)."""

    BLOCKED = "blocked"
    CONDITIONAL_ONLY = "conditional_only"
    FULL = "full"


@dataclass(frozen=True)
class CheckDefinition:
    """A named, declarative compliance rule.

    ``applicable_categories`` empty means the rule applies to every
    category.  Definitions are never deleted, only deactivated.
    """

    check_key: str
    tier: CheckTier
    entity_type: str = "material"
    check_name: str = ""
    description: str | None = None
    applicable_categories: frozenset[str] = frozenset()
    is_active: bool = True
    sort_order: int = 0

    def applies_to(self, category: str | None) -> bool:
        """Whether this definition applies to an entity in ``category``.

        Fails closed: a category-restricted definition never applies to an
        entity without a category.
        """
        if not self.applicable_categories:
            return True
        if not category:
            return False
        return category in self.applicable_categories


@dataclass(frozen=True)
class CheckOutcome:
    """What a single check function returns."""

    passed: bool
    message: str
    details: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class CheckResult:
    """One evaluated definition for one entity."""

    definition: CheckDefinition
    passed: bool
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def check_key(self) -> str:
        return self.definition.check_key

    @property
    def tier(self) -> CheckTier:
        return self.definition.tier


@dataclass(frozen=True)
class CheckSummary:
    """Approval-gate view of all results for one entity."""

    results: tuple[CheckResult, ...] = ()
    critical_failures: tuple[CheckResult, ...] = ()
    important_failures: tuple[CheckResult, ...] = ()
    recommended_failures: tuple[CheckResult, ...] = ()
    passed_checks: tuple[CheckResult, ...] = ()

    @property
    def is_blocked(self) -> bool:
        return len(self.critical_failures) > 0

    @property
    def can_conditional_approve(self) -> bool:
        return not self.is_blocked

    @property
    def can_full_approve(self) -> bool:
        return self.can_conditional_approve and len(self.important_failures) == 0

    @property
    def eligibility(self) -> ApprovalEligibility:
        if self.is_blocked:
            return ApprovalEligibility.BLOCKED
        if self.can_full_approve:
            return ApprovalEligibility.FULL
        return ApprovalEligibility.CONDITIONAL_ONLY

    @property
    def critical_count(self) -> int:
        return len(self.critical_failures)

    @property
    def important_count(self) -> int:
        return len(self.important_failures)

    @property
    def recommended_count(self) -> int:
        return len(self.recommended_failures)

    @property
    def total_issues(self) -> int:
        return self.critical_count + self.important_count + self.recommended_count

    def blocking_checks(self) -> tuple[CheckResult, ...]:
        """Failures an override request would have to cover."""
        return self.critical_failures + self.important_failures
