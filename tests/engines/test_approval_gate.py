"""
Tests for the approval gate: tier partitioning, eligibility, and the
conditional approval expiry.
"""

from datetime import datetime

from hypothesis import given, settings
from hypothesis import strategies as st

from qa_engines.approval_gate import conditional_approval_expiry, summarize_results
from qa_kernel.domain.checks import (
    ApprovalEligibility,
    CheckDefinition,
    CheckResult,
    CheckTier,
)
from qa_kernel.domain.settings import QASettings


def make_result(key: str, tier: CheckTier, passed: bool) -> CheckResult:
    return CheckResult(
        definition=CheckDefinition(check_key=key, tier=tier),
        passed=passed,
        message="ok" if passed else "failed",
    )


result_strategy = st.builds(
    make_result,
    key=st.sampled_from(["a", "b", "c", "d"]),
    tier=st.sampled_from(list(CheckTier)),
    passed=st.booleans(),
)

_RANK = {
    ApprovalEligibility.BLOCKED: 0,
    ApprovalEligibility.CONDITIONAL_ONLY: 1,
    ApprovalEligibility.FULL: 2,
}


class TestSummarizeResults:
    def test_empty_results_are_fully_approvable(self):
        summary = summarize_results(results=[])
        assert summary.eligibility == ApprovalEligibility.FULL
        assert summary.total_issues == 0

    def test_critical_failure_blocks(self):
        summary = summarize_results(results=[
            make_result("material_no_approved_supplier", CheckTier.CRITICAL, False),
            make_result("material_manufacturer_rejected", CheckTier.CRITICAL, False),
            make_result("material_no_gl_account", CheckTier.IMPORTANT, True),
        ])
        assert summary.is_blocked is True
        assert summary.can_conditional_approve is False
        assert summary.can_full_approve is False
        assert summary.critical_count == 2
        assert summary.eligibility == ApprovalEligibility.BLOCKED

    def test_important_failure_allows_conditional_only(self):
        summary = summarize_results(results=[
            make_result("material_no_gl_account", CheckTier.IMPORTANT, False),
            make_result("material_no_approved_supplier", CheckTier.CRITICAL, True),
        ])
        assert summary.is_blocked is False
        assert summary.can_conditional_approve is True
        assert summary.can_full_approve is False
        assert summary.eligibility == ApprovalEligibility.CONDITIONAL_ONLY
        assert [r.check_key for r in summary.blocking_checks()] == ["material_no_gl_account"]

    def test_recommended_failures_never_affect_eligibility(self):
        summary = summarize_results(results=[
            make_result("material_no_purchase_units", CheckTier.RECOMMENDED, False),
            make_result("material_no_cost_defined", CheckTier.RECOMMENDED, False),
        ])
        assert summary.eligibility == ApprovalEligibility.FULL
        assert summary.recommended_count == 2
        assert summary.blocking_checks() == ()

    def test_partition_preserves_result_order(self):
        results = [
            make_result("first", CheckTier.IMPORTANT, False),
            make_result("second", CheckTier.IMPORTANT, False),
        ]
        summary = summarize_results(results=results)
        assert [r.check_key for r in summary.important_failures] == ["first", "second"]
        assert summary.results == tuple(results)


class TestSummaryProperties:
    @settings(max_examples=200)
    @given(st.lists(result_strategy, max_size=12))
    def test_partitions_are_disjoint_and_exhaustive(self, results):
        summary = summarize_results(results=results)
        buckets = (
            summary.passed_checks,
            summary.critical_failures,
            summary.important_failures,
            summary.recommended_failures,
        )
        assert sum(len(b) for b in buckets) == len(results)
        assert all(r.passed for r in summary.passed_checks)
        assert all(not r.passed and r.tier == CheckTier.CRITICAL for r in summary.critical_failures)
        assert all(not r.passed and r.tier == CheckTier.IMPORTANT for r in summary.important_failures)

    @settings(max_examples=200)
    @given(st.lists(result_strategy, max_size=12))
    def test_blocked_iff_any_critical_failure(self, results):
        summary = summarize_results(results=results)
        expected = any(not r.passed and r.tier == CheckTier.CRITICAL for r in results)
        assert summary.is_blocked is expected
        assert summary.can_conditional_approve is not expected

    @settings(max_examples=200)
    @given(st.lists(result_strategy, max_size=10), result_strategy)
    def test_adding_a_failure_never_improves_eligibility(self, results, extra):
        failed = make_result(extra.check_key, extra.tier, False)
        before = summarize_results(results=results).eligibility
        after = summarize_results(results=results + [failed]).eligibility
        assert _RANK[after] <= _RANK[before]


class TestConditionalApprovalExpiry:
    GRANTED = datetime(2024, 1, 1, 12, 0, 0)

    def test_material_category_duration(self):
        expiry = conditional_approval_expiry(self.GRANTED, QASettings(), "materials", "Ingredients")
        assert expiry == datetime(2024, 1, 15, 12, 0, 0)

    def test_unmapped_category_uses_thirty_days(self):
        expiry = conditional_approval_expiry(self.GRANTED, QASettings(), "materials", "Bulk Gas")
        assert expiry == datetime(2024, 1, 31, 12, 0, 0)

    def test_entity_kind_duration(self):
        expiry = conditional_approval_expiry(self.GRANTED, QASettings(), "production_lots")
        assert expiry == datetime(2024, 1, 8, 12, 0, 0)

    def test_configured_duration_overrides_default(self):
        custom = QASettings(conditional_duration_materials={"Ingredients": 3})
        expiry = conditional_approval_expiry(self.GRANTED, custom, "material", "Ingredients")
        assert expiry == datetime(2024, 1, 4, 12, 0, 0)
