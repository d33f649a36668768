"""
Integration tests for QACheckService: context assembly from the store,
evaluation against stored definitions, and approval eligibility.
"""

from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest

from qa_config import load_default_catalogue
from qa_kernel.domain.checks import ApprovalEligibility, CheckDefinition, CheckTier
from qa_kernel.exceptions import EntityNotFoundError
from qa_services import QAAdminService, QACheckService
from tests.factories import (
    add_coa_limit,
    add_definition,
    add_material,
    add_material_document,
    add_purchase_unit,
    add_requirement,
    add_setting,
    add_supplier,
    link_supplier,
)


@pytest.fixture
def service(db_session, clock):
    return QACheckService(db_session, clock)


@pytest.fixture
def seeded(db_session):
    QAAdminService(db_session).seed_catalogue(load_default_catalogue())


def compliant_ingredient(session):
    """An Ingredients material that passes every default check."""
    material = add_material(
        session,
        "Cane Sugar",
        coa_required=True,
        gl_account_id="5000-01",
        country_of_origin="Brazil",
        fraud_vulnerability_score="Low",
        haccp_kill_step_applied=False,
        haccp_rte_or_kill_step=True,
        haccp_new_allergen=False,
        storage_temperature_min=Decimal("10"),
    )
    manufacturer = add_supplier(session, "Acme Mill", approval_status="Approved")
    link_supplier(session, material, manufacturer, is_manufacturer=True, cost_per_unit=Decimal("1.25"))
    add_purchase_unit(session, material)
    add_coa_limit(session, material, "Moisture", max_value=Decimal("0.05"))
    return material


class TestEvaluateMaterial:
    def test_compliant_material_is_fully_approvable(self, service, db_session, seeded):
        material = compliant_ingredient(db_session)
        summary = service.evaluate_material(material.id)
        assert summary.eligibility == ApprovalEligibility.FULL
        assert summary.total_issues == 0
        assert len(summary.results) == 14

    def test_ingredient_without_approved_supplier_is_blocked(self, service, db_session, seeded):
        material = add_material(db_session, "Cane Sugar")
        rejected = add_supplier(db_session, "Bad Mill", approval_status="Rejected")
        link_supplier(db_session, material, rejected, is_manufacturer=True)

        summary = service.evaluate_material(str(material.id))
        critical = {r.check_key for r in summary.critical_failures}
        assert critical == {"material_no_approved_supplier", "material_manufacturer_rejected"}
        assert summary.is_blocked is True
        assert summary.can_conditional_approve is False

    def test_category_restricted_checks_skipped_for_other_categories(self, service, db_session, seeded):
        material = add_material(db_session, "Shrink Wrap", category="Packaging")
        keys = {r.check_key for r in service.evaluate_material(material.id).results}
        assert "material_haccp_incomplete" not in keys
        assert "material_coa_limits_missing" not in keys
        assert "material_no_gl_account" in keys

    def test_material_without_category_gets_only_universal_checks(self, service, db_session, seeded):
        material = add_material(db_session, "Mystery", category=None)
        keys = {r.check_key for r in service.evaluate_material(material.id).results}
        assert "material_storage_temps_missing" not in keys
        assert len(keys) == 9

    def test_important_failure_gives_conditional_only(self, service, db_session, seeded):
        material = compliant_ingredient(db_session)
        add_requirement(db_session, "Allergen Statement", areas=["Ingredients"])
        summary = service.evaluate_material(material.id)
        assert [r.check_key for r in summary.important_failures] == ["material_required_docs_missing"]
        assert summary.eligibility == ApprovalEligibility.CONDITIONAL_ONLY

    def test_expired_coa_blocks(self, service, db_session, seeded):
        material = compliant_ingredient(db_session)
        add_material_document(db_session, material, "COA Lot 7", date(2023, 12, 31))
        summary = service.evaluate_material(material.id)
        assert [r.check_key for r in summary.critical_failures] == ["material_safety_docs_expired"]

    def test_inactive_definitions_not_evaluated(self, service, db_session):
        add_definition(db_session, "material_no_gl_account", sort_order=10)
        add_definition(db_session, "material_no_purchase_units", is_active=False, sort_order=20)
        material = add_material(db_session)
        keys = [r.check_key for r in service.evaluate_material(material.id).results]
        assert keys == ["material_no_gl_account"]

    def test_unknown_stored_key_passes(self, service, db_session):
        add_definition(db_session, "material_allergen_matrix_review", tier="critical")
        material = add_material(db_session)
        summary = service.evaluate_material(material.id)
        assert summary.is_blocked is False
        assert summary.passed_checks[0].message == "Check not implemented"

    def test_unknown_material_raises(self, service):
        missing = uuid4()
        with pytest.raises(EntityNotFoundError) as exc_info:
            service.evaluate_material(missing)
        assert exc_info.value.entity_id == str(missing)
        assert exc_info.value.code == "ENTITY_NOT_FOUND"

    def test_non_uuid_material_id_is_not_found(self, service):
        with pytest.raises(EntityNotFoundError) as exc_info:
            service.evaluate_material("MAT-001")
        assert exc_info.value.entity_type == "material"

    def test_logs_outcome_with_entity_context(self, service, db_session, seeded, captured_logs):
        material = add_material(db_session)
        service.evaluate_material(material.id)
        [record] = [r for r in captured_logs() if r["message"] == "qa_checks_evaluated"]
        assert record["entity_type"] == "material"
        assert record["entity_id"] == str(material.id)
        assert record["eligibility"] == "blocked"
        assert record["evaluated"] == 14


class TestWarningDaysSetting:
    def test_default_window_flags_document(self, service, db_session):
        add_definition(db_session, "material_docs_expiring_soon", tier="recommended")
        material = add_material(db_session)
        add_material_document(db_session, material, "Allergen Letter", date(2024, 1, 20))
        [result] = service.evaluate_material(material.id).results
        assert result.passed is False
        assert result.details["nearest_expiry"]["days"] == 19

    def test_configured_window_excludes_document(self, service, db_session):
        add_definition(db_session, "material_docs_expiring_soon", tier="recommended")
        add_setting(db_session, "document_expiry_warning_days", 10)
        material = add_material(db_session)
        add_material_document(db_session, material, "Allergen Letter", date(2024, 1, 20))
        [result] = service.evaluate_material(material.id).results
        assert result.passed is True

    def test_invalid_setting_falls_back_to_default(self, service, db_session):
        add_setting(db_session, "document_expiry_warning_days", "soon")
        material = add_material(db_session)
        assert service.build_context(material.id).warning_days == 30


class TestBuildContext:
    def test_context_reflects_store(self, service, db_session):
        material = add_material(db_session, "Cane Sugar", code="SUG-1")
        supplier = add_supplier(db_session, "Acme Mill")
        link_supplier(db_session, material, supplier, cost_per_unit=Decimal("2.50"))
        link_supplier(db_session, material, None)
        requirement = add_requirement(db_session)
        add_material_document(db_session, material, "coa.pdf", requirement=requirement)

        context = service.build_context(material.id)
        assert context.as_of_date == date(2024, 1, 1)
        assert context.material.code == "SUG-1"
        assert sorted(link.supplier_name or "" for link in context.suppliers) == ["", "Acme Mill"]
        assert context.documents[0].requirement_id == str(requirement.id)
        assert [r.document_name for r in context.document_requirements] == ["Certificate of Analysis"]

    def test_evaluate_context_with_explicit_definitions(self, service, db_session):
        material = add_material(db_session)
        context = service.build_context(material.id)
        definitions = [CheckDefinition("material_no_purchase_units", CheckTier.IMPORTANT)]
        summary = service.evaluate_context(context, definitions)
        assert summary.eligibility == ApprovalEligibility.CONDITIONAL_ONLY
