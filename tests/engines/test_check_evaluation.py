"""
Tests for the pure QA rule evaluation engine.

Tests cover:
- applicability filtering (universal, category-restricted, fail-closed)
- permissive pass for unknown check keys
- every registered material check, including date edge cases
- dual-key required-document matching
"""

from datetime import date, timedelta
from decimal import Decimal

import pytest

from qa_engines.checks import (
    CHECK_REGISTRY,
    NOT_IMPLEMENTED_MESSAGE,
    applicable_definitions,
    evaluate_check,
    evaluate_checks,
)
from qa_engines.approval_gate import summarize_results
from qa_kernel.domain.checks import CheckDefinition, CheckTier
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

TODAY = date(2024, 1, 1)


# =========================================================================
# Factory helpers
# =========================================================================


def make_definition(
    check_key: str = "material_no_gl_account",
    tier: CheckTier = CheckTier.CRITICAL,
    categories: tuple[str, ...] = (),
    is_active: bool = True,
) -> CheckDefinition:
    return CheckDefinition(
        check_key=check_key,
        tier=tier,
        applicable_categories=frozenset(categories),
        is_active=is_active,
    )


def make_material(category: str | None = "Ingredients", **fields) -> MaterialRecord:
    return MaterialRecord(material_id="mat-1", name="Cane Sugar", category=category, **fields)


def make_link(
    status: str | None = "Approved",
    name: str = "Acme Foods",
    is_manufacturer: bool = False,
    cost: Decimal | None = None,
) -> SupplierLink:
    supplier = SupplierRef(supplier_id=f"sup-{name}", name=name, approval_status=status)
    return SupplierLink(supplier=supplier, is_manufacturer=is_manufacturer, cost_per_unit=cost)


def make_doc(
    name: str = "Spec Sheet",
    expiry=None,
    requirement_id: str | None = None,
    document_type: str | None = None,
    archived: bool = False,
) -> DocumentRef:
    return DocumentRef(
        document_id=f"doc-{name}",
        document_name=name,
        document_type=document_type,
        requirement_id=requirement_id,
        expiry_date=expiry,
        is_archived=archived,
    )


def make_context(
    material: MaterialRecord | None = None,
    suppliers: tuple[SupplierLink, ...] = (),
    documents: tuple[DocumentRef, ...] = (),
    requirements: tuple[DocumentRequirement, ...] = (),
    coa_limits: tuple[CoaLimit, ...] = (),
    purchase_units: tuple[PurchaseUnit, ...] = (),
    warning_days: int = 30,
) -> EntityCheckContext:
    return EntityCheckContext(
        material=material or make_material(),
        as_of_date=TODAY,
        suppliers=suppliers,
        documents=documents,
        document_requirements=requirements,
        coa_limits=coa_limits,
        purchase_units=purchase_units,
        warning_days=warning_days,
    )


def run(check_key: str, context: EntityCheckContext):
    return evaluate_check(make_definition(check_key), context)


# =========================================================================
# Applicability and dispatch
# =========================================================================


class TestApplicability:
    def test_unrestricted_definition_applies_to_any_category(self):
        definition = make_definition()
        for category in ("Ingredients", "Packaging", None):
            assert applicable_definitions([definition], category) == (definition,)

    def test_restricted_definition_applies_only_to_listed_categories(self):
        definition = make_definition(categories=("Ingredients", "Direct Sale"))
        assert applicable_definitions([definition], "Ingredients") == (definition,)
        assert applicable_definitions([definition], "Packaging") == ()

    def test_restricted_definition_never_applies_without_category(self):
        definition = make_definition(categories=("Ingredients",))
        results = evaluate_checks(
            definitions=[definition],
            context=make_context(material=make_material(category=None)),
        )
        assert results == ()

    def test_empty_string_category_treated_as_missing(self):
        definition = make_definition(categories=("Ingredients",))
        assert applicable_definitions([definition], "") == ()

    def test_inactive_definitions_are_skipped(self):
        active = make_definition("material_no_gl_account")
        inactive = make_definition("material_no_purchase_units", is_active=False)
        results = evaluate_checks(definitions=[active, inactive], context=make_context())
        assert [r.check_key for r in results] == ["material_no_gl_account"]

    def test_results_follow_definition_order(self):
        keys = ["material_no_purchase_units", "material_no_gl_account", "material_haccp_incomplete"]
        results = evaluate_checks(
            definitions=[make_definition(k) for k in keys],
            context=make_context(),
        )
        assert [r.check_key for r in results] == keys


class TestUnknownCheckKey:
    def test_unknown_key_passes_with_explanation(self):
        result = run("material_brand_new_rule", make_context())
        assert result.passed is True
        assert result.message == NOT_IMPLEMENTED_MESSAGE
        assert result.details == {}

    def test_unknown_critical_key_does_not_block(self):
        definition = make_definition("material_brand_new_rule", CheckTier.CRITICAL)
        summary = summarize_results(evaluate_checks(definitions=[definition], context=make_context()))
        assert summary.is_blocked is False


class TestRegistry:
    def test_all_material_checks_registered(self):
        expected = {
            "material_no_approved_supplier",
            "material_manufacturer_rejected",
            "material_manufacturer_probation",
            "material_required_docs_missing",
            "material_safety_docs_expired",
            "material_no_gl_account",
            "material_docs_expiring_soon",
            "material_coa_limits_missing",
            "material_no_purchase_units",
            "material_no_cost_defined",
            "material_country_origin_missing",
            "material_fraud_score_missing",
            "material_haccp_incomplete",
            "material_storage_temps_missing",
        }
        assert expected <= set(CHECK_REGISTRY)

    def test_evaluation_is_deterministic(self):
        context = make_context(
            suppliers=(make_link("Rejected", is_manufacturer=True),),
            documents=(make_doc("coa", expiry=date(2023, 12, 1)),),
        )
        definitions = [make_definition(k) for k in CHECK_REGISTRY]
        first = evaluate_checks(definitions=definitions, context=context)
        second = evaluate_checks(definitions=definitions, context=context)
        assert first == second


# =========================================================================
# Supplier checks
# =========================================================================


class TestSupplierChecks:
    def test_no_approved_supplier_fails_without_links(self):
        result = run("material_no_approved_supplier", make_context())
        assert result.passed is False
        assert result.message == "No supplier with Approved status found"

    def test_no_approved_supplier_passes_with_one_approved(self):
        context = make_context(suppliers=(make_link("Draft"), make_link("Approved", "Beta")))
        assert run("material_no_approved_supplier", context).passed is True

    def test_link_without_supplier_is_not_approved(self):
        context = make_context(suppliers=(SupplierLink(supplier=None),))
        assert run("material_no_approved_supplier", context).passed is False

    def test_rejected_manufacturer_fails_with_name(self):
        context = make_context(suppliers=(make_link("Rejected", "Bad Mill", is_manufacturer=True),))
        result = run("material_manufacturer_rejected", context)
        assert result.passed is False
        assert result.message == 'Manufacturer "Bad Mill" has been rejected'
        assert result.details == {"manufacturer_name": "Bad Mill"}

    def test_no_manufacturer_passes_both_manufacturer_checks(self):
        context = make_context(suppliers=(make_link("Rejected"),))
        for key in ("material_manufacturer_rejected", "material_manufacturer_probation"):
            result = run(key, context)
            assert result.passed is True
            assert result.message == "No manufacturer designated"

    def test_first_manufacturer_is_the_one_checked(self):
        context = make_context(suppliers=(
            make_link("Approved", "Good Mill", is_manufacturer=True),
            make_link("Rejected", "Bad Mill", is_manufacturer=True),
        ))
        assert run("material_manufacturer_rejected", context).passed is True

    def test_probation_manufacturer_fails(self):
        context = make_context(suppliers=(make_link("Probation", "Slow Mill", is_manufacturer=True),))
        result = run("material_manufacturer_probation", context)
        assert result.passed is False
        assert "Probation" in result.message

    @pytest.mark.parametrize("cost, passed", [
        (None, False),
        (Decimal("0"), False),
        (Decimal("0.01"), True),
    ])
    def test_cost_defined_requires_positive_cost(self, cost, passed):
        context = make_context(suppliers=(make_link(cost=cost),))
        assert run("material_no_cost_defined", context).passed is passed


# =========================================================================
# Document checks
# =========================================================================


class TestExpiringSoon:
    def test_document_nineteen_days_out_is_expiring(self):
        context = make_context(documents=(make_doc("Allergen Letter", expiry=date(2024, 1, 20)),))
        result = run("material_docs_expiring_soon", context)
        assert result.passed is False
        assert result.details["nearest_expiry"] == {"name": "Allergen Letter", "days": 19}
        assert result.message == "1 document(s) expiring soon - Allergen Letter in 19 days"

    def test_expired_document_is_not_expiring_soon(self):
        context = make_context(documents=(make_doc("Allergen Letter", expiry=date(2023, 12, 31)),))
        assert run("material_docs_expiring_soon", context).passed is True

    def test_document_expiring_today_is_excluded(self):
        context = make_context(documents=(make_doc(expiry=TODAY),))
        assert run("material_docs_expiring_soon", context).passed is True

    def test_warning_window_is_inclusive(self):
        context = make_context(documents=(make_doc(expiry=date(2024, 1, 31)),), warning_days=30)
        assert run("material_docs_expiring_soon", context).passed is False
        context = make_context(documents=(make_doc(expiry=date(2024, 2, 1)),), warning_days=30)
        assert run("material_docs_expiring_soon", context).passed is True

    def test_nearest_tie_keeps_first_in_input_order(self):
        context = make_context(documents=(
            make_doc("Later", expiry=date(2024, 1, 25)),
            make_doc("First Tie", expiry=date(2024, 1, 10)),
            make_doc("Second Tie", expiry=date(2024, 1, 10)),
        ))
        result = run("material_docs_expiring_soon", context)
        assert result.details["nearest_expiry"] == {"name": "First Tie", "days": 9}
        assert result.details["expiring_documents"] == ["Later", "First Tie", "Second Tie"]

    def test_iso_string_dates_are_parsed(self):
        context = make_context(documents=(make_doc(expiry="2024-01-20T00:00:00"),))
        assert run("material_docs_expiring_soon", context).details["nearest_expiry"]["days"] == 19

    def test_unparseable_date_is_ignored(self):
        context = make_context(documents=(make_doc(expiry="sometime next year"),))
        assert run("material_docs_expiring_soon", context).passed is True

    def test_archived_documents_are_ignored(self):
        context = make_context(documents=(make_doc(expiry=date(2024, 1, 5), archived=True),))
        assert run("material_docs_expiring_soon", context).passed is True


class TestSafetyDocsExpired:
    def test_expired_coa_fails(self):
        context = make_context(documents=(make_doc("COA Lot 42", expiry=date(2023, 12, 31)),))
        result = run("material_safety_docs_expired", context)
        assert result.passed is False
        assert result.details == {"expired_documents": ["COA Lot 42"]}

    def test_document_type_marks_safety_document(self):
        doc = make_doc("Supplier letter", expiry=date(2023, 6, 1), document_type="allergen_statement")
        assert run("material_safety_docs_expired", make_context(documents=(doc,))).passed is False

    def test_non_safety_document_ignored(self):
        doc = make_doc("Insurance certificate", expiry=date(2023, 6, 1))
        assert run("material_safety_docs_expired", make_context(documents=(doc,))).passed is True

    def test_safety_document_expiring_today_is_expired(self):
        doc = make_doc("COA - Lot 7", expiry=TODAY)
        context = make_context(documents=(doc,))
        expired = run("material_safety_docs_expired", context)
        assert expired.passed is False
        assert expired.details == {"expired_documents": ["COA - Lot 7"]}
        assert run("material_docs_expiring_soon", context).passed is True

    def test_safety_document_expiring_tomorrow_is_not_expired(self):
        doc = make_doc("spec_sheet.pdf", expiry=TODAY + timedelta(days=1))
        assert run("material_safety_docs_expired", make_context(documents=(doc,))).passed is True

    def test_malformed_date_never_fails(self):
        doc = make_doc("coa.pdf", expiry="31/12/2023")
        assert run("material_safety_docs_expired", make_context(documents=(doc,))).passed is True


class TestRequiredDocs:
    def requirement(self, name="Certificate of Analysis", req_id="req-coa", areas=("Ingredients",),
                    is_required=True):
        return DocumentRequirement(
            requirement_id=req_id,
            document_name=name,
            areas=frozenset(areas),
            is_required=is_required,
        )

    def test_missing_requirement_fails_with_names(self):
        context = make_context(requirements=(
            self.requirement(),
            self.requirement("Allergen Statement", "req-allergen"),
        ))
        result = run("material_required_docs_missing", context)
        assert result.passed is False
        assert result.message == "Missing: Certificate of Analysis, Allergen Statement"
        assert result.details["missing_documents"] == [
            "Certificate of Analysis", "Allergen Statement",
        ]

    def test_match_by_requirement_id(self):
        context = make_context(
            requirements=(self.requirement(),),
            documents=(make_doc("lot-42.pdf", requirement_id="req-coa"),),
        )
        assert run("material_required_docs_missing", context).passed is True

    def test_match_by_document_name(self):
        context = make_context(
            requirements=(self.requirement(),),
            documents=(make_doc("Certificate of Analysis"),),
        )
        assert run("material_required_docs_missing", context).passed is True

    def test_archived_upload_does_not_satisfy(self):
        context = make_context(
            requirements=(self.requirement(),),
            documents=(make_doc("lot-42.pdf", requirement_id="req-coa", archived=True),),
        )
        assert run("material_required_docs_missing", context).passed is False

    def test_requirement_for_other_category_ignored(self):
        context = make_context(requirements=(self.requirement(areas=("Packaging",)),))
        assert run("material_required_docs_missing", context).passed is True

    def test_requirement_without_areas_is_never_required(self):
        context = make_context(
            material=make_material(category="Chemical"),
            requirements=(self.requirement(areas=()),),
        )
        result = run("material_required_docs_missing", context)
        assert result.passed is True
        assert result.details == {"missing_documents": []}

    def test_optional_requirement_ignored(self):
        context = make_context(requirements=(self.requirement(is_required=False),))
        assert run("material_required_docs_missing", context).passed is True


class TestCoaLimits:
    def test_passes_when_coa_not_required(self):
        context = make_context(material=make_material(coa_required=False))
        assert run("material_coa_limits_missing", context).message == "COA not required for this material"

    def test_fails_without_limits(self):
        context = make_context(material=make_material(coa_required=True))
        assert run("material_coa_limits_missing", context).passed is False

    def test_limit_with_both_bounds_null_is_not_defined(self):
        context = make_context(
            material=make_material(coa_required=True),
            coa_limits=(CoaLimit("Moisture"),),
        )
        assert run("material_coa_limits_missing", context).passed is False

    def test_one_bound_on_one_limit_is_enough(self):
        context = make_context(
            material=make_material(coa_required=True),
            coa_limits=(CoaLimit("Moisture"), CoaLimit("Brix", max_value=Decimal("65"))),
        )
        assert run("material_coa_limits_missing", context).passed is True


# =========================================================================
# Master data checks
# =========================================================================


class TestMasterDataChecks:
    def test_gl_account(self):
        assert run("material_no_gl_account", make_context()).passed is False
        context = make_context(material=make_material(gl_account_id="5000"))
        assert run("material_no_gl_account", context).passed is True

    def test_purchase_units(self):
        assert run("material_no_purchase_units", make_context()).passed is False
        context = make_context(purchase_units=(PurchaseUnit("Bag"), PurchaseUnit("Pallet")))
        result = run("material_no_purchase_units", context)
        assert result.passed is True
        assert result.message == "2 purchase unit(s) configured"

    def test_country_of_origin(self):
        result = run("material_country_origin_missing", make_context())
        assert result.message == "Country of origin not specified (VACCP compliance)"
        context = make_context(material=make_material(country_of_origin="Brazil"))
        assert run("material_country_origin_missing", context).message == "Country of origin: Brazil"

    def test_fraud_score(self):
        assert run("material_fraud_score_missing", make_context()).passed is False
        context = make_context(material=make_material(fraud_vulnerability_score="Low"))
        assert run("material_fraud_score_missing", context).passed is True

    def test_haccp_requires_all_three_answers(self):
        partial = make_material(haccp_kill_step_applied=True, haccp_rte_or_kill_step=False)
        assert run("material_haccp_incomplete", make_context(material=partial)).passed is False
        complete = make_material(
            haccp_kill_step_applied=False,
            haccp_rte_or_kill_step=False,
            haccp_new_allergen=False,
        )
        assert run("material_haccp_incomplete", make_context(material=complete)).passed is True

    def test_storage_temperatures_need_either_bound(self):
        assert run("material_storage_temps_missing", make_context()).passed is False
        context = make_context(material=make_material(storage_temperature_max=Decimal("4")))
        assert run("material_storage_temps_missing", context).passed is True
