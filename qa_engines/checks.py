"""
QA Rule Evaluation Engine (``qa_engines.checks``).

Responsibility
--------------
Evaluate declarative check definitions against one ``EntityCheckContext``.
Each check key maps to a named pure function in ``CHECK_REGISTRY``; the
dispatcher filters definitions by category applicability and turns each
function's ``CheckOutcome`` into a ``CheckResult``.

Architecture position
---------------------
**Engines layer** -- pure functional core.  ZERO I/O, ZERO database,
ZERO clock reads.  "Today" is ``context.as_of_date``.

Invariants enforced
-------------------
* A definition with no applicable categories applies to every entity; a
  category-restricted definition applies only when the entity's category is
  in the set, and never to an entity without a category.
* An unknown check key passes with "Check not implemented".  A new
  definition without code can never block approval.
* Dates compare at day granularity.  An expiry date that does not parse is
  treated as absent and never fails a check on its own.
* Deterministic: the same context always yields the same results.

Failure modes
-------------
* None for data-shape problems.  Null relations and malformed dates
  degrade to each check's documented outcome.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import date
from decimal import Decimal

from qa_kernel.domain.checks import CheckDefinition, CheckOutcome, CheckResult
from qa_kernel.domain.context import DocumentRef, EntityCheckContext
from qa_kernel.utils.dates import days_between, parse_date_value
from qa_engines.tracer import traced_engine

CheckFunction = Callable[[EntityCheckContext], CheckOutcome]

CHECK_REGISTRY: dict[str, CheckFunction] = {}

NOT_IMPLEMENTED_MESSAGE = "Check not implemented"

SAFETY_DOCUMENT_MARKERS = ("coa", "allergen_statement", "spec_sheet")


def register_check(check_key: str) -> Callable[[CheckFunction], CheckFunction]:
    """Register ``func`` as the evaluator for ``check_key``."""

    def decorator(func: CheckFunction) -> CheckFunction:
        if check_key in CHECK_REGISTRY:
            raise ValueError(f"Check '{check_key}' is already registered")
        CHECK_REGISTRY[check_key] = func
        return func

    return decorator


def registered_check_keys() -> tuple[str, ...]:
    return tuple(CHECK_REGISTRY)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _days_until_expiry(doc: DocumentRef, today: date) -> int | None:
    expiry = parse_date_value(doc.expiry_date)
    if expiry is None:
        return None
    return days_between(today, expiry)


def _is_safety_document(doc: DocumentRef) -> bool:
    haystack = f"{doc.document_name} {doc.document_type or ''}".lower()
    return any(marker in haystack for marker in SAFETY_DOCUMENT_MARKERS)


def _names(docs: Iterable) -> list[str]:
    return [d.document_name for d in docs]


# ---------------------------------------------------------------------------
# Supplier checks
# ---------------------------------------------------------------------------


@register_check("material_no_approved_supplier")
def check_no_approved_supplier(context: EntityCheckContext) -> CheckOutcome:
    if any(link.approval_status == "Approved" for link in context.suppliers):
        return CheckOutcome(True, "At least one approved supplier exists")
    return CheckOutcome(False, "No supplier with Approved status found")


def _manufacturer_status_check(
    context: EntityCheckContext,
    status: str,
    failure: str,
    success: str,
) -> CheckOutcome:
    manufacturer = context.manufacturer
    if manufacturer is None:
        return CheckOutcome(True, "No manufacturer designated")
    name = manufacturer.supplier_name
    details = {"manufacturer_name": name}
    if manufacturer.approval_status == status:
        return CheckOutcome(False, failure.format(name=name), details)
    return CheckOutcome(True, success, details)


@register_check("material_manufacturer_rejected")
def check_manufacturer_rejected(context: EntityCheckContext) -> CheckOutcome:
    return _manufacturer_status_check(
        context,
        "Rejected",
        'Manufacturer "{name}" has been rejected',
        "Manufacturer is not rejected",
    )


@register_check("material_manufacturer_probation")
def check_manufacturer_probation(context: EntityCheckContext) -> CheckOutcome:
    return _manufacturer_status_check(
        context,
        "Probation",
        'Manufacturer "{name}" is on Probation',
        "Manufacturer is not on probation",
    )


@register_check("material_no_cost_defined")
def check_no_cost_defined(context: EntityCheckContext) -> CheckOutcome:
    has_cost = any(
        link.cost_per_unit is not None and link.cost_per_unit > Decimal("0")
        for link in context.suppliers
    )
    if has_cost:
        return CheckOutcome(True, "Cost per unit defined")
    return CheckOutcome(False, "No supplier has cost per unit specified")


# ---------------------------------------------------------------------------
# Document checks
# ---------------------------------------------------------------------------


@register_check("material_required_docs_missing")
def check_required_docs_missing(context: EntityCheckContext) -> CheckOutcome:
    """Required documents for the category minus uploaded, non-archived ones.

    An upload satisfies a requirement when it references the requirement id
    or carries the requirement's document name.
    """
    uploaded_keys: set[str] = set()
    for doc in context.active_documents:
        if doc.requirement_id:
            uploaded_keys.add(doc.requirement_id)
        uploaded_keys.add(doc.document_name)

    missing = [
        req
        for req in context.document_requirements
        if req.is_required
        and req.is_active
        and req.covers(context.category)
        and req.requirement_id not in uploaded_keys
        and req.document_name not in uploaded_keys
    ]
    details = {"missing_documents": _names(missing)}
    if not missing:
        return CheckOutcome(True, "All required documents uploaded", details)
    return CheckOutcome(False, "Missing: " + ", ".join(_names(missing)), details)


@register_check("material_safety_docs_expired")
def check_safety_docs_expired(context: EntityCheckContext) -> CheckOutcome:
    """A safety document lapses at the start of its expiry date, so one expiring
    today is already expired."""
    expired = []
    for doc in context.active_documents:
        if not _is_safety_document(doc):
            continue
        days = _days_until_expiry(doc, context.as_of_date)
        if days is not None and days <= 0:
            expired.append(doc)
    details = {"expired_documents": _names(expired)}
    if not expired:
        return CheckOutcome(True, "No expired safety documents", details)
    return CheckOutcome(False, "Expired: " + ", ".join(_names(expired)), details)


@register_check("material_docs_expiring_soon")
def check_docs_expiring_soon(context: EntityCheckContext) -> CheckOutcome:
    """Documents expiring within the warning window (today excluded).

    The nearest entry is the first document with the minimum day count, in
    input order.
    """
    expiring: list[tuple[DocumentRef, int]] = []
    for doc in context.active_documents:
        days = _days_until_expiry(doc, context.as_of_date)
        if days is not None and 0 < days <= context.warning_days:
            expiring.append((doc, days))

    if not expiring:
        return CheckOutcome(True, "No documents expiring within warning period")

    nearest_doc, nearest_days = expiring[0]
    for doc, days in expiring[1:]:
        if days < nearest_days:
            nearest_doc, nearest_days = doc, days

    return CheckOutcome(
        False,
        f"{len(expiring)} document(s) expiring soon - "
        f"{nearest_doc.document_name} in {nearest_days} days",
        {
            "expiring_documents": [doc.document_name for doc, _ in expiring],
            "nearest_expiry": {"name": nearest_doc.document_name, "days": nearest_days},
        },
    )


@register_check("material_coa_limits_missing")
def check_coa_limits_missing(context: EntityCheckContext) -> CheckOutcome:
    if not context.material.coa_required:
        return CheckOutcome(True, "COA not required for this material")
    if any(limit.is_defined for limit in context.coa_limits):
        return CheckOutcome(True, "COA limits defined")
    return CheckOutcome(False, "COA required but no limits specified")


# ---------------------------------------------------------------------------
# Material master-data checks
# ---------------------------------------------------------------------------


@register_check("material_no_gl_account")
def check_no_gl_account(context: EntityCheckContext) -> CheckOutcome:
    if context.material.gl_account_id:
        return CheckOutcome(True, "GL account assigned")
    return CheckOutcome(False, "No GL account assigned for financial tracking")


@register_check("material_no_purchase_units")
def check_no_purchase_units(context: EntityCheckContext) -> CheckOutcome:
    count = len(context.purchase_units)
    if count:
        return CheckOutcome(True, f"{count} purchase unit(s) configured")
    return CheckOutcome(False, "No purchase units defined")


@register_check("material_country_origin_missing")
def check_country_origin_missing(context: EntityCheckContext) -> CheckOutcome:
    country = context.material.country_of_origin
    if country:
        return CheckOutcome(True, f"Country of origin: {country}")
    return CheckOutcome(False, "Country of origin not specified (VACCP compliance)")


@register_check("material_fraud_score_missing")
def check_fraud_score_missing(context: EntityCheckContext) -> CheckOutcome:
    score = context.material.fraud_vulnerability_score
    if score:
        return CheckOutcome(True, f"Fraud vulnerability: {score}")
    return CheckOutcome(False, "Food fraud vulnerability not assessed")


@register_check("material_haccp_incomplete")
def check_haccp_incomplete(context: EntityCheckContext) -> CheckOutcome:
    material = context.material
    answers = (
        material.haccp_kill_step_applied,
        material.haccp_rte_or_kill_step,
        material.haccp_new_allergen,
    )
    if all(answer is not None for answer in answers):
        return CheckOutcome(True, "HACCP assessment complete")
    return CheckOutcome(False, "HACCP hazard questions not fully answered")


@register_check("material_storage_temps_missing")
def check_storage_temps_missing(context: EntityCheckContext) -> CheckOutcome:
    material = context.material
    if material.storage_temperature_min is not None or material.storage_temperature_max is not None:
        return CheckOutcome(True, "Storage temperatures specified")
    return CheckOutcome(False, "Storage temperature range not set")


# ---------------------------------------------------------------------------
# Dispatcher
# ---------------------------------------------------------------------------


def applicable_definitions(
    definitions: Iterable[CheckDefinition],
    category: str | None,
) -> tuple[CheckDefinition, ...]:
    """Active definitions that apply to ``category``, in input order."""
    return tuple(d for d in definitions if d.is_active and d.applies_to(category))


def evaluate_check(definition: CheckDefinition, context: EntityCheckContext) -> CheckResult:
    """Evaluate one definition; unknown keys pass."""
    func = CHECK_REGISTRY.get(definition.check_key)
    if func is None:
        return CheckResult(definition=definition, passed=True, message=NOT_IMPLEMENTED_MESSAGE)
    outcome = func(context)
    return CheckResult(
        definition=definition,
        passed=outcome.passed,
        message=outcome.message,
        details=dict(outcome.details),
    )


@traced_engine("qa_checks", "1.0", fingerprint_fields=("definitions", "context"))
def evaluate_checks(
    definitions: Iterable[CheckDefinition],
    context: EntityCheckContext,
) -> tuple[CheckResult, ...]:
    """Evaluate every applicable definition against ``context``.

    Args:
        definitions: Candidate definitions, typically the active ones for
            the entity type ordered by sort order.
        context: Evaluation input for one entity.

    Returns:
        One CheckResult per applicable definition, in definition order.
    """
    return tuple(
        evaluate_check(definition, context)
        for definition in applicable_definitions(definitions, context.category)
    )
