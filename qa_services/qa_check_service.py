"""
QACheckService -- Service wrapper for material QA checks.

Composes the settings provider, the check definition store and the context
assembler (kernel selectors) with the pure rule engine and approval gate.

Architecture: qa_services -- imperative shell.
    Reads "today" from the injected clock; the engines never see the clock.

Failure modes:
    - EntityNotFoundError for an unknown material id.
    - Database errors propagate unmodified.
"""

from __future__ import annotations

from collections.abc import Iterable
from uuid import UUID

from sqlalchemy.orm import Session

from qa_kernel.domain.checks import CheckDefinition, CheckSummary
from qa_kernel.domain.clock import Clock, SystemClock
from qa_kernel.domain.context import EntityCheckContext
from qa_kernel.domain.settings import QASettings
from qa_kernel.logging_config import LogContext, get_logger
from qa_kernel.selectors.check_definition_selector import CheckDefinitionSelector
from qa_kernel.selectors.context_selector import MaterialContextSelector
from qa_kernel.selectors.settings_selector import SettingsSelector

from qa_engines.approval_gate import summarize_results
from qa_engines.checks import evaluate_checks

logger = get_logger("services.qa_checks")


class QACheckService:
    """Evaluates QA checks and derives approval eligibility.

    Contract:
        - ``evaluate_material()`` loads everything from the store.
        - ``evaluate_context()`` evaluates a caller-built context.

    Non-goals:
        - Does NOT persist results or change approval status.
    """

    def __init__(self, session: Session, clock: Clock | None = None) -> None:
        self._session = session
        self._clock = clock or SystemClock()
        self._settings = SettingsSelector(session)
        self._definitions = CheckDefinitionSelector(session)
        self._contexts = MaterialContextSelector(session)

    def build_context(
        self,
        material_id: UUID | str,
        settings: QASettings | None = None,
    ) -> EntityCheckContext:
        """Assemble the check context for a material as of today."""
        settings = settings or self._settings.resolve()
        return self._contexts.get_context(
            material_id,
            as_of_date=self._clock.today(),
            warning_days=settings.document_expiry_warning_days,
        )

    def evaluate_material(self, material_id: UUID | str) -> CheckSummary:
        """Evaluate every active material check against one material.

        Raises:
            EntityNotFoundError: if the material does not exist.
        """
        with LogContext.bind(entity_type="material", entity_id=str(material_id)):
            context = self.build_context(material_id)
            definitions = self._definitions.list_definitions("material", active_only=True)
            return self.evaluate_context(context, definitions)

    def evaluate_context(
        self,
        context: EntityCheckContext,
        definitions: Iterable[CheckDefinition] | None = None,
    ) -> CheckSummary:
        """Evaluate ``definitions`` (default: active material checks) against ``context``."""
        if definitions is None:
            definitions = self._definitions.list_definitions("material", active_only=True)
        definitions = tuple(definitions)

        results = evaluate_checks(definitions=definitions, context=context)
        summary = summarize_results(results=results)

        logger.info(
            "qa_checks_evaluated",
            extra={
                "material_id": context.material.material_id,
                "category": context.category,
                "definitions": len(definitions),
                "evaluated": len(summary.results),
                "critical_failures": summary.critical_count,
                "important_failures": summary.important_count,
                "recommended_failures": summary.recommended_count,
                "eligibility": summary.eligibility.value,
            },
        )
        return summary
