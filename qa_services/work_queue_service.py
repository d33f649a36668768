"""
qa_services.work_queue_service -- QA work queue aggregation.

Responsibility:
    Fetch each work queue signal source through ``WorkQueueSelector``,
    normalize its signals with the pure work queue engine, and merge the
    results into one ranked, filterable list with a recomputed summary.

Architecture position:
    Services -- imperative shell over kernel selectors and pure engines.
    Reads "now" from the injected clock once per call.

Invariants enforced:
    - Source isolation: a failing source is logged and contributes zero
      items; its siblings still run.  A database error also rolls the
      session back so later sources start on a clean transaction.
    - Sources run in a fixed order, and that order is the tie-break for
      items with equal priority scores.
    - Settings are resolved once per call.

Failure modes:
    - UnknownWorkQueueSourceError if a caller names a source that does not
      exist.
    - Errors resolving settings propagate: they happen before any source
      boundary.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from datetime import datetime, timedelta
from itertools import chain

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from qa_kernel.domain.clock import Clock, SystemClock
from qa_kernel.domain.settings import QASettings
from qa_kernel.domain.work_queue import (
    SourceOutcome,
    WorkQueueFilters,
    WorkQueueItem,
    WorkQueueSummary,
)
from qa_kernel.exceptions import UnknownWorkQueueSourceError
from qa_kernel.logging_config import LogContext, get_logger
from qa_kernel.selectors.settings_selector import SettingsSelector
from qa_kernel.selectors.work_queue_selector import WorkQueueSelector

from qa_engines.work_queue import (
    assemble_queue,
    conditional_expiry_items,
    document_expiry_items,
    missing_document_items,
    override_followup_items,
    pending_override_items,
    stale_draft_items,
    summarize_queue,
    supplier_review_items,
)

logger = get_logger("services.work_queue")

SOURCE_PENDING_OVERRIDES = "pending_overrides"
SOURCE_OVERRIDE_FOLLOWUPS = "override_followups"
SOURCE_MATERIAL_DOCUMENT_EXPIRY = "material_document_expiry"
SOURCE_SUPPLIER_DOCUMENT_EXPIRY = "supplier_document_expiry"
SOURCE_MISSING_MATERIAL_DOCUMENTS = "missing_material_documents"
SOURCE_MISSING_SUPPLIER_DOCUMENTS = "missing_supplier_documents"
SOURCE_CONDITIONAL_EXPIRY = "conditional_expiry"
SOURCE_STALE_DRAFTS = "stale_drafts"
SOURCE_SUPPLIER_REVIEWS = "supplier_reviews"

SOURCE_ORDER: tuple[str, ...] = (
    SOURCE_PENDING_OVERRIDES,
    SOURCE_OVERRIDE_FOLLOWUPS,
    SOURCE_MATERIAL_DOCUMENT_EXPIRY,
    SOURCE_SUPPLIER_DOCUMENT_EXPIRY,
    SOURCE_MISSING_MATERIAL_DOCUMENTS,
    SOURCE_MISSING_SUPPLIER_DOCUMENTS,
    SOURCE_CONDITIONAL_EXPIRY,
    SOURCE_STALE_DRAFTS,
    SOURCE_SUPPLIER_REVIEWS,
)

SourceFetcher = Callable[[QASettings, datetime], Sequence[WorkQueueItem]]


class WorkQueueService:
    """Builds the QA work queue from all signal sources.

    Contract:
        - ``collect()`` returns one SourceOutcome per source, in order.
        - ``build_queue()`` de-duplicates, ranks and filters the items.
        - ``summary()`` recomputes counts over the unfiltered queue.

    Non-goals:
        - Does NOT cache results; every call reads current state.
        - Does NOT modify any data.
    """

    def __init__(self, session: Session, clock: Clock | None = None) -> None:
        self._session = session
        self._clock = clock or SystemClock()
        self._settings = SettingsSelector(session)
        self._selector = WorkQueueSelector(session)
        self._sources: dict[str, SourceFetcher] = {
            SOURCE_PENDING_OVERRIDES: self._pending_overrides,
            SOURCE_OVERRIDE_FOLLOWUPS: self._override_followups,
            SOURCE_MATERIAL_DOCUMENT_EXPIRY: self._material_document_expiry,
            SOURCE_SUPPLIER_DOCUMENT_EXPIRY: self._supplier_document_expiry,
            SOURCE_MISSING_MATERIAL_DOCUMENTS: self._missing_material_documents,
            SOURCE_MISSING_SUPPLIER_DOCUMENTS: self._missing_supplier_documents,
            SOURCE_CONDITIONAL_EXPIRY: self._conditional_expiry,
            SOURCE_STALE_DRAFTS: self._stale_drafts,
            SOURCE_SUPPLIER_REVIEWS: self._supplier_reviews,
        }

    @property
    def source_names(self) -> tuple[str, ...]:
        return SOURCE_ORDER

    # -- Public API --------------------------------------------------------

    def collect(
        self,
        settings: QASettings | None = None,
        sources: Iterable[str] | None = None,
    ) -> tuple[SourceOutcome, ...]:
        """Run each source in isolation.

        Args:
            settings: Pre-resolved settings; resolved from the store if None.
            sources: Subset of source names to run, in SOURCE_ORDER.  All
                sources when None.

        Raises:
            UnknownWorkQueueSourceError: if ``sources`` names an unknown source.
        """
        selected = self._select_sources(sources)
        settings = settings or self._settings.resolve()
        now = self._clock.now()
        return tuple(self._run_source(name, settings, now) for name in selected)

    def build_queue(
        self,
        filters: WorkQueueFilters | None = None,
        settings: QASettings | None = None,
    ) -> list[WorkQueueItem]:
        """Ranked, filtered work queue."""
        outcomes = self.collect(settings=settings)
        collected = list(chain.from_iterable(outcome.items for outcome in outcomes))
        items = assemble_queue(items=collected, filters=filters)

        failed = [outcome.source for outcome in outcomes if outcome.failed]
        logger.info(
            "work_queue_built",
            extra={
                "collected": len(collected),
                "returned": len(items),
                "failed_sources": failed,
                "filtered": filters is not None and not filters.is_empty,
            },
        )
        return items

    def summary(self, settings: QASettings | None = None) -> WorkQueueSummary:
        """Counts over the full, unfiltered queue."""
        settings = settings or self._settings.resolve()
        items = self.build_queue(settings=settings)
        return summarize_queue(items, lookahead_days=settings.work_queue_lookahead_days)

    # -- Isolation boundary ------------------------------------------------

    def _select_sources(self, sources: Iterable[str] | None) -> tuple[str, ...]:
        if sources is None:
            return SOURCE_ORDER
        requested = set(sources)
        for name in requested:
            if name not in self._sources:
                raise UnknownWorkQueueSourceError(name, list(SOURCE_ORDER))
        return tuple(name for name in SOURCE_ORDER if name in requested)

    def _run_source(self, name: str, settings: QASettings, now: datetime) -> SourceOutcome:
        fetch = self._sources[name]
        with LogContext.bind(source=name):
            try:
                items = tuple(fetch(settings, now))
            except Exception as exc:
                logger.exception(
                    "work_queue_source_failed",
                    extra={"source": name, "error_type": type(exc).__name__},
                )
                if isinstance(exc, SQLAlchemyError):
                    self._session.rollback()
                return SourceOutcome(source=name, error=f"{type(exc).__name__}: {exc}")

            logger.debug(
                "work_queue_source_collected",
                extra={"source": name, "items": len(items)},
            )
            return SourceOutcome(source=name, items=items)

    # -- Sources -----------------------------------------------------------

    def _pending_overrides(self, settings: QASettings, now: datetime) -> list[WorkQueueItem]:
        return pending_override_items(self._selector.pending_overrides(), now.date())

    def _override_followups(self, settings: QASettings, now: datetime) -> list[WorkQueueItem]:
        today = now.date()
        return override_followup_items(self._selector.due_override_followups(today), today)

    def _material_document_expiry(
        self, settings: QASettings, now: datetime,
    ) -> list[WorkQueueItem]:
        horizon = now.date() + timedelta(days=settings.work_queue_lookahead_days)
        return document_expiry_items(
            self._selector.material_document_expiries(horizon), now.date(),
        )

    def _supplier_document_expiry(
        self, settings: QASettings, now: datetime,
    ) -> list[WorkQueueItem]:
        horizon = now.date() + timedelta(days=settings.work_queue_lookahead_days)
        return document_expiry_items(
            self._selector.supplier_document_expiries(horizon), now.date(),
        )

    def _missing_material_documents(
        self, settings: QASettings, now: datetime,
    ) -> list[WorkQueueItem]:
        return missing_document_items(
            self._selector.material_compliance_subjects(),
            self._selector.required_documents("material"),
        )

    def _missing_supplier_documents(
        self, settings: QASettings, now: datetime,
    ) -> list[WorkQueueItem]:
        return missing_document_items(
            self._selector.supplier_compliance_subjects(),
            self._selector.required_documents("supplier"),
        )

    def _conditional_expiry(self, settings: QASettings, now: datetime) -> list[WorkQueueItem]:
        horizon = now + timedelta(days=settings.work_queue_lookahead_days)
        return conditional_expiry_items(self._selector.conditional_approvals(horizon), now.date())

    def _stale_drafts(self, settings: QASettings, now: datetime) -> list[WorkQueueItem]:
        cutoff = now - timedelta(days=settings.stale_draft_threshold_days)
        return stale_draft_items(self._selector.stale_drafts(cutoff), now.date())

    def _supplier_reviews(self, settings: QASettings, now: datetime) -> list[WorkQueueItem]:
        horizon = now.date() + timedelta(days=settings.work_queue_lookahead_days)
        return supplier_review_items(self._selector.supplier_reviews(horizon), now.date())
