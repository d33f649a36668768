"""
qa_services.admin_service -- Administration of check definitions and settings.

Responsibility:
    Create and edit check definitions, retire them, store setting values and
    seed an empty store from the default catalogue.

Architecture position:
    Services -- imperative shell.  The only writer of
    ``qa_check_definitions`` and ``qa_settings``.

Invariants enforced:
    - Definitions are never deleted; ``deactivate_definition`` clears
      ``is_active`` instead.
    - Writes are flushed, never committed.  The caller owns the transaction.
    - Seeding never overwrites an existing definition or setting.

Failure modes:
    - CheckDefinitionNotFoundError when deactivating an unknown key.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from qa_kernel.domain.checks import CheckDefinition
from qa_kernel.exceptions import CheckDefinitionNotFoundError
from qa_kernel.logging_config import get_logger
from qa_kernel.models.check_definition import QACheckDefinitionModel
from qa_kernel.models.settings import QASettingModel

from qa_config.loader import Catalogue

logger = get_logger("services.qa_admin")


@dataclass(frozen=True)
class SeedResult:
    """What ``seed_catalogue`` inserted."""

    definitions_created: int = 0
    settings_created: int = 0


class QAAdminService:
    """Writes to the check definition store and the settings table."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def _find_definition(self, check_key: str) -> QACheckDefinitionModel | None:
        return self._session.execute(
            select(QACheckDefinitionModel).where(
                QACheckDefinitionModel.check_key == check_key,
            )
        ).scalar_one_or_none()

    def _find_setting(self, key: str) -> QASettingModel | None:
        return self._session.execute(
            select(QASettingModel).where(QASettingModel.setting_key == key)
        ).scalar_one_or_none()

    def upsert_definition(self, definition: CheckDefinition) -> CheckDefinition:
        """Insert a definition or update the one with the same key."""
        row = self._find_definition(definition.check_key)
        created = row is None
        if row is None:
            row = QACheckDefinitionModel(check_key=definition.check_key)
            self._session.add(row)
        row.apply_dto(definition)
        self._session.flush()

        logger.info(
            "check_definition_saved",
            extra={
                "check_key": definition.check_key,
                "tier": definition.tier.value,
                "was_created": created,
                "is_active": definition.is_active,
            },
        )
        return row.to_dto()

    def deactivate_definition(self, check_key: str) -> CheckDefinition:
        """Retire a definition.

        Raises:
            CheckDefinitionNotFoundError: if no definition has ``check_key``.
        """
        row = self._find_definition(check_key)
        if row is None:
            raise CheckDefinitionNotFoundError(check_key)
        if row.is_active:
            row.is_active = False
            self._session.flush()
            logger.info("check_definition_deactivated", extra={"check_key": check_key})
        return row.to_dto()

    def set_setting(self, key: str, value: Any, description: str | None = None) -> None:
        """Store a setting value.  Typing happens on read."""
        row = self._find_setting(key)
        if row is None:
            row = QASettingModel(setting_key=key)
            self._session.add(row)
        row.setting_value = value
        if description is not None:
            row.description = description
        self._session.flush()
        logger.info("setting_saved", extra={"setting_key": key})

    def seed_catalogue(self, catalogue: Catalogue) -> SeedResult:
        """Insert catalogue definitions and settings that are not yet stored."""
        definitions_created = 0
        for definition in catalogue.definitions:
            if self._find_definition(definition.check_key) is not None:
                continue
            row = QACheckDefinitionModel(check_key=definition.check_key)
            row.apply_dto(definition)
            self._session.add(row)
            definitions_created += 1

        settings_created = 0
        for key, value in catalogue.settings.items():
            if self._find_setting(key) is not None:
                continue
            self._session.add(QASettingModel(setting_key=key, setting_value=value))
            settings_created += 1

        self._session.flush()
        logger.info(
            "catalogue_seeded",
            extra={
                "source": catalogue.source,
                "definitions_created": definitions_created,
                "settings_created": settings_created,
            },
        )
        return SeedResult(
            definitions_created=definitions_created,
            settings_created=settings_created,
        )
