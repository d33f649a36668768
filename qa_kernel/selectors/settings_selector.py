"""
Module: qa_kernel.selectors.settings_selector
Responsibility: The Settings Provider.  Reads named settings with a typed
    fallback default and resolves the full ``QASettings`` once per request.

Failure modes:
    - A missing row, a null value or a value that cannot be coerced to the
      default's type all yield the default.  Coercion failures are logged
      at WARNING (``setting_value_invalid``) and never raised.
    - Database errors propagate unmodified.
"""

from typing import Any

from sqlalchemy import select

from qa_kernel.domain.settings import (
    CONDITIONAL_DURATION_ENTITIES,
    CONDITIONAL_DURATION_MATERIALS,
    DOCUMENT_EXPIRY_WARNING_DAYS,
    STALE_DRAFT_THRESHOLD_DAYS,
    WORK_QUEUE_LOOKAHEAD_DAYS,
    QASettings,
    coerce_setting,
)
from qa_kernel.logging_config import get_logger
from qa_kernel.models.settings import QASettingModel
from qa_kernel.selectors.base import BaseSelector

logger = get_logger("selectors.settings")


class SettingsSelector(BaseSelector):
    """Typed access to the ``qa_settings`` table."""

    def raw_values(self) -> dict[str, Any]:
        """All stored settings keyed by setting_key (untyped)."""
        rows = self.session.execute(select(QASettingModel)).scalars().all()
        return {row.setting_key: row.setting_value for row in rows}

    def get_setting(self, key: str, default: Any) -> Any:
        """Stored value for ``key`` coerced to ``type(default)``, else ``default``."""
        row = self.session.execute(
            select(QASettingModel).where(QASettingModel.setting_key == key)
        ).scalar_one_or_none()
        if row is None:
            return default
        return _coerce_or_default(key, row.setting_value, default)

    def resolve(self) -> QASettings:
        """Resolve every recognized setting into one typed snapshot."""
        stored = self.raw_values()
        defaults = QASettings()

        def value(key: str, default: Any) -> Any:
            if key not in stored:
                return default
            return _coerce_or_default(key, stored[key], default)

        materials = dict(defaults.conditional_duration_materials)
        materials.update(value(CONDITIONAL_DURATION_MATERIALS, {}))
        entities = dict(defaults.conditional_duration_entities)
        entities.update(value(CONDITIONAL_DURATION_ENTITIES, {}))

        settings = QASettings(
            document_expiry_warning_days=value(
                DOCUMENT_EXPIRY_WARNING_DAYS, defaults.document_expiry_warning_days,
            ),
            work_queue_lookahead_days=value(
                WORK_QUEUE_LOOKAHEAD_DAYS, defaults.work_queue_lookahead_days,
            ),
            stale_draft_threshold_days=value(
                STALE_DRAFT_THRESHOLD_DAYS, defaults.stale_draft_threshold_days,
            ),
            conditional_duration_materials=materials,
            conditional_duration_entities=entities,
        )
        logger.debug(
            "settings_resolved",
            extra={
                "document_expiry_warning_days": settings.document_expiry_warning_days,
                "work_queue_lookahead_days": settings.work_queue_lookahead_days,
                "stale_draft_threshold_days": settings.stale_draft_threshold_days,
                "stored_keys": sorted(stored),
            },
        )
        return settings


def _coerce_or_default(key: str, value: Any, default: Any) -> Any:
    try:
        return coerce_setting(value, default)
    except (TypeError, ValueError) as exc:
        logger.warning(
            "setting_value_invalid",
            extra={"setting_key": key, "stored_value": repr(value), "error": str(exc)},
        )
        return default
