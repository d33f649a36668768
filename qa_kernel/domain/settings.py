"""
QA settings (``qa_kernel.domain.settings``).

Responsibility
--------------
Typed configuration resolved once per request from the settings provider.
Every setting has a hard-coded default; a missing or unusable stored value
is never an error.

Recognized settings
-------------------
==================================  =====  ==========================================
Key                                 Type   Effect
==================================  =====  ==========================================
document_expiry_warning_days        int    "expiring soon" window for material
                                           checks (default 30)
work_queue_lookahead_days           int    horizon for document-expiry, review
                                           and conditional-expiry items (default 45)
stale_draft_threshold_days          int    inactivity threshold for stale drafts
                                           (default 30)
conditional_duration_materials      dict   category -> days of conditional approval
conditional_duration_entities       dict   entity kind -> days of conditional approval
==================================  =====  ==========================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

DOCUMENT_EXPIRY_WARNING_DAYS = "document_expiry_warning_days"
WORK_QUEUE_LOOKAHEAD_DAYS = "work_queue_lookahead_days"
STALE_DRAFT_THRESHOLD_DAYS = "stale_draft_threshold_days"
CONDITIONAL_DURATION_MATERIALS = "conditional_duration_materials"
CONDITIONAL_DURATION_ENTITIES = "conditional_duration_entities"

DEFAULT_CONDITIONAL_DURATION_DAYS = 30

DEFAULT_MATERIAL_DURATIONS: Mapping[str, int] = MappingProxyType({
    "Ingredients": 14,
    "Packaging": 30,
    "Boxes": 30,
    "Chemical": 21,
    "Supplies": 45,
    "Maintenance": 45,
    "Direct Sale": 14,
})

DEFAULT_ENTITY_DURATIONS: Mapping[str, int] = MappingProxyType({
    "suppliers": 30,
    "products": 14,
    "production_lots": 7,
})


def coerce_setting(value: Any, default: Any) -> Any:
    """Coerce a stored setting value to the type of ``default``.

    Raises:
        ValueError / TypeError: if the value cannot be coerced.  Callers
        decide whether to fall back to the default.
    """
    if value is None:
        return default
    if isinstance(default, bool):
        if isinstance(value, str):
            return value.strip().lower() in ("1", "true", "yes", "on")
        return bool(value)
    if isinstance(default, int):
        if isinstance(value, bool):
            raise TypeError(f"Expected an integer, got {value!r}")
        if isinstance(value, float) and not value.is_integer():
            raise ValueError(f"Expected a whole number, got {value!r}")
        return int(str(value).strip()) if isinstance(value, str) else int(value)
    if isinstance(default, Mapping):
        if not isinstance(value, Mapping):
            raise TypeError(f"Expected a mapping, got {type(value).__name__}")
        return {str(k): int(v) for k, v in value.items()}
    if isinstance(default, str):
        return str(value)
    return value


@dataclass(frozen=True)
class QASettings:
    """Resolved, typed QA settings for one request."""

    document_expiry_warning_days: int = 30
    work_queue_lookahead_days: int = 45
    stale_draft_threshold_days: int = 30
    conditional_duration_materials: Mapping[str, int] = field(
        default_factory=lambda: dict(DEFAULT_MATERIAL_DURATIONS)
    )
    conditional_duration_entities: Mapping[str, int] = field(
        default_factory=lambda: dict(DEFAULT_ENTITY_DURATIONS)
    )

    def conditional_duration_days(
        self,
        entity_kind: str,
        category: str | None = None,
    ) -> int:
        """Days a conditional approval lasts for this kind of entity."""
        if entity_kind in ("material", "materials"):
            if category and category in self.conditional_duration_materials:
                return self.conditional_duration_materials[category]
            return DEFAULT_CONDITIONAL_DURATION_DAYS
        return self.conditional_duration_entities.get(
            entity_kind, DEFAULT_CONDITIONAL_DURATION_DAYS,
        )


def default_setting_values() -> dict[str, Any]:
    """Defaults keyed by setting key, as a settings store would hold them."""
    defaults = QASettings()
    return {
        DOCUMENT_EXPIRY_WARNING_DAYS: defaults.document_expiry_warning_days,
        WORK_QUEUE_LOOKAHEAD_DAYS: defaults.work_queue_lookahead_days,
        STALE_DRAFT_THRESHOLD_DAYS: defaults.stale_draft_threshold_days,
        CONDITIONAL_DURATION_MATERIALS: dict(defaults.conditional_duration_materials),
        CONDITIONAL_DURATION_ENTITIES: dict(defaults.conditional_duration_entities),
    }
