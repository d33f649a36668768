"""
Module: qa_kernel.models.settings
Responsibility: ORM persistence for tunable QA settings.

Values are stored as JSON so a single table can hold integers (day
thresholds) and mappings (conditional durations).  Typing and defaults are
applied on read by SettingsSelector; the table itself is schemaless per key.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from qa_kernel.db.base import TrackedBase


class QASettingModel(TrackedBase):
    """One named setting."""

    __tablename__ = "qa_settings"

    setting_key: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    setting_value: Mapped[Any] = mapped_column(JSON, nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
