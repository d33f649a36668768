"""
Tests for the settings provider: typed reads with fallback defaults.
"""

from qa_kernel.selectors import SettingsSelector
from tests.factories import add_setting


class TestGetSetting:
    def test_missing_row_returns_default(self, db_session):
        assert SettingsSelector(db_session).get_setting("work_queue_lookahead_days", 45) == 45

    def test_stored_value_coerced_to_default_type(self, db_session):
        add_setting(db_session, "work_queue_lookahead_days", "60")
        assert SettingsSelector(db_session).get_setting("work_queue_lookahead_days", 45) == 60

    def test_null_value_returns_default(self, db_session):
        add_setting(db_session, "stale_draft_threshold_days", None)
        assert SettingsSelector(db_session).get_setting("stale_draft_threshold_days", 30) == 30

    def test_uncoercible_value_logs_and_falls_back(self, db_session, captured_logs):
        add_setting(db_session, "document_expiry_warning_days", "a month")
        assert SettingsSelector(db_session).get_setting("document_expiry_warning_days", 30) == 30

        [warning] = [r for r in captured_logs() if r["message"] == "setting_value_invalid"]
        assert warning["level"] == "WARNING"
        assert warning["setting_key"] == "document_expiry_warning_days"


class TestResolve:
    def test_empty_store_gives_defaults(self, db_session):
        settings = SettingsSelector(db_session).resolve()
        assert settings.document_expiry_warning_days == 30
        assert settings.work_queue_lookahead_days == 45
        assert settings.stale_draft_threshold_days == 30
        assert settings.conditional_duration_days("suppliers") == 30

    def test_stored_values_override_defaults(self, db_session):
        add_setting(db_session, "document_expiry_warning_days", 14)
        add_setting(db_session, "conditional_duration_entities", {"products": 3})
        settings = SettingsSelector(db_session).resolve()
        assert settings.document_expiry_warning_days == 14
        assert settings.conditional_duration_days("products") == 3
        assert settings.conditional_duration_days("production_lots") == 7

    def test_invalid_mapping_falls_back(self, db_session):
        add_setting(db_session, "conditional_duration_materials", [14, 30])
        settings = SettingsSelector(db_session).resolve()
        assert settings.conditional_duration_days("materials", "Ingredients") == 14

    def test_boolean_is_not_a_day_count(self, db_session):
        add_setting(db_session, "work_queue_lookahead_days", True)
        assert SettingsSelector(db_session).resolve().work_queue_lookahead_days == 45
