"""Unit tests for settings and logging configuration."""

import structlog
import structlog.testing

from shelfwise.config import (
    bind_log_context,
    configure_logging,
    get_logger,
    get_settings,
    reset_settings,
)
from shelfwise.config.logging import add_app_context


class TestSettings:
    def test_defaults(self, tmp_path):
        settings = get_settings()

        assert settings.llm.model_name == "llama3.2"
        assert settings.llm.max_retries == 1
        assert settings.ocr.language == "eng"
        assert settings.inventory.csv_decrement_mode == "append"
        assert settings.thresholds.review_threshold == 0.9
        assert settings.storage.db_path.parent == tmp_path / "data"
        assert settings.storage.upload_dir.parent == tmp_path / "data"

    def test_cached(self):
        assert get_settings() is get_settings()

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("RECON_MARGIN_FLOOR", "20")
        monkeypatch.setenv("INVENTORY_CSV_DECREMENT_MODE", "in_place")
        monkeypatch.setenv("LLM_MODEL_NAME", "qwen2.5")
        reset_settings()

        settings = get_settings()

        assert settings.thresholds.margin_floor == 20.0
        assert settings.inventory.csv_decrement_mode == "in_place"
        assert settings.llm.model_name == "qwen2.5"


class TestLogging:
    def test_console_renderer_in_development(self):
        configure_logging()

        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)
        assert add_app_context in processors

    def test_json_renderer_outside_development(self, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "production")
        reset_settings()

        configure_logging()

        assert isinstance(structlog.get_config()["processors"][-1], structlog.processors.JSONRenderer)

    def test_app_context(self):
        event = add_app_context(None, "info", {"event": "invoice_pipeline_started"})

        assert event["app"] == "Shelfwise"
        assert event["environment"] == "development"

    def test_get_logger_emits(self):
        with structlog.testing.capture_logs() as logs:
            get_logger("shelfwise.test").info("catalog_match_complete", matched=2)

        assert logs[0]["event"] == "catalog_match_complete"
        assert logs[0]["matched"] == 2

    def test_bind_log_context_scopes_identifiers(self):
        structlog.contextvars.clear_contextvars()

        with bind_log_context(store_id="store-1", invoice_id="inv-1", user_id=None):
            bound = structlog.contextvars.get_contextvars()

        assert bound == {"store_id": "store-1", "invoice_id": "inv-1"}
        assert structlog.contextvars.get_contextvars() == {}

    def test_bound_identifiers_reach_events(self):
        structlog.contextvars.clear_contextvars()
        capture = structlog.testing.LogCapture()
        structlog.configure(processors=[structlog.contextvars.merge_contextvars, capture])

        with bind_log_context(store_id="store-1", invoice_id="inv-1"):
            get_logger("shelfwise.test").info("confirm_invoice_started")

        assert capture.entries[0]["store_id"] == "store-1"
        assert capture.entries[0]["invoice_id"] == "inv-1"

    def teardown_method(self):
        structlog.reset_defaults()
