"""
Tests for configuration and structured logging
"""

import json
import logging
import pytest

from ledger_api.config import LedgerConfig, get_config, reload_config
from ledger_api.logging_config import JSONFormatter, setup_logging, log_action
from ledger_api.store import LedgerStore
from ledger_api.transactions import TransactionRequest
from ledger_api.exceptions import InsufficientFundsError


class TestLedgerConfig:
    """Test environment-based configuration"""

    def test_defaults(self):
        config = LedgerConfig()
        assert config.log_format == "json"
        assert config.transaction_date_format == "%Y-%m-%d %H:%M:%S"

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("LEDGER_API_PORT", "9123")
        monkeypatch.setenv("LEDGER_LOG_LEVEL", "DEBUG")

        config = reload_config()
        try:
            assert config.api_port == 9123
            assert config.log_level == "DEBUG"
            assert get_config() is config
        finally:
            monkeypatch.undo()
            reload_config()


class TestStructuredLogging:
    """Test JSON log records"""

    def test_json_formatter_fields(self):
        record = logging.LogRecord("ledger.test", logging.INFO, __file__, 1, "hello", (), None)
        record.action = "create_account"
        record.extra = {"initial_balance": "100"}

        entry = json.loads(JSONFormatter().format(record))

        assert entry["level"] == "INFO"
        assert entry["logger"] == "ledger.test"
        assert entry["message"] == "hello"
        assert entry["action"] == "create_account"
        assert entry["extra"] == {"initial_balance": "100"}
        assert "resource" not in entry

    def test_setup_logging_text_format(self):
        settings = LedgerConfig(log_level="warning", log_format="text")
        logger = setup_logging(settings, logger_name="ledger_test_text")

        assert logger.level == logging.WARNING
        assert len(logger.handlers) == 1
        assert not isinstance(logger.handlers[0].formatter, JSONFormatter)
        assert logger.propagate is False

    def test_setup_logging_replaces_handlers(self):
        setup_logging(logger_name="ledger_test_json")
        logger = setup_logging(logger_name="ledger_test_json")

        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0].formatter, JSONFormatter)

    def test_log_action_respects_level(self, caplog):
        logger = logging.getLogger("ledger.test.level")
        logger.setLevel(logging.WARNING)

        with caplog.at_level(logging.WARNING, logger="ledger.test.level"):
            log_action(logger, "info", "dropped")
            log_action(logger, "warning", "kept", action="check")

        assert [r.getMessage() for r in caplog.records] == ["kept"]
        assert caplog.records[0].action == "check"

    def test_store_logs_actions(self, caplog):
        store = LedgerStore()

        with caplog.at_level(logging.INFO, logger="ledger.store"):
            store.create_account(1, 10)
            with pytest.raises(InsufficientFundsError):
                store.apply_transaction(TransactionRequest.withdrawal(1, -20))

        actions = [(r.levelname, getattr(r, "action", None)) for r in caplog.records]
        assert ("INFO", "create_account") in actions
        assert ("WARNING", "apply_transaction") in actions

    def test_log_action_renders_event_json(self):
        """Test a ledger event comes out as one JSON line with its details"""
        logger = logging.getLogger("ledger.test.json")
        logger.propagate = False
        logger.setLevel(logging.INFO)
        lines = []

        class Collect(logging.Handler):
            def emit(self, record):
                lines.append(self.format(record))

        handler = Collect()
        handler.setFormatter(JSONFormatter())
        logger.addHandler(handler)
        try:
            log_action(logger, "info", "Account created: 3", action="create_account",
                       resource="account:3", extra={"initial_balance": "10"})
            log_action(logger, "info", "plain")
        finally:
            logger.removeHandler(handler)

        first, second = [json.loads(line) for line in lines]
        assert first["resource"] == "account:3"
        assert first["extra"] == {"initial_balance": "10"}
        assert "timestamp" in first
        assert set(second) == {"timestamp", "level", "logger", "message"}
