"""
Tests for the datastore logging system.
"""

import json
import logging
import sys

import pytest

from datastore.cache.store import CacheStore
from datastore.exceptions import ConfigurationError
from datastore.utils import logging as ds_logging
from datastore.utils.logging import (
    StructuredFormatter,
    clear_correlation_id,
    get_adapter,
    get_correlation_id,
    get_logger,
    get_metrics_logger,
    initialize_logging,
    set_correlation_id,
    with_correlation_id,
)
from datastore.utils.logging_config import (
    LoggingPresets,
    configure_from_environment,
    get_logging_config,
)
from tests.mocks.mock_stores import FailingStore


@pytest.fixture(autouse=True)
def reset_logging():
    """Start every test without a log manager and tear down its handlers afterwards."""
    ds_logging._log_manager = None
    yield
    if ds_logging._log_manager is not None:
        ds_logging._log_manager.shutdown()
    ds_logging._log_manager = None
    logging.getLogger("datastore").setLevel(logging.NOTSET)
    clear_correlation_id()


def _read_json_lines(path):
    with open(path, "r") as f:
        return [json.loads(line) for line in f if line.strip()]


class TestLoggingSystem:

    def test_basic_logging_initialization(self, tmp_path):
        log_file = tmp_path / "test.log"
        log_manager = initialize_logging(log_level="DEBUG", log_format="json", log_file=str(log_file))

        assert log_manager.log_level == logging.DEBUG

        logger = get_logger("datastore.test")
        logger.info("Test message", extra={"test_field": "test_value"})

        log_data = _read_json_lines(log_file)[-1]
        assert log_data["level"] == "INFO"
        assert log_data["logger"] == "datastore.test"
        assert log_data["message"] == "Test message"
        assert log_data["test_field"] == "test_value"

    def test_initialize_returns_existing_manager(self):
        first = initialize_logging(log_level="INFO")
        assert initialize_logging(log_level="DEBUG") is first
        assert initialize_logging(log_level="DEBUG", force=True) is not first

    def test_get_logger_without_manager_does_not_configure(self):
        logger = get_logger("datastore.quiet")
        assert ds_logging._log_manager is None
        assert logger.name == "datastore.quiet"

    def test_correlation_id_functionality(self):
        set_correlation_id("test-correlation-123")
        assert get_correlation_id() == "test-correlation-123"

        clear_correlation_id()
        assert get_correlation_id() is None

    def test_correlation_id_context_manager(self):
        set_correlation_id("initial-id")

        with with_correlation_id("context-id") as correlation_id:
            assert correlation_id == "context-id"
            assert get_correlation_id() == "context-id"

        assert get_correlation_id() == "initial-id"

    def test_generated_correlation_id(self):
        with with_correlation_id() as correlation_id:
            assert correlation_id
            assert get_correlation_id() == correlation_id
        assert get_correlation_id() is None

    def test_correlation_id_in_json_output(self, tmp_path):
        log_file = tmp_path / "test.log"
        initialize_logging(log_level="DEBUG", log_file=str(log_file))

        with with_correlation_id("req-42"):
            get_logger("datastore.test").info("Traced")

        assert _read_json_lines(log_file)[-1]["correlation_id"] == "req-42"

    def test_adapter_bind(self, tmp_path):
        log_file = tmp_path / "test.log"
        initialize_logging(log_level="DEBUG", log_file=str(log_file))

        adapter = get_adapter("datastore.test", correlation_id="adapter-id", component="cache")
        adapter.bind(shard=3).info("Bound")

        log_data = _read_json_lines(log_file)[-1]
        assert log_data["component"] == "cache"
        assert log_data["shard"] == 3
        assert log_data["correlation_id"] == "adapter-id"

    def test_exception_formatting(self):
        formatter = StructuredFormatter()
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = logging.getLogger("datastore.test").makeRecord(
                "datastore.test", logging.ERROR, __file__, 1, "Failed", (), exc_info=sys.exc_info()
            )
        log_data = json.loads(formatter.format(record))
        assert log_data["exception"]["type"] == "RuntimeError"
        assert log_data["exception"]["message"] == "boom"

    def test_timestamp_is_utc(self):
        formatter = StructuredFormatter()
        record = logging.getLogger("datastore.test").makeRecord(
            "datastore.test", logging.INFO, __file__, 1, "Epoch", (), None
        )
        record.created = 0.0
        log_data = json.loads(formatter.format(record))
        assert log_data["timestamp"] == "1970-01-01T00:00:00Z"

    def test_text_format(self, tmp_path):
        log_file = tmp_path / "test.log"
        initialize_logging(log_level="INFO", log_format="text", log_file=str(log_file))
        get_logger("datastore.test").warning("Plain message")
        assert "WARNING - Plain message" in log_file.read_text()

    def test_cache_events_are_logged(self, tmp_path):
        log_file = tmp_path / "test.log"
        initialize_logging(log_level="DEBUG", log_file=str(log_file))

        cache = CacheStore(1, FailingStore(fail_on={"save"}))
        cache.put("a", "1")
        cache.get("a")
        cache.put("b", "2")
        cache.close()

        events = [entry.get("event_type") for entry in _read_json_lines(log_file)]
        assert "cache_hit" in events
        assert "eviction" in events
        assert "write_back" in events
        assert "flush" in events

    def test_metrics_logger_without_manager(self):
        metrics = get_metrics_logger()
        assert metrics.logger.name == "datastore.metrics"


class TestLoggingConfig:

    def test_not_initialized(self):
        assert get_logging_config() == {"status": "not_initialized"}

    def test_testing_preset(self):
        LoggingPresets.testing()
        config = get_logging_config()
        assert config["status"] == "initialized"
        assert config["log_level"] == logging.WARNING
        assert config["log_format"] == "text"
        assert config["include_correlation_id"] is False

    def test_development_preset(self, tmp_path):
        log_file = tmp_path / "dev.log"
        LoggingPresets.development(str(log_file))
        config = get_logging_config()
        assert config["log_level"] == logging.DEBUG
        assert config["log_file"] == str(log_file)

    def test_production_preset(self, tmp_path):
        LoggingPresets.production(str(tmp_path / "prod.log"))
        assert get_logging_config()["log_level"] == logging.INFO

    def test_configure_from_environment(self, monkeypatch, tmp_path):
        monkeypatch.setenv("DATASTORE_LOG_LEVEL", "error")
        monkeypatch.setenv("DATASTORE_LOG_FORMAT", "text")
        monkeypatch.setenv("DATASTORE_LOG_FILE", str(tmp_path / "env.log"))
        monkeypatch.setenv("DATASTORE_LOG_BACKUP_COUNT", "2")

        configure_from_environment()
        config = get_logging_config()
        assert config["log_level"] == logging.ERROR
        assert config["log_format"] == "text"
        assert config["backup_count"] == 2

    @pytest.mark.parametrize("name,value", [
        ("DATASTORE_LOG_LEVEL", "LOUD"),
        ("DATASTORE_LOG_FORMAT", "xml"),
        ("DATASTORE_LOG_MAX_BYTES", "big"),
    ])
    def test_configure_from_environment_rejects_bad_values(self, monkeypatch, name, value):
        monkeypatch.setenv(name, value)
        with pytest.raises(ConfigurationError):
            configure_from_environment()
