"""
Structured logging for datastore.

This module provides JSON structured logging, correlation IDs for tracing a
sequence of cache operations, and a metrics logger for cache events.
"""
import logging
import logging.handlers
import sys
import threading
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

import orjson

# Context variable for correlation ID
correlation_id: ContextVar[Optional[str]] = ContextVar('correlation_id', default=None)

_RESERVED_ATTRS = frozenset([
    'name', 'msg', 'args', 'levelname', 'levelno',
    'pathname', 'filename', 'module', 'lineno',
    'funcName', 'created', 'msecs', 'relativeCreated',
    'thread', 'threadName', 'processName', 'process',
    'getMessage', 'exc_info', 'exc_text', 'stack_info',
    'taskName', 'extra_fields', 'correlation_id'
])


class StructuredFormatter(logging.Formatter):
    """
    JSON formatter for log records.

    Every record is rendered as one JSON object with timestamp, level, logger,
    message and source location, plus the correlation ID and any structured
    fields passed through ``extra``.
    """

    def __init__(self, include_correlation_id: bool = True):
        super().__init__()
        self.include_correlation_id = include_correlation_id

    def format(self, record: logging.LogRecord) -> str:
        log_entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if self.include_correlation_id:
            current_correlation_id = correlation_id.get()
            if current_correlation_id:
                log_entry["correlation_id"] = current_correlation_id
            elif getattr(record, 'correlation_id', None):
                log_entry["correlation_id"] = record.correlation_id

        if record.exc_info:
            log_entry["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": self.formatException(record.exc_info)
            }

        if hasattr(record, 'extra_fields'):
            log_entry.update(record.extra_fields)

        for key, value in record.__dict__.items():
            if key.startswith('_') or key in _RESERVED_ATTRS:
                continue
            if isinstance(value, (str, int, float, bool, list, dict, type(None))):
                log_entry[key] = value

        return orjson.dumps(log_entry, default=str).decode("utf-8")


class CorrelationIdFilter(logging.Filter):
    """Log filter that copies the current correlation ID onto each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        current_correlation_id = correlation_id.get()
        if current_correlation_id:
            record.correlation_id = current_correlation_id
        return True


class DataStoreLoggerAdapter(logging.LoggerAdapter):
    """
    Logger adapter that adds a correlation ID and bound structured fields.
    """

    def __init__(self, logger, correlation_id=None, extra_fields=None):
        super().__init__(logger, {})
        self.correlation_id = correlation_id
        self.extra_fields = extra_fields or {}

    def process(self, msg, kwargs):
        if self.correlation_id:
            kwargs.setdefault('extra', {})['correlation_id'] = self.correlation_id

        if self.extra_fields:
            kwargs.setdefault('extra', {})['extra_fields'] = self.extra_fields

        return msg, kwargs

    def bind(self, **kwargs):
        """Create a new adapter with additional context."""
        new_extra_fields = {**self.extra_fields, **kwargs}
        return DataStoreLoggerAdapter(self.logger, self.correlation_id, new_extra_fields)


class MetricsLogger:
    """
    Logger for cache events.
    """

    def __init__(self, logger: logging.Logger):
        self.logger = logger

    def _event(self, level: int, message: str, event_type: str, **fields) -> None:
        self.logger.log(
            level,
            message,
            extra={'extra_fields': {'event_type': event_type, **fields}}
        )

    def log_cache_hit(self, key: str, **kwargs):
        """Log a cache hit."""
        self._event(logging.DEBUG, "Cache hit", 'cache_hit', cache_key=key, **kwargs)

    def log_cache_miss(self, key: str, **kwargs):
        """Log a cache miss."""
        self._event(logging.DEBUG, "Cache miss", 'cache_miss', cache_key=key, **kwargs)

    def log_eviction(self, key: str, dirty: bool, **kwargs):
        """
        Log an eviction.

        Args:
            key: Evicted key
            dirty: Whether the entry needed a write-back
            **kwargs: Additional metadata
        """
        self._event(logging.DEBUG, "Cache eviction", 'eviction', cache_key=key, dirty=dirty, **kwargs)

    def log_write_back(self, key: str, success: bool, **kwargs):
        """Log the outcome of a write-back on eviction."""
        level = logging.DEBUG if success else logging.ERROR
        self._event(level, "Write-back", 'write_back', cache_key=key, success=success, **kwargs)

    def log_flush(self, entry_count: int, success: bool, **kwargs):
        """Log the outcome of a flush of all dirty entries."""
        level = logging.INFO if success else logging.ERROR
        self._event(level, "Flush", 'flush', entry_count=entry_count, success=success, **kwargs)


class LogManager:
    """
    Thread-safe centralized log manager for datastore.

    Configures the ``datastore`` logger hierarchy with a console handler and
    an optional rotating file handler.
    """

    def __init__(self,
                 log_level: str = "INFO",
                 log_format: str = "json",
                 log_file: Optional[str] = None,
                 max_bytes: int = 10 * 1024 * 1024,  # 10MB
                 backup_count: int = 5,
                 include_correlation_id: bool = True):
        """
        Initialize the log manager.

        Args:
            log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            log_format: Log format ('json' or 'text')
            log_file: Path to log file (optional)
            max_bytes: Maximum size of log file before rotation
            backup_count: Number of backup files to keep
            include_correlation_id: Whether to include correlation IDs
        """
        self.log_level = getattr(logging, log_level.upper())
        self.log_format = log_format
        self.log_file = log_file
        self.max_bytes = max_bytes
        self.backup_count = backup_count
        self.include_correlation_id = include_correlation_id

        self._lock = threading.RLock()
        self._initialized = False
        self._loggers = {}

        self._safe_initialize()

        self.logger = self.get_logger("datastore")
        self.metrics = MetricsLogger(self.get_logger("datastore.metrics"))

    def _safe_initialize(self):
        with self._lock:
            if not self._initialized:
                try:
                    self._configure_package_logger()
                finally:
                    self._initialized = True

    def _configure_package_logger(self):
        package_logger = logging.getLogger("datastore")
        package_logger.setLevel(self.log_level)

        for handler in package_logger.handlers[:]:
            package_logger.removeHandler(handler)

        if self.log_format == "json":
            formatter = StructuredFormatter(self.include_correlation_id)
        else:
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(self.log_level)
        console_handler.setFormatter(formatter)
        if self.include_correlation_id:
            console_handler.addFilter(CorrelationIdFilter())
        package_logger.addHandler(console_handler)

        if self.log_file:
            try:
                Path(self.log_file).parent.mkdir(parents=True, exist_ok=True)
                file_handler = logging.handlers.RotatingFileHandler(
                    self.log_file,
                    maxBytes=self.max_bytes,
                    backupCount=self.backup_count
                )
                file_handler.setLevel(self.log_level)
                file_handler.setFormatter(formatter)
                if self.include_correlation_id:
                    file_handler.addFilter(CorrelationIdFilter())
                package_logger.addHandler(file_handler)
            except OSError as e:
                package_logger.error(f"Failed to configure file logging: {e}")

    def get_logger(self, name: str) -> logging.Logger:
        with self._lock:
            if name not in self._loggers:
                self._loggers[name] = logging.getLogger(name)
            return self._loggers[name]

    def get_adapter(self, name: str, correlation_id: Optional[str] = None, **extra_fields) -> DataStoreLoggerAdapter:
        return DataStoreLoggerAdapter(self.get_logger(name), correlation_id, extra_fields)

    def shutdown(self):
        """Detach and close the handlers this manager installed."""
        package_logger = logging.getLogger("datastore")
        for handler in package_logger.handlers[:]:
            package_logger.removeHandler(handler)
            handler.close()


# Global log manager instance
_log_manager: Optional[LogManager] = None
_log_manager_lock = threading.RLock()


def initialize_logging(
    log_level: str = "INFO",
    log_format: str = "json",
    log_file: Optional[str] = None,
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 5,
    include_correlation_id: bool = True,
    force: bool = False
) -> LogManager:
    """
    Initialize the logging system for the ``datastore`` logger hierarchy.

    Calling it again returns the existing manager unless ``force`` is set, in
    which case handlers are rebuilt with the new settings.

    Returns:
        Configured log manager instance
    """
    global _log_manager

    with _log_manager_lock:
        if _log_manager is not None and force:
            _log_manager.shutdown()
            _log_manager = None
        if _log_manager is None:
            _log_manager = LogManager(
                log_level=log_level,
                log_format=log_format,
                log_file=log_file,
                max_bytes=max_bytes,
                backup_count=backup_count,
                include_correlation_id=include_correlation_id
            )

    return _log_manager


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger with the specified name.

    Does not configure handlers; library modules log through the standard
    hierarchy until the application calls :func:`initialize_logging`.
    """
    with _log_manager_lock:
        if _log_manager is None:
            return logging.getLogger(name)
        return _log_manager.get_logger(name)


def get_adapter(name: str, correlation_id: Optional[str] = None, **extra_fields) -> DataStoreLoggerAdapter:
    """Get a logger adapter with correlation ID and extra fields."""
    return DataStoreLoggerAdapter(get_logger(name), correlation_id, extra_fields)


def get_metrics_logger() -> MetricsLogger:
    """Get the metrics logger."""
    with _log_manager_lock:
        if _log_manager is None:
            return MetricsLogger(logging.getLogger("datastore.metrics"))
        return _log_manager.metrics


def set_correlation_id(correlation_id_value: str):
    correlation_id.set(correlation_id_value)


def get_correlation_id() -> Optional[str]:
    return correlation_id.get()


def clear_correlation_id():
    correlation_id.set(None)


class CorrelationIdContext:
    """
    Context manager for correlation ID management.
    """

    def __init__(self, correlation_id_value: Optional[str] = None):
        self.correlation_id_value = correlation_id_value or str(uuid.uuid4())
        self._token = None

    def __enter__(self):
        self._token = correlation_id.set(self.correlation_id_value)
        return self.correlation_id_value

    def __exit__(self, exc_type, exc_val, exc_tb):
        correlation_id.reset(self._token)


def with_correlation_id(correlation_id_value: Optional[str] = None):
    """
    Create a correlation ID context (auto-generated ID if None).
    """
    return CorrelationIdContext(correlation_id_value)
