"""
Logging configuration utilities for datastore.

This module provides pre-configured logging setups for different environments.
"""
import os
from typing import Any, Dict, Optional

from datastore.exceptions import ConfigurationError

from .logging import LogManager, initialize_logging


class LoggingPresets:
    """Pre-configured logging setups for different environments."""

    @staticmethod
    def development(log_file: Optional[str] = None) -> LogManager:
        """
        Development environment logging: DEBUG, JSON, small rotating file.

        Args:
            log_file: Optional log file path
        """
        return initialize_logging(
            log_level="DEBUG",
            log_format="json",
            log_file=log_file or "logs/datastore_dev.log",
            max_bytes=5 * 1024 * 1024,  # 5MB
            backup_count=3,
            include_correlation_id=True,
            force=True
        )

    @staticmethod
    def production(log_file: Optional[str] = None) -> LogManager:
        """
        Production environment logging: INFO, JSON, larger rotating file.

        Args:
            log_file: Optional log file path
        """
        return initialize_logging(
            log_level="INFO",
            log_format="json",
            log_file=log_file or "logs/datastore_prod.log",
            max_bytes=50 * 1024 * 1024,  # 50MB
            backup_count=10,
            include_correlation_id=True,
            force=True
        )

    @staticmethod
    def testing(log_file: Optional[str] = None) -> LogManager:
        """
        Testing environment logging: WARNING, plain text, console only by default.

        Args:
            log_file: Optional log file path
        """
        return initialize_logging(
            log_level="WARNING",
            log_format="text",
            log_file=log_file,
            max_bytes=1 * 1024 * 1024,  # 1MB
            backup_count=1,
            include_correlation_id=False,
            force=True
        )


def _env_int(name: str, default: str) -> int:
    raw = os.getenv(name, default)
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}", e) from e


def configure_from_environment() -> LogManager:
    """
    Configure logging based on environment variables.

    Environment variables:
    - DATASTORE_LOG_LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    - DATASTORE_LOG_FORMAT: Log format (json, text)
    - DATASTORE_LOG_FILE: Log file path
    - DATASTORE_LOG_MAX_BYTES: Max file size in bytes
    - DATASTORE_LOG_BACKUP_COUNT: Number of backup files
    - DATASTORE_LOG_INCLUDE_CORRELATION_ID: Include correlation IDs (true/false)

    Returns:
        Configured log manager

    Raises:
        ConfigurationError: If a variable holds an invalid value.
    """
    log_level = os.getenv("DATASTORE_LOG_LEVEL", "INFO").upper()
    if log_level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
        raise ConfigurationError(f"Unknown DATASTORE_LOG_LEVEL: {log_level!r}")
    log_format = os.getenv("DATASTORE_LOG_FORMAT", "json").lower()
    if log_format not in ("json", "text"):
        raise ConfigurationError(f"Unknown DATASTORE_LOG_FORMAT: {log_format!r}")

    return initialize_logging(
        log_level=log_level,
        log_format=log_format,
        log_file=os.getenv("DATASTORE_LOG_FILE"),
        max_bytes=_env_int("DATASTORE_LOG_MAX_BYTES", "10485760"),  # 10MB default
        backup_count=_env_int("DATASTORE_LOG_BACKUP_COUNT", "5"),
        include_correlation_id=os.getenv("DATASTORE_LOG_INCLUDE_CORRELATION_ID", "true").lower() == "true",
        force=True
    )


def get_logging_config() -> Dict[str, Any]:
    """
    Get current logging configuration.
    """
    from . import logging as ds_logging

    manager = ds_logging._log_manager
    if manager is None:
        return {"status": "not_initialized"}

    return {
        "status": "initialized",
        "log_level": manager.log_level,
        "log_format": manager.log_format,
        "log_file": manager.log_file,
        "max_bytes": manager.max_bytes,
        "backup_count": manager.backup_count,
        "include_correlation_id": manager.include_correlation_id,
    }
