"""
Structured JSON logging for condition-log

This module provides consistent structured logging across the application
using python-json-logger for easy parsing and analysis.
"""
import logging
import os
import sys
import time
from pathlib import Path

from pythonjsonlogger import jsonlogger

DEFAULT_LOGGER_NAME = "condition_log"

# Log level mapping
LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """
    Custom JSON formatter that adds additional context fields

    Adds: timestamp, level, logger_name, and custom fields
    """

    def add_fields(self, log_record: dict, record: logging.LogRecord, message_dict: dict) -> None:
        """
        Add custom fields to log record

        Args:
            log_record: Log record dictionary
            record: LogRecord object
            message_dict: Message dictionary
        """
        super().add_fields(log_record, record, message_dict)

        if not log_record.get("timestamp"):
            log_record["timestamp"] = self.formatTime(record, self.datefmt)

        if log_record.get("level"):
            log_record["level"] = log_record["level"].upper()
        else:
            log_record["level"] = record.levelname

        log_record["logger"] = record.name
        log_record["module"] = record.module
        log_record["function"] = record.funcName

        # Identity generation and submissions run on worker threads
        log_record["process_id"] = record.process
        log_record["thread_name"] = record.threadName


def _build_formatter(format_type: str) -> logging.Formatter:
    if format_type == "json":
        return CustomJsonFormatter(
            fmt="%(timestamp)s %(level)s %(logger)s %(module)s %(function)s %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
    # Text format for local development
    return logging.Formatter(
        fmt="%(asctime)s - %(name)s - %(levelname)s - %(module)s:%(funcName)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def setup_logger(
    name: str = DEFAULT_LOGGER_NAME,
    level: str | None = None,
    format_type: str = "json",
    log_file: str | Path | None = None,
) -> logging.Logger:
    """
    Setup and configure a logger

    Module loggers below ``name`` (condition_log.storage.json_store, ...)
    propagate into the handlers installed here.

    Args:
        name: Logger name
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_type: "json" or "text"
        log_file: Optional path of a file that also receives every log line

    Returns:
        Configured logger instance
    """
    log_level_str = level or os.getenv("LOG_LEVEL", "INFO")
    log_level = LOG_LEVELS.get(log_level_str.upper(), logging.INFO)

    logger = logging.getLogger(name)
    logger.setLevel(log_level)

    # Remove existing handlers to avoid duplicates
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = _build_formatter(format_type)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    for handler in handlers:
        handler.setLevel(log_level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    # Prevent propagation to root logger
    logger.propagate = False

    return logger


class log_operation:
    """
    Context manager for logging operation duration

    Usage:
        with log_operation("Persisting record", logger=logger, record_id="123"):
            # do work
            pass
    """

    def __init__(self, operation_name: str, logger: logging.Logger | None = None, **extra_fields):
        """
        Initialize operation logger

        Args:
            operation_name: Name of the operation
            logger: Logger instance (uses the package logger if None)
            **extra_fields: Additional fields to include in logs
        """
        self.operation_name = operation_name
        self.logger = logger or logging.getLogger(DEFAULT_LOGGER_NAME)
        self.extra_fields = extra_fields
        self.start_time = None

    def __enter__(self):
        """Start operation"""
        self.start_time = time.monotonic()
        self.logger.info(
            f"Starting: {self.operation_name}",
            extra={"operation": self.operation_name, **self.extra_fields}
        )
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """End operation"""
        duration = time.monotonic() - self.start_time

        if exc_type is None:
            self.logger.info(
                f"Completed: {self.operation_name}",
                extra={
                    "operation": self.operation_name,
                    "duration_seconds": round(duration, 3),
                    "status": "success",
                    **self.extra_fields
                }
            )
        else:
            self.logger.error(
                f"Failed: {self.operation_name}",
                extra={
                    "operation": self.operation_name,
                    "duration_seconds": round(duration, 3),
                    "status": "error",
                    "error_type": exc_type.__name__,
                    "error_message": str(exc_val),
                    **self.extra_fields
                },
                exc_info=(exc_type, exc_val, exc_tb)
            )
        return False  # Don't suppress exceptions
