"""Diagnostic logging configuration."""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

ROOT_LOGGER_NAME = "mqtt_pubsub"


class JSONFormatter(logging.Formatter):
    """Format logs as JSON for machine consumption."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
        }

        # Add exception info if present
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        # Add extra fields from record
        if hasattr(record, "extra_fields"):
            log_data.update(record.extra_fields)

        return json.dumps(log_data)


class ConsoleFormatter(logging.Formatter):
    """Format logs the way command-line tools report problems: ``error: ...``."""

    def format(self, record: logging.LogRecord) -> str:
        text = f"{record.levelname.lower()}: {record.getMessage()}"
        if hasattr(record, "extra_fields"):
            fields = ", ".join(f"{k}={v}" for k, v in record.extra_fields.items())
            text = f"{text} ({fields})"
        if record.exc_info:
            text = f"{text}\n{self.formatException(record.exc_info)}"
        return text


def redact_sensitive(data: Dict[str, Any]) -> Dict[str, Any]:
    """Remove sensitive information from log data."""
    sensitive_keys = ["password", "pin", "token", "authorization", "auth"]
    return {
        k: "***REDACTED***" if k.lower() in sensitive_keys and v is not None else v
        for k, v in data.items()
    }


def configure_logging(verbose: bool = False, json_format: bool = False) -> logging.Logger:
    """
    Route diagnostics of all package loggers to stderr.

    Called once per tool invocation. Handlers installed by an earlier call are
    replaced so the stream always points at the current ``sys.stderr``.
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(logging.DEBUG if verbose else logging.WARNING)
    root.propagate = False

    for handler in list(root.handlers):
        root.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(JSONFormatter() if json_format else ConsoleFormatter())
    root.addHandler(console_handler)

    return root


def get_logger(name: str) -> logging.Logger:
    """Get a logger below the package root so it shares its handler."""
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)
