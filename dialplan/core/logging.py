"""Shared logging configuration.

Provides JSON-formatted logging for the CLI and the HTTP service. Routing
decisions attach ``route_id``, ``pattern`` and ``classification`` through
``extra`` so they can be filtered without parsing the message text.
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import TextIO

# Attributes copied from the log record when a caller supplies them via extra=
CONTEXT_FIELDS = (
    "request_id",
    "route",
    "remote_addr",
    "route_id",
    "pattern",
    "destination",
    "classification",
)


class JsonFormatter(logging.Formatter):
    """JSON log formatter for structured routing logs."""

    def format(self, record):
        payload = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for k in CONTEXT_FIELDS:
            value = getattr(record, k, None)
            if value is not None:
                payload[k] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def configure_logging(
    log_file: str = None,
    log_level: str = None,
    stream: TextIO = None,
):
    """Configure logging with JSON formatter.

    Args:
        log_file: Path to log file. Defaults to DIALPLAN_LOG_FILE env var;
            no file handler is installed when neither is set.
        log_level: Log level. Defaults to DIALPLAN_LOG_LEVEL env var or 'INFO'.
        stream: Console stream. Defaults to stdout; the CLI passes stderr so
            logs never mix with command output.
    """
    console_handler = logging.StreamHandler(stream or sys.stdout)
    console_handler.setFormatter(JsonFormatter())
    handlers = [console_handler]

    # File handler (always append)
    log_file = log_file or os.getenv("DIALPLAN_LOG_FILE")
    if log_file:
        file_handler = logging.FileHandler(log_file, mode='a')
        file_handler.setFormatter(JsonFormatter())
        handlers.append(file_handler)

    root = logging.getLogger()
    log_level = (log_level or os.getenv("DIALPLAN_LOG_LEVEL", "INFO")).upper()
    root.setLevel(getattr(logging, log_level, logging.INFO))
    root.handlers = handlers
