"""
Logging Configuration

Provides:
- CustomJsonFormatter: one JSON object per line, stamped with the run context
- setup_logging: dictConfig from a YAML file with ${VAR} substitution
"""

import json
import logging
import logging.config
import os
import string
from datetime import datetime, timezone
from typing import Optional

import yaml

from .request_context import get_activation_id, get_run_id

# LogRecord attributes that are not user supplied ``extra`` fields.
_STANDARD_ATTRS = frozenset(
    {
        "args",
        "asctime",
        "created",
        "exc_info",
        "exc_text",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "message",
        "msg",
        "name",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "taskName",
        "thread",
        "threadName",
    }
)


class CustomJsonFormatter(logging.Formatter):
    """
    JSON formatter for action logs.

    Fields:
      - _time: ISO8601 timestamp (millisecond precision)
      - level: Log level
      - logger: Logger name (e.g. ingest.pipeline)
      - message: Log message
      - run_id / activation_id: run context, when bound
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "_time": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(
                timespec="milliseconds"
            ),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        run_id = getattr(record, "run_id", None) or get_run_id()
        if run_id:
            log_data["run_id"] = run_id
        activation_id = getattr(record, "activation_id", None) or get_activation_id()
        if activation_id:
            log_data["activation_id"] = activation_id

        for key, value in record.__dict__.items():
            if key not in _STANDARD_ATTRS and not key.startswith("_") and key not in log_data:
                log_data[key] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, ensure_ascii=False, default=str)


def setup_logging(config_path: str, log_level: Optional[str] = None):
    """
    Load the YAML config, substitute environment variables, and initialize logging.

    ``${LOG_LEVEL}`` in the file resolves to ``log_level`` when given, then to
    the environment, then to INFO.
    """
    level = log_level or os.environ.get("LOG_LEVEL", "INFO")

    if not os.path.exists(config_path):
        logging.basicConfig(level=level)
        return

    with open(config_path, "r", encoding="utf-8") as f:
        template = string.Template(f.read())

    mapping = os.environ.copy()
    mapping["LOG_LEVEL"] = level

    config = yaml.safe_load(template.safe_substitute(mapping))
    logging.config.dictConfig(config)
