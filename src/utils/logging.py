"""Structured JSON logging configuration."""

import json
import logging
from datetime import datetime, timezone
from typing import Any

SERVICE_NAME = 'user-accounts'

# LogRecord attributes that are not caller-supplied `extra` fields
_STANDARD_ATTRS = frozenset(
    vars(logging.LogRecord('', logging.INFO, '', 0, '', None, None))
) | {'message', 'asctime', 'taskName'}


class JSONFormatter(logging.Formatter):
    """One JSON object per record; `extra={...}` fields become top-level keys."""

    def __init__(self, service: str = SERVICE_NAME):
        super().__init__()
        self.service = service

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc)
            .isoformat().replace('+00:00', 'Z'),
            "level": record.levelname,
            "service": self.service,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _STANDARD_ATTRS and not key.startswith('_'):
                entry[key] = value

        return json.dumps(entry, default=str)


def setup_structured_logging(level: str = 'INFO') -> None:
    """Route the root logger and uvicorn's loggers through the JSON formatter."""
    handler = logging.StreamHandler()
    handler.setFormatter(JSONFormatter())

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = [handler]

    for name in ('uvicorn', 'uvicorn.error'):
        logging.getLogger(name).handlers = [handler]
        logging.getLogger(name).propagate = False

    access = logging.getLogger('uvicorn.access')
    access.handlers = [handler]
    access.propagate = False
    access.setLevel(logging.WARNING)
