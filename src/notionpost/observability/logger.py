"""Structured JSON logging for notionpost.

Each record is written as one JSON object per line::

    {"ts": "2026-01-05T09:30:00.000000+00:00", "level": "INFO",
     "logger": "notionpost.client", "message": "posts listed",
     "op": "list_posts", "posts": 12}

Structured fields travel in ``extra={"extra_fields": {...}}``::

    from notionpost.observability import get_logger

    log = get_logger("notionpost.client")
    log.info("posts listed", extra={"extra_fields": {"posts": 12}})
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any


class StructuredFormatter(logging.Formatter):
    """Render a :class:`logging.LogRecord` as a single-line JSON object.

    Guaranteed keys are ``ts`` (UTC ISO-8601), ``level``, ``logger`` and
    ``message``.  ``extra_fields`` are merged at the top level and an
    ``exception`` key carries the formatted traceback when present.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        extra_fields: dict[str, Any] | None = getattr(record, "extra_fields", None)
        if extra_fields:
            entry.update(extra_fields)

        if record.exc_info and record.exc_info[1] is not None:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str, ensure_ascii=False)


# Logger names that already carry a StructuredFormatter handler.
_configured: set[str] = set()


def get_logger(
    name: str = "notionpost",
    *,
    level: int | str = logging.INFO,
    stream: Any | None = None,
) -> logging.Logger:
    """Return the logger *name*, attaching a JSON handler on first use.

    Repeated calls with the same name return the same logger without
    stacking handlers.  ``level`` accepts an int or a level name.
    """
    logger = logging.getLogger(name)

    if name not in _configured:
        if isinstance(level, str):
            level = logging.getLevelName(level.upper())
        logger.setLevel(level)

        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(StructuredFormatter())
        logger.addHandler(handler)
        logger.propagate = False

        _configured.add(name)

    return logger
