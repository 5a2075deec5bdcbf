"""Logging setup for the signlearn API.

LOG_JSON picks the output shape:

  _ContainerFormatter: one readable line per record, for a terminal.
  _JsonFormatter:      one JSON object per line, for log aggregation.

``request_id`` is stamped on every record by the factory installed in
signlearn/middleware/request_context.py.  Services add ``user_id``,
``course_id`` and ``package_id`` through ``extra=`` so consistency events
can be filtered per learner or per catalog entry.
"""

from __future__ import annotations

import json
import logging
import sys

_QUIET_LOGGERS = (
    "uvicorn",
    "uvicorn.access",
    "uvicorn.error",
    "httpcore",
    "httpx",
    "sqlalchemy.engine",
)


class _ContainerFormatter(logging.Formatter):
    """``<time> <LEVEL> <logger> [<request id>]  <message>``.

    The request id is omitted outside a request.  WARNING and above end
    with ``[file:line]``.
    """

    def __init__(self) -> None:
        super().__init__(datefmt="%Y-%m-%dT%H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        stamp = f"{self.formatTime(record, self.datefmt)}.{int(record.msecs):03d}"
        req_id = getattr(record, "request_id", "-")
        prefix = f"{stamp} {record.levelname:<8} {record.name}"
        if req_id != "-":
            prefix += f" [{req_id}]"

        line = f"{prefix}  {record.getMessage()}"
        if record.levelno >= logging.WARNING:
            line += f"  [{record.filename}:{record.lineno}]"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class _JsonFormatter(logging.Formatter):
    """JSON Lines; context attributes become top-level keys when set."""

    _CONTEXT_FIELDS = (
        "request_id",
        "method",
        "path",
        "status_code",
        "duration_ms",
        "user_id",
        "course_id",
        "package_id",
    )

    def __init__(self) -> None:
        super().__init__(datefmt="%Y-%m-%dT%H:%M:%S%z")

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, object] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(
            (key, value)
            for key in self._CONTEXT_FIELDS
            if (value := getattr(record, key, None)) not in (None, "-")
        )
        if record.exc_info and record.exc_info[0] is not None:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def setup_logging(level_name: str, *, json_format: bool = False) -> None:
    """Route the root logger to stdout at *level_name* (INFO if unknown)."""
    level = logging.getLevelName(level_name.upper())
    if not isinstance(level, int):
        level = logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(_JsonFormatter() if json_format else _ContainerFormatter())

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
