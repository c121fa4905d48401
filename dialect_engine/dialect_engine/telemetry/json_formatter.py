"""JSON log formatter for machine-readable CLI logs.

Emits each log record as a single-line JSON object so that CI systems
and log shippers can index migration runs without regex parsing.

Activate by setting ``SQLSHIFT_STRUCTURED_LOGGING=true``.  When enabled
:func:`configure_logging` replaces the root handlers with a
``StreamHandler`` on stderr using this formatter.

Output schema per line::

    {
        "timestamp": "2025-05-15T12:34:56.789012+00:00",
        "level": "DEBUG",
        "logger": "dialect_engine.migration.translator",
        "message": "translated 3 lines",
        "context": { ... },          // present when passed via extra={"context": ...}
        "exc_info": "Traceback ..."  // present only on exceptions
    }
"""

from __future__ import annotations

import json
import logging
import sys
import traceback
from datetime import UTC, datetime
from typing import Any

_TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class JSONFormatter(logging.Formatter):
    """Format log records as single-line JSON."""

    def format(self, record: logging.LogRecord) -> str:
        """Render *record* as a single JSON line."""
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        context = getattr(record, "context", None)
        if context is not None:
            payload["context"] = context

        if record.exc_info and record.exc_info[0] is not None:
            payload["exc_info"] = "".join(traceback.format_exception(*record.exc_info))

        return json.dumps(payload, default=str, ensure_ascii=False)


def configure_logging(level: str | int = logging.WARNING, *, structured: bool = False) -> None:
    """Install a single stderr handler on the root logger.

    Parameters
    ----------
    level:
        Root log level, as a name (``"DEBUG"``) or a ``logging`` constant.
    structured:
        Use :class:`JSONFormatter` instead of the plain text format.
    """
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JSONFormatter() if structured else logging.Formatter(_TEXT_FORMAT))

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level)
