"""Logging and timing helpers shared by the engine and the CLI."""

from __future__ import annotations

from dialect_engine.telemetry.json_formatter import JSONFormatter, configure_logging
from dialect_engine.telemetry.profiling import profile_operation

__all__ = [
    "JSONFormatter",
    "configure_logging",
    "profile_operation",
]
