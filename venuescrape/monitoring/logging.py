"""Package logging setup.

Every module logs under the "venuescrape" logger tree. `setup_logging`
attaches a stderr handler (and optionally a file) with either a text or a
JSON formatter; `with_context` tags records with the site key being scraped.
"""

from __future__ import annotations

import json
import logging
import sys
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

ROOT_LOGGER = "venuescrape"

# record attributes set through `extra=` that formatters render
CONTEXT_FIELDS = ("site", "stage")

# ---------------------------------------------------------------------
# Formatters
# ---------------------------------------------------------------------


def _context(record: logging.LogRecord) -> dict[str, Any]:
    return {k: getattr(record, k) for k in CONTEXT_FIELDS if getattr(record, k, None)}


class JsonFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        out: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        out.update(_context(record))

        event = getattr(record, "event", None)
        if event:
            out["event"] = event
            payload = getattr(record, "payload", None)
            if isinstance(payload, dict):
                out["payload"] = payload

        if record.exc_info:
            out["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(out, ensure_ascii=False, default=str)


class TextFormatter(logging.Formatter):
    """LEVEL logger [site=... stage=...] message"""

    def format(self, record: logging.LogRecord) -> str:
        parts = [record.levelname, record.name]
        ctx = _context(record)
        if ctx:
            parts.append("[" + " ".join(f"{k}={v}" for k, v in ctx.items()) + "]")
        parts.append(record.getMessage())

        line = " ".join(parts)
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


# ---------------------------------------------------------------------
# Setup
# ---------------------------------------------------------------------


@dataclass(frozen=True)
class LoggingOptions:
    level: str = "INFO"
    json_logs: bool = False
    enable_console: bool = True
    log_file: Path | None = None


def setup_logging(options: LoggingOptions | None = None) -> logging.Logger:
    """Configure the package logger; calling again replaces earlier handlers."""
    options = options or LoggingOptions()
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(getattr(logging, options.level.upper(), logging.INFO))
    logger.propagate = False

    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()

    handlers: list[logging.Handler] = []
    if options.enable_console:
        handlers.append(logging.StreamHandler(sys.stderr))
    if options.log_file is not None:
        options.log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(options.log_file, encoding="utf-8"))

    fmt = JsonFormatter() if options.json_logs else TextFormatter()
    for h in handlers:
        h.setLevel(logger.level)
        h.setFormatter(fmt)
        logger.addHandler(h)

    return logger


# ---------------------------------------------------------------------
# Context injection
# ---------------------------------------------------------------------


class ContextAdapter(logging.LoggerAdapter):
    """Merges the adapter's context into each call's `extra`."""

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        kwargs["extra"] = {**self.extra, **kwargs.get("extra", {})}
        return msg, kwargs


def with_context(
    logger: logging.Logger,
    *,
    site: str | None = None,
    stage: str | None = None,
) -> ContextAdapter:
    extra = {k: v for k, v in (("site", site), ("stage", stage)) if v}
    return ContextAdapter(logger, extra)
