"""Named run events: one log record per milestone, with a structured payload."""

from __future__ import annotations

import logging
from typing import Any

SELECTORS_INFERRED = "selectors_inferred"
SITE_SCRAPED = "site_scraped"
SITE_FAILED = "site_failed"
EVENTS_SAVED = "events_saved"


def emit_event(
    logger: logging.Logger | logging.LoggerAdapter,
    event: str,
    payload: dict[str, Any] | None = None,
    *,
    level: str = "info",
    stage: str | None = None,
) -> None:
    """Log `event` at `level`; site context comes from a ContextAdapter, if used."""
    extra: dict[str, Any] = {"event": event, "payload": dict(payload or {})}
    if stage:
        extra["stage"] = stage
    logger.log(getattr(logging, level.upper(), logging.INFO), f"Event: {event}", extra=extra)
