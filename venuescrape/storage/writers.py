"""
venuescrape.storage.writers

Output cleaning + the single per-run JSON write.

The output file is a pretty-printed JSON array, fully overwritten each run,
named after the run's (UTC) date: event_data_YYYY-MM-DD.json.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any

from venuescrape.runtime.results import PersistenceError
from venuescrape.schemas.items import EventRecord

logger = logging.getLogger(__name__)

FILENAME_TEMPLATE = "event_data_{day}.json"


@dataclass(frozen=True)
class SaveResult:
    path: Path
    raw_count: int
    saved_count: int


def clean_events(events: Iterable[EventRecord]) -> list[EventRecord]:
    """Drop records with any empty required field; order is preserved."""
    return [e for e in events if e.is_complete]


def output_path(output_dir: str | Path, *, day: date | None = None) -> Path:
    day = day or datetime.now(timezone.utc).date()
    return Path(output_dir) / FILENAME_TEMPLATE.format(day=day.isoformat())


def write_json(path: Path, obj: Any, *, encoding: str = "utf-8") -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding=encoding) as f:
        json.dump(obj, f, indent=2, ensure_ascii=False)


def save_events(events: Sequence[EventRecord], path: Path) -> SaveResult:
    """
    Clean and write `events` to `path`.

    Raises PersistenceError (naming the file) when the write fails.
    """
    cleaned = clean_events(events)
    try:
        write_json(path, [e.as_dict() for e in cleaned])
    except OSError as e:
        raise PersistenceError(path, str(e)) from e

    logger.info("Data saved to %s", path)
    logger.info("Total raw events: %d, Cleaned events: %d", len(events), len(cleaned))
    return SaveResult(path=path, raw_count=len(events), saved_count=len(cleaned))
