"""
venuescrape.extraction.dates

Free-form listing dates -> canonical "Www, Mmm D, YYYY".

Handles:
- "Jul 4, 2024", "Thu, Jul 4, 2024", "July 4th", "Sat Jul 6"
- ranges with a single "-": "Jul 4 - Jul 5, 2024"
- missing year (current year, or the range end's year for a range start)
- day overflow ("Feb 30"): weekday, day and year come from the rolled date,
  the month name stays as written
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, replace
from datetime import date, timedelta
from typing import Optional

from venuescrape.runtime.results import ErrorKind, Result

logger = logging.getLogger(__name__)

MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")
# date.weekday() order
WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
_WEEKDAY_PREFIXES = frozenset(d.lower() for d in WEEKDAYS)
_MONTH_INDEX = {m.lower(): i for i, m in enumerate(MONTHS, start=1)}

# Values that mean "not announced yet"; passed through silently.
UNAVAILABLE_MARKERS = frozenset({"tba", "tbd", "n/a"})

_TOKEN_SPLIT = re.compile(r"[,\s]+")
_NON_DIGIT = re.compile(r"\D")


@dataclass(frozen=True)
class DateTokens:
    month: str
    day: str
    year: Optional[str] = None


def is_unavailable(text: str) -> bool:
    return not text.strip() or text.strip().lower() in UNAVAILABLE_MARKERS


def tokenize(text: str) -> Result[DateTokens]:
    """Split one date into month/day/year tokens, skipping a leading weekday."""
    tokens = [t for t in _TOKEN_SPLIT.split(text.strip()) if t]
    if not tokens:
        return Result.fail(ErrorKind.UNRECOGNIZED_DATE, "empty date")

    first = tokens[0]
    if first[:3].lower() in _WEEKDAY_PREFIXES:
        rest = tokens[1:4]
    elif first[:3].lower() in _MONTH_INDEX:
        rest = tokens[:3]
    else:
        return Result.fail(ErrorKind.UNRECOGNIZED_DATE, f"Unrecognized date format: {text}")

    if not rest:
        return Result.fail(ErrorKind.UNRECOGNIZED_DATE, f"No month in date: {text}")

    return Result.success(
        DateTokens(
            month=rest[0],
            day=rest[1] if len(rest) > 1 else "",
            year=rest[2] if len(rest) > 2 else None,
        )
    )


def _resolve_year(raw: Optional[str], today: date) -> int:
    digits = _NON_DIGIT.sub("", raw or "")
    # "8:00" or "@8pm" in the year slot is a showtime, not a year
    if len(digits) != 4 or int(digits) < 1:
        return today.year
    return int(digits)


def build_date(tokens: DateTokens, *, today: Optional[date] = None) -> Result[str]:
    today = today or date.today()

    month_index = _MONTH_INDEX.get(tokens.month[:3].lower())
    if month_index is None:
        return Result.fail(ErrorKind.INVALID_MONTH, f"Invalid month in date: {tokens.month}")

    day_digits = _NON_DIGIT.sub("", tokens.day)
    if not day_digits:
        return Result.fail(ErrorKind.INVALID_DAY, f"Missing day in date: {tokens.day!r}")

    year = _resolve_year(tokens.year, today)
    try:
        resolved = date(year, month_index, 1) + timedelta(days=int(day_digits) - 1)
    except OverflowError:
        return Result.fail(ErrorKind.INVALID_DAY, f"Day out of range: {tokens.day}")

    return Result.success(
        f"{WEEKDAYS[resolved.weekday()]}, {MONTHS[month_index - 1]} "
        f"{resolved.day}, {resolved.year}"
    )


def split_range(text: str) -> list[str]:
    """Two '-' separated parts form a range; anything else keeps only the first part."""
    parts = [p.strip() for p in text.split("-")]
    if len(parts) == 2:
        return parts
    return parts[:1]


def _parse_sides(sides: list[str], today: Optional[date]) -> list[Result[str]]:
    tokenized = [tokenize(s) for s in sides]

    if len(tokenized) == 2 and tokenized[0].ok and tokenized[1].ok:
        start, end = tokenized[0].value, tokenized[1].value
        if start.year is None and end.year is not None:
            tokenized[0] = Result.success(replace(start, year=end.year))

    results: list[Result[str]] = []
    for t in tokenized:
        if not t.ok:
            results.append(Result(failure=t.failure))
        else:
            results.append(build_date(t.value, today=today))
    return results


def parse_date(text: str, *, today: Optional[date] = None) -> Result[str]:
    """
    Normalize a date or date range, keeping the failure reason.

    Unavailable values ("", "TBA", ...) succeed unchanged.
    """
    if is_unavailable(text):
        return Result.success(text)

    results = _parse_sides(split_range(text), today)
    for r in results:
        if not r.ok:
            return r
    return Result.success(" - ".join(r.value for r in results))


def normalize_date(text: str, *, today: Optional[date] = None) -> str:
    """
    Canonical form of a listing date; unparseable parts come back unchanged.

    normalize_date("Jul 4 - Jul 5, 2024") -> "Thu, Jul 4, 2024 - Fri, Jul 5, 2024"
    """
    if is_unavailable(text):
        return text

    sides = split_range(text)
    results = _parse_sides(sides, today)

    if len(sides) == 1 and not results[0].ok:
        logger.warning("%s", results[0].failure.message)
        return text

    out = []
    for side, result in zip(sides, results):
        if result.ok:
            out.append(result.value)
        else:
            logger.warning("%s", result.failure.message)
            out.append(side)
    return " - ".join(out)
