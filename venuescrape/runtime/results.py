"""
venuescrape.runtime.results

Result + error models shared by extraction, inference and orchestration.

Parsing helpers return a `Result` that keeps the failure reason; callers
collapse it to a fallback value only at their recovery boundary.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class ErrorKind(str, Enum):
    UNRECOGNIZED_DATE = "unrecognized_date"
    INVALID_MONTH = "invalid_month"
    INVALID_DAY = "invalid_day"
    INVALID_URL = "invalid_url"
    INFERENCE_DISABLED = "inference_disabled"
    INFERENCE_FAILED = "inference_failed"
    INFERENCE_TIMEOUT = "inference_timeout"


@dataclass(frozen=True)
class Failure:
    kind: ErrorKind
    message: str = ""

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.message}" if self.message else self.kind.value


@dataclass(frozen=True)
class Result(Generic[T]):
    value: Optional[T] = None
    failure: Optional[Failure] = None

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def fail(cls, kind: ErrorKind, message: str = "") -> "Result[T]":
        return cls(failure=Failure(kind=kind, message=message))

    @property
    def ok(self) -> bool:
        return self.failure is None

    def unwrap_or(self, default: T) -> T:
        if self.failure is not None or self.value is None:
            return default
        return self.value


# ---------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------


class VenueScrapeError(Exception):
    """Base class for venuescrape errors."""


class ConfigError(VenueScrapeError):
    """Site table could not be read or validated."""


class StructuredCompletionError(VenueScrapeError):
    """The structured-completion service failed or returned unusable output."""


class PersistenceError(VenueScrapeError):
    """The final output file could not be written."""

    def __init__(self, path: Path, message: str) -> None:
        super().__init__(f"Failed to write {path}: {message}")
        self.path = path
