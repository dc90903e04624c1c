from venuescrape.runtime.results import (
    ConfigError,
    ErrorKind,
    Failure,
    PersistenceError,
    Result,
    StructuredCompletionError,
    VenueScrapeError,
)

__all__ = [
    "ConfigError",
    "ErrorKind",
    "Failure",
    "PersistenceError",
    "Result",
    "StructuredCompletionError",
    "VenueScrapeError",
]
