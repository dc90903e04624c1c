from venuescrape.monitoring.events import emit_event
from venuescrape.monitoring.logging import LoggingOptions, setup_logging, with_context
from venuescrape.monitoring.reporting import RunReport, SiteReport

__all__ = [
    "LoggingOptions",
    "RunReport",
    "SiteReport",
    "emit_event",
    "setup_logging",
    "with_context",
]
