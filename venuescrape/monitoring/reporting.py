"""
venuescrape.monitoring.reporting

Run + per-site report for one scrape run.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


@dataclass
class SiteReport:
    site: str
    ok: bool
    events: int = 0
    error: dict[str, Any] | None = None
    elapsed_s: float = 0.0


@dataclass
class RunReport:
    started_at_s: float = field(default_factory=time.time)
    finished_at_s: float | None = None

    sites: list[SiteReport] = field(default_factory=list)
    raw_events: int = 0
    saved_events: int = 0
    output_path: Path | None = None

    def add_site(self, sr: SiteReport) -> None:
        self.sites.append(sr)

    def finish(self) -> None:
        if self.finished_at_s is None:
            self.finished_at_s = time.time()

    @property
    def failed_sites(self) -> list[str]:
        return [s.site for s in self.sites if not s.ok]

    def as_dict(self) -> dict[str, Any]:
        self.finish()
        ok = sum(1 for s in self.sites if s.ok)
        return {
            "started_at_s": self.started_at_s,
            "finished_at_s": self.finished_at_s,
            "elapsed_s": self.finished_at_s - self.started_at_s,
            "summary": {
                "sites_total": len(self.sites),
                "sites_ok": ok,
                "sites_failed": len(self.sites) - ok,
                "raw_events": self.raw_events,
                "saved_events": self.saved_events,
            },
            "output_path": str(self.output_path) if self.output_path else None,
            "sites": [
                {
                    "site": s.site,
                    "ok": s.ok,
                    "events": s.events,
                    "error": s.error,
                    "elapsed_s": s.elapsed_s,
                }
                for s in self.sites
            ],
        }


def exception_to_error_dict(e: BaseException) -> dict[str, Any]:
    return {"type": type(e).__name__, "message": str(e)}
