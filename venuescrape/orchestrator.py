"""
orchestrator.py

Runs every configured site, aggregates events, writes one output file.

Core responsibilities:
- For each site (in table order):
    - open an isolated browser session
    - wait for the listing to render (bounded)
    - resolve selectors (inferred or default)
    - extract one EventRecord per event block
- Contain per-site failures: log with the site key, contribute zero events
- Clean + persist the aggregate once per run
- Return a RunReport

Sites run one at a time unless `max_concurrent_sites` > 1; the aggregate
keeps table order either way.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

from venuescrape.ai.llm.provider_router import get_llm_client
from venuescrape.ai.selector_resolver import ResolverOptions, SelectorResolver
from venuescrape.config.schema import SiteConfig
from venuescrape.config.settings import Settings
from venuescrape.engines.base import BaseEngine
from venuescrape.engines.browser import AsyncBrowserEngine, BrowserEngineOptions
from venuescrape.extraction.extractor import extract_events
from venuescrape.monitoring.events import (
    EVENTS_SAVED,
    SELECTORS_INFERRED,
    SITE_FAILED,
    SITE_SCRAPED,
    emit_event,
)
from venuescrape.monitoring.logging import with_context
from venuescrape.monitoring.reporting import RunReport, SiteReport, exception_to_error_dict
from venuescrape.schemas.items import EventRecord
from venuescrape.storage.writers import SaveResult, output_path, save_events

logger = logging.getLogger(__name__)

Writer = Callable[[Sequence[EventRecord], Path], SaveResult]

# ---------------------------------------------------------------------
# Options
# ---------------------------------------------------------------------


@dataclass(frozen=True)
class OrchestratorOptions:
    output_dir: Path = Path(".")
    wait_timeout_s: float = 10.0
    site_timeout_s: float | None = None
    only_sites: list[str] | None = None
    max_concurrent_sites: int = 1


# ---------------------------------------------------------------------
# Orchestrator
# ---------------------------------------------------------------------


class ScrapeOrchestrator:
    def __init__(
        self,
        sites: Mapping[str, SiteConfig],
        *,
        engine: BaseEngine,
        resolver: SelectorResolver,
        writer: Writer = save_events,
        options: OrchestratorOptions | None = None,
    ) -> None:
        self.sites = dict(sites)
        self.engine = engine
        self.resolver = resolver
        self.writer = writer
        self.options = options or OrchestratorOptions()

    @classmethod
    def from_settings(
        cls,
        sites: Mapping[str, SiteConfig],
        settings: Settings,
        *,
        only_sites: list[str] | None = None,
    ) -> ScrapeOrchestrator:
        engine = AsyncBrowserEngine(options=BrowserEngineOptions(headless=settings.HEADLESS))

        client = None
        if settings.LLM_ENABLED:
            client = get_llm_client(
                settings.LLM_PROVIDER,
                model_name=settings.LLM_MODEL,
                base_url=settings.LLM_BASE_URL,
            )
        resolver = SelectorResolver(
            client,
            options=ResolverOptions(
                enabled=settings.LLM_ENABLED,
                timeout_s=settings.LLM_TIMEOUT_S,
                max_markup_chars=settings.LLM_MAX_MARKUP_CHARS,
            ),
        )

        return cls(
            sites,
            engine=engine,
            resolver=resolver,
            options=OrchestratorOptions(
                output_dir=settings.OUTPUT_DIR,
                wait_timeout_s=settings.WAIT_TIMEOUT_S,
                site_timeout_s=settings.SITE_TIMEOUT_S,
                only_sites=only_sites,
                max_concurrent_sites=settings.MAX_CONCURRENT_SITES,
            ),
        )

    def selected_sites(self) -> list[tuple[str, SiteConfig]]:
        only = self.options.only_sites
        return [(k, c) for k, c in self.sites.items() if not only or k in only]

    async def scrape_site(self, key: str, config: SiteConfig) -> list[EventRecord]:
        """Scrape one site. Raises on navigation/wait/driver failures."""
        log = with_context(logger, site=key)
        with_context(logger, site=key, stage="navigate").info(f"Scraping {config.url}")
        wait_s = self.options.wait_timeout_s

        async with self.engine.session() as page:
            await page.goto(config.url)

            if config.upcoming_events_selector:
                await page.wait_for_visible(config.upcoming_events_selector, timeout_s=wait_s)
            await page.wait_for_visible(config.event_list_selector, timeout_s=wait_s)

            selectors = config.default_selectors
            if config.infer_selectors:
                section_html = await page.inner_html(config.event_section_selector)
                selectors = await self.resolver.resolve(
                    section_html, config.default_selectors, site_key=key
                )
                if selectors is not config.default_selectors:
                    emit_event(
                        log, SELECTORS_INFERRED, selectors.model_dump(by_alias=True), stage="resolve"
                    )

            return await extract_events(
                page,
                selectors,
                config.event_list_selector,
                key,
                config.venue,
                uppercase_presenter=config.uppercase_presenter,
            )

    async def _scrape_contained(
        self,
        key: str,
        config: SiteConfig,
        slots: asyncio.Semaphore,
    ) -> tuple[SiteReport, list[EventRecord]]:
        log = with_context(logger, site=key)
        async with slots:
            t0 = time.time()
            try:
                if self.options.site_timeout_s:
                    events = await asyncio.wait_for(
                        self.scrape_site(key, config), timeout=self.options.site_timeout_s
                    )
                else:
                    events = await self.scrape_site(key, config)
            except Exception as e:
                log.exception(f"Error scraping {key}: {e}")
                error = exception_to_error_dict(e)
                emit_event(log, SITE_FAILED, error, level="error")
                return SiteReport(site=key, ok=False, error=error, elapsed_s=time.time() - t0), []

            emit_event(log, SITE_SCRAPED, {"events": len(events)}, stage="extract")
            return SiteReport(site=key, ok=True, events=len(events), elapsed_s=time.time() - t0), list(events)

    async def run(self) -> RunReport:
        """
        Attempt every selected site, then write the cleaned aggregate once.

        Only a failed final write propagates (PersistenceError).
        """
        report = RunReport()
        slots = asyncio.Semaphore(max(1, self.options.max_concurrent_sites))

        outcomes = await asyncio.gather(
            *(self._scrape_contained(k, c, slots) for k, c in self.selected_sites())
        )

        all_events: list[EventRecord] = []
        for site_report, events in outcomes:
            report.add_site(site_report)
            all_events.extend(events)
        report.raw_events = len(all_events)

        saved = self.writer(all_events, output_path(self.options.output_dir))
        report.saved_events = saved.saved_count
        report.output_path = saved.path
        report.finish()

        emit_event(
            logger,
            EVENTS_SAVED,
            {
                "path": str(saved.path),
                "raw": saved.raw_count,
                "saved": saved.saved_count,
                "failed_sites": report.failed_sites,
            },
        )
        return report
