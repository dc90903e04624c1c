import json
import logging
import time
from datetime import datetime, timezone

import pytest

from venuescrape.ai.selector_resolver import ResolverOptions, SelectorResolver
from venuescrape.config.schema import SelectorProposal, SelectorSet
from venuescrape.config.settings import Settings
from venuescrape.orchestrator import OrchestratorOptions, ScrapeOrchestrator
from venuescrape.runtime.results import PersistenceError
from venuescrape.storage.writers import SaveResult


def _listing_block(fakes, title, *, venue="Hall", price="$20"):
    return fakes.Block(
        texts={".venue": venue, ".price": price, ".event": title, ".date": "Jul 4, 2024"},
        hrefs={".ticket": f"https://tix.com/{title}?ref=site"},
    )


class RecordingWriter:
    def __init__(self, error=None):
        self.calls = []
        self.error = error

    def __call__(self, events, path):
        self.calls.append((list(events), path))
        if self.error:
            raise self.error
        saved = [e for e in events if e.is_complete]
        return SaveResult(path=path, raw_count=len(events), saved_count=len(saved))


def _orchestrator(sites, engine, *, resolver=None, writer=None, **options):
    return ScrapeOrchestrator(
        sites,
        engine=engine,
        resolver=resolver or SelectorResolver(None),
        writer=writer or RecordingWriter(),
        options=OrchestratorOptions(**options),
    )


@pytest.mark.asyncio
async def test_failed_site_is_contained(fakes, make_site, tmp_path, caplog):
    sites = {
        "a": make_site(url="https://a.example/events"),
        "b": make_site(url="https://b.example/events"),
        "c": make_site(url="https://c.example/events"),
    }
    pages = [
        fakes.Page(blocks=[_listing_block(fakes, "A1")]),
        fakes.Page(goto_error=RuntimeError("net::ERR_NAME_NOT_RESOLVED")),
        fakes.Page(blocks=[_listing_block(fakes, "C1")]),
    ]
    engine = fakes.Engine(pages)
    writer = RecordingWriter()

    with caplog.at_level(logging.INFO, logger="venuescrape"):
        report = await _orchestrator(sites, engine, writer=writer, output_dir=tmp_path).run()

    assert len(writer.calls) == 1
    events, path = writer.calls[0]
    assert [(e.website, e.event) for e in events] == [("a", "A1"), ("c", "C1")]
    assert events[0].ticket_link == "https://tix.com/A1"
    today = datetime.now(timezone.utc).date().isoformat()
    assert path == tmp_path / f"event_data_{today}.json"

    assert "Error scraping b: net::ERR_NAME_NOT_RESOLVED" in caplog.text
    assert "Scraping https://a.example/events" in caplog.text
    assert report.failed_sites == ["b"]
    assert report.raw_events == 2
    assert report.saved_events == 2
    assert engine.closed == 3


@pytest.mark.asyncio
async def test_run_writes_cleaned_output(fakes, make_site, tmp_path):
    from venuescrape.storage.writers import save_events

    page = fakes.Page(blocks=[_listing_block(fakes, "Kept"), _listing_block(fakes, "Dropped", price="")])
    orch = _orchestrator({"a": make_site()}, fakes.Engine([page]), writer=save_events, output_dir=tmp_path)

    report = await orch.run()

    data = json.loads(report.output_path.read_text(encoding="utf-8"))
    assert [d["event"] for d in data] == ["Kept"]
    assert report.as_dict()["summary"] == {
        "sites_total": 1,
        "sites_ok": 1,
        "sites_failed": 0,
        "raw_events": 2,
        "saved_events": 1,
    }


@pytest.mark.asyncio
async def test_waits_for_upcoming_then_listing(fakes, make_site):
    site = make_site(upcoming_events_selector="text=upcoming events")
    page = fakes.Page(blocks=[_listing_block(fakes, "A1")])

    await _orchestrator({"sns": site}, fakes.Engine([page]), wait_timeout_s=5).run()

    assert page.visited == ["https://venue.example/events"]
    assert page.waited == [("text=upcoming events", 5), (".event-row", 5)]


@pytest.mark.asyncio
async def test_listing_wait_timeout_fails_site(fakes, make_site):
    page = fakes.Page(blocks=[_listing_block(fakes, "A1")], missing={".event-row"})
    writer = RecordingWriter()

    report = await _orchestrator({"a": make_site()}, fakes.Engine([page]), writer=writer).run()

    assert report.failed_sites == ["a"]
    assert report.sites[0].error["type"] == "TimeoutError"
    assert page.queried == []
    assert writer.calls[0][0] == []


@pytest.mark.asyncio
async def test_inferred_selectors_drive_extraction(fakes, make_site, caplog):
    inferred = SelectorSet(venue=".loc", price=".cost", event="h3", date="time", ticketLink="a.buy")
    client = fakes.LLM(response=SelectorProposal(selectors=inferred))
    block = fakes.Block(
        texts={".loc": "Loft", ".cost": "$12", "h3": "New Layout", "time": "Jul 5, 2024"},
        hrefs={"a.buy": "https://tix.com/new"},
    )
    page = fakes.Page(blocks=[block], html="<article><h3>New Layout</h3></article>")
    writer = RecordingWriter()

    with caplog.at_level(logging.INFO, logger="venuescrape"):
        await _orchestrator({"a": make_site()}, fakes.Engine([page]), resolver=SelectorResolver(client), writer=writer).run()

    [event] = writer.calls[0][0]
    assert event.event == "New Layout"
    assert event.date == "Fri, Jul 5, 2024"
    assert client.prompts[0][1].endswith("<article><h3>New Layout</h3></article>")

    [inferred_event] = [r for r in caplog.records if getattr(r, "event", None) == "selectors_inferred"]
    assert inferred_event.site == "a"
    assert inferred_event.stage == "resolve"
    assert inferred_event.payload["ticketLink"] == "a.buy"
    [navigate] = [r for r in caplog.records if r.getMessage().startswith("Scraping ")]
    assert navigate.stage == "navigate"


@pytest.mark.asyncio
async def test_site_without_inference_skips_resolver(fakes, make_site):
    client = fakes.LLM(response=None)
    page = fakes.Page(blocks=[_listing_block(fakes, "A1")])
    writer = RecordingWriter()

    await _orchestrator(
        {"a": make_site(infer_selectors=False)},
        fakes.Engine([page]),
        resolver=SelectorResolver(client),
        writer=writer,
    ).run()

    assert client.prompts == []
    assert [e.event for e in writer.calls[0][0]] == ["A1"]


@pytest.mark.asyncio
async def test_site_timeout_bounds_a_stuck_site(fakes, make_site):
    client = fakes.LLM(response=None, delay_s=5.0)
    resolver = SelectorResolver(client, options=ResolverOptions(timeout_s=30))
    pages = [fakes.Page(), fakes.Page(blocks=[_listing_block(fakes, "B1")])]
    sites = {"slow": make_site(), "fast": make_site(infer_selectors=False)}
    writer = RecordingWriter()

    report = await _orchestrator(sites, fakes.Engine(pages), resolver=resolver, writer=writer, site_timeout_s=0.05).run()

    assert report.failed_sites == ["slow"]
    assert [e.event for e in writer.calls[0][0]] == ["B1"]


@pytest.mark.asyncio
async def test_only_sites_option(fakes, make_site):
    page = fakes.Page(blocks=[_listing_block(fakes, "B1")])
    sites = {"a": make_site(), "b": make_site()}
    orch = _orchestrator(sites, fakes.Engine([page]), only_sites=["b"])

    assert [k for k, _ in orch.selected_sites()] == ["b"]
    report = await orch.run()
    assert [s.site for s in report.sites] == ["b"]


@pytest.mark.asyncio
async def test_write_failure_propagates(fakes, make_site, tmp_path):
    error = PersistenceError(tmp_path / "event_data.json", "disk full")
    page = fakes.Page(blocks=[_listing_block(fakes, "A1")])

    with pytest.raises(PersistenceError, match="disk full"):
        await _orchestrator({"a": make_site()}, fakes.Engine([page]), writer=RecordingWriter(error=error)).run()


@pytest.mark.asyncio
async def test_parallel_sites_keep_table_order(fakes, make_site):
    pages = [
        fakes.Page(blocks=[_listing_block(fakes, "A")], goto_delay_s=0.3),
        fakes.Page(blocks=[_listing_block(fakes, "B")], goto_delay_s=0.2),
    ]
    engine = fakes.Engine(pages)
    writer = RecordingWriter()
    sites = {"slow": make_site(), "fast": make_site()}

    t0 = time.monotonic()
    report = await _orchestrator(sites, engine, writer=writer, max_concurrent_sites=2).run()
    elapsed = time.monotonic() - t0

    assert [e.event for e in writer.calls[0][0]] == ["A", "B"]
    assert [s.site for s in report.sites] == ["slow", "fast"]
    # one after the other would take at least 0.5s
    assert elapsed < 0.45
    assert engine.closed == 2


def test_from_settings_carries_concurrency_and_timeouts(tmp_path):
    settings = Settings(
        _env_file=None,
        LLM_ENABLED=False,
        MAX_CONCURRENT_SITES=3,
        WAIT_TIMEOUT_S=4,
        OUTPUT_DIR=tmp_path,
    )

    orch = ScrapeOrchestrator.from_settings({}, settings, only_sites=["a"])

    assert orch.options.max_concurrent_sites == 3
    assert orch.options.wait_timeout_s == 4
    assert orch.options.output_dir == tmp_path
    assert orch.options.only_sites == ["a"]
    assert orch.resolver.client is None
