"""
Shared pytest fixtures for the venuescrape test suite.

Provides in-memory stand-ins for the browser and the structured-completion
service so extraction and orchestration run without a browser or network.
"""

import asyncio
from contextlib import asynccontextmanager
from types import SimpleNamespace
from typing import Optional

import pytest

from venuescrape.ai.llm.base_llm_client import BaseLLMClient
from venuescrape.config.schema import SelectorSet, SiteConfig
from venuescrape.engines.base import BaseEngine, BlockHandle, PageDriver


class FakeBlock(BlockHandle):
    """Event block whose sub-elements are keyed by selector."""

    def __init__(self, texts: Optional[dict] = None, hrefs: Optional[dict] = None):
        self.texts = texts or {}
        self.hrefs = hrefs or {}

    async def text(self, selector: str) -> str:
        if selector not in self.texts:
            raise LookupError(f"No element matches {selector}")
        return self.texts[selector]

    async def href(self, selector: str) -> str:
        if selector not in self.hrefs:
            raise LookupError(f"No element matches {selector}")
        return self.hrefs[selector]


class FakePage(PageDriver):
    def __init__(
        self,
        blocks: Optional[list] = None,
        html: str = "<div class='events'></div>",
        missing: Optional[set] = None,
        goto_error: Optional[Exception] = None,
        goto_delay_s: float = 0.0,
    ):
        self.blocks = blocks or []
        self.html = html
        self.missing = missing or set()
        self.goto_error = goto_error
        self.goto_delay_s = goto_delay_s
        self.visited: list[str] = []
        self.waited: list[tuple[str, float]] = []
        self.queried: list[str] = []

    async def goto(self, url: str) -> None:
        self.visited.append(url)
        if self.goto_delay_s:
            await asyncio.sleep(self.goto_delay_s)
        if self.goto_error:
            raise self.goto_error

    async def wait_for_visible(self, selector: str, *, timeout_s: float) -> None:
        self.waited.append((selector, timeout_s))
        if selector in self.missing:
            raise TimeoutError(f"Timeout {timeout_s * 1000:.0f}ms exceeded waiting for {selector}")

    async def inner_html(self, selector: str) -> str:
        return self.html

    async def query_all(self, selector: str):
        self.queried.append(selector)
        return list(self.blocks)


class FakeEngine(BaseEngine):
    """Serves pages in session order; counts opened/closed sessions."""

    def __init__(self, pages: list):
        super().__init__(name="fake")
        self.pages = list(pages)
        self.opened = 0
        self.closed = 0

    @asynccontextmanager
    async def session(self):
        page = self.pages[self.opened]
        self.opened += 1
        try:
            yield page
        finally:
            self.closed += 1


class FakeLLMClient(BaseLLMClient):
    provider = "fake"

    def __init__(self, response=None, error: Optional[Exception] = None, delay_s: float = 0.0):
        self.response = response
        self.error = error
        self.delay_s = delay_s
        self.prompts: list[tuple[str, str]] = []
        self._last_usage = self._empty_usage()

    @property
    def is_available(self) -> bool:
        return True

    async def complete_structured(self, system_prompt, user_prompt, output_schema, temperature=None, max_tokens=None):
        self.prompts.append((system_prompt, user_prompt))
        if self.delay_s:
            await asyncio.sleep(self.delay_s)
        if self.error:
            raise self.error
        return self.response


@pytest.fixture
def default_selectors():
    return SelectorSet(
        venue=".venue",
        price=".price",
        event=".event",
        date=".date",
        ticketLink=".ticket",
    )


@pytest.fixture
def make_site(default_selectors):
    """
    Return a function that creates SiteConfig objects with sensible defaults.

    Example:
        site = make_site(url="https://a.example/events", venue="Club XYZ")
    """

    def _make_site(**kwargs) -> SiteConfig:
        defaults = {
            "url": "https://venue.example/events",
            "venue": "Test Venue",
            "event_list_selector": ".event-row",
            "event_section_selector": ".events",
            "default_selectors": default_selectors,
        }
        defaults.update(kwargs)
        return SiteConfig(**defaults)

    return _make_site


@pytest.fixture
def fakes():
    """The fake driver/engine/LLM classes above, for building scenarios in tests."""
    return SimpleNamespace(
        Block=FakeBlock,
        Page=FakePage,
        Engine=FakeEngine,
        LLM=FakeLLMClient,
    )
