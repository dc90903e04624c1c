"""
venuescrape.engines.browser

Playwright-based browser engine (async API).

Each `session()` launches its own browser + context and tears both down on
exit, so one site's cookies or a crashed page never leak into the next site.

Notes:
- If playwright isn't installed, a clear ImportError is raised at runtime.
- Missing browser binaries surface as RuntimeError with the install hint.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any

from .base import BaseEngine, BlockHandle, PageDriver

logger = logging.getLogger(__name__)

_TEXT_JS = "el => (el.textContent || '').trim()"
_HREF_JS = "el => el.href || el.getAttribute('href') || ''"


@dataclass
class BrowserEngineOptions:
    browser_name: str = "chromium"  # chromium | firefox | webkit
    headless: bool = True
    nav_timeout_s: float = 30.0

    # context behavior
    user_agent: str | None = None
    viewport: dict[str, int] | None = field(
        default_factory=lambda: {"width": 1280, "height": 720}
    )
    locale: str = "en-US"
    timezone_id: str = "UTC"

    # resources
    block_images: bool = False
    block_fonts: bool = False
    block_resources: list[str] = field(default_factory=list)  # "image", "media", "font"


class PlaywrightBlock(BlockHandle):
    def __init__(self, handle: Any) -> None:
        self._handle = handle

    async def text(self, selector: str) -> str:
        return await self._handle.eval_on_selector(selector, _TEXT_JS)

    async def href(self, selector: str) -> str:
        return await self._handle.eval_on_selector(selector, _HREF_JS)


class PlaywrightPage(PageDriver):
    def __init__(self, page: Any, *, nav_timeout_s: float = 30.0) -> None:
        self._page = page
        self._nav_timeout_s = nav_timeout_s

    async def goto(self, url: str) -> None:
        await self._page.goto(
            url, wait_until="domcontentloaded", timeout=self._nav_timeout_s * 1000
        )

    async def wait_for_visible(self, selector: str, *, timeout_s: float) -> None:
        await self._page.wait_for_selector(
            selector, state="visible", timeout=timeout_s * 1000
        )

    async def inner_html(self, selector: str) -> str:
        return await self._page.inner_html(selector)

    async def query_all(self, selector: str) -> Sequence[BlockHandle]:
        handles = await self._page.query_selector_all(selector)
        return [PlaywrightBlock(h) for h in handles]


class AsyncBrowserEngine(BaseEngine):
    """
    Playwright-based browser engine using the Async API.
    """

    def __init__(self, *, options: BrowserEngineOptions | None = None) -> None:
        super().__init__(name="browser_async")
        self.options = options or BrowserEngineOptions()

    @asynccontextmanager
    async def session(self) -> AsyncIterator[PageDriver]:
        try:
            from playwright.async_api import async_playwright  # type: ignore
        except ImportError as e:
            raise ImportError(
                "Playwright is missing. Install it with: pip install -e . && playwright install chromium"
            ) from e

        pw = await async_playwright().start()
        browser = None
        context = None
        try:
            browser = await self._launch(pw)
            context = await browser.new_context(**self._context_kwargs())

            page = await context.new_page()
            page.set_default_timeout(self.options.nav_timeout_s * 1000)
            await self._install_route_filter(page)

            yield PlaywrightPage(page, nav_timeout_s=self.options.nav_timeout_s)
        finally:
            await self._close(pw, browser, context)

    async def _launch(self, pw: Any) -> Any:
        browser_launcher = getattr(pw, self.options.browser_name)
        logger.debug(
            "Launching %s (headless=%s)", self.options.browser_name, self.options.headless
        )
        try:
            return await browser_launcher.launch(headless=self.options.headless)
        except Exception as e:
            if "executable doesn't exist" in str(e) or "not installed" in str(e).lower():
                raise RuntimeError(
                    f"Browser binaries for {self.options.browser_name} are missing. "
                    "Run: playwright install"
                ) from e
            raise

    def _context_kwargs(self) -> dict[str, Any]:
        context_kwargs: dict[str, Any] = {
            "viewport": self.options.viewport,
            "locale": self.options.locale,
            "timezone_id": self.options.timezone_id,
        }
        if self.options.user_agent:
            context_kwargs["user_agent"] = self.options.user_agent
        return context_kwargs

    def _blocked_types(self) -> set[str]:
        block_types = set(self.options.block_resources)
        if self.options.block_images:
            block_types.add("image")
        if self.options.block_fonts:
            block_types.add("font")
        return block_types

    async def _install_route_filter(self, page: Any) -> None:
        block_types = self._blocked_types()
        if not block_types:
            return

        async def _route_filter(route):
            if route.request.resource_type in block_types:
                return await route.abort()
            return await route.continue_()

        await page.route("**/*", _route_filter)

    async def _close(self, pw: Any, browser: Any, context: Any) -> None:
        try:
            if context is not None:
                await context.close()
        finally:
            try:
                if browser is not None:
                    await browser.close()
            finally:
                await pw.stop()
