from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from venuescrape.engines.browser import (
    AsyncBrowserEngine,
    BrowserEngineOptions,
    PlaywrightBlock,
    PlaywrightPage,
)


def test_browser_engine_options_defaults():
    opts = BrowserEngineOptions()
    assert opts.browser_name == "chromium"
    assert opts.headless is True
    assert opts.viewport == {"width": 1280, "height": 720}
    assert opts.block_resources == []


def test_blocked_types_and_context_kwargs():
    engine = AsyncBrowserEngine(
        options=BrowserEngineOptions(block_images=True, block_resources=["media"], user_agent="bot/1.0")
    )
    assert engine._blocked_types() == {"image", "media"}
    assert engine._context_kwargs()["user_agent"] == "bot/1.0"
    assert "user_agent" not in AsyncBrowserEngine()._context_kwargs()


@pytest.mark.asyncio
async def test_playwright_page_delegates_with_millisecond_timeouts():
    raw = MagicMock()
    raw.goto = AsyncMock()
    raw.wait_for_selector = AsyncMock()
    raw.inner_html = AsyncMock(return_value="<ul></ul>")
    raw.query_selector_all = AsyncMock(return_value=[MagicMock(), MagicMock()])
    page = PlaywrightPage(raw, nav_timeout_s=15)

    await page.goto("https://venue.example")
    await page.wait_for_visible(".row", timeout_s=10)
    html = await page.inner_html(".events")
    blocks = await page.query_all(".row")

    raw.goto.assert_awaited_once_with("https://venue.example", wait_until="domcontentloaded", timeout=15000)
    raw.wait_for_selector.assert_awaited_once_with(".row", state="visible", timeout=10000)
    assert html == "<ul></ul>"
    assert len(blocks) == 2
    assert all(isinstance(b, PlaywrightBlock) for b in blocks)


@pytest.mark.asyncio
async def test_playwright_block_reads_text_and_href():
    handle = MagicMock()
    handle.eval_on_selector = AsyncMock(side_effect=["The Band", "https://tix.com/e/1"])
    block = PlaywrightBlock(handle)

    assert await block.text(".title") == "The Band"
    assert await block.href("a") == "https://tix.com/e/1"
    assert handle.eval_on_selector.await_args_list[1].args[0] == "a"


@pytest.mark.asyncio
async def test_launch_missing_browsers():
    pw = MagicMock()
    pw.chromium.launch = AsyncMock(side_effect=Exception("executable doesn't exist at /ms-playwright/chromium"))

    engine = AsyncBrowserEngine()
    with pytest.raises(RuntimeError) as excinfo:
        await engine._launch(pw)
    assert "Browser binaries for chromium are missing" in str(excinfo.value)


@pytest.mark.asyncio
async def test_session_closes_browser_when_body_raises():
    page = MagicMock()
    context = MagicMock()
    context.new_page = AsyncMock(return_value=page)
    context.close = AsyncMock()
    browser = MagicMock()
    browser.new_context = AsyncMock(return_value=context)
    browser.close = AsyncMock()
    pw = MagicMock()
    pw.chromium.launch = AsyncMock(return_value=browser)
    pw.stop = AsyncMock()
    starter = MagicMock()
    starter.start = AsyncMock(return_value=pw)

    engine = AsyncBrowserEngine()
    with patch("playwright.async_api.async_playwright", return_value=starter):
        with pytest.raises(ValueError):
            async with engine.session() as driver:
                assert isinstance(driver, PlaywrightPage)
                raise ValueError("boom")

    context.close.assert_awaited_once()
    browser.close.assert_awaited_once()
    pw.stop.assert_awaited_once()
