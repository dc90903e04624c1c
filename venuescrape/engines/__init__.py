from venuescrape.engines.base import BaseEngine, BlockHandle, PageDriver
from venuescrape.engines.browser import AsyncBrowserEngine, BrowserEngineOptions

__all__ = [
    "AsyncBrowserEngine",
    "BaseEngine",
    "BlockHandle",
    "BrowserEngineOptions",
    "PageDriver",
]
