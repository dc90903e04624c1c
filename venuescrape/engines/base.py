"""
venuescrape.engines.base

Browser capability set the extraction pipeline depends on.

Goals:
- The core only sees PageDriver / BlockHandle, never a concrete automation library.
- One isolated session per site: engines hand out pages through `session()`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from contextlib import AbstractAsyncContextManager


class BlockHandle(ABC):
    """One event block (a container match) on a live page."""

    @abstractmethod
    async def text(self, selector: str) -> str:
        """Trimmed text content of the first match of `selector` inside the block."""
        raise NotImplementedError

    @abstractmethod
    async def href(self, selector: str) -> str:
        """Resolved link target of the first match of `selector` inside the block."""
        raise NotImplementedError


class PageDriver(ABC):
    @abstractmethod
    async def goto(self, url: str) -> None:
        raise NotImplementedError

    @abstractmethod
    async def wait_for_visible(self, selector: str, *, timeout_s: float) -> None:
        raise NotImplementedError

    @abstractmethod
    async def inner_html(self, selector: str) -> str:
        raise NotImplementedError

    @abstractmethod
    async def query_all(self, selector: str) -> Sequence[BlockHandle]:
        raise NotImplementedError


class BaseEngine(ABC):
    """
    Common interface for engines.

    `session()` yields a fresh page; browser resources are released on exit,
    including when the body raises.
    """

    def __init__(self, *, name: str = "base") -> None:
        self.name = name

    @abstractmethod
    def session(self) -> AbstractAsyncContextManager[PageDriver]:
        raise NotImplementedError
