"""
venuescrape.ai.selector_resolver

Ask a structured-completion model for a SelectorSet that fits a page's
current markup; fall back to the site's default selectors on any failure.

Inference is an enhancement layer: defaults must always be enough for a
scrape to proceed, so `resolve()` never raises.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from venuescrape.ai.llm.base_llm_client import BaseLLMClient
from venuescrape.config.schema import SelectorProposal, SelectorSet
from venuescrape.runtime.results import ErrorKind, Result

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are an expert web scraper. You read HTML and answer with CSS selectors "
    "that are relative to a single repeated event element."
)

PROMPT_TEMPLATE = (
    "Given the HTML snippet, provide CSS selectors for venue, price, event, date, "
    "ticketLink, subtitle, and pretitle elements for each event listed:\n\n{html}"
)


def build_prompt(markup: str, *, max_chars: int | None = None) -> str:
    if max_chars is not None and len(markup) > max_chars:
        markup = markup[:max_chars]
    return PROMPT_TEMPLATE.format(html=markup)


@dataclass(frozen=True)
class ResolverOptions:
    enabled: bool = True
    timeout_s: float = 30.0
    max_markup_chars: int | None = 20000


class SelectorResolver:
    def __init__(
        self,
        client: BaseLLMClient | None,
        *,
        options: ResolverOptions | None = None,
    ) -> None:
        self.client = client
        self.options = options or ResolverOptions()

    async def infer(self, markup: str) -> Result[SelectorSet]:
        """Inferred selectors, or the reason inference produced none."""
        if not self.options.enabled or self.client is None:
            return Result.fail(ErrorKind.INFERENCE_DISABLED, "selector inference disabled")
        if not markup.strip():
            return Result.fail(ErrorKind.INFERENCE_FAILED, "no markup to infer from")

        prompt = build_prompt(markup, max_chars=self.options.max_markup_chars)
        try:
            proposal = await asyncio.wait_for(
                self.client.complete_structured(SYSTEM_PROMPT, prompt, SelectorProposal),
                timeout=self.options.timeout_s,
            )
        except asyncio.TimeoutError:
            return Result.fail(
                ErrorKind.INFERENCE_TIMEOUT,
                f"no response within {self.options.timeout_s:g}s",
            )
        except Exception as e:
            return Result.fail(ErrorKind.INFERENCE_FAILED, f"{type(e).__name__}: {e}")

        if not isinstance(proposal, SelectorProposal):
            return Result.fail(
                ErrorKind.INFERENCE_FAILED,
                f"unexpected response type {type(proposal).__name__}",
            )

        logger.debug("Selector inference token usage: %s", self.client.get_token_usage())
        return Result.success(proposal.selectors)

    async def resolve(
        self,
        markup: str,
        defaults: SelectorSet,
        *,
        site_key: str | None = None,
    ) -> SelectorSet:
        """Inferred selectors when available, else `defaults` unchanged."""
        result = await self.infer(markup)
        if result.ok:
            logger.info("Using inferred selectors for %s", site_key or "site")
            return result.value

        if result.failure.kind is ErrorKind.INFERENCE_DISABLED:
            logger.debug("Using default selectors for %s", site_key or "site")
        else:
            logger.warning(
                "Selector inference failed for %s, using defaults (%s)",
                site_key or "site",
                result.failure,
            )
        return defaults
