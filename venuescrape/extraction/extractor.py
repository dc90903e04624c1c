"""
venuescrape.extraction.extractor

Event blocks on a live page -> EventRecords.

Blocks are read concurrently and every field within a block is read
concurrently; the returned list keeps the page's block order.
"""

from __future__ import annotations

import asyncio
import logging

from venuescrape.config.schema import SelectorSet
from venuescrape.engines.base import BlockHandle, PageDriver
from venuescrape.extraction.fields import (
    BlockDraft,
    FieldContext,
    apply_role,
    reads_href,
    role_for,
)
from venuescrape.schemas.items import EventRecord

logger = logging.getLogger(__name__)


async def read_field(block: BlockHandle, field_name: str, selector: str) -> str:
    """Raw value for one field; a missing or unreadable element reads as ""."""
    try:
        if reads_href(role_for(field_name)):
            value = await block.href(selector)
        else:
            value = await block.text(selector)
    except Exception as e:
        logger.debug("Field %s (%s) not read: %s", field_name, selector, e)
        return ""
    return (value or "").strip()


async def extract_block(
    block: BlockHandle,
    selectors: SelectorSet,
    *,
    website_key: str,
    fallback_venue: str,
    uppercase_presenter: bool = True,
) -> EventRecord:
    pairs = selectors.items()
    raw_values = await asyncio.gather(
        *(read_field(block, name, selector) for name, selector in pairs)
    )

    ctx = FieldContext(fallback_venue=fallback_venue)
    draft = BlockDraft(website=website_key)
    for (name, _), raw in zip(pairs, raw_values):
        role = role_for(name)
        draft.put(name, role, apply_role(role, raw, ctx))

    return draft.to_record(uppercase_presenter=uppercase_presenter)


async def extract_events(
    page: PageDriver,
    selectors: SelectorSet,
    container_selector: str,
    website_key: str,
    fallback_venue: str,
    *,
    uppercase_presenter: bool = True,
) -> list[EventRecord]:
    blocks = await page.query_all(container_selector)
    if not blocks:
        logger.info("No event blocks matched %s for %s", container_selector, website_key)
        return []

    records = await asyncio.gather(
        *(
            extract_block(
                block,
                selectors,
                website_key=website_key,
                fallback_venue=fallback_venue,
                uppercase_presenter=uppercase_presenter,
            )
            for block in blocks
        )
    )
    logger.debug("Extracted %d events for %s", len(records), website_key)
    return list(records)
