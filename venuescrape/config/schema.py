"""
venuescrape.config.schema

Pydantic models for the per-site configuration table.

Config files keep the camelCase keys used by the site tables
(eventListSelector, defaultSelectors, ticketLink, ...); snake_case
attribute names are accepted too.

Requires: pydantic>=2
"""

from __future__ import annotations

from typing import Any
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, Field, field_validator

# ----------------------------
# Selectors
# ----------------------------


class SelectorSet(BaseModel):
    """
    Logical field name -> CSS selector, relative to one event block.

    Also the response schema for LLM selector inference, so descriptions
    double as instructions to the model.
    """

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    venue: str = Field(..., min_length=1, description="CSS selector for the venue name")
    price: str = Field(..., min_length=1, description="CSS selector for the ticket price")
    event: str = Field(..., min_length=1, description="CSS selector for the headliner / event title")
    date: str = Field(..., min_length=1, description="CSS selector for the event date")
    ticket_link: str = Field(
        ...,
        min_length=1,
        alias="ticketLink",
        description="CSS selector for the <a> element linking to tickets",
    )
    subtitle: str | None = Field(default=None, description="CSS selector for supporting acts")
    pretitle: str | None = Field(default=None, description="CSS selector for the presenter line")

    def items(self) -> list[tuple[str, str]]:
        """(logical name, selector) pairs in declaration order, empty selectors skipped."""
        pairs = []
        for name, info in type(self).model_fields.items():
            selector = getattr(self, name)
            if selector:
                pairs.append((info.alias or name, selector))
        return pairs


class SelectorProposal(BaseModel):
    """Structured-completion response wrapper."""

    selectors: SelectorSet


# ----------------------------
# Site (top-level unit)
# ----------------------------


class SiteConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    url: str = Field(..., description="Listing page URL")
    venue: str = Field(..., min_length=1, description="Fallback venue label")

    event_list_selector: str = Field(..., min_length=1, alias="eventListSelector")
    event_section_selector: str = Field(..., min_length=1, alias="eventSectionSelector")
    upcoming_events_selector: str | None = Field(default=None, alias="upcomingEventsSelector")

    default_selectors: SelectorSet = Field(..., alias="defaultSelectors")

    # Some sites print the presenter line in mixed case; uppercasing it keeps titles uniform.
    uppercase_presenter: bool = Field(default=True, alias="uppercasePresenter")
    infer_selectors: bool = Field(default=True, alias="inferSelectors")

    @field_validator("url")
    @classmethod
    def _validate_url(cls, v: str) -> str:
        v = v.strip()
        parts = urlsplit(v)
        if parts.scheme not in ("http", "https") or not parts.netloc:
            raise ValueError(f"url must be an absolute http(s) URL: {v!r}")
        return v


SiteTable = dict[str, SiteConfig]


def export_json_schema() -> dict[str, Any]:
    """JSON schema for a single SiteConfig entry."""
    return SiteConfig.model_json_schema(by_alias=True)
