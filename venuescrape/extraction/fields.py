"""
venuescrape.extraction.fields

Per-field rules applied to raw text read from one event block.

Each selector entry maps to a FieldRole; each role has one pure handler
(raw text -> output value). Title parts (event, pretitle, subtitle) are
collected on a BlockDraft and assembled into the record's `event` field.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

from venuescrape.extraction.dates import normalize_date
from venuescrape.extraction.urls import strip_query
from venuescrape.schemas.items import REQUIRED_FIELDS, EventRecord


class FieldRole(str, Enum):
    VENUE = "venue"
    PRICE = "price"
    EVENT = "event"
    DATE = "date"
    TICKET_LINK = "ticket_link"
    PRESENTER = "presenter"
    SUPPORTING_ACTS = "supporting_acts"
    GENERIC = "generic"


_ROLE_BY_FIELD = {
    "venue": FieldRole.VENUE,
    "price": FieldRole.PRICE,
    "event": FieldRole.EVENT,
    "date": FieldRole.DATE,
    "ticketLink": FieldRole.TICKET_LINK,
    "pretitle": FieldRole.PRESENTER,
    "subtitle": FieldRole.SUPPORTING_ACTS,
}

# roles that feed the title instead of a record field -> BlockDraft attribute
TITLE_SLOTS = {
    FieldRole.PRESENTER: "presenter",
    FieldRole.EVENT: "main_artist",
    FieldRole.SUPPORTING_ACTS: "supporting_acts",
}

_PRICE = re.compile(r"\$\d+(\.\d{2})?")
SOLD_OUT = "SOLD OUT"


def role_for(field_name: str) -> FieldRole:
    return _ROLE_BY_FIELD.get(field_name, FieldRole.GENERIC)


def reads_href(role: FieldRole) -> bool:
    """Ticket links are read from the anchor's href, everything else from its text."""
    return role is FieldRole.TICKET_LINK


@dataclass(frozen=True)
class FieldContext:
    fallback_venue: str = ""


# ---------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------


def normalize_price(text: str) -> str:
    if "sold out" in text.lower():
        return SOLD_OUT
    m = _PRICE.search(text)
    if m:
        return m.group(0)
    return text.strip()


def _venue(raw: str, ctx: FieldContext) -> str:
    return raw or ctx.fallback_venue


def _price(raw: str, ctx: FieldContext) -> str:
    return normalize_price(raw)


def _date(raw: str, ctx: FieldContext) -> str:
    return normalize_date(raw)


def _ticket_link(raw: str, ctx: FieldContext) -> str:
    return strip_query(raw)


def _verbatim(raw: str, ctx: FieldContext) -> str:
    return raw


ROLE_HANDLERS: dict[FieldRole, Callable[[str, FieldContext], str]] = {
    FieldRole.VENUE: _venue,
    FieldRole.PRICE: _price,
    FieldRole.DATE: _date,
    FieldRole.TICKET_LINK: _ticket_link,
    FieldRole.EVENT: _verbatim,
    FieldRole.PRESENTER: _verbatim,
    FieldRole.SUPPORTING_ACTS: _verbatim,
    FieldRole.GENERIC: _verbatim,
}


def apply_role(role: FieldRole, raw: str, ctx: FieldContext) -> str:
    return ROLE_HANDLERS[role](raw, ctx)


def assemble_title(
    presenter: str,
    main_artist: str,
    supporting_acts: str,
    *,
    uppercase_presenter: bool = True,
) -> str:
    if uppercase_presenter:
        presenter = presenter.upper()
    return " ".join(part for part in (presenter, main_artist, supporting_acts) if part)


# ---------------------------------------------------------------------
# Block assembly
# ---------------------------------------------------------------------


@dataclass
class BlockDraft:
    website: str
    fields: dict[str, str] = field(default_factory=dict)
    presenter: str = ""
    main_artist: str = ""
    supporting_acts: str = ""

    def put(self, name: str, role: FieldRole, value: str) -> None:
        slot = TITLE_SLOTS.get(role)
        if slot:
            setattr(self, slot, value)
        else:
            self.fields[name] = value

    def to_record(self, *, uppercase_presenter: bool = True) -> EventRecord:
        # generic fields only land on record columns; website/event are owned here
        data = {
            k: v for k, v in self.fields.items() if k in REQUIRED_FIELDS and k not in ("website", "event")
        }
        data["website"] = self.website
        data["event"] = assemble_title(
            self.presenter,
            self.main_artist,
            self.supporting_acts,
            uppercase_presenter=uppercase_presenter,
        )
        return EventRecord.model_validate(data)
