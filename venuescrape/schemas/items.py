from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# Output keys, in file order
REQUIRED_FIELDS = ("website", "venue", "price", "event", "date", "ticketLink")


class EventRecord(BaseModel):
    """One listed event, as written to the output file."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    website: str = ""
    venue: str = ""
    price: str = ""
    event: str = ""
    date: str = ""
    ticket_link: str = Field(default="", alias="ticketLink")

    @property
    def is_complete(self) -> bool:
        return all(self.as_dict()[k] for k in REQUIRED_FIELDS)

    def as_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)
