from venuescrape.schemas.items import REQUIRED_FIELDS, EventRecord

__all__ = ["EventRecord", "REQUIRED_FIELDS"]
