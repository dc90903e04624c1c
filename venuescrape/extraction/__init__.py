from venuescrape.extraction.dates import normalize_date, parse_date
from venuescrape.extraction.extractor import extract_events
from venuescrape.extraction.fields import FieldRole, assemble_title, normalize_price
from venuescrape.extraction.urls import canonicalize, strip_query

__all__ = [
    "FieldRole",
    "assemble_title",
    "canonicalize",
    "extract_events",
    "normalize_date",
    "normalize_price",
    "parse_date",
    "strip_query",
]
