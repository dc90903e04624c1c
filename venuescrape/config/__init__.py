from venuescrape.config.loader import load_sites, parse_site_table, validate_site_table
from venuescrape.config.schema import SelectorProposal, SelectorSet, SiteConfig, SiteTable
from venuescrape.config.settings import Settings, get_settings

__all__ = [
    "SelectorProposal",
    "SelectorSet",
    "Settings",
    "SiteConfig",
    "SiteTable",
    "get_settings",
    "load_sites",
    "parse_site_table",
    "validate_site_table",
]
