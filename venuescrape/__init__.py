"""Event listing scraper: per-site CSS selectors with LLM-inferred fallback."""

__version__ = "0.1.0"
