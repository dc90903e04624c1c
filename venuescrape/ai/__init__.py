from venuescrape.ai.selector_resolver import ResolverOptions, SelectorResolver

__all__ = ["ResolverOptions", "SelectorResolver"]
