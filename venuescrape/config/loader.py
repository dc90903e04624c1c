"""
venuescrape.config.loader

Load the site table from a YAML or JSON file.

File shape: a mapping of site key -> site config, optionally nested under a
top-level "sites" key. Returns validated SiteConfig objects plus a list of
human-readable issues when validation is requested without raising.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from venuescrape.runtime.results import ConfigError

from .schema import SiteConfig, SiteTable

JsonDict = dict[str, Any]


@dataclass(frozen=True)
class ValidationReport:
    sites: SiteTable
    issues: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.issues


def read_raw(path: str | Path) -> JsonDict:
    p = Path(path)
    if not p.exists():
        raise ConfigError(f"Sites config not found: {p}")

    text = p.read_text(encoding="utf-8")
    try:
        if p.suffix.lower() == ".json":
            data = json.loads(text)
        else:
            data = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigError(f"Could not parse {p}: {e}") from e

    if isinstance(data, dict) and isinstance(data.get("sites"), dict):
        data = data["sites"]
    if not isinstance(data, dict):
        raise ConfigError(f"{p}: expected a mapping of site key -> site config")
    return data


def validate_site_table(raw: Mapping[str, Any]) -> ValidationReport:
    """Validate every entry; invalid entries are reported and left out."""
    sites: SiteTable = {}
    issues: list[str] = []

    if not raw:
        issues.append("no sites configured")

    for key, entry in raw.items():
        key = str(key).strip()
        if not key or " " in key:
            issues.append(f"{key!r}: site key must be non-empty and contain no spaces")
            continue
        if not isinstance(entry, Mapping):
            issues.append(f"{key}: site config must be a mapping")
            continue
        try:
            sites[key] = SiteConfig.model_validate(dict(entry))
        except ValidationError as e:
            for err in e.errors():
                loc = ".".join(str(x) for x in err.get("loc", ()))
                issues.append(f"{key}.{loc}: {err.get('msg')}")

    return ValidationReport(sites=sites, issues=issues)


def parse_site_table(raw: Mapping[str, Any]) -> SiteTable:
    report = validate_site_table(raw)
    if not report.ok:
        raise ConfigError("Invalid site table:\n  " + "\n  ".join(report.issues))
    return report.sites


def load_sites(path: str | Path, *, only: list[str] | None = None) -> SiteTable:
    """
    Load and validate the site table at `path`.

    `only` keeps just the named site keys (unknown keys raise ConfigError).
    """
    sites = parse_site_table(read_raw(path))
    if only:
        missing = [k for k in only if k not in sites]
        if missing:
            raise ConfigError(f"Unknown site key(s): {', '.join(missing)}")
        sites = {k: v for k, v in sites.items() if k in only}
    return sites
