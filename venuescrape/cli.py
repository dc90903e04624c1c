#!/usr/bin/env python3
"""Command-line interface for venuescrape.

Commands:
  - venuescrape run       : Scrape all configured sites and write event_data_<date>.json
  - venuescrape validate  : Validate a sites config file
  - venuescrape sites     : List configured sites
  - venuescrape doctor    : Check environment readiness (deps, browser, LLM endpoint)

Typical usage:
  venuescrape run --output-dir data
  venuescrape run --sites my_sites.yaml --only eccles snspresents --no-llm
  venuescrape validate --sites my_sites.yaml
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import platform
import sys
from pathlib import Path
from typing import Any

from venuescrape.runtime.results import ConfigError, PersistenceError

logger = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="venuescrape", description="Event listing scraper")
    p.add_argument("--version", action="store_true", help="Print version and exit")
    sub = p.add_subparsers(dest="cmd")

    # run
    pr = sub.add_parser("run", help="Scrape configured sites")
    pr.add_argument("--sites", "-s", default=None, help="Sites config (YAML or JSON)")
    pr.add_argument("--output-dir", "-o", default=None, help="Directory for the output file")
    pr.add_argument("--only", nargs="*", default=None, help="Run only these site keys")
    pr.add_argument("--no-llm", action="store_true", help="Always use default selectors")
    pr.add_argument("--headed", action="store_true", help="Run with a visible browser")
    pr.add_argument("--json-logs", action="store_true", help="Emit JSON logs")
    pr.add_argument("--log-level", default=None, help="DEBUG | INFO | WARNING | ERROR")

    # validate
    pv = sub.add_parser("validate", help="Validate a sites config file")
    pv.add_argument("--sites", "-s", default=None, help="Sites config (YAML or JSON)")
    pv.add_argument("--verbose", "-v", action="store_true", help="Print parsed config")

    # sites
    ps = sub.add_parser("sites", help="List configured sites")
    ps.add_argument("--sites", "-s", default=None, help="Sites config (YAML or JSON)")

    # doctor
    pd = sub.add_parser("doctor", help="Check environment readiness")
    pd.add_argument("--verbose", "-v", action="store_true", help="Print extra diagnostics")

    return p.parse_args(argv)


def _sites_path(arg: str | None) -> Path:
    from venuescrape.config.settings import get_settings

    return Path(arg) if arg else get_settings().SITES_CONFIG_PATH


def main(argv: list[str] | None = None) -> int:
    """Run the CLI with the given arguments."""
    try:
        return _main_impl(argv)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    except PersistenceError as e:
        logger.error(f"Run failed: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        logger.exception("Run failed")
        print(f"Error: {e}", file=sys.stderr)
        return 1


def _main_impl(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)

    if args.version:
        from venuescrape import __version__

        print(f"venuescrape version {__version__}")
        return 0

    if not args.cmd:
        print("Error: Command required. Use --help for usage info.", file=sys.stderr)
        return 1

    if args.cmd == "validate":
        from venuescrape.config.loader import read_raw, validate_site_table

        report = validate_site_table(read_raw(_sites_path(args.sites)))
        if report.ok:
            print(f"Config is VALID ({len(report.sites)} sites).")
            if args.verbose:
                dump = {k: v.model_dump(by_alias=True, exclude_none=True) for k, v in report.sites.items()}
                print(json.dumps(dump, indent=2, ensure_ascii=False))
            return 0

        print("Config is INVALID. Issues found:", file=sys.stderr)
        for issue in report.issues:
            print(f"  - {issue}", file=sys.stderr)
        return 2

    if args.cmd == "sites":
        from venuescrape.config.loader import load_sites

        sites = load_sites(_sites_path(args.sites))
        print(f"{'SITE':<20} {'VENUE':<30} {'URL'}")
        print("-" * 80)
        for key, cfg in sites.items():
            print(f"{key:<20} {cfg.venue:<30} {cfg.url}")
        return 0

    if args.cmd == "doctor":
        report = doctor_environment(verbose=bool(args.verbose))
        print(json.dumps(report, indent=2, ensure_ascii=False))
        return 0 if report.get("ok", False) else 1

    if args.cmd == "run":
        return _run(args)

    return 1


def _run(args: argparse.Namespace) -> int:
    from venuescrape.config.loader import load_sites
    from venuescrape.config.settings import get_settings
    from venuescrape.monitoring.logging import LoggingOptions, setup_logging
    from venuescrape.orchestrator import ScrapeOrchestrator

    base = get_settings()
    overrides: dict[str, Any] = {}
    if args.output_dir:
        overrides["OUTPUT_DIR"] = Path(args.output_dir)
    if args.no_llm:
        overrides["LLM_ENABLED"] = False
    if args.headed:
        overrides["HEADLESS"] = False
    settings = base.model_copy(update=overrides)

    setup_logging(
        LoggingOptions(
            level=args.log_level or settings.LOG_LEVEL,
            json_logs=bool(args.json_logs or settings.JSON_LOGS),
        )
    )

    sites = load_sites(_sites_path(args.sites), only=args.only)
    orch = ScrapeOrchestrator.from_settings(sites, settings)
    report = asyncio.run(orch.run())

    summary = report.as_dict()["summary"]
    print("-" * 40)
    print(f"Sites:       {summary['sites_ok']}/{summary['sites_total']} ok")
    if report.failed_sites:
        print(f"Failed:      {', '.join(report.failed_sites)}")
    print(f"Events:      {summary['saved_events']} saved of {summary['raw_events']} scraped")
    print(f"Output:      {report.output_path}")
    print("-" * 40)
    return 0


def doctor_environment(*, verbose: bool = False) -> dict[str, Any]:
    """
    Checks environment readiness: required packages and the LLM endpoint.
    """
    info: dict[str, Any] = {
        "python": sys.version,
        "platform": platform.platform(),
        "ok": True,
        "checks": {},
    }

    def _check(mod: str) -> tuple[bool, str]:
        try:
            __import__(mod)
            return True, "ok"
        except ImportError as e:
            return False, f"{type(e).__name__}: {e}"

    for m in ["pydantic", "pydantic_settings", "yaml", "playwright", "openai", "instructor", "httpx"]:
        ok, msg = _check(m)
        info["checks"][m] = {"ok": ok, "msg": msg}
        if not ok:
            info["ok"] = False

    from venuescrape.config.settings import get_settings

    settings = get_settings()
    if settings.LLM_ENABLED:
        from venuescrape.ai.llm.provider_router import get_llm_client

        client = get_llm_client(
            settings.LLM_PROVIDER, model_name=settings.LLM_MODEL, base_url=settings.LLM_BASE_URL
        )
        available = client.is_available
        # inference is optional; an unreachable endpoint only means default selectors
        info["checks"]["llm"] = {
            "ok": available,
            "msg": f"{client.provider} {'reachable' if available else 'unavailable'}",
        }

    if verbose:
        info["settings"] = settings.model_dump(mode="json", exclude={"OPENAI_API_KEY"})

    return info


if __name__ == "__main__":
    raise SystemExit(main())
