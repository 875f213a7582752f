#!/usr/bin/env python3
"""Command-line entry point - extract one company's report and export it.

This module orchestrates a single extraction run:
1. Provision a browser session (local Chromium or Browserbase)
2. Search the portal, pick the company, open the requested year's report
3. Parse the statements and assemble the report
4. Optionally save JSON and/or Excel exports

Usage (from project root):
    python -m ebeszamolo.main --tax-number 10537914 --year 2023
    python -m ebeszamolo.main --name "OTP Bank Nyrt." -y 2023 --xlsx-out data/output/otp.xlsx
    python -m ebeszamolo.main -n "Richter Gedeon" --provider browserbase --stream

CLI Flags:
    --tax-number, -t    Tax number to search (first 8 digits are used)
    --name, -n          Company name to search (legal-form suffix optional)
    --year, -y          Fiscal year (default: run.default_year from config)
    --provider          local (default) or browserbase
    --no-headless       Show the local browser window
    --hold              Seconds to keep the session open after the result
    --budget            Wall-clock limit for the run in seconds (0 = none)
    --json-out          Directory for the JSON export
    --xlsx-out          Path of the Excel export
    --stream            Print progress events as JSON lines on stdout
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from ebeszamolo.config import get_run_config, setup_logging
from ebeszamolo.extractor.types import SearchKind
from ebeszamolo.runner import ProgressEvent, ScrapeRequest, run_scrape
from ebeszamolo.scraper.sessions import BrowserbaseSessionProvider, LocalSessionProvider, SessionProvider
from ebeszamolo.writer.report_writer import save_report_json, save_report_workbook

logger = setup_logging(__name__)


def build_provider(name: str, headless: bool = True) -> SessionProvider:
    """Return the session provider selected on the command line.

    Raises
    ------
    ValueError
        If ``name`` is unknown or Browserbase credentials are missing.
    """
    if name == "local":
        return LocalSessionProvider(headless=headless)
    if name == "browserbase":
        return BrowserbaseSessionProvider()
    msg = f"Unknown session provider: {name}"
    raise ValueError(msg)


def print_event(event: ProgressEvent) -> None:
    """Write one event as a JSON line to stdout."""
    sys.stdout.write(event.to_json_line())
    sys.stdout.flush()


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    default_year = get_run_config()["default_year"]
    parser = argparse.ArgumentParser(
        description="Extract income statement and balance sheet data from e-beszamolo.im.gov.hu.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m ebeszamolo.main --tax-number 10537914 --year 2023
  python -m ebeszamolo.main --name "OTP Bank Nyrt." --json-out data/output
  python -m ebeszamolo.main -n "Richter Gedeon" --provider browserbase --stream
        """,
    )
    search = parser.add_mutually_exclusive_group(required=True)
    search.add_argument("--tax-number", "-t", help="Tax number (adószám)")
    search.add_argument("--name", "-n", help="Company name (cégnév)")
    parser.add_argument("--year", "-y", type=int, default=default_year, help=f"Fiscal year (default: {default_year})")
    parser.add_argument("--provider", choices=["local", "browserbase"], default="local", help="Browser session provider")
    parser.add_argument("--no-headless", action="store_true", help="Show browser window (local provider)")
    parser.add_argument("--hold", type=float, default=None, help="Seconds to keep the session open after the result")
    parser.add_argument("--budget", type=float, default=None, help="Wall-clock limit in seconds (0 disables)")
    parser.add_argument("--json-out", type=Path, default=None, help="Directory for the JSON export")
    parser.add_argument("--xlsx-out", type=Path, default=None, help="Path of the Excel export")
    parser.add_argument("--stream", action="store_true", help="Print progress events as JSON lines")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Parse CLI flags, run one extraction and export the result.

    Returns
    -------
    int
        ``0`` when a report was extracted; ``1`` otherwise.
    """
    args = build_parser().parse_args(argv)

    if args.tax_number:
        request = ScrapeRequest(SearchKind.TAX_ID, args.tax_number, args.year)
    else:
        request = ScrapeRequest(SearchKind.NAME, args.name, args.year)

    try:
        provider = build_provider(args.provider, headless=not args.no_headless)
    except ValueError as e:
        logger.error("%s", e)
        return 1

    outcome = run_scrape(
        request,
        provider,
        on_event=print_event if args.stream else None,
        hold_seconds=args.hold if args.hold is not None else (None if args.stream else 0),
        budget_seconds=args.budget,
    )

    if outcome.report is None:
        logger.error("Extraction failed: %s", outcome.error)
        return 1

    if args.json_out is not None:
        save_report_json(outcome.report, args.json_out)
    if args.xlsx_out is not None:
        save_report_workbook(outcome.report, args.xlsx_out)

    report = outcome.report
    logger.info(
        "%s (%s): %d income statement rows, %d balance sheet rows",
        report.company_name,
        report.target_year,
        len(report.income_statement),
        len(report.balance_sheet),
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
