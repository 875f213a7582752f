"""Locate the filed report covering a requested fiscal year.

Each filed report on a company page sits in its own container whose text holds
the filing date and the covered period, e.g.
``"Közzététel: 2024. május 21.  2023. január 01. - 2023. december 31."``.
An entry covers year ``Y`` when its text contains ``"Y. december 31"``; matching
on the year-end marker keeps a 2024 filing date from being mistaken for a 2024
report.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from ebeszamolo.config import get_source_config, setup_logging
from ebeszamolo.extractor.dom import select_by_class, visible_text
from ebeszamolo.extractor.types import ReportLinkResult

if TYPE_CHECKING:
    from lxml.html import HtmlElement

logger = setup_logging(__name__)

YEAR_END_PATTERN = re.compile(r"(\d{4})\.\s*december\s*31", re.IGNORECASE)


def _year_end_pattern(year: int) -> re.Pattern[str]:
    return re.compile(rf"{year}\.\s*december\s*31", re.IGNORECASE)


def _link_selector(link: HtmlElement, link_selector: str) -> str | None:
    """Build a selector addressing exactly this report link, keyed by ``data-code``."""
    code = link.get("data-code")
    if not code:
        return None
    return f'{link_selector}[data-code="{code}"]'


def list_available_years(tree: HtmlElement, container_selector: str | None = None) -> list[int]:
    """Return the distinct covered years on a company page, newest first."""
    if container_selector is None:
        container_selector = get_source_config()["selectors"]["report_container"]

    years: set[int] = set()
    for container in select_by_class(tree, container_selector):
        match = YEAR_END_PATTERN.search(visible_text(container))
        if match:
            years.add(int(match.group(1)))
    return sorted(years, reverse=True)


def find_report_link(
    tree: HtmlElement,
    requested_year: int,
    selectors: dict[str, str] | None = None,
) -> ReportLinkResult:
    """Find the report link for ``requested_year`` on a company page.

    Parameters
    ----------
    tree : HtmlElement
        Parsed company detail page.
    requested_year : int
        Fiscal year whose December 31 year-end report is wanted.
    selectors : dict[str, str] | None, optional
        ``report_container`` and ``report_link`` selectors; defaults to
        ``sources.e_beszamolo.selectors`` from ``config.json``.

    Returns
    -------
    ReportLinkResult
        ``link_ref`` is a CSS selector for the matching link. The available
        years are always listed so a failure can tell the caller what exists.
    """
    if selectors is None:
        selectors = get_source_config()["selectors"]
    container_selector = selectors["report_container"]
    link_selector = selectors["report_link"]

    available_years = list_available_years(tree, container_selector)
    wanted = _year_end_pattern(requested_year)

    for container in select_by_class(tree, container_selector):
        if not wanted.search(visible_text(container)):
            continue

        links = select_by_class(container, link_selector)
        if not links:
            logger.debug("Entry for %s has no report link, skipping", requested_year)
            continue

        link_ref = _link_selector(links[0], link_selector)
        if link_ref is None:
            logger.debug("Report link for %s has no data-code, skipping", requested_year)
            continue

        logger.debug("Report for %s resolved to %s", requested_year, link_ref)
        return ReportLinkResult(found=True, link_ref=link_ref, available_years=available_years)

    logger.info("No report for %s; available years: %s", requested_year, available_years)
    return ReportLinkResult(found=False, link_ref=None, available_years=available_years)
