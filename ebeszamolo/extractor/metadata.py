"""Label-based metadata extraction from page text.

Both the company detail page and the report page print their identity fields
as ``Label: value`` pairs. A missing label yields an empty string (or the
configured default for currency and unit) instead of an error.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from ebeszamolo.extractor.dom import visible_text
from ebeszamolo.extractor.types import CompanyInfo

if TYPE_CHECKING:
    from lxml.html import HtmlElement

__all__ = [
    "extract_company_info",
    "extract_fiscal_period",
    "extract_report_info",
    "extract_report_metadata",
    "match_label",
]

# Company detail page
COMPANY_PAGE_PATTERNS = {
    "company_name": re.compile(r"Cég neve:\s*([^\n\t]+)"),
    "registration_number": re.compile(r"(?:Cégjegyzékszáma|Nyilvántartási szám):\s*(\d{2}-\d{2}-\d{6})"),
    "tax_number": re.compile(r"Adószám:\s*([\d-]+)"),
    "headquarters": re.compile(r"Székhely:\s*([^\n\t]+)"),
}

# Report page
REPORT_PAGE_PATTERNS = {
    "company_name": re.compile(r"A cég elnevezése:\s*([^\n\t]+)"),
    "registration_number": re.compile(r"Nyilvántartási száma?:\s*(\d{2}-\d{2}-\d{6})"),
    "tax_number": re.compile(r"Adószáma?:\s*([\d-]+)"),
    "headquarters": re.compile(r"Székhely:\s*([^\n\t]+)"),
}

FILING_DATE_PATTERN = re.compile(r"Elfogadás időpontja:\s*(\d{4}\.\s*[a-zá-ű]+\s*\d{1,2}\.?)", re.IGNORECASE)
CURRENCY_PATTERN = re.compile(r"Pénznem:\s*(HUF|EUR|USD)")
UNIT_PATTERN = re.compile(r"Pénzegység:\s*(ezer|millió)")

# "2024. január 01. - 2024. december 31."
FISCAL_PERIOD_PATTERN = re.compile(
    r"(\d{4})\.\s*január\s*\d{1,2}\.\s*[-–]\s*(\d{4})\.\s*december\s*\d{1,2}\.",
    re.IGNORECASE,
)


def match_label(pattern: re.Pattern[str], text: str, default: str = "") -> str:
    """Return the first capture group of ``pattern`` in ``text``, stripped, or ``default``."""
    match = pattern.search(text)
    return match.group(1).strip() if match else default


def _company_info(text: str, patterns: dict[str, re.Pattern[str]]) -> CompanyInfo:
    return CompanyInfo(**{field_name: match_label(pattern, text) for field_name, pattern in patterns.items()})


def extract_company_info(tree: HtmlElement) -> CompanyInfo:
    """Read identity fields from the company detail page."""
    return _company_info(visible_text(tree), COMPANY_PAGE_PATTERNS)


def extract_report_info(page_text: str) -> CompanyInfo:
    """Read identity fields printed in the header of a report page."""
    return _company_info(page_text, REPORT_PAGE_PATTERNS)


def extract_fiscal_period(page_text: str) -> tuple[int, int]:
    """Return ``(previous_year, target_year)`` from the fiscal period marker.

    The target year is the later year of the January–December range and the
    previous year is the one before it. Both are ``0`` when the marker is
    missing, leaving the caller to fall back to the requested year.
    """
    match = FISCAL_PERIOD_PATTERN.search(page_text)
    if not match:
        return 0, 0
    target_year = int(match.group(2))
    return target_year - 1, target_year


def extract_report_metadata(
    page_text: str,
    default_currency: str = "HUF",
    default_unit: str = "ezer",
) -> dict[str, str]:
    """Return filing date, currency and unit from a report page's text."""
    return {
        "filing_date": match_label(FILING_DATE_PATTERN, page_text),
        "currency": match_label(CURRENCY_PATTERN, page_text, default_currency),
        "unit": match_label(UNIT_PATTERN, page_text, default_unit),
    }
