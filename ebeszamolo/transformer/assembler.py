"""Report assembly and provenance stamping.

A run produces two partial extractions: identity fields read on the company
detail page and the statement data (plus its own copy of the identity fields)
read on the report page. This module merges them into the final
:class:`CompanyFinancialReport`.

Fallback precedence
-------------------
For every identity field the company-page value wins when non-empty, then the
report-page value. The company name additionally falls back to the name the
caller searched for.

Notes
-----
The report is stamped with an ISO 8601 UTC extraction timestamp and the address
of the report page it was read from.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from ebeszamolo.config import setup_logging
from ebeszamolo.errors import ReportYearUnavailableError
from ebeszamolo.extractor.types import CompanyFinancialReport

if TYPE_CHECKING:
    from collections.abc import Iterable

    from ebeszamolo.extractor.types import CompanyInfo, ExtractedStatements

# Module logger for assembly operations
logger = setup_logging(__name__)


def first_non_empty(*values: str | None) -> str:
    """Return the first value that is not empty after stripping, else ``""``."""
    return next((value.strip() for value in values if value and value.strip()), "")


def utc_timestamp() -> str:
    """Current time as an ISO 8601 UTC string."""
    return datetime.now(UTC).isoformat()


def assemble_report(
    company_info: CompanyInfo,
    extracted: ExtractedStatements,
    requested_year: int,
    source_url: str,
    search_value: str = "",
    original_name: str | None = None,
    extracted_at: str | None = None,
    available_years: Iterable[int] = (),
) -> CompanyFinancialReport:
    """Merge company-page and report-page extractions into one report.

    Parameters
    ----------
    company_info : CompanyInfo
        Identity fields from the company detail page.
    extracted : ExtractedStatements
        Output of the financial table parser for the report page.
    requested_year : int
        Fiscal year the caller asked for.
    source_url : str
        Address of the report page.
    search_value : str, optional
        Submitted search value; last-resort company name.
    original_name : str, optional
        Name exactly as the caller typed it (before suffix stripping).
    extracted_at : str, optional
        Timestamp override; defaults to now in UTC.
    available_years : Iterable[int], optional
        Years listed on the company page, reported if the year check fails.

    Returns
    -------
    CompanyFinancialReport
        Report whose ``target_year`` equals ``requested_year``.

    Raises
    ------
    ReportYearUnavailableError
        If the report page states a fiscal period ending in a different year.
    """
    if extracted.target_year and extracted.target_year != requested_year:
        logger.warning(
            "Report page covers %s but %s was requested",
            extracted.target_year,
            requested_year,
        )
        raise ReportYearUnavailableError(requested_year, available_years)

    report_info = extracted.info
    report = CompanyFinancialReport(
        company_name=first_non_empty(
            company_info.company_name,
            report_info.company_name,
            original_name,
            search_value,
        ),
        registration_number=first_non_empty(company_info.registration_number, report_info.registration_number),
        tax_number=first_non_empty(company_info.tax_number, report_info.tax_number),
        headquarters=first_non_empty(company_info.headquarters, report_info.headquarters),
        year=requested_year,
        previous_year=extracted.previous_year or requested_year - 1,
        target_year=extracted.target_year or requested_year,
        currency=extracted.currency,
        unit=extracted.unit,
        filing_date=extracted.filing_date,
        income_statement=extracted.income_statement,
        balance_sheet=extracted.balance_sheet,
        extracted_at=extracted_at or utc_timestamp(),
        source_url=source_url,
    )

    logger.debug("Assembled report for %s (%s)", report.company_name, report.target_year)
    return report
