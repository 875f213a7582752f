"""Extraction dataclasses and type definitions.

This module contains pure data structures with no business logic dependencies,
ensuring they can be imported without circular dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ebeszamolo.utils.parsing import normalize_tax_number, strip_legal_suffix

__all__ = [
    "CandidateSelection",
    "CompanyFinancialReport",
    "CompanyInfo",
    "ExtractedStatements",
    "FinancialRow",
    "FinancialStatement",
    "ReportLinkResult",
    "ResultCandidate",
    "SearchCriterion",
    "SearchKind",
]


class SearchKind(str, Enum):
    """Which search form field a criterion is submitted through."""

    NAME = "name"
    TAX_ID = "taxNumber"


@dataclass(frozen=True)
class SearchCriterion:
    """Immutable search input.

    Attributes
    ----------
    kind : SearchKind
        Name search or tax-id search.
    value : str
        Suffix-stripped company name, or the tax id reduced to at most 8 digits.
    """

    kind: SearchKind
    value: str

    @classmethod
    def for_tax_id(cls, raw: str) -> SearchCriterion:
        """Build a tax-id criterion from free-form input (dashes, spaces allowed)."""
        return cls(SearchKind.TAX_ID, normalize_tax_number(raw))

    @classmethod
    def for_name(cls, raw: str) -> SearchCriterion:
        """Build a name criterion with legal-form suffixes removed."""
        return cls(SearchKind.NAME, strip_legal_suffix(raw))

    @property
    def is_tax_search(self) -> bool:
        return self.kind is SearchKind.TAX_ID


@dataclass
class ResultCandidate:
    """One results-listing row considered by the candidate matcher."""

    row_index: int
    merged_name_count: int
    is_exact_match: bool = False


@dataclass
class CandidateSelection:
    """Outcome of candidate matching: ``index`` is meaningful only when ``found``."""

    found: bool
    index: int = 0


@dataclass
class ReportLinkResult:
    """Outcome of report-year resolution.

    Attributes
    ----------
    found : bool
        Whether an entry covering the requested year was found.
    link_ref : str | None
        CSS selector of the report link when found.
    available_years : list[int]
        Distinct covered years, newest first; always populated on failure.
    """

    found: bool
    link_ref: str | None = None
    available_years: list[int] = field(default_factory=list)


@dataclass
class FinancialRow:
    """A single statement line identified by its three-digit line code."""

    line_code: str
    label: str
    previous_year_value: float = 0.0
    amendment_value: float = 0.0
    target_year_value: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        """Serialize using the portal export field names."""
        return {
            "rowNumber": self.line_code,
            "itemCode": "",
            "itemName": self.label,
            "previousYearData": self.previous_year_value,
            "amendments": self.amendment_value,
            "targetYearData": self.target_year_value,
        }


@dataclass
class FinancialStatement:
    """Ordered statement rows; order follows the source document."""

    rows: list[FinancialRow] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.rows)

    def is_empty(self) -> bool:
        return not self.rows

    def get_row(self, line_code: str) -> FinancialRow | None:
        """Return the first row with the given line code."""
        return next((row for row in self.rows if row.line_code == line_code), None)

    def to_dict(self) -> dict[str, Any]:
        return {"rows": [row.to_dict() for row in self.rows]}


@dataclass
class CompanyInfo:
    """Identity fields scraped from a page; missing labels stay empty."""

    company_name: str = ""
    registration_number: str = ""
    tax_number: str = ""
    headquarters: str = ""


@dataclass
class ExtractedStatements:
    """Everything the financial table parser reads from a report page.

    ``previous_year`` and ``target_year`` are ``0`` when the page carries no
    fiscal period marker.
    """

    info: CompanyInfo = field(default_factory=CompanyInfo)
    filing_date: str = ""
    currency: str = "HUF"
    unit: str = "ezer"
    previous_year: int = 0
    target_year: int = 0
    income_statement: FinancialStatement = field(default_factory=FinancialStatement)
    balance_sheet: FinancialStatement = field(default_factory=FinancialStatement)

    def has_rows(self) -> bool:
        """True when at least one statement produced a row."""
        return not (self.income_statement.is_empty() and self.balance_sheet.is_empty())


@dataclass
class CompanyFinancialReport:
    """Final record assembled at the end of a successful run."""

    company_name: str
    registration_number: str
    tax_number: str
    headquarters: str
    year: int
    previous_year: int
    target_year: int
    currency: str
    unit: str
    filing_date: str
    income_statement: FinancialStatement
    balance_sheet: FinancialStatement
    extracted_at: str
    source_url: str

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the JSON document shape used by downstream exports."""
        return {
            "companyName": self.company_name,
            "registrationNumber": self.registration_number,
            "taxNumber": self.tax_number,
            "headquarter": self.headquarters,
            "year": self.year,
            "previousYear": self.previous_year,
            "targetYear": self.target_year,
            "currency": self.currency,
            "unit": self.unit,
            "filingDate": self.filing_date,
            "incomeStatement": self.income_statement.to_dict(),
            "balanceSheet": self.balance_sheet.to_dict(),
            "extractedAt": self.extracted_at,
            "sourceURL": self.source_url,
        }
