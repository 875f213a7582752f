"""Extractor module: pure parsers over parsed page snapshots.

Key exports:
    select_candidate: Pick the results row to open for a search
    find_report_link: Locate the report covering a fiscal year on a company page
    extract_statements: Parse metadata and both statements from a report page
    extract_company_info: Read identity fields from a company detail page
"""

from ebeszamolo.extractor.candidate_matcher import (
    parse_result_rows,
    rank_candidates,
    select_candidate,
)
from ebeszamolo.extractor.dom import parse_html, visible_text
from ebeszamolo.extractor.metadata import extract_company_info
from ebeszamolo.extractor.report_resolver import find_report_link, list_available_years
from ebeszamolo.extractor.table_parser import extract_statements, parse_row, parse_statement_rows
from ebeszamolo.extractor.types import (
    CandidateSelection,
    CompanyFinancialReport,
    CompanyInfo,
    ExtractedStatements,
    FinancialRow,
    FinancialStatement,
    ReportLinkResult,
    ResultCandidate,
    SearchCriterion,
    SearchKind,
)

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
    "extract_company_info",
    "extract_statements",
    "find_report_link",
    "list_available_years",
    "parse_html",
    "parse_result_rows",
    "parse_row",
    "parse_statement_rows",
    "rank_candidates",
    "select_candidate",
    "visible_text",
]
