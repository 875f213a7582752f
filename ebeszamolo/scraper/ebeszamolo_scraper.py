"""Navigation state machine for the e-beszámoló portal.

Drives one browser page through the portal's server-rendered workflow:

    INIT -> FORM_SUBMITTED -> (TERMS_GATE) -> RESULTS_READY -> COMPANY_PAGE_OPEN
         -> REPORT_LINK_RESOLVED -> REPORT_PAGE_OPEN -> EXTRACTED

Any failure moves the run to ``FAILED`` and the public entry points return
``None``; a half-populated report is never returned. Page content is captured
with ``page.content()`` at each decision point and handed to the pure parsers
in :mod:`ebeszamolo.extractor`.

The terms-of-use gate appears at most once per browser session. Accepting it
swallows the first search submission, so the search is submitted again.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from enum import Enum
from typing import TYPE_CHECKING, Any

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeout

from ebeszamolo.config import get_config, get_run_config, get_source_config, get_table_parsing_config, setup_logging
from ebeszamolo.errors import (
    CompanyNotFoundError,
    ExtractionEmptyError,
    NavigationTimeoutError,
    ReportYearUnavailableError,
    ScrapeError,
)
from ebeszamolo.extractor.candidate_matcher import parse_result_rows, select_candidate
from ebeszamolo.extractor.dom import parse_html
from ebeszamolo.extractor.metadata import extract_company_info
from ebeszamolo.extractor.report_resolver import find_report_link
from ebeszamolo.extractor.table_parser import extract_statements
from ebeszamolo.extractor.types import SearchCriterion
from ebeszamolo.transformer.assembler import assemble_report

if TYPE_CHECKING:
    from lxml.html import HtmlElement
    from playwright.sync_api import Page

    from ebeszamolo.extractor.types import CompanyFinancialReport

logger = setup_logging(__name__)


class ScrapeState(str, Enum):
    """Steps of a single extraction run."""

    INIT = "init"
    FORM_SUBMITTED = "form_submitted"
    TERMS_GATE = "terms_gate"
    RESULTS_READY = "results_ready"
    COMPANY_PAGE_OPEN = "company_page_open"
    REPORT_LINK_RESOLVED = "report_link_resolved"
    REPORT_PAGE_OPEN = "report_page_open"
    EXTRACTED = "extracted"
    FAILED = "failed"


class EBeszamoloScraper:
    """Session driver bound to one browser page.

    Parameters
    ----------
    page : Page
        Page of a provisioned browser session.
    config : dict[str, Any] | None, optional
        Full project config; loaded from ``config.json`` when ``None``.
    sleep : Callable[[float], None], optional
        Pause function for settle delays (tests pass a no-op).

    Attributes
    ----------
    state : ScrapeState
        Current step of the run in progress (or the last one).
    terms_accepted : bool
        Whether the terms gate was already accepted in this session.
    last_error : Exception | None
        Failure of the most recent run, ``None`` after a success.
    """

    def __init__(
        self,
        page: Page,
        config: dict[str, Any] | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.page = page
        self.config = config if config is not None else get_config()
        self.source = get_source_config(self.config)
        self.selectors: dict[str, str] = self.source["selectors"]
        self.timeouts: dict[str, int] = self.source.get("timeouts_ms", {})
        self.delays: dict[str, int] = self.source.get("delays_ms", {})
        self.parsing_config = get_table_parsing_config(self.config)
        self.default_year = get_run_config(self.config)["default_year"]
        self._sleep = sleep

        self.state = ScrapeState.INIT
        self.terms_accepted = False
        self.last_error: Exception | None = None

        self.page.set_default_timeout(self.timeouts.get("default", 30000))

    # =========================================================================
    # Entry points
    # =========================================================================

    def scrape_by_identifier(self, identifier: str, year: int | None = None) -> CompanyFinancialReport | None:
        """Extract the report of the company with the given tax number.

        Parameters
        ----------
        identifier : str
            Tax number in any format (``12345678-2-41``); only its first 8
            digits are searched.
        year : int | None, optional
            Fiscal year; defaults to ``run.default_year``.

        Returns
        -------
        CompanyFinancialReport | None
            ``None`` on any failure; the reason is kept in :attr:`last_error`.
        """
        criterion = SearchCriterion.for_tax_id(identifier)
        logger.info("Processing tax number: %s", criterion.value)
        return self._run(criterion, year)

    def scrape_by_name(self, name: str, year: int | None = None) -> CompanyFinancialReport | None:
        """Extract the report of the company with the given name.

        Legal-form suffixes are stripped before searching, and only a row that
        matches the name exactly or by prefix is ever opened.
        """
        criterion = SearchCriterion.for_name(name)
        logger.info("Processing: %s (normalized: %s)", name, criterion.value)
        return self._run(criterion, year, original_name=name)

    def _run(
        self,
        criterion: SearchCriterion,
        year: int | None,
        original_name: str | None = None,
    ) -> CompanyFinancialReport | None:
        """Run :meth:`scrape` and turn every failure into ``None``."""
        self.last_error = None
        try:
            report = self.scrape(criterion, year or self.default_year, original_name=original_name)
        except ScrapeError as e:
            self._fail(e)
            logger.error("✗ %s", e)
            return None
        except Exception as e:
            self._fail(e)
            logger.exception("✗ Scraping error: %s", e)
            return None

        logger.info("✓ Successfully scraped: %s", report.company_name)
        return report

    def _fail(self, error: Exception) -> None:
        self.last_error = error
        self._transition(ScrapeState.FAILED)

    # =========================================================================
    # State machine
    # =========================================================================

    def scrape(
        self,
        criterion: SearchCriterion,
        year: int,
        original_name: str | None = None,
    ) -> CompanyFinancialReport:
        """Walk the full workflow for one search and return the assembled report.

        Raises
        ------
        ValueError
            If the search value is empty.
        CompanyNotFoundError
            If no results render or none matches the criterion.
        ReportYearUnavailableError
            If the company has no report for ``year``.
        ExtractionEmptyError
            If the report page holds no recognizable statement rows.
        NavigationTimeoutError
            If any other navigation or wait step times out.
        """
        if not criterion.value:
            msg = "Search value is empty"
            raise ValueError(msg)

        self._transition(ScrapeState.INIT)
        try:
            self._open_search_page()
            self._submit_search(criterion)

            if self._handle_terms_gate():
                self._submit_search(criterion)
                self._pause("after_resubmit")

            self._wait_for_results()

            selection = select_candidate(
                parse_result_rows(self._snapshot(), self.selectors.get("results_header", "Cégnév")),
                criterion,
            )
            if not selection.found:
                msg = f"No matching company for {criterion.value!r}"
                raise CompanyNotFoundError(msg)

            self._open_company_page(selection.index)
            company_tree = self._snapshot()
            company_info = extract_company_info(company_tree)

            logger.info("  → Looking for financial reports for year %s...", year)
            link_result = find_report_link(company_tree, year, self.selectors)
            if not link_result.found or link_result.link_ref is None:
                raise ReportYearUnavailableError(year, link_result.available_years)
            self._transition(ScrapeState.REPORT_LINK_RESOLVED)

            self._open_report_page(link_result.link_ref)

            logger.info("  → Extracting financial data tables...")
            extracted = extract_statements(self._snapshot(), self.parsing_config)
            if not extracted.has_rows():
                msg = f"No statement rows recognized on {self.page.url}"
                raise ExtractionEmptyError(msg)

            report = assemble_report(
                company_info,
                extracted,
                requested_year=year,
                source_url=self.page.url,
                search_value=criterion.value,
                original_name=original_name,
                available_years=link_result.available_years,
            )
        except PlaywrightTimeout as e:
            msg = f"Navigation timed out in state {self.state.value}: {e}"
            raise NavigationTimeoutError(msg) from e

        self._transition(ScrapeState.EXTRACTED)
        return report

    def _transition(self, state: ScrapeState) -> None:
        logger.debug("State %s -> %s", self.state.value, state.value)
        self.state = state

    def _pause(self, delay_key: str) -> None:
        delay_ms = self.delays.get(delay_key, 0)
        if delay_ms:
            self._sleep(delay_ms / 1000)

    def _snapshot(self) -> HtmlElement:
        """Parse the current page content for the pure extractors."""
        return parse_html(self.page.content())

    def _open_search_page(self) -> None:
        url = f"{self.source['base_url']}{self.source['search_path']}"
        logger.info("  → Navigating to search page...")
        self.page.goto(url, wait_until="networkidle", timeout=self.timeouts.get("navigation", 60000))

    def _submit_search(self, criterion: SearchCriterion) -> None:
        if criterion.is_tax_search:
            logger.info("  → Searching by tax number...")
            self.page.fill(self.selectors["tax_number_input"], criterion.value)
        else:
            logger.info("  → Searching by company name...")
            self.page.fill(self.selectors["name_input"], criterion.value)
        self.page.click(self.selectors["submit"])
        self._transition(ScrapeState.FORM_SUBMITTED)

    def _handle_terms_gate(self) -> bool:
        """Accept the terms-of-use dialog if it is showing.

        Returns
        -------
        bool
            ``True`` when the gate was accepted now and the search must be
            submitted again; ``False`` when no gate appeared or it was already
            accepted earlier in this session.
        """
        if self.terms_accepted:
            return False

        try:
            checkbox = self.page.query_selector(self.selectors["terms_checkbox"])
            if checkbox is None:
                return False

            self._transition(ScrapeState.TERMS_GATE)
            logger.info("  → Accepting terms and conditions...")
            checkbox.click()
            self._pause("terms_click")

            confirm = self.page.query_selector(self.selectors["terms_confirm"])
            if confirm is not None:
                confirm.click()
                self._pause("terms_confirm")
        except PlaywrightTimeout:
            raise
        except PlaywrightError as e:
            logger.debug("Terms dialog not interactable: %s", e)
            return False

        self.terms_accepted = True
        return True

    def _wait_for_results(self) -> None:
        try:
            self.page.wait_for_selector(
                self.selectors["result_anchor"],
                timeout=self.timeouts.get("results", 15000),
            )
        except PlaywrightTimeout as e:
            msg = "No search results found"
            raise CompanyNotFoundError(msg) from e

        self._pause("results_render")
        self._transition(ScrapeState.RESULTS_READY)

    def _open_company_page(self, index: int) -> None:
        links = self.page.query_selector_all(self.selectors["result_links"])
        if index >= len(links):
            msg = f"Result link {index} not present ({len(links)} links)"
            raise CompanyNotFoundError(msg)

        logger.info("  → Opening result %d of %d...", index + 1, len(links))
        links[index].click()
        self.page.wait_for_load_state("networkidle")
        self._transition(ScrapeState.COMPANY_PAGE_OPEN)

    def _open_report_page(self, link_ref: str) -> None:
        self.page.click(link_ref)
        self.page.wait_for_load_state("networkidle")
        self._pause("report_open")
        self._transition(ScrapeState.REPORT_PAGE_OPEN)
