"""Tests for report-year resolution on the company page."""

from __future__ import annotations

from ebeszamolo.extractor.dom import parse_html
from ebeszamolo.extractor.report_resolver import find_report_link, list_available_years

SELECTORS = {
    "report_container": "div.balance-container",
    "report_link": "a.view-obr-balance-link",
}


class TestListAvailableYears:
    """Tests for list_available_years."""

    def test_years_newest_first(self, company_tree) -> None:
        assert list_available_years(company_tree, "div.balance-container") == [2023, 2022, 2021]

    def test_duplicates_collapse(self) -> None:
        tree = parse_html(
            """
            <div class="balance-container">2022. január 01. - 2022. december 31.</div>
            <div class="balance-container">Módosított: 2022. január 01. - 2022. december 31.</div>
            """,
        )
        assert list_available_years(tree, "div.balance-container") == [2022]

    def test_no_containers(self) -> None:
        tree = parse_html("<html><body><p>Nincs beszámoló</p></body></html>")
        assert list_available_years(tree, "div.balance-container") == []


class TestFindReportLink:
    """Tests for find_report_link."""

    def test_resolves_requested_year(self, company_tree) -> None:
        result = find_report_link(company_tree, 2022, SELECTORS)
        assert result.found
        assert result.link_ref == 'a.view-obr-balance-link[data-code="OBR-2022"]'
        assert result.available_years == [2023, 2022, 2021]

    def test_filing_date_year_is_not_a_match(self, company_tree) -> None:
        """A 2024 publication date does not make a 2024 report."""
        result = find_report_link(company_tree, 2024, SELECTORS)
        assert not result.found
        assert result.link_ref is None
        assert result.available_years == [2023, 2022, 2021]

    def test_entry_without_link_is_skipped(self) -> None:
        tree = parse_html(
            """
            <div class="balance-container">
              <span>2023. január 01. - 2023. december 31.</span>
            </div>
            <div class="balance-container">
              <a class="view-obr-balance-link" data-code="LATE-2023">Beszámoló</a>
              <span>2023. január 01. - 2023. december 31.</span>
            </div>
            """,
        )
        result = find_report_link(tree, 2023, SELECTORS)
        assert result.found
        assert result.link_ref == 'a.view-obr-balance-link[data-code="LATE-2023"]'

    def test_link_without_data_code_is_skipped(self) -> None:
        tree = parse_html(
            """
            <div class="balance-container">
              <a class="view-obr-balance-link" href="#">Beszámoló</a>
              <span>2023. január 01. - 2023. december 31.</span>
            </div>
            """,
        )
        result = find_report_link(tree, 2023, SELECTORS)
        assert not result.found
        assert result.available_years == [2023]

    def test_default_selectors_from_config(self, company_tree) -> None:
        result = find_report_link(company_tree, 2021)
        assert result.link_ref == 'a.view-obr-balance-link[data-code="OBR-2021"]'
