"""Pytest configuration for ebeszamolo tests.

This module provides:
- Parsed-tree fixtures of the portal's results, company and report pages
- A fake Playwright page wired to those snapshots for state machine tests
"""

from __future__ import annotations

from pathlib import Path

import pytest
from dotenv import load_dotenv

from ebeszamolo.extractor.dom import parse_html
from tests.helpers.fake_page import FakePage
from tests.helpers.portal_pages import COMPANY_HTML, REPORT_HTML, RESULTS_HTML

# Load environment variables from project .env so credential-gated tests can run
PROJECT_ROOT = Path(__file__).parent.parent
load_dotenv(PROJECT_ROOT / ".env")


@pytest.fixture
def results_tree():
    """Parsed search results page with one merged, one exact and one prefix row."""
    return parse_html(RESULTS_HTML)


@pytest.fixture
def company_tree():
    """Parsed company page listing reports for 2021–2023."""
    return parse_html(COMPANY_HTML)


@pytest.fixture
def report_tree():
    """Parsed 2023 report page with a balance sheet and an income statement."""
    return parse_html(REPORT_HTML)


@pytest.fixture
def fake_page() -> FakePage:
    """Fake page walking through the results, company and report snapshots."""
    return FakePage(
        results_html=RESULTS_HTML,
        company_html=COMPANY_HTML,
        report_html=REPORT_HTML,
    )


@pytest.fixture
def no_sleep():
    """Sleep replacement that records requested pauses instead of waiting."""
    pauses: list[float] = []

    def _sleep(seconds: float) -> None:
        pauses.append(seconds)

    _sleep.pauses = pauses  # type: ignore[attr-defined]
    return _sleep
