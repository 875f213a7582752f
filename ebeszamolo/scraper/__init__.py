"""Scraper module for driving the e-beszámoló portal.

Primary components:
- EBeszamoloScraper: navigation state machine bound to one browser page
- LocalSessionProvider / BrowserbaseSessionProvider: browser session provisioning
- browser_session: context manager that always closes the session
"""

from ebeszamolo.scraper.browser import create_browser, create_browser_context
from ebeszamolo.scraper.ebeszamolo_scraper import EBeszamoloScraper, ScrapeState
from ebeszamolo.scraper.sessions import (
    BrowserbaseSessionProvider,
    BrowserSession,
    LocalSessionProvider,
    SessionProvider,
    browser_session,
)

__all__ = [
    "BrowserSession",
    "BrowserbaseSessionProvider",
    "EBeszamoloScraper",
    "LocalSessionProvider",
    "ScrapeState",
    "SessionProvider",
    "browser_session",
    # Browser utilities
    "create_browser",
    "create_browser_context",
]
