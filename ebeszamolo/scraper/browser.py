"""Browser automation utilities using Playwright.

This module creates the Chromium browsers that extraction runs drive, either
launched locally or attached to a remote browser over CDP. It wraps
Playwright's sync API; session lifecycles are handled in
:mod:`ebeszamolo.scraper.sessions`.

Main components:
- create_browser: Launch a local Chromium instance
- create_browser_context: Context with realistic viewport and user agent
- connect_remote_browser: Attach to a remote browser via its CDP URL
- get_page: Reuse the first open page of a browser or open one

Notes
-----
Uses Chromium headless mode by default. Chrome args disable GPU and sandbox
for compatibility with containerized/server environments (Ubuntu headless).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from playwright.sync_api import Browser, BrowserContext, Page, Playwright

DEFAULT_VIEWPORT = {"width": 1280, "height": 720}


def create_browser(playwright: Playwright, headless: bool = True) -> Browser:
    """Create a Chromium browser instance.

    Parameters
    ----------
    playwright : Playwright
        Started Playwright instance.
    headless : bool, optional
        Run browser in headless mode. Default True for server use.

    Returns
    -------
    Browser
        Configured Chromium browser instance.

    Notes
    -----
    Chrome args (--disable-gpu, --no-sandbox, --disable-dev-shm-usage)
    are required for headless server compatibility on Ubuntu.
    """
    return playwright.chromium.launch(
        headless=headless,
        args=[
            "--disable-gpu",  # No GPU in headless environments
            "--disable-dev-shm-usage",  # Prevents /dev/shm overflow in Docker
            "--no-sandbox",  # Required for root/containerized execution
        ],
    )


def create_browser_context(browser: Browser, viewport: dict[str, int] | None = None) -> BrowserContext:
    """Create a browser context with appropriate settings.

    Parameters
    ----------
    browser : Browser
        Browser instance to create context on.
    viewport : dict[str, int] | None, optional
        Width/height; defaults to 1280x720, the size the remote sessions use.

    Returns
    -------
    BrowserContext
        Context configured with realistic viewport, user agent and locale.

    Notes
    -----
    User agent mimics Chrome on Windows to avoid bot detection. The Hungarian
    locale keeps the portal's date and number rendering stable.
    """
    return browser.new_context(
        viewport=viewport or DEFAULT_VIEWPORT,
        user_agent=(
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
            "AppleWebKit/537.36 (KHTML, like Gecko) "
            "Chrome/120.0.0.0 Safari/537.36"
        ),
        locale="hu-HU",
    )


def connect_remote_browser(playwright: Playwright, connect_url: str) -> Browser:
    """Attach to an already running remote Chromium through its CDP endpoint."""
    return playwright.chromium.connect_over_cdp(connect_url)


def get_page(browser: Browser) -> Page:
    """Return the first page of the browser's default context, opening one if needed.

    Remote sessions start with a context and a blank page already open; driving
    that page is what makes the run visible in the live view.
    """
    context = browser.contexts[0] if browser.contexts else create_browser_context(browser)
    return context.pages[0] if context.pages else context.new_page()
