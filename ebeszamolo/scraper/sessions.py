"""Browser session provisioning.

An extraction run needs exactly one controllable page. Providers hand out a
:class:`BrowserSession` and take it back again; the run never manages browser
infrastructure beyond that create/close pair.

Providers
---------
LocalSessionProvider
    Launches Chromium on this machine. No live view.
BrowserbaseSessionProvider
    Creates an isolated remote browser through the Browserbase REST API and
    exposes its fullscreen debugger URL as the live view.

Notes
-----
Each session owns its own Playwright instance, so concurrent runs on separate
threads never share browser objects.
"""

from __future__ import annotations

import uuid
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol

import httpx
from playwright.sync_api import sync_playwright

from ebeszamolo.config import (
    BROWSERBASE_API_KEY,
    BROWSERBASE_PROJECT_ID,
    get_browserbase_config,
    setup_logging,
)
from ebeszamolo.scraper.browser import (
    connect_remote_browser,
    create_browser,
    create_browser_context,
    get_page,
)

if TYPE_CHECKING:
    from collections.abc import Generator

    from playwright.sync_api import Browser, Page, Playwright

logger = setup_logging(__name__)

__all__ = [
    "BrowserSession",
    "BrowserbaseSessionProvider",
    "LocalSessionProvider",
    "SessionProvider",
    "browser_session",
]


@dataclass
class BrowserSession:
    """A provisioned browser and the page a run drives.

    Attributes
    ----------
    session_id : str
        Provider-side identifier.
    page : Page
        Page the run navigates.
    live_view_url : str | None
        Human-viewable URL mirroring the page, when the provider has one.
    connect_url : str | None
        CDP endpoint for remote sessions.
    """

    session_id: str
    page: Page
    live_view_url: str | None = None
    connect_url: str | None = None
    browser: Browser | None = field(default=None, repr=False)
    playwright: Playwright | None = field(default=None, repr=False)


class SessionProvider(Protocol):
    """Capability to obtain and release a controllable browser page."""

    def create_session(self) -> BrowserSession: ...

    def close_session(self, session: BrowserSession) -> None: ...

    def abandon_session(self, session: BrowserSession) -> None:
        """Tear a session down from a thread other than the one driving it."""
        ...


def _shutdown(session: BrowserSession) -> None:
    """Close the browser and stop Playwright, stopping Playwright even if close fails."""
    try:
        if session.browser is not None:
            session.browser.close()
    finally:
        if session.playwright is not None:
            session.playwright.stop()
    logger.info("Browser closed for session %s", session.session_id)


# =============================================================================
# Local Chromium
# =============================================================================


class LocalSessionProvider:
    """Launch a local Chromium per session."""

    def __init__(self, headless: bool = True) -> None:
        self.headless = headless

    def create_session(self) -> BrowserSession:
        playwright = sync_playwright().start()
        try:
            browser = create_browser(playwright, headless=self.headless)
            page = create_browser_context(browser).new_page()
        except Exception:
            playwright.stop()
            raise

        session_id = f"local-{uuid.uuid4().hex[:12]}"
        logger.info("Local browser session created: %s", session_id)
        return BrowserSession(session_id=session_id, page=page, browser=browser, playwright=playwright)

    def close_session(self, session: BrowserSession) -> None:
        _shutdown(session)

    def abandon_session(self, session: BrowserSession) -> None:
        # Sync Playwright objects are bound to the thread that created them;
        # the worker closes the browser once it stops at its next pause.
        logger.warning("Local session %s abandoned; closing when the worker stops", session.session_id)


# =============================================================================
# Browserbase
# =============================================================================


class BrowserbaseSessionProvider:
    """Provision remote browsers through the Browserbase REST API.

    Parameters
    ----------
    api_key : str | None, optional
        Defaults to ``BROWSERBASE_API_KEY``.
    project_id : str | None, optional
        Defaults to ``BROWSERBASE_PROJECT_ID``.
    config : dict[str, Any] | None, optional
        ``browserbase`` config section; loaded from ``config.json`` when ``None``.
    http_client : httpx.Client | None, optional
        Preconfigured client (tests inject one with a mock transport).

    Raises
    ------
    ValueError
        If the API key or project id is absent.
    """

    def __init__(
        self,
        api_key: str | None = None,
        project_id: str | None = None,
        config: dict[str, Any] | None = None,
        http_client: httpx.Client | None = None,
    ) -> None:
        self.api_key = api_key or BROWSERBASE_API_KEY
        self.project_id = project_id or BROWSERBASE_PROJECT_ID
        if not self.api_key:
            msg = "BROWSERBASE_API_KEY is not set"
            raise ValueError(msg)
        if not self.project_id:
            msg = "BROWSERBASE_PROJECT_ID is not set"
            raise ValueError(msg)

        self.config = config if config is not None else get_browserbase_config()
        self._client = http_client or httpx.Client(
            base_url=self.config.get("api_url", "https://api.browserbase.com/v1"),
            headers={"X-BB-API-Key": self.api_key, "Content-Type": "application/json"},
            timeout=float(self.config.get("request_timeout", 30.0)),
        )
        self._released: set[str] = set()

    def _session_payload(self) -> dict[str, Any]:
        return {
            "projectId": self.project_id,
            "browserSettings": {
                "fingerprint": self.config.get(
                    "fingerprint",
                    {"browsers": ["chrome"], "devices": ["desktop"], "operatingSystems": ["windows"]},
                ),
                "viewport": self.config.get("viewport", {"width": 1280, "height": 720}),
            },
        }

    def request_session(self) -> tuple[str, str, str | None]:
        """Create a remote session and fetch its live view URL.

        Returns
        -------
        tuple[str, str, str | None]
            ``(session_id, connect_url, live_view_url)``.

        Raises
        ------
        httpx.HTTPStatusError
            If the API rejects the request.
        """
        response = self._client.post("/sessions", json=self._session_payload())
        response.raise_for_status()
        data = response.json()
        session_id, connect_url = data["id"], data["connectUrl"]
        logger.info("Browserbase session created: %s", session_id)

        debug_response = self._client.get(f"/sessions/{session_id}/debug")
        debug_response.raise_for_status()
        live_view_url = debug_response.json().get("debuggerFullscreenUrl")
        logger.info("Live view URL: %s", live_view_url)

        return session_id, connect_url, live_view_url

    def release_session(self, session_id: str) -> None:
        """Ask Browserbase to tear the remote browser down.

        A session already released through this provider is skipped.
        """
        if session_id in self._released:
            return
        response = self._client.post(
            f"/sessions/{session_id}",
            json={"projectId": self.project_id, "status": "REQUEST_RELEASE"},
        )
        response.raise_for_status()
        self._released.add(session_id)
        logger.debug("Browserbase session released: %s", session_id)

    def create_session(self) -> BrowserSession:
        session_id, connect_url, live_view_url = self.request_session()

        playwright = sync_playwright().start()
        try:
            browser = connect_remote_browser(playwright, connect_url)
            page = get_page(browser)
        except Exception:
            playwright.stop()
            self.release_session(session_id)
            raise

        logger.info("Browser connected to session %s", session_id)
        return BrowserSession(
            session_id=session_id,
            page=page,
            live_view_url=live_view_url,
            connect_url=connect_url,
            browser=browser,
            playwright=playwright,
        )

    def close_session(self, session: BrowserSession) -> None:
        try:
            _shutdown(session)
        finally:
            try:
                self.release_session(session.session_id)
            except httpx.HTTPError:
                logger.exception("Failed to release Browserbase session %s", session.session_id)

    def abandon_session(self, session: BrowserSession) -> None:
        """Release the remote browser over REST; the worker's pending page calls then fail fast."""
        self.release_session(session.session_id)


@contextmanager
def browser_session(provider: SessionProvider) -> Generator[BrowserSession, None, None]:
    """Context manager for a provisioned session.

    Yields
    ------
    BrowserSession
        Session whose page is ready to navigate.

    Notes
    -----
    The session is closed on every exit path, including exceptions.
    """
    session = provider.create_session()
    try:
        yield session
    finally:
        provider.close_session(session)
