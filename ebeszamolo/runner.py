"""Run wrapper: session lifecycle, progress events and the wall-clock budget.

A streaming caller observes exactly two milestones of a run:

1. ``liveView`` - right after the browser session exists, carrying the session
   id and the URL where a human can watch the page.
2. ``result`` - once at completion, carrying the report or the failure reason.

Request validation and provisioning failures are reported as a single
``error`` event instead. Events serialize to one JSON object per line.

Notes
-----
The session is held open for ``hold_seconds`` after the result so a live
observer can see the final page, then closed on every exit path. When a budget
is set the run executes on a worker thread. Once the budget elapses the run is
abandoned: the provider tears the session down from the caller's thread and
the worker stops at its next pause, closing its own browser handles.
"""

from __future__ import annotations

import json
import threading
import time
from abc import ABC, abstractmethod
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from ebeszamolo.config import get_run_config, setup_logging
from ebeszamolo.extractor.types import SearchKind
from ebeszamolo.scraper.ebeszamolo_scraper import EBeszamoloScraper
from ebeszamolo.scraper.sessions import browser_session

if TYPE_CHECKING:
    from ebeszamolo.extractor.types import CompanyFinancialReport
    from ebeszamolo.scraper.sessions import BrowserSession, SessionProvider

logger = setup_logging(__name__)

NO_DATA_MESSAGE = "No data found for the given search criteria"


# =============================================================================
# Events
# =============================================================================


class ProgressEvent(ABC):
    """Base class for events emitted to a streaming caller."""

    type = ""

    @abstractmethod
    def to_dict(self) -> dict[str, Any]:
        """Return the event's wire shape."""

    def to_json_line(self) -> str:
        """Serialize as a newline-terminated JSON object."""
        return json.dumps(self.to_dict(), ensure_ascii=False) + "\n"


@dataclass
class LiveViewEvent(ProgressEvent):
    session_id: str
    live_view_url: str | None

    type = "liveView"

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "liveViewUrl": self.live_view_url, "sessionId": self.session_id}


@dataclass
class ResultEvent(ProgressEvent):
    success: bool
    data: dict[str, Any] | None = None
    error: str | None = None

    type = "result"

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"type": self.type, "success": self.success}
        if self.success:
            payload["data"] = self.data
        else:
            payload["error"] = self.error
        return payload


@dataclass
class ErrorEvent(ProgressEvent):
    error: str

    type = "error"

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "error": self.error}


# =============================================================================
# Requests and outcomes
# =============================================================================


@dataclass
class ScrapeRequest:
    """What to extract: a tax number or company name and a fiscal year."""

    search_type: SearchKind
    search_value: str
    year: int | None = None

    def validate(self) -> str | None:
        """Return an error message for an unusable request, else ``None``."""
        if not self.search_value or not self.search_value.strip():
            return "Missing required fields: searchType and searchValue"
        return None


@dataclass
class ScrapeOutcome:
    """Final state of a run as seen by the caller."""

    report: CompanyFinancialReport | None = None
    error: str | None = None
    session_id: str | None = None
    live_view_url: str | None = None

    @property
    def success(self) -> bool:
        return self.report is not None


class _ResultGate:
    """Lets exactly one result event through, whichever thread gets there first."""

    def __init__(self, emit: Callable[[ProgressEvent], None]) -> None:
        self._emit = emit
        self._lock = threading.Lock()
        self._sent = False

    def send(self, event: ProgressEvent) -> bool:
        with self._lock:
            if self._sent:
                return False
            self._sent = True
        self._emit(event)
        return True


class RunAbandonedError(Exception):
    """Raised inside an abandoned worker at its next pause."""


class _RunControl:
    """Shared state between the caller and the worker of a budgeted run."""

    def __init__(self, sleep: Callable[[float], None]) -> None:
        self._sleep = sleep
        self._lock = threading.Lock()
        self.cancelled = threading.Event()
        self.session: BrowserSession | None = None

    def attach(self, session: BrowserSession) -> None:
        with self._lock:
            self.session = session
        if self.cancelled.is_set():
            msg = "Run was abandoned before the session was ready"
            raise RunAbandonedError(msg)

    def abandon(self) -> BrowserSession | None:
        """Flag the run as abandoned and return the session to tear down, if any."""
        with self._lock:
            self.cancelled.set()
            return self.session

    def sleep(self, seconds: float) -> None:
        if self.cancelled.is_set():
            msg = "Run exceeded its budget"
            raise RunAbandonedError(msg)
        self._sleep(seconds)


def _noop(_event: ProgressEvent) -> None:
    return None


# =============================================================================
# Run
# =============================================================================


def _execute(
    request: ScrapeRequest,
    provider: SessionProvider,
    emit: Callable[[ProgressEvent], None],
    result_gate: _ResultGate,
    hold_seconds: float,
    control: _RunControl,
    outcome: ScrapeOutcome,
) -> ScrapeOutcome:
    """Provision a session, scrape, report, hold, close."""
    sleep = control.sleep
    with browser_session(provider) as session:
        control.attach(session)
        outcome.session_id = session.session_id
        outcome.live_view_url = session.live_view_url
        emit(LiveViewEvent(session_id=session.session_id, live_view_url=session.live_view_url))

        scraper = EBeszamoloScraper(session.page, sleep=sleep)
        if request.search_type is SearchKind.TAX_ID:
            report = scraper.scrape_by_identifier(request.search_value, request.year)
        else:
            report = scraper.scrape_by_name(request.search_value, request.year)

        if report is not None:
            outcome.report = report
            result_gate.send(ResultEvent(success=True, data=report.to_dict()))
        else:
            outcome.error = str(scraper.last_error) if scraper.last_error else NO_DATA_MESSAGE
            result_gate.send(ResultEvent(success=False, error=outcome.error))

        # Keep browser open so a live observer can see the final state
        if hold_seconds > 0:
            sleep(hold_seconds)

    return outcome


def _abandon(provider: SessionProvider, control: _RunControl) -> None:
    """Stop an over-budget worker and tear its session down from this thread."""
    session = control.abandon()
    if session is None:
        return
    try:
        provider.abandon_session(session)
    except Exception as e:
        logger.exception("Failed to abandon session %s: %s", session.session_id, e)


def run_scrape(
    request: ScrapeRequest,
    provider: SessionProvider,
    on_event: Callable[[ProgressEvent], None] | None = None,
    hold_seconds: float | None = None,
    budget_seconds: float | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> ScrapeOutcome:
    """Run one extraction end to end and report progress.

    Parameters
    ----------
    request : ScrapeRequest
        Search input and year.
    provider : SessionProvider
        Where the browser session comes from.
    on_event : Callable[[ProgressEvent], None] | None, optional
        Receives the ``liveView`` and ``result`` (or ``error``) events.
    hold_seconds : float | None, optional
        Pause before closing the session; defaults to ``run.hold_seconds``.
    budget_seconds : float | None, optional
        Wall-clock limit for the whole run; ``0`` disables it. Defaults to
        ``run.budget_seconds``.
    sleep : Callable[[float], None], optional
        Pause function used for the hold and the scraper's settle delays.

    Returns
    -------
    ScrapeOutcome
        Report on success; otherwise ``error`` holds a readable reason.
    """
    emit = on_event or _noop
    run_config = get_run_config()
    hold = run_config["hold_seconds"] if hold_seconds is None else hold_seconds
    budget = run_config["budget_seconds"] if budget_seconds is None else budget_seconds

    problem = request.validate()
    if problem:
        emit(ErrorEvent(error=problem))
        return ScrapeOutcome(error=problem)

    outcome = ScrapeOutcome()
    result_gate = _ResultGate(emit)
    control = _RunControl(sleep)

    def job() -> ScrapeOutcome:
        return _execute(request, provider, emit, result_gate, hold, control, outcome)

    try:
        if not budget:
            return job()

        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="ebeszamolo-run")
        future = executor.submit(job)
        try:
            return future.result(timeout=budget)
        except FutureTimeout:
            message = f"Run exceeded its {budget:g}s budget"
            if not result_gate.send(ResultEvent(success=False, error=message)):
                # Finished; only the hold period or session close is still running
                return outcome
            logger.error("✗ %s", message)
            _abandon(provider, control)
            return ScrapeOutcome(
                error=message,
                session_id=outcome.session_id,
                live_view_url=outcome.live_view_url,
            )
        finally:
            executor.shutdown(wait=False)
    except Exception as e:
        logger.exception("Run failed before completion: %s", e)
        emit(ErrorEvent(error=str(e) or "Unknown error occurred"))
        return ScrapeOutcome(error=str(e) or "Unknown error occurred")
