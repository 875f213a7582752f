"""Exceptions raised along the extraction run.

All of them are caught at the scraper entry points and turned into a ``None``
result plus a readable message; none is meant to reach the end user as a crash.
"""

from __future__ import annotations

from collections.abc import Iterable

__all__ = [
    "CompanyNotFoundError",
    "ExtractionEmptyError",
    "NavigationTimeoutError",
    "ReportYearUnavailableError",
    "ScrapeError",
]


class ScrapeError(Exception):
    """Base class for expected extraction failures."""


class CompanyNotFoundError(ScrapeError):
    """No results row rendered, or none matched the search criterion."""


class ReportYearUnavailableError(ScrapeError):
    """The company exists but has no report covering the requested year.

    Attributes
    ----------
    year : int
        The requested fiscal year.
    available_years : list[int]
        Years that do have a report, newest first.
    """

    def __init__(self, year: int, available_years: Iterable[int] = ()) -> None:
        self.year = year
        self.available_years = sorted(set(available_years), reverse=True)
        if self.available_years:
            years_text = f"Elérhető évek: {', '.join(str(y) for y in self.available_years)}"
        else:
            years_text = "Nincs elérhető beszámoló"
        super().__init__(f"A {year}. évre nincs elérhető beszámoló. {years_text}")


class NavigationTimeoutError(ScrapeError):
    """A wait-for-condition step exceeded its bound."""


class ExtractionEmptyError(ScrapeError):
    """The report page opened but no statement rows were recognized."""
