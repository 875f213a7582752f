"""Candidate selection over the search results listing.

The portal merges several registered names into one results row when they map
to the same filer, so a row is represented here as the list of names it shows.

Ranking rules
-------------
* Tax-id search: every row is a candidate; the row with the fewest merged
  names wins (the most specific entry for an exact identifier).
* Name search: a row is an *exact* candidate when one of its names equals the
  search value after suffix stripping and upper-casing, otherwise a *prefix*
  candidate when one of its names starts with it. Exact beats prefix; inside a
  tier the fewest merged names wins.
* Ties go to the lowest row index. A name search with no candidate is reported
  as not found; no unrelated row is ever guessed.

Notes
-----
"Fewest merged names" reproduces how the portal's own listing behaves in
practice; it is not a confirmed entity-resolution rule.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ebeszamolo.config import setup_logging
from ebeszamolo.extractor.dom import body_rows, row_cells, visible_text
from ebeszamolo.extractor.types import CandidateSelection, ResultCandidate
from ebeszamolo.utils.parsing import normalize_company_name

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from lxml.html import HtmlElement

    from ebeszamolo.extractor.types import SearchCriterion

logger = setup_logging(__name__)

__all__ = [
    "find_results_table",
    "parse_result_rows",
    "rank_candidates",
    "select_candidate",
]


# =============================================================================
# Results Table Reading
# =============================================================================


def find_results_table(tree: HtmlElement, header_text: str = "Cégnév") -> HtmlElement | None:
    """Return the first table whose first header cell mentions ``header_text``."""
    for table in tree.iter("table"):
        first_header = next(table.iter("th"), None)
        if first_header is not None and header_text in first_header.text_content():
            return table
    return None


def parse_result_rows(tree: HtmlElement, header_text: str = "Cégnév") -> list[list[str]]:
    """Read the names shown in each results row.

    Only rows whose first cell holds a link are returned, so the returned
    index lines up with the list of clickable result links on the page.

    Parameters
    ----------
    tree : HtmlElement
        Parsed results page.
    header_text : str, optional
        Header text identifying the results table.

    Returns
    -------
    list[list[str]]
        One entry per linked row: the names separated by line breaks in the
        first cell, in display order.
    """
    table = find_results_table(tree, header_text)
    if table is None:
        logger.debug("Results table with header %r not found", header_text)
        return []

    rows: list[list[str]] = []
    for row in body_rows(table):
        cells = row_cells(row)
        if not cells:
            continue
        first_cell = cells[0]
        if next(first_cell.iter("a"), None) is None:
            continue
        names = [line.strip() for line in visible_text(first_cell).split("\n")]
        rows.append([name for name in names if name])

    return rows


# =============================================================================
# Ranking
# =============================================================================


def _name_tier(names: Iterable[str], search_key: str) -> bool | None:
    """Return ``True`` for an exact match, ``False`` for prefix-only, ``None`` for no match."""
    keys = [normalize_company_name(name) for name in names]
    if any(key == search_key for key in keys):
        return True
    if any(key.startswith(search_key) for key in keys):
        return False
    return None


def rank_candidates(rows: Sequence[Sequence[str]], criterion: SearchCriterion) -> list[ResultCandidate]:
    """Return the candidate rows ordered best first.

    Parameters
    ----------
    rows : Sequence[Sequence[str]]
        Names per results row, as produced by :func:`parse_result_rows`.
    criterion : SearchCriterion
        The submitted search.

    Returns
    -------
    list[ResultCandidate]
        Empty when nothing qualifies.
    """
    candidates: list[ResultCandidate] = []

    if criterion.is_tax_search:
        candidates = [
            ResultCandidate(row_index=index, merged_name_count=max(len(names), 1))
            for index, names in enumerate(rows)
        ]
    else:
        search_key = normalize_company_name(criterion.value)
        for index, names in enumerate(rows):
            tier = _name_tier(names, search_key)
            if tier is None:
                continue
            candidates.append(
                ResultCandidate(
                    row_index=index,
                    merged_name_count=max(len(names), 1),
                    is_exact_match=tier,
                ),
            )

    return sorted(
        candidates,
        key=lambda c: (not c.is_exact_match, c.merged_name_count, c.row_index),
    )


def select_candidate(rows: Sequence[Sequence[str]], criterion: SearchCriterion) -> CandidateSelection:
    """Pick the results row to open for a search.

    Returns
    -------
    CandidateSelection
        ``found=False`` when the listing is empty or, for a name search, when
        no row matches exactly or by prefix.
    """
    ranked = rank_candidates(rows, criterion)
    if not ranked:
        logger.info("No matching row among %d results for %r", len(rows), criterion.value)
        return CandidateSelection(found=False)

    best = ranked[0]
    logger.debug(
        "Selected row %d (names=%d, exact=%s) out of %d candidates",
        best.row_index,
        best.merged_name_count,
        best.is_exact_match,
        len(ranked),
    )
    return CandidateSelection(found=True, index=best.row_index)
