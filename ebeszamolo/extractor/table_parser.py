"""Financial statement table parsing for report pages.

A report page renders the balance sheet and the income statement as HTML
tables whose rows start with a three-digit line code (``001.``–``999.``). The
number of value columns varies with the filing:

* 5 cells: ``line code | label | previous year | amendments | target year``
* 3–4 or 6+ cells: previous year from column 3, target year from the last
  column, amendments treated as zero

Tables are classified by heading tokens found in their text, nested tables
included, and feed every row beneath them to the matching statement. Header
and subtotal-label rows are dropped by the label filters in ``config.json``.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

from ebeszamolo.config import get_table_parsing_config, setup_logging
from ebeszamolo.extractor.dom import body_rows, row_cells, visible_text
from ebeszamolo.extractor.metadata import (
    extract_fiscal_period,
    extract_report_info,
    extract_report_metadata,
)
from ebeszamolo.extractor.types import ExtractedStatements, FinancialRow, FinancialStatement
from ebeszamolo.utils.parsing import parse_amount

if TYPE_CHECKING:
    from lxml.html import HtmlElement

logger = setup_logging(__name__)

# Public API exports
__all__ = [
    "classify_table",
    "extract_statements",
    "parse_row",
    "parse_statement_rows",
]

FULL_LAYOUT_CELL_COUNT = 5


def _parsing_settings(parsing_config: dict[str, Any] | None) -> dict[str, Any]:
    """Fill in defaults for any table-parsing key missing from config.

    Already-resolved settings pass through unchanged.
    """
    if parsing_config is None:
        parsing_config = get_table_parsing_config()
    line_code_pattern = parsing_config.get("line_code_pattern", r"^\d{3}\.?$")
    if not isinstance(line_code_pattern, re.Pattern):
        line_code_pattern = re.compile(line_code_pattern)
    return {
        "balance_sheet_token": parsing_config.get("balance_sheet_token", "MÉRLEGE"),
        "income_statement_token": parsing_config.get("income_statement_token", "EREDMÉNYKIMUTATÁS"),
        "header_labels": [label.lower() for label in parsing_config.get("header_labels", [])],
        "line_code_pattern": line_code_pattern,
        "min_cells": int(parsing_config.get("min_cells", 3)),
        "default_currency": parsing_config.get("default_currency", "HUF"),
        "default_unit": parsing_config.get("default_unit", "ezer"),
    }


# =============================================================================
# Row Parsing
# =============================================================================


def parse_row(cell_texts: list[str], parsing_config: dict[str, Any] | None = None) -> FinancialRow | None:
    """Turn one row's cell texts into a :class:`FinancialRow`.

    Parameters
    ----------
    cell_texts : list[str]
        Text of each ``<td>`` in the row.
    parsing_config : dict[str, Any] | None, optional
        ``table_parsing`` section; loaded from ``config.json`` when ``None``.

    Returns
    -------
    FinancialRow | None
        ``None`` for header rows, rows with too few cells, rows without a
        three-digit line code and rows without a label.

    Examples
    --------
    >>> parse_row(["101.", "Tárgyi eszközök", "1.234", "0", "1.500"])
    FinancialRow(line_code='101', label='Tárgyi eszközök', previous_year_value=1234.0, amendment_value=0.0, target_year_value=1500.0)
    """
    settings = _parsing_settings(parsing_config)

    cells = [text.strip() for text in cell_texts]
    if len(cells) < settings["min_cells"]:
        return None

    row_text = " ".join(cells).lower()
    if any(label in row_text for label in settings["header_labels"]):
        return None

    line_code, label = cells[0], cells[1]
    if not settings["line_code_pattern"].match(line_code) or not label:
        return None

    if len(cells) == FULL_LAYOUT_CELL_COUNT:
        previous_value = parse_amount(cells[2])
        amendment_value = parse_amount(cells[3])
        target_value = parse_amount(cells[4])
    else:
        previous_value = parse_amount(cells[2])
        amendment_value = 0.0
        target_value = parse_amount(cells[-1])

    return FinancialRow(
        line_code=line_code.rstrip("."),
        label=label,
        previous_year_value=previous_value,
        amendment_value=amendment_value,
        target_year_value=target_value,
    )


def _parse_row_element(row: HtmlElement, settings: dict[str, Any]) -> FinancialRow | None:
    return parse_row([visible_text(cell) for cell in row_cells(row)], settings)


def parse_statement_rows(table: HtmlElement, parsing_config: dict[str, Any] | None = None) -> list[FinancialRow]:
    """Parse every accepted data row of a statement table, nested tables included, in document order."""
    settings = _parsing_settings(parsing_config)
    rows: list[FinancialRow] = []
    for row in body_rows(table, nested=True):
        parsed = _parse_row_element(row, settings)
        if parsed is not None:
            rows.append(parsed)
    return rows


def classify_table(table: HtmlElement, parsing_config: dict[str, Any] | None = None) -> set[str]:
    """Return which statements a table feeds: ``"balance_sheet"`` and/or ``"income_statement"``."""
    settings = _parsing_settings(parsing_config)
    table_text = visible_text(table).upper()

    kinds = set()
    if settings["balance_sheet_token"].upper() in table_text:
        kinds.add("balance_sheet")
    if settings["income_statement_token"].upper() in table_text:
        kinds.add("income_statement")
    return kinds


# =============================================================================
# Page Extraction
# =============================================================================


def extract_statements(tree: HtmlElement, parsing_config: dict[str, Any] | None = None) -> ExtractedStatements:
    """Extract identity, period, unit metadata and both statements from a report page.

    Parameters
    ----------
    tree : HtmlElement
        Parsed report page.
    parsing_config : dict[str, Any] | None, optional
        ``table_parsing`` section; loaded from ``config.json`` when ``None``.

    Returns
    -------
    ExtractedStatements
        Statements may be empty; deciding whether that is an error is left to
        the caller.
    """
    settings = _parsing_settings(parsing_config)
    page_text = visible_text(tree)

    metadata = extract_report_metadata(page_text, settings["default_currency"], settings["default_unit"])
    previous_year, target_year = extract_fiscal_period(page_text)

    income_statement = FinancialStatement()
    balance_sheet = FinancialStatement()
    statements = {"balance_sheet": balance_sheet, "income_statement": income_statement}

    # A wrapper table and the statement table inside it both match; each <tr>
    # feeds a statement at most once.
    root = tree.getroottree()
    seen: dict[str, set[str]] = {kind: set() for kind in statements}

    for table in tree.iter("table"):
        kinds = classify_table(table, settings)
        if not kinds:
            continue
        for row in body_rows(table, nested=True):
            row_path = root.getpath(row)
            targets = [kind for kind in sorted(kinds) if row_path not in seen[kind]]
            if not targets:
                continue
            parsed = _parse_row_element(row, settings)
            for kind in targets:
                seen[kind].add(row_path)
                if parsed is not None:
                    statements[kind].rows.append(parsed)

    logger.info(
        "Parsed %d balance sheet rows and %d income statement rows",
        len(balance_sheet),
        len(income_statement),
    )

    return ExtractedStatements(
        info=extract_report_info(page_text),
        filing_date=metadata["filing_date"],
        currency=metadata["currency"],
        unit=metadata["unit"],
        previous_year=previous_year,
        target_year=target_year,
        income_statement=income_statement,
        balance_sheet=balance_sheet,
    )
