"""Report export to JSON and Excel.

Naming convention for JSON exports:
- OTP_Bank_Nyrt._20250114_093012_k3f9zq.json

The name part is the company name with path-unsafe characters and whitespace
replaced by underscores; the random suffix keeps repeated runs from colliding.

Excel exports hold three sheets mirroring the portal's report layout:
company data (``Cégadatok``), income statement (``Eredménykimutatás``) and
balance sheet (``Mérleg``).
"""

from __future__ import annotations

import json
import re
import secrets
import string
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

import pandas as pd

from ebeszamolo.config import DATA_DIR, setup_logging

if TYPE_CHECKING:
    from pathlib import Path

    from ebeszamolo.extractor.types import CompanyFinancialReport, FinancialStatement

logger = setup_logging(__name__)

STATEMENT_COLUMNS = ["Sorszám", "Tétel megnevezése", "Előző év", "Módosítások", "Tárgyév"]
SHEET_NAMES = {
    "info": "Cégadatok",
    "income_statement": "Eredménykimutatás",
    "balance_sheet": "Mérleg",
}


def sanitize_filename(name: str, max_length: int = 100) -> str:
    """Replace characters unsafe in file names and whitespace with underscores."""
    sanitized = re.sub(r'[<>:"/\\|?*]', "_", name)
    sanitized = re.sub(r"\s+", "_", sanitized)
    return sanitized[:max_length] or "report"


def report_to_json(report: CompanyFinancialReport) -> str:
    """Serialize a report to pretty-printed JSON (UTF-8 characters kept)."""
    return json.dumps(report.to_dict(), ensure_ascii=False, indent=2)


def save_report_json(
    report: CompanyFinancialReport,
    output_dir: Path | None = None,
) -> Path:
    """Save a report as JSON.

    Parameters
    ----------
    report
        Assembled report.
    output_dir
        Target directory; defaults to ``DATA_DIR/output``.

    Returns
    -------
    Path
        Location of the written file.
    """
    save_dir = output_dir if output_dir is not None else DATA_DIR / "output"
    save_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now(UTC).strftime("%Y%m%d_%H%M%S")
    random_part = "".join(secrets.choice(string.ascii_lowercase + string.digits) for _ in range(6))
    filepath = save_dir / f"{sanitize_filename(report.company_name)}_{timestamp}_{random_part}.json"

    filepath.write_text(report_to_json(report), encoding="utf-8")
    logger.info("✓ Saved result to: %s", filepath)
    return filepath


def load_report_json(filepath: Path) -> dict[str, Any]:
    """Load a previously exported report document."""
    with filepath.open(encoding="utf-8") as f:
        return json.load(f)  # type: ignore[no-any-return]


# =============================================================================
# Excel
# =============================================================================


def company_info_frame(report: CompanyFinancialReport) -> pd.DataFrame:
    """Two-column label/value table of identity and period fields."""
    rows = [
        ("Cégnév", report.company_name),
        ("Cégjegyzékszám", report.registration_number),
        ("Adószám", report.tax_number),
        ("Székhely", report.headquarters),
        ("Előző év", report.previous_year),
        ("Tárgyév", report.target_year),
        ("Pénznem", report.currency),
        ("Pénzegység", report.unit),
        ("Elfogadás időpontja", report.filing_date),
        ("Lekérdezés időpontja", report.extracted_at),
        ("Forrás", report.source_url),
    ]
    return pd.DataFrame(rows, columns=["Mező", "Érték"])


def statement_frame(statement: FinancialStatement) -> pd.DataFrame:
    """One row per statement line, in source order."""
    return pd.DataFrame(
        [
            [
                row.line_code,
                row.label,
                row.previous_year_value,
                row.amendment_value,
                row.target_year_value,
            ]
            for row in statement.rows
        ],
        columns=STATEMENT_COLUMNS,
    )


def save_report_workbook(report: CompanyFinancialReport, filepath: Path) -> Path:
    """Write a report to an Excel workbook with one sheet per section.

    Parameters
    ----------
    report
        Assembled report.
    filepath
        Target ``.xlsx`` path; parent directories are created.

    Returns
    -------
    Path
        The written workbook path.
    """
    filepath.parent.mkdir(parents=True, exist_ok=True)

    with pd.ExcelWriter(filepath, engine="openpyxl") as writer:
        company_info_frame(report).to_excel(writer, sheet_name=SHEET_NAMES["info"], index=False)
        statement_frame(report.income_statement).to_excel(
            writer, sheet_name=SHEET_NAMES["income_statement"], index=False,
        )
        statement_frame(report.balance_sheet).to_excel(
            writer, sheet_name=SHEET_NAMES["balance_sheet"], index=False,
        )

    logger.info("✓ Saved workbook to: %s", filepath)
    return filepath
