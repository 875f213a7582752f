"""Shared parsing utilities for Hungarian-locale amounts and company names.

This module provides the pure helpers used by the candidate matcher and the
financial table parser.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from decimal import Decimal
from functools import lru_cache

from ebeszamolo.config import get_legal_suffixes

logger = logging.getLogger(__name__)

# Placeholder the portal renders for an empty amount cell
EMPTY_AMOUNT_MARKERS = frozenset({"", "—"})


def parse_amount(text: str | None) -> float:
    """Parse an amount string using Hungarian locale conventions.

    Hungarian locale uses:
    - Period (.) as thousands separator
    - Comma (,) as decimal separator

    Examples
    --------
    - "1.234,50" -> 1234.5
    - "64.057" -> 64057.0
    - "-1 200" -> -1200.0
    - "—" -> 0.0

    Parameters
    ----------
    text
        Cell text as rendered by the portal.

    Returns
    -------
    float
        Parsed value; ``0.0`` for empty cells, the em-dash placeholder, and any
        text that is still unparsable after cleanup.
    """
    if text is None or text.strip() in EMPTY_AMOUNT_MARKERS:
        return 0.0

    cleaned = re.sub(r"\s+", "", text).replace(".", "").replace(",", ".", 1)

    try:
        return float(cleaned)
    except ValueError:
        logger.debug("Could not parse amount: %r", text)
        return 0.0


def format_amount(value: float) -> str:
    """Render a number back to the portal convention (``1234.5`` -> ``"1.234,5"``).

    Digits come from the shortest ``repr`` of the float written in fixed-point,
    so ``parse_amount(format_amount(x)) == x`` holds for small and large values.
    """
    integer_part, _, fraction = format(Decimal(repr(float(value))), ",f").partition(".")
    integer_part = integer_part.replace(",", ".")
    fraction = fraction.rstrip("0")
    return f"{integer_part},{fraction}" if fraction else integer_part


# =============================================================================
# Company Name Normalization
# =============================================================================


@lru_cache(maxsize=8)
def _suffix_patterns(suffixes: tuple[str, ...]) -> tuple[re.Pattern[str], ...]:
    """Compile one end-anchored pattern per suffix.

    A suffix must stand as its own word, so ``"Orbit"`` keeps its ``"it"``.
    """
    return tuple(
        re.compile(rf"(?:^|\s)\s*{re.escape(suffix.rstrip('.'))}\.?\s*$", re.IGNORECASE)
        for suffix in suffixes
    )


def strip_legal_suffix(name: str, suffixes: Iterable[str] | None = None) -> str:
    """Remove trailing legal-form suffixes from a company name.

    Suffixes are removed repeatedly until none matches, so stacked forms such
    as ``"Alfa Kft. Bt"`` reduce to ``"Alfa"``.

    Parameters
    ----------
    name
        Company name as typed by the caller or rendered by the portal.
    suffixes
        Suffix set to strip; defaults to ``name_normalization.legal_suffixes``
        from ``config.json``.

    Returns
    -------
    str
        Trimmed name without legal-form suffixes.

    Examples
    --------
    >>> strip_legal_suffix("OTP Bank Nyrt.")
    'OTP Bank'
    """
    suffix_set = tuple(suffixes) if suffixes is not None else tuple(get_legal_suffixes())
    patterns = _suffix_patterns(suffix_set)

    result = name.strip()
    changed = True
    while changed:
        changed = False
        for pattern in patterns:
            stripped = pattern.sub("", result)
            if stripped != result:
                result = stripped.strip()
                changed = True

    return result.strip()


def normalize_company_name(name: str, suffixes: Iterable[str] | None = None) -> str:
    """Return the comparison key for a company name (suffix-stripped, upper case)."""
    return strip_legal_suffix(name, suffixes).upper()


def normalize_tax_number(raw: str) -> str:
    """Keep digits only and truncate to the 8-digit tax-id core (``12345678-2-41`` -> ``12345678``)."""
    return re.sub(r"\D", "", raw)[:8]
