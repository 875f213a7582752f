"""Shared utility functions for ebeszamolo package."""

from ebeszamolo.utils.parsing import (
    format_amount,
    normalize_company_name,
    normalize_tax_number,
    parse_amount,
    strip_legal_suffix,
)

__all__ = [
    "format_amount",
    "normalize_company_name",
    "normalize_tax_number",
    "parse_amount",
    "strip_legal_suffix",
]
