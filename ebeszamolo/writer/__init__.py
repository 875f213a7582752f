"""Writer module for report exports.

Key exports:
    save_report_json: JSON document matching the report shape
    save_report_workbook: Excel workbook with company data and both statements
"""

from ebeszamolo.writer.report_writer import (
    load_report_json,
    report_to_json,
    sanitize_filename,
    save_report_json,
    save_report_workbook,
)

__all__ = [
    "load_report_json",
    "report_to_json",
    "sanitize_filename",
    "save_report_json",
    "save_report_workbook",
]
