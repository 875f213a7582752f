"""Transformer module: merging partial extractions into the final report."""

from ebeszamolo.transformer.assembler import assemble_report, first_non_empty, utc_timestamp

__all__ = ["assemble_report", "first_non_empty", "utc_timestamp"]
