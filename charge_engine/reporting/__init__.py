"""Reporting package: tables and text output for calculated bills."""

from charge_engine.reporting.bill_report import (
    describe_rate_table,
    format_amount,
    render_report,
    results_to_frame,
    save_report,
)

__all__ = [
    "describe_rate_table",
    "format_amount",
    "render_report",
    "results_to_frame",
    "save_report",
]
