"""
bill_report.py
--------------
📊 Presents a calculated bill as tables.

Purpose:
--------
Converts a BillResult into a pandas DataFrame and a plain-text report
(charge rows + Total row, amounts with fixed decimals), and describes
rate tables tier by tier (First / Next / Over).

Outputs:
--------
- DataFrame: charge | value | status
- Text report for the console
- CSV export under data/output/

Depends On:
-----------
- pandas
- charge_engine.config
- charge_engine.utils.data_paths
- charge_engine.utils.logger
"""

import math
from typing import Optional

import pandas as pd

from charge_engine import config
from charge_engine.calculation.models import BillResult, RateTable, is_invalid
from charge_engine.calculation.rate_table import tier_label, total_range
from charge_engine.utils.data_paths import ensure_dir, get_file_path
from charge_engine.utils.logger import get_logger

logger = get_logger(__name__)

TOTAL_LABEL = "Total"


def format_amount(value, decimals: Optional[int] = None) -> str:
    """
    Fixed-decimal display of a charge value. INVALID shows the invalid
    marker, nan shows as zero and infinite values show as Infinity.
    """
    if decimals is None:
        decimals = config.DISPLAY_DECIMALS
    if is_invalid(value):
        return config.INVALID_MARKER
    if value is None or math.isnan(value):
        value = 0.0
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    return f"{value:.{decimals}f}"


def results_to_frame(result: BillResult) -> pd.DataFrame:
    rows = [
        {
            "charge": charge.name,
            "value": float("nan") if not charge.is_valid else charge.value,
            "status": "ok" if charge.is_valid else "invalid",
        }
        for charge in result.charges
    ]
    return pd.DataFrame(rows, columns=["charge", "value", "status"])


def render_report(result: BillResult, decimals: Optional[int] = None) -> str:
    """Text table of every charge followed by the Total row."""
    labels = [c.name for c in result.charges] + [TOTAL_LABEL]
    amounts = [format_amount(c.value, decimals) for c in result.charges]
    amounts.append(format_amount(result.grand_total, decimals))

    label_width = max(len(label) for label in labels)
    amount_width = max(len(amount) for amount in amounts)
    lines = [f"{label:<{label_width}}  {amount:>{amount_width}}" for label, amount in zip(labels, amounts)]
    lines.insert(len(lines) - 1, "-" * (label_width + amount_width + 2))
    return "\n".join(lines)


def describe_rate_table(table: RateTable) -> pd.DataFrame:
    """
    One row per tier: label (First / Next / Over), range and unit value.
    The overflow row shows the quantity at which it starts.
    """
    count = len(table.tiers)
    rows = []
    for i, tier in enumerate(table.tiers):
        is_last = i == count - 1
        rows.append(
            {
                "label": tier_label(i, count),
                "range": total_range(table.tiers) if is_last else tier.range_width,
                "unit_value": tier.unit_value,
            }
        )
    return pd.DataFrame(rows, columns=["label", "range", "unit_value"])


def save_report(result: BillResult, filename: str = "bill_report.csv") -> str:
    """Export the result table (with a Total row) as CSV to data/output/."""
    ensure_dir("output")
    file_path = get_file_path("output", filename)
    df = results_to_frame(result)
    total = pd.DataFrame([{"charge": TOTAL_LABEL, "value": result.grand_total, "status": "ok"}])
    pd.concat([df, total], ignore_index=True).to_csv(file_path, index=False)
    logger.info(f"💾 Saved bill report: {file_path} | Rows: {len(df)}")
    return file_path
