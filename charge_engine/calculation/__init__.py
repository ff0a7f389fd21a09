"""
Calculation package: rate-table allocation, variable namespace, formula
evaluation and the ordered charge pipeline.
"""

from charge_engine.calculation.formula import FormulaError, evaluate
from charge_engine.calculation.models import (
    INVALID,
    BillResult,
    ChargeResult,
    DatasetEntry,
    FormulaCharge,
    RateTable,
    RateTableCharge,
    Tier,
    is_invalid,
)
from charge_engine.calculation.pipeline import calculate_charges, grand_total
from charge_engine.calculation.rate_table import allocate, total_range
from charge_engine.calculation.variables import build_namespace, parse_number

__all__ = [
    "INVALID",
    "BillResult",
    "ChargeResult",
    "DatasetEntry",
    "FormulaCharge",
    "FormulaError",
    "RateTable",
    "RateTableCharge",
    "Tier",
    "allocate",
    "build_namespace",
    "calculate_charges",
    "evaluate",
    "grand_total",
    "is_invalid",
    "parse_number",
    "total_range",
]
