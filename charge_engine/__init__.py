"""
Top-level package for the utility charge engine.

Computes billing charges from consumption inputs using tiered rate tables
and chained arithmetic formulas. The engine keeps no global state: each
call to ``calculate_charges`` builds and discards its own namespace.
"""

from charge_engine.calculation import (
    INVALID,
    BillResult,
    ChargeResult,
    DatasetEntry,
    FormulaCharge,
    RateTable,
    RateTableCharge,
    Tier,
    allocate,
    calculate_charges,
    evaluate,
)

__version__ = "0.1.0"

__all__ = [
    "INVALID",
    "BillResult",
    "ChargeResult",
    "DatasetEntry",
    "FormulaCharge",
    "RateTable",
    "RateTableCharge",
    "Tier",
    "allocate",
    "calculate_charges",
    "evaluate",
]
