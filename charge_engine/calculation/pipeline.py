"""
pipeline.py
-----------
🧠 Runs the ordered list of charges for one bill.

Purpose:
--------
Ties the rate-table allocator and the formula evaluator together. Charges
are processed strictly in declaration order; each result is merged into
the namespace so later formulas can reference it as ``<charge name>``.

Workflow:
---------
1️⃣ Build the raw namespace from consumption + dataset.
2️⃣ For each charge:
    - rate table → allocate(tiers, namespace[input_name])
    - formula    → evaluate(expression, namespace)
3️⃣ Record the result; merge it (0 for INVALID) into the namespace.
4️⃣ Sum the numeric results into the grand total.

Degraded paths (unknown rate table, invalid formula, non-numeric input)
are logged and contribute 0. Nothing is raised to the caller.

Depends On:
-----------
- charge_engine.calculation.rate_table
- charge_engine.calculation.variables
- charge_engine.calculation.formula
- charge_engine.utils.logger
"""

import math
from typing import Dict, Iterable, List, Sequence

from charge_engine.calculation.formula import evaluate, referenced_names
from charge_engine.calculation.models import (
    Amount,
    BillResult,
    Charge,
    ChargeResult,
    DatasetEntry,
    FormulaCharge,
    RateTable,
    RateTableCharge,
    is_invalid,
)
from charge_engine.calculation.rate_table import allocate
from charge_engine.calculation.variables import build_namespace, parse_number
from charge_engine.utils.logger import get_logger

logger = get_logger(__name__)


def _rate_table_charge(
    charge: RateTableCharge,
    namespace: Dict[str, float],
    rate_tables: Dict[str, RateTable],
) -> float:
    quantity = parse_number(namespace.get(charge.input_name, 0.0))
    if charge.input_name not in namespace:
        logger.warning(
            f"⚠️ {charge.name}: input '{charge.input_name}' not found; using 0."
        )

    table = rate_tables.get(charge.rate_table_name)
    if table is None:
        logger.warning(
            f"⚠️ {charge.name}: rate table '{charge.rate_table_name}' not found; allocation is 0."
        )
        tiers = ()
    else:
        tiers = table.tiers
        if not tiers:
            logger.warning(f"⚠️ {charge.name}: rate table '{table.name}' has no tiers.")

    return allocate(tiers, quantity)


def _formula_charge(
    charge: FormulaCharge,
    namespace: Dict[str, float],
    pending: Sequence[str],
) -> Amount:
    value = evaluate(charge.expression, dict(namespace))
    if is_invalid(value):
        ahead = [n for n in referenced_names(charge.expression) if n in pending]
        if ahead:
            logger.warning(
                f"⚠️ {charge.name}: references {ahead} before they are calculated."
            )
    return value


def grand_total(results: Iterable[ChargeResult]) -> float:
    """Sum of numeric charge values; INVALID and nan count as 0."""
    total = 0.0
    for result in results:
        if is_invalid(result.value) or math.isnan(result.value):
            continue
        total += result.value
    return total


def calculate_charges(
    charges: Sequence[Charge],
    rate_tables: Iterable[RateTable],
    dataset: Iterable[DatasetEntry],
    consumption,
) -> BillResult:
    """
    Compute every charge of a bill.

    Parameters
    ----------
    charges : sequence of RateTableCharge | FormulaCharge
        Evaluated in order; a formula may reference earlier charges only.
    rate_tables : iterable of RateTable
        Looked up by name. With duplicate names the first table wins.
    dataset : iterable of DatasetEntry
    consumption : float | str
        Parsed leniently; non-numeric values become 0.

    Returns
    -------
    BillResult
        Results in declaration order, the grand total and the final namespace.
    """
    tables: Dict[str, RateTable] = {}
    for table in rate_tables:
        tables.setdefault(table.name, table)

    namespace = build_namespace(consumption, dataset)
    results: Dict[str, Amount] = {}

    names = [charge.name for charge in charges]
    for position, charge in enumerate(charges):
        if isinstance(charge, RateTableCharge):
            value: Amount = _rate_table_charge(charge, namespace, tables)
        elif isinstance(charge, FormulaCharge):
            value = _formula_charge(charge, namespace, names[position:])
        else:
            logger.warning(f"⚠️ Unsupported charge {charge!r}; skipped.")
            continue

        results[charge.name] = value
        namespace[charge.name] = 0.0 if is_invalid(value) else value
        logger.debug(f"{charge.name}: {value!r}")

    charge_results: List[ChargeResult] = [
        ChargeResult(name=name, value=value) for name, value in results.items()
    ]
    total = grand_total(charge_results)
    invalid_count = sum(1 for r in charge_results if not r.is_valid)
    logger.info(
        f"✅ Calculated {len(charge_results)} charges | total={total:.2f}"
        + (f" | invalid={invalid_count}" if invalid_count else "")
    )
    return BillResult(charges=tuple(charge_results), grand_total=total, namespace=namespace)
