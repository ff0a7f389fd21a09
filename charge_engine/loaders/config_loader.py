"""
config_loader.py
----------------
📥 Turns plain bill configuration (dicts / JSON files) into engine models.

Purpose:
--------
The bill editor hands the engine plain structures. This module accepts
two layouts:

1️⃣ Engine layout
    {"consumption": 23,
     "dataset":     [{"group", "name", "value"}],
     "rate_tables": [{"name", "tiers": [{"range_width", "unit_value"}]}],
     "charges":     [{"name", "type": "rate_table", "rate_table_name", "input_name"}
                     | {"name", "type": "formula", "expression"}]}

2️⃣ Editor persisted-state layout
    keys "consumption", "dataset", "rate-tables", "charges", each value
    optionally wrapped as {"v": value}; tiers written as
    "items": [{"range", "value"}] and formulas as "formula".

Malformed entries are coerced (non-numeric → 0, unknown charge types
skipped) rather than rejected.

Depends On:
-----------
- charge_engine.calculation.models
- charge_engine.utils.helpers
- charge_engine.utils.logger
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from charge_engine.calculation.models import (
    BillResult,
    Charge,
    DatasetEntry,
    FormulaCharge,
    RateTable,
    RateTableCharge,
    Tier,
)
from charge_engine.calculation.pipeline import calculate_charges
from charge_engine.calculation.variables import parse_number
from charge_engine.utils.helpers import read_json
from charge_engine.utils.logger import get_logger

logger = get_logger(__name__)

RATE_TABLE_TYPE = "rate_table"
FORMULA_TYPE = "formula"


class ConfigurationError(ValueError):
    """Raised when a configuration document cannot be read at all."""


@dataclass
class BillConfiguration:
    """Everything one calculation pass needs."""

    consumption: Any = 0
    dataset: List[DatasetEntry] = field(default_factory=list)
    rate_tables: List[RateTable] = field(default_factory=list)
    charges: List[Charge] = field(default_factory=list)

    def calculate(self) -> BillResult:
        return calculate_charges(self.charges, self.rate_tables, self.dataset, self.consumption)


# ---------------------------------------------------------------------
# Entry parsers
# ---------------------------------------------------------------------
def _unwrap(value):
    """Editor state stores every key as {"v": value}."""
    if isinstance(value, dict) and set(value.keys()) == {"v"}:
        return value["v"]
    return value


def _first(data: Dict, *keys, default=None):
    for key in keys:
        if key in data:
            return data[key]
    return default


def _as_list(value, what: str) -> list:
    value = _unwrap(value)
    if value is None:
        return []
    if not isinstance(value, list):
        logger.warning(f"⚠️ Expected a list of {what}, got {type(value).__name__}; ignored.")
        return []
    return value


def parse_tier(data: Dict) -> Tier:
    return Tier(
        range_width=parse_number(_first(data, "range_width", "range", default=0)),
        unit_value=parse_number(_first(data, "unit_value", "value", default=0)),
    )


def parse_rate_table(data: Dict) -> RateTable:
    tiers = _first(data, "tiers", "items", default=[]) or []
    return RateTable(
        name=str(data.get("name", "")),
        tiers=tuple(parse_tier(t) for t in tiers if isinstance(t, dict)),
    )


def parse_charge(data: Dict) -> Optional[Charge]:
    """Build a charge; returns None for an unknown charge type."""
    name = str(data.get("name", ""))
    charge_type = str(data.get("type", FORMULA_TYPE)).strip()

    if charge_type == RATE_TABLE_TYPE:
        return RateTableCharge(
            name=name,
            rate_table_name=str(data.get("rate_table_name") or ""),
            input_name=str(_first(data, "input_name", "input_variable_name", default="") or ""),
        )
    if charge_type == FORMULA_TYPE:
        return FormulaCharge(
            name=name,
            expression=str(_first(data, "expression", "formula", default="") or ""),
        )

    logger.warning(f"⚠️ Charge '{name}': type '{charge_type}' unsupported; skipped.")
    return None


def parse_dataset_entry(data: Dict) -> DatasetEntry:
    return DatasetEntry(
        group=str(data.get("group", "")),
        name=str(data.get("name", "")),
        value=parse_number(data.get("value", 0)),
    )


# ---------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------
def load_configuration(data: Dict) -> BillConfiguration:
    """
    Build a BillConfiguration from a decoded document in either layout.
    """
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Bill configuration must be a JSON object, got {type(data).__name__}"
        )

    rate_tables = [
        parse_rate_table(t)
        for t in _as_list(_first(data, "rate_tables", "rate-tables", "rateTables"), "rate tables")
        if isinstance(t, dict)
    ]
    charges: List[Charge] = []
    for c in _as_list(data.get("charges"), "charges"):
        if not isinstance(c, dict):
            continue
        charge = parse_charge(c)
        if charge is not None:
            charges.append(charge)
    dataset = [
        parse_dataset_entry(d)
        for d in _as_list(data.get("dataset"), "dataset entries")
        if isinstance(d, dict)
    ]

    config = BillConfiguration(
        consumption=_unwrap(data.get("consumption", 0)),
        dataset=dataset,
        rate_tables=rate_tables,
        charges=charges,
    )
    logger.info(
        f"Loaded configuration: {len(rate_tables)} rate tables, "
        f"{len(charges)} charges, {len(dataset)} dataset entries"
    )
    return config


def load_configuration_file(file_path: str) -> BillConfiguration:
    try:
        data = read_json(file_path)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Cannot read bill configuration {file_path}: {e}") from e
    return load_configuration(data)


def dump_configuration(config: BillConfiguration) -> Dict:
    """Engine-layout dict for a configuration (inverse of load_configuration)."""

    def charge_dict(charge: Charge) -> Dict:
        if isinstance(charge, RateTableCharge):
            return {
                "name": charge.name,
                "type": RATE_TABLE_TYPE,
                "rate_table_name": charge.rate_table_name,
                "input_name": charge.input_name,
            }
        return {"name": charge.name, "type": FORMULA_TYPE, "expression": charge.expression}

    def tier_dict(tier: Tier) -> Dict:
        return {"range_width": tier.range_width, "unit_value": tier.unit_value}

    return {
        "consumption": config.consumption,
        "dataset": [{"group": d.group, "name": d.name, "value": d.value} for d in config.dataset],
        "rate_tables": [
            {"name": t.name, "tiers": [tier_dict(x) for x in t.tiers]} for t in config.rate_tables
        ],
        "charges": [charge_dict(c) for c in config.charges],
    }
