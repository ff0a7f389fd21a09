"""
variables.py
------------
🔤 Builds the variable namespace a calculation pass starts from.

The namespace maps variable names to floats:
- "Consumption"       → the consumption input
- "<group>_<name>"    → each dataset entry's value

Formulas reference a variable as a token, i.e. the name wrapped in angle
brackets: ``<Consumption>``, ``<Meter Charge_1" or 25mm>``.
"""

from typing import Dict, Iterable

import pandas as pd

from charge_engine.calculation.models import DatasetEntry
from charge_engine.utils.logger import get_logger

logger = get_logger(__name__)

CONSUMPTION_KEY = "Consumption"
TOKEN_OPEN = "<"
TOKEN_CLOSE = ">"


def parse_number(value) -> float:
    """
    Lenient numeric coercion: numbers pass through, numeric strings are
    parsed, and anything else (including NaN) becomes 0.
    """
    if value is None:
        return 0.0
    if isinstance(value, bool):
        return float(value)
    if not pd.api.types.is_scalar(value):
        logger.debug(f"Non-numeric input coerced to 0: {value!r}")
        return 0.0
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return 0.0
    try:
        number = pd.to_numeric(value, errors="coerce")
    except (TypeError, ValueError):
        logger.debug(f"Non-numeric input coerced to 0: {value!r}")
        return 0.0
    if pd.isna(number):
        logger.debug(f"Non-numeric input coerced to 0: {value!r}")
        return 0.0
    return float(number)


def format_token(name: str) -> str:
    return f"{TOKEN_OPEN}{name}{TOKEN_CLOSE}"


def format_variables(namespace: Dict[str, float]) -> Dict[str, float]:
    """Namespace keyed by token form, as shown next to the formula editor."""
    return {format_token(key): value for key, value in namespace.items()}


def build_namespace(consumption, dataset: Iterable[DatasetEntry]) -> Dict[str, float]:
    """
    Builds the raw namespace for one calculation pass.

    Parameters
    ----------
    consumption : float | str
        Consumption input; strings are parsed leniently.
    dataset : iterable of DatasetEntry
        Each entry is exposed under ``"<group>_<name>"``. Later entries with
        the same key win.

    Returns
    -------
    dict
        Fresh namespace owned by the caller.
    """
    namespace: Dict[str, float] = {CONSUMPTION_KEY: parse_number(consumption)}
    for entry in dataset:
        namespace[entry.key] = parse_number(entry.value)
    return namespace
