"""
models.py
----------
🧾 Plain data structures exchanged between the bill editor and the engine.

Rate tables, charges and dataset entries are configuration; ChargeResult
and BillResult are what the pipeline hands back. Nothing here keeps
global state: every calculation pass builds its own namespace.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, Union


class _Invalid:
    """Marker for a formula that could not be evaluated."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "INVALID"

    def __reduce__(self):
        return (_Invalid, ())


INVALID = _Invalid()

Amount = Union[float, _Invalid]


def is_invalid(value) -> bool:
    return value is INVALID


# ---------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class Tier:
    """
    One bracket of a rate table.

    ``range_width`` is ignored for the last tier of a table, which is the
    open-ended overflow bracket.
    """

    range_width: float = 0.0
    unit_value: float = 0.0


@dataclass(frozen=True)
class RateTable:
    name: str
    tiers: Tuple[Tier, ...] = ()


@dataclass(frozen=True)
class RateTableCharge:
    """Charge allocated from a rate table using a namespace variable as quantity."""

    name: str
    rate_table_name: str = ""
    input_name: str = ""


@dataclass(frozen=True)
class FormulaCharge:
    """Charge computed from an arithmetic expression, e.g. ``<Consumption> * 0.1``."""

    name: str
    expression: str = ""


Charge = Union[RateTableCharge, FormulaCharge]


@dataclass(frozen=True)
class DatasetEntry:
    group: str
    name: str
    value: float = 0.0

    @property
    def key(self) -> str:
        return f"{self.group}_{self.name}"


# ---------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class ChargeResult:
    name: str
    value: Amount

    @property
    def is_valid(self) -> bool:
        return not is_invalid(self.value)


@dataclass(frozen=True)
class BillResult:
    charges: Tuple[ChargeResult, ...]
    grand_total: float
    namespace: Dict[str, float] = field(default_factory=dict, compare=False)

    def as_pairs(self) -> List[Tuple[str, Amount]]:
        return [(c.name, c.value) for c in self.charges]

    def get(self, name: str) -> Optional[Amount]:
        for charge in self.charges:
            if charge.name == name:
                return charge.value
        return None
