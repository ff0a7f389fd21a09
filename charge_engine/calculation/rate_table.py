"""
rate_table.py
-------------
🧮 Tiered rate-table allocation.

Purpose:
--------
Given the ordered tiers of a rate table and a consumption quantity,
computes the charge amount.

Workflow:
---------
1️⃣ Split tiers into the bounded brackets and the last (overflow) bracket.
2️⃣ The first bounded bracket contributes its unit value as a flat amount.
3️⃣ Every following bounded bracket contributes min(remaining, width) × unit value.
4️⃣ Whatever quantity is left after the bounded brackets is billed at the
   overflow unit value.

Inputs:
-------
- Sequence of Tier
- Quantity (float, may be <= 0)

Outputs:
--------
- Float (charge amount)

Depends On:
-----------
- charge_engine.calculation.models
"""

from typing import Sequence

from charge_engine.calculation.models import Tier

FIRST_LABEL = "First"
NEXT_LABEL = "Next"
OVER_LABEL = "Over"


def allocate(tiers: Sequence[Tier], quantity: float) -> float:
    """
    Allocate ``quantity`` across ``tiers`` and return the total charge.

    A quantity of zero or less never enters the loop and yields 0. An empty
    tier list yields 0; a single tier is a pure overflow bracket.
    """
    bounded = list(tiers[:-1])
    overflow = tiers[-1] if tiers else None

    allocated = []
    remaining = quantity
    i = 0
    while remaining > 0:
        if i >= len(bounded):
            unit_value = overflow.unit_value if overflow is not None else 0.0
            allocated.append(remaining * unit_value)
            break

        tier = bounded[i]
        if i == 0:
            # First bracket is a flat minimum charge, not scaled by quantity.
            allocated.append(tier.unit_value)
        else:
            allocated.append(min(remaining, tier.range_width) * tier.unit_value)
        remaining -= tier.range_width
        i += 1

    return sum(allocated, 0.0)


def total_range(tiers: Sequence[Tier]) -> float:
    """Quantity at which the overflow bracket starts (sum of bounded widths)."""
    return sum((tier.range_width for tier in tiers[:-1]), 0.0)


def tier_label(index: int, count: int) -> str:
    if index == 0 and count > 1:
        return FIRST_LABEL
    if index == count - 1:
        return OVER_LABEL
    return NEXT_LABEL
