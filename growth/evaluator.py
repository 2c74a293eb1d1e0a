"""
Growth evaluator — resolve a base value for a given projection month.

Never raises: a missing rule, a missing array entry or an unparseable value falls back
to the base value, so the caller can feed half-edited rules straight from a form.
"""

from __future__ import annotations

import math
from typing import Dict, Iterable, Optional, Sequence

from core.utils import to_number

from .base import GrowthMode, GrowthRule


def quarter_index(month: int) -> int:
    """0-based quarter block for a 1-based month (months 1-3 -> 0, 4-6 -> 1, ...)."""
    return (int(month) - 1) // 3


def _explicit_value(values: Sequence, index: int, base_value: float) -> float:
    if index < 0 or index >= len(values):
        return base_value
    return to_number(values[index], default=base_value)


def apply_growth(base_value: float, month: int, rule: Optional[GrowthRule]) -> float:
    """
    Value of ``base_value`` in ``month`` (1-indexed) under ``rule``.

    Proportional growth compounds: base * (1 + r)^(month-1) for monthly frequency,
    base * (1 + r)^floor((month-1)/3) for quarterly.
    """
    base = to_number(base_value)
    if rule is None:
        return base

    if rule.mode == "monthly":
        return _explicit_value(rule.monthly_values or (), int(month) - 1, base)

    if rule.mode == "quarterly":
        return _explicit_value(rule.quarterly_values or (), quarter_index(month), base)

    if rule.mode == "proportional":
        rate = to_number(rule.growth_percentage) / 100.0
        if rule.frequency == "quarterly":
            periods = quarter_index(month)
        else:
            periods = int(month) - 1
        try:
            return base * (1.0 + rate) ** max(periods, 0)
        except OverflowError:
            # non-finite, coerced to 0 by the aggregators
            return 0.0 if base == 0 else math.copysign(math.inf, base)

    return base


def default_growth_rates(
    product_ids: Iterable[str],
    mode: GrowthMode,
    value: float,
) -> Dict[str, GrowthRule]:
    """
    One rule per product, as the "apply default growth" control does:
    proportional -> value is a monthly percentage;
    monthly      -> value repeated for 12 months;
    quarterly    -> value repeated for 4 quarters.
    """
    if mode == "monthly":
        rule = GrowthRule.explicit_monthly([value] * 12)
    elif mode == "quarterly":
        rule = GrowthRule.explicit_quarterly([value] * 4)
    else:
        rule = GrowthRule.proportional(value, "monthly")
    return {pid: rule for pid in product_ids}
