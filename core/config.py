"""
Projection configuration.
Growth rule parameters live in growth/base.py (GrowthRule).
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Literal, Mapping

from growth.base import GrowthRule

AmortizationMode = Literal["spread_over_projection", "spread_over_12_months"]

SPREAD_OVER_PROJECTION: AmortizationMode = "spread_over_projection"
SPREAD_OVER_12_MONTHS: AmortizationMode = "spread_over_12_months"
AMORTIZATION_MODES = (SPREAD_OVER_PROJECTION, SPREAD_OVER_12_MONTHS)

FIXED_AMORTIZATION_MONTHS = 12

# interactive bounds; the engine itself accepts any positive horizon
MIN_PROJECTION_MONTHS = 1
MAX_PROJECTION_MONTHS = 36
DEFAULT_PROJECTION_MONTHS = 12


@dataclass(frozen=True)
class GrowthRates:
    """Growth rules keyed by product id (units, price) or cost line id (costs)."""

    units_sold: Mapping[str, GrowthRule] = field(default_factory=dict)
    selling_price: Mapping[str, GrowthRule] = field(default_factory=dict)
    fixed_costs: Mapping[str, GrowthRule] = field(default_factory=dict)
    variable_costs: Mapping[str, GrowthRule] = field(default_factory=dict)


@dataclass(frozen=True)
class ProjectionSettings:
    months: int = DEFAULT_PROJECTION_MONTHS
    amortization: AmortizationMode = SPREAD_OVER_PROJECTION
    growth_rates: GrowthRates = field(default_factory=GrowthRates)

    @property
    def amortization_months(self) -> int:
        """Denominator used to spread the one-time setup pool."""
        if self.amortization == SPREAD_OVER_12_MONTHS:
            return FIXED_AMORTIZATION_MONTHS
        return int(self.months)

    def with_updates(self, **changes) -> "ProjectionSettings":
        return replace(self, **changes)
