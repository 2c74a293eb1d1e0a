"""
Growth rule definition.

Three modes:
  monthly       explicit value per calendar month (1-indexed month -> values[month-1])
  quarterly     explicit value per 3-month block (values[(month-1)//3])
  proportional  compound growth_percentage per month or per quarter

The rule itself holds no logic; growth/evaluator.py interprets it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional, Tuple

GrowthMode = Literal["monthly", "quarterly", "proportional"]
GrowthFrequency = Literal["monthly", "quarterly"]


@dataclass(frozen=True)
class GrowthRule:
    mode: GrowthMode = "proportional"
    growth_percentage: float = 0.0
    frequency: GrowthFrequency = "monthly"
    monthly_values: Tuple[Optional[float], ...] = ()
    quarterly_values: Tuple[Optional[float], ...] = ()

    @classmethod
    def proportional(cls, growth_percentage: float, frequency: GrowthFrequency = "monthly") -> "GrowthRule":
        return cls(mode="proportional", growth_percentage=growth_percentage, frequency=frequency)

    @classmethod
    def explicit_monthly(cls, values) -> "GrowthRule":
        return cls(mode="monthly", frequency="monthly", monthly_values=tuple(values))

    @classmethod
    def explicit_quarterly(cls, values) -> "GrowthRule":
        return cls(mode="quarterly", frequency="quarterly", quarterly_values=tuple(values))
