"""
Growth rules — how a base quantity (units, price, cost) evolves month over month.
"""

from .base import GrowthRule, GrowthMode, GrowthFrequency
from .evaluator import apply_growth, quarter_index, default_growth_rates

__all__ = [
    "GrowthRule",
    "GrowthMode",
    "GrowthFrequency",
    "apply_growth",
    "quarter_index",
    "default_growth_rates",
]
