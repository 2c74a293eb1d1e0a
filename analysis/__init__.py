"""
Analysis outputs — breakeven, orchestration, tabular views, insights and exports.
"""

from .breakeven import BreakevenResult, compute_breakeven, unit_contribution_margin
from .results import ProjectionResults, calculate
from .aggregator import statements_to_dataframe, horizon_totals, cost_breakdown
from .insights import InsightReport, generate_insights

__all__ = [
    "BreakevenResult",
    "compute_breakeven",
    "unit_contribution_margin",
    "ProjectionResults",
    "calculate",
    "statements_to_dataframe",
    "horizon_totals",
    "cost_breakdown",
    "InsightReport",
    "generate_insights",
]
