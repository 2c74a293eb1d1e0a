"""
Top-level orchestrator — the single entry point the app and exports call.

Headline figures (total_revenue, net_pnl, ...) are taken from MONTH 1 of the
projection, not summed over the horizon. Horizon aggregates live in
analysis/aggregator.py (horizon_totals).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

from core.config import ProjectionSettings
from core.schema import BusinessModel
from engine.pnl import MonthlyStatement
from engine.runner import run_projection

from .breakeven import BreakevenResult, compute_breakeven


@dataclass(frozen=True)
class ProjectionResults:
    total_revenue: float
    total_cogs: float
    gross_profit: float
    total_operating_costs: float
    net_pnl: float
    net_margin_percent: float
    monthly_pnl: Tuple[MonthlyStatement, ...] = ()
    breakeven: BreakevenResult = field(default_factory=BreakevenResult)


def calculate(model: BusinessModel, settings: ProjectionSettings) -> ProjectionResults:
    """Projection + breakeven for one model snapshot."""
    monthly = run_projection(model, settings)
    breakeven = compute_breakeven(model, settings, statements=monthly)

    if monthly:
        first = monthly[0]
        headline = dict(
            total_revenue=first.revenue,
            total_cogs=first.cogs,
            gross_profit=first.gross_profit,
            total_operating_costs=first.total_costs,
            net_pnl=first.net_pnl,
            net_margin_percent=first.margin_percent,
        )
    else:
        headline = dict(
            total_revenue=0.0,
            total_cogs=0.0,
            gross_profit=0.0,
            total_operating_costs=0.0,
            net_pnl=0.0,
            net_margin_percent=0.0,
        )

    return ProjectionResults(monthly_pnl=tuple(monthly), breakeven=breakeven, **headline)
