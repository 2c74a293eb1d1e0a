"""
Insight flags — turn a projection into statements an owner can act on.

  Q1: "Do I make money from month one?"        -> month-1 net P&L
  Q2: "When do I get my setup money back?"     -> payback month within the horizon
  Q3: "Does every product pay its own way?"    -> unit contribution margin per product
  Q4: "How exposed am I if sales dip?"         -> fixed share of month-1 costs
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

import pandas as pd

from core.schema import BusinessModel
from core.utils import to_amount

from .aggregator import horizon_totals
from .breakeven import unit_contribution_margin
from .results import ProjectionResults

HIGH_FIXED_SHARE = 0.60


@dataclass
class InsightReport:
    """Structured owner-facing summary."""
    business_name: str

    month1_net_pnl: float
    month1_margin_pct: float
    horizon_net_pnl: float
    horizon_margin_pct: float
    profitable_months: int
    horizon_months: int

    breakeven_units: int
    breakeven_revenue: float
    months_to_breakeven: Optional[int]

    fixed_cost_share: float  # (fixed + amortized setup) / month-1 total costs
    non_contributing_products: List[str] = field(default_factory=list)

    flags: List[str] = field(default_factory=list)

    def to_dataframe(self) -> pd.DataFrame:
        """Convert to a display-friendly table."""
        rows = [
            {"Metric": "Business", "Value": self.business_name},
            {"Metric": "Month 1 Net P&L", "Value": f"{self.month1_net_pnl:,.0f}"},
            {"Metric": "Month 1 Margin", "Value": f"{self.month1_margin_pct:.1f}%"},
            {"Metric": "Horizon Net P&L", "Value": f"{self.horizon_net_pnl:,.0f}"},
            {"Metric": "Horizon Margin", "Value": f"{self.horizon_margin_pct:.1f}%"},
            {"Metric": "Profitable Months", "Value": f"{self.profitable_months} / {self.horizon_months}"},
            {"Metric": "Breakeven Units / Month", "Value": f"{self.breakeven_units:,}"},
            {"Metric": "Breakeven Revenue / Month", "Value": f"{self.breakeven_revenue:,.0f}"},
            {
                "Metric": "Months to Breakeven",
                "Value": str(self.months_to_breakeven) if self.months_to_breakeven is not None else "N/A",
            },
            {"Metric": "Fixed Cost Share (Month 1)", "Value": f"{self.fixed_cost_share:.0%}"},
        ]
        if self.non_contributing_products:
            rows.append({"Metric": "Non-Contributing Products", "Value": ", ".join(self.non_contributing_products)})
        if self.flags:
            rows.append({"Metric": "FLAGS", "Value": " | ".join(self.flags)})
        return pd.DataFrame(rows)


def generate_insights(
    results: ProjectionResults,
    model: BusinessModel,
    *,
    business_name: str = "Business",
) -> InsightReport:
    """
    Build an InsightReport from calculated results.

    Parameters
    ----------
    results : ProjectionResults
        Output of analysis.results.calculate()
    model : BusinessModel
        The model the results were computed from (for per-product margins)
    business_name : str
        Label for the report
    """
    totals = horizon_totals(results.monthly_pnl)
    be = results.breakeven

    first = results.monthly_pnl[0] if results.monthly_pnl else None
    if first is not None and first.total_costs > 0:
        fixed_share = (first.fixed_costs + first.setup_cost_amortized) / first.total_costs
    else:
        fixed_share = 0.0

    margins = {p.id: unit_contribution_margin(p, model) for p in model.products}
    non_contributing = [p.name or p.id for p in model.products if margins[p.id] <= 0]
    has_contribution = any(
        margins[p.id] > 0 and to_amount(p.units_sold_per_month) > 0 for p in model.products
    )

    flags = []
    if first is not None and first.net_pnl < 0:
        flags.append("LOSS_IN_MONTH_1: month 1 net P&L is negative")
    if results.monthly_pnl and be.months_to_breakeven is None:
        flags.append(f"NO_PAYBACK: setup cost not recovered within {len(results.monthly_pnl)} months")
    if non_contributing:
        flags.append(f"NEGATIVE_CONTRIBUTION: {len(non_contributing)} product(s) lose money per unit")
    if model.products and not has_contribution:
        flags.append("NO_BREAKEVEN: no product contributes a positive margin")
    if fixed_share > HIGH_FIXED_SHARE:
        flags.append(f"HIGH_OPERATING_LEVERAGE: fixed costs are {fixed_share:.0%} of month 1 costs")
    if results.monthly_pnl and totals["profitable_months"] == 0:
        flags.append("NEVER_PROFITABLE: every projected month is loss-making")

    return InsightReport(
        business_name=business_name,
        month1_net_pnl=results.net_pnl,
        month1_margin_pct=results.net_margin_percent,
        horizon_net_pnl=totals["net_pnl"],
        horizon_margin_pct=totals["margin_percent"],
        profitable_months=int(totals["profitable_months"]),
        horizon_months=int(totals["months"]),
        breakeven_units=be.breakeven_units_total,
        breakeven_revenue=be.breakeven_revenue,
        months_to_breakeven=be.months_to_breakeven,
        fixed_cost_share=fixed_share,
        non_contributing_products=non_contributing,
        flags=flags,
    )
