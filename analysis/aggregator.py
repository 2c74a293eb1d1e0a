"""
Tabular views of a projection for charts, tables and exports.

The engine returns plain dataclasses; everything pandas-shaped is built here:
  - statements_to_dataframe: one row per month + cumulative net P&L
  - horizon_totals:          sums across the whole horizon (the headline numbers in
                             ProjectionResults are month 1 only)
  - cost_breakdown:          non-zero cost categories of a single month with shares
"""

from __future__ import annotations

from typing import Dict, Sequence

import pandas as pd

from engine.pnl import MonthlyStatement

STATEMENT_COLUMNS = [
    "month",
    "revenue",
    "cogs",
    "gross_profit",
    "fixed_costs",
    "semi_variable_costs",
    "variable_costs",
    "marketing_costs",
    "setup_cost_amortized",
    "total_costs",
    "net_pnl",
    "margin_percent",
]

COST_CATEGORY_LABELS: Dict[str, str] = {
    "fixed_costs": "Fixed",
    "semi_variable_costs": "Semi-Variable",
    "variable_costs": "Variable",
    "marketing_costs": "Marketing",
    "setup_cost_amortized": "Setup (amortized)",
}


def statements_to_dataframe(statements: Sequence[MonthlyStatement]) -> pd.DataFrame:
    df = pd.DataFrame([s.to_dict() for s in statements], columns=STATEMENT_COLUMNS)
    df["cumulative_net_pnl"] = df["net_pnl"].cumsum()
    return df


def horizon_totals(statements: Sequence[MonthlyStatement]) -> Dict[str, float]:
    """
    Totals across the horizon.
    margin_percent is revenue-weighted (total net / total revenue), 0 with no revenue.
    """
    df = statements_to_dataframe(statements)
    totals = {
        col: float(df[col].sum())
        for col in STATEMENT_COLUMNS
        if col not in ("month", "margin_percent")
    }
    revenue = totals["revenue"]
    totals["margin_percent"] = totals["net_pnl"] * 100.0 / revenue if revenue > 0 else 0.0
    totals["months"] = float(len(df))
    totals["profitable_months"] = float((df["net_pnl"] > 0).sum())
    return totals


def cost_breakdown(statement: MonthlyStatement) -> pd.DataFrame:
    """Cost categories of one month with their share of total costs."""
    rows = [
        {"category": label, "amount": float(getattr(statement, attr))}
        for attr, label in COST_CATEGORY_LABELS.items()
        if getattr(statement, attr) > 0
    ]
    df = pd.DataFrame(rows, columns=["category", "amount"])
    total = df["amount"].sum()
    df["share"] = df["amount"] / total if total > 0 else 0.0
    return df
