"""
Export renderers — CSV, Excel and a printable HTML report.

Formatting lives here and only here; the engine deals in raw floats.
"""

from __future__ import annotations

import html
import logging
from datetime import date
from io import BytesIO
from typing import Optional, Sequence, Union

import pandas as pd

from core.schema import Product
from core.utils import excel_round, to_amount
from engine.costs import product_revenue

from .aggregator import statements_to_dataframe
from .results import ProjectionResults

logger = logging.getLogger(__name__)

EXPORT_HEADERS = {
    "month": "Month",
    "revenue": "Revenue",
    "cogs": "COGS",
    "gross_profit": "Gross Profit",
    "fixed_costs": "Fixed Costs",
    "semi_variable_costs": "Semi-Variable Costs",
    "variable_costs": "Variable Costs",
    "marketing_costs": "Marketing",
    "setup_cost_amortized": "Setup (Amortized)",
    "total_costs": "Total Costs",
    "net_pnl": "Net P&L",
    "margin_percent": "Margin %",
    "cumulative_net_pnl": "Cumulative Net P&L",
}

REPORT_MONTHS = 12


def pnl_table(results: ProjectionResults, *, decimals: int = 2) -> pd.DataFrame:
    """Monthly P&L with display headers, money rounded half away from zero."""
    df = statements_to_dataframe(results.monthly_pnl)
    for c in df.columns:
        if c == "month":
            continue
        df[c] = excel_round(df[c].to_numpy(dtype=float), 1 if c == "margin_percent" else decimals)
    return df.rename(columns=EXPORT_HEADERS)


def to_csv(results: ProjectionResults) -> str:
    return pnl_table(results).to_csv(index=False)


def to_excel(results: ProjectionResults, target: Union[str, BytesIO, None] = None) -> Union[str, BytesIO]:
    """
    Write the P&L and breakeven sheets with openpyxl.
    Returns ``target`` (a fresh BytesIO when none is given).
    """
    if target is None:
        target = BytesIO()
    be = results.breakeven
    breakeven_df = pd.DataFrame(
        [
            {"Metric": "Breakeven Units / Month", "Value": be.breakeven_units_total},
            {"Metric": "Breakeven Revenue / Month", "Value": float(be.breakeven_revenue)},
            {"Metric": "Months to Breakeven", "Value": be.months_to_breakeven},
        ]
        + [
            {"Metric": f"Breakeven Units ({pid})", "Value": units}
            for pid, units in be.breakeven_units_per_product.items()
        ]
    )
    with pd.ExcelWriter(target, engine="openpyxl") as writer:
        pnl_table(results).to_excel(writer, sheet_name="Monthly P&L", index=False)
        breakeven_df.to_excel(writer, sheet_name="Breakeven", index=False)
    logger.info("Exported %d months to Excel", len(results.monthly_pnl))
    return target


def _money(value: float) -> str:
    return f"{value:,.0f}"


def to_html_report(
    results: ProjectionResults,
    products: Sequence[Product] = (),
    *,
    business_name: Optional[str] = None,
    generated_on: Optional[date] = None,
) -> str:
    """Printable single-page report: headline cards, breakeven, products, first 12 months."""
    generated_on = generated_on or date.today()
    be = results.breakeven

    months = pnl_table(results).head(REPORT_MONTHS)
    months = months[["Month", "Revenue", "COGS", "Gross Profit", "Total Costs", "Net P&L", "Margin %"]]
    months_html = months.to_html(index=False, border=0, classes="pnl", float_format=_money)

    products_html = ""
    if products:
        prod_df = pd.DataFrame(
            [
                {
                    "Product": p.name,
                    "Price/Unit": to_amount(p.selling_price_per_unit),
                    "Units/Month": to_amount(p.units_sold_per_month),
                    "Revenue": product_revenue(p),
                }
                for p in products
            ]
        )
        products_html = (
            '<div class="section"><h2>Products Summary</h2>'
            + prod_df.to_html(index=False, border=0, classes="products", float_format=_money)
            + "</div>"
        )

    name_html = f'<p class="business-name">{html.escape(business_name)}</p>' if business_name else ""
    payback = str(be.months_to_breakeven) if be.months_to_breakeven is not None else "N/A"

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<title>P&amp;L Projection Report</title>
<style>
  body {{ font-family: 'Segoe UI', Tahoma, sans-serif; padding: 40px; color: #1e293b; }}
  .cards {{ display: grid; grid-template-columns: repeat(4, 1fr); gap: 16px; margin-bottom: 30px; }}
  .card {{ padding: 16px; border: 1px solid #e2e8f0; border-radius: 8px; }}
  .label {{ font-size: 12px; color: #64748b; }}
  .value {{ font-size: 22px; font-weight: 700; }}
  table {{ width: 100%; border-collapse: collapse; font-size: 14px; }}
  th {{ background: #1e293b; color: white; padding: 8px; text-align: left; }}
  td {{ padding: 8px; border-bottom: 1px solid #e2e8f0; }}
  .section {{ margin-bottom: 30px; }}
</style>
</head>
<body>
<div class="header">
  <h1>P&amp;L Projection Report</h1>
  {name_html}
  <p class="date">Generated on {generated_on:%d %B %Y}</p>
</div>
<div class="cards">
  <div class="card"><div class="label">Net P&amp;L (Month 1)</div><div class="value">{_money(results.net_pnl)}</div></div>
  <div class="card"><div class="label">Revenue (Month 1)</div><div class="value">{_money(results.total_revenue)}</div></div>
  <div class="card"><div class="label">Gross Profit (Month 1)</div><div class="value">{_money(results.gross_profit)}</div></div>
  <div class="card"><div class="label">Net Margin</div><div class="value">{results.net_margin_percent:.1f}%</div></div>
</div>
<div class="section">
  <h2>Breakeven Analysis</h2>
  <div class="cards">
    <div class="card"><div class="label">Breakeven Units</div><div class="value">{be.breakeven_units_total:,}</div></div>
    <div class="card"><div class="label">Breakeven Revenue</div><div class="value">{_money(be.breakeven_revenue)}</div></div>
    <div class="card"><div class="label">Months to Breakeven</div><div class="value">{payback}</div></div>
  </div>
</div>
{products_html}
<div class="section">
  <h2>Monthly P&amp;L Statement (First {REPORT_MONTHS} Months)</h2>
  {months_html}
</div>
<p class="footer">Generated for planning purposes only.</p>
</body>
</html>
"""
