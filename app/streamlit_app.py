"""
P&L Planner — Projection & Breakeven Dashboard
==============================================

Workflow:
  1. Pick a business type and a starting proposal (bundled sample or uploaded JSON)
  2. Adjust prices, volumes, horizon, amortization and default growth
  3. Read the monthly P&L, cost mix, breakeven and flags; download CSV / Excel / HTML

Run: streamlit run app/streamlit_app.py
"""

from __future__ import annotations

import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Optional

import altair as alt
import pandas as pd
import streamlit as st

# ---------------------------------------------------------------------------
# Make project root importable
# ---------------------------------------------------------------------------
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from core.business_types import BUSINESS_TYPES, get_business_type
from core.config import (
    AMORTIZATION_MODES,
    MAX_PROJECTION_MONTHS,
    MIN_PROJECTION_MONTHS,
    SPREAD_OVER_12_MONTHS,
    SPREAD_OVER_PROJECTION,
    ProjectionSettings,
)
from core.schema import BusinessModel

from data_prep.loader import load_environment_json, parse_environment
from data_prep.validators import validate_model

from growth.evaluator import default_growth_rates

from analysis.aggregator import cost_breakdown, statements_to_dataframe
from analysis.export import to_csv, to_excel, to_html_report
from analysis.insights import generate_insights
from analysis.results import calculate

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Data directories
# ---------------------------------------------------------------------------
SAMPLES_DIR = PROJECT_ROOT / "data" / "samples"

AMORTIZATION_LABELS = {
    SPREAD_OVER_PROJECTION: "Spread over projection horizon",
    SPREAD_OVER_12_MONTHS: "Spread over 12 months",
}
GROWTH_MODE_LABELS = {
    "proportional": "Proportional (% compounding per month)",
    "monthly": "Monthly (explicit value for each month)",
    "quarterly": "Quarterly (explicit value for each quarter)",
}


def _sample_path(business_type_id: str) -> Optional[Path]:
    path = SAMPLES_DIR / f"{business_type_id}.json"
    return path if path.exists() else None


# ---------------------------------------------------------------------------
# Cached loaders
# ---------------------------------------------------------------------------
@st.cache_data(show_spinner="Loading sample...")
def _load_sample(path: str):
    return load_environment_json(path)


@st.cache_data(show_spinner="Parsing proposal...")
def _parse_upload(raw: bytes):
    return parse_environment(raw)


# ---------------------------------------------------------------------------
# Charts
# ---------------------------------------------------------------------------
def _plot_pnl(df: pd.DataFrame, *, height: int = 320):
    if len(df) == 0:
        st.info("No data to plot.")
        return
    series = {"revenue": "Revenue", "total_costs": "Total Costs", "net_pnl": "Net P&L"}
    long = (
        df[["month"] + list(series)]
        .rename(columns=series)
        .melt(id_vars=["month"], var_name="series", value_name="value")
    )
    chart = (
        alt.Chart(long).mark_line(point=True)
        .encode(
            x=alt.X("month:O", title="Month"),
            y=alt.Y("value:Q", title="Amount", axis=alt.Axis(format=",.0f")),
            color=alt.Color("series:N", title="Series"),
        )
        .properties(title="Revenue, Costs and Net P&L", height=height)
    )
    st.altair_chart(chart, use_container_width=True)


def _plot_cost_mix(mix: pd.DataFrame, *, height: int = 320):
    mix = mix[mix["amount"] > 0]
    if len(mix) == 0:
        st.info("No costs in month 1.")
        return
    chart = (
        alt.Chart(mix).mark_arc(innerRadius=60)
        .encode(
            theta=alt.Theta("amount:Q"),
            color=alt.Color("category:N", title="Category"),
            tooltip=["category", alt.Tooltip("amount:Q", format=",.0f"), alt.Tooltip("share:Q", format=".0%")],
        )
        .properties(title="Month 1 Cost Mix", height=height)
    )
    st.altair_chart(chart, use_container_width=True)


def _money(val: float) -> str:
    return f"{val:,.0f}"


def apply_default_growth(settings: ProjectionSettings, product_ids, mode: str, value: float) -> ProjectionSettings:
    """Same rule on units sold and selling price for every product."""
    rules = default_growth_rates(product_ids, mode, value)
    rates = replace(settings.growth_rates, units_sold=dict(rules), selling_price=dict(rules))
    return settings.with_updates(growth_rates=rates)


def _edit_products(model: BusinessModel) -> BusinessModel:
    """Price and volume inputs per product; returns a fresh model."""
    edited = []
    for p in model.products:
        c1, c2 = st.columns(2)
        price = c1.number_input(
            f"{p.name} price / {p.unit_label}", min_value=0.0,
            value=float(p.selling_price_per_unit), step=10.0, key=f"price_{p.id}",
        )
        units = c2.number_input(
            f"{p.name} {p.unit_label}s / month", min_value=0.0,
            value=float(p.units_sold_per_month), step=1.0, key=f"units_{p.id}",
        )
        edited.append(replace(p, selling_price_per_unit=price, units_sold_per_month=units))
    return replace(model, products=tuple(edited))


def render():
    st.set_page_config(page_title="P&L Planner", layout="wide")
    st.title("P&L Planner")
    st.caption("Monthly profit & loss projection and breakeven for a small business")

    # ═══════════════════════════════════════════════════════════════════════
    # SIDEBAR — Proposal & Settings
    # ═══════════════════════════════════════════════════════════════════════
    with st.sidebar:
        st.header("Business")
        type_ids = [bt.id for bt in BUSINESS_TYPES]
        type_id = st.selectbox(
            "Business type", options=type_ids,
            format_func=lambda i: get_business_type(i).label,
        )
        business_type = get_business_type(type_id)
        st.caption(business_type.notes)

        uploaded = st.file_uploader("Proposal JSON", type=["json"])

    if uploaded is not None:
        try:
            model, settings, insights = _parse_upload(uploaded.getvalue())
        except ValueError as e:
            st.error(f"Could not read proposal: {e}")
            st.stop()
        source = uploaded.name
    elif _sample_path(type_id) is not None:
        model, settings, insights = _load_sample(str(_sample_path(type_id)))
        source = f"sample: {type_id}"
    else:
        model, settings, insights = BusinessModel(), ProjectionSettings(), {}
        source = "empty model"

    with st.sidebar:
        st.header("Projection")
        months = st.slider(
            "Horizon (months)", MIN_PROJECTION_MONTHS, MAX_PROJECTION_MONTHS,
            int(min(max(settings.months, MIN_PROJECTION_MONTHS), MAX_PROJECTION_MONTHS)),
        )
        amortization = st.radio(
            "Setup cost amortization", options=list(AMORTIZATION_MODES),
            index=list(AMORTIZATION_MODES).index(settings.amortization),
            format_func=AMORTIZATION_LABELS.get,
        )

        st.header("Default Growth")
        apply_default = st.checkbox("Apply default growth to all products", value=False)
        growth_mode = st.radio("Growth mode", options=list(GROWTH_MODE_LABELS), format_func=GROWTH_MODE_LABELS.get)
        growth_value = st.number_input("Growth % or explicit value", value=5.0, step=0.5)

    settings = settings.with_updates(months=months, amortization=amortization)
    if apply_default:
        settings = apply_default_growth(settings, model.product_ids(), growth_mode, growth_value)

    st.subheader(f"{business_type.label} ({source})")

    if model.products:
        with st.expander("Products", expanded=False):
            model = _edit_products(model)

    vr = validate_model(model, settings)
    if not vr.is_valid:
        st.error("Model validation failed:\n" + vr.summary())
    elif vr.warnings:
        with st.expander(f"Validation warnings ({len(vr.warnings)})", expanded=False):
            st.text(vr.summary())

    # ═══════════════════════════════════════════════════════════════════════
    # RESULTS
    # ═══════════════════════════════════════════════════════════════════════
    results = calculate(model, settings)
    logger.info("Recomputed %d-month projection for %s", len(results.monthly_pnl), type_id)

    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Revenue (Month 1)", _money(results.total_revenue))
    c2.metric("Gross Profit (Month 1)", _money(results.gross_profit))
    c3.metric("Net P&L (Month 1)", _money(results.net_pnl))
    c4.metric("Net Margin (Month 1)", f"{results.net_margin_percent:.1f}%")

    df = statements_to_dataframe(results.monthly_pnl)
    left, right = st.columns([2, 1])
    with left:
        _plot_pnl(df)
    with right:
        if results.monthly_pnl:
            _plot_cost_mix(cost_breakdown(results.monthly_pnl[0]))

    st.subheader("Breakeven")
    be = results.breakeven
    b1, b2, b3 = st.columns(3)
    b1.metric("Units / Month", f"{be.breakeven_units_total:,}")
    b2.metric("Revenue / Month", _money(be.breakeven_revenue))
    b3.metric("Months to Breakeven", str(be.months_to_breakeven) if be.months_to_breakeven is not None else "N/A")
    if be.breakeven_units_per_product:
        names = {p.id: p.name for p in model.products}
        st.dataframe(
            pd.DataFrame(
                [{"Product": names.get(pid, pid), "Breakeven Units": u} for pid, u in be.breakeven_units_per_product.items()]
            ),
            use_container_width=True, hide_index=True,
        )

    report = generate_insights(results, model, business_name=business_type.label)
    for flag in report.flags:
        st.warning(flag)

    if insights and any(insights.values()):
        with st.expander("Assistant notes", expanded=False):
            for title, key in [("Key drivers", "key_drivers"), ("Risks", "risk_factors"),
                               ("Recommendations", "recommendations")]:
                if insights.get(key):
                    st.markdown(f"**{title}**")
                    st.markdown("\n".join(f"- {item}" for item in insights[key]))

    with st.expander("Monthly P&L table", expanded=True):
        st.dataframe(df, use_container_width=True, hide_index=True)

    # ═══════════════════════════════════════════════════════════════════════
    # EXPORTS
    # ═══════════════════════════════════════════════════════════════════════
    d1, d2, d3 = st.columns(3)
    d1.download_button("Download CSV", to_csv(results), file_name="pnl_projection.csv", mime="text/csv")
    d2.download_button(
        "Download Excel", to_excel(results).getvalue(), file_name="pnl_projection.xlsx",
        mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    )
    d3.download_button(
        "Download Report",
        to_html_report(results, model.products, business_name=business_type.label),
        file_name="pnl_report.html", mime="text/html",
    )


def main():
    """Console entry point: launch the dashboard under streamlit."""
    from streamlit.web import cli as stcli

    sys.argv = ["streamlit", "run", str(Path(__file__).resolve())]
    sys.exit(stcli.main())


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    render()
