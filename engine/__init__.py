"""
P&L projection engine — cost aggregation, monthly statements, projection runner.
"""

from .pnl import MonthlyStatement, build_month
from .runner import run_projection

__all__ = ["MonthlyStatement", "build_month", "run_projection"]
