"""
Projection runner — iterates the monthly P&L builder across the horizon.

Deterministic and side-effect free: the same (model, settings) always yields the same
list of statements, which is what lets the dashboard cache results between reruns.
The full horizon is always produced, loss-making months included.
"""

from __future__ import annotations

import logging
from typing import List

from core.config import ProjectionSettings
from core.schema import BusinessModel

from .costs import amortized_setup_cost
from .pnl import MonthlyStatement, build_month

logger = logging.getLogger(__name__)


def run_projection(model: BusinessModel, settings: ProjectionSettings) -> List[MonthlyStatement]:
    """
    Run the month-by-month projection.

    Parameters
    ----------
    model : BusinessModel
        Products and cost lines (read-only)
    settings : ProjectionSettings
        Horizon, amortization mode and growth rules

    Returns
    -------
    List of MonthlyStatement, months 1..settings.months in order.
    """
    horizon = int(settings.months)
    amortized = amortized_setup_cost(model.setup_costs, settings)
    logger.debug(
        "Projecting %d months for %d products (amortized setup %.2f/month over %d months)",
        horizon, len(model.products), amortized, settings.amortization_months,
    )

    return [
        build_month(month, model, settings, amortized_setup=amortized)
        for month in range(1, horizon + 1)
    ]
