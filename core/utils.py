from __future__ import annotations

import math
import numbers
from typing import Any

import numpy as np
import pandas as pd


def to_number(value: Any, default: float = 0.0) -> float:
    """Coerce a raw input to a finite float; anything unparseable becomes ``default``."""
    if isinstance(value, (bool, complex, np.complexfloating)):
        return default
    if not isinstance(value, (numbers.Number, str)):
        return default
    if isinstance(value, str):
        value = value.strip().replace(",", "")
    num = pd.to_numeric(value, errors="coerce")
    if pd.isna(num):
        return default
    num = float(num)
    if not math.isfinite(num):
        return default
    return num


def to_amount(value: Any) -> float:
    """Money / volume inputs: finite and non-negative, zero otherwise."""
    return max(to_number(value), 0.0)


def safe_divide(numerator: float, denominator: float) -> float:
    if denominator == 0 or not math.isfinite(denominator):
        return 0.0
    return numerator / denominator


def excel_round(x, decimals: int = 2):
    """Excel ROUND: half away from zero (vectorized)."""
    m = 10 ** decimals
    x = np.asarray(x, dtype=float)
    return np.sign(x) * (np.floor(np.abs(x) * m + 0.5) / m)
