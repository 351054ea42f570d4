"""
Value helpers shared by the text reporter, Excel export and the API.
"""
from __future__ import annotations

import math

import numpy as np
import pandas as pd

# Columns rendered as money
PRICE_COLUMNS = {"sellingprice", "mmr", "avg_price", "max_price", "min_price", "price"}


def is_null(value) -> bool:
    if value is None:
        return True
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def column_type(name: str, values: list) -> str:
    """Excel/text column type: currency, number, decimal or text."""
    present = [v for v in values if not is_null(v)]
    if name in PRICE_COLUMNS and all(isinstance(v, (int, float, np.number)) for v in present):
        return "currency"
    if present and all(isinstance(v, (int, np.integer)) and not isinstance(v, bool) for v in present):
        return "number"
    if present and all(isinstance(v, (int, float, np.number)) for v in present):
        return "decimal"
    return "text"


def sanitize_for_json(obj):
    """Recursively convert numpy/pandas types to native Python for JSON serialization."""
    if isinstance(obj, dict):
        return {str(k): sanitize_for_json(v) for k, v in obj.items() if k is not None}
    if isinstance(obj, (list, tuple)):
        return [sanitize_for_json(v) for v in obj]
    if isinstance(obj, np.integer):
        return int(obj)
    if isinstance(obj, np.floating):
        v = float(obj)
        return None if (math.isnan(v) or math.isinf(v)) else v
    if isinstance(obj, np.bool_):
        return bool(obj)
    if isinstance(obj, np.ndarray):
        return sanitize_for_json(obj.tolist())
    if isinstance(obj, float):
        return None if (math.isnan(obj) or math.isinf(obj)) else obj
    if pd.api.types.is_scalar(obj) and is_null(obj):
        return None
    return obj
