"""Dominant forest type per fire and the per-type fire counts."""
from __future__ import annotations
import logging
from typing import Any, Mapping, Optional

import numpy as np
import pandas as pd

from fire_summary.fields import DOMINANT_COL, FOREST_TYPES

logger = logging.getLogger(__name__)


def _value(v: Any) -> Optional[float]:
    if v is None:
        return None
    try:
        if pd.isna(v):
            return None
    except (TypeError, ValueError):
        return None
    return float(v)


def dominant_forest_type(percentages: Mapping[str, Any], require_complete: bool = False) -> Optional[str]:
    """Forest type with the largest percentage.

    Ties go to the first type in FOREST_TYPES order. Missing values never win;
    None when every value is missing (or any is, with ``require_complete``).
    """
    best: Optional[str] = None
    best_val = -np.inf
    for forest_type in FOREST_TYPES:
        val = _value(percentages.get(forest_type))
        if val is None:
            if require_complete:
                return None
            continue
        if best is None or val > best_val:
            best, best_val = forest_type, val
    return best


def attach_dominant_forest_type(gdf: pd.DataFrame, require_complete: bool = False) -> pd.DataFrame:
    """Copy of ``gdf`` with a ``dominant_forest_type`` column (missing where unresolved)."""
    out = gdf.copy()
    labels = [
        dominant_forest_type(row, require_complete=require_complete)
        for row in out[FOREST_TYPES].to_dict("records")
    ]
    out[DOMINANT_COL] = pd.Series(labels, index=out.index, dtype="object")
    unresolved = int(out[DOMINANT_COL].isna().sum())
    if unresolved:
        logger.warning("%d fire(s) have no forest-type percentages; dominant type left undefined", unresolved)
    return out


def dominant_type_counts(gdf: pd.DataFrame) -> pd.Series:
    """Number of fires per dominant forest type, canonical order, zero counts dropped."""
    counts = gdf[DOMINANT_COL].dropna().value_counts()
    counts = counts.reindex(FOREST_TYPES, fill_value=0)
    counts = counts[counts > 0].astype(int)
    counts.index.name = DOMINANT_COL
    counts.name = "fires"
    return counts


def dominant_type_table(counts: pd.Series) -> pd.DataFrame:
    return pd.DataFrame({
        "Dominant forest type": counts.index.astype(str),
        "Fires": counts.to_numpy(),
    })
