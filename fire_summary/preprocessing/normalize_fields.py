#!/usr/bin/env python3
"""Coerce fire perimeter attributes to their canonical types.

- id / Fire_Name: strings
- Year: nullable integer
- Acres: non-negative integer, truncated (not rounded)
- percentage fields: stored fraction in [0, 1] (number or text) -> percent with one decimal

Rounding is half-to-even on the decimal value of the fraction, so the result does
not depend on binary float artefacts: 0.6225 -> 62.2, 0.6235 -> 62.4.

A value that cannot be parsed raises FieldParseError inside the per-value helpers;
normalize_fire_fields() logs it, records it in ``gdf.attrs["parse_errors"]`` and
leaves the field missing.
"""
from __future__ import annotations
import logging
import math
from decimal import Decimal, ROUND_HALF_EVEN
from typing import Any, Callable, Dict, List, Optional

import pandas as pd
import geopandas as gpd

from fire_summary.errors import FieldParseError
from fire_summary.fields import ACRES_COL, ID_COL, NAME_COL, PERCENT_FIELDS, YEAR_COL

logger = logging.getLogger(__name__)

NORMALIZED_ATTR = "normalized"
PARSE_ERRORS_ATTR = "parse_errors"

MISSING_TOKENS = {"", "na", "nan", "null", "none"}
ONE_DECIMAL = Decimal("0.1")


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip().lower() in MISSING_TOKENS
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def parse_number(value: Any, column: str = "", record_id: Any = None) -> Optional[float]:
    """Parse a number or its text form. Missing input gives None; garbage raises FieldParseError."""
    if _is_missing(value):
        return None
    if isinstance(value, bool):
        raise FieldParseError(column, value, record_id)
    try:
        x = float(value.strip() if isinstance(value, str) else value)
    except (TypeError, ValueError):
        raise FieldParseError(column, value, record_id) from None
    if not math.isfinite(x):
        raise FieldParseError(column, value, record_id, reason="not finite")
    return x


def round_percent(value: float) -> float:
    """Round to one decimal, half to even, on the shortest decimal repr of ``value``."""
    return float(Decimal(repr(float(value))).quantize(ONE_DECIMAL, rounding=ROUND_HALF_EVEN))


def fraction_to_percent(value: Any, column: str = "", record_id: Any = None) -> Optional[float]:
    x = parse_number(value, column, record_id)
    if x is None:
        return None
    if x < 0 or x > 1:
        raise FieldParseError(column, value, record_id, reason="outside [0, 1]")
    scaled = Decimal(repr(x)) * 100
    return float(scaled.quantize(ONE_DECIMAL, rounding=ROUND_HALF_EVEN))


def truncate_acres(value: Any, column: str = ACRES_COL, record_id: Any = None) -> Optional[int]:
    x = parse_number(value, column, record_id)
    if x is None:
        return None
    if x < 0:
        raise FieldParseError(column, value, record_id, reason="negative")
    return int(x)


def parse_year(value: Any, column: str = YEAR_COL, record_id: Any = None) -> Optional[int]:
    x = parse_number(value, column, record_id)
    if x is None:
        return None
    if not x.is_integer():
        raise FieldParseError(column, value, record_id, reason="not a whole year")
    return int(x)


def _convert_column(gdf: gpd.GeoDataFrame, column: str, func: Callable[..., Any],
                    errors: List[Dict[str, Any]]) -> List[Any]:
    out = []
    for record_id, value in zip(gdf[ID_COL], gdf[column]):
        try:
            out.append(func(value, column, record_id))
        except FieldParseError as e:
            logger.warning("Unparseable value set to missing: %s", e)
            errors.append({"column": e.column, "record_id": e.record_id, "value": str(e.value), "reason": e.reason})
            out.append(None)
    return out


def normalize_fire_fields(gdf: gpd.GeoDataFrame) -> gpd.GeoDataFrame:
    """Return a normalized copy; a frame that is already normalized is returned as is."""
    if gdf.attrs.get(NORMALIZED_ATTR):
        logger.debug("Fire fields already normalized; skipping")
        return gdf

    out = gdf.copy()
    errors: List[Dict[str, Any]] = []

    out[ID_COL] = out[ID_COL].astype(str)
    out[NAME_COL] = out[NAME_COL].where(out[NAME_COL].isna(), out[NAME_COL].astype(str))

    out[YEAR_COL] = pd.array(_convert_column(out, YEAR_COL, parse_year, errors), dtype="Int64")
    out[ACRES_COL] = pd.array(_convert_column(out, ACRES_COL, truncate_acres, errors), dtype="Int64")

    present = [c for c in PERCENT_FIELDS if c in out.columns]
    for col in present:
        values = _convert_column(out, col, fraction_to_percent, errors)
        out[col] = pd.Series(values, index=out.index, dtype="float64")

    out.attrs[NORMALIZED_ATTR] = True
    out.attrs[PARSE_ERRORS_ATTR] = errors
    logger.info("Normalized %d records (%d percentage fields, %d unparseable values)",
                len(out), len(present), len(errors))
    return out
