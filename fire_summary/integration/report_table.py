#!/usr/bin/env python3
"""Display table summarising forest composition and disturbance per fire.

Rows are sorted by, in order and each descending with missing values last:
gedi_coverage (when present), lodgepole, ponderosa, spruceFir, disturbed_burned
(when present). Headers are replaced by readable labels; percentage columns
carry a "%" suffix.
"""
from __future__ import annotations
import logging
from pathlib import Path
from typing import List

import pandas as pd
from pandas.io.formats.style import Styler

from fire_summary.fields import (
    ACRES_COL, COLUMN_LABELS, FOREST_TYPES, GEDI_COL, NAME_COL, PERCENT_FIELDS, YEAR_COL,
)

logger = logging.getLogger(__name__)

SORT_FIELDS: List[str] = [GEDI_COL] + FOREST_TYPES + ["disturbed_burned"]


def report_columns(df: pd.DataFrame) -> List[str]:
    return [NAME_COL, YEAR_COL, ACRES_COL] + [c for c in PERCENT_FIELDS if c in df.columns]


def sort_keys(df: pd.DataFrame) -> List[str]:
    return [c for c in SORT_FIELDS if c in df.columns]


def build_report_table(df: pd.DataFrame) -> pd.DataFrame:
    """Project, sort and relabel normalized fire records into display rows."""
    cols = report_columns(df)
    table = pd.DataFrame(df[cols]).reset_index(drop=True)
    keys = sort_keys(table)
    # multi-key sort is stable: fully tied rows keep file order
    table = table.sort_values(keys, ascending=False, na_position="last", kind="mergesort")
    table = table.reset_index(drop=True).rename(columns=COLUMN_LABELS)
    return table


def percent_label_columns(table: pd.DataFrame) -> List[str]:
    return [c for c in table.columns if str(c).endswith("%")]


def style_report_table(table: pd.DataFrame) -> Styler:
    """Striped, compact, left-positioned table."""
    styler = (
        table.style
        .hide(axis="index")
        .format("{:.1f}", subset=percent_label_columns(table), na_rep="")
        .format("{:,}", subset=[COLUMN_LABELS[ACRES_COL]], na_rep="")
        .set_table_attributes('class="table table-striped" style="width:auto;margin-left:0;margin-right:auto"')
        .set_table_styles([
            {"selector": "tbody tr:nth-child(odd)", "props": [("background-color", "#f9f9f9")]},
            {"selector": "th", "props": [("text-align", "left"), ("padding", "4px 8px")]},
            {"selector": "td", "props": [("text-align", "left"), ("padding", "4px 8px")]},
        ])
    )
    return styler


def write_report_html(table: pd.DataFrame, path: Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(style_report_table(table).to_html(), encoding="utf-8")
    logger.info("Saved summary table: %s", path)
    return path


def format_console_table(table: pd.DataFrame) -> str:
    if table.empty:
        return "(no fires)"
    return table.to_string(index=False, na_rep="", float_format=lambda v: f"{v:.1f}")
