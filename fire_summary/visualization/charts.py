#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Static charts of the fire perimeter summary.

Each render_* function takes the frame from chart_frame(), the palette
(forest type -> colour), the (min, max) year bounds shared by the charts with a
year axis, and the figure size, writes one PNG and returns its path. A chart with
nothing to draw raises RenderSkipped instead of writing an empty figure.

Files
 - {label}-fire_timeline.png
 - {label}-fire_hist_years.png
 - {label}-fire_hist_size.png
 - {label}-fire_size_vs_year_scatterplot.png
"""
from __future__ import annotations
import logging
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
from matplotlib.lines import Line2D
import seaborn as sns

from fire_summary.errors import RenderSkipped
from fire_summary.fields import (
    ACRES_COL, ACRES_TO_HECTARES, DOMINANT_COL, FOREST_TYPES, NAME_COL, UNRESOLVED,
    UNRESOLVED_COLOR, YEAR_COL,
)

logger = logging.getLogger(__name__)

CHART_FILES: Dict[str, str] = {
    "timeline": "{label}-fire_timeline.png",
    "hist_years": "{label}-fire_hist_years.png",
    "hist_size": "{label}-fire_hist_size.png",
    "size_vs_year": "{label}-fire_size_vs_year_scatterplot.png",
}

LEGEND_TITLE = "Dominant forest type"
FOREST_LABEL_COL = "forest_label"
YearBounds = Tuple[int, int]


# ----------------------
# Chart inputs
# ----------------------

def acres_to_hectares(acres) -> pd.Series:
    return pd.to_numeric(pd.Series(acres), errors="coerce").astype("float64") * ACRES_TO_HECTARES


def timeline_marker_sizes(acres, min_size: float = 20.0, scale: float = 40.0) -> pd.Series:
    """Marker area monotonic in log(area / max(area)), shifted so the smallest fire stays visible.

    Areas below 1 acre are treated as 1 acre; missing areas get ``min_size``.
    """
    a = pd.to_numeric(pd.Series(acres), errors="coerce").astype("float64")
    clipped = a.clip(lower=1.0)
    if clipped.notna().sum() == 0:
        return pd.Series(min_size, index=a.index)
    rel = np.log(clipped / clipped.max())
    shifted = rel - rel.min()
    return (min_size + scale * shifted).fillna(min_size)


def chart_frame(df: pd.DataFrame) -> pd.DataFrame:
    """Plain frame with unit conversions and a plotting label for the dominant type."""
    out = pd.DataFrame(df.drop(columns="geometry", errors="ignore")).copy()
    out["hectares"] = acres_to_hectares(out[ACRES_COL]).to_numpy()
    with np.errstate(divide="ignore", invalid="ignore"):
        out["log2_hectares"] = np.where(out["hectares"] > 0, np.log2(out["hectares"]), np.nan)
    out["timeline_size"] = timeline_marker_sizes(out[ACRES_COL]).to_numpy()
    if DOMINANT_COL in out.columns:
        out[FOREST_LABEL_COL] = out[DOMINANT_COL].fillna(UNRESOLVED)
    else:
        out[FOREST_LABEL_COL] = UNRESOLVED
    return out


def year_bounds(df: pd.DataFrame) -> Optional[YearBounds]:
    years = pd.to_numeric(df[YEAR_COL], errors="coerce").dropna()
    if years.empty:
        return None
    return int(years.min()), int(years.max())


def year_breaks(bounds: YearBounds, step: int = 4) -> List[int]:
    lo, hi = bounds
    return list(range(lo, hi + 1, step))


def label_order(labels: Sequence[str]) -> List[str]:
    present = set(labels)
    return [t for t in FOREST_TYPES + [UNRESOLVED] if t in present]


def chart_path(out_dir: Path, label: str, chart: str) -> Path:
    return Path(out_dir) / CHART_FILES[chart].format(label=label)


def _colour(palette: Dict[str, str], label: str) -> str:
    return palette.get(label, UNRESOLVED_COLOR)


def _forest_legend(ax, labels: Sequence[str], palette: Dict[str, str], size: float = 8) -> None:
    handles = [
        Line2D([0], [0], marker="o", linestyle="", markerfacecolor=_colour(palette, lab),
               markeredgecolor="black", markeredgewidth=0.5, markersize=size, label=lab)
        for lab in label_order(labels)
    ]
    ax.legend(handles=handles, title=LEGEND_TITLE, loc="center left", bbox_to_anchor=(1.01, 0.5), frameon=False)


def _save(fig, path: Path, dpi: int) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    fig.tight_layout()
    fig.savefig(path, dpi=dpi, bbox_inches="tight")
    plt.close(fig)
    logger.info("Saved: %s", path)
    return path


def _years_or_skip(df: pd.DataFrame, artifact: str) -> pd.DataFrame:
    data = df[df[YEAR_COL].notna()].copy()
    if data.empty:
        raise RenderSkipped(artifact, "no fires with a year")
    data[YEAR_COL] = data[YEAR_COL].astype(int)
    return data


def _stacked_hist_legend(ax, palette: Dict[str, str], labels: Sequence[str]) -> None:
    handles = [plt.Rectangle((0, 0), 1, 1, facecolor=_colour(palette, lab), edgecolor="black", linewidth=0.2)
               for lab in label_order(labels)]
    ax.legend(handles, label_order(labels), title=LEGEND_TITLE,
              loc="center left", bbox_to_anchor=(1.01, 0.5), frameon=False)


# ----------------------
# Charts
# ----------------------

def render_timeline(df: pd.DataFrame, path: Path, palette: Dict[str, str], bounds: YearBounds,
                    figsize: Tuple[float, float] = (8, 6), dpi: int = 150) -> Path:
    """One point per fire: fire names on the category axis (ordered by year, then name), year on the value axis."""
    data = _years_or_skip(df, "timeline")
    data = data.sort_values([YEAR_COL, NAME_COL], kind="mergesort").reset_index(drop=True)
    positions = np.arange(len(data))

    fig, ax = plt.subplots(figsize=figsize)
    ax.scatter(
        data[YEAR_COL], positions,
        s=data["timeline_size"],
        c=[_colour(palette, lab) for lab in data[FOREST_LABEL_COL]],
        edgecolors="black", linewidths=0.5, zorder=3,
    )
    ax.set_yticks(positions)
    ax.set_yticklabels(data[NAME_COL].fillna("").astype(str), fontsize=7)
    ax.set_xticks(year_breaks(bounds))
    ax.set_xlim(bounds[0] - 1, bounds[1] + 1)
    ax.set_title("Fire Event Timeline")
    ax.set_xlabel("Year")
    ax.set_ylabel("Fire Name")
    ax.grid(True, alpha=0.3)
    _forest_legend(ax, data[FOREST_LABEL_COL].tolist(), palette)
    return _save(fig, Path(path), dpi)


def render_year_histogram(df: pd.DataFrame, path: Path, palette: Dict[str, str], bounds: YearBounds,
                          figsize: Tuple[float, float] = (8, 6), dpi: int = 150) -> Path:
    """Fire count per year (bin width 1), bars stacked by dominant forest type."""
    data = _years_or_skip(df, "hist_years")
    hue_order = label_order(data[FOREST_LABEL_COL].tolist())

    fig, ax = plt.subplots(figsize=figsize)
    sns.histplot(
        data=data, x=YEAR_COL, hue=FOREST_LABEL_COL, hue_order=hue_order,
        palette={lab: _colour(palette, lab) for lab in hue_order},
        multiple="stack", discrete=True, edgecolor="black", linewidth=0.2, alpha=0.9,
        legend=False, ax=ax,
    )
    ax.set_xticks(year_breaks(bounds))
    ax.set_title(f"Histogram: Fire Years, {bounds[0]} - {bounds[1]}")
    ax.set_xlabel("Year")
    ax.set_ylabel("Count")
    _stacked_hist_legend(ax, palette, hue_order)
    return _save(fig, Path(path), dpi)


def render_size_histogram(df: pd.DataFrame, path: Path, palette: Dict[str, str],
                          figsize: Tuple[float, float] = (8, 6), dpi: int = 150, bins: int = 30) -> Path:
    """Fire count by size in hectares, stacked by dominant forest type."""
    data = df[df["hectares"].notna()]
    if data.empty:
        raise RenderSkipped("hist_size", "no fires with an area")
    hue_order = label_order(data[FOREST_LABEL_COL].tolist())

    fig, ax = plt.subplots(figsize=figsize)
    sns.histplot(
        data=data, x="hectares", hue=FOREST_LABEL_COL, hue_order=hue_order,
        palette={lab: _colour(palette, lab) for lab in hue_order},
        multiple="stack", bins=bins, edgecolor="black", linewidth=0.2, alpha=0.9,
        legend=False, ax=ax,
    )
    ax.set_title("Histogram: Fire Size")
    ax.set_xlabel("Size [Hectares]")
    ax.set_ylabel("Count")
    ax.ticklabel_format(axis="x", style="plain")
    _stacked_hist_legend(ax, palette, hue_order)
    return _save(fig, Path(path), dpi)


# alternating label offsets (points) so neighbouring names overlap less
_LABEL_OFFSETS = [(8, 8), (8, -14), (-8, 8), (-8, -14)]


def render_size_vs_year(df: pd.DataFrame, path: Path, palette: Dict[str, str], bounds: YearBounds,
                        figsize: Tuple[float, float] = (8, 6), dpi: int = 150) -> Path:
    """Fire size (hectares, log2 axis) against year, each point labelled with the fire name."""
    data = df[df[YEAR_COL].notna() & (df["hectares"] > 0)].copy()
    if data.empty:
        raise RenderSkipped("size_vs_year", "no fires with both a year and a positive area")
    data[YEAR_COL] = data[YEAR_COL].astype(int)
    data = data.sort_values([YEAR_COL, "hectares"], kind="mergesort").reset_index(drop=True)

    fig, ax = plt.subplots(figsize=figsize)
    for lab in label_order(data[FOREST_LABEL_COL].tolist()):
        sub = data[data[FOREST_LABEL_COL] == lab]
        ax.scatter(sub[YEAR_COL], sub["hectares"], s=36, c=_colour(palette, lab),
                   edgecolors="black", linewidths=0.5, zorder=3, label=lab)
    for i, row in data.iterrows():
        dx, dy = _LABEL_OFFSETS[i % len(_LABEL_OFFSETS)]
        ha = "left" if dx > 0 else "right"
        ax.annotate(
            str(row[NAME_COL]), (row[YEAR_COL], row["hectares"]),
            xytext=(dx, dy), textcoords="offset points", ha=ha, fontsize=7,
            bbox=dict(boxstyle="round,pad=0.25", facecolor="white", edgecolor="grey", linewidth=0.5),
            arrowprops=dict(arrowstyle="-", color="grey", linewidth=0.5),
        )
    ax.set_yscale("log", base=2)
    ax.set_xticks(year_breaks(bounds))
    ax.set_title("Fire size vs year")
    ax.set_xlabel("Year")
    ax.set_ylabel("Hectares [log transformed]")
    ax.grid(True, alpha=0.3)
    _forest_legend(ax, data[FOREST_LABEL_COL].tolist(), palette, size=7)
    return _save(fig, Path(path), dpi)
