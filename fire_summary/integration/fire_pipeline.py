#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Fire perimeter summary pipeline.

  1. LOAD: read the perimeter file (one polygon per fire)
  2. NORMALIZE: ids/names to text, Acres truncated to integer, fractions -> percent (1 decimal)
  3. RESOLVE: dominant forest type per fire + count of fires per dominant type
  4. REPORT: sorted, relabelled summary table (console + HTML) and the count table (console + CSV)
  5. RENDER: timeline, year histogram, size histogram, size-vs-year scatter, interactive map

Outputs (in the output dir, created if absent)
  {label}-fire_summary_table.html
  {label}-dominant_forest_counts.csv
  {label}-fire_timeline.png, {label}-fire_hist_years.png, {label}-fire_hist_size.png,
  {label}-fire_size_vs_year_scatterplot.png
  {label}-fire_map.html (only with --map html / map.write_html)
  {label}-run_summary.json

CLI examples:
  fire-summary --dataset srockies_usfs
  fire-summary --input data/fire_stats_test.geojson --label test --width 10 --height 12 --map html
"""
from __future__ import annotations
import argparse
import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from fire_summary.config import DATASETS, get_config, load_config, resolve_input_path, resolve_label
from fire_summary.errors import DataSourceError, RenderSkipped
from fire_summary.fields import default_palette
from fire_summary.logging_setup import setup_logging
from fire_summary.preprocessing.load_fires import load_fire_perimeters
from fire_summary.preprocessing.normalize_fields import PARSE_ERRORS_ATTR, normalize_fire_fields
from fire_summary.preprocessing.dominant_forest import (
    attach_dominant_forest_type, dominant_type_counts, dominant_type_table,
)
from fire_summary.integration.report_table import build_report_table, format_console_table, write_report_html
from fire_summary.visualization import charts
from fire_summary.visualization.fire_map import MAP_FILE, build_fire_map, write_fire_map

logger = logging.getLogger("fire_summary.pipeline")


def _render(name: str, func: Callable[[], Any], written: Dict[str, str], skipped: Dict[str, str]) -> Any:
    """Run one renderer; a skipped or failed artifact is logged and the others still render."""
    try:
        result = func()
    except RenderSkipped as e:
        logger.warning("Skipping %s: %s", name, e.reason)
        skipped[name] = e.reason
        return None
    except (ValueError, TypeError, KeyError, OSError) as e:
        logger.warning("Skipping %s: rendering failed: %s", name, e)
        skipped[name] = f"rendering failed: {e}"
        return None
    if isinstance(result, Path):
        written[name] = result.as_posix()
    return result


def run_pipeline(cfg: Dict[str, Any]) -> Dict[str, Any]:
    """Run every step for one input file; returns the run summary (also written as JSON)."""
    input_path = resolve_input_path(cfg)
    label = resolve_label(cfg, input_path)
    out_dir = Path(cfg["output_dir"]).expanduser()
    out_dir.mkdir(parents=True, exist_ok=True)
    fig_cfg = cfg.get("figure", {})
    figsize = (float(fig_cfg.get("width", 8.0)), float(fig_cfg.get("height", 6.0)))
    dpi = int(fig_cfg.get("dpi", 150))
    map_cfg = cfg.get("map", {})
    palette = cfg.get("palette") or default_palette()

    # --- Load / normalize / resolve ---
    gdf = load_fire_perimeters(input_path)
    gdf = normalize_fire_fields(gdf)
    parse_errors = list(gdf.attrs.get(PARSE_ERRORS_ATTR, []))
    gdf = attach_dominant_forest_type(gdf, require_complete=bool(cfg.get("require_complete_forest", False)))

    # --- Tables ---
    written: Dict[str, str] = {}
    skipped: Dict[str, str] = {}

    table = build_report_table(gdf)
    print(format_console_table(table))
    written["summary_table"] = write_report_html(table, out_dir / f"{label}-fire_summary_table.html").as_posix()

    counts = dominant_type_counts(gdf)
    count_table = dominant_type_table(counts)
    print()
    print(format_console_table(count_table))
    counts_path = out_dir / f"{label}-dominant_forest_counts.csv"
    count_table.to_csv(counts_path, index=False)
    logger.info("Saved dominant type counts: %s", counts_path)
    written["dominant_counts"] = counts_path.as_posix()

    # --- Charts (shared year bounds and palette passed explicitly) ---
    frame = charts.chart_frame(gdf)
    bounds = charts.year_bounds(frame)
    if bounds is None:
        for name in ("timeline", "hist_years", "size_vs_year"):
            logger.warning("Skipping %s: no fires with a year", name)
            skipped[name] = "no fires with a year"
    else:
        _render("timeline", lambda: charts.render_timeline(
            frame, charts.chart_path(out_dir, label, "timeline"), palette, bounds, figsize, dpi), written, skipped)
        _render("hist_years", lambda: charts.render_year_histogram(
            frame, charts.chart_path(out_dir, label, "hist_years"), palette, bounds, figsize, dpi), written, skipped)
    _render("hist_size", lambda: charts.render_size_histogram(
        frame, charts.chart_path(out_dir, label, "hist_size"), palette, figsize, dpi), written, skipped)
    if bounds is not None:
        _render("size_vs_year", lambda: charts.render_size_vs_year(
            frame, charts.chart_path(out_dir, label, "size_vs_year"), palette, bounds, figsize, dpi),
            written, skipped)

    # --- Map ---
    deck = None
    if map_cfg.get("enabled", True):
        deck = _render("map", lambda: build_fire_map(gdf, bounds), written, skipped)
        if deck is not None and map_cfg.get("write_html", False):
            _render("map_html", lambda: write_fire_map(deck, out_dir / MAP_FILE.format(label=label)),
                    written, skipped)

    summary = {
        "input": input_path.as_posix(),
        "label": label,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "records": int(len(gdf)),
        "resolved_dominant_type": int(counts.sum()),
        "dominant_type_counts": {str(k): int(v) for k, v in counts.items()},
        "year_bounds": list(bounds) if bounds else None,
        "parse_errors": parse_errors,
        "artifacts": written,
        "skipped": skipped,
    }
    summary_path = out_dir / f"{label}-run_summary.json"
    summary_path.write_text(json.dumps(summary, indent=2), encoding="utf-8")
    logger.info("Run summary: %s", summary_path)
    summary["deck"] = deck
    return summary


def build_arg_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Summarise forest composition of fire perimeters and plot them")
    ap.add_argument("--config", type=Path, default=None, help="YAML config file (default: ./config.yaml)")
    ap.add_argument("--input", type=Path, default=None, help="Perimeter file; overrides --dataset")
    ap.add_argument("--dataset", choices=sorted(DATASETS), default=None, help="Named dataset variant")
    ap.add_argument("--label", default=None, help="Prefix for output file names (default: input file stem)")
    ap.add_argument("--output-dir", type=Path, default=None, help="Directory for figures and tables")
    ap.add_argument("--width", type=float, default=None, help="Figure width (inches)")
    ap.add_argument("--height", type=float, default=None, help="Figure height (inches)")
    ap.add_argument("--map", choices=["off", "on", "html"], default=None,
                    help="Interactive map: off, build only, or also write HTML")
    ap.add_argument("--require-complete", action="store_true",
                    help="Leave dominant type undefined unless all three forest percentages are present")
    ap.add_argument("--log-level", default=None, help="Logging level (DEBUG, INFO, ...)")
    ap.add_argument("--log-file", type=Path, default=None, help="Also write the log to this file")
    return ap


def apply_cli_overrides(cfg: Dict[str, Any], args: argparse.Namespace) -> Dict[str, Any]:
    cfg = dict(cfg)
    cfg["figure"] = dict(cfg.get("figure", {}))
    cfg["map"] = dict(cfg.get("map", {}))
    cfg["log"] = dict(cfg.get("log", {}))
    if args.input is not None:
        cfg["input_path"] = str(args.input)
    if args.dataset is not None:
        cfg["dataset"] = args.dataset
        if args.input is None:
            cfg["input_path"] = None
    if args.label is not None:
        cfg["label"] = args.label
    if args.output_dir is not None:
        cfg["output_dir"] = str(args.output_dir)
    if args.width is not None:
        cfg["figure"]["width"] = args.width
    if args.height is not None:
        cfg["figure"]["height"] = args.height
    if args.map is not None:
        cfg["map"]["enabled"] = args.map != "off"
        cfg["map"]["write_html"] = args.map == "html"
    if args.require_complete:
        cfg["require_complete_forest"] = True
    if args.log_level is not None:
        cfg["log"]["level"] = args.log_level
    if args.log_file is not None:
        cfg["log"]["file"] = str(args.log_file)
    return cfg


def main(argv: Optional[List[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)
    cfg = load_config(args.config) if args.config else get_config()
    cfg = apply_cli_overrides(cfg, args)
    setup_logging(level=cfg["log"].get("level", "INFO"), fmt=cfg["log"].get("format"),
                  log_file=cfg["log"].get("file"))
    try:
        summary = run_pipeline(cfg)
    except DataSourceError as e:
        logger.error("%s", e)
        return 1
    except KeyError as e:
        logger.error("Configuration error: %s", e)
        return 1
    logger.info("Done: %d records, %d artifacts written, %d skipped",
                summary["records"], len(summary["artifacts"]), len(summary["skipped"]))
    return 0


if __name__ == "__main__":
    sys.exit(main())
