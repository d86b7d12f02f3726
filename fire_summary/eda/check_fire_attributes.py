"""Quick attribute check of a raw fire perimeter file before running the pipeline.

Reports, per expected attribute: present or not, missing count, unparseable count,
and for percentage fields the number of values outside [0, 1].
"""
from __future__ import annotations
import argparse
import json
from pathlib import Path

import pandas as pd
import geopandas as gpd

from fire_summary.fields import ACRES_COL, ID_COL, NAME_COL, PERCENT_FIELDS, YEAR_COL
from fire_summary.preprocessing.load_fires import load_fire_perimeters

NUMERIC_FIELDS = [YEAR_COL, ACRES_COL] + PERCENT_FIELDS


def attribute_coverage(gdf: gpd.GeoDataFrame) -> pd.DataFrame:
    rows = []
    for col in [ID_COL, NAME_COL] + NUMERIC_FIELDS:
        if col not in gdf.columns:
            rows.append({"attribute": col, "present": False, "missing": None, "unparseable": None, "out_of_range": None})
            continue
        raw = gdf[col]
        as_text = raw.astype(str).str.strip()
        missing = raw.isna() | as_text.eq("")
        row = {"attribute": col, "present": True, "missing": int(missing.sum()), "unparseable": None, "out_of_range": None}
        if col in NUMERIC_FIELDS:
            num = pd.to_numeric(raw, errors="coerce")
            row["unparseable"] = int((num.isna() & ~missing).sum())
            if col in PERCENT_FIELDS:
                row["out_of_range"] = int((~num.between(0, 1) & num.notna()).sum())
        rows.append(row)
    return pd.DataFrame(rows)


def main(argv=None):
    ap = argparse.ArgumentParser(description="Check attribute coverage of a fire perimeter file")
    ap.add_argument("path", type=Path, help="Perimeter file (GeoJSON, GPKG, SHP)")
    args = ap.parse_args(argv)
    gdf = load_fire_perimeters(args.path)
    print('Rows:', len(gdf), 'Cols:', len(gdf.columns))
    report = attribute_coverage(gdf)
    print(report.to_string(index=False))
    years = pd.to_numeric(gdf[YEAR_COL], errors="coerce").dropna()
    print('Integrity:', json.dumps({
        "year_min": int(years.min()) if not years.empty else None,
        "year_max": int(years.max()) if not years.empty else None,
        "empty_geometries": int((gdf.geometry.isna() | gdf.geometry.is_empty).sum()),
    }))


if __name__ == "__main__":
    main()
