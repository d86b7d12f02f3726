#!/usr/bin/env python3
"""Load the fire perimeter summary (one polygon per fire) into a GeoDataFrame.

The input comes from the remote-sensing pipeline that attaches forest-type and
disturbance fractions to MTBS perimeters; any vector format readable by
geopandas works (GeoJSON in practice).
"""
from __future__ import annotations
import logging
from pathlib import Path

import geopandas as gpd

from fire_summary.errors import DataSourceError
from fire_summary.fields import ID_COL, NAME_COL, REQUIRED_COLUMNS

logger = logging.getLogger(__name__)


def load_fire_perimeters(path: Path | str) -> gpd.GeoDataFrame:
    """Read fire perimeters, check required attributes, return them in file order (EPSG:4326)."""
    path = Path(path)
    if not path.exists():
        raise DataSourceError(f"Fire perimeter file not found: {path}", path=path)
    if not path.is_file():
        raise DataSourceError(f"Fire perimeter path is not a file: {path}", path=path)
    try:
        gdf = gpd.read_file(path)
    except Exception as e:
        raise DataSourceError(f"Could not read fire perimeter file {path}: {e}", path=path) from e

    missing = [c for c in REQUIRED_COLUMNS if c not in gdf.columns]
    if missing:
        raise DataSourceError(
            f"{path} is missing required column(s): {', '.join(missing)}",
            path=path,
            column=missing[0],
        )

    dup_ids = gdf[ID_COL].astype(str)
    dup_ids = dup_ids[dup_ids.duplicated()].unique().tolist()
    if dup_ids:
        raise DataSourceError(f"{path} has duplicate id values: {dup_ids[:10]}", path=path, column=ID_COL)

    # Names are labels only; the dominant type is resolved per record
    dup_names = gdf[NAME_COL][gdf[NAME_COL].duplicated()].unique().tolist()
    if dup_names:
        logger.warning("Fire names are not unique in %s: %s", path.name, dup_names[:10])

    # Ensure CRS is WGS84 for the map layers
    if gdf.crs is None:
        gdf = gdf.set_crs("EPSG:4326")
    elif gdf.crs.to_epsg() != 4326:
        gdf = gdf.to_crs("EPSG:4326")

    gdf = gdf.reset_index(drop=True)
    logger.info("Loaded %d fire perimeters from %s", len(gdf), path)
    return gdf
