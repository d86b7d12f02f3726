#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Interactive map of fire perimeters (pydeck).

Layers
 - GeoJsonLayer: one polygon per fire, filled on a continuous colour scale over year
 - ScatterplotLayer: centroid marker per fire
 - TextLayer: "<name> (<year>)" label at each centroid

The deck is returned to the caller; writing it to HTML is optional.
"""
from __future__ import annotations
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd
import geopandas as gpd
import pydeck as pdk
from matplotlib import colormaps
from matplotlib.colors import Normalize
from shapely.geometry import mapping

from fire_summary.errors import RenderSkipped
from fire_summary.fields import ID_COL, NAME_COL, YEAR_COL

logger = logging.getLogger(__name__)

MAP_FILE = "{label}-fire_map.html"
YEAR_CMAP = "viridis"
MISSING_YEAR_RGBA = [128, 128, 128, 160]


def year_colors(years, bounds: Tuple[int, int], cmap: str = YEAR_CMAP, alpha: int = 160) -> List[List[int]]:
    """RGBA (0-255) per year on a continuous scale from bounds[0] to bounds[1]."""
    lo, hi = bounds
    norm = Normalize(vmin=lo, vmax=hi if hi > lo else lo + 1)
    cm = colormaps[cmap]
    out = []
    for y in years:
        if y is None or pd.isna(y):
            out.append(list(MISSING_YEAR_RGBA))
            continue
        r, g, b, _ = cm(norm(float(y)))
        out.append([int(round(r * 255)), int(round(g * 255)), int(round(b * 255)), alpha])
    return out


def _label(name: Any, year: Any) -> str:
    name = "" if name is None or pd.isna(name) else str(name)
    if year is None or pd.isna(year):
        return name
    return f"{name} ({int(year)})"


def fire_centroids(gdf: gpd.GeoDataFrame) -> pd.DataFrame:
    """Centroid (lon/lat, WGS84) of each non-empty perimeter, with its label."""
    valid = gdf[gdf.geometry.notna() & ~gdf.geometry.is_empty]
    geoms = valid.geometry if valid.crs is not None else valid.geometry.set_crs("EPSG:4326")
    # centroids in a projected CRS, then back to WGS84
    cents = geoms.to_crs("EPSG:3857").centroid.to_crs("EPSG:4326")
    return pd.DataFrame({
        ID_COL: valid[ID_COL].astype(str).to_numpy(),
        "longitude": cents.x.to_numpy(),
        "latitude": cents.y.to_numpy(),
        "label": [_label(n, y) for n, y in zip(valid[NAME_COL], valid[YEAR_COL])],
    })


def _features(gdf: gpd.GeoDataFrame, colors: List[List[int]]) -> List[Dict[str, Any]]:
    feats = []
    for geom, fid, name, year, color in zip(gdf.geometry, gdf[ID_COL], gdf[NAME_COL], gdf[YEAR_COL], colors):
        if geom is None or geom.is_empty:
            continue
        feats.append({
            "type": "Feature",
            "geometry": mapping(geom),
            "properties": {
                "id": str(fid),
                "label": _label(name, year),
                "fill_color": color,
            },
        })
    return feats


def build_fire_map(gdf: gpd.GeoDataFrame, bounds: Optional[Tuple[int, int]], zoom: float = 6) -> pdk.Deck:
    """Deck with perimeters coloured by year and labelled centroid markers."""
    has_geom = gdf.geometry.notna() & ~gdf.geometry.is_empty
    if gdf.empty or not has_geom.any():
        raise RenderSkipped("map", "no fire perimeters to draw")
    gdf = gdf[has_geom]
    if gdf.crs is not None and gdf.crs.to_epsg() != 4326:
        gdf = gdf.to_crs("EPSG:4326")
    bounds = bounds or (0, 1)

    colors = year_colors(gdf[YEAR_COL], bounds)
    geojson = {"type": "FeatureCollection", "features": _features(gdf, colors)}
    centroids = fire_centroids(gdf)

    perimeter_layer = pdk.Layer(
        "GeoJsonLayer",
        geojson,
        pickable=True,
        stroked=True,
        filled=True,
        get_fill_color="properties.fill_color",
        get_line_color=[0, 0, 0, 200],
        line_width_min_pixels=1,
    )
    marker_layer = pdk.Layer(
        "ScatterplotLayer",
        centroids,
        get_position=["longitude", "latitude"],
        get_fill_color=[255, 255, 255, 230],
        get_line_color=[0, 0, 0, 255],
        stroked=True,
        filled=True,
        get_radius=400,
        radius_min_pixels=3,
        radius_max_pixels=8,
        pickable=True,
    )
    label_layer = pdk.Layer(
        "TextLayer",
        centroids,
        get_position=["longitude", "latitude"],
        get_text="label",
        get_size=12,
        get_color=[0, 0, 0, 255],
        get_pixel_offset=[0, -14],
        get_alignment_baseline="'bottom'",
    )

    minx, miny, maxx, maxy = gdf.total_bounds
    view_state = pdk.ViewState(
        latitude=float((miny + maxy) / 2),
        longitude=float((minx + maxx) / 2),
        zoom=zoom,
        pitch=0,
    )
    return pdk.Deck(
        layers=[perimeter_layer, marker_layer, label_layer],
        initial_view_state=view_state,
        tooltip={"text": "{label}"},
        map_provider="carto",
        map_style="light",
    )


def write_fire_map(deck: pdk.Deck, path: Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    deck.to_html(str(path), open_browser=False, notebook_display=False)
    logger.info("Saved map: %s", path)
    return path
