"""Shared fixtures: a handful of Southern Rockies-style fire perimeters built in memory."""
from __future__ import annotations
from pathlib import Path

import numpy as np
import geopandas as gpd
import pytest
from shapely.geometry import box

from fire_summary.config import DEFAULTS

nan = np.nan

# id, name, year, acres, lodgepole, ponderosa, spruceFir, disturbed_burned
FIRE_ROWS = [
    (1, "Hayman", 2002, 137760.9, 0.05, 0.623, 0.201, 0.10),
    (2, "High Park", 2012, 87284.0, 0.623, 0.201, 0.05, 0.30),
    (3, "Cameron Peak", 2020, 208913.0, 0.41, 0.12, 0.35, 0.0),
    (4, "East Troublesome", 2020, 193812.0, 0.30, 0.30, 0.30, 0.05),
    (5, "Beaver Creek", 2016, 38380.0, nan, nan, nan, nan),
]


def make_fires(rows=FIRE_ROWS, crs: str = "EPSG:4326") -> gpd.GeoDataFrame:
    geoms = [box(-106.0 + i * 0.2, 39.0 + i * 0.1, -105.9 + i * 0.2, 39.08 + i * 0.1) for i in range(len(rows))]
    return gpd.GeoDataFrame(
        {
            "id": [r[0] for r in rows],
            "Fire_Name": [r[1] for r in rows],
            "Year": [r[2] for r in rows],
            "Acres": [r[3] for r in rows],
            "lodgepole": [r[4] for r in rows],
            "ponderosa": [r[5] for r in rows],
            "spruceFir": [r[6] for r in rows],
            "disturbed_burned": [r[7] for r in rows],
        },
        geometry=geoms,
        crs=crs,
    )


@pytest.fixture
def fires_gdf() -> gpd.GeoDataFrame:
    return make_fires()


@pytest.fixture
def fires_path(tmp_path: Path, fires_gdf: gpd.GeoDataFrame) -> Path:
    path = tmp_path / "fires_sRockiesEcoregion.geojson"
    fires_gdf.to_file(path, driver="GeoJSON")
    return path


@pytest.fixture
def pipeline_cfg(tmp_path: Path, fires_path: Path) -> dict:
    cfg = dict(DEFAULTS)
    cfg["input_path"] = str(fires_path)
    cfg["output_dir"] = str(tmp_path / "figures")
    cfg["label"] = "test"
    cfg["figure"] = {"width": 6.0, "height": 4.0, "dpi": 60}
    cfg["map"] = {"enabled": True, "write_html": True}
    return cfg
