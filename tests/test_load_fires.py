from pathlib import Path

import pytest

from fire_summary.errors import DataSourceError
from fire_summary.preprocessing.load_fires import load_fire_perimeters

from conftest import make_fires


def test_load_preserves_file_order_and_geometry(fires_path):
    gdf = load_fire_perimeters(fires_path)
    assert gdf["Fire_Name"].tolist() == ["Hayman", "High Park", "Cameron Peak", "East Troublesome", "Beaver Creek"]
    assert gdf.crs.to_epsg() == 4326
    assert gdf.geometry.notna().all()


def test_missing_file_raises(tmp_path):
    missing = tmp_path / "nope.geojson"
    with pytest.raises(DataSourceError) as exc:
        load_fire_perimeters(missing)
    assert "nope.geojson" in str(exc.value)


def test_malformed_file_raises(tmp_path):
    bad = tmp_path / "broken.geojson"
    bad.write_text("{ this is not geojson", encoding="utf-8")
    with pytest.raises(DataSourceError):
        load_fire_perimeters(bad)


def test_missing_required_column_names_it(tmp_path):
    gdf = make_fires().drop(columns=["spruceFir"])
    path = tmp_path / "no_spruce.geojson"
    gdf.to_file(path, driver="GeoJSON")
    with pytest.raises(DataSourceError) as exc:
        load_fire_perimeters(path)
    assert exc.value.column == "spruceFir"
    assert "spruceFir" in str(exc.value)


def test_duplicate_ids_raise(tmp_path):
    gdf = make_fires()
    gdf.loc[1, "id"] = 1
    path = tmp_path / "dup.geojson"
    gdf.to_file(path, driver="GeoJSON")
    with pytest.raises(DataSourceError) as exc:
        load_fire_perimeters(path)
    assert exc.value.column == "id"


def test_duplicate_names_only_warn(tmp_path, caplog):
    gdf = make_fires()
    gdf.loc[1, "Fire_Name"] = "Hayman"
    path = tmp_path / "dup_names.geojson"
    gdf.to_file(path, driver="GeoJSON")
    loaded = load_fire_perimeters(path)
    assert len(loaded) == 5
    assert "not unique" in caplog.text


def test_reprojects_to_wgs84(tmp_path):
    gdf = make_fires().to_crs("EPSG:3857")
    path = tmp_path / "mercator.gpkg"
    gdf.to_file(path, driver="GPKG")
    loaded = load_fire_perimeters(Path(path))
    assert loaded.crs.to_epsg() == 4326
    minx, miny, maxx, maxy = loaded.total_bounds
    assert -107 < minx < maxx < -104
    assert 38 < miny < maxy < 40
