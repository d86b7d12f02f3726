import json
from pathlib import Path

import numpy as np

from fire_summary.integration.fire_pipeline import apply_cli_overrides, build_arg_parser, main, run_pipeline

from conftest import make_fires

EXPECTED = [
    "test-fire_summary_table.html",
    "test-dominant_forest_counts.csv",
    "test-fire_timeline.png",
    "test-fire_hist_years.png",
    "test-fire_hist_size.png",
    "test-fire_size_vs_year_scatterplot.png",
    "test-fire_map.html",
    "test-run_summary.json",
]


def test_run_pipeline_writes_all_artifacts(pipeline_cfg, capsys):
    summary = run_pipeline(pipeline_cfg)
    out_dir = Path(pipeline_cfg["output_dir"])
    for name in EXPECTED:
        assert (out_dir / name).exists(), name
    assert summary["records"] == 5
    assert summary["resolved_dominant_type"] == 4
    assert summary["dominant_type_counts"] == {"lodgepole": 3, "ponderosa": 1}
    assert summary["skipped"] == {}
    assert summary["deck"] is not None

    printed = capsys.readouterr().out
    assert "Fire Name" in printed
    assert "Dominant forest type" in printed

    on_disk = json.loads((out_dir / "test-run_summary.json").read_text(encoding="utf-8"))
    assert on_disk["year_bounds"] == [2002, 2020]
    assert "deck" not in on_disk


def test_count_csv_contents(pipeline_cfg):
    run_pipeline(pipeline_cfg)
    text = (Path(pipeline_cfg["output_dir"]) / "test-dominant_forest_counts.csv").read_text(encoding="utf-8")
    assert text.splitlines() == ["Dominant forest type,Fires", "lodgepole,3", "ponderosa,1"]


def test_chart_without_areas_is_skipped_others_still_render(tmp_path, pipeline_cfg):
    gdf = make_fires()
    gdf["Acres"] = np.nan
    path = tmp_path / "no_area.geojson"
    gdf.to_file(path, driver="GeoJSON")
    cfg = dict(pipeline_cfg, input_path=str(path), label="noarea")
    summary = run_pipeline(cfg)
    assert set(summary["skipped"]) == {"hist_size", "size_vs_year"}
    out_dir = Path(cfg["output_dir"])
    assert (out_dir / "noarea-fire_timeline.png").exists()
    assert (out_dir / "noarea-fire_hist_years.png").exists()
    assert not (out_dir / "noarea-fire_hist_size.png").exists()


def test_parse_errors_reported(tmp_path, pipeline_cfg):
    gdf = make_fires()
    gdf["ponderosa"] = gdf["ponderosa"].map(lambda v: "" if np.isnan(v) else str(v))
    gdf.loc[2, "ponderosa"] = "cloud"
    path = tmp_path / "text_fields.geojson"
    gdf.to_file(path, driver="GeoJSON")
    summary = run_pipeline(dict(pipeline_cfg, input_path=str(path), label="text"))
    assert summary["records"] == 5
    assert [(e["column"], e["record_id"]) for e in summary["parse_errors"]] == [("ponderosa", "3")]
    assert summary["dominant_type_counts"] == {"lodgepole": 3, "ponderosa": 1}


def test_main_missing_input_exits_with_error(tmp_path):
    code = main(["--input", str(tmp_path / "missing.geojson"), "--output-dir", str(tmp_path / "out"),
                 "--map", "off", "--config", str(tmp_path / "none.yaml")])
    assert code == 1


def test_main_success(fires_path, tmp_path):
    out = tmp_path / "cli"
    code = main(["--input", str(fires_path), "--output-dir", str(out), "--label", "cli",
                 "--width", "5", "--height", "4", "--map", "on", "--config", str(tmp_path / "none.yaml")])
    assert code == 0
    assert (out / "cli-fire_timeline.png").exists()
    assert not (out / "cli-fire_map.html").exists()


def test_cli_overrides():
    args = build_arg_parser().parse_args(["--dataset", "test", "--width", "10", "--map", "html"])
    cfg = apply_cli_overrides({"dataset": "srockies", "input_path": "x.geojson", "figure": {"width": 8}}, args)
    assert cfg["dataset"] == "test"
    assert cfg["input_path"] is None
    assert cfg["figure"]["width"] == 10
    assert cfg["map"] == {"enabled": True, "write_html": True}
