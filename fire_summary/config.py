"""Configuration loader for the fire summary pipeline.
Reads config.yaml if present else falls back to defaults.
"""
from __future__ import annotations
import os
import yaml
from pathlib import Path
from typing import Any, Dict

# Dataset variants of the MTBS perimeter summaries, keyed by short name
DATASETS: Dict[str, str] = {
    # MTBS fires on USFS land, 200km from NIWO, within NEON domain 13
    "test": "data/fire_stats_test.geojson",
    # MTBS fires on USFS land, within the Southern Rockies EPA Level III ecoregion
    "srockies_usfs": "data/fires_sRockiesEcoregion_USFS.geojson",
    # MTBS fires within the Southern Rockies EPA Level III ecoregion
    "srockies": "data/fires_sRockiesEcoregion.geojson",
}

DEFAULTS: Dict[str, Any] = {
    "base_path": ".",
    "dataset": "srockies",
    "datasets": DATASETS,
    "input_path": None,
    "label": None,
    "output_dir": "figures",
    "figure": {"width": 8.0, "height": 6.0, "dpi": 150},
    "map": {"enabled": True, "write_html": False},
    "log": {"level": "INFO", "format": None, "file": None},
}

CONFIG_ENV = "FIRE_SUMMARY_CONFIG"


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    # one level deep so partial `figure:` / `map:` / `log:` blocks keep their defaults
    merged = dict(base)
    for key, val in override.items():
        if isinstance(val, dict) and isinstance(base.get(key), dict):
            merged[key] = {**base[key], **val}
        else:
            merged[key] = val
    return merged


def load_config(conf_path: Path | None = None) -> Dict[str, Any]:
    if conf_path is None:
        env_path = os.environ.get(CONFIG_ENV)
        conf_path = Path(env_path) if env_path else Path.cwd() / "config.yaml"
    if conf_path.exists():
        with open(conf_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    else:
        data = {}
    return _merge(DEFAULTS, data)

# Convenience accessors
_cfg_cache: Dict[str, Any] | None = None

def get_config() -> Dict[str, Any]:
    global _cfg_cache
    if _cfg_cache is None:
        _cfg_cache = load_config()
    return _cfg_cache

def reset_config() -> None:
    global _cfg_cache
    _cfg_cache = None

def get_base(cfg: Dict[str, Any] | None = None) -> Path:
    cfg = cfg or get_config()
    base = Path(cfg["base_path"]).expanduser().resolve()
    if not base.exists():
        # Fallback to current working directory when the configured base is not present
        return Path.cwd().resolve()
    return base


def resolve_input_path(cfg: Dict[str, Any]) -> Path:
    """Input file: explicit ``input_path`` wins, else the selected dataset variant."""
    if cfg.get("input_path"):
        path = Path(cfg["input_path"]).expanduser()
    else:
        name = cfg["dataset"]
        datasets = cfg.get("datasets") or DATASETS
        if name not in datasets:
            raise KeyError(f"Unknown dataset '{name}'. Choose one of: {', '.join(sorted(datasets))}")
        path = Path(datasets[name])
    if not path.is_absolute():
        path = get_base(cfg) / path
    return path


def resolve_label(cfg: Dict[str, Any], input_path: Path) -> str:
    """Artifact filename prefix; defaults to the input file stem."""
    return cfg.get("label") or input_path.stem
