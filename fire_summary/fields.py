"""Attribute names, display labels and palette shared across the pipeline."""
from __future__ import annotations
from typing import Dict, List

ID_COL = "id"
NAME_COL = "Fire_Name"
YEAR_COL = "Year"
ACRES_COL = "Acres"
DOMINANT_COL = "dominant_forest_type"

# Canonical order; also the argmax tie-break order
FOREST_TYPES: List[str] = ["lodgepole", "ponderosa", "spruceFir"]

DISTURBANCE_FIELDS: List[str] = [
    "disturbed_burned",
    "disturbed_unspecific",
    "disturbed_logged",
    "regenerating_disturbed",
    "regenerating_harvested",
]

GEDI_COL = "gedi_coverage"

# Stored as fractions in [0, 1]; reported as percentages
PERCENT_FIELDS: List[str] = [GEDI_COL] + FOREST_TYPES + DISTURBANCE_FIELDS

REQUIRED_COLUMNS: List[str] = [ID_COL, NAME_COL, YEAR_COL, ACRES_COL] + FOREST_TYPES

COLUMN_LABELS: Dict[str, str] = {
    NAME_COL: "Fire Name",
    YEAR_COL: "Year",
    ACRES_COL: "Acres",
    GEDI_COL: "GEDI Coverage %",
    "lodgepole": "Lodgepole %",
    "ponderosa": "Ponderosa %",
    "spruceFir": "Spruce Fir %",
    "disturbed_burned": "Disturbed Burned %",
    "disturbed_unspecific": "Disturbed Unspecified %",
    "disturbed_logged": "Disturbed Logged %",
    "regenerating_disturbed": "Regenerating Disturbed %",
    "regenerating_harvested": "Regenerating Harvested %",
}

ACRES_TO_HECTARES = 0.404686

UNRESOLVED = "unresolved"

FOREST_TYPE_COLORS: Dict[str, str] = {
    "lodgepole": "#005a32",
    "ponderosa": "#74c476",
    "spruceFir": "#e5f5e0",
}
UNRESOLVED_COLOR = "#bdbdbd"


def default_palette() -> Dict[str, str]:
    """Forest type → fill colour, with the colour used for fires without a dominant type."""
    palette = dict(FOREST_TYPE_COLORS)
    palette[UNRESOLVED] = UNRESOLVED_COLOR
    return palette
