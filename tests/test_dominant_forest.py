import itertools
import math

import numpy as np
import pandas as pd
import pytest

from fire_summary.fields import DOMINANT_COL, FOREST_TYPES
from fire_summary.preprocessing.dominant_forest import (
    attach_dominant_forest_type, dominant_forest_type, dominant_type_counts, dominant_type_table,
)
from fire_summary.preprocessing.normalize_fields import normalize_fire_fields

from conftest import make_fires

nan = np.nan


def test_example_record_resolves_to_lodgepole():
    assert dominant_forest_type({"lodgepole": 62.3, "ponderosa": 20.1, "spruceFir": 5.0}) == "lodgepole"


@pytest.mark.parametrize("values, expected", [
    ((30.0, 30.0, 10.0), "lodgepole"),
    ((10.0, 40.0, 40.0), "ponderosa"),
    ((25.0, 25.0, 25.0), "lodgepole"),
    ((0.0, 0.0, 0.0), "lodgepole"),
    ((1.0, 2.0, 3.0), "spruceFir"),
])
def test_ties_go_to_canonical_order(values, expected):
    assert dominant_forest_type(dict(zip(FOREST_TYPES, values))) == expected


def test_missing_value_never_competes():
    pct = {"lodgepole": nan, "ponderosa": 20.0, "spruceFir": 30.0}
    assert dominant_forest_type(pct) == "spruceFir"
    pct = {"lodgepole": None, "ponderosa": 0.0, "spruceFir": 0.0}
    assert dominant_forest_type(pct) == "ponderosa"


def test_require_complete_leaves_partial_records_undefined():
    pct = {"lodgepole": nan, "ponderosa": 20.0, "spruceFir": 30.0}
    assert dominant_forest_type(pct, require_complete=True) is None
    full = {"lodgepole": 1.0, "ponderosa": 20.0, "spruceFir": 30.0}
    assert dominant_forest_type(full, require_complete=True) == "spruceFir"


def test_all_missing_is_undefined():
    assert dominant_forest_type({"lodgepole": nan, "ponderosa": None, "spruceFir": pd.NA}) is None
    assert dominant_forest_type({}) is None


def test_argmax_matches_first_maximum_over_value_grid():
    grid = [nan, 0.0, 5.0, 20.1, 62.3]
    for values in itertools.product(grid, repeat=3):
        got = dominant_forest_type(dict(zip(FOREST_TYPES, values)))
        defined = [(v, i) for i, v in enumerate(values) if not math.isnan(v)]
        if not defined:
            assert got is None
            continue
        top = max(v for v, _ in defined)
        first = min(i for v, i in defined if v == top)
        assert got == FOREST_TYPES[first]


def test_attach_dominant_forest_type(fires_gdf):
    out = attach_dominant_forest_type(normalize_fire_fields(fires_gdf))
    assert out[DOMINANT_COL].tolist()[:4] == ["ponderosa", "lodgepole", "lodgepole", "lodgepole"]
    assert pd.isna(out[DOMINANT_COL].iloc[4])
    assert DOMINANT_COL not in fires_gdf.columns


def test_counts_sum_to_resolved_records(fires_gdf):
    out = attach_dominant_forest_type(normalize_fire_fields(fires_gdf))
    counts = dominant_type_counts(out)
    assert counts.to_dict() == {"lodgepole": 3, "ponderosa": 1}
    assert counts.sum() == out[DOMINANT_COL].notna().sum()


def test_counts_with_single_type():
    rows = [
        (10, "A", 2001, 10.0, 0.1, 0.7, 0.2, 0.0),
        (11, "B", 2002, 20.0, 0.2, 0.5, 0.3, 0.0),
        (12, "C", 2003, 30.0, 0.0, 0.9, 0.1, 0.0),
    ]
    out = attach_dominant_forest_type(normalize_fire_fields(make_fires(rows)))
    counts = dominant_type_counts(out)
    assert counts.to_dict() == {"ponderosa": 3}
    table = dominant_type_table(counts)
    assert table.columns.tolist() == ["Dominant forest type", "Fires"]
    assert table.iloc[0].tolist() == ["ponderosa", 3]
