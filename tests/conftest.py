# -*- coding: utf-8 -*-
"""Pytest configuration and fixtures.

This module provides a small synthetic site: a cable length table, a label
layer with inverter and table tags, and a table outline layer. The
``site_dir`` fixture writes the three sources to a temporary directory.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import pytest

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)


# =============================================================================
# Builders
# =============================================================================


def point_feature(
    lng: float, lat: float, **properties: Any
) -> dict[str, Any]:
    """Build a plain GeoJSON Point feature mapping."""
    return {
        "type": "Feature",
        "geometry": {"type": "Point", "coordinates": [lng, lat]},
        "properties": properties,
    }


def line_feature(coords: list[list[float]], **properties: Any) -> dict[str, Any]:
    """Build a plain GeoJSON LineString feature mapping."""
    return {
        "type": "Feature",
        "geometry": {"type": "LineString", "coordinates": coords},
        "properties": properties,
    }


def feature_collection(*features: dict[str, Any]) -> dict[str, Any]:
    return {"type": "FeatureCollection", "features": list(features)}


# =============================================================================
# Site Data
# =============================================================================

#: Table outline around (10.0001 .. 10.0003, 45.0001 .. 45.0002), left open
TABLE_OUTLINE = [
    [10.0001, 45.0001],
    [10.0003, 45.0001],
    [10.0003, 45.0002],
    [10.0001, 45.0002],
]

LENGTHS_CSV = "id,length\nINV 01,10\nINV02,2.4\nINV 03,1.5\n"


@pytest.fixture
def lengths_csv() -> str:
    """Return a comma-delimited cable length table."""
    return LENGTHS_CSV


@pytest.fixture
def label_collection() -> dict[str, Any]:
    """Return a label layer mixing inverters, table labels and noise."""
    return feature_collection(
        point_feature(10.0, 45.0, text="INV 01"),
        point_feature(10.0005, 45.0, name="INV 02", text="ignored"),
        point_feature(10.0002, 45.00015, text="INV01-STR1"),
        point_feature(10.001, 45.001, text="INV01-STR2"),
        point_feature(10.0002, 45.00012, text="INV01-STR3"),
        point_feature(10.0004, 45.0004),
        line_feature([[10.0, 45.0], [10.1, 45.1]], text="INV 99"),
    )


@pytest.fixture
def table_collection() -> dict[str, Any]:
    """Return a table layer with a line outline, a polygon and a degenerate line."""
    return feature_collection(
        line_feature(TABLE_OUTLINE, layer="panels", name="T1"),
        {
            "type": "Feature",
            "geometry": {
                "type": "Polygon",
                "coordinates": [
                    [[11.0, 46.0], [11.001, 46.0], [11.001, 46.001], [11.0, 46.0]]
                ],
            },
            "properties": {"name": "T2"},
        },
        line_feature([[10.0, 45.0], [10.0001, 45.0]], name="degenerate"),
    )


@pytest.fixture
def lengths() -> dict[str, float]:
    """Return the parsed form of ``LENGTHS_CSV``."""
    return {"INV1": 10.0, "INV2": 2.4, "INV3": 1.5}


@pytest.fixture
def site_dir(
    tmp_path: Path,
    label_collection: dict[str, Any],
    table_collection: dict[str, Any],
) -> Path:
    """Write the three site sources to a temporary directory."""
    (tmp_path / "LV.CSV").write_text(LENGTHS_CSV, encoding="utf-8")
    (tmp_path / "text.geojson").write_text(
        json.dumps(label_collection), encoding="utf-8"
    )
    (tmp_path / "file.geojson").write_text(
        json.dumps(table_collection), encoding="utf-8"
    )
    return tmp_path
