# -*- coding: utf-8 -*-
"""Feature enrichment pipeline.

This module correlates the three site data sources:

- the cable length table (``normalized_id -> meters``)
- the mixed point-label layer
- the table outline layer

into the outputs consumed by the map and the progress tracker:

1. Labels are partitioned into inverter features and table label points.
2. Line outlines are closed into Polygon / MultiPolygon features.
3. Inverter features are joined with their cable length and get
   ``total_panels`` and a ``pending`` status.
4. Table outlines receive the table labels that fall inside them.

A second, static-rendering variant (:func:`reposition_labels`) snaps label
points onto their nearest outline and records a display rotation.

Inputs are never modified; every output feature is a new object.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from collections.abc import Mapping
from collections.abc import Sequence
from dataclasses import dataclass
from dataclasses import field
from typing import Any

from geojson import Feature
from geojson import FeatureCollection

from lvtracker_lib.constants import COMPUTED_ANGLE_PROPERTY
from lvtracker_lib.constants import LENGTH_MULTIPLIER
from lvtracker_lib.constants import MIN_RING_VERTICES
from lvtracker_lib.constants import MIN_TOTAL_PANELS
from lvtracker_lib.constants import TABLE_LABELS_PROPERTY
from lvtracker_lib.constants import TABLE_STYLE
from lvtracker_lib.enums import DataSource
from lvtracker_lib.enums import FeatureStatus
from lvtracker_lib.errors import NoDataError
from lvtracker_lib.geometry import copy_feature
from lvtracker_lib.geometry import extract_coordinates
from lvtracker_lib.geometry import extract_rings
from lvtracker_lib.geometry import line_center
from lvtracker_lib.geometry import line_to_polygon
from lvtracker_lib.geometry import make_geometry
from lvtracker_lib.geometry import multi_line_to_polygon
from lvtracker_lib.geometry import nearest_point_on_line
from lvtracker_lib.geometry import point_in_ring
from lvtracker_lib.geometry import segment_bearing
from lvtracker_lib.identifiers import get_feature_id
from lvtracker_lib.identifiers import normalize_id
from lvtracker_lib.labels import classify_feature
from lvtracker_lib.labels import partition_labels
from lvtracker_lib.models import EnrichedFeature
from lvtracker_lib.models import TableLabelPoint

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Data Classes
# -----------------------------------------------------------------------------


@dataclass
class EnrichedSite:
    """Everything produced by one pipeline run."""

    features: list[EnrichedFeature] = field(default_factory=list)
    tables: FeatureCollection = field(default_factory=lambda: FeatureCollection([]))
    table_label_points: list[TableLabelPoint] = field(default_factory=list)
    lengths: dict[str, float] = field(default_factory=dict)
    missing_sources: list[DataSource] = field(default_factory=list)
    skipped: dict[str, int] = field(default_factory=dict)

    @property
    def is_partial(self) -> bool:
        """True when at least one source was missing or empty."""
        return bool(self.missing_sources)

    @property
    def warnings(self) -> list[str]:
        return [
            f"{source.value} data is missing; continuing without it"
            for source in self.missing_sources
        ]


# -----------------------------------------------------------------------------
# Table Outlines
# -----------------------------------------------------------------------------


def convert_tables_to_polygons(
    collection: Mapping[str, Any] | None,
) -> tuple[FeatureCollection, int]:
    """Close LineString / MultiLineString outlines into polygons.

    Other geometry types pass through unchanged; degenerate lines and
    features without geometry are dropped.

    Returns:
        Tuple of (converted FeatureCollection, number of dropped features)
    """
    converted: list[Feature] = []
    skipped = 0

    for feature in (collection or {}).get("features") or []:
        geometry = (feature or {}).get("geometry")
        if not geometry:
            skipped += 1
            continue

        match geometry.get("type"):
            case "LineString":
                polygon = line_to_polygon(feature)
            case "MultiLineString":
                polygon = multi_line_to_polygon(feature)
            case _:
                polygon = copy_feature(feature)

        if polygon is None:
            skipped += 1
            continue
        converted.append(polygon)

    if skipped:
        logger.debug("Dropped %d degenerate table outlines", skipped)
    return FeatureCollection(converted), skipped


def find_table_labels(
    geometry: Mapping[str, Any] | None,
    table_label_points: Iterable[TableLabelPoint],
) -> list[str]:
    """Identifiers of the table labels lying inside a geometry.

    A label matches when it is inside any ring with at least 3 vertices.
    The result keeps the order in which labels were supplied.
    """
    rings = [
        ring for ring in extract_rings(geometry) if len(ring) >= MIN_RING_VERTICES
    ]
    if not rings:
        return []
    return [
        label.id
        for label in table_label_points
        if any(point_in_ring(label.coordinates, ring) for ring in rings)
    ]


def attach_table_labels(
    tables: Mapping[str, Any],
    table_label_points: Sequence[TableLabelPoint],
    *,
    styled: bool = False,
) -> FeatureCollection:
    """Add the contained table labels to every table outline.

    Args:
        tables: Polygon / MultiPolygon FeatureCollection
        table_label_points: Candidate labels
        styled: Add the default simplestyle table style

    Returns:
        New FeatureCollection whose features carry a ``table_labels`` list
    """
    features: list[Feature] = []
    for feature in tables.get("features") or []:
        properties = dict(feature.get("properties") or {})
        properties[TABLE_LABELS_PROPERTY] = find_table_labels(
            feature.get("geometry"), table_label_points
        )
        if styled:
            properties.update(TABLE_STYLE)
        features.append(copy_feature(feature, properties=properties))
    return FeatureCollection(features)


# -----------------------------------------------------------------------------
# Inverters
# -----------------------------------------------------------------------------


def compute_total_panels(meters: float) -> int:
    """Panels served by a cable run, never less than one."""
    return max(round(meters * LENGTH_MULTIPLIER), MIN_TOTAL_PANELS)


def enrich_inverter(
    feature: Mapping[str, Any],
    lengths: Mapping[str, float],
) -> EnrichedFeature | None:
    """Join one inverter label with its cable length.

    Returns:
        EnrichedFeature, or None if the feature has no identifier or no
        readable Point coordinates
    """
    inverter_id = get_feature_id(feature)
    geometry = feature.get("geometry") or {}
    coordinates = extract_coordinates(geometry.get("coordinates"))
    if not inverter_id or coordinates is None:
        return None

    normalized_id = normalize_id(inverter_id)
    meters = lengths.get(normalized_id, 0.0)
    return EnrichedFeature(
        coordinates=coordinates,
        inverter_id=inverter_id,
        normalized_id=normalized_id,
        total_panels=compute_total_panels(meters),
        status=FeatureStatus.PENDING,
        properties=dict(feature.get("properties") or {}),
    )


def enrich_inverters(
    features: Iterable[Mapping[str, Any]],
    lengths: Mapping[str, float],
) -> list[EnrichedFeature]:
    """Enrich every inverter label; unusable features are dropped."""
    enriched: list[EnrichedFeature] = []
    for feature in features:
        if (item := enrich_inverter(feature, lengths)) is None:
            logger.debug("Skipping inverter feature without id or coordinates")
            continue
        enriched.append(item)
    return enriched


# -----------------------------------------------------------------------------
# Label Repositioning
# -----------------------------------------------------------------------------


def _is_candidate_line(
    feature: Mapping[str, Any], line_layers: frozenset[str] | set[str] | None
) -> bool:
    geometry = feature.get("geometry") or {}
    if geometry.get("type") != "LineString":
        return False
    if line_layers is None:
        return True
    layer = (feature.get("properties") or {}).get("layer")
    return not layer or layer in line_layers


def reposition_labels(
    features: Iterable[Mapping[str, Any]],
    *,
    line_layers: frozenset[str] | set[str] | None = None,
) -> FeatureCollection:
    """Snap inverter / table labels onto their nearest outline.

    For every Point whose text classifies as a label, the nearest
    LineString is found (first line wins on equal distance). The point
    receives ``computedAngle``, the bearing of the segment it is closest
    to, and is moved to the center of that line.

    Args:
        features: Mixed label and outline features
        line_layers: Restrict candidate lines to these ``properties.layer``
            values (lines without a layer always qualify). None accepts
            every LineString.

    Returns:
        New FeatureCollection with the same features, in the same order
    """
    features = list(features)
    lines = [f for f in features if _is_candidate_line(f, line_layers)]
    if not lines:
        return FeatureCollection([copy_feature(f) for f in features])

    output: list[Feature] = []
    for feature in features:
        geometry = feature.get("geometry") or {}
        point = extract_coordinates(geometry.get("coordinates"))
        if (
            geometry.get("type") != "Point"
            or point is None
            or not classify_feature(feature).is_label
        ):
            output.append(copy_feature(feature))
            continue

        closest_line: Mapping[str, Any] | None = None
        closest_segment = 0
        shortest = math.inf
        for line in lines:
            snap = nearest_point_on_line(line, point)
            if snap.distance_meters < shortest:
                shortest = snap.distance_meters
                closest_line = line
                closest_segment = snap.segment_index

        if closest_line is None:
            output.append(copy_feature(feature))
            continue

        properties = dict(feature.get("properties") or {})
        properties[COMPUTED_ANGLE_PROPERTY] = segment_bearing(
            closest_line, closest_segment
        )
        center = line_center(closest_line)
        new_geometry = make_geometry("Point", list(center or point))
        output.append(
            copy_feature(feature, geometry=new_geometry, properties=properties)
        )

    return FeatureCollection(output)


def build_label_map(
    *collections: Mapping[str, Any] | None,
    line_layers: frozenset[str] | set[str] | None = None,
) -> tuple[FeatureCollection, bool]:
    """Merge label / outline layers and reposition their labels.

    Args:
        collections: FeatureCollections; None marks a source that failed
        line_layers: See :func:`reposition_labels`

    Returns:
        Tuple of (repositioned FeatureCollection, all_sources_empty)

    Raises:
        NoDataError: If no collection is available
    """
    available = [c for c in collections if c is not None]
    if not available:
        raise NoDataError("No GeoJSON files could be loaded.")

    merged = [f for c in available for f in (c.get("features") or [])]
    return reposition_labels(merged, line_layers=line_layers), not merged


# -----------------------------------------------------------------------------
# Pipeline
# -----------------------------------------------------------------------------


def build_site(
    lengths: Mapping[str, float] | None,
    labels: Mapping[str, Any] | None,
    tables: Mapping[str, Any] | None,
    *,
    styled: bool = False,
) -> EnrichedSite:
    """Run the full enrichment pipeline.

    Any source may be None (it could not be loaded) or empty; the pipeline
    then proceeds with defaults (zero lengths, no inverters, no outlines)
    and reports the source in ``missing_sources``.

    Args:
        lengths: ``normalized_id -> meters``
        labels: Point label FeatureCollection
        tables: Table outline FeatureCollection
        styled: Add simplestyle properties to the table outlines

    Returns:
        EnrichedSite

    Raises:
        NoDataError: If all three sources are None
    """
    if lengths is None and labels is None and tables is None:
        raise NoDataError("No data source could be loaded.")

    missing: list[DataSource] = []
    if not lengths:
        missing.append(DataSource.LENGTHS)
    if not labels or not labels.get("features"):
        missing.append(DataSource.LABELS)
    if not tables or not tables.get("features"):
        missing.append(DataSource.TABLES)
    for source in missing:
        logger.warning("Partial data: %s source is missing or empty", source.value)

    lengths = dict(lengths or {})
    partition = partition_labels(labels)
    polygons, skipped_tables = convert_tables_to_polygons(tables)
    features = enrich_inverters(partition.inverter_features, lengths)

    return EnrichedSite(
        features=features,
        tables=attach_table_labels(
            polygons, partition.table_label_points, styled=styled
        ),
        table_label_points=partition.table_label_points,
        lengths=lengths,
        missing_sources=missing,
        skipped={
            "labels": partition.skipped,
            "inverters": len(partition.inverter_features) - len(features),
            "tables": skipped_tables,
        },
    )


def features_to_geojson(
    features: Iterable[EnrichedFeature],
    *,
    styled: bool = False,
) -> FeatureCollection:
    """Render enriched features as a Point FeatureCollection."""
    return FeatureCollection([f.to_feature(styled=styled) for f in features])


def site_to_geojson(
    site: EnrichedSite,
    *,
    styled: bool = False,
    properties: dict[str, Any] | None = None,
) -> FeatureCollection:
    """Combine inverter points and table outlines into one collection.

    Args:
        site: Pipeline output
        styled: Add simplestyle properties to inverter markers
        properties: Extra collection-level properties

    Returns:
        GeoJSON FeatureCollection (table outlines first, then inverters)
    """
    features = [
        *site.tables["features"],
        *(f.to_feature(styled=styled) for f in site.features),
    ]
    fc_properties: dict[str, Any] = {}
    if site.missing_sources:
        fc_properties["missing_sources"] = [s.value for s in site.missing_sources]
    if properties:
        fc_properties.update(properties)

    if fc_properties:
        return FeatureCollection(features, properties=fc_properties)
    return FeatureCollection(features)
