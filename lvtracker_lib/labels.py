# -*- coding: utf-8 -*-
"""Point label classification.

The label layer mixes inverter tags (``INV 07``) and table / panel-string
tags (``INV07-STR3``). Two heuristics are in use:

- :func:`classify_role` is a loose substring test on ``properties.text``,
  used when snapping labels onto outlines.
- :func:`is_table_label` is a stricter anchored suffix test
  (``-STR<digits>`` at the end) on the feature identifier, used when
  splitting the layer into inverters and table labels.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass
from dataclasses import field
from re import Pattern
from typing import Any

from lvtracker_lib.enums import Role
from lvtracker_lib.geometry import extract_coordinates
from lvtracker_lib.identifiers import get_feature_id
from lvtracker_lib.models import TableLabelPoint

logger = logging.getLogger(__name__)

TABLE_ID_PATTERN: Pattern[str] = re.compile(r"-STR[0-9]+$", re.IGNORECASE)

TABLE_MARKER = "-STR"
INVERTER_MARKER = "INV"


@dataclass
class LabelPartition:
    """Point labels split by role."""

    inverter_features: list[dict[str, Any]] = field(default_factory=list)
    table_label_points: list[TableLabelPoint] = field(default_factory=list)
    skipped: int = 0


def classify_role(text: Any) -> Role:
    """Classify a label text.

    ``-STR`` anywhere (case-sensitive) marks a table label and takes
    precedence over ``INV``.
    """
    if not isinstance(text, str):
        return Role.UNCLASSIFIED
    if TABLE_MARKER in text:
        return Role.TABLE_LABEL
    if INVERTER_MARKER in text:
        return Role.INVERTER_LABEL
    return Role.UNCLASSIFIED


def classify_feature(feature: Mapping[str, Any]) -> Role:
    """Classify a point feature by its ``properties.text``."""
    properties = feature.get("properties") or {}
    return classify_role(properties.get("text"))


def is_table_label(feature: Mapping[str, Any]) -> bool:
    """True if the feature identifier ends with ``-STR<digits>``."""
    feature_id = get_feature_id(feature)
    return feature_id is not None and bool(TABLE_ID_PATTERN.search(feature_id))


def partition_labels(collection: Mapping[str, Any] | None) -> LabelPartition:
    """Split a label layer into inverter features and table label points.

    Features that are not Points, have no identifier, or are table labels
    without readable coordinates are dropped and counted in ``skipped``.

    Args:
        collection: GeoJSON FeatureCollection mapping

    Returns:
        LabelPartition preserving the input order within each output
    """
    partition = LabelPartition()
    features = (collection or {}).get("features") or []

    for feature in features:
        feature_id = get_feature_id(feature)
        geometry = (feature or {}).get("geometry") or {}
        if not feature_id or geometry.get("type") != "Point":
            partition.skipped += 1
            continue

        if not is_table_label(feature):
            partition.inverter_features.append(feature)
            continue

        coordinates = extract_coordinates(geometry.get("coordinates"))
        if coordinates is None:
            logger.debug("Skipping table label %s: unreadable coordinates", feature_id)
            partition.skipped += 1
            continue
        partition.table_label_points.append(
            TableLabelPoint(id=feature_id, coordinates=coordinates)
        )

    if partition.skipped:
        logger.debug("Dropped %d label features", partition.skipped)
    return partition
