# -*- coding: utf-8 -*-
"""Core data models for lvtracker features.

This module contains the Pydantic models shared by the enrichment
pipeline and the status history:
- TableLabelPoint: a table/panel-string tag reduced to id and position
- EnrichedFeature: an inverter point joined with its cable length
"""

from __future__ import annotations

from typing import Any

from geojson import Feature
from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field

from lvtracker_lib.constants import MIN_TOTAL_PANELS
from lvtracker_lib.constants import STATUS_COLORS
from lvtracker_lib.enums import FeatureStatus
from lvtracker_lib.geometry import make_geometry


class TableLabelPoint(BaseModel):
    """A table label stripped to its identity and location.

    Attributes:
        id: Raw label text (e.g. ``"INV01-STR3"``)
        coordinates: ``(lng, lat)``
    """

    model_config = ConfigDict(frozen=True)

    id: str
    coordinates: tuple[float, float]


class EnrichedFeature(BaseModel):
    """An inverter point enriched for progress tracking.

    Instances are immutable: a status change produces a new value through
    :meth:`with_status`, which is how the history model replaces features.

    Attributes:
        coordinates: ``(lng, lat)`` of the inverter label
        inverter_id: Raw identifier of the label
        normalized_id: Join key into the cable length table
        total_panels: Panels served by this inverter (at least 1)
        status: Installation status
        properties: Source properties carried through unchanged
    """

    model_config = ConfigDict(frozen=True)

    coordinates: tuple[float, float]
    inverter_id: str
    normalized_id: str
    total_panels: int = Field(ge=MIN_TOTAL_PANELS)
    status: FeatureStatus = FeatureStatus.PENDING
    properties: dict[str, Any] = Field(default_factory=dict)

    @property
    def is_done(self) -> bool:
        return self.status == FeatureStatus.DONE

    def with_status(self, status: FeatureStatus) -> EnrichedFeature:
        """Return a copy carrying ``status``."""
        return self.model_copy(update={"status": status})

    def toggled(self) -> EnrichedFeature:
        """Return a copy with ``pending`` and ``done`` swapped."""
        return self.with_status(self.status.toggled())

    def to_feature(self, *, styled: bool = False) -> Feature:
        """Render as a GeoJSON Point feature.

        Args:
            styled: Add a simplestyle ``marker-color`` for the status
        """
        properties = {
            **self.properties,
            "inverter_id": self.inverter_id,
            "normalizedId": self.normalized_id,
            "total_panels": self.total_panels,
            "status": self.status.value,
        }
        if styled:
            properties["marker-color"] = STATUS_COLORS[self.status.value]
        return Feature(
            geometry=make_geometry("Point", list(self.coordinates)),
            properties=properties,
        )
