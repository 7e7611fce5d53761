# -*- coding: utf-8 -*-
"""Progress statistics over the enriched inverter features."""

from __future__ import annotations

from collections.abc import Iterable
from collections.abc import Mapping

from pydantic import BaseModel

from lvtracker_lib.models import EnrichedFeature


class ProgressStats(BaseModel):
    """Cable pulling progress of a site.

    Attributes:
        total_meters: Sum of every length in the cable table
        completed_meters: Sum of the lengths of inverters marked done
        completion_percentage: ``completed / total`` as a rounded percentage
        remaining_meters: ``total - completed``
        installed_panels: Sum of ``total_panels`` over inverters marked done
    """

    total_meters: float
    completed_meters: float
    completion_percentage: int
    remaining_meters: float
    installed_panels: int


def installed_panels(features: Iterable[EnrichedFeature]) -> int:
    """Panels covered by the inverters marked done."""
    return sum(f.total_panels for f in features if f.is_done)


def compute_progress(
    features: Iterable[EnrichedFeature],
    lengths: Mapping[str, float],
) -> ProgressStats:
    """Compute progress statistics.

    Args:
        features: Current enriched features
        lengths: ``normalized_id -> meters``

    Returns:
        ProgressStats
    """
    features = list(features)
    total = sum(lengths.values())
    completed = sum(
        lengths.get(f.normalized_id, 0.0) for f in features if f.is_done
    )
    percentage = round(completed / total * 100) if total > 0 else 0
    return ProgressStats(
        total_meters=total,
        completed_meters=completed,
        completion_percentage=percentage,
        remaining_meters=total - completed,
        installed_panels=installed_panels(features),
    )
