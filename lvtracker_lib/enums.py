# -*- coding: utf-8 -*-
"""Enumerations for lvtracker data.

This module contains the enumerations used to classify point labels,
track inverter progress and report parsing problems.
"""

from enum import Enum


class Role(str, Enum):
    """Role of a point label, derived from its text.

    Attributes:
        INVERTER_LABEL: Tag naming an inverter (``INV...``)
        TABLE_LABEL: Tag naming a table / panel string (``...-STR<n>``)
        UNCLASSIFIED: Any other text
    """

    INVERTER_LABEL = "inverter_label"
    TABLE_LABEL = "table_label"
    UNCLASSIFIED = "unclassified"

    @property
    def is_label(self) -> bool:
        """True for roles that take part in label repositioning."""
        return self is not Role.UNCLASSIFIED


class FeatureStatus(str, Enum):
    """Installation status of an inverter feature.

    Attributes:
        PENDING: Cable not pulled yet
        DONE: Cable pulled
    """

    PENDING = "pending"
    DONE = "done"

    def toggled(self) -> "FeatureStatus":
        """Return the opposite status."""
        if self is FeatureStatus.DONE:
            return FeatureStatus.PENDING
        return FeatureStatus.DONE


class DataSource(str, Enum):
    """Independent inputs of the enrichment pipeline.

    Attributes:
        LENGTHS: Cable length table (CSV-like text)
        LABELS: Mixed point-label GeoJSON layer
        TABLES: Table outline GeoJSON layer
    """

    LENGTHS = "lengths"
    LABELS = "labels"
    TABLES = "tables"


class Severity(str, Enum):
    """Severity level for parsing errors.

    Attributes:
        ERROR: Critical error that prevents reading a source
        WARNING: Non-critical issue, the offending row was skipped
    """

    ERROR = "error"
    WARNING = "warning"
