# -*- coding: utf-8 -*-
"""LV Tracker Library.

A Python library correlating the data sources of a solar-panel site (LV
cable length table, inverter / table label layer, table outline layer)
into enriched GeoJSON for progress tracking.

Usage:
    # Load and enrich a complete site
    from lvtracker_lib import load_site
    site = load_site(Path("site"))

    for feature in site.features:
        print(feature.inverter_id, feature.total_panels)

    # Track status edits with undo / redo
    from lvtracker_lib import StatusHistory
    history = StatusHistory(site.features)
    history.toggle_status("INV 01")
    history.undo()
"""

__version__ = "0.1.0"

# Constants
from lvtracker_lib.constants import JSON_ENCODING
from lvtracker_lib.constants import LENGTH_MULTIPLIER
from lvtracker_lib.daily_log import DailyLog
from lvtracker_lib.daily_log import DailyLogRecord
from lvtracker_lib.daily_log import DailySummary
from lvtracker_lib.daily_log import group_by_date
from lvtracker_lib.daily_log import make_record
from lvtracker_lib.enrichment import EnrichedSite
from lvtracker_lib.enrichment import attach_table_labels
from lvtracker_lib.enrichment import build_label_map
from lvtracker_lib.enrichment import build_site
from lvtracker_lib.enrichment import convert_tables_to_polygons
from lvtracker_lib.enrichment import enrich_inverters
from lvtracker_lib.enrichment import features_to_geojson
from lvtracker_lib.enrichment import find_table_labels
from lvtracker_lib.enrichment import reposition_labels
from lvtracker_lib.enrichment import site_to_geojson

# Enums
from lvtracker_lib.enums import DataSource
from lvtracker_lib.enums import FeatureStatus
from lvtracker_lib.enums import Role
from lvtracker_lib.enums import Severity

# Errors
from lvtracker_lib.errors import DailyLogError
from lvtracker_lib.errors import NoDataError
from lvtracker_lib.errors import ParseError
from lvtracker_lib.errors import SourceLoadError
from lvtracker_lib.errors import SourceLocation

# Geometry
from lvtracker_lib.geometry import close_ring
from lvtracker_lib.geometry import extract_rings
from lvtracker_lib.geometry import line_center
from lvtracker_lib.geometry import line_to_polygon
from lvtracker_lib.geometry import multi_line_to_polygon
from lvtracker_lib.geometry import nearest_point_on_line
from lvtracker_lib.geometry import point_in_ring
from lvtracker_lib.geometry import segment_bearing
from lvtracker_lib.history import HistoryState
from lvtracker_lib.history import StatusHistory
from lvtracker_lib.identifiers import get_feature_id
from lvtracker_lib.identifiers import normalize_id
from lvtracker_lib.io import load_label_map
from lvtracker_lib.io import load_site
from lvtracker_lib.io import load_sources
from lvtracker_lib.labels import classify_role
from lvtracker_lib.labels import partition_labels
from lvtracker_lib.lengths.models import LengthRecord
from lvtracker_lib.lengths.models import LengthTable
from lvtracker_lib.lengths.parser import LengthTableParser
from lvtracker_lib.lengths.parser import parse_lengths
from lvtracker_lib.models import EnrichedFeature
from lvtracker_lib.models import TableLabelPoint
from lvtracker_lib.progress import ProgressStats
from lvtracker_lib.progress import compute_progress

__all__ = [
    # Constants
    "JSON_ENCODING",
    "LENGTH_MULTIPLIER",
    # Daily log
    "DailyLog",
    "DailyLogError",
    "DailyLogRecord",
    "DailySummary",
    # Enums
    "DataSource",
    # Models
    "EnrichedFeature",
    # Pipeline
    "EnrichedSite",
    "FeatureStatus",
    # History
    "HistoryState",
    # Lengths
    "LengthRecord",
    "LengthTable",
    "LengthTableParser",
    # Errors
    "NoDataError",
    "ParseError",
    "ProgressStats",
    "Role",
    "Severity",
    "SourceLoadError",
    "SourceLocation",
    "StatusHistory",
    "TableLabelPoint",
    "attach_table_labels",
    "build_label_map",
    "build_site",
    # Labels
    "classify_role",
    # Geometry
    "close_ring",
    "compute_progress",
    "convert_tables_to_polygons",
    "enrich_inverters",
    "extract_rings",
    "features_to_geojson",
    "find_table_labels",
    # Identifiers
    "get_feature_id",
    "group_by_date",
    "line_center",
    "line_to_polygon",
    # I/O
    "load_label_map",
    "load_site",
    "load_sources",
    "make_record",
    "multi_line_to_polygon",
    "nearest_point_on_line",
    "normalize_id",
    "parse_lengths",
    "partition_labels",
    "point_in_ring",
    "reposition_labels",
    "segment_bearing",
    "site_to_geojson",
]
