# -*- coding: utf-8 -*-
"""Constants used throughout the lvtracker_lib library.

This module centralizes all constant values to ensure consistency
and avoid magic numbers/strings scattered across the codebase.
"""

# -----------------------------------------------------------------------------
# File Encodings
# -----------------------------------------------------------------------------

#: Encoding used for JSON / GeoJSON files
JSON_ENCODING = "utf-8"

#: Encoding used when reading cable length tables (tolerates an Excel BOM)
CSV_ENCODING = "utf-8-sig"

# -----------------------------------------------------------------------------
# Default Source Files
# -----------------------------------------------------------------------------

#: Candidate file names for the LV cable length table (first existing wins)
LENGTH_TABLE_CANDIDATES: tuple[str, ...] = ("LV.CSV", "lv.csv")

#: Mixed point-label layer (inverter tags and table/string tags)
LABEL_GEOJSON_NAME = "text.geojson"

#: Table (panel-row) outline layer
TABLE_GEOJSON_NAME = "file.geojson"

# -----------------------------------------------------------------------------
# Length Table Parsing
# -----------------------------------------------------------------------------

#: Delimiters tried on the header line, in priority order
DELIMITER_CANDIDATES: tuple[str, ...] = (",", "\t", ";")

#: Delimiter used when the header line contains none of the candidates
DEFAULT_DELIMITER = ","

#: Header cells accepted (exact match) as the identifier column
ID_COLUMN_NAMES: tuple[str, ...] = ("id", "di")

#: Header substring identifying the length column
LENGTH_COLUMN_KEYWORD = "length"

# -----------------------------------------------------------------------------
# Enrichment
# -----------------------------------------------------------------------------

#: Panels installed per meter of LV cable
LENGTH_MULTIPLIER: int = 3

#: Lower bound for ``total_panels`` on an enriched inverter feature
MIN_TOTAL_PANELS: int = 1

#: Property holding the table labels found inside a table outline
TABLE_LABELS_PROPERTY = "table_labels"

#: Property holding the display rotation computed for a snapped label
COMPUTED_ANGLE_PROPERTY = "computedAngle"

#: Layer names treated as panel outlines by the static label map
PANEL_LAYER_CANDIDATES: frozenset[str] = frozenset(
    {"SOMBREADO SUB 06", "panels", "panel", "inv", "inv point"}
)

# -----------------------------------------------------------------------------
# Geometry
# -----------------------------------------------------------------------------

#: Tolerance (degrees) under which first and last ring vertices are equal
RING_CLOSE_EPSILON: float = 1e-12

#: Minimum number of distinct vertices for a ring to become a polygon
MIN_RING_VERTICES: int = 3

#: Mean Earth radius in meters (IUGG), used for local planar projections
EARTH_RADIUS_METERS: float = 6_371_008.8

#: Ellipsoid used for geodesic distances and bearings
GEOD_ELLIPSOID = "WGS84"

# -----------------------------------------------------------------------------
# History
# -----------------------------------------------------------------------------

#: Maximum number of snapshots kept on each of the undo / redo stacks
HISTORY_MAX_DEPTH: int = 500

# -----------------------------------------------------------------------------
# Styling (simplestyle spec)
# -----------------------------------------------------------------------------

#: Default style applied to table outlines
TABLE_STYLE: dict[str, str | float] = {
    "stroke": "#475569",
    "stroke-width": 1,
    "stroke-opacity": 0.85,
    "fill": "#cbd5f5",
    "fill-opacity": 0.08,
}

#: Marker colour per inverter status
STATUS_COLORS: dict[str, str] = {
    "pending": "#64748b",
    "done": "#16a34a",
}

# -----------------------------------------------------------------------------
# Daily Log
# -----------------------------------------------------------------------------

#: Default file name of the append-only daily work log
DAILY_LOG_NAME = "daily_log.json"

#: Number of leading characters kept per subcontractor in summary labels
SUBCONTRACTOR_LABEL_WIDTH: int = 2
