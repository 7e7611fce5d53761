# -*- coding: utf-8 -*-
"""File I/O for site data sources.

The three sources are independent and read concurrently. A source that
cannot be read is reported and left out; only the loss of every source is
fatal:

    from lvtracker_lib.io import load_site

    site = load_site(Path("data"))
    if site.is_partial:
        print(site.warnings)
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from dataclasses import field
from pathlib import Path
from typing import Any

import orjson
from geojson import FeatureCollection

from lvtracker_lib.constants import JSON_ENCODING
from lvtracker_lib.constants import LABEL_GEOJSON_NAME
from lvtracker_lib.constants import LENGTH_TABLE_CANDIDATES
from lvtracker_lib.constants import TABLE_GEOJSON_NAME
from lvtracker_lib.enrichment import EnrichedSite
from lvtracker_lib.enrichment import build_label_map
from lvtracker_lib.enrichment import build_site
from lvtracker_lib.enums import DataSource
from lvtracker_lib.errors import NoDataError
from lvtracker_lib.errors import SourceLoadError
from lvtracker_lib.lengths.parser import LengthTableParser

logger = logging.getLogger(__name__)


@dataclass
class SiteSources:
    """Raw inputs of the pipeline; None marks a source that failed."""

    lengths: dict[str, float] | None = None
    labels: dict[str, Any] | None = None
    tables: dict[str, Any] | None = None
    failures: dict[DataSource, str] = field(default_factory=dict)
    skipped_rows: int = 0

    @property
    def all_failed(self) -> bool:
        return self.lengths is None and self.labels is None and self.tables is None


# --- Reading Functions ---


def read_lengths(
    data_dir: Path,
    *,
    candidates: Sequence[str] = LENGTH_TABLE_CANDIDATES,
) -> tuple[dict[str, float], int]:
    """Read the first existing cable length table.

    Args:
        data_dir: Directory holding the site files
        candidates: File names tried in order

    Returns:
        Tuple of (``normalized_id -> meters``, number of skipped rows)

    Raises:
        SourceLoadError: If no candidate can be read
    """
    for name in candidates:
        path = data_dir / name
        if not path.is_file():
            continue
        parser = LengthTableParser()
        try:
            table = parser.parse_file(path)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Failed to read %s: %s", path, e)
            continue
        if parser.skipped_rows:
            logger.info("Skipped %d rows of %s", parser.skipped_rows, path)
        return table.as_mapping(), parser.skipped_rows

    raise SourceLoadError(
        DataSource.LENGTHS, "LV cable length CSV could not be loaded."
    )


def read_geojson(path: Path, source: DataSource) -> dict[str, Any]:
    """Read a GeoJSON FeatureCollection.

    Raises:
        SourceLoadError: If the file is missing, not JSON or not a
            FeatureCollection
    """
    try:
        data = orjson.loads(path.read_bytes())
    except (OSError, orjson.JSONDecodeError) as e:
        raise SourceLoadError(source, f"{path.name} could not be loaded: {e}") from e

    if not isinstance(data, dict) or not isinstance(data.get("features"), list):
        raise SourceLoadError(source, f"{path.name} is not a FeatureCollection")
    return data


# --- Writing Functions ---


def dump_geojson(
    collection: FeatureCollection,
    output_path: Path | None = None,
    *,
    minify: bool = False,
) -> str:
    """Serialize a FeatureCollection, optionally writing it to disk.

    Returns:
        GeoJSON string
    """
    opts = 0 if minify else orjson.OPT_INDENT_2
    json_str = orjson.dumps(collection, option=opts).decode(JSON_ENCODING)

    if output_path:
        output_path.write_text(json_str, encoding=JSON_ENCODING)

    return json_str


# --- Loading Functions ---


def _settle(
    tasks: dict[DataSource, Callable[[], Any]],
) -> tuple[dict[DataSource, Any], dict[DataSource, str]]:
    """Run independent loaders concurrently and wait for all of them."""
    results: dict[DataSource, Any] = {}
    failures: dict[DataSource, str] = {}
    with ThreadPoolExecutor(max_workers=len(tasks)) as executor:
        futures = {source: executor.submit(task) for source, task in tasks.items()}
        for source, future in futures.items():
            try:
                results[source] = future.result()
            except SourceLoadError as e:
                logger.warning("%s", e)
                failures[source] = e.message
    return results, failures


def load_sources(
    data_dir: Path,
    *,
    length_candidates: Sequence[str] = LENGTH_TABLE_CANDIDATES,
    labels_name: str = LABEL_GEOJSON_NAME,
    tables_name: str = TABLE_GEOJSON_NAME,
) -> SiteSources:
    """Read the three site sources concurrently.

    Raises:
        NoDataError: If none of the sources could be read
    """
    results, failures = _settle(
        {
            DataSource.LENGTHS: lambda: read_lengths(
                data_dir, candidates=length_candidates
            ),
            DataSource.LABELS: lambda: read_geojson(
                data_dir / labels_name, DataSource.LABELS
            ),
            DataSource.TABLES: lambda: read_geojson(
                data_dir / tables_name, DataSource.TABLES
            ),
        }
    )

    lengths, skipped_rows = results.get(DataSource.LENGTHS, (None, 0))
    sources = SiteSources(
        lengths=lengths,
        labels=results.get(DataSource.LABELS),
        tables=results.get(DataSource.TABLES),
        failures=failures,
        skipped_rows=skipped_rows,
    )
    if sources.all_failed:
        raise NoDataError(f"No data could be loaded from `{data_dir}`.")
    return sources


def load_site(
    data_dir: Path,
    *,
    styled: bool = False,
    **kwargs: Any,
) -> EnrichedSite:
    """Load the site sources and run the enrichment pipeline.

    Args:
        data_dir: Directory holding the site files
        styled: Add simplestyle properties to table outlines
        **kwargs: File name overrides forwarded to :func:`load_sources`

    Returns:
        EnrichedSite (check ``is_partial`` for degraded output)

    Raises:
        NoDataError: If none of the sources could be read
    """
    sources = load_sources(data_dir, **kwargs)
    site = build_site(sources.lengths, sources.labels, sources.tables, styled=styled)
    site.skipped["length_rows"] = sources.skipped_rows
    return site


def load_label_map(
    data_dir: Path,
    *,
    tables_name: str = TABLE_GEOJSON_NAME,
    labels_name: str = LABEL_GEOJSON_NAME,
    line_layers: frozenset[str] | set[str] | None = None,
) -> tuple[FeatureCollection, bool]:
    """Load both GeoJSON layers and snap their labels onto the outlines.

    Returns:
        Tuple of (repositioned FeatureCollection, all_sources_empty)

    Raises:
        NoDataError: If neither file could be read
    """
    results, _ = _settle(
        {
            DataSource.TABLES: lambda: read_geojson(
                data_dir / tables_name, DataSource.TABLES
            ),
            DataSource.LABELS: lambda: read_geojson(
                data_dir / labels_name, DataSource.LABELS
            ),
        }
    )
    return build_label_map(
        results.get(DataSource.TABLES),
        results.get(DataSource.LABELS),
        line_layers=line_layers,
    )
