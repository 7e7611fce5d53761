# -*- coding: utf-8 -*-
"""Enrich command.

Loads the site data directory (cable length table, label layer, table
outline layer) and writes the enriched GeoJSON: table outlines carrying
their table labels, followed by the inverter points with cable length
derived properties.
"""

import argparse
import logging
import sys
from pathlib import Path

from lvtracker_lib.enrichment import site_to_geojson
from lvtracker_lib.errors import NoDataError
from lvtracker_lib.io import dump_geojson
from lvtracker_lib.io import load_site

logger = logging.getLogger(__name__)


def add_common_arguments(parser: argparse.ArgumentParser) -> None:
    """Arguments shared by every site command."""
    parser.add_argument(
        "-d",
        "--data-dir",
        type=Path,
        required=True,
        help="Directory holding LV.CSV, text.geojson and file.geojson",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log progress and skipped rows to stderr",
    )


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def enrich(args: list[str]) -> int:
    """Entry point for the enrich command."""
    parser = argparse.ArgumentParser(
        prog="lvtracker enrich",
        description="Correlate cable lengths, labels and table outlines",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  lvtracker enrich -d site/                       # GeoJSON to stdout
  lvtracker enrich -d site/ -o site.geojson       # GeoJSON to file
  lvtracker enrich -d site/ --styled --minify     # Styled, compact output

Notes:
  - Missing sources are reported as warnings; the output is still written
  - The command fails only when no source at all can be read
""",
    )
    add_common_arguments(parser)
    parser.add_argument(
        "-o",
        "--output-file",
        type=Path,
        default=None,
        help="Output file path (prints to stdout if not specified)",
    )
    parser.add_argument(
        "--styled",
        action="store_true",
        help="Add simplestyle properties (fill, stroke, marker-color)",
    )
    parser.add_argument(
        "--minify",
        action="store_true",
        help="Omit indentation for compact output",
    )

    parsed_args = parser.parse_args(args)
    configure_logging(parsed_args.verbose)

    try:
        site = load_site(parsed_args.data_dir, styled=parsed_args.styled)
    except NoDataError as e:
        logger.error("%s", e)  # noqa: TRY400
        return 1

    for warning in site.warnings:
        logger.warning("%s", warning)

    result = dump_geojson(
        site_to_geojson(site, styled=parsed_args.styled),
        parsed_args.output_file,
        minify=parsed_args.minify,
    )
    if parsed_args.output_file is None:
        sys.stdout.write(result + "\n")

    return 0
