# -*- coding: utf-8 -*-
"""Labels command.

Builds the static label map: the label and outline layers are merged,
and every inverter / table label is moved onto the center of its nearest
outline with a ``computedAngle`` for rotated rendering.
"""

import argparse
import logging
import sys
from pathlib import Path

from lvtracker_lib.commands.enrich import add_common_arguments
from lvtracker_lib.commands.enrich import configure_logging
from lvtracker_lib.constants import PANEL_LAYER_CANDIDATES
from lvtracker_lib.errors import NoDataError
from lvtracker_lib.io import dump_geojson
from lvtracker_lib.io import load_label_map

logger = logging.getLogger(__name__)


def labels(args: list[str]) -> int:
    """Entry point for the labels command."""
    parser = argparse.ArgumentParser(
        prog="lvtracker labels",
        description="Snap labels onto their nearest outline",
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
        "--layers",
        nargs="*",
        default=None,
        help=(
            "Only snap onto lines from these layers; with no value, use the "
            f"panel layers ({', '.join(sorted(PANEL_LAYER_CANDIDATES))})"
        ),
    )
    parser.add_argument(
        "--minify",
        action="store_true",
        help="Omit indentation for compact output",
    )

    parsed_args = parser.parse_args(args)
    configure_logging(parsed_args.verbose)

    line_layers = None
    if parsed_args.layers is not None:
        line_layers = set(parsed_args.layers) or PANEL_LAYER_CANDIDATES

    try:
        collection, all_empty = load_label_map(
            parsed_args.data_dir, line_layers=line_layers
        )
    except NoDataError as e:
        logger.error("%s", e)  # noqa: TRY400
        return 1

    if all_empty:
        logger.error("Both GeoJSON files are empty.")
        return 1

    result = dump_geojson(
        collection, parsed_args.output_file, minify=parsed_args.minify
    )
    if parsed_args.output_file is None:
        sys.stdout.write(result + "\n")

    return 0
