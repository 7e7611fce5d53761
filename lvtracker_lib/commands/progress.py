# -*- coding: utf-8 -*-
"""Progress command.

Prints the cable pulling progress of a site as JSON, optionally marking
some inverters as done first and appending the result to the daily log.
"""

import argparse
import datetime
import logging
import sys

from lvtracker_lib.commands.enrich import add_common_arguments
from lvtracker_lib.commands.enrich import configure_logging
from lvtracker_lib.constants import DAILY_LOG_NAME
from lvtracker_lib.daily_log import DailyLog
from lvtracker_lib.daily_log import make_record
from lvtracker_lib.errors import DailyLogError
from lvtracker_lib.errors import NoDataError
from lvtracker_lib.history import StatusHistory
from lvtracker_lib.io import load_site
from lvtracker_lib.progress import compute_progress

logger = logging.getLogger(__name__)


def non_negative_int(value: str) -> int:
    """argparse type for counts."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid count: `{value}`") from None
    if number < 0:
        raise argparse.ArgumentTypeError(f"must not be negative: `{value}`")
    return number


def progress(args: list[str]) -> int:
    """Entry point for the progress command."""
    parser = argparse.ArgumentParser(
        prog="lvtracker progress",
        description="Report cable pulling progress",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  lvtracker progress -d site/
  lvtracker progress -d site/ --done "INV 01" "INV 02"
  lvtracker progress -d site/ --done "INV 01" --log ENEL --workers 4
""",
    )
    add_common_arguments(parser)
    parser.add_argument(
        "--done",
        nargs="*",
        default=[],
        metavar="ID",
        help="Inverter identifiers to mark as done",
    )
    parser.add_argument(
        "--log",
        default=None,
        metavar="SUBCONTRACTOR",
        help=f"Append today's record to {DAILY_LOG_NAME} in the data directory",
    )
    parser.add_argument(
        "--workers",
        type=non_negative_int,
        default=0,
        help="Workers on site, stored with the daily log record",
    )

    parsed_args = parser.parse_args(args)
    configure_logging(parsed_args.verbose)

    try:
        site = load_site(parsed_args.data_dir)
    except NoDataError as e:
        logger.error("%s", e)  # noqa: TRY400
        return 1

    history = StatusHistory(site.features)
    for inverter_id in parsed_args.done:
        history.toggle_status(inverter_id)

    stats = compute_progress(history.features, site.lengths)
    sys.stdout.write(stats.model_dump_json(indent=2) + "\n")

    if parsed_args.log is not None:
        try:
            daily_log = DailyLog(parsed_args.data_dir / DAILY_LOG_NAME)
        except DailyLogError as e:
            logger.error("%s", e)  # noqa: TRY400
            return 1
        daily_log.add_record(
            make_record(
                datetime.date.today(),  # noqa: DTZ011
                parsed_args.log,
                parsed_args.workers,
                history.features,
            )
        )

    return 0
