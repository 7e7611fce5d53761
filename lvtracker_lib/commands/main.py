# -*- coding: utf-8 -*-
"""``lvtracker`` entry point.

Sub-commands are discovered through the ``lvtracker_lib.actions`` entry
point group, so each one owns its own argument parser:

    lvtracker enrich -d site/
    lvtracker labels -d site/ --layers
    lvtracker progress -d site/ --done "INV 01"
"""

from __future__ import annotations

import argparse
import sys
from importlib.metadata import entry_points

import lvtracker_lib

ACTIONS_GROUP = "lvtracker_lib.actions"


def main(argv: list[str] | None = None) -> int:
    actions = entry_points(group=ACTIONS_GROUP)

    parser = argparse.ArgumentParser(
        prog="lvtracker",
        description="Solar site cable pulling tracker",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {lvtracker_lib.__version__}",
    )
    parser.add_argument(
        "command",
        choices=sorted(actions.names),
        help="Action to run; see `lvtracker <command> -h`",
    )
    parser.add_argument("args", nargs=argparse.REMAINDER, help=argparse.SUPPRESS)

    parsed = parser.parse_args(argv)
    action = actions[parsed.command].load()
    return action(parsed.args)


if __name__ == "__main__":
    sys.exit(main())
