# -*- coding: utf-8 -*-
"""Lengths module for parsing LV cable length tables."""

from lvtracker_lib.lengths.models import LengthRecord
from lvtracker_lib.lengths.models import LengthTable
from lvtracker_lib.lengths.parser import LengthTableParser
from lvtracker_lib.lengths.parser import detect_delimiter
from lvtracker_lib.lengths.parser import parse_lengths

__all__ = [
    "LengthRecord",
    "LengthTable",
    "LengthTableParser",
    "detect_delimiter",
    "parse_lengths",
]
