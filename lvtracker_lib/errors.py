# -*- coding: utf-8 -*-
"""Error handling for lvtracker data loading.

Row-level problems are collected as :class:`ParseError` records and never
raised; only the loss of every data source is fatal.
"""

from dataclasses import dataclass

from lvtracker_lib.enums import DataSource
from lvtracker_lib.enums import Severity


@dataclass(frozen=True)
class SourceLocation:
    """Row of an input file, for diagnostics.

    Attributes:
        source: File name, or ``<string>`` for in-memory text
        line: 0-based line index in the original text
        text: The raw row
    """

    source: str
    line: int
    text: str = ""

    def __str__(self) -> str:
        return f"{self.source}:{self.line + 1}"


@dataclass(frozen=True)
class ParseError:
    """A skipped row, kept as a record instead of being raised."""

    severity: Severity
    message: str
    location: SourceLocation | None = None

    def __str__(self) -> str:
        base = f"{self.severity.value}: {self.message}"
        if self.location is None:
            return base
        if self.location.text:
            base += f" [{self.location.text}]"
        return f"{self.location}: {base}"


class SourceLoadError(Exception):
    """Raised when a single data source cannot be read.

    Attributes:
        source: Which input failed
        message: Error message
    """

    def __init__(self, source: DataSource, message: str):
        self.source = source
        self.message = message
        super().__init__(str(self))

    def __str__(self) -> str:
        return f"{self.source.value}: {self.message}"


class NoDataError(Exception):
    """Raised when no data source at all could be loaded."""


class DailyLogError(Exception):
    """Raised when the daily log file exists but cannot be decoded."""
