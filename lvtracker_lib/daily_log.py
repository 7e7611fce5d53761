# -*- coding: utf-8 -*-
"""Append-only daily work log.

Each submission records the date, the subcontractor, the number of
workers on site and the panels installed, the latter derived from the
inverters currently marked done. The log is stored as a JSON array.
"""

from __future__ import annotations

import datetime
import logging
from collections.abc import Iterable
from pathlib import Path

import orjson
from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import TypeAdapter
from pydantic import ValidationError

from lvtracker_lib.constants import SUBCONTRACTOR_LABEL_WIDTH
from lvtracker_lib.errors import DailyLogError
from lvtracker_lib.models import EnrichedFeature
from lvtracker_lib.progress import installed_panels

logger = logging.getLogger(__name__)


class DailyLogRecord(BaseModel):
    """One submission of the daily work form."""

    model_config = ConfigDict(frozen=True)

    date: datetime.date
    subcontractor: str
    workers: int = Field(default=0, ge=0)
    installed_panels: int = Field(default=0, ge=0)


class DailySummary(BaseModel):
    """All submissions of one day, aggregated."""

    date: datetime.date
    workers: int
    installed_panels: int
    subcontractors: list[str]

    @property
    def subcontractor_label(self) -> str:
        """Short label such as ``"EN & AC"``."""
        return " & ".join(
            name[:SUBCONTRACTOR_LABEL_WIDTH].upper() for name in self.subcontractors
        )


_RECORDS_ADAPTER = TypeAdapter(list[DailyLogRecord])


def make_record(
    date: datetime.date,
    subcontractor: str,
    workers: int,
    features: Iterable[EnrichedFeature],
) -> DailyLogRecord:
    """Build a record whose ``installed_panels`` comes from the done features."""
    return DailyLogRecord(
        date=date,
        subcontractor=subcontractor.strip(),
        workers=workers,
        installed_panels=installed_panels(features),
    )


def group_by_date(records: Iterable[DailyLogRecord]) -> list[DailySummary]:
    """Aggregate records per date, oldest first.

    Workers and installed panels are summed; subcontractors are listed
    once each, in order of first appearance.
    """
    grouped: dict[datetime.date, DailySummary] = {}
    for record in records:
        summary = grouped.get(record.date)
        if summary is None:
            summary = DailySummary(
                date=record.date, workers=0, installed_panels=0, subcontractors=[]
            )
            grouped[record.date] = summary
        summary.workers += record.workers
        summary.installed_panels += record.installed_panels
        if record.subcontractor and record.subcontractor not in summary.subcontractors:
            summary.subcontractors.append(record.subcontractor)
    return [grouped[date] for date in sorted(grouped)]


class DailyLog:
    """Daily work log persisted as a JSON file.

    Records can only be appended or the whole log reset.
    """

    def __init__(self, path: Path) -> None:
        self.path = path
        self._records: list[DailyLogRecord] = self._read()

    @property
    def records(self) -> tuple[DailyLogRecord, ...]:
        return tuple(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def _read(self) -> list[DailyLogRecord]:
        if not self.path.exists():
            return []
        try:
            return _RECORDS_ADAPTER.validate_json(self.path.read_bytes())
        except ValidationError as e:
            raise DailyLogError(f"Corrupt daily log `{self.path}`: {e}") from e

    def _write(self, records: list[DailyLogRecord]) -> None:
        data = _RECORDS_ADAPTER.dump_python(records, mode="json")
        self.path.write_bytes(orjson.dumps(data, option=orjson.OPT_INDENT_2))

    def add_record(self, record: DailyLogRecord) -> None:
        """Append a record and persist the log.

        The in-memory log only changes once the file has been written.
        """
        records = [*self._records, record]
        self._write(records)
        self._records = records
        logger.info(
            "Logged %d installed panels for %s", record.installed_panels, record.date
        )

    def reset(self) -> None:
        """Remove every record and delete the log file."""
        self._records = []
        self.path.unlink(missing_ok=True)

    def summary(self) -> list[DailySummary]:
        return group_by_date(self._records)
