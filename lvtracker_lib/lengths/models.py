# -*- coding: utf-8 -*-
"""Cable length models.

- LengthRecord: one validated row of the LV cable length table
- LengthTable: all accepted rows, in file order
"""

from __future__ import annotations

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field


class LengthRecord(BaseModel):
    """Cable length of a single inverter, keyed by normalized identifier."""

    model_config = ConfigDict(frozen=True)

    normalized_id: str = Field(min_length=1)
    meters: float = Field(ge=0.0, allow_inf_nan=False)


class LengthTable(BaseModel):
    """Accepted rows of a cable length table.

    Duplicate identifiers are kept here; :meth:`as_mapping` applies the
    last-row-wins policy.
    """

    records: list[LengthRecord] = Field(default_factory=list)

    def as_mapping(self) -> dict[str, float]:
        """Return ``normalized_id -> meters``, later rows overriding earlier ones."""
        return {record.normalized_id: record.meters for record in self.records}

    @property
    def total_meters(self) -> float:
        return sum(self.as_mapping().values())
