# -*- coding: utf-8 -*-
"""Parser for LV cable length tables.

The table is a CSV-like text export whose delimiter (comma, tab or
semicolon) and column layout vary between sites. The first non-empty line
is always a header; it decides the delimiter and the identifier / length
columns for the whole file.

Architecture: the parser produces dictionaries which are validated row by
row through :class:`LengthRecord`. Rows that fail validation are collected
as warnings rather than raised, so a malformed row never prevents the rest
of the table from loading.
"""

import logging
import re
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from lvtracker_lib.constants import CSV_ENCODING
from lvtracker_lib.constants import DEFAULT_DELIMITER
from lvtracker_lib.constants import DELIMITER_CANDIDATES
from lvtracker_lib.constants import ID_COLUMN_NAMES
from lvtracker_lib.constants import LENGTH_COLUMN_KEYWORD
from lvtracker_lib.enums import Severity
from lvtracker_lib.errors import ParseError
from lvtracker_lib.errors import SourceLocation
from lvtracker_lib.identifiers import normalize_id
from lvtracker_lib.lengths.models import LengthRecord
from lvtracker_lib.lengths.models import LengthTable

logger = logging.getLogger(__name__)

# Plain integer text, as left on both sides of a decimal comma
INTEGER_TEXT = re.compile(r"^-?[0-9]+$")


def detect_delimiter(line: str) -> str:
    """Pick the delimiter of a table from its header line.

    Args:
        line: First non-empty line of the table

    Returns:
        The first of ``,``, tab, ``;`` present in the line, else ``,``
    """
    for candidate in DELIMITER_CANDIDATES:
        if candidate in line:
            return candidate
    return DEFAULT_DELIMITER


def find_columns(header_cells: list[str]) -> tuple[int, int]:
    """Locate the identifier and length columns.

    Args:
        header_cells: Lower-cased, trimmed header cells

    Returns:
        Tuple of (id_index, length_index), falling back to 0 and 1
    """
    id_index = next(
        (i for i, cell in enumerate(header_cells) if cell in ID_COLUMN_NAMES), 0
    )
    length_index = next(
        (i for i, cell in enumerate(header_cells) if LENGTH_COLUMN_KEYWORD in cell),
        1,
    )
    return id_index, length_index


class LengthTableParser:
    """Parser for LV cable length tables.

    Errors are collected rather than thrown, allowing partial parsing
    of malformed files.

    Attributes:
        errors: List of skipped rows encountered during the last parse
    """

    EOL = re.compile(r"\r\n|\r|\n")

    def __init__(self) -> None:
        """Initialize a new parser with empty error list."""
        self.errors: list[ParseError] = []
        self._source: str = "<string>"

    @property
    def skipped_rows(self) -> int:
        """Number of data rows dropped during the last parse."""
        return sum(1 for error in self.errors if error.severity == Severity.WARNING)

    def _add_warning(self, message: str, text: str = "", line: int = 0) -> None:
        """Record a skipped row."""
        logger.debug("Skipping row %d of %s: %s", line + 1, self._source, message)
        self.errors.append(
            ParseError(
                severity=Severity.WARNING,
                message=message,
                location=SourceLocation(source=self._source, line=line, text=text),
            )
        )

    # -------------------------------------------------------------------------
    # Dictionary-returning methods
    # -------------------------------------------------------------------------

    def parse_string_to_dict(
        self,
        data: str,
        source: str = "<string>",
    ) -> dict[str, Any]:
        """Parse a length table from a string to dictionary.

        Args:
            data: Table text
            source: Source identifier for error messages

        Returns:
            Dictionary with a "records" key that can be fed to
            ``LengthTable.model_validate()``
        """
        self._source = source
        self.errors = []

        rows = [
            (line_no, line.strip())
            for line_no, line in enumerate(self.EOL.split(data))
            if line.strip()
        ]
        if not rows:
            return {"records": []}

        _, header = rows[0]
        delimiter = detect_delimiter(header)
        header_cells = [cell.strip().lower() for cell in header.split(delimiter)]
        id_index, length_index = find_columns(header_cells)

        records: list[dict[str, Any]] = []
        for line_no, row in rows[1:]:
            cells = [cell.strip() for cell in row.split(delimiter)]
            if delimiter == ",":
                cells = self._rejoin_decimal_comma(
                    cells, len(header_cells), length_index
                )
            if record := self._parse_row_to_dict(
                cells, id_index, length_index, row, line_no
            ):
                records.append(record)

        return {"records": records}

    def parse_file_to_dict(self, path: Path) -> dict[str, Any]:
        """Parse a length table file to dictionary.

        Args:
            path: Path to the CSV file

        Returns:
            Dictionary with "records" key
        """
        data = path.read_text(encoding=CSV_ENCODING)
        return self.parse_string_to_dict(data, str(path))

    # -------------------------------------------------------------------------
    # Model / mapping-returning methods
    # -------------------------------------------------------------------------

    def parse_string(self, data: str, source: str = "<string>") -> LengthTable:
        """Parse a length table from a string."""
        return LengthTable.model_validate(self.parse_string_to_dict(data, source))

    def parse_file(self, path: Path) -> LengthTable:
        """Parse a length table file."""
        return LengthTable.model_validate(self.parse_file_to_dict(path))

    # -------------------------------------------------------------------------
    # Row handling
    # -------------------------------------------------------------------------

    @staticmethod
    def _rejoin_decimal_comma(
        cells: list[str],
        header_width: int,
        length_index: int,
    ) -> list[str]:
        """Undo a decimal comma split by a comma delimiter.

        ``A 01,7,3`` under the header ``id,length`` yields one cell too
        many; when the length cell and its neighbour are both plain
        integers they are joined back into ``7,3``.
        """
        if len(cells) != header_width + 1 or length_index + 1 >= len(cells):
            return cells
        integer_part = cells[length_index]
        fraction_part = cells[length_index + 1]
        if not (INTEGER_TEXT.match(integer_part) and fraction_part.isdigit()):
            return cells
        return [
            *cells[:length_index],
            f"{integer_part},{fraction_part}",
            *cells[length_index + 2 :],
        ]

    def _parse_row_to_dict(
        self,
        cells: list[str],
        id_index: int,
        length_index: int,
        row: str,
        line_no: int,
    ) -> dict[str, Any] | None:
        """Validate a single data row.

        Returns:
            Record dictionary, or None if the row was skipped
        """
        raw_id = cells[id_index] if id_index < len(cells) else None
        raw_length = cells[length_index] if length_index < len(cells) else None

        normalized_id = normalize_id(raw_id)
        if not normalized_id:
            self._add_warning("Missing identifier", text=row, line=line_no)
            return None

        if raw_length is None:
            self._add_warning("Missing length", text=row, line=line_no)
            return None

        # An empty cell counts as zero meters
        record = {
            "normalized_id": normalized_id,
            "meters": raw_length.replace(",", ".", 1) or 0.0,
        }
        try:
            validated = LengthRecord.model_validate(record)
        except ValidationError as e:
            message = e.errors()[0]["msg"]
            self._add_warning(
                f"Invalid length `{raw_length}`: {message}", text=row, line=line_no
            )
            return None

        return validated.model_dump()


def parse_lengths(text: str) -> dict[str, float]:
    """Parse a cable length table into ``normalized_id -> meters``.

    Malformed rows are silently dropped; use :class:`LengthTableParser`
    directly to inspect them.

    Args:
        text: Table text (header line first)

    Returns:
        Mapping of normalized identifier to cable length in meters
    """
    return LengthTableParser().parse_string(text).as_mapping()
