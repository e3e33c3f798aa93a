"""
Delimited-text codec and append-only CSV sink.

Cells are quoted only when they contain a comma, a double quote, CR or LF;
quotes inside a quoted cell are doubled. There are no backslash escapes.
parse_row is the exact inverse of encode_row.
"""

import logging
from pathlib import Path
from typing import Iterator, Sequence

from condition_log.core.fields import CSV_COLUMNS, CSV_HEADER
from condition_log.core.models import ValidatedRecord

from .exceptions import CsvFormatError, PersistenceError
from .locks import path_lock

logger = logging.getLogger(__name__)

_SPECIAL_CHARACTERS = (",", '"', "\n", "\r")


def escape(field: str) -> str:
    """
    Quote a single cell if it needs quoting.

    Args:
        field: Raw cell text

    Returns:
        The cell unchanged, or wrapped in double quotes with inner quotes doubled
    """
    if not any(char in field for char in _SPECIAL_CHARACTERS):
        return field
    return '"' + field.replace('"', '""') + '"'


def encode_row(fields: Sequence[str]) -> str:
    """Join escaped cells with commas (no trailing delimiter, no line ending)."""
    return ",".join(escape(field) for field in fields)


def parse_row(line: str) -> list[str]:
    """
    Split one encoded row into its cells.

    Inside a quoted cell a doubled quote yields one literal quote; any other
    quote toggles quoted mode. Commas outside quoted mode separate cells.
    Always returns at least one cell, so an empty line yields [""].

    Args:
        line: One logical row without its line terminator (may contain
              newlines inside quoted cells)

    Returns:
        The decoded cells
    """
    cells: list[str] = []
    current: list[str] = []
    in_quotes = False
    i = 0
    length = len(line)

    while i < length:
        char = line[i]
        if in_quotes:
            if char == '"':
                if i + 1 < length and line[i + 1] == '"':
                    current.append('"')
                    i += 1
                else:
                    in_quotes = False
            else:
                current.append(char)
        elif char == '"':
            in_quotes = True
        elif char == ",":
            cells.append("".join(current))
            current = []
        else:
            current.append(char)
        i += 1

    cells.append("".join(current))
    return cells


def iter_logical_rows(text: str) -> Iterator[str]:
    """
    Yield logical rows from CSV text, re-joining lines split inside quoted cells.

    Quote parity decides whether a line break is inside a cell: doubled
    quotes add two, so an odd running count means the cell is still open.
    """
    pending = ""
    for physical in _split_lines(text):
        pending += physical
        if pending.count('"') % 2 == 0:
            yield _strip_terminator(pending)
            pending = ""
    if pending:
        yield _strip_terminator(pending)


def _split_lines(text: str) -> Iterator[str]:
    # Only LF ends a line; str.splitlines also breaks on form feeds and Unicode separators
    start = 0
    while start < len(text):
        end = text.find("\n", start)
        if end == -1:
            yield text[start:]
            return
        yield text[start:end + 1]
        start = end + 1


def _strip_terminator(row: str) -> str:
    if row.endswith("\r\n"):
        return row[:-2]
    if row.endswith("\n") or row.endswith("\r"):
        return row[:-1]
    return row


class CsvSink:
    """
    Append-only CSV log of validated records.

    The header line is written only when the file is created (or is empty);
    existing bytes are never rewritten or reordered.
    """

    name = "csv"

    def __init__(self, path: str | Path):
        """
        Initialize CSV sink.

        Args:
            path: Destination CSV file
        """
        self.path = Path(path)

    def append_row(self, row: str) -> None:
        """
        Append one encoded row, writing the header first for a new file.

        Args:
            row: Output of encode_row

        Raises:
            PersistenceError: If the directory or file cannot be created or written
        """
        # Encode before opening so an unencodable cell never leaves half a row behind
        try:
            payload = (row + "\n").encode("utf-8")
        except UnicodeEncodeError as e:
            raise PersistenceError(self.name, str(self.path), f"cannot encode row: {e}") from e

        with path_lock(self.path):
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                is_new = not self.path.exists() or self.path.stat().st_size == 0
                with open(self.path, "ab") as f:
                    if is_new:
                        f.write((CSV_HEADER + "\n").encode("utf-8"))
                    f.write(payload)
            except OSError as e:
                raise PersistenceError(self.name, str(self.path), str(e)) from e

        logger.debug(f"Appended CSV row to {self.path}", extra={"new_file": is_new})

    def append(self, record: ValidatedRecord) -> None:
        """Encode a validated record and append it."""
        self.append_row(encode_row(record.csv_cells()))

    def read_rows(self) -> list[list[str]]:
        """
        Read every logical row of the file, header included.

        Raises:
            FileNotFoundError: If the file does not exist
        """
        with open(self.path, encoding="utf-8", newline="") as f:
            text = f.read()
        return [parse_row(row) for row in iter_logical_rows(text)]

    def read_records(self) -> list[dict[str, str]]:
        """
        Read the stored records as column -> value dicts, in file order.

        Raises:
            CsvFormatError: If the header or a row width is not the expected one
        """
        rows = self.read_rows()
        if not rows:
            return []

        header, body = rows[0], rows[1:]
        if tuple(header) != CSV_COLUMNS:
            raise CsvFormatError(f"Unexpected CSV header in {self.path}: {header}")

        records = []
        for line_no, cells in enumerate(body, start=2):
            if len(cells) != len(CSV_COLUMNS):
                raise CsvFormatError(
                    f"Row {line_no} of {self.path} has {len(cells)} cells, expected {len(CSV_COLUMNS)}"
                )
            records.append(dict(zip(CSV_COLUMNS, cells)))
        return records
