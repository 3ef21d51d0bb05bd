"""Spreadsheet row access utilities.

Uploaded locale sheets are CSV exports of spreadsheets that nutritionists
edit by hand. This module gives parsers checked access to one row, with
error messages that name the column the way the spreadsheet shows it
("Food code (column A) ...") and the line number the user sees.

Examples:
    >>> offset_to_column_letters(0)
    'A'
    >>> offset_to_column_letters(27)
    'AB'
    >>> column_letters_to_offset("AA")
    26
"""

import csv
from typing import Iterable, Iterator, List, NamedTuple, Optional, Sequence, TextIO, Tuple

from food_locales.services.exceptions import RowParseError
from food_locales.utils.constants import HEADER_ROWS, TREAT_AS_BLANK

_LETTERS = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"


class ColumnRef(NamedTuple):
    """Zero-based column offset plus the label used in error messages."""

    index: int
    label: str


def offset_to_column_letters(offset: int) -> str:
    """Convert a zero-based column offset to spreadsheet letters.

    Args:
        offset: Column offset, 0 for column A

    Returns:
        Column reference such as "A", "Z", "AA" or "AAB"

    Raises:
        ValueError: If offset is negative

    Examples:
        >>> offset_to_column_letters(25)
        'Z'
        >>> offset_to_column_letters(26)
        'AA'
        >>> offset_to_column_letters(702)
        'AAA'
    """
    if offset < 0:
        raise ValueError(f"Column offset must be >= 0, got {offset}")

    letters = []
    value = offset + 1

    while value > 0:
        value, remainder = divmod(value - 1, len(_LETTERS))
        letters.append(_LETTERS[remainder])

    return "".join(reversed(letters))


def column_letters_to_offset(column_ref: str) -> int:
    """Convert spreadsheet letters to a zero-based column offset.

    Args:
        column_ref: Column reference such as "A" or "AB" (case-insensitive)

    Returns:
        Zero-based offset

    Raises:
        ValueError: If column_ref is empty or contains non-letters
    """
    ref = column_ref.strip().upper()

    if not ref or any(ch not in _LETTERS for ch in ref):
        raise ValueError(f"Invalid column reference: {column_ref!r}")

    result = 0
    for ch in ref:
        result = result * len(_LETTERS) + (_LETTERS.index(ch) + 1)

    return result - 1


def column(letters: str, label: str) -> ColumnRef:
    """Build a ColumnRef from its spreadsheet letters."""
    return ColumnRef(column_letters_to_offset(letters), label)


def clean_row(row: Sequence[str]) -> List[str]:
    """Replace blank-equivalent cells ("0", "#N/A") with empty strings."""
    return ["" if cell.strip() in TREAT_AS_BLANK else cell for cell in row]


class SafeRowReader:
    """Checked access to one spreadsheet row.

    Args:
        row: Cell values of the row
        row_number: 1-based line number of the row in the spreadsheet
    """

    def __init__(self, row: Sequence[str], row_number: int):
        self._row = list(row)
        self.row_number = row_number

    def __len__(self) -> int:
        return len(self._row)

    def cell(self, index: int) -> Optional[str]:
        """Return the trimmed cell at index, or None past the end of the row."""
        if index >= len(self._row):
            return None
        return self._row[index].strip()

    def required(self, ref: ColumnRef) -> str:
        """Return the trimmed, non-blank value of a required column.

        Raises:
            RowParseError: If the row is too short or the cell is blank
        """
        letters = offset_to_column_letters(ref.index)

        if ref.index >= len(self._row):
            raise RowParseError(
                f"{ref.label} (column {letters}) is required in row {self.row_number} "
                f"but the column is missing"
            )

        value = self._row[ref.index].strip()

        if not value:
            raise RowParseError(
                f"{ref.label} (column {letters}) is required in row {self.row_number} "
                f"but the column is blank"
            )

        return value

    def optional(self, ref: ColumnRef) -> Optional[str]:
        """Return the trimmed value of an optional column, None if missing or blank."""
        value = self.cell(ref.index)
        return value or None

    def one_of(self, first: ColumnRef, second: ColumnRef) -> str:
        """Return the first non-blank of two columns.

        Raises:
            RowParseError: If both are missing or blank
        """
        for ref in (first, second):
            value = self.cell(ref.index)
            if value:
                return value

        raise RowParseError(
            f"Either {first.label} (column {offset_to_column_letters(first.index)}) or "
            f"{second.label} (column {offset_to_column_letters(second.index)}) is required "
            f"for row {self.row_number} but both are missing"
        )

    def collect_non_blank(self, indices: Iterable[int]) -> List[str]:
        """Return the non-blank trimmed values at indices, in order."""
        values = (self.cell(index) for index in indices)
        return [value for value in values if value]


def read_data_rows(stream: TextIO) -> Iterator[Tuple[int, List[str]]]:
    """Yield (row_number, cells) for each row after the header.

    Row numbers are 1-based spreadsheet line numbers, so the first data
    row is row 2. Completely empty lines are skipped.
    """
    reader = csv.reader(stream)

    for index, row in enumerate(reader):
        if index < HEADER_ROWS:
            continue
        if not row:
            continue
        yield index + 1, row
