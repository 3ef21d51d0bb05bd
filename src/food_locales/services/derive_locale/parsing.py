"""Row loop shared by all locale spreadsheet parsers."""

from typing import Callable, List, Optional, Sequence, TextIO, Tuple

from food_locales.services.derive_locale.actions import FoodAction
from food_locales.services.dto import FoodCompositionTableReference
from food_locales.services.exceptions import RowParseError
from food_locales.utils.spreadsheet_columns import SafeRowReader, clean_row, read_data_rows

RowParser = Callable[[SafeRowReader], List[FoodAction]]


def parse_rows(stream: TextIO, parse_row: RowParser) -> Tuple[List[str], List[FoodAction]]:
    """Run a dialect's row parser over every data row of a CSV stream.

    Blank-equivalent cells are cleared before the row parser sees them.
    A row that raises RowParseError contributes its message to the error
    list and no actions.

    Args:
        stream: CSV text, header row first
        parse_row: Dialect-specific row parser

    Returns:
        Tuple of (errors, actions), both in row order
    """
    errors: List[str] = []
    actions: List[FoodAction] = []

    for row_number, cells in read_data_rows(stream):
        row = SafeRowReader(clean_row(cells), row_number)
        try:
            actions.extend(parse_row(row))
        except RowParseError as e:
            errors.append(e.message)

    return errors, actions


def optional_fct_reference(
    table_id: Optional[str], record_id: Optional[str]
) -> Optional[FoodCompositionTableReference]:
    """Build an FCT reference only when both parts are present."""
    if table_id and record_id:
        return FoodCompositionTableReference(table_id, record_id)
    return None


def unexpected_action_token(row: SafeRowReader, token: str) -> RowParseError:
    """Error for an action cell no dialect rule matches."""
    return RowParseError(f"Unexpected action in row {row.row_number}: {token}")


def distinct(values: Sequence[str]) -> Tuple[str, ...]:
    """Remove repeated values, keeping first occurrences in order."""
    return tuple(dict.fromkeys(values))
