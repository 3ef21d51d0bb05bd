"""Registry of locale spreadsheet formats."""

from typing import Callable, Dict, List, TextIO, Tuple

from food_locales.services.derive_locale import ndns_parser, nz_parser, sab_parser
from food_locales.services.derive_locale.actions import FoodAction
from food_locales.services.exceptions import UnknownFormatError

TableParser = Callable[[TextIO], Tuple[List[str], List[FoodAction]]]

PARSERS: Dict[str, TableParser] = {
    ndns_parser.FORMAT_ID: ndns_parser.parse_table,
    sab_parser.FORMAT_ID: sab_parser.parse_table,
    nz_parser.FORMAT_ID: nz_parser.parse_table,
}


def get_parser(format_id: str) -> TableParser:
    """
    Look up the parser for a spreadsheet format.

    Args:
        format_id: Format identifier ("ndns1", "sab1" or "nz1")

    Returns:
        Function taking a CSV text stream and returning (errors, actions)

    Raises:
        UnknownFormatError: If no parser is registered for format_id
    """
    try:
        return PARSERS[format_id]
    except KeyError:
        raise UnknownFormatError(format_id)


def supported_formats() -> List[str]:
    """Return the registered format ids, sorted."""
    return sorted(PARSERS)
